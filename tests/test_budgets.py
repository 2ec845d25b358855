from datetime import datetime

import pytest

from finance_tracker.budgets import (
    NEAR_LIMIT,
    ON_TRACK,
    OVER_BUDGET,
    BudgetProgress,
    BudgetTracker,
    budget_percentage,
    classify_budget,
)
from finance_tracker.currency import INR, USD, build_exchange_rates
from finance_tracker.errors import PersistenceError, ValidationError
from finance_tracker.models import Budget, Transaction
from finance_tracker.storage import BudgetStore, LocalStorage

NOW = datetime(2024, 1, 20)
RATES = build_exchange_rates(83.5)


def make_expense(amount, category='Food', day='2024-01-05', currency=USD):
    return Transaction(
        id=f"{category}-{day}-{amount}",
        amount=amount,
        original_amount=amount,
        original_currency=currency,
        description=category,
        category=category,
        type='expense',
        date=day,
    )


@pytest.fixture
def tracker(tmp_path):
    return BudgetTracker(BudgetStore(LocalStorage(tmp_path)), 'user@example.com')


@pytest.mark.parametrize(
    'spent, expected',
    [
        (0, ON_TRACK),
        (74.99, ON_TRACK),
        (75, NEAR_LIMIT),
        (89.99, NEAR_LIMIT),
        (90, OVER_BUDGET),
        (150, OVER_BUDGET),
    ],
)
def test_classification_boundaries(spent, expected):
    assert classify_budget(spent, 100) == expected


def test_zero_limit():
    assert classify_budget(0, 0) == ON_TRACK
    assert classify_budget(1, 0) == OVER_BUDGET
    assert budget_percentage(1, 0) == 100.0
    assert budget_percentage(0, 0) == 0.0


def test_food_budget_at_ninety_percent_is_over_budget(tracker):
    tracker.add('Food', 100)
    transactions = [make_expense(60), make_expense(30, day='2024-01-12')]
    (row,) = tracker.progress(transactions, USD, NOW, RATES)
    assert row.spent == 90
    assert row.percentage == pytest.approx(90)
    assert row.status == OVER_BUDGET
    assert row.remaining == pytest.approx(10)


def test_only_current_month_expenses_count(tracker):
    budget = tracker.add('Food', 100)
    transactions = [
        make_expense(40),
        make_expense(500, day='2023-12-31'),
        make_expense(25, category='Travel'),
    ]
    assert tracker.spent_for('Food', transactions, USD, NOW, RATES) == 40
    assert tracker.progress(transactions, USD, NOW, RATES)[0].budget is budget


def test_duplicate_category_rejected(tracker):
    tracker.add('Food', 100)
    with pytest.raises(ValidationError) as exc:
        tracker.add('Food', 50)
    assert exc.value.field == 'category'
    assert len(tracker.budgets) == 1


@pytest.mark.parametrize('amount', [None, '', 'abc', 0, -5, float('nan')])
def test_invalid_amount_rejected(tracker, amount):
    with pytest.raises(ValidationError):
        tracker.add('Food', amount)
    assert tracker.budgets == []


def test_unknown_period_rejected(tracker):
    with pytest.raises(ValidationError):
        tracker.add('Food', 100, period='fortnightly')


def test_budgets_persist_per_user(tmp_path):
    storage = LocalStorage(tmp_path)
    first = BudgetTracker(BudgetStore(storage), 'a@example.com')
    first.add('Food', 100, currency=USD)

    reloaded = BudgetTracker(BudgetStore(storage), 'a@example.com')
    assert [(b.category, b.amount, b.currency) for b in reloaded.budgets] == [('Food', 100.0, USD)]
    assert BudgetTracker(BudgetStore(storage), 'b@example.com').budgets == []


def test_edit_changes_amount_and_period(tracker):
    budget = tracker.add('Food', 100)
    tracker.edit(budget.id, '250', 'yearly')
    assert tracker.get(budget.id).amount == 250
    assert tracker.get(budget.id).period == 'yearly'
    assert tracker.get(budget.id).category == 'Food'


def test_edit_returns_updated_budget_and_keeps_original(tracker):
    budget = tracker.add('Food', 100, currency=USD)
    updated = tracker.edit(budget.id, 8350, 'monthly', currency=INR)
    assert (updated.amount, updated.currency) == (8350.0, INR)
    assert (budget.amount, budget.currency) == (100.0, USD)
    assert tracker.get(budget.id) is updated


def test_failed_save_leaves_budgets_unchanged(tracker, monkeypatch):
    budget = tracker.add('Food', 100)

    def fail(user_id, budgets):
        raise PersistenceError("disk full")

    monkeypatch.setattr(tracker.store, 'save', fail)
    with pytest.raises(PersistenceError):
        tracker.add('Shopping', 50)
    with pytest.raises(PersistenceError):
        tracker.edit(budget.id, 250, 'yearly')
    with pytest.raises(PersistenceError):
        tracker.delete(budget.id)
    assert tracker.budgets == [budget]
    assert tracker.get(budget.id).amount == 100


def test_edit_unknown_budget(tracker):
    with pytest.raises(ValidationError):
        tracker.edit('missing', 100, 'monthly')


def test_delete_is_unconditional(tracker):
    budget = tracker.add('Food', 100)
    tracker.delete(budget.id)
    tracker.delete('missing')
    assert tracker.budgets == []


def test_limit_converted_from_creation_currency(tracker):
    tracker.add('Food', 100, currency=USD)
    transactions = [make_expense(4175, currency=INR)]
    (row,) = tracker.progress(transactions, INR, NOW, RATES)
    assert row.limit == pytest.approx(8350)
    assert row.spent == pytest.approx(4175)
    assert row.status == ON_TRACK


def test_legacy_budget_without_currency_uses_display_currency(tmp_path):
    tracker = BudgetTracker(
        BudgetStore(LocalStorage(tmp_path)), 'u@example.com', budgets=[Budget(id='b1', category='Food', amount=100)]
    )
    assert tracker.limit_in(tracker.budgets[0], INR, RATES) == 100


def test_overview_totals(tracker):
    tracker.add('Food', 100)
    tracker.add('Travel', 300)
    transactions = [make_expense(50), make_expense(100, category='Travel')]
    overview = tracker.overview(transactions, USD, NOW, RATES)
    assert overview['total_budget'] == 400
    assert overview['total_spent'] == 150
    assert overview['total_remaining'] == 250
    assert overview['percent_used'] == pytest.approx(37.5)
    assert overview['budget_count'] == 2


def test_progress_row_for_display():
    budget = Budget(id='b', category='Food', amount=100)
    progress = BudgetProgress(budget=budget, limit=100, spent=80, percentage=80, status=NEAR_LIMIT)
    assert progress.as_row()['Remaining'] == 20
    assert progress.as_row()['Status'] == NEAR_LIMIT
