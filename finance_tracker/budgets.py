"""Category budgets and their progress against current-month spending.

Budget limits are compared with the expense total of the current calendar
month, whatever the budget's ``period`` says; the period is descriptive
only. Spent amounts are recomputed from the transaction list on every call.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Union

from .analytics import spending_by_category
from .currency import SUPPORTED_CURRENCIES, RateTable, convert_currency
from .errors import ValidationError
from .models import BUDGET_PERIODS, Budget, Transaction, new_id, parse_amount
from .periods import CURRENT_MONTH, filter_by_period
from .storage import BudgetStore

ON_TRACK = 'On Track'
NEAR_LIMIT = 'Near Limit'
OVER_BUDGET = 'Over Budget'

NEAR_LIMIT_THRESHOLD = 75.0
OVER_BUDGET_THRESHOLD = 90.0


def budget_percentage(spent: float, amount: float) -> float:
    """Percentage of the limit spent; a zero limit reads as 0 % or 100 %."""
    if amount == 0:
        return 100.0 if spent > 0 else 0.0
    return spent / amount * 100


def classify_budget(spent: float, amount: float) -> str:
    """Map spending against a limit to On Track / Near Limit / Over Budget.

    Example:
        >>> classify_budget(74.99, 100)
        'On Track'
        >>> classify_budget(75, 100)
        'Near Limit'
        >>> classify_budget(90, 100)
        'Over Budget'
    """
    if amount == 0:
        return OVER_BUDGET if spent > 0 else ON_TRACK
    percentage = budget_percentage(spent, amount)
    if percentage >= OVER_BUDGET_THRESHOLD:
        return OVER_BUDGET
    if percentage >= NEAR_LIMIT_THRESHOLD:
        return NEAR_LIMIT
    return ON_TRACK


def parse_budget_amount(value: Any) -> float:
    """Validate a user-entered limit and return it as a positive float."""
    return parse_amount(value, label="Budget amount")


def _validate_period(period: str) -> str:
    if period not in BUDGET_PERIODS:
        raise ValidationError(
            f"Unknown budget period '{period}'. Choose one of: {', '.join(BUDGET_PERIODS)}.",
            field='period',
        )
    return period


@dataclass
class BudgetProgress:
    budget: Budget
    limit: float  # in the display currency
    spent: float
    percentage: float
    status: str

    @property
    def remaining(self) -> float:
        return self.limit - self.spent

    def as_row(self) -> Dict[str, Any]:
        return {
            'Category': self.budget.category,
            'Period': self.budget.period,
            'Budget': self.limit,
            'Spent': self.spent,
            'Remaining': self.remaining,
            'Percent Used': self.percentage,
            'Status': self.status,
        }


class BudgetTracker:
    """Owns one user's budget list and keeps it mirrored in the budget store."""

    def __init__(self, store: BudgetStore, user_id: str, budgets: Optional[List[Budget]] = None):
        self.store = store
        self.user_id = user_id
        self.budgets: List[Budget] = list(budgets) if budgets is not None else store.load(user_id)

    def _commit(self, budgets: List[Budget]) -> None:
        # Save first; memory only changes once the store has accepted the list.
        self.store.save(self.user_id, budgets)
        self.budgets = budgets

    def get(self, budget_id: str) -> Optional[Budget]:
        return next((b for b in self.budgets if b.id == budget_id), None)

    def for_category(self, category: str) -> Optional[Budget]:
        return next((b for b in self.budgets if b.category == category), None)

    def add(self, category: str, amount: Any, period: str = 'monthly', currency: Optional[str] = None) -> Budget:
        """Create a budget; each category can hold at most one."""
        if not category or not str(category).strip():
            raise ValidationError("Please select a category.", field='category')
        limit = parse_budget_amount(amount)
        _validate_period(period)
        if currency is not None and currency not in SUPPORTED_CURRENCIES:
            raise ValidationError(f"Unsupported currency '{currency}'.", field='currency')
        if self.for_category(category) is not None:
            raise ValidationError("A budget for this category already exists.", field='category')

        budget = Budget(id=new_id(), category=category, amount=limit, period=period, currency=currency)
        self._commit(self.budgets + [budget])
        return budget

    def edit(self, budget_id: str, amount: Any, period: str, currency: Optional[str] = None) -> Budget:
        """Change a budget's limit and period; the category never changes.

        When ``currency`` is given the new limit is read as being in it.
        """
        limit = parse_budget_amount(amount)
        _validate_period(period)
        if currency is not None and currency not in SUPPORTED_CURRENCIES:
            raise ValidationError(f"Unsupported currency '{currency}'.", field='currency')
        budget = self.get(budget_id)
        if budget is None:
            raise ValidationError(f"Budget '{budget_id}' does not exist.", field='id')

        changes: Dict[str, Any] = {'amount': limit, 'period': period}
        if currency is not None:
            changes['currency'] = currency
        updated = replace(budget, **changes)
        self._commit([updated if b.id == budget_id else b for b in self.budgets])
        return updated

    def delete(self, budget_id: str) -> None:
        self._commit([b for b in self.budgets if b.id != budget_id])

    def limit_in(self, budget: Budget, currency: str, rates: Optional[RateTable] = None) -> float:
        """The budget limit expressed in ``currency``.

        Budgets saved without a currency are read as already being in
        ``currency``.
        """
        if not budget.currency:
            return budget.amount
        return convert_currency(budget.amount, budget.currency, currency, rates)

    @staticmethod
    def current_month_spending(
        transactions: Sequence[Transaction],
        currency: str,
        now: Optional[Union[date, datetime]] = None,
        rates: Optional[RateTable] = None,
    ) -> Dict[str, float]:
        month = filter_by_period(transactions, CURRENT_MONTH, now)
        return spending_by_category(month, currency, rates)

    def spent_for(
        self,
        category: str,
        transactions: Sequence[Transaction],
        currency: str,
        now: Optional[Union[date, datetime]] = None,
        rates: Optional[RateTable] = None,
    ) -> float:
        return self.current_month_spending(transactions, currency, now, rates).get(category, 0.0)

    def progress(
        self,
        transactions: Sequence[Transaction],
        currency: str,
        now: Optional[Union[date, datetime]] = None,
        rates: Optional[RateTable] = None,
    ) -> List[BudgetProgress]:
        spending = self.current_month_spending(transactions, currency, now, rates)
        rows: List[BudgetProgress] = []
        for budget in self.budgets:
            limit = self.limit_in(budget, currency, rates)
            spent = spending.get(budget.category, 0.0)
            rows.append(
                BudgetProgress(
                    budget=budget,
                    limit=limit,
                    spent=spent,
                    percentage=budget_percentage(spent, limit),
                    status=classify_budget(spent, limit),
                )
            )
        return rows

    def overview(
        self,
        transactions: Sequence[Transaction],
        currency: str,
        now: Optional[Union[date, datetime]] = None,
        rates: Optional[RateTable] = None,
    ) -> Dict[str, float]:
        rows = self.progress(transactions, currency, now, rates)
        total_budget = sum(row.limit for row in rows)
        total_spent = sum(row.spent for row in rows)
        return {
            'total_budget': total_budget,
            'total_spent': total_spent,
            'total_remaining': total_budget - total_spent,
            'percent_used': (total_spent / total_budget * 100) if total_budget else 0.0,
            'budget_count': len(rows),
        }
