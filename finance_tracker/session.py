"""The signed-in user's working state and the actions the UI can trigger.

A :class:`FinanceSession` holds the user, the display currency, the
in-memory transaction list and the budget tracker. Action methods catch
:class:`~finance_tracker.errors.FinanceTrackerError` and return a
:class:`Notification` instead of raising, so a failed action never takes the
session down.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .analytics import TransactionAnalytics, build_report_data
from .budgets import BudgetProgress, BudgetTracker
from .currency import SUPPORTED_CURRENCIES, RateTable, convert_currency, format_currency
from .data_transfer import decode_import_bytes, export_document, export_filename, import_file, parse_import
from .errors import FinanceTrackerError, ValidationError
from .models import INCOME, TRANSACTION_TYPES, Transaction, User, parse_amount
from .periods import ALL_TIME, filter_by_period, period_label
from .reports import generate_csv, generate_text_report, report_filename
from .storage import BudgetStore, LocalStorage, PreferenceStore, TransactionStore

logger = logging.getLogger(__name__)

SUCCESS = 'default'
DESTRUCTIVE = 'destructive'

REPORT_CSV = 'csv'
REPORT_TEXT = 'text'


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = SUCCESS

    @property
    def is_error(self) -> bool:
        return self.variant == DESTRUCTIVE


@dataclass(frozen=True)
class ReportFile:
    filename: str
    content: str
    mime: str


def _failure(error: FinanceTrackerError) -> Notification:
    return Notification(error.title, str(error), DESTRUCTIVE)


class FinanceSession:
    """Explicit replacement for app-wide auth/currency state."""

    def __init__(
        self,
        user: User,
        storage: Optional[LocalStorage] = None,
        currency: Optional[str] = None,
        rates: Optional[RateTable] = None,
    ):
        storage = storage or LocalStorage()
        self.user = user
        self.rates = rates
        self.transaction_store = TransactionStore(storage)
        self.preferences = PreferenceStore(storage)
        self.currency = currency or self.preferences.load_currency()
        self.transactions: List[Transaction] = self.transaction_store.load(self.user_id)
        self.budgets = BudgetTracker(BudgetStore(storage), self.user_id)

    @property
    def user_id(self) -> str:
        return self.user.email

    def _run(self, action: Callable[[], Notification]) -> Notification:
        try:
            return action()
        except FinanceTrackerError as e:
            logger.warning("%s for %s: %s", e.title, self.user_id, e)
            return _failure(e)

    def _commit_transactions(self, transactions: List[Transaction]) -> None:
        # The in-memory list only changes once the store has accepted it.
        self.transaction_store.save(self.user_id, transactions)
        self.transactions = transactions

    def format(self, amount: float) -> str:
        return format_currency(amount, self.currency)

    def to_display(self, amount: float, currency: str) -> float:
        return convert_currency(amount, currency, self.currency, self.rates)

    # Currency ---------------------------------------------------------------

    def set_currency(self, currency: str) -> Notification:
        def action() -> Notification:
            if currency not in SUPPORTED_CURRENCIES:
                raise ValidationError(f"Unsupported currency '{currency}'.", field='currency')
            self.preferences.save_currency(currency)
            self.currency = currency
            return Notification("Currency changed", f"Amounts are now shown in {currency}.")

        return self._run(action)

    # Transactions -----------------------------------------------------------

    def _validated_fields(self, amount: Any, description: str, category: str, type: str) -> Dict[str, Any]:
        value = parse_amount(amount)
        if not description or not description.strip():
            raise ValidationError("Description is required.", field='description')
        if not category:
            raise ValidationError("Please select a category.", field='category')
        if type not in TRANSACTION_TYPES:
            raise ValidationError(f"Unknown transaction type '{type}'.", field='type')
        return {'amount': value, 'description': description.strip(), 'category': category, 'type': type}

    def add_transaction(
        self,
        amount: Any,
        description: str,
        category: str,
        type: str,
        on: Optional[date] = None,
    ) -> Notification:
        """Record a transaction in the current display currency."""

        def action() -> Notification:
            fields = self._validated_fields(amount, description, category, type)
            transaction = Transaction.create(currency=self.currency, on=on, **fields)
            self._commit_transactions(self.transactions + [transaction])
            label = "Income" if transaction.type == INCOME else "Expense"
            shown = self.to_display(transaction.original_amount, transaction.original_currency)
            return Notification("Transaction added", f"{label} of {self.format(shown)} recorded.")

        return self._run(action)

    def update_transaction(
        self,
        transaction_id: str,
        amount: Any,
        description: str,
        category: str,
        type: str,
        on: Optional[date] = None,
    ) -> Notification:
        """Replace a transaction wholesale; its id and original currency stay."""

        def action() -> Notification:
            fields = self._validated_fields(amount, description, category, type)
            index = next((i for i, t in enumerate(self.transactions) if t.id == transaction_id), None)
            if index is None:
                raise ValidationError(f"Transaction '{transaction_id}' does not exist.", field='id')
            if on is not None:
                fields['date'] = on.isoformat()
            updated = list(self.transactions)
            updated[index] = updated[index].with_changes(**fields)
            self._commit_transactions(updated)
            return Notification("Transaction updated", "Transaction has been successfully updated.")

        return self._run(action)

    def delete_transaction(self, transaction_id: str) -> Notification:
        def action() -> Notification:
            self._commit_transactions([t for t in self.transactions if t.id != transaction_id])
            return Notification("Transaction deleted", "Transaction has been removed from your records.")

        return self._run(action)

    # Views ------------------------------------------------------------------

    def analytics(self, period_key: str = ALL_TIME, now: Optional[datetime] = None) -> TransactionAnalytics:
        selected = filter_by_period(self.transactions, period_key, now)
        return TransactionAnalytics(selected, self.currency, self.rates)

    def budget_progress(self, now: Optional[datetime] = None) -> List[BudgetProgress]:
        return self.budgets.progress(self.transactions, self.currency, now, self.rates)

    def budget_overview(self, now: Optional[datetime] = None) -> Dict[str, float]:
        return self.budgets.overview(self.transactions, self.currency, now, self.rates)

    # Budgets ----------------------------------------------------------------

    def add_budget(self, category: str, amount: Any, period: str = 'monthly') -> Notification:
        def action() -> Notification:
            budget = self.budgets.add(category, amount, period, currency=self.currency)
            return Notification(
                "Budget added",
                f"Budget of {self.format(budget.amount)} set for {budget.category}.",
            )

        return self._run(action)

    def edit_budget(self, budget_id: str, amount: Any, period: str) -> Notification:
        def action() -> Notification:
            budget = self.budgets.edit(budget_id, amount, period, currency=self.currency)
            limit = self.budgets.limit_in(budget, self.currency, self.rates)
            return Notification(
                "Budget updated",
                f"Budget for {budget.category} updated to {self.format(limit)}.",
            )

        return self._run(action)

    def delete_budget(self, budget_id: str) -> Notification:
        def action() -> Notification:
            budget = self.budgets.get(budget_id)
            self.budgets.delete(budget_id)
            category = budget.category if budget else budget_id
            return Notification("Budget deleted", f"Budget for {category} has been removed.")

        return self._run(action)

    # Data management --------------------------------------------------------

    def _replace_transactions(self, transactions: List[Transaction], rejected: int) -> Notification:
        self._commit_transactions(list(transactions))
        message = f"{len(transactions)} transactions imported successfully."
        if rejected:
            message += f" {rejected} invalid records were skipped."
        return Notification("Data imported", message)

    def import_data(self, text: str) -> Notification:
        """Replace the transaction list with the valid records of an import document."""

        def action() -> Notification:
            result = parse_import(text)
            return self._replace_transactions(result.accepted, result.rejected_count)

        return self._run(action)

    def import_bytes(self, data: bytes) -> Notification:
        """Import an uploaded export file given as raw bytes."""

        def action() -> Notification:
            result = parse_import(decode_import_bytes(data))
            return self._replace_transactions(result.accepted, result.rejected_count)

        return self._run(action)

    def import_path(self, path: Union[str, Path]) -> Notification:
        def action() -> Notification:
            result = import_file(path)
            return self._replace_transactions(result.accepted, result.rejected_count)

        return self._run(action)

    def export_data(self, today: Optional[date] = None) -> Tuple[Optional[ReportFile], Notification]:
        document = self.transaction_store.export(self.user_id)
        if document is None:
            return None, Notification("Export failed", "There is no saved data to export.", DESTRUCTIVE)
        export = ReportFile(
            filename=export_filename(self.user.email, today),
            content=export_document(document),
            mime='application/json',
        )
        return export, Notification("Data exported", "Your financial data has been exported successfully.")

    def clear_data(self) -> Notification:
        def action() -> Notification:
            self.transaction_store.clear(self.user_id)
            self.transactions = []
            return Notification("Data cleared", "All your financial data has been cleared.")

        return self._run(action)

    # Reports ----------------------------------------------------------------

    def build_report(
        self,
        period_key: str,
        report_type: str = REPORT_CSV,
        now: Optional[datetime] = None,
    ) -> Tuple[Optional[ReportFile], Notification]:
        """Render the period's report as CSV or as the text summary."""
        now = now or datetime.now()
        report = build_report_data(self.transactions, self.currency, period_key, now, self.rates)
        if not report.transactions:
            return None, Notification(
                "No data available",
                "There are no transactions to download for the selected period.",
                DESTRUCTIVE,
            )

        if report_type == REPORT_TEXT:
            content = generate_text_report(report.transactions, self.currency, report.period, now, self.rates)
            file = ReportFile(report_filename(period_key, now.date(), 'txt'), content, 'text/plain')
            kind = "Text"
        else:
            content = generate_csv(report.transactions, self.currency, self.rates)
            file = ReportFile(report_filename(period_key, now.date(), 'csv'), content, 'text/csv')
            kind = "CSV"
        return file, Notification(
            "Report ready",
            f"{kind} report for {period_label(period_key)} has been generated successfully.",
        )
