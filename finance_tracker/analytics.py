"""Transaction aggregation for dashboards, budgets and reports.

Every figure here is derived from a transaction list plus a display
currency. Nothing is cached between instances; build a new
:class:`TransactionAnalytics` whenever the transaction list or the display
currency changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .currency import RateTable, convert_currency
from .models import EXPENSE, INCOME, Transaction
from .periods import filter_by_period, period_label

FRAME_COLUMNS = [
    'id',
    'Date',
    'Month',
    'Description',
    'Category',
    'Type',
    'Original Amount',
    'Original Currency',
    'Converted Amount',
]


@dataclass
class ReportData:
    transactions: List[Transaction]
    total_income: float
    total_expenses: float
    net_balance: float
    period: str
    currency: str


class TransactionAnalytics:
    """Totals, category breakdowns and monthly trends in one display currency."""

    def __init__(
        self,
        transactions: Iterable[Transaction],
        currency: str,
        rates: Optional[RateTable] = None,
    ):
        self.currency = currency
        self.transactions: List[Transaction] = list(transactions)
        self.data = self._build_frame(rates)

    def _build_frame(self, rates: Optional[RateTable]) -> pd.DataFrame:
        rows = [
            {
                'id': t.id,
                'Date': t.date,
                'Month': t.month_key,
                'Description': t.description,
                'Category': t.category,
                'Type': t.type,
                'Original Amount': t.original_amount,
                'Original Currency': t.original_currency,
                'Converted Amount': convert_currency(
                    t.original_amount, t.original_currency, self.currency, rates
                ),
            }
            for t in self.transactions
        ]
        frame = pd.DataFrame(rows, columns=FRAME_COLUMNS)
        frame['Converted Amount'] = frame['Converted Amount'].astype(float)
        frame['Original Amount'] = frame['Original Amount'].astype(float)
        return frame

    def _income_rows(self) -> pd.DataFrame:
        return self.data[self.data['Type'] == INCOME]

    def _expense_rows(self) -> pd.DataFrame:
        return self.data[self.data['Type'] == EXPENSE]

    # Totals -----------------------------------------------------------------

    @property
    def total_income(self) -> float:
        return float(self._income_rows()['Converted Amount'].sum())

    @property
    def total_expenses(self) -> float:
        return float(self._expense_rows()['Converted Amount'].sum())

    @property
    def net_balance(self) -> float:
        return self.total_income - self.total_expenses

    # Breakdowns -------------------------------------------------------------

    def category_breakdown(self) -> Dict[str, float]:
        """Summed expense amount per category, in order of first appearance."""
        expenses = self._expense_rows()
        if expenses.empty:
            return {}
        totals = expenses.groupby('Category', sort=False)['Converted Amount'].sum()
        return {str(category): float(total) for category, total in totals.items()}

    def top_categories(self, n: int = 5) -> List[Tuple[str, float]]:
        """Largest expense categories; equal amounts are ordered by category name."""
        ranked = sorted(self.category_breakdown().items(), key=lambda item: (-item[1], item[0]))
        return ranked[: max(0, n)]

    def monthly_trend_frame(self) -> pd.DataFrame:
        """Income and expenses per ``YYYY-MM`` month, ascending."""
        if self.data.empty:
            return pd.DataFrame(columns=['Month', 'Income', 'Expenses'])
        amounts = self.data['Converted Amount'].to_numpy()
        frame = pd.DataFrame({
            'Month': self.data['Month'],
            'Income': np.where(self.data['Type'] == INCOME, amounts, 0.0),
            'Expenses': np.where(self.data['Type'] == EXPENSE, amounts, 0.0),
        })
        monthly = frame.groupby('Month', sort=True)[['Income', 'Expenses']].sum()
        return monthly.reset_index()

    def monthly_trend(self) -> List[Dict[str, Any]]:
        return [
            {'month': str(row.Month), 'income': float(row.Income), 'expenses': float(row.Expenses)}
            for row in self.monthly_trend_frame().itertuples(index=False)
        ]

    def recent_transactions(self, n: int = 5) -> pd.DataFrame:
        """Most recent transactions first, with their converted amounts."""
        ordered = self.data.sort_values('Date', ascending=False, kind='mergesort')
        return ordered.head(max(0, n)).reset_index(drop=True)

    # Summaries --------------------------------------------------------------

    def summary(self) -> Dict[str, Any]:
        income = self.total_income
        expenses = self.total_expenses
        net = income - expenses
        income_count = len(self._income_rows())
        expense_count = len(self._expense_rows())
        return {
            'currency': self.currency,
            'total_income': income,
            'total_expenses': expenses,
            'net_balance': net,
            'savings_rate': (net / income * 100) if income > 0 else 0.0,
            'transaction_count': len(self.data),
            'income_count': income_count,
            'expense_count': expense_count,
            'average_income': income / max(income_count, 1),
            'average_expense': expenses / max(expense_count, 1),
        }


def spending_by_category(
    transactions: Iterable[Transaction],
    currency: str,
    rates: Optional[RateTable] = None,
) -> Dict[str, float]:
    """Expense totals per category converted to ``currency``."""
    return TransactionAnalytics(transactions, currency, rates).category_breakdown()


def build_report_data(
    transactions: Iterable[Transaction],
    currency: str,
    period_key: str,
    now: Optional[Union[date, datetime]] = None,
    rates: Optional[RateTable] = None,
) -> ReportData:
    """Filter ``transactions`` to the period and total them in ``currency``."""
    selected = filter_by_period(transactions, period_key, now)
    analytics = TransactionAnalytics(selected, currency, rates)
    income = analytics.total_income
    expenses = analytics.total_expenses
    return ReportData(
        transactions=selected,
        total_income=income,
        total_expenses=expenses,
        net_balance=income - expenses,
        period=period_label(period_key),
        currency=currency,
    )
