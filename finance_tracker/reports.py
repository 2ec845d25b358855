"""CSV and plain-text report rendering.

Amounts in both formats go through :func:`format_currency`, so the CSV is
meant for people and spreadsheets, not for re-importing.
"""

from __future__ import annotations

import csv
from datetime import date, datetime
from typing import List, Optional, Sequence

import pandas as pd

from .analytics import TransactionAnalytics
from .currency import RateTable, format_currency
from .models import Transaction

CSV_HEADERS = [
    'Date',
    'Description',
    'Category',
    'Type',
    'Amount',
    'Original Amount',
    'Original Currency',
]

TOP_CATEGORY_COUNT = 5


def report_filename(period_key: str, today: Optional[date] = None, extension: str = 'csv') -> str:
    """Download name for a report, e.g. ``finance_report_current_month_2024-01-31.csv``."""
    stamp = (today or date.today()).isoformat()
    return f"finance_report_{period_key}_{stamp}.{extension}"


def generate_csv(
    transactions: Sequence[Transaction],
    currency: str,
    rates: Optional[RateTable] = None,
) -> str:
    """Render transactions as a fully quoted CSV in input order.

    ``Amount`` is converted to ``currency``; ``Original Amount`` stays in the
    currency the transaction was recorded in.
    """
    analytics = TransactionAnalytics(transactions, currency, rates)
    frame = pd.DataFrame(
        {
            'Date': analytics.data['Date'],
            'Description': analytics.data['Description'],
            'Category': analytics.data['Category'],
            'Type': analytics.data['Type'],
            'Amount': [format_currency(v, currency) for v in analytics.data['Converted Amount']],
            'Original Amount': [
                format_currency(amount, original)
                for amount, original in zip(
                    analytics.data['Original Amount'], analytics.data['Original Currency']
                )
            ],
            'Original Currency': analytics.data['Original Currency'],
        },
        columns=CSV_HEADERS,
    )
    text = frame.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator='\n')
    return text[:-1] if text.endswith('\n') else text


def generate_text_report(
    transactions: Sequence[Transaction],
    currency: str,
    period_label: str,
    generated_at: Optional[datetime] = None,
    rates: Optional[RateTable] = None,
) -> str:
    """Render the fixed-layout text summary used as the printable report."""
    generated_at = generated_at or datetime.now()
    analytics = TransactionAnalytics(transactions, currency, rates)
    summary = analytics.summary()

    def money(value: float) -> str:
        return format_currency(value, currency)

    top = analytics.top_categories(TOP_CATEGORY_COUNT)
    top_lines = [f"{index}. {category}: {money(amount)}" for index, (category, amount) in enumerate(top, start=1)]
    data = analytics.data
    listing = [
        f"{day} | {description} | {category} | {kind} | {money(amount)}"
        for day, description, category, kind, amount in zip(
            data['Date'], data['Description'], data['Category'], data['Type'], data['Converted Amount']
        )
    ]

    lines: List[str] = [
        "FINANCE TRACKER REPORT",
        "======================",
        "",
        f"Period: {period_label}",
        f"Currency: {currency}",
        f"Generated: {generated_at.date().isoformat()}",
        f"Total Transactions: {summary['transaction_count']}",
        "",
        "SUMMARY",
        "-------",
        f"Total Income: {money(summary['total_income'])}",
        f"Total Expenses: {money(summary['total_expenses'])}",
        f"Net Balance: {money(summary['net_balance'])}",
        "",
        "TOP SPENDING CATEGORIES",
        "-----------------------",
        *top_lines,
        "",
        "TRANSACTIONS",
        "------------",
        *listing,
        "",
        "REPORT STATISTICS",
        "-----------------",
        f"Income Transactions: {summary['income_count']}",
        f"Expense Transactions: {summary['expense_count']}",
        f"Average Income: {money(summary['average_income'])}",
        f"Average Expense: {money(summary['average_expense'])}",
        f"Savings Rate: {summary['savings_rate']:.1f}%",
        "",
        "Generated by Finance Tracker",
        generated_at.strftime('%Y-%m-%d %H:%M:%S'),
    ]
    return '\n'.join(lines).strip()
