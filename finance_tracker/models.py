"""Core data classes for transactions, budgets and users.

Transactions and budgets are serialized with the camelCase keys used by the
exported JSON documents so that existing export files keep importing.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from .errors import ValidationError

INCOME = 'income'
EXPENSE = 'expense'
TRANSACTION_TYPES = (INCOME, EXPENSE)

EXPENSE_CATEGORIES = [
    'Food & Dining',
    'Transportation',
    'Shopping',
    'Entertainment',
    'Bills & Utilities',
    'Healthcare',
    'Travel',
    'Education',
    'Other',
]
TRANSACTION_CATEGORIES = EXPENSE_CATEGORIES[:-1] + ['Salary', 'Business', 'Other']

BUDGET_PERIODS = ('monthly', 'weekly', 'yearly')

DEFAULT_ORIGINAL_CURRENCY = 'USD'


def new_id() -> str:
    return uuid.uuid4().hex


def parse_amount(value: Any, label: str = "Amount") -> float:
    """Validate a user-entered amount and return it as a positive float."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{label} is required.", field='amount')
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a number.", field='amount')
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a number.", field='amount') from None
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError(f"{label} must be greater than zero.", field='amount')
    return amount


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float
    original_amount: float
    original_currency: str
    description: str
    category: str
    type: str
    date: str  # ISO date, e.g. "2024-01-05"

    @property
    def month_key(self) -> str:
        return self.date[:7]

    @property
    def is_income(self) -> bool:
        return self.type == INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == EXPENSE

    def parsed_date(self) -> Optional[date]:
        """Return the calendar date, or ``None`` when the stored value is not ISO."""
        try:
            return date.fromisoformat(self.date[:10])
        except (TypeError, ValueError):
            return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'amount': self.amount,
            'originalAmount': self.original_amount,
            'originalCurrency': self.original_currency,
            'description': self.description,
            'category': self.category,
            'type': self.type,
            'date': self.date,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        amount = float(data['amount'])
        original_amount = data.get('originalAmount')
        return cls(
            id=str(data['id']),
            amount=amount,
            original_amount=amount if original_amount in (None, '') else float(original_amount),
            original_currency=str(data.get('originalCurrency') or DEFAULT_ORIGINAL_CURRENCY).upper(),
            description=str(data['description']),
            category=str(data['category']),
            type=str(data['type']),
            date=str(data['date']),
        )

    @classmethod
    def create(
        cls,
        amount: float,
        currency: str,
        description: str,
        category: str,
        type: str,
        on: Optional[date] = None,
    ) -> 'Transaction':
        """Build a new transaction recorded in ``currency`` with a fresh id."""
        occurred = on or date.today()
        return cls(
            id=new_id(),
            amount=amount,
            original_amount=amount,
            original_currency=currency,
            description=description,
            category=category,
            type=type,
            date=occurred.isoformat(),
        )

    def with_changes(self, **changes: Any) -> 'Transaction':
        """Return a replacement transaction; ``amount`` edits keep both amount fields in sync."""
        if 'amount' in changes and 'original_amount' not in changes:
            changes['original_amount'] = changes['amount']
        return replace(self, **changes)


@dataclass
class Budget:
    id: str
    category: str
    amount: float
    period: str = 'monthly'
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    # Currency the limit was entered in; None for budgets saved before it was recorded.
    currency: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'id': self.id,
            'category': self.category,
            'amount': self.amount,
            'period': self.period,
            'createdAt': self.created_at,
        }
        if self.currency:
            payload['currency'] = self.currency
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Budget':
        return cls(
            id=str(data['id']),
            category=str(data['category']),
            amount=float(data['amount']),
            period=str(data.get('period') or 'monthly'),
            created_at=str(data.get('createdAt') or ''),
            currency=data.get('currency') or None,
        )


@dataclass(frozen=True)
class User:
    id: str
    email: str
    name: str
