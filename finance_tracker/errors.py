"""Exception types raised by the finance tracker core.

Core functions raise these; :class:`finance_tracker.session.FinanceSession`
catches them at the user-action boundary and turns them into notifications.
"""

from __future__ import annotations

from typing import Optional


class FinanceTrackerError(Exception):
    """Base class for all finance tracker errors."""

    title = "Something went wrong"


class ValidationError(FinanceTrackerError, ValueError):
    """User input failed validation (missing field, bad amount, duplicate budget)."""

    title = "Invalid input"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DataImportError(FinanceTrackerError):
    """An import file could not be read, parsed, or held no valid transactions."""

    title = "Import failed"


class PersistenceError(FinanceTrackerError):
    """Reading from or writing to local storage failed."""

    title = "Storage error"
