"""Local key-value persistence for transactions, budgets and preferences.

:class:`LocalStorage` keeps one JSON text document per key inside the
storage directory. The stores on top of it own the key layout:

* ``finance_tracker_<email>`` holds ``{"transactions": [...], "lastUpdated": ...}``
* ``finance_budgets_<email>`` holds the budget list
* ``selected_currency`` holds the display currency

Every save rewrites the whole document.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

from .config import DEFAULT_CURRENCY, STORAGE_DIR, ensure_data_directories
from .currency import SUPPORTED_CURRENCIES, USD
from .errors import PersistenceError
from .models import Budget, Transaction

logger = logging.getLogger(__name__)

TRANSACTIONS_PREFIX = 'finance_tracker_'
BUDGETS_PREFIX = 'finance_budgets_'
CURRENCY_KEY = 'selected_currency'


def storage_filename(key: str) -> str:
    """Map a storage key to a file name, one-to-one.

    Alphanumerics and ``@._-`` stay readable; everything else, including
    path separators and ``%``, is percent-encoded, so distinct keys never
    share a file.

    Example:
        >>> storage_filename("finance_tracker_demo@example.com")
        'finance_tracker_demo@example.com.json'
        >>> storage_filename("finance_tracker_a+b@example.com")
        'finance_tracker_a%2Bb@example.com.json'
        >>> storage_filename("../../etc/passwd")
        '..%2F..%2Fetc%2Fpasswd.json'
    """
    if not key:
        raise ValueError("Storage key must not be empty")
    return f"{quote(key, safe='@._-')}.json"


class LocalStorage:
    """File-backed text storage addressed by string keys."""

    def __init__(self, storage_dir: Optional[Path] = None):
        if storage_dir is None:
            ensure_data_directories()
        self.storage_dir = Path(storage_dir or STORAGE_DIR)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def get_path(self, key: str) -> Path:
        return self.storage_dir / storage_filename(key)

    def get_item(self, key: str) -> Optional[str]:
        target = self.get_path(key)
        if not target.exists():
            return None
        try:
            return target.read_text(encoding='utf-8')
        except OSError as e:
            raise PersistenceError(f"Failed to read {target}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        target = self.get_path(key)
        try:
            target.write_text(value, encoding='utf-8')
        except OSError as e:
            raise PersistenceError(f"Failed to write {target}: {e}") from e

    def remove_item(self, key: str) -> None:
        target = self.get_path(key)
        if not target.exists():
            return
        try:
            target.unlink()
        except OSError as e:
            raise PersistenceError(f"Failed to delete {target}: {e}") from e


def _read_json(storage: LocalStorage, key: str) -> Optional[Any]:
    raw = storage.get_item(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("Stored value for %s is not valid JSON: %s", key, e)
        return None


class TransactionStore:
    """Per-user transaction list persistence."""

    def __init__(self, storage: Optional[LocalStorage] = None):
        self.storage = storage or LocalStorage()

    @staticmethod
    def key_for(user_id: str) -> str:
        return f"{TRANSACTIONS_PREFIX}{user_id}"

    def load(self, user_id: str) -> List[Transaction]:
        """Load a user's transactions; unreadable documents or records are skipped."""
        try:
            data = _read_json(self.storage, self.key_for(user_id))
        except PersistenceError as e:
            logger.error("Error loading transactions for %s: %s", user_id, e)
            return []
        if not isinstance(data, dict):
            return []

        transactions: List[Transaction] = []
        for record in data.get('transactions') or []:
            try:
                transactions.append(Transaction.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping stored transaction for %s: %s", user_id, e)
        return transactions

    def save(self, user_id: str, transactions: Sequence[Transaction]) -> None:
        payload = {
            'transactions': [t.to_dict() for t in transactions],
            'lastUpdated': datetime.now(timezone.utc).isoformat(),
        }
        self.storage.set_item(self.key_for(user_id), json.dumps(payload))

    def clear(self, user_id: str) -> None:
        self.storage.remove_item(self.key_for(user_id))

    def export(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Return the stored document as-is, or ``None`` when nothing is stored."""
        try:
            data = _read_json(self.storage, self.key_for(user_id))
        except PersistenceError as e:
            logger.error("Error exporting data for %s: %s", user_id, e)
            return None
        return data if isinstance(data, dict) else None


class BudgetStore:
    """Per-user budget list persistence, stored beside the transactions."""

    def __init__(self, storage: Optional[LocalStorage] = None):
        self.storage = storage or LocalStorage()

    @staticmethod
    def key_for(user_id: str) -> str:
        return f"{BUDGETS_PREFIX}{user_id}"

    def load(self, user_id: str) -> List[Budget]:
        try:
            data = _read_json(self.storage, self.key_for(user_id))
        except PersistenceError as e:
            logger.error("Error loading budgets for %s: %s", user_id, e)
            return []
        if not isinstance(data, list):
            return []

        budgets: List[Budget] = []
        for record in data:
            try:
                budgets.append(Budget.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping stored budget for %s: %s", user_id, e)
        return budgets

    def save(self, user_id: str, budgets: Sequence[Budget]) -> None:
        self.storage.set_item(self.key_for(user_id), json.dumps([b.to_dict() for b in budgets]))


class PreferenceStore:
    """Display currency persisted across sessions."""

    def __init__(self, storage: Optional[LocalStorage] = None, default_currency: str = DEFAULT_CURRENCY):
        self.storage = storage or LocalStorage()
        self.default_currency = default_currency if default_currency in SUPPORTED_CURRENCIES else USD

    def load_currency(self) -> str:
        try:
            saved = self.storage.get_item(CURRENCY_KEY)
        except PersistenceError as e:
            logger.error("Error loading currency preference: %s", e)
            saved = None
        if saved and saved.strip() in SUPPORTED_CURRENCIES:
            return saved.strip()
        return self.default_currency

    def save_currency(self, currency: str) -> None:
        self.storage.set_item(CURRENCY_KEY, currency)
