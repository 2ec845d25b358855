"""Pluggable credential checking.

The tracker only needs to know *who* is signed in so it can pick the right
storage keys. :class:`CredentialChecker` is the seam; the bundled
:class:`LocalCredentialChecker` keeps salted PBKDF2 hashes in local storage.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import secrets
from abc import ABC, abstractmethod
from typing import Dict, Optional

from .errors import ValidationError
from .models import User, new_id
from .storage import LocalStorage

logger = logging.getLogger(__name__)

USERS_KEY = 'finance_users'
PBKDF2_ITERATIONS = 200_000
MIN_PASSWORD_LENGTH = 6


class CredentialChecker(ABC):
    """Interface for anything that can register and authenticate users."""

    @abstractmethod
    def register(self, name: str, email: str, password: str) -> User:
        """Create an account, raising :class:`ValidationError` on bad input."""

    @abstractmethod
    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user for valid credentials, ``None`` otherwise."""


def _hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), bytes.fromhex(salt), PBKDF2_ITERATIONS)
    return digest.hex()


def _normalise_email(email: str) -> str:
    return (email or '').strip().lower()


class LocalCredentialChecker(CredentialChecker):
    """Accounts stored as one JSON document in :class:`LocalStorage`."""

    def __init__(self, storage: Optional[LocalStorage] = None):
        self.storage = storage or LocalStorage()

    def _load(self) -> Dict[str, Dict[str, str]]:
        raw = self.storage.get_item(USERS_KEY)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.error("User registry is not valid JSON; treating it as empty")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, accounts: Dict[str, Dict[str, str]]) -> None:
        self.storage.set_item(USERS_KEY, json.dumps(accounts, indent=2, sort_keys=True))

    def register(self, name: str, email: str, password: str) -> User:
        email = _normalise_email(email)
        if not name or not name.strip():
            raise ValidationError("Please enter your name.", field='name')
        if '@' not in email:
            raise ValidationError("Please enter a valid email address.", field='email')
        if len(password or '') < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters.", field='password'
            )

        accounts = self._load()
        if email in accounts:
            raise ValidationError("An account with this email already exists.", field='email')

        salt = secrets.token_hex(16)
        user = User(id=new_id(), email=email, name=name.strip())
        accounts[email] = {
            'id': user.id,
            'name': user.name,
            'salt': salt,
            'password_hash': _hash_password(password, salt),
        }
        self._save(accounts)
        logger.info("Registered user %s", email)
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        email = _normalise_email(email)
        account = self._load().get(email)
        if account is None:
            return None
        expected = account.get('password_hash', '')
        actual = _hash_password(password or '', account.get('salt', ''))
        if not hmac.compare_digest(expected, actual):
            return None
        return User(id=account['id'], email=email, name=account.get('name', ''))
