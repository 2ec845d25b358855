"""JSON import and export of a user's transaction data.

Import files use the same shape as exports: a document with a
``transactions`` array. Each record is checked against a small schema;
accepted and rejected records are both reported so nothing is dropped
silently.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import DataImportError
from .models import TRANSACTION_TYPES, Transaction

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('id', 'amount', 'description', 'category', 'type', 'date')


@dataclass
class RejectedRecord:
    index: int
    reason: str
    record: Any


@dataclass
class ImportResult:
    accepted: List[Transaction] = field(default_factory=list)
    rejected: List[RejectedRecord] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return len(self.accepted)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    return False


def validate_record(record: Any) -> Optional[str]:
    """Return why ``record`` cannot be imported, or ``None`` if it is valid."""
    if not isinstance(record, dict):
        return "record is not an object"

    missing = [name for name in REQUIRED_FIELDS if _is_blank(record.get(name))]
    if missing:
        return f"missing {', '.join(missing)}"

    amount = record['amount']
    if isinstance(amount, bool):
        return "amount is not a number"
    try:
        numeric = float(amount)
    except (TypeError, ValueError):
        return "amount is not a number"
    if not math.isfinite(numeric):
        return "amount is not a number"

    if record['type'] not in TRANSACTION_TYPES:
        return f"unknown type '{record['type']}'"

    try:
        date.fromisoformat(str(record['date'])[:10])
    except ValueError:
        return f"invalid date '{record['date']}'"
    return None


def parse_import(text: str) -> ImportResult:
    """Parse an import document.

    Raises:
        DataImportError: if the text is not JSON, has no ``transactions``
            array, or none of its records are valid.
    """
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise DataImportError("Failed to parse the file. Please check the file format.") from e

    records = document.get('transactions') if isinstance(document, dict) else None
    if not isinstance(records, list):
        raise DataImportError("The file does not contain valid transaction data.")

    result = ImportResult()
    for index, record in enumerate(records):
        reason = validate_record(record)
        if reason is None:
            try:
                result.accepted.append(Transaction.from_dict(record))
                continue
            except (KeyError, TypeError, ValueError) as e:
                reason = str(e)
        result.rejected.append(RejectedRecord(index=index, reason=reason, record=record))

    if result.rejected:
        logger.info(
            "Import rejected %d of %d records: %s",
            result.rejected_count,
            len(records),
            "; ".join(f"#{r.index}: {r.reason}" for r in result.rejected[:10]),
        )
    if not result.accepted:
        raise DataImportError("No valid transactions found in the file.")
    return result


def read_import_file(path: Union[str, Path]) -> str:
    try:
        return Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise DataImportError("Failed to read the file. Please try again.") from e


def decode_import_bytes(data: bytes) -> str:
    """Decode an uploaded export; bytes that are not UTF-8 fail the import."""
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise DataImportError("Failed to read the file. Please try again.") from e


def import_file(path: Union[str, Path]) -> ImportResult:
    return parse_import(read_import_file(path))


def export_document(data: Dict[str, Any]) -> str:
    """Serialize a stored transaction document for download."""
    return json.dumps(data, indent=2)


def export_filename(email: str, today: Optional[date] = None) -> str:
    return f"finance_data_{email}_{(today or date.today()).isoformat()}.json"
