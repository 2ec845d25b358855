"""Configuration management for the finance tracker.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in finance_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("FINTRACK_DATA_DIR", _PROJECT_ROOT / "data"))
STORAGE_DIR = DATA_DIR / "storage"
REPORTS_DIR = DATA_DIR / "reports"

# Currency defaults
DEFAULT_CURRENCY = os.getenv("FINTRACK_DEFAULT_CURRENCY", "USD").upper()
USD_TO_INR_RATE = float(os.getenv("FINTRACK_USD_TO_INR", "83.5"))

LOG_LEVEL = os.getenv("FINTRACK_LOG_LEVEL", "INFO").upper()


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, STORAGE_DIR, REPORTS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)
