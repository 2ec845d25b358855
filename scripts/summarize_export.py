#!/usr/bin/env python3
"""Print the text report for a JSON export, optionally writing the CSV too."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from finance_tracker.analytics import build_report_data
from finance_tracker.config import REPORTS_DIR, ensure_data_directories
from finance_tracker.currency import SUPPORTED_CURRENCIES
from finance_tracker.data_transfer import import_file
from finance_tracker.errors import FinanceTrackerError
from finance_tracker.logging_config import configure_logging
from finance_tracker.periods import ALL_TIME, PERIOD_OPTIONS
from finance_tracker.reports import generate_csv, generate_text_report, report_filename

logger = logging.getLogger("summarize_export")


def main(export_path: Path, period: str = ALL_TIME, currency: str = 'USD', csv_path: Optional[Path] = None) -> int:
    try:
        result = import_file(export_path)
    except FinanceTrackerError as e:
        print(f"{e.title}: {e}", file=sys.stderr)
        return 1

    if result.rejected_count:
        logger.warning("Skipped %d invalid records from %s", result.rejected_count, export_path)

    report = build_report_data(result.accepted, currency, period)
    if not report.transactions:
        print(f"No transactions in {report.period}.")
        return 0

    print(generate_text_report(report.transactions, currency, report.period))

    if csv_path is not None:
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        csv_path.write_text(generate_csv(report.transactions, currency), encoding='utf-8')
        print(f"\nCSV written to {csv_path}")
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Summarize a finance tracker JSON export.')
    parser.add_argument('export', type=Path, help='Path to the exported JSON file')
    parser.add_argument('--period', choices=PERIOD_OPTIONS, default=ALL_TIME, help='Reporting period')
    parser.add_argument('--currency', choices=SUPPORTED_CURRENCIES, default='USD', help='Display currency')
    parser.add_argument('--csv', type=Path, default=None, help='Also write the CSV report here')
    parser.add_argument('--save', action='store_true', help='Also write the CSV report into the reports directory')
    return parser.parse_args(argv)


if __name__ == '__main__':
    args = parse_args()
    configure_logging()
    csv_path = args.csv
    if csv_path is None and args.save:
        ensure_data_directories()
        csv_path = REPORTS_DIR / report_filename(args.period)
    sys.exit(main(args.export, period=args.period, currency=args.currency, csv_path=csv_path))
