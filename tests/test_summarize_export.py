import importlib.util
import json
from pathlib import Path

SCRIPT_PATH = Path(__file__).resolve().parents[1] / 'scripts' / 'summarize_export.py'


def _load_script_module():
    spec = importlib.util.spec_from_file_location('summarize_export_test', SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _write_export(path: Path) -> Path:
    path.write_text(json.dumps({'transactions': [
        {'id': 'a', 'amount': 50, 'description': 'Groceries', 'category': 'Food', 'type': 'expense', 'date': '2024-01-05'},
        {'id': 'b', 'amount': 1000, 'description': 'Pay', 'category': 'Salary', 'type': 'income', 'date': '2024-01-10'},
    ]}), encoding='utf-8')
    return path


def test_prints_text_report_and_writes_csv(tmp_path, capsys):
    module = _load_script_module()
    export = _write_export(tmp_path / 'export.json')
    csv_path = tmp_path / 'out' / 'report.csv'

    assert module.main(export, period='all_time', currency='USD', csv_path=csv_path) == 0
    out = capsys.readouterr().out
    assert 'FINANCE TRACKER REPORT' in out
    assert 'Net Balance: $950.00' in out
    assert csv_path.read_text(encoding='utf-8').startswith('"Date"')


def test_bad_export_exits_nonzero(tmp_path, capsys):
    module = _load_script_module()
    bad = tmp_path / 'bad.json'
    bad.write_text('nope', encoding='utf-8')
    assert module.main(bad) == 1
    assert 'Import failed' in capsys.readouterr().err


def test_parse_args_defaults():
    module = _load_script_module()
    args = module.parse_args(['export.json'])
    assert args.period == 'all_time'
    assert args.currency == 'USD'
    assert args.csv is None
