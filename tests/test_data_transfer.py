import json
from datetime import date

import pytest

from finance_tracker.data_transfer import (
    decode_import_bytes,
    export_document,
    export_filename,
    import_file,
    parse_import,
    validate_record,
)
from finance_tracker.errors import DataImportError


def record(**overrides):
    base = {
        'id': 'a1',
        'amount': 25.5,
        'description': 'Lunch',
        'category': 'Food',
        'type': 'expense',
        'date': '2024-01-05',
    }
    base.update(overrides)
    return base


def document(*records):
    return json.dumps({'transactions': list(records)})


def test_one_record_missing_category_is_rejected():
    text = document(record(id='a'), record(id='b', category=None), record(id='c'))
    result = parse_import(text)
    assert result.imported_count == 2
    assert [t.id for t in result.accepted] == ['a', 'c']
    assert result.rejected_count == 1
    assert result.rejected[0].index == 1
    assert 'category' in result.rejected[0].reason


def test_record_without_currency_fields_defaults_to_usd():
    (txn,) = parse_import(document(record())).accepted
    assert txn.original_amount == 25.5
    assert txn.original_currency == 'USD'


def test_record_keeps_original_currency():
    (txn,) = parse_import(document(record(originalAmount=835, originalCurrency='INR', amount=835))).accepted
    assert txn.original_currency == 'INR'
    assert txn.original_amount == 835


@pytest.mark.parametrize(
    'bad, reason',
    [
        (record(amount=0), 'missing amount'),
        (record(description='  '), 'missing description'),
        (record(amount='ten'), 'amount is not a number'),
        (record(type='transfer'), "unknown type 'transfer'"),
        (record(date='05/01/2024'), "invalid date '05/01/2024'"),
        ('not a dict', 'record is not an object'),
    ],
)
def test_validation_reasons(bad, reason):
    assert validate_record(bad) == reason


def test_invalid_json_raises():
    with pytest.raises(DataImportError, match='Failed to parse'):
        parse_import('{not json')


@pytest.mark.parametrize('text', ['{}', '[]', '{"transactions": {}}'])
def test_missing_transactions_array_raises(text):
    with pytest.raises(DataImportError, match='does not contain valid transaction data'):
        parse_import(text)


def test_no_valid_records_raises():
    with pytest.raises(DataImportError, match='No valid transactions'):
        parse_import(document(record(category=''), record(type='bogus')))


def test_import_file_reads_path(tmp_path):
    path = tmp_path / 'export.json'
    path.write_text(document(record()), encoding='utf-8')
    assert import_file(path).imported_count == 1


def test_import_file_missing_path(tmp_path):
    with pytest.raises(DataImportError, match='Failed to read'):
        import_file(tmp_path / 'nope.json')


def test_decode_import_bytes():
    assert decode_import_bytes('{"note": "café"}'.encode('utf-8')) == '{"note": "café"}'
    with pytest.raises(DataImportError, match='Failed to read'):
        decode_import_bytes(b'{"note": "caf\xe9"}')


def test_export_document_is_indented_json():
    data = {'transactions': [record()], 'lastUpdated': '2024-01-05T10:00:00'}
    text = export_document(data)
    assert json.loads(text) == data
    assert '\n  "transactions"' in text


def test_export_filename():
    assert export_filename('me@example.com', date(2024, 2, 1)) == 'finance_data_me@example.com_2024-02-01.json'
