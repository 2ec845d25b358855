import logging

import pytest

from finance_tracker.currency import (
    EXCHANGE_RATES,
    INR,
    USD,
    build_exchange_rates,
    convert_currency,
    format_currency,
)


@pytest.mark.parametrize('amount', [0, 1, 12.34, 999999.99])
@pytest.mark.parametrize('currency', [USD, INR])
def test_same_currency_is_identity(amount, currency):
    assert convert_currency(amount, currency, currency) == amount


@pytest.mark.parametrize('amount', [0.01, 1, 50, 1234.56, 10 ** 6])
def test_usd_inr_round_trip_is_reciprocal(amount):
    there = convert_currency(amount, USD, INR)
    back = convert_currency(there, INR, USD)
    assert back == pytest.approx(amount, rel=1e-9)


def test_default_table_rates_are_reciprocal():
    usd_to_inr = EXCHANGE_RATES[USD][INR]
    assert convert_currency(10, USD, INR) == pytest.approx(10 * usd_to_inr)
    assert EXCHANGE_RATES[INR][USD] == pytest.approx(1 / usd_to_inr)


def test_missing_rate_leaves_amount_unchanged(caplog):
    with caplog.at_level(logging.WARNING, logger='finance_tracker.currency'):
        assert convert_currency(42.0, USD, 'EUR') == 42.0
    assert 'No exchange rate' in caplog.text


def test_custom_rate_table_is_used():
    rates = build_exchange_rates(80.0)
    assert convert_currency(2, USD, INR, rates) == pytest.approx(160.0)
    assert convert_currency(160, INR, USD, rates) == pytest.approx(2.0)


def test_rate_must_be_positive():
    with pytest.raises(ValueError):
        build_exchange_rates(0)


def test_format_usd_groups_thousands():
    assert format_currency(1234.5) == '$1,234.50'
    assert format_currency(0) == '$0.00'


def test_format_inr_uses_lakh_grouping():
    assert format_currency(123456.78, INR) == '₹1,23,456.78'
    assert format_currency(12345678, INR) == '₹1,23,45,678.00'
    assert format_currency(999, INR) == '₹999.00'


def test_format_negative_and_unsigned():
    assert format_currency(-5, USD) == '-$5.00'
    assert format_currency(1500, USD, include_sign=False) == '1,500.00'
