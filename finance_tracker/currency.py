"""Currency conversion and formatting utilities.

Rates come from a static table built from a single USD→INR rate so that the
two directions are always exact reciprocals of each other.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Union

from .config import USD_TO_INR_RATE

logger = logging.getLogger(__name__)

USD = 'USD'
INR = 'INR'
SUPPORTED_CURRENCIES = (USD, INR)

CURRENCY_SYMBOLS = {
    USD: '$',
    INR: '₹',
}

RateTable = Mapping[str, Mapping[str, float]]


def build_exchange_rates(usd_to_inr: float = USD_TO_INR_RATE) -> Dict[str, Dict[str, float]]:
    """Build the rate table for every ordered pair of supported currencies.

    Example:
        >>> build_exchange_rates(80.0)[INR][USD]
        0.0125
    """
    if usd_to_inr <= 0:
        raise ValueError(f"USD→INR rate must be positive, got {usd_to_inr}")
    return {
        USD: {INR: usd_to_inr},
        INR: {USD: 1 / usd_to_inr},
    }


EXCHANGE_RATES = build_exchange_rates()


def convert_currency(
    amount: float,
    from_currency: str,
    to_currency: str,
    rates: Optional[RateTable] = None,
) -> float:
    """Convert ``amount`` between currencies using the static rate table.

    Identical currencies return ``amount`` untouched. A pair missing from the
    table also returns ``amount`` untouched (with a warning) instead of failing.
    """
    if from_currency == to_currency:
        return amount
    table = EXCHANGE_RATES if rates is None else rates
    rate = table.get(from_currency, {}).get(to_currency)
    if not rate:
        logger.warning(
            "No exchange rate for %s→%s; leaving amount unconverted", from_currency, to_currency
        )
        return amount
    return amount * rate


def currency_symbol(currency: str) -> str:
    return CURRENCY_SYMBOLS.get(currency, currency)


def _group_western(digits: str) -> str:
    return f"{int(digits):,}"


def _group_indian(digits: str) -> str:
    # 1,23,45,678: last three digits, then pairs
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ','.join(pairs + [tail])


def format_currency(amount: Union[float, int], currency: str = USD, include_sign: bool = True) -> str:
    """Format an amount the way the currency's locale displays it.

    USD uses en-US grouping and INR uses en-IN (lakh/crore) grouping. Both
    always render two decimals.

    Example:
        >>> format_currency(1234.5)
        '$1,234.50'
        >>> format_currency(123456.78, INR)
        '₹1,23,456.78'
        >>> format_currency(-5, USD)
        '-$5.00'
    """
    value = float(amount)
    negative = value < 0 and round(abs(value), 2) != 0
    whole, fraction = f"{abs(value):.2f}".split('.')
    grouped = _group_indian(whole) if currency == INR else _group_western(whole)
    body = f"{grouped}.{fraction}"
    if include_sign:
        body = f"{currency_symbol(currency)}{body}"
    return f"-{body}" if negative else body
