"""
Display formatting for amounts, currency, percentages and addresses.

Только для отображения: строки отсюда никогда не идут в транзакцию
(для этого units.parse_to_base_units). Мусор и NaN/Inf дают "0" / "$0.00",
функции не бросают исключений.
"""

import logging
from decimal import Decimal
from typing import Optional

from web3 import Web3

from config import (
    CURRENCY_MAX_FRACTION_DIGITS,
    CURRENCY_MIN_FRACTION_DIGITS,
    LARGE_NUMBER_SUFFIXES,
    PERCENTAGE_MAX_FRACTION_DIGITS,
)
from .math.numeric import Numeric, math_context, quantize, to_decimal

logger = logging.getLogger(__name__)

CURRENCY_DUST = Decimal("0.01")
TOKEN_DUST = Decimal("0.0001")
THOUSAND = Decimal(1000)


def _group(value: Decimal, min_fraction: int, max_fraction: int) -> str:
    """Группировка разрядов запятыми, от min до max знаков после точки."""
    rounded = quantize(abs(value), max_fraction)
    text = f"{rounded:,f}"
    if "." in text:
        int_part, frac = text.split(".")
        frac = frac.rstrip("0")
    else:
        int_part, frac = text, ""
    frac = frac.ljust(min_fraction, "0")

    sign = "-" if value < 0 and rounded != 0 else ""
    return f"{sign}{int_part}.{frac}" if frac else f"{sign}{int_part}"


def format_large_number(value: Numeric, prefix: str = "") -> str:
    """
    Число с суффиксом K/M/B/T и одним знаком после точки.

    Example:
        >>> format_large_number(1_500_000, "$")
        '$1.5M'
    """
    d = to_decimal(value)
    if d is None:
        return f"{prefix}0.00"

    sign = "-" if d < 0 else ""
    magnitude = abs(d)
    with math_context():
        for threshold, suffix in LARGE_NUMBER_SUFFIXES:
            if magnitude >= threshold:
                return f"{sign}{prefix}{quantize(magnitude / threshold, 1)}{suffix}"
    return f"{sign}{prefix}{quantize(magnitude, 2)}"


def format_currency(value: Numeric) -> str:
    """
    USD значение для карточек портфеля.

    $0.00 для нуля, "< $0.01" для пыли, K/M/B/T от тысячи.
    """
    d = to_decimal(value)
    if d is None or d == 0:
        return "$0.00"
    if 0 < d < CURRENCY_DUST:
        return "< $0.01"
    if abs(d) >= THOUSAND:
        return format_large_number(d, "$")

    text = _group(d, CURRENCY_MIN_FRACTION_DIGITS, CURRENCY_MAX_FRACTION_DIGITS)
    if text.startswith("-"):
        return f"-${text[1:]}"
    return f"${text}"


def format_token_amount(value: Numeric, places: int = 4) -> str:
    """Количество токена, до `places` знаков, без хвостовых нулей."""
    d = to_decimal(value)
    if d is None or d == 0:
        return "0"
    if 0 < d < TOKEN_DUST:
        return "< 0.0001"
    return _group(d, 0, places)


def format_percentage(value: Numeric, places: int = PERCENTAGE_MAX_FRACTION_DIGITS) -> str:
    """12.345 -> '12.35%', 5 -> '5%'."""
    d = to_decimal(value)
    if d is None:
        return "0%"
    return f"{_group(d, 0, places)}%"


def format_compact(value: Numeric, places: int = 2) -> str:
    """
    Точность по величине: мелкие числа с 4-6 знаками, крупные с K/M/B.
    """
    d = to_decimal(value)
    if d is None or d == 0:
        return "0"

    magnitude = abs(d)
    if magnitude < Decimal("0.000001"):
        return "< 0.000001"
    if magnitude < Decimal("0.001"):
        return str(quantize(d, 6))
    if magnitude < 1:
        return str(quantize(d, 4))
    if magnitude < THOUSAND:
        return str(quantize(d, places))
    return format_large_number(d)


def format_address(address: Optional[str]) -> Optional[str]:
    """
    0x1234...abcd; валидный адрес сначала приводится к checksum.
    """
    if not address or len(address) < 10:
        return address
    if Web3.is_address(address):
        address = Web3.to_checksum_address(address)
    return f"{address[:6]}...{address[-4:]}"


def format_hash(tx_hash: Optional[str]) -> Optional[str]:
    """0x123456...abcdef для хэшей транзакций."""
    if not tx_hash or len(tx_hash) < 12:
        return tx_hash
    return f"{tx_hash[:8]}...{tx_hash[-6:]}"


def format_gas(gas_used: Numeric, gas_price_wei: Optional[int] = None, symbol: str = "BNB") -> str:
    """'300,000' или '300,000 (0.001500 BNB)' если известна цена газа."""
    gas = to_decimal(gas_used)
    if gas is None:
        return str(gas_used)

    text = _group(gas, 0, 0)
    if gas_price_wei is None:
        return text

    price = to_decimal(gas_price_wei)
    if price is None:
        logger.debug(f"Invalid gas price: {gas_price_wei!r}")
        return text
    with math_context():
        cost = (gas * price).scaleb(-18)
    return f"{text} ({quantize(cost, 6)} {symbol})"
