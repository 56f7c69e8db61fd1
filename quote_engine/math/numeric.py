"""
Decimal helpers for the quoting math.

Все расчёты идут через Decimal с точностью 50 знаков, как в liquidity math.
Контекст локальный (localcontext), глобальный getcontext() не трогаем -
калькуляторы вызываются из разных потоков UI.

- to_decimal: безопасный парсинг (строки, int, float, Decimal, DecimalAmount)
- decimal_sqrt: высокоточный корень
- quantize: округление для отображения (аналог toFixed)
- finite_or_zero: NaN/Inf никогда не уходят наружу
"""

import logging
from decimal import Decimal, Context, ROUND_HALF_UP, InvalidOperation, localcontext
from typing import Optional, Union

logger = logging.getLogger(__name__)

PRECISION = 50

# traps по умолчанию: InvalidOperation, DivisionByZero, Overflow
DECIMAL_CONTEXT = Context(prec=PRECISION, rounding=ROUND_HALF_UP)

ZERO = Decimal(0)
ONE = Decimal(1)
HUNDRED = Decimal(100)

Numeric = Union[str, int, float, Decimal]


def math_context():
    """Локальный 50-значный контекст для блока вычислений."""
    return localcontext(DECIMAL_CONTEXT)


def to_decimal(value, log: Optional[logging.Logger] = None) -> Optional[Decimal]:
    """
    Безопасное приведение к Decimal.

    float идёт через str(), как в usd_to_wei. Объекты с as_decimal()
    (DecimalAmount) разворачиваются.

    Returns:
        Конечный Decimal или None, если значение пустое, мусорное или NaN/Inf
    """
    log = log or logger

    if value is None or isinstance(value, bool):
        return None

    if hasattr(value, "as_decimal"):
        value = value.as_decimal()

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            log.debug(f"Not a number: {value!r}")
            return None
    else:
        log.warning(f"Unsupported numeric type: {type(value).__name__}")
        return None

    if not result.is_finite():
        log.debug(f"Non-finite value rejected: {value!r}")
        return None
    return result


def to_positive_decimal(value, log: Optional[logging.Logger] = None) -> Optional[Decimal]:
    """to_decimal, но только для значений > 0."""
    result = to_decimal(value, log)
    if result is None or result <= 0:
        return None
    return result


def decimal_sqrt(value: Numeric) -> Decimal:
    """
    Высокоточный квадратный корень через Decimal.

    Raises:
        ValueError: для отрицательных и нечисловых значений
    """
    d = to_decimal(value)
    if d is None or d < 0:
        raise ValueError(f"Cannot take square root of {value!r}")
    with math_context():
        return d.sqrt()


def finite_or_zero(value: Optional[Decimal]) -> Decimal:
    """NaN/Inf/None -> 0."""
    if value is None or not value.is_finite():
        return ZERO
    return value


def quantize(value: Decimal, places: int) -> Decimal:
    """
    Округление до фиксированного числа знаков (ROUND_HALF_UP).

    Decimal('100').quantize(...) сохраняет хвостовые нули: '100.0000'.
    """
    value = finite_or_zero(value)
    exponent = Decimal(1).scaleb(-places)
    with quantize_context(value, places):
        return value.quantize(exponent, rounding=ROUND_HALF_UP)


def quantize_context(value: Decimal, places: int):
    """
    Контекст, в который помещается value с `places` знаками.

    quantize требует, чтобы все цифры результата влезли в prec; иначе
    InvalidOperation (1e50 с 4 знаками - это 55 цифр).
    """
    ctx = DECIMAL_CONTEXT.copy()
    ctx.prec = max(PRECISION, value.adjusted() + places + 2)
    return localcontext(ctx)


def clamp(value: Decimal, min_value: Decimal, max_value: Decimal) -> Decimal:
    """Ограничение значения диапазоном [min_value, max_value]."""
    return max(min_value, min(value, max_value))
