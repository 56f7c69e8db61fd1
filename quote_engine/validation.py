"""
Input sanitization and bound checks.

Ошибки ввода возвращаются как ValidationResult, чтобы UI мог показать
сообщение без обработки исключений. Бросает только граница транзакции
(units.parse_to_base_units).
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from config import (
    HIGH_SLIPPAGE_WARNING_PERCENT,
    MAX_INPUT_LENGTH,
    MAX_SLIPPAGE_BPS,
    MAX_SLIPPAGE_PERCENT,
    MAX_TRANSACTION_VALUE,
    MIN_SLIPPAGE_BPS,
    MIN_SLIPPAGE_PERCENT,
)
from .math.numeric import Numeric, to_decimal

logger = logging.getLogger(__name__)

# Всё, кроме ASCII цифр, точки и минуса
INPUT_SANITIZATION_RE = re.compile(r"[^0-9.\-]")

BPS_DENOMINATOR = 10_000


@dataclass(frozen=True)
class ValidationResult:
    """Результат проверки: error блокирует, warning - только подсказка."""
    is_valid: bool
    error: Optional[str] = None
    warning: Optional[str] = None


def sanitize_numeric_input(raw: Optional[str], max_length: int = MAX_INPUT_LENGTH) -> str:
    """
    Убрать всё, кроме [0-9.-], и обрезать до max_length.

    Example:
        >>> sanitize_numeric_input("12a.3xb-4")
        '12.3-4'
    """
    if raw is None:
        return ""
    cleaned = INPUT_SANITIZATION_RE.sub("", str(raw))
    return cleaned[:max_length]


def validate_token_amount(
    amount: Optional[str],
    max_amount: Optional[Numeric] = None,
    ceiling: Numeric = MAX_TRANSACTION_VALUE,
    max_length: int = MAX_INPUT_LENGTH,
) -> ValidationResult:
    """
    Проверка суммы перед показом окна подписи.

    Args:
        amount: Ввод пользователя
        max_amount: Лимит для этого вызова (например баланс)
        ceiling: Глобальный потолок суммы транзакции
    """
    sanitized = sanitize_numeric_input(amount, max_length)
    value = to_decimal(sanitized)

    if value is None or value <= 0:
        return ValidationResult(False, error="Please enter a valid amount")

    limit = to_decimal(max_amount) if max_amount is not None else None
    if limit is not None and value > limit:
        return ValidationResult(False, error=f"Amount cannot exceed {limit}")

    ceiling_value = to_decimal(ceiling)
    if ceiling_value is not None and value > ceiling_value:
        logger.warning(f"Amount {value} above transaction ceiling {ceiling_value}")
        return ValidationResult(False, error="Amount too large")

    return ValidationResult(True)


def validate_slippage(
    slippage_percent: Numeric,
    min_percent: Numeric = MIN_SLIPPAGE_PERCENT,
    max_percent: Numeric = MAX_SLIPPAGE_PERCENT,
    warning_percent: Numeric = HIGH_SLIPPAGE_WARNING_PERCENT,
) -> ValidationResult:
    """
    Slippage в процентах: вне [0, 50] - ошибка, выше 5 - предупреждение.
    """
    value = to_decimal(slippage_percent)
    lower, upper = to_decimal(min_percent), to_decimal(max_percent)

    if value is None or value < lower or value > upper:
        return ValidationResult(False, error=f"Slippage must be between {lower}% and {upper}%")

    if value > to_decimal(warning_percent):
        return ValidationResult(True, warning="High slippage warning: Consider reducing slippage")

    return ValidationResult(True)


def validate_slippage_bps(
    slippage_bps: int,
    min_bps: int = MIN_SLIPPAGE_BPS,
    max_bps: int = MAX_SLIPPAGE_BPS,
) -> ValidationResult:
    """Slippage LP-стейкинга в базисных пунктах (50..1500 по умолчанию)."""
    if isinstance(slippage_bps, bool) or not isinstance(slippage_bps, int):
        return ValidationResult(False, error="Slippage must be a whole number of basis points")
    if slippage_bps < min_bps or slippage_bps > max_bps:
        return ValidationResult(
            False,
            error=f"Slippage must be between {min_bps / 100}% and {max_bps / 100}%",
        )
    return ValidationResult(True)


def apply_slippage(amount: int, slippage_bps: int) -> int:
    """
    Минимальная сумма (amountMin) для транзакции, только целочисленно.

    Raises:
        TypeError: если amount/slippage_bps не int
        ValueError: если slippage_bps вне [0, 10000] или amount < 0
    """
    for name, v in (("amount", amount), ("slippage_bps", slippage_bps)):
        if isinstance(v, bool) or not isinstance(v, int):
            raise TypeError(f"{name} must be int, got {type(v).__name__}")
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")
    if not 0 <= slippage_bps <= BPS_DENOMINATOR:
        raise ValueError(f"slippage_bps must be in [0, {BPS_DENOMINATOR}], got {slippage_bps}")
    return amount * (BPS_DENOMINATOR - slippage_bps) // BPS_DENOMINATOR
