"""
Display amounts <-> integer base units.

Граница транзакции: сюда приходит строка из поля ввода, отсюда уходит
int в wei. parse_to_base_units падает с AmountFormatError на любом
некорректном входе - тихий 0 здесь означал бы перевод нулевой суммы
вместо ошибки пользователю.

DecimalAmount / BaseUnitAmount разделяют display-суммы и суммы в wei,
чтобы непроверенная строка не попала в вызов контракта.
"""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN
from typing import Optional

from config import ALLOWED_DECIMALS, MAX_INPUT_LENGTH
from .math.numeric import quantize_context

logger = logging.getLogger(__name__)

# Разумный предел decimals (uint256 ~ 1.15e77)
MAX_DECIMALS = 77

_DECIMAL_RE = re.compile(r"([0-9]+)(?:\.([0-9]*))?|\.([0-9]+)", re.ASCII)


@dataclass
class AmountFormatError(ValueError):
    """Некорректная сумма на границе транзакции."""
    value: object
    reason: str

    def __str__(self):
        return f"Invalid amount format {self.value!r}: {self.reason}"


def _check_decimals(decimals: int) -> None:
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise TypeError(f"decimals must be int, got {type(decimals).__name__}")
    if not 0 <= decimals <= MAX_DECIMALS:
        raise ValueError(f"decimals must be in [0, {MAX_DECIMALS}], got {decimals}")


def parse_to_base_units(value: str, decimals: int = ALLOWED_DECIMALS) -> int:
    """
    Точное преобразование display-строки в base units (wei).

    Принимает уже санитизированную строку: цифры и одна точка.
    Не округляет: лишние знаки после запятой - ошибка.

    Args:
        value: Сумма, например "1.5"
        decimals: Decimals токена (18 для VC/BNB/LP)

    Returns:
        Положительный int

    Raises:
        AmountFormatError: пустая строка, мусор, знак, ноль,
            слишком много знаков после запятой

    Example:
        >>> parse_to_base_units("1.5", 18)
        1500000000000000000
    """
    _check_decimals(decimals)

    if isinstance(value, DecimalAmount):
        value = value.value
    if not isinstance(value, str):
        raise AmountFormatError(value, f"expected str, got {type(value).__name__}")

    text = value.strip()
    if not text:
        raise AmountFormatError(value, "empty amount")
    if len(text) > MAX_INPUT_LENGTH + MAX_DECIMALS:
        raise AmountFormatError(value, "amount is too long")

    match = _DECIMAL_RE.fullmatch(text)
    if not match:
        logger.error(f"Failed to parse amount {value!r}")
        raise AmountFormatError(value, "not a plain decimal number")

    if match.group(3) is not None:
        int_part, frac_part = "0", match.group(3)
    else:
        int_part, frac_part = match.group(1), match.group(2) or ""

    if len(frac_part) > decimals:
        raise AmountFormatError(value, f"too many decimals for a {decimals}-decimals token")

    result = int(int_part) * 10 ** decimals + int(frac_part.ljust(decimals, "0") or "0")
    if result <= 0:
        raise AmountFormatError(value, "amount must be greater than zero")
    return result


def format_from_base_units(value: int, decimals: int = ALLOWED_DECIMALS) -> str:
    """
    base units -> display-строка в стиле formatUnits ("1.0", "0.5", "-2.25").

    Некорректный вход логируется и даёт "0".
    """
    if isinstance(value, bool) or not isinstance(value, int):
        logger.error(f"Failed to format base units: expected int, got {type(value).__name__}")
        return "0"
    try:
        _check_decimals(decimals)
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to format base units {value}: {e}")
        return "0"

    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), 10 ** decimals)
    if decimals == 0:
        return f"{sign}{whole}.0"
    frac_text = str(frac).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{frac_text}"


@dataclass(frozen=True)
class BaseUnitAmount:
    """Сумма в base units (wei). Строится только из int."""
    value: int
    decimals: int = ALLOWED_DECIMALS

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"BaseUnitAmount requires int, got {type(self.value).__name__}")
        if self.value < 0:
            raise ValueError(f"BaseUnitAmount must be non-negative, got {self.value}")
        _check_decimals(self.decimals)

    def to_display(self) -> str:
        return format_from_base_units(self.value, self.decimals)

    def to_decimal_amount(self) -> "DecimalAmount":
        return DecimalAmount(self.to_display(), self.decimals)

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True)
class DecimalAmount:
    """
    Проверенная display-сумма и decimals токена, из которого она пришла.
    """
    value: str
    decimals: int = ALLOWED_DECIMALS

    def __post_init__(self):
        _check_decimals(self.decimals)
        if not isinstance(self.value, str) or not _DECIMAL_RE.fullmatch(self.value):
            raise AmountFormatError(self.value, "not a plain decimal number")

    @classmethod
    def parse(cls, raw: str, decimals: int = ALLOWED_DECIMALS) -> "DecimalAmount":
        """
        Строгий парсинг пользовательского ввода.

        Raises:
            AmountFormatError: если вход не является положительной суммой
                с не более чем `decimals` знаками
        """
        parse_to_base_units(raw, decimals)
        return cls(raw.strip(), decimals)

    @classmethod
    def from_decimal(cls, value: Decimal, decimals: int = ALLOWED_DECIMALS) -> "DecimalAmount":
        """Из Decimal котировки (например LiquidityQuote.amount_a)."""
        if not isinstance(value, Decimal) or not value.is_finite() or value < 0:
            raise AmountFormatError(value, "expected a finite non-negative Decimal")
        return cls(f"{value:f}", decimals)

    def as_decimal(self) -> Decimal:
        return Decimal(self.value)

    def to_base_units(self) -> BaseUnitAmount:
        return BaseUnitAmount(parse_to_base_units(self.value, self.decimals), self.decimals)

    def __str__(self) -> str:
        return self.value


def truncate_to_decimals(value: Decimal, decimals: int = ALLOWED_DECIMALS) -> Optional[Decimal]:
    """
    Отрезать лишние знаки (ROUND_DOWN) перед parse_to_base_units.

    Котировки считаются с точностью 50 знаков; в транзакцию идёт не больше
    decimals токена, и никогда не больше рассчитанного.
    """
    if not isinstance(value, Decimal) or not value.is_finite():
        return None
    with quantize_context(value, decimals):
        return value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_DOWN)
