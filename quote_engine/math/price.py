"""
Spot quotes and price impact for a constant-product (V2) pair.

quote_counterpart - линейная оценка по текущему соотношению резервов:
    amount_out = amount_in * reserve_out / reserve_in
Это НЕ выход свапа по x*y=k, а быстрый превью для поля ввода.

price_impact - оценка сдвига цены по x*y=k с комиссией пула:
    amount_in_with_fee = amount_in * (1 - fee)
    new_reserve_in = reserve_in + amount_in_with_fee
    new_reserve_out = reserve_in * reserve_out / new_reserve_in
    impact = |price_after - price_before| / price_before * 100
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from config import SWAP_FEE
from .numeric import (
    ZERO,
    ONE,
    HUNDRED,
    Numeric,
    clamp,
    finite_or_zero,
    math_context,
    quantize,
    to_decimal,
    to_positive_decimal,
)

logger = logging.getLogger(__name__)

# toFixed(6) для BNB, toFixed(4) для VC
COUNTERPART_PLACES_B = 6
COUNTERPART_PLACES_A = 4


@dataclass(frozen=True)
class PoolReserves:
    """
    Снимок резервов пары (A = VC, B = BNB).

    Передаётся снаружи (PairReader / кэш). Если is_loaded=False,
    все зависимые расчёты возвращают is_valid=False.
    """
    reserve_a: Decimal
    reserve_b: Decimal
    is_loaded: bool = True

    def __post_init__(self):
        for name in ("reserve_a", "reserve_b"):
            raw = getattr(self, name)
            value = to_decimal(raw)
            if value is None or value < 0:
                raise ValueError(f"{name} must be a non-negative number, got {raw!r}")
            object.__setattr__(self, name, value)

    @classmethod
    def unavailable(cls) -> "PoolReserves":
        """Резервы ещё не загружены."""
        return cls(reserve_a=ZERO, reserve_b=ZERO, is_loaded=False)

    @classmethod
    def from_base_units(
        cls,
        reserve_a: int,
        reserve_b: int,
        decimals_a: int = 18,
        decimals_b: int = 18,
    ) -> "PoolReserves":
        """Из сырых getReserves() в display-единицы."""
        with math_context():
            return cls(
                reserve_a=Decimal(reserve_a).scaleb(-decimals_a),
                reserve_b=Decimal(reserve_b).scaleb(-decimals_b),
                is_loaded=True,
            )

    @property
    def is_empty(self) -> bool:
        """Пул без ликвидности (первое добавление)."""
        return self.reserve_a == 0 or self.reserve_b == 0


def quote_counterpart(
    amount_in: Numeric,
    reserve_in: Numeric,
    reserve_out: Numeric,
    places: int = COUNTERPART_PLACES_A,
    is_loaded: bool = True,
    log: Optional[logging.Logger] = None,
) -> Optional[Decimal]:
    """
    Линейная котировка второй стороны по спот-цене пула.

    Args:
        amount_in: Количество входного токена (display)
        reserve_in: Резерв входного токена
        reserve_out: Резерв выходного токена
        places: Знаков после запятой в результате
        is_loaded: Загружены ли резервы

    Returns:
        Decimal с `places` знаками или None, если котировка недоступна

    Example:
        >>> quote_counterpart("1", "10", "1000")
        Decimal('100.0000')
    """
    log = log or logger

    if not is_loaded:
        return None

    amount = to_positive_decimal(amount_in, log)
    r_in = to_positive_decimal(reserve_in, log)
    r_out = to_positive_decimal(reserve_out, log)
    if amount is None or r_in is None or r_out is None:
        return None

    try:
        with math_context():
            result = amount * r_out / r_in
        if not result.is_finite() or result < 0:
            return None
        return quantize(result, places)
    except ArithmeticError as e:
        log.warning(f"Counterpart quote failed for {amount_in!r}: {e}")
        return None


def quote_b_from_a(amount_a: Numeric, reserves: PoolReserves, log: Optional[logging.Logger] = None) -> Optional[Decimal]:
    """Сколько B (BNB) нужно под amount_a (VC)."""
    return quote_counterpart(
        amount_a, reserves.reserve_a, reserves.reserve_b,
        places=COUNTERPART_PLACES_B, is_loaded=reserves.is_loaded, log=log,
    )


def quote_a_from_b(amount_b: Numeric, reserves: PoolReserves, log: Optional[logging.Logger] = None) -> Optional[Decimal]:
    """Сколько A (VC) соответствует amount_b (BNB)."""
    return quote_counterpart(
        amount_b, reserves.reserve_b, reserves.reserve_a,
        places=COUNTERPART_PLACES_A, is_loaded=reserves.is_loaded, log=log,
    )


def spot_price(reserves: PoolReserves) -> Optional[Decimal]:
    """Цена A в единицах B (reserve_b / reserve_a)."""
    if not reserves.is_loaded or reserves.is_empty:
        return None
    with math_context():
        return reserves.reserve_b / reserves.reserve_a


def price_impact(
    amount_in: Numeric,
    reserve_in: Numeric,
    reserve_out: Numeric,
    swap_fee: Numeric = SWAP_FEE,
    log: Optional[logging.Logger] = None,
) -> Decimal:
    """
    Price impact свапа в процентах, [0, 100].

    Невалидный вход или нечисловой промежуточный результат -> 0.
    """
    log = log or logger

    amount = to_positive_decimal(amount_in, log)
    r_in = to_positive_decimal(reserve_in, log)
    r_out = to_positive_decimal(reserve_out, log)
    fee = to_decimal(swap_fee, log)
    if amount is None or r_in is None or r_out is None or fee is None:
        return ZERO

    try:
        with math_context():
            price_before = r_out / r_in
            amount_in_with_fee = amount * (ONE - fee)
            new_reserve_in = r_in + amount_in_with_fee
            new_reserve_out = r_in * r_out / new_reserve_in
            price_after = new_reserve_out / new_reserve_in
            impact = abs(price_after - price_before) / price_before * HUNDRED
    except ArithmeticError as e:
        log.warning(f"Price impact degenerate for amount={amount_in!r}: {e}")
        return ZERO

    return clamp(finite_or_zero(impact), ZERO, HUNDRED)
