"""
V2 Liquidity Mathematics (VC/BNB pair)

Добавление ликвидности:
- Пустой пул (первое добавление): LP = sqrt(amount_a * amount_b), доля 100%
- Иначе суммы подгоняются под текущее соотношение резервов. Берётся
  ограничивающая сторона, пользователь никогда не вносит больше введённого:
    proportion = min(final_a / reserve_a, final_b / reserve_b)
    LP = proportion * total_supply
    share = LP / (total_supply + LP) * 100

price_impact_percent здесь - линейная оценка final_a / reserve_a * 100,
а не сдвиг цены по x*y=k (см. price.price_impact).

Вывод ликвидности:
- amount_x = reserve_x * lp_amount / total_supply
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .numeric import (
    ZERO,
    HUNDRED,
    Numeric,
    decimal_sqrt,
    finite_or_zero,
    math_context,
    quantize,
    to_decimal,
    to_positive_decimal,
)
from .price import PoolReserves

logger = logging.getLogger(__name__)

AMOUNT_PLACES = 6


@dataclass(frozen=True)
class LiquidityQuote:
    """Результат расчёта добавления ликвидности."""
    amount_a: Decimal
    amount_b: Decimal
    lp_tokens_to_receive: Decimal
    price_impact_percent: Decimal
    pool_share_percent: Decimal
    is_valid: bool
    error: Optional[str] = None

    @classmethod
    def invalid(cls, error: str) -> "LiquidityQuote":
        return cls(
            amount_a=quantize(ZERO, AMOUNT_PLACES),
            amount_b=quantize(ZERO, AMOUNT_PLACES),
            lp_tokens_to_receive=quantize(ZERO, AMOUNT_PLACES),
            price_impact_percent=ZERO,
            pool_share_percent=ZERO,
            is_valid=False,
            error=error,
        )


@dataclass(frozen=True)
class WithdrawQuote:
    """Результат расчёта вывода ликвидности."""
    amount_a: Decimal
    amount_b: Decimal
    is_valid: bool
    error: Optional[str] = None

    @classmethod
    def invalid(cls, error: str) -> "WithdrawQuote":
        return cls(
            amount_a=quantize(ZERO, AMOUNT_PLACES),
            amount_b=quantize(ZERO, AMOUNT_PLACES),
            is_valid=False,
            error=error,
        )


def quote_deposit(
    amount_a: Numeric,
    amount_b: Numeric,
    reserves: PoolReserves,
    total_lp_supply: Numeric = "0",
    log: Optional[logging.Logger] = None,
) -> LiquidityQuote:
    """
    Оптимальные суммы депозита и оценка LP токенов.

    Args:
        amount_a: Введённое количество A (VC)
        amount_b: Введённое количество B (BNB)
        reserves: Снимок резервов пары
        total_lp_supply: totalSupply LP токена (display)

    Returns:
        LiquidityQuote; при невалидном входе is_valid=False и error
    """
    log = log or logger

    if not reserves.is_loaded:
        return LiquidityQuote.invalid("Pool reserves are not loaded")

    a = to_positive_decimal(amount_a, log)
    b = to_positive_decimal(amount_b, log)
    if a is None or b is None:
        return LiquidityQuote.invalid("Please enter a valid amount")

    reserve_a = reserves.reserve_a
    reserve_b = reserves.reserve_b

    try:
        with math_context():
            if reserves.is_empty:
                # Первое добавление ликвидности
                final_a, final_b = a, b
                lp_tokens = decimal_sqrt(a * b)
                pool_share = HUNDRED
                # Пользователь сам задаёт цену, сдвигать нечего
                impact = ZERO
            else:
                total_supply = to_decimal(total_lp_supply, log)
                if total_supply is None or total_supply <= 0:
                    log.warning(f"LP total supply unavailable ({total_lp_supply!r}) for non-empty pool")
                    return LiquidityQuote.invalid("LP total supply is not available")

                current_ratio = reserve_b / reserve_a
                required_b_for_a = a * current_ratio
                required_a_for_b = b / current_ratio

                if required_b_for_a > b:
                    # B ограничивает
                    final_a, final_b = required_a_for_b, b
                else:
                    # A ограничивает
                    final_a, final_b = a, required_b_for_a

                proportion = min(final_a / reserve_a, final_b / reserve_b)
                lp_tokens = proportion * total_supply
                pool_share = lp_tokens / (total_supply + lp_tokens) * HUNDRED
                impact = abs(final_a / reserve_a * HUNDRED)
    except ArithmeticError as e:
        log.error(f"Failed to calculate liquidity for a={amount_a!r}, b={amount_b!r}: {e}")
        return LiquidityQuote.invalid("Calculation failed")

    return LiquidityQuote(
        amount_a=quantize(final_a, AMOUNT_PLACES),
        amount_b=quantize(final_b, AMOUNT_PLACES),
        lp_tokens_to_receive=quantize(lp_tokens, AMOUNT_PLACES),
        price_impact_percent=finite_or_zero(impact),
        pool_share_percent=finite_or_zero(pool_share),
        is_valid=True,
    )


def quote_withdraw(
    lp_amount: Numeric,
    reserves: PoolReserves,
    total_lp_supply: Numeric,
    log: Optional[logging.Logger] = None,
) -> WithdrawQuote:
    """
    Пропорциональный вывод ликвидности.

    Returns:
        WithdrawQuote; is_valid=False при lp <= 0, supply <= 0 или пустом пуле
    """
    log = log or logger

    if not reserves.is_loaded:
        return WithdrawQuote.invalid("Pool reserves are not loaded")

    lp = to_positive_decimal(lp_amount, log)
    if lp is None:
        return WithdrawQuote.invalid("Please enter a valid amount")

    total_supply = to_positive_decimal(total_lp_supply, log)
    if total_supply is None:
        return WithdrawQuote.invalid("LP total supply is not available")

    if reserves.is_empty:
        return WithdrawQuote.invalid("Pool has no liquidity")

    if lp > total_supply:
        log.debug(f"LP amount {lp} exceeds total supply {total_supply}")

    try:
        with math_context():
            proportion = lp / total_supply
            amount_a = reserves.reserve_a * proportion
            amount_b = reserves.reserve_b * proportion
    except ArithmeticError as e:
        log.error(f"Failed to calculate remove liquidity for lp={lp_amount!r}: {e}")
        return WithdrawQuote.invalid("Calculation failed")

    return WithdrawQuote(
        amount_a=quantize(amount_a, AMOUNT_PLACES),
        amount_b=quantize(amount_b, AMOUNT_PLACES),
        is_valid=True,
    )


def remove_percentage(lp_balance: Numeric, percent: Numeric) -> Decimal:
    """
    LP для быстрого вывода (25/50/75/100% баланса).

    Raises:
        ValueError: если percent вне (0, 100]
    """
    pct = to_decimal(percent)
    if pct is None or pct <= 0 or pct > HUNDRED:
        raise ValueError(f"percent must be in (0, 100], got {percent!r}")

    balance = to_decimal(lp_balance)
    if balance is None or balance <= 0:
        return ZERO
    if pct == HUNDRED:
        # Весь баланс без округления, иначе остаётся пыль
        return balance
    with math_context():
        return balance * pct / HUNDRED
