"""
VG reward estimates for LP staking.

Два режима:
- CREATE: пользователь вносит VC + BNB, reward-контракт считает свою
  внутреннюю единицу учёта:
      lp_accounting_value = sqrt(amount_a * amount_b) / lp_divisor
  Это НЕ LP токен пула (см. liquidity.quote_deposit), а нормализация
  внутри контракта.
- BURN: у пользователя уже есть настоящие LP токены, они идут как есть.

reward = lp * reward_ratio, отображается с 2 знаками.
lp_divisor и reward_ratio всегда передаются вызывающим кодом.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from .numeric import (
    ZERO,
    Numeric,
    decimal_sqrt,
    math_context,
    quantize,
    to_decimal,
    to_positive_decimal,
)

logger = logging.getLogger(__name__)

REWARD_PLACES = 2
LP_PLACES = 6


class RewardMode(str, Enum):
    CREATE = "create"
    BURN = "burn"


@dataclass(frozen=True)
class RewardQuote:
    """Оценка VG награды."""
    expected_reward: Decimal
    lp_tokens_used: Decimal        # настоящие LP токены пула (BURN)
    lp_accounting_value: Decimal   # единица учёта reward-контракта (CREATE)
    ratio: Decimal
    mode: RewardMode
    is_valid: bool
    error: Optional[str] = None


def _invalid(mode: RewardMode, ratio: Optional[Decimal], error: str) -> RewardQuote:
    return RewardQuote(
        expected_reward=quantize(ZERO, REWARD_PLACES),
        lp_tokens_used=quantize(ZERO, LP_PLACES),
        lp_accounting_value=quantize(ZERO, LP_PLACES),
        ratio=ratio if ratio is not None else ZERO,
        mode=mode,
        is_valid=False,
        error=error,
    )


def lp_accounting_value(
    amount_a: Numeric,
    amount_b: Numeric,
    lp_divisor: Numeric,
) -> Optional[Decimal]:
    """
    Внутренняя LP-единица reward-контракта: sqrt(a * b) / lp_divisor.

    Returns:
        Decimal или None при неположительном входе
    """
    a = to_positive_decimal(amount_a)
    b = to_positive_decimal(amount_b)
    divisor = to_positive_decimal(lp_divisor)
    if a is None or b is None or divisor is None:
        return None
    with math_context():
        return decimal_sqrt(a * b) / divisor


def estimate_reward_for_create(
    amount_a: Numeric,
    amount_b: Numeric,
    lp_divisor: Numeric,
    reward_ratio: Numeric,
    log: Optional[logging.Logger] = None,
) -> RewardQuote:
    """
    VG за создание LP из amount_a VC и amount_b BNB.

    Example:
        a=100, b=0.1, lp_divisor=1000, ratio=10
        -> lp_accounting_value = sqrt(10) / 1000 ≈ 0.003162
        -> expected_reward = 0.03
    """
    log = log or logger
    ratio = to_decimal(reward_ratio, log)
    if ratio is None or ratio < 0:
        return _invalid(RewardMode.CREATE, None, "Reward ratio is not configured")

    try:
        accounting = lp_accounting_value(amount_a, amount_b, lp_divisor)
        if accounting is None:
            return _invalid(RewardMode.CREATE, ratio, "Please enter a valid amount")
        with math_context():
            reward = accounting * ratio
    except ArithmeticError as e:
        log.error(f"Failed to calculate VG reward (create) for a={amount_a!r}, b={amount_b!r}: {e}")
        return _invalid(RewardMode.CREATE, ratio, "Calculation failed")

    return RewardQuote(
        expected_reward=quantize(reward, REWARD_PLACES),
        lp_tokens_used=quantize(ZERO, LP_PLACES),
        lp_accounting_value=quantize(accounting, LP_PLACES),
        ratio=ratio,
        mode=RewardMode.CREATE,
        is_valid=True,
    )


def estimate_reward_for_burn(
    lp_amount: Numeric,
    reward_ratio: Numeric,
    log: Optional[logging.Logger] = None,
) -> RewardQuote:
    """VG за сжигание lp_amount настоящих LP токенов."""
    log = log or logger
    ratio = to_decimal(reward_ratio, log)
    if ratio is None or ratio < 0:
        return _invalid(RewardMode.BURN, None, "Reward ratio is not configured")

    lp = to_positive_decimal(lp_amount, log)
    if lp is None:
        return _invalid(RewardMode.BURN, ratio, "Please enter a valid amount")

    try:
        with math_context():
            reward = lp * ratio
    except ArithmeticError as e:
        log.error(f"Failed to calculate VG reward (burn) for lp={lp_amount!r}: {e}")
        return _invalid(RewardMode.BURN, ratio, "Calculation failed")

    return RewardQuote(
        expected_reward=quantize(reward, REWARD_PLACES),
        lp_tokens_used=quantize(lp, LP_PLACES),
        lp_accounting_value=quantize(ZERO, LP_PLACES),
        ratio=ratio,
        mode=RewardMode.BURN,
        is_valid=True,
    )


def estimate_reward(
    mode: RewardMode,
    amount_a: Numeric,
    amount_b: Optional[Numeric] = None,
    *,
    lp_divisor: Numeric,
    reward_ratio: Numeric,
    log: Optional[logging.Logger] = None,
) -> RewardQuote:
    """
    Единая точка входа по режиму.

    В BURN режиме amount_a - количество LP, amount_b игнорируется.
    """
    mode = RewardMode(mode)
    if mode is RewardMode.CREATE:
        return estimate_reward_for_create(amount_a, amount_b, lp_divisor, reward_ratio, log=log)
    return estimate_reward_for_burn(amount_a, reward_ratio, log=log)
