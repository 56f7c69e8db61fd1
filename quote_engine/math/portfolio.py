"""
Portfolio valuation and dashboard analytics.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional, Tuple

from config import PORTFOLIO_ASSETS
from ..formatting import format_currency
from .numeric import ZERO, ONE, HUNDRED, Numeric, finite_or_zero, math_context, to_decimal

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class PortfolioValuation:
    """Стоимость портфеля в USD."""
    total_value: Decimal
    breakdown: Dict[str, Decimal] = field(default_factory=dict)
    formatted: str = "$0.00"


def _normalize(mapping: Optional[Mapping[str, Numeric]]) -> Dict[str, Numeric]:
    return {str(k).upper(): v for k, v in (mapping or {}).items()}


def calculate_portfolio_value(
    balances: Mapping[str, Numeric],
    prices: Mapping[str, Numeric],
    assets: Iterable[str] = PORTFOLIO_ASSETS,
    log: Optional[logging.Logger] = None,
) -> PortfolioValuation:
    """
    Сумма balance * price по активам (VC, VG, BNB, LP).

    Ключи без учёта регистра. Пустой или мусорный баланс/цена считаются 0.
    """
    log = log or logger
    balances = _normalize(balances)
    prices = _normalize(prices)

    breakdown: Dict[str, Decimal] = {}
    total = ZERO
    with math_context():
        for asset in assets:
            key = asset.upper()
            balance = to_decimal(balances.get(key, "0"), log)
            price = to_decimal(prices.get(key, "0"), log)
            if balance is None or price is None:
                log.debug(f"Missing balance or price for {key}, counting as 0")
                balance = balance or ZERO
                price = price or ZERO
            value = finite_or_zero(balance * price)
            breakdown[key] = value
            total += value

    return PortfolioValuation(
        total_value=total,
        breakdown=breakdown,
        formatted=format_currency(total),
    )


def percentage_change(current: Numeric, previous: Numeric) -> Decimal:
    """(current - previous) / previous * 100; 0 если previous == 0."""
    cur = to_decimal(current)
    prev = to_decimal(previous)
    if cur is None or prev is None or prev == 0:
        return ZERO
    with math_context():
        return (cur - prev) / prev * HUNDRED


def calculate_apy(reward_rate: Numeric, staking_period_days: Numeric) -> Decimal:
    """
    APY в процентах с ежедневным начислением.

    APY = ((1 + rate / period) ^ 365 - 1) * 100
    """
    rate = to_decimal(reward_rate)
    period = to_decimal(staking_period_days)
    if rate is None or period is None or rate <= 0 or period <= 0:
        return ZERO
    try:
        with math_context():
            daily_rate = rate / period
            return finite_or_zero(((ONE + daily_rate) ** DAYS_PER_YEAR - ONE) * HUNDRED)
    except ArithmeticError as e:
        logger.warning(f"APY overflow for rate={reward_rate!r}, period={staking_period_days!r}: {e}")
        return ZERO


def calculate_tvl(
    lp_tokens: Numeric,
    lp_token_price: Numeric,
    additional_assets: Iterable[Tuple[Numeric, Numeric]] = (),
) -> Decimal:
    """TVL: LP * цена LP + сумма (amount, price) дополнительных активов."""
    total = ZERO
    with math_context():
        for amount, price in [(lp_tokens, lp_token_price), *additional_assets]:
            a = to_decimal(amount)
            p = to_decimal(price)
            if a is None or p is None:
                continue
            total += a * p
    return total
