"""
QuoteEngine - единая точка входа для UI.

Связывает чистые калькуляторы с EngineConfig (комиссия, ratio, divisor,
лимиты slippage) и внешним логгером. Своего состояния, кроме конфига,
не держит; резервы и балансы передаются в каждый вызов.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional

from config import DEFAULT_CONFIG, EngineConfig
from .math.liquidity import LiquidityQuote, WithdrawQuote, quote_deposit, quote_withdraw
from .math.numeric import Numeric
from .math.portfolio import PortfolioValuation, calculate_portfolio_value, percentage_change
from .math.price import PoolReserves, price_impact, quote_counterpart, COUNTERPART_PLACES_A
from .math.rewards import RewardQuote, estimate_reward_for_burn, estimate_reward_for_create
from .units import AmountFormatError, DecimalAmount, format_from_base_units, parse_to_base_units, truncate_to_decimals
from .utils import calculate_gas_with_buffer
from .validation import (
    ValidationResult,
    apply_slippage,
    validate_slippage,
    validate_slippage_bps,
    validate_token_amount,
)


@dataclass(frozen=True)
class DepositAmounts:
    """Суммы addLiquidity в wei: desired и min с учётом slippage."""
    amount_a_desired: int
    amount_b_desired: int
    amount_a_min: int
    amount_b_min: int


class QuoteEngine:
    """
    Калькуляторы с привязанной конфигурацией.

    Пример использования:
    ```python
    engine = QuoteEngine(load_engine_config())
    quote = engine.quote_deposit("100", "0.1", reserves, total_lp_supply)
    if quote.is_valid:
        amounts = engine.deposit_transaction_amounts(quote)
    ```
    """

    def __init__(self, config: Optional[EngineConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or DEFAULT_CONFIG
        self.logger = logger or logging.getLogger(__name__)

    # ── Price ─────────────────────────────────────────────────────────

    def quote_counterpart(
        self,
        amount_in: Numeric,
        reserve_in: Numeric,
        reserve_out: Numeric,
        places: int = COUNTERPART_PLACES_A,
        is_loaded: bool = True,
    ) -> Optional[Decimal]:
        return quote_counterpart(amount_in, reserve_in, reserve_out, places, is_loaded, log=self.logger)

    def price_impact(self, amount_in: Numeric, reserve_in: Numeric, reserve_out: Numeric) -> Decimal:
        return price_impact(amount_in, reserve_in, reserve_out, self.config.swap_fee, log=self.logger)

    # ── Liquidity ─────────────────────────────────────────────────────

    def quote_deposit(
        self,
        amount_a: Numeric,
        amount_b: Numeric,
        reserves: PoolReserves,
        total_lp_supply: Numeric = "0",
    ) -> LiquidityQuote:
        return quote_deposit(amount_a, amount_b, reserves, total_lp_supply, log=self.logger)

    def quote_withdraw(self, lp_amount: Numeric, reserves: PoolReserves, total_lp_supply: Numeric) -> WithdrawQuote:
        return quote_withdraw(lp_amount, reserves, total_lp_supply, log=self.logger)

    # ── Rewards ───────────────────────────────────────────────────────

    def reward_for_create(self, amount_a: Numeric, amount_b: Numeric) -> RewardQuote:
        return estimate_reward_for_create(
            amount_a, amount_b, self.config.lp_divisor, self.config.reward_ratio, log=self.logger,
        )

    def reward_for_burn(self, lp_amount: Numeric) -> RewardQuote:
        return estimate_reward_for_burn(lp_amount, self.config.reward_ratio, log=self.logger)

    # ── Portfolio ─────────────────────────────────────────────────────

    def portfolio_value(self, balances: Mapping[str, Numeric], prices: Mapping[str, Numeric]) -> PortfolioValuation:
        return calculate_portfolio_value(balances, prices, log=self.logger)

    @staticmethod
    def percentage_change(current: Numeric, previous: Numeric) -> Decimal:
        return percentage_change(current, previous)

    # ── Validation ────────────────────────────────────────────────────

    def validate_amount(self, amount: str, max_amount: Optional[Numeric] = None) -> ValidationResult:
        return validate_token_amount(
            amount,
            max_amount=max_amount,
            ceiling=self.config.max_transaction_value,
            max_length=self.config.max_input_length,
        )

    def validate_slippage(self, slippage_percent: Numeric) -> ValidationResult:
        return validate_slippage(
            slippage_percent,
            min_percent=self.config.min_slippage,
            max_percent=self.config.max_slippage,
            warning_percent=self.config.slippage_warning,
        )

    def validate_slippage_bps(self, slippage_bps: int) -> ValidationResult:
        return validate_slippage_bps(slippage_bps, self.config.min_slippage_bps, self.config.max_slippage_bps)

    # ── Transaction boundary ──────────────────────────────────────────

    def to_base_units(self, amount: str, decimals: Optional[int] = None) -> int:
        """Строго: AmountFormatError на любом некорректном входе."""
        try:
            return parse_to_base_units(amount, self.config.token_decimals if decimals is None else decimals)
        except AmountFormatError as e:
            self.logger.error(f"Rejected transaction amount: {e}")
            raise

    def from_base_units(self, value: int, decimals: Optional[int] = None) -> str:
        return format_from_base_units(value, self.config.token_decimals if decimals is None else decimals)

    def gas_limit(self, estimate: int) -> int:
        return calculate_gas_with_buffer(estimate, self.config.gas_buffer_percent)

    def min_amount_out(self, amount: int, slippage_bps: Optional[int] = None) -> int:
        bps = self.config.default_slippage_bps if slippage_bps is None else slippage_bps
        return apply_slippage(amount, bps)

    def deposit_transaction_amounts(
        self,
        quote: LiquidityQuote,
        slippage_bps: Optional[int] = None,
        decimals_a: Optional[int] = None,
        decimals_b: Optional[int] = None,
    ) -> DepositAmounts:
        """
        LiquidityQuote -> суммы addLiquidity в wei.

        Raises:
            AmountFormatError: если котировка невалидна или сумма нулевая
            ValueError: если slippage вне лимитов LP-стейкинга
        """
        if not quote.is_valid:
            raise AmountFormatError(quote, quote.error or "quote is not valid")

        bps = self.config.default_slippage_bps if slippage_bps is None else slippage_bps
        check = self.validate_slippage_bps(bps)
        if not check.is_valid:
            raise ValueError(check.error)

        dec_a = self.config.token_decimals if decimals_a is None else decimals_a
        dec_b = self.config.token_decimals if decimals_b is None else decimals_b

        desired_a = DecimalAmount.from_decimal(truncate_to_decimals(quote.amount_a, dec_a), dec_a)
        desired_b = DecimalAmount.from_decimal(truncate_to_decimals(quote.amount_b, dec_b), dec_b)
        amount_a = self.to_base_units(desired_a.value, dec_a)
        amount_b = self.to_base_units(desired_b.value, dec_b)

        return DepositAmounts(
            amount_a_desired=amount_a,
            amount_b_desired=amount_b,
            amount_a_min=apply_slippage(amount_a, bps),
            amount_b_min=apply_slippage(amount_b, bps),
        )
