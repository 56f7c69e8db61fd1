"""
Tests for the QuoteEngine facade.
"""

import logging
import pytest
from decimal import Decimal

from config import EngineConfig
from quote_engine import AmountFormatError, DepositAmounts, QuoteEngine
from quote_engine.math.liquidity import LiquidityQuote
from quote_engine.math.price import PoolReserves


class TestQuotes:

    def test_counterpart(self, engine):
        assert str(engine.quote_counterpart("1", 10, 1000)) == "100.0000"

    def test_price_impact_uses_config_fee(self):
        default = QuoteEngine().price_impact("1", 10, 1000)
        no_fee = QuoteEngine(EngineConfig(swap_fee=Decimal(0))).price_impact("1", 10, 1000)
        assert no_fee > default

    def test_deposit_and_withdraw(self, engine, reserves):
        deposit = engine.quote_deposit("100", "0.1", reserves, "100")
        withdraw = engine.quote_withdraw(deposit.lp_tokens_to_receive, reserves, "100")

        assert deposit.is_valid
        assert withdraw.amount_a == Decimal("100")
        assert withdraw.amount_b == Decimal("0.1")

    def test_default_config(self):
        engine = QuoteEngine()
        assert engine.config == EngineConfig()


class TestRewards:

    def test_create_uses_config(self, engine):
        assert str(engine.reward_for_create("100", "0.1").expected_reward) == "0.03"

    def test_custom_ratio(self):
        engine = QuoteEngine(EngineConfig(reward_ratio=Decimal(20)))
        assert engine.reward_for_burn("1").expected_reward == Decimal("20")

    def test_custom_divisor(self):
        engine = QuoteEngine(EngineConfig(lp_divisor=Decimal(1)))
        assert engine.reward_for_create("100", "0.1").expected_reward == Decimal("31.62")


class TestPortfolio:

    def test_portfolio_value(self, engine):
        valuation = engine.portfolio_value({"VC": "10"}, {"VC": "1.25"})
        assert valuation.formatted == "$12.50"

    def test_percentage_change(self, engine):
        assert engine.percentage_change(0, 0) == 0


class TestValidation:

    def test_amount_ceiling_from_config(self):
        engine = QuoteEngine(EngineConfig(max_transaction_value=Decimal(10)))
        assert engine.validate_amount("5").is_valid
        assert engine.validate_amount("11").error == "Amount too large"

    def test_slippage(self, engine):
        assert engine.validate_slippage(10).warning is not None
        assert not engine.validate_slippage(60).is_valid

    def test_slippage_bps_limits_from_config(self):
        engine = QuoteEngine(EngineConfig(min_slippage_bps=100, max_slippage_bps=200))
        assert not engine.validate_slippage_bps(50).is_valid
        assert engine.validate_slippage_bps(150).is_valid


class TestTransactionBoundary:

    def test_to_base_units(self, engine):
        assert engine.to_base_units("1.5") == 15 * 10**17
        assert engine.to_base_units("1.5", decimals=6) == 1_500_000

    def test_to_base_units_logs_and_raises(self, engine, caplog):
        with caplog.at_level(logging.ERROR, logger="tests.engine"):
            with pytest.raises(AmountFormatError):
                engine.to_base_units("abc")
        assert "Rejected transaction amount" in caplog.text

    def test_from_base_units(self, engine):
        assert engine.from_base_units(10**18) == "1.0"

    def test_gas_limit(self):
        engine = QuoteEngine(EngineConfig(gas_buffer_percent=150))
        assert engine.gas_limit(100000) == 150000

    def test_min_amount_out_default(self, engine):
        assert engine.min_amount_out(10**18) == 9 * 10**17

    def test_min_amount_out_explicit(self, engine):
        assert engine.min_amount_out(10000, 50) == 9950


class TestDepositTransactionAmounts:

    def test_amounts(self, engine, reserves):
        quote = engine.quote_deposit("100", "0.1", reserves, "100")
        amounts = engine.deposit_transaction_amounts(quote)

        assert amounts == DepositAmounts(
            amount_a_desired=100 * 10**18,
            amount_b_desired=10**17,
            amount_a_min=90 * 10**18,
            amount_b_min=9 * 10**16,
        )

    def test_explicit_slippage(self, engine, reserves):
        quote = engine.quote_deposit("100", "0.1", reserves, "100")
        amounts = engine.deposit_transaction_amounts(quote, slippage_bps=50)

        assert amounts.amount_a_min == 995 * 10**17

    def test_truncates_to_token_decimals(self, engine):
        quote = LiquidityQuote(
            amount_a=Decimal("1.123456"),
            amount_b=Decimal("0.5"),
            lp_tokens_to_receive=Decimal("1"),
            price_impact_percent=Decimal(0),
            pool_share_percent=Decimal(100),
            is_valid=True,
        )
        amounts = engine.deposit_transaction_amounts(quote, decimals_a=2)
        assert amounts.amount_a_desired == 112

    def test_invalid_quote_raises(self, engine):
        with pytest.raises(AmountFormatError):
            engine.deposit_transaction_amounts(LiquidityQuote.invalid("Please enter a valid amount"))

    def test_slippage_out_of_range(self, engine, reserves):
        quote = engine.quote_deposit("100", "0.1", reserves, "100")
        with pytest.raises(ValueError):
            engine.deposit_transaction_amounts(quote, slippage_bps=2000)

    def test_zero_after_truncation_raises(self, engine):
        quote = LiquidityQuote(
            amount_a=Decimal("0.001"),
            amount_b=Decimal("1"),
            lp_tokens_to_receive=Decimal("1"),
            price_impact_percent=Decimal(0),
            pool_share_percent=Decimal(100),
            is_valid=True,
        )
        with pytest.raises(AmountFormatError):
            engine.deposit_transaction_amounts(quote, decimals_a=2)

    def test_unloaded_pool_never_reaches_chain(self, engine):
        quote = engine.quote_deposit("100", "0.1", PoolReserves.unavailable(), "100")
        with pytest.raises(AmountFormatError):
            engine.deposit_transaction_amounts(quote)
