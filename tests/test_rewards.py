"""
Tests for VG reward estimates (create / burn).
"""

import pytest
from decimal import Decimal

from quote_engine.math.rewards import (
    RewardMode,
    estimate_reward,
    estimate_reward_for_burn,
    estimate_reward_for_create,
    lp_accounting_value,
)


class TestLpAccountingValue:

    def test_basic(self):
        # sqrt(100 * 0.1) / 1000
        value = lp_accounting_value("100", "0.1", "1000")
        assert abs(value - Decimal("0.0031622776601683793")) < Decimal("1e-15")

    def test_invalid(self):
        assert lp_accounting_value("0", "1", "1000") is None
        assert lp_accounting_value("1", "1", "0") is None
        assert lp_accounting_value("abc", "1", "1000") is None


class TestRewardForCreate:

    def test_example(self):
        quote = estimate_reward_for_create("100", "0.1", lp_divisor=1000, reward_ratio=10)

        assert quote.is_valid
        assert str(quote.expected_reward) == "0.03"
        assert quote.lp_accounting_value == Decimal("0.003162")
        assert quote.lp_tokens_used == 0
        assert quote.ratio == Decimal(10)
        assert quote.mode is RewardMode.CREATE

    def test_divisor_is_applied(self):
        small = estimate_reward_for_create("100", "0.1", lp_divisor=1000, reward_ratio=10)
        big = estimate_reward_for_create("100", "0.1", lp_divisor=1, reward_ratio=10)
        assert big.expected_reward == Decimal("31.62")
        assert big.expected_reward > small.expected_reward

    def test_invalid_amount(self):
        quote = estimate_reward_for_create("", "0.1", lp_divisor=1000, reward_ratio=10)
        assert not quote.is_valid
        assert quote.error == "Please enter a valid amount"
        assert quote.expected_reward == 0

    def test_ratio_not_configured(self):
        quote = estimate_reward_for_create("100", "0.1", lp_divisor=1000, reward_ratio=None)
        assert not quote.is_valid
        assert quote.error == "Reward ratio is not configured"

    def test_negative_ratio(self):
        quote = estimate_reward_for_create("100", "0.1", lp_divisor=1000, reward_ratio="-1")
        assert not quote.is_valid


class TestRewardForBurn:

    def test_basic(self):
        quote = estimate_reward_for_burn("5", reward_ratio=10)

        assert quote.is_valid
        assert str(quote.expected_reward) == "50.00"
        assert quote.lp_tokens_used == Decimal("5")
        assert quote.lp_accounting_value == 0
        assert quote.mode is RewardMode.BURN

    def test_rounding(self):
        quote = estimate_reward_for_burn("0.0125", reward_ratio=1)
        assert str(quote.expected_reward) == "0.01"

    @pytest.mark.parametrize("lp", ["0", "-1", "", None])
    def test_invalid_lp(self, lp):
        quote = estimate_reward_for_burn(lp, reward_ratio=10)
        assert not quote.is_valid


class TestEstimateReward:

    def test_dispatch_create(self):
        quote = estimate_reward("create", "100", "0.1", lp_divisor=1000, reward_ratio=10)
        assert quote.mode is RewardMode.CREATE
        assert str(quote.expected_reward) == "0.03"

    def test_dispatch_burn_ignores_b(self):
        quote = estimate_reward(RewardMode.BURN, "5", "999", lp_divisor=1000, reward_ratio=10)
        assert quote.mode is RewardMode.BURN
        assert quote.expected_reward == Decimal("50")

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            estimate_reward("stake", "1", lp_divisor=1000, reward_ratio=10)
