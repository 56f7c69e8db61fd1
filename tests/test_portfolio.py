"""
Tests for portfolio valuation and dashboard analytics.
"""

import pytest
from decimal import Decimal

from quote_engine.math.portfolio import (
    PortfolioValuation,
    calculate_apy,
    calculate_portfolio_value,
    calculate_tvl,
    percentage_change,
)


class TestPortfolioValue:

    def test_total_and_breakdown(self):
        valuation = calculate_portfolio_value(
            {"VC": "100", "BNB": "2"},
            {"VC": "0.5", "BNB": "300"},
        )

        assert valuation.total_value == Decimal("650")
        assert valuation.breakdown["VC"] == Decimal("50")
        assert valuation.breakdown["BNB"] == Decimal("600")
        assert valuation.breakdown["VG"] == 0
        assert valuation.breakdown["LP"] == 0
        assert valuation.formatted == "$650.00"

    def test_keys_case_insensitive(self):
        valuation = calculate_portfolio_value({"vc": "10"}, {"Vc": "2"})
        assert valuation.total_value == Decimal("20")

    def test_garbage_counts_as_zero(self):
        valuation = calculate_portfolio_value(
            {"VC": "abc", "VG": "5"},
            {"VC": "1", "VG": "NaN"},
        )
        assert valuation.total_value == 0
        assert valuation.formatted == "$0.00"

    def test_empty(self):
        valuation = calculate_portfolio_value({}, {})
        assert valuation == PortfolioValuation(
            total_value=Decimal(0),
            breakdown={"VC": 0, "VG": 0, "BNB": 0, "LP": 0},
            formatted="$0.00",
        )

    def test_large_value_formatted(self):
        valuation = calculate_portfolio_value({"LP": "1500"}, {"LP": "1000"})
        assert valuation.formatted == "$1.5M"

    def test_huge_values(self):
        valuation = calculate_portfolio_value({"VC": "1e40"}, {"VC": "1e40"})
        assert valuation.total_value == Decimal("1e80")
        assert valuation.formatted.startswith("$1")
        assert valuation.formatted.endswith("T")

    def test_custom_assets(self):
        valuation = calculate_portfolio_value({"USDT": "3"}, {"USDT": "1"}, assets=("USDT",))
        assert valuation.breakdown == {"USDT": Decimal(3)}


class TestPercentageChange:

    def test_increase(self):
        assert percentage_change("110", "100") == Decimal("10")

    def test_decrease(self):
        assert percentage_change("50", "100") == Decimal("-50")

    def test_zero_previous(self):
        assert percentage_change("0", "0") == 0
        assert percentage_change("5", "0") == 0

    def test_garbage(self):
        assert percentage_change("abc", "100") == 0


class TestAnalytics:

    def test_apy_positive(self):
        apy = calculate_apy("0.1", "365")
        # (1 + 0.1/365)^365 - 1 ≈ 10.5156%
        assert Decimal("10.51") < apy < Decimal("10.52")

    @pytest.mark.parametrize("rate,period", [("0", "365"), ("0.1", "0"), ("abc", "1")])
    def test_apy_invalid(self, rate, period):
        assert calculate_apy(rate, period) == 0

    def test_tvl(self):
        tvl = calculate_tvl("10", "2", [("100", "0.5"), ("1", "300")])
        assert tvl == Decimal("370")

    def test_tvl_skips_garbage(self):
        assert calculate_tvl("10", "2", [("abc", "1")]) == Decimal("20")
