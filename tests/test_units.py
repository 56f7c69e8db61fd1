"""
Tests for the transaction boundary: display amounts <-> base units.
"""

import pytest
from decimal import Decimal

from quote_engine.units import (
    AmountFormatError,
    BaseUnitAmount,
    DecimalAmount,
    format_from_base_units,
    parse_to_base_units,
    truncate_to_decimals,
)


class TestParseToBaseUnits:

    @pytest.mark.parametrize("value,decimals,expected", [
        ("1", 18, 10**18),
        ("1.5", 18, 1_500_000_000_000_000_000),
        (".5", 18, 5 * 10**17),
        ("1.", 18, 10**18),
        ("0.000000000000000001", 18, 1),
        ("12.34", 6, 12_340_000),
        ("7", 0, 7),
    ])
    def test_exact(self, value, decimals, expected):
        assert parse_to_base_units(value, decimals) == expected

    def test_strips_whitespace(self):
        assert parse_to_base_units(" 2 ") == 2 * 10**18

    @pytest.mark.parametrize("value", ["", "   ", "abc", "1e18", "-1", "+1", "1.2.3", "1,5", "NaN", "Infinity"])
    def test_malformed(self, value):
        with pytest.raises(AmountFormatError):
            parse_to_base_units(value)

    @pytest.mark.parametrize("value", ["0", "0.0", ".000"])
    def test_zero_rejected(self, value):
        with pytest.raises(AmountFormatError) as exc_info:
            parse_to_base_units(value)
        assert "greater than zero" in exc_info.value.reason

    @pytest.mark.parametrize("value", ["١٢", "１", "1.٥", "۳"])
    def test_non_ascii_digits_rejected(self, value):
        with pytest.raises(AmountFormatError):
            parse_to_base_units(value, 18)

    def test_too_many_decimals(self):
        with pytest.raises(AmountFormatError):
            parse_to_base_units("1.0000000000000000001", 18)
        with pytest.raises(AmountFormatError):
            parse_to_base_units("1.1234567", 6)

    def test_non_string(self):
        with pytest.raises(AmountFormatError):
            parse_to_base_units(1.5)

    def test_too_long(self):
        with pytest.raises(AmountFormatError):
            parse_to_base_units("1" * 200)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            parse_to_base_units("abc")

    def test_error_carries_value(self):
        with pytest.raises(AmountFormatError) as exc_info:
            parse_to_base_units("abc")
        assert exc_info.value.value == "abc"
        assert "abc" in str(exc_info.value)

    def test_bad_decimals(self):
        with pytest.raises(TypeError):
            parse_to_base_units("1", "18")
        with pytest.raises(ValueError):
            parse_to_base_units("1", -1)

    def test_accepts_decimal_amount(self):
        assert parse_to_base_units(DecimalAmount("0.25")) == 25 * 10**16


class TestFormatFromBaseUnits:

    @pytest.mark.parametrize("value,decimals,expected", [
        (10**18, 18, "1.0"),
        (5 * 10**17, 18, "0.5"),
        (0, 18, "0.0"),
        (1, 18, "0.000000000000000001"),
        (-2_250_000_000_000_000_000, 18, "-2.25"),
        (12_340_000, 6, "12.34"),
        (5, 0, "5.0"),
    ])
    def test_values(self, value, decimals, expected):
        assert format_from_base_units(value, decimals) == expected

    @pytest.mark.parametrize("value", ["100", 1.5, None, True])
    def test_non_int_is_zero(self, value):
        assert format_from_base_units(value) == "0"

    def test_bad_decimals_is_zero(self):
        assert format_from_base_units(100, 100) == "0"

    def test_exact_inverse(self):
        wei = 123_456_789_012_345_678_901
        assert parse_to_base_units(format_from_base_units(wei)) == wei


class TestBaseUnitAmount:

    def test_int_only(self):
        with pytest.raises(TypeError):
            BaseUnitAmount("100")
        with pytest.raises(TypeError):
            BaseUnitAmount(1.0)

    def test_non_negative(self):
        with pytest.raises(ValueError):
            BaseUnitAmount(-1)

    def test_display(self):
        amount = BaseUnitAmount(15 * 10**17)
        assert amount.to_display() == "1.5"
        assert int(amount) == 15 * 10**17

    def test_to_decimal_amount(self):
        assert BaseUnitAmount(10**18).to_decimal_amount() == DecimalAmount("1.0")


class TestDecimalAmount:

    def test_parse(self):
        amount = DecimalAmount.parse(" 1.5 ")
        assert amount.value == "1.5"
        assert amount.as_decimal() == Decimal("1.5")
        assert str(amount) == "1.5"

    def test_parse_rejects_zero(self):
        with pytest.raises(AmountFormatError):
            DecimalAmount.parse("0")

    def test_parse_rejects_excess_precision(self):
        with pytest.raises(AmountFormatError):
            DecimalAmount.parse("0.1234567", decimals=6)

    def test_constructor_rejects_garbage(self):
        with pytest.raises(AmountFormatError):
            DecimalAmount("1e5")

    def test_constructor_rejects_trailing_newline(self):
        with pytest.raises(AmountFormatError):
            DecimalAmount("1\n")

    def test_constructor_rejects_non_ascii_digits(self):
        with pytest.raises(AmountFormatError):
            DecimalAmount("١٢")

    def test_parse_rejects_fullwidth_digit(self):
        with pytest.raises(AmountFormatError):
            DecimalAmount.parse("１")

    def test_from_decimal(self):
        amount = DecimalAmount.from_decimal(Decimal("100.000000"))
        assert amount.value == "100.000000"

    def test_from_decimal_rejects_nan(self):
        with pytest.raises(AmountFormatError):
            DecimalAmount.from_decimal(Decimal("NaN"))

    def test_to_base_units(self):
        base = DecimalAmount("2.5", decimals=6).to_base_units()
        assert base == BaseUnitAmount(2_500_000, 6)


class TestTruncateToDecimals:

    def test_rounds_down(self):
        assert truncate_to_decimals(Decimal("1.99999999"), 6) == Decimal("1.999999")

    def test_pads(self):
        assert str(truncate_to_decimals(Decimal("1"), 2)) == "1.00"

    def test_huge_value(self):
        assert truncate_to_decimals(Decimal("1e50"), 18) == Decimal("1e50")

    def test_non_finite(self):
        assert truncate_to_decimals(Decimal("NaN")) is None
        assert truncate_to_decimals("1.5") is None
