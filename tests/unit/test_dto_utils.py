"""Tests for DTO utility functions."""

from decimal import Decimal

from coffee_calculator.services.dto_utils import (
    cost_to_string,
    decimals_to_strings,
    percent_to_string,
)


class TestCostToString:
    """Tests for cost_to_string function."""

    def test_none_returns_zero(self):
        assert cost_to_string(None) == "0.00"

    def test_decimal_rounding(self):
        """Decimal values are rounded to 2 places using ROUND_HALF_UP."""
        assert cost_to_string(Decimal("34.855")) == "34.86"
        assert cost_to_string(Decimal("34.854")) == "34.85"
        assert cost_to_string(Decimal("0.8000")) == "0.80"

    def test_float_and_int(self):
        assert cost_to_string(12.3) == "12.30"
        assert cost_to_string(100) == "100.00"

    def test_negative_values(self):
        assert cost_to_string(Decimal("-1.545")) == "-1.55"


class TestPercentToString:
    def test_appends_sign(self):
        assert percent_to_string(Decimal("30.01")) == "30.01%"
        assert percent_to_string(None) == "0.00%"


class TestDecimalsToStrings:
    def test_keeps_stored_scale(self):
        result = decimals_to_strings(
            {
                "cost_per_base_unit": Decimal("0.8000"),
                "name": "Espresso Beans",
                "lines": [{"line_cost": Decimal("14.40")}],
                "counts": {"beans": 1},
            }
        )

        assert result == {
            "cost_per_base_unit": "0.8000",
            "name": "Espresso Beans",
            "lines": [{"line_cost": "14.40"}],
            "counts": {"beans": 1},
        }
