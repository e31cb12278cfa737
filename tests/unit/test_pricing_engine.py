"""Unit tests for the pricing engine arithmetic.

Tests cover:
- Cost per base unit and its zero fallbacks
- Line cost and total cost aggregation
- Margin pricing, including the infeasible-margin fallback
- Expense per item, daily figures and break-even units
- Net pricing with and without allocated overhead
"""

from decimal import Decimal

import pytest

from coffee_calculator.services import pricing_engine
from coffee_calculator.services.pricing_engine import MarginPricing


class TestCostPerBaseUnit:
    """Tests for calculate_cost_per_base_unit."""

    def test_pack_price_divided_by_pack_size(self):
        assert pricing_engine.calculate_cost_per_base_unit(
            Decimal("1000"), Decimal("800")
        ) == Decimal("0.8000")

    def test_rounds_half_up_to_four_places(self):
        # 100 / 3 = 33.33333...
        assert pricing_engine.calculate_cost_per_base_unit(
            Decimal("3"), Decimal("100")
        ) == Decimal("33.3333")
        # 1 / 20000 = 0.00005
        assert pricing_engine.calculate_cost_per_base_unit(
            Decimal("20000"), Decimal("1")
        ) == Decimal("0.0001")

    @pytest.mark.parametrize(
        "pack_size, pack_price",
        [
            (Decimal("0"), Decimal("800")),
            (Decimal("-5"), Decimal("800")),
            (None, Decimal("800")),
            (Decimal("1000"), None),
        ],
    )
    def test_unpriceable_pack_is_zero(self, pack_size, pack_price):
        assert pricing_engine.calculate_cost_per_base_unit(pack_size, pack_price) == Decimal("0")


class TestLineAndTotalCost:
    """Tests for calculate_line_cost and calculate_total_cost."""

    def test_line_cost(self):
        assert pricing_engine.calculate_line_cost(Decimal("0.8"), Decimal("18")) == Decimal("14.40")

    def test_line_cost_rounds_half_up(self):
        # 0.0125 * 2 = 0.025
        assert pricing_engine.calculate_line_cost(Decimal("0.0125"), Decimal("2")) == Decimal("0.03")

    def test_line_cost_missing_operand_is_zero(self):
        assert pricing_engine.calculate_line_cost(None, Decimal("18")) == Decimal("0")
        assert pricing_engine.calculate_line_cost(Decimal("0.8"), None) == Decimal("0")

    def test_total_cost_sums_lines(self):
        lines = [(Decimal("0.8000"), Decimal("18")), (Decimal("0.0500"), Decimal("200"))]
        assert pricing_engine.calculate_total_cost(lines) == Decimal("24.40")

    def test_total_cost_skips_incomplete_lines(self):
        lines = [
            (Decimal("0.8000"), Decimal("18")),
            (None, Decimal("200")),
            (Decimal("0.0500"), None),
        ]
        assert pricing_engine.calculate_total_cost(lines) == Decimal("14.40")

    def test_total_cost_of_nothing_is_zero(self):
        assert pricing_engine.calculate_total_cost([]) == Decimal("0")


class TestMarginPricing:
    """Tests for margin_fraction, price_at_margin and calculate_margin_pricing."""

    def test_reference_latte(self):
        """24.40 at 30% sells for 34.86 with a 30.01% achieved margin."""
        pricing = pricing_engine.calculate_margin_pricing(Decimal("24.40"), Decimal("30"))

        assert pricing == MarginPricing(
            suggested_selling_price=Decimal("34.86"),
            gross_profit=Decimal("10.46"),
            actual_margin_percent=Decimal("30.01"),
        )

    def test_margin_fraction_rounds_to_four_places(self):
        assert pricing_engine.margin_fraction(Decimal("30")) == Decimal("0.3000")
        assert pricing_engine.margin_fraction(Decimal("33.335")) == Decimal("0.3334")

    def test_margin_of_hundred_prices_at_cost(self):
        pricing = pricing_engine.price_at_margin(Decimal("24.40"), Decimal("100"))

        assert pricing.suggested_selling_price == Decimal("24.40")
        assert pricing.gross_profit == Decimal("0")
        assert pricing.actual_margin_percent == Decimal("0")

    def test_margin_rounding_to_one_prices_at_cost(self):
        """99.999% rounds to a 1.0000 fraction, leaving no divisor."""
        pricing = pricing_engine.calculate_margin_pricing(Decimal("24.40"), Decimal("99.999"))

        assert pricing.suggested_selling_price == Decimal("24.40")
        assert pricing.gross_profit == Decimal("0")

    def test_zero_price_leaves_actual_margin_unset(self):
        pricing = pricing_engine.price_at_margin(Decimal("0"), Decimal("30"))

        assert pricing.suggested_selling_price == Decimal("0.00")
        assert pricing.actual_margin_percent is None

    @pytest.mark.parametrize(
        "total_cost, margin",
        [
            (Decimal("0"), Decimal("30")),
            (Decimal("-1"), Decimal("30")),
            (None, Decimal("30")),
            (Decimal("24.40"), Decimal("0")),
            (Decimal("24.40"), Decimal("-10")),
            (Decimal("24.40"), None),
        ],
    )
    def test_guard_returns_none(self, total_cost, margin):
        assert pricing_engine.calculate_margin_pricing(total_cost, margin) is None


class TestExpenseAllocation:
    """Tests for the overhead helpers."""

    def test_expense_per_item(self):
        assert pricing_engine.calculate_expense_per_item(Decimal("30000"), 6000) == Decimal("5.0000")
        assert pricing_engine.calculate_expense_per_item(Decimal("10000"), 3000) == Decimal("3.3333")

    def test_expense_per_item_without_sales_is_zero(self):
        assert pricing_engine.calculate_expense_per_item(Decimal("30000"), 0) == Decimal("0")
        assert pricing_engine.calculate_expense_per_item(Decimal("30000"), None) == Decimal("0")

    def test_daily_expense(self):
        assert pricing_engine.calculate_daily_expense(Decimal("30000"), 26) == Decimal("1153.85")
        assert pricing_engine.calculate_daily_expense(Decimal("30000"), 0) == Decimal("0")

    def test_expected_daily_sales_floors(self):
        assert pricing_engine.calculate_expected_daily_sales(6000, 26) == 230
        assert pricing_engine.calculate_expected_daily_sales(6000, 0) == 0

    def test_break_even_rounds_up(self):
        assert pricing_engine.calculate_break_even_units(Decimal("30000"), Decimal("7")) == 4286
        assert pricing_engine.calculate_break_even_units(Decimal("30000"), Decimal("5")) == 6000

    def test_break_even_without_profit_is_zero(self):
        assert pricing_engine.calculate_break_even_units(Decimal("30000"), Decimal("0")) == 0
        assert pricing_engine.calculate_break_even_units(Decimal("30000"), Decimal("-2")) == 0
        assert pricing_engine.calculate_break_even_units(Decimal("30000"), None) == 0


class TestNetPricing:
    """Tests for calculate_net_pricing and calculate_final_selling_price."""

    def test_reference_latte_with_overhead(self):
        net = pricing_engine.calculate_net_pricing(
            total_cost=Decimal("24.40"),
            gross_profit=Decimal("10.46"),
            suggested_selling_price=Decimal("34.86"),
            target_margin_percent=Decimal("30"),
            allocated_expense_per_item=Decimal("5.0000"),
        )

        assert net.net_profit == Decimal("5.46")
        assert net.net_margin_percent == Decimal("15.66")
        assert net.final_selling_price == Decimal("42.00")

    def test_missing_allocation_counts_as_zero(self):
        net = pricing_engine.calculate_net_pricing(
            Decimal("24.40"), Decimal("10.46"), Decimal("34.86"), Decimal("30"), None
        )

        assert net.allocated_expense_per_item == Decimal("0")
        assert net.net_profit == Decimal("10.46")
        assert net.net_margin_percent == Decimal("30.01")
        assert net.final_selling_price == Decimal("34.86")

    def test_overhead_above_gross_profit_goes_negative(self):
        net = pricing_engine.calculate_net_pricing(
            Decimal("24.40"), Decimal("10.46"), Decimal("34.86"), Decimal("30"), Decimal("12")
        )

        assert net.net_profit == Decimal("-1.54")
        assert net.net_margin_percent == Decimal("-4.42")

    def test_zero_price_gives_zero_net_margin(self):
        net = pricing_engine.calculate_net_pricing(
            Decimal("0"), Decimal("0"), Decimal("0"), Decimal("30"), Decimal("2")
        )

        assert net.net_margin_percent == Decimal("0")

    def test_final_price_without_margin_is_suggested_price(self):
        assert pricing_engine.calculate_final_selling_price(
            Decimal("24.40"), Decimal("34.86"), None, Decimal("5")
        ) == Decimal("34.86")

    def test_final_price_at_full_margin_is_cost_plus_overhead(self):
        assert pricing_engine.calculate_final_selling_price(
            Decimal("24.40"), Decimal("24.40"), Decimal("100"), Decimal("5")
        ) == Decimal("29.40")
