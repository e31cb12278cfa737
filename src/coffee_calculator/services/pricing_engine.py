"""
Pricing engine: the pure arithmetic behind ingredient, recipe and overhead pricing.

This module provides functions for:
- Cost per base unit of an ingredient pack
- Line cost of an ingredient at a quantity, and recipe total cost
- Margin-based selling price, gross profit and achieved margin
- Overhead allocation per item and the overhead-inclusive final price
- Daily expense, expected daily sales and break-even units

Transaction boundary: Pure computation (no database access). Models call
into these functions to keep their derived columns current; services use
them directly for transient what-if results.

All arithmetic is Decimal with ROUND_HALF_UP at the scale each field
defines. Division-prone inputs (zero pack size, zero sales, zero days, a
margin that consumes the whole price) degrade to zero or a stated fallback
instead of raising.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple

from coffee_calculator.utils.constants import (
    EXPENSE_PER_ITEM_SCALE,
    HUNDRED,
    MARGIN_FRACTION_SCALE,
    MONEY_SCALE,
    ONE,
    PERCENT_SCALE,
    RATIO_SCALE,
    UNIT_COST_SCALE,
    ZERO,
)


@dataclass(frozen=True)
class MarginPricing:
    """Result of pricing a recipe cost at a target margin.

    Attributes:
        suggested_selling_price: Price that yields the target margin
        gross_profit: suggested_selling_price - total_cost
        actual_margin_percent: Margin achieved after rounding; None when the
            price is zero and the margin cannot be computed
    """

    suggested_selling_price: Decimal
    gross_profit: Decimal
    actual_margin_percent: Optional[Decimal]


@dataclass(frozen=True)
class NetPricing:
    """Result of folding allocated overhead into a recipe's pricing.

    Attributes:
        allocated_expense_per_item: Overhead charged to each item sold
        net_profit: gross_profit - allocated_expense_per_item
        net_margin_percent: net_profit as a percentage of the selling price
        final_selling_price: Price covering ingredients, overhead and margin
    """

    allocated_expense_per_item: Decimal
    net_profit: Decimal
    net_margin_percent: Decimal
    final_selling_price: Decimal


def round_half_up(value: Decimal, scale: Decimal) -> Decimal:
    """Quantize value to scale (e.g. Decimal("0.01")) using ROUND_HALF_UP."""
    return value.quantize(scale, rounding=ROUND_HALF_UP)


def _ratio_percent(numerator: Decimal, denominator: Decimal) -> Decimal:
    # ratio rounded to 4 places first, then expressed as a 2-place percent
    ratio = round_half_up(numerator / denominator, RATIO_SCALE)
    return round_half_up(ratio * HUNDRED, PERCENT_SCALE)


# ============================================================================
# Unit, line and recipe cost
# ============================================================================


def calculate_cost_per_base_unit(
    pack_size: Optional[Decimal], pack_price: Optional[Decimal]
) -> Decimal:
    """Cost of one base unit (g, ml, pc, ...) of an ingredient pack.

    Args:
        pack_size: Pack size in base units
        pack_price: Price paid for the pack

    Returns:
        pack_price / pack_size at 4 places, or 0 if the ingredient cannot be
        priced yet (missing price, missing or non-positive size)

    Examples:
        >>> calculate_cost_per_base_unit(Decimal("1000"), Decimal("800"))
        Decimal('0.8000')
        >>> calculate_cost_per_base_unit(Decimal("0"), Decimal("800"))
        Decimal('0')
    """
    if pack_size is None or pack_size <= 0 or pack_price is None:
        return ZERO
    return round_half_up(pack_price / pack_size, UNIT_COST_SCALE)


def calculate_line_cost(
    cost_per_base_unit: Optional[Decimal], quantity: Optional[Decimal]
) -> Decimal:
    """Cost of one recipe line: unit cost times quantity at 2 places, or 0.

    Examples:
        >>> calculate_line_cost(Decimal("0.8"), Decimal("18"))
        Decimal('14.40')
    """
    if cost_per_base_unit is None or quantity is None:
        return ZERO
    return round_half_up(cost_per_base_unit * quantity, MONEY_SCALE)


def calculate_total_cost(
    lines: Iterable[Tuple[Optional[Decimal], Optional[Decimal]]]
) -> Decimal:
    """Sum the line costs of (cost_per_base_unit, quantity) pairs.

    Pairs with a missing operand are skipped. The total is always rebuilt
    from the full collection.
    """
    total = ZERO
    for cost_per_base_unit, quantity in lines:
        if cost_per_base_unit is None or quantity is None:
            continue
        total += calculate_line_cost(cost_per_base_unit, quantity)
    return total


# ============================================================================
# Margin pricing
# ============================================================================


def margin_fraction(target_margin_percent: Decimal) -> Decimal:
    """Target margin percent as a fraction rounded to 4 places (30 -> 0.3000)."""
    return round_half_up(target_margin_percent / HUNDRED, MARGIN_FRACTION_SCALE)


def price_at_margin(total_cost: Decimal, target_margin_percent: Decimal) -> MarginPricing:
    """Price a cost at a margin without the positivity guard.

    Selling Price = Cost / (1 - Margin). A margin that consumes the whole
    price (divisor <= 0) is infeasible and is priced at cost with zero
    profit and zero margin.
    """
    divisor = ONE - margin_fraction(target_margin_percent)

    if divisor <= 0:
        return MarginPricing(
            suggested_selling_price=total_cost,
            gross_profit=ZERO,
            actual_margin_percent=ZERO,
        )

    selling_price = round_half_up(total_cost / divisor, MONEY_SCALE)
    gross_profit = round_half_up(selling_price - total_cost, MONEY_SCALE)

    actual_margin = None
    if selling_price > 0:
        actual_margin = _ratio_percent(gross_profit, selling_price)

    return MarginPricing(
        suggested_selling_price=selling_price,
        gross_profit=gross_profit,
        actual_margin_percent=actual_margin,
    )


def calculate_margin_pricing(
    total_cost: Optional[Decimal], target_margin_percent: Optional[Decimal]
) -> Optional[MarginPricing]:
    """Suggested selling price, gross profit and actual margin for a recipe.

    Args:
        total_cost: Recipe ingredient cost
        target_margin_percent: Desired margin as a percent of selling price

    Returns:
        MarginPricing, or None when cost or margin is missing or not
        positive. Callers keep their prior values in that case.

    Examples:
        >>> calculate_margin_pricing(Decimal("24.40"), Decimal("30"))
        MarginPricing(suggested_selling_price=Decimal('34.86'), gross_profit=Decimal('10.46'), actual_margin_percent=Decimal('30.01'))
    """
    if total_cost is None or total_cost <= 0:
        return None
    if target_margin_percent is None or target_margin_percent <= 0:
        return None
    return price_at_margin(total_cost, target_margin_percent)


# ============================================================================
# Expense allocation
# ============================================================================


def calculate_expense_per_item(
    total_monthly_expenses: Optional[Decimal], expected_monthly_sales: Optional[int]
) -> Decimal:
    """Overhead allocated to each item: monthly expenses / monthly sales at 4 places."""
    if expected_monthly_sales is None or expected_monthly_sales <= 0:
        return ZERO
    if total_monthly_expenses is None:
        return ZERO
    return round_half_up(
        total_monthly_expenses / Decimal(expected_monthly_sales), EXPENSE_PER_ITEM_SCALE
    )


def calculate_daily_expense(
    total_monthly_expenses: Optional[Decimal], working_days_per_month: Optional[int]
) -> Decimal:
    """Monthly expenses spread over working days at 2 places, or 0."""
    if not working_days_per_month or working_days_per_month <= 0:
        return ZERO
    if total_monthly_expenses is None:
        return ZERO
    return round_half_up(
        total_monthly_expenses / Decimal(working_days_per_month), MONEY_SCALE
    )


def calculate_expected_daily_sales(
    expected_monthly_sales: Optional[int], working_days_per_month: Optional[int]
) -> int:
    """Whole items expected per working day (floor division), or 0."""
    if not working_days_per_month or working_days_per_month <= 0:
        return 0
    if not expected_monthly_sales:
        return 0
    return int(expected_monthly_sales) // int(working_days_per_month)


def calculate_break_even_units(
    total_monthly_expenses: Optional[Decimal], average_net_profit_per_item: Optional[Decimal]
) -> int:
    """Items that must sell each month to cover expenses, rounded up.

    Examples:
        >>> calculate_break_even_units(Decimal("30000"), Decimal("7"))
        4286
    """
    if average_net_profit_per_item is None or average_net_profit_per_item <= 0:
        return 0
    if total_monthly_expenses is None:
        return 0
    units = (total_monthly_expenses / average_net_profit_per_item).to_integral_value(
        rounding=ROUND_CEILING
    )
    return int(units)


def calculate_final_selling_price(
    total_cost: Decimal,
    suggested_selling_price: Decimal,
    target_margin_percent: Optional[Decimal],
    allocated_expense_per_item: Decimal,
) -> Decimal:
    """Price covering ingredients plus overhead at the target margin.

    Final Price = (Total Cost + Expense Per Item) / (1 - Target Margin).
    Without a positive margin the suggested selling price is used as is.
    """
    if target_margin_percent is None or target_margin_percent <= 0:
        return suggested_selling_price

    cost_with_overhead = total_cost + allocated_expense_per_item
    divisor = ONE - margin_fraction(target_margin_percent)
    if divisor > 0:
        return round_half_up(cost_with_overhead / divisor, MONEY_SCALE)
    return cost_with_overhead


def calculate_net_pricing(
    total_cost: Decimal,
    gross_profit: Decimal,
    suggested_selling_price: Decimal,
    target_margin_percent: Optional[Decimal],
    allocated_expense_per_item: Optional[Decimal],
) -> NetPricing:
    """Net profit, net margin and final price after allocating overhead.

    A missing allocation counts as zero.

    Examples:
        >>> calculate_net_pricing(
        ...     Decimal("24.40"), Decimal("10.46"), Decimal("34.86"),
        ...     Decimal("30"), Decimal("5.0000"),
        ... ).final_selling_price
        Decimal('42.00')
    """
    allocated = allocated_expense_per_item if allocated_expense_per_item is not None else ZERO

    net_profit = round_half_up(gross_profit - allocated, MONEY_SCALE)

    if suggested_selling_price > 0:
        net_margin = _ratio_percent(net_profit, suggested_selling_price)
    else:
        net_margin = ZERO

    final_price = calculate_final_selling_price(
        total_cost, suggested_selling_price, target_margin_percent, allocated
    )

    return NetPricing(
        allocated_expense_per_item=allocated,
        net_profit=net_profit,
        net_margin_percent=net_margin,
        final_selling_price=final_price,
    )
