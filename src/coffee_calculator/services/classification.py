"""
Recipe classification rules.

Pure, stateless lookups that map a recipe's numbers onto closed enum sets:
- complexity level by ingredient line count
- pricing category by suggested selling price
- profitability status by net margin percent

Each rule is an ordered threshold table of (exclusive upper bound, value)
pairs plus a top tier for anything at or above the last bound.
"""

from decimal import Decimal
from typing import Optional, Sequence, Tuple, TypeVar

from coffee_calculator.models.enums import (
    ComplexityLevel,
    PricingCategory,
    ProfitabilityStatus,
)
from coffee_calculator.utils.constants import (
    COMPLEXITY_LINE_BOUNDS,
    PRICING_PRICE_BOUNDS,
    PROFITABILITY_MARGIN_BOUNDS,
)

T = TypeVar("T")

COMPLEXITY_TABLE: Tuple[Tuple[int, ComplexityLevel], ...] = tuple(
    zip(
        COMPLEXITY_LINE_BOUNDS,
        (ComplexityLevel.SIMPLE, ComplexityLevel.MODERATE, ComplexityLevel.COMPLEX),
    )
)

PRICING_TABLE: Tuple[Tuple[Decimal, PricingCategory], ...] = tuple(
    zip(
        PRICING_PRICE_BOUNDS,
        (PricingCategory.BUDGET, PricingCategory.STANDARD, PricingCategory.PREMIUM),
    )
)

PROFITABILITY_TABLE: Tuple[Tuple[Decimal, ProfitabilityStatus], ...] = tuple(
    zip(
        PROFITABILITY_MARGIN_BOUNDS,
        (
            ProfitabilityStatus.LOW_PROFIT,
            ProfitabilityStatus.MODERATE_PROFIT,
            ProfitabilityStatus.GOOD_PROFIT,
        ),
    )
)


def classify(value, table: Sequence[Tuple[object, T]], top: T) -> T:
    """Return the first tier whose exclusive upper bound is above value.

    Args:
        value: Number to classify
        table: (upper_bound, tier) pairs in ascending bound order
        top: Tier for values at or above the last bound

    Examples:
        >>> classify(3, COMPLEXITY_TABLE, ComplexityLevel.VERY_COMPLEX)
        <ComplexityLevel.MODERATE: 'Moderate'>
    """
    for upper_bound, tier in table:
        if value < upper_bound:
            return tier
    return top


def get_complexity_level(ingredient_count: int) -> ComplexityLevel:
    """Complexity by ingredient line count: 0-2, 3-5, 6-8, 9+."""
    return classify(ingredient_count, COMPLEXITY_TABLE, ComplexityLevel.VERY_COMPLEX)


def get_pricing_category(suggested_selling_price: Optional[Decimal]) -> PricingCategory:
    """Price tier; a missing price is Unknown."""
    if suggested_selling_price is None:
        return PricingCategory.UNKNOWN
    return classify(suggested_selling_price, PRICING_TABLE, PricingCategory.LUXURY)


def get_profitability_status(net_margin_percent: Optional[Decimal]) -> ProfitabilityStatus:
    """Profitability by net margin; zero, negative or missing is Unprofitable."""
    if net_margin_percent is None or net_margin_percent <= 0:
        return ProfitabilityStatus.UNPROFITABLE
    return classify(net_margin_percent, PROFITABILITY_TABLE, ProfitabilityStatus.EXCELLENT_PROFIT)
