"""
Cross-recipe statistics (menu overview).

This module provides functions for:
- Averaging selling price, total cost and actual margin across recipes
- Counting recipes in each complexity tier

Transaction boundary: Pure computation (no database access). The recipe
service loads the recipes and hands them in.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List

from coffee_calculator.models.enums import ComplexityLevel
from coffee_calculator.services.pricing_engine import round_half_up
from coffee_calculator.utils.constants import MONEY_SCALE, ZERO


@dataclass
class RecipeStatistics:
    """Aggregate figures across every recipe on the menu.

    Attributes:
        total_recipes: Number of recipes considered
        average_selling_price: Mean suggested selling price, 2 places
        average_cost: Mean total cost, 2 places
        average_margin: Mean actual margin percent, 2 places
        simple_recipes: Recipes with 0-2 ingredient lines
        moderate_recipes: Recipes with 3-5 lines
        complex_recipes: Recipes with 6-8 lines
        very_complex_recipes: Recipes with 9 or more lines
    """

    total_recipes: int = 0
    average_selling_price: Decimal = ZERO
    average_cost: Decimal = ZERO
    average_margin: Decimal = ZERO
    simple_recipes: int = 0
    moderate_recipes: int = 0
    complex_recipes: int = 0
    very_complex_recipes: int = 0

    @property
    def complexity_counts(self) -> Dict[ComplexityLevel, int]:
        return {
            ComplexityLevel.SIMPLE: self.simple_recipes,
            ComplexityLevel.MODERATE: self.moderate_recipes,
            ComplexityLevel.COMPLEX: self.complex_recipes,
            ComplexityLevel.VERY_COMPLEX: self.very_complex_recipes,
        }


@dataclass
class _Totals:
    price: Decimal = ZERO
    cost: Decimal = ZERO
    margin: Decimal = ZERO
    levels: List[ComplexityLevel] = field(default_factory=list)


def _average(total: Decimal, count: int) -> Decimal:
    return round_half_up(total / Decimal(count), MONEY_SCALE)


def calculate_recipe_statistics(recipes: Iterable) -> RecipeStatistics:
    """Compute menu-wide averages and complexity counts.

    Args:
        recipes: Recipe instances (or anything with suggested_selling_price,
            total_cost, actual_margin_percent and complexity_level)

    Returns:
        RecipeStatistics; all zeros for an empty input

    Examples:
        >>> calculate_recipe_statistics([]).average_selling_price
        Decimal('0')
    """
    totals = _Totals()
    count = 0

    for recipe in recipes:
        count += 1
        totals.price += recipe.suggested_selling_price or ZERO
        totals.cost += recipe.total_cost or ZERO
        totals.margin += recipe.actual_margin_percent or ZERO
        totals.levels.append(recipe.complexity_level)

    if count == 0:
        return RecipeStatistics()

    return RecipeStatistics(
        total_recipes=count,
        average_selling_price=_average(totals.price, count),
        average_cost=_average(totals.cost, count),
        average_margin=_average(totals.margin, count),
        simple_recipes=totals.levels.count(ComplexityLevel.SIMPLE),
        moderate_recipes=totals.levels.count(ComplexityLevel.MODERATE),
        complex_recipes=totals.levels.count(ComplexityLevel.COMPLEX),
        very_complex_recipes=totals.levels.count(ComplexityLevel.VERY_COMPLEX),
    )


def average_net_profit(recipes: Iterable) -> Decimal:
    """Mean net profit per drink across recipes, 2 places; 0 for no recipes."""
    total = ZERO
    count = 0
    for recipe in recipes:
        count += 1
        total += recipe.net_profit or ZERO
    if count == 0:
        return ZERO
    return _average(total, count)
