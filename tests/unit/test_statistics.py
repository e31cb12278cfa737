"""Unit tests for cross-recipe statistics."""

from dataclasses import dataclass
from decimal import Decimal

from coffee_calculator.models.enums import ComplexityLevel
from coffee_calculator.services.statistics import (
    RecipeStatistics,
    average_net_profit,
    calculate_recipe_statistics,
)


@dataclass
class StubRecipe:
    """Carries just the fields the aggregator reads."""

    suggested_selling_price: Decimal
    total_cost: Decimal
    actual_margin_percent: Decimal
    complexity_level: ComplexityLevel
    net_profit: Decimal = Decimal("0")


class TestCalculateRecipeStatistics:
    def test_empty_input_is_all_zeros(self):
        stats = calculate_recipe_statistics([])

        assert stats == RecipeStatistics()
        assert stats.total_recipes == 0
        assert stats.average_selling_price == Decimal("0")
        assert stats.average_cost == Decimal("0")
        assert stats.average_margin == Decimal("0")

    def test_averages_round_half_up(self):
        recipes = [
            StubRecipe(Decimal("34.86"), Decimal("24.40"), Decimal("30.01"), ComplexityLevel.SIMPLE),
            StubRecipe(Decimal("28.80"), Decimal("14.40"), Decimal("50.00"), ComplexityLevel.SIMPLE),
        ]

        stats = calculate_recipe_statistics(recipes)

        assert stats.total_recipes == 2
        assert stats.average_selling_price == Decimal("31.83")
        assert stats.average_cost == Decimal("19.40")
        # 80.01 / 2 = 40.005
        assert stats.average_margin == Decimal("40.01")

    def test_complexity_counts(self):
        levels = [
            ComplexityLevel.SIMPLE,
            ComplexityLevel.MODERATE,
            ComplexityLevel.MODERATE,
            ComplexityLevel.COMPLEX,
            ComplexityLevel.VERY_COMPLEX,
            ComplexityLevel.VERY_COMPLEX,
            ComplexityLevel.VERY_COMPLEX,
        ]
        recipes = [
            StubRecipe(Decimal("10"), Decimal("5"), Decimal("50"), level) for level in levels
        ]

        stats = calculate_recipe_statistics(recipes)

        assert stats.simple_recipes == 1
        assert stats.moderate_recipes == 2
        assert stats.complex_recipes == 1
        assert stats.very_complex_recipes == 3
        assert sum(stats.complexity_counts.values()) == stats.total_recipes

    def test_accepts_a_generator(self):
        recipes = (
            StubRecipe(Decimal("10"), Decimal("5"), Decimal("50"), ComplexityLevel.SIMPLE)
            for _ in range(3)
        )

        assert calculate_recipe_statistics(recipes).total_recipes == 3


class TestAverageNetProfit:
    def test_average(self):
        recipes = [
            StubRecipe(Decimal("0"), Decimal("0"), Decimal("0"), ComplexityLevel.SIMPLE, Decimal("5.46")),
            StubRecipe(Decimal("0"), Decimal("0"), Decimal("0"), ComplexityLevel.SIMPLE, Decimal("9.40")),
        ]

        assert average_net_profit(recipes) == Decimal("7.43")

    def test_no_recipes(self):
        assert average_net_profit([]) == Decimal("0")
