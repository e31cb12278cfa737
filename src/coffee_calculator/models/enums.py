"""
Enumerations for ingredient, expense and recipe classification.

This module contains enums used across the models and services:
- IngredientCategory / BaseUnit: closed sets for ingredient records
- ExpenseCategory: closed set for operating expense records
- ComplexityLevel / PricingCategory / ProfitabilityStatus: recipe classifications
"""

from enum import Enum


class IngredientCategory(str, Enum):
    """Ingredient category stored on Ingredient.category."""

    BEANS = "beans"
    MILK = "milk"
    SYRUP = "syrup"
    PACKAGING = "packaging"
    SAUCE = "sauce"
    POWDER = "powder"
    TOPPING = "topping"


class BaseUnit(str, Enum):
    """Smallest unit in which an ingredient's cost is tracked."""

    GRAM = "g"
    MILLILITER = "ml"
    PIECE = "pc"
    KILOGRAM = "kg"
    LITER = "l"


class ExpenseCategory(str, Enum):
    """Operating expense category stored on OperatingExpense.category."""

    RENT = "rent"
    UTILITIES = "utilities"
    LABOR = "labor"
    MARKETING = "marketing"
    EQUIPMENT = "equipment"
    SUPPLIES = "supplies"
    INSURANCE = "insurance"
    TAXES = "taxes"
    OTHERS = "others"


class ComplexityLevel(str, Enum):
    """
    Recipe complexity by number of ingredient lines.

    Values:
        SIMPLE: 0-2 lines
        MODERATE: 3-5 lines
        COMPLEX: 6-8 lines
        VERY_COMPLEX: 9 or more lines
    """

    SIMPLE = "Simple"
    MODERATE = "Moderate"
    COMPLEX = "Complex"
    VERY_COMPLEX = "Very Complex"


class PricingCategory(str, Enum):
    """
    Recipe price tier by suggested selling price.

    Values:
        BUDGET: below 100
        STANDARD: 100 up to 150
        PREMIUM: 150 up to 200
        LUXURY: 200 and above
        UNKNOWN: no price available
    """

    BUDGET = "Budget"
    STANDARD = "Standard"
    PREMIUM = "Premium"
    LUXURY = "Luxury"
    UNKNOWN = "Unknown"


class ProfitabilityStatus(str, Enum):
    """
    Recipe profitability by net margin percent.

    Values:
        UNPROFITABLE: 0 or below
        LOW_PROFIT: above 0, below 10
        MODERATE_PROFIT: 10 up to 20
        GOOD_PROFIT: 20 up to 30
        EXCELLENT_PROFIT: 30 and above
    """

    UNPROFITABLE = "Unprofitable"
    LOW_PROFIT = "Low Profit"
    MODERATE_PROFIT = "Moderate Profit"
    GOOD_PROFIT = "Good Profit"
    EXCELLENT_PROFIT = "Excellent Profit"
