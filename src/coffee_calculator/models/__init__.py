"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .ingredient import Ingredient
from .recipe import Recipe, RecipeIngredient
from .business_settings import BusinessSettings
from .operating_expense import OperatingExpense
from .enums import (
    IngredientCategory,
    BaseUnit,
    ExpenseCategory,
    ComplexityLevel,
    PricingCategory,
    ProfitabilityStatus,
)

__all__ = [
    "Base",
    "BaseModel",
    # Catalog
    "Ingredient",
    "Recipe",
    "RecipeIngredient",
    # Overhead
    "BusinessSettings",
    "OperatingExpense",
    # Enums
    "IngredientCategory",
    "BaseUnit",
    "ExpenseCategory",
    "ComplexityLevel",
    "PricingCategory",
    "ProfitabilityStatus",
]
