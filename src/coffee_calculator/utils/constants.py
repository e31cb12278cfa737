"""
Constants and enumerations for the Coffee Calculator application.

This module defines all system-wide constants including:
- Ingredient categories and base units
- Operating expense categories
- Decimal scales used by the pricing engine
- Classification thresholds
- Field limits and error messages
"""

from decimal import Decimal
from typing import Dict, List

# ============================================================================
# Ingredient Categories and Units
# ============================================================================

INGREDIENT_CATEGORIES: List[str] = [
    "beans",
    "milk",
    "syrup",
    "packaging",
    "sauce",
    "powder",
    "topping",
]

BASE_UNITS: List[str] = [
    "g",  # Gram
    "ml",  # Milliliter
    "pc",  # Piece
    "kg",  # Kilogram
    "l",  # Liter
]

UNIT_DISPLAY_NAMES: Dict[str, str] = {
    "g": "grams",
    "ml": "milliliters",
    "pc": "pieces",
    "kg": "kilograms",
    "l": "liters",
}

DEFAULT_UNIT_DISPLAY_NAME = "units"

# ============================================================================
# Operating Expense Categories
# ============================================================================

EXPENSE_CATEGORIES: List[str] = [
    "rent",
    "utilities",
    "labor",
    "marketing",
    "equipment",
    "supplies",
    "insurance",
    "taxes",
    "others",
]

EXPENSE_CATEGORY_DISPLAY_NAMES: Dict[str, str] = {
    "rent": "Rent / Lease",
    "utilities": "Utilities (Electric, Water, Gas)",
    "labor": "Labor / Salaries",
    "marketing": "Marketing / Advertising",
    "equipment": "Equipment / Maintenance",
    "supplies": "General Supplies",
    "insurance": "Insurance",
    "taxes": "Taxes / Permits",
    "others": "Other Expenses",
}

DEFAULT_EXPENSE_CATEGORY_DISPLAY_NAME = "Miscellaneous"

# Daily figures on individual expenses assume a 30-day month
EXPENSE_DAYS_PER_MONTH = 30

# ============================================================================
# Business Settings Defaults
# ============================================================================

DEFAULT_WORKING_DAYS_PER_MONTH = 26

# ============================================================================
# Decimal Scales
# ============================================================================

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

INPUT_SCALE = Decimal("0.0001")  # quantities, pack data and target margins as stored
UNIT_COST_SCALE = Decimal("0.0001")  # cost per base unit
MARGIN_FRACTION_SCALE = Decimal("0.0001")  # target margin as a fraction
RATIO_SCALE = Decimal("0.0001")  # profit / price before scaling to percent
EXPENSE_PER_ITEM_SCALE = Decimal("0.0001")
MONEY_SCALE = Decimal("0.01")  # line cost, prices, profits
PERCENT_SCALE = Decimal("0.01")  # margins expressed as percent

MIN_MARGIN_PERCENT = Decimal("0")
MAX_MARGIN_PERCENT = Decimal("100")

# ============================================================================
# Classification Thresholds
# ============================================================================

# Exclusive upper bounds of each tier below the top one
COMPLEXITY_LINE_BOUNDS = (3, 6, 9)
PRICING_PRICE_BOUNDS = (Decimal("100"), Decimal("150"), Decimal("200"))

# Net margin at or below zero is always Unprofitable
PROFITABILITY_MARGIN_BOUNDS = (Decimal("10"), Decimal("20"), Decimal("30"))

# ============================================================================
# Field Limits
# ============================================================================

MAX_NAME_LENGTH = 200
MAX_INGREDIENT_NOTES_LENGTH = 500
MAX_RECIPE_NOTES_LENGTH = 1000
MAX_EXPENSE_NOTES_LENGTH = 500

# ============================================================================
# Database
# ============================================================================

DATABASE_FILENAME = "coffee_calculator.db"

# ============================================================================
# Error Messages
# ============================================================================

ERROR_REQUIRED_FIELD = "This field is required"
ERROR_INVALID_NUMBER = "Please enter a valid number"
ERROR_INVALID_INTEGER = "Please enter a whole number"
ERROR_INVALID_POSITIVE = "Value must be greater than zero"
ERROR_INVALID_UNIT = "Invalid unit type"
ERROR_INVALID_CATEGORY = "Invalid category"
