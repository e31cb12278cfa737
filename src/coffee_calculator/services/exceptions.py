"""Service layer exception classes for Coffee Calculator.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the application. Every exception carries an
``http_status_code`` hint for whatever boundary layer reports it.

Exception Hierarchy:
    ServiceError (base)
    ├── NotFoundError
    │   ├── IngredientNotFound
    │   ├── RecipeNotFound
    │   ├── OperatingExpenseNotFound
    │   └── SettingsNotFound
    ├── ConflictError
    │   ├── DuplicateIngredientName
    │   ├── DuplicateRecipeName
    │   └── IngredientInUse
    ├── InvalidRangeError
    │   ├── InvalidMarginRange
    │   └── InvalidPriceRange
    ├── ValidationError
    └── DatabaseError
"""

from decimal import Decimal
from typing import Optional


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions should inherit from this class.
    """

    http_status_code = 500


class NotFoundError(ServiceError):
    """Base for lookups that found nothing."""

    http_status_code = 404


class ConflictError(ServiceError):
    """Base for operations that clash with existing records."""

    http_status_code = 409


class InvalidRangeError(ServiceError):
    """Base for numeric arguments outside their allowed range."""

    http_status_code = 400


class IngredientNotFound(NotFoundError):
    """Raised when an ingredient cannot be found by ID.

    Example:
        >>> raise IngredientNotFound(12)
        IngredientNotFound: Ingredient with ID 12 not found
    """

    def __init__(self, ingredient_id: int):
        self.ingredient_id = ingredient_id
        super().__init__(f"Ingredient with ID {ingredient_id} not found")


class RecipeNotFound(NotFoundError):
    """Raised when a recipe cannot be found by ID."""

    def __init__(self, recipe_id: int):
        self.recipe_id = recipe_id
        super().__init__(f"Recipe with ID {recipe_id} not found")


class OperatingExpenseNotFound(NotFoundError):
    """Raised when an operating expense cannot be found by ID."""

    def __init__(self, expense_id: int):
        self.expense_id = expense_id
        super().__init__(f"Operating expense with ID {expense_id} not found")


class SettingsNotFound(NotFoundError):
    """Raised when an operation needs business settings and none were saved."""

    def __init__(self):
        super().__init__("Business settings have not been configured")


class DuplicateIngredientName(ConflictError):
    """Raised when an ingredient name is already taken (ignoring case)."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Ingredient with name '{name}' already exists")


class DuplicateRecipeName(ConflictError):
    """Raised when a drink name is already taken (ignoring case)."""

    def __init__(self, drink_name: str):
        self.drink_name = drink_name
        super().__init__(f"Recipe with name '{drink_name}' already exists")


class IngredientInUse(ConflictError):
    """Raised when attempting to delete an ingredient that recipes still use.

    Args:
        ingredient_id: The ingredient being deleted
        recipe_count: Number of recipes with a line using it

    Example:
        >>> raise IngredientInUse(3, 2)
        IngredientInUse: Cannot delete ingredient 3: used in 2 recipe(s)
    """

    def __init__(self, ingredient_id: int, recipe_count: int):
        self.ingredient_id = ingredient_id
        self.recipe_count = recipe_count
        super().__init__(
            f"Cannot delete ingredient {ingredient_id}: used in {recipe_count} recipe(s)"
        )


class InvalidMarginRange(InvalidRangeError):
    """Raised when a target margin is outside the open interval (0, 100)."""

    def __init__(self, margin: Optional[Decimal]):
        self.margin = margin
        super().__init__(f"Target margin must be between 0% and 100%, got {margin}")


class InvalidPriceRange(InvalidRangeError):
    """Raised when a price range has its minimum above its maximum."""

    def __init__(self, min_price: Decimal, max_price: Decimal):
        self.min_price = min_price
        self.max_price = max_price
        super().__init__(
            f"Minimum price {min_price} cannot be greater than maximum price {max_price}"
        )


class ValidationError(ServiceError):
    """Raised when data validation fails."""

    http_status_code = 400

    def __init__(self, errors: list):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")


class DatabaseError(ServiceError):
    """Raised when a database operation fails."""

    http_status_code = 500

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
