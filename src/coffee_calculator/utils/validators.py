"""
Input validation functions for the Coffee Calculator application.

This module provides validation functions for all user inputs including:
- Numeric validation (positive and whole numbers)
- String validation (length, required fields)
- Unit and category validation against the closed sets in constants

Validators return ``(is_valid, error_message)`` or ``(is_valid, errors)``
tuples; services turn failures into typed exceptions.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Optional, Tuple

from .constants import (
    BASE_UNITS,
    EXPENSE_CATEGORIES,
    INGREDIENT_CATEGORIES,
    INPUT_SCALE,
    MONEY_SCALE,
    MAX_EXPENSE_NOTES_LENGTH,
    MAX_INGREDIENT_NOTES_LENGTH,
    MAX_NAME_LENGTH,
    MAX_RECIPE_NOTES_LENGTH,
    ERROR_REQUIRED_FIELD,
    ERROR_INVALID_NUMBER,
    ERROR_INVALID_INTEGER,
    ERROR_INVALID_POSITIVE,
    ERROR_INVALID_UNIT,
    ERROR_INVALID_CATEGORY,
)


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a user-supplied number to Decimal.

    Floats go through ``str()`` so 0.1 becomes Decimal("0.1") rather than
    its binary expansion. Returns None for missing, unparseable or
    non-finite input.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def validate_required_string(value: Optional[str], field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a string field is not empty.

    Args:
        value: The string value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    return True, ""


def validate_string_length(
    value: str, max_length: int, field_name: str = "Field"
) -> Tuple[bool, str]:
    """Validate that a string doesn't exceed maximum length."""
    if value and len(value) > max_length:
        return False, f"{field_name}: Must be {max_length} characters or less"
    return True, ""


def validate_positive_number(
    value: Any, field_name: str = "Field", scale: Optional[Decimal] = None
) -> Tuple[bool, str]:
    """
    Validate that a value is a positive number (> 0).

    Args:
        value: The value to validate
        field_name: Name of the field for error messages
        scale: Optional storage scale; the value must stay positive once
            rounded half-up to it

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None:
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    number = to_decimal(value)
    if number is None:
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if scale is not None:
        number = number.quantize(scale, rounding=ROUND_HALF_UP)
    if number <= 0:
        return False, f"{field_name}: {ERROR_INVALID_POSITIVE}"
    return True, ""


def validate_positive_integer(value: Any, field_name: str = "Field") -> Tuple[bool, str]:
    """Validate that a value is a whole number greater than zero."""
    if value is None:
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    number = to_decimal(value)
    if number is None:
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if number != number.to_integral_value():
        return False, f"{field_name}: {ERROR_INVALID_INTEGER}"
    if number <= 0:
        return False, f"{field_name}: {ERROR_INVALID_POSITIVE}"
    return True, ""


def _validate_choice(
    value: Optional[str], choices: Iterable[str], error: str, field_name: str
) -> Tuple[bool, str]:
    if not value or not str(value).strip():
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    valid = list(choices)
    if str(value).strip().lower() not in valid:
        return False, f"{field_name}: {error}. Valid: {', '.join(valid)}"
    return True, ""


def validate_base_unit(unit: Optional[str], field_name: str = "Base Unit") -> Tuple[bool, str]:
    """Validate that a unit is one of the supported base units."""
    return _validate_choice(unit, BASE_UNITS, ERROR_INVALID_UNIT, field_name)


def validate_ingredient_category(
    category: Optional[str], field_name: str = "Category"
) -> Tuple[bool, str]:
    """Validate that a category is one of the ingredient categories."""
    return _validate_choice(category, INGREDIENT_CATEGORIES, ERROR_INVALID_CATEGORY, field_name)


def validate_expense_category(
    category: Optional[str], field_name: str = "Category"
) -> Tuple[bool, str]:
    """Validate that a category is one of the operating expense categories."""
    return _validate_choice(category, EXPENSE_CATEGORIES, ERROR_INVALID_CATEGORY, field_name)


def _collect(errors: list, result: Tuple[bool, str]) -> bool:
    is_valid, error = result
    if not is_valid:
        errors.append(error)
    return is_valid


def validate_ingredient_data(data: dict) -> Tuple[bool, list]:
    """
    Validate all fields for an ingredient.

    Args:
        data: Dictionary containing ingredient fields

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    if _collect(errors, validate_required_string(data.get("name"), "Name")):
        _collect(errors, validate_string_length(data.get("name"), MAX_NAME_LENGTH, "Name"))

    _collect(errors, validate_ingredient_category(data.get("category"), "Category"))
    _collect(errors, validate_base_unit(data.get("base_unit"), "Base Unit"))
    _collect(errors, validate_positive_number(data.get("pack_size"), "Pack Size", INPUT_SCALE))
    _collect(errors, validate_positive_number(data.get("pack_price"), "Pack Price", INPUT_SCALE))

    if data.get("notes"):
        _collect(
            errors,
            validate_string_length(data.get("notes"), MAX_INGREDIENT_NOTES_LENGTH, "Notes"),
        )

    return len(errors) == 0, errors


def validate_recipe_line_data(line: dict, position: int) -> Tuple[bool, list]:
    """Validate one ``{ingredient_id, quantity}`` entry of a recipe."""
    errors = []
    label = f"Ingredient #{position}"

    if line.get("ingredient_id") is None:
        errors.append(f"{label} ID: {ERROR_REQUIRED_FIELD}")
    _collect(
        errors, validate_positive_number(line.get("quantity"), f"{label} Quantity", INPUT_SCALE)
    )

    return len(errors) == 0, errors


def validate_recipe_data(data: dict, ingredients_data: Optional[list] = None) -> Tuple[bool, list]:
    """
    Validate all fields for a recipe.

    The margin's (0, 100) range is checked by the recipe service, which
    raises InvalidMarginRange rather than ValidationError.

    Args:
        data: Dictionary containing recipe fields
        ingredients_data: Optional list of ``{ingredient_id, quantity}`` dicts

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    if _collect(errors, validate_required_string(data.get("drink_name"), "Drink Name")):
        _collect(
            errors, validate_string_length(data.get("drink_name"), MAX_NAME_LENGTH, "Drink Name")
        )

    margin = data.get("target_margin_percent")
    if margin is None:
        errors.append(f"Target Margin: {ERROR_REQUIRED_FIELD}")
    elif to_decimal(margin) is None:
        errors.append(f"Target Margin: {ERROR_INVALID_NUMBER}")

    if data.get("notes"):
        _collect(errors, validate_string_length(data.get("notes"), MAX_RECIPE_NOTES_LENGTH, "Notes"))

    for position, line in enumerate(ingredients_data or [], start=1):
        _, line_errors = validate_recipe_line_data(line, position)
        errors.extend(line_errors)

    return len(errors) == 0, errors


def validate_expense_data(data: dict) -> Tuple[bool, list]:
    """Validate all fields for an operating expense."""
    errors = []

    if _collect(errors, validate_required_string(data.get("name"), "Name")):
        _collect(errors, validate_string_length(data.get("name"), MAX_NAME_LENGTH, "Name"))

    _collect(errors, validate_expense_category(data.get("category"), "Category"))
    _collect(
        errors, validate_positive_number(data.get("monthly_amount"), "Monthly Amount", MONEY_SCALE)
    )

    if data.get("notes"):
        _collect(errors, validate_string_length(data.get("notes"), MAX_EXPENSE_NOTES_LENGTH, "Notes"))

    return len(errors) == 0, errors


def validate_settings_data(data: dict) -> Tuple[bool, list]:
    """Validate business settings input; working days is optional."""
    errors = []

    _collect(
        errors,
        validate_positive_integer(data.get("expected_monthly_sales"), "Expected Monthly Sales"),
    )
    if data.get("working_days_per_month") is not None:
        _collect(
            errors,
            validate_positive_integer(data.get("working_days_per_month"), "Working Days Per Month"),
        )

    return len(errors) == 0, errors


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string value by stripping whitespace and converting empty strings to None.
    """
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None
