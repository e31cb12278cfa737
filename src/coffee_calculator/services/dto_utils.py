"""DTO utilities for service layer.

Provides standardized formatting functions for data transfer objects,
ensuring consistent JSON serialization and display output.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Union


def cost_to_string(value: Union[Decimal, float, int, str, None]) -> str:
    """
    Convert a cost value to a 2-decimal string format.

    This is the standard format for money values in service DTOs,
    ensuring JSON serialization safety and consistent formatting.

    Args:
        value: Cost value (Decimal, float, int, str, or None)

    Returns:
        String formatted as "12.34" (2 decimal places).
        Returns "0.00" if value is None.

    Examples:
        >>> cost_to_string(Decimal("12.345"))
        '12.35'
        >>> cost_to_string(12.3)
        '12.30'
        >>> cost_to_string(None)
        '0.00'
    """
    if value is None:
        return "0.00"

    # Convert to Decimal for precise rounding
    decimal_value = Decimal(str(value))

    rounded = decimal_value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    return str(rounded)


def percent_to_string(value: Union[Decimal, float, int, str, None]) -> str:
    """
    Format a margin percent for display.

    Examples:
        >>> percent_to_string(Decimal("30.006"))
        '30.01%'
        >>> percent_to_string(None)
        '0.00%'
    """
    return f"{cost_to_string(value)}%"


def decimals_to_strings(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of a model dict with every Decimal rendered as a string.

    Values keep their stored scale (a 4-place unit cost stays 4-place), so
    the output is lossless and JSON-safe.
    """
    result = {}
    for key, value in data.items():
        if isinstance(value, Decimal):
            result[key] = str(value)
        elif isinstance(value, list):
            result[key] = [
                decimals_to_strings(item) if isinstance(item, dict) else item for item in value
            ]
        elif isinstance(value, dict):
            result[key] = decimals_to_strings(value)
        else:
            result[key] = value
    return result
