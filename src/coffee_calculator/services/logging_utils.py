"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across the ingredient, recipe, expense
and settings services.

Usage:
    from coffee_calculator.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    # Log successful operation
    log_operation(
        logger,
        operation="create_recipe",
        outcome="success",
        recipe_id=7,
        suggested_selling_price="34.86",
    )

    # Log a rejected request
    log_operation(
        logger,
        operation="delete_ingredient",
        outcome="in_use",
        level=logging.WARNING,
        ingredient_id=3,
        recipe_count=2,
    )
"""

import logging
from typing import Any

LOGGER_PREFIX = "coffee_calculator.services"


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger instance with the 'coffee_calculator.services' prefix.

    Example:
        >>> logger = get_service_logger(__name__)
        >>> logger.name
        'coffee_calculator.services.recipe_service'
    """
    # Extract just the module name if full path is provided
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The message reads "<operation>: <outcome>"; the operation, outcome and
    every context field are passed through 'extra' for structured handlers.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "update_ingredient", "apply_expense_allocation")
        outcome: Outcome description (e.g., "success", "not_found", "error")
        level: Log level (default: INFO). Use DEBUG for verbose/frequent logs.
        **context: Additional context fields (entity IDs, error details, etc.)
            Common fields:
            - ingredient_id / recipe_id / expense_id: Entity being processed
            - recipes_repriced: Number of recipes whose chain was re-run
            - expense_per_item: Overhead allocated per drink
            - error: Error message if outcome is "error"

    Example:
        >>> log_operation(
        ...     logger,
        ...     operation="update_ingredient",
        ...     outcome="success",
        ...     ingredient_id=3,
        ...     recipes_repriced=4,
        ... )
        # Logs: "update_ingredient: success" with extra context
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
