"""
Recipe Service - Business logic for priced drink recipes.

This service provides:
- Recipe CRUD with ingredient lines and full cost-chain recalculation
- Search by name, selling price range and minimum achieved margin
- What-if pricing at a candidate margin (never persisted)
- Menu-wide statistics
- Explicit operating expense allocation from the authoritative settings
- Per-recipe summaries with classifications and a cost breakdown
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from coffee_calculator.models import Ingredient, Recipe, RecipeIngredient
from coffee_calculator.services import pricing_engine
from coffee_calculator.services.business_settings_service import query_latest_settings
from coffee_calculator.services.database import session_scope
from coffee_calculator.services.dto_utils import decimals_to_strings
from coffee_calculator.services.exceptions import (
    DatabaseError,
    DuplicateRecipeName,
    IngredientNotFound,
    InvalidMarginRange,
    InvalidPriceRange,
    RecipeNotFound,
    SettingsNotFound,
    ValidationError,
)
from coffee_calculator.services.logging_utils import get_service_logger, log_operation
from coffee_calculator.services.statistics import RecipeStatistics, calculate_recipe_statistics
from coffee_calculator.utils.constants import (
    ERROR_INVALID_NUMBER,
    HUNDRED,
    INGREDIENT_CATEGORIES,
    INPUT_SCALE,
    MAX_MARGIN_PERCENT,
    MIN_MARGIN_PERCENT,
    PERCENT_SCALE,
    ZERO,
)
from coffee_calculator.utils.validators import (
    sanitize_string,
    to_decimal,
    validate_recipe_data,
)

logger = get_service_logger(__name__)


@dataclass
class PricingScenario:
    """Transient pricing of a stored recipe at a candidate margin.

    Attributes:
        recipe_id: The recipe priced
        drink_name: The recipe's drink name
        total_cost: Stored ingredient cost
        target_margin_percent: The candidate margin
        suggested_selling_price: Price at the candidate margin
        gross_profit: suggested_selling_price - total_cost
        actual_margin_percent: Margin achieved after rounding
        net_profit: Gross profit less the recipe's allocated overhead
        net_margin_percent: Net profit as a percent of the price
        final_selling_price: Overhead-inclusive price at the candidate margin
        recalculated: False when the candidate was outside (0, 100) and the
            stored figures were returned as they are
    """

    recipe_id: int
    drink_name: str
    total_cost: Decimal
    target_margin_percent: Decimal
    suggested_selling_price: Decimal
    gross_profit: Decimal
    actual_margin_percent: Decimal
    net_profit: Decimal
    net_margin_percent: Decimal
    final_selling_price: Decimal
    recalculated: bool


# ============================================================================
# Helpers
# ============================================================================


def _is_margin_in_range(margin: Decimal) -> bool:
    return MIN_MARGIN_PERCENT < margin < MAX_MARGIN_PERCENT


def _parse_margin(value) -> Decimal:
    """Convert a target margin to its stored scale and check it lies in (0, 100)."""
    margin = to_decimal(value)
    if margin is None:
        raise ValidationError([f"Target Margin: {ERROR_INVALID_NUMBER}"])
    margin = pricing_engine.round_half_up(margin, INPUT_SCALE)
    if not _is_margin_in_range(margin):
        raise InvalidMarginRange(margin)
    return margin


def _name_taken(session, drink_name: str, exclude_id: Optional[int] = None) -> bool:
    query = session.query(Recipe.id).filter(func.lower(Recipe.drink_name) == drink_name.lower())
    if exclude_id is not None:
        query = query.filter(Recipe.id != exclude_id)
    return query.first() is not None


def _get_recipe_or_raise(session, recipe_id: int) -> Recipe:
    recipe = session.query(Recipe).filter(Recipe.id == recipe_id).first()
    if not recipe:
        raise RecipeNotFound(recipe_id)
    return recipe


def _add_lines(session, recipe: Recipe, ingredients_data: List[Dict]) -> None:
    """Attach ``{ingredient_id, quantity}`` lines; each addition reprices the recipe."""
    # A new line belongs to no session until the recipe adopts it
    with session.no_autoflush:
        for line_data in ingredients_data:
            ingredient_id = line_data["ingredient_id"]
            ingredient = session.query(Ingredient).filter(Ingredient.id == ingredient_id).first()
            if not ingredient:
                raise IngredientNotFound(ingredient_id)

            line = RecipeIngredient(
                ingredient=ingredient, quantity=to_decimal(line_data["quantity"])
            )
            recipe.add_ingredient(line)


# ============================================================================
# Recipe CRUD Operations
# ============================================================================


def create_recipe(data: Dict, ingredients: Optional[List[Dict]] = None) -> Recipe:
    """
    Create a new recipe with its ingredient lines.

    Args:
        data: Dictionary with drink_name, target_margin_percent and optional notes
        ingredients: List of ``{"ingredient_id": int, "quantity": number}`` dicts

    Returns:
        Created Recipe with every derived pricing field computed

    Raises:
        ValidationError: If data validation fails
        InvalidMarginRange: If the margin is not strictly between 0 and 100
        DuplicateRecipeName: If the drink name exists (ignoring case)
        IngredientNotFound: If a line references a missing ingredient
        DatabaseError: If database operation fails
    """
    ingredients = ingredients or []

    is_valid, errors = validate_recipe_data(data, ingredients)
    if not is_valid:
        raise ValidationError(errors)

    margin = _parse_margin(data["target_margin_percent"])
    drink_name = sanitize_string(data["drink_name"])

    try:
        with session_scope() as session:
            if _name_taken(session, drink_name):
                raise DuplicateRecipeName(drink_name)

            recipe = Recipe(
                drink_name=drink_name,
                target_margin_percent=margin,
                notes=sanitize_string(data.get("notes")),
            )
            session.add(recipe)

            _add_lines(session, recipe, ingredients)
            recipe.calculate_costs()

            session.flush()

            log_operation(
                logger,
                operation="create_recipe",
                outcome="success",
                recipe_id=recipe.id,
                total_cost=str(recipe.total_cost),
                suggested_selling_price=str(recipe.suggested_selling_price),
            )
            return recipe

    except (ValidationError, InvalidMarginRange, DuplicateRecipeName, IngredientNotFound):
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to create recipe: {str(e)}", original_error=e)


def get_recipe(recipe_id: int) -> Recipe:
    """
    Get a recipe by ID, with its ingredient lines loaded.

    Raises:
        RecipeNotFound: If recipe not found
        DatabaseError: If database operation fails
    """
    try:
        with session_scope() as session:
            return _get_recipe_or_raise(session, recipe_id)

    except RecipeNotFound:
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to get recipe: {str(e)}", original_error=e)


def get_all_recipes() -> List[Recipe]:
    """All recipes ordered by drink name."""
    try:
        with session_scope() as session:
            return session.query(Recipe).order_by(Recipe.drink_name).all()

    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to get recipes: {str(e)}", original_error=e)


def search_recipes(search_term: str) -> List[Recipe]:
    """Recipes whose drink name contains search_term, ignoring case."""
    try:
        with session_scope() as session:
            return (
                session.query(Recipe)
                .filter(Recipe.drink_name.ilike(f"%{search_term}%"))
                .order_by(Recipe.drink_name)
                .all()
            )

    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to search recipes: {str(e)}", original_error=e)


def get_recipes_by_price_range(min_price, max_price) -> List[Recipe]:
    """
    Recipes whose suggested selling price lies in [min_price, max_price].

    Raises:
        ValidationError: If either bound is not a number
        InvalidPriceRange: If min_price > max_price
    """
    low, high = to_decimal(min_price), to_decimal(max_price)
    if low is None or high is None:
        raise ValidationError([f"Price Range: {ERROR_INVALID_NUMBER}"])
    if low > high:
        raise InvalidPriceRange(low, high)

    try:
        with session_scope() as session:
            return (
                session.query(Recipe)
                .filter(Recipe.suggested_selling_price.between(low, high))
                .order_by(Recipe.suggested_selling_price, Recipe.drink_name)
                .all()
            )

    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to get recipes by price: {str(e)}", original_error=e)


def get_recipes_by_minimum_margin(min_margin) -> List[Recipe]:
    """Recipes whose actual margin is at least min_margin percent."""
    threshold = to_decimal(min_margin)
    if threshold is None:
        raise ValidationError([f"Minimum Margin: {ERROR_INVALID_NUMBER}"])

    try:
        with session_scope() as session:
            return (
                session.query(Recipe)
                .filter(Recipe.actual_margin_percent >= threshold)
                .order_by(Recipe.actual_margin_percent.desc(), Recipe.drink_name)
                .all()
            )

    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to get recipes by margin: {str(e)}", original_error=e)


def update_recipe(
    recipe_id: int, data: Dict, ingredients: Optional[List[Dict]] = None
) -> Recipe:
    """
    Update a recipe and recalculate its pricing.

    Args:
        recipe_id: Recipe ID
        data: Fields to change (drink_name, target_margin_percent, notes)
        ingredients: Replacement line list; None keeps the current lines

    Returns:
        Updated Recipe instance

    Raises:
        RecipeNotFound: If recipe not found
        ValidationError: If the merged data fails validation
        InvalidMarginRange: If the margin is not strictly between 0 and 100
        DuplicateRecipeName: If renamed to an existing name
        IngredientNotFound: If a line references a missing ingredient
        DatabaseError: If database operation fails
    """
    try:
        with session_scope() as session:
            recipe = _get_recipe_or_raise(session, recipe_id)

            merged = {
                "drink_name": data.get("drink_name", recipe.drink_name),
                "target_margin_percent": data.get(
                    "target_margin_percent", recipe.target_margin_percent
                ),
                "notes": data.get("notes", recipe.notes),
            }
            is_valid, errors = validate_recipe_data(merged, ingredients)
            if not is_valid:
                raise ValidationError(errors)

            margin = _parse_margin(merged["target_margin_percent"])
            drink_name = sanitize_string(merged["drink_name"])

            if drink_name.lower() != recipe.drink_name.lower() and _name_taken(
                session, drink_name, exclude_id=recipe_id
            ):
                raise DuplicateRecipeName(drink_name)

            recipe.drink_name = drink_name
            recipe.target_margin_percent = margin
            recipe.notes = sanitize_string(merged["notes"])

            if ingredients is not None:
                recipe.clear_ingredients()
                _add_lines(session, recipe, ingredients)

            recipe.calculate_costs()
            session.flush()

            log_operation(
                logger,
                operation="update_recipe",
                outcome="success",
                recipe_id=recipe_id,
                total_cost=str(recipe.total_cost),
                suggested_selling_price=str(recipe.suggested_selling_price),
            )
            return recipe

    except (
        RecipeNotFound,
        ValidationError,
        InvalidMarginRange,
        DuplicateRecipeName,
        IngredientNotFound,
    ):
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to update recipe: {str(e)}", original_error=e)


def delete_recipe(recipe_id: int) -> bool:
    """
    Delete a recipe and its ingredient lines.

    Raises:
        RecipeNotFound: If recipe not found
        DatabaseError: If database operation fails
    """
    try:
        with session_scope() as session:
            recipe = _get_recipe_or_raise(session, recipe_id)
            session.delete(recipe)

            log_operation(logger, operation="delete_recipe", outcome="success", recipe_id=recipe_id)
            return True

    except RecipeNotFound:
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to delete recipe: {str(e)}", original_error=e)


def recalculate_recipe(recipe_id: int) -> Recipe:
    """Re-run the full cost chain for a recipe from its current lines and persist it."""
    try:
        with session_scope() as session:
            recipe = _get_recipe_or_raise(session, recipe_id)
            recipe.calculate_costs()

            log_operation(
                logger,
                operation="recalculate_recipe",
                outcome="success",
                level=logging.DEBUG,
                recipe_id=recipe_id,
            )
            return recipe

    except RecipeNotFound:
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to recalculate recipe: {str(e)}", original_error=e)


# ============================================================================
# Pricing Analysis
# ============================================================================


def calculate_what_if(recipe_id: int, new_margin_percent) -> PricingScenario:
    """
    Price a stored recipe at a candidate margin without saving anything.

    For a candidate strictly between 0 and 100 the price, gross profit and
    actual margin are recomputed from the stored total cost; otherwise the
    stored figures come back unchanged.

    Args:
        recipe_id: Recipe ID
        new_margin_percent: Candidate target margin percent

    Returns:
        PricingScenario

    Raises:
        RecipeNotFound: If recipe not found
        ValidationError: If the candidate margin is not a number
    """
    candidate = to_decimal(new_margin_percent)
    if candidate is None:
        raise ValidationError([f"Target Margin: {ERROR_INVALID_NUMBER}"])

    recipe = get_recipe(recipe_id)

    scenario = PricingScenario(
        recipe_id=recipe.id,
        drink_name=recipe.drink_name,
        total_cost=recipe.total_cost,
        target_margin_percent=candidate,
        suggested_selling_price=recipe.suggested_selling_price,
        gross_profit=recipe.gross_profit,
        actual_margin_percent=recipe.actual_margin_percent,
        net_profit=recipe.net_profit,
        net_margin_percent=recipe.net_margin_percent,
        final_selling_price=recipe.final_selling_price,
        recalculated=False,
    )

    if not _is_margin_in_range(candidate):
        return scenario

    pricing = pricing_engine.price_at_margin(recipe.total_cost, candidate)
    net = pricing_engine.calculate_net_pricing(
        total_cost=recipe.total_cost,
        gross_profit=pricing.gross_profit,
        suggested_selling_price=pricing.suggested_selling_price,
        target_margin_percent=candidate,
        allocated_expense_per_item=recipe.allocated_expense_per_item,
    )

    scenario.suggested_selling_price = pricing.suggested_selling_price
    scenario.gross_profit = pricing.gross_profit
    if pricing.actual_margin_percent is not None:
        scenario.actual_margin_percent = pricing.actual_margin_percent
    scenario.net_profit = net.net_profit
    scenario.net_margin_percent = net.net_margin_percent
    scenario.final_selling_price = net.final_selling_price
    scenario.recalculated = True

    return scenario


def get_recipe_statistics() -> RecipeStatistics:
    """Averages and complexity counts across all recipes."""
    return calculate_recipe_statistics(get_all_recipes())


def apply_expense_allocation(recipe_id: Optional[int] = None) -> List[Recipe]:
    """
    Allocate overhead per item from the authoritative business settings.

    Args:
        recipe_id: One recipe to allocate to; None allocates to every recipe

    Returns:
        The recipes updated with net profit, net margin and final price

    Raises:
        SettingsNotFound: If no business settings have been saved
        RecipeNotFound: If recipe_id is given and not found
        DatabaseError: If database operation fails
    """
    try:
        with session_scope() as session:
            settings = query_latest_settings(session)
            if settings is None:
                raise SettingsNotFound()

            if recipe_id is not None:
                recipes = [_get_recipe_or_raise(session, recipe_id)]
            else:
                recipes = session.query(Recipe).order_by(Recipe.drink_name).all()

            for recipe in recipes:
                recipe.calculate_net_profit_with_expenses(settings.expense_per_item)

            log_operation(
                logger,
                operation="apply_expense_allocation",
                outcome="success",
                expense_per_item=str(settings.expense_per_item),
                recipes_updated=len(recipes),
            )
            return recipes

    except (SettingsNotFound, RecipeNotFound):
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to allocate expenses: {str(e)}", original_error=e)


def _cost_share(line_cost: Decimal, total_cost: Decimal) -> Decimal:
    if not total_cost or total_cost <= 0:
        return ZERO
    return pricing_engine.round_half_up(line_cost / total_cost * HUNDRED, PERCENT_SCALE)


def get_recipe_summary(recipe_id: int) -> Dict:
    """
    Summarize a recipe for display.

    Returns:
        Dictionary (Decimals rendered as strings) with the recipe's pricing,
        its classifications, completeness, ingredient counts per category
        and each line's share of the total cost
    """
    recipe = get_recipe(recipe_id)

    lines = []
    for line in recipe.recipe_ingredients:
        entry = line.to_dict()
        entry["cost_share_percent"] = _cost_share(line.line_cost, recipe.total_cost)
        lines.append(entry)

    category_counts = {}
    for category in INGREDIENT_CATEGORIES:
        count = recipe.get_ingredient_count_by_category(category)
        if count:
            category_counts[category] = count

    summary = recipe.to_dict()
    summary.update(
        {
            "ingredient_count": recipe.ingredient_count,
            "is_complete": recipe.is_complete(),
            "category_counts": category_counts,
            "ingredients": lines,
        }
    )
    return decimals_to_strings(summary)
