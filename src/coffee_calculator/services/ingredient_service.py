"""
Ingredient Service - Business logic for the ingredient catalog.

This service provides CRUD operations for ingredients and keeps every
recipe that uses an ingredient priced against its current pack data:
changing pack size or pack price re-runs the full cost chain for each
dependent recipe in the same transaction.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from coffee_calculator.models import Ingredient, RecipeIngredient
from coffee_calculator.services.database import session_scope
from coffee_calculator.services.exceptions import (
    DatabaseError,
    DuplicateIngredientName,
    IngredientInUse,
    IngredientNotFound,
    ValidationError,
)
from coffee_calculator.services.logging_utils import get_service_logger, log_operation
from coffee_calculator.utils.constants import INGREDIENT_CATEGORIES
from coffee_calculator.utils.validators import (
    sanitize_string,
    to_decimal,
    validate_ingredient_data,
)

logger = get_service_logger(__name__)

_EDITABLE_FIELDS = ("name", "category", "base_unit", "pack_size", "pack_price", "notes")


def _normalize(data: Dict) -> Dict:
    """Strip strings and convert numeric inputs to Decimal."""
    result = {}
    for key in _EDITABLE_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key in ("pack_size", "pack_price"):
            result[key] = to_decimal(value)
        elif key in ("category", "base_unit"):
            result[key] = value.strip().lower() if isinstance(value, str) else value
        else:
            result[key] = sanitize_string(value) if isinstance(value, str) else value
    return result


def _name_taken(session, name: str, exclude_id: Optional[int] = None) -> bool:
    query = session.query(Ingredient.id).filter(func.lower(Ingredient.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(Ingredient.id != exclude_id)
    return query.first() is not None


# ============================================================================
# Ingredient CRUD Operations
# ============================================================================


def create_ingredient(data: Dict) -> Ingredient:
    """
    Create a new ingredient.

    Args:
        data: Dictionary with name, category, base_unit, pack_size,
            pack_price and optional notes

    Returns:
        Created Ingredient with cost_per_base_unit derived

    Raises:
        ValidationError: If data validation fails
        DuplicateIngredientName: If the name exists (ignoring case)
        DatabaseError: If database operation fails
    """
    is_valid, errors = validate_ingredient_data(data)
    if not is_valid:
        raise ValidationError(errors)

    fields = _normalize(data)

    try:
        with session_scope() as session:
            if _name_taken(session, fields["name"]):
                raise DuplicateIngredientName(fields["name"])

            ingredient = Ingredient(**fields)
            session.add(ingredient)
            session.flush()

            log_operation(
                logger,
                operation="create_ingredient",
                outcome="success",
                ingredient_id=ingredient.id,
                cost_per_base_unit=str(ingredient.cost_per_base_unit),
            )
            return ingredient

    except (ValidationError, DuplicateIngredientName):
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to create ingredient: {str(e)}", original_error=e)


def get_ingredient(ingredient_id: int) -> Ingredient:
    """
    Get an ingredient by ID.

    Raises:
        IngredientNotFound: If ingredient not found
        DatabaseError: If database operation fails
    """
    try:
        with session_scope() as session:
            ingredient = session.query(Ingredient).filter(Ingredient.id == ingredient_id).first()

            if not ingredient:
                raise IngredientNotFound(ingredient_id)

            return ingredient

    except IngredientNotFound:
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to get ingredient: {str(e)}", original_error=e)


def get_all_ingredients(
    category: Optional[str] = None,
    name_search: Optional[str] = None,
    base_unit: Optional[str] = None,
) -> List[Ingredient]:
    """
    Get all ingredients with optional filters, ordered by category then name.

    Args:
        category: Optional exact category filter (case-insensitive)
        name_search: Optional name filter (partial match, case-insensitive)
        base_unit: Optional exact base unit filter

    Returns:
        List of Ingredient instances
    """
    try:
        with session_scope() as session:
            query = session.query(Ingredient)

            if category:
                query = query.filter(Ingredient.category == category.strip().lower())

            if name_search:
                query = query.filter(Ingredient.name.ilike(f"%{name_search}%"))

            if base_unit:
                query = query.filter(Ingredient.base_unit == base_unit.strip().lower())

            query = query.order_by(Ingredient.category, Ingredient.name)

            return query.all()

    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to get ingredients: {str(e)}", original_error=e)


def search_ingredients(search_term: str) -> List[Ingredient]:
    """Ingredients whose name contains search_term, ignoring case."""
    return get_all_ingredients(name_search=search_term)


def get_ingredients_by_category(category: str) -> List[Ingredient]:
    """Ingredients in one category, ordered by name."""
    return get_all_ingredients(category=category)


def get_all_categories() -> List[str]:
    """
    Distinct categories in use, sorted.

    Stored values outside the known category set are left out.
    """
    try:
        with session_scope() as session:
            rows = (
                session.query(Ingredient.category)
                .distinct()
                .order_by(Ingredient.category)
                .all()
            )
            return [row[0] for row in rows if row[0] in INGREDIENT_CATEGORIES]

    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to get ingredient categories: {str(e)}", original_error=e)


def update_ingredient(ingredient_id: int, data: Dict) -> Ingredient:
    """
    Update an ingredient and reprice every recipe that uses it.

    Only keys present in data are changed; the merged result is validated
    as a whole.

    Args:
        ingredient_id: Ingredient ID
        data: Dictionary with the fields to change

    Returns:
        Updated Ingredient instance

    Raises:
        IngredientNotFound: If ingredient not found
        ValidationError: If the merged data fails validation
        DuplicateIngredientName: If renamed to an existing name
        DatabaseError: If database operation fails
    """
    try:
        with session_scope() as session:
            ingredient = session.query(Ingredient).filter(Ingredient.id == ingredient_id).first()

            if not ingredient:
                raise IngredientNotFound(ingredient_id)

            merged = {key: getattr(ingredient, key) for key in _EDITABLE_FIELDS}
            merged.update({key: data[key] for key in _EDITABLE_FIELDS if key in data})

            is_valid, errors = validate_ingredient_data(merged)
            if not is_valid:
                raise ValidationError(errors)

            fields = _normalize(merged)

            if fields["name"].lower() != ingredient.name.lower() and _name_taken(
                session, fields["name"], exclude_id=ingredient_id
            ):
                raise DuplicateIngredientName(fields["name"])

            for key, value in fields.items():
                setattr(ingredient, key, value)

            # Pack validators have already refreshed cost_per_base_unit
            recipes = ingredient.get_dependent_recipes()
            for recipe in recipes:
                recipe.calculate_costs()

            session.flush()

            log_operation(
                logger,
                operation="update_ingredient",
                outcome="success",
                ingredient_id=ingredient_id,
                cost_per_base_unit=str(ingredient.cost_per_base_unit),
                recipes_repriced=len(recipes),
            )
            return ingredient

    except (IngredientNotFound, ValidationError, DuplicateIngredientName):
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to update ingredient: {str(e)}", original_error=e)


def get_dependent_recipe_count(ingredient_id: int) -> int:
    """Number of distinct recipes with a line using the ingredient."""
    try:
        with session_scope() as session:
            return (
                session.query(func.count(func.distinct(RecipeIngredient.recipe_id)))
                .filter(RecipeIngredient.ingredient_id == ingredient_id)
                .scalar()
            ) or 0

    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to count ingredient usage: {str(e)}", original_error=e)


def delete_ingredient(ingredient_id: int) -> bool:
    """
    Delete an ingredient that no recipe uses.

    Returns:
        True on deletion

    Raises:
        IngredientNotFound: If ingredient not found
        IngredientInUse: If any recipe line references the ingredient
        DatabaseError: If database operation fails
    """
    try:
        with session_scope() as session:
            ingredient = session.query(Ingredient).filter(Ingredient.id == ingredient_id).first()

            if not ingredient:
                raise IngredientNotFound(ingredient_id)

            recipe_count = len(ingredient.get_dependent_recipes())
            if recipe_count > 0:
                log_operation(
                    logger,
                    operation="delete_ingredient",
                    outcome="in_use",
                    level=logging.WARNING,
                    ingredient_id=ingredient_id,
                    recipe_count=recipe_count,
                )
                raise IngredientInUse(ingredient_id, recipe_count)

            session.delete(ingredient)

            log_operation(
                logger,
                operation="delete_ingredient",
                outcome="success",
                ingredient_id=ingredient_id,
            )
            return True

    except (IngredientNotFound, IngredientInUse):
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to delete ingredient: {str(e)}", original_error=e)
