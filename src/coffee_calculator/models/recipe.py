"""
Recipe models for priced drinks.

This module contains:
- Recipe: A drink with its target margin and every derived pricing field
- RecipeIngredient: Junction table linking a recipe to an ingredient at a quantity

The derived chain runs leaf-first: line cost -> total cost -> margin pricing
-> net pricing. Recipe.calculate_costs() rebuilds all of it from the current
lines; nothing is patched incrementally.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Column,
    String,
    Numeric,
    Integer,
    ForeignKey,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship, validates

from .base import BaseModel, as_decimal
from coffee_calculator.services import pricing_engine
from coffee_calculator.utils.constants import (
    EXPENSE_PER_ITEM_SCALE,
    INPUT_SCALE,
    MAX_RECIPE_NOTES_LENGTH,
    ZERO,
)


class Recipe(BaseModel):
    """
    Recipe model representing a drink priced from its ingredients.

    Attributes:
        drink_name: Drink name, unique ignoring case
        target_margin_percent: Desired profit as a percent of selling price, in (0, 100)
        notes: Additional notes
        recipe_ingredients: Owned ingredient lines

    Derived attributes:
        total_cost: Sum of line costs
        suggested_selling_price: total_cost / (1 - margin)
        gross_profit: suggested_selling_price - total_cost
        actual_margin_percent: Margin achieved after rounding
        allocated_expense_per_item: Overhead last allocated to this drink
        net_profit: gross_profit - allocated_expense_per_item
        net_margin_percent: net_profit / suggested_selling_price
        final_selling_price: Price covering ingredients, overhead and margin
    """

    __tablename__ = "recipes"

    _DERIVED_FIELDS = (
        "total_cost",
        "suggested_selling_price",
        "gross_profit",
        "actual_margin_percent",
        "allocated_expense_per_item",
        "net_profit",
        "net_margin_percent",
        "final_selling_price",
    )

    drink_name = Column(String(200), nullable=False, unique=True, index=True)
    target_margin_percent = Column(Numeric(7, 4), nullable=False)
    notes = Column(String(MAX_RECIPE_NOTES_LENGTH), nullable=True)

    # Margin pricing
    total_cost = Column(Numeric(12, 2), nullable=False, default=ZERO)
    suggested_selling_price = Column(Numeric(12, 2), nullable=False, default=ZERO, index=True)
    gross_profit = Column(Numeric(12, 2), nullable=False, default=ZERO)
    actual_margin_percent = Column(Numeric(12, 2), nullable=False, default=ZERO)

    # Operating expense allocation
    allocated_expense_per_item = Column(Numeric(12, 4), nullable=False, default=ZERO)
    net_profit = Column(Numeric(12, 2), nullable=False, default=ZERO)
    net_margin_percent = Column(Numeric(12, 2), nullable=False, default=ZERO)
    final_selling_price = Column(Numeric(12, 2), nullable=False, default=ZERO)

    recipe_ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        lazy="joined",
        order_by="RecipeIngredient.id",
    )

    def __init__(self, **kwargs):
        for field in self._DERIVED_FIELDS:
            setattr(self, field, ZERO)
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return (
            f"Recipe(id={self.id}, drink_name='{self.drink_name}', "
            f"target_margin_percent={self.target_margin_percent})"
        )

    @validates("target_margin_percent")
    def _coerce_margin(self, _key: str, value):
        return as_decimal(value, INPUT_SCALE)

    # ------------------------------------------------------------------
    # Line collection
    # ------------------------------------------------------------------

    def add_ingredient(self, recipe_ingredient: "RecipeIngredient") -> None:
        """
        Add an ingredient line and recalculate every derived field.

        Lines without an ingredient are ignored.
        """
        if recipe_ingredient is None or recipe_ingredient.ingredient is None:
            return
        self.recipe_ingredients.append(recipe_ingredient)
        self.calculate_costs()

    def remove_ingredient(self, recipe_ingredient: "RecipeIngredient") -> None:
        """
        Remove an ingredient line and recalculate every derived field.

        The removed line loses its recipe reference and is deleted on flush.
        """
        if recipe_ingredient is None or recipe_ingredient not in self.recipe_ingredients:
            return
        self.recipe_ingredients.remove(recipe_ingredient)
        self.calculate_costs()

    def clear_ingredients(self) -> None:
        """Remove all ingredient lines and recalculate."""
        self.recipe_ingredients.clear()
        self.calculate_costs()

    # ------------------------------------------------------------------
    # Pricing chain
    # ------------------------------------------------------------------

    def calculate_costs(self) -> None:
        """
        Rebuild line costs, total cost, margin pricing and net pricing.

        Net pricing reuses the overhead already allocated to this recipe, so
        net figures never lag behind a changed cost or margin.
        """
        for line in self.recipe_ingredients:
            line.calculate_line_cost()

        self.total_cost = pricing_engine.calculate_total_cost(
            (line.unit_cost, line.quantity) for line in self.recipe_ingredients
        )

        self.calculate_suggested_selling_price()
        self.calculate_net_profit_with_expenses(self.allocated_expense_per_item)

    def calculate_suggested_selling_price(self) -> None:
        """
        Price the current total cost at the target margin.

        With a non-positive cost or margin nothing is recomputed and the
        prior values stay in place.
        """
        pricing = pricing_engine.calculate_margin_pricing(
            self.total_cost, self.target_margin_percent
        )
        if pricing is None:
            return

        self.suggested_selling_price = pricing.suggested_selling_price
        self.gross_profit = pricing.gross_profit
        if pricing.actual_margin_percent is not None:
            self.actual_margin_percent = pricing.actual_margin_percent

    def calculate_net_profit_with_expenses(self, expense_per_item: Optional[Decimal]) -> None:
        """
        Allocate overhead to this drink and derive net profit, net margin and
        the overhead-inclusive final selling price.

        Args:
            expense_per_item: Overhead per item from business settings; None counts as 0
        """
        net = pricing_engine.calculate_net_pricing(
            total_cost=self.total_cost or ZERO,
            gross_profit=self.gross_profit or ZERO,
            suggested_selling_price=self.suggested_selling_price or ZERO,
            target_margin_percent=self.target_margin_percent,
            allocated_expense_per_item=as_decimal(expense_per_item, EXPENSE_PER_ITEM_SCALE),
        )
        self.allocated_expense_per_item = net.allocated_expense_per_item
        self.net_profit = net.net_profit
        self.net_margin_percent = net.net_margin_percent
        self.final_selling_price = net.final_selling_price

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    @property
    def ingredient_count(self) -> int:
        return len(self.recipe_ingredients)

    @property
    def complexity_level(self):
        """ComplexityLevel by number of ingredient lines."""
        # Import here to avoid circular import
        from coffee_calculator.services.classification import get_complexity_level

        return get_complexity_level(self.ingredient_count)

    @property
    def pricing_category(self):
        """PricingCategory by suggested selling price."""
        from coffee_calculator.services.classification import get_pricing_category

        return get_pricing_category(self.suggested_selling_price)

    @property
    def profitability_status(self):
        """ProfitabilityStatus by net margin."""
        from coffee_calculator.services.classification import get_profitability_status

        return get_profitability_status(self.net_margin_percent)

    def is_complete(self) -> bool:
        """A recipe is complete with a name, at least one line and a positive margin."""
        has_name = bool(self.drink_name and self.drink_name.strip())
        has_ingredients = len(self.recipe_ingredients) > 0
        has_margin = self.target_margin_percent is not None and self.target_margin_percent > 0
        return has_name and has_ingredients and has_margin

    def get_ingredient_count_by_category(self, category: str) -> int:
        """Number of lines whose ingredient is in category (case-insensitive)."""
        wanted = (category or "").lower()
        return sum(
            1
            for line in self.recipe_ingredients
            if line.ingredient is not None
            and line.ingredient.category
            and line.ingredient.category.lower() == wanted
        )

    def to_dict(self, include_relationships: bool = False) -> dict:
        """
        Convert recipe to dictionary.

        Args:
            include_relationships: If True, include ingredient lines

        Returns:
            Dictionary representation with classification fields
        """
        result = super().to_dict(False)
        result["complexity_level"] = self.complexity_level.value
        result["pricing_category"] = self.pricing_category.value
        result["profitability_status"] = self.profitability_status.value

        if include_relationships:
            result["ingredients"] = [line.to_dict() for line in self.recipe_ingredients]

        return result


class RecipeIngredient(BaseModel):
    """
    Junction table linking a recipe to an ingredient with a quantity.

    The line is owned by its recipe; the ingredient reference is non-owning.

    Attributes:
        recipe_id: Foreign key to Recipe
        ingredient_id: Foreign key to Ingredient
        quantity: Amount in the ingredient's base unit
        line_cost: Derived; cost_per_base_unit * quantity at 2 places
    """

    __tablename__ = "recipe_ingredients"

    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    ingredient_id = Column(
        Integer, ForeignKey("ingredients.id", ondelete="RESTRICT"), nullable=False
    )

    quantity = Column(Numeric(12, 4), nullable=False)
    line_cost = Column(Numeric(12, 2), nullable=False, default=ZERO)

    recipe = relationship("Recipe", back_populates="recipe_ingredients")
    ingredient = relationship("Ingredient", back_populates="recipe_ingredients", lazy="joined")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_recipe_ingredient_quantity_positive"),
        Index("idx_recipe_ingredient_recipe", "recipe_id"),
        Index("idx_recipe_ingredient_ingredient", "ingredient_id"),
    )

    def __init__(self, **kwargs):
        self.line_cost = ZERO
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return (
            f"RecipeIngredient(recipe_id={self.recipe_id}, "
            f"ingredient_id={self.ingredient_id}, quantity={self.quantity})"
        )

    @validates("quantity")
    def _coerce_quantity(self, _key: str, value):
        return as_decimal(value, INPUT_SCALE)

    @property
    def unit_cost(self) -> Optional[Decimal]:
        """The ingredient's cost per base unit, or None without an ingredient."""
        if self.ingredient is None:
            return None
        return self.ingredient.cost_per_base_unit

    def calculate_line_cost(self) -> Decimal:
        """Recompute and store this line's cost; 0 when ingredient or quantity is missing."""
        self.line_cost = pricing_engine.calculate_line_cost(self.unit_cost, self.quantity)
        return self.line_cost

    @property
    def formatted_quantity(self) -> str:
        """Quantity with the ingredient's base unit (e.g., "18 g")."""
        if self.quantity is None:
            return ""
        quantity = format(self.quantity.normalize(), "f")
        if self.ingredient is not None and self.ingredient.base_unit:
            return f"{quantity} {self.ingredient.base_unit}"
        return quantity

    def to_dict(self, include_relationships: bool = False) -> dict:
        """Convert line to dictionary with ingredient details flattened in."""
        result = super().to_dict(False)
        if self.ingredient is not None:
            result["ingredient_name"] = self.ingredient.name
            result["category"] = self.ingredient.category
            result["base_unit"] = self.ingredient.base_unit
            result["cost_per_base_unit"] = self.ingredient.cost_per_base_unit
        result["formatted_quantity"] = self.formatted_quantity
        return result
