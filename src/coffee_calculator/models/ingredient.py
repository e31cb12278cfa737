"""
Ingredient model for raw drink ingredients bought in packs.

An ingredient is priced from its pack: a 1000 g bag of espresso beans at
800.00 costs 0.8000 per gram. That cost per base unit feeds every recipe
line that uses the ingredient.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, String, Numeric, Index
from sqlalchemy.orm import relationship, validates

from .base import BaseModel, as_decimal
from coffee_calculator.services import pricing_engine
from coffee_calculator.utils.constants import (
    INGREDIENT_CATEGORIES,
    UNIT_DISPLAY_NAMES,
    DEFAULT_UNIT_DISPLAY_NAME,
    INPUT_SCALE,
    MAX_INGREDIENT_NOTES_LENGTH,
    ZERO,
)


class Ingredient(BaseModel):
    """
    Ingredient model representing a purchasable raw ingredient.

    Attributes:
        name: Ingredient name, unique ignoring case (e.g., "Espresso Beans")
        category: One of beans, milk, syrup, packaging, sauce, powder, topping
        base_unit: Unit the cost is tracked in (g, ml, pc, kg, l)
        pack_size: Size of the pack in base units
        pack_price: Price paid for one pack
        cost_per_base_unit: Derived; pack_price / pack_size at 4 places
        notes: Additional notes
    """

    __tablename__ = "ingredients"

    name = Column(String(200), nullable=False, unique=True, index=True)
    category = Column(String(50), nullable=False, index=True)
    base_unit = Column(String(10), nullable=False)

    pack_size = Column(Numeric(12, 4), nullable=False)
    pack_price = Column(Numeric(12, 4), nullable=False)
    cost_per_base_unit = Column(Numeric(12, 4), nullable=False, default=ZERO)

    notes = Column(String(MAX_INGREDIENT_NOTES_LENGTH), nullable=True)

    # Lines referencing this ingredient; deletion is blocked while any exist
    recipe_ingredients = relationship(
        "RecipeIngredient", back_populates="ingredient", lazy="select"
    )

    __table_args__ = (
        Index("idx_ingredient_category_name", "category", "name"),
    )

    def __init__(self, **kwargs):
        self.cost_per_base_unit = ZERO
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return f"Ingredient(id={self.id}, name='{self.name}', category='{self.category}')"

    @validates("pack_size", "pack_price")
    def _recalculate_on_pack_change(self, key: str, value):
        """Keep cost_per_base_unit current whenever pack data is assigned."""
        value = as_decimal(value, INPUT_SCALE)
        pack_size = value if key == "pack_size" else self.pack_size
        pack_price = value if key == "pack_price" else self.pack_price
        self.cost_per_base_unit = pricing_engine.calculate_cost_per_base_unit(
            pack_size, pack_price
        )
        return value

    @validates("category", "base_unit")
    def _normalize_code(self, _key: str, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if isinstance(value, str) else value

    def calculate_cost_per_base_unit(self) -> Decimal:
        """Recompute and store the cost of one base unit."""
        self.cost_per_base_unit = pricing_engine.calculate_cost_per_base_unit(
            self.pack_size, self.pack_price
        )
        return self.cost_per_base_unit

    def get_cost_for_quantity(self, quantity: Optional[Decimal]) -> Decimal:
        """
        Cost of a quantity of this ingredient, rounded to 2 places.

        Returns:
            0 for a missing or non-positive quantity
        """
        quantity = as_decimal(quantity, INPUT_SCALE)
        if quantity is None or quantity <= 0:
            return ZERO
        return pricing_engine.calculate_line_cost(self.cost_per_base_unit, quantity)

    @property
    def unit_display_name(self) -> str:
        """Spelled-out base unit (e.g., "grams")."""
        if not self.base_unit:
            return DEFAULT_UNIT_DISPLAY_NAME
        return UNIT_DISPLAY_NAMES.get(self.base_unit.lower(), DEFAULT_UNIT_DISPLAY_NAME)

    def is_valid_category(self) -> bool:
        """Check the category against the closed ingredient category set."""
        return bool(self.category) and self.category.lower() in INGREDIENT_CATEGORIES

    def get_dependent_recipes(self) -> list:
        """Distinct recipes with at least one line using this ingredient."""
        recipes = []
        for line in self.recipe_ingredients:
            if line.recipe is not None and line.recipe not in recipes:
                recipes.append(line.recipe)
        return recipes

    def to_dict(self, include_relationships: bool = False) -> dict:
        """
        Convert ingredient to dictionary.

        Recipe lines are never embedded; they belong to their recipes.
        """
        result = super().to_dict(False)
        result["unit_display_name"] = self.unit_display_name
        return result
