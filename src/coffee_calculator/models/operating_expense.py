"""
OperatingExpense model for recurring monthly business costs.

Rent, utilities, salaries and the like. The sum of all monthly amounts is
the overhead that business settings spread across drinks sold.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, String, Numeric, Boolean, Index
from sqlalchemy.orm import validates

from .base import BaseModel, as_decimal
from coffee_calculator.services.pricing_engine import round_half_up
from coffee_calculator.utils.constants import (
    EXPENSE_CATEGORIES,
    EXPENSE_CATEGORY_DISPLAY_NAMES,
    DEFAULT_EXPENSE_CATEGORY_DISPLAY_NAME,
    EXPENSE_DAYS_PER_MONTH,
    MAX_EXPENSE_NOTES_LENGTH,
    MONEY_SCALE,
    ZERO,
)


class OperatingExpense(BaseModel):
    """
    A recurring monthly expense.

    Attributes:
        name: Expense name (e.g., "Shop Rent")
        category: rent, utilities, labor, marketing, equipment, supplies,
            insurance, taxes or others
        monthly_amount: Cost per month
        is_fixed: True for fixed costs (rent), False for variable ones (electricity)
        notes: Additional notes
    """

    __tablename__ = "operating_expenses"

    name = Column(String(200), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    monthly_amount = Column(Numeric(12, 2), nullable=False)
    is_fixed = Column(Boolean, nullable=False, default=True)
    notes = Column(String(MAX_EXPENSE_NOTES_LENGTH), nullable=True)

    __table_args__ = (Index("idx_expense_category_fixed", "category", "is_fixed"),)

    def __init__(self, **kwargs):
        self.is_fixed = True
        super().__init__(**kwargs)

    @validates("monthly_amount")
    def _coerce_amount(self, _key: str, value):
        return as_decimal(value, MONEY_SCALE)

    @validates("category")
    def _normalize_category(self, _key: str, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if isinstance(value, str) else value

    @property
    def category_display_name(self) -> str:
        if not self.category:
            return DEFAULT_EXPENSE_CATEGORY_DISPLAY_NAME
        return EXPENSE_CATEGORY_DISPLAY_NAMES.get(
            self.category.lower(), DEFAULT_EXPENSE_CATEGORY_DISPLAY_NAME
        )

    @property
    def expense_type(self) -> str:
        return "Fixed Expense" if self.is_fixed else "Variable Expense"

    @property
    def daily_amount(self) -> Decimal:
        """Monthly amount spread over a 30-day month, at 2 places."""
        if self.monthly_amount is None:
            return ZERO
        return round_half_up(self.monthly_amount / Decimal(EXPENSE_DAYS_PER_MONTH), MONEY_SCALE)

    def is_valid_category(self) -> bool:
        return bool(self.category) and self.category.lower() in EXPENSE_CATEGORIES

    def to_dict(self, include_relationships: bool = False) -> dict:
        result = super().to_dict(False)
        result["category_display_name"] = self.category_display_name
        result["expense_type"] = self.expense_type
        result["daily_amount"] = self.daily_amount
        return result
