"""
BusinessSettings model for overhead allocation.

Each save creates a new record; the most recently created one is the
authoritative configuration. Selecting it is the settings service's job.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, Integer, Numeric, CheckConstraint
from sqlalchemy.orm import validates

from .base import BaseModel, as_decimal
from coffee_calculator.services import pricing_engine
from coffee_calculator.utils.constants import (
    DEFAULT_WORKING_DAYS_PER_MONTH,
    MONEY_SCALE,
    ZERO,
)


class BusinessSettings(BaseModel):
    """
    Monthly business figures used to spread overhead across drinks sold.

    Attributes:
        expected_monthly_sales: Drinks expected to sell per month
        working_days_per_month: Days open per month (default 26)
        total_monthly_expenses: Sum of operating expenses when last refreshed
        expense_per_item: Derived; total_monthly_expenses / expected_monthly_sales
    """

    __tablename__ = "business_settings"

    expected_monthly_sales = Column(Integer, nullable=False)
    working_days_per_month = Column(
        Integer, nullable=False, default=DEFAULT_WORKING_DAYS_PER_MONTH
    )
    total_monthly_expenses = Column(Numeric(12, 2), nullable=False, default=ZERO)
    expense_per_item = Column(Numeric(12, 4), nullable=False, default=ZERO)

    __table_args__ = (
        CheckConstraint("expected_monthly_sales > 0", name="ck_settings_sales_positive"),
        CheckConstraint("working_days_per_month > 0", name="ck_settings_days_positive"),
        CheckConstraint("total_monthly_expenses >= 0", name="ck_settings_expenses_non_negative"),
    )

    def __init__(self, **kwargs):
        self.working_days_per_month = DEFAULT_WORKING_DAYS_PER_MONTH
        self.total_monthly_expenses = ZERO
        self.expense_per_item = ZERO
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return (
            f"BusinessSettings(id={self.id}, "
            f"expected_monthly_sales={self.expected_monthly_sales}, "
            f"expense_per_item={self.expense_per_item})"
        )

    @validates("expected_monthly_sales", "total_monthly_expenses")
    def _recalculate_on_change(self, key: str, value):
        if key == "total_monthly_expenses":
            value = as_decimal(value, MONEY_SCALE)
        sales = value if key == "expected_monthly_sales" else self.expected_monthly_sales
        expenses = value if key == "total_monthly_expenses" else self.total_monthly_expenses
        self.expense_per_item = pricing_engine.calculate_expense_per_item(expenses, sales)
        return value

    def calculate_expense_per_item(self) -> Decimal:
        """Recompute and store the overhead allocated to each drink."""
        self.expense_per_item = pricing_engine.calculate_expense_per_item(
            self.total_monthly_expenses, self.expected_monthly_sales
        )
        return self.expense_per_item

    @property
    def daily_expense(self) -> Decimal:
        return pricing_engine.calculate_daily_expense(
            self.total_monthly_expenses, self.working_days_per_month
        )

    @property
    def expected_daily_sales(self) -> int:
        return pricing_engine.calculate_expected_daily_sales(
            self.expected_monthly_sales, self.working_days_per_month
        )

    def get_break_even_units(self, average_net_profit_per_item: Optional[Decimal]) -> int:
        """
        Drinks that must sell each month to cover total monthly expenses.

        Args:
            average_net_profit_per_item: Average net profit across recipes

        Returns:
            Units rounded up, or 0 when the average profit is missing or not positive
        """
        return pricing_engine.calculate_break_even_units(
            self.total_monthly_expenses, as_decimal(average_net_profit_per_item)
        )

    def to_dict(self, include_relationships: bool = False) -> dict:
        result = super().to_dict(False)
        result["daily_expense"] = self.daily_expense
        result["expected_daily_sales"] = self.expected_daily_sales
        return result
