"""
Business Settings Service - Authoritative overhead configuration.

Each save creates a new BusinessSettings record; the most recently created
record is the one every allocation uses. The total monthly expense figure
is pulled from the operating expenses at save (or refresh) time.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from coffee_calculator.models import BusinessSettings, Recipe
from coffee_calculator.services.database import session_scope
from coffee_calculator.services.exceptions import (
    DatabaseError,
    SettingsNotFound,
    ValidationError,
)
from coffee_calculator.services.expense_service import sum_monthly_expenses
from coffee_calculator.services.logging_utils import get_service_logger, log_operation
from coffee_calculator.services.statistics import average_net_profit
from coffee_calculator.utils.config import get_config
from coffee_calculator.utils.validators import to_decimal, validate_settings_data

logger = get_service_logger(__name__)


@dataclass
class ExpenseSummary:
    """Overhead figures derived from the current settings.

    Attributes:
        total_monthly_expenses: Expense total captured on the settings record
        expected_monthly_sales: Drinks expected to sell per month
        working_days_per_month: Days open per month
        expense_per_item: Overhead allocated to each drink
        daily_expense: Monthly expenses spread over working days
        expected_daily_sales: Whole drinks expected per working day
        average_net_profit: Mean net profit per drink across recipes
        break_even_units: Drinks per month needed to cover expenses
    """

    total_monthly_expenses: Decimal
    expected_monthly_sales: int
    working_days_per_month: int
    expense_per_item: Decimal
    daily_expense: Decimal
    expected_daily_sales: int
    average_net_profit: Decimal
    break_even_units: int


def query_latest_settings(session) -> Optional[BusinessSettings]:
    """The authoritative settings record within an open session, or None."""
    return (
        session.query(BusinessSettings)
        .order_by(BusinessSettings.created_at.desc(), BusinessSettings.id.desc())
        .first()
    )


def get_current_settings() -> Optional[BusinessSettings]:
    """
    Get the most recently created business settings.

    Returns:
        BusinessSettings instance, or None if none have been saved
    """
    try:
        with session_scope() as session:
            return query_latest_settings(session)

    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to get business settings: {str(e)}", original_error=e)


def save_settings(data: Dict) -> BusinessSettings:
    """
    Save new authoritative business settings.

    Args:
        data: Dictionary with expected_monthly_sales and optional
            working_days_per_month (defaults to the configured working days)

    Returns:
        Created BusinessSettings with total_monthly_expenses summed from
        the operating expenses and expense_per_item derived

    Raises:
        ValidationError: If data validation fails
        DatabaseError: If database operation fails
    """
    is_valid, errors = validate_settings_data(data)
    if not is_valid:
        raise ValidationError(errors)

    expected_monthly_sales = int(to_decimal(data["expected_monthly_sales"]))
    working_days = data.get("working_days_per_month")
    if working_days is None:
        working_days = get_config().default_working_days
    else:
        working_days = int(to_decimal(working_days))

    try:
        with session_scope() as session:
            settings = BusinessSettings(
                expected_monthly_sales=expected_monthly_sales,
                working_days_per_month=working_days,
                total_monthly_expenses=sum_monthly_expenses(session),
            )
            settings.calculate_expense_per_item()
            session.add(settings)
            session.flush()

            log_operation(
                logger,
                operation="save_settings",
                outcome="success",
                settings_id=settings.id,
                total_monthly_expenses=str(settings.total_monthly_expenses),
                expense_per_item=str(settings.expense_per_item),
            )
            return settings

    except ValidationError:
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to save business settings: {str(e)}", original_error=e)


def refresh_settings() -> BusinessSettings:
    """
    Re-sum operating expenses into the current settings record.

    Recipes keep their allocated overhead until
    recipe_service.apply_expense_allocation() runs again.

    Raises:
        SettingsNotFound: If no settings have been saved
        DatabaseError: If database operation fails
    """
    try:
        with session_scope() as session:
            settings = query_latest_settings(session)
            if settings is None:
                raise SettingsNotFound()

            settings.total_monthly_expenses = sum_monthly_expenses(session)
            settings.calculate_expense_per_item()

            log_operation(
                logger,
                operation="refresh_settings",
                outcome="success",
                settings_id=settings.id,
                total_monthly_expenses=str(settings.total_monthly_expenses),
                expense_per_item=str(settings.expense_per_item),
            )
            return settings

    except SettingsNotFound:
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to refresh business settings: {str(e)}", original_error=e)


def get_expense_summary() -> ExpenseSummary:
    """
    Summarize overhead for the current settings.

    Break-even units use the average net profit across all recipes.

    Raises:
        SettingsNotFound: If no settings have been saved
        DatabaseError: If database operation fails
    """
    try:
        with session_scope() as session:
            settings = query_latest_settings(session)
            if settings is None:
                raise SettingsNotFound()

            avg_profit = average_net_profit(session.query(Recipe).all())

            return ExpenseSummary(
                total_monthly_expenses=settings.total_monthly_expenses,
                expected_monthly_sales=settings.expected_monthly_sales,
                working_days_per_month=settings.working_days_per_month,
                expense_per_item=settings.expense_per_item,
                daily_expense=settings.daily_expense,
                expected_daily_sales=settings.expected_daily_sales,
                average_net_profit=avg_profit,
                break_even_units=settings.get_break_even_units(avg_profit),
            )

    except SettingsNotFound:
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to summarize expenses: {str(e)}", original_error=e)
