"""
Expense Service - Business logic for operating expenses.

Provides CRUD operations for monthly operating expenses and the monthly
total that business settings allocate across drinks sold.
"""

from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from coffee_calculator.models import OperatingExpense
from coffee_calculator.services.database import session_scope
from coffee_calculator.services.exceptions import (
    DatabaseError,
    OperatingExpenseNotFound,
    ValidationError,
)
from coffee_calculator.services.logging_utils import get_service_logger, log_operation
from coffee_calculator.services.pricing_engine import round_half_up
from coffee_calculator.utils.constants import EXPENSE_CATEGORIES, MONEY_SCALE, ZERO
from coffee_calculator.utils.validators import (
    sanitize_string,
    to_decimal,
    validate_expense_data,
)

logger = get_service_logger(__name__)

_EDITABLE_FIELDS = ("name", "category", "monthly_amount", "is_fixed", "notes")


def _normalize(data: Dict) -> Dict:
    result = {}
    for key in _EDITABLE_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key == "monthly_amount":
            result[key] = to_decimal(value)
        elif key == "is_fixed":
            result[key] = bool(value)
        elif key == "category":
            result[key] = value.strip().lower() if isinstance(value, str) else value
        else:
            result[key] = sanitize_string(value) if isinstance(value, str) else value
    return result


def create_expense(data: Dict) -> OperatingExpense:
    """
    Create a new operating expense.

    Args:
        data: Dictionary with name, category, monthly_amount and optional
            is_fixed (default True) and notes

    Returns:
        Created OperatingExpense instance

    Raises:
        ValidationError: If data validation fails
        DatabaseError: If database operation fails
    """
    is_valid, errors = validate_expense_data(data)
    if not is_valid:
        raise ValidationError(errors)

    try:
        with session_scope() as session:
            expense = OperatingExpense(**_normalize(data))
            session.add(expense)
            session.flush()

            log_operation(
                logger,
                operation="create_expense",
                outcome="success",
                expense_id=expense.id,
                monthly_amount=str(expense.monthly_amount),
            )
            return expense

    except ValidationError:
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to create expense: {str(e)}", original_error=e)


def get_expense(expense_id: int) -> OperatingExpense:
    """
    Get an operating expense by ID.

    Raises:
        OperatingExpenseNotFound: If expense not found
        DatabaseError: If database operation fails
    """
    try:
        with session_scope() as session:
            expense = (
                session.query(OperatingExpense).filter(OperatingExpense.id == expense_id).first()
            )
            if not expense:
                raise OperatingExpenseNotFound(expense_id)
            return expense

    except OperatingExpenseNotFound:
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to get expense: {str(e)}", original_error=e)


def get_all_expenses(
    category: Optional[str] = None, is_fixed: Optional[bool] = None
) -> List[OperatingExpense]:
    """
    Get all operating expenses with optional filters, ordered by category then name.

    Args:
        category: Optional exact category filter (case-insensitive)
        is_fixed: Optional filter on fixed (True) or variable (False) expenses
    """
    try:
        with session_scope() as session:
            query = session.query(OperatingExpense)

            if category:
                query = query.filter(OperatingExpense.category == category.strip().lower())

            if is_fixed is not None:
                query = query.filter(OperatingExpense.is_fixed == is_fixed)

            return query.order_by(OperatingExpense.category, OperatingExpense.name).all()

    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to get expenses: {str(e)}", original_error=e)


def update_expense(expense_id: int, data: Dict) -> OperatingExpense:
    """
    Update an operating expense.

    Business settings keep the monthly total from their last save or
    refresh; call business_settings_service.refresh_settings() to pick up
    the change.

    Raises:
        OperatingExpenseNotFound: If expense not found
        ValidationError: If the merged data fails validation
        DatabaseError: If database operation fails
    """
    try:
        with session_scope() as session:
            expense = (
                session.query(OperatingExpense).filter(OperatingExpense.id == expense_id).first()
            )
            if not expense:
                raise OperatingExpenseNotFound(expense_id)

            merged = {key: getattr(expense, key) for key in _EDITABLE_FIELDS}
            merged.update({key: data[key] for key in _EDITABLE_FIELDS if key in data})

            is_valid, errors = validate_expense_data(merged)
            if not is_valid:
                raise ValidationError(errors)

            for key, value in _normalize(merged).items():
                setattr(expense, key, value)

            session.flush()

            log_operation(
                logger,
                operation="update_expense",
                outcome="success",
                expense_id=expense_id,
                monthly_amount=str(expense.monthly_amount),
            )
            return expense

    except (OperatingExpenseNotFound, ValidationError):
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to update expense: {str(e)}", original_error=e)


def delete_expense(expense_id: int) -> bool:
    """
    Delete an operating expense.

    Raises:
        OperatingExpenseNotFound: If expense not found
        DatabaseError: If database operation fails
    """
    try:
        with session_scope() as session:
            expense = (
                session.query(OperatingExpense).filter(OperatingExpense.id == expense_id).first()
            )
            if not expense:
                raise OperatingExpenseNotFound(expense_id)

            session.delete(expense)

            log_operation(
                logger, operation="delete_expense", outcome="success", expense_id=expense_id
            )
            return True

    except OperatingExpenseNotFound:
        raise
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to delete expense: {str(e)}", original_error=e)


def sum_monthly_expenses(session) -> Decimal:
    """Sum of every expense's monthly amount within an open session; 0 when none."""
    total = session.query(func.sum(OperatingExpense.monthly_amount)).scalar()
    if total is None:
        return ZERO
    return round_half_up(to_decimal(total), MONEY_SCALE)


def get_total_monthly_expenses() -> Decimal:
    """Total of all monthly operating expenses; 0 when there are none."""
    try:
        with session_scope() as session:
            return sum_monthly_expenses(session)

    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to total expenses: {str(e)}", original_error=e)


def get_all_categories() -> List[str]:
    """Distinct expense categories in use, sorted; unknown stored values are left out."""
    try:
        with session_scope() as session:
            rows = (
                session.query(OperatingExpense.category)
                .distinct()
                .order_by(OperatingExpense.category)
                .all()
            )
            return [row[0] for row in rows if row[0] in EXPENSE_CATEGORIES]

    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to get expense categories: {str(e)}", original_error=e)
