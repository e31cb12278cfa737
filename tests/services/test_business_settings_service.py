"""Tests for business_settings_service: saves, refreshes and the overhead summary."""

from decimal import Decimal

import pytest

from coffee_calculator.services import business_settings_service, expense_service, recipe_service
from coffee_calculator.services.exceptions import SettingsNotFound, ValidationError
from coffee_calculator.utils.config import reset_config


@pytest.fixture
def expenses(test_db):
    expense_service.create_expense(
        {"name": "Shop Rent", "category": "rent", "monthly_amount": "20000"}
    )
    expense_service.create_expense(
        {"name": "Electricity", "category": "utilities", "monthly_amount": "10000", "is_fixed": False}
    )


class TestSaveSettings:
    def test_no_settings_yet(self, test_db):
        assert business_settings_service.get_current_settings() is None

    def test_sums_current_expenses(self, expenses):
        settings = business_settings_service.save_settings({"expected_monthly_sales": 6000})

        assert settings.total_monthly_expenses == Decimal("30000.00")
        assert settings.expense_per_item == Decimal("5.0000")
        assert settings.working_days_per_month == 26

    def test_without_expenses(self, test_db):
        settings = business_settings_service.save_settings({"expected_monthly_sales": "6000"})

        assert settings.total_monthly_expenses == Decimal("0")
        assert settings.expense_per_item == Decimal("0")

    def test_working_days_from_environment(self, expenses, monkeypatch):
        monkeypatch.setenv("COFFEE_CALCULATOR_WORKING_DAYS", "22")
        reset_config()

        settings = business_settings_service.save_settings({"expected_monthly_sales": 6000})

        assert settings.working_days_per_month == 22

    def test_explicit_working_days(self, expenses):
        settings = business_settings_service.save_settings(
            {"expected_monthly_sales": 6000, "working_days_per_month": 30}
        )

        assert settings.working_days_per_month == 30

    @pytest.mark.parametrize("sales", [0, -10, "many", None])
    def test_invalid_sales(self, test_db, sales):
        with pytest.raises(ValidationError):
            business_settings_service.save_settings({"expected_monthly_sales": sales})

    def test_latest_save_wins(self, expenses):
        first = business_settings_service.save_settings({"expected_monthly_sales": 6000})
        second = business_settings_service.save_settings({"expected_monthly_sales": 3000})

        current = business_settings_service.get_current_settings()

        assert current.id == second.id != first.id
        assert current.expense_per_item == Decimal("10.0000")


class TestRefreshSettings:
    def test_requires_settings(self, test_db):
        with pytest.raises(SettingsNotFound):
            business_settings_service.refresh_settings()

    def test_picks_up_expense_changes(self, expenses):
        saved = business_settings_service.save_settings({"expected_monthly_sales": 6000})
        expense_service.create_expense(
            {"name": "Barista Wages", "category": "labor", "monthly_amount": "6000"}
        )

        assert business_settings_service.get_current_settings().expense_per_item == Decimal(
            "5.0000"
        )

        refreshed = business_settings_service.refresh_settings()

        assert refreshed.id == saved.id
        assert refreshed.total_monthly_expenses == Decimal("36000.00")
        assert refreshed.expense_per_item == Decimal("6.0000")


class TestExpenseSummary:
    def test_requires_settings(self, test_db):
        with pytest.raises(SettingsNotFound):
            business_settings_service.get_expense_summary()

    def test_summary_with_allocated_latte(self, latte, expenses):
        business_settings_service.save_settings({"expected_monthly_sales": 6000})
        recipe_service.apply_expense_allocation()

        summary = business_settings_service.get_expense_summary()

        assert summary.total_monthly_expenses == Decimal("30000.00")
        assert summary.expense_per_item == Decimal("5.0000")
        assert summary.daily_expense == Decimal("1153.85")
        assert summary.expected_daily_sales == 230
        assert summary.average_net_profit == Decimal("5.46")
        assert summary.break_even_units == 5495

    def test_no_recipes_means_no_break_even(self, expenses):
        business_settings_service.save_settings({"expected_monthly_sales": 6000})

        summary = business_settings_service.get_expense_summary()

        assert summary.average_net_profit == Decimal("0")
        assert summary.break_even_units == 0
