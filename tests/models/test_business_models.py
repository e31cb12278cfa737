"""Tests for BusinessSettings and OperatingExpense models."""

from decimal import Decimal

from coffee_calculator.models import BusinessSettings, OperatingExpense


class TestBusinessSettings:
    def test_defaults(self):
        settings = BusinessSettings(expected_monthly_sales=6000)

        assert settings.working_days_per_month == 26
        assert settings.total_monthly_expenses == Decimal("0")
        assert settings.expense_per_item == Decimal("0")

    def test_expense_per_item_tracks_assignments(self):
        settings = BusinessSettings(
            expected_monthly_sales=6000, total_monthly_expenses=Decimal("30000")
        )
        assert settings.expense_per_item == Decimal("5.0000")

        settings.expected_monthly_sales = 3000
        assert settings.expense_per_item == Decimal("10.0000")

        settings.total_monthly_expenses = "10000"
        assert settings.expense_per_item == Decimal("3.3333")

    def test_daily_figures(self):
        settings = BusinessSettings(
            expected_monthly_sales=6000, total_monthly_expenses=Decimal("30000")
        )

        assert settings.daily_expense == Decimal("1153.85")
        assert settings.expected_daily_sales == 230

    def test_break_even_units(self):
        settings = BusinessSettings(
            expected_monthly_sales=6000, total_monthly_expenses=Decimal("30000")
        )

        assert settings.get_break_even_units(Decimal("7")) == 4286
        assert settings.get_break_even_units(Decimal("0")) == 0
        assert settings.get_break_even_units(None) == 0

    def test_to_dict_includes_daily_figures(self):
        result = BusinessSettings(
            expected_monthly_sales=6000, total_monthly_expenses=Decimal("30000")
        ).to_dict()

        assert result["daily_expense"] == Decimal("1153.85")
        assert result["expected_daily_sales"] == 230


class TestOperatingExpense:
    def test_fixed_by_default(self):
        rent = OperatingExpense(name="Shop Rent", category=" Rent ", monthly_amount="20000")

        assert rent.category == "rent"
        assert rent.monthly_amount == Decimal("20000")
        assert rent.is_fixed is True
        assert rent.expense_type == "Fixed Expense"
        assert rent.category_display_name == "Rent / Lease"
        assert rent.is_valid_category()

    def test_variable_expense(self):
        power = OperatingExpense(
            name="Electricity", category="utilities", monthly_amount=Decimal("4500"), is_fixed=False
        )

        assert power.expense_type == "Variable Expense"

    def test_daily_amount_uses_thirty_days(self):
        rent = OperatingExpense(name="Shop Rent", category="rent", monthly_amount=Decimal("20000"))

        assert rent.daily_amount == Decimal("666.67")
        assert OperatingExpense(name="Nothing", category="others").daily_amount == Decimal("0")

    def test_unknown_category(self):
        expense = OperatingExpense(name="Parking", category="parking", monthly_amount=100)

        assert expense.category_display_name == "Miscellaneous"
        assert not expense.is_valid_category()
