"""End-to-end pricing workflow across all services.

Builds a small menu, loads overhead, allocates it and checks that
ingredient price changes flow through to every dependent figure.
"""

from decimal import Decimal

from coffee_calculator.models import PricingCategory, ProfitabilityStatus
from coffee_calculator.services import (
    business_settings_service,
    expense_service,
    ingredient_service,
    recipe_service,
)


def test_menu_pricing_workflow(test_db, espresso_beans, whole_milk):
    syrup = ingredient_service.create_ingredient(
        {
            "name": "Caramel Syrup",
            "category": "syrup",
            "base_unit": "ml",
            "pack_size": "1000",
            "pack_price": "600",
        }
    )
    cup = ingredient_service.create_ingredient(
        {
            "name": "Paper Cup 12oz",
            "category": "packaging",
            "base_unit": "pc",
            "pack_size": "50",
            "pack_price": "250",
        }
    )
    assert syrup.cost_per_base_unit == Decimal("0.6000")
    assert cup.cost_per_base_unit == Decimal("5.0000")

    # 14.40 + 10.00 + 9.00 + 5.00
    macchiato = recipe_service.create_recipe(
        {"drink_name": "Caramel Macchiato", "target_margin_percent": "35"},
        [
            {"ingredient_id": espresso_beans.id, "quantity": "18"},
            {"ingredient_id": whole_milk.id, "quantity": "200"},
            {"ingredient_id": syrup.id, "quantity": "15"},
            {"ingredient_id": cup.id, "quantity": "1"},
        ],
    )
    assert macchiato.total_cost == Decimal("38.40")
    assert macchiato.suggested_selling_price == Decimal("59.08")
    assert macchiato.gross_profit == Decimal("20.68")
    assert macchiato.actual_margin_percent == Decimal("35.00")
    assert macchiato.complexity_level.value == "Moderate"

    expense_service.create_expense(
        {"name": "Shop Rent", "category": "rent", "monthly_amount": "20000"}
    )
    expense_service.create_expense(
        {"name": "Electricity", "category": "utilities", "monthly_amount": "10000", "is_fixed": False}
    )
    settings = business_settings_service.save_settings({"expected_monthly_sales": 6000})
    assert settings.expense_per_item == Decimal("5.0000")

    recipe_service.apply_expense_allocation()

    macchiato = recipe_service.get_recipe(macchiato.id)
    assert macchiato.net_profit == Decimal("15.68")
    assert macchiato.net_margin_percent == Decimal("26.54")
    # (38.40 + 5) / 0.65
    assert macchiato.final_selling_price == Decimal("66.77")
    assert macchiato.profitability_status == ProfitabilityStatus.GOOD_PROFIT
    assert macchiato.pricing_category == PricingCategory.BUDGET

    # Beans go from 0.80 to 1.00 per gram: +3.60 on the drink
    ingredient_service.update_ingredient(espresso_beans.id, {"pack_price": "1000"})

    macchiato = recipe_service.get_recipe(macchiato.id)
    assert macchiato.total_cost == Decimal("42.00")
    assert macchiato.suggested_selling_price == Decimal("64.62")
    assert macchiato.allocated_expense_per_item == Decimal("5.0000")
    assert macchiato.net_profit == Decimal("17.62")
    assert macchiato.final_selling_price == Decimal("72.31")

    summary = business_settings_service.get_expense_summary()
    assert summary.average_net_profit == Decimal("17.62")
    # 30000 / 17.62 = 1702.6...
    assert summary.break_even_units == 1703
