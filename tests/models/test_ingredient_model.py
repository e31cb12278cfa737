"""Tests for the Ingredient model's pack costing."""

from decimal import Decimal

import pytest

from coffee_calculator.models import Ingredient


@pytest.fixture
def beans():
    return Ingredient(
        name="Espresso Beans",
        category="Beans",
        base_unit="G",
        pack_size=Decimal("1000"),
        pack_price=Decimal("800"),
    )


def test_cost_per_base_unit_derived_on_construction(beans):
    assert beans.cost_per_base_unit == Decimal("0.8000")


def test_codes_are_lowercased(beans):
    assert beans.category == "beans"
    assert beans.base_unit == "g"
    assert beans.is_valid_category()


def test_pack_change_reprices(beans):
    beans.pack_price = Decimal("1000")
    assert beans.cost_per_base_unit == Decimal("1.0000")

    beans.pack_size = 250
    assert beans.pack_size == Decimal("250")
    assert beans.cost_per_base_unit == Decimal("4.0000")


def test_pack_price_rounded_to_stored_scale(beans):
    beans.pack_size = 1
    beans.pack_price = "0.12345"

    assert beans.pack_price == Decimal("0.1235")
    assert beans.cost_per_base_unit == Decimal("0.1235")


def test_zero_pack_size_costs_nothing(beans):
    beans.pack_size = Decimal("0")
    assert beans.cost_per_base_unit == Decimal("0")


def test_no_pack_data_costs_nothing():
    assert Ingredient(name="Vanilla Syrup").cost_per_base_unit == Decimal("0")


def test_get_cost_for_quantity(beans):
    assert beans.get_cost_for_quantity(Decimal("18")) == Decimal("14.40")
    assert beans.get_cost_for_quantity("18") == Decimal("14.40")
    assert beans.get_cost_for_quantity(Decimal("0")) == Decimal("0")
    assert beans.get_cost_for_quantity(None) == Decimal("0")


def test_unit_display_name(beans):
    assert beans.unit_display_name == "grams"
    beans.base_unit = "tbsp"
    assert beans.unit_display_name == "units"


def test_unknown_category_is_invalid(beans):
    beans.category = "cheese"
    assert not beans.is_valid_category()


def test_to_dict_includes_display_unit(beans):
    result = beans.to_dict()

    assert result["name"] == "Espresso Beans"
    assert result["cost_per_base_unit"] == Decimal("0.8000")
    assert result["unit_display_name"] == "grams"
