"""Tests for database engine, session scope and reset helpers."""

import pytest

from coffee_calculator.models import Ingredient
from coffee_calculator.services import database, ingredient_service
from coffee_calculator.utils.config import reset_config


@pytest.fixture
def memory_db(monkeypatch):
    monkeypatch.setenv("COFFEE_CALCULATOR_DATABASE_URL", "sqlite:///:memory:")
    reset_config()
    database.close_connections()
    database.initialize_app_database()
    yield
    database.close_connections()


def _beans():
    return {
        "name": "Espresso Beans",
        "category": "beans",
        "base_unit": "g",
        "pack_size": "1000",
        "pack_price": "800",
    }


def test_initialized_database_verifies(memory_db):
    assert database.verify_database()


def test_foreign_keys_enforced(memory_db):
    with database.session_scope() as session:
        assert session.connection().exec_driver_sql("PRAGMA foreign_keys").scalar() == 1


def test_session_scope_rolls_back_on_error(memory_db):
    with pytest.raises(RuntimeError):
        with database.session_scope() as session:
            session.add(
                Ingredient(
                    name="Whole Milk",
                    category="milk",
                    base_unit="ml",
                    pack_size=1000,
                    pack_price=50,
                )
            )
            session.flush()
            raise RuntimeError("abort")

    assert ingredient_service.get_all_ingredients() == []


def test_reset_requires_confirmation(memory_db):
    with pytest.raises(ValueError):
        database.reset_database()


def test_reset_drops_data(memory_db):
    ingredient_service.create_ingredient(_beans())

    database.reset_database(confirm=True)

    assert ingredient_service.get_all_ingredients() == []
    assert database.verify_database()
