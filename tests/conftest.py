"""Pytest configuration and fixtures for Coffee Calculator tests."""

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

import coffee_calculator.models  # noqa: F401  registers every table
from coffee_calculator.models.base import Base
from coffee_calculator.utils.config import reset_config


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Swaps the global session factory so services use it
    4. Drops all tables after the test completes
    """
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    import coffee_calculator.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    yield Session

    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    db_module.get_session_factory = original_get_session


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate tests from COFFEE_CALCULATOR_* variables and the config singleton."""
    for name in (
        "COFFEE_CALCULATOR_ENV",
        "COFFEE_CALCULATOR_DATABASE_URL",
        "COFFEE_CALCULATOR_DB_TIMEOUT",
        "COFFEE_CALCULATOR_WORKING_DAYS",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def espresso_beans(test_db):
    """1000 g of beans for 800.00: 0.8000 per gram."""
    from coffee_calculator.services import ingredient_service

    return ingredient_service.create_ingredient(
        {
            "name": "Espresso Beans",
            "category": "beans",
            "base_unit": "g",
            "pack_size": Decimal("1000"),
            "pack_price": Decimal("800"),
        }
    )


@pytest.fixture
def whole_milk(test_db):
    """1000 ml of milk for 50.00: 0.0500 per ml."""
    from coffee_calculator.services import ingredient_service

    return ingredient_service.create_ingredient(
        {
            "name": "Whole Milk",
            "category": "milk",
            "base_unit": "ml",
            "pack_size": Decimal("1000"),
            "pack_price": Decimal("50"),
        }
    )


@pytest.fixture
def latte(test_db, espresso_beans, whole_milk):
    """18 g beans + 200 ml milk = 24.40 cost, priced at a 30% margin."""
    from coffee_calculator.services import recipe_service

    return recipe_service.create_recipe(
        {"drink_name": "Latte", "target_margin_percent": Decimal("30")},
        [
            {"ingredient_id": espresso_beans.id, "quantity": Decimal("18")},
            {"ingredient_id": whole_milk.id, "quantity": Decimal("200")},
        ],
    )


@pytest.fixture
def espresso(test_db, espresso_beans):
    """18 g beans = 14.40 cost, priced at a 50% margin."""
    from coffee_calculator.services import recipe_service

    return recipe_service.create_recipe(
        {"drink_name": "Espresso", "target_margin_percent": Decimal("50")},
        [{"ingredient_id": espresso_beans.id, "quantity": Decimal("18")}],
    )
