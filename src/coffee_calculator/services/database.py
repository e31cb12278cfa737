"""
SQLite engine and session handling for Coffee Calculator.

Services never open sessions themselves; they go through session_scope(),
which commits on success and rolls back on any error. Sessions are created
with expire_on_commit=False so services can hand detached rows back to the CLI.
"""

from typing import Optional
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, close_all_sessions
from sqlalchemy.pool import StaticPool

from ..utils.config import get_config
from ..models.base import Base

logger = logging.getLogger(__name__)

PRICING_TABLES = ("ingredients", "recipes", "recipe_ingredients", "operating_expenses", "business_settings")

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    # Ingredient deletion relies on RESTRICT from recipe lines
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def _is_memory_url(database_url: str) -> bool:
    return ":memory:" in database_url or "mode=memory" in database_url


def create_database_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """Build an engine for ``database_url``, defaulting to the configured pricing database."""
    config = get_config()
    database_url = database_url or config.database_url
    logger.info(f"Creating database engine: {database_url}")

    if _is_memory_url(database_url):
        # One shared connection, otherwise every session sees an empty database
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False, "timeout": config.db_timeout},
    )


def _import_models() -> None:
    from ..models import (  # noqa: F401
        ingredient,
        recipe,
        business_settings,
        operating_expense,
    )


def init_database(engine: Optional[Engine] = None) -> None:
    """Create any missing pricing tables; existing tables and rows are left alone."""
    engine = engine or get_engine()
    _import_models()
    Base.metadata.create_all(engine)
    logger.info("Pricing tables ready")


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_database_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _SessionFactory


@contextmanager
def session_scope():
    """
    Yield a session for one unit of work.

    Example:
        with session_scope() as session:
            recipe = session.get(Recipe, recipe_id)
            recipe.target_margin_percent = Decimal("35")
            recipe.calculate_costs()
    """
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def verify_database() -> bool:
    """Return True when every pricing table exists."""
    try:
        tables = set(inspect(get_engine()).get_table_names())
    except SQLAlchemyError as e:
        logger.error(f"Database verification failed: {e}")
        return False
    return all(table in tables for table in PRICING_TABLES)


def reset_database(confirm: bool = False) -> None:
    """
    Drop and recreate every pricing table.

    Raises:
        ValueError: If confirm is not True
    """
    if not confirm:
        raise ValueError("Must pass confirm=True to reset database. This will delete all data!")

    logger.warning("Dropping all ingredients, recipes and expenses")
    engine = get_engine()
    _import_models()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)


def close_connections() -> None:
    """Dispose of the engine so the next call reconnects using current configuration."""
    global _engine, _SessionFactory

    if _SessionFactory is not None:
        close_all_sessions()
        _SessionFactory = None
    if _engine is not None:
        _engine.dispose()
        _engine = None

    logger.info("Database connections closed")


def initialize_app_database() -> None:
    """Make sure the data directory and all pricing tables exist; called once at CLI start."""
    config = get_config()

    if config.database_url.startswith("sqlite:///") and not _is_memory_url(config.database_url):
        if config.database_exists():
            logger.info(f"Using existing database at: {config.database_path}")
        else:
            config.ensure_directories()
            logger.info(f"Creating new database at: {config.database_path}")

    init_database(get_engine())

    if not verify_database():
        logger.warning("Database verification failed - tables may not exist")
