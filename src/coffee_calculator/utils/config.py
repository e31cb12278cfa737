"""
Configuration management for the Coffee Calculator application.

This module handles:
- Database path configuration
- Environment-specific configuration (development vs. production)
- Environment variable overrides for connection and business defaults
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import (
    DATABASE_FILENAME,
    DEFAULT_WORKING_DAYS_PER_MONTH,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "COFFEE_CALCULATOR"

DEFAULT_DB_TIMEOUT = 30


class Config:
    """
    Application configuration manager.

    Handles all configuration settings including database paths,
    environment settings, and business defaults.
    """

    def __init__(self, environment: str = "production"):
        """
        Initialize configuration.

        Args:
            environment: Environment mode - 'production' or 'development'
        """
        self.environment = environment

        if environment == "development":
            self._base_dir = self._get_project_data_dir()
        else:
            self._base_dir = self._get_user_documents_dir()

        self._database_dir = self._base_dir
        self._database_path = self._database_dir / DATABASE_FILENAME

        self._database_url_override = os.environ.get(f"{ENV_PREFIX}_DATABASE_URL")
        self._db_timeout = self._read_int_env("DB_TIMEOUT", DEFAULT_DB_TIMEOUT)
        self._default_working_days = self._read_int_env(
            "WORKING_DAYS", DEFAULT_WORKING_DAYS_PER_MONTH
        )

    def _get_project_data_dir(self) -> Path:
        """Get the project's data directory for development."""
        project_root = Path(__file__).parent.parent.parent.parent
        return project_root / "data"

    def _get_user_documents_dir(self) -> Path:
        """Get the app subdirectory of the user's Documents folder for production."""
        if os.name == "nt":  # Windows
            documents = Path(os.path.expanduser("~")) / "Documents"
        else:
            documents = Path.home() / "Documents"
        return documents / "CoffeeCalculator"

    def _read_int_env(self, name: str, default: int) -> int:
        """
        Read a positive integer override from the environment.

        Invalid or non-positive values fall back to the default with a warning.
        """
        key = f"{ENV_PREFIX}_{name}"
        raw = os.environ.get(key)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            logger.warning(f"Invalid {key}={raw!r}; using default {default}")
            return default
        if value <= 0:
            logger.warning(f"Invalid {key}={raw!r}; using default {default}")
            return default
        return value

    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        self._database_dir.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        """Full path to the database file."""
        return self._database_path

    @property
    def database_url(self) -> str:
        """
        SQLAlchemy database URL.

        COFFEE_CALCULATOR_DATABASE_URL takes precedence over the file path.
        """
        if self._database_url_override:
            return self._database_url_override
        db_path_str = str(self._database_path).replace("\\", "/")
        return f"sqlite:///{db_path_str}"

    @property
    def db_timeout(self) -> int:
        """SQLite busy timeout in seconds."""
        return self._db_timeout

    @property
    def default_working_days(self) -> int:
        """Working days per month used when settings do not specify one."""
        return self._default_working_days

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def database_exists(self) -> bool:
        """Check if database file exists."""
        return self._database_path.exists()

    def __repr__(self) -> str:
        return (
            f"Config(environment='{self.environment}', " f"database_path='{self._database_path}')"
        )


_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Get the global configuration instance.

    Once created, the singleton's environment cannot be changed by passing
    a different environment argument.

    Args:
        environment: Optional environment for initial creation. If None, uses
                    COFFEE_CALCULATOR_ENV or defaults to production. Ignored if
                    singleton already exists.

    Returns:
        Config instance
    """
    global _config_instance

    if _config_instance is None:
        if environment is None:
            environment = os.environ.get(f"{ENV_PREFIX}_ENV", "production")
        _config_instance = Config(environment)
    elif environment is not None and environment != _config_instance.environment:
        logger.warning(
            f"get_config() called with environment='{environment}' but singleton "
            f"already exists with environment='{_config_instance.environment}'. "
            f"Returning existing singleton to prevent database switching."
        )

    return _config_instance


def reset_config():
    """
    Reset the global configuration instance.

    Useful for testing.
    """
    global _config_instance
    _config_instance = None


def get_database_url() -> str:
    """Get the database URL."""
    return get_config().database_url
