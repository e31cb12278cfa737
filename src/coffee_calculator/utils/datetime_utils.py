"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from coffee_calculator.utils.datetime_utils import utc_now

    # For SQLAlchemy Column defaults
    created_at = Column(DateTime, default=utc_now)
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)
