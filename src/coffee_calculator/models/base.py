"""
Base model class for all database models.

Provides common functionality and fields for all models:
- Integer primary key and a UUID column
- Timestamp fields (created_at, updated_at)
- to_dict() serialization
- SQLAlchemy declarative base
"""

import uuid as uuid_lib
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base, validates

from coffee_calculator.utils.datetime_utils import utc_now

# Create the declarative base for all models
Base = declarative_base()


class BaseModel(Base):
    """
    Abstract base model with common fields and methods.

    All models inherit from this class to get:
    - id: Primary key
    - uuid: Stable external identifier
    - created_at: Timestamp when record was created
    - updated_at: Timestamp when record was last modified
    - to_dict(): Convert model to dictionary
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Stored as string for SQLite compatibility
    uuid = Column(
        String(36), unique=True, nullable=False, default=lambda: str(uuid_lib.uuid4()), index=True
    )

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self, include_relationships: bool = False) -> Dict[str, Any]:
        """
        Convert model instance to dictionary.

        Datetimes become ISO strings; Decimals are kept as Decimal so callers
        choose their own formatting (see services.dto_utils).

        Args:
            include_relationships: If True, include related objects (default: False)

        Returns:
            Dictionary representation of the model
        """
        result = {}

        for column in self.__table__.columns:
            value = getattr(self, column.name)

            if isinstance(value, datetime):
                value = value.isoformat()

            result[column.name] = value

        if include_relationships:
            for relationship in self.__mapper__.relationships:
                rel_name = relationship.key
                rel_value = getattr(self, rel_name)

                if rel_value is None:
                    result[rel_name] = None
                elif isinstance(rel_value, list):
                    result[rel_name] = [item.to_dict() for item in rel_value]
                else:
                    result[rel_name] = rel_value.to_dict()

        return result

    @validates("uuid")
    def _validate_uuid(self, _key: str, value: Any) -> str:
        """Normalize UUID values to strings for SQLite compatibility."""
        if value is None:
            return value
        return str(value)

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        attrs = []

        if hasattr(self, "id") and self.id is not None:
            attrs.append(f"id={self.id}")

        if hasattr(self, "name") and self.name is not None:
            attrs.append(f"name='{self.name}'")

        attrs_str = ", ".join(attrs)
        return f"{class_name}({attrs_str})"


def as_decimal(value: Any, scale: Optional[Decimal] = None) -> Any:
    """
    Coerce ints, floats and numeric strings assigned to Numeric columns to Decimal.

    With a scale the value is rounded half-up to it, so derived fields are
    computed from exactly what the column stores.
    """
    if isinstance(value, (int, float, str)):
        value = Decimal(str(value))
    if scale is not None and isinstance(value, Decimal) and value.is_finite():
        value = value.quantize(scale, rounding=ROUND_HALF_UP)
    return value
