"""
SQLAlchemy Declarative Base
Models iterated lazily inherit from this
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping
from uuid import UUID

from sqlalchemy import DateTime, Uuid, inspect
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for hydratable SQLAlchemy ORM models.

    Provides ``hydrate(row)``, which fills mapped column attributes from a raw
    result row keyed by column name. Columns without a mapped attribute are
    ignored so that rows from wider selects can still be used.
    """

    type_annotation_map = {
        UUID: Uuid(as_uuid=True),
        datetime: DateTime(timezone=True),
    }

    @classmethod
    def column_attribute_map(cls) -> dict[str, str]:
        """Map of column name to mapped attribute name."""
        mapper = inspect(cls)
        return {
            column.name: attr.key
            for attr in mapper.column_attrs
            for column in attr.columns
        }

    def hydrate(self, row: Mapping[str, Any]) -> None:
        """
        Populate mapped attributes from one row.

        Args:
            row: Column name to value mapping (e.g. a SQLAlchemy RowMapping)
        """
        attributes = self.column_attribute_map()
        for column, value in row.items():
            attr = attributes.get(column)
            if attr is not None:
                setattr(self, attr, value)

    def to_dict(self) -> dict[str, Any]:
        """Column attribute values, keyed by attribute name."""
        return {
            attr: getattr(self, attr, None)
            for attr in self.column_attribute_map().values()
        }

    def __repr__(self) -> str:
        """String representation showing class name and column values."""
        fields = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"<{self.__class__.__name__}({fields})>"
