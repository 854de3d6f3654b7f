"""
Query criteria for lazily hydrated selects
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from sqlalchemy import Select, select
from sqlalchemy.sql import ColumnElement


@dataclass
class Criteria:
    """
    Filter, ordering and paging for a single-model select.

    Attributes:
        filters: Column name to value; lists/tuples/sets become ``IN``,
            ``None`` becomes ``IS NULL``
        where: Extra SQLAlchemy boolean clauses, ANDed with the filters
        order_by: Column name(s); prefix with ``-`` for descending
        limit: Maximum rows to return
        offset: Number of rows to skip
    """

    filters: dict[str, Any] = field(default_factory=dict)
    where: list[ColumnElement[bool]] = field(default_factory=list)
    order_by: str | Sequence[str] | None = None
    limit: int | None = None
    offset: int | None = None

    def add(self, column: str, value: Any) -> Criteria:
        """Add an equality (or IN / IS NULL) filter and return self."""
        self.filters[column] = value
        return self

    def add_where(self, clause: ColumnElement[bool]) -> Criteria:
        self.where.append(clause)
        return self

    def to_select(self, model_class: type) -> Select:
        """
        Build a select over the model's table columns.

        Rows come back as plain column tuples, not ORM entities, so that
        building model objects stays with the hydrator.

        Raises:
            TypeError: If ``model_class`` is not a mapped class
            ValueError: If a filter or ordering names an unknown column
        """
        table = getattr(model_class, "__table__", None)
        if table is None:
            raise TypeError(f"{model_class.__name__} is not a mapped class")
        columns = table.columns

        stmt = select(*columns)

        for name, value in self.filters.items():
            column = self._column(columns, name)
            if value is None:
                stmt = stmt.where(column.is_(None))
            elif isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)

        for clause in self.where:
            stmt = stmt.where(clause)

        for name in self._order_names():
            if name.startswith("-"):
                stmt = stmt.order_by(self._column(columns, name[1:]).desc())
            else:
                stmt = stmt.order_by(self._column(columns, name).asc())

        if self.offset:
            stmt = stmt.offset(self.offset)
        if self.limit is not None:
            stmt = stmt.limit(self.limit)
        return stmt

    def _order_names(self) -> list[str]:
        if self.order_by is None:
            return []
        if isinstance(self.order_by, str):
            return [self.order_by]
        return list(self.order_by)

    @staticmethod
    def _column(columns: Any, name: str) -> Any:
        if name not in columns:
            raise ValueError(f"Unknown column {name!r}")
        return columns[name]
