"""
Hydration capabilities.

A hydrator fills one freshly allocated instance from one raw row. It is
called once per materialised row and must not keep a reference to the row.
"""
from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class Hydrator(Protocol):
    """Populate ``instance`` from ``row``. Implementations MUST NOT do I/O."""

    def __call__(self, instance: Any, row: Mapping[str, Any]) -> None:
        ...


def hydrate_attributes(instance: Any, row: Mapping[str, Any]) -> None:
    """Set every column of ``row`` as an attribute of the same name."""
    for column, value in row.items():
        setattr(instance, column, value)


class ColumnMapHydrator:
    """
    Hydrator that renames columns to attributes.

    Unmapped columns keep their own name unless ``strict`` is set, in which
    case they are rejected with ``KeyError``.
    """

    def __init__(self, column_map: Mapping[str, str], strict: bool = False) -> None:
        self.column_map = dict(column_map)
        self.strict = strict

    def __call__(self, instance: Any, row: Mapping[str, Any]) -> None:
        for column, value in row.items():
            attr = self.column_map.get(column)
            if attr is None:
                if self.strict:
                    raise KeyError(f"Unmapped column {column!r} for {type(instance).__name__}")
                attr = column
            setattr(instance, attr, value)

    def __repr__(self) -> str:
        return f"ColumnMapHydrator({self.column_map!r}, strict={self.strict})"


class MethodHydrator:
    """Delegates to a hydrate method defined on the model itself."""

    def __init__(self, method_name: str = "hydrate") -> None:
        self.method_name = method_name

    def __call__(self, instance: Any, row: Mapping[str, Any]) -> None:
        getattr(instance, self.method_name)(row)

    def __repr__(self) -> str:
        return f"MethodHydrator({self.method_name!r})"


def default_hydrator(model_class: type) -> Hydrator:
    """
    Hydrator associated with a model class: its own ``hydrate`` method when
    it defines one, plain attribute assignment otherwise.
    """
    if callable(getattr(model_class, "hydrate", None)):
        return MethodHydrator("hydrate")
    return hydrate_attributes


__all__ = [
    "Hydrator",
    "hydrate_attributes",
    "ColumnMapHydrator",
    "MethodHydrator",
    "default_hydrator",
]
