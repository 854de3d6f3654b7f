"""
Row cursors over query results
Forward-movable pointers that hand out raw rows, one position at a time
"""
from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from sqlalchemy.engine import Result, RowMapping
from sqlalchemy.exc import SQLAlchemyError

from lazyhydration.exceptions import CursorClosedError, RowReadError
from lazyhydration.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class RowCursor(Protocol):
    """
    Cursor capability consumed by the lazy iterator.

    A cursor is single-owner: driving one cursor from two consumers at the
    same time is undefined and is not guarded against.
    """

    def reset(self) -> None:
        """Reposition to the first row."""
        ...

    def advance(self) -> bool:
        """Move to the next row; return True iff the new position is valid."""
        ...

    def key(self) -> Any:
        """Positional key of the current row."""
        ...

    def row(self) -> Mapping[str, Any]:
        """Raw data of the current row."""
        ...

    def is_valid(self) -> bool:
        """True iff the cursor points at a row."""
        ...

    def close(self) -> None:
        """Release the underlying result."""
        ...


class ResultCursor:
    """
    RowCursor over a SQLAlchemy ``Result``.

    Rows are fetched from the DBAPI cursor only when a position needs them.
    The cursor starts on the first row, so a fresh cursor and a reset one
    behave the same.

    With ``buffered=True`` (the default) every fetched raw row is retained so
    ``reset()`` can go back to the first row without re-running the query;
    memory grows with the number of rows visited, though never by model
    objects. For large results use ``buffered=False``: only the current row
    is held, and ``reset()`` is refused with ``RowReadError`` once the cursor
    has moved past the first row, leaving the position unchanged.
    """

    def __init__(self, result: Result[Any], buffered: bool = True) -> None:
        self._source = result
        self._result = result.mappings()
        self._buffered = buffered
        self._rows: list[RowMapping] = []
        self._offset = 0  # key of self._rows[0]
        self._position = 0
        self._source_exhausted = False
        self._closed = False
        self._fetch_through(0)

    @property
    def buffered(self) -> bool:
        return self._buffered

    @property
    def closed(self) -> bool:
        return self._closed

    def reset(self) -> None:
        self._ensure_open()
        if self._offset > 0:
            raise RowReadError(
                "Unbuffered cursor cannot be reset once it moved past the first row",
                details={"key": self._position},
            )
        self._position = 0
        self._fetch_through(0)

    def advance(self) -> bool:
        self._ensure_open()
        if not self.is_valid():
            return False
        self._position += 1
        self._fetch_through(self._position)
        return self.is_valid()

    def key(self) -> int | None:
        self._ensure_open()
        return self._position if self.is_valid() else None

    def row(self) -> RowMapping:
        self._ensure_open()
        if not self.is_valid():
            raise RowReadError("Cursor is not positioned on a row", details={"key": self._position})
        return self._rows[self._position - self._offset]

    def is_valid(self) -> bool:
        if self._closed:
            return False
        return self._offset <= self._position < self._offset + len(self._rows)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._rows = []
        self._source.close()
        logger.debug("Result cursor closed", position=self._position)

    def _ensure_open(self) -> None:
        if self._closed:
            raise CursorClosedError("Cursor is closed")

    def _fetch_through(self, position: int) -> None:
        while self._offset + len(self._rows) <= position and not self._source_exhausted:
            try:
                row = self._result.fetchone()
            except SQLAlchemyError as e:
                logger.error("Failed to fetch row", key=position, error=str(e))
                raise RowReadError(
                    "Failed to fetch row from result",
                    details={"key": position},
                    cause=e,
                ) from e
            if row is None:
                self._source_exhausted = True
                break
            if not self._buffered and self._rows:
                self._offset += len(self._rows)
                self._rows = []
            self._rows.append(row)

    def __repr__(self) -> str:
        return (
            f"ResultCursor(position={self._position}, fetched={self._offset + len(self._rows)}, "
            f"buffered={self._buffered}, closed={self._closed})"
        )
