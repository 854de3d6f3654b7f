"""Test doubles shared by the unit and integration suites."""
from typing import Any, Iterable, Mapping, Optional


class Record:
    """Plain model class; counts how many instances were ever built."""

    created = 0

    def __init__(self) -> None:
        Record.created += 1

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Record) and vars(self) == vars(other)

    def __repr__(self) -> str:
        return f"Record({vars(self)!r})"


class FalsyRecord(Record):
    def __bool__(self) -> bool:
        return False


class FakeCursor:
    """In-memory RowCursor starting on the first row."""

    def __init__(self, rows: Iterable[Mapping[str, Any]], fail_on_advance_to: Optional[int] = None) -> None:
        self.rows = list(rows)
        self.position = 0
        self.closed = False
        self.fail_on_advance_to = fail_on_advance_to
        self.row_reads = 0

    def reset(self) -> None:
        self.position = 0

    def advance(self) -> bool:
        if not self.is_valid():
            return False
        self.position += 1
        if self.position == self.fail_on_advance_to:
            raise OSError("connection lost")
        return self.is_valid()

    def key(self) -> Optional[int]:
        return self.position if self.is_valid() else None

    def row(self) -> Mapping[str, Any]:
        self.row_reads += 1
        return self.rows[self.position]

    def is_valid(self) -> bool:
        return self.position < len(self.rows)

    def close(self) -> None:
        self.closed = True


class FakeQuery:
    """Query capability returning a FakeCursor and remembering its calls."""

    def __init__(self, rows: Iterable[Mapping[str, Any]], **cursor_kwargs: Any) -> None:
        self.rows = list(rows)
        self.cursor_kwargs = cursor_kwargs
        self.calls: list[tuple[type, Any, Any]] = []
        self.cursor: Optional[FakeCursor] = None

    def __call__(self, model_class: type, criteria: Any, session: Any) -> FakeCursor:
        self.calls.append((model_class, criteria, session))
        self.cursor = FakeCursor(self.rows, **self.cursor_kwargs)
        return self.cursor
