"""
Lazy Hydration Iterator
Turns a row cursor into model instances one row at a time, as they are asked for
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Generic, Iterator, Optional, TypeVar, Union

from sqlalchemy.orm import Session

from lazyhydration.descriptor import ModelDescriptor
from lazyhydration.domain.result import ABSENT, Maybe, Present
from lazyhydration.exceptions import (
    CursorClosedError,
    HydrationError,
    LazyHydrationError,
    QueryExecutionError,
    RowReadError,
)
from lazyhydration.infrastructure.database.cursor import RowCursor
from lazyhydration.infrastructure.database.hydrators import Hydrator
from lazyhydration.infrastructure.database.query import Bind, QueryExecutor
from lazyhydration.infrastructure.database.session import get_session_factory

M = TypeVar("M")
T = TypeVar("T")


class IteratorState(str, Enum):
    POSITIONED = "positioned"
    EXHAUSTED = "exhausted"


class LazyHydrationIterator(Generic[M]):
    """
    Iterates over a query result, building one model instance per row on demand.

    The query runs when the iterator is constructed; rows are only converted
    into objects when ``current()``, ``advance()`` or Python iteration reaches
    them. Rows never visited are never hydrated.

    ``current()`` and ``advance()`` build a new instance on every call; two
    ``current()`` calls at the same position return two distinct, equal
    objects.

    The cursor must be driven by one consumer at a time. Transactions belong
    to the session passed in. When no session is given one is opened from the
    default session factory and closed by ``close()``.

    Usage:
        with LazyHydrationIterator(Author, Criteria(order_by="id"), session) as authors:
            for author in authors:
                ...
    """

    def __init__(
        self,
        model: Union[type[M], ModelDescriptor[M]],
        criteria: Any = None,
        session: Optional[Bind] = None,
        hydrator: Optional[Hydrator] = None,
        query_executor: Optional[QueryExecutor] = None,
    ) -> None:
        """
        Execute the query and position on its first row.

        Args:
            model: Model class, or a descriptor carrying its capabilities
            criteria: Query specification understood by the query capability
            session: Session or Connection; defaults to a new owned session
            hydrator: Override of the model's hydration capability
            query_executor: Override of the model's query capability

        Raises:
            QueryExecutionError: If the query cannot be executed
        """
        if isinstance(model, ModelDescriptor):
            descriptor = model
        else:
            descriptor = ModelDescriptor.for_model(model)
        self._descriptor: ModelDescriptor[M] = descriptor.with_overrides(
            hydrator=hydrator, query_executor=query_executor
        )
        self._owned_session: Optional[Session] = None
        self._failure: Optional[LazyHydrationError] = None
        self._closed = False

        if session is None:
            session = self._owned_session = get_session_factory().create_session()
        self._session = session

        try:
            self._cursor: RowCursor = self._descriptor.query_executor(
                self._descriptor.model_class, criteria, session
            )
        except QueryExecutionError:
            self._release_session()
            raise
        except Exception as e:
            self._release_session()
            raise QueryExecutionError(
                f"Failed to execute query for {self._descriptor.name}",
                details={"model": self._descriptor.name},
                cause=e,
            ) from e

    @property
    def descriptor(self) -> ModelDescriptor[M]:
        return self._descriptor

    @property
    def model_class(self) -> type[M]:
        return self._descriptor.model_class

    @property
    def session(self) -> Bind:
        """Session or Connection the query ran on."""
        return self._session

    @property
    def cursor(self) -> RowCursor:
        return self._cursor

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> IteratorState:
        return IteratorState.POSITIONED if self.is_valid() else IteratorState.EXHAUSTED

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """
        Reposition on the first row. Hydrates nothing.

        A cursor that cannot rewind raises ``RowReadError`` and keeps its
        position; unlike read failures this does not abort the iterator.
        """
        self._ensure_usable()
        self._read(self._cursor.reset, abort=False)

    def has_current(self) -> bool:
        """True iff the cursor points at a row."""
        if self._closed:
            return False
        return bool(self._read(self._cursor.is_valid))

    def is_valid(self) -> bool:
        return self.has_current()

    def current(self) -> Maybe[M]:
        """
        Build and hydrate an instance from the current row.

        Returns:
            ``Present(instance)``, or ``ABSENT`` when there is no current row
        """
        self._ensure_usable()
        if not self.has_current():
            return ABSENT
        return Present(self._hydrate_current())

    def key(self) -> Any:
        """Positional key of the current row, independent of hydration."""
        self._ensure_open()
        return self._read(self._cursor.key)

    def advance(self) -> Maybe[M]:
        """
        Move to the next row and hydrate it.

        Returns:
            ``Present(instance)`` for the new row, or ``ABSENT`` once the
            result is exhausted (further calls stay ``ABSENT``)
        """
        self._ensure_usable()
        if not self._read(self._cursor.advance):
            return ABSENT
        return Present(self._hydrate_current())

    # ------------------------------------------------------------------
    # Python iteration
    # ------------------------------------------------------------------

    def __iter__(self) -> LazyHydrationIterator[M]:
        # every new loop starts over from the first row
        self.reset()
        return self

    def __next__(self) -> M:
        self._ensure_usable()
        if not self.has_current():
            raise StopIteration
        instance = self._hydrate_current()
        self._read(self._cursor.advance)
        return instance

    def items(self) -> Iterator[tuple[Any, M]]:
        """Yield ``(key, instance)`` pairs from the first row on."""
        self.reset()
        while self.has_current():
            self._ensure_usable()
            key = self._read(self._cursor.key)
            yield key, self._hydrate_current()
            self._read(self._cursor.advance)

    # ------------------------------------------------------------------
    # Resource handling
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the cursor and, if this iterator opened it, the session."""
        if self._closed:
            return
        self._closed = True
        try:
            self._cursor.close()
        finally:
            self._release_session()

    def __enter__(self) -> LazyHydrationIterator[M]:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(model={self._descriptor.name}, "
            f"state={self.state.value}, closed={self._closed})"
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _hydrate_current(self) -> M:
        key = self._read(self._cursor.key)
        row = self._read(self._cursor.row)
        try:
            instance = self._descriptor.factory()
            self._descriptor.hydrator(instance, row)
        except Exception as e:
            error = HydrationError(
                f"Failed to hydrate {self._descriptor.name} at row {key!r}",
                details={"key": key, "model": self._descriptor.name},
                cause=e,
            )
            self._failure = error
            raise error from e
        return instance

    def _read(self, call: Callable[[], T], abort: bool = True) -> T:
        try:
            return call()
        except RowReadError as e:
            if abort:
                self._failure = e
            raise
        except Exception as e:
            error = RowReadError(
                f"Failed to read cursor for {self._descriptor.name}",
                details={"model": self._descriptor.name},
                cause=e,
            )
            if abort:
                self._failure = error
            raise error from e

    def _ensure_open(self) -> None:
        if self._closed:
            raise CursorClosedError(f"Iterator over {self._descriptor.name} is closed")

    def _ensure_usable(self) -> None:
        self._ensure_open()
        if self._failure is not None:
            raise self._failure

    def _release_session(self) -> None:
        if self._owned_session is not None:
            session, self._owned_session = self._owned_session, None
            session.close()
