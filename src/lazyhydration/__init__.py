"""
lazyhydration - lazily hydrated iteration over SQLAlchemy result sets
Rows become model objects one at a time, only when the consumer reaches them
"""

__version__ = "0.1.0"

from lazyhydration.descriptor import ModelDescriptor
from lazyhydration.domain import ABSENT, Absent, Maybe, Present
from lazyhydration.exceptions import (
    CursorClosedError,
    HydrationError,
    LazyHydrationError,
    QueryExecutionError,
    RowReadError,
)
from lazyhydration.infrastructure.database import (
    Base,
    ColumnMapHydrator,
    Criteria,
    DatabaseSessionFactory,
    Hydrator,
    MethodHydrator,
    QueryExecutor,
    ResultCursor,
    RowCursor,
    default_hydrator,
    execute_query,
    hydrate_attributes,
    query_executor,
)
from lazyhydration.infrastructure.observability import configure_logging, get_logger
from lazyhydration.iterator import IteratorState, LazyHydrationIterator

__all__ = [
    "__version__",
    # Iterator
    "LazyHydrationIterator",
    "IteratorState",
    "ModelDescriptor",
    # Results
    "ABSENT",
    "Absent",
    "Maybe",
    "Present",
    # Errors
    "LazyHydrationError",
    "QueryExecutionError",
    "RowReadError",
    "CursorClosedError",
    "HydrationError",
    # Database
    "Base",
    "Criteria",
    "RowCursor",
    "ResultCursor",
    "Hydrator",
    "hydrate_attributes",
    "ColumnMapHydrator",
    "MethodHydrator",
    "default_hydrator",
    "QueryExecutor",
    "execute_query",
    "query_executor",
    "DatabaseSessionFactory",
    # Observability
    "configure_logging",
    "get_logger",
]
