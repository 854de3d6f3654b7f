"""
Database Infrastructure
Declarative base, criteria, cursors, hydrators, query execution and sessions
"""
from lazyhydration.infrastructure.database.base_model import Base
from lazyhydration.infrastructure.database.criteria import Criteria
from lazyhydration.infrastructure.database.cursor import ResultCursor, RowCursor
from lazyhydration.infrastructure.database.hydrators import (
    ColumnMapHydrator,
    Hydrator,
    MethodHydrator,
    default_hydrator,
    hydrate_attributes,
)
from lazyhydration.infrastructure.database.query import (
    QueryExecutor,
    build_statement,
    execute_query,
    query_executor,
)
from lazyhydration.infrastructure.database.session import (
    DatabaseSessionFactory,
    get_session_factory,
    reset_session_factory,
    set_session_factory,
)

__all__ = [
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
    "build_statement",
    "execute_query",
    "query_executor",
    "DatabaseSessionFactory",
    "get_session_factory",
    "set_session_factory",
    "reset_session_factory",
]
