"""
Query capability
Runs the select for a model once and hands back a row cursor
"""
from __future__ import annotations

from typing import Any, Callable, Mapping, Union

import structlog
from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable

from lazyhydration.exceptions import QueryExecutionError
from lazyhydration.infrastructure.database.criteria import Criteria
from lazyhydration.infrastructure.database.cursor import ResultCursor, RowCursor
from lazyhydration.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)

Bind = Union[Session, Connection]
QuerySpec = Union[Criteria, Executable, str, None]

# (model_class, criteria, session) -> RowCursor
QueryExecutor = Callable[[type, Any, Bind], RowCursor]


def build_statement(model_class: type, criteria: QuerySpec) -> Executable:
    """
    Turn a query specification into an executable statement.

    Args:
        model_class: Mapped model class the rows belong to
        criteria: ``Criteria``, a prebuilt statement, raw SQL text, or None
            for every row of the model's table

    Raises:
        TypeError: If the specification type is not supported
    """
    if criteria is None:
        return Criteria().to_select(model_class)
    if isinstance(criteria, Criteria):
        return criteria.to_select(model_class)
    if isinstance(criteria, str):
        return text(criteria)
    if isinstance(criteria, Executable):
        return criteria
    raise TypeError(f"Unsupported query specification: {type(criteria).__name__}")


def execute_query(
    model_class: type,
    criteria: QuerySpec,
    session: Bind,
    params: Mapping[str, Any] | None = None,
    buffered: bool = True,
) -> ResultCursor:
    """
    Execute the query for ``model_class`` and wrap the result in a cursor.

    The query runs immediately; only row-to-object conversion is deferred.

    Args:
        model_class: Mapped model class
        criteria: Query specification, see ``build_statement``
        session: Session or Connection to execute on; its transaction scope applies
        params: Bind parameters for textual SQL
        buffered: Keep fetched rows so the cursor can be reset. When False
            the driver is asked to stream (``stream_results``) and only the
            current row is held in memory.

    Returns:
        Cursor positioned on the first row

    Raises:
        QueryExecutionError: If the statement cannot be built or executed
    """
    model_name = model_class.__name__
    execution_options = {} if buffered else {"stream_results": True}
    with structlog.contextvars.bound_contextvars(model=model_name):
        try:
            statement = build_statement(model_class, criteria)
            result = session.execute(statement, params, execution_options=execution_options)
            cursor = ResultCursor(result, buffered=buffered)
        except (SQLAlchemyError, TypeError, ValueError) as e:
            logger.error("Hydration query failed", error=str(e))
            raise QueryExecutionError(
                f"Failed to execute query for {model_name}",
                details={"model": model_name},
                cause=e,
            ) from e

        logger.debug("Hydration query executed", buffered=buffered)
    return cursor


def query_executor(params: Mapping[str, Any] | None = None, buffered: bool = True) -> QueryExecutor:
    """
    Build a query capability with fixed bind parameters and buffering.

    Usage:
        LazyHydrationIterator(Author, "SELECT * FROM authors WHERE id > :id",
                              session, query_executor=query_executor({"id": 10}))
    """

    def _execute(model_class: type, criteria: QuerySpec, session: Bind) -> RowCursor:
        return execute_query(model_class, criteria, session, params=params, buffered=buffered)

    return _execute
