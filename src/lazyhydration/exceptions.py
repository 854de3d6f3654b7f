"""
Error taxonomy for lazy hydration.

Every wrapper raises with the original exception chained, so the
underlying data-access failure stays available as ``__cause__`` and ``cause``.
"""
from typing import Any, Dict, Optional


class LazyHydrationError(Exception):
    """Base class for errors raised while querying or hydrating."""
    code: str = "lazy_hydration_error"
    message: str
    details: Optional[Dict[str, Any]]
    cause: Optional[BaseException]

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message or self.__class__.__name__)
        if code is not None:
            self.code = code
        self.message = message or self.__class__.__name__
        self.details = details
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        if self.cause is not None:
            body["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return body


class QueryExecutionError(LazyHydrationError):
    # query failed at construction time; the iterator is unusable
    code = "query_execution_error"


class RowReadError(LazyHydrationError):
    code = "row_read_error"


class CursorClosedError(RowReadError):
    code = "cursor_closed"


class HydrationError(LazyHydrationError):
    code = "hydration_error"

    @property
    def key(self) -> Any:
        return (self.details or {}).get("key")


__all__ = [
    "LazyHydrationError",
    "QueryExecutionError",
    "RowReadError",
    "CursorClosedError",
    "HydrationError",
]
