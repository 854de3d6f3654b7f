"""
Observability Infrastructure
Structured logging
"""
from lazyhydration.infrastructure.observability.logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
