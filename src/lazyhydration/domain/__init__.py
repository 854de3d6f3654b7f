"""
Domain Layer
Framework-free value types
"""
from lazyhydration.domain.result import ABSENT, Absent, Maybe, Present

__all__ = [
    "ABSENT",
    "Absent",
    "Maybe",
    "Present",
]
