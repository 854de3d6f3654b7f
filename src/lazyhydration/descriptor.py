"""
Model descriptors
Bundle a model class with the capabilities used to query and hydrate it
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, TypeVar

from lazyhydration.infrastructure.database.hydrators import Hydrator, default_hydrator
from lazyhydration.infrastructure.database.query import QueryExecutor, execute_query

M = TypeVar("M")


@dataclass(frozen=True)
class ModelDescriptor(Generic[M]):
    """
    Which class to allocate per row and which capabilities to use.

    Attributes:
        model_class: Class of the instances produced
        hydrator: Fills one instance from one raw row
        query_executor: Runs the query and returns a row cursor
        factory: Allocates an empty instance (default: ``model_class()``)
    """

    model_class: type[M]
    hydrator: Hydrator
    query_executor: QueryExecutor
    factory: Callable[[], M]

    @classmethod
    def for_model(
        cls,
        model_class: type[M],
        *,
        hydrator: Hydrator | None = None,
        query_executor: QueryExecutor | None = None,
        factory: Callable[[], M] | None = None,
    ) -> ModelDescriptor[M]:
        return cls(
            model_class=model_class,
            hydrator=hydrator if hydrator is not None else default_hydrator(model_class),
            query_executor=query_executor if query_executor is not None else execute_query,
            factory=factory if factory is not None else model_class,
        )

    def with_overrides(self, **changes: Any) -> ModelDescriptor[M]:
        """Copy with the given capabilities replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @property
    def name(self) -> str:
        return self.model_class.__name__
