"""
Adapter layer - memoized, capability-aware views over the raw schema model.
"""

from __future__ import annotations

from .attribute import AGGREGABLE_SCALARS, AttributeAdapter, InputTypeNames
from .cache import AdapterCache
from .entity import (
    ConcreteEntityAdapter,
    EntityAdapter,
    InterfaceEntityAdapter,
    UnionEntityAdapter,
)
from .operations import (
    AggregateTypeNames,
    ConcreteEntityOperations,
    EntityOperations,
    FulltextTypeNames,
    InterfaceEntityOperations,
    MutationResponseTypeNames,
    RelationshipOperations,
    RootTypeFieldNames,
    UnionEntityOperations,
    VectorTypeNames,
)
from .relationship import RelationshipAdapter, RelationshipDeclarationAdapter

__all__ = [
    "AGGREGABLE_SCALARS",
    "AdapterCache",
    "AggregateTypeNames",
    "AttributeAdapter",
    "ConcreteEntityAdapter",
    "ConcreteEntityOperations",
    "EntityAdapter",
    "EntityOperations",
    "FulltextTypeNames",
    "InputTypeNames",
    "InterfaceEntityAdapter",
    "InterfaceEntityOperations",
    "MutationResponseTypeNames",
    "RelationshipAdapter",
    "RelationshipDeclarationAdapter",
    "RelationshipOperations",
    "RootTypeFieldNames",
    "UnionEntityAdapter",
    "UnionEntityOperations",
    "VectorTypeNames",
]
