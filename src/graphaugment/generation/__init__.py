"""
Generation - builds the augmented schema from the adapted model.
"""

from __future__ import annotations

from .aggregate_types import AggregateTypeGenerator
from .augment import (
    AugmentedSchema,
    SchemaAugmenter,
    augment_schema,
    dedupe_definitions,
    make_augmented_schema,
)
from .connection_types import ConnectionTypeGenerator
from .fulltext import FulltextGenerator
from .mutation_inputs import MutationInputGenerator
from .object_types import ObjectTypeGenerator
from .resolvers import (
    FieldResolver,
    GlobalIdResolver,
    LibraryScalar,
    ResolverKind,
    TypeResolver,
    from_global_id,
    to_global_id,
)
from .root_fields import RootFieldGenerator
from .scalar_types import ScalarTypes
from .sort_input import SortInputGenerator
from .vector import VectorGenerator
from .where_input import WhereInputGenerator

__all__ = [
    "AggregateTypeGenerator",
    "AugmentedSchema",
    "ConnectionTypeGenerator",
    "FieldResolver",
    "FulltextGenerator",
    "GlobalIdResolver",
    "LibraryScalar",
    "MutationInputGenerator",
    "ObjectTypeGenerator",
    "ResolverKind",
    "RootFieldGenerator",
    "ScalarTypes",
    "SchemaAugmenter",
    "SortInputGenerator",
    "TypeResolver",
    "VectorGenerator",
    "WhereInputGenerator",
    "augment_schema",
    "dedupe_definitions",
    "from_global_id",
    "make_augmented_schema",
    "to_global_id",
]
