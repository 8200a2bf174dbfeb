"""
graphaugment - generates a complete GraphQL API schema from annotated type definitions.

Type definitions marked with `@node`, `@relationship` and the other library
directives are validated, then expanded into filter, sort, aggregate,
connection and mutation types plus root fields, with a resolver map that
delegates execution to a host executor.

Usage:
    from graphaugment import Features, augment_schema
    from fastapi import FastAPI
    from graphaugment.api import create_schema_router

    augmented = augment_schema(type_defs, Features(limit_required=True))
    print(augmented.sdl)

    app = FastAPI()
    app.include_router(create_schema_router(type_defs))
"""

from __future__ import annotations

from .core import (
    AdapterContractError,
    AugmentError,
    ExcludeDeprecatedFields,
    ExecutorNotConfiguredError,
    Features,
    GenerationError,
    SchemaValidationError,
    TypeRegistry,
)
from .generation import (
    AugmentedSchema,
    FieldResolver,
    ResolverKind,
    augment_schema,
    from_global_id,
    make_augmented_schema,
    to_global_id,
)
from .validation import DEFAULT_RULES, DocumentValidationError, validate_document, validate_sdl

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "augment_schema",
    "make_augmented_schema",
    "validate_document",
    "validate_sdl",
    "AugmentedSchema",
    "DEFAULT_RULES",
    # Configuration
    "Features",
    "ExcludeDeprecatedFields",
    # Resolvers
    "FieldResolver",
    "ResolverKind",
    "from_global_id",
    "to_global_id",
    "TypeRegistry",
    # Errors
    "AugmentError",
    "AdapterContractError",
    "DocumentValidationError",
    "ExecutorNotConfiguredError",
    "GenerationError",
    "SchemaValidationError",
]
