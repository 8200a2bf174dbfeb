"""
Validation runner - runs the rules over a document in a single traversal.

Usage:
    from graphql import parse
    from graphaugment.validation import validate_document, validate_sdl

    errors = validate_sdl(parse(type_defs), DEFAULT_RULES)
    for error in errors:
        print(error.message, error.path)

    validate_document(parse(type_defs), features)  # raises SchemaValidationError
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Optional

from graphql import DocumentNode, GraphQLError, GraphQLSchema, ParallelVisitor, visit
from graphql.validation import SDLValidationRule

from ..core.errors import SchemaValidationError
from ..core.features import Features
from .context import ValidationContext
from .directive_definitions import library_directives_schema
from .rules import DEFAULT_RULES


logger = logging.getLogger(__name__)

Rule = Callable[[ValidationContext], SDLValidationRule]


def validate_sdl(
    document: DocumentNode,
    rules: Sequence[Rule] = DEFAULT_RULES,
    schema_to_extend: Optional[GraphQLSchema] = None,
    callbacks: Optional[Mapping[str, Any]] = None,
) -> list[GraphQLError]:
    """Run `rules` over the document and return every reported error, in report order."""
    errors: list[GraphQLError] = []
    context = ValidationContext(document, schema_to_extend, errors.append, callbacks)
    visit(document, ParallelVisitor([rule(context) for rule in rules]))
    return errors


def validate_document(document: DocumentNode, features: Optional[Features] = None) -> None:
    """
    Validate annotated type definitions before augmentation.

    Raises:
        SchemaValidationError: carrying every error found
    """
    features = features or Features()
    errors = validate_sdl(
        document,
        DEFAULT_RULES,
        schema_to_extend=library_directives_schema(),
        callbacks=features.callbacks,
    )
    if errors:
        logger.info(f"Schema validation failed with {len(errors)} error(s)")
        for error in errors:
            logger.debug(f"Validation error at {error.path}: {error.message}")
        raise SchemaValidationError(errors)
    logger.debug(f"Validated {len(document.definitions)} definitions")
