"""
Validation rules for annotated type definitions.

Each rule is a function taking the ValidationContext and returning an
SDLValidationRule visitor; DEFAULT_RULES is the set run before augmentation.
"""

from __future__ import annotations

from .argument_values import validate_directive_argument_values
from .authorization import (
    validate_authorization_directive,
    validate_authorization_like_directives,
    validate_subscriptions_authorization_directive,
)
from .default_values import validate_coalesce_directive, validate_default_directive
from .field_directives import (
    validate_cypher_directive,
    validate_id_directive,
    validate_relay_id_directive,
    validate_timestamp_directive,
)
from .fulltext import validate_fulltext_directive
from .limit import validate_limit_directive
from .populated_by import validate_populated_by_directive
from .relationship import DUPLICATE_RELATIONSHIP_MESSAGE, validate_relationship_directive
from .valid_types import valid_object_type, valid_union_type
from .vector import validate_vector_directive

DEFAULT_RULES = (
    valid_object_type,
    valid_union_type,
    validate_relationship_directive,
    validate_limit_directive,
    validate_fulltext_directive,
    validate_vector_directive,
    validate_authorization_directive,
    validate_subscriptions_authorization_directive,
    validate_default_directive,
    validate_coalesce_directive,
    validate_populated_by_directive,
    validate_id_directive,
    validate_timestamp_directive,
    validate_relay_id_directive,
    validate_cypher_directive,
    validate_directive_argument_values,
    validate_authorization_like_directives,
)

__all__ = [
    "DEFAULT_RULES",
    "DUPLICATE_RELATIONSHIP_MESSAGE",
    "valid_object_type",
    "valid_union_type",
    "validate_authorization_directive",
    "validate_authorization_like_directives",
    "validate_coalesce_directive",
    "validate_cypher_directive",
    "validate_default_directive",
    "validate_directive_argument_values",
    "validate_fulltext_directive",
    "validate_id_directive",
    "validate_limit_directive",
    "validate_populated_by_directive",
    "validate_relationship_directive",
    "validate_relay_id_directive",
    "validate_subscriptions_authorization_directive",
    "validate_timestamp_directive",
    "validate_vector_directive",
]
