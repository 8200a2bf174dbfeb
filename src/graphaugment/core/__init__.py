"""
Core module - errors, constants, classifier, type registry and features.
"""

from __future__ import annotations

from .errors import (
    AdapterContractError,
    AugmentError,
    ExecutorNotConfiguredError,
    GenerationError,
    SchemaValidationError,
)
from .features import ExcludeDeprecatedFields, Features, should_add_deprecated_fields
from .registry import (
    Argument,
    Directive,
    EnumLiteral,
    FieldConfig,
    InputType,
    ObjectType,
    TypeRegistry,
    deprecated,
)
from .type_category import TypeCategory, classify

__all__ = [
    "AdapterContractError",
    "Argument",
    "AugmentError",
    "Directive",
    "EnumLiteral",
    "ExecutorNotConfiguredError",
    "ExcludeDeprecatedFields",
    "FieldConfig",
    "Features",
    "GenerationError",
    "InputType",
    "ObjectType",
    "SchemaValidationError",
    "TypeCategory",
    "TypeRegistry",
    "classify",
    "deprecated",
    "should_add_deprecated_fields",
]
