"""
Validation module - checks annotated type definitions before augmentation.
"""

from __future__ import annotations

from .context import ValidationContext
from .directive_definitions import library_directives_schema
from .rules import DEFAULT_RULES
from .runner import validate_document, validate_sdl
from .utils import DocumentValidationError

__all__ = [
    "DEFAULT_RULES",
    "DocumentValidationError",
    "ValidationContext",
    "library_directives_schema",
    "validate_document",
    "validate_sdl",
]
