"""
Custom exceptions for the schema augmentation engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from graphql import GraphQLError


class AugmentError(Exception):
    """Base exception for all augmentation errors."""
    pass


class SchemaValidationError(AugmentError):
    """Raised when the annotated type definitions fail validation."""

    def __init__(self, errors: list[GraphQLError]):
        self.errors = errors
        messages = [error.message for error in errors]
        super().__init__(f"Validation failed: {messages}")


class GenerationError(AugmentError):
    """Raised when an internal precondition of schema generation is broken."""
    pass


class AdapterContractError(AugmentError):
    """Raised when an adapter is used without the context it requires."""
    pass


class ExecutorNotConfiguredError(AugmentError):
    """Raised when a root resolver runs without an executor in the request context."""
    pass
