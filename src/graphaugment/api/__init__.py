"""
API module - FastAPI endpoints serving an augmented schema.
"""

from __future__ import annotations

from .router import create_schema_router, error_to_dict, resolver_fields

__all__ = [
    "create_schema_router",
    "error_to_dict",
    "resolver_fields",
]
