"""
FastAPI router exposing an augmented schema.

Endpoints:
- GET /__schema - Returns the augmented SDL
- GET /__resolvers - Returns the bound fields of the resolver map
- POST /validate - Validates annotated SDL sent as the request body

Usage:
    from fastapi import FastAPI
    from graphaugment.api import create_schema_router

    app = FastAPI()
    app.include_router(create_schema_router(type_defs, Features(limit_required=True)))

    curl http://localhost:8000/__schema > schema.graphql
    curl -X POST --data-binary @schema.graphql http://localhost:8000/validate
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from graphql import DocumentNode, GraphQLError, GraphQLSyntaxError, parse

from ..core.features import Features
from ..generation.augment import AugmentedSchema, augment_schema
from ..validation import library_directives_schema, validate_sdl


logger = logging.getLogger(__name__)


def error_to_dict(error: GraphQLError) -> dict[str, Any]:
    return {"message": error.message, "path": list(error.path) if error.path else None}


def resolver_fields(augmented: AugmentedSchema) -> dict[str, list[str]]:
    """Type name -> names of the fields (and `__resolveType`) bound in the resolver map."""
    return {
        type_name: sorted(bindings)
        for type_name, bindings in augmented.resolvers.items()
        if isinstance(bindings, Mapping)
    }


def create_schema_router(
    type_defs: Union[DocumentNode, str], features: Optional[Features] = None
) -> APIRouter:
    """
    Augment `type_defs` once and create a router serving the result.

    Raises:
        SchemaValidationError: when the type definitions fail validation
    """
    features = features or Features()
    augmented = augment_schema(type_defs, features)
    logger.info(f"Serving augmented schema with {len(augmented.type_names)} types")

    router = APIRouter()

    def get_augmented() -> AugmentedSchema:
        return augmented

    @router.get("/__schema", response_class=PlainTextResponse)
    async def get_schema(schema: AugmentedSchema = Depends(get_augmented)) -> str:
        """
        Return the augmented schema as SDL.

        Usage:
            curl http://localhost:8000/__schema > schema.graphql
        """
        return schema.sdl

    @router.get("/__resolvers")
    async def get_resolvers(schema: AugmentedSchema = Depends(get_augmented)) -> dict[str, list[str]]:
        """Return the bound fields of the resolver map, keyed by type name."""
        return resolver_fields(schema)

    @router.post("/validate")
    async def validate(request: Request) -> dict[str, Any]:
        """
        Validate annotated type definitions sent as plain text.

        Returns:
            {"valid": bool, "errors": [{"message": str, "path": list | None}]}
        """
        try:
            body = (await request.body()).decode("utf-8")
        except UnicodeDecodeError as e:
            logger.debug(f"Rejected posted schema: {e}")
            message = f"Request body is not valid UTF-8: {e.reason}"
            return {"valid": False, "errors": [{"message": message, "path": None}]}
        try:
            document = parse(body)
        except GraphQLSyntaxError as e:
            return {"valid": False, "errors": [error_to_dict(e)]}

        errors = validate_sdl(
            document, schema_to_extend=library_directives_schema(), callbacks=features.callbacks
        )
        logger.debug(f"Validated posted schema: {len(errors)} error(s)")
        return {"valid": not errors, "errors": [error_to_dict(error) for error in errors]}

    return router

