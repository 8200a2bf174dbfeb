"""
Resolver bindings - the callables placed in the resolver map.

The engine never executes anything itself. Root fields delegate to a host
executor found in the request context; nested fields project the value the
executor already placed on the parent object.

Usage:
    def executor(binding, root, args, info):
        if binding.kind == ResolverKind.READ:
            return store.find(binding.entity, args)
        ...

    graphql_sync(schema, query, context_value={"executor": executor})
"""

from __future__ import annotations

import base64
import datetime
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from graphql import GraphQLResolveInfo

from ..core.errors import ExecutorNotConfiguredError


class ResolverKind:
    READ = "read"
    CONNECTION = "connection"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    CYPHER = "cypher"
    NODE = "node"
    RELATIONSHIP = "relationship"
    AGGREGATE = "aggregate"
    FULLTEXT = "fulltext"
    VECTOR = "vector"

    ROOT = (READ, CONNECTION, CREATE, UPDATE, DELETE, CYPHER, NODE, FULLTEXT, VECTOR)


def _executor(info: GraphQLResolveInfo):
    context = info.context
    if isinstance(context, Mapping):
        return context.get("executor")
    return getattr(context, "executor", None)


def _project(root: Any, name: str) -> Any:
    if root is None:
        return None
    if isinstance(root, Mapping):
        return root.get(name)
    return getattr(root, name, None)


@dataclass(frozen=True)
class FieldResolver:
    """
    A field bound to the host executor.

    `kind` says what the field does (one of ResolverKind), `entity` names the
    entity it operates on and `field` the field it is bound to. `statement`
    is only set for @cypher fields.
    """
    kind: str
    field: str
    entity: Optional[str] = None
    statement: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def is_root(self) -> bool:
        return self.kind in ResolverKind.ROOT

    def __call__(self, root: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
        executor = _executor(info)
        if executor is None:
            if self.is_root:
                raise ExecutorNotConfiguredError(
                    f"No executor in the request context to resolve {info.parent_type.name}.{self.field}"
                )
            return _project(root, info.field_name)
        return executor(self, root, args, info)


@dataclass(frozen=True)
class GlobalIdResolver:
    """Resolves `id` on a global node as base64("<Entity>:<value>")."""
    entity: str
    id_field: str

    def __call__(self, root: Any, info: GraphQLResolveInfo, **args: Any) -> Optional[str]:
        value = _project(root, self.id_field)
        if value is None:
            return None
        return to_global_id(self.entity, value)


def to_global_id(entity: str, value: Any) -> str:
    return base64.b64encode(f"{entity}:{value}".encode()).decode()


def from_global_id(global_id: str) -> tuple[str, str]:
    """Inverse of to_global_id: (entity name, field value)."""
    entity, _, value = base64.b64decode(global_id).decode().partition(":")
    return entity, value


@dataclass(frozen=True)
class TypeResolver:
    """`__resolveType` for interfaces and unions: reads the `__resolveType` key set by the executor."""
    name: str

    def __call__(self, value: Any, info: GraphQLResolveInfo, abstract_type: Any = None) -> Optional[str]:
        return _project(value, "__resolveType")


# =============================================================================
# Library scalars
# =============================================================================


@dataclass(frozen=True)
class LibraryScalar:
    """
    Value conversion for a library scalar.

    BigInt values are exchanged as strings; temporal values as ISO-8601
    strings. Duration strings are passed through unchanged.
    """
    name: str

    def serialize(self, value: Any) -> Any:
        if self.name == "BigInt":
            return str(value)
        if isinstance(value, (datetime.date, datetime.time)):
            return value.isoformat()
        return value

    def parse_value(self, value: Any) -> Any:
        if self.name == "BigInt":
            return int(value)
        if not isinstance(value, str):
            raise TypeError(f"{self.name} cannot represent non-string value: {value!r}")
        if self.name == "Date":
            return datetime.date.fromisoformat(value)
        if self.name in ("DateTime", "LocalDateTime"):
            return datetime.datetime.fromisoformat(value)
        if self.name in ("Time", "LocalTime"):
            return datetime.time.fromisoformat(value)
        return value
