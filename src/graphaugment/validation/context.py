"""
Validation context - shared lookups for every rule of one validation run.

Built once per document by a single scan of its definitions:
- type_map: type name -> definition plus its `extend` blocks
- interfaces_map: interface name -> implementing object type definitions
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from graphql import (
    DirectiveNode,
    DocumentNode,
    EnumTypeDefinitionNode,
    GraphQLError,
    GraphQLSchema,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
)
from graphql.validation import SDLValidationContext


TypeDefinition = Union[
    ObjectTypeDefinitionNode, InterfaceTypeDefinitionNode, UnionTypeDefinitionNode, EnumTypeDefinitionNode
]
TypeExtension = Union[ObjectTypeExtensionNode, InterfaceTypeExtensionNode, UnionTypeExtensionNode]

_DEFINITION_KINDS = (
    ObjectTypeDefinitionNode,
    InterfaceTypeDefinitionNode,
    UnionTypeDefinitionNode,
    EnumTypeDefinitionNode,
)
_EXTENSION_KINDS = (ObjectTypeExtensionNode, InterfaceTypeExtensionNode, UnionTypeExtensionNode)


@dataclass
class TypeWithExtensions:
    definition: Optional[TypeDefinition] = None
    extensions: list[TypeExtension] = field(default_factory=list)

    @property
    def directives(self) -> list[DirectiveNode]:
        """Directives of the definition followed by those of its extensions."""
        directives = list(self.definition.directives or ()) if self.definition is not None else []
        for extension in self.extensions:
            directives.extend(extension.directives or ())
        return directives

    def has_directive(self, name: str) -> bool:
        return any(directive.name.value == name for directive in self.directives)


def build_type_map(document: DocumentNode) -> dict[str, TypeWithExtensions]:
    type_map: dict[str, TypeWithExtensions] = {}
    for definition in document.definitions:
        if isinstance(definition, _DEFINITION_KINDS):
            type_map.setdefault(definition.name.value, TypeWithExtensions()).definition = definition
        elif isinstance(definition, _EXTENSION_KINDS):
            type_map.setdefault(definition.name.value, TypeWithExtensions()).extensions.append(definition)
    return type_map


def build_interfaces_map(
    document: DocumentNode, type_map: Mapping[str, TypeWithExtensions]
) -> dict[str, list[ObjectTypeDefinitionNode]]:
    interfaces_map: dict[str, list[ObjectTypeDefinitionNode]] = {}
    for definition in document.definitions:
        if not isinstance(definition, (ObjectTypeDefinitionNode, ObjectTypeExtensionNode)):
            continue
        concrete = type_map[definition.name.value].definition
        for interface in definition.interfaces or ():
            implementations = interfaces_map.setdefault(interface.name.value, [])
            if isinstance(concrete, ObjectTypeDefinitionNode) and concrete not in implementations:
                implementations.append(concrete)
    return interfaces_map


class ValidationContext(SDLValidationContext):
    """
    SDL validation context with type and interface lookups.

    `callbacks` are the `@populatedBy` callbacks from the features; they are
    only checked for existence, never invoked.
    """

    def __init__(
        self,
        ast: DocumentNode,
        schema: Optional[GraphQLSchema],
        on_error: Callable[[GraphQLError], None],
        callbacks: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(ast, schema, on_error)
        self.callbacks = callbacks
        self.type_map = build_type_map(ast)
        self.interfaces_map = build_interfaces_map(ast, self.type_map)

    @property
    def enum_definitions(self) -> dict[str, EnumTypeDefinitionNode]:
        return {
            name: entry.definition
            for name, entry in self.type_map.items()
            if isinstance(entry.definition, EnumTypeDefinitionNode)
        }
