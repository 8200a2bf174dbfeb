"""
Helpers shared by the validation rules: check results, locations and paths.

A check returns `DocumentValidationError | None`; the rule turns a failure
into a GraphQLError with the path of the offending usage:

    error = check_limit(directive)
    if error is not None:
        report(rule, error, [node], [type_name, "@limit"])
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Optional, Union

from graphql import (
    DirectiveNode,
    FieldDefinitionNode,
    GraphQLError,
    InputValueDefinitionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ListTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    TypeNode,
    UnionTypeDefinitionNode,
    value_from_ast_untyped,
)
from graphql.language import Node
from graphql.validation import ASTValidationRule

from ..core import constants
from ..core.constants import ROOT_TYPE_NAMES
from .context import TypeWithExtensions, ValidationContext


PathSegment = Union[str, int]

_PARENT_KINDS = (
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
)
_NAMED_PATH_KINDS = _PARENT_KINDS + (FieldDefinitionNode, InputValueDefinitionNode)


# =============================================================================
# Check results
# =============================================================================


@dataclass(frozen=True)
class DocumentValidationError:
    """A failed check: the message and the path below the directive usage."""
    message: str
    path: tuple[PathSegment, ...] = ()


def report(
    rule: ASTValidationRule,
    error: DocumentValidationError,
    nodes: Sequence[Node],
    path: Optional[Sequence[PathSegment]] = None,
) -> None:
    """Report a failed check on the rule's context."""
    full_path = [*path, *error.path] if path is not None else None
    rule.report_error(GraphQLError(error.message, list(nodes), path=full_path))


# =============================================================================
# Directives and types
# =============================================================================


def find_directive(directives: Optional[Sequence[DirectiveNode]], name: str) -> Optional[DirectiveNode]:
    for directive in directives or ():
        if directive.name.value == name:
            return directive
    return None


def argument_value(directive: DirectiveNode, name: str) -> Any:
    """The plain value of a directive argument; None when the argument is absent."""
    for argument in directive.arguments or ():
        if argument.name.value == name:
            return value_from_ast_untyped(argument.value)
    return None


def find_argument(directive: DirectiveNode, name: str):
    for argument in directive.arguments or ():
        if argument.name.value == name:
            return argument
    return None


def inner_type_name(type_node: TypeNode) -> str:
    while isinstance(type_node, (ListTypeNode, NonNullTypeNode)):
        type_node = type_node.type
    return type_node.name.value


def is_list_type(type_node: TypeNode) -> bool:
    if isinstance(type_node, NonNullTypeNode):
        type_node = type_node.type
    return isinstance(type_node, ListTypeNode)


# =============================================================================
# Locations
# =============================================================================


def parent_type(ancestors: Sequence[Any]) -> Optional[Node]:
    """The closest enclosing object or interface definition (or extension)."""
    for ancestor in reversed(ancestors):
        if isinstance(ancestor, _PARENT_KINDS):
            return ancestor
    return None


def _parent_entry(context: ValidationContext, ancestors: Sequence[Any]) -> Optional[TypeWithExtensions]:
    parent = parent_type(ancestors)
    if parent is None:
        return None
    return context.type_map.get(parent.name.value)


def type_is_node(context: ValidationContext, definition: ObjectTypeDefinitionNode) -> bool:
    entry = context.type_map.get(definition.name.value)
    if entry is None:
        return find_directive(definition.directives, constants.NODE) is not None
    return entry.has_directive(constants.NODE)


def interface_is_node(context: ValidationContext, interface: InterfaceTypeDefinitionNode) -> bool:
    """True unless some implementation lacks `@node`; an unimplemented interface counts as a node interface."""
    return all(type_is_node(context, concrete) for concrete in context.interfaces_map.get(interface.name.value, []))


def union_is_node(context: ValidationContext, union: UnionTypeDefinitionNode) -> bool:
    for member in union.types or ():
        entry = context.type_map.get(member.name.value)
        if entry is not None and isinstance(entry.definition, ObjectTypeDefinitionNode):
            if not type_is_node(context, entry.definition):
                return False
    return True


def field_is_in_node_type(context: ValidationContext, ancestors: Sequence[Any]) -> bool:
    entry = _parent_entry(context, ancestors)
    return (
        entry is not None
        and isinstance(entry.definition, ObjectTypeDefinitionNode)
        and entry.has_directive(constants.NODE)
    )


def field_is_in_relationship_properties_type(context: ValidationContext, ancestors: Sequence[Any]) -> bool:
    entry = _parent_entry(context, ancestors)
    return (
        entry is not None
        and isinstance(entry.definition, ObjectTypeDefinitionNode)
        and entry.has_directive(constants.RELATIONSHIP_PROPERTIES)
    )


def field_is_in_interface_type(context: ValidationContext, ancestors: Sequence[Any]) -> bool:
    entry = _parent_entry(context, ancestors)
    return entry is not None and isinstance(entry.definition, InterfaceTypeDefinitionNode)


def field_is_in_root_type(context: ValidationContext, ancestors: Sequence[Any]) -> bool:
    entry = _parent_entry(context, ancestors)
    return (
        entry is not None
        and isinstance(entry.definition, ObjectTypeDefinitionNode)
        and entry.definition.name.value in ROOT_TYPE_NAMES
    )


def field_is_in_subscription_type(context: ValidationContext, ancestors: Sequence[Any]) -> bool:
    parent = parent_type(ancestors)
    return parent is not None and parent.name.value == "Subscription"


# =============================================================================
# Paths
# =============================================================================


def path_to_node(ancestors: Sequence[Any], node: Optional[Node] = None) -> list[PathSegment]:
    """
    Names of the enclosing type, field and argument definitions.

    `node` is appended when it is itself a named definition, so a field
    definition yields [Type, field].
    """
    path: list[PathSegment] = [a.name.value for a in ancestors if isinstance(a, _NAMED_PATH_KINDS)]
    if node is not None and isinstance(node, _NAMED_PATH_KINDS):
        path.append(node.name.value)
    return path
