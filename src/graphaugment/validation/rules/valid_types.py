"""
Type-level rules: every object and interface has a visible field, and
interfaces and unions are implemented by `@node` types either fully or not at all.
"""

from __future__ import annotations

from typing import Optional, Union

from graphql import InterfaceTypeDefinitionNode, ObjectTypeDefinitionNode, UnionTypeDefinitionNode
from graphql.validation import SDLValidationRule

from ...core import constants
from ..context import ValidationContext
from ..utils import DocumentValidationError, find_directive, report, type_is_node


def check_has_fields(
    definition: Union[ObjectTypeDefinitionNode, InterfaceTypeDefinitionNode],
) -> Optional[DocumentValidationError]:
    fields = definition.fields or ()
    if all(find_directive(f.directives, constants.PRIVATE) is not None for f in fields):
        return DocumentValidationError("Objects and Interfaces must have one or more fields.")
    return None


def check_node_interface(
    context: ValidationContext, interface: InterfaceTypeDefinitionNode
) -> Optional[DocumentValidationError]:
    implementations = context.interfaces_map.get(interface.name.value, [])
    node_flags = {type_is_node(context, concrete) for concrete in implementations}
    if node_flags == {True, False}:
        return DocumentValidationError("Interface needs to be fully implemented by `@node` types.")
    return None


def check_node_union(context: ValidationContext, union: UnionTypeDefinitionNode) -> Optional[DocumentValidationError]:
    node_flags = set()
    for member in union.types or ():
        entry = context.type_map.get(member.name.value)
        if entry is not None and isinstance(entry.definition, ObjectTypeDefinitionNode):
            node_flags.add(type_is_node(context, entry.definition))
    if node_flags == {True, False}:
        return DocumentValidationError(
            "Union needs to be fully implemented by `@node` types or no type in the union have the `@node` directive."
        )
    return None


class _ValidObjectType(SDLValidationRule):
    context: ValidationContext

    def enter_object_type_definition(self, node: ObjectTypeDefinitionNode, *_args):
        error = check_has_fields(node)
        if error is not None:
            report(self, error, [node])

    def enter_interface_type_definition(self, node: InterfaceTypeDefinitionNode, *_args):
        error = check_has_fields(node) or check_node_interface(self.context, node)
        if error is not None:
            report(self, error, [node])


class _ValidUnionType(SDLValidationRule):
    context: ValidationContext

    def enter_union_type_definition(self, node: UnionTypeDefinitionNode, *_args):
        error = check_node_union(self.context, node)
        if error is not None:
            report(self, error, [node])


def valid_object_type(context: ValidationContext) -> SDLValidationRule:
    return _ValidObjectType(context)


def valid_union_type(context: ValidationContext) -> SDLValidationRule:
    return _ValidUnionType(context)
