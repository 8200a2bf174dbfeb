"""
`@relationship` usage: location, properties type and target.

    type Movie @node {
      actors: [Actor!]! @relationship(type: "ACTED_IN", direction: IN, properties: "ActedIn")
    }
"""

from __future__ import annotations

from typing import Optional

from graphql import (
    FieldDefinitionNode,
    InterfaceTypeDefinitionNode,
    ObjectTypeDefinitionNode,
    UnionTypeDefinitionNode,
)
from graphql.validation import SDLValidationRule

from ...core import constants
from ..context import ValidationContext
from ..utils import (
    DocumentValidationError,
    argument_value,
    field_is_in_interface_type,
    field_is_in_node_type,
    find_argument,
    find_directive,
    inner_type_name,
    interface_is_node,
    parent_type,
    path_to_node,
    report,
    type_is_node,
    union_is_node,
)


DIRECTIVE = f"@{constants.RELATIONSHIP}"

DUPLICATE_RELATIONSHIP_MESSAGE = (
    f"{DIRECTIVE} invalid. Multiple fields of the same type cannot have a relationship "
    "with the same direction and type combination."
)


def check_properties(context: ValidationContext, properties: str) -> Optional[DocumentValidationError]:
    entry = context.type_map.get(properties)
    if entry is None or entry.definition is None:
        return DocumentValidationError(
            f"{DIRECTIVE}.properties invalid. Cannot find type to represent the relationship properties: "
            f"{properties}.",
            ("properties",),
        )
    if find_directive(entry.definition.directives, constants.RELATIONSHIP_PROPERTIES) is None:
        return DocumentValidationError(
            f"{DIRECTIVE}.properties invalid. Properties type {properties} must use directive "
            f"`@{constants.RELATIONSHIP_PROPERTIES}`.",
            ("properties",),
        )
    return None


def check_target(context: ValidationContext, field: FieldDefinitionNode) -> Optional[DocumentValidationError]:
    entry = context.type_map.get(inner_type_name(field.type))
    if entry is None or entry.definition is None:
        return None
    target = entry.definition
    if isinstance(target, ObjectTypeDefinitionNode) and not type_is_node(context, target):
        return DocumentValidationError(
            f'Invalid directive usage: Directive {DIRECTIVE} should be a type with "@node".'
        )
    if isinstance(target, InterfaceTypeDefinitionNode) and not interface_is_node(context, target):
        return DocumentValidationError(
            f'Invalid directive usage: Directive {DIRECTIVE} should be an interface implemented by a type with "@node".'
        )
    if isinstance(target, UnionTypeDefinitionNode) and not union_is_node(context, target):
        return DocumentValidationError(
            f'Invalid directive usage: Directive {DIRECTIVE} to an union should have all its types with "@node".'
        )
    return None


class _RelationshipDirective(SDLValidationRule):
    context: ValidationContext

    def enter_object_type_definition(self, node: ObjectTypeDefinitionNode, *_args):
        """Report every field repeating a (target, type, direction) combination already used on this type."""
        entry = self.context.type_map.get(node.name.value)
        fields = list(node.fields or ())
        for extension in entry.extensions if entry is not None else ():
            fields.extend(extension.fields or ())

        seen: set[tuple] = set()
        for field in fields:
            directive = find_directive(field.directives, constants.RELATIONSHIP)
            if directive is None:
                continue
            if find_argument(directive, "type") is None or find_argument(directive, "direction") is None:
                continue
            key = (inner_type_name(field.type), argument_value(directive, "type"), argument_value(directive, "direction"))
            if key in seen:
                report(
                    self,
                    DocumentValidationError(DUPLICATE_RELATIONSHIP_MESSAGE),
                    [field],
                    [node.name.value, field.name.value, DIRECTIVE],
                )
            else:
                seen.add(key)

    def enter_field_definition(self, node: FieldDefinitionNode, _key, _parent, _path, ancestors):
        directive = find_directive(node.directives, constants.RELATIONSHIP)
        if directive is None:
            return
        if find_argument(directive, "type") is None or find_argument(directive, "direction") is None:
            # Missing required arguments are reported by the argument values rule
            return
        error = self._check(node, directive, ancestors)
        if error is not None:
            report(self, error, [node], [*path_to_node(ancestors, node), DIRECTIVE])

    def _check(self, node, directive, ancestors) -> Optional[DocumentValidationError]:
        if not field_is_in_node_type(self.context, ancestors):
            if field_is_in_interface_type(self.context, ancestors):
                interface = parent_type(ancestors).name.value
                return DocumentValidationError(
                    f"Invalid directive usage: Directive {DIRECTIVE} is not supported on fields of interface types "
                    f"({interface}). Since version 5.0.0, interface fields can only have "
                    f"@{constants.DECLARE_RELATIONSHIP}. Please add the {DIRECTIVE} directive to the fields in all "
                    "types which implement it."
                )
            return DocumentValidationError(f'Directive "{constants.RELATIONSHIP}" must be in a type with "@node"')
        properties = argument_value(directive, "properties")
        if properties:
            error = check_properties(self.context, properties)
            if error is not None:
                return error
        return check_target(self.context, node)


def validate_relationship_directive(context: ValidationContext) -> SDLValidationRule:
    return _RelationshipDirective(context)
