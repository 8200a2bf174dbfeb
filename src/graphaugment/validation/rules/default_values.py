"""
`@default(value)` and `@coalesce(value)` on node and relationship property fields.

The default value must match the field type, list fields taking a list:

    type Movie @node {
      title: String! @default(value: "Untitled")
      tags: [String!]! @default(value: ["new"])
    }
"""

from __future__ import annotations

import datetime
from typing import Optional

from graphql import (
    BooleanValueNode,
    DirectiveNode,
    EnumValueNode,
    FieldDefinitionNode,
    FloatValueNode,
    IntValueNode,
    ListValueNode,
    StringValueNode,
    ValueNode,
)
from graphql.validation import SDLValidationRule

from ...core import constants
from ...core.constants import GRAPHQL_BUILTIN_SCALAR_TYPES, SPATIAL_TYPES, TEMPORAL_SCALAR_TYPES
from ..context import ValidationContext
from ..utils import (
    DocumentValidationError,
    field_is_in_node_type,
    field_is_in_relationship_properties_type,
    find_argument,
    find_directive,
    inner_type_name,
    is_list_type,
    path_to_node,
    report,
)


DEFAULT_DIRECTIVE = f"@{constants.DEFAULT}"
COALESCE_DIRECTIVE = f"@{constants.COALESCE}"

DEFAULT_SUPPORTED_TYPES = GRAPHQL_BUILTIN_SCALAR_TYPES + (
    "DateTime",
    "LocalDateTime",
    "Date",
    "Time",
    "LocalTime",
    "BigInt",
)

COALESCE_SUPPORTED_TYPES = GRAPHQL_BUILTIN_SCALAR_TYPES

# Kind of literal each built-in type accepts
_VALUE_KINDS = {
    "Int": (IntValueNode,),
    "Float": (IntValueNode, FloatValueNode),
    "String": (StringValueNode,),
    "Boolean": (BooleanValueNode,),
    "ID": (StringValueNode,),
    "BigInt": (IntValueNode, StringValueNode),
}


def _parses_as_datetime(value: str) -> bool:
    try:
        datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _parses_as_time(value: str) -> bool:
    try:
        datetime.time.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _is_value_of_type(value: ValueNode, type_name: str, enum_values: Optional[set[str]]) -> bool:
    if enum_values is not None:
        return isinstance(value, EnumValueNode) and value.value in enum_values
    if type_name in ("DateTime", "LocalDateTime", "Date"):
        return isinstance(value, StringValueNode) and _parses_as_datetime(value.value)
    if type_name in ("Time", "LocalTime"):
        return isinstance(value, StringValueNode) and _parses_as_time(value.value)
    if type_name in TEMPORAL_SCALAR_TYPES or type_name in SPATIAL_TYPES:
        return True
    kinds = _VALUE_KINDS.get(type_name)
    return kinds is None or isinstance(value, kinds)


def check_value_type(
    context: ValidationContext, field: FieldDefinitionNode, value: ValueNode, directive: str
) -> Optional[DocumentValidationError]:
    """The `value` argument must be of the field's type; a list of it for list fields."""
    type_name = inner_type_name(field.type)
    enum = context.enum_definitions.get(type_name)
    enum_values = {v.name.value for v in enum.values or ()} if enum is not None else None

    if is_list_type(field.type):
        if not isinstance(value, ListValueNode) or not all(
            _is_value_of_type(item, type_name, enum_values) for item in value.values
        ):
            return DocumentValidationError(
                f"{directive}.value on {type_name} list fields must be a list of {type_name} values", ("value",)
            )
        return None
    if isinstance(value, ListValueNode) or not _is_value_of_type(value, type_name, enum_values):
        return DocumentValidationError(
            f"{directive}.value on {type_name} fields must be of type {type_name}", ("value",)
        )
    return None


# =============================================================================
# Rules
# =============================================================================


class _ValueDirective(SDLValidationRule):
    """Shared location and type checks of `@default` and `@coalesce`."""

    context: ValidationContext
    name: str
    location_message: str

    def enter_field_definition(self, node: FieldDefinitionNode, _key, _parent, _path, ancestors):
        directive = find_directive(node.directives, self.name)
        if directive is None:
            return
        argument = find_argument(directive, "value")
        if argument is None:
            return
        error = self._check_location(ancestors) or self.check(node, directive, argument.value)
        if error is not None:
            report(self, error, [node], [*path_to_node(ancestors, node), f"@{self.name}"])

    def _check_location(self, ancestors) -> Optional[DocumentValidationError]:
        if field_is_in_node_type(self.context, ancestors) or field_is_in_relationship_properties_type(
            self.context, ancestors
        ):
            return None
        return DocumentValidationError(self.location_message)

    def check(self, field: FieldDefinitionNode, directive: DirectiveNode, value: ValueNode):
        raise NotImplementedError


class _DefaultDirective(_ValueDirective):
    name = constants.DEFAULT
    location_message = (
        f'Directive "{constants.DEFAULT}" must be in a type with "@node" or within the '
        f'"@{constants.RELATIONSHIP_PROPERTIES}" directive'
    )

    def check(self, field, directive, value):
        type_name = inner_type_name(field.type)
        if type_name not in DEFAULT_SUPPORTED_TYPES and type_name not in self.context.enum_definitions:
            return DocumentValidationError(
                f"{DEFAULT_DIRECTIVE} directive can only be used on fields of type Int, Float, String, Boolean, "
                "ID, BigInt, DateTime, Date, Time, LocalDateTime or LocalTime."
            )
        return check_value_type(self.context, field, value, DEFAULT_DIRECTIVE)


class _CoalesceDirective(_ValueDirective):
    name = constants.COALESCE
    location_message = (
        f'Directive @"{constants.COALESCE}" must be in a type with "@node" or within the '
        f'"@{constants.RELATIONSHIP_PROPERTIES}" directive'
    )

    def check(self, field, directive, value):
        type_name = inner_type_name(field.type)
        if type_name in SPATIAL_TYPES:
            return DocumentValidationError(f"{COALESCE_DIRECTIVE} is not supported by Spatial types.")
        if type_name in TEMPORAL_SCALAR_TYPES:
            return DocumentValidationError(f"{COALESCE_DIRECTIVE} is not supported by Temporal types.")
        if type_name not in COALESCE_SUPPORTED_TYPES and type_name not in self.context.enum_definitions:
            return DocumentValidationError(
                f"{COALESCE_DIRECTIVE} directive can only be used on types: Int | Float | String | Boolean | ID | Enum"
            )
        return check_value_type(self.context, field, value, COALESCE_DIRECTIVE)


def validate_default_directive(context: ValidationContext) -> SDLValidationRule:
    return _DefaultDirective(context)


def validate_coalesce_directive(context: ValidationContext) -> SDLValidationRule:
    return _CoalesceDirective(context)
