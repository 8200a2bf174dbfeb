"""
Field-level directives with location and type constraints:
`@id`, `@timestamp`, `@relayId` and `@cypher`.
"""

from __future__ import annotations

from typing import Optional

from graphql import FieldDefinitionNode
from graphql.validation import SDLValidationRule

from ...core import constants
from ..context import ValidationContext
from ..utils import (
    DocumentValidationError,
    field_is_in_node_type,
    field_is_in_relationship_properties_type,
    field_is_in_root_type,
    field_is_in_subscription_type,
    find_directive,
    inner_type_name,
    is_list_type,
    path_to_node,
    report,
)


def _node_or_properties_message(name: str) -> str:
    return (
        f'Directive "{name}" must be in a type with "@node" or within the '
        f'"@{constants.RELATIONSHIP_PROPERTIES}" directive'
    )


class _FieldDirective(SDLValidationRule):
    """Runs `check` on every field carrying the directive `name`."""

    context: ValidationContext
    name: str

    def enter_field_definition(self, node: FieldDefinitionNode, _key, _parent, _path, ancestors):
        if find_directive(node.directives, self.name) is None:
            return
        error = self.check(node, ancestors)
        if error is not None:
            report(self, error, [node], [*path_to_node(ancestors, node), f"@{self.name}"])

    def in_node_or_properties(self, ancestors) -> bool:
        return field_is_in_node_type(self.context, ancestors) or field_is_in_relationship_properties_type(
            self.context, ancestors
        )

    def check(self, field: FieldDefinitionNode, ancestors) -> Optional[DocumentValidationError]:
        raise NotImplementedError


class _IdDirective(_FieldDirective):
    name = constants.ID_DIRECTIVE

    def check(self, field, ancestors):
        if not self.in_node_or_properties(ancestors):
            return DocumentValidationError(_node_or_properties_message(self.name))
        if is_list_type(field.type):
            return DocumentValidationError("Cannot autogenerate an array.")
        if inner_type_name(field.type) != "ID":
            return DocumentValidationError("Cannot autogenerate a non ID field.")
        return None


class _TimestampDirective(_FieldDirective):
    name = constants.TIMESTAMP

    def check(self, field, ancestors):
        if not self.in_node_or_properties(ancestors):
            return DocumentValidationError(_node_or_properties_message(self.name))
        if is_list_type(field.type):
            return DocumentValidationError("Cannot autogenerate an array.")
        if inner_type_name(field.type) not in ("DateTime", "Time"):
            return DocumentValidationError("Cannot timestamp Temporal fields lacking time zone information.")
        return None


class _RelayIdDirective(_FieldDirective):
    name = constants.RELAY_ID

    def check(self, field, ancestors):
        if not field_is_in_node_type(self.context, ancestors):
            return DocumentValidationError(f'Directive "{self.name}" must be in a type with "@node"')
        return None


class _CypherDirective(_FieldDirective):
    name = constants.CYPHER

    def check(self, field, ancestors):
        if not field_is_in_subscription_type(self.context, ancestors) and (
            field_is_in_node_type(self.context, ancestors)
            or field_is_in_root_type(self.context, ancestors)
            or field_is_in_relationship_properties_type(self.context, ancestors)
        ):
            return None
        return DocumentValidationError(
            f'Directive "{self.name}" must be in a type with "@node" or on root types: Query, and Mutation'
        )


def validate_id_directive(context: ValidationContext) -> SDLValidationRule:
    return _IdDirective(context)


def validate_timestamp_directive(context: ValidationContext) -> SDLValidationRule:
    return _TimestampDirective(context)


def validate_relay_id_directive(context: ValidationContext) -> SDLValidationRule:
    return _RelayIdDirective(context)


def validate_cypher_directive(context: ValidationContext) -> SDLValidationRule:
    return _CypherDirective(context)
