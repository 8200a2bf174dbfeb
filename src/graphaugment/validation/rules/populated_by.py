"""
`@populatedBy(callback: "name", operations: [...])`: the callback must be
registered in the features and the field of a supported type.
"""

from __future__ import annotations

from typing import Optional

from graphql import DirectiveNode, FieldDefinitionNode
from graphql.validation import SDLValidationRule

from ...core import constants
from ..context import ValidationContext
from ..utils import (
    DocumentValidationError,
    argument_value,
    field_is_in_node_type,
    field_is_in_relationship_properties_type,
    find_argument,
    find_directive,
    inner_type_name,
    path_to_node,
    report,
)


DIRECTIVE = f"@{constants.POPULATED_BY}"

SUPPORTED_TYPES = (
    "Int",
    "Float",
    "String",
    "Boolean",
    "ID",
    "BigInt",
    "DateTime",
    "Date",
    "Time",
    "LocalDateTime",
    "LocalTime",
    "Duration",
)


class _PopulatedByDirective(SDLValidationRule):
    context: ValidationContext

    def enter_field_definition(self, node: FieldDefinitionNode, _key, _parent, _path, ancestors):
        directive = find_directive(node.directives, constants.POPULATED_BY)
        if directive is None or find_argument(directive, "callback") is None:
            return
        error = self._check(node, directive, ancestors)
        if error is not None:
            report(self, error, [node], [*path_to_node(ancestors, node), DIRECTIVE])

    def _check(
        self, node: FieldDefinitionNode, directive: DirectiveNode, ancestors
    ) -> Optional[DocumentValidationError]:
        if not (
            field_is_in_node_type(self.context, ancestors)
            or field_is_in_relationship_properties_type(self.context, ancestors)
        ):
            return DocumentValidationError(
                f'Directive "{constants.POPULATED_BY}" must be in a type with "@node" or within the '
                f'"@{constants.RELATIONSHIP_PROPERTIES}" directive'
            )
        callback = argument_value(directive, "callback")
        callbacks = self.context.callbacks
        if not callbacks:
            return DocumentValidationError(
                f"{DIRECTIVE}.callback needs to be provided in features option.", ("callback",)
            )
        if not callable(callbacks.get(callback)):
            return DocumentValidationError(
                f"{DIRECTIVE}.callback `{callback}` must be of type Function.", ("callback",)
            )
        if inner_type_name(node.type) not in SUPPORTED_TYPES:
            return DocumentValidationError(
                f"{DIRECTIVE} can only be used on fields of type Int, Float, String, Boolean, ID, BigInt, "
                "DateTime, Date, Time, LocalDateTime, LocalTime or Duration."
            )
        return None


def validate_populated_by_directive(context: ValidationContext) -> SDLValidationRule:
    return _PopulatedByDirective(context)
