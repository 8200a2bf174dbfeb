"""
`@limit(default, max)` on node types and interfaces.

Both values must be positive and `max` must not be smaller than `default`.
"""

from __future__ import annotations

from typing import Optional, Union

from graphql import DirectiveNode, InterfaceTypeDefinitionNode, ObjectTypeDefinitionNode
from graphql.validation import SDLValidationRule

from ...core import constants
from ..context import ValidationContext
from ..utils import DocumentValidationError, argument_value, report, type_is_node


DIRECTIVE = f"@{constants.LIMIT}"


def _as_int(value) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def check_limit_values(directive: DirectiveNode) -> Optional[DocumentValidationError]:
    default = _as_int(argument_value(directive, "default"))
    maximum = _as_int(argument_value(directive, "max"))
    if default is not None and default <= 0:
        return DocumentValidationError(
            f"{DIRECTIVE}.default invalid value: {default}. Must be greater than 0.", ("default",)
        )
    if maximum is not None and maximum <= 0:
        return DocumentValidationError(f"{DIRECTIVE}.max invalid value: {maximum}. Must be greater than 0.", ("max",))
    if default is not None and maximum is not None and maximum < default:
        return DocumentValidationError(
            f"{DIRECTIVE}.max invalid value: {maximum}. Must be greater than limit.default: {default}.", ("max",)
        )
    return None


class _LimitDirective(SDLValidationRule):
    context: ValidationContext

    def _applied(self, node) -> Optional[DirectiveNode]:
        entry = self.context.type_map.get(node.name.value)
        directives = entry.directives if entry is not None else list(node.directives or ())
        for directive in directives:
            if directive.name.value == constants.LIMIT:
                return directive
        return None

    def _validate(self, node: Union[ObjectTypeDefinitionNode, InterfaceTypeDefinitionNode], location_ok: bool):
        directive = self._applied(node)
        if directive is None:
            return
        if not location_ok:
            error = DocumentValidationError(
                f'Directive "{constants.LIMIT}" must be in a type with "@node" or in an interface type'
            )
        else:
            error = check_limit_values(directive)
        if error is not None:
            report(self, error, [node], [node.name.value, DIRECTIVE])

    def enter_interface_type_definition(self, node: InterfaceTypeDefinitionNode, *_args):
        self._validate(node, True)

    def enter_object_type_definition(self, node: ObjectTypeDefinitionNode, *_args):
        self._validate(node, type_is_node(self.context, node))


def validate_limit_directive(context: ValidationContext) -> SDLValidationRule:
    return _LimitDirective(context)
