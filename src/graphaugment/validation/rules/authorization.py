"""
`@authorization`, `@subscriptionsAuthorization` and `@authentication`.

The first two only apply to node types and their fields; `@authorization`
also needs at least one rule list. Argument values of all three are
coerced against their definitions:

    type Movie @node @authorization(filter: [{ where: { node: { id: 1 } }, operations: [WRITE] }])
    # Invalid argument: filter, error: Value 'WRITE' does not exist in 'AuthorizationFilterOperation' enum.
    # path: ["Movie", "@authorization", "filter", 0, "operations", 0]
"""

from __future__ import annotations

from typing import Optional

from graphql import DirectiveNode, FieldDefinitionNode, ObjectTypeDefinitionNode
from graphql.validation import SDLValidationRule

from ...core import constants
from ..context import ValidationContext
from ..directive_definitions import AUTHORIZATION_LIKE_DIRECTIVES, library_directives_schema
from ..utils import (
    DocumentValidationError,
    field_is_in_node_type,
    field_is_in_root_type,
    find_directive,
    path_to_node,
    report,
    type_is_node,
)
from .argument_values import check_argument_type


AUTHORIZATION_ARGUMENTS = ("filter", "validate")


def _node_message(name: str) -> str:
    return f'Directive "@{name}" must be in a type with "@node"'


def check_authorization_arguments(directive: DirectiveNode) -> Optional[DocumentValidationError]:
    if not directive.arguments:
        return DocumentValidationError(
            f"@{constants.AUTHORIZATION} requires at least one of {', '.join(AUTHORIZATION_ARGUMENTS)} arguments"
        )
    return None


class _AuthorizationDirective(SDLValidationRule):
    context: ValidationContext

    def enter_field_definition(self, node: FieldDefinitionNode, _key, _parent, _path, ancestors):
        directive = find_directive(node.directives, constants.AUTHORIZATION)
        if directive is None:
            return
        if field_is_in_node_type(self.context, ancestors):
            error = check_authorization_arguments(directive)
        elif field_is_in_root_type(self.context, ancestors):
            error = DocumentValidationError(
                f"Directive @{constants.AUTHORIZATION} is not supported on fields of the Query type. "
                f"Did you mean to use @{constants.AUTHENTICATION}?"
            )
        else:
            error = DocumentValidationError(_node_message(constants.AUTHORIZATION))
        if error is not None:
            report(self, error, [node], [*path_to_node(ancestors, node), f"@{constants.AUTHORIZATION}"])

    def enter_object_type_definition(self, node: ObjectTypeDefinitionNode, *_args):
        entry = self.context.type_map.get(node.name.value)
        directive = find_directive(entry.directives if entry else node.directives, constants.AUTHORIZATION)
        if directive is None:
            return
        if not type_is_node(self.context, node):
            error = DocumentValidationError(_node_message(constants.AUTHORIZATION))
        else:
            error = check_authorization_arguments(directive)
        if error is not None:
            report(self, error, [node], [node.name.value, f"@{constants.AUTHORIZATION}"])


class _SubscriptionsAuthorizationDirective(SDLValidationRule):
    context: ValidationContext

    message = f'Directive "{constants.SUBSCRIPTIONS_AUTHORIZATION}" must be in a type with "@node"'

    def enter_field_definition(self, node: FieldDefinitionNode, _key, _parent, _path, ancestors):
        if find_directive(node.directives, constants.SUBSCRIPTIONS_AUTHORIZATION) is None:
            return
        if not field_is_in_node_type(self.context, ancestors):
            report(
                self,
                DocumentValidationError(self.message),
                [node],
                [*path_to_node(ancestors, node), f"@{constants.SUBSCRIPTIONS_AUTHORIZATION}"],
            )

    def enter_object_type_definition(self, node: ObjectTypeDefinitionNode, *_args):
        entry = self.context.type_map.get(node.name.value)
        directives = entry.directives if entry else node.directives
        if find_directive(directives, constants.SUBSCRIPTIONS_AUTHORIZATION) is None:
            return
        if not type_is_node(self.context, node):
            report(
                self,
                DocumentValidationError(self.message),
                [node],
                [node.name.value, f"@{constants.SUBSCRIPTIONS_AUTHORIZATION}"],
            )


def authorization_like(name: str) -> Optional[str]:
    """The authorization directive a used directive name stands for, e.g. `MovieAuthorization` -> `authorization`."""
    lowered = name.lower()
    return next((candidate for candidate in AUTHORIZATION_LIKE_DIRECTIVES if candidate.lower() in lowered), None)


class _AuthorizationLikeArgumentValues(SDLValidationRule):
    context: ValidationContext

    def __init__(self, context: ValidationContext):
        super().__init__(context)
        self.schema = context.schema or library_directives_schema()

    def enter_directive(self, node: DirectiveNode, _key, _parent, _path, ancestors):
        kind = authorization_like(node.name.value)
        if kind is None:
            return
        definition = self.schema.get_directive(node.name.value)
        if definition is None:
            return
        path = [*path_to_node(ancestors), f"@{kind}"]
        for argument in node.arguments or ():
            argument_definition = definition.args.get(argument.name.value)
            if argument_definition is None:
                return
            error = check_argument_type(argument, argument_definition)
            if error is not None:
                report(self, error, [argument, node], path)


def validate_authorization_directive(context: ValidationContext) -> SDLValidationRule:
    return _AuthorizationDirective(context)


def validate_subscriptions_authorization_directive(context: ValidationContext) -> SDLValidationRule:
    return _SubscriptionsAuthorizationDirective(context)


def validate_authorization_like_directives(context: ValidationContext) -> SDLValidationRule:
    return _AuthorizationLikeArgumentValues(context)
