"""
Type-checks the argument values of the library directives.

Each argument is coerced against the directive's definition in the schema
being extended; the error path descends into the offending value:

    @fulltext(indexes: [{ indexName: 1, fields: ["title"] }])
    # Invalid argument: indexes, error: String cannot represent a non string value: 1
    # path: ["Movie", "@fulltext", "indexes", 0, "indexName"]
"""

from __future__ import annotations

from typing import Optional

from graphql import ArgumentNode, DirectiveNode, GraphQLArgument, coerce_input_value, value_from_ast_untyped
from graphql.validation import SDLValidationRule

from ..context import ValidationContext
from ..directive_definitions import CHECKED_DIRECTIVES, library_directives_schema
from ..utils import DocumentValidationError, path_to_node, report


def check_argument_type(argument: ArgumentNode, definition: GraphQLArgument) -> Optional[DocumentValidationError]:
    """Coerce the argument value; the last coercion failure is the one reported."""
    failures: list[DocumentValidationError] = []

    def on_error(path, _invalid_value, error):
        failures.append(DocumentValidationError(error.message, tuple(path)))

    coerce_input_value(value_from_ast_untyped(argument.value), definition.type, on_error)
    if not failures:
        return None
    failure = failures[-1]
    return DocumentValidationError(
        f"Invalid argument: {argument.name.value}, error: {failure.message}",
        (argument.name.value, *failure.path),
    )


class _DirectiveArgumentValues(SDLValidationRule):
    context: ValidationContext

    def __init__(self, context: ValidationContext):
        super().__init__(context)
        self.schema = context.schema or library_directives_schema()

    def enter_directive(self, node: DirectiveNode, _key, _parent, _path, ancestors):
        name = node.name.value
        if name.lower() not in (checked.lower() for checked in CHECKED_DIRECTIVES):
            return
        definition = self.schema.get_directive(name)
        if definition is None:
            # Unknown directives are reported by the standard SDL rules
            return
        path = [*path_to_node(ancestors), f"@{name}"]
        for argument in node.arguments or ():
            argument_definition = definition.args.get(argument.name.value)
            if argument_definition is None:
                return
            error = check_argument_type(argument, argument_definition)
            if error is not None:
                report(self, error, [argument, node], path)


def validate_directive_argument_values(context: ValidationContext) -> SDLValidationRule:
    return _DirectiveArgumentValues(context)
