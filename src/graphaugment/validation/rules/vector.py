"""
`@vector(indexes: [...])` on node types: unique index and query names,
embedding properties declared on the type.
"""

from __future__ import annotations

from typing import Optional

from graphql import ObjectTypeDefinitionNode
from graphql.validation import SDLValidationRule

from ...core import constants
from ..context import ValidationContext
from ..utils import DocumentValidationError, argument_value, find_argument, find_directive, report, type_is_node


DIRECTIVE = f"@{constants.VECTOR}"


def check_vector_indexes(definition: ObjectTypeDefinitionNode, indexes: list) -> Optional[DocumentValidationError]:
    field_names = {f.name.value for f in definition.fields or ()}
    index_names = [index.get("indexName") for index in indexes]
    query_names = [index.get("queryName") for index in indexes]
    for index in indexes:
        index_name = index.get("indexName")
        if index_names.count(index_name) > 1:
            return DocumentValidationError(
                f"{DIRECTIVE}.indexes invalid value for: {index_name}. Duplicate index name.", ("indexes",)
            )
        query_name = index.get("queryName")
        if query_names.count(query_name) > 1:
            return DocumentValidationError(
                f"{DIRECTIVE}.indexes invalid value for: {query_name}. Duplicate query name.", ("indexes",)
            )
        embedding = index.get("embeddingProperty")
        if embedding is not None and embedding not in field_names:
            return DocumentValidationError(
                f"{DIRECTIVE}.indexes invalid value for: {index_name}. "
                f"Embedding property {embedding} is not a field of {definition.name.value}.",
                ("indexes",),
            )
    return None


class _VectorDirective(SDLValidationRule):
    context: ValidationContext

    def enter_object_type_definition(self, node: ObjectTypeDefinitionNode, *_args):
        entry = self.context.type_map.get(node.name.value)
        directive = find_directive(entry.directives if entry else node.directives, constants.VECTOR)
        if directive is None or find_argument(directive, "indexes") is None:
            return
        if not type_is_node(self.context, node):
            error = DocumentValidationError(f'Directive "{constants.VECTOR}" must be in a type with "@node"')
        else:
            indexes = argument_value(directive, "indexes")
            if isinstance(indexes, dict):
                indexes = [indexes]
            # Malformed index values are reported by the argument values rule
            error = check_vector_indexes(node, [i for i in indexes or [] if isinstance(i, dict)])
        if error is not None:
            report(self, error, [node], [node.name.value, DIRECTIVE])


def validate_vector_directive(context: ValidationContext) -> SDLValidationRule:
    return _VectorDirective(context)
