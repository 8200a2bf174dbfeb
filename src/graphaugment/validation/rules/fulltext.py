"""
`@fulltext(indexes: [...])` on node types: unique index and query names,
indexed fields of type String or ID.
"""

from __future__ import annotations

from typing import Optional

from graphql import NamedTypeNode, NonNullTypeNode, ObjectTypeDefinitionNode, TypeNode
from graphql.validation import SDLValidationRule

from ...core import constants
from ..context import ValidationContext
from ..utils import DocumentValidationError, argument_value, find_argument, report, type_is_node


DIRECTIVE = f"@{constants.FULLTEXT}"


def is_fulltext_compatible(type_node: TypeNode) -> bool:
    if isinstance(type_node, NonNullTypeNode):
        type_node = type_node.type
    return isinstance(type_node, NamedTypeNode) and type_node.name.value in ("String", "ID")


def check_indexes(definition: ObjectTypeDefinitionNode, indexes: list) -> Optional[DocumentValidationError]:
    compatible = {f.name.value for f in definition.fields or () if is_fulltext_compatible(f.type)}
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
        fields = index.get("fields") or []
        for field_name in fields if isinstance(fields, list) else [fields]:
            if field_name not in compatible:
                return DocumentValidationError(
                    f"{DIRECTIVE}.indexes invalid value for: {index_name}. Field {field_name} is not of type "
                    "String or ID.",
                    ("indexes",),
                )
    return None


class _FulltextDirective(SDLValidationRule):
    context: ValidationContext

    def enter_object_type_definition(self, node: ObjectTypeDefinitionNode, *_args):
        entry = self.context.type_map.get(node.name.value)
        directive = next((d for d in entry.directives if d.name.value == constants.FULLTEXT), None) if entry else None
        if directive is None or find_argument(directive, "indexes") is None:
            return
        if not type_is_node(self.context, node):
            error = DocumentValidationError(f'Directive "{constants.FULLTEXT}" must be in a type with "@node"')
        else:
            indexes = argument_value(directive, "indexes")
            if isinstance(indexes, dict):
                indexes = [indexes]
            # Malformed index values are reported by the argument values rule
            error = check_indexes(node, [i for i in indexes or [] if isinstance(i, dict)])
        if error is not None:
            report(self, error, [node], [node.name.value, DIRECTIVE])


def validate_fulltext_directive(context: ValidationContext) -> SDLValidationRule:
    return _FulltextDirective(context)
