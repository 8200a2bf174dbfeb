"""
Annotations - typed views of the library directives found on a type or field.

Each library directive parses into a small dataclass with the directive's
defaults applied, so callers write `annotations.filterable.by_value` instead
of digging through directive argument nodes.

Usage:
    from graphaugment.model.annotations import parse_annotations

    annotations = parse_annotations(field_node.directives)
    if annotations.filterable and not annotations.filterable.by_value:
        ...
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Optional

from graphql import DirectiveNode, value_from_ast_untyped

from ..core import constants
from ..core.constants import MutationOperation


def directive_arguments(directive: DirectiveNode) -> dict[str, Any]:
    """Argument values of a directive usage as plain Python values."""
    return {arg.name.value: value_from_ast_untyped(arg.value) for arg in directive.arguments or ()}


# =============================================================================
# Annotation types
# =============================================================================


@dataclass(frozen=True)
class QueryAnnotation:
    read: bool = True
    aggregate: bool = False


@dataclass(frozen=True)
class MutationAnnotation:
    operations: frozenset[str] = frozenset(MutationOperation.ALL)


@dataclass(frozen=True)
class SubscriptionAnnotation:
    events: tuple[str, ...] = ()


@dataclass(frozen=True)
class FilterableAnnotation:
    by_value: bool = True
    by_aggregate: bool = True


@dataclass(frozen=True)
class SelectableAnnotation:
    on_read: bool = True
    on_aggregate: bool = True


@dataclass(frozen=True)
class SettableAnnotation:
    on_create: bool = True
    on_update: bool = True


@dataclass(frozen=True)
class SortableAnnotation:
    by_value: bool = True


@dataclass(frozen=True)
class PluralAnnotation:
    value: str


@dataclass(frozen=True)
class LimitAnnotation:
    default: Optional[int] = None
    max: Optional[int] = None


@dataclass
class CypherAnnotation:
    """`target_entity` is set by the schema parser when the field returns a node type."""
    statement: str
    column_name: str
    target_entity: Any = field(default=None, repr=False)


@dataclass(frozen=True)
class DefaultAnnotation:
    value: Any


@dataclass(frozen=True)
class CoalesceAnnotation:
    value: Any


@dataclass(frozen=True)
class TimestampAnnotation:
    operations: tuple[str, ...] = (MutationOperation.CREATE, MutationOperation.UPDATE)


@dataclass(frozen=True)
class PopulatedByAnnotation:
    callback: str
    operations: tuple[str, ...] = (MutationOperation.CREATE, MutationOperation.UPDATE)


@dataclass(frozen=True)
class FulltextIndex:
    index_name: Optional[str]
    query_name: Optional[str]
    fields: tuple[str, ...]


@dataclass(frozen=True)
class FulltextAnnotation:
    indexes: tuple[FulltextIndex, ...] = ()


@dataclass(frozen=True)
class VectorIndex:
    index_name: str
    query_name: str
    embedding_property: str
    provider: Optional[str] = None


@dataclass(frozen=True)
class VectorAnnotation:
    indexes: tuple[VectorIndex, ...] = ()


@dataclass(frozen=True)
class CustomResolverAnnotation:
    requires: Optional[str] = None


@dataclass(frozen=True)
class NodeAnnotation:
    labels: tuple[str, ...] = ()


@dataclass(frozen=True)
class Marker:
    """Annotation for argument-less directives such as @id or @private."""
    name: str


@dataclass
class Annotations:
    query: Optional[QueryAnnotation] = None
    mutation: Optional[MutationAnnotation] = None
    subscription: Optional[SubscriptionAnnotation] = None
    filterable: Optional[FilterableAnnotation] = None
    selectable: Optional[SelectableAnnotation] = None
    settable: Optional[SettableAnnotation] = None
    sortable: Optional[SortableAnnotation] = None
    plural: Optional[PluralAnnotation] = None
    limit: Optional[LimitAnnotation] = None
    cypher: Optional[CypherAnnotation] = None
    default: Optional[DefaultAnnotation] = None
    coalesce: Optional[CoalesceAnnotation] = None
    timestamp: Optional[TimestampAnnotation] = None
    populated_by: Optional[PopulatedByAnnotation] = None
    fulltext: Optional[FulltextAnnotation] = None
    vector: Optional[VectorAnnotation] = None
    custom_resolver: Optional[CustomResolverAnnotation] = None
    node: Optional[NodeAnnotation] = None
    id: Optional[Marker] = None
    relay_id: Optional[Marker] = None
    private: Optional[Marker] = None
    unique: Optional[Marker] = None
    relationship_properties: Optional[Marker] = None


# =============================================================================
# Parsers
# =============================================================================


def _as_tuple(value: Any) -> tuple:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


def _parse_fulltext(args: dict[str, Any]) -> FulltextAnnotation:
    indexes = tuple(
        FulltextIndex(
            index_name=index.get("indexName"),
            query_name=index.get("queryName"),
            fields=_as_tuple(index.get("fields")),
        )
        for index in _as_tuple(args.get("indexes"))
    )
    return FulltextAnnotation(indexes=indexes)


def _parse_vector(args: dict[str, Any]) -> VectorAnnotation:
    indexes = tuple(
        VectorIndex(
            index_name=index.get("indexName", ""),
            query_name=index.get("queryName", ""),
            embedding_property=index.get("embeddingProperty", ""),
            provider=index.get("provider"),
        )
        for index in _as_tuple(args.get("indexes"))
        if isinstance(index, dict)
    )
    return VectorAnnotation(indexes=indexes)


# directive name -> (annotation attribute, parser from argument dict)
_PARSERS: dict[str, tuple[str, Callable[[dict[str, Any]], Any]]] = {
    constants.QUERY: (
        "query",
        lambda a: QueryAnnotation(read=a.get("read", True), aggregate=a.get("aggregate", False)),
    ),
    constants.MUTATION: (
        "mutation",
        lambda a: MutationAnnotation(operations=frozenset(_as_tuple(a.get("operations", MutationOperation.ALL)))),
    ),
    constants.SUBSCRIPTION: (
        "subscription",
        lambda a: SubscriptionAnnotation(events=_as_tuple(a.get("events"))),
    ),
    constants.FILTERABLE: (
        "filterable",
        lambda a: FilterableAnnotation(by_value=a.get("byValue", True), by_aggregate=a.get("byAggregate", True)),
    ),
    constants.SELECTABLE: (
        "selectable",
        lambda a: SelectableAnnotation(on_read=a.get("onRead", True), on_aggregate=a.get("onAggregate", True)),
    ),
    constants.SETTABLE: (
        "settable",
        lambda a: SettableAnnotation(on_create=a.get("onCreate", True), on_update=a.get("onUpdate", True)),
    ),
    constants.SORTABLE: ("sortable", lambda a: SortableAnnotation(by_value=a.get("byValue", True))),
    constants.PLURAL: ("plural", lambda a: PluralAnnotation(value=a.get("value", ""))),
    constants.LIMIT: ("limit", lambda a: LimitAnnotation(default=a.get("default"), max=a.get("max"))),
    constants.CYPHER: (
        "cypher",
        lambda a: CypherAnnotation(statement=a.get("statement", ""), column_name=a.get("columnName", "")),
    ),
    constants.DEFAULT: ("default", lambda a: DefaultAnnotation(value=a.get("value"))),
    constants.COALESCE: ("coalesce", lambda a: CoalesceAnnotation(value=a.get("value"))),
    constants.TIMESTAMP: (
        "timestamp",
        lambda a: TimestampAnnotation(
            operations=_as_tuple(a.get("operations", (MutationOperation.CREATE, MutationOperation.UPDATE)))
        ),
    ),
    constants.POPULATED_BY: (
        "populated_by",
        lambda a: PopulatedByAnnotation(
            callback=a.get("callback", ""),
            operations=_as_tuple(a.get("operations", (MutationOperation.CREATE, MutationOperation.UPDATE))),
        ),
    ),
    constants.FULLTEXT: ("fulltext", _parse_fulltext),
    constants.VECTOR: ("vector", _parse_vector),
    constants.CUSTOM_RESOLVER: ("custom_resolver", lambda a: CustomResolverAnnotation(requires=a.get("requires"))),
    constants.NODE: ("node", lambda a: NodeAnnotation(labels=_as_tuple(a.get("labels")))),
    constants.ID_DIRECTIVE: ("id", lambda a: Marker(constants.ID_DIRECTIVE)),
    constants.RELAY_ID: ("relay_id", lambda a: Marker(constants.RELAY_ID)),
    constants.PRIVATE: ("private", lambda a: Marker(constants.PRIVATE)),
    constants.UNIQUE: ("unique", lambda a: Marker(constants.UNIQUE)),
    constants.RELATIONSHIP_PROPERTIES: (
        "relationship_properties",
        lambda a: Marker(constants.RELATIONSHIP_PROPERTIES),
    ),
}


def parse_annotations(directives: Optional[Iterable[DirectiveNode]]) -> Annotations:
    """
    Build the annotations for a list of directive usages.

    Directives that are not library directives are ignored; when a directive
    is repeated the first usage wins.
    """
    annotations = Annotations()
    for directive in directives or ():
        parser = _PARSERS.get(directive.name.value)
        if parser is None:
            continue
        attribute, parse = parser
        if getattr(annotations, attribute) is None:
            setattr(annotations, attribute, parse(directive_arguments(directive)))
    return annotations


def find_directive(directives: Optional[Iterable[DirectiveNode]], name: str) -> Optional[DirectiveNode]:
    for directive in directives or ():
        if directive.name.value == name:
            return directive
    return None
