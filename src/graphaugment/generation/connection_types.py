"""
Connection types - Relay-style edges and connections for root fields and relationships.

    type MovieEdge { cursor: String!, node: Movie! }
    type MoviesConnection { edges: [MovieEdge!]!, pageInfo: PageInfo!, totalCount: Int!, aggregate: MovieAggregate! }

    type MovieActorsRelationship { cursor: String!, node: Actor!, properties: ActedIn! }
    type MovieActorsConnection { edges: [MovieActorsRelationship!]!, pageInfo: PageInfo!, totalCount: Int! }
"""

from __future__ import annotations

from typing import Optional, Union

from ..core.features import Features
from ..core.registry import Argument, Directive, FieldConfig, TypeRegistry
from ..model.adapters import (
    ConcreteEntityAdapter,
    InterfaceEntityAdapter,
    RelationshipAdapter,
    RelationshipDeclarationAdapter,
)
from .aggregate_types import AggregateTypeGenerator
from .resolvers import FieldResolver, ResolverKind, TypeResolver
from .scalar_types import ScalarTypes
from .sort_input import SortInputGenerator


class ConnectionTypeGenerator:
    def __init__(
        self,
        registry: TypeRegistry,
        scalars: ScalarTypes,
        sorts: SortInputGenerator,
        aggregates: AggregateTypeGenerator,
        features: Optional[Features] = None,
    ):
        self.registry = registry
        self.scalars = scalars
        self.sorts = sorts
        self.aggregates = aggregates
        self.features = features

    @property
    def _limit_required(self) -> bool:
        return bool(self.features and self.features.limit_required)

    # =========================================================================
    # Root connection
    # =========================================================================

    def root_connection(
        self,
        entity: Union[ConcreteEntityAdapter, InterfaceEntityAdapter],
        propagated: Optional[list[Directive]] = None,
    ) -> None:
        """
        `<Plural>Connection` and the `<plural>Connection` Query field.

        Edges are selectable only when the entity is readable, `aggregate`
        only when it is aggregable.
        """
        operations = entity.operations
        connection = self.registry.get_or_create_object(operations.connection_type_name, directives=propagated)
        if entity.is_readable():
            edge = self.registry.get_or_create_object(
                operations.edge_type_name,
                {"cursor": "String!", "node": f"{entity.name}!"},
                directives=propagated,
            )
            connection.add_fields(
                {
                    "edges": f"[{edge.name}!]!",
                    "totalCount": "Int!",
                    "pageInfo": f"{self.scalars.page_info()}!",
                }
            )
        if entity.is_aggregable():
            aggregate = self.aggregates.connection_aggregate(entity, propagated)
            connection.add_fields({"aggregate": f"{aggregate}!"})

        args: dict[str, Argument] = {
            "first": Argument(type="Int!" if self._limit_required else "Int"),
            "after": Argument(type="String"),
            "where": Argument(type=operations.where_input_type_name),
        }
        sort = self.sorts.entity_sort(entity)
        if sort is not None:
            args["sort"] = Argument(type=f"[{sort}!]")
        field_name = operations.root_type_field_names.connection
        self.registry.query.add_fields(
            {
                field_name: FieldConfig(
                    type=f"{connection.name}!",
                    args=args,
                    directives=list(propagated or []),
                    resolve=FieldResolver(kind=ResolverKind.CONNECTION, field=field_name, entity=entity.name),
                )
            }
        )

    # =========================================================================
    # Relationship connection
    # =========================================================================

    def relationship_properties_type(self, relationship: Union[RelationshipAdapter, RelationshipDeclarationAdapter]) -> Optional[str]:
        """The `properties` type of a relationship edge; a union of properties types for a declaration."""
        if isinstance(relationship, RelationshipAdapter):
            return relationship.properties_type_name
        members = [impl.properties_type_name for impl in relationship.properties_implementations]
        if not members:
            return None
        union_name = relationship.operations.relationship_properties_field_typename
        self.registry.get_or_create_union(union_name, members)
        self.registry.set_type_resolver(union_name, TypeResolver(union_name))
        return union_name

    def relationship_connection(
        self, relationship: Union[RelationshipAdapter, RelationshipDeclarationAdapter]
    ) -> str:
        operations = relationship.operations
        type_name = operations.connection_field_typename
        if self.registry.has(type_name):
            return type_name

        relationship_fields = {"cursor": "String!", "node": f"{relationship.target.name}!"}
        properties = self.relationship_properties_type(relationship)
        if properties is not None:
            relationship_fields["properties"] = f"{properties}!"
        edge = self.registry.get_or_create_object(operations.relationship_field_typename, relationship_fields)

        connection = self.registry.get_or_create_object(
            type_name,
            {
                "edges": f"[{edge.name}!]!",
                "pageInfo": f"{self.scalars.page_info()}!",
                "totalCount": "Int!",
            },
        )
        aggregate = self.aggregates.relationship_aggregate_selection(relationship)
        if aggregate is not None:
            connection.add_fields({"aggregate": f"{aggregate}!"})
        return type_name
