"""
Aggregate selection types.

Per entity:
    type MovieAggregateSelection { count: Int!, title: StringAggregateSelection! }
    type MovieAggregateNode { title: StringAggregateSelection! }
    type MovieAggregate { count: Count!, node: MovieAggregateNode! }

Per aggregable relationship (selected as `aggregate` on its connection):
    type MovieActorActorsAggregateSelection {
      count: CountConnection!
      edge: MovieActorActorsEdgeAggregateSelection
      node: MovieActorActorsNodeAggregateSelection
    }
"""

from __future__ import annotations

from typing import Optional, Union

from ..core.registry import Directive, FieldConfig, TypeRegistry
from ..model.adapters import (
    AttributeAdapter,
    ConcreteEntityAdapter,
    InterfaceEntityAdapter,
    RelationshipAdapter,
    RelationshipDeclarationAdapter,
)
from .resolvers import FieldResolver, ResolverKind
from .scalar_types import ScalarTypes


class AggregateTypeGenerator:
    def __init__(self, registry: TypeRegistry, scalars: ScalarTypes):
        self.registry = registry
        self.scalars = scalars

    def _aggregable_fields(self, attributes: list[AttributeAdapter]) -> dict[str, str]:
        return {
            attribute.name: f"{self.scalars.aggregate_selection_type(attribute)}!" for attribute in attributes
        }

    def aggregate_selection(
        self,
        entity: Union[ConcreteEntityAdapter, InterfaceEntityAdapter],
        propagated: Optional[list[Directive]] = None,
    ) -> str:
        """`<E>AggregateSelection` plus the `<E>Aggregate` / `<E>AggregateNode` pair used by the root connection."""
        names = entity.operations.aggregate_type_names
        selection = self.registry.get_or_create_object(
            names.selection,
            {
                "count": FieldConfig(
                    type="Int!",
                    resolve=FieldResolver(kind=ResolverKind.AGGREGATE, field="count", entity=entity.name),
                )
            },
            directives=propagated,
        )
        fields = self._aggregable_fields(entity.aggregable_fields)
        selection.add_fields(fields)
        self.connection_aggregate(entity, propagated)
        return selection.name

    def connection_aggregate(
        self,
        entity: Union[ConcreteEntityAdapter, InterfaceEntityAdapter],
        propagated: Optional[list[Directive]] = None,
    ) -> str:
        names = entity.operations.aggregate_type_names
        self.scalars.count_types()
        fields = self._aggregable_fields(entity.aggregable_fields)
        aggregate = self.registry.get_or_create_object(names.connection, {"count": "Count!"}, directives=propagated)
        if fields:
            self.registry.get_or_create_object(names.node, fields, directives=propagated)
            aggregate.add_fields({"node": f"{names.node}!"})
        return aggregate.name

    def relationship_aggregate_selection(
        self, relationship: Union[RelationshipAdapter, RelationshipDeclarationAdapter]
    ) -> Optional[str]:
        """The connection-level `aggregate` selection, or None when the relationship is not aggregable."""
        if not relationship.is_aggregable():
            return None
        operations = relationship.operations
        type_name = operations.aggregate_field_typename
        if self.registry.has(type_name):
            return type_name
        self.scalars.count_types()
        selection = self.registry.get_or_create_object(type_name, {"count": "CountConnection!"})

        if isinstance(relationship, RelationshipAdapter):
            edge_fields = self._aggregable_fields(relationship.aggregable_fields)
            if edge_fields:
                self.registry.get_or_create_object(operations.edge_aggregate_selection_typename, edge_fields)
                selection.add_fields({"edge": operations.edge_aggregate_selection_typename})

        node_fields = self._aggregable_fields(relationship.target.aggregable_fields)
        if node_fields:
            self.registry.get_or_create_object(operations.node_aggregate_selection_typename, node_fields)
            selection.add_fields({"node": operations.node_aggregate_selection_typename})
        return type_name
