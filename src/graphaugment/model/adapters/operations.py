"""
Derived type and field names.

Every generator reads names from these objects instead of formatting its own
strings, so "MovieWhere" is spelled in exactly one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Optional

from ...core.utils import upper_first

if TYPE_CHECKING:
    from .entity import ConcreteEntityAdapter, EntityAdapter, InterfaceEntityAdapter, UnionEntityAdapter
    from .relationship import RelationshipAdapter, RelationshipDeclarationAdapter


@dataclass(frozen=True)
class RootTypeFieldNames:
    create: str
    read: str
    update: str
    delete: str
    connection: str


@dataclass(frozen=True)
class AggregateTypeNames:
    selection: str
    node: str
    connection: str


@dataclass(frozen=True)
class MutationResponseTypeNames:
    create: str
    update: str


@dataclass(frozen=True)
class FulltextTypeNames:
    edge: str
    where: str
    sort: str
    connection: str


@dataclass(frozen=True)
class VectorTypeNames:
    edge: str
    where: str
    sort: str
    connection: str


# =============================================================================
# Entities
# =============================================================================


class EntityOperations:
    """Names shared by every entity variant."""

    def __init__(self, entity: "EntityAdapter"):
        self.entity = entity

    @cached_property
    def where_input_type_name(self) -> str:
        return f"{self.entity.name}Where"

    @cached_property
    def root_type_field_names(self) -> RootTypeFieldNames:
        plural = self.entity.plural
        upper_plural = upper_first(plural)
        return RootTypeFieldNames(
            create=f"create{upper_plural}",
            read=plural,
            update=f"update{upper_plural}",
            delete=f"delete{upper_plural}",
            connection=f"{plural}Connection",
        )


class ConcreteEntityOperations(EntityOperations):
    entity: "ConcreteEntityAdapter | InterfaceEntityAdapter"

    @cached_property
    def unique_where_input_type_name(self) -> str:
        return f"{self.entity.name}UniqueWhere"

    @cached_property
    def connect_where_input_type_name(self) -> str:
        return f"{self.entity.name}ConnectWhere"

    @cached_property
    def create_input_type_name(self) -> str:
        return f"{self.entity.name}CreateInput"

    @cached_property
    def update_input_type_name(self) -> str:
        return f"{self.entity.name}UpdateInput"

    @cached_property
    def delete_input_type_name(self) -> str:
        return f"{self.entity.name}DeleteInput"

    @cached_property
    def connect_input_type_name(self) -> str:
        return f"{self.entity.name}ConnectInput"

    @cached_property
    def disconnect_input_type_name(self) -> str:
        return f"{self.entity.name}DisconnectInput"

    @cached_property
    def sort_input_type_name(self) -> str:
        return f"{self.entity.name}Sort"

    @cached_property
    def edge_type_name(self) -> str:
        return f"{self.entity.name}Edge"

    @cached_property
    def connection_type_name(self) -> str:
        return f"{self.entity.upper_first_plural}Connection"

    @cached_property
    def aggregate_type_names(self) -> AggregateTypeNames:
        return AggregateTypeNames(
            selection=f"{self.entity.name}AggregateSelection",
            node=f"{self.entity.name}AggregateNode",
            connection=f"{self.entity.name}Aggregate",
        )

    @cached_property
    def mutation_response_type_names(self) -> MutationResponseTypeNames:
        return MutationResponseTypeNames(
            create=f"Create{self.entity.upper_first_plural}MutationResponse",
            update=f"Update{self.entity.upper_first_plural}MutationResponse",
        )

    @cached_property
    def fulltext_type_names(self) -> FulltextTypeNames:
        """Names shared by every fulltext index of the entity."""
        return FulltextTypeNames(
            edge=f"{self.entity.name}IndexEdge",
            where=f"{self.entity.name}IndexWhere",
            sort=f"{self.entity.name}IndexSort",
            connection=f"{self.entity.upper_first_plural}IndexConnection",
        )

    def fulltext_query_field_name(self, index_name: str) -> str:
        return f"{self.entity.plural}Fulltext{upper_first(index_name)}"

    @cached_property
    def vector_type_names(self) -> VectorTypeNames:
        return VectorTypeNames(
            edge=f"{self.entity.name}VectorEdge",
            where=f"{self.entity.name}VectorWhere",
            sort=f"{self.entity.name}VectorSort",
            connection=f"{self.entity.upper_first_plural}VectorConnection",
        )


class InterfaceEntityOperations(ConcreteEntityOperations):
    @cached_property
    def implementation_enum_type_name(self) -> str:
        return f"{self.entity.name}Implementation"


class UnionEntityOperations(EntityOperations):
    entity: "UnionEntityAdapter"


# =============================================================================
# Relationships
# =============================================================================


class RelationshipOperations:
    """
    Names derived from a relationship field.

    Two prefixes are in play. `prefix` is `{Source}{RelName}` and names the
    mutation inputs and filters owned by the source entity. `connection_prefix`
    swaps in the declaring interface when the field implements a
    `@declareRelationship`, so every implementation shares the interface's
    connection, relationship and connection-where types.
    """

    def __init__(self, relationship: "RelationshipAdapter | RelationshipDeclarationAdapter"):
        self.relationship = relationship

    @cached_property
    def prefix(self) -> str:
        return f"{self.relationship.source.name}{upper_first(self.relationship.name)}"

    @cached_property
    def connection_prefix(self) -> str:
        owner = self.relationship.first_declared_in_type_name or self.relationship.source.name
        return f"{owner}{upper_first(self.relationship.name)}"

    def _prefixed(self, suffix: str, member: Optional["ConcreteEntityAdapter"] = None) -> str:
        member_name = member.name if member is not None else ""
        return f"{self.prefix}{member_name}{suffix}"

    def _properties_or_declared(self, properties_suffix: str, declared_suffix: str) -> str:
        properties = getattr(self.relationship, "properties_type_name", None)
        if self.relationship.is_declaration or not properties:
            return f"{self.connection_prefix}{declared_suffix}"
        return f"{properties}{properties_suffix}"

    # -- object types --------------------------------------------------------

    @cached_property
    def relationship_field_typename(self) -> str:
        return f"{self.connection_prefix}Relationship"

    @cached_property
    def connection_field_typename(self) -> str:
        return f"{self.connection_prefix}Connection"

    @cached_property
    def connection_field_name(self) -> str:
        return f"{self.relationship.name}Connection"

    @cached_property
    def relationship_properties_field_typename(self) -> str:
        return f"{self.connection_prefix}RelationshipProperties"

    @cached_property
    def aggregate_field_name(self) -> str:
        return f"{self.relationship.name}Aggregate"

    @cached_property
    def aggregate_type_prefix(self) -> str:
        rel = self.relationship
        return f"{rel.source.name}{rel.target.name}{upper_first(rel.name)}"

    @cached_property
    def aggregate_field_typename(self) -> str:
        return f"{self.aggregate_type_prefix}AggregateSelection"

    @cached_property
    def node_aggregate_selection_typename(self) -> str:
        return f"{self.aggregate_type_prefix}NodeAggregateSelection"

    @cached_property
    def edge_aggregate_selection_typename(self) -> str:
        return f"{self.aggregate_type_prefix}EdgeAggregateSelection"

    # -- filters -------------------------------------------------------------

    @cached_property
    def relationship_filters_type_name(self) -> str:
        return f"{self.relationship.target.name}RelationshipFilters"

    @cached_property
    def connection_filters_type_name(self) -> str:
        return f"{self.prefix}ConnectionFilters"

    def get_connection_where_typename(self, member: Optional["ConcreteEntityAdapter"] = None) -> str:
        member_name = member.name if member is not None else ""
        return f"{self.connection_prefix}{member_name}ConnectionWhere"

    @cached_property
    def connection_sort_input_typename(self) -> str:
        return f"{self.connection_prefix}ConnectionSort"

    @cached_property
    def connection_aggregate_input_type_name(self) -> str:
        return f"{self.prefix}ConnectionAggregateInput"

    @cached_property
    def aggregate_input_type_name(self) -> str:
        return f"{self.prefix}AggregateInput"

    @cached_property
    def node_aggregation_where_input_type_name(self) -> str:
        return f"{self.prefix}NodeAggregationWhereInput"

    @cached_property
    def edge_aggregation_where_input_type_name(self) -> str:
        return self._properties_or_declared("AggregationWhereInput", "EdgeAggregationWhereInput")

    # -- mutation inputs -----------------------------------------------------

    def get_field_input_type_name(self, member: Optional["ConcreteEntityAdapter"] = None) -> str:
        return self._prefixed("FieldInput", member)

    def get_create_field_input_type_name(self, member: Optional["ConcreteEntityAdapter"] = None) -> str:
        return self._prefixed("CreateFieldInput", member)

    def get_update_field_input_type_name(self, member: Optional["ConcreteEntityAdapter"] = None) -> str:
        return self._prefixed("UpdateFieldInput", member)

    def get_update_connection_input_type_name(self, member: Optional["ConcreteEntityAdapter"] = None) -> str:
        return self._prefixed("UpdateConnectionInput", member)

    def get_connect_field_input_type_name(self, member: Optional["ConcreteEntityAdapter"] = None) -> str:
        return self._prefixed("ConnectFieldInput", member)

    def get_delete_field_input_type_name(self, member: Optional["ConcreteEntityAdapter"] = None) -> str:
        return self._prefixed("DeleteFieldInput", member)

    def get_disconnect_field_input_type_name(self, member: Optional["ConcreteEntityAdapter"] = None) -> str:
        return self._prefixed("DisconnectFieldInput", member)

    @cached_property
    def union_create_input_type_name(self) -> str:
        return f"{self.prefix}CreateInput"

    @cached_property
    def union_update_input_type_name(self) -> str:
        return f"{self.prefix}UpdateInput"

    @cached_property
    def union_connect_input_type_name(self) -> str:
        return f"{self.prefix}ConnectInput"

    @cached_property
    def union_delete_input_type_name(self) -> str:
        return f"{self.prefix}DeleteInput"

    @cached_property
    def union_disconnect_input_type_name(self) -> str:
        return f"{self.prefix}DisconnectInput"

    # -- edge property inputs ------------------------------------------------
    # A concrete relationship uses its properties type directly; a declaration
    # wraps every implementation's properties type in one `{Interface}{Rel}Edge*` input.

    @cached_property
    def edge_create_input_type_name(self) -> str:
        return self._properties_or_declared("CreateInput", "EdgeCreateInput")

    @cached_property
    def edge_update_input_type_name(self) -> str:
        return self._properties_or_declared("UpdateInput", "EdgeUpdateInput")

    @cached_property
    def edge_where_type_name(self) -> str:
        return self._properties_or_declared("Where", "EdgeWhere")

    @cached_property
    def edge_sort_type_name(self) -> str:
        return self._properties_or_declared("Sort", "EdgeSort")
