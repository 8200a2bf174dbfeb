"""
Mutation inputs - create, update, connect, delete and disconnect inputs of
entities and the nested relationship inputs they reference.

For `Actor.movies: [Movie!]! @relationship(type: "ACTED_IN", properties: "ActedIn")`:

    input ActorCreateInput { name: String!, movies: ActorMoviesFieldInput }
    input ActorMoviesFieldInput {
      connect: [ActorMoviesConnectFieldInput!]
      create: [ActorMoviesCreateFieldInput!]
    }
    input ActorMoviesCreateFieldInput { edge: ActedInCreateInput!, node: MovieCreateInput! }
    input ActorMoviesUpdateFieldInput { connect, create, delete, disconnect, update }

A union target fans out into one set of inputs per member, tied together by
`{Prefix}CreateInput { Genre: ..., Movie: ... }` style inputs. An interface
source uses its `@declareRelationship` fields, with edge inputs keyed by the
properties type of every implementation.

Nested operations not allowed by `@relationship(nestedOperations: [...])`
leave out the matching fields, and inputs left with no fields are not
generated at all.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional, Union

from ..core.constants import NestedOperation
from ..core.features import Features, should_add_deprecated_fields
from ..core.registry import Directive, FieldConfig, TypeRegistry
from ..model.adapters import (
    AttributeAdapter,
    ConcreteEntityAdapter,
    EntityAdapter,
    InterfaceEntityAdapter,
    RelationshipAdapter,
    RelationshipDeclarationAdapter,
)
from .directives import deprecation_or, user_deprecations
from .scalar_types import ScalarTypes
from .where_input import WhereInputGenerator, declared_edge_input


logger = logging.getLogger(__name__)

AnyRelationship = Union[RelationshipAdapter, RelationshipDeclarationAdapter]
FieldedEntity = Union[ConcreteEntityAdapter, InterfaceEntityAdapter]

EMPTY_INPUT_FIELD = "_emptyInput"
EMPTY_INPUT_DESCRIPTION = (
    "Appears because this input type would be empty otherwise because this type is composed of just "
    "generated and/or relationship properties. See https://neo4j.com/docs/graphql-manual/current/troubleshooting/faqs/"
)

_MATH_OPERATORS = {
    "Int": ("DECREMENT", "INCREMENT"),
    "BigInt": ("DECREMENT", "INCREMENT"),
    "Float": ("ADD", "DIVIDE", "MULTIPLY", "SUBTRACT"),
}


def _wrap(type_name: str, is_list: bool) -> str:
    return f"[{type_name}!]" if is_list else type_name


def ensure_non_empty_input(registry: TypeRegistry, type_name: str) -> None:
    """Give an input without fields the `_emptyInput: Boolean` placeholder."""
    input_type = registry.get_input(type_name)
    if not input_type.fields:
        input_type.add_fields(
            {EMPTY_INPUT_FIELD: FieldConfig(type="Boolean", description=EMPTY_INPUT_DESCRIPTION)}
        )


class MutationInputGenerator:
    """
    Builds mutation inputs into a TypeRegistry.

    Entity-level inputs referenced from a relationship are built on demand,
    so a relationship cycle (Actor.movies -> Movie.actors) is cut by the
    registry: every input is registered before its fields are filled in.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        scalars: ScalarTypes,
        wheres: WhereInputGenerator,
        features: Optional[Features] = None,
    ):
        self.registry = registry
        self.scalars = scalars
        self.wheres = wheres
        self.features = features

    # =========================================================================
    # Attribute fields
    # =========================================================================

    def create_attribute_fields(self, attributes: list[AttributeAdapter]) -> dict[str, FieldConfig]:
        fields = {}
        for attribute in attributes:
            self.scalars.library_scalar(attribute.type_name)
            fields[attribute.name] = FieldConfig(
                type=attribute.input_type_names.create,
                default=attribute.default_value_node(),
                directives=user_deprecations(attribute.directives),
            )
        return fields

    def update_attribute_fields(self, attributes: list[AttributeAdapter]) -> dict[str, FieldConfig]:
        fields: dict[str, FieldConfig] = {}
        with_deprecated = should_add_deprecated_fields(self.features, "mutation_operations")
        for attribute in attributes:
            user = user_deprecations(attribute.directives)
            fields[attribute.name] = FieldConfig(type=self.scalars.mutation_type(attribute), directives=list(user))
            if with_deprecated:
                fields.update(self._deprecated_update_fields(attribute, user))
        return fields

    def _deprecated_update_fields(self, attribute: AttributeAdapter, user: list[Directive]) -> dict[str, FieldConfig]:
        name = attribute.name
        fields = {
            f"{name}_SET": FieldConfig(
                type=attribute.input_type_names.update,
                directives=deprecation_or(user, f"Please use the generic mutation '{name}: {{ set: ... }} }}' instead."),
            )
        }
        if attribute.is_list:
            element = attribute.input_type_name
            fields[f"{name}_POP"] = FieldConfig(
                type="Int",
                directives=deprecation_or(user, f"Please use the generic mutation '{name}: {{ pop: ... }} }}' instead."),
            )
            fields[f"{name}_PUSH"] = FieldConfig(
                type=f"[{element}!]",
                directives=deprecation_or(user, f"Please use the generic mutation '{name}: {{ push: ... }} }}' instead."),
            )
            return fields
        for operator in _MATH_OPERATORS.get(attribute.type_name, ()):
            fields[f"{name}_{operator}"] = FieldConfig(
                type=attribute.type_name,
                directives=deprecation_or(
                    user,
                    f"Please use the relevant generic mutation '{name}: {{ {operator.lower()}: ... }} }}' instead.",
                ),
            )
        return fields

    # =========================================================================
    # Entity inputs
    # =========================================================================

    def create_input(self, entity: FieldedEntity) -> str:
        """
        `<E>CreateInput`. An interface gets one field per implementing entity:
            input ProductionCreateInput { Movie: MovieCreateInput, Series: SeriesCreateInput }
        """
        type_name = entity.operations.create_input_type_name
        if self.registry.has(type_name):
            return type_name
        create = self.registry.get_or_create_input(type_name)
        if isinstance(entity, InterfaceEntityAdapter):
            for member in entity.concrete_entities:
                create.add_fields({member.name: self.create_input(member)})
            ensure_non_empty_input(self.registry, type_name)
            return type_name

        create.add_fields(self.create_attribute_fields(entity.create_input_fields))
        for relationship in entity.relationships.values():
            if not relationship.is_creatable():
                continue
            field_input = self.relationship_create_input(relationship)
            if field_input is not None:
                create.add_fields({relationship.name: field_input})
        ensure_non_empty_input(self.registry, type_name)
        logger.debug(f"Built create input {type_name} with {len(create.fields)} fields")
        return type_name

    def update_input(self, entity: FieldedEntity) -> str:
        type_name = entity.operations.update_input_type_name
        if self.registry.has(type_name):
            return type_name
        update = self.registry.get_or_create_input(type_name)
        update.add_fields(self.update_attribute_fields(entity.update_input_fields))
        for relationship in entity.relationships.values():
            if not relationship.is_updatable():
                continue
            field_input = self.relationship_update_input(relationship)
            if field_input is not None:
                update.add_fields({relationship.name: field_input})
        ensure_non_empty_input(self.registry, type_name)
        return type_name

    def _nested_input(
        self,
        entity: EntityAdapter,
        type_name: str,
        operation: str,
        build: Callable[[AnyRelationship], str],
    ) -> Optional[str]:
        """An entity input with one field per relationship allowing `operation`, or None."""
        if self.registry.has(type_name):
            return type_name
        relationships = [r for r in entity.relationships.values() if r.allows(operation)]
        if not relationships:
            return None
        nested = self.registry.get_or_create_input(type_name)
        for relationship in relationships:
            nested.add_fields({relationship.name: build(relationship)})
        return type_name

    def connect_input(self, entity: FieldedEntity) -> Optional[str]:
        return self._nested_input(
            entity, entity.operations.connect_input_type_name, NestedOperation.CONNECT, self._relationship_connect_input
        )

    def delete_input(self, entity: FieldedEntity) -> Optional[str]:
        return self._nested_input(
            entity, entity.operations.delete_input_type_name, NestedOperation.DELETE, self._relationship_delete_input
        )

    def disconnect_input(self, entity: FieldedEntity) -> Optional[str]:
        return self._nested_input(
            entity,
            entity.operations.disconnect_input_type_name,
            NestedOperation.DISCONNECT,
            self._relationship_disconnect_input,
        )

    # =========================================================================
    # Relationship inputs as referenced from the entity inputs
    # =========================================================================

    def relationship_create_input(self, relationship: AnyRelationship) -> Optional[str]:
        if relationship.is_target_union():
            return self._union_input(
                relationship,
                relationship.operations.union_create_input_type_name,
                lambda member: self.field_input(relationship, member),
            )
        return self.field_input(relationship)

    def relationship_update_input(self, relationship: AnyRelationship) -> Optional[str]:
        if relationship.is_target_union():
            return self._union_input(
                relationship,
                relationship.operations.union_update_input_type_name,
                lambda member: self._listed(relationship, self.update_field_input(relationship, member)),
            )
        return self._listed(relationship, self.update_field_input(relationship))

    def _relationship_connect_input(self, relationship: AnyRelationship) -> Optional[str]:
        if relationship.is_target_union():
            return self._union_input(
                relationship,
                relationship.operations.union_connect_input_type_name,
                lambda member: self._listed(relationship, self.connect_field_input(relationship, member)),
            )
        return self._listed(relationship, self.connect_field_input(relationship))

    def _relationship_delete_input(self, relationship: AnyRelationship) -> Optional[str]:
        if relationship.is_target_union():
            return self._union_input(
                relationship,
                relationship.operations.union_delete_input_type_name,
                lambda member: self._listed(relationship, self.delete_field_input(relationship, member)),
            )
        return self._listed(relationship, self.delete_field_input(relationship))

    def _relationship_disconnect_input(self, relationship: AnyRelationship) -> Optional[str]:
        if relationship.is_target_union():
            return self._union_input(
                relationship,
                relationship.operations.union_disconnect_input_type_name,
                lambda member: self._listed(relationship, self.disconnect_field_input(relationship, member)),
            )
        return self._listed(relationship, self.disconnect_field_input(relationship))

    @staticmethod
    def _listed(relationship: AnyRelationship, type_name: Optional[str]) -> Optional[str]:
        if type_name is None:
            return None
        return _wrap(type_name, relationship.is_list)

    def _union_input(
        self,
        relationship: AnyRelationship,
        type_name: str,
        build: Callable[[ConcreteEntityAdapter], Optional[str]],
    ) -> Optional[str]:
        """`{Prefix}<Op>Input` keyed by union member."""
        if self.registry.has(type_name):
            return type_name
        fields = {}
        for member in relationship.target.concrete_entities:
            member_type = build(member)
            if member_type is not None:
                fields[member.name] = member_type
        if not fields:
            return None
        return self.registry.get_or_create_input(type_name, fields).name

    # =========================================================================
    # Relationship field inputs
    # =========================================================================

    def _node_target(self, relationship: AnyRelationship, member: Optional[ConcreteEntityAdapter]) -> FieldedEntity:
        return member if member is not None else relationship.target

    def field_input(
        self, relationship: AnyRelationship, member: Optional[ConcreteEntityAdapter] = None
    ) -> Optional[str]:
        """`{Prefix}FieldInput { connect, create }`, used by the source's create input."""
        type_name = relationship.operations.get_field_input_type_name(member)
        if self.registry.has(type_name):
            return type_name
        if not relationship.should_generate_field_input_type():
            return None
        fields = {}
        if relationship.allows(NestedOperation.CONNECT):
            fields["connect"] = _wrap(self.connect_field_input(relationship, member), relationship.is_list)
        if relationship.allows(NestedOperation.CREATE):
            fields["create"] = _wrap(self.create_field_input(relationship, member), relationship.is_list)
        return self.registry.get_or_create_input(type_name, fields).name

    def create_field_input(
        self, relationship: AnyRelationship, member: Optional[ConcreteEntityAdapter] = None
    ) -> str:
        type_name = relationship.operations.get_create_field_input_type_name(member)
        if self.registry.has(type_name):
            return type_name
        create = self.registry.get_or_create_input(type_name)
        edge = self.edge_create_input(relationship)
        if edge is not None:
            create.add_fields({"edge": f"{edge}!" if relationship.has_non_null_create_input_fields else edge})
        create.add_fields({"node": f"{self.create_input(self._node_target(relationship, member))}!"})
        return type_name

    def connect_field_input(
        self, relationship: AnyRelationship, member: Optional[ConcreteEntityAdapter] = None
    ) -> str:
        """
        `{Prefix}ConnectFieldInput { connect, edge, where }`.

        `connect` nests further connections on the target: a list for a
        concrete target, a single input for an interface target.
        """
        type_name = relationship.operations.get_connect_field_input_type_name(member)
        if self.registry.has(type_name):
            return type_name
        target = self._node_target(relationship, member)
        connect = self.registry.get_or_create_input(type_name)
        nested = self.connect_input(target)
        if nested is not None:
            connect.add_fields(
                {"connect": nested if isinstance(target, InterfaceEntityAdapter) else f"[{nested}!]"}
            )
        edge = self.edge_create_input(relationship)
        if edge is not None:
            connect.add_fields({"edge": f"{edge}!" if relationship.has_non_null_create_input_fields else edge})
        connect.add_fields({"where": self.wheres.connect_where_input(target)})
        return type_name

    def delete_field_input(
        self, relationship: AnyRelationship, member: Optional[ConcreteEntityAdapter] = None
    ) -> str:
        type_name = relationship.operations.get_delete_field_input_type_name(member)
        if self.registry.has(type_name):
            return type_name
        delete = self.registry.get_or_create_input(type_name)
        nested = self.delete_input(self._node_target(relationship, member))
        if nested is not None:
            delete.add_fields({"delete": nested})
        delete.add_fields({"where": self.wheres.connection_where_input(relationship, member)})
        return type_name

    def disconnect_field_input(
        self, relationship: AnyRelationship, member: Optional[ConcreteEntityAdapter] = None
    ) -> str:
        type_name = relationship.operations.get_disconnect_field_input_type_name(member)
        if self.registry.has(type_name):
            return type_name
        disconnect = self.registry.get_or_create_input(type_name)
        nested = self.disconnect_input(self._node_target(relationship, member))
        if nested is not None:
            disconnect.add_fields({"disconnect": nested})
        disconnect.add_fields({"where": self.wheres.connection_where_input(relationship, member)})
        return type_name

    def update_connection_input(
        self, relationship: AnyRelationship, member: Optional[ConcreteEntityAdapter] = None
    ) -> str:
        """`{Prefix}UpdateConnectionInput { edge, node, where }`."""
        type_name = relationship.operations.get_update_connection_input_type_name(member)
        if self.registry.has(type_name):
            return type_name
        update = self.registry.get_or_create_input(type_name)
        edge = self.edge_update_input(relationship)
        if edge is not None:
            update.add_fields({"edge": edge})
        update.add_fields(
            {
                "node": self.update_input(self._node_target(relationship, member)),
                "where": self.wheres.connection_where_input(relationship, member),
            }
        )
        return type_name

    def update_field_input(
        self, relationship: AnyRelationship, member: Optional[ConcreteEntityAdapter] = None
    ) -> Optional[str]:
        """`{Prefix}UpdateFieldInput` with one field per allowed nested operation."""
        type_name = relationship.operations.get_update_field_input_type_name(member)
        if self.registry.has(type_name):
            return type_name
        if not relationship.should_generate_update_field_input_type(member):
            return None
        is_list = relationship.is_list
        fields = {}
        if relationship.allows(NestedOperation.CONNECT):
            fields["connect"] = _wrap(self.connect_field_input(relationship, member), is_list)
        if relationship.allows(NestedOperation.CREATE):
            fields["create"] = _wrap(self.create_field_input(relationship, member), is_list)
        if relationship.allows(NestedOperation.DELETE):
            fields["delete"] = _wrap(self.delete_field_input(relationship, member), is_list)
        if relationship.allows(NestedOperation.DISCONNECT):
            fields["disconnect"] = _wrap(self.disconnect_field_input(relationship, member), is_list)
        if relationship.allows(NestedOperation.UPDATE):
            fields["update"] = self.update_connection_input(relationship, member)
        return self.registry.get_or_create_input(type_name, fields).name

    # =========================================================================
    # Edge property inputs
    # =========================================================================

    def properties_create_input(self, relationship: RelationshipAdapter) -> Optional[str]:
        """`{Props}CreateInput`, or None when no property is settable on create."""
        if not relationship.has_create_input_fields:
            return None
        return self.registry.get_or_create_input(
            relationship.operations.edge_create_input_type_name,
            self.create_attribute_fields(relationship.create_input_fields),
        ).name

    def properties_update_input(self, relationship: RelationshipAdapter) -> Optional[str]:
        if not relationship.has_update_input_fields:
            return None
        return self.registry.get_or_create_input(
            relationship.operations.edge_update_input_type_name,
            self.update_attribute_fields(relationship.update_input_fields),
        ).name

    def edge_create_input(self, relationship: AnyRelationship) -> Optional[str]:
        if isinstance(relationship, RelationshipDeclarationAdapter):
            return declared_edge_input(
                self.registry,
                relationship,
                relationship.operations.edge_create_input_type_name,
                self.properties_create_input,
            )
        return self.properties_create_input(relationship)

    def edge_update_input(self, relationship: AnyRelationship) -> Optional[str]:
        if isinstance(relationship, RelationshipDeclarationAdapter):
            return declared_edge_input(
                self.registry,
                relationship,
                relationship.operations.edge_update_input_type_name,
                self.properties_update_input,
            )
        return self.properties_update_input(relationship)

