"""
Object types - the output side of every entity.

    type Movie implements Node @key(fields: "id") {
      id: ID!
      title: String
      actors(limit: Int, offset: Int, sort: [ActorSort!], where: ActorWhere): [Actor!]!
      actorsConnection(after: String, first: Int, sort: [MovieActorsConnectionSort!], where: MovieActorsConnectionWhere): MovieActorsConnection!
    }

Relationship fields pull in the connection, connection-where and connection
sort types of the relationship; the target's own types are registered when
the target entity is generated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional, Union

from graphql import InputValueDefinitionNode, print_ast

from ..core.features import Features
from ..core.registry import Argument, Directive, FieldConfig, FieldedType, ObjectType, TypeRegistry
from ..model.adapters import (
    AttributeAdapter,
    ConcreteEntityAdapter,
    InterfaceEntityAdapter,
    RelationshipAdapter,
    RelationshipDeclarationAdapter,
)
from .connection_types import ConnectionTypeGenerator
from .directives import as_directives, user_deprecations
from .resolvers import FieldResolver, GlobalIdResolver, ResolverKind, TypeResolver
from .scalar_types import ScalarTypes
from .sort_input import SortInputGenerator
from .where_input import WhereInputGenerator


logger = logging.getLogger(__name__)

NODE_INTERFACE = "Node"

AnyRelationship = Union[RelationshipAdapter, RelationshipDeclarationAdapter]


def field_arguments(nodes: Iterable[InputValueDefinitionNode]) -> dict[str, Argument]:
    """User-declared field arguments, carried over as written."""
    args = {}
    for node in nodes:
        args[node.name.value] = Argument(
            type=print_ast(node.type),
            default=node.default_value,
            description=node.description.value if node.description else None,
            directives=as_directives(node.directives),
        )
    return args


def attribute_field(attribute: AttributeAdapter, entity_name: str) -> FieldConfig:
    """An attribute as printed on an object, interface or properties type."""
    resolve = None
    cypher = attribute.annotations.cypher
    if cypher is not None:
        resolve = FieldResolver(
            kind=ResolverKind.CYPHER,
            field=attribute.name,
            entity=entity_name,
            statement=cypher.statement,
            extra={"column_name": cypher.column_name},
        )
    return FieldConfig(
        type=attribute.type.pretty,
        args=field_arguments(attribute.args),
        description=attribute.description,
        directives=as_directives(attribute.directives),
        resolve=resolve,
    )


class ObjectTypeGenerator:
    def __init__(
        self,
        registry: TypeRegistry,
        scalars: ScalarTypes,
        wheres: WhereInputGenerator,
        sorts: SortInputGenerator,
        connections: ConnectionTypeGenerator,
        features: Optional[Features] = None,
    ):
        self.registry = registry
        self.scalars = scalars
        self.wheres = wheres
        self.sorts = sorts
        self.connections = connections
        self.features = features

    @property
    def _pagination_type(self) -> str:
        return "Int!" if self.features and self.features.limit_required else "Int"

    def _add_attributes(self, type_def: FieldedType, attributes: list[AttributeAdapter], entity_name: str) -> None:
        for attribute in attributes:
            self.scalars.library_scalar(attribute.type_name)
            type_def.add_fields({attribute.name: attribute_field(attribute, entity_name)})

    # =========================================================================
    # Entities
    # =========================================================================

    def entity_object(self, entity: ConcreteEntityAdapter) -> ObjectType:
        """The object type of a concrete entity, with its relationship fields."""
        object_type = self.registry.get_or_create_object(
            entity.name, description=entity.description, directives=as_directives(entity.directives)
        )
        object_type.interfaces = list(entity.interface_names)
        if entity.is_global_node():
            object_type.interfaces.append(NODE_INTERFACE)
            object_type.add_fields(
                {
                    "id": FieldConfig(
                        type="ID!",
                        resolve=GlobalIdResolver(entity=entity.name, id_field=entity.global_id_field.name),
                    )
                }
            )
        self._add_attributes(object_type, entity.object_fields, entity.name)
        self.relationship_fields(object_type, entity)
        logger.debug(f"Built object type {entity.name} with {len(object_type.fields)} fields")
        return object_type

    def interface_object(self, entity: InterfaceEntityAdapter) -> ObjectType:
        interface = self.registry.get_or_create_interface(
            entity.name,
            description=entity.description,
            directives=as_directives(entity.directives),
            interfaces=list(entity.interface_names),
        )
        self._add_attributes(interface, entity.object_fields, entity.name)
        self.relationship_fields(interface, entity)
        self.registry.set_type_resolver(entity.name, TypeResolver(entity.name))
        return interface

    # =========================================================================
    # Relationship fields
    # =========================================================================

    def relationship_fields(
        self, object_type: FieldedType, entity: Union[ConcreteEntityAdapter, InterfaceEntityAdapter]
    ) -> None:
        for relationship in entity.relationships.values():
            if not relationship.is_readable():
                continue
            object_type.add_fields(
                {
                    relationship.name: self._relationship_field(relationship),
                    relationship.operations.connection_field_name: self._connection_field(relationship),
                }
            )

    def _relationship_field(self, relationship: AnyRelationship) -> FieldConfig:
        target = relationship.target
        args: dict[str, Argument] = {}
        if relationship.is_list:
            args["limit"] = Argument(type=self._pagination_type)
            args["offset"] = Argument(type="Int")
            if not relationship.is_target_union():
                sort = self.sorts.entity_sort(target)
                if sort is not None:
                    args["sort"] = Argument(type=f"[{sort}!]")
            type_name = f"[{target.name}!]!"
        else:
            type_name = target.name if relationship.is_nullable else f"{target.name}!"
        args["where"] = Argument(type=target.operations.where_input_type_name)
        return FieldConfig(
            type=type_name,
            args=args,
            description=relationship.description,
            directives=as_directives(relationship.directives),
            resolve=FieldResolver(
                kind=ResolverKind.RELATIONSHIP, field=relationship.name, entity=relationship.source.name
            ),
        )

    def _connection_field(self, relationship: AnyRelationship) -> FieldConfig:
        connection = self.connections.relationship_connection(relationship)
        args: dict[str, Argument] = {
            "after": Argument(type="String"),
            "first": Argument(type=self._pagination_type),
        }
        sort = self.sorts.connection_sort(relationship)
        if sort is not None:
            args["sort"] = Argument(type=f"[{sort}!]")
        args["where"] = Argument(type=self.wheres.connection_where_input(relationship))
        field_name = relationship.operations.connection_field_name
        return FieldConfig(
            type=f"{connection}!",
            args=args,
            description=relationship.description,
            directives=user_deprecations(relationship.directives),
            resolve=FieldResolver(
                kind=ResolverKind.RELATIONSHIP,
                field=field_name,
                entity=relationship.source.name,
                extra={"connection": True},
            ),
        )

    # =========================================================================
    # Relationship properties
    # =========================================================================

    def relationship_properties_objects(self, entities: list[ConcreteEntityAdapter]) -> None:
        """
        One object per `@relationshipProperties` type in use.

        The description lists every relationship field using it, sorted:
            "The edge properties for the following fields:\\n* Actor.movies\\n* Movie.actors"
        """
        usages: dict[str, list[str]] = {}
        representatives: dict[str, RelationshipAdapter] = {}
        for entity in entities:
            for relationship in entity.relationships.values():
                name = relationship.properties_type_name
                if not name:
                    continue
                usages.setdefault(name, []).append(f"{entity.name}.{relationship.name}")
                representatives.setdefault(name, relationship)

        for name, relationship in representatives.items():
            description = "The edge properties for the following fields:\n" + "\n".join(
                f"* {usage}" for usage in sorted(usages[name])
            )
            properties = self.registry.get_or_create_object(name, description=description)
            self._add_attributes(properties, relationship.object_fields, name)

    # =========================================================================
    # Mutation responses and the global node
    # =========================================================================

    def mutation_responses(
        self, entity: ConcreteEntityAdapter, propagated: Optional[list[Directive]] = None
    ) -> None:
        self.scalars.info_types()
        names = entity.operations.mutation_response_type_names
        nodes = f"[{entity.name}!]!"
        self.registry.get_or_create_object(
            names.create, {"info": "CreateInfo!", entity.plural: nodes}, directives=propagated
        )
        self.registry.get_or_create_object(
            names.update, {"info": "UpdateInfo!", entity.plural: nodes}, directives=propagated
        )

    def global_node(self) -> None:
        """`interface Node { id: ID! }` and the `node(id: ID!)` Query field."""
        self.registry.get_or_create_interface(
            NODE_INTERFACE,
            description="An object with an ID",
            fields={"id": FieldConfig(type="ID!", description="The id of the object.")},
        )
        self.registry.set_type_resolver(NODE_INTERFACE, TypeResolver(NODE_INTERFACE))
        self.registry.query.add_fields(
            {
                "node": FieldConfig(
                    type=NODE_INTERFACE,
                    args={"id": Argument(type="ID!", description="The ID of an object")},
                    description="Fetches an object given its ID",
                    resolve=FieldResolver(kind=ResolverKind.NODE, field="node"),
                )
            }
        )
