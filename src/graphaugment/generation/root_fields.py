"""
Root fields - the Query, Mutation and Subscription fields of entities and
the user's own root fields.

    type Query { movies(limit: Int, offset: Int, sort: [MovieSort!], where: MovieWhere): [Movie!]! }
    type Mutation {
      createMovies(input: [MovieCreateInput!]!): CreateMoviesMutationResponse!
      deleteMovies(delete: MovieDeleteInput, where: MovieWhere): DeleteInfo!
      updateMovies(update: MovieUpdateInput, where: MovieWhere): UpdateMoviesMutationResponse!
    }
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from ..core.features import Features
from ..core.registry import Argument, Directive, FieldConfig, ObjectType, TypeRegistry
from ..model.adapters import ConcreteEntityAdapter, InterfaceEntityAdapter, UnionEntityAdapter
from ..model.schema_model import Attribute, Operation
from .directives import as_directives
from .object_types import field_arguments
from .resolvers import FieldResolver, ResolverKind
from .scalar_types import ScalarTypes
from .sort_input import SortInputGenerator


logger = logging.getLogger(__name__)


class RootFieldGenerator:
    def __init__(
        self,
        registry: TypeRegistry,
        scalars: ScalarTypes,
        sorts: SortInputGenerator,
        features: Optional[Features] = None,
    ):
        self.registry = registry
        self.scalars = scalars
        self.sorts = sorts
        self.features = features

    @property
    def _limit_type(self) -> str:
        return "Int!" if self.features and self.features.limit_required else "Int"

    # =========================================================================
    # Query
    # =========================================================================

    def read_field(
        self,
        entity: Union[ConcreteEntityAdapter, InterfaceEntityAdapter, UnionEntityAdapter],
        propagated: Optional[list[Directive]] = None,
    ) -> str:
        """`<plural>(limit, offset, sort, where): [E!]!`; a union has no sort."""
        args: dict[str, Argument] = {
            "limit": Argument(type=self._limit_type),
            "offset": Argument(type="Int"),
        }
        if not isinstance(entity, UnionEntityAdapter):
            sort = self.sorts.entity_sort(entity)
            if sort is not None:
                args["sort"] = Argument(type=f"[{sort}!]")
        args["where"] = Argument(type=entity.operations.where_input_type_name)
        field_name = entity.operations.root_type_field_names.read
        self.registry.query.add_fields(
            {
                field_name: FieldConfig(
                    type=f"[{entity.name}!]!",
                    args=args,
                    directives=list(propagated or []),
                    resolve=FieldResolver(kind=ResolverKind.READ, field=field_name, entity=entity.name),
                )
            }
        )
        return field_name

    # =========================================================================
    # Mutation
    # =========================================================================

    def create_field(self, entity: ConcreteEntityAdapter, propagated: Optional[list[Directive]] = None) -> str:
        field_name = entity.operations.root_type_field_names.create
        self.registry.mutation.add_fields(
            {
                field_name: FieldConfig(
                    type=f"{entity.operations.mutation_response_type_names.create}!",
                    args={"input": Argument(type=f"[{entity.operations.create_input_type_name}!]!")},
                    directives=list(propagated or []),
                    resolve=FieldResolver(kind=ResolverKind.CREATE, field=field_name, entity=entity.name),
                )
            }
        )
        return field_name

    def update_field(self, entity: ConcreteEntityAdapter, propagated: Optional[list[Directive]] = None) -> str:
        field_name = entity.operations.root_type_field_names.update
        self.registry.mutation.add_fields(
            {
                field_name: FieldConfig(
                    type=f"{entity.operations.mutation_response_type_names.update}!",
                    args={
                        "update": Argument(type=entity.operations.update_input_type_name),
                        "where": Argument(type=entity.operations.where_input_type_name),
                    },
                    directives=list(propagated or []),
                    resolve=FieldResolver(kind=ResolverKind.UPDATE, field=field_name, entity=entity.name),
                )
            }
        )
        return field_name

    def delete_field(
        self,
        entity: ConcreteEntityAdapter,
        delete_input: Optional[str],
        propagated: Optional[list[Directive]] = None,
    ) -> str:
        """`delete<Plural>`; the nested `delete` argument only exists when the entity has a delete input."""
        self.scalars.info_types()
        args: dict[str, Argument] = {}
        if delete_input is not None:
            args["delete"] = Argument(type=delete_input)
        args["where"] = Argument(type=entity.operations.where_input_type_name)
        field_name = entity.operations.root_type_field_names.delete
        self.registry.mutation.add_fields(
            {
                field_name: FieldConfig(
                    type="DeleteInfo!",
                    args=args,
                    directives=list(propagated or []),
                    resolve=FieldResolver(kind=ResolverKind.DELETE, field=field_name, entity=entity.name),
                )
            }
        )
        return field_name

    # =========================================================================
    # User root fields
    # =========================================================================

    def custom_root_fields(self, operation: Operation) -> int:
        """
        Carry the user's fields of a root type over.

        `@cypher` fields are bound to the executor; the others are left for
        the host to resolve. Returns the number of fields added.
        """
        root: ObjectType = self.registry.get_or_create_object(operation.name)
        for attribute in operation.attributes.values():
            cypher = attribute.annotations.cypher
            root.add_fields(
                {
                    attribute.name: self._user_field(
                        attribute,
                        FieldResolver(
                            kind=ResolverKind.CYPHER,
                            field=attribute.name,
                            statement=cypher.statement,
                            extra={"column_name": cypher.column_name},
                        ),
                    )
                }
            )
        for attribute in operation.user_resolved_attributes.values():
            root.add_fields({attribute.name: self._user_field(attribute, None)})
        count = len(operation.attributes) + len(operation.user_resolved_attributes)
        logger.debug(f"Carried {count} user fields onto {operation.name}")
        return count

    def _user_field(self, attribute: Attribute, resolve: Optional[FieldResolver]) -> FieldConfig:
        self.scalars.library_scalar(attribute.type.name)
        return FieldConfig(
            type=attribute.type.pretty,
            args=field_arguments(attribute.args),
            description=attribute.description,
            directives=as_directives(attribute.directives),
            resolve=resolve,
        )
