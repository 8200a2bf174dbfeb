"""
Where-input generation - the filter inputs of entities, relationship
properties and relationship aggregations.

For an entity `Movie` with a `title: String` attribute and an `actors`
relationship this produces, among others:

    input MovieWhere {
      title: StringScalarFilters
      title_EQ: String @deprecated(...)
      actors: ActorRelationshipFilters
      actorsConnection: MovieActorsConnectionFilters
      actorsAggregate: MovieActorsAggregateInput @deprecated(...)
      AND: [MovieWhere!]
      OR: [MovieWhere!]
      NOT: MovieWhere
    }

Each deprecated shadow family is switched by its own
`features.exclude_deprecated_fields` flag.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional, Union

from ..core.constants import AGGREGATION_COMPARISON_OPERATORS, NUMERICAL_COMPARATORS, SPATIAL_COMPARATORS
from ..core.features import Features, should_add_deprecated_fields
from ..core.registry import Directive, FieldConfig, InputType, TypeRegistry, deprecated
from ..core.utils import pluralize
from ..model.adapters import (
    AttributeAdapter,
    ConcreteEntityAdapter,
    EntityAdapter,
    InterfaceEntityAdapter,
    RelationshipAdapter,
    RelationshipDeclarationAdapter,
    UnionEntityAdapter,
)
from .directives import deprecation_or, user_deprecations
from .scalar_types import ScalarTypes


logger = logging.getLogger(__name__)

AnyRelationship = Union[RelationshipAdapter, RelationshipDeclarationAdapter]

_QUANTIFIER_WORDS = {"all": "all", "none": "none", "single": "one", "some": "some"}

# `{  single: ... }` and `{  some: ... }` carry two spaces in the published reasons
_LEGACY_QUANTIFIER_REASON = {
    "ALL": "{ all: ... }",
    "NONE": "{ none: ... }",
    "SINGLE": "{  single: ... }",
    "SOME": "{  some: ... }",
}

_CAMEL_COMPARATORS = {"STARTS_WITH": "startsWith", "ENDS_WITH": "endsWith"}


def attribute_deprecation(attribute: AttributeAdapter, comparator: str, user: list[Directive]) -> list[Directive]:
    operator = _CAMEL_COMPARATORS.get(comparator, comparator.lower())
    return deprecation_or(user, f"Please use the relevant generic filter {attribute.name}: {{ {operator}: ... }}")


def aggregation_deprecation(attribute_name: str, aggregation: str, operator: str) -> Directive:
    generic = "eq" if operator == "EQUAL" else operator.lower()
    return deprecated(
        f"Please use the relevant generic filter '{attribute_name}: {{ {aggregation}: {{ {generic}: ... }} }} }}' instead."
    )


def count_deprecation(operator: str) -> Directive:
    return deprecated(f"Please use the relevant generic filter '{{ count: {{ {operator.lower()}: ... }} }} }}' instead.")


def add_logical_operators(input_type: InputType) -> None:
    input_type.add_fields(
        {
            "AND": f"[{input_type.name}!]",
            "OR": f"[{input_type.name}!]",
            "NOT": input_type.name,
        }
    )


def declared_edge_input(
    registry: TypeRegistry,
    declaration: RelationshipDeclarationAdapter,
    type_name: str,
    build: Callable[[RelationshipAdapter], Optional[str]],
) -> Optional[str]:
    """
    An `{Interface}{Rel}Edge*` input with one field per distinct properties type of the implementations.

    `build` returns the per-properties type to reference, or None to leave it out.
    """
    if registry.has(type_name):
        return type_name
    fields = {}
    for implementation in declaration.properties_implementations:
        member_type = build(implementation)
        if member_type is None:
            continue
        properties = implementation.properties_type_name
        fields[properties] = FieldConfig(
            type=member_type,
            description="Relationship properties when source node is of type:\n"
            + "\n".join(f"* {name}" for name in declaration.sources_with_properties(properties)),
        )
    if not fields:
        return None
    return registry.get_or_create_input(type_name, fields).name


class WhereInputGenerator:
    """Builds where inputs into a TypeRegistry; every method is idempotent per type name."""

    def __init__(self, registry: TypeRegistry, scalars: ScalarTypes, features: Optional[Features] = None):
        self.registry = registry
        self.scalars = scalars
        self.features = features

    # =========================================================================
    # Entity and edge where inputs
    # =========================================================================

    def where_input(
        self,
        entity: Union[EntityAdapter, RelationshipAdapter],
        type_name: Optional[str] = None,
        return_none_if_empty: bool = False,
    ) -> Optional[InputType]:
        """
        The where input of an entity, or of relationship properties when given a relationship.

        Returns None only when `return_none_if_empty` is set and no attribute
        produced a field.
        """
        if type_name is None:
            type_name = entity.operations.where_input_type_name
        if self.registry.has(type_name):
            return self.registry.get_input(type_name)

        if isinstance(entity, UnionEntityAdapter):
            fields = {member.name: member.operations.where_input_type_name for member in entity.concrete_entities}
        else:
            fields = self.attribute_where_fields(entity.where_fields)

        if return_none_if_empty and not fields:
            return None

        where = self.registry.get_or_create_input(type_name)
        where.add_fields(fields)
        if not isinstance(entity, UnionEntityAdapter):
            add_logical_operators(where)
        if isinstance(entity, ConcreteEntityAdapter) and entity.is_global_node():
            where.add_fields({"id": "ID"})
        if isinstance(entity, InterfaceEntityAdapter) and entity.concrete_entities:
            implementation = self.registry.get_or_create_enum(
                entity.operations.implementation_enum_type_name,
                [member.name for member in entity.concrete_entities],
            )
            where.add_fields({"typename": f"[{implementation.name}!]"})
        logger.debug(f"Built where input {type_name} with {len(where.fields)} fields")
        return where

    def unique_where_input(self, entity: ConcreteEntityAdapter) -> Optional[str]:
        """`<E>UniqueWhere` over the `@unique` and `@relayId` fields, or None when there are none."""
        attributes = entity.unique_fields
        if not attributes:
            return None
        return self.registry.get_or_create_input(
            entity.operations.unique_where_input_type_name,
            {attribute.name: attribute.input_type_name for attribute in attributes},
        ).name

    def connect_where_input(self, entity: Union[ConcreteEntityAdapter, InterfaceEntityAdapter]) -> str:
        return self.registry.get_or_create_input(
            entity.operations.connect_where_input_type_name,
            {"node": f"{entity.operations.where_input_type_name}!"},
        ).name

    def edge_where_input(self, relationship: AnyRelationship) -> Optional[str]:
        """`{Props}Where` for a relationship, or the per-properties `{Interface}{Rel}EdgeWhere` for a declaration."""
        if isinstance(relationship, RelationshipDeclarationAdapter):
            return declared_edge_input(
                self.registry,
                relationship,
                relationship.operations.edge_where_type_name,
                lambda impl: self.edge_where_input(impl),
            )
        if not relationship.has_any_properties:
            return None
        self.where_input(relationship, type_name=relationship.operations.edge_where_type_name)
        return relationship.operations.edge_where_type_name

    # =========================================================================
    # Attribute fields
    # =========================================================================

    def attribute_where_fields(self, attributes: list[AttributeAdapter]) -> dict[str, FieldConfig]:
        result: dict[str, FieldConfig] = {}
        with_deprecated = should_add_deprecated_fields(self.features, "attribute_filters")

        for attribute in attributes:
            user = user_deprecations(attribute.directives)
            cypher = attribute.annotations.cypher

            if cypher is not None:
                if attribute.args:
                    continue
                if cypher.target_entity is not None:
                    target_where = f"{cypher.target_entity.name}Where"
                    if attribute.is_list:
                        for quantifier in ("ALL", "NONE", "SINGLE", "SOME"):
                            result[f"{attribute.name}_{quantifier}"] = FieldConfig(
                                type=target_where, directives=list(user)
                            )
                        filters = self._relationship_filters_type(cypher.target_entity.name, target_where, [])
                        result[attribute.name] = FieldConfig(type=filters, directives=list(user))
                    else:
                        result[attribute.name] = FieldConfig(type=target_where, directives=list(user))
                    continue

            result[attribute.name] = FieldConfig(type=self.scalars.filter_type(attribute), directives=list(user))
            if with_deprecated:
                result.update(self._deprecated_attribute_fields(attribute, user))
        return result

    def _deprecated_attribute_fields(self, attribute: AttributeAdapter, user: list[Directive]) -> dict[str, FieldConfig]:
        names = attribute.input_type_names
        fields: dict[str, FieldConfig] = {}

        def add(comparator: str, type_name: str) -> None:
            fields[f"{attribute.name}_{comparator}"] = FieldConfig(
                type=type_name, directives=attribute_deprecation(attribute, comparator, user)
            )

        add("EQ", names.where)
        if attribute.is_boolean:
            return fields
        if attribute.is_list:
            add("INCLUDES", names.where_element)
            return fields

        add("IN", attribute.get_filterable_input_type_name())
        if attribute.is_numerical_or_temporal():
            for comparator in NUMERICAL_COMPARATORS:
                add(comparator, names.where_element)
            return fields
        if attribute.is_spatial:
            for comparator in SPATIAL_COMPARATORS:
                add(comparator, f"{attribute.type_name}Distance")
            return fields
        if attribute.is_string or attribute.is_id:
            element = names.where_element
            operators = [("CONTAINS", element), ("STARTS_WITH", element), ("ENDS_WITH", element)]
            if self.features is not None:
                for operator in self.features.enabled_filters(names.where_element):
                    operators.append((operator, "String" if operator == "MATCHES" else names.where_element))
            for comparator, type_name in operators:
                if comparator != "CASE_INSENSITIVE":
                    add(comparator, type_name)
        return fields

    # =========================================================================
    # Relationship fields
    # =========================================================================

    def _relationship_filters_type(self, target_name: str, target_where: str, user: list[Directive]) -> str:
        type_name = f"{target_name}RelationshipFilters"
        if not self.registry.has(type_name):
            targets = pluralize(target_name)
            self.registry.get_or_create_input(
                type_name,
                {
                    quantifier: FieldConfig(
                        type=target_where,
                        description=f"Filter type where {word} of the related {targets} match this filter",
                        directives=list(user),
                    )
                    for quantifier, word in _QUANTIFIER_WORDS.items()
                },
            )
        return type_name

    def augment_with_relationship(self, where: InputType, relationship: AnyRelationship) -> None:
        """
        Add the relationship, connection and aggregate filters of one relationship to the source where input.

        The target's own where input is referenced by name; it is registered
        when the target entity itself is generated.
        """
        by_value = relationship.is_filterable_by_value()
        by_aggregate = relationship.is_filterable_by_aggregate()
        if not by_value and not by_aggregate:
            return

        user = user_deprecations(relationship.directives)
        operations = relationship.operations
        source_plural = pluralize(relationship.source.name)
        target = relationship.target
        target_where = target.operations.where_input_type_name
        connection_where = operations.get_connection_where_typename()
        connections_plural = pluralize(operations.connection_field_typename)

        if by_value:
            filters = self._relationship_filters_type(target.name, target_where, user)
            where.add_fields({relationship.name: filters})
            if should_add_deprecated_fields(self.features, "relationship_filters"):
                for quantifier, word in _QUANTIFIER_WORDS.items():
                    suffix = quantifier.upper()
                    where.add_fields(
                        {
                            f"{relationship.name}_{suffix}": FieldConfig(
                                type=target_where,
                                description=(
                                    f"Return {source_plural} where {word} of the related "
                                    f"{pluralize(target.name)} match this filter"
                                ),
                                directives=deprecation_or(
                                    user,
                                    f"Please use the relevant generic filter "
                                    f"'{relationship.name}: {_LEGACY_QUANTIFIER_REASON[suffix]}' instead.",
                                ),
                            )
                        }
                    )
                for quantifier, word in _QUANTIFIER_WORDS.items():
                    where.add_fields(
                        {
                            f"{operations.connection_field_name}_{quantifier.upper()}": FieldConfig(
                                type=connection_where,
                                description=(
                                    f"Return {source_plural} where {word} of the related "
                                    f"{connections_plural} match this filter"
                                ),
                                directives=deprecation_or(
                                    user,
                                    f"Please use the relevant generic filter "
                                    f"'{operations.connection_field_name}: {{ {quantifier}: {{ node: ... }} }} }}' "
                                    f"instead.",
                                ),
                            )
                        }
                    )

        connection_fields: dict[str, FieldConfig] = {}
        if by_value:
            for quantifier, word in _QUANTIFIER_WORDS.items():
                connection_fields[quantifier] = FieldConfig(
                    type=connection_where,
                    description=f"Return {source_plural} where {word} of the related {connections_plural} match this filter",
                    directives=list(user),
                )
        if by_aggregate:
            connection_fields["aggregate"] = FieldConfig(
                type=operations.connection_aggregate_input_type_name,
                description=f"Filter {source_plural} by aggregating results on related {connections_plural}",
                directives=list(user),
            )
        self.registry.get_or_create_input(operations.connection_filters_type_name, connection_fields)
        where.add_fields({operations.connection_field_name: operations.connection_filters_type_name})

        if relationship.is_target_union():
            return

        if by_aggregate:
            self.connection_aggregate_input(relationship)
            if should_add_deprecated_fields(self.features, "aggregation_filters_outside_connection"):
                aggregate_input = self.aggregate_input(relationship)
                where.add_fields(
                    {
                        operations.aggregate_field_name: FieldConfig(
                            type=aggregate_input,
                            directives=deprecation_or(
                                user,
                                f"Aggregate filters are moved inside the {operations.connection_field_name} filter, "
                                f"please use {{ {operations.connection_field_name}: {{ aggregate: {{...}} }} }} instead",
                            ),
                        )
                    }
                )

    # =========================================================================
    # Connection where
    # =========================================================================

    def connection_where_input(
        self, relationship: AnyRelationship, member: Optional[ConcreteEntityAdapter] = None
    ) -> str:
        """
        `{Prefix}ConnectionWhere`: node and edge filters plus logical operators.

        A union target gets one per member plus a union-level input keyed by member name.
        """
        operations = relationship.operations
        type_name = operations.get_connection_where_typename(member)
        if self.registry.has(type_name):
            return type_name

        if relationship.is_target_union() and member is None:
            fields = {
                candidate.name: self.connection_where_input(relationship, candidate)
                for candidate in relationship.target.concrete_entities
            }
            return self.registry.get_or_create_input(type_name, fields).name

        node = member if member is not None else relationship.target
        where = self.registry.get_or_create_input(type_name)
        add_logical_operators(where)
        edge_where = self.edge_where_input(relationship)
        if edge_where is not None:
            where.add_fields({"edge": edge_where})
        where.add_fields({"node": node.operations.where_input_type_name})
        return type_name

    # =========================================================================
    # Aggregation where
    # =========================================================================

    def connection_aggregate_input(self, relationship: AnyRelationship) -> str:
        """`{Prefix}ConnectionAggregateInput`, nested under the connection filter as `aggregate`."""
        type_name = relationship.operations.connection_aggregate_input_type_name
        if self.registry.has(type_name):
            return type_name
        aggregate = self.registry.get_or_create_input(
            type_name, {"count": self.scalars.connection_aggregation_count_filter()}
        )
        add_logical_operators(aggregate)
        self._add_node_and_edge_aggregation(aggregate, relationship)
        return type_name

    def aggregate_input(self, relationship: AnyRelationship) -> str:
        """The standalone `{Prefix}AggregateInput` behind the deprecated `relAggregate` field."""
        type_name = relationship.operations.aggregate_input_type_name
        if self.registry.has(type_name):
            return type_name
        fields: dict[str, FieldConfig] = {
            f"count_{operator}": FieldConfig(type="Int", directives=[count_deprecation(operator)])
            for operator in ("EQ", "LT", "LTE", "GT", "GTE")
        }
        fields["count"] = FieldConfig(type=self.scalars.comparable_filters("Int"))
        aggregate = self.registry.get_or_create_input(type_name, fields)
        add_logical_operators(aggregate)
        self._add_node_and_edge_aggregation(aggregate, relationship)
        return type_name

    def _add_node_and_edge_aggregation(self, aggregate: InputType, relationship: AnyRelationship) -> None:
        node = self.node_aggregation_where_input(relationship)
        if node is not None:
            aggregate.add_fields({"node": node})
        edge = self.edge_aggregation_where_input(relationship)
        if edge is not None:
            aggregate.add_fields({"edge": edge})

    def node_aggregation_where_input(self, relationship: AnyRelationship) -> Optional[str]:
        return self._aggregation_where(
            relationship.operations.node_aggregation_where_input_type_name,
            relationship.target.aggregation_where_fields,
        )

    def edge_aggregation_where_input(self, relationship: AnyRelationship) -> Optional[str]:
        type_name = relationship.operations.edge_aggregation_where_input_type_name
        if self.registry.has(type_name):
            return type_name
        if isinstance(relationship, RelationshipDeclarationAdapter):
            # registered with the declaration's other edge inputs, if at all
            return None
        return self._aggregation_where(type_name, relationship.aggregation_where_fields)

    def declared_edge_aggregation_where_input(self, declaration: RelationshipDeclarationAdapter) -> Optional[str]:
        return declared_edge_input(
            self.registry,
            declaration,
            declaration.operations.edge_aggregation_where_input_type_name,
            self.edge_aggregation_where_input,
        )

    def _aggregation_where(self, type_name: str, attributes: list[AttributeAdapter]) -> Optional[str]:
        if self.registry.has(type_name):
            return type_name
        if not attributes:
            return None
        aggregation = self.registry.get_or_create_input(type_name)
        add_logical_operators(aggregation)
        with_deprecated = should_add_deprecated_fields(self.features, "aggregation_filters")
        for attribute in attributes:
            if with_deprecated:
                aggregation.add_fields(self._deprecated_aggregation_fields(attribute))
            aggregation.add_fields({attribute.name: self.scalars.aggregation_filter_type(attribute)})
        return type_name

    def _deprecated_aggregation_fields(self, attribute: AttributeAdapter) -> dict[str, FieldConfig]:
        name = attribute.name
        type_name = attribute.type_name
        fields: dict[str, FieldConfig] = {}
        for operator in AGGREGATION_COMPARISON_OPERATORS:
            if attribute.is_string:
                fields[f"{name}_AVERAGE_LENGTH_{operator}"] = FieldConfig(
                    type="Float", directives=[aggregation_deprecation(name, "averageLength", operator)]
                )
                fields[f"{name}_LONGEST_LENGTH_{operator}"] = FieldConfig(
                    type="Int", directives=[aggregation_deprecation(name, "longestLength", operator)]
                )
                fields[f"{name}_SHORTEST_LENGTH_{operator}"] = FieldConfig(
                    type="Int", directives=[aggregation_deprecation(name, "shortestLength", operator)]
                )
                continue
            fields[f"{name}_MIN_{operator}"] = FieldConfig(
                type=type_name, directives=[aggregation_deprecation(name, "min", operator)]
            )
            fields[f"{name}_MAX_{operator}"] = FieldConfig(
                type=type_name, directives=[aggregation_deprecation(name, "max", operator)]
            )
            if attribute.is_numeric or attribute.is_duration:
                if not attribute.is_duration:
                    fields[f"{name}_SUM_{operator}"] = FieldConfig(
                        type=type_name, directives=[aggregation_deprecation(name, "sum", operator)]
                    )
                if attribute.is_big_int:
                    average = "BigInt"
                elif attribute.is_duration:
                    average = "Duration"
                else:
                    average = "Float"
                fields[f"{name}_AVERAGE_{operator}"] = FieldConfig(
                    type=average, directives=[aggregation_deprecation(name, "average", operator)]
                )
        return fields
