"""
Sort inputs - `<Entity>Sort`, `<Props>Sort` and `<Prefix>ConnectionSort`.
"""

from __future__ import annotations

from typing import Optional, Union

from ..core.registry import TypeRegistry
from ..model.adapters import (
    AttributeAdapter,
    ConcreteEntityAdapter,
    InterfaceEntityAdapter,
    RelationshipAdapter,
    RelationshipDeclarationAdapter,
)
from .directives import user_deprecations
from .scalar_types import ScalarTypes
from .where_input import declared_edge_input


class SortInputGenerator:
    def __init__(self, registry: TypeRegistry, scalars: ScalarTypes):
        self.registry = registry
        self.scalars = scalars

    def _sort_fields(self, attributes: list[AttributeAdapter]) -> dict:
        direction = self.scalars.sort_direction()
        fields = {}
        for attribute in attributes:
            fields[attribute.name] = direction
        return fields

    def entity_sort(self, entity: Union[ConcreteEntityAdapter, InterfaceEntityAdapter]) -> Optional[str]:
        """`<Entity>Sort`, or None when nothing on the entity is sortable."""
        type_name = entity.operations.sort_input_type_name
        if self.registry.has(type_name):
            return type_name
        attributes = entity.sortable_fields
        if not attributes:
            return None
        sort = self.registry.get_or_create_input(
            type_name,
            description=(
                f"Fields to sort {entity.upper_first_plural} by. The order in which sorts are applied is not "
                f"guaranteed when specifying many fields in one {type_name} object."
            ),
        )
        sort.add_fields(self._sort_fields(attributes))
        for attribute in attributes:
            sort.set_field_directives(attribute.name, user_deprecations(attribute.directives))
        return type_name

    def edge_sort(self, relationship: Union[RelationshipAdapter, RelationshipDeclarationAdapter]) -> Optional[str]:
        if isinstance(relationship, RelationshipDeclarationAdapter):
            return declared_edge_input(
                self.registry, relationship, relationship.operations.edge_sort_type_name, self.edge_sort
            )
        if not relationship.has_any_properties:
            return None
        type_name = relationship.operations.edge_sort_type_name
        if self.registry.has(type_name):
            return type_name
        attributes = relationship.sortable_fields
        if not attributes:
            return None
        return self.registry.get_or_create_input(type_name, self._sort_fields(attributes)).name

    def connection_sort(
        self, relationship: Union[RelationshipAdapter, RelationshipDeclarationAdapter]
    ) -> Optional[str]:
        """
        `<Prefix>ConnectionSort` with `node` and `edge` sorts.

        A union target has no common node sort, so only `edge` can appear.
        """
        type_name = relationship.operations.connection_sort_input_typename
        if self.registry.has(type_name):
            return type_name
        fields = {}
        edge = self.edge_sort(relationship)
        if edge is not None:
            fields["edge"] = edge
        if not relationship.is_target_union():
            node = self.entity_sort(relationship.target)
            if node is not None:
                fields["node"] = node
        if not fields:
            return None
        return self.registry.get_or_create_input(type_name, fields).name
