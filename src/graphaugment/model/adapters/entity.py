"""
Entity adapters - concrete, interface and union entities as seen by the generators.

Adapters are built through an AdapterCache, one per schema build. Derived
collections (attributes, relationships, names) are computed on first access
and kept for the life of the build.

Usage:
    cache = AdapterCache(model)
    movie = cache.adapt(model.get_concrete_entity("Movie"))
    movie.operations.where_input_type_name   # "MovieWhere"
    [a.name for a in movie.sortable_fields]
"""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING, Optional, Union

from ...core.constants import MutationOperation
from ...core.utils import lower_first, plural, upper_first
from ..schema_model import ConcreteEntity, InterfaceEntity, UnionEntity
from .attribute import AttributeAdapter
from .operations import ConcreteEntityOperations, InterfaceEntityOperations, UnionEntityOperations
from .relationship import RelationshipAdapter, RelationshipDeclarationAdapter

if TYPE_CHECKING:
    from .cache import AdapterCache


class _EntityAdapterBase:
    """Naming and root-capability predicates shared by every variant."""

    def __init__(self, entity, cache: "AdapterCache"):
        self.entity = entity
        self.cache = cache
        self.name: str = entity.name
        self.description: Optional[str] = entity.description
        self.annotations = entity.annotations
        self.directives = entity.directives

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"

    @cached_property
    def plural(self) -> str:
        if self.annotations.plural is not None and self.annotations.plural.value:
            return lower_first(self.annotations.plural.value)
        return plural(self.name)

    @cached_property
    def singular(self) -> str:
        return lower_first(self.name)

    @cached_property
    def upper_first_plural(self) -> str:
        return upper_first(self.plural)

    # Entity annotations win over the schema-level `extend schema @query(...)` ones

    def _query_annotation(self):
        return self.annotations.query or self.cache.schema_model.annotations.query

    def _mutation_annotation(self):
        return self.annotations.mutation or self.cache.schema_model.annotations.mutation

    def is_readable(self) -> bool:
        annotation = self._query_annotation()
        return annotation is None or annotation.read

    def is_aggregable(self) -> bool:
        annotation = self._query_annotation()
        return annotation is None or annotation.aggregate

    def _allows_mutation(self, operation: str) -> bool:
        annotation = self._mutation_annotation()
        return annotation is None or operation in annotation.operations

    def is_creatable(self) -> bool:
        return self._allows_mutation(MutationOperation.CREATE)

    def is_updatable(self) -> bool:
        return self._allows_mutation(MutationOperation.UPDATE)

    def is_deletable(self) -> bool:
        return self._allows_mutation(MutationOperation.DELETE)


class _FieldedEntityAdapter(_EntityAdapterBase):
    """Attribute handling shared by concrete and interface entities."""

    @cached_property
    def attributes(self) -> dict[str, AttributeAdapter]:
        return {
            name: AttributeAdapter(attribute, self.cache.enum_names, self.cache.scalar_names)
            for name, attribute in self.entity.attributes.items()
        }

    def find_attribute(self, name: str) -> Optional[AttributeAdapter]:
        return self.attributes.get(name)

    def attributes_by_capability(self, capability: str) -> list[AttributeAdapter]:
        """Attributes whose `capability` predicate (e.g. "is_sortable") holds. Not cached."""
        return [attribute for attribute in self.attributes.values() if getattr(attribute, capability)()]

    @property
    def where_fields(self) -> list[AttributeAdapter]:
        return self.attributes_by_capability("is_filterable")

    @property
    def sortable_fields(self) -> list[AttributeAdapter]:
        return self.attributes_by_capability("is_sortable")

    @property
    def aggregable_fields(self) -> list[AttributeAdapter]:
        return self.attributes_by_capability("is_aggregable")

    @property
    def aggregation_where_fields(self) -> list[AttributeAdapter]:
        return self.attributes_by_capability("is_aggregation_where_field")

    @property
    def create_input_fields(self) -> list[AttributeAdapter]:
        return self.attributes_by_capability("is_creatable")

    @property
    def update_input_fields(self) -> list[AttributeAdapter]:
        return self.attributes_by_capability("is_updatable")

    @property
    def object_fields(self) -> list[AttributeAdapter]:
        return self.attributes_by_capability("is_object_field")

    @property
    def unique_fields(self) -> list[AttributeAdapter]:
        return self.attributes_by_capability("is_unique")


class ConcreteEntityAdapter(_FieldedEntityAdapter):
    entity: ConcreteEntity

    def __init__(self, entity: ConcreteEntity, cache: "AdapterCache"):
        super().__init__(entity, cache)
        self.labels = entity.labels
        self.interface_names = entity.interface_names

    @cached_property
    def operations(self) -> ConcreteEntityOperations:
        return ConcreteEntityOperations(self)

    @cached_property
    def relationships(self) -> dict[str, RelationshipAdapter]:
        return {
            name: RelationshipAdapter(relationship, self.cache, source=self)
            for name, relationship in self.entity.relationships.items()
        }

    def find_relationship(self, name: str) -> Optional[RelationshipAdapter]:
        return self.relationships.get(name)

    @cached_property
    def composite_entities(self) -> list["InterfaceEntityAdapter | UnionEntityAdapter"]:
        return [self.cache.adapt(composite) for composite in self.entity.composite_entities]

    @cached_property
    def global_id_field(self) -> Optional[AttributeAdapter]:
        for attribute in self.attributes.values():
            if attribute.is_global_id_field():
                return attribute
        return None

    def is_global_node(self) -> bool:
        return self.global_id_field is not None

    def is_composite(self) -> bool:
        return False


class InterfaceEntityAdapter(_FieldedEntityAdapter):
    entity: InterfaceEntity

    def __init__(self, entity: InterfaceEntity, cache: "AdapterCache"):
        super().__init__(entity, cache)
        self.interface_names = entity.interface_names

    @cached_property
    def operations(self) -> InterfaceEntityOperations:
        return InterfaceEntityOperations(self)

    @cached_property
    def concrete_entities(self) -> list[ConcreteEntityAdapter]:
        return [self.cache.adapt(entity) for entity in self.entity.concrete_entities]

    @cached_property
    def relationship_declarations(self) -> dict[str, RelationshipDeclarationAdapter]:
        return {
            name: RelationshipDeclarationAdapter(declaration, self.cache, source=self)
            for name, declaration in self.entity.relationship_declarations.items()
        }

    @property
    def relationships(self) -> dict[str, RelationshipDeclarationAdapter]:
        """Declarations stand in for relationships wherever generators iterate them."""
        return self.relationship_declarations

    def find_relationship(self, name: str) -> Optional[RelationshipDeclarationAdapter]:
        return self.relationship_declarations.get(name)

    def is_composite(self) -> bool:
        return True


class UnionEntityAdapter(_EntityAdapterBase):
    entity: UnionEntity

    @cached_property
    def operations(self) -> UnionEntityOperations:
        return UnionEntityOperations(self)

    @cached_property
    def concrete_entities(self) -> list[ConcreteEntityAdapter]:
        return [self.cache.adapt(entity) for entity in self.entity.concrete_entities]

    @property
    def relationships(self) -> dict:
        return {}

    def is_composite(self) -> bool:
        return True


EntityAdapter = Union[ConcreteEntityAdapter, InterfaceEntityAdapter, UnionEntityAdapter]
