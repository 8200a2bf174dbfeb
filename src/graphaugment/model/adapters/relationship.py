"""
Relationship adapters.

RelationshipAdapter wraps a `@relationship` field of a concrete entity;
RelationshipDeclarationAdapter wraps a `@declareRelationship` field of an
interface and fans out to the relationships of every implementing entity.

Targets are adapted on first access only. Adapting a target adapts its own
relationships lazily too, so a cyclic schema (User.friends -> User) never
recurses while the adapters are being built.
"""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING, Optional

from ...core.constants import NestedOperation
from ...core.errors import AdapterContractError
from ..schema_model import InterfaceEntity, Relationship, RelationshipDeclaration, UnionEntity
from .attribute import AttributeAdapter
from .operations import RelationshipOperations

if TYPE_CHECKING:
    from .cache import AdapterCache
    from .entity import ConcreteEntityAdapter, EntityAdapter


class _RelationshipAdapterBase:
    """Fields and predicates shared by relationships and declarations."""

    is_declaration = False

    def __init__(self, relationship, cache: "AdapterCache", source: Optional["EntityAdapter"] = None):
        self.relationship = relationship
        self.cache = cache
        self.name: str = relationship.name
        self.is_list: bool = relationship.is_list
        self.is_nullable: bool = relationship.is_nullable
        self.nested_operations: frozenset[str] = relationship.nested_operations
        self.aggregate: bool = relationship.aggregate
        self.annotations = relationship.annotations
        self.args = relationship.args
        self.description: Optional[str] = relationship.description
        self.directives = relationship.directives
        self.first_declared_in_type_name: Optional[str] = relationship.first_declared_in_type_name
        self._source = source

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.relationship.source.name}.{self.name})"

    @property
    def source(self) -> "EntityAdapter":
        if self._source is None:
            self._source = self.cache.adapt(self.relationship.source)
        return self._source

    @cached_property
    def target(self) -> "EntityAdapter":
        return self.cache.adapt(self.relationship.target)

    @cached_property
    def operations(self) -> RelationshipOperations:
        return RelationshipOperations(self)

    def is_target_union(self) -> bool:
        return isinstance(self.relationship.target, UnionEntity)

    def is_target_interface(self) -> bool:
        return isinstance(self.relationship.target, InterfaceEntity)

    def _endpoint_is_union(self) -> bool:
        return isinstance(self.relationship.source, UnionEntity) or self.is_target_union()

    # -------------------------------------------------------------------------
    # Capabilities
    # -------------------------------------------------------------------------

    def is_readable(self) -> bool:
        selectable = self.annotations.selectable
        return selectable is None or selectable.on_read

    def is_filterable_by_value(self) -> bool:
        filterable = self.annotations.filterable
        return filterable is None or filterable.by_value

    def is_filterable_by_aggregate(self) -> bool:
        """Never for a union endpoint: there is no common label set to aggregate over."""
        if self._endpoint_is_union():
            return False
        filterable = self.annotations.filterable
        return filterable is None or filterable.by_aggregate

    def is_aggregable(self) -> bool:
        """Whether the connection type gets an `aggregate` selection."""
        if not self.aggregate or self.is_target_union():
            return False
        if isinstance(self.relationship.source, InterfaceEntity):
            return False
        selectable = self.annotations.selectable
        return selectable is None or selectable.on_aggregate

    def is_creatable(self) -> bool:
        settable = self.annotations.settable
        return settable is None or settable.on_create

    def is_updatable(self) -> bool:
        settable = self.annotations.settable
        return settable is None or settable.on_update

    def allows(self, operation: str) -> bool:
        return operation in self.nested_operations

    def should_generate_field_input_type(self) -> bool:
        """`<Prefix>FieldInput` exists when nested create or connect is allowed."""
        return self.allows(NestedOperation.CONNECT) or self.allows(NestedOperation.CREATE)

    def should_generate_update_field_input_type(
        self, member: Optional["ConcreteEntityAdapter"] = None
    ) -> bool:
        """
        Whether an `<Prefix>UpdateFieldInput` is generated.

        For a union target the question is asked per member, so the member
        entity must be given.
        """
        if self.is_target_union() and member is None:
            raise AdapterContractError(
                f"Relationship {self.name} targets the union {self.relationship.target.name}; "
                "a member entity is required to decide on its update field input"
            )
        return len(self.nested_operations) > 0


class RelationshipAdapter(_RelationshipAdapterBase):
    relationship: Relationship

    def __init__(self, relationship: Relationship, cache: "AdapterCache", source: Optional["EntityAdapter"] = None):
        super().__init__(relationship, cache, source)
        self.type: str = relationship.type
        self.direction: str = relationship.direction
        self.query_direction: str = relationship.query_direction
        self.properties_type_name: Optional[str] = relationship.properties_type_name

    @property
    def has_any_properties(self) -> bool:
        return bool(self.properties_type_name)

    @cached_property
    def attributes(self) -> dict[str, AttributeAdapter]:
        """Adapted attributes of the relationship properties type."""
        return {
            name: AttributeAdapter(attribute, self.cache.enum_names, self.cache.scalar_names)
            for name, attribute in self.relationship.attributes.items()
        }

    def _properties(self, capability: str) -> list[AttributeAdapter]:
        return [attribute for attribute in self.attributes.values() if getattr(attribute, capability)()]

    @property
    def where_fields(self) -> list[AttributeAdapter]:
        return self._properties("is_filterable")

    @property
    def sortable_fields(self) -> list[AttributeAdapter]:
        # edge properties sort on list attributes too
        return [
            attribute
            for attribute in self.attributes.values()
            if attribute.is_scalar_like
            and not attribute.is_private()
            and not attribute.is_custom_resolvable()
            and not (attribute.is_cypher() and attribute.args)
            and (attribute.annotations.sortable is None or attribute.annotations.sortable.by_value)
        ]

    @property
    def aggregable_fields(self) -> list[AttributeAdapter]:
        return self._properties("is_aggregable")

    @property
    def aggregation_where_fields(self) -> list[AttributeAdapter]:
        return self._properties("is_aggregation_where_field")

    @property
    def create_input_fields(self) -> list[AttributeAdapter]:
        return self._properties("is_creatable")

    @property
    def update_input_fields(self) -> list[AttributeAdapter]:
        return self._properties("is_updatable")

    @property
    def object_fields(self) -> list[AttributeAdapter]:
        return self._properties("is_object_field")

    @property
    def has_create_input_fields(self) -> bool:
        return bool(self.create_input_fields)

    @property
    def has_update_input_fields(self) -> bool:
        return bool(self.update_input_fields)

    @property
    def has_non_null_create_input_fields(self) -> bool:
        return any(attribute.is_required and not attribute.has_default() for attribute in self.create_input_fields)


class RelationshipDeclarationAdapter(_RelationshipAdapterBase):
    relationship: RelationshipDeclaration
    is_declaration = True

    @cached_property
    def relationship_implementations(self) -> list[RelationshipAdapter]:
        """The concrete relationships behind this declaration, one per implementing entity."""
        implementations = []
        for implementation in self.relationship.relationship_implementations:
            source = self.cache.adapt(implementation.source)
            implementations.append(source.relationships[implementation.name])
        return implementations

    @property
    def has_any_properties(self) -> bool:
        return any(impl.has_any_properties for impl in self.relationship_implementations)

    @cached_property
    def properties_implementations(self) -> list[RelationshipAdapter]:
        """One implementation per distinct properties type, in implementor order."""
        seen: set[str] = set()
        result = []
        for implementation in self.relationship_implementations:
            name = implementation.properties_type_name
            if name and name not in seen:
                seen.add(name)
                result.append(implementation)
        return result

    def sources_with_properties(self, properties_type_name: str) -> list[str]:
        """Names of the implementing entities whose relationship uses a properties type."""
        return [
            impl.source.name
            for impl in self.relationship_implementations
            if impl.properties_type_name == properties_type_name
        ]

    @property
    def has_non_null_create_input_fields(self) -> bool:
        return any(impl.has_non_null_create_input_fields for impl in self.properties_implementations)

    @property
    def has_create_input_fields(self) -> bool:
        return any(impl.has_create_input_fields for impl in self.properties_implementations)

    @property
    def has_update_input_fields(self) -> bool:
        return any(impl.has_update_input_fields for impl in self.properties_implementations)

    @property
    def aggregation_where_fields(self) -> list[AttributeAdapter]:
        return [
            attribute
            for impl in self.properties_implementations
            for attribute in impl.aggregation_where_fields
        ]
