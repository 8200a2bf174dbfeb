"""
Adapter cache - one adapter per raw entity for the duration of a build.

A relationship cycle (Movie.actors -> Actor.movies -> Movie) resolves to the
adapter already held here instead of building a new one.
"""

from __future__ import annotations

from typing import overload

from ..schema_model import ConcreteEntity, Entity, InterfaceEntity, SchemaModel, UnionEntity
from .entity import ConcreteEntityAdapter, EntityAdapter, InterfaceEntityAdapter, UnionEntityAdapter


class AdapterCache:
    """Memoizes entity adapters by raw entity identity."""

    def __init__(self, schema_model: SchemaModel):
        self.schema_model = schema_model
        self.enum_names = schema_model.enum_names
        self.scalar_names = schema_model.scalar_names
        self._adapters: dict[int, EntityAdapter] = {}

    @overload
    def adapt(self, entity: ConcreteEntity) -> ConcreteEntityAdapter: ...

    @overload
    def adapt(self, entity: InterfaceEntity) -> InterfaceEntityAdapter: ...

    @overload
    def adapt(self, entity: UnionEntity) -> UnionEntityAdapter: ...

    def adapt(self, entity: Entity) -> EntityAdapter:
        adapter = self._adapters.get(id(entity))
        if adapter is not None:
            return adapter
        if isinstance(entity, ConcreteEntity):
            adapter = ConcreteEntityAdapter(entity, self)
        elif isinstance(entity, InterfaceEntity):
            adapter = InterfaceEntityAdapter(entity, self)
        else:
            adapter = UnionEntityAdapter(entity, self)
        self._adapters[id(entity)] = adapter
        return adapter

    def adapt_all(self) -> list[EntityAdapter]:
        """Adapters for every entity, concrete first, in declaration order."""
        return [self.adapt(entity) for entity in self.schema_model.entities]

    def __len__(self) -> int:
        return len(self._adapters)
