"""
Schema model - raw entities parsed from the annotated document, and their adapters.
"""

from __future__ import annotations

from .adapters import (
    AdapterCache,
    AttributeAdapter,
    ConcreteEntityAdapter,
    EntityAdapter,
    InterfaceEntityAdapter,
    RelationshipAdapter,
    RelationshipDeclarationAdapter,
    UnionEntityAdapter,
)
from .annotations import Annotations, parse_annotations
from .parser import get_definition_collection, parse_schema_model
from .schema_model import (
    Attribute,
    ConcreteEntity,
    Entity,
    InterfaceEntity,
    Operation,
    Relationship,
    RelationshipDeclaration,
    SchemaModel,
    TypeRef,
    UnionEntity,
)

__all__ = [
    "AdapterCache",
    "Annotations",
    "Attribute",
    "AttributeAdapter",
    "ConcreteEntity",
    "ConcreteEntityAdapter",
    "Entity",
    "EntityAdapter",
    "InterfaceEntity",
    "InterfaceEntityAdapter",
    "Operation",
    "Relationship",
    "RelationshipAdapter",
    "RelationshipDeclaration",
    "RelationshipDeclarationAdapter",
    "SchemaModel",
    "TypeRef",
    "UnionEntity",
    "UnionEntityAdapter",
    "get_definition_collection",
    "parse_annotations",
    "parse_schema_model",
]
