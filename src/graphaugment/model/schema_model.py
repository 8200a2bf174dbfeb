"""
Raw schema model - the immutable description of entities and relationships
parsed from an annotated type-definition document.

Entity variants:
- ConcreteEntity: an object type annotated with @node
- InterfaceEntity: an interface implemented by @node types
- UnionEntity: a union of @node types

The model holds direct references between entities and relationships, so a
cyclic schema (User.friends -> User) is a cyclic object graph. Reprs skip the
back references.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from graphql import DirectiveNode, InputValueDefinitionNode, ListTypeNode, NonNullTypeNode, TypeNode

from ..core.constants import ROOT_TYPE_NAMES, RelationshipDirection
from .annotations import Annotations


# =============================================================================
# Field types
# =============================================================================


@dataclass(frozen=True)
class TypeRef:
    """
    A declared field type with its wrappers resolved.

    Nested lists are not supported; `[[String]]` is treated as `[String]`.
    """
    name: str
    is_list: bool = False
    is_required: bool = False
    is_list_element_required: bool = False

    @classmethod
    def from_node(cls, node: TypeNode) -> "TypeRef":
        is_required = isinstance(node, NonNullTypeNode)
        if is_required:
            node = node.type
        if isinstance(node, ListTypeNode):
            inner = node.type
            element_required = isinstance(inner, NonNullTypeNode)
            if element_required:
                inner = inner.type
            while not hasattr(inner, "name"):
                inner = inner.type
            return cls(
                name=inner.name.value,
                is_list=True,
                is_required=is_required,
                is_list_element_required=element_required,
            )
        return cls(name=node.name.value, is_required=is_required)

    @property
    def pretty(self) -> str:
        """The type as written in SDL: `[String!]!`."""
        if self.is_list:
            inner = f"{self.name}!" if self.is_list_element_required else self.name
            return f"[{inner}]!" if self.is_required else f"[{inner}]"
        return f"{self.name}!" if self.is_required else self.name

    @property
    def nullable(self) -> str:
        """The type without the outer non-null wrapper: `[String!]`."""
        if self.is_list:
            return f"[{self.name}!]" if self.is_list_element_required else f"[{self.name}]"
        return self.name


# =============================================================================
# Attributes
# =============================================================================


@dataclass
class Attribute:
    """A scalar, enum, spatial, temporal or computed field of an entity."""
    name: str
    type: TypeRef
    annotations: Annotations = field(default_factory=Annotations)
    args: tuple[InputValueDefinitionNode, ...] = ()
    description: Optional[str] = None
    directives: tuple[DirectiveNode, ...] = field(default=(), repr=False)


# =============================================================================
# Entities
# =============================================================================


@dataclass(eq=False)
class ConcreteEntity:
    name: str
    labels: tuple[str, ...] = ()
    attributes: dict[str, Attribute] = field(default_factory=dict)
    relationships: dict[str, "Relationship"] = field(default_factory=dict, repr=False)
    annotations: Annotations = field(default_factory=Annotations)
    description: Optional[str] = None
    interface_names: tuple[str, ...] = ()
    directives: tuple[DirectiveNode, ...] = field(default=(), repr=False)
    composite_entities: list[Union["InterfaceEntity", "UnionEntity"]] = field(default_factory=list, repr=False)

    def find_attribute(self, name: str) -> Optional[Attribute]:
        return self.attributes.get(name)


@dataclass(eq=False)
class InterfaceEntity:
    name: str
    concrete_entities: list[ConcreteEntity] = field(default_factory=list, repr=False)
    attributes: dict[str, Attribute] = field(default_factory=dict)
    relationship_declarations: dict[str, "RelationshipDeclaration"] = field(default_factory=dict, repr=False)
    annotations: Annotations = field(default_factory=Annotations)
    description: Optional[str] = None
    interface_names: tuple[str, ...] = ()
    directives: tuple[DirectiveNode, ...] = field(default=(), repr=False)


@dataclass(eq=False)
class UnionEntity:
    name: str
    concrete_entities: list[ConcreteEntity] = field(default_factory=list, repr=False)
    annotations: Annotations = field(default_factory=Annotations)
    description: Optional[str] = None
    directives: tuple[DirectiveNode, ...] = field(default=(), repr=False)


Entity = Union[ConcreteEntity, InterfaceEntity, UnionEntity]
CompositeEntity = Union[InterfaceEntity, UnionEntity]


# =============================================================================
# Relationships
# =============================================================================


@dataclass(eq=False)
class Relationship:
    """A `@relationship` field on a concrete entity (or its interface-side implementation)."""
    name: str
    type: str
    source: Entity = field(repr=False)
    target: Entity = field(repr=False)
    direction: str = RelationshipDirection.OUT
    query_direction: str = "DIRECTED"
    is_list: bool = True
    is_nullable: bool = True
    nested_operations: frozenset[str] = frozenset()
    aggregate: bool = True
    properties_type_name: Optional[str] = None
    attributes: dict[str, Attribute] = field(default_factory=dict)
    annotations: Annotations = field(default_factory=Annotations)
    args: tuple[InputValueDefinitionNode, ...] = ()
    description: Optional[str] = None
    directives: tuple[DirectiveNode, ...] = field(default=(), repr=False)
    first_declared_in_type_name: Optional[str] = None


@dataclass(eq=False)
class RelationshipDeclaration:
    """
    A `@declareRelationship` field on an interface.

    Has no physical realization; every implementing concrete entity carries
    its own Relationship with the same field name.
    """
    name: str
    source: InterfaceEntity = field(repr=False)
    target: Entity = field(repr=False)
    is_list: bool = True
    is_nullable: bool = True
    nested_operations: frozenset[str] = frozenset()
    aggregate: bool = True
    annotations: Annotations = field(default_factory=Annotations)
    args: tuple[InputValueDefinitionNode, ...] = ()
    description: Optional[str] = None
    directives: tuple[DirectiveNode, ...] = field(default=(), repr=False)
    relationship_implementations: list[Relationship] = field(default_factory=list, repr=False)
    first_declared_in_type_name: Optional[str] = None


# =============================================================================
# Root operations and the model
# =============================================================================


@dataclass
class Operation:
    """
    User-declared fields of a root type.

    `attributes` are the @cypher fields the engine binds resolvers to;
    `user_resolved_attributes` are carried through for the host to resolve.
    """
    name: str
    attributes: dict[str, Attribute] = field(default_factory=dict)
    user_resolved_attributes: dict[str, Attribute] = field(default_factory=dict)


@dataclass
class SchemaModel:
    concrete_entities: list[ConcreteEntity] = field(default_factory=list)
    composite_entities: list[CompositeEntity] = field(default_factory=list)
    operations: dict[str, Operation] = field(default_factory=dict)
    annotations: Annotations = field(default_factory=Annotations)
    enum_names: frozenset[str] = frozenset()
    scalar_names: frozenset[str] = frozenset()

    @property
    def entities(self) -> list[Entity]:
        """Every entity, concrete first, in declaration order."""
        return [*self.concrete_entities, *self.composite_entities]

    def get_entity(self, name: str) -> Optional[Entity]:
        for entity in self.entities:
            if entity.name == name:
                return entity
        return None

    def get_concrete_entity(self, name: str) -> Optional[ConcreteEntity]:
        for entity in self.concrete_entities:
            if entity.name == name:
                return entity
        return None

    @property
    def root_operations(self) -> list[Operation]:
        return [self.operations[name] for name in ROOT_TYPE_NAMES if name in self.operations]
