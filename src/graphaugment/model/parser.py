"""
Schema model parser - turns an annotated DocumentNode into a SchemaModel.

Parsing runs in three passes so that relationships can reference entities
declared later in the document:
1. Collect definitions (merging `extend type` blocks into their definition)
2. Create entity shells for @node types, interfaces and unions
3. Fill in attributes, relationships and relationship declarations

Usage:
    from graphql import parse
    from graphaugment.model.parser import parse_schema_model

    model = parse_schema_model(parse(type_defs))
    movie = model.get_concrete_entity("Movie")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional, Union

from graphql import (
    DirectiveDefinitionNode,
    DirectiveNode,
    DocumentNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    FieldDefinitionNode,
    InputObjectTypeDefinitionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    SchemaDefinitionNode,
    SchemaExtensionNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
)

from ..core import constants
from ..core.constants import LIBRARY_DIRECTIVES, ROOT_TYPE_NAMES, NestedOperation
from ..core.errors import GenerationError
from .annotations import directive_arguments, find_directive, parse_annotations
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


logger = logging.getLogger(__name__)

DEFAULT_NESTED_OPERATIONS = NestedOperation.ALL

ObjectLikeNode = Union[ObjectTypeDefinitionNode, InterfaceTypeDefinitionNode]


# =============================================================================
# Definition collection
# =============================================================================


@dataclass
class DefinitionCollection:
    """Type definitions of a document grouped by kind, extensions merged."""
    nodes: dict[str, ObjectTypeDefinitionNode] = field(default_factory=dict)
    user_defined_object_types: dict[str, ObjectTypeDefinitionNode] = field(default_factory=dict)
    relationship_properties: dict[str, ObjectTypeDefinitionNode] = field(default_factory=dict)
    operations: dict[str, ObjectTypeDefinitionNode] = field(default_factory=dict)
    interfaces: dict[str, InterfaceTypeDefinitionNode] = field(default_factory=dict)
    unions: dict[str, UnionTypeDefinitionNode] = field(default_factory=dict)
    enums: dict[str, EnumTypeDefinitionNode] = field(default_factory=dict)
    scalars: dict[str, ScalarTypeDefinitionNode] = field(default_factory=dict)
    inputs: dict[str, InputObjectTypeDefinitionNode] = field(default_factory=dict)
    directives: dict[str, DirectiveDefinitionNode] = field(default_factory=dict)
    schema_directives: list[DirectiveNode] = field(default_factory=list)

    @property
    def object_types(self) -> dict[str, ObjectTypeDefinitionNode]:
        return {
            **self.nodes,
            **self.relationship_properties,
            **self.user_defined_object_types,
            **self.operations,
        }


def _merge(definition, extension):
    """Return a copy of `definition` with the fields, directives and interfaces of `extension` appended."""
    merged = {key: getattr(definition, key, None) for key in definition.keys}
    for key in ("fields", "directives", "interfaces", "types", "values"):
        if key in merged:
            merged[key] = tuple(merged[key] or ()) + tuple(getattr(extension, key, None) or ())
    return type(definition)(**merged)


_EXTENSION_TO_DEFINITION = {
    ObjectTypeExtensionNode: ObjectTypeDefinitionNode,
    InterfaceTypeExtensionNode: InterfaceTypeDefinitionNode,
    UnionTypeExtensionNode: UnionTypeDefinitionNode,
    EnumTypeExtensionNode: EnumTypeDefinitionNode,
}


def merge_type_extensions(document: DocumentNode) -> list:
    """Definitions of the document with `extend type|interface|union|enum` folded in."""
    definitions: dict[str, object] = {}
    others = []
    pending = []
    for definition in document.definitions:
        if type(definition) in _EXTENSION_TO_DEFINITION:
            pending.append(definition)
        elif hasattr(definition, "name") and definition.name is not None:
            definitions.setdefault(definition.name.value, definition)
        else:
            others.append(definition)
    for extension in pending:
        name = extension.name.value
        base = definitions.get(name)
        if base is None:
            # Extension of a type that is never defined: treat it as the definition
            kind = _EXTENSION_TO_DEFINITION[type(extension)]
            base = kind(**{key: getattr(extension, key, None) for key in kind.keys if hasattr(extension, key)})
            definitions[name] = base
        else:
            definitions[name] = _merge(base, extension)
    return [*definitions.values(), *others]


def get_definition_collection(document: DocumentNode) -> DefinitionCollection:
    collection = DefinitionCollection()
    for definition in merge_type_extensions(document):
        if isinstance(definition, ObjectTypeDefinitionNode):
            name = definition.name.value
            if name in ROOT_TYPE_NAMES:
                collection.operations[name] = definition
            elif find_directive(definition.directives, constants.NODE):
                collection.nodes[name] = definition
            elif find_directive(definition.directives, constants.RELATIONSHIP_PROPERTIES):
                collection.relationship_properties[name] = definition
            else:
                collection.user_defined_object_types[name] = definition
        elif isinstance(definition, InterfaceTypeDefinitionNode):
            collection.interfaces[definition.name.value] = definition
        elif isinstance(definition, UnionTypeDefinitionNode):
            collection.unions[definition.name.value] = definition
        elif isinstance(definition, EnumTypeDefinitionNode):
            collection.enums[definition.name.value] = definition
        elif isinstance(definition, ScalarTypeDefinitionNode):
            collection.scalars[definition.name.value] = definition
        elif isinstance(definition, InputObjectTypeDefinitionNode):
            collection.inputs[definition.name.value] = definition
        elif isinstance(definition, DirectiveDefinitionNode):
            collection.directives[definition.name.value] = definition
        elif isinstance(definition, (SchemaDefinitionNode, SchemaExtensionNode)):
            collection.schema_directives.extend(definition.directives or ())
    return collection


# =============================================================================
# Helpers
# =============================================================================


def user_directives(directives: Optional[Iterable[DirectiveNode]]) -> tuple[DirectiveNode, ...]:
    """Directive usages that are not consumed by the engine."""
    return tuple(d for d in directives or () if d.name.value not in LIBRARY_DIRECTIVES)


def _description(node) -> Optional[str]:
    return node.description.value if node.description else None


def _interface_names(node: ObjectLikeNode) -> tuple[str, ...]:
    return tuple(i.name.value for i in node.interfaces or ())


def parse_attribute(field_node: FieldDefinitionNode) -> Attribute:
    return Attribute(
        name=field_node.name.value,
        type=TypeRef.from_node(field_node.type),
        annotations=parse_annotations(field_node.directives),
        args=tuple(field_node.arguments or ()),
        description=_description(field_node),
        directives=user_directives(field_node.directives),
    )


def _nested_operations(args: dict) -> frozenset[str]:
    operations = args.get("nestedOperations", DEFAULT_NESTED_OPERATIONS)
    return frozenset(operations or ())


# =============================================================================
# Parser
# =============================================================================


class SchemaModelParser:
    """Builds a SchemaModel from a DefinitionCollection."""

    def __init__(self, definitions: DefinitionCollection):
        self.definitions = definitions
        self.entities: dict[str, Entity] = {}

    def parse(self) -> SchemaModel:
        concrete = [self._concrete_shell(node) for node in self.definitions.nodes.values()]
        for entity in concrete:
            self.entities[entity.name] = entity

        composites = []
        for node in self.definitions.interfaces.values():
            interface = self._interface_shell(node, concrete)
            self.entities[interface.name] = interface
            composites.append(interface)
        for node in self.definitions.unions.values():
            union = self._union_shell(node)
            self.entities[union.name] = union
            composites.append(union)

        for entity in concrete:
            self._fill_concrete(entity, self.definitions.nodes[entity.name])
        for composite in composites:
            if isinstance(composite, InterfaceEntity):
                self._fill_interface(composite, self.definitions.interfaces[composite.name])
        for composite in composites:
            if isinstance(composite, InterfaceEntity):
                self._link_declarations(composite)

        model = SchemaModel(
            concrete_entities=concrete,
            composite_entities=composites,
            operations=self._operations(),
            annotations=parse_annotations(self.definitions.schema_directives),
            enum_names=frozenset(self.definitions.enums),
            scalar_names=frozenset(self.definitions.scalars),
        )
        logger.debug(
            f"Parsed schema model: {len(concrete)} concrete entities, {len(composites)} composite entities"
        )
        return model

    # -------------------------------------------------------------------------
    # Shells
    # -------------------------------------------------------------------------

    def _concrete_shell(self, node: ObjectTypeDefinitionNode) -> ConcreteEntity:
        annotations = parse_annotations(node.directives)
        labels = annotations.node.labels if annotations.node and annotations.node.labels else (node.name.value,)
        return ConcreteEntity(
            name=node.name.value,
            labels=tuple(labels),
            annotations=annotations,
            description=_description(node),
            interface_names=_interface_names(node),
            directives=user_directives(node.directives),
        )

    def _interface_shell(self, node: InterfaceTypeDefinitionNode, concrete: list[ConcreteEntity]) -> InterfaceEntity:
        name = node.name.value
        interface = InterfaceEntity(
            name=name,
            concrete_entities=[entity for entity in concrete if name in entity.interface_names],
            annotations=parse_annotations(node.directives),
            description=_description(node),
            interface_names=_interface_names(node),
            directives=user_directives(node.directives),
        )
        for entity in interface.concrete_entities:
            entity.composite_entities.append(interface)
        return interface

    def _union_shell(self, node: UnionTypeDefinitionNode) -> UnionEntity:
        members = [self.entities[t.name.value] for t in node.types or () if t.name.value in self.entities]
        union = UnionEntity(
            name=node.name.value,
            concrete_entities=[m for m in members if isinstance(m, ConcreteEntity)],
            annotations=parse_annotations(node.directives),
            description=_description(node),
            directives=user_directives(node.directives),
        )
        for entity in union.concrete_entities:
            entity.composite_entities.append(union)
        return union

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    def _fill_concrete(self, entity: ConcreteEntity, node: ObjectTypeDefinitionNode) -> None:
        for field_node in node.fields or ():
            relationship = find_directive(field_node.directives, constants.RELATIONSHIP)
            if relationship is not None:
                rel = self._relationship(entity, field_node, relationship)
                rel.first_declared_in_type_name = self._declaring_interface(entity, rel.name)
                entity.relationships[rel.name] = rel
                continue
            attribute = self._attribute(field_node)
            entity.attributes[attribute.name] = attribute

    def _fill_interface(self, interface: InterfaceEntity, node: InterfaceTypeDefinitionNode) -> None:
        for field_node in node.fields or ():
            declaration = find_directive(field_node.directives, constants.DECLARE_RELATIONSHIP)
            if declaration is None:
                declaration = find_directive(field_node.directives, constants.RELATIONSHIP)
            if declaration is not None:
                interface.relationship_declarations[field_node.name.value] = self._declaration(
                    interface, field_node, declaration
                )
                continue
            attribute = self._attribute(field_node)
            interface.attributes[attribute.name] = attribute

    def _attribute(self, field_node: FieldDefinitionNode) -> Attribute:
        attribute = parse_attribute(field_node)
        cypher = attribute.annotations.cypher
        if cypher is not None:
            target = self.entities.get(attribute.type.name)
            if isinstance(target, ConcreteEntity):
                cypher.target_entity = target
        return attribute

    def _target(self, field_node: FieldDefinitionNode) -> Entity:
        type_ref = TypeRef.from_node(field_node.type)
        target = self.entities.get(type_ref.name)
        if target is None:
            raise GenerationError(
                f"Relationship field {field_node.name.value} targets {type_ref.name}, "
                "which is not a node, interface or union"
            )
        return target

    def _relationship(
        self, source: Entity, field_node: FieldDefinitionNode, directive: DirectiveNode
    ) -> Relationship:
        args = directive_arguments(directive)
        type_ref = TypeRef.from_node(field_node.type)
        properties = args.get("properties")
        attributes = {}
        if properties and properties in self.definitions.relationship_properties:
            properties_node = self.definitions.relationship_properties[properties]
            for property_node in properties_node.fields or ():
                attribute = parse_attribute(property_node)
                attributes[attribute.name] = attribute
        return Relationship(
            name=field_node.name.value,
            type=args.get("type", ""),
            source=source,
            target=self._target(field_node),
            direction=args.get("direction", constants.RelationshipDirection.OUT),
            query_direction=args.get("queryDirection", "DIRECTED"),
            is_list=type_ref.is_list,
            is_nullable=not type_ref.is_required,
            nested_operations=_nested_operations(args),
            aggregate=args.get("aggregate", True),
            properties_type_name=properties,
            attributes=attributes,
            annotations=parse_annotations(field_node.directives),
            args=tuple(field_node.arguments or ()),
            description=_description(field_node),
            directives=user_directives(field_node.directives),
        )

    def _declaration(
        self, interface: InterfaceEntity, field_node: FieldDefinitionNode, directive: DirectiveNode
    ) -> RelationshipDeclaration:
        args = directive_arguments(directive)
        type_ref = TypeRef.from_node(field_node.type)
        return RelationshipDeclaration(
            name=field_node.name.value,
            source=interface,
            target=self._target(field_node),
            is_list=type_ref.is_list,
            is_nullable=not type_ref.is_required,
            nested_operations=_nested_operations(args),
            aggregate=args.get("aggregate", True),
            annotations=parse_annotations(field_node.directives),
            args=tuple(field_node.arguments or ()),
            description=_description(field_node),
            directives=user_directives(field_node.directives),
            first_declared_in_type_name=interface.name,
        )

    def _declaring_interface(self, entity: ConcreteEntity, field_name: str) -> Optional[str]:
        for interface_name in entity.interface_names:
            node = self.definitions.interfaces.get(interface_name)
            if node and any(f.name.value == field_name for f in node.fields or ()):
                return interface_name
        return None

    def _link_declarations(self, interface: InterfaceEntity) -> None:
        for declaration in interface.relationship_declarations.values():
            declaration.relationship_implementations = [
                entity.relationships[declaration.name]
                for entity in interface.concrete_entities
                if declaration.name in entity.relationships
            ]

    # -------------------------------------------------------------------------
    # Root operations
    # -------------------------------------------------------------------------

    def _operations(self) -> dict[str, Operation]:
        operations = {}
        for name, node in self.definitions.operations.items():
            operation = Operation(name=name)
            for field_node in node.fields or ():
                attribute = self._attribute(field_node)
                if attribute.annotations.cypher is not None:
                    operation.attributes[attribute.name] = attribute
                else:
                    operation.user_resolved_attributes[attribute.name] = attribute
            operations[name] = operation
        return operations


def parse_schema_model(document: DocumentNode) -> SchemaModel:
    """Parse an annotated document into the raw schema model."""
    return SchemaModelParser(get_definition_collection(document)).parse()
