"""
Schema augmentation - turns annotated type definitions into the full API schema.

The augmenter walks every entity of the parsed model and dispatches to the
generators in dependency order, all of them registering into one
TypeRegistry. The registry is then turned into definition nodes, merged
with the user's own definitions and deduplicated.

Usage:
    from graphql import parse
    from graphaugment.generation import augment_schema

    augmented = augment_schema(parse(type_defs), Features(limit_required=True))
    print(augmented.sdl)
    augmented.resolvers["Query"]["movies"]  # FieldResolver(kind="read", ...)

    schema = augmented.executable_schema()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from graphql import (
    REMOVE,
    DefinitionNode,
    DirectiveNode,
    DocumentNode,
    GraphQLInterfaceType,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLSchema,
    GraphQLUnionType,
    ScalarTypeDefinitionNode,
    Visitor,
    build_ast_schema,
    parse,
    print_ast,
    visit,
)

from ..core.constants import (
    GRAPHQL_BUILTIN_SCALAR_TYPES,
    LIBRARY_DIRECTIVES,
    LIBRARY_SCALAR_TYPES,
    OPTIONAL_ROOT_TYPE_NAMES,
    ROOT_TYPE_NAMES,
)
from ..core.features import Features
from ..core.registry import TypeRegistry
from ..model.adapters import AdapterCache, ConcreteEntityAdapter, InterfaceEntityAdapter, UnionEntityAdapter
from ..model.parser import DefinitionCollection, SchemaModelParser, get_definition_collection
from ..model.schema_model import SchemaModel
from .aggregate_types import AggregateTypeGenerator
from .connection_types import ConnectionTypeGenerator
from .directives import as_directives, propagated_directives
from .fulltext import FulltextGenerator
from .mutation_inputs import MutationInputGenerator
from .object_types import ObjectTypeGenerator
from .resolvers import LibraryScalar, TypeResolver
from .root_fields import RootFieldGenerator
from .scalar_types import ScalarTypes
from .sort_input import SortInputGenerator
from .vector import VectorGenerator
from .where_input import WhereInputGenerator


logger = logging.getLogger(__name__)


# =============================================================================
# Result
# =============================================================================


@dataclass
class AugmentedSchema:
    """
    The augmented type definitions and their resolver map.

    `resolvers` is keyed by type name then field name; abstract types carry
    `__resolveType` and library scalars map to their LibraryScalar codec.
    Every key names a type present in `type_defs`.
    """
    type_defs: DocumentNode
    resolvers: dict[str, Any] = field(default_factory=dict)

    @property
    def sdl(self) -> str:
        return print_ast(self.type_defs)

    @property
    def type_names(self) -> list[str]:
        return [d.name.value for d in self.type_defs.definitions if getattr(d, "name", None) is not None]

    def executable_schema(self) -> GraphQLSchema:
        """Build a graphql-core schema with the resolver map bound onto it."""
        schema = build_ast_schema(self.type_defs)
        for type_name, bindings in self.resolvers.items():
            graphql_type = schema.get_type(type_name)
            if isinstance(graphql_type, GraphQLScalarType):
                graphql_type.serialize = bindings.serialize
                graphql_type.parse_value = bindings.parse_value
                continue
            if isinstance(graphql_type, (GraphQLInterfaceType, GraphQLUnionType)) and "__resolveType" in bindings:
                graphql_type.resolve_type = bindings["__resolveType"]
            if isinstance(graphql_type, (GraphQLObjectType, GraphQLInterfaceType)):
                for field_name, resolve in bindings.items():
                    if field_name in graphql_type.fields:
                        graphql_type.fields[field_name].resolve = resolve
        return schema


# =============================================================================
# User definitions
# =============================================================================


class _LibraryDirectiveStripper(Visitor):
    """Removes directive usages consumed by the engine."""

    def enter_directive(self, node: DirectiveNode, *_args):
        if node.name.value in LIBRARY_DIRECTIVES:
            return REMOVE
        return None


def _strip_library_directives(node):
    return visit(node, _LibraryDirectiveStripper())


def user_definitions(definitions: DefinitionCollection) -> list[DefinitionNode]:
    """
    Definitions carried into the output as the user wrote them.

    Plain object types, enums, scalars, inputs and non-library directive
    definitions; entity, properties and root types are regenerated.
    """
    carried = [
        *definitions.user_defined_object_types.values(),
        *definitions.enums.values(),
        *definitions.scalars.values(),
        *definitions.inputs.values(),
    ]
    carried += [d for name, d in definitions.directives.items() if name not in LIBRARY_DIRECTIVES]
    return [_strip_library_directives(node) for node in carried]


def dedupe_definitions(document: DocumentNode) -> DocumentNode:
    """Drop built-in scalar redefinitions and every repeated name after its first definition."""
    seen: set[str] = set()
    kept = []
    for definition in document.definitions:
        name = definition.name.value if getattr(definition, "name", None) is not None else None
        if isinstance(definition, ScalarTypeDefinitionNode) and name in GRAPHQL_BUILTIN_SCALAR_TYPES:
            continue
        if name is not None:
            if name in seen:
                logger.debug(f"Dropped duplicate definition of {name}")
                continue
            seen.add(name)
        kept.append(definition)
    return DocumentNode(definitions=tuple(kept))


# =============================================================================
# Augmenter
# =============================================================================


class SchemaAugmenter:
    """
    One schema build.

    Holds the registry, the adapter cache and the generators for a single
    document; discard it after `augment()`.
    """

    def __init__(self, document: DocumentNode, features: Optional[Features] = None):
        self.document = document
        self.features = features or Features()
        self.definitions = get_definition_collection(document)
        self.model: SchemaModel = SchemaModelParser(self.definitions).parse()
        self.cache = AdapterCache(self.model)
        self.registry = TypeRegistry()

        self.scalars = ScalarTypes(self.registry, self.features)
        self.wheres = WhereInputGenerator(self.registry, self.scalars, self.features)
        self.sorts = SortInputGenerator(self.registry, self.scalars)
        self.aggregates = AggregateTypeGenerator(self.registry, self.scalars)
        self.connections = ConnectionTypeGenerator(
            self.registry, self.scalars, self.sorts, self.aggregates, self.features
        )
        self.objects = ObjectTypeGenerator(
            self.registry, self.scalars, self.wheres, self.sorts, self.connections, self.features
        )
        self.mutations = MutationInputGenerator(self.registry, self.scalars, self.wheres, self.features)
        self.fulltext = FulltextGenerator(self.registry, self.scalars, self.sorts, self.features)
        self.vectors = VectorGenerator(self.registry, self.scalars, self.sorts, self.features)
        self.roots = RootFieldGenerator(self.registry, self.scalars, self.sorts, self.features)

    def augment(self) -> AugmentedSchema:
        self.registry.get_or_create_object("Query")
        self.registry.get_or_create_object("Mutation")
        self.scalars.enum_and_scalar_inputs(sorted(self.model.enum_names), sorted(self.model.scalar_names))

        adapters = self.cache.adapt_all()
        concrete = [a for a in adapters if isinstance(a, ConcreteEntityAdapter)]
        interfaces = [a for a in adapters if isinstance(a, InterfaceEntityAdapter)]
        unions = [a for a in adapters if isinstance(a, UnionEntityAdapter)]

        if any(entity.is_global_node() for entity in concrete):
            self.objects.global_node()

        for interface in interfaces:
            self.interface_entity(interface)
        for entity in concrete:
            self.concrete_entity(entity)
        for union in unions:
            self.union_entity(union)
        self.objects.relationship_properties_objects(concrete)

        for operation in self.model.root_operations:
            self.roots.custom_root_fields(operation)

        self._drop_empty_roots()
        return self._compose()

    # -------------------------------------------------------------------------
    # Entities
    # -------------------------------------------------------------------------

    def interface_entity(self, entity: InterfaceEntityAdapter) -> None:
        where = self.wheres.where_input(entity)
        for relationship in entity.relationships.values():
            self.wheres.augment_with_relationship(where, relationship)
        self.mutations.create_input(entity)
        self.mutations.update_input(entity)
        self.objects.interface_object(entity)

        if not entity.concrete_entities:
            logger.debug(f"Interface {entity.name} has no implementations; no root fields")
            return
        propagated = propagated_directives(entity.directives)
        if entity.is_readable() or entity.is_aggregable():
            self.connections.root_connection(entity, propagated)
        if entity.is_readable():
            self.roots.read_field(entity, propagated)
        if entity.is_aggregable():
            self.aggregates.aggregate_selection(entity, propagated)
        logger.debug(f"Generated interface {entity.name}")

    def concrete_entity(self, entity: ConcreteEntityAdapter) -> None:
        propagated = propagated_directives(entity.directives)

        where = self.wheres.where_input(entity)
        for relationship in entity.relationships.values():
            self.wheres.augment_with_relationship(where, relationship)
        self.fulltext.fulltext_fields(entity)
        self.vectors.vector_fields(entity)
        self.wheres.unique_where_input(entity)
        self.wheres.connect_where_input(entity)
        self.mutations.create_input(entity)
        self.mutations.update_input(entity)
        self.mutations.connect_input(entity)
        delete_input = self.mutations.delete_input(entity)
        self.mutations.disconnect_input(entity)
        self.objects.mutation_responses(entity, propagated)
        self.objects.entity_object(entity)

        if entity.is_readable() or entity.is_aggregable():
            self.connections.root_connection(entity, propagated)
        if entity.is_readable():
            self.roots.read_field(entity, propagated)
        if entity.is_aggregable():
            self.aggregates.aggregate_selection(entity, propagated)

        if entity.is_creatable():
            self.roots.create_field(entity, propagated)
        if entity.is_deletable():
            self.roots.delete_field(entity, delete_input, propagated)
        if entity.is_updatable():
            self.roots.update_field(entity, propagated)
        logger.debug(f"Generated concrete entity {entity.name}")

    def union_entity(self, entity: UnionEntityAdapter) -> None:
        union = self.registry.get_or_create_union(entity.name, [member.name for member in entity.concrete_entities])
        union.description = entity.description
        union.directives = as_directives(entity.directives)
        self.registry.set_type_resolver(entity.name, TypeResolver(entity.name))

        self.wheres.where_input(entity)
        if entity.is_readable() and entity.concrete_entities:
            self.roots.read_field(entity)
        logger.debug(f"Generated union {entity.name}")

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def _drop_empty_roots(self) -> None:
        for name in OPTIONAL_ROOT_TYPE_NAMES:
            if self.registry.has(name) and not self.registry.get_object(name).fields:
                self.registry.delete(name)
                logger.warning(f"Dropped {name} root type: no fields were generated for it")

    def _compose(self) -> AugmentedSchema:
        composed = DocumentNode(
            definitions=(*self.registry.to_document().definitions, *user_definitions(self.definitions))
        )
        document = dedupe_definitions(composed)

        surviving = {d.name.value for d in document.definitions if getattr(d, "name", None) is not None}
        resolvers: dict[str, Any] = {
            name: bindings for name, bindings in self.registry.resolvers().items() if name in surviving
        }
        for name in LIBRARY_SCALAR_TYPES:
            if name in surviving:
                resolvers[name] = LibraryScalar(name)

        root_fields = sum(
            len(self.registry.get_object(name).fields) for name in ROOT_TYPE_NAMES if self.registry.has(name)
        )
        logger.info(
            f"Augmented schema: {len(document.definitions)} definitions, {root_fields} root fields, "
            f"{len(self.cache)} entities"
        )
        return AugmentedSchema(type_defs=document, resolvers=resolvers)


# =============================================================================
# Entry points
# =============================================================================


def make_augmented_schema(
    document: Union[DocumentNode, str], features: Optional[Features] = None
) -> AugmentedSchema:
    """Generate the augmented schema without validating the input first."""
    if isinstance(document, str):
        document = parse(document)
    return SchemaAugmenter(document, features).augment()


def augment_schema(document: Union[DocumentNode, str], features: Optional[Features] = None) -> AugmentedSchema:
    """
    Validate the annotated definitions, then generate the augmented schema.

    Raises:
        SchemaValidationError: when any validation rule fails
    """
    from ..validation import validate_document

    if isinstance(document, str):
        document = parse(document)
    validate_document(document, features)
    return make_augmented_schema(document, features)
