"""
Type registry - the per-build collection of generated GraphQL types.

Every generator registers into one TypeRegistry. Construction is idempotent:
asking for a type by a name that is already registered returns the existing
definition, so two relationships pointing at the same target share one
`TargetWhere`.

Types are kept as plain dataclasses while generators add to them, and are
turned into graphql-core definition nodes only when the document is built.

Usage:
    from graphaugment.core.registry import TypeRegistry

    registry = TypeRegistry()
    where = registry.get_or_create_input("MovieWhere")
    where.add_fields({"title": "StringScalarFilters"})
    registry.query.add_fields({"movies": FieldConfig(type="[Movie!]!")})

    document = registry.to_document()
    sdl = registry.to_sdl()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, TypeVar, Union

from graphql import (
    ArgumentNode,
    BooleanValueNode,
    DefinitionNode,
    DirectiveNode,
    DocumentNode,
    EnumTypeDefinitionNode,
    EnumValueDefinitionNode,
    EnumValueNode,
    FieldDefinitionNode,
    FloatValueNode,
    GraphQLSyntaxError,
    InputObjectTypeDefinitionNode,
    InputValueDefinitionNode,
    InterfaceTypeDefinitionNode,
    IntValueNode,
    ListValueNode,
    NamedTypeNode,
    NameNode,
    NullValueNode,
    ObjectFieldNode,
    ObjectTypeDefinitionNode,
    ObjectValueNode,
    ScalarTypeDefinitionNode,
    StringValueNode,
    UnionTypeDefinitionNode,
    ValueNode,
    parse_type,
    print_ast,
)

from .errors import GenerationError


logger = logging.getLogger(__name__)


# =============================================================================
# AST helpers
# =============================================================================


@dataclass(frozen=True)
class EnumLiteral:
    """An enum value argument, built as an enum value node."""
    value: str


def to_value_node(value: Any) -> ValueNode:
    """Build the GraphQL value node of a Python value."""
    if isinstance(value, EnumLiteral):
        return EnumValueNode(value=value.value)
    if value is None:
        return NullValueNode()
    if isinstance(value, bool):
        return BooleanValueNode(value=value)
    if isinstance(value, int):
        return IntValueNode(value=str(value))
    if isinstance(value, float):
        return FloatValueNode(value=repr(value))
    if isinstance(value, str):
        return StringValueNode(value=value)
    if isinstance(value, (list, tuple)):
        return ListValueNode(values=tuple(to_value_node(v) for v in value))
    if isinstance(value, Mapping):
        return ObjectValueNode(
            fields=tuple(ObjectFieldNode(name=_name(k), value=to_value_node(v)) for k, v in value.items())
        )
    raise GenerationError(f"Cannot build a GraphQL value from {value!r}")


def _name(value: str) -> NameNode:
    return NameNode(value=value)


def _description(description: Optional[str]) -> Optional[StringValueNode]:
    if not description:
        return None
    return StringValueNode(value=description, block="\n" in description)


def _type_node(type_ref: str):
    try:
        return parse_type(type_ref)
    except GraphQLSyntaxError as e:
        raise GenerationError(f"Invalid type reference {type_ref!r}: {e}") from e


# =============================================================================
# Field-level definitions
# =============================================================================


@dataclass
class Directive:
    """
    A directive usage on a generated type or field.

    Either built from a name and Python argument values, or carried through
    verbatim from a user document with `from_node`.
    """
    name: str
    args: dict[str, Any] = field(default_factory=dict)
    node: Optional[DirectiveNode] = None

    @classmethod
    def from_node(cls, node: DirectiveNode) -> "Directive":
        return cls(name=node.name.value, node=node)

    def to_ast(self) -> DirectiveNode:
        if self.node is not None:
            return self.node
        return DirectiveNode(
            name=_name(self.name),
            arguments=tuple(
                ArgumentNode(name=_name(name), value=to_value_node(value)) for name, value in self.args.items()
            ),
        )

    def to_sdl(self) -> str:
        return print_ast(self.to_ast())


def _directive_nodes(directives: Iterable[Directive]) -> tuple[DirectiveNode, ...]:
    return tuple(directive.to_ast() for directive in directives)


def deprecated(reason: str) -> Directive:
    """`@deprecated(reason: ...)` usage."""
    return Directive(name="deprecated", args={"reason": reason})


@dataclass
class Argument:
    """A field argument; `default` is the value node of its default value."""
    type: str
    default: Optional[ValueNode] = None
    description: Optional[str] = None
    directives: list[Directive] = field(default_factory=list)

    def to_ast(self, name: str) -> InputValueDefinitionNode:
        return InputValueDefinitionNode(
            name=_name(name),
            description=_description(self.description),
            type=_type_node(self.type),
            default_value=self.default,
            directives=_directive_nodes(self.directives),
        )


@dataclass
class FieldConfig:
    """
    A field of an object, interface or input type.

    `resolve` is only set on output fields bound to a resolver; `default` is
    only used on input fields.
    """
    type: str
    args: dict[str, Argument] = field(default_factory=dict)
    description: Optional[str] = None
    directives: list[Directive] = field(default_factory=list)
    resolve: Optional[Callable[..., Any]] = None
    default: Optional[ValueNode] = None

    def to_ast(self, name: str) -> FieldDefinitionNode:
        return FieldDefinitionNode(
            name=_name(name),
            description=_description(self.description),
            arguments=tuple(arg.to_ast(arg_name) for arg_name, arg in self.args.items()),
            type=_type_node(self.type),
            directives=_directive_nodes(self.directives),
        )

    def to_input_ast(self, name: str) -> InputValueDefinitionNode:
        return InputValueDefinitionNode(
            name=_name(name),
            description=_description(self.description),
            type=_type_node(self.type),
            default_value=self.default,
            directives=_directive_nodes(self.directives),
        )


FieldSpec = Union[str, FieldConfig]
ArgumentSpec = Union[str, Argument]


def as_field(spec: FieldSpec) -> FieldConfig:
    """Accept a bare type string as shorthand for a field config."""
    if isinstance(spec, FieldConfig):
        return spec
    return FieldConfig(type=spec)


def as_arguments(args: Optional[Mapping[str, ArgumentSpec]]) -> dict[str, Argument]:
    result: dict[str, Argument] = {}
    for name, spec in (args or {}).items():
        result[name] = spec if isinstance(spec, Argument) else Argument(type=spec)
    return result


# =============================================================================
# Named types
# =============================================================================


@dataclass
class NamedType:
    name: str
    description: Optional[str] = None
    directives: list[Directive] = field(default_factory=list)

    def _common(self) -> dict[str, Any]:
        return {
            "name": _name(self.name),
            "description": _description(self.description),
            "directives": _directive_nodes(self.directives),
        }

    def to_ast(self) -> DefinitionNode:
        raise NotImplementedError

    def to_sdl(self) -> str:
        return print_ast(self.to_ast())


@dataclass
class FieldedType(NamedType):
    """Base for types with a field map (object, interface, input)."""
    fields: dict[str, FieldConfig] = field(default_factory=dict)

    def add_fields(self, fields: Mapping[str, FieldSpec]) -> None:
        """Add or replace fields, keeping first-insertion order."""
        for name, spec in fields.items():
            self.fields[name] = as_field(spec)

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def get_field(self, name: str) -> FieldConfig:
        return self.fields[name]

    def remove_field(self, name: str) -> None:
        self.fields.pop(name, None)

    def set_field_directives(self, name: str, directives: Iterable[Directive]) -> None:
        if name in self.fields:
            self.fields[name].directives = list(directives)

    @property
    def field_names(self) -> list[str]:
        return list(self.fields)


@dataclass
class ObjectType(FieldedType):
    interfaces: list[str] = field(default_factory=list)

    node_class: ClassVar[type] = ObjectTypeDefinitionNode

    def to_ast(self) -> DefinitionNode:
        return self.node_class(
            **self._common(),
            interfaces=tuple(NamedTypeNode(name=_name(name)) for name in self.interfaces),
            fields=tuple(config.to_ast(name) for name, config in self.fields.items()),
        )


@dataclass
class InterfaceType(ObjectType):
    node_class: ClassVar[type] = InterfaceTypeDefinitionNode


@dataclass
class InputType(FieldedType):
    def to_ast(self) -> DefinitionNode:
        return InputObjectTypeDefinitionNode(
            **self._common(),
            fields=tuple(config.to_input_ast(name) for name, config in self.fields.items()),
        )


@dataclass
class EnumValue:
    description: Optional[str] = None
    deprecation_reason: Optional[str] = None


@dataclass
class EnumType(NamedType):
    values: dict[str, EnumValue] = field(default_factory=dict)

    def add_values(self, values: Iterable[str]) -> None:
        for value in values:
            self.values.setdefault(value, EnumValue())

    def to_ast(self) -> DefinitionNode:
        return EnumTypeDefinitionNode(
            **self._common(),
            values=tuple(
                EnumValueDefinitionNode(
                    name=_name(name),
                    description=_description(value.description),
                    directives=(
                        (deprecated(value.deprecation_reason).to_ast(),) if value.deprecation_reason else ()
                    ),
                )
                for name, value in self.values.items()
            ),
        )


@dataclass
class UnionType(NamedType):
    types: list[str] = field(default_factory=list)

    def to_ast(self) -> DefinitionNode:
        return UnionTypeDefinitionNode(
            **self._common(),
            types=tuple(NamedTypeNode(name=_name(name)) for name in self.types),
        )


@dataclass
class ScalarType(NamedType):
    def to_ast(self) -> DefinitionNode:
        return ScalarTypeDefinitionNode(**self._common())


T = TypeVar("T", bound=NamedType)


# =============================================================================
# Registry
# =============================================================================


class TypeRegistry:
    """
    Name-keyed, insertion-ordered store of generated types for one build.

    Two-phase use:
    1. Generators call get_or_create_* / add; repeated names return the
       already registered definition.
    2. The orchestrator builds every definition with to_document() and
       collects the resolver map with resolvers().
    """

    ROOT_TYPES = ("Query", "Mutation", "Subscription")

    def __init__(self):
        self._types: dict[str, NamedType] = {}
        self._type_resolvers: dict[str, Callable[..., Any]] = {}

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def has(self, name: str) -> bool:
        return name in self._types

    def get(self, name: str) -> NamedType:
        try:
            return self._types[name]
        except KeyError:
            raise GenerationError(f"Type {name} is not registered") from None

    def get_input(self, name: str) -> InputType:
        return self._expect(name, InputType)

    def get_object(self, name: str) -> ObjectType:
        return self._expect(name, ObjectType)

    def type_names(self) -> list[str]:
        return list(self._types)

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def _expect(self, name: str, cls: type[T]) -> T:
        type_def = self.get(name)
        if not isinstance(type_def, cls):
            raise GenerationError(
                f"Type {name} is registered as {type(type_def).__name__}, expected {cls.__name__}"
            )
        return type_def

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def add(self, type_def: T) -> T:
        """Register a type unless the name is taken; returns the registered instance."""
        existing = self._types.get(type_def.name)
        if existing is not None:
            if type(existing) is not type(type_def):
                raise GenerationError(
                    f"Type {type_def.name} is already registered as {type(existing).__name__}"
                )
            logger.debug(f"Registry hit for {type_def.name}")
            return existing  # type: ignore[return-value]
        self._types[type_def.name] = type_def
        return type_def

    def _get_or_create(self, cls: type[T], name: str, **kwargs: Any) -> T:
        if name in self._types:
            return self._expect(name, cls)
        return self.add(cls(name=name, **kwargs))

    def get_or_create_input(
        self,
        name: str,
        fields: Optional[Mapping[str, FieldSpec]] = None,
        description: Optional[str] = None,
    ) -> InputType:
        created = name not in self._types
        input_type = self._get_or_create(InputType, name, description=description)
        if created and fields:
            input_type.add_fields(fields)
        return input_type

    def get_or_create_object(
        self,
        name: str,
        fields: Optional[Mapping[str, FieldSpec]] = None,
        description: Optional[str] = None,
        directives: Optional[list[Directive]] = None,
    ) -> ObjectType:
        created = name not in self._types
        object_type = self._get_or_create(
            ObjectType, name, description=description, directives=list(directives or [])
        )
        if created and fields:
            object_type.add_fields(fields)
        return object_type

    def get_or_create_interface(self, name: str, **kwargs: Any) -> InterfaceType:
        return self._get_or_create(InterfaceType, name, **kwargs)

    def get_or_create_enum(
        self, name: str, values: Iterable[str] = (), description: Optional[str] = None
    ) -> EnumType:
        created = name not in self._types
        enum_type = self._get_or_create(EnumType, name, description=description)
        if created:
            enum_type.add_values(values)
        return enum_type

    def get_or_create_union(self, name: str, types: Iterable[str] = ()) -> UnionType:
        return self._get_or_create(UnionType, name, types=list(types))

    def get_or_create_scalar(self, name: str, description: Optional[str] = None) -> ScalarType:
        return self._get_or_create(ScalarType, name, description=description)

    def delete(self, name: str) -> None:
        self._types.pop(name, None)
        self._type_resolvers.pop(name, None)

    # -------------------------------------------------------------------------
    # Root types
    # -------------------------------------------------------------------------

    @property
    def query(self) -> ObjectType:
        return self.get_or_create_object("Query")

    @property
    def mutation(self) -> ObjectType:
        return self.get_or_create_object("Mutation")

    @property
    def subscription(self) -> ObjectType:
        return self.get_or_create_object("Subscription")

    # -------------------------------------------------------------------------
    # Resolvers
    # -------------------------------------------------------------------------

    def set_type_resolver(self, name: str, resolve_type: Callable[..., Any]) -> None:
        """Bind `__resolveType` for an abstract (interface or union) type."""
        self._type_resolvers[name] = resolve_type

    def has_type_resolver(self, name: str) -> bool:
        return name in self._type_resolvers

    def resolvers(self) -> dict[str, dict[str, Any]]:
        """
        Resolver map keyed by type name then field name.

        Only fields with a bound resolver appear; abstract types appear with
        their `__resolveType` entry.
        """
        result: dict[str, dict[str, Any]] = {}
        for name, type_def in self._types.items():
            if isinstance(type_def, FieldedType):
                bound = {f: config.resolve for f, config in type_def.fields.items() if config.resolve}
                if bound:
                    result[name] = bound
        for name, resolve_type in self._type_resolvers.items():
            if name in self._types:
                result.setdefault(name, {})["__resolveType"] = resolve_type
        return result

    # -------------------------------------------------------------------------
    # Printing
    # -------------------------------------------------------------------------

    def to_document(self) -> DocumentNode:
        """Build the definition nodes of every registered type, root types first."""
        ordered = [self._types[name] for name in self.ROOT_TYPES if name in self._types]
        ordered += [t for name, t in self._types.items() if name not in self.ROOT_TYPES]
        logger.debug(f"Built {len(ordered)} registered types")
        return DocumentNode(definitions=tuple(type_def.to_ast() for type_def in ordered))

    def to_sdl(self) -> str:
        return print_ast(self.to_document())
