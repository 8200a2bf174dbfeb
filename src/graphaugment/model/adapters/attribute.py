"""
Attribute adapter - capability flags and input type names for one field.

The raw Attribute only knows its declared type and annotations; the adapter
adds the type category and answers questions such as "does this field get a
where filter?" or "which input type does it take on create?".
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from functools import cached_property
from typing import Optional

from graphql import ValueNode

from ...core.constants import GRAPHQL_BUILTIN_SCALAR_TYPES, MutationOperation
from ...core.registry import EnumLiteral, to_value_node
from ...core.type_category import TypeCategory, classify
from ..schema_model import Attribute, TypeRef


# Aggregation selection / aggregation filter support per scalar
AGGREGABLE_SCALARS = frozenset(
    {"String", "Int", "Float", "BigInt", "DateTime", "LocalDateTime", "Time", "LocalTime", "Duration"}
)


@dataclass(frozen=True)
class InputTypeNames:
    """Input type strings for the where, create and update positions of an attribute."""
    where: str
    where_element: str
    create: str
    update: str


class AttributeAdapter:
    """
    Wraps an Attribute with its type category and capability predicates.

    Capabilities are plain methods so that generators can pass their names
    to `EntityAdapter.attributes_by_capability`.
    """

    def __init__(
        self,
        attribute: Attribute,
        enum_names: Collection[str] = (),
        scalar_names: Collection[str] = (),
    ):
        self.attribute = attribute
        self.name = attribute.name
        self.type: TypeRef = attribute.type
        self.annotations = attribute.annotations
        self.args = attribute.args
        self.description = attribute.description
        self.directives = attribute.directives
        self._enum_names = enum_names
        self._scalar_names = scalar_names

    def __repr__(self) -> str:
        return f"AttributeAdapter({self.name}: {self.type.pretty})"

    @cached_property
    def category(self) -> TypeCategory:
        return classify(self.type.name, self._enum_names, self.type.is_list)

    # -------------------------------------------------------------------------
    # Type predicates
    # -------------------------------------------------------------------------

    @property
    def type_name(self) -> str:
        return self.type.name

    @property
    def is_list(self) -> bool:
        return self.type.is_list

    @property
    def is_required(self) -> bool:
        return self.type.is_required

    @property
    def is_boolean(self) -> bool:
        return self.category.is_boolean

    @property
    def is_id(self) -> bool:
        return self.category.is_id

    @property
    def is_string(self) -> bool:
        return self.category.is_string

    @property
    def is_int(self) -> bool:
        return self.type.name == "Int"

    @property
    def is_float(self) -> bool:
        return self.type.name == "Float"

    @property
    def is_big_int(self) -> bool:
        return self.category.is_big_int

    @property
    def is_numeric(self) -> bool:
        return self.category.is_numeric

    @property
    def is_temporal(self) -> bool:
        return self.category.is_temporal

    @property
    def is_duration(self) -> bool:
        return self.category.is_duration

    @property
    def is_date(self) -> bool:
        return self.type.name == "Date"

    @property
    def is_spatial(self) -> bool:
        return self.category.is_spatial

    @property
    def is_point(self) -> bool:
        return self.type.name == "Point"

    @property
    def is_cartesian_point(self) -> bool:
        return self.type.name == "CartesianPoint"

    @property
    def is_enum(self) -> bool:
        return self.category.is_enum

    @property
    def is_user_scalar(self) -> bool:
        return self.type.name in self._scalar_names and not self.category.is_scalar_like

    @property
    def is_graphql_builtin_scalar(self) -> bool:
        return self.type.name in GRAPHQL_BUILTIN_SCALAR_TYPES

    @property
    def is_scalar_like(self) -> bool:
        """Any type a generic filter exists for."""
        return self.category.is_scalar_like or self.is_user_scalar

    def is_numerical_or_temporal(self) -> bool:
        return self.is_numeric or self.is_temporal

    # -------------------------------------------------------------------------
    # Annotation predicates
    # -------------------------------------------------------------------------

    def is_cypher(self) -> bool:
        return self.annotations.cypher is not None

    def is_custom_resolvable(self) -> bool:
        return self.annotations.custom_resolver is not None

    def is_private(self) -> bool:
        return self.annotations.private is not None

    def is_global_id_field(self) -> bool:
        return self.annotations.relay_id is not None

    def is_unique(self) -> bool:
        return self.annotations.unique is not None or self.annotations.relay_id is not None

    def _is_autogenerated_on(self, operation: str) -> bool:
        if self.annotations.id is not None:
            return True
        timestamp = self.annotations.timestamp
        if timestamp is not None and operation in timestamp.operations:
            return True
        populated_by = self.annotations.populated_by
        return populated_by is not None and operation in populated_by.operations

    def is_non_generated_field(self) -> bool:
        """Neither computed nor filled in by the engine."""
        return not (
            self.is_cypher()
            or self.is_custom_resolvable()
            or self.annotations.id is not None
            or self.annotations.timestamp is not None
            or self.annotations.populated_by is not None
        )

    # -------------------------------------------------------------------------
    # Capabilities
    # -------------------------------------------------------------------------

    def is_readable(self) -> bool:
        if self.is_private():
            return False
        return self.annotations.selectable is None or self.annotations.selectable.on_read

    def is_filterable(self) -> bool:
        """Gets a field in the where input."""
        if self.is_private() or self.is_custom_resolvable():
            return False
        if self.annotations.filterable is not None and not self.annotations.filterable.by_value:
            return False
        cypher = self.annotations.cypher
        if cypher is not None and cypher.target_entity is not None:
            return True
        return self.is_scalar_like

    def is_sortable(self) -> bool:
        if self.is_list or self.is_private() or self.is_custom_resolvable():
            return False
        if self.annotations.sortable is not None and not self.annotations.sortable.by_value:
            return False
        if self.is_cypher() and self.args:
            return False
        return self.is_scalar_like

    def is_aggregable(self) -> bool:
        """Gets a field in the aggregate selection types."""
        if self.is_list or self.is_private() or self.is_cypher() or self.is_custom_resolvable():
            return False
        if self.annotations.selectable is not None and not self.annotations.selectable.on_aggregate:
            return False
        return self.type.name in AGGREGABLE_SCALARS

    def is_aggregation_where_field(self) -> bool:
        """Gets a field in the node/edge aggregation where inputs."""
        if self.is_list or self.is_private() or self.is_cypher() or self.is_custom_resolvable():
            return False
        if self.annotations.filterable is not None and not self.annotations.filterable.by_aggregate:
            return False
        return self.type.name in AGGREGABLE_SCALARS

    def is_creatable(self) -> bool:
        if self.is_private() or self.is_cypher() or self.is_custom_resolvable():
            return False
        if self._is_autogenerated_on(MutationOperation.CREATE):
            return False
        return self.annotations.settable is None or self.annotations.settable.on_create

    def is_updatable(self) -> bool:
        if self.is_private() or self.is_cypher() or self.is_custom_resolvable():
            return False
        if self._is_autogenerated_on(MutationOperation.UPDATE):
            return False
        return self.annotations.settable is None or self.annotations.settable.on_update

    def is_object_field(self) -> bool:
        """Printed on the generated object or interface type."""
        return not self.is_private() and (
            self.annotations.selectable is None or self.annotations.selectable.on_read
        )

    def has_default(self) -> bool:
        return self.annotations.default is not None

    # -------------------------------------------------------------------------
    # Input type names
    # -------------------------------------------------------------------------

    @cached_property
    def input_type_name(self) -> str:
        """Inner input type; spatial types take their `...Input` counterpart."""
        if self.is_spatial:
            return f"{self.type.name}Input"
        return self.type.name

    def _list_of(self, element_required: bool) -> str:
        inner = f"{self.input_type_name}!" if element_required else self.input_type_name
        return f"[{inner}]"

    @cached_property
    def input_type_names(self) -> InputTypeNames:
        name = self.input_type_name
        if self.is_list:
            where = self._list_of(True)
            create = self._list_of(self.type.is_list_element_required)
            update = create
        else:
            where = name
            create = name
            update = name
        return InputTypeNames(
            where=where,
            where_element=name,
            create=f"{create}!" if self.is_required else create,
            update=update,
        )

    def get_filterable_input_type_name(self) -> str:
        """Type of the deprecated `_IN` filter: `[T!]` for required fields, `[T]` otherwise."""
        return self._list_of(self.is_required)

    def default_value_node(self) -> Optional[ValueNode]:
        """The @default value as a GraphQL value node, enum values as enum nodes."""
        if self.annotations.default is None:
            return None
        value = self.annotations.default.value
        if self.is_enum and isinstance(value, str):
            value = EnumLiteral(value)
        elif self.is_enum and isinstance(value, list):
            value = [EnumLiteral(v) for v in value]
        return to_value_node(value)
