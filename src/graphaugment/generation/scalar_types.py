"""
Shared scalar-level types - generic filters, mutation operations, aggregation
filters and aggregate selections, plus the library scalars and spatial types.

Every type here is keyed by a scalar (or enum) name rather than by an
entity, so each is registered at most once per build, on first reference.

Usage:
    scalars = ScalarTypes(registry, features)
    scalars.filter_type(attribute)           # "StringScalarFilters"
    scalars.mutation_type(attribute)         # "IntScalarMutations"
    scalars.aggregation_filter_type(attribute)
    scalars.aggregate_selection_type(attribute)
"""

from __future__ import annotations

from typing import Optional

from ..core.constants import LIBRARY_SCALAR_TYPES, NUMERIC_SCALAR_TYPES, TEMPORAL_SCALAR_TYPES
from ..core.errors import GenerationError
from ..core.features import Features
from ..core.registry import FieldConfig, TypeRegistry
from ..model.adapters import AttributeAdapter


# =============================================================================
# Static descriptions
# =============================================================================

LIBRARY_SCALAR_DESCRIPTIONS = {
    "BigInt": (
        "A BigInt value up to 64 bits in size, which can be a number or a string if used inline, "
        "or a string only if used as a variable. Always returned as a string."
    ),
    "DateTime": "A date and time, represented as an ISO-8601 string",
    "Date": "A date, represented as a 'yyyy-mm-dd' string",
    "Time": "A time, represented as an RFC3339 time string",
    "LocalTime": "A local time, represented as a time string without timezone information",
    "LocalDateTime": "A local datetime, represented as 'YYYY-MM-DDTHH:MM:SS'",
    "Duration": "A duration, represented as an ISO 8601 duration string",
}

POINT_DESCRIPTION = (
    "A point in a coordinate system. For more information, see "
    "https://neo4j.com/docs/graphql/4/type-definitions/types/spatial/#point"
)

CARTESIAN_POINT_DESCRIPTION = (
    "A point in a two- or three-dimensional Cartesian coordinate system or in a three-dimensional "
    "cylindrical coordinate system. For more information, see "
    "https://neo4j.com/docs/graphql/4/type-definitions/types/spatial/#cartesian-point"
)

# String operators switched on through `features.filters`
_EXTRA_STRING_OPERATORS = {"MATCHES": "matches", "GT": "gt", "GTE": "gte", "LT": "lt", "LTE": "lte"}

_AGGREGATION_FILTER_DESCRIPTIONS = {
    "String": "Filters for an aggregation of a string field",
    "Int": "Filters for an aggregation of an int field",
    "Float": "Filters for an aggregation of a float field",
    "BigInt": "Filters for an aggregation of an BigInt input field",
}


def _comparable_fields(type_name: str) -> dict[str, str]:
    return {
        "eq": type_name,
        "gt": type_name,
        "gte": type_name,
        "in": f"[{type_name}!]",
        "lt": type_name,
        "lte": type_name,
    }


class ScalarTypes:
    """
    Registers scalar-keyed shared types into a TypeRegistry on first use.

    All public methods return the type name to reference, registering the
    type (and whatever it references) when it is not there yet.
    """

    def __init__(self, registry: TypeRegistry, features: Optional[Features] = None):
        self.registry = registry
        self.features = features

    # =========================================================================
    # Library scalars and spatial types
    # =========================================================================

    def library_scalar(self, name: str) -> str:
        if name in LIBRARY_SCALAR_TYPES:
            self.registry.get_or_create_scalar(name, description=LIBRARY_SCALAR_DESCRIPTIONS[name])
        elif name == "Point":
            self.point()
        elif name == "CartesianPoint":
            self.cartesian_point()
        return name

    def point(self) -> str:
        self.registry.get_or_create_object(
            "Point",
            {"crs": "String!", "height": "Float", "latitude": "Float!", "longitude": "Float!", "srid": "Int!"},
            description=POINT_DESCRIPTION,
        )
        self.registry.get_or_create_input(
            "PointInput",
            {"height": "Float", "latitude": "Float!", "longitude": "Float!"},
            description="Input type for a point",
        )
        self.registry.get_or_create_input(
            "PointDistance",
            {
                "distance": FieldConfig(
                    type="Float!", description="The distance in metres to be used when comparing two points"
                ),
                "point": "PointInput!",
            },
            description="Input type for a point with a distance",
        )
        return "Point"

    def cartesian_point(self) -> str:
        self.registry.get_or_create_object(
            "CartesianPoint",
            {"crs": "String!", "srid": "Int!", "x": "Float!", "y": "Float!", "z": "Float"},
            description=CARTESIAN_POINT_DESCRIPTION,
        )
        self.registry.get_or_create_input(
            "CartesianPointInput",
            {"x": "Float!", "y": "Float!", "z": "Float"},
            description="Input type for a cartesian point",
        )
        self.registry.get_or_create_input(
            "CartesianPointDistance",
            {"distance": "Float!", "point": "CartesianPointInput!"},
            description="Input type for a cartesian point with a distance",
        )
        return "CartesianPoint"

    def _reference(self, type_name: str) -> None:
        """Make sure a scalar referenced by a generated field is defined."""
        self.library_scalar(type_name)

    # =========================================================================
    # Generic filters
    # =========================================================================

    def filter_type(self, attribute: AttributeAdapter) -> str:
        """Name of the generic filter input for an attribute, e.g. `title: StringScalarFilters`."""
        name = attribute.type_name
        if attribute.is_enum:
            return self._enum_filters(name, attribute.is_list)
        if attribute.is_user_scalar:
            return self._user_scalar_filters(name, attribute.is_list)
        if attribute.is_list:
            return self._list_filters(name)
        if name == "String":
            return self._string_filters()
        if name == "ID":
            return self._id_filters()
        if name == "Boolean":
            return self.registry.get_or_create_input(
                "BooleanScalarFilters", {"eq": "Boolean"}, description="Boolean filters"
            ).name
        if name == "Point":
            return self._point_filters()
        if name == "CartesianPoint":
            return self._cartesian_point_filters()
        if name in NUMERIC_SCALAR_TYPES or name in TEMPORAL_SCALAR_TYPES:
            self._reference(name)
            return self.registry.get_or_create_input(
                f"{name}ScalarFilters", _comparable_fields(name), description=f"{name} filters"
            ).name
        raise GenerationError(f"No scalar filter found for attribute {attribute.name} of type {name}")

    def _string_fields(self, scalar: str, case_insensitive: bool) -> dict[str, FieldConfig | str]:
        fields: dict[str, FieldConfig | str] = {
            "eq": scalar,
            "in": f"[{scalar}!]",
            "contains": scalar,
            "endsWith": scalar,
            "startsWith": scalar,
        }
        if self.features is None:
            return fields
        for operator in self.features.enabled_filters(scalar):
            if operator in _EXTRA_STRING_OPERATORS:
                fields[_EXTRA_STRING_OPERATORS[operator]] = scalar
            elif operator == "CASE_INSENSITIVE" and case_insensitive:
                self.registry.get_or_create_input(
                    "CaseInsensitiveStringScalarFilters",
                    self._string_fields(scalar, case_insensitive=False),
                    description="Case insensitive String filters",
                )
                fields["caseInsensitive"] = "CaseInsensitiveStringScalarFilters"
        return fields

    def _string_filters(self) -> str:
        if not self.registry.has("StringScalarFilters"):
            self.registry.get_or_create_input(
                "StringScalarFilters", self._string_fields("String", case_insensitive=True), description="String filters"
            )
        return "StringScalarFilters"

    def _id_filters(self) -> str:
        if not self.registry.has("IDScalarFilters"):
            self.registry.get_or_create_input(
                "IDScalarFilters", self._string_fields("ID", case_insensitive=False), description="ID filters"
            )
        return "IDScalarFilters"

    def _list_filters(self, name: str) -> str:
        if name == "Point":
            self.point()
            return self.registry.get_or_create_input(
                "PointListFilters",
                {"eq": "[PointInput!]", "includes": "PointInput"},
                description="Point list filters",
            ).name
        if name == "CartesianPoint":
            self.cartesian_point()
            return self.registry.get_or_create_input(
                "CartesianPointListFilters",
                {"eq": "[CartesianPointInput!]", "includes": "CartesianPointInput"},
                description="CartesianPoint list filters",
            ).name
        if name == "Boolean":
            return self.registry.get_or_create_input(
                "BooleanListFilters", {"eq": "[Boolean!]"}, description="Boolean list filters"
            ).name
        self._reference(name)
        return self.registry.get_or_create_input(
            f"{name}ListFilters", {"eq": f"[{name}!]", "includes": name}, description=f"{name} list filters"
        ).name

    def _point_filters(self) -> str:
        self.point()
        self.registry.get_or_create_input(
            "PointDistanceFilters",
            {
                "eq": "Float",
                "from": "PointInput!",
                "gt": "Float",
                "gte": "Float",
                "lt": "Float",
                "lte": "Float",
            },
            description="Distance filters",
        )
        return self.registry.get_or_create_input(
            "PointFilters",
            {"distance": "PointDistanceFilters", "eq": "PointInput", "in": "[PointInput!]"},
            description="Point filters",
        ).name

    def _cartesian_point_filters(self) -> str:
        self.cartesian_point()
        self.registry.get_or_create_input(
            "CartesianDistancePointFilters",
            {"from": "CartesianPointInput!", "gt": "Float", "gte": "Float", "lt": "Float", "lte": "Float"},
            description="Distance filters for cartesian points",
        )
        return self.registry.get_or_create_input(
            "CartesianPointFilters",
            {
                "distance": "CartesianDistancePointFilters",
                "eq": "CartesianPointInput",
                "in": "[CartesianPointInput!]",
            },
            description="Cartesian Point filters",
        ).name

    def _enum_filters(self, name: str, is_list: bool) -> str:
        if is_list:
            return self.registry.get_or_create_input(
                f"{name}ListEnumScalarFilters", {"eq": f"[{name}!]", "includes": name}, description=f"{name} filters"
            ).name
        return self.registry.get_or_create_input(
            f"{name}EnumScalarFilters", {"eq": name, "in": f"[{name}!]"}, description=f"{name} filters"
        ).name

    def _user_scalar_filters(self, name: str, is_list: bool) -> str:
        if is_list:
            return self.registry.get_or_create_input(
                f"{name}ListScalarFilters", {"eq": f"[{name}!]", "includes": name}, description=f"{name} filters"
            ).name
        return self.registry.get_or_create_input(
            f"{name}ScalarFilters", {"eq": name, "in": f"[{name}!]"}, description=f"{name} filters"
        ).name

    # =========================================================================
    # Mutation operations
    # =========================================================================

    def mutation_type(self, attribute: AttributeAdapter) -> str:
        """Name of the generic update input for an attribute, e.g. `year: IntScalarMutations`."""
        name = attribute.type_name
        if attribute.is_enum:
            return self._enum_mutations(name, attribute.is_list)
        if attribute.is_user_scalar:
            return self._user_scalar_mutations(name, attribute.is_list)
        if not attribute.is_scalar_like:
            raise GenerationError(f"No scalar mutation found for attribute {attribute.name} of type {name}")
        self._reference(name)
        input_name = attribute.input_type_name
        if attribute.is_list:
            return self.registry.get_or_create_input(
                f"List{input_name}Mutations",
                {"pop": "Int", "push": f"[{input_name}!]", "set": f"[{input_name}!]"},
                description=f"Mutations for a list for {input_name}",
            ).name
        if attribute.is_spatial:
            return self.registry.get_or_create_input(
                f"{name}Mutations", {"set": input_name}, description=f"{name} mutations"
            ).name
        fields = {"set": name}
        if name in ("Int", "BigInt"):
            fields.update({"add": name, "subtract": name})
        elif name == "Float":
            fields.update({"add": name, "subtract": name, "multiply": name, "divide": name})
        return self.registry.get_or_create_input(
            f"{name}ScalarMutations", fields, description=f"{name} mutations"
        ).name

    def _enum_mutations(self, name: str, is_list: bool) -> str:
        if is_list:
            return self.registry.get_or_create_input(
                f"{name}ListEnumScalarMutations",
                {"pop": "Int", "push": f"[{name}!]", "set": f"[{name}!]"},
                description=f"Mutations for a list for {name}",
            ).name
        return self.registry.get_or_create_input(
            f"{name}EnumScalarMutations", {"set": name}, description=f"{name} mutations"
        ).name

    def _user_scalar_mutations(self, name: str, is_list: bool) -> str:
        if is_list:
            return self.registry.get_or_create_input(
                f"{name}ListScalarMutations",
                {"pop": "Int", "push": f"[{name}!]", "set": f"[{name}!]"},
                description=f"Mutations for a list for {name}",
            ).name
        return self.registry.get_or_create_input(
            f"{name}ScalarMutations", {"set": name}, description=f"{name} filters"
        ).name

    def enum_and_scalar_inputs(self, enum_names: list[str], scalar_names: list[str]) -> None:
        """Filter and mutation inputs for every user enum and scalar, referenced or not."""
        for name in enum_names:
            for is_list in (False, True):
                self._enum_filters(name, is_list)
                self._enum_mutations(name, is_list)
        for name in scalar_names:
            for is_list in (False, True):
                self._user_scalar_filters(name, is_list)
                self._user_scalar_mutations(name, is_list)

    # =========================================================================
    # Aggregation filters
    # =========================================================================

    def aggregation_filter_type(self, attribute: AttributeAdapter) -> str:
        """Name of the aggregation filter bundle, e.g. `title: StringScalarAggregationFilters`."""
        if attribute.is_list:
            raise GenerationError("List types not available for aggregations")
        name = attribute.type_name
        type_name = f"{name}ScalarAggregationFilters"
        if self.registry.has(type_name):
            return type_name
        if name == "String":
            fields = {
                "averageLength": self.comparable_filters("Float"),
                "longestLength": self.comparable_filters("Int"),
                "shortestLength": self.comparable_filters("Int"),
            }
        elif name in ("Int", "Float"):
            fields = {
                "average": self.comparable_filters("Float"),
                "max": self.comparable_filters(name),
                "min": self.comparable_filters(name),
                "sum": self.comparable_filters(name),
            }
        elif name == "BigInt":
            filters = self.comparable_filters("BigInt")
            fields = {"average": filters, "max": filters, "min": filters, "sum": filters}
        elif name == "Duration":
            filters = self.comparable_filters("Duration")
            fields = {"average": filters, "max": filters, "min": filters}
        elif name in TEMPORAL_SCALAR_TYPES:
            filters = self.comparable_filters(name)
            fields = {"max": filters, "min": filters}
        else:
            raise GenerationError(f"No aggregation filter found for attribute {attribute.name} of type {name}")
        description = _AGGREGATION_FILTER_DESCRIPTIONS.get(
            name, f"Filters for an aggregation of an {name} input field"
        )
        return self.registry.get_or_create_input(type_name, fields, description=description).name

    def comparable_filters(self, name: str) -> str:
        """`<T>ScalarFilters` for a numeric or temporal scalar."""
        self._reference(name)
        return self.registry.get_or_create_input(
            f"{name}ScalarFilters", _comparable_fields(name), description=f"{name} filters"
        ).name

    def connection_aggregation_count_filter(self) -> str:
        int_filters = self.comparable_filters("Int")
        return self.registry.get_or_create_input(
            "ConnectionAggregationCountFilterInput", {"edges": int_filters, "nodes": int_filters}
        ).name

    # =========================================================================
    # Aggregate selections
    # =========================================================================

    def aggregate_selection_type(self, attribute: AttributeAdapter) -> str:
        name = attribute.type_name
        type_name = f"{name}AggregateSelection"
        if self.registry.has(type_name):
            return type_name
        self._reference(name)
        if name == "String":
            fields = {"longest": "String", "shortest": "String"}
        elif name in ("Int", "Float"):
            fields = {"average": "Float", "max": name, "min": name, "sum": name}
        elif name == "BigInt":
            fields = {"average": "BigInt", "max": "BigInt", "min": "BigInt", "sum": "BigInt"}
        elif name == "Duration":
            fields = {"average": "Duration", "max": "Duration", "min": "Duration"}
        elif name in TEMPORAL_SCALAR_TYPES:
            fields = {"max": name, "min": name}
        else:
            raise GenerationError(f"Attribute {attribute.name} of type {name} is not aggregable")
        return self.registry.get_or_create_object(type_name, fields).name

    def count_types(self) -> None:
        self.registry.get_or_create_object("Count", {"nodes": "Int!"})
        self.registry.get_or_create_object("CountConnection", {"edges": "Int!", "nodes": "Int!"})

    # =========================================================================
    # Shared objects
    # =========================================================================

    def sort_direction(self) -> str:
        enum = self.registry.get_or_create_enum(
            "SortDirection",
            ("ASC", "DESC"),
            description="An enum for sorting in either ascending or descending order.",
        )
        enum.values["ASC"].description = "Sort by field values in ascending order."
        enum.values["DESC"].description = "Sort by field values in descending order."
        return enum.name

    def page_info(self) -> str:
        return self.registry.get_or_create_object(
            "PageInfo",
            {
                "endCursor": "String",
                "hasNextPage": "Boolean!",
                "hasPreviousPage": "Boolean!",
                "startCursor": "String",
            },
            description="Pagination information (Relay)",
        ).name

    def info_types(self) -> None:
        self.registry.get_or_create_object(
            "CreateInfo",
            {"nodesCreated": "Int!", "relationshipsCreated": "Int!"},
            description="Information about the number of nodes and relationships created during a create mutation",
        )
        self.registry.get_or_create_object(
            "DeleteInfo",
            {"nodesDeleted": "Int!", "relationshipsDeleted": "Int!"},
            description="Information about the number of nodes and relationships deleted during a delete mutation",
        )
        self.registry.get_or_create_object(
            "UpdateInfo",
            {
                "nodesCreated": "Int!",
                "nodesDeleted": "Int!",
                "relationshipsCreated": "Int!",
                "relationshipsDeleted": "Int!",
            },
            description=(
                "Information about the number of nodes and relationships created and deleted "
                "during an update mutation"
            ),
        )
