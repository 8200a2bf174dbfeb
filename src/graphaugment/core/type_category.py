"""
Type-category classifier.

Answers "what kind of scalar is this?" for a declared field type name. The
category decides which filter, sort and aggregation operators are generated.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass

from .constants import NUMERIC_SCALAR_TYPES, SPATIAL_TYPES, TEMPORAL_SCALAR_TYPES


@dataclass(frozen=True)
class TypeCategory:
    """Classification of a type name. Unknown names have every flag unset."""
    is_string: bool = False
    is_numeric: bool = False
    is_temporal: bool = False
    is_spatial: bool = False
    is_boolean: bool = False
    is_id: bool = False
    is_big_int: bool = False
    is_duration: bool = False
    is_enum: bool = False
    is_list: bool = False

    @property
    def is_scalar_like(self) -> bool:
        """True when the type is anything but a custom or object type."""
        return any(
            (
                self.is_string,
                self.is_numeric,
                self.is_temporal,
                self.is_spatial,
                self.is_boolean,
                self.is_id,
                self.is_enum,
            )
        )


def classify(type_name: str, enum_names: Collection[str] = (), is_list: bool = False) -> TypeCategory:
    """
    Classify a named type.

    Args:
        type_name: Inner (unwrapped) type name, e.g. "String" or "Genre"
        enum_names: Names of the enums declared in the current document
        is_list: Whether the declared field type is a list

    Returns:
        TypeCategory; custom scalars and object types classify as none of the above
    """
    return TypeCategory(
        is_string=type_name == "String",
        is_numeric=type_name in NUMERIC_SCALAR_TYPES,
        is_temporal=type_name in TEMPORAL_SCALAR_TYPES,
        is_spatial=type_name in SPATIAL_TYPES,
        is_boolean=type_name == "Boolean",
        is_id=type_name == "ID",
        is_big_int=type_name == "BigInt",
        is_duration=type_name == "Duration",
        is_enum=type_name in enum_names,
        is_list=is_list,
    )
