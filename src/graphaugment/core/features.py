"""
Pydantic models for the features settings.

These control which optional and deprecated parts of the augmented schema
are generated.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .utils import to_camel_case


DeprecatedFieldFamily = Literal[
    "attribute_filters",
    "relationship_filters",
    "aggregation_filters",
    "aggregation_filters_outside_connection",
    "mutation_operations",
]


class _SettingsModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel_case,
        populate_by_name=True,
        extra="forbid",
    )


class ExcludeDeprecatedFields(_SettingsModel):
    """
    One switch per family of deprecated shadow fields.

    A family is emitted unless its switch is set:
        {"attributeFilters": true}  # drops name_EQ, name_IN, ...
    """
    attribute_filters: bool = False
    relationship_filters: bool = False
    aggregation_filters: bool = False
    aggregation_filters_outside_connection: bool = False
    mutation_operations: bool = False


class PopulatedBySettings(_SettingsModel):
    """Named callbacks referenced by @populatedBy; only checked, never invoked."""
    callbacks: dict[str, Any] = Field(default_factory=dict)


class Features(_SettingsModel):
    """
    Features settings for one schema build.

    Example:
    {
        "excludeDeprecatedFields": {"aggregationFilters": true},
        "limitRequired": true,
        "filters": {"String": {"MATCHES": true, "CASE_INSENSITIVE": true}}
    }
    """
    exclude_deprecated_fields: ExcludeDeprecatedFields = Field(default_factory=ExcludeDeprecatedFields)
    limit_required: bool = False
    filters: dict[str, dict[str, bool]] = Field(default_factory=dict)
    populated_by: Optional[PopulatedBySettings] = None

    @classmethod
    def from_mapping(cls, data: Optional[dict[str, Any]]) -> "Features":
        """Create features from a (camelCase or snake_case) dictionary."""
        return cls.model_validate(data or {})

    def enabled_filters(self, scalar_name: str) -> list[str]:
        """Extra string operators switched on for a scalar, in declaration order."""
        return [name for name, enabled in self.filters.get(scalar_name, {}).items() if enabled]

    @property
    def callbacks(self) -> Optional[dict[str, Any]]:
        return self.populated_by.callbacks if self.populated_by else None


def should_add_deprecated_fields(features: Optional[Features], family: DeprecatedFieldFamily) -> bool:
    """Whether the deprecated shadow fields of a family are generated."""
    if features is None:
        return True
    return not getattr(features.exclude_deprecated_fields, family)
