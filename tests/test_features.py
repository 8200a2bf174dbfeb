"""Tests for the features settings and their YAML file."""

import pytest
import yaml
from pydantic import ValidationError

from graphaugment import ExcludeDeprecatedFields, Features
from graphaugment.cli import load_features, save_features
from graphaugment.core.features import should_add_deprecated_fields


class TestFeatures:

    def test_defaults(self) -> None:
        features = Features()

        assert features.limit_required is False
        assert features.filters == {}
        assert features.callbacks is None

    def test_from_camel_case_mapping(self) -> None:
        features = Features.from_mapping(
            {
                "limitRequired": True,
                "excludeDeprecatedFields": {"attributeFilters": True},
                "filters": {"String": {"MATCHES": True, "CASE_INSENSITIVE": False}},
            }
        )

        assert features.limit_required is True
        assert features.exclude_deprecated_fields.attribute_filters is True
        assert features.enabled_filters("String") == ["MATCHES"]
        assert features.enabled_filters("ID") == []

    def test_from_snake_case_mapping(self) -> None:
        features = Features.from_mapping({"limit_required": True})

        assert features.limit_required is True

    def test_from_none(self) -> None:
        assert Features.from_mapping(None) == Features()

    def test_unknown_keys_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Features.from_mapping({"limitRequierd": True})

    def test_callbacks(self) -> None:
        features = Features.from_mapping({"populatedBy": {"callbacks": {"slug": str.lower}}})

        assert features.callbacks == {"slug": str.lower}


class TestDeprecatedFamilies:

    def test_everything_is_added_without_features(self) -> None:
        assert should_add_deprecated_fields(None, "attribute_filters") is True

    def test_excluded_family(self) -> None:
        features = Features(exclude_deprecated_fields=ExcludeDeprecatedFields(mutation_operations=True))

        assert should_add_deprecated_fields(features, "mutation_operations") is False
        assert should_add_deprecated_fields(features, "relationship_filters") is True


class TestFeaturesFile:

    def test_missing_file_gives_defaults(self, tmp_path) -> None:
        assert load_features(tmp_path / "missing.yaml") == Features()

    def test_load_yaml(self, tmp_path) -> None:
        path = tmp_path / "graphaugment.yaml"
        path.write_text(
            "limitRequired: true\n"
            "excludeDeprecatedFields:\n"
            "  aggregationFilters: true\n"
        )

        features = load_features(path)

        assert features.limit_required is True
        assert features.exclude_deprecated_fields.aggregation_filters is True

    def test_empty_file_gives_defaults(self, tmp_path) -> None:
        path = tmp_path / "graphaugment.yaml"
        path.write_text("")

        assert load_features(path) == Features()

    def test_save_writes_camel_case(self, tmp_path) -> None:
        path = tmp_path / "graphaugment.yaml"
        features = Features(limit_required=True, filters={"String": {"MATCHES": True}})

        save_features(features, path)

        data = yaml.safe_load(path.read_text())
        assert data["limitRequired"] is True
        assert data["excludeDeprecatedFields"]["attributeFilters"] is False
        assert "populatedBy" not in data
        assert load_features(path) == features
