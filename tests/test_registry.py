"""Tests for the type registry."""

import pytest
from graphql import print_ast

from graphaugment.core import FieldConfig, GenerationError, ObjectType, TypeRegistry
from graphaugment.core.registry import Argument, EnumLiteral, deprecated, to_value_node


class TestRegistration:
    """get_or_create_* returns the existing definition for a known name."""

    def test_get_or_create_input_is_idempotent(self) -> None:
        """A second call returns the same instance and keeps its fields."""
        registry = TypeRegistry()
        first = registry.get_or_create_input("MovieWhere", {"title": "StringScalarFilters"})
        second = registry.get_or_create_input("MovieWhere", {"released": "IntScalarFilters"})

        assert first is second
        assert list(second.fields) == ["title"]
        assert len(registry) == 1

    def test_add_returns_registered_instance(self) -> None:
        """add() with a taken name returns the registered type."""
        registry = TypeRegistry()
        original = registry.get_or_create_object("Count", {"nodes": "Int!"})
        assert registry.add(ObjectType(name="Count")) is original

    def test_conflicting_kind_raises(self) -> None:
        """Registering a name as another kind of type fails."""
        registry = TypeRegistry()
        registry.get_or_create_input("Movie")

        with pytest.raises(GenerationError):
            registry.get_or_create_object("Movie")

    def test_get_unknown_type_raises(self) -> None:
        with pytest.raises(GenerationError):
            TypeRegistry().get("Missing")

    def test_delete_removes_type_and_type_resolver(self) -> None:
        registry = TypeRegistry()
        registry.get_or_create_union("Search", ["Movie", "Genre"])
        registry.set_type_resolver("Search", lambda value, info, abstract: "Movie")

        registry.delete("Search")

        assert not registry.has("Search")
        assert not registry.has_type_resolver("Search")


class TestPrinting:
    """Tests for to_sdl()."""

    def test_root_types_are_printed_first(self) -> None:
        registry = TypeRegistry()
        registry.get_or_create_object("Movie", {"title": "String"})
        registry.mutation.add_fields({"createMovies": "Boolean"})
        registry.query.add_fields({"movies": "[Movie!]!"})

        sdl = registry.to_sdl()

        assert sdl.index("type Query") < sdl.index("type Mutation") < sdl.index("type Movie")

    def test_field_arguments_and_directives(self) -> None:
        registry = TypeRegistry()
        registry.query.add_fields(
            {
                "movies": FieldConfig(
                    type="[Movie!]!",
                    args={"limit": Argument(type="Int", default=to_value_node(10))},
                    directives=[deprecated("use moviesConnection")],
                )
            }
        )

        assert '  movies(limit: Int = 10): [Movie!]! @deprecated(reason: "use moviesConnection")' in registry.to_sdl()

    def test_value_nodes(self) -> None:
        assert print_ast(to_value_node(EnumLiteral("ASC"))) == "ASC"
        assert print_ast(to_value_node([1, "a", True, None])) == '[1, "a", true, null]'
        assert print_ast(to_value_node({"first": 5})) == "{first: 5}"

    def test_unsupported_value_raises(self) -> None:
        with pytest.raises(GenerationError):
            to_value_node(object())

    def test_invalid_type_reference_raises(self) -> None:
        registry = TypeRegistry()
        registry.query.add_fields({"movies": "[Movie!"})

        with pytest.raises(GenerationError):
            registry.to_sdl()

    def test_empty_query_prints_without_braces(self) -> None:
        registry = TypeRegistry()
        assert registry.query.fields == {}

        assert registry.to_sdl() == "type Query"


class TestResolvers:
    """Tests for the resolver map."""

    def test_only_bound_fields_appear(self) -> None:
        registry = TypeRegistry()

        def resolve(root, info):
            return None

        registry.query.add_fields({"movies": FieldConfig(type="[Movie!]!", resolve=resolve), "plain": "Int"})

        assert registry.resolvers() == {"Query": {"movies": resolve}}

    def test_type_resolvers_are_keyed_as_resolve_type(self) -> None:
        registry = TypeRegistry()
        registry.get_or_create_union("Search", ["Movie"])

        def resolve_type(value, info, abstract):
            return "Movie"

        registry.set_type_resolver("Search", resolve_type)

        assert registry.resolvers()["Search"] == {"__resolveType": resolve_type}
