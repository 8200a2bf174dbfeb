"""Tests for where-input generation."""

import pytest
from graphql import parse, print_ast

from graphaugment import Features
from graphaugment.core import AdapterContractError, ExcludeDeprecatedFields, TypeRegistry
from graphaugment.generation import ScalarTypes, WhereInputGenerator
from graphaugment.model.adapters import AdapterCache
from graphaugment.model.parser import SchemaModelParser, get_definition_collection


UNION_TYPE_DEFS = """
type Movie @node {
  title: String
}

type Genre @node {
  name: String
}

union Search = Movie | Genre
"""

PRODUCTION_TYPE_DEFS = """
interface Production {
  title: String!
  actors: [Actor!]! @declareRelationship
}

type Movie implements Production @node {
  title: String!
  actors: [Actor!]! @relationship(type: "ACTED_IN", direction: IN, properties: "ActedIn")
}

type Series implements Production @node {
  title: String!
  actors: [Actor!]! @relationship(type: "STARRED_IN", direction: IN, properties: "StarredIn")
}

type Actor @node {
  name: String!
}

type ActedIn @relationshipProperties {
  screenTime: Int
}

type StarredIn @relationshipProperties {
  episodes: Int
}
"""


def adapt(type_defs: str) -> AdapterCache:
    model = SchemaModelParser(get_definition_collection(parse(type_defs))).parse()
    return AdapterCache(model)


def adapter_named(cache: AdapterCache, name: str):
    return next(adapter for adapter in cache.adapt_all() if adapter.name == name)


class TestEntityWhere:
    """Where inputs of concrete entities."""

    def test_attribute_and_logical_fields(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        where = fields(augmented, "MovieWhere")

        assert where["title"] == "StringScalarFilters"
        assert where["released"] == "IntScalarFilters"
        assert where["AND"] == "[MovieWhere!]"
        assert where["OR"] == "[MovieWhere!]"
        assert where["NOT"] == "MovieWhere"

    def test_relationship_filters(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        where = fields(augmented, "MovieWhere")

        assert where["actors"] == "ActorRelationshipFilters"
        assert where["actorsConnection"] == "MovieActorsConnectionFilters"
        assert set(fields(augmented, "ActorRelationshipFilters")) == {"all", "none", "single", "some"}
        assert set(fields(augmented, "MovieActorsConnectionFilters")) == {"all", "none", "single", "some", "aggregate"}

    def test_connection_where_has_node_and_edge(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        connection_where = fields(augmented, "MovieActorsConnectionWhere")

        assert connection_where["node"] == "ActorWhere"
        assert connection_where["edge"] == "ActedInWhere"

    def test_target_where_is_generated_once(self, augment, movie_type_defs) -> None:
        """Two relationships to the same target share one where input."""
        augmented = augment(
            movie_type_defs
            + """
            type Director @node {
              name: String
              directed: [Movie!]! @relationship(type: "DIRECTED", direction: OUT)
              favourite: [Movie!]! @relationship(type: "LIKES", direction: OUT)
            }
            """
        )

        assert augmented.type_names.count("MovieWhere") == 1
        assert augmented.type_names.count("MovieRelationshipFilters") == 1
        assert len(augmented.type_names) == len(set(augmented.type_names))


class TestUnionWhere:
    """Where inputs of union entities."""

    def test_one_field_per_member(self, augment, fields) -> None:
        augmented = augment(UNION_TYPE_DEFS)

        assert fields(augmented, "SearchWhere") == {"Movie": "MovieWhere", "Genre": "GenreWhere"}

    def test_union_read_field_has_no_sort(self, augment, definition) -> None:
        augmented = augment(UNION_TYPE_DEFS)
        query = definition(augmented, "Query")
        searches = next(field for field in query.fields if field.name.value == "searches")

        assert {arg.name.value for arg in searches.arguments} == {"limit", "offset", "where"}
        assert print_ast(searches.type) == "[Search!]!"


class TestDeprecatedAttributeFilters:
    """Flat deprecated filters mirror the generic filter operators."""

    def test_flat_fields_for_every_generic_operator(self, augment, deprecated_fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        deprecated = deprecated_fields(augmented, "MovieWhere")

        assert {"title_EQ", "title_IN", "title_CONTAINS", "title_STARTS_WITH", "title_ENDS_WITH"} <= deprecated
        assert {"released_EQ", "released_IN", "released_LT", "released_LTE", "released_GT", "released_GTE"} <= deprecated

    def test_deprecation_reason_references_generic_filter(self, augment, definition, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        where = definition(augmented, "MovieWhere")
        title_eq = next(field for field in where.fields if field.name.value == "title_EQ")
        reason = title_eq.directives[0].arguments[0].value.value

        assert reason == "Please use the relevant generic filter title: { eq: ... }"

    def test_excluded_family_emits_no_flat_fields(self, augment, fields, deprecated_fields, movie_type_defs) -> None:
        features = Features(exclude_deprecated_fields=ExcludeDeprecatedFields(attribute_filters=True))
        augmented = augment(movie_type_defs, features)
        where = fields(augmented, "MovieWhere")

        assert not [name for name in where if name.startswith(("title_", "released_"))]
        assert "title" in where

    def test_excluding_every_family_leaves_generic_fields_unchanged(
        self, augment, fields, deprecated_fields, movie_type_defs
    ) -> None:
        everything = ExcludeDeprecatedFields(
            attribute_filters=True,
            relationship_filters=True,
            aggregation_filters=True,
            aggregation_filters_outside_connection=True,
            mutation_operations=True,
        )
        full = augment(movie_type_defs)
        trimmed = augment(movie_type_defs, Features(exclude_deprecated_fields=everything))

        assert deprecated_fields(trimmed, "MovieWhere") == set()
        kept = set(fields(full, "MovieWhere")) - deprecated_fields(full, "MovieWhere")
        assert set(fields(trimmed, "MovieWhere")) == kept


class TestStringFeatureFilters:
    """Optional string operators enabled through features."""

    def test_matches_and_case_insensitive(self, augment, fields, movie_type_defs) -> None:
        features = Features(filters={"String": {"MATCHES": True, "CASE_INSENSITIVE": True}})
        augmented = augment(movie_type_defs, features)
        string_filters = fields(augmented, "StringScalarFilters")

        assert string_filters["matches"] == "String"
        assert string_filters["caseInsensitive"] == "CaseInsensitiveStringScalarFilters"
        assert "title_MATCHES" in fields(augmented, "MovieWhere")


class TestInterfaceWhere:
    """Where inputs of interface entities and their declared relationships."""

    def test_typename_filter_lists_implementations(self, augment, fields) -> None:
        augmented = augment(PRODUCTION_TYPE_DEFS)
        where = fields(augmented, "ProductionWhere")

        assert where["title"] == "StringScalarFilters"
        assert where["typename"] == "[ProductionImplementation!]"

    def test_implementation_enum(self, augment, definition) -> None:
        augmented = augment(PRODUCTION_TYPE_DEFS)
        implementation = definition(augmented, "ProductionImplementation")

        assert [value.name.value for value in implementation.values] == ["Movie", "Series"]

    def test_declared_edge_where_is_keyed_by_properties_type(self, augment, definition, fields) -> None:
        augmented = augment(PRODUCTION_TYPE_DEFS)

        assert fields(augmented, "ProductionActorsEdgeWhere") == {
            "ActedIn": "ActedInWhere",
            "StarredIn": "StarredInWhere",
        }
        assert fields(augmented, "ProductionActorsConnectionWhere")["edge"] == "ProductionActorsEdgeWhere"

        edge_where = definition(augmented, "ProductionActorsEdgeWhere")
        acted_in = next(field for field in edge_where.fields if field.name.value == "ActedIn")
        assert acted_in.description.value == "Relationship properties when source node is of type:\n* Movie"


class TestCypherWhere:
    """`@cypher` fields returning entities filter by the target's where input."""

    TYPE_DEFS = """
    type Movie @node {
      title: String
      similar: [Movie!]! @cypher(statement: "MATCH (m:Movie) RETURN m", columnName: "m")
      sequel: Movie @cypher(statement: "MATCH (m:Movie) RETURN m LIMIT 1", columnName: "m")
      top(limit: Int): [Movie!]! @cypher(statement: "MATCH (m:Movie) RETURN m", columnName: "m")
    }
    """

    def test_list_field_gets_quantifiers_and_relationship_filters(self, augment, fields) -> None:
        where = fields(augment(self.TYPE_DEFS), "MovieWhere")

        assert where["similar"] == "MovieRelationshipFilters"
        for quantifier in ("ALL", "NONE", "SINGLE", "SOME"):
            assert where[f"similar_{quantifier}"] == "MovieWhere"

    def test_single_field_filters_by_target_where(self, augment, fields) -> None:
        where = fields(augment(self.TYPE_DEFS), "MovieWhere")

        assert where["sequel"] == "MovieWhere"
        assert not [name for name in where if name.startswith("sequel_")]

    def test_field_with_arguments_is_not_filterable(self, augment, fields) -> None:
        where = fields(augment(self.TYPE_DEFS), "MovieWhere")

        assert not [name for name in where if name.startswith("top")]


class TestSelfReferentialWhere:
    """A relationship from an entity back to itself."""

    TYPE_DEFS = """
    type User @node {
      name: String
      friends: [User!]! @relationship(type: "FRIENDS_WITH", direction: OUT)
    }
    """

    def test_filters_point_back_at_the_same_where(self, augment, fields) -> None:
        augmented = augment(self.TYPE_DEFS)
        where = fields(augmented, "UserWhere")

        assert where["friends"] == "UserRelationshipFilters"
        assert where["friendsConnection"] == "UserFriendsConnectionFilters"
        assert fields(augmented, "UserRelationshipFilters")["some"] == "UserWhere"
        assert fields(augmented, "UserFriendsConnectionWhere")["node"] == "UserWhere"

    def test_object_field_and_single_definitions(self, augment, fields) -> None:
        augmented = augment(self.TYPE_DEFS)

        assert fields(augmented, "User")["friends"] == "[User!]!"
        assert augmented.type_names.count("UserWhere") == 1
        assert len(augmented.type_names) == len(set(augmented.type_names))


class TestSpatialWhere:
    """Point and cartesian point attributes."""

    TYPE_DEFS = """
    type Place @node {
      location: Point
      position: CartesianPoint
    }
    """

    def test_generic_point_filters(self, augment, fields) -> None:
        augmented = augment(self.TYPE_DEFS)
        where = fields(augmented, "PlaceWhere")

        assert where["location"] == "PointFilters"
        assert where["position"] == "CartesianPointFilters"
        assert fields(augmented, "PointFilters")["distance"] == "PointDistanceFilters"
        assert fields(augmented, "CartesianPointFilters")["distance"] == "CartesianDistancePointFilters"

    def test_deprecated_distance_comparators(self, augment, fields, deprecated_fields) -> None:
        augmented = augment(self.TYPE_DEFS)
        where = fields(augmented, "PlaceWhere")

        for comparator in ("DISTANCE", "LT", "LTE", "GT", "GTE"):
            assert where[f"location_{comparator}"] == "PointDistance"
            assert where[f"position_{comparator}"] == "CartesianPointDistance"
        assert "location_DISTANCE" in deprecated_fields(augmented, "PlaceWhere")
        assert fields(augmented, "PointDistance")["point"] == "PointInput!"


class TestDeprecatedRelationshipFilters:
    """`rel_ALL` style fields switched by `relationship_filters`."""

    def test_quantifier_fields_by_default(self, augment, fields, deprecated_fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        where = fields(augmented, "MovieWhere")
        deprecated = deprecated_fields(augmented, "MovieWhere")

        for quantifier in ("ALL", "NONE", "SINGLE", "SOME"):
            assert where[f"actors_{quantifier}"] == "ActorWhere"
            assert where[f"actorsConnection_{quantifier}"] == "MovieActorsConnectionWhere"
            assert {f"actors_{quantifier}", f"actorsConnection_{quantifier}"} <= deprecated

    def test_deprecation_reason(self, augment, definition, movie_type_defs) -> None:
        where = definition(augment(movie_type_defs), "MovieWhere")
        actors_some = next(field for field in where.fields if field.name.value == "actors_SOME")

        assert actors_some.directives[0].arguments[0].value.value == (
            "Please use the relevant generic filter 'actors: {  some: ... }' instead."
        )

    def test_excluded_by_relationship_filters(self, augment, fields, movie_type_defs) -> None:
        features = Features(exclude_deprecated_fields=ExcludeDeprecatedFields(relationship_filters=True))
        where = fields(augment(movie_type_defs, features), "MovieWhere")

        assert not [name for name in where if name.startswith(("actors_", "actorsConnection_"))]
        assert where["actors"] == "ActorRelationshipFilters"
        assert where["actorsConnection"] == "MovieActorsConnectionFilters"


class TestWhereInputGenerator:
    """WhereInputGenerator used directly."""

    TYPE_DEFS = """
    type Movie @node {
      title: String @filterable(byValue: false)
    }
    """

    def test_return_none_if_empty(self) -> None:
        movie = adapter_named(adapt(self.TYPE_DEFS), "Movie")
        registry = TypeRegistry()
        wheres = WhereInputGenerator(registry, ScalarTypes(registry))

        assert wheres.where_input(movie, return_none_if_empty=True) is None
        assert not registry.has("MovieWhere")

    def test_empty_where_keeps_logical_operators(self) -> None:
        movie = adapter_named(adapt(self.TYPE_DEFS), "Movie")
        registry = TypeRegistry()
        wheres = WhereInputGenerator(registry, ScalarTypes(registry))

        where = wheres.where_input(movie)

        assert list(where.fields) == ["AND", "OR", "NOT"]
        assert wheres.where_input(movie, return_none_if_empty=True) is where


class TestUnionRelationshipContract:
    """Per-member questions about a relationship to a union."""

    TYPE_DEFS = UNION_TYPE_DEFS + """
    type User @node {
      likes: [Search!]! @relationship(type: "LIKES", direction: OUT)
    }
    """

    def test_update_field_input_requires_member(self) -> None:
        cache = adapt(self.TYPE_DEFS)
        likes = adapter_named(cache, "User").relationships["likes"]

        with pytest.raises(AdapterContractError, match="a member entity is required"):
            likes.should_generate_update_field_input_type()

    def test_update_field_input_with_member(self) -> None:
        cache = adapt(self.TYPE_DEFS)
        likes = adapter_named(cache, "User").relationships["likes"]

        assert likes.should_generate_update_field_input_type(adapter_named(cache, "Movie")) is True
