"""Tests for aggregate selection and aggregation filter types."""


UNION_TARGET_TYPE_DEFS = """
type Post @node {
  title: String
  likes: Int
}

type Comment @node {
  body: String
  likes: Int
}

union Content = Post | Comment

type User @node {
  name: String
  content: [Content!]! @relationship(type: "HAS_CONTENT", direction: OUT, aggregate: true)
  posts: [Post!]! @relationship(type: "WROTE", direction: OUT)
}
"""


class TestEntityAggregateSelection:
    """`<E>AggregateSelection` and the per-scalar selection types."""

    def test_count_and_one_field_per_aggregable_attribute(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)

        assert fields(augmented, "MovieAggregateSelection") == {
            "count": "Int!",
            "title": "StringAggregateSelection!",
            "released": "IntAggregateSelection!",
            "runtime": "DurationAggregateSelection!",
            "boxOffice": "BigIntAggregateSelection!",
        }

    def test_selection_types_by_category(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)

        assert fields(augmented, "StringAggregateSelection") == {"longest": "String", "shortest": "String"}
        assert fields(augmented, "IntAggregateSelection")["average"] == "Float"

    def test_duration_has_no_sum(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)

        assert set(fields(augmented, "DurationAggregateSelection")) == {"average", "max", "min"}
        assert fields(augmented, "DurationAggregateSelection")["average"] == "Duration"

    def test_big_int_average_stays_big_int(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)

        assert fields(augmented, "BigIntAggregateSelection")["average"] == "BigInt"


class TestAggregationFilters:
    """Aggregation where inputs of relationships."""

    def test_duration_filters_have_no_sum(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)

        assert set(fields(augmented, "DurationScalarAggregationFilters")) == {"average", "max", "min"}

    def test_deprecated_duration_fields_have_no_sum(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        node_where = fields(augmented, "ActorMoviesNodeAggregationWhereInput")

        assert not [name for name in node_where if name.startswith("runtime_SUM_")]
        assert node_where["runtime_AVERAGE_EQUAL"] == "Duration"
        assert node_where["released_SUM_EQUAL"] == "Int"

    def test_deprecated_big_int_average_is_big_int(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        node_where = fields(augmented, "ActorMoviesNodeAggregationWhereInput")

        assert node_where["boxOffice_AVERAGE_EQUAL"] == "BigInt"
        assert node_where["released_AVERAGE_EQUAL"] == "Float"

    def test_edge_aggregation_uses_relationship_properties(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        aggregate = fields(augmented, "MovieActorsConnectionAggregateInput")

        assert aggregate["count"] == "ConnectionAggregationCountFilterInput"
        assert aggregate["node"] == "MovieActorsNodeAggregationWhereInput"
        assert "edge" in aggregate


class TestRelationshipAggregates:
    """The `aggregate` selection of relationship connections."""

    def test_connection_aggregate_for_node_target(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        connection = fields(augmented, "MovieActorsConnection")
        selection = fields(augmented, "MovieActorActorsAggregateSelection")

        assert connection["aggregate"] == "MovieActorActorsAggregateSelection!"
        assert selection["count"] == "CountConnection!"
        assert selection["node"] == "MovieActorActorsNodeAggregateSelection"
        assert selection["edge"] == "MovieActorActorsEdgeAggregateSelection"

    def test_union_target_gets_no_aggregate(self, augment, fields, definition) -> None:
        augmented = augment(UNION_TARGET_TYPE_DEFS)

        assert "aggregate" not in fields(augmented, "UserContentConnection")
        assert "aggregate" not in fields(augmented, "UserContentConnectionFilters")
        assert "contentAggregate" not in fields(augmented, "UserWhere")
        assert definition(augmented, "UserContentContentAggregateSelection") is None

    def test_node_target_next_to_union_keeps_aggregate(self, augment, fields) -> None:
        augmented = augment(UNION_TARGET_TYPE_DEFS)

        assert "aggregate" in fields(augmented, "UserPostsConnection")
