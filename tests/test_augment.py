"""Tests for the schema augmenter: root fields, mutation inputs and the composed output."""

import logging

import pytest
from graphql import GraphQLSchema, graphql_sync, parse, print_ast

from graphaugment import (
    ExecutorNotConfiguredError,
    Features,
    FieldResolver,
    ResolverKind,
    SchemaValidationError,
    augment_schema,
    from_global_id,
    to_global_id,
)
from graphaugment.generation import dedupe_definitions


def argument_types(definition, field_name: str) -> dict[str, str]:
    field = next(field for field in definition.fields if field.name.value == field_name)
    return {arg.name.value: print_ast(arg.type) for arg in field.arguments}


class TestRootFields:
    """Query and Mutation fields of concrete entities."""

    def test_read_connection_and_mutations(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        query = fields(augmented, "Query")
        mutation = fields(augmented, "Mutation")

        assert query["movies"] == "[Movie!]!"
        assert query["moviesConnection"] == "MoviesConnection!"
        assert mutation["createMovies"] == "CreateMoviesMutationResponse!"
        assert mutation["updateMovies"] == "UpdateMoviesMutationResponse!"
        assert mutation["deleteMovies"] == "DeleteInfo!"

    def test_read_field_arguments(self, augment, definition, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)

        assert argument_types(definition(augmented, "Query"), "movies") == {
            "limit": "Int",
            "offset": "Int",
            "sort": "[MovieSort!]",
            "where": "MovieWhere",
        }

    def test_limit_required(self, augment, definition, movie_type_defs) -> None:
        augmented = augment(movie_type_defs, Features(limit_required=True))
        query = definition(augmented, "Query")

        assert argument_types(query, "movies")["limit"] == "Int!"
        assert argument_types(query, "moviesConnection")["first"] == "Int!"

    def test_root_connection_shape(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)

        assert fields(augmented, "MoviesConnection") == {
            "edges": "[MovieEdge!]!",
            "totalCount": "Int!",
            "pageInfo": "PageInfo!",
            "aggregate": "MovieAggregate!",
        }
        assert fields(augmented, "MovieEdge") == {"cursor": "String!", "node": "Movie!"}


class TestRootFieldGating:
    """`@query` and `@mutation` switch root fields independently."""

    TYPE_DEFS = """
    type Movie @node @query(read: false, aggregate: false) {
      title: String
    }

    type Genre @node @mutation(operations: [CREATE]) {
      name: String
    }
    """

    def test_unreadable_entity_keeps_mutations(self, augment, fields) -> None:
        augmented = augment(self.TYPE_DEFS)
        query = fields(augmented, "Query")
        mutation = fields(augmented, "Mutation")

        assert "movies" not in query
        assert "moviesConnection" not in query
        assert {"createMovies", "updateMovies", "deleteMovies"} <= set(mutation)

    def test_mutation_operations_are_gated(self, augment, fields) -> None:
        augmented = augment(self.TYPE_DEFS)
        mutation = fields(augmented, "Mutation")

        assert "createGenres" in mutation
        assert "updateGenres" not in mutation
        assert "deleteGenres" not in mutation
        assert "genres" in fields(augmented, "Query")

    def test_readable_but_not_aggregable_connection(self, augment, definition, fields) -> None:
        augmented = augment(
            """
            type Movie @node @query(read: true, aggregate: false) {
              title: String
            }
            """
        )

        assert "aggregate" not in fields(augmented, "MoviesConnection")
        assert definition(augmented, "MovieAggregateSelection") is None

    def test_empty_mutation_is_dropped_and_query_kept(self, augment, definition, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="graphaugment.generation.augment"):
            augmented = augment(
                """
                type Movie @node @query(read: false, aggregate: false) @mutation(operations: []) {
                  title: String
                }
                """
            )

        assert definition(augmented, "Query") is not None
        assert definition(augmented, "Mutation") is None
        assert any("Dropped Mutation root type" in record.message for record in caplog.records)
        assert not any("Dropped Query" in record.message for record in caplog.records)


class TestMutationInputs:
    """Create and update inputs of entities and relationships."""

    def test_create_input(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        create = fields(augmented, "MovieCreateInput")

        assert create["title"] == "String!"
        assert create["released"] == "Int"
        assert create["actors"] == "MovieActorsFieldInput"
        assert set(fields(augmented, "MovieActorsFieldInput")) == {"connect", "create"}

    def test_create_input_default_values(self, augment, definition) -> None:
        augmented = augment(
            """
            enum Status {
              DRAFT
              PUBLISHED
            }

            type Movie @node {
              title: String @default(value: "Untitled")
              status: Status @default(value: DRAFT)
            }
            """
        )
        create = definition(augmented, "MovieCreateInput")
        defaults = {field.name.value: print_ast(field.default_value) for field in create.fields if field.default_value}

        assert defaults == {"title": '"Untitled"', "status": "DRAFT"}
        assert 'status: Status = DRAFT' in augmented.sdl

    def test_nested_create_carries_edge_properties(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        nested = fields(augmented, "MovieActorsCreateFieldInput")

        assert nested["node"] == "ActorCreateInput!"
        assert nested["edge"].startswith("ActedInCreateInput")

    def test_update_input_uses_generic_mutations(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        update = fields(augmented, "MovieUpdateInput")

        assert update["title"] == "StringScalarMutations"
        assert update["released"] == "IntScalarMutations"
        assert set(fields(augmented, "IntScalarMutations")) == {"set", "add", "subtract"}

    def test_deprecated_update_operations(self, augment, deprecated_fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)

        assert {"title_SET", "released_SET", "released_INCREMENT", "released_DECREMENT"} <= deprecated_fields(
            augmented, "MovieUpdateInput"
        )

    def test_nested_operations_limit_relationship_inputs(self, augment, definition, fields) -> None:
        augmented = augment(
            """
            type Movie @node {
              title: String
              actors: [Actor!]! @relationship(type: "ACTED_IN", direction: IN, nestedOperations: [CONNECT])
            }

            type Actor @node {
              name: String
            }
            """
        )

        assert set(fields(augmented, "MovieActorsFieldInput")) == {"connect"}
        assert definition(augmented, "MovieActorsCreateFieldInput") is None


class TestGlobalNode:
    """Entities with a `@relayId` field implement the Node interface."""

    TYPE_DEFS = """
    type Movie @node {
      dbId: ID! @relayId
      title: String
    }
    """

    def test_node_interface_and_query_field(self, augment, definition, fields) -> None:
        augmented = augment(self.TYPE_DEFS)
        movie = definition(augmented, "Movie")

        assert fields(augmented, "Node") == {"id": "ID!"}
        assert fields(augmented, "Query")["node"] == "Node"
        assert [interface.name.value for interface in movie.interfaces] == ["Node"]
        assert fields(augmented, "Movie")["id"] == "ID!"
        assert fields(augmented, "MovieWhere")["id"] == "ID"

    def test_global_id_round_trip(self, augment) -> None:
        augmented = augment(self.TYPE_DEFS)
        resolve_id = augmented.resolvers["Movie"]["id"]

        global_id = resolve_id({"dbId": "42"}, None)

        assert global_id == to_global_id("Movie", "42")
        assert from_global_id(global_id) == ("Movie", "42")


class TestFulltext:
    """Query fields generated from `@fulltext` indexes."""

    def test_named_and_default_query_fields(self, augment, fields) -> None:
        augmented = augment(
            """
            type Movie @node @fulltext(indexes: [
              {indexName: "MovieTitle", queryName: "moviesByTitle", fields: ["title"]}
              {indexName: "MoviePlot", fields: ["plot"]}
            ]) {
              title: String
              plot: String
            }
            """
        )
        query = fields(augmented, "Query")

        assert query["moviesByTitle"] == "MoviesIndexConnection!"
        assert query["moviesFulltextMoviePlot"] == "MoviesIndexConnection!"
        assert fields(augmented, "MovieIndexEdge") == {"cursor": "String!", "node": "Movie!", "score": "Float!"}
        assert fields(augmented, "MovieIndexWhere") == {"node": "MovieWhere", "score": "FloatWhere"}


class TestVector:
    """Query fields generated from `@vector` indexes."""

    TYPE_DEFS = """
    type Movie @node @vector(indexes: [
      {indexName: "MovieEmbedding", queryName: "similarMovies", embeddingProperty: "embedding"}
      {indexName: "MoviePlot", queryName: "moviesByPlot", embeddingProperty: "plotEmbedding", provider: "OpenAI"}
    ]) {
      title: String
      embedding: [Float!]
      plotEmbedding: [Float!]
    }
    """

    def test_query_fields_and_types(self, augment, fields) -> None:
        augmented = augment(self.TYPE_DEFS)
        query = fields(augmented, "Query")

        assert query["similarMovies"] == "MoviesVectorConnection!"
        assert query["moviesByPlot"] == "MoviesVectorConnection!"
        assert fields(augmented, "MovieVectorEdge") == {"cursor": "String!", "node": "Movie!", "score": "Float!"}
        assert fields(augmented, "MovieVectorWhere") == {"node": "MovieWhere", "score": "FloatWhere"}
        assert fields(augmented, "MovieVectorSort") == {"node": "MovieSort", "score": "SortDirection"}
        assert fields(augmented, "MoviesVectorConnection") == {
            "edges": "[MovieVectorEdge!]!",
            "pageInfo": "PageInfo!",
            "totalCount": "Int!",
        }

    def test_vector_or_phrase_argument(self, augment, definition) -> None:
        query = definition(augment(self.TYPE_DEFS), "Query")

        assert argument_types(query, "similarMovies") == {
            "after": "String",
            "first": "Int",
            "vector": "[Float!]",
            "sort": "[MovieVectorSort!]",
            "where": "MovieVectorWhere",
        }
        assert "phrase" in argument_types(query, "moviesByPlot")
        assert "vector" not in argument_types(query, "moviesByPlot")

    def test_fields_are_bound_to_the_index(self, augment) -> None:
        resolver = augment(self.TYPE_DEFS).resolvers["Query"]["moviesByPlot"]

        assert resolver.kind == ResolverKind.VECTOR
        assert resolver.is_root
        assert resolver.extra == {
            "index_name": "MoviePlot",
            "embedding_property": "plotEmbedding",
            "provider": "OpenAI",
        }

    def test_directive_is_stripped(self, augment, definition) -> None:
        movie = definition(augment(self.TYPE_DEFS), "Movie")

        assert [directive.name.value for directive in movie.directives] == []

    def test_limit_required_makes_first_non_null(self, augment, definition) -> None:
        query = definition(augment(self.TYPE_DEFS, Features(limit_required=True)), "Query")

        assert argument_types(query, "similarMovies")["first"] == "Int!"


class TestUserRootFields:
    """Fields the user declares on root types."""

    TYPE_DEFS = """
    type Movie @node {
      title: String
    }

    type Query {
      topMovie: Movie @cypher(statement: "MATCH (m:Movie) RETURN m LIMIT 1", columnName: "m")
      hello(name: String = "world"): String
    }
    """

    def test_fields_are_carried_over(self, augment, fields) -> None:
        augmented = augment(self.TYPE_DEFS)
        query = fields(augmented, "Query")

        assert query["topMovie"] == "Movie"
        assert query["hello"] == "String"
        assert "movies" in query

    def test_cypher_fields_are_bound(self, augment) -> None:
        augmented = augment(self.TYPE_DEFS)
        resolver = augmented.resolvers["Query"]["topMovie"]

        assert isinstance(resolver, FieldResolver)
        assert resolver.kind == ResolverKind.CYPHER
        assert resolver.statement == "MATCH (m:Movie) RETURN m LIMIT 1"
        assert resolver.extra["column_name"] == "m"
        assert "hello" not in augmented.resolvers["Query"]


class TestComposition:
    """The composed output document."""

    def test_no_duplicate_definitions(self, augment, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)

        assert len(augmented.type_names) == len(set(augmented.type_names))

    def test_library_directives_are_stripped(self, augment, movie_type_defs) -> None:
        sdl = augment(movie_type_defs).sdl

        assert "@node" not in sdl
        assert "@relationship(" not in sdl

    def test_user_enums_are_kept(self, augment, fields) -> None:
        augmented = augment(
            """
            enum Genre {
              ACTION
              DRAMA
            }

            type Movie @node {
              genre: Genre
            }
            """
        )

        assert "Genre" in augmented.type_names
        assert fields(augmented, "MovieWhere")["genre"] == "GenreEnumScalarFilters"

    def test_library_scalars_are_defined_and_bound(self, augment, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)

        assert {"BigInt", "Duration"} <= set(augmented.type_names)
        assert augmented.resolvers["BigInt"].serialize(12) == "12"

    def test_dedupe_drops_builtin_scalars_and_repeats(self) -> None:
        document = parse("scalar String\ntype A { a: Int }\ntype A { b: Int }")

        deduped = dedupe_definitions(document)

        assert [d.name.value for d in deduped.definitions] == ["A"]


class TestExecutableSchema:
    """The resolver map bound onto a graphql-core schema."""

    def test_schema_builds(self, augment, movie_type_defs) -> None:
        schema = augment(movie_type_defs).executable_schema()

        assert isinstance(schema, GraphQLSchema)
        assert schema.query_type.fields["movies"].resolve is not None

    def test_root_fields_delegate_to_executor(self, augment, movie_type_defs) -> None:
        schema = augment(movie_type_defs).executable_schema()
        calls = []

        def executor(binding, root, args, info):
            calls.append((binding.kind, binding.entity, args))
            return [{"title": "The Matrix"}]

        result = graphql_sync(
            schema, "{ movies(limit: 1) { title } }", context_value={"executor": executor}
        )

        assert result.errors is None
        assert result.data == {"movies": [{"title": "The Matrix"}]}
        assert calls == [(ResolverKind.READ, "Movie", {"limit": 1})]

    def test_missing_executor_is_an_error(self, augment, movie_type_defs) -> None:
        schema = augment(movie_type_defs).executable_schema()

        result = graphql_sync(schema, "{ movies { title } }", context_value={})

        assert result.errors is not None
        assert isinstance(result.errors[0].original_error, ExecutorNotConfiguredError)


class TestAugmentSchema:
    """augment_schema validates before generating."""

    def test_invalid_definitions_raise(self) -> None:
        with pytest.raises(SchemaValidationError) as exc_info:
            augment_schema(
                """
                type Movie @node @limit(default: 10, max: 5) {
                  title: String
                }
                """
            )

        assert len(exc_info.value.errors) == 1

    def test_valid_definitions_generate(self, movie_type_defs) -> None:
        augmented = augment_schema(movie_type_defs)

        assert "Movie" in augmented.type_names


class TestSortInputs:
    """Entity, edge and connection sorts."""

    def test_entity_sort(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)
        sort = fields(augmented, "MovieSort")

        assert {"title", "released"} <= set(sort)
        assert set(sort.values()) == {"SortDirection"}
        assert "actors" not in sort

    def test_connection_sort(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs)

        assert fields(augmented, "MovieActorsConnectionSort") == {"edge": "ActedInSort", "node": "ActorSort"}
        assert fields(augmented, "ActedInSort") == {"screenTime": "SortDirection"}

    def test_no_sort_without_sortable_fields(self, augment, definition) -> None:
        augmented = augment("type Tag @node { names: [String!]! }")

        assert definition(augmented, "TagSort") is None


class TestSubscriptionRoot:
    """User-declared Subscription fields are carried over."""

    def test_user_subscription_fields(self, augment, fields, movie_type_defs) -> None:
        augmented = augment(movie_type_defs + "\ntype Subscription { ticks: Int }")

        assert fields(augmented, "Subscription") == {"ticks": "Int"}

    def test_no_subscription_by_default(self, augment, definition, movie_type_defs) -> None:
        assert definition(augment(movie_type_defs), "Subscription") is None
