"""Tests for the validation rules and runner."""

import pytest
from graphql import parse

from graphaugment import DEFAULT_RULES, Features, SchemaValidationError, validate_document, validate_sdl
from graphaugment.validation import library_directives_schema
from graphaugment.validation.rules import (
    DUPLICATE_RELATIONSHIP_MESSAGE,
    validate_directive_argument_values,
    validate_limit_directive,
)


def run(type_defs: str, rules=DEFAULT_RULES, callbacks=None):
    return validate_sdl(parse(type_defs), rules, library_directives_schema(), callbacks)


class TestRunner:
    """validate_sdl and validate_document."""

    def test_valid_schema_has_no_errors(self, movie_type_defs) -> None:
        assert run(movie_type_defs) == []

    def test_validate_document_raises_with_every_error(self) -> None:
        document = parse(
            """
            type Movie @node @limit(default: 0) {
              id: String @id
            }
            """
        )

        with pytest.raises(SchemaValidationError) as exc_info:
            validate_document(document, Features())

        assert [error.path for error in exc_info.value.errors] == [
            ["Movie", "@limit", "default"],
            ["Movie", "id", "@id"],
        ]

    def test_only_given_rules_run(self) -> None:
        errors = run(
            """
            type Movie @node @limit(default: 10, max: 5) {
              id: String @id
            }
            """,
            rules=[validate_limit_directive],
        )

        assert len(errors) == 1

    def test_without_schema_to_extend(self) -> None:
        errors = validate_sdl(
            parse("type Movie @node(labels: [1]) { title: String }"), [validate_directive_argument_values]
        )

        assert len(errors) == 1


class TestValidTypes:
    """Type-level rules."""

    def test_all_private_fields(self) -> None:
        errors = run("type Movie @node { secret: String @private }")

        assert [error.message for error in errors] == ["Objects and Interfaces must have one or more fields."]

    def test_interface_partially_implemented_by_nodes(self) -> None:
        errors = run(
            """
            interface Production { title: String }
            type Movie implements Production @node { title: String }
            type Series implements Production { title: String }
            """
        )

        assert [error.message for error in errors] == ["Interface needs to be fully implemented by `@node` types."]

    def test_union_partially_of_nodes(self) -> None:
        errors = run(
            """
            type Movie @node { title: String }
            type Series { title: String }
            union Production = Movie | Series
            """
        )

        assert len(errors) == 1
        assert errors[0].message.startswith("Union needs to be fully implemented by `@node` types")


class TestRelationshipDirective:
    """`@relationship` location, properties and duplicates."""

    def test_relationship_on_interface_field(self) -> None:
        errors = run(
            """
            interface Production {
              title: String
              actors: [Actor!]! @relationship(type: "ACTED_IN", direction: IN)
            }

            type Movie implements Production @node {
              title: String
              actors: [Actor!]! @relationship(type: "ACTED_IN", direction: IN)
            }

            type Actor @node {
              name: String
            }
            """
        )

        assert len(errors) == 1
        assert "Since version 5.0.0, interface fields can only have @declareRelationship" in errors[0].message
        assert errors[0].path == ["Production", "actors", "@relationship"]

    def test_duplicate_type_and_direction(self) -> None:
        errors = run(
            """
            type Movie @node {
              actors: [Actor!]! @relationship(type: "ACTED_IN", direction: IN)
              leads: [Actor!]! @relationship(type: "ACTED_IN", direction: IN)
            }

            type Actor @node {
              name: String
            }
            """
        )

        assert [error.message for error in errors] == [DUPLICATE_RELATIONSHIP_MESSAGE]
        assert "Multiple fields of the same type cannot have a relationship with the same direction and type combination." in errors[0].message
        assert errors[0].path == ["Movie", "leads", "@relationship"]

    def test_same_type_other_direction_is_allowed(self) -> None:
        errors = run(
            """
            type Person @node {
              follows: [Person!]! @relationship(type: "FOLLOWS", direction: OUT)
              followers: [Person!]! @relationship(type: "FOLLOWS", direction: IN)
            }
            """
        )

        assert errors == []

    def test_missing_properties_type(self) -> None:
        errors = run(
            """
            type Movie @node {
              actors: [Actor!]! @relationship(type: "ACTED_IN", direction: IN, properties: "ActedIn")
            }

            type Actor @node {
              name: String
            }
            """
        )

        assert len(errors) == 1
        assert errors[0].path == ["Movie", "actors", "@relationship", "properties"]

    def test_properties_type_without_directive(self) -> None:
        errors = run(
            """
            type Movie @node {
              actors: [Actor!]! @relationship(type: "ACTED_IN", direction: IN, properties: "ActedIn")
            }

            type Actor @node {
              name: String
            }

            type ActedIn {
              role: String
            }
            """
        )

        assert errors[0].message == (
            "@relationship.properties invalid. Properties type ActedIn must use directive `@relationshipProperties`."
        )

    def test_target_must_be_node(self) -> None:
        errors = run(
            """
            type Movie @node {
              actors: [Actor!]! @relationship(type: "ACTED_IN", direction: IN)
            }

            type Actor {
              name: String
            }
            """
        )

        assert errors[0].message == 'Invalid directive usage: Directive @relationship should be a type with "@node".'

    def test_relationship_outside_node(self) -> None:
        errors = run(
            """
            type Movie {
              actors: [Actor!]! @relationship(type: "ACTED_IN", direction: IN)
            }

            type Actor @node {
              name: String
            }
            """
        )

        assert errors[0].message == 'Directive "relationship" must be in a type with "@node"'


class TestLimitDirective:
    """`@limit(default, max)`."""

    def test_default_above_max(self) -> None:
        errors = run("type Movie @node @limit(default: 10, max: 5) { title: String }")

        assert len(errors) == 1
        assert errors[0].message == "@limit.max invalid value: 5. Must be greater than limit.default: 10."
        assert errors[0].path == ["Movie", "@limit", "max"]

    def test_default_below_max(self) -> None:
        assert run("type Movie @node @limit(default: 5, max: 10) { title: String }") == []

    def test_non_positive_default(self) -> None:
        errors = run("type Movie @node @limit(default: 0) { title: String }")

        assert errors[0].message == "@limit.default invalid value: 0. Must be greater than 0."
        assert errors[0].path == ["Movie", "@limit", "default"]

    def test_interfaces_are_a_valid_location(self) -> None:
        assert run("interface Production @limit(default: 5) { title: String }") == []

    def test_object_without_node(self) -> None:
        errors = run("type Movie @limit(default: 5) { title: String }")

        assert errors[0].message == 'Directive "limit" must be in a type with "@node" or in an interface type'


class TestFulltextDirective:
    """`@fulltext(indexes)`."""

    def test_duplicate_index_name(self) -> None:
        errors = run(
            """
            type Movie @node @fulltext(indexes: [
              {indexName: "MovieTitle", queryName: "a", fields: ["title"]}
              {indexName: "MovieTitle", queryName: "b", fields: ["title"]}
            ]) {
              title: String
            }
            """
        )

        assert [error.message for error in errors] == [
            "@fulltext.indexes invalid value for: MovieTitle. Duplicate index name."
        ]
        assert errors[0].path == ["Movie", "@fulltext", "indexes"]

    def test_non_string_field(self) -> None:
        errors = run(
            """
            type Movie @node @fulltext(indexes: [{indexName: "MovieYear", fields: ["year"]}]) {
              year: Int
            }
            """
        )

        assert errors[0].message == (
            "@fulltext.indexes invalid value for: MovieYear. Field year is not of type String or ID."
        )

    def test_valid_indexes(self) -> None:
        assert (
            run(
                """
                type Movie @node @fulltext(indexes: [{indexName: "MovieTitle", fields: ["title", "id"]}]) {
                  id: ID!
                  title: String
                }
                """
            )
            == []
        )


class TestDefaultAndCoalesce:
    """`@default` and `@coalesce` values must match the field type."""

    def test_default_value_of_wrong_type(self) -> None:
        errors = run('type Movie @node { released: Int @default(value: "1999") }')

        assert errors[0].message == "@default.value on Int fields must be of type Int"
        assert errors[0].path == ["Movie", "released", "@default", "value"]

    def test_default_list_value(self) -> None:
        errors = run('type Movie @node { tags: [String!]! @default(value: "new") }')

        assert errors[0].message == "@default.value on String list fields must be a list of String values"

    def test_valid_defaults(self) -> None:
        errors = run(
            """
            enum Status { DRAFT PUBLISHED }

            type Movie @node {
              title: String @default(value: "Untitled")
              rating: Float @default(value: 5)
              status: Status @default(value: DRAFT)
              tags: [String!]! @default(value: ["new"])
              createdAt: DateTime @default(value: "2021-01-01T00:00:00Z")
            }
            """
        )

        assert errors == []

    def test_invalid_enum_member(self) -> None:
        errors = run(
            """
            enum Status { DRAFT PUBLISHED }
            type Movie @node { status: Status @default(value: ARCHIVED) }
            """
        )

        assert errors[0].message == "@default.value on Status fields must be of type Status"

    def test_unparseable_datetime(self) -> None:
        errors = run('type Movie @node { createdAt: DateTime @default(value: "yesterday") }')

        assert errors[0].message == "@default.value on DateTime fields must be of type DateTime"

    def test_default_outside_node(self) -> None:
        errors = run('type Movie { title: String @default(value: "x") }')

        assert errors[0].message == (
            'Directive "default" must be in a type with "@node" or within the "@relationshipProperties" directive'
        )

    def test_coalesce_on_temporal_field(self) -> None:
        errors = run('type Movie @node { createdAt: DateTime @coalesce(value: "2021-01-01T00:00:00Z") }')

        assert errors[0].message == "@coalesce is not supported by Temporal types."

    def test_coalesce_in_relationship_properties(self) -> None:
        assert run("type ActedIn @relationshipProperties { screenTime: Int @coalesce(value: 0) }") == []


class TestPopulatedByDirective:
    """`@populatedBy(callback)` needs a registered callable."""

    TYPE_DEFS = 'type Movie @node { slug: String @populatedBy(callback: "slugify") }'

    def test_missing_callbacks(self) -> None:
        errors = run(self.TYPE_DEFS)

        assert errors[0].message == "@populatedBy.callback needs to be provided in features option."
        assert errors[0].path == ["Movie", "slug", "@populatedBy", "callback"]

    def test_callback_not_callable(self) -> None:
        errors = run(self.TYPE_DEFS, callbacks={"slugify": "not a function"})

        assert errors[0].message == "@populatedBy.callback `slugify` must be of type Function."

    def test_registered_callback(self) -> None:
        assert run(self.TYPE_DEFS, callbacks={"slugify": lambda value: value}) == []

    def test_callbacks_from_features(self) -> None:
        features = Features.from_mapping({"populatedBy": {"callbacks": {"slugify": str.lower}}})

        validate_document(parse(self.TYPE_DEFS), features)


class TestFieldDirectives:
    """`@id`, `@timestamp`, `@relayId` and `@cypher` constraints."""

    def test_id_on_list(self) -> None:
        errors = run("type Movie @node { ids: [ID!]! @id }")

        assert errors[0].message == "Cannot autogenerate an array."

    def test_id_on_non_id(self) -> None:
        errors = run("type Movie @node { id: String @id }")

        assert errors[0].message == "Cannot autogenerate a non ID field."
        assert errors[0].path == ["Movie", "id", "@id"]

    def test_timestamp_without_time_zone(self) -> None:
        errors = run("type Movie @node { createdAt: LocalDateTime @timestamp }")

        assert errors[0].message == "Cannot timestamp Temporal fields lacking time zone information."

    def test_relay_id_outside_node(self) -> None:
        errors = run("type ActedIn @relationshipProperties { dbId: ID! @relayId }")

        assert errors[0].message == 'Directive "relayId" must be in a type with "@node"'

    def test_cypher_on_root_and_node_types(self) -> None:
        errors = run(
            """
            type Movie @node {
              score: Float @cypher(statement: "RETURN 1 AS s", columnName: "s")
            }

            type Query {
              count: Int @cypher(statement: "RETURN 1 AS c", columnName: "c")
            }
            """
        )

        assert errors == []

    def test_cypher_on_subscription(self) -> None:
        errors = run('type Subscription { ticks: Int @cypher(statement: "RETURN 1 AS c", columnName: "c") }')

        assert errors[0].message == (
            'Directive "cypher" must be in a type with "@node" or on root types: Query, and Mutation'
        )


class TestDirectiveArgumentValues:
    """Argument values of library directives are coerced against their definitions."""

    def test_wrong_scalar_in_list(self) -> None:
        errors = run("type Movie @node(labels: [1]) { title: String }")

        assert errors[0].message == "Invalid argument: labels, error: String cannot represent a non string value: 1"
        assert errors[0].path[:3] == ["Movie", "@node", "labels"]

    def test_wrong_enum_value(self) -> None:
        errors = run(
            """
            type Movie @node {
              actors: [Actor!]! @relationship(type: "ACTED_IN", direction: SIDEWAYS)
            }

            type Actor @node {
              name: String
            }
            """
        )

        assert len(errors) == 1
        assert errors[0].message.startswith("Invalid argument: direction, error: ")
        assert errors[0].path == ["Movie", "actors", "@relationship", "direction"]

    def test_cypher_column_name(self) -> None:
        errors = run('type Movie @node { score: Float @cypher(statement: "RETURN 1", columnName: 3) }')

        assert errors[0].message == "Invalid argument: columnName, error: String cannot represent a non string value: 3"


class TestVectorDirective:
    """`@vector(indexes)`."""

    def test_duplicate_query_name(self) -> None:
        errors = run(
            """
            type Movie @node @vector(indexes: [
              {indexName: "A", queryName: "similarMovies", embeddingProperty: "embedding"}
              {indexName: "B", queryName: "similarMovies", embeddingProperty: "embedding"}
            ]) {
              embedding: [Float!]
            }
            """
        )

        assert [error.message for error in errors] == [
            "@vector.indexes invalid value for: similarMovies. Duplicate query name."
        ]
        assert errors[0].path == ["Movie", "@vector", "indexes"]

    def test_unknown_embedding_property(self) -> None:
        errors = run(
            """
            type Movie @node @vector(indexes: [{indexName: "A", queryName: "q", embeddingProperty: "vec"}]) {
              title: String
            }
            """
        )

        assert errors[0].message == (
            "@vector.indexes invalid value for: A. Embedding property vec is not a field of Movie."
        )

    def test_not_on_node_type(self) -> None:
        errors = run(
            """
            type Movie @vector(indexes: [{indexName: "A", queryName: "q", embeddingProperty: "embedding"}]) {
              embedding: [Float!]
            }
            """
        )

        assert [error.message for error in errors] == ['Directive "vector" must be in a type with "@node"']

    def test_missing_required_index_field(self) -> None:
        errors = run(
            """
            type Movie @node @vector(indexes: [{indexName: "A", embeddingProperty: "embedding"}]) {
              embedding: [Float!]
            }
            """
        )

        assert len(errors) == 1
        assert errors[0].message.startswith("Invalid argument: indexes, error: ")
        assert errors[0].path == ["Movie", "@vector", "indexes", 0]

    def test_valid_indexes(self) -> None:
        type_defs = """
        type Movie @node @vector(indexes: [
          {indexName: "A", queryName: "similarMovies", embeddingProperty: "embedding", provider: "OpenAI"}
        ]) {
          embedding: [Float!]
        }
        """

        assert run(type_defs) == []


class TestAuthorizationDirective:
    """`@authorization` location and arguments."""

    def test_valid_usages(self) -> None:
        type_defs = """
        type Movie @node @authorization(
          filter: [{ where: { node: { id: { eq: "$jwt.sub" } } } }]
          validate: [{ when: BEFORE, where: { node: { id: { eq: "$jwt.sub" } } } }]
        ) {
          id: ID!
          secret: String @authorization(validate: [{ operations: [READ], where: { jwt: { roles: { includes: "admin" } } } }])
        }

        type Query {
          hello: String @authentication
        }
        """

        assert run(type_defs) == []

    def test_without_arguments(self) -> None:
        errors = run("type Movie @node @authorization { title: String }")

        assert [error.message for error in errors] == ["@authorization requires at least one of filter, validate arguments"]
        assert errors[0].path == ["Movie", "@authorization"]

    def test_field_without_arguments(self) -> None:
        errors = run("type Movie @node { title: String @authorization }")

        assert [error.message for error in errors] == ["@authorization requires at least one of filter, validate arguments"]
        assert errors[0].path == ["Movie", "title", "@authorization"]

    def test_not_on_node_type(self) -> None:
        errors = run('type Info @authorization(filter: [{ where: { node: { a: { eq: "x" } } } }]) { a: String }')

        assert [error.message for error in errors] == ['Directive "@authorization" must be in a type with "@node"']

    def test_field_of_non_node_type(self) -> None:
        errors = run('type Info { a: String @authorization(filter: [{ where: { node: { a: { eq: "x" } } } }]) }')

        assert [error.message for error in errors] == ['Directive "@authorization" must be in a type with "@node"']
        assert errors[0].path == ["Info", "a", "@authorization"]

    def test_root_field_suggests_authentication(self) -> None:
        errors = run(
            """
            type Movie @node {
              title: String
            }

            type Query {
              secret: String @authorization(filter: [{ where: { jwt: { roles: { includes: "admin" } } } }])
            }
            """
        )

        assert [error.message for error in errors] == [
            "Directive @authorization is not supported on fields of the Query type. Did you mean to use @authentication?"
        ]
        assert errors[0].path == ["Query", "secret", "@authorization"]


class TestSubscriptionsAuthorizationDirective:
    """`@subscriptionsAuthorization` location."""

    def test_on_node_type(self) -> None:
        type_defs = """
        type Movie @node @subscriptionsAuthorization(filter: [{ events: [CREATED], where: { node: { title: { eq: "x" } } } }]) {
          title: String
        }
        """

        assert run(type_defs) == []

    def test_not_on_node_type(self) -> None:
        errors = run('type Info @subscriptionsAuthorization(filter: [{ where: { node: { a: { eq: "x" } } } }]) { a: String }')

        assert [error.message for error in errors] == ['Directive "subscriptionsAuthorization" must be in a type with "@node"']
        assert errors[0].path == ["Info", "@subscriptionsAuthorization"]

    def test_field_of_non_node_type(self) -> None:
        errors = run('type Info { a: String @subscriptionsAuthorization(filter: [{ where: { node: { a: { eq: "x" } } } }]) }')

        assert errors[0].path == ["Info", "a", "@subscriptionsAuthorization"]


class TestAuthorizationLikeArgumentValues:
    """Argument values of `@authorization`, `@authentication` and `@subscriptionsAuthorization`."""

    def test_unknown_operation(self) -> None:
        errors = run(
            """
            type Movie @node @authorization(filter: [{ operations: [WRITE], where: { node: { id: { eq: "1" } } } }]) {
              id: ID!
            }
            """
        )

        assert len(errors) == 1
        assert errors[0].message.startswith("Invalid argument: filter, error: ")
        assert errors[0].path == ["Movie", "@authorization", "filter", 0, "operations", 0]

    def test_missing_where(self) -> None:
        errors = run("type Movie @node @authorization(validate: [{ when: AFTER }]) { id: ID! }")

        assert len(errors) == 1
        assert errors[0].message.startswith("Invalid argument: validate, error: ")
        assert errors[0].path == ["Movie", "@authorization", "validate", 0]

    def test_authentication_operations(self) -> None:
        errors = run("type Movie @node @authentication(operations: [FLY]) { id: ID! }")

        assert len(errors) == 1
        assert errors[0].path == ["Movie", "@authentication", "operations", 0]

    def test_subscription_event(self) -> None:
        errors = run(
            """
            type Movie @node @subscriptionsAuthorization(filter: [{ events: [RENAMED], where: { node: { id: { eq: "1" } } } }]) {
              id: ID!
            }
            """
        )

        assert len(errors) == 1
        assert errors[0].path == ["Movie", "@subscriptionsAuthorization", "filter", 0, "events", 0]
