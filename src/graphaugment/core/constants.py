"""
Shared constants: scalar names, library directive names and operator lists.
"""

from __future__ import annotations


# =============================================================================
# Scalars
# =============================================================================

GRAPHQL_BUILTIN_SCALAR_TYPES = ("Boolean", "ID", "String", "Int", "Float")

TEMPORAL_SCALAR_TYPES = ("DateTime", "LocalDateTime", "Time", "LocalTime", "Date", "Duration")

SPATIAL_TYPES = ("Point", "CartesianPoint")

# Scalars the engine defines itself and adds to the output when referenced
LIBRARY_SCALAR_TYPES = ("BigInt",) + TEMPORAL_SCALAR_TYPES

NUMERIC_SCALAR_TYPES = ("Int", "Float", "BigInt")

ROOT_TYPE_NAMES = ("Query", "Mutation", "Subscription")
OPTIONAL_ROOT_TYPE_NAMES = ("Mutation", "Subscription")


# =============================================================================
# Directives
# =============================================================================

NODE = "node"
RELATIONSHIP = "relationship"
DECLARE_RELATIONSHIP = "declareRelationship"
RELATIONSHIP_PROPERTIES = "relationshipProperties"
CYPHER = "cypher"
DEFAULT = "default"
COALESCE = "coalesce"
ID_DIRECTIVE = "id"
TIMESTAMP = "timestamp"
POPULATED_BY = "populatedBy"
RELAY_ID = "relayId"
LIMIT = "limit"
FULLTEXT = "fulltext"
VECTOR = "vector"
FILTERABLE = "filterable"
SELECTABLE = "selectable"
SETTABLE = "settable"
SORTABLE = "sortable"
QUERY = "query"
MUTATION = "mutation"
SUBSCRIPTION = "subscription"
PLURAL = "plural"
PRIVATE = "private"
UNIQUE = "unique"
CUSTOM_RESOLVER = "customResolver"
AUTHORIZATION = "authorization"
AUTHENTICATION = "authentication"
SUBSCRIPTIONS_AUTHORIZATION = "subscriptionsAuthorization"
DEPRECATED = "deprecated"

# Directives consumed by the engine; never copied into the output document
LIBRARY_DIRECTIVES = frozenset(
    {
        NODE,
        RELATIONSHIP,
        DECLARE_RELATIONSHIP,
        RELATIONSHIP_PROPERTIES,
        CYPHER,
        DEFAULT,
        COALESCE,
        ID_DIRECTIVE,
        TIMESTAMP,
        POPULATED_BY,
        RELAY_ID,
        LIMIT,
        FULLTEXT,
        VECTOR,
        FILTERABLE,
        SELECTABLE,
        SETTABLE,
        SORTABLE,
        QUERY,
        MUTATION,
        SUBSCRIPTION,
        PLURAL,
        PRIVATE,
        UNIQUE,
        CUSTOM_RESOLVER,
        AUTHORIZATION,
        AUTHENTICATION,
        SUBSCRIPTIONS_AUTHORIZATION,
    }
)

# User directives that are re-applied to every type and root field generated for an entity
PROPAGATED_DIRECTIVES = frozenset({"shareable", "inaccessible"})


# =============================================================================
# Operators
# =============================================================================

RELATIONSHIP_QUANTIFIERS = ("all", "none", "single", "some")

AGGREGATION_COMPARISON_OPERATORS = ("EQUAL", "GT", "GTE", "LT", "LTE")

NUMERICAL_COMPARATORS = ("LT", "LTE", "GT", "GTE")

SPATIAL_COMPARATORS = ("DISTANCE", "LT", "LTE", "GT", "GTE")

STRING_COMPARATORS = ("CONTAINS", "STARTS_WITH", "ENDS_WITH")

EXTRA_STRING_FILTERS = ("MATCHES", "CASE_INSENSITIVE", "GT", "GTE", "LT", "LTE")


# =============================================================================
# Relationships
# =============================================================================

class NestedOperation:
    """Nested mutation operations a relationship may allow."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    DISCONNECT = "DISCONNECT"

    ALL = (CREATE, UPDATE, DELETE, CONNECT, DISCONNECT)


class RelationshipDirection:
    IN = "IN"
    OUT = "OUT"


class MutationOperation:
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    ALL = (CREATE, UPDATE, DELETE)
