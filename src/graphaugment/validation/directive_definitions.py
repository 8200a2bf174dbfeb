"""
Definitions of the library directives whose argument values are type-checked.

    schema = library_directives_schema()
    schema.get_directive("relationship").args["direction"].type  # RelationshipDirection!
"""

from __future__ import annotations

import functools

from graphql import GraphQLSchema, build_ast_schema, parse


LIBRARY_DIRECTIVES_SDL = '''
enum RelationshipDirection {
  IN
  OUT
}

enum RelationshipQueryDirection {
  DIRECTED
  UNDIRECTED
}

enum RelationshipNestedOperations {
  CREATE
  UPDATE
  DELETE
  CONNECT
  DISCONNECT
}

input FullTextInput {
  indexName: String!
  queryName: String
  fields: [String]!
}

scalar SelectionSet

enum AuthenticationOperation {
  CREATE
  READ
  AGGREGATE
  UPDATE
  DELETE
  CREATE_RELATIONSHIP
  DELETE_RELATIONSHIP
  SUBSCRIBE
}

enum AuthorizationFilterOperation {
  READ
  AGGREGATE
  UPDATE
  DELETE
  CREATE_RELATIONSHIP
  DELETE_RELATIONSHIP
}

enum AuthorizationValidateOperation {
  CREATE
  READ
  AGGREGATE
  UPDATE
  DELETE
  CREATE_RELATIONSHIP
  DELETE_RELATIONSHIP
}

enum AuthorizationValidateStage {
  BEFORE
  AFTER
}

enum SubscriptionsAuthorizationFilterEvent {
  CREATED
  UPDATED
  DELETED
  RELATIONSHIP_CREATED
  RELATIONSHIP_DELETED
}

"""
A filter over the node, its relationships and the JWT claims.
"""
scalar AuthorizationWhere

input AuthorizationFilterRule {
  operations: [AuthorizationFilterOperation!]! = [READ, AGGREGATE, UPDATE, DELETE, CREATE_RELATIONSHIP, DELETE_RELATIONSHIP]
  requireAuthentication: Boolean! = true
  where: AuthorizationWhere!
}

input AuthorizationValidateRule {
  operations: [AuthorizationValidateOperation!]! = [CREATE, READ, AGGREGATE, UPDATE, DELETE, CREATE_RELATIONSHIP, DELETE_RELATIONSHIP]
  when: [AuthorizationValidateStage!]! = [BEFORE, AFTER]
  requireAuthentication: Boolean! = true
  where: AuthorizationWhere!
}

input SubscriptionsAuthorizationFilterRule {
  events: [SubscriptionsAuthorizationFilterEvent!]! = [CREATED, UPDATED, DELETED, RELATIONSHIP_CREATED, RELATIONSHIP_DELETED]
  requireAuthentication: Boolean! = true
  where: AuthorizationWhere!
}

input VectorIndexInput {
  indexName: String!
  queryName: String!
  embeddingProperty: String!
  provider: String
}

"""
Instructs the engine that a field is a relationship to another node type.
"""
directive @relationship(
  type: String!
  queryDirection: RelationshipQueryDirection! = DIRECTED
  direction: RelationshipDirection!
  properties: String
  nestedOperations: [RelationshipNestedOperations!]! = [CREATE, UPDATE, DELETE, CONNECT, DISCONNECT]
  aggregate: Boolean! = true
) on FIELD_DEFINITION

"""
Marks an object type as a node, optionally with its labels.
"""
directive @node(labels: [String!]) on OBJECT

"""
Resolves the field with the given Cypher statement, reading the given column.
"""
directive @cypher(statement: String!, columnName: String!) on FIELD_DEFINITION

"""
Adds full-text query fields for the given indexes.
"""
directive @fulltext(indexes: [FullTextInput]!) on OBJECT

"""
Adds vector similarity query fields for the given indexes.
"""
directive @vector(indexes: [VectorIndexInput]!) on OBJECT

"""
Restricts reads and writes of a node type or field to the requests matching the rules.
"""
directive @authorization(filter: [AuthorizationFilterRule!], validate: [AuthorizationValidateRule!]) on OBJECT | FIELD_DEFINITION

"""
Requires an authenticated request for the given operations.
"""
directive @authentication(
  operations: [AuthenticationOperation!]! = [CREATE, READ, AGGREGATE, UPDATE, DELETE, CREATE_RELATIONSHIP, DELETE_RELATIONSHIP, SUBSCRIBE]
  jwt: AuthorizationWhere
) on OBJECT | FIELD_DEFINITION | SCHEMA

"""
Filters the subscription events of a node type or field delivered to a request.
"""
directive @subscriptionsAuthorization(filter: [SubscriptionsAuthorizationFilterRule!]) on OBJECT | FIELD_DEFINITION

"""
Marks a field as resolved by a custom resolver.
"""
directive @customResolver(requires: SelectionSet) on FIELD_DEFINITION
'''

# Directives whose argument values are coerced against these definitions
CHECKED_DIRECTIVES = ("fulltext", "vector", "relationship", "node", "customResolver", "cypher")

# Directives checked by the authorization rules; matched by substring of the used name
AUTHORIZATION_LIKE_DIRECTIVES = ("subscriptionsAuthorization", "authorization", "authentication")


@functools.lru_cache(maxsize=1)
def library_directives_schema() -> GraphQLSchema:
    return build_ast_schema(parse(LIBRARY_DIRECTIVES_SDL))
