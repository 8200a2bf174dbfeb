"""Shared fixtures: sample type definitions and helpers for inspecting augmented output."""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional

import pytest
from graphql import DirectiveNode, DocumentNode, parse, print_ast

from graphaugment import AugmentedSchema, Features, make_augmented_schema


MOVIE_TYPE_DEFS = """
type Movie @node {
  title: String!
  released: Int
  runtime: Duration
  boxOffice: BigInt
  actors: [Actor!]! @relationship(type: "ACTED_IN", direction: IN, properties: "ActedIn")
}

type Actor @node {
  name: String!
  movies: [Movie!]! @relationship(type: "ACTED_IN", direction: OUT, properties: "ActedIn")
}

type ActedIn @relationshipProperties {
  screenTime: Int
}
"""


@pytest.fixture
def movie_type_defs() -> str:
    return MOVIE_TYPE_DEFS


@pytest.fixture
def augment() -> Callable[..., AugmentedSchema]:
    """Augment type definitions without validating them first."""

    def _augment(type_defs: str, features: Optional[Features] = None) -> AugmentedSchema:
        return make_augmented_schema(parse(type_defs), features)

    return _augment


def find_definition(document: DocumentNode, name: str):
    for definition in document.definitions:
        if getattr(definition, "name", None) is not None and definition.name.value == name:
            return definition
    return None


@pytest.fixture
def definition() -> Callable:
    """Look up a definition of an augmented schema by name; None when absent."""

    def _definition(augmented: AugmentedSchema, name: str):
        return find_definition(augmented.type_defs, name)

    return _definition


@pytest.fixture
def fields() -> Callable:
    """Field name -> printed type for an object, interface or input definition."""

    def _fields(augmented: AugmentedSchema, name: str) -> dict[str, str]:
        node = find_definition(augmented.type_defs, name)
        assert node is not None, f"{name} is not defined"
        return {field.name.value: print_ast(field.type) for field in node.fields or ()}

    return _fields


def has_directive(node, name: str) -> bool:
    directives: tuple[DirectiveNode, ...] = node.directives or ()
    return any(directive.name.value == name for directive in directives)


@pytest.fixture
def deprecated_fields() -> Callable:
    """Names of the `@deprecated` fields of a definition."""

    def _deprecated(augmented: AugmentedSchema, name: str) -> set[str]:
        node = find_definition(augmented.type_defs, name)
        assert node is not None, f"{name} is not defined"
        return {field.name.value for field in node.fields or () if has_directive(field, "deprecated")}

    return _deprecated
