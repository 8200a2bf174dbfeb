"""
Helpers for carrying user directive usages onto generated types and fields.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from graphql import DirectiveNode

from ..core.constants import DEPRECATED, PROPAGATED_DIRECTIVES
from ..core.registry import Directive, deprecated


def as_directives(nodes: Optional[Iterable[DirectiveNode]]) -> list[Directive]:
    return [Directive.from_node(node) for node in nodes or ()]


def user_deprecations(nodes: Optional[Iterable[DirectiveNode]]) -> list[Directive]:
    """The user's own `@deprecated` usages on a field."""
    return [Directive.from_node(node) for node in nodes or () if node.name.value == DEPRECATED]


def propagated_directives(nodes: Optional[Iterable[DirectiveNode]]) -> list[Directive]:
    """Directives re-applied to every type and root field generated for an entity."""
    return [Directive.from_node(node) for node in nodes or () if node.name.value in PROPAGATED_DIRECTIVES]


def deprecation_or(user_directives: list[Directive], reason: Optional[str]) -> list[Directive]:
    """The user's deprecations win over a generated one."""
    if user_directives:
        return list(user_directives)
    if reason is None:
        return []
    return [deprecated(reason)]
