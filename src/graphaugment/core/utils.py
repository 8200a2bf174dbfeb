"""
Utility functions for name derivation.

Includes:
- Case conversion (snake_case -> camelCase, first-letter casing)
- Pluralisation of entity and field names
"""

from __future__ import annotations

import functools
import re

import inflect


# =============================================================================
# Case conversion utilities
# =============================================================================

# Pre-compiled regex patterns for better performance
_SNAKE_TO_CAMEL_PATTERN = re.compile(r'_([a-z])')
_LEADING_UNDERSCORES_PATTERN = re.compile(r'^(_*)(.*)$', re.DOTALL)


def to_camel_case(name: str) -> str:
    """
    Convert snake_case to camelCase.

    Examples:
        attribute_filters -> attributeFilters
        limit_required -> limitRequired
    """
    def replace_underscore(match):
        return match.group(1).upper()

    return _SNAKE_TO_CAMEL_PATTERN.sub(replace_underscore, name)


def upper_first(name: str) -> str:
    """Upper-case the first letter: movies -> Movies."""
    return name[0].upper() + name[1:] if name else name


def lower_first(name: str) -> str:
    """Lower-case the first letter: Movie -> movie."""
    return name[0].lower() + name[1:] if name else name


# =============================================================================
# Pluralisation
# =============================================================================

_inflector = inflect.engine()


@functools.lru_cache(maxsize=None)
def plural(name: str) -> str:
    """
    Plural form of a type or field name, with the first letter lower-cased.

    Leading underscores are kept so that "_Movie" maps to "_movies".

    Examples:
        Movie -> movies
        Person -> people
        actor -> actors
    """
    underscores, word = _LEADING_UNDERSCORES_PATTERN.match(name).groups()
    if not word:
        return name
    return f"{underscores}{lower_first(_inflector.plural_noun(word))}"


@functools.lru_cache(maxsize=None)
def singular(name: str) -> str:
    """
    Singular form of a field name; names inflect already sees as singular
    are returned unchanged.

    Examples:
        actors -> actor
        movie -> movie
    """
    return _inflector.singular_noun(name) or name


def pluralize(name: str) -> str:
    """
    Plural form that keeps the casing of the first letter, for descriptions.

    Examples:
        Movie -> Movies
        MovieActorsConnection -> MovieActorsConnections
    """
    result = plural(name)
    return upper_first(result) if name[:1].isupper() else result
