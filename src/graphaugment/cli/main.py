#!/usr/bin/env python3
"""
graphaugment CLI - Main entry point.

Usage:
    graphaugment augment schema.graphql             # Print the augmented SDL
    graphaugment augment schema.graphql -o out.graphql --config features.yaml
    graphaugment validate schema.graphql            # Report validation errors
    graphaugment init                               # Write a default features file
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from graphql import GraphQLSyntaxError, parse

from ..core.errors import SchemaValidationError
from ..core.features import Features
from ..generation.augment import augment_schema
from ..validation import library_directives_schema, validate_sdl
from .config import DEFAULT_FEATURES_PATH, load_features, save_features


logger = logging.getLogger(__name__)


def _format_error(error) -> str:
    path = ".".join(str(segment) for segment in error.path) if error.path else "-"
    return f"  {path}: {error.message}"


def _read_document(path: str):
    source = Path(path)
    if not source.exists():
        print(f"Error: {source} not found.")
        return None
    try:
        return parse(source.read_text())
    except GraphQLSyntaxError as e:
        print(f"Error: {source} is not valid GraphQL: {e.message}")
        return None


def cmd_augment(args: argparse.Namespace) -> int:
    """Augment a schema and write the result."""
    document = _read_document(args.schema)
    if document is None:
        return 1
    features = load_features(args.config)

    try:
        augmented = augment_schema(document, features)
    except SchemaValidationError as e:
        print(f"Validation failed with {len(e.errors)} error(s):")
        for error in e.errors:
            print(_format_error(error))
        return 1

    if args.output:
        Path(args.output).write_text(augmented.sdl + "\n")
        print(f"Wrote {args.output} ({len(augmented.type_names)} types)")
    else:
        print(augmented.sdl)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a schema without augmenting it."""
    document = _read_document(args.schema)
    if document is None:
        return 1
    features = load_features(args.config)

    errors = validate_sdl(document, schema_to_extend=library_directives_schema(), callbacks=features.callbacks)
    if errors:
        print(f"Validation failed with {len(errors)} error(s):")
        for error in errors:
            print(_format_error(error))
        return 1

    print(f"{args.schema} is valid")
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    """Write a features file with the default settings."""
    path = Path(args.config or DEFAULT_FEATURES_PATH)
    if path.exists() and not args.force:
        print(f"Error: {path} already exists. Use --force to overwrite.")
        return 1

    save_features(Features(), path)
    print(f"Created {path}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="graphaugment",
        description="graphaugment - generate a full GraphQL API schema from annotated type definitions"
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # augment
    augment_parser = subparsers.add_parser("augment", help="Augment a schema")
    augment_parser.add_argument("schema", help="Annotated schema file (.graphql)")
    augment_parser.add_argument("--output", "-o", help="Output file (default: stdout)")
    augment_parser.add_argument("--config", "-c", help="Features file (YAML)")

    # validate
    validate_parser = subparsers.add_parser("validate", help="Validate a schema")
    validate_parser.add_argument("schema", help="Annotated schema file (.graphql)")
    validate_parser.add_argument("--config", "-c", help="Features file (YAML)")

    # init
    init_parser = subparsers.add_parser("init", help="Write a default features file")
    init_parser.add_argument("--config", "-c", help=f"Features file (default: {DEFAULT_FEATURES_PATH})")
    init_parser.add_argument("--force", "-f", action="store_true", help="Overwrite existing file")

    return parser


def app(args: Optional[List[str]] = None) -> int:
    """Main CLI application."""
    parser = create_parser()
    parsed = parser.parse_args(args)
    logging.basicConfig(level=getattr(logging, parsed.log_level), format="%(levelname)s %(name)s: %(message)s")

    if not parsed.command:
        parser.print_help()
        return 0

    commands = {
        "augment": cmd_augment,
        "validate": cmd_validate,
        "init": cmd_init,
    }

    handler = commands.get(parsed.command)
    if handler:
        return handler(parsed)

    parser.print_help()
    return 1


def main() -> None:
    """Entry point for CLI."""
    sys.exit(app())


if __name__ == "__main__":
    main()
