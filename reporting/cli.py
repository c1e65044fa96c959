#!/usr/bin/env python3
"""
CLI for finding comparable properties.

Usage:
    python -m reporting.cli similar <property_id> [--limit N] [--algorithm JSON|@file]
    python -m reporting.cli defaults

Examples:
    # Top 5 comparables from the live appraisal roll
    python -m reporting.cli similar 123456 --limit 5

    # Offline, from a JSON file of provider rows, bias disabled
    python -m reporting.cli similar 123456 --records parcels.json \\
        --algorithm '{"priceBias": {"enabled": false}}'

    # Print the default algorithm configuration
    python -m reporting.cli defaults
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import requests

from core import (
    ComparisonRequest,
    SimilarPropertyFinder,
    SimilarityEngineError,
    get_default_algorithm,
    get_similar_property_finder,
)
from provider import InMemoryPropertyRecordSource, ProviderError
from utils.config import Config
from utils.logging_config import configure_logging

from .report import render_text_report


logger = logging.getLogger(__name__)


def read_algorithm_argument(value: str) -> str:
    """
    Return the algorithm override text.

    A value starting with @ names a file to read the JSON from. The text
    is passed through unparsed; malformed JSON is reported by the resolver.
    """
    if value.startswith("@"):
        return Path(value[1:]).read_text(encoding="utf-8")
    return value


def build_finder(args, config: Config) -> SimilarPropertyFinder:
    """Use the offline source when --records is given, the live one otherwise."""
    if args.records:
        source = InMemoryPropertyRecordSource.from_file(args.records)
        return SimilarPropertyFinder(
            source,
            base_algorithm=get_default_algorithm(config.default_algorithm_source or None),
            default_limit=config.default_result_limit,
        )
    return get_similar_property_finder()


def cmd_similar(args, config: Config) -> int:
    """Find and print comparables for one property."""
    try:
        finder = build_finder(args, config)
        custom = read_algorithm_argument(args.algorithm) if args.algorithm else None
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    request = ComparisonRequest(
        property_id=args.property_id,
        limit=args.limit,
        custom_algorithm=custom,
    )

    try:
        result = asyncio.run(finder.find(request))
    except SimilarityEngineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (requests.RequestException, ProviderError) as e:
        logger.error("Property data fetch failed: %s", e)
        print(f"Error: property data provider unavailable ({e})", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(render_text_report(result))
    return 0


def cmd_defaults(args, config: Config) -> int:
    """Print the default algorithm configuration."""
    algorithm = get_default_algorithm(config.default_algorithm_source or None)
    print(json.dumps(algorithm.to_dict(), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find the most similar properties within a legal subdivision",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    similar_parser = subparsers.add_parser("similar", help="Find comparables for a property")
    similar_parser.add_argument("property_id", help="Provider property id (propid)")
    similar_parser.add_argument(
        "--limit", "-n",
        type=int,
        default=None,
        help="Maximum comparables to return (default: 10)",
    )
    similar_parser.add_argument(
        "--algorithm", "-a",
        default=None,
        help="JSON override for weights/cutoffs/priceBias, or @file",
    )
    similar_parser.add_argument(
        "--records", "-r",
        default=None,
        help="JSON file of provider rows to search instead of the live source",
    )
    similar_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )

    subparsers.add_parser("defaults", help="Print the default algorithm configuration")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = Config.load()
    configure_logging(config.log_level)

    if args.command == "similar":
        return cmd_similar(args, config)
    if args.command == "defaults":
        return cmd_defaults(args, config)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
