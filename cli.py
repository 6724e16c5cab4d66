#!/usr/bin/env python
"""
Command-line interface for the transit route resolver

Usage:
    python cli.py generate --output routes.geojson
    python cli.py generate --relations 53181 18813 > routes.geojson
    python cli.py relation 53181
"""

import sys
import json
import argparse

from loguru import logger
from transit_routes.config import get_config
from transit_routes.errors import FatalError, FetchError
from transit_routes.pipeline import TransitRoutePipeline
from transit_routes.collectors.osm.api_client import OSMAPIClient
from transit_routes.collectors.osm.cache import OSMCache
from transit_routes.collectors.osm.fetcher import EntityFetcher
from transit_routes.collectors.osm.models import NODE, WAY, RELATION
from transit_routes.collectors.osm.relations import classify


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def _apply_cache_args(config, args):
    if args.no_cache:
        config.cache.cache_dir = None
    elif args.cache_dir:
        config.cache.cache_dir = args.cache_dir


def cmd_generate(args):
    """Resolve root relations and write route geometries"""
    setup_logging(args.verbose)

    config = get_config()
    _apply_cache_args(config, args)
    if args.share_cache:
        config.share_member_cache = True

    try:
        pipeline = TransitRoutePipeline(config=config)
        result = pipeline.run(args.relations)
    except (FatalError, ValueError) as e:
        logger.error(f"Failed to generate routes: {e}")
        return 1

    if args.output:
        pipeline.save(result.collection, args.output)
        logger.info(f"✓ Generated: {args.output}")
    else:
        print(pipeline.to_json(result.collection))

    logger.info(f"  Routes: {len(result.collection.features)}")
    logger.info(f"  Skipped entities: {len(result.errors)}")

    if args.summary:
        summary = {
            "routes": [
                {
                    "id": f.properties.get("id"),
                    "parent": f.properties.get("parent"),
                    "name": f.properties.get("name"),
                    "ref": f.properties.get("ref"),
                    "segments": len(f.geometry.coordinates),
                }
                for f in result.collection.features
            ],
            "errors": [str(issue) for issue in result.errors],
        }
        print(json.dumps(summary, indent=2), file=sys.stderr)

    return 0


def cmd_relation(args):
    """Fetch one relation and show how it is classified"""
    setup_logging(args.verbose)

    config = get_config()
    _apply_cache_args(config, args)
    cache = OSMCache(config.cache.cache_dir, config.cache.max_age_days)
    fetcher = EntityFetcher(OSMAPIClient(config.api, cache))

    try:
        relation = fetcher.fetch_relation(args.id)
    except FetchError as e:
        logger.error(f"Failed to fetch relation {args.id}: {e}")
        return 1

    info = {
        "id": relation.id,
        "type": relation.tags.get("type"),
        "name": relation.tags.get("name"),
        "classification": classify(relation).value,
        "members": {kind: relation.members_by_role(kind) for kind in (NODE, WAY, RELATION)},
    }
    print(json.dumps(info, indent=2, ensure_ascii=False))
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Transit route resolver CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Generate the default network:
    python cli.py generate --output routes.geojson

  Generate selected relations to stdout:
    python cli.py generate --relations 53181 18813

  Inspect a relation:
    python cli.py relation 53181
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    cache_parser = argparse.ArgumentParser(add_help=False)
    cache_parser.add_argument("--cache-dir", help="Response cache directory")
    cache_parser.add_argument("--no-cache", action="store_true", help="Disable the response cache")

    # Generate command
    gen_parser = subparsers.add_parser("generate", parents=[cache_parser], help="Generate route geometries")
    gen_parser.add_argument("--relations", "-r", type=int, nargs="+", help="Root relation ids (default: BVG network)")
    gen_parser.add_argument("--output", "-o", help="Output GeoJSON file (stdout if omitted)")
    gen_parser.add_argument("--share-cache", action="store_true", help="Fetch shared nodes and ways only once")
    gen_parser.add_argument("--summary", "-s", action="store_true", help="Print summary to stderr")
    gen_parser.set_defaults(func=cmd_generate)

    # Relation command
    rel_parser = subparsers.add_parser("relation", parents=[cache_parser], help="Classify a single relation")
    rel_parser.add_argument("id", type=int, help="Relation id")
    rel_parser.set_defaults(func=cmd_relation)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
