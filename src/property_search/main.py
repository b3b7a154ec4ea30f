"""Command-line entry point: seed the database, run a search, or serve the API."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from property_search.config import Settings
from property_search.db import PropertyStorage
from property_search.logging import configure_logging, get_logger
from property_search.models import CriteriaValidationError, Property
from property_search.parsing import parse_query_params
from property_search.search import SearchFailureError, search_properties

logger = get_logger(__name__)

_PROPERTY_LIST = TypeAdapter(list[Property])


def load_properties(path: Path) -> list[Property]:
    """Read a JSON array of listings.

    Raises:
        ValidationError: If any listing is malformed.
    """
    return _PROPERTY_LIST.validate_json(path.read_bytes())


async def seed_database(settings: Settings, path: Path) -> int:
    """Load listings from ``path`` into the configured database."""
    properties = load_properties(path)
    storage = PropertyStorage(settings.database_path)
    try:
        await storage.initialize()
        saved = await storage.save_properties(properties)
        total = await storage.count()
    finally:
        await storage.close()

    logger.info("seed_complete", source=str(path), saved=saved, total=total)
    return saved


async def run_search(settings: Settings, query_string: str) -> int:
    """Run one search against the database and print the JSON result.

    Returns:
        Process exit code.
    """
    storage = PropertyStorage(settings.database_path)
    try:
        await storage.initialize()
        criteria = parse_query_params(query_string, default_limit=settings.default_page_size)
        result = await search_properties(
            criteria, storage, facet_sample_size=settings.facet_sample_size
        )
    except CriteriaValidationError as e:
        print(f"Invalid search: {e.message}", file=sys.stderr)
        return 2
    except SearchFailureError as e:
        logger.error("cli_search_failed", error=str(e))
        print(SearchFailureError.public_message, file=sys.stderr)
        return 1
    finally:
        await storage.close()

    print(json.dumps(result.to_dict(), indent=2))
    return 0


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Property Search - filter, rank and facet property listings"
    )
    parser.add_argument(
        "--seed",
        type=Path,
        metavar="FILE",
        help="Load a JSON array of listings into the database",
    )
    parser.add_argument(
        "--search",
        metavar="QUERY",
        help='Run one search and print the JSON result, e.g. "city=Miami&minBedrooms=2"',
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the HTTP search API",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging for troubleshooting",
    )
    args = parser.parse_args()

    if not (args.seed or args.search is not None or args.serve):
        parser.error("nothing to do: pass --seed, --search or --serve")

    try:
        settings = Settings()
    except ValidationError as e:
        print(f"Error: Failed to load settings. {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(
        json_output=settings.log_json,
        level=logging.DEBUG if args.debug else logging.INFO,
    )

    if args.seed:
        try:
            asyncio.run(seed_database(settings, args.seed))
        except (OSError, ValidationError) as e:
            logger.error("seed_failed", source=str(args.seed), error=str(e))
            sys.exit(1)

    if args.search is not None:
        code = asyncio.run(run_search(settings, args.search))
        if code:
            sys.exit(code)

    if args.serve:
        import uvicorn

        from property_search.web.app import create_app

        logger.info("starting_property_search", host=settings.web_host, port=settings.web_port)
        app = create_app(settings)
        uvicorn.run(app, host=settings.web_host, port=settings.web_port, log_level="info")


if __name__ == "__main__":
    main()
