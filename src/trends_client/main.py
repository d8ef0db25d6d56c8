"""Command line entry point - fetch a report and print it as JSON."""

import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from typing import List, Optional

import httpx

from .config import settings
from .errors import TrendsError, WidgetUnavailableError
from .fetcher import TrendsFetcher
from .models import (
    EPOCH_START,
    Category,
    ComparisonItem,
    Query,
    Resolution,
    SourceVertical,
    TimeWindow,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_WIDGET_UNAVAILABLE = 2

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: str) -> None:
    """Configure structured JSON logging on stderr."""
    logging.basicConfig(
        level=level.upper(),
        format='{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
        datefmt="%Y-%m-%dT%H:%M:%S%z",
        stream=sys.stderr,
    )


def _enum_choice(enum_cls):
    """argparse type accepting enum member names, case-insensitive."""

    def parse(raw: str):
        try:
            return enum_cls[raw.strip().upper().replace("-", "_")]
        except KeyError:
            names = ", ".join(member.name.lower() for member in enum_cls)
            raise argparse.ArgumentTypeError(f"invalid choice {raw!r} (choose from {names})")

    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trends-client", description="Fetch Google Trends reports as JSON."
    )
    parser.add_argument(
        "--log-level", default=settings.log_level, help=f"Log level ({', '.join(LOG_LEVELS)})."
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("keywords", nargs="+", help="Keywords to compare.")
    common.add_argument("--geo", default=None, help="Geographic code applied to every keyword.")
    common.add_argument(
        "--start", type=date.fromisoformat, default=EPOCH_START, help="First day (YYYY-MM-DD)."
    )
    common.add_argument(
        "--end", type=date.fromisoformat, default=None, help="Last day (YYYY-MM-DD), default today."
    )
    common.add_argument(
        "--category", type=_enum_choice(Category), default=Category.ALL, help="Category name."
    )
    common.add_argument(
        "--source",
        type=_enum_choice(SourceVertical),
        default=SourceVertical.WEB,
        help="Search property: web, images, news, video or shopping.",
    )
    common.add_argument("--locale", default=None, help="Locale (hl parameter).")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("interest-over-time", parents=[common], help="Interest over time.")
    region = commands.add_parser("interest-by-region", parents=[common], help="Interest by region.")
    region.add_argument(
        "--resolution",
        type=_enum_choice(Resolution),
        default=Resolution.COUNTRY,
        help="country, city or dma.",
    )
    region.add_argument(
        "--include-low-volume", action="store_true", help="Include low search volume regions."
    )
    commands.add_parser("related-topics", parents=[common], help="Related topics.")
    commands.add_parser("related-queries", parents=[common], help="Related queries.")
    return parser


def build_query(args: argparse.Namespace) -> Query:
    end = args.end or TimeWindow.default().end
    window = TimeWindow(start=args.start, end=end)
    items = [ComparisonItem(keyword=kw, geo=args.geo, time=window) for kw in args.keywords]
    # The request-level category and property mirror the refinements
    return Query(comparison_items=items, category=args.category, source=args.source)


async def fetch_report(args: argparse.Namespace, client: Optional[httpx.AsyncClient] = None):
    """Run the report selected by ``args`` and return its JSON-ready form."""
    query = build_query(args)

    async with TrendsFetcher(locale=args.locale, client=client) as fetcher:
        if args.command == "interest-over-time":
            entries = await fetcher.interest_over_time(query, args.source, args.category)
            return [entry.model_dump(mode="json") for entry in entries]

        if args.command == "interest-by-region":
            entries = await fetcher.interest_by_region(
                query,
                resolution=args.resolution,
                source=args.source,
                category=args.category,
                include_low_volume_geos=args.include_low_volume,
            )
            return [entry.model_dump(mode="json") for entry in entries]

        if args.command == "related-topics":
            related = await fetcher.related_topics(query, args.source, args.category)
        else:
            related = await fetcher.related_queries(query, args.source, args.category)
        return related.model_dump(mode="json")


def main(argv: Optional[List[str]] = None, client: Optional[httpx.AsyncClient] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    # The default comes from TRENDS_LOG_LEVEL and skips argparse validation
    if args.log_level.upper() not in LOG_LEVELS:
        parser.error(f"invalid log level {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})")
    configure_logging(args.log_level)

    try:
        report = asyncio.run(fetch_report(args, client))
    except WidgetUnavailableError as e:
        logger.error(str(e))
        return EXIT_WIDGET_UNAVAILABLE
    except (TrendsError, httpx.HTTPError) as e:
        logger.error(f"{args.command} failed: {e}")
        return EXIT_FAILURE

    json.dump(report, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return EXIT_OK


def run():
    """Entry point for running the application."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    run()
