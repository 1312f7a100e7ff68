#!/usr/bin/env python3

import json
from datetime import date, timedelta
from pathlib import Path

from cli.definitions import build_tree, load_definition_file
from logger import get_logger
from models.bounds import Bounds
from models.path import PathResult
from models.transaction import parse_date

logger = get_logger()


def parse_arg_date(value, name: str):
    """Parse a date given on the command line; None passes through."""
    if value is None:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Invalid {name} date: {value}")
    return parsed


def resolve_bounds(args, config) -> Bounds:
    """Build the path window from --start/--end, defaulting to today + window."""
    start = parse_arg_date(args.start, "start") or date.today()
    end = parse_arg_date(args.end, "end") or start + timedelta(
        days=config.default_window_days
    )
    if end < start:
        raise ValueError(f"End date {end} is before start date {start}")
    return Bounds(start, end)


def print_path_result(result: PathResult, as_json: bool) -> None:
    """Print a path and its key points as JSON or as a table."""
    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
        return

    if not result.path:
        logger.info("No transactions in range.")
        return

    logger.info(f"{'Date':<12} {'Day':>5} {'Balance':>14}")
    logger.info("-" * 33)
    for point in result.path:
        logger.info(f"{point.date.isoformat():<12} {point.x:>5} {point.y:>14.2f}")

    key_points = result.key_points.inflection_pts + result.key_points.zero_pts
    if key_points:
        logger.info("\nKey points:")
        for point in sorted(key_points, key=lambda p: (p.count, p.type)):
            logger.info(f"  {point.date.isoformat()} {point.type:<8} {point.value:.2f}")


def cmd_path(args, services):
    """Print the balance path of a definition file."""
    root = build_tree(load_definition_file(Path(args.file)))
    bounds = resolve_bounds(args, services.config)

    result = services.paths.generate_path(root, bounds)
    print_path_result(result, args.json)


def cmd_value(args, services):
    """Print the value of a definition file on a date."""
    root = build_tree(load_definition_file(Path(args.file)))
    on_date = parse_arg_date(args.date, "value") or date.today()

    value = services.paths.value_on_date(root, on_date)
    if args.json:
        print(json.dumps({"date": on_date.isoformat(), "value": float(value)}))
    else:
        logger.info(f"Value on {on_date.isoformat()}: {value:.2f}")


def add_window_arguments(parser):
    parser.add_argument("--start", help="First day of the path (YYYY-MM-DD), default today")
    parser.add_argument(
        "--end", help="Last day of the path (YYYY-MM-DD), default start + window"
    )
    parser.add_argument("--json", action="store_true", help="Print JSON output")


def setup_parser(subparsers):
    """Setup path and value subcommand parsers.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    path_parser = subparsers.add_parser(
        "path",
        help="Project the balance path of a transaction tree",
        description="Print the cumulative balance path and key points",
    )
    path_parser.add_argument("file", help="YAML or JSON definition file")
    add_window_arguments(path_parser)
    path_parser.set_defaults(func=cmd_path)

    value_parser = subparsers.add_parser(
        "value",
        help="Value of a transaction tree on a date",
        description="Print the total value accumulated through a date",
    )
    value_parser.add_argument("file", help="YAML or JSON definition file")
    value_parser.add_argument("--date", help="Valuation date (YYYY-MM-DD), default today")
    value_parser.add_argument("--json", action="store_true", help="Print JSON output")
    value_parser.set_defaults(func=cmd_value)
