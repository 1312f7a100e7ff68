#!/usr/bin/env python3
"""
Cashpath CLI - Project recurring transaction trees and what-if scenarios.

Usage:
    python -m cli <command> [options]

Commands:
    path       Print the balance path and key points of a definition file
    value      Print the value of a definition file on a date
    scenario   List scenarios and project their paths

Examples:
    python -m cli path household.yaml --start 2024-01-01 --end 2024-12-31
    python -m cli value household.yaml --date 2024-06-30
    python -m cli scenario list household.yaml
    python -m cli scenario path household.yaml --name Raise --json
"""

import sys
import argparse
from cli import projection, scenarios
from config import load_config
from services.base import Services
from logger import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Cashpath - Cash-flow projection for recurring transactions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    # Register each command's subparser
    projection.setup_parser(subparsers)
    scenarios.setup_parser(subparsers)
    return parser


def main(argv=None):
    """Main CLI entry point with subcommands."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)
            services = Services(config)
            args.func(args, services)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
