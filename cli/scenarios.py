#!/usr/bin/env python3

import json
from pathlib import Path

from cli.definitions import build_scenarios, build_tree, load_definition_file
from cli.projection import add_window_arguments, print_path_result, resolve_bounds
from logger import get_logger

logger = get_logger()


def _load_scenario(args, services):
    definition = load_definition_file(Path(args.file))
    root = build_tree(definition)
    scenarios = build_scenarios(root, definition, services.scenarios)
    for scenario in scenarios:
        if scenario.name == args.name:
            return root, scenario
    raise ValueError(f"Scenario '{args.name}' not found in {args.file}")


def cmd_list(args, services):
    """List the scenarios of a definition file."""
    definition = load_definition_file(Path(args.file))
    root = build_tree(definition)
    scenarios = build_scenarios(root, definition, services.scenarios)

    if not scenarios:
        logger.info("No scenarios found.")
        return

    logger.info("\nScenarios:")
    logger.info("=" * 80)
    for scenario in scenarios:
        opening = scenario.transactions.children[0]
        logger.info(f"Name: {scenario.name}")
        logger.info(f"Start date: {scenario.start_date.isoformat()}")
        logger.info(f"Opening balance: {opening.amount:.2f}")
        logger.info(f"Transactions: {len(scenario.transactions.children) - 1}")
        logger.info("-" * 80)

    logger.info(f"\nTotal scenarios: {len(scenarios)}")


def cmd_path(args, services):
    """Print the balance path of one scenario."""
    _, scenario = _load_scenario(args, services)
    bounds = resolve_bounds(args, services.config)

    if args.scenario_only:
        gathered = services.scenarios.gather(scenario, bounds, scenario_only=True)
        result = services.paths.generate_path(scenario.transactions, bounds, gathered)
    else:
        result = services.scenarios.generate_scenario_path(scenario, bounds)
    print_path_result(result, args.json)


def cmd_value(args, services):
    """Print the value of one scenario at the end of the window."""
    _, scenario = _load_scenario(args, services)
    bounds = resolve_bounds(args, services.config)

    value = services.scenarios.value_on_date(scenario, bounds)
    if args.json:
        print(
            json.dumps(
                {
                    "scenario": scenario.name,
                    "date": bounds.end_date.isoformat(),
                    "value": float(value),
                }
            )
        )
    else:
        logger.info(
            f"Value of '{scenario.name}' on {bounds.end_date.isoformat()}: {value:.2f}"
        )


def setup_parser(subparsers):
    """Setup scenario subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "scenario",
        help="Inspect what-if scenarios",
        description="List scenarios and project their balance paths",
    )

    scenario_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available scenario commands",
        dest="subcommand",
        required=True,
    )

    # scenario list
    list_parser = scenario_subparsers.add_parser("list", help="List scenarios")
    list_parser.add_argument("file", help="YAML or JSON definition file")
    list_parser.set_defaults(func=cmd_list)

    # scenario path
    path_parser = scenario_subparsers.add_parser(
        "path", help="Balance path of a scenario merged with its base"
    )
    path_parser.add_argument("file", help="YAML or JSON definition file")
    path_parser.add_argument("--name", required=True, help="Scenario name")
    path_parser.add_argument(
        "--scenario-only",
        action="store_true",
        help="Exclude base transactions from the path",
    )
    add_window_arguments(path_parser)
    path_parser.set_defaults(func=cmd_path)

    # scenario value
    value_parser = scenario_subparsers.add_parser(
        "value", help="Value of a scenario at the end of the window"
    )
    value_parser.add_argument("file", help="YAML or JSON definition file")
    value_parser.add_argument("--name", required=True, help="Scenario name")
    add_window_arguments(value_parser)
    value_parser.set_defaults(func=cmd_value)
