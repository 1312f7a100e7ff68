"""Loading transaction trees and scenarios from definition files.

A definition file is YAML (or JSON, by extension) holding one root mapping:

    description: Household
    children:
      - description: Salary
        amount: 2000
        frequency: biweek
        startDate: 2024-01-05
      - description: Rent
        amount: -1500
        frequency: month
        startDate: 2024-01-01
    scenarios:
      - name: Raise
        startDate: 2024-06-01
        clone:
          - description: Salary
            amount: 2400
        children:
          - description: Bonus
            amount: 500
            startDate: 2024-07-01
"""

import json
from pathlib import Path
from typing import List, Optional

import yaml

from logger import get_logger
from models.errors import InvalidFrequency
from models.scenario import Scenario
from models.transaction import FREQUENCIES, Transaction, parse_decimal

logger = get_logger()


def load_definition_file(path: Path) -> dict:
    """Load a definition file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file doesn't hold a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Definition file not found: {path}")

    logger.info(f"Loading definitions from {path}")

    with open(path, "r") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Definition file must contain a mapping: {path}")
    return data


def build_tree(definition: dict) -> Transaction:
    """Build a transaction tree from a root definition with nested children."""
    root = Transaction.from_definition(definition)
    root.add_children(definition.get("children") or [])
    return root


def find_by_description(root: Transaction, description: str) -> Optional[Transaction]:
    """Find the first node (pre-order) with the given description."""
    for node in root.walk():
        if node.description == description:
            return node
    return None


def build_scenarios(root: Transaction, definition: dict, scenario_service) -> List[Scenario]:
    """Create the scenarios listed under ``scenarios`` in a root definition.

    Each ``clone`` entry names a base node by description, optionally with
    ``amount``, ``growth`` or ``frequency`` overrides for the copy.

    Raises:
        ValueError: If a cloned description doesn't match any base node.
    """
    scenarios = []
    for entry in definition.get("scenarios") or []:
        scenario = scenario_service.add_scenario(
            root, entry.get("startDate") or entry.get("start_date"), entry.get("name")
        )

        for item in entry.get("clone") or []:
            if isinstance(item, str):
                item = {"description": item}
            node = find_by_description(root, item.get("description"))
            if node is None:
                raise ValueError(
                    f"Scenario {scenario.name!r}: no transaction named {item.get('description')!r}"
                )
            clone = scenario_service.clone_transaction_to_scenario(scenario, node)
            _apply_overrides(clone, item)

        scenario.transactions.add_children(entry.get("children") or [])
        scenarios.append(scenario)
    return scenarios


def _apply_overrides(clone: Transaction, item: dict) -> None:
    if "frequency" in item:
        if item["frequency"] not in FREQUENCIES:
            raise InvalidFrequency(item["frequency"])
        clone.frequency = item["frequency"]
    if "growth" in item:
        clone.growth = parse_decimal(item["growth"], "growth")
    if "amount" in item:
        clone.set_amount(item["amount"])
