"""Scenario service: forks a transaction tree and reconciles it with the base."""

from datetime import timedelta
from decimal import Decimal
from typing import List, Optional

from logger import get_logger
from models.bounds import Bounds
from models.errors import TreeStructureError
from models.path import PathResult
from models.scenario import Scenario
from models.transaction import Transaction, parse_date

logger = get_logger()

OPENING_DESCRIPTION = "Scenario Initial Amount"


class ScenarioService:
    """Service for creating and valuing scenarios.

    Args:
        gatherer: GatherService used to collect occurrences.
        paths: PathService used for valuation and path generation.
    """

    def __init__(self, gatherer, paths):
        self.gatherer = gatherer
        self.paths = paths

    def add_scenario(
        self, transaction: Transaction, start_date, name: Optional[str] = None
    ) -> Scenario:
        """Fork a new scenario from ``transaction`` on ``start_date``.

        The scenario tree starts with an opening leaf worth the base tree's
        value through the day before ``start_date``.

        Args:
            transaction: Base transaction tree to fork from.
            start_date: First day of the scenario.
            name: Scenario name, defaults to 'Scenario <n>'.

        Returns:
            The new Scenario, also appended to ``transaction.scenarios``.

        Raises:
            ValueError: If ``start_date`` is missing or not a valid date.
        """
        fork_date = parse_date(start_date)
        if fork_date is None:
            raise ValueError(f"Invalid scenario start date: {start_date!r}")

        number = len(transaction.scenarios) + 1
        description = (
            f"{transaction.description} - Scenario{number}"
            if transaction.description
            else f"Scenario{number}"
        )
        root = Transaction(description=description, start_date=fork_date)

        opening_value = self.paths.value_on_date(
            transaction, fork_date - timedelta(days=1)
        )
        opening = root.add_child(
            Transaction(
                description=OPENING_DESCRIPTION,
                amount=opening_value,
                frequency="none",
                start_date=fork_date,
                growth=0,
            )
        )

        scenario = Scenario(
            name=name or f"Scenario {number}",
            start_date=fork_date,
            transactions=root,
            base_transaction=transaction,
            opening_series=opening.series,
        )
        transaction.scenarios.append(scenario)
        logger.debug(
            f"Created {scenario.name!r} on {fork_date} with opening balance {opening_value}"
        )
        return scenario

    def delete_scenario(self, transaction: Transaction, index: int) -> Optional[Scenario]:
        """Remove the scenario at ``index``; out-of-range indices are ignored."""
        if index < 0 or index >= len(transaction.scenarios):
            return None
        return transaction.scenarios.pop(index)

    def clone_transaction_to_scenario(
        self, scenario: Scenario, transaction: Transaction
    ) -> Transaction:
        """Copy a base subtree into the scenario, starting on the fork date.

        The copy keeps the series ids of the original nodes, so the base
        occurrences of those series are replaced from the fork date on.

        Raises:
            TreeStructureError: If the scenario's transactions were removed.
        """
        if scenario.transactions is None:
            raise TreeStructureError(f"Scenario {scenario.name!r} has no transactions")

        clone = transaction.clone(divorce_parent=True, new_series=False)
        clone.set_start_dates(scenario.start_date)
        return scenario.transactions.add_child(clone)

    def remove_transaction_from_scenario(
        self, scenario: Scenario, transaction: Transaction
    ) -> None:
        """Detach a transaction from the scenario tree.

        Removing the scenario's root clears the scenario's transactions.
        """
        if transaction.parent_transaction is not None:
            transaction.detach()
        elif transaction is scenario.transactions:
            scenario.transactions = None

    def gather(
        self, scenario: Scenario, bounds: Bounds, scenario_only: bool = False
    ) -> List[Transaction]:
        """Gather the occurrences of a scenario.

        Args:
            scenario: Scenario to gather.
            bounds: Query window.
            scenario_only: Return only the scenario's own occurrences.

        Returns:
            The scenario occurrences merged with every base occurrence dated
            before the fork, and with base occurrences on or after the fork
            whose series the scenario does not override. Empty when the
            scenario itself has no occurrences.
        """
        if scenario.transactions is None:
            return []

        own = self.gatherer.gather(scenario.transactions, bounds)
        if scenario_only or not own:
            return own

        base = scenario.base_transaction
        if base is None:
            return own

        overridden = {t.series for t in own}
        kept = [
            t
            for t in self.gatherer.gather(base, bounds)
            if t.start_date is not None
            and (t.start_date < scenario.start_date or t.series not in overridden)
        ]

        # The base occurrences before the fork already carry the opening balance
        own = [t for t in own if t.series != scenario.opening_series]
        return own + kept

    def value_on_date(self, scenario: Scenario, bounds: Bounds) -> Decimal:
        """Value of the scenario merged with its base through ``bounds.end_date``."""
        return self.paths.value_on_date(
            scenario.transactions,
            bounds.end_date,
            bounds,
            gathered=self.gather(scenario, bounds),
        )

    def generate_scenario_path(self, scenario: Scenario, bounds: Bounds) -> PathResult:
        """Balance path of the scenario merged with its base."""
        return self.paths.generate_path(
            scenario.base_transaction,
            bounds,
            gathered=self.gather(scenario, bounds),
        )
