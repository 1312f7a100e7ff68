"""Gathers the dated occurrences of a transaction tree for a bounds window."""

from typing import List

from logger import get_logger
from models.bounds import Bounds
from models.transaction import Transaction

logger = get_logger()


class GatherService:
    """Walks a transaction tree and collects its occurrences.

    Each node's ``accumulator`` is scratch space for the walk, so a gather
    pass over a tree must finish before another one starts on the same tree.

    Args:
        recurrence: RecurrenceService used to expand each node.
    """

    def __init__(self, recurrence):
        self.recurrence = recurrence

    def gather(self, transaction: Transaction, bounds: Bounds) -> List[Transaction]:
        """Collect the occurrences of the tree rooted at ``transaction``.

        The given node is treated as the root of the walk even when it is
        attached to a parent, so any subtree can be gathered on its own.

        Each direct child contributes its expansion. A child branch is
        expanded with its aggregated amount on its own schedule; the
        occurrences of its descendants are collected into its accumulator
        and dropped once it has been expanded.

        Args:
            transaction: Node to gather from.
            bounds: Query window.

        Returns:
            List of one-time occurrences.
        """
        if not transaction.children:
            return list(self.recurrence.expand(transaction, bounds))

        transaction.accumulator = []
        for child in transaction.children:
            self._gather_into_parent(child, transaction, bounds)
        gathered = transaction.accumulator
        transaction.accumulator = []

        logger.debug(f"Gathered {len(gathered)} occurrences through {bounds.end_date}")
        return gathered

    def _gather_into_parent(
        self, transaction: Transaction, parent: Transaction, bounds: Bounds
    ) -> None:
        if transaction.children:
            for child in transaction.children:
                self._gather_into_parent(child, transaction, bounds)
            transaction.resolve_amount()
            parent.accumulator.extend(self.recurrence.expand(transaction, bounds))
            transaction.accumulator = []
        else:
            parent.accumulator.extend(self.recurrence.expand(transaction, bounds))
