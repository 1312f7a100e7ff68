from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from models.transaction import Transaction


@dataclass(eq=False)
class Scenario:
    """A forked copy of part of a transaction tree, diverging on ``start_date``.

    ``transactions`` is the scenario's own tree; its opening leaf carries the
    base tree's balance through the day before the fork. ``base_transaction``
    is the tree the scenario was forked from, kept alive by the scenario.
    """

    name: str
    start_date: date
    transactions: Optional[Transaction]
    base_transaction: Optional[Transaction] = field(default=None, repr=False)
    opening_series: Optional[str] = None  # series of the opening balance leaf
