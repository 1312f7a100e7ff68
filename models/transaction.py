"""Transaction tree node.

A ``Transaction`` is either a leaf carrying an authoritative amount, or a
branch whose amount is the sum of its children. Parents own their children
through the ``children`` list; the link back to the parent is a weak
reference, so a tree never holds a strong reference cycle.
"""

import uuid
import weakref
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterator, List, Mapping, Optional, Union

from dateutil import parser as date_parser

from logger import get_logger
from models.errors import InvalidFrequency, TreeStructureError

logger = get_logger()

FREQUENCIES = ("none", "day", "week", "biweek", "month")

# Attribute name -> accepted definition keys (transport spelling first)
_DEFINITION_KEYS = {
    "growth": ("growth",),
    "description": ("description",),
    "amount": ("amount",),
    "start_date": ("startDate", "start_date"),
    "end_date": ("endDate", "end_date"),
    "frequency": ("frequency",),
    "transaction_type": ("transactionType", "transaction_type"),
    "series": ("series",),
}


def _uuid4_series() -> str:
    return str(uuid.uuid4())


_series_factory: Callable[[], str] = _uuid4_series


def set_series_factory(factory: Optional[Callable[[], str]]) -> None:
    """Replace the series id generator. ``None`` restores the uuid4 default."""
    global _series_factory
    _series_factory = factory or _uuid4_series


def generate_series_id() -> str:
    """Produce a new series identifier."""
    return _series_factory()


def parse_date(value) -> Optional[date]:
    """Coerce a date-like value to a ``date``.

    Unparseable values are logged and returned as ``None`` instead of raising.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(str(value).strip()).date()
    except (ValueError, OverflowError):
        logger.warning(f"Ignoring invalid date {value!r}")
        return None


def parse_decimal(value, field_name: str = "amount") -> Optional[Decimal]:
    """Coerce a numeric value to ``Decimal``.

    Raises:
        ValueError: If the value is not numeric.
    """
    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"invalid {field_name} value: {value!r}")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"invalid {field_name} value: {value!r}") from exc


@dataclass(eq=False)
class Transaction:
    description: Optional[str] = None
    amount: Optional[Decimal] = None  # derived from children on a branch
    growth: Optional[Decimal] = None  # percent per occurrence
    start_date: Optional[date] = None
    end_date: Optional[date] = None  # None recurs through the query bounds
    frequency: str = "none"  # one of FREQUENCIES
    transaction_type: str = "plain"
    series: Optional[str] = None
    children: List["Transaction"] = field(default_factory=list, repr=False)
    scenarios: list = field(default_factory=list, repr=False)
    accumulator: List["Transaction"] = field(default_factory=list, repr=False)

    def __post_init__(self):
        if self.frequency not in FREQUENCIES:
            raise InvalidFrequency(self.frequency)
        self.amount = parse_decimal(self.amount, "amount")
        self.growth = parse_decimal(self.growth, "growth")
        self.start_date = parse_date(self.start_date)
        self.end_date = parse_date(self.end_date)
        if not self.series:
            self.series = generate_series_id()
        self._parent_ref: Optional[weakref.ref] = None
        # Set by RecurrenceService: (fingerprint, occurrences)
        self.recurrence_cache = None

    @classmethod
    def from_definition(cls, definition: Mapping) -> "Transaction":
        """Create a standalone node from a plain definition mapping.

        Nested ``children`` are ignored here; see :meth:`add_children`.
        """
        values = {}
        for attr, keys in _DEFINITION_KEYS.items():
            for key in keys:
                if definition.get(key) is not None:
                    values[attr] = definition[key]
                    break

        return cls(
            description=values.get("description") or None,
            amount=values.get("amount"),
            growth=values.get("growth"),
            start_date=values.get("start_date"),
            end_date=values.get("end_date"),
            frequency=values.get("frequency") or "none",
            transaction_type=values.get("transaction_type") or "plain",
            series=values.get("series") or None,
        )

    @property
    def parent_transaction(self) -> Optional["Transaction"]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def depth(self) -> int:
        """-1 for a standalone node, else one more than the live parent's depth."""
        parent = self.parent_transaction
        return -1 if parent is None else parent.depth + 1

    @property
    def root(self) -> "Transaction":
        node = self
        while node.parent_transaction is not None:
            node = node.parent_transaction
        return node

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator["Transaction"]:
        """Iterate over this node and its descendants, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def _set_parent(self, parent: Optional["Transaction"]) -> None:
        self._parent_ref = weakref.ref(parent) if parent is not None else None

    def add_child(self, child: Union[Mapping, "Transaction"]) -> "Transaction":
        """Attach a child node, building it first if given a definition.

        Args:
            child: A definition mapping or an existing Transaction. An existing
                node is detached from its current parent before attaching.

        Returns:
            The attached Transaction.

        Raises:
            TreeStructureError: If the node is this node or one of its ancestors.
        """
        if isinstance(child, Transaction):
            node = child
            ancestor = self
            while ancestor is not None:
                if ancestor is node:
                    raise TreeStructureError(
                        "cannot attach a transaction beneath itself"
                    )
                ancestor = ancestor.parent_transaction
            if node.parent_transaction is not None:
                node.detach()
        else:
            node = Transaction.from_definition(child)

        node._set_parent(self)
        self.children.append(node)
        self._reaggregate_ancestors()
        return node

    def add_children(self, definitions) -> List["Transaction"]:
        """Attach several definitions, recursing into nested ``children`` lists."""
        added = []
        for definition in definitions:
            node = self.add_child(definition)
            if not isinstance(definition, Transaction):
                nested = definition.get("children") or []
                if nested:
                    node.add_children(nested)
            added.append(node)
        return added

    def remove_child(self, index: int) -> Optional["Transaction"]:
        """Detach the child at ``index``; out-of-range indices are ignored."""
        if index < 0 or index >= len(self.children):
            return None
        child = self.children.pop(index)
        child._set_parent(None)
        self._reaggregate_ancestors()
        return child

    def detach(self) -> None:
        """Remove this node from its parent.

        Raises:
            TreeStructureError: If the node has no parent.
        """
        parent = self.parent_transaction
        if parent is None:
            raise TreeStructureError("cannot detach a root transaction")
        for index, child in enumerate(parent.children):
            if child is self:
                parent.remove_child(index)
                return

    def resolve_amount(self) -> Optional[Decimal]:
        """Return the node's amount, re-summing children on a branch."""
        if self.children:
            self.amount = sum(
                (child.resolve_amount() or Decimal(0) for child in self.children),
                Decimal(0),
            )
        return self.amount

    def set_amount(self, amount=None) -> Optional[Decimal]:
        """Set a leaf amount (branches recompute from children) and update ancestors."""
        if not self.children:
            self.amount = parse_decimal(amount, "amount")
        self._reaggregate_ancestors()
        return self.amount

    def _reaggregate_ancestors(self) -> None:
        node = self
        while node is not None:
            node.resolve_amount()
            node = node.parent_transaction

    def set_start_dates(self, start_date: date, only_earlier: bool = False) -> None:
        """Overwrite the start date of every node in this subtree.

        Args:
            start_date: New start date.
            only_earlier: Only move start dates that are earlier than ``start_date``.
        """
        for node in self.walk():
            if (
                not only_earlier
                or node.start_date is None
                or node.start_date < start_date
            ):
                node.start_date = start_date

    def clone(
        self, divorce_parent: bool = True, new_series: bool = False
    ) -> "Transaction":
        """Deep copy this subtree.

        Args:
            divorce_parent: When False the copy is attached to this node's
                parent as a sibling.
            new_series: Give every copied node a fresh series id.
        """
        copy = Transaction(
            description=self.description,
            amount=self.amount,
            growth=self.growth,
            start_date=self.start_date,
            end_date=self.end_date,
            frequency=self.frequency,
            transaction_type=self.transaction_type,
            series=None if new_series else self.series,
        )
        for child in self.children:
            copy.add_child(child.clone(new_series=new_series))

        parent = self.parent_transaction
        if not divorce_parent and parent is not None:
            parent.add_child(copy)
        return copy

    def occurrence_on(
        self, on_date: date, amount: Optional[Decimal] = None
    ) -> "Transaction":
        """Build a one-time, standalone copy of this node dated ``on_date``."""
        return Transaction(
            description=self.description,
            amount=self.amount if amount is None else amount,
            growth=self.growth,
            start_date=on_date,
            end_date=None,
            frequency="none",
            transaction_type=self.transaction_type,
            series=self.series,
        )

    def serialize(self) -> dict:
        """Flat snapshot for transport, without tree structure."""
        return {
            "growth": float(self.growth) if self.growth is not None else None,
            "description": self.description,
            "amount": float(self.amount) if self.amount is not None else None,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "frequency": self.frequency,
            "series": self.series,
            "transactionType": self.transaction_type,
        }
