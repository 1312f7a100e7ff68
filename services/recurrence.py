"""Recurrence expansion of transaction definitions into dated occurrences."""

from datetime import date
from typing import List, NamedTuple

from dateutil.relativedelta import relativedelta

from logger import get_logger
from models.bounds import Bounds
from models.errors import InvalidFrequency
from models.transaction import Transaction

logger = get_logger()

_STEPS = {
    "day": relativedelta(days=1),
    "week": relativedelta(weeks=1),
    "biweek": relativedelta(weeks=2),
    "month": relativedelta(months=1),
}


def generate_dates(frequency: str, start: date, end: date) -> List[date]:
    """Generate the occurrence dates for a frequency, both ends inclusive.

    Each date is ``start + n * step`` so month steps keep the original day of
    month where the calendar allows it (Jan 31, Feb 29, Mar 31, ...).

    Args:
        frequency: One of 'day', 'week', 'biweek' or 'month'.
        start: First occurrence.
        end: Last allowed date.

    Returns:
        Ascending list of dates; empty when ``end`` is before ``start``.

    Raises:
        InvalidFrequency: For any other frequency, including 'none'.
    """
    if frequency not in _STEPS:
        raise InvalidFrequency(frequency)

    step = _STEPS[frequency]
    dates = []
    count = 0
    current = start
    while current <= end:
        dates.append(current)
        count += 1
        current = start + step * count
    return dates


class _CacheEntry(NamedTuple):
    fingerprint: tuple
    occurrences: List[Transaction]


def _fingerprint(transaction: Transaction, bounds: Bounds) -> tuple:
    return (
        transaction.amount,
        transaction.growth,
        transaction.frequency,
        transaction.start_date,
        transaction.end_date,
        transaction.description,
        transaction.transaction_type,
        transaction.series,
        bounds,
    )


class RecurrenceService:
    """Expands recurring transactions, memoizing the result on each node."""

    def __init__(self, cache_enabled: bool = True):
        """Initialize the recurrence service.

        Args:
            cache_enabled: Reuse a node's last expansion while its fingerprint
                is unchanged.
        """
        self.cache_enabled = cache_enabled

    def expand(self, transaction: Transaction, bounds: Bounds) -> List[Transaction]:
        """Expand a transaction into its occurrences within ``bounds``.

        Occurrences run from the transaction's own start date to its end date,
        or to ``bounds.end_date`` when it has none. Growth compounds on the
        previous occurrence's amount.

        Args:
            transaction: The definition to expand.
            bounds: Query window; only its end date limits the expansion.

        Returns:
            ``[transaction]`` for a one-time transaction, otherwise a list of
            standalone one-time copies sharing the transaction's series.
        """
        if transaction.frequency == "none":
            return [transaction]

        if transaction.start_date is None:
            logger.warning(
                f"Recurring transaction {transaction.description!r} has no start date, skipping"
            )
            return []

        fingerprint = _fingerprint(transaction, bounds)
        cached = transaction.recurrence_cache
        if self.cache_enabled and cached is not None and cached.fingerprint == fingerprint:
            logger.debug(f"Recurrence cache hit for series {transaction.series}")
            return cached.occurrences

        end = transaction.end_date or bounds.end_date
        dates = generate_dates(transaction.frequency, transaction.start_date, end)
        occurrences = [transaction.occurrence_on(d) for d in dates]

        # None and 0 both mean no growth
        if transaction.growth:
            rate = 1 + transaction.growth / 100
            for i in range(1, len(occurrences)):
                previous = occurrences[i - 1].amount
                if previous is not None:
                    occurrences[i].amount = previous * rate

        logger.debug(
            f"Expanded series {transaction.series} into {len(occurrences)} occurrences"
        )

        if self.cache_enabled:
            transaction.recurrence_cache = _CacheEntry(fingerprint, occurrences)
        return occurrences
