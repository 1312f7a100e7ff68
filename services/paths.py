"""Cumulative balance paths and point-in-time valuation."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from logger import get_logger
from models.bounds import Bounds
from models.path import PathPoint, PathResult
from models.transaction import Transaction
from services.key_points import get_inflection_zero_points

logger = get_logger()


def daily_totals(occurrences: Iterable[Transaction]) -> List[Tuple[date, Decimal]]:
    """Sum occurrence amounts per calendar day, sorted by day.

    Occurrences without a date are skipped and missing amounts count as zero.
    """
    totals: Dict[date, Decimal] = defaultdict(Decimal)
    skipped = 0
    for occurrence in occurrences:
        if occurrence.start_date is None:
            skipped += 1
            continue
        totals[occurrence.start_date] += occurrence.amount or Decimal(0)

    if skipped:
        logger.debug(f"Skipped {skipped} occurrences without a date")
    return sorted(totals.items())


class PathService:
    """Builds balance paths from gathered occurrences.

    Args:
        gatherer: GatherService used when occurrences are not supplied.
    """

    def __init__(self, gatherer):
        self.gatherer = gatherer

    def value_on_date(
        self,
        transaction: Transaction,
        on_date: date,
        bounds: Optional[Bounds] = None,
        gathered: Optional[List[Transaction]] = None,
    ) -> Decimal:
        """Total net value accumulated through ``on_date`` (inclusive).

        Args:
            transaction: Root of the tree to value.
            on_date: Last day to include.
            bounds: Optional window; its end date is replaced by ``on_date``.
            gathered: Pre-gathered occurrences to use instead of gathering.

        Returns:
            Sum of all occurrence amounts dated on or before ``on_date``.
        """
        bounds = (bounds or Bounds(None, on_date)).with_end_date(on_date)
        if gathered is None:
            gathered = self.gatherer.gather(transaction, bounds)

        return sum(
            (value for day, value in daily_totals(gathered) if day <= on_date),
            Decimal(0),
        )

    def generate_path(
        self,
        transaction: Transaction,
        bounds: Bounds,
        gathered: Optional[List[Transaction]] = None,
    ) -> PathResult:
        """Build the cumulative balance path of a tree over ``bounds``.

        The running balance includes everything before the window; the first
        point (x=0) carries the balance at the end of ``bounds.start_date``.
        A flat point is added at ``bounds.end_date`` when the last occurrence
        falls before it. Occurrences after ``bounds.end_date`` are ignored.

        Args:
            transaction: Root of the tree.
            bounds: Window of the path.
            gathered: Pre-gathered occurrences to use instead of gathering.

        Returns:
            PathResult with the path and its key points; both empty when there
            are no occurrences.
        """
        if gathered is None:
            gathered = self.gatherer.gather(transaction, bounds)

        daily = [
            (day, value)
            for day, value in daily_totals(gathered)
            if day <= bounds.end_date
        ]
        if not daily:
            return PathResult()

        start = bounds.start_date or daily[0][0]
        window = Bounds(start, bounds.end_date)

        points = []
        balance = Decimal(0)
        for day, value in daily:
            balance += value
            points.append(PathPoint(x=(day - start).days, y=balance, date=day))

        if points[-1].date < window.end_date:
            points.append(
                PathPoint(
                    x=(window.end_date - start).days,
                    y=balance,
                    date=window.end_date,
                )
            )

        opening = Decimal(0)
        for point in points:
            if point.date > start:
                break
            opening = point.y

        path = [PathPoint(x=0, y=opening, date=start)]
        path.extend(point for point in points if point.date > start)

        return PathResult(path=path, key_points=get_inflection_zero_points(path, window))
