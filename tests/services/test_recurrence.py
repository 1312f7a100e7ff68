from datetime import date, timedelta
from decimal import Decimal

import pytest

from models.bounds import Bounds
from models.errors import InvalidFrequency
from models.transaction import Transaction
from services.recurrence import RecurrenceService, generate_dates


class TestGenerateDates:
    """Tests for generate_dates."""

    def test_week(self, day):
        """Test that weekly dates over 70 days give 11 dates 7 days apart."""
        dates = generate_dates("week", day(0), day(70))

        assert len(dates) == 11
        assert dates[0] == day(0)
        assert dates[-1] == day(70)
        assert all(b - a == timedelta(days=7) for a, b in zip(dates, dates[1:]))

    def test_biweek(self, day):
        """Test that biweekly dates over 70 days give 6 dates 14 days apart."""
        dates = generate_dates("biweek", day(0), day(70))

        assert len(dates) == 6
        assert all(b - a == timedelta(days=14) for a, b in zip(dates, dates[1:]))

    def test_day(self, day):
        """Test one date per calendar day, both ends inclusive."""
        assert generate_dates("day", day(0), day(3)) == [day(0), day(1), day(2), day(3)]

    def test_month_keeps_day_of_month(self):
        """Test that month steps clamp to month end without drifting."""
        dates = generate_dates("month", date(2024, 1, 31), date(2024, 4, 30))

        assert dates == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
        ]

    def test_end_before_start(self, day):
        """Test that an inverted range is empty."""
        assert generate_dates("day", day(5), day(1)) == []

    @pytest.mark.parametrize("frequency", ["none", "yearly", "", None])
    def test_invalid_frequency(self, day, frequency):
        """Test that unsupported frequencies raise InvalidFrequency."""
        with pytest.raises(InvalidFrequency):
            generate_dates(frequency, day(0), day(10))


class TestExpand:
    """Tests for RecurrenceService.expand."""

    def test_one_time_is_returned_as_is(self, services, day):
        """Test that a non-recurring transaction is its own only occurrence."""
        txn = Transaction(amount=5, start_date=day(3))

        occurrences = services.recurrence.expand(txn, Bounds(day(0), day(10)))

        assert occurrences == [txn]
        assert occurrences[0] is txn

    def test_occurrences_are_one_time_copies(self, services, day):
        """Test the fields of generated occurrences."""
        txn = Transaction(
            description="Allowance",
            amount=20,
            frequency="week",
            start_date=day(0),
            transaction_type="gift",
        )

        occurrences = services.recurrence.expand(txn, Bounds(day(0), day(70)))

        assert len(occurrences) == 11
        for i, occurrence in enumerate(occurrences):
            assert occurrence is not txn
            assert occurrence.frequency == "none"
            assert occurrence.end_date is None
            assert occurrence.series == txn.series
            assert occurrence.start_date == day(7 * i)
            assert occurrence.amount == Decimal("20")
            assert occurrence.description == "Allowance"
            assert occurrence.transaction_type == "gift"

    def test_starts_from_own_start_date(self, services, day):
        """Test that expansion ignores the bounds start date."""
        txn = Transaction(amount=1, frequency="day", start_date=day(-5))

        occurrences = services.recurrence.expand(txn, Bounds(day(0), day(0)))

        assert [o.start_date for o in occurrences][0] == day(-5)
        assert len(occurrences) == 6

    def test_own_end_date_limits_expansion(self, services, day):
        """Test that a transaction's end date stops the series."""
        txn = Transaction(amount=1, frequency="week", start_date=day(0), end_date=day(20))

        occurrences = services.recurrence.expand(txn, Bounds(day(0), day(70)))

        assert [o.start_date for o in occurrences] == [day(0), day(7), day(14)]

    def test_growth_compounds(self, services):
        """Test that growth compounds on the previous occurrence."""
        txn = Transaction(
            amount=100, growth=10, frequency="month", start_date=date(2024, 1, 1)
        )

        occurrences = services.recurrence.expand(
            txn, Bounds(date(2024, 1, 1), date(2024, 3, 1))
        )

        assert [o.amount for o in occurrences] == [
            Decimal("100"),
            Decimal("110"),
            Decimal("121"),
        ]
        assert txn.amount == Decimal("100")

    def test_negative_growth(self, services, day):
        """Test that negative growth shrinks each occurrence."""
        txn = Transaction(amount=-200, growth=-50, frequency="week", start_date=day(0))

        occurrences = services.recurrence.expand(txn, Bounds(day(0), day(14)))

        assert [o.amount for o in occurrences] == [
            Decimal("-200"),
            Decimal("-100"),
            Decimal("-50"),
        ]

    def test_no_growth_when_growth_is_none(self, services, day):
        """Test that a missing growth leaves every occurrence unchanged."""
        txn = Transaction(amount=100, growth=None, frequency="week", start_date=day(0))

        occurrences = services.recurrence.expand(txn, Bounds(day(0), day(14)))

        assert [o.amount for o in occurrences] == [Decimal("100")] * 3

    def test_no_growth_when_growth_is_zero(self, services, day):
        """Test that an explicit zero growth leaves every occurrence unchanged."""
        txn = Transaction.from_definition(
            {"amount": 100, "growth": 0, "frequency": "week", "startDate": day(0)}
        )

        occurrences = services.recurrence.expand(txn, Bounds(day(0), day(14)))

        assert txn.growth == Decimal("0")
        assert [o.amount for o in occurrences] == [Decimal("100")] * 3

    def test_missing_start_date(self, services, day):
        """Test that a recurring transaction without a start date has no occurrences."""
        txn = Transaction(amount=1, frequency="day")

        assert services.recurrence.expand(txn, Bounds(day(0), day(5))) == []


class TestExpandCache:
    """Tests for the recurrence cache."""

    def test_unchanged_fingerprint_returns_cached_list(self, services, day):
        """Test that repeated expansion reuses the same occurrence list."""
        txn = Transaction(amount=10, frequency="week", start_date=day(0))

        first = services.recurrence.expand(txn, Bounds(day(0), day(28)))
        second = services.recurrence.expand(txn, Bounds(day(0), day(28)))

        assert second is first
        assert all(a is b for a, b in zip(first, second))

    def test_amount_change_invalidates(self, services, day):
        """Test that changing the amount recomputes the occurrences."""
        txn = Transaction(amount=10, frequency="week", start_date=day(0))
        bounds = Bounds(day(0), day(28))

        first = services.recurrence.expand(txn, bounds)
        txn.set_amount(15)
        second = services.recurrence.expand(txn, bounds)

        assert second is not first
        assert [o.amount for o in second] == [Decimal("15")] * 5

    def test_bounds_change_invalidates(self, services, day):
        """Test that a different bounds end recomputes the occurrences."""
        txn = Transaction(amount=10, frequency="week", start_date=day(0))

        first = services.recurrence.expand(txn, Bounds(day(0), day(28)))
        second = services.recurrence.expand(txn, Bounds(day(0), day(14)))

        assert second is not first
        assert len(second) == 3

    @pytest.mark.parametrize(
        "field,value",
        [
            ("growth", Decimal("5")),
            ("frequency", "day"),
            ("start_date", date(2024, 1, 2)),
            ("end_date", date(2024, 1, 15)),
            ("description", "renamed"),
        ],
    )
    def test_field_change_invalidates(self, services, day, field, value):
        """Test that changing any expansion input recomputes the occurrences."""
        txn = Transaction(amount=10, frequency="week", start_date=day(0))
        bounds = Bounds(day(0), day(28))

        first = services.recurrence.expand(txn, bounds)
        setattr(txn, field, value)
        second = services.recurrence.expand(txn, bounds)

        assert second is not first

    def test_cache_disabled(self, day):
        """Test that a disabled cache recomputes every time."""
        recurrence = RecurrenceService(cache_enabled=False)
        txn = Transaction(amount=10, frequency="week", start_date=day(0))
        bounds = Bounds(day(0), day(28))

        first = recurrence.expand(txn, bounds)
        second = recurrence.expand(txn, bounds)

        assert second is not first
        assert [o.start_date for o in second] == [o.start_date for o in first]
        assert txn.recurrence_cache is None
