"""Bucketing of beverage records into day, week and month statistics.

Every function here is pure: records, the reference datetime and the week
start are passed in explicitly, and nothing is read from storage or the
clock. Period boundaries follow the wall clock of ``reference``'s timezone,
so a day always runs from local midnight to the next local midnight. Naive
datetimes are read as UTC.
"""

from calendar import monthrange
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta, tzinfo

from beverage_tracker.domain.beverages import BeverageRecord, BeverageType
from beverage_tracker.domain.stats import DrinkStats, StatsPeriod

MONDAY = 0
HOURS_PER_DAY = 24
DAYS_PER_WEEK = 7
MONTHS_PER_YEAR = 12


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a calendar month."""
    return monthrange(year, month)[1]


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def period_boundaries(
    period: StatsPeriod, reference: datetime, first_weekday: int = MONDAY
) -> tuple[datetime, datetime]:
    """Return the half-open ``[start, end)`` interval of a period."""
    day_start = start_of_day(reference)
    if period is StatsPeriod.DAY:
        return day_start, day_start + timedelta(days=1)
    if period is StatsPeriod.WEEK:
        offset = (reference.weekday() - first_weekday) % DAYS_PER_WEEK
        start = day_start - timedelta(days=offset)
        return start, start + timedelta(days=DAYS_PER_WEEK)
    start = day_start.replace(day=1)
    return start, _shift_months(start, 1)


def records_in_range(
    records: Iterable[BeverageRecord], start: datetime, end: datetime
) -> list[BeverageRecord]:
    """Return records whose timestamp falls in ``[start, end)``."""
    lower = _as_utc(start)
    upper = _as_utc(end)
    return [
        record for record in records if lower <= _as_utc(record.timestamp) < upper
    ]


def buckets_for_period(
    records: Iterable[BeverageRecord],
    period: StatsPeriod,
    reference: datetime,
    first_weekday: int = MONDAY,
) -> list[DrinkStats]:
    """Bucket records into hourly (day) or daily (week, month) stats.

    The day view is sparse and only keeps hours with at least one drink.
    Week and month views are dense and always cover every day of the period.
    """
    start, end = period_boundaries(period, reference, first_weekday)
    tz = reference.tzinfo
    if period is StatsPeriod.DAY:
        slots = [start.replace(hour=hour) for hour in range(HOURS_PER_DAY)]
    else:
        day_count = (end.date() - start.date()).days
        slots = [start + timedelta(days=offset) for offset in range(day_count)]

    counts = [dict.fromkeys(BeverageType, 0) for _ in slots]
    for record in records_in_range(records, start, end):
        local = _localize(record.timestamp, tz)
        if period is StatsPeriod.DAY:
            index = local.hour
        else:
            index = (local.date() - start.date()).days
        counts[index][record.beverage_type] += record.quantity

    buckets = [
        DrinkStats.from_counts(slot, slot_counts)
        for slot, slot_counts in zip(slots, counts, strict=True)
    ]
    if period is StatsPeriod.DAY:
        return [bucket for bucket in buckets if bucket.total_count > 0]
    return buckets


def totals_by_type(buckets: Iterable[DrinkStats]) -> dict[BeverageType, int]:
    """Sum each beverage type across buckets, omitting zero totals."""
    totals = dict.fromkeys(BeverageType, 0)
    for bucket in buckets:
        for beverage_type in BeverageType:
            totals[beverage_type] += bucket.count_for(beverage_type)
    return {key: value for key, value in totals.items() if value > 0}


def advance_period(
    period: StatsPeriod, reference: datetime, direction: int
) -> datetime:
    """Shift ``reference`` by one period unit in ``direction`` (+1 or -1).

    Month shifts clamp the day of month, so Jan 31 moves to the last day of
    February.
    """
    step = 1 if direction > 0 else -1
    if period is StatsPeriod.DAY:
        return reference + timedelta(days=step)
    if period is StatsPeriod.WEEK:
        return reference + timedelta(days=DAYS_PER_WEEK * step)
    return _shift_months(reference, step)


def can_advance(
    period: StatsPeriod,
    reference: datetime,
    now: datetime,
    first_weekday: int = MONDAY,
) -> bool:
    """Return True when moving one period forward stays out of the future.

    Months are compared on year and month only, so any reference inside the
    current month may still be reached.
    """
    target = advance_period(period, reference, 1)
    local_now = _localize(now, reference.tzinfo)
    if period is StatsPeriod.MONTH:
        return (target.year, target.month) <= (local_now.year, local_now.month)
    target_start, _ = period_boundaries(period, target, first_weekday)
    return _as_utc(target_start) <= _as_utc(local_now)


def _shift_months(value: datetime, months: int) -> datetime:
    index = value.month - 1 + months
    year = value.year + index // MONTHS_PER_YEAR
    month = index % MONTHS_PER_YEAR + 1
    day = min(value.day, days_in_month(year, month))
    return value.replace(year=year, month=month, day=day)


def _localize(value: datetime, tz: tzinfo | None) -> datetime:
    if tz is None:
        return _as_utc(value).replace(tzinfo=None)
    return _as_utc(value).astimezone(tz)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
