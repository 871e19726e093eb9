"""Statistics service for beverage records."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from uuid import UUID
from zoneinfo import ZoneInfo

from beverage_tracker.domain.stats import PeriodReport, StatsPeriod
from beverage_tracker.services.aggregation import (
    MONDAY,
    advance_period,
    buckets_for_period,
    can_advance,
    period_boundaries,
    totals_by_type,
)
from beverage_tracker.services.records import BeverageRecordRepository


@dataclass
class StatsService:
    """Service for computing per-period drink statistics by timezone."""

    repository: BeverageRecordRepository
    first_weekday: int = MONDAY

    def get_report(
        self,
        user_id: UUID,
        period: StatsPeriod,
        reference: date,
        timezone_name: str,
        now: datetime | None = None,
    ) -> PeriodReport:
        """Return buckets and totals for the period containing ``reference``."""
        tz = ZoneInfo(timezone_name)
        anchor = datetime.combine(reference, time.min, tzinfo=tz)
        start, end = period_boundaries(period, anchor, self.first_weekday)
        records = self.repository.list_records(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        buckets = buckets_for_period(records, period, anchor, self.first_weekday)
        current = now or datetime.now(tz=tz)
        return PeriodReport(
            period=period,
            reference=anchor,
            start=start,
            end=end,
            buckets=buckets,
            totals=totals_by_type(buckets),
            can_go_next=can_advance(period, anchor, current, self.first_weekday),
        )

    def navigate(
        self,
        period: StatsPeriod,
        reference: date,
        direction: int,
        timezone_name: str,
        now: datetime | None = None,
    ) -> date | None:
        """Return the neighbouring reference date, or None if it is in the future."""
        tz = ZoneInfo(timezone_name)
        anchor = datetime.combine(reference, time.min, tzinfo=tz)
        if direction > 0:
            current = now or datetime.now(tz=tz)
            if not can_advance(period, anchor, current, self.first_weekday):
                return None
        return advance_period(period, anchor, direction).date()
