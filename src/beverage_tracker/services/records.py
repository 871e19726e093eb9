"""Beverage record logging service."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from beverage_tracker.domain.beverages import (
    DAILY_WARNING_THRESHOLD,
    BeverageRecord,
    BeverageType,
    validate_quantity,
)

logger = logging.getLogger(__name__)


class BeverageRecordRepository(Protocol):
    """Persistence interface for beverage records."""

    def create_record(
        self,
        user_id: UUID,
        beverage_type: BeverageType,
        quantity: int,
        timestamp: datetime,
    ) -> BeverageRecord:
        """Insert a record and return it with its assigned id."""

    def delete_record(self, user_id: UUID, record_id: UUID) -> bool:
        """Delete a user's record, returning False when nothing was removed."""

    def list_records(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[BeverageRecord]:
        """Return records in ``[start, end)`` ordered by timestamp."""


@dataclass
class BeverageRecordService:
    """Service for creating, listing and deleting beverage records."""

    repository: BeverageRecordRepository
    warning_threshold: int = DAILY_WARNING_THRESHOLD

    def add_record(
        self,
        user_id: UUID,
        beverage_type: BeverageType,
        quantity: int = 1,
        timestamp: datetime | None = None,
    ) -> BeverageRecord:
        """Validate and persist a new record."""
        validate_quantity(quantity)
        record = self.repository.create_record(
            user_id=user_id,
            beverage_type=beverage_type,
            quantity=quantity,
            timestamp=timestamp or datetime.now(tz=UTC),
        )
        logger.info(
            "Logged beverage",
            extra={
                "user_id": str(user_id),
                "beverage_type": beverage_type.value,
                "quantity": quantity,
            },
        )
        return record

    def delete_record(self, user_id: UUID, record_id: UUID) -> bool:
        """Delete a record owned by the user."""
        deleted = self.repository.delete_record(user_id, record_id)
        if not deleted:
            logger.info("Record not found for delete", extra={"record_id": record_id})
        return deleted

    def list_records(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[BeverageRecord]:
        """Return records in the half-open range."""
        return self.repository.list_records(user_id, start, end)

    def records_for_day(
        self, user_id: UUID, day: date, timezone_name: str
    ) -> list[BeverageRecord]:
        """Return a local calendar day's records in timestamp order."""
        tz = ZoneInfo(timezone_name)
        start = datetime.combine(day, time.min, tzinfo=tz)
        end = start + timedelta(days=1)
        records = self.repository.list_records(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return sorted(records, key=lambda record: record.timestamp)

    def day_count(self, user_id: UUID, day: date, timezone_name: str) -> int:
        """Return the total quantity logged on a local calendar day."""
        records = self.records_for_day(user_id, day, timezone_name)
        return sum(record.quantity for record in records)

    def today_count(
        self, user_id: UUID, timezone_name: str, now: datetime | None = None
    ) -> int:
        """Return the total quantity logged today in the user's timezone."""
        current = now or datetime.now(tz=UTC)
        today = current.astimezone(ZoneInfo(timezone_name)).date()
        return self.day_count(user_id, today, timezone_name)

    def warning_total(
        self, user_id: UUID, timezone_name: str, now: datetime | None = None
    ) -> int | None:
        """Return today's total once it reaches the warning threshold, else None."""
        total = self.today_count(user_id, timezone_name, now)
        if total >= self.warning_threshold:
            return total
        return None


def timestamp_on_day(
    day: date, timezone_name: str, now: datetime | None = None
) -> datetime:
    """Place a record on a local calendar day at the current local time of day."""
    tz = ZoneInfo(timezone_name)
    local_now = (now or datetime.now(tz=UTC)).astimezone(tz)
    return datetime.combine(day, local_now.time(), tzinfo=tz)


def day_summary(records: list[BeverageRecord]) -> dict[BeverageType, int]:
    """Sum quantities per beverage type, omitting types with no records."""
    totals: dict[BeverageType, int] = {}
    for beverage_type in BeverageType:
        quantity = sum(
            record.quantity
            for record in records
            if record.beverage_type is beverage_type
        )
        if quantity:
            totals[beverage_type] = quantity
    return totals
