"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from beverage_tracker.domain.beverages import BeverageType


class StatsPeriod(Enum):
    """Granularity of a statistics report."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class DrinkStats:
    """Per-type quantities for one time bucket."""

    date: datetime
    coffee_count: int = 0
    tea_count: int = 0
    lemon_tea_count: int = 0
    bottled_count: int = 0

    @classmethod
    def from_counts(
        cls, date: datetime, counts: dict[BeverageType, int]
    ) -> "DrinkStats":
        return cls(
            date=date,
            coffee_count=counts.get(BeverageType.COFFEE, 0),
            tea_count=counts.get(BeverageType.TEA, 0),
            lemon_tea_count=counts.get(BeverageType.LEMON_TEA, 0),
            bottled_count=counts.get(BeverageType.BOTTLED, 0),
        )

    def count_for(self, beverage_type: BeverageType) -> int:
        """Return the bucket quantity for a beverage type."""
        return getattr(self, _COUNT_FIELDS[beverage_type])

    @property
    def total_count(self) -> int:
        return (
            self.coffee_count
            + self.tea_count
            + self.lemon_tea_count
            + self.bottled_count
        )


_COUNT_FIELDS: dict[BeverageType, str] = {
    BeverageType.COFFEE: "coffee_count",
    BeverageType.TEA: "tea_count",
    BeverageType.LEMON_TEA: "lemon_tea_count",
    BeverageType.BOTTLED: "bottled_count",
}


@dataclass(frozen=True)
class PeriodReport:
    """Buckets and totals for one reporting period."""

    period: StatsPeriod
    reference: datetime
    start: datetime
    end: datetime
    buckets: list[DrinkStats]
    totals: dict[BeverageType, int]
    can_go_next: bool
