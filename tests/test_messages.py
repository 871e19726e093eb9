"""Tests for bot message formatting."""

from datetime import UTC, date, datetime

from beverage_tracker.api.messages import (
    NO_DRINKS_TEXT,
    day_records_keyboard,
    format_added,
    format_counts,
    format_report,
    period_title,
    report_keyboard,
)
from beverage_tracker.domain.beverages import BeverageType
from beverage_tracker.domain.stats import DrinkStats, PeriodReport, StatsPeriod
from tests.conftest import at, make_record


def _report(
    period: StatsPeriod,
    start: datetime,
    end: datetime,
    buckets: list[DrinkStats] | None = None,
    totals: dict[BeverageType, int] | None = None,
    can_go_next: bool = False,
) -> PeriodReport:
    return PeriodReport(
        period=period,
        reference=start,
        start=start,
        end=end,
        buckets=buckets or [],
        totals=totals or {},
        can_go_next=can_go_next,
    )


def test_format_counts_follows_enum_order() -> None:
    counts = {BeverageType.BOTTLED: 1, BeverageType.COFFEE: 2, BeverageType.TEA: 0}

    assert format_counts(counts) == "☕️ 2  🥤 1"


def test_format_added_shows_multiplier() -> None:
    record = make_record(at(2024, 3, 5, 8), BeverageType.TEA, quantity=3)

    assert format_added(record, 4) == "Logged 🧋 x3 milk tea. Today's total: 4."


def test_period_titles() -> None:
    day = _report(StatsPeriod.DAY, at(2024, 3, 5), at(2024, 3, 6))
    week = _report(StatsPeriod.WEEK, at(2024, 2, 26), at(2024, 3, 4))
    month = _report(StatsPeriod.MONTH, at(2024, 2, 1), at(2024, 3, 1))

    assert period_title(day) == "Tuesday, 2024-03-05"
    assert period_title(week) == "Feb 26 - Mar 03, 2024"
    assert period_title(month) == "February 2024"


def test_format_report_without_drinks() -> None:
    report = _report(StatsPeriod.MONTH, at(2024, 2, 1), at(2024, 3, 1))

    assert format_report(report) == f"📊 February 2024\n{NO_DRINKS_TEXT}"


def test_format_report_lists_buckets() -> None:
    buckets = [
        DrinkStats(date=at(2024, 3, 5, 8), coffee_count=1, tea_count=1),
        DrinkStats(date=at(2024, 3, 5, 14), bottled_count=2),
    ]
    report = _report(
        StatsPeriod.DAY,
        at(2024, 3, 5),
        at(2024, 3, 6),
        buckets=buckets,
        totals={BeverageType.COFFEE: 1, BeverageType.TEA: 1, BeverageType.BOTTLED: 2},
    )

    assert format_report(report).splitlines() == [
        "📊 Tuesday, 2024-03-05",
        "☕️ 1  🧋 1  🥤 2",
        "",
        "08:00: ☕️ 1  🧋 1",
        "14:00: 🥤 2",
    ]


def test_report_keyboard_hides_next_for_current_period() -> None:
    current = _report(StatsPeriod.WEEK, at(2024, 3, 4), at(2024, 3, 11))
    past = _report(
        StatsPeriod.WEEK, at(2024, 2, 26), at(2024, 3, 4), can_go_next=True
    )
    today = date(2024, 3, 5)

    current_row = report_keyboard(current, today)["inline_keyboard"][0]
    past_row = report_keyboard(past, today)["inline_keyboard"][0]

    assert [button["callback_data"] for button in current_row] == [
        "st:week:2024-03-04:prev",
        "st:week:2024-03-05",
    ]
    assert past_row[-1]["callback_data"] == "st:week:2024-02-26:next"


def test_day_records_keyboard_for_today() -> None:
    record = make_record(at(2024, 3, 5, 8, 5), quantity=2)
    today = date(2024, 3, 5)

    keyboard = day_records_keyboard([record], UTC, today, today)

    assert keyboard == {
        "inline_keyboard": [
            [{"text": "🗑 08:05 ☕️ x2", "callback_data": f"d:{record.id}:20240305"}],
            [{"text": "◀", "callback_data": "dd:20240305:prev"}],
        ]
    }


def test_day_records_keyboard_for_past_day() -> None:
    keyboard = day_records_keyboard([], UTC, date(2024, 3, 1), date(2024, 3, 5))

    assert keyboard["inline_keyboard"] == [
        [
            {"text": "◀", "callback_data": "dd:20240301:prev"},
            {"text": "Today", "callback_data": "dd:20240305"},
            {"text": "▶", "callback_data": "dd:20240301:next"},
        ]
    ]


def test_format_added_for_past_day() -> None:
    record = make_record(at(2024, 3, 1, 8), BeverageType.BOTTLED)

    assert format_added(record, 2, date(2024, 3, 1)) == (
        "Logged 🥤 bottled drink. Total for 2024-03-01: 2."
    )
