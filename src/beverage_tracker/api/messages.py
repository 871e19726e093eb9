"""Text and inline keyboards sent by the Telegram bot."""

from datetime import date, timedelta, tzinfo

from beverage_tracker.domain.beverages import (
    BEVERAGE_INFO,
    BeverageRecord,
    BeverageType,
)
from beverage_tracker.domain.stats import DrinkStats, PeriodReport, StatsPeriod

NO_DRINKS_TEXT = "No drinks logged."
FUTURE_DAY_TEXT = "That day hasn't started yet."
DAY_CALLBACK_FORMAT = "%Y%m%d"

HELP_TEXT = "\n".join(
    [
        "Log a drink with /coffee, /tea, /lemontea or /bottled.",
        "Add a number to log several at once, e.g. /coffee 2.",
        "Add a date to log another day, e.g. /tea 2024-03-05.",
        "/today lists today's drinks, /today 2024-03-05 another day's;",
        "tap a drink to delete it.",
        "/day, /week and /month show statistics.",
    ]
)

_BUCKET_FORMATS: dict[StatsPeriod, str] = {
    StatsPeriod.DAY: "%H:%M",
    StatsPeriod.WEEK: "%a %d",
    StatsPeriod.MONTH: "%d",
}


def format_counts(counts: dict[BeverageType, int]) -> str:
    """Render ``{type: n}`` as emoji/count pairs in enumeration order."""
    parts = [
        f"{BEVERAGE_INFO[beverage_type].emoji} {counts[beverage_type]}"
        for beverage_type in BeverageType
        if counts.get(beverage_type)
    ]
    return "  ".join(parts)


def format_added(
    record: BeverageRecord, day_total: int, day: date | None = None
) -> str:
    """Confirm a logged drink; ``day`` is set when it was logged to a past day."""
    total = "Today's total" if day is None else f"Total for {day:%Y-%m-%d}"
    return (
        f"Logged {record.label} {record.info.display_name.lower()}. "
        f"{total}: {day_total}."
    )


def format_warning(beverage_type: BeverageType, today_total: int) -> str:
    info = BEVERAGE_INFO[beverage_type]
    return (
        f"You've already had {today_total} drinks today. "
        f"How about some water instead of another {info.display_name.lower()}? 💧"
    )


def warning_keyboard(beverage_type: BeverageType, quantity: int) -> dict:
    info = BEVERAGE_INFO[beverage_type]
    return {
        "inline_keyboard": [
            [
                {"text": "Water instead 💧", "callback_data": "w"},
                {
                    "text": f"Drink anyway {info.emoji}",
                    "callback_data": f"a:{beverage_type.value}:{quantity}",
                },
            ]
        ]
    }


def format_day_records(
    day: date, records: list[BeverageRecord], totals: dict[BeverageType, int]
) -> str:
    """Format a day's records with per-type totals."""
    header = f"{day:%A, %Y-%m-%d}"
    if not records:
        return f"{header}\n{NO_DRINKS_TEXT}"
    return f"{header}\n{format_counts(totals)}\nTap a drink to delete it."


def day_records_keyboard(
    records: list[BeverageRecord], tz: tzinfo, day: date, today: date
) -> dict:
    """One delete button per record, then a previous/next day row."""
    key = f"{day:{DAY_CALLBACK_FORMAT}}"
    rows = [
        [
            {
                "text": f"🗑 {record.timestamp.astimezone(tz):%H:%M} {record.label}",
                "callback_data": f"d:{record.id}:{key}",
            }
        ]
        for record in records
    ]
    navigation = [{"text": "◀", "callback_data": f"dd:{key}:prev"}]
    if day < today:
        navigation.append(
            {"text": "Today", "callback_data": f"dd:{today:{DAY_CALLBACK_FORMAT}}"}
        )
        navigation.append({"text": "▶", "callback_data": f"dd:{key}:next"})
    rows.append(navigation)
    return {"inline_keyboard": rows}


def period_title(report: PeriodReport) -> str:
    """Human-readable title for the report's period."""
    start = report.start
    if report.period is StatsPeriod.DAY:
        return f"{start:%A, %Y-%m-%d}"
    if report.period is StatsPeriod.MONTH:
        return f"{start:%B %Y}"
    last = start.date() + timedelta(days=6)
    if last.month == start.month:
        return f"{start:%b %d} - {last:%d}, {last.year}"
    return f"{start:%b %d} - {last:%b %d}, {last.year}"


def format_report(report: PeriodReport) -> str:
    """Format a statistics report as a text chart."""
    lines = [f"📊 {period_title(report)}"]
    if not report.totals:
        lines.append(NO_DRINKS_TEXT)
        return "\n".join(lines)
    lines.append(format_counts(report.totals))
    lines.append("")
    label_format = _BUCKET_FORMATS[report.period]
    for bucket in report.buckets:
        lines.append(f"{bucket.date:{label_format}}: {_bucket_summary(bucket)}")
    return "\n".join(lines)


def report_keyboard(report: PeriodReport, today: date) -> dict:
    period = report.period.value
    reference = report.reference.date()
    row = [
        {"text": "◀", "callback_data": f"st:{period}:{reference}:prev"},
        {"text": "Today", "callback_data": f"st:{period}:{today}"},
    ]
    if report.can_go_next:
        row.append({"text": "▶", "callback_data": f"st:{period}:{reference}:next"})
    return {"inline_keyboard": [row]}


def _bucket_summary(bucket: DrinkStats) -> str:
    counts = {
        beverage_type: bucket.count_for(beverage_type)
        for beverage_type in BeverageType
    }
    return format_counts(counts) or "-"
