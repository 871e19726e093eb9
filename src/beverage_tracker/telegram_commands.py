"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum

from beverage_tracker.domain.beverages import BeverageType
from beverage_tracker.domain.stats import StatsPeriod


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "Onboarding and timezone setup")
    COFFEE = TelegramCommand("coffee", "Log a coffee, e.g. /coffee 2 2024-03-05")
    TEA = TelegramCommand("tea", "Log a milk tea")
    LEMON_TEA = TelegramCommand("lemontea", "Log a lemon tea")
    BOTTLED = TelegramCommand("bottled", "Log a bottled drink")
    TODAY = TelegramCommand("today", "Drinks for today or /today YYYY-MM-DD")
    DAY = TelegramCommand("day", "Hourly stats for today")
    WEEK = TelegramCommand("week", "Daily stats for this week")
    MONTH = TelegramCommand("month", "Daily stats for this month")
    HELP = TelegramCommand("help", "Quick guide")


QUICK_ADD_COMMANDS: dict[str, BeverageType] = {
    BotCommand.COFFEE.value.command: BeverageType.COFFEE,
    BotCommand.TEA.value.command: BeverageType.TEA,
    BotCommand.LEMON_TEA.value.command: BeverageType.LEMON_TEA,
    BotCommand.BOTTLED.value.command: BeverageType.BOTTLED,
}

STATS_COMMANDS: dict[str, StatsPeriod] = {
    BotCommand.DAY.value.command: StatsPeriod.DAY,
    BotCommand.WEEK.value.command: StatsPeriod.WEEK,
    BotCommand.MONTH.value.command: StatsPeriod.MONTH,
}


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


def parse_command(text: str) -> tuple[str, list[str]] | None:
    """Split ``/name@bot arg ...`` into the bare command name and its arguments."""
    if not text.startswith("/"):
        return None
    head, *args = text.split()
    name = head[1:].split("@", maxsplit=1)[0].lower()
    if not name:
        return None
    return name, args
