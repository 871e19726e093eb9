"""Tests for Telegram command definitions."""

from beverage_tracker.telegram_commands import (
    QUICK_ADD_COMMANDS,
    BotCommand,
    parse_command,
    telegram_commands,
)


def test_telegram_commands_include_start() -> None:
    commands = telegram_commands()

    assert {"command": "start", "description": "Onboarding and timezone setup"} in (
        commands
    )
    assert len(commands) == len(list(BotCommand))


def test_quick_add_commands_are_registered() -> None:
    names = {entry["command"] for entry in telegram_commands()}

    assert set(QUICK_ADD_COMMANDS) <= names


def test_parse_command_strips_bot_name_and_splits_args() -> None:
    assert parse_command("/Coffee@beverage_bot 3") == ("coffee", ["3"])
    assert parse_command("/today") == ("today", [])
    assert parse_command("Europe/Berlin") is None
    assert parse_command("/") is None
