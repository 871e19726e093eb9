"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Request

from beverage_tracker.api.messages import (
    DAY_CALLBACK_FORMAT,
    FUTURE_DAY_TEXT,
    HELP_TEXT,
    day_records_keyboard,
    format_added,
    format_day_records,
    format_report,
    format_warning,
    report_keyboard,
    warning_keyboard,
)
from beverage_tracker.api.records import router as records_router
from beverage_tracker.api.telegram_models import (
    TelegramCallbackQuery,
    TelegramMessage,
    TelegramUpdate,
)
from beverage_tracker.app_logging import configure_logging
from beverage_tracker.config import parse_allowed_user_ids
from beverage_tracker.containers import AppContainer
from beverage_tracker.domain.beverages import (
    MAX_QUANTITY,
    MIN_QUANTITY,
    BeverageType,
    validate_quantity,
)
from beverage_tracker.domain.models import UserRecord
from beverage_tracker.domain.stats import StatsPeriod
from beverage_tracker.services.records import day_summary, timestamp_on_day
from beverage_tracker.telegram_commands import (
    QUICK_ADD_COMMANDS,
    STATS_COMMANDS,
    parse_command,
    telegram_commands,
)

logger = logging.getLogger(__name__)

_NAVIGATION_STEPS = {"prev": -1, "next": 1}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    allowed_user_ids = parse_allowed_user_ids(
        container.settings.telegram_allowed_user_ids
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.telegram_client.set_my_commands(
                telegram_commands()
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(records_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request
    ) -> dict[str, str]:
        """Handle Telegram webhook updates."""
        state_container: AppContainer = request.app.state.container
        user_id = _extract_user_id(update)
        if user_id is not None and not _is_user_allowed(user_id, allowed_user_ids):
            if update.callback_query:
                await state_container.telegram_client.answer_callback_query(
                    update.callback_query.id, text="Not authorized."
                )
            elif update.message:
                await state_container.telegram_client.send_message(
                    chat_id=update.message.chat.id, text="This bot is private."
                )
            return {"status": "ok"}

        if update.callback_query:
            await _handle_callback(state_container, update.callback_query)
        elif update.message and update.message.text and update.message.from_user:
            await _handle_message(state_container, update.message)
        return {"status": "ok"}

    return app


async def _handle_message(container: AppContainer, message: TelegramMessage) -> None:
    user = container.user_service.ensure_user(message.from_user.id)
    chat_id = message.chat.id
    parsed = parse_command(message.text or "")
    if parsed is None:
        await _handle_timezone_reply(container, user, chat_id, message.text or "")
        return

    name, args = parsed
    if name == "start":
        if user.timezone:
            text = f"Welcome back! Your timezone is {user.timezone}.\n\n{HELP_TEXT}"
        else:
            text = (
                "Welcome to Beverage Tracker! "
                "Please reply with your timezone (e.g., Europe/Berlin)."
            )
        await container.telegram_client.send_message(chat_id=chat_id, text=text)
    elif name in QUICK_ADD_COMMANDS:
        await _quick_add(container, user, chat_id, QUICK_ADD_COMMANDS[name], args)
    elif name == "today":
        await _handle_day_command(container, user, chat_id, args)
    elif name in STATS_COMMANDS:
        timezone = container.user_service.timezone_for(user)
        await _send_report(
            container, user, chat_id, STATS_COMMANDS[name], _today(timezone)
        )
    elif name == "help":
        await container.telegram_client.send_message(chat_id=chat_id, text=HELP_TEXT)
    else:
        await container.telegram_client.send_message(
            chat_id=chat_id, text="Unknown command. Send /help for the list."
        )


async def _handle_timezone_reply(
    container: AppContainer, user: UserRecord, chat_id: int, text: str
) -> None:
    if user.timezone:
        await container.telegram_client.send_message(chat_id=chat_id, text=HELP_TEXT)
        return
    timezone = text.strip()
    try:
        container.user_service.set_timezone(user, timezone)
    except ValueError:
        await container.telegram_client.send_message(
            chat_id=chat_id,
            text="Please send a valid timezone like America/Los_Angeles.",
        )
        return
    await container.telegram_client.send_message(
        chat_id=chat_id, text=f"Timezone saved: {timezone}."
    )


async def _quick_add(
    container: AppContainer,
    user: UserRecord,
    chat_id: int,
    beverage_type: BeverageType,
    args: list[str],
) -> None:
    parsed = _parse_quick_add_args(args)
    if parsed is None:
        await container.telegram_client.send_message(
            chat_id=chat_id,
            text=(
                f"Quantity must be a number from {MIN_QUANTITY} to {MAX_QUANTITY}, "
                "optionally followed by a date like 2024-03-05."
            ),
        )
        return
    quantity, day = parsed
    timezone = container.user_service.timezone_for(user)
    today = _today(timezone)
    if day is not None and day > today:
        await container.telegram_client.send_message(
            chat_id=chat_id, text=FUTURE_DAY_TEXT
        )
        return
    if day is None or day == today:
        warning_total = container.record_service.warning_total(user.id, timezone)
        if warning_total is not None:
            await container.telegram_client.send_message(
                chat_id=chat_id,
                text=format_warning(beverage_type, warning_total),
                reply_markup=warning_keyboard(beverage_type, quantity),
            )
            return
    await _log_drink(container, user, chat_id, beverage_type, quantity, day)


async def _log_drink(  # noqa: PLR0913
    container: AppContainer,
    user: UserRecord,
    chat_id: int,
    beverage_type: BeverageType,
    quantity: int,
    day: date | None = None,
) -> None:
    timezone = container.user_service.timezone_for(user)
    today = _today(timezone)
    if day is None or day == today:
        record = container.record_service.add_record(user.id, beverage_type, quantity)
        day_total = container.record_service.day_count(user.id, today, timezone)
        text = format_added(record, day_total)
    else:
        record = container.record_service.add_record(
            user.id, beverage_type, quantity, timestamp_on_day(day, timezone)
        )
        day_total = container.record_service.day_count(user.id, day, timezone)
        text = format_added(record, day_total, day)
    await container.telegram_client.send_message(chat_id=chat_id, text=text)


async def _handle_day_command(
    container: AppContainer, user: UserRecord, chat_id: int, args: list[str]
) -> None:
    timezone = container.user_service.timezone_for(user)
    today = _today(timezone)
    day = _parse_day_arg(args, today)
    if day is None:
        await container.telegram_client.send_message(
            chat_id=chat_id, text="Send /today or /today YYYY-MM-DD."
        )
        return
    if day > today:
        await container.telegram_client.send_message(
            chat_id=chat_id, text=FUTURE_DAY_TEXT
        )
        return
    await _send_day(container, user, chat_id, day)


async def _send_day(
    container: AppContainer,
    user: UserRecord,
    chat_id: int,
    day: date,
    message_id: int | None = None,
) -> None:
    timezone = container.user_service.timezone_for(user)
    records = container.record_service.records_for_day(user.id, day, timezone)
    text = format_day_records(day, records, day_summary(records))
    keyboard = day_records_keyboard(
        records, ZoneInfo(timezone), day, _today(timezone)
    )
    if message_id is None:
        await container.telegram_client.send_message(
            chat_id=chat_id, text=text, reply_markup=keyboard
        )
    else:
        await container.telegram_client.edit_message_text(
            chat_id=chat_id, message_id=message_id, text=text, reply_markup=keyboard
        )


async def _send_report(  # noqa: PLR0913
    container: AppContainer,
    user: UserRecord,
    chat_id: int,
    period: StatsPeriod,
    reference: date,
    message_id: int | None = None,
) -> None:
    timezone = container.user_service.timezone_for(user)
    report = container.stats_service.get_report(user.id, period, reference, timezone)
    text = format_report(report)
    keyboard = report_keyboard(report, _today(timezone))
    if message_id is None:
        await container.telegram_client.send_message(
            chat_id=chat_id, text=text, reply_markup=keyboard
        )
    else:
        await container.telegram_client.edit_message_text(
            chat_id=chat_id, message_id=message_id, text=text, reply_markup=keyboard
        )


async def _handle_callback(
    container: AppContainer, callback: TelegramCallbackQuery
) -> None:
    data = callback.data or ""
    message = callback.message
    user = container.user_service.ensure_user(callback.from_user.id)

    deletion = _parse_delete_callback(data)
    if deletion is not None:
        record_id, day = deletion
        deleted = container.record_service.delete_record(user.id, record_id)
        await container.telegram_client.answer_callback_query(
            callback.id, text="Deleted." if deleted else "Already deleted."
        )
        if message:
            timezone = container.user_service.timezone_for(user)
            await _send_day(
                container,
                user,
                message.chat.id,
                day or _today(timezone),
                message_id=message.message_id,
            )
        return

    day_navigation = _parse_day_callback(data)
    if day_navigation is not None:
        day, direction = day_navigation
        target = day + timedelta(days=direction)
        timezone = container.user_service.timezone_for(user)
        if target > _today(timezone):
            await container.telegram_client.answer_callback_query(
                callback.id, text=FUTURE_DAY_TEXT
            )
            return
        await container.telegram_client.answer_callback_query(callback.id)
        if message:
            await _send_day(
                container, user, message.chat.id, target, message.message_id
            )
        return

    forced = _parse_add_callback(data)
    if forced is not None:
        await container.telegram_client.answer_callback_query(callback.id)
        if message:
            beverage_type, quantity = forced
            await _log_drink(container, user, message.chat.id, beverage_type, quantity)
        return

    navigation = _parse_stats_callback(data)
    if navigation is not None:
        period, reference, direction = navigation
        if direction:
            timezone = container.user_service.timezone_for(user)
            target = container.stats_service.navigate(
                period, reference, direction, timezone
            )
            if target is None:
                await container.telegram_client.answer_callback_query(
                    callback.id, text="That period hasn't started yet."
                )
                return
            reference = target
        await container.telegram_client.answer_callback_query(callback.id)
        if message:
            await _send_report(
                container,
                user,
                message.chat.id,
                period,
                reference,
                message_id=message.message_id,
            )
        return

    await container.telegram_client.answer_callback_query(callback.id)
    if data == "w" and message:
        await container.telegram_client.send_message(
            chat_id=message.chat.id, text="Good call. Water it is 💧"
        )


def _extract_user_id(update: TelegramUpdate) -> int | None:
    """Extract Telegram user id from update, if present."""
    if update.callback_query:
        return update.callback_query.from_user.id
    if update.message and update.message.from_user:
        return update.message.from_user.id
    return None


def _is_user_allowed(user_id: int, allowed: set[int] | None) -> bool:
    """Return true when the user is allowed to interact with the bot."""
    return allowed is None or user_id in allowed


def _today(timezone_name: str) -> date:
    return datetime.now(tz=ZoneInfo(timezone_name)).date()


def _parse_quick_add_args(args: list[str]) -> tuple[int, date | None] | None:
    """Parse ``[quantity] [YYYY-MM-DD]`` in either order."""
    quantity: int | None = None
    day: date | None = None
    for arg in args:
        if arg.isdigit() and quantity is None:
            quantity = int(arg)
        elif "-" in arg and day is None:
            try:
                day = date.fromisoformat(arg)
            except ValueError:
                return None
        else:
            return None
    try:
        return validate_quantity(1 if quantity is None else quantity), day
    except ValueError:
        return None


def _parse_day_arg(args: list[str], today: date) -> date | None:
    """Parse the optional ``YYYY-MM-DD`` argument of the day view."""
    if not args:
        return today
    if len(args) > 1:
        return None
    try:
        return date.fromisoformat(args[0])
    except ValueError:
        return None


def _parse_callback_day(raw: str) -> date | None:
    try:
        return datetime.strptime(raw, DAY_CALLBACK_FORMAT).date()
    except ValueError:
        return None


def _parse_delete_callback(data: str) -> tuple[UUID, date | None] | None:
    """Parse callback data in the format d:<record id>[:<YYYYMMDD>]."""
    if not data.startswith("d:"):
        return None
    _, raw_id, *rest = data.split(":")
    if len(rest) > 1:
        return None
    day = _parse_callback_day(rest[0]) if rest else None
    if rest and day is None:
        return None
    try:
        return UUID(raw_id), day
    except ValueError:
        return None


def _parse_day_callback(data: str) -> tuple[date, int] | None:
    """Parse callback data in the format dd:<YYYYMMDD>[:prev|next]."""
    if not data.startswith("dd:"):
        return None
    _, raw_day, *rest = data.split(":")
    if len(rest) > 1:
        return None
    direction = _NAVIGATION_STEPS.get(rest[0]) if rest else 0
    day = _parse_callback_day(raw_day)
    if direction is None or day is None:
        return None
    return day, direction


def _parse_add_callback(data: str) -> tuple[BeverageType, int] | None:
    """Parse callback data in the format a:<type>:<quantity>."""
    if not data.startswith("a:"):
        return None
    parts = data.split(":")
    if len(parts) != 3:  # noqa: PLR2004
        return None
    _, raw_type, raw_quantity = parts
    try:
        return BeverageType(raw_type), validate_quantity(int(raw_quantity))
    except ValueError:
        return None


def _parse_stats_callback(data: str) -> tuple[StatsPeriod, date, int] | None:
    """Parse callback data in the format st:<period>:<date>[:prev|next]."""
    if not data.startswith("st:"):
        return None
    _, *parts = data.split(":")
    if len(parts) not in {2, 3}:
        return None
    raw_period, raw_date, *rest = parts
    direction = _NAVIGATION_STEPS.get(rest[0]) if rest else 0
    if direction is None:
        return None
    try:
        return StatsPeriod(raw_period), date.fromisoformat(raw_date), direction
    except ValueError:
        return None
