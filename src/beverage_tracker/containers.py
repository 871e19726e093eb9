"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from beverage_tracker.adapters.supabase_beverage_repository import (
    SupabaseBeverageRepository,
)
from beverage_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from beverage_tracker.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from beverage_tracker.config import Settings
from beverage_tracker.services.records import BeverageRecordService
from beverage_tracker.services.stats import StatsService
from beverage_tracker.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    user_service: UserService
    record_service: BeverageRecordService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    record_repository = SupabaseBeverageRepository(supabase_client)
    user_service = UserService(
        SupabaseUserRepository(supabase_client),
        default_timezone=resolved_settings.default_timezone,
    )
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)

    async def close_resources() -> None:
        await telegram_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        user_service=user_service,
        record_service=BeverageRecordService(record_repository),
        stats_service=StatsService(
            record_repository, first_weekday=resolved_settings.first_weekday
        ),
        close_resources=close_resources,
    )
