"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from beverage_tracker.adapters.telegram_client import TelegramClient
from beverage_tracker.config import Settings
from beverage_tracker.containers import AppContainer
from beverage_tracker.domain.beverages import BeverageRecord, BeverageType
from beverage_tracker.domain.models import UserRecord
from beverage_tracker.services.records import (
    BeverageRecordRepository,
    BeverageRecordService,
)
from beverage_tracker.services.stats import StatsService
from beverage_tracker.services.users import UserRepository, UserService


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[int, UserRecord] = field(default_factory=dict)
    touched: list[UUID] = field(default_factory=list)

    def get_by_telegram_id(self, telegram_user_id: int) -> UserRecord | None:
        return self.users.get(telegram_user_id)

    def create_user(self, telegram_user_id: int) -> UserRecord:
        user = UserRecord(id=uuid4(), telegram_user_id=telegram_user_id)
        self.users[telegram_user_id] = user
        return user

    def set_timezone(self, user_id: UUID, timezone_name: str) -> None:
        for telegram_user_id, user in self.users.items():
            if user.id == user_id:
                self.users[telegram_user_id] = UserRecord(
                    id=user.id,
                    telegram_user_id=telegram_user_id,
                    timezone=timezone_name,
                )

    def touch_last_active(self, user_id: UUID) -> None:
        self.touched.append(user_id)


@dataclass
class InMemoryBeverageRepository(BeverageRecordRepository):
    """In-memory beverage record repository for tests."""

    records: dict[UUID, tuple[UUID, BeverageRecord]] = field(default_factory=dict)

    def create_record(
        self,
        user_id: UUID,
        beverage_type: BeverageType,
        quantity: int,
        timestamp: datetime,
    ) -> BeverageRecord:
        record = BeverageRecord(
            id=uuid4(),
            timestamp=timestamp,
            beverage_type=beverage_type,
            quantity=quantity,
        )
        self.records[record.id] = (user_id, record)
        return record

    def delete_record(self, user_id: UUID, record_id: UUID) -> bool:
        owner = self.records.get(record_id)
        if owner is None or owner[0] != user_id:
            return False
        del self.records[record_id]
        return True

    def list_records(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[BeverageRecord]:
        matches = [
            record
            for owner, record in self.records.values()
            if owner == user_id and start <= record.timestamp < end
        ]
        return sorted(matches, key=lambda record: record.timestamp)

    def user_records(self, user_id: UUID) -> list[BeverageRecord]:
        return [record for owner, record in self.records.values() if owner == user_id]


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records outgoing calls."""

    messages: list[tuple[int, str]] = field(default_factory=list)
    markups: list[dict | None] = field(default_factory=list)
    edits: list[tuple[int, int, str]] = field(default_factory=list)
    callbacks: list[tuple[str, str | None]] = field(default_factory=list)
    commands: list[dict[str, str]] | None = None

    async def send_message(
        self, chat_id: int, text: str, reply_markup: dict | None = None
    ) -> None:
        self.messages.append((chat_id, text))
        self.markups.append(reply_markup)

    async def edit_message_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        reply_markup: dict | None = None,
    ) -> None:
        self.edits.append((chat_id, message_id, text))
        self.markups.append(reply_markup)

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None
    ) -> None:
        self.callbacks.append((callback_query_id, text))

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        self.commands = commands


def at(*args: int) -> datetime:
    """Build a UTC datetime from positional components."""
    return datetime(*args, tzinfo=UTC)


def make_record(
    timestamp: datetime,
    beverage_type: BeverageType = BeverageType.COFFEE,
    quantity: int = 1,
) -> BeverageRecord:
    return BeverageRecord(
        id=uuid4(),
        timestamp=timestamp,
        beverage_type=beverage_type,
        quantity=quantity,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        telegram_bot_token="test-token",
        supabase_url="https://example.supabase.co",
        supabase_service_key="test.service-key.signature",
        api_token="api-token",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def record_repository() -> InMemoryBeverageRepository:
    return InMemoryBeverageRepository()


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def container(
    settings: Settings,
    user_repository: InMemoryUserRepository,
    record_repository: InMemoryBeverageRepository,
    telegram_client: FakeTelegramClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        telegram_client=telegram_client,
        user_service=UserService(user_repository),
        record_service=BeverageRecordService(record_repository),
        stats_service=StatsService(record_repository),
        close_resources=close_resources,
    )
