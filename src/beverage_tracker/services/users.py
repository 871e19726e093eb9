"""User lifecycle and per-user settings."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from beverage_tracker.domain.models import UserRecord


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_by_telegram_id(self, telegram_user_id: int) -> UserRecord | None:
        """Return the user for a Telegram user id, if present."""

    def create_user(self, telegram_user_id: int) -> UserRecord:
        """Create and return a new user record."""

    def set_timezone(self, user_id: UUID, timezone_name: str) -> None:
        """Store the user's timezone."""

    def touch_last_active(self, user_id: UUID) -> None:
        """Update the last active timestamp for the user."""


@dataclass
class UserService:
    """Application service for users and their timezone."""

    repository: UserRepository
    default_timezone: str = "UTC"

    def ensure_user(self, telegram_user_id: int) -> UserRecord:
        """Return the user for a Telegram id, creating it on first contact."""
        existing = self.repository.get_by_telegram_id(telegram_user_id)
        if existing:
            self.repository.touch_last_active(existing.id)
            return existing
        return self.repository.create_user(telegram_user_id)

    def timezone_for(self, user: UserRecord) -> str:
        """Return the user's timezone or the configured default."""
        return user.timezone or self.default_timezone

    def set_timezone(self, user: UserRecord, timezone_name: str) -> UserRecord:
        """Validate and persist a timezone, returning the updated user."""
        if not is_valid_timezone(timezone_name):
            raise ValueError(f"Unknown timezone: {timezone_name}")
        self.repository.set_timezone(user.id, timezone_name)
        return UserRecord(
            id=user.id,
            telegram_user_id=user.telegram_user_id,
            timezone=timezone_name,
        )


def is_valid_timezone(value: str) -> bool:
    """Return True when ``value`` names an IANA timezone."""
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True
