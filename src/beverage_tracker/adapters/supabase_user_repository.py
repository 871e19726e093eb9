"""Supabase-backed user repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from beverage_tracker.domain.models import UserRecord
from beverage_tracker.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_telegram_id(self, telegram_user_id: int) -> UserRecord | None:
        """Return the user for a Telegram user id, if present."""
        response = (
            self.client.table("users")
            .select("id, telegram_user_id, timezone")
            .eq("telegram_user_id", telegram_user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_user(response.data[0])

    def create_user(self, telegram_user_id: int) -> UserRecord:
        """Insert a user row without a timezone and return it."""
        response = (
            self.client.table("users")
            .insert({"telegram_user_id": telegram_user_id})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def set_timezone(self, user_id: UUID, timezone_name: str) -> None:
        self.client.table("users").update({"timezone": timezone_name}).eq(
            "id", str(user_id)
        ).execute()

    def touch_last_active(self, user_id: UUID) -> None:
        self.client.table("users").update(
            {"last_active_at": datetime.now(tz=UTC).isoformat()}
        ).eq("id", str(user_id)).execute()


def _parse_user(row: dict[str, object]) -> UserRecord:
    timezone = row.get("timezone")
    return UserRecord(
        id=UUID(str(row["id"])),
        telegram_user_id=int(row["telegram_user_id"]),
        timezone=str(timezone) if timezone else None,
    )
