"""Domain models for the beverage tracker."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class UserRecord:
    """Represents a bot user stored in the database."""

    id: UUID
    telegram_user_id: int
    timezone: str | None = None
