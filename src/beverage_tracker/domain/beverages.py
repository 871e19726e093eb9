"""Domain models for beverage records."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

MIN_QUANTITY = 1
MAX_QUANTITY = 10
DAILY_WARNING_THRESHOLD = 2


class BeverageType(Enum):
    """Closed set of beverages that can be logged.

    Values are the keys stored in the database.
    """

    COFFEE = "coffee"
    TEA = "tea"
    LEMON_TEA = "lemonTea"
    BOTTLED = "bottled"


@dataclass(frozen=True)
class BeverageInfo:
    """Static display metadata for a beverage type."""

    display_name: str
    emoji: str
    theme_color: str


BEVERAGE_INFO: dict[BeverageType, BeverageInfo] = {
    BeverageType.COFFEE: BeverageInfo("Coffee", "☕️", "#8B5A2B"),
    BeverageType.TEA: BeverageInfo("Milk tea", "🧋", "#9B59B6"),
    BeverageType.LEMON_TEA: BeverageInfo("Lemon tea", "🍋", "#F1C40F"),
    BeverageType.BOTTLED: BeverageInfo("Bottled drink", "🥤", "#3498DB"),
}


def parse_beverage_type(raw: object) -> BeverageType:
    """Parse a stored beverage key, falling back to coffee."""
    try:
        return BeverageType(raw)
    except ValueError:
        return BeverageType.COFFEE


def validate_quantity(quantity: int) -> int:
    """Return the quantity or raise when it is outside the allowed range."""
    if not MIN_QUANTITY <= quantity <= MAX_QUANTITY:
        raise ValueError(
            f"Quantity must be between {MIN_QUANTITY} and {MAX_QUANTITY}, "
            f"got {quantity}"
        )
    return quantity


@dataclass(frozen=True)
class BeverageRecord:
    """A single logged consumption event."""

    id: UUID
    timestamp: datetime
    beverage_type: BeverageType
    quantity: int = 1

    @property
    def info(self) -> BeverageInfo:
        return BEVERAGE_INFO[self.beverage_type]

    @property
    def label(self) -> str:
        """Emoji with a multiplier suffix when more than one unit was logged."""
        suffix = f" x{self.quantity}" if self.quantity > 1 else ""
        return f"{self.info.emoji}{suffix}"
