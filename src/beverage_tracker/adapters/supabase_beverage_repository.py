"""Supabase repository for beverage records."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from beverage_tracker.domain.beverages import (
    BeverageRecord,
    BeverageType,
    parse_beverage_type,
)
from beverage_tracker.services.records import BeverageRecordRepository

_COLUMNS = "id, consumed_at, beverage_type, quantity"


@dataclass
class SupabaseBeverageRepository(BeverageRecordRepository):
    """Supabase implementation for beverage records."""

    client: Client

    def create_record(
        self,
        user_id: UUID,
        beverage_type: BeverageType,
        quantity: int,
        timestamp: datetime,
    ) -> BeverageRecord:
        """Insert a record row and return it."""
        response = (
            self.client.table("beverage_records")
            .insert(
                {
                    "user_id": str(user_id),
                    "consumed_at": timestamp.isoformat(),
                    "beverage_type": beverage_type.value,
                    "quantity": quantity,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create beverage record")
        return _parse_row(response.data[0])

    def delete_record(self, user_id: UUID, record_id: UUID) -> bool:
        """Delete a record row owned by the user."""
        response = (
            self.client.table("beverage_records")
            .delete()
            .eq("id", str(record_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)

    def list_records(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[BeverageRecord]:
        """Return records in the time range ordered by timestamp."""
        response = (
            self.client.table("beverage_records")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("consumed_at", start.isoformat())
            .lt("consumed_at", end.isoformat())
            .order("consumed_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> BeverageRecord:
    return BeverageRecord(
        id=UUID(str(row["id"])),
        timestamp=datetime.fromisoformat(str(row["consumed_at"])),
        beverage_type=parse_beverage_type(row.get("beverage_type")),
        quantity=int(row.get("quantity") or 1),
    )
