"""JSON API for beverage records and statistics, with simple token auth."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import AwareDatetime, BaseModel, Field

from beverage_tracker.domain.beverages import (
    BEVERAGE_INFO,
    MAX_QUANTITY,
    MIN_QUANTITY,
    BeverageRecord,
    BeverageType,
)
from beverage_tracker.domain.stats import DrinkStats, PeriodReport, StatsPeriod
from beverage_tracker.services.records import day_summary

if TYPE_CHECKING:
    from beverage_tracker.containers import AppContainer

router = APIRouter(prefix="/api", tags=["records"])


class RecordCreate(BaseModel):
    """Request body for logging a drink."""

    beverage_type: BeverageType
    quantity: int = Field(default=1, ge=MIN_QUANTITY, le=MAX_QUANTITY)
    timestamp: AwareDatetime | None = None


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_api_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/beverages", dependencies=[Depends(require_api_token)])
async def list_beverages() -> dict[str, object]:
    """Return display metadata for every beverage type."""
    return {
        "beverages": [
            {
                "key": beverage_type.value,
                "display_name": info.display_name,
                "emoji": info.emoji,
                "theme_color": info.theme_color,
            }
            for beverage_type, info in BEVERAGE_INFO.items()
        ]
    }


@router.get(
    "/users/{telegram_user_id}/records", dependencies=[Depends(require_api_token)]
)
async def list_records(
    telegram_user_id: int, request: Request, day: date | None = None
) -> dict[str, object]:
    """Return one local day's records, today by default."""
    container: AppContainer = request.app.state.container
    user = container.user_service.ensure_user(telegram_user_id)
    timezone = container.user_service.timezone_for(user)
    resolved_day = day or datetime.now(tz=ZoneInfo(timezone)).date()
    records = container.record_service.records_for_day(user.id, resolved_day, timezone)
    return {
        "day": resolved_day.isoformat(),
        "timezone": timezone,
        "records": [_record_payload(record) for record in records],
        "totals": _totals_payload(day_summary(records)),
    }


@router.post(
    "/users/{telegram_user_id}/records",
    dependencies=[Depends(require_api_token)],
    status_code=status.HTTP_201_CREATED,
)
async def create_record(
    telegram_user_id: int, payload: RecordCreate, request: Request
) -> dict[str, object]:
    """Log a drink for the user."""
    container: AppContainer = request.app.state.container
    user = container.user_service.ensure_user(telegram_user_id)
    try:
        record = container.record_service.add_record(
            user.id, payload.beverage_type, payload.quantity, payload.timestamp
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return _record_payload(record)


@router.delete(
    "/users/{telegram_user_id}/records/{record_id}",
    dependencies=[Depends(require_api_token)],
)
async def delete_record(
    telegram_user_id: int, record_id: UUID, request: Request
) -> dict[str, str]:
    """Delete one of the user's records."""
    container: AppContainer = request.app.state.container
    user = container.user_service.ensure_user(telegram_user_id)
    if not container.record_service.delete_record(user.id, record_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "deleted"}


@router.get(
    "/users/{telegram_user_id}/stats/{period}",
    dependencies=[Depends(require_api_token)],
)
async def period_stats(
    telegram_user_id: int,
    period: StatsPeriod,
    request: Request,
    reference: date | None = None,
) -> dict[str, object]:
    """Return buckets and totals for the period containing ``reference``."""
    container: AppContainer = request.app.state.container
    user = container.user_service.ensure_user(telegram_user_id)
    timezone = container.user_service.timezone_for(user)
    resolved = reference or datetime.now(tz=ZoneInfo(timezone)).date()
    report = container.stats_service.get_report(user.id, period, resolved, timezone)
    return _report_payload(report)


def _record_payload(record: BeverageRecord) -> dict[str, object]:
    return {
        "id": str(record.id),
        "timestamp": record.timestamp.isoformat(),
        "beverage_type": record.beverage_type.value,
        "quantity": record.quantity,
    }


def _totals_payload(totals: dict[BeverageType, int]) -> dict[str, int]:
    return {beverage_type.value: count for beverage_type, count in totals.items()}


def _bucket_payload(bucket: DrinkStats) -> dict[str, object]:
    counts = {
        beverage_type: bucket.count_for(beverage_type)
        for beverage_type in BeverageType
    }
    return {
        "date": bucket.date.isoformat(),
        "counts": _totals_payload(counts),
        "total": bucket.total_count,
    }


def _report_payload(report: PeriodReport) -> dict[str, object]:
    return {
        "period": report.period.value,
        "reference": report.reference.date().isoformat(),
        "start": report.start.isoformat(),
        "end": report.end.isoformat(),
        "can_go_next": report.can_go_next,
        "buckets": [_bucket_payload(bucket) for bucket in report.buckets],
        "totals": _totals_payload(report.totals),
    }
