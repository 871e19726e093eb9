"""Tests for container wiring."""

import asyncio

from beverage_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.record_service is not None
    assert container.stats_service.first_weekday == settings.first_weekday
    asyncio.run(container.close_resources())
