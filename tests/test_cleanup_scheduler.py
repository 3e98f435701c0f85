"""Tests for the expired session sweep."""

import asyncio

from fastapi.testclient import TestClient

from expense_split.api.app import create_app
from expense_split.domain.sessions import HOUR_MS
from expense_split.services.cleanup import CleanupScheduler
from expense_split.services.sessions import SessionService
from tests.conftest import FakeClock


def test_run_once_removes_expired_sessions(
    session_service: SessionService, clock: FakeClock
) -> None:
    session_service.create_session("u1", duration_hours=1)
    session_service.create_session("u1", duration_hours=24)
    clock.advance(HOUR_MS)
    scheduler = CleanupScheduler(session_service, interval_hours=1)

    assert asyncio.run(scheduler.run_once()) == 1
    assert asyncio.run(scheduler.run_once()) == 0


def test_run_once_survives_storage_failure(session_service: SessionService) -> None:
    def broken_delete(_now: int) -> int:
        raise RuntimeError("storage down")

    session_service.repository.delete_expired = broken_delete
    scheduler = CleanupScheduler(session_service, interval_hours=1)

    assert asyncio.run(scheduler.run_once()) == 0


def test_start_sweeps_until_stopped(
    session_service: SessionService, clock: FakeClock
) -> None:
    session_service.create_session("u1", duration_hours=-1)
    scheduler = CleanupScheduler(session_service, interval_hours=1)

    async def run() -> None:
        task = asyncio.create_task(scheduler.start())
        await asyncio.sleep(0.05)
        scheduler.stop()
        await asyncio.wait_for(task, timeout=1)

    asyncio.run(run())

    assert scheduler.running is False
    assert session_service.list_sessions("u1") == []


def test_app_lifespan_runs_and_stops_scheduler(container) -> None:
    container.settings.cleanup_enabled = True

    with TestClient(create_app(container)) as client:
        assert client.get("/health").status_code == 200

    assert container.cleanup_scheduler.running is False
