"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from expense_split.config import Settings
from expense_split.containers import AppContainer, build_policy
from expense_split.domain.sessions import Participant, SplitSession
from expense_split.services.cleanup import CleanupScheduler
from expense_split.services.sessions import SessionRepository, SessionService

START_MS = 1_700_000_000_000


@dataclass
class FakeClock:
    """Controllable millisecond clock."""

    now: int = START_MS

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory split session repository for tests."""

    sessions: dict[UUID, SplitSession] = field(default_factory=dict)

    def create_session(self, session: SplitSession) -> SplitSession:
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id: UUID) -> SplitSession | None:
        return self.sessions.get(session_id)

    def replace_participants(
        self, session_id: UUID, participants: list[Participant]
    ) -> bool:
        session = self.sessions.get(session_id)
        if session is None:
            return False
        self.sessions[session_id] = replace(session, participants=list(participants))
        return True

    def list_sessions_by_owner(self, owner_id: str) -> list[SplitSession]:
        owned = [s for s in self.sessions.values() if s.owner_id == owner_id]
        return sorted(owned, key=lambda s: s.created_at, reverse=True)

    def delete_session(self, session_id: UUID, owner_id: str) -> bool:
        session = self.sessions.get(session_id)
        if session is None or session.owner_id != owner_id:
            return False
        del self.sessions[session_id]
        return True

    def set_active(self, session_id: UUID, owner_id: str, is_active: bool) -> bool:
        session = self.sessions.get(session_id)
        if session is None or session.owner_id != owner_id:
            return False
        self.sessions[session_id] = replace(session, is_active=is_active)
        return True

    def extend_expiration(
        self, session_id: UUID, owner_id: str, additional_ms: int
    ) -> bool:
        session = self.sessions.get(session_id)
        if session is None or session.owner_id != owner_id:
            return False
        self.sessions[session_id] = replace(
            session, expires_at=session.expires_at + additional_ms
        )
        return True

    def delete_expired(self, now: int) -> int:
        expired = [sid for sid, s in self.sessions.items() if s.expires_at <= now]
        for session_id in expired:
            del self.sessions[session_id]
        return len(expired)

    def set_expires_at(self, session_id: UUID, expires_at: int) -> None:
        self.sessions[session_id] = replace(
            self.sessions[session_id], expires_at=expires_at
        )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        login_username="admin",
        login_password="password",
        session_secret="test-secret",
        cleanup_enabled=False,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def session_service(
    settings: Settings,
    session_repository: InMemorySessionRepository,
    clock: FakeClock,
) -> SessionService:
    return SessionService(
        repository=session_repository,
        policy=build_policy(settings),
        clock=clock,
    )


@pytest.fixture
def container(settings: Settings, session_service: SessionService) -> AppContainer:
    cleanup_scheduler = CleanupScheduler(
        session_service, interval_hours=settings.cleanup_interval_hours
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        session_service=session_service,
        cleanup_scheduler=cleanup_scheduler,
        close_resources=close_resources,
    )


def login(client: TestClient, username: str = "admin", password: str = "password"):
    """Log the test client in and return the login response."""
    return client.post("/api/login", json={"username": username, "password": password})
