"""Session lifecycle operations for shareable split sessions."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID, uuid4

from expense_split.domain.sessions import (
    Participant,
    SessionListing,
    SplitSession,
    hours_to_ms,
    now_ms,
)
from expense_split.services.access import AccessPolicy, is_accessible

logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """Persistence interface for split sessions.

    Every method is a single atomic statement against the backing store.
    Owner-scoped mutators report ``False`` both for unknown ids and for rows
    owned by someone else.
    """

    def create_session(self, session: SplitSession) -> SplitSession:
        """Insert a new session row and return it."""

    def get_session(self, session_id: UUID) -> SplitSession | None:
        """Return a session by id regardless of its state."""

    def replace_participants(
        self, session_id: UUID, participants: list[Participant]
    ) -> bool:
        """Overwrite the participant list; return whether a row matched."""

    def list_sessions_by_owner(self, owner_id: str) -> list[SplitSession]:
        """Return the owner's sessions, newest first."""

    def delete_session(self, session_id: UUID, owner_id: str) -> bool:
        """Delete an owned session; return whether a row was removed."""

    def set_active(self, session_id: UUID, owner_id: str, is_active: bool) -> bool:
        """Set the active flag on an owned session."""

    def extend_expiration(
        self, session_id: UUID, owner_id: str, additional_ms: int
    ) -> bool:
        """Add to the stored expiration of an owned session."""

    def delete_expired(self, now: int) -> int:
        """Delete every session with ``expires_at <= now``; return the count."""


@dataclass
class SessionService:
    """Application service owning session state transitions."""

    repository: SessionRepository
    policy: AccessPolicy
    clock: Callable[[], int] = field(default=now_ms)

    def create_session(
        self,
        owner_id: str,
        name: str | None = None,
        duration_hours: float | None = None,
    ) -> SplitSession:
        """Create an active, empty session expiring ``duration_hours`` from now.

        The duration is used as given; callers apply the clamping policy.
        """
        hours = (
            self.policy.default_duration_hours
            if duration_hours is None
            else duration_hours
        )
        created_at = self.clock()
        session = self.repository.create_session(
            SplitSession(
                id=uuid4(),
                owner_id=owner_id,
                name=name,
                created_at=created_at,
                expires_at=created_at + hours_to_ms(hours),
                is_active=True,
                participants=[],
            )
        )
        logger.info("Created session %s for %s", session.id, owner_id)
        return session

    def get_session(self, session_id: UUID) -> SplitSession | None:
        """Return a session with no accessibility filtering."""
        return self.repository.get_session(session_id)

    def get_accessible_session(self, session_id: UUID) -> SplitSession | None:
        """Return the session only if it is active and unexpired."""
        session = self.repository.get_session(session_id)
        if not is_accessible(session, self.clock()):
            return None
        return session

    def replace_participants(
        self, session_id: UUID, participants: list[Participant]
    ) -> bool:
        """Replace the whole participant list; the last write wins."""
        return self.repository.replace_participants(session_id, list(participants))

    def list_sessions(self, owner_id: str) -> list[SessionListing]:
        """Return the owner's sessions with expiry evaluated now."""
        now = self.clock()
        return [
            SessionListing(session=session, is_expired=session.is_expired(now))
            for session in self.repository.list_sessions_by_owner(owner_id)
        ]

    def delete_session(self, session_id: UUID, owner_id: str) -> bool:
        deleted = self.repository.delete_session(session_id, owner_id)
        if deleted:
            logger.info("Deleted session %s", session_id)
        return deleted

    def set_active(self, session_id: UUID, owner_id: str, is_active: bool) -> bool:
        updated = self.repository.set_active(session_id, owner_id, is_active)
        if updated:
            logger.info("Session %s active=%s", session_id, is_active)
        return updated

    def extend_expiration(
        self, session_id: UUID, owner_id: str, additional_hours: float
    ) -> bool:
        """Push the stored expiration back by ``additional_hours``.

        Extensions add to the current ``expires_at``, not to the current time,
        so repeated calls accumulate.
        """
        additional_ms = hours_to_ms(additional_hours)
        if additional_ms <= 0:
            raise ValueError("additional_hours must be positive")
        extended = self.repository.extend_expiration(
            session_id, owner_id, additional_ms
        )
        if extended:
            logger.info("Extended session %s by %sh", session_id, additional_hours)
        return extended

    def cleanup_expired(self, now: int | None = None) -> int:
        """Hard-delete every session that has expired by ``now``."""
        removed = self.repository.delete_expired(self.clock() if now is None else now)
        if removed:
            logger.info("Cleaned up %s expired session(s)", removed)
        return removed
