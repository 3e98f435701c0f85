"""Domain models for shareable split sessions."""

import time
from dataclasses import dataclass, field
from uuid import UUID

HOUR_MS = 60 * 60 * 1000


def now_ms() -> int:
    """Return the current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def hours_to_ms(hours: float) -> int:
    """Convert a (possibly fractional) number of hours to milliseconds."""
    return round(hours * HOUR_MS)


@dataclass(frozen=True)
class Participant:
    """A single entry in a session's participant list."""

    name: str
    amount: float

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "amount": self.amount}


@dataclass(frozen=True)
class SplitSession:
    """Represents a persisted split session."""

    id: UUID
    owner_id: str
    name: str | None
    created_at: int
    expires_at: int
    is_active: bool
    participants: list[Participant] = field(default_factory=list)

    @property
    def url(self) -> str:
        return f"/session/{self.id}"

    @property
    def data(self) -> dict[str, object]:
        """Return the serialized participants document."""
        return {"participants": [p.to_dict() for p in self.participants]}

    def is_expired(self, now: int) -> bool:
        return self.expires_at <= now


@dataclass(frozen=True)
class SessionListing:
    """An owner's view of a session with its expiry state at read time."""

    session: SplitSession
    is_expired: bool
