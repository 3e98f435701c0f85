"""Access rules layered over the session store."""

from dataclasses import dataclass
from enum import StrEnum

from expense_split.domain.sessions import SplitSession, hours_to_ms


class Ownership(StrEnum):
    """Outcome of checking a principal against a session's owner."""

    OWNED = "owned"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


def is_accessible(session: SplitSession | None, now: int) -> bool:
    """Return true when anonymous collaborators may read or write the session.

    Expiry is strict: a session whose ``expires_at`` equals ``now`` is closed.
    """
    return session is not None and session.is_active and session.expires_at > now


def check_ownership(session: SplitSession | None, owner_id: str) -> Ownership:
    """Classify an owner-facing request against the stored session."""
    if session is None:
        return Ownership.NOT_FOUND
    if session.owner_id != owner_id:
        return Ownership.FORBIDDEN
    return Ownership.OWNED


@dataclass(frozen=True)
class AccessPolicy:
    """Duration policy applied before a session is created."""

    default_duration_hours: float
    max_duration_hours: float

    def clamp_duration(self, requested_hours: float | None) -> float:
        """Return the duration to use for a new session.

        Missing requests, and requests too short to last a single millisecond,
        fall back to the default; requests above the maximum are capped rather
        than rejected.
        """
        hours = self.default_duration_hours
        if requested_hours is not None and requested_hours > 0:
            capped = min(requested_hours, self.max_duration_hours)
            if hours_to_ms(capped) > 0:
                hours = capped
        return min(hours, self.max_duration_hours)
