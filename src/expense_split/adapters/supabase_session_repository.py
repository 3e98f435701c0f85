"""Supabase-backed split session repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from expense_split.domain.sessions import Participant, SplitSession
from expense_split.services.sessions import SessionRepository

_TABLE = "split_sessions"
_COLUMNS = "id, owner_id, name, created_at, expires_at, is_active, data"


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for split sessions."""

    client: Client

    def create_session(self, session: SplitSession) -> SplitSession:
        """Insert a session row and return it."""
        response = (
            self.client.table(_TABLE)
            .insert(
                {
                    "id": str(session.id),
                    "owner_id": session.owner_id,
                    "name": session.name,
                    "created_at": session.created_at,
                    "expires_at": session.expires_at,
                    "is_active": session.is_active,
                    "data": session.data,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create session")
        return _to_session(response.data[0])

    def get_session(self, session_id: UUID) -> SplitSession | None:
        """Return a session by id, if present."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("id", str(session_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_session(response.data[0])

    def replace_participants(
        self, session_id: UUID, participants: list[Participant]
    ) -> bool:
        """Overwrite the participants document."""
        response = (
            self.client.table(_TABLE)
            .update({"data": {"participants": [p.to_dict() for p in participants]}})
            .eq("id", str(session_id))
            .execute()
        )
        return bool(response.data)

    def list_sessions_by_owner(self, owner_id: str) -> list[SplitSession]:
        """Return the owner's sessions, newest first."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("owner_id", owner_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [_to_session(row) for row in response.data or []]

    def delete_session(self, session_id: UUID, owner_id: str) -> bool:
        """Delete a session owned by ``owner_id``."""
        response = (
            self.client.table(_TABLE)
            .delete()
            .eq("id", str(session_id))
            .eq("owner_id", owner_id)
            .execute()
        )
        return bool(response.data)

    def set_active(self, session_id: UUID, owner_id: str, is_active: bool) -> bool:
        """Set the active flag of a session owned by ``owner_id``."""
        response = (
            self.client.table(_TABLE)
            .update({"is_active": is_active})
            .eq("id", str(session_id))
            .eq("owner_id", owner_id)
            .execute()
        )
        return bool(response.data)

    def extend_expiration(
        self, session_id: UUID, owner_id: str, additional_ms: int
    ) -> bool:
        """Add ``additional_ms`` to the stored expiration in one statement."""
        response = self.client.rpc(
            "extend_split_session",
            {
                "p_id": str(session_id),
                "p_owner_id": owner_id,
                "p_additional_ms": additional_ms,
            },
        ).execute()
        return bool(response.data)

    def delete_expired(self, now: int) -> int:
        """Delete all sessions expired at ``now``."""
        response = self.client.table(_TABLE).delete().lte("expires_at", now).execute()
        return len(response.data or [])


def _to_session(row: dict[str, object]) -> SplitSession:
    data = row.get("data") or {}
    raw_participants = data.get("participants", []) if isinstance(data, dict) else []
    return SplitSession(
        id=UUID(str(row["id"])),
        owner_id=str(row["owner_id"]),
        name=row.get("name"),
        created_at=int(row["created_at"]),
        expires_at=int(row["expires_at"]),
        is_active=bool(row["is_active"]),
        participants=[
            Participant(name=str(item.get("name", "")), amount=item.get("amount", 0))
            for item in raw_participants
            if isinstance(item, dict)
        ],
    )
