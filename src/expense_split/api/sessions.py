"""Session endpoints: owner management and anonymous collaboration."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from expense_split.api.auth import require_owner
from expense_split.api.errors import (
    EXTENSION_FAILED,
    FORBIDDEN,
    INVALID_PARTICIPANTS_DATA,
    SESSION_NOT_FOUND,
    SESSION_NOT_FOUND_OR_EXPIRED,
    SESSION_NOT_FOUND_OR_FORBIDDEN,
    UPDATE_FAILED,
    ApiError,
)
from expense_split.api.models import (
    CreateSessionRequest,
    UpdateSessionRequest,
    participants_adapter,
)
from expense_split.domain.sessions import Participant, SessionListing, SplitSession
from expense_split.services.access import Ownership, check_ownership
from expense_split.services.settlement import compute_settlement

if TYPE_CHECKING:
    from expense_split.containers import AppContainer
    from expense_split.services.sessions import SessionService

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def _service(request: Request) -> SessionService:
    container: AppContainer = request.app.state.container
    return container.session_service


@router.post("", status_code=status.HTTP_201_CREATED)
def create_session(
    request: Request,
    payload: CreateSessionRequest | None = None,
    owner_id: str = Depends(require_owner),
) -> dict[str, object]:
    """Open a new session for the authenticated owner."""
    service = _service(request)
    payload = payload or CreateSessionRequest()
    hours = service.policy.clamp_duration(payload.expiration_hours)
    session = service.create_session(owner_id, name=payload.name, duration_hours=hours)
    return {
        "sessionId": str(session.id),
        "url": session.url,
        "expiresAt": session.expires_at,
    }


@router.get("")
def list_sessions(
    request: Request, owner_id: str = Depends(require_owner)
) -> dict[str, object]:
    """Return every session owned by the caller, newest first."""
    listings = _service(request).list_sessions(owner_id)
    return {"sessions": [_listing_view(listing) for listing in listings]}


@router.patch("/{session_id}")
def update_session(
    session_id: str,
    request: Request,
    payload: UpdateSessionRequest | None = None,
    owner_id: str = Depends(require_owner),
) -> dict[str, object]:
    """Toggle the active flag and/or extend the expiration of an owned session."""
    service = _service(request)
    parsed_id = _parse_session_id(session_id)
    session = service.get_session(parsed_id) if parsed_id else None
    ownership = check_ownership(session, owner_id)
    if ownership is Ownership.NOT_FOUND:
        raise ApiError(status.HTTP_404_NOT_FOUND, SESSION_NOT_FOUND)
    if ownership is Ownership.FORBIDDEN:
        raise ApiError(status.HTTP_403_FORBIDDEN, FORBIDDEN)

    payload = payload or UpdateSessionRequest()
    is_active = payload.active_flag()
    if is_active is not None and not service.set_active(
        parsed_id, owner_id, is_active
    ):
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, UPDATE_FAILED)
    extend_hours = payload.extension_hours()
    if extend_hours is not None and not service.extend_expiration(
        parsed_id, owner_id, extend_hours
    ):
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, EXTENSION_FAILED)

    updated = service.get_session(parsed_id)
    if updated is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, SESSION_NOT_FOUND)
    return {"session": _owner_view(updated)}


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: str, request: Request, owner_id: str = Depends(require_owner)
) -> Response:
    """Delete an owned session; unknown and foreign sessions look the same."""
    parsed_id = _parse_session_id(session_id)
    if parsed_id is None or not _service(request).delete_session(parsed_id, owner_id):
        raise ApiError(status.HTTP_404_NOT_FOUND, SESSION_NOT_FOUND_OR_FORBIDDEN)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{session_id}/data")
def get_session_data(session_id: str, request: Request) -> dict[str, object]:
    """Return the participant data of an accessible session."""
    session = _accessible_session(request, session_id)
    return {
        "sessionId": str(session.id),
        "name": session.name,
        "expiresAt": session.expires_at,
        "isActive": session.is_active,
        "data": session.data,
    }


@router.put("/{session_id}/data")
async def replace_session_data(session_id: str, request: Request) -> dict[str, object]:
    """Replace the full participant list; concurrent writers resolve last-write-wins."""
    participants = _parse_participants(await request.body())
    return await run_in_threadpool(
        _replace_participants, request, session_id, participants
    )


@router.get("/{session_id}/settlement")
def get_session_settlement(session_id: str, request: Request) -> dict[str, object]:
    """Return fair shares and the transfer plan for an accessible session."""
    session = _accessible_session(request, session_id)
    settlement = compute_settlement(session.participants)
    return {
        "sessionId": str(session.id),
        "total": settlement.total_cents / 100,
        "shares": [
            {"name": participant.name, "share": share / 100}
            for participant, share in zip(settlement.participants, settlement.shares)
        ],
        "transfers": [transfer.to_dict() for transfer in settlement.transfers],
    }


def _replace_participants(
    request: Request, session_id: str, participants: list[Participant]
) -> dict[str, object]:
    service = _service(request)
    session = _accessible_session(request, session_id)
    if not service.replace_participants(session.id, participants):
        raise ApiError(status.HTTP_404_NOT_FOUND, SESSION_NOT_FOUND_OR_EXPIRED)
    updated = service.get_session(session.id)
    if updated is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, SESSION_NOT_FOUND_OR_EXPIRED)
    return {"sessionId": str(updated.id), "data": updated.data}


def _accessible_session(request: Request, session_id: str) -> SplitSession:
    parsed_id = _parse_session_id(session_id)
    session = (
        _service(request).get_accessible_session(parsed_id) if parsed_id else None
    )
    if session is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, SESSION_NOT_FOUND_OR_EXPIRED)
    return session


def _parse_participants(body: bytes) -> list[Participant]:
    """Validate a ``{"participants": [...]}`` body before touching the store."""
    try:
        payload = json.loads(body) if body else None
    except ValueError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, INVALID_PARTICIPANTS_DATA) from exc
    raw = payload.get("participants") if isinstance(payload, dict) else None
    if not isinstance(raw, list):
        raise ApiError(status.HTTP_400_BAD_REQUEST, INVALID_PARTICIPANTS_DATA)
    try:
        entries = participants_adapter.validate_python(raw)
    except ValidationError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, INVALID_PARTICIPANTS_DATA) from exc
    return [Participant(name=entry.name, amount=entry.amount) for entry in entries]


def _parse_session_id(raw: str) -> UUID | None:
    try:
        return UUID(raw)
    except ValueError:
        return None


def _owner_view(session: SplitSession) -> dict[str, object]:
    return {
        "id": str(session.id),
        "ownerId": session.owner_id,
        "name": session.name,
        "createdAt": session.created_at,
        "expiresAt": session.expires_at,
        "isActive": session.is_active,
        "url": session.url,
        "data": session.data,
    }


def _listing_view(listing: SessionListing) -> dict[str, object]:
    session = listing.session
    return {
        "id": str(session.id),
        "name": session.name,
        "createdAt": session.created_at,
        "expiresAt": session.expires_at,
        "isActive": session.is_active,
        "isExpired": listing.is_expired,
        "url": session.url,
        "participantCount": len(session.participants),
    }
