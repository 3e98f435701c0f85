"""Pydantic models for API request payloads."""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, TypeAdapter

from expense_split.domain.sessions import hours_to_ms


class LoginRequest(BaseModel):
    """Credentials posted to the login endpoint."""

    username: str
    password: str


class CreateSessionRequest(BaseModel):
    """Owner request to open a new session."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    expiration_hours: float | None = Field(default=None, alias="expirationHours")


class UpdateSessionRequest(BaseModel):
    """Owner request to toggle or extend a session.

    Fields are loosely typed: a non-boolean ``isActive``, or an ``extendHours``
    that does not add at least one millisecond, is ignored rather than rejected.
    """

    model_config = ConfigDict(populate_by_name=True)

    is_active: Any = Field(default=None, alias="isActive")
    extend_hours: Any = Field(default=None, alias="extendHours")

    def active_flag(self) -> bool | None:
        return self.is_active if isinstance(self.is_active, bool) else None

    def extension_hours(self) -> float | None:
        value = self.extend_hours
        if isinstance(value, bool) or not isinstance(value, int | float):
            return None
        if not math.isfinite(value) or hours_to_ms(value) <= 0:
            return None
        return float(value)


class ParticipantPayload(BaseModel):
    """One participant entry submitted by a collaborator."""

    name: StrictStr
    amount: float = Field(ge=0, allow_inf_nan=False)


participants_adapter = TypeAdapter(list[ParticipantPayload])
