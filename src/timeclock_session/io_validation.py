"""Pydantic-based validation helpers for inbound API payloads."""

from __future__ import annotations

from enum import StrEnum
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError


class IncomingDataError(ValueError):
    """Raised when inbound data fails validation."""


class UserRole(StrEnum):
    ADMIN = "Admin"
    MANAGER = "Manager"
    EMPLOYEE = "Employee"


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class TokenResponse(_Payload):
    access_token: str


class MessageResponse(_Payload):
    message: str = ""


class AcceptInviteResponse(_Payload):
    message: str = ""
    access_token: str | None = None


class VerifyInviteResponse(_Payload):
    valid: bool
    email: str | None = None


class User(_Payload):
    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    organization_id: str
    created_at: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class SessionInfo(_Payload):
    id: str
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: str
    last_activity: str
    expires_at: str


class ActiveSessionsResponse(_Payload):
    sessions: tuple[SessionInfo, ...]
    total: int


_JSON_OBJECT = TypeAdapter(dict[str, object])

SchemaT = TypeVar("SchemaT")


def validate_as(schema: type[SchemaT], payload: object) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_python(payload)
    except ValidationError as exc:
        message = f"Invalid payload for {schema.__name__}."
        raise IncomingDataError(message) from exc


def as_json_object(payload: object) -> dict[str, object] | None:
    """Return `payload` as a JSON object, or None when it is not one."""
    try:
        return _JSON_OBJECT.validate_python(payload, strict=True)
    except ValidationError:
        return None
