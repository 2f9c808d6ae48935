"""Custom exceptions for the timeclock session client.

`ApiError` is the single domain error shape surfaced to callers. Its subclasses
classify the failure so callers can branch without inspecting status codes.
"""

from __future__ import annotations

from collections.abc import Sequence


class SessionClientError(Exception):
    """Base exception for all session client errors."""

    pass


class ApiError(SessionClientError):
    """Normalised API failure with an optional status and detail list.

    Instances are immutable: attributes are exposed as read-only properties.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        details: Sequence[str] | None = None,
    ) -> None:
        super().__init__(message)
        self._message = message
        self._status = status
        self._details = tuple(details) if details is not None else None

    @property
    def message(self) -> str:
        return self._message

    @property
    def status(self) -> int | None:
        return self._status

    @property
    def details(self) -> tuple[str, ...] | None:
        return self._details

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self._message!r}, "
            f"status={self._status!r}, details={self._details!r})"
        )


class CredentialRejectedError(ApiError):
    """Raised when the login or refresh endpoint rejects the presented credentials.

    A 401 from these endpoints means bad credentials, not an expired session,
    so it never triggers a refresh.
    """


class SessionExpiredError(ApiError):
    """Raised when a session cannot be renewed and re-authentication is required."""

    @classmethod
    def no_session(cls) -> SessionExpiredError:
        return cls("Session expired. Please log in again.", status=401)

    @classmethod
    def refresh_failed(cls, error: ApiError) -> SessionExpiredError:
        return cls(error.message, status=error.status, details=error.details)


class TransientNetworkError(ApiError):
    """Raised when no response was received (timeout, connection failure)."""


class RequestRejectedError(ApiError):
    """Raised for 4xx responses other than a recoverable 401 (validation, conflicts)."""


class ServerError(ApiError):
    """Raised for 5xx responses."""


class ConfigFileNotFoundError(SessionClientError):
    """Raised when a config file path does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}")


class ConfigFileParseError(SessionClientError):
    """Raised when a config file is not valid TOML."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Config file {path} could not be parsed: {reason}")


class ConfigFileValidationError(SessionClientError):
    """Raised when a config file fails schema validation."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Config file {path} is invalid: {reason}")
