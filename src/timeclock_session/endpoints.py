"""Authentication endpoint paths, relative to the versioned API URL."""

from __future__ import annotations

from urllib.parse import urlsplit

LOGIN = "/auth/login"
LOGOUT = "/auth/logout"
LOGOUT_ALL = "/auth/logout-all"
REFRESH = "/auth/refresh"
ME = "/auth/me"
REQUEST_RESET = "/auth/password/request-reset"
RESET_PASSWORD = "/auth/password/reset"
SESSIONS = "/auth/sessions"
ACCEPT_INVITE = "/auth/accept-invite"
VERIFY_INVITE = "/auth/verify-invite"
CHANGE_PASSWORD = "/auth/change-password"

# A 401 from these means bad credentials, never an expired session.
CREDENTIAL_ISSUING = frozenset({LOGIN, REFRESH})


def session(session_id: str) -> str:
    return f"{SESSIONS}/{session_id}"


def is_credential_issuing(path: str) -> bool:
    """Return True when `path` (relative or absolute) targets login or refresh."""
    normalised = urlsplit(path).path.rstrip("/")
    return any(normalised.endswith(endpoint) for endpoint in CREDENTIAL_ISSUING)
