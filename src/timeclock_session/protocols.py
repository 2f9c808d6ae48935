"""Protocol definitions for dependency injection.

These protocols define the seams the session layer depends on, enabling
isolated unit testing with fake implementations.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from .types import HttpResponse


@runtime_checkable
class HttpTransport(Protocol):
    """Abstract HTTP transport with a cookie store shared across requests."""

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        params: Mapping[str, str] | None,
        json: object | None,
        timeout_seconds: float,
    ) -> HttpResponse:
        """Send one request and return its response.

        Raises:
            requests.RequestException: When no response was received.
        """
        ...

    def cookie_header(self) -> str:
        """Return the readable cookies as a raw `name=value; name=value` string."""
        ...


@runtime_checkable
class Navigator(Protocol):
    """Client-side navigation used when a session cannot be renewed."""

    def redirect_to_login(self, route: str) -> None:
        """Perform a full navigation to the login route."""
        ...
