"""Requests-backed HTTP transport.

Usage example:
    import requests

    from timeclock_session.infrastructure.http import RequestsTransport

    transport = RequestsTransport(session=requests.Session())
    response = transport.send(
        "GET",
        "http://localhost:8080/v1/auth/me",
        headers={},
        params=None,
        json=None,
        timeout_seconds=30.0,
    )

The session's cookie jar plays the role of the browser cookie store: the
server-set refresh cookie is attached automatically and never read here.
"""

from __future__ import annotations

from collections.abc import Mapping
from http.cookiejar import Cookie

import requests
from typing_extensions import override

from ..observability import get_logger
from ..protocols import HttpTransport
from ..types import HttpResponse

logger = get_logger("timeclock_session.infrastructure.http")

# Cookies the server marks HttpOnly are not readable by the client.
_HTTP_ONLY_ATTRIBUTES = ("HttpOnly", "httponly")


def _is_http_only(cookie: Cookie) -> bool:
    return any(cookie.has_nonstandard_attr(name) for name in _HTTP_ONLY_ATTRIBUTES)


class RequestsTransport(HttpTransport):
    """Transport sending requests through a shared `requests.Session`."""

    def __init__(self, *, session: requests.Session | None = None) -> None:
        self._session = session or requests.Session()
        self._session.headers["Accept"] = "application/json"

    @property
    def session(self) -> requests.Session:
        return self._session

    @override
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
        logger.debug("%s %s", method, url)
        response = self._session.request(
            method,
            url,
            headers=dict(headers),
            params=dict(params) if params else None,
            json=json,
            timeout=timeout_seconds,
        )
        return HttpResponse(
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )

    @override
    def cookie_header(self) -> str:
        return "; ".join(
            f"{cookie.name}={cookie.value or ''}"
            for cookie in self._session.cookies
            if not _is_http_only(cookie)
        )
