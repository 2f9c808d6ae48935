"""HTTP transport fakes for tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

from typing_extensions import override

from tests.support.errors import FakeResponseMissingError
from timeclock_session.protocols import HttpTransport
from timeclock_session.types import HttpResponse

CannedResponse: TypeAlias = "HttpResponse | Exception | Callable[[SentRequest], HttpResponse]"


def json_response(status_code: int, body: object | None = None) -> HttpResponse:
    return HttpResponse(status_code=status_code, text="" if body is None else json.dumps(body))


@dataclass(frozen=True)
class SentRequest:
    """A request as seen by the transport."""

    method: str
    path: str
    headers: Mapping[str, str]
    params: Mapping[str, str] | None
    json: object | None
    timeout_seconds: float


@dataclass
class FakeTransport(HttpTransport):
    """Fake transport returning canned responses per (method, path).

    Responses queued for a route are consumed in order; the last one repeats.
    """

    base_url: str = "http://api.test/v1"
    cookies: dict[str, str] = field(default_factory=dict)
    routes: dict[tuple[str, str], list[CannedResponse]] = field(default_factory=dict)
    calls: list[SentRequest] = field(default_factory=list)

    def queue(self, method: str, path: str, *responses: CannedResponse) -> None:
        self.routes.setdefault((method.upper(), path), []).extend(responses)

    def calls_to(self, method: str, path: str) -> list[SentRequest]:
        return [call for call in self.calls if call.method == method.upper() and call.path == path]

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
        path = url.removeprefix(self.base_url)
        sent = SentRequest(
            method=method,
            path=path,
            headers=dict(headers),
            params=params,
            json=json,
            timeout_seconds=timeout_seconds,
        )
        self.calls.append(sent)
        queued = self.routes.get((method, path))
        if not queued:
            raise FakeResponseMissingError(f"{method} {path}")
        canned = queued.pop(0) if len(queued) > 1 else queued[0]
        if isinstance(canned, Exception):
            raise canned
        if callable(canned):
            return canned(sent)
        return canned

    @override
    def cookie_header(self) -> str:
        return "; ".join(f"{name}={value}" for name, value in self.cookies.items())
