"""Request and response values passed through the request pipeline."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Self

MUTATING_METHODS = frozenset({"POST", "PUT", "DELETE", "PATCH"})


def _empty_mapping() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class ApiRequest:
    """An outgoing API call, relative to the configured API URL.

    `retry_count` is the per-call retry marker: the original call carries 0 and
    the single replay after a refresh carries 1. Replays are new values, so the
    marker never leaks between requests.
    """

    method: str
    path: str
    params: Mapping[str, str] | None = None
    json: object | None = None
    headers: Mapping[str, str] = field(default_factory=_empty_mapping)
    retry_count: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def is_mutating(self) -> bool:
        return self.method in MUTATING_METHODS

    @property
    def is_retry(self) -> bool:
        return self.retry_count > 0

    def with_header(self, name: str, value: str) -> Self:
        headers = {key: item for key, item in self.headers.items() if key.lower() != name.lower()}
        headers[name] = value
        return replace(self, headers=headers)

    def as_retry(self) -> Self:
        return replace(self, retry_count=self.retry_count + 1)

    @classmethod
    def get(cls, path: str, *, params: Mapping[str, str] | None = None) -> Self:
        return cls("GET", path, params=params)

    @classmethod
    def post(cls, path: str, *, json: object | None = None) -> Self:
        return cls("POST", path, json=json)

    @classmethod
    def put(cls, path: str, *, json: object | None = None) -> Self:
        return cls("PUT", path, json=json)

    @classmethod
    def patch(cls, path: str, *, json: object | None = None) -> Self:
        return cls("PATCH", path, json=json)

    @classmethod
    def delete(cls, path: str) -> Self:
        return cls("DELETE", path)


@dataclass(frozen=True)
class HttpResponse:
    """Transport-neutral view of an HTTP response."""

    status_code: int
    text: str = ""
    headers: Mapping[str, str] = field(default_factory=_empty_mapping)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> object:
        """Decode the body, returning None for an empty body."""
        if not self.text.strip():
            return None
        return json.loads(self.text)
