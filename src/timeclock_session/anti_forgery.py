"""Reader for the script-readable anti-forgery cookie.

The cookie value is echoed in a header on mutating requests (double submit).
Its presence is also a fast-fail hint that a refresh cookie may exist; the
server remains the authority on whether the session is valid.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

DEFAULT_COOKIE_NAME = "csrf_token"


def parse_cookie_value(raw: str, name: str) -> str | None:
    """Return the value of the first `name=value` entry in a raw cookie string.

    Empty values are treated as absent, matching a cookie cleared with `name=`.
    """
    for part in raw.split(";"):
        key, sep, value = part.strip().partition("=")
        if sep and key.strip() == name:
            value = value.strip()
            return value or None
    return None


@dataclass(frozen=True)
class AntiForgeryReader:
    """Reads the anti-forgery token from a raw cookie string source."""

    cookie_source: Callable[[], str]
    cookie_name: str = DEFAULT_COOKIE_NAME

    def read(self) -> str | None:
        return parse_cookie_value(self.cookie_source(), self.cookie_name)
