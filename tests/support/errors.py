"""Test-only exceptions for enforcing constraints."""

from __future__ import annotations


class NetworkIsolationError(RuntimeError):
    """Raised when a test attempts a real network connection."""

    def __init__(self, attempted: str) -> None:
        super().__init__(
            "Tests must not make network connections! "
            "Use FakeTransport or MagicMock instead. "
            f"Attempted connection to: {attempted}"
        )


class FakeResponseMissingError(LookupError):
    """Raised when a fake transport has no canned response configured."""

    def __init__(self, route: str) -> None:
        super().__init__(f"No canned response for: {route}")
