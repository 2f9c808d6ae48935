"""Exports for test fakes."""

from .clock import FakeClock
from .http import FakeTransport, SentRequest, json_response
from .navigation import FakeNavigator

__all__ = [
    "FakeClock",
    "FakeNavigator",
    "FakeTransport",
    "SentRequest",
    "json_response",
]
