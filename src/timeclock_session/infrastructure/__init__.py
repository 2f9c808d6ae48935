"""Concrete infrastructure implementations."""

from .http import RequestsTransport
from .navigation import CallbackNavigator, LoggingNavigator

__all__ = [
    "CallbackNavigator",
    "LoggingNavigator",
    "RequestsTransport",
]
