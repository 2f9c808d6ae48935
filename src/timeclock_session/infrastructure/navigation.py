"""Navigators invoked when a session ends and the user must log in again."""

from __future__ import annotations

from collections.abc import Callable

from typing_extensions import override

from ..observability import get_logger
from ..protocols import Navigator

logger = get_logger("timeclock_session.infrastructure.navigation")


class LoggingNavigator(Navigator):
    """Default navigator for headless use: records the redirect in the log."""

    @override
    def redirect_to_login(self, route: str) -> None:
        logger.warning("Re-authentication required; navigate to %s", route)


class CallbackNavigator(Navigator):
    """Navigator delegating to a host-provided callback (UI shells, CLIs)."""

    def __init__(self, callback: Callable[[str], None]) -> None:
        self._callback = callback

    @override
    def redirect_to_login(self, route: str) -> None:
        self._callback(route)
