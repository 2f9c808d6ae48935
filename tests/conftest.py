"""Pytest fixtures for the session client tests.

All tests are network-isolated - socket connections are blocked by default.
"""

from __future__ import annotations

import socket

import pytest

from tests.fakes import FakeClock, FakeNavigator, FakeTransport
from tests.support.errors import NetworkIsolationError
from timeclock_session.anti_forgery import AntiForgeryReader
from timeclock_session.credentials import CredentialStore
from timeclock_session.pipeline import RequestPipeline

API_URL = "http://api.test/v1"


def _blocked_socket_connect(self: socket.socket, *args: object, **kwargs: object) -> None:
    """Raise an error if any test tries to make a real network connection."""
    raise NetworkIsolationError(str(args))


@pytest.fixture(autouse=True)
def block_network_access(monkeypatch: pytest.MonkeyPatch) -> None:
    """Block all network access in tests.

    Tests that need HTTP should use FakeTransport or MagicMock.
    """
    monkeypatch.setattr(socket.socket, "connect", _blocked_socket_connect)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> CredentialStore:
    return CredentialStore(clock=clock)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport(base_url=API_URL)


@pytest.fixture
def navigator() -> FakeNavigator:
    return FakeNavigator()


@pytest.fixture
def pipeline(
    transport: FakeTransport, store: CredentialStore, navigator: FakeNavigator
) -> RequestPipeline:
    return RequestPipeline(
        transport=transport,
        store=store,
        anti_forgery=AntiForgeryReader(cookie_source=transport.cookie_header),
        navigator=navigator,
        api_url=API_URL,
        timeout_seconds=5.0,
    )
