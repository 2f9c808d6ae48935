"""Composition root for wiring the session layer.

The credential store is built once here and shared by reference with the
pipeline and the auth session.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from .anti_forgery import AntiForgeryReader
from .auth import AuthApi, AuthSession
from .cli import CliDependencies, create_app
from .client import ApiClient
from .config import ClientConfig
from .credentials import CredentialStore, utc_now
from .infrastructure import LoggingNavigator, RequestsTransport
from .pipeline import RequestPipeline
from .protocols import HttpTransport, Navigator


def build_api_client(
    config: ClientConfig,
    *,
    transport: HttpTransport | None = None,
    navigator: Navigator | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> ApiClient:
    """Build an `ApiClient` with a fresh credential store."""
    transport_value = transport or RequestsTransport()
    store = CredentialStore(
        lifetime=config.access_token_lifetime,
        refresh_threshold=config.refresh_threshold,
        clock=clock,
    )
    anti_forgery = AntiForgeryReader(
        cookie_source=transport_value.cookie_header,
        cookie_name=config.csrf_cookie_name,
    )
    pipeline = RequestPipeline(
        transport=transport_value,
        store=store,
        anti_forgery=anti_forgery,
        navigator=navigator or LoggingNavigator(),
        api_url=config.api_url,
        timeout_seconds=config.timeout_seconds,
        csrf_header_name=config.csrf_header_name,
        login_route=config.login_route,
    )
    return ApiClient(pipeline)


def build_auth_session(
    config: ClientConfig,
    *,
    transport: HttpTransport | None = None,
    navigator: Navigator | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> AuthSession:
    """Build an `AuthSession` over a new `ApiClient`."""
    client = build_api_client(config, transport=transport, navigator=navigator, clock=clock)
    return AuthSession(api=AuthApi(client), anti_forgery=client.pipeline.anti_forgery)


def build_cli_dependencies(*, config: ClientConfig, navigator: Navigator) -> CliDependencies:
    """Build concrete dependencies for CLI commands."""
    return CliDependencies(session=build_auth_session(config, navigator=navigator))


app = create_app(build_cli_dependencies)
