"""CLI for the timeclock session client.

Commands:
- login: Sign in and show the current user
- sessions: Sign in and list active sessions
- request: Sign in and send an authorized request to any API path

The access credential lives only in process memory, so every command signs in
for the duration of its own run.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn, Protocol

import typer
from rich import print as rprint
from rich import print_json
from rich.table import Table
from typing_extensions import override

from .auth import AuthSession
from .config import ClientConfig
from .config_file import load_session_config_file
from .exceptions import ApiError
from .observability import set_log_level
from .protocols import Navigator
from .types import ApiRequest


class DependenciesBuilder(Protocol):
    """Protocol for constructing CLI dependencies."""

    def __call__(self, *, config: ClientConfig, navigator: Navigator) -> CliDependencies:
        """Build dependencies for CLI commands."""
        ...


@dataclass(frozen=True)
class CliDependencies:
    """Concrete dependencies required by the CLI."""

    session: AuthSession


@dataclass(frozen=True)
class CliContext:
    """Runtime CLI context for a single command invocation."""

    config: ClientConfig
    deps_builder: DependenciesBuilder

    def build_dependencies(self) -> CliDependencies:
        """Return dependencies using the configured builder."""
        return self.deps_builder(config=self.config, navigator=CliNavigator())


class CliNavigator(Navigator):
    """Tells the user to sign in again when the session cannot be renewed."""

    @override
    def redirect_to_login(self, route: str) -> None:
        rprint(f"[yellow]Session expired; sign in again ({route}).[/yellow]")


class CliContextNotInitialisedError(typer.BadParameter):
    """Raised when CLI context is missing."""

    def __init__(self) -> None:
        super().__init__("CLI context is not initialised. Use the timeclock-session entry point.")


class InvalidJsonBodyError(typer.BadParameter):
    """Raised when --data is not valid JSON."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"--data must be valid JSON: {reason}")


_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

EmailOption = Annotated[
    str,
    typer.Option("--email", "-e", envvar="TIMECLOCK_EMAIL", prompt=True, help="Account email"),
]
PasswordOption = Annotated[
    str,
    typer.Option(
        "--password",
        envvar="TIMECLOCK_PASSWORD",
        prompt=True,
        hide_input=True,
        help="Account password",
    ),
]


def _get_context(ctx: typer.Context) -> CliContext:
    if not isinstance(ctx.obj, CliContext):
        raise CliContextNotInitialisedError()
    return ctx.obj


def _fail(error: ApiError) -> NoReturn:
    status = f" (HTTP {error.status})" if error.status is not None else ""
    rprint(f"[red]✗ {error.message}{status}[/red]")
    raise typer.Exit(code=1)


@contextmanager
def _signed_in(ctx: typer.Context, email: str, password: str) -> Iterator[AuthSession]:
    """Sign in for the duration of one command, logging out afterwards."""
    session = _get_context(ctx).build_dependencies().session
    try:
        user = session.login(email, password)
    except ApiError as exc:
        _fail(exc)
    rprint(f"[green]✓ Signed in:[/green] {user.full_name} <{user.email}> ({user.role})")
    try:
        yield session
    finally:
        session.logout()


def _parse_body(data: str | None) -> object | None:
    if data is None:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        raise InvalidJsonBodyError(exc.msg) from exc


def create_app(deps_builder: DependenciesBuilder) -> typer.Typer:
    """Create a Typer app wired with the provided dependencies builder."""
    app = typer.Typer(
        add_completion=False,
        help="Authorized access to the timeclock API.",
    )

    @app.callback()
    def main(
        ctx: typer.Context,
        config_file: Annotated[
            Path | None,
            typer.Option("--config", "-c", help="TOML config file overriding environment values"),
        ] = None,
        base_url: Annotated[
            str | None,
            typer.Option("--base-url", help="API base URL (overrides API_BASE_URL)"),
        ] = None,
        timeout: Annotated[
            float | None,
            typer.Option("--timeout", min=0.1, help="Per-request timeout in seconds"),
        ] = None,
        log_level: Annotated[
            str,
            typer.Option("--log-level", help="debug, info, warning or error"),
        ] = "warning",
    ) -> None:
        """Initialise CLI context."""
        set_log_level(log_level)
        config = ClientConfig.from_env()
        if config_file is not None:
            config = config.with_file_overrides(load_session_config_file(config_file))
        config = config.with_overrides(api_base_url=base_url, timeout_seconds=timeout)
        ctx.obj = CliContext(config=config, deps_builder=deps_builder)

    @app.command()
    def login(ctx: typer.Context, email: EmailOption, password: PasswordOption) -> None:
        """Sign in and show the current user."""
        with _signed_in(ctx, email, password):
            pass

    @app.command()
    def sessions(ctx: typer.Context, email: EmailOption, password: PasswordOption) -> None:
        """Sign in and list active sessions."""
        with _signed_in(ctx, email, password) as session:
            try:
                active = session.api.active_sessions()
            except ApiError as exc:
                _fail(exc)
        table = Table("ID", "IP address", "User agent", "Last activity", "Expires")
        for info in active.sessions:
            table.add_row(
                info.id,
                info.ip_address or "-",
                info.user_agent or "-",
                info.last_activity,
                info.expires_at,
            )
        rprint(table)
        rprint(f"Total: {active.total}")

    @app.command()
    def request(
        ctx: typer.Context,
        method: Annotated[str, typer.Argument(help="HTTP method")],
        path: Annotated[str, typer.Argument(help="API path, e.g. /clocks/status")],
        email: EmailOption,
        password: PasswordOption,
        data: Annotated[
            str | None,
            typer.Option("--data", "-d", help="JSON request body"),
        ] = None,
    ) -> None:
        """Sign in and send an authorized request."""
        verb = method.upper()
        if verb not in _METHODS:
            raise typer.BadParameter(f"method must be one of {', '.join(_METHODS)}")
        body = _parse_body(data)
        with _signed_in(ctx, email, password) as session:
            try:
                result = session.api.client.request(ApiRequest(verb, path, json=body))
            except ApiError as exc:
                _fail(exc)
        if isinstance(result, str):
            rprint(result)
        else:
            print_json(data=result)

    return app
