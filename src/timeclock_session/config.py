"""Centralised, injectable configuration for the timeclock session client."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Self

from dotenv import load_dotenv

from .config_file import SessionConfigFile


class PositiveNumberEnvVarError(ValueError):
    """Raised when an environment variable must be a positive number."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a positive number.")


class RefreshThresholdError(ValueError):
    """Raised when the refresh threshold is not shorter than the credential lifetime."""

    def __init__(self) -> None:
        super().__init__(
            "REFRESH_THRESHOLD_SECONDS must be shorter than ACCESS_TOKEN_LIFETIME_SECONDS."
        )


@dataclass(frozen=True)
class ClientConfig:
    """Immutable configuration for the API client and its session layer.

    Load from environment with `ClientConfig.from_env()` or construct directly for testing.
    """

    # API
    api_base_url: str = "http://localhost:8080"
    api_version: str = "/v1"
    timeout_seconds: float = 30.0

    # Access credential
    access_token_lifetime_seconds: float = 900.0
    refresh_threshold_seconds: float = 120.0

    # Anti-forgery double submit
    csrf_cookie_name: str = "csrf_token"
    csrf_header_name: str = "X-CSRF-Token"

    # Where a failed session sends the user
    login_route: str = "/login"

    @property
    def api_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}{self.api_version}"

    @property
    def access_token_lifetime(self) -> timedelta:
        return timedelta(seconds=self.access_token_lifetime_seconds)

    @property
    def refresh_threshold(self) -> timedelta:
        return timedelta(seconds=self.refresh_threshold_seconds)

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> Self:
        """Load configuration from environment variables.

        Args:
            dotenv_path: Optional path to .env file. If None, uses default .env discovery.

        Returns:
            ClientConfig instance populated from environment.
        """
        load_dotenv(dotenv_path)

        config = cls(
            api_base_url=os.getenv("API_BASE_URL", "").strip() or "http://localhost:8080",
            api_version=os.getenv("API_VERSION", "/v1").strip(),
            timeout_seconds=_parse_positive_float(
                os.getenv("API_TIMEOUT_SECONDS", "30"), env_name="API_TIMEOUT_SECONDS"
            ),
            access_token_lifetime_seconds=_parse_positive_float(
                os.getenv("ACCESS_TOKEN_LIFETIME_SECONDS", "900"),
                env_name="ACCESS_TOKEN_LIFETIME_SECONDS",
            ),
            refresh_threshold_seconds=_parse_positive_float(
                os.getenv("REFRESH_THRESHOLD_SECONDS", "120"),
                env_name="REFRESH_THRESHOLD_SECONDS",
            ),
            csrf_cookie_name=os.getenv("CSRF_COOKIE_NAME", "").strip() or "csrf_token",
            csrf_header_name=os.getenv("CSRF_HEADER_NAME", "").strip() or "X-CSRF-Token",
            login_route=os.getenv("LOGIN_ROUTE", "").strip() or "/login",
        )
        config.validate()
        return config

    def validate(self) -> None:
        if self.refresh_threshold_seconds >= self.access_token_lifetime_seconds:
            raise RefreshThresholdError()

    def with_overrides(
        self,
        *,
        api_base_url: str | None = None,
        timeout_seconds: float | None = None,
    ) -> Self:
        """Return a new config with specified overrides (for CLI options)."""
        return replace(
            self,
            api_base_url=self.api_base_url if api_base_url is None else api_base_url.strip(),
            timeout_seconds=self.timeout_seconds if timeout_seconds is None else timeout_seconds,
        )

    def with_file_overrides(self, file_config: SessionConfigFile) -> Self:
        """Return a new config with config-file values overriding env/default values."""
        updated = replace(
            self,
            api_base_url=self.api_base_url
            if file_config.api_base_url is None
            else file_config.api_base_url,
            api_version=self.api_version
            if file_config.api_version is None
            else file_config.api_version,
            timeout_seconds=self.timeout_seconds
            if file_config.timeout_seconds is None
            else file_config.timeout_seconds,
            access_token_lifetime_seconds=self.access_token_lifetime_seconds
            if file_config.access_token_lifetime_seconds is None
            else file_config.access_token_lifetime_seconds,
            refresh_threshold_seconds=self.refresh_threshold_seconds
            if file_config.refresh_threshold_seconds is None
            else file_config.refresh_threshold_seconds,
            csrf_cookie_name=self.csrf_cookie_name
            if file_config.csrf_cookie_name is None
            else file_config.csrf_cookie_name,
            csrf_header_name=self.csrf_header_name
            if file_config.csrf_header_name is None
            else file_config.csrf_header_name,
            login_route=self.login_route
            if file_config.login_route is None
            else file_config.login_route,
        )
        updated.validate()
        return updated


def _parse_positive_float(value: str, *, env_name: str) -> float:
    """Parse a positive number from an environment variable."""
    text = value.strip()
    try:
        parsed = float(text)
    except ValueError as exc:
        raise PositiveNumberEnvVarError(env_name) from exc
    if not math.isfinite(parsed) or parsed <= 0:
        raise PositiveNumberEnvVarError(env_name)
    return parsed
