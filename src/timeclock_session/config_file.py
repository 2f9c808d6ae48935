"""Typed parsing and validation for session config files.

Example:
    schema_version = 1

    [session]
    api_base_url = "https://timeclock.example.com"
    timeout_seconds = 10
"""

from __future__ import annotations

import math
import tomllib
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .exceptions import ConfigFileNotFoundError, ConfigFileParseError, ConfigFileValidationError

_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class SessionConfigFile:
    """Validated client config values loaded from a TOML file."""

    api_base_url: str | None = None
    api_version: str | None = None
    timeout_seconds: float | None = None
    access_token_lifetime_seconds: float | None = None
    refresh_threshold_seconds: float | None = None
    csrf_cookie_name: str | None = None
    csrf_header_name: str | None = None
    login_route: str | None = None


class _SessionSectionModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    api_base_url: str | None = None
    api_version: str | None = None
    timeout_seconds: float | None = None
    access_token_lifetime_seconds: float | None = None
    refresh_threshold_seconds: float | None = None
    csrf_cookie_name: str | None = None
    csrf_header_name: str | None = None
    login_route: str | None = None

    @field_validator("api_base_url")
    @classmethod
    def _validate_base_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text.startswith(("http://", "https://")):
            raise ValueError
        return text

    @field_validator("api_version", "login_route")
    @classmethod
    def _validate_path(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text.startswith("/"):
            raise ValueError
        return text

    @field_validator("csrf_cookie_name", "csrf_header_name")
    @classmethod
    def _validate_non_empty_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text:
            raise ValueError
        return text

    @field_validator(
        "timeout_seconds",
        "access_token_lifetime_seconds",
        "refresh_threshold_seconds",
    )
    @classmethod
    def _validate_positive(cls, value: float | None) -> float | None:
        if value is None:
            return None
        if not math.isfinite(value) or value <= 0:
            raise ValueError
        return value


class _ConfigFileModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int
    session: _SessionSectionModel

    @field_validator("schema_version")
    @classmethod
    def _validate_schema_version(cls, value: int) -> int:
        if value != _SCHEMA_VERSION:
            raise ValueError
        return value


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def load_session_config_file(path: Path) -> SessionConfigFile:
    """Load and validate a session TOML config file."""
    if not path.is_file():
        raise ConfigFileNotFoundError(str(path))

    raw_payload = path.read_text(encoding="utf-8")
    try:
        payload: object = tomllib.loads(raw_payload)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileParseError(str(path), str(exc)) from exc

    try:
        model = _ConfigFileModel.model_validate(payload)
    except ValidationError as exc:
        raise ConfigFileValidationError(str(path), _format_validation_error(exc)) from exc

    section = model.session
    return SessionConfigFile(
        api_base_url=section.api_base_url,
        api_version=section.api_version,
        timeout_seconds=section.timeout_seconds,
        access_token_lifetime_seconds=section.access_token_lifetime_seconds,
        refresh_threshold_seconds=section.refresh_threshold_seconds,
        csrf_cookie_name=section.csrf_cookie_name,
        csrf_header_name=section.csrf_header_name,
        login_route=section.login_route,
    )
