"""Tests for config-file schema parsing and fail-fast validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from timeclock_session.config_file import load_session_config_file
from timeclock_session.exceptions import (
    ConfigFileNotFoundError,
    ConfigFileParseError,
    ConfigFileValidationError,
)


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "session.toml"
    path.write_text(content.strip(), encoding="utf-8")
    return path


def test_load_session_config_file_parses_valid_toml(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
schema_version = 1

[session]
api_base_url = " https://timeclock.example.com "
api_version = "/v1"
timeout_seconds = 10
access_token_lifetime_seconds = 900
refresh_threshold_seconds = 90.5
csrf_cookie_name = "csrf_token"
csrf_header_name = "X-CSRF-Token"
login_route = "/login"
""",
    )

    parsed = load_session_config_file(path)

    assert parsed.api_base_url == "https://timeclock.example.com"
    assert parsed.api_version == "/v1"
    assert parsed.timeout_seconds == 10.0
    assert parsed.access_token_lifetime_seconds == 900.0
    assert parsed.refresh_threshold_seconds == 90.5
    assert parsed.login_route == "/login"


def test_load_session_config_file_allows_empty_section(tmp_path: Path) -> None:
    path = _write(tmp_path, "schema_version = 1\n\n[session]\n")

    parsed = load_session_config_file(path)

    assert parsed.api_base_url is None
    assert parsed.timeout_seconds is None


def test_load_session_config_file_fails_when_file_missing(tmp_path: Path) -> None:
    with pytest.raises(ConfigFileNotFoundError):
        load_session_config_file(tmp_path / "missing.toml")


def test_load_session_config_file_fails_on_invalid_toml(tmp_path: Path) -> None:
    path = _write(tmp_path, "schema_version = \n[session")

    with pytest.raises(ConfigFileParseError):
        load_session_config_file(path)


@pytest.mark.parametrize(
    "body",
    [
        'schema_version = 2\n[session]\napi_base_url = "https://a.test"',
        "[session]\ntimeout_seconds = 5",
        "schema_version = 1\n[session]\nunknown_key = 1",
        'schema_version = 1\n[session]\napi_base_url = "ftp://a.test"',
        'schema_version = 1\n[session]\nlogin_route = "login"',
        'schema_version = 1\n[session]\ncsrf_cookie_name = "  "',
        "schema_version = 1\n[session]\ntimeout_seconds = 0",
        "schema_version = 1\n[session]\ntimeout_seconds = nan",
        "schema_version = 1\n[session]\naccess_token_lifetime_seconds = inf",
    ],
)
def test_load_session_config_file_rejects_invalid_values(tmp_path: Path, body: str) -> None:
    path = _write(tmp_path, body)

    with pytest.raises(ConfigFileValidationError):
        load_session_config_file(path)


def test_validation_error_names_location(tmp_path: Path) -> None:
    path = _write(tmp_path, "schema_version = 1\n[session]\ntimeout_seconds = -1")

    with pytest.raises(ConfigFileValidationError, match="session.timeout_seconds"):
        load_session_config_file(path)
