"""Tests for the webhook CLI."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from src.cli import cli


@pytest.fixture(autouse=True)
def _whatsapp_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WHATSAPP_TOKEN", "tok")
    monkeypatch.setenv("WHATSAPP_PHONE_NUMBER_ID", "123")
    monkeypatch.setenv("WHATSAPP_VERIFY_TOKEN", "ver")
    monkeypatch.setenv("BOT_NAME", "CLIBOT")


def test_commands_lists_builtins() -> None:
    result = CliRunner().invoke(cli, ["commands"])
    assert result.exit_code == 0
    for name in ("start", "ping", "help", "translate", "tts", "echo"):
        assert f'"name": "{name}"' in result.output
    assert '"welcome"' in result.output


def test_dispatch_prints_outbound_payload() -> None:
    result = CliRunner().invoke(cli, ["dispatch", "/ping", "--sender", "999"])
    assert result.exit_code == 0
    assert '"to": "999"' in result.output
    assert '"body": "pong"' in result.output


def test_dispatch_onboarding_uses_configured_name() -> None:
    result = CliRunner().invoke(cli, ["dispatch", "hello"])
    assert result.exit_code == 0
    assert "CLIBOT" in result.output


def test_dispatch_non_text_message() -> None:
    result = CliRunner().invoke(cli, ["dispatch", "ignored", "--type", "image"])
    assert result.exit_code == 0
    assert "Received non-text message" in result.output


def test_serve_runs_uvicorn_factory() -> None:
    with patch("uvicorn.run") as mock_run:
        result = CliRunner().invoke(cli, ["serve", "--port", "9000"])
    assert result.exit_code == 0
    mock_run.assert_called_once_with(
        "src.api.app:create_app_from_env", factory=True, host="0.0.0.0", port=9000,
    )
