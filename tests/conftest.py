"""Shared test fixtures for the WhatsApp command webhook."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from src.audit.logger import AuditLogger
from src.commands.builtin import build_default_registry
from src.commands.context import CommandContext
from src.commands.registry import CommandRegistry
from src.config import Settings
from src.models import SendResult


class RecordingGateway:
    """Outbound gateway double that records every payload."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[dict[str, Any]] = []
        self.fail = fail

    async def send_text(self, to: str, text: str) -> SendResult:
        if self.fail:
            raise RuntimeError("send failed")
        self.sent.append({"to": to, "type": "text", "text": {"body": text}})
        return SendResult(status_code=200)

    async def send_audio_link(self, to: str, link: str) -> SendResult:
        if self.fail:
            raise RuntimeError("send failed")
        self.sent.append({"to": to, "type": "audio", "audio": {"link": link}})
        return SendResult(status_code=200)

    @property
    def texts(self) -> list[str]:
        return [p["text"]["body"] for p in self.sent if p["type"] == "text"]


class FakeTranslator:
    def __init__(self, result: str | None = "Halo dunia") -> None:
        self.result = result
        self.calls: list[tuple[str, str]] = []

    async def translate(self, text: str, target: str) -> str | None:
        self.calls.append((text, target))
        return self.result


class FakeTTS:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def get_audio_url(self, text: str, lang: str) -> str:
        self.calls.append((text, lang))
        if self.error:
            raise self.error
        return f"https://tts.example/{lang}?q={text}"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        whatsapp_token="test-token",
        phone_number_id="123456",
        verify_token="test-verify",
        bot_name="TESTBOT",
        creator="Tester",
        channel_link="https://whatsapp.com/channel/test",
        group_link="https://chat.whatsapp.com/test",
    )


@pytest.fixture
def registry() -> CommandRegistry:
    return build_default_registry()


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def tts() -> FakeTTS:
    return FakeTTS()


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)


@pytest.fixture
def make_context(
    settings: Settings,
    registry: CommandRegistry,
    gateway: RecordingGateway,
    translator: FakeTranslator,
    tts: FakeTTS,
):
    """Build a CommandContext around the shared doubles."""

    def _create(args: str = "", raw: str = "", sender: str = "15551234567") -> CommandContext:
        return CommandContext(
            sender=sender,
            raw=raw,
            args=args,
            gateway=gateway,
            translator=translator,
            tts=tts,
            registry=registry,
            settings=settings,
        )

    return _create


# --- Factory functions for test data ---


def make_webhook_payload(*messages: dict[str, Any]) -> dict[str, Any]:
    """WhatsApp Business Account delivery wrapping the given messages."""
    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "BID",
                "changes": [
                    {
                        "value": {
                            "messaging_product": "whatsapp",
                            "metadata": {"phone_number_id": "PID"},
                            "messages": list(messages),
                        },
                        "field": "messages",
                    }
                ],
            }
        ],
    }


def make_text_message(
    text: str = "hello",
    phone: str = "15551234567",
    message_id: str = "wamid.1",
) -> dict[str, Any]:
    return {
        "from": phone,
        "id": message_id,
        "timestamp": "1700000000",
        "type": "text",
        "text": {"body": text},
    }
