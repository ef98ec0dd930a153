"""Per-message context handed to command handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.commands.registry import CommandRegistry
    from src.config import Settings
    from src.models import SendResult


class OutboundGateway(Protocol):
    async def send_text(self, to: str, text: str) -> SendResult: ...

    async def send_audio_link(self, to: str, link: str) -> SendResult: ...


class Translator(Protocol):
    async def translate(self, text: str, target: str) -> str | None: ...


class SpeechSynthesizer(Protocol):
    def get_audio_url(self, text: str, lang: str) -> str: ...


@dataclass(frozen=True)
class CommandContext:
    """Everything a handler may touch while answering one inbound message."""

    sender: str
    raw: str
    args: str
    gateway: OutboundGateway
    translator: Translator
    tts: SpeechSynthesizer
    registry: CommandRegistry
    settings: Settings

    async def reply(self, text: str) -> SendResult:
        return await self.gateway.send_text(self.sender, text)

    async def reply_audio(self, link: str) -> SendResult:
        return await self.gateway.send_audio_link(self.sender, link)
