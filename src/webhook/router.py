"""Inbound router — decides which command, if any, answers a message."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from src.commands.context import CommandContext
from src.commands.parse import strip_prefix, tokenize
from src.webhook.whatsapp import DeliveryError

if TYPE_CHECKING:
    from src.commands.context import OutboundGateway, SpeechSynthesizer, Translator
    from src.commands.dispatcher import Dispatcher
    from src.config import Settings
    from src.models import InboundMessage

logger = logging.getLogger(__name__)

ONBOARDING_TRIGGERS = frozenset({"/start", "start", "hi", "hello", "hey"})
START_COMMAND = "start"

UNSUPPORTED_NOTICE = (
    "Received non-text message. Only text commands are supported. Type /help for commands."
)


class ResolutionKind(str, Enum):
    NOTICE = "notice"
    ONBOARDING = "onboarding"
    COMMAND = "command"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Resolution:
    kind: ResolutionKind
    text: str = ""
    name: str | None = None
    args: str = ""


def fallback_text(text: str) -> str:
    return f"You said: {text}\nType /help for available commands."


class InboundRouter:
    """Routes inbound WhatsApp messages to commands.

    Resolution order, first match wins:
    1. non-text or empty body -> fixed notice
    2. onboarding trigger word -> `start` (hardcoded welcome if unregistered)
    3. `/name` or `!name` -> prefixed command; otherwise the bare first word
    4. known command -> dispatch with the remaining words as arguments
    5. anything else -> echo the text and point at /help
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        gateway: OutboundGateway,
        translator: Translator,
        tts: SpeechSynthesizer,
        settings: Settings,
    ) -> None:
        self._dispatcher = dispatcher
        self._gateway = gateway
        self._translator = translator
        self._tts = tts
        self._settings = settings

    def resolve(self, message: InboundMessage) -> Resolution:
        text = (message.text or "").strip()
        if not message.is_text or not text:
            return Resolution(ResolutionKind.NOTICE)

        tokens = tokenize(text)
        if tokens.first.lower() in ONBOARDING_TRIGGERS:
            return Resolution(
                ResolutionKind.ONBOARDING, text=text, name=START_COMMAND, args=tokens.remainder,
            )

        name = strip_prefix(tokens.first)
        if name is None:
            name = tokens.first.lower()
        if name in self._dispatcher.registry:
            return Resolution(
                ResolutionKind.COMMAND, text=text, name=name, args=tokens.remainder,
            )
        return Resolution(ResolutionKind.FALLBACK, text=text)

    async def handle(self, message: InboundMessage) -> Resolution:
        resolution = self.resolve(message)
        logger.info(
            "Message from %s resolved as %s%s",
            message.sender,
            resolution.kind.value,
            f" ({resolution.name})" if resolution.name else "",
        )

        if resolution.kind is ResolutionKind.NOTICE:
            await self._gateway.send_text(message.sender, UNSUPPORTED_NOTICE)
        elif resolution.kind is ResolutionKind.FALLBACK:
            await self._gateway.send_text(message.sender, fallback_text(resolution.text))
        else:
            ctx = self._context(message.sender, resolution)
            found = await self._dispatcher.dispatch(resolution.name or "", ctx)
            if not found and resolution.kind is ResolutionKind.ONBOARDING:
                await self._send_builtin_welcome(message.sender)
        return resolution

    async def handle_batch(self, messages: Iterable[InboundMessage]) -> int:
        """Handle messages one after another; returns how many were handled.

        A delivery failure while answering one message is logged and the
        batch moves on to the next message.
        """
        handled = 0
        for message in messages:
            try:
                await self.handle(message)
            except DeliveryError as e:
                logger.error("Could not answer %s: %s", message.sender, e)
                continue
            handled += 1
        return handled

    def _context(self, sender: str, resolution: Resolution) -> CommandContext:
        return CommandContext(
            sender=sender,
            raw=resolution.text,
            args=resolution.args,
            gateway=self._gateway,
            translator=self._translator,
            tts=self._tts,
            registry=self._dispatcher.registry,
            settings=self._settings,
        )

    async def _send_builtin_welcome(self, sender: str) -> None:
        # Used only when the registry has no `start` command.
        s = self._settings
        await self._gateway.send_text(
            sender, f"{s.bot_name}\ncreated by {s.creator}\n\nWelcome! Type /help for commands.",
        )
        await self._gateway.send_text(
            sender, f"Join our Channel: {s.channel_link}\nJoin our Group: {s.group_link}",
        )
