"""Click CLI for running the webhook and trying commands locally."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import click

from src.clients.translate import LibreTranslateClient
from src.clients.tts import GoogleTTS
from src.commands.builtin import build_default_registry
from src.commands.dispatcher import Dispatcher
from src.config import Settings
from src.models import InboundMessage, SendResult
from src.webhook.router import InboundRouter


class ConsoleGateway:
    """Outbound gateway that prints Graph API payloads instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []

    async def _emit(self, payload: dict[str, Any]) -> SendResult:
        self.sent.append(payload)
        click.echo(json.dumps(payload, ensure_ascii=False))
        return SendResult(status_code=200)

    async def send_text(self, to: str, text: str) -> SendResult:
        return await self._emit({
            "messaging_product": "whatsapp", "to": to, "type": "text", "text": {"body": text},
        })

    async def send_audio_link(self, to: str, link: str) -> SendResult:
        return await self._emit({
            "messaging_product": "whatsapp", "to": to, "type": "audio", "audio": {"link": link},
        })


@click.group()
@click.option("--log-level", default="INFO", help="Python logging level.")
@click.pass_context
def cli(ctx: click.Context, log_level: str) -> None:
    """WhatsApp command webhook CLI."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["settings"] = Settings.from_env()


@cli.command()
@click.option("--host", default="0.0.0.0", help="Bind address.")
@click.option("--port", default=8000, type=int, help="Bind port.")
def serve(host: str, port: int) -> None:
    """Serve the webhook with uvicorn."""
    import uvicorn

    uvicorn.run("src.api.app:create_app_from_env", factory=True, host=host, port=port)


@cli.command("commands")
def list_commands() -> None:
    """List registered commands and their aliases."""
    output = [
        {"name": d.name, "aliases": sorted(d.aliases), "description": d.description}
        for d in build_default_registry().list_unique()
    ]
    click.echo(json.dumps(output, indent=2, ensure_ascii=False))


@cli.command()
@click.argument("text")
@click.option("--sender", default="15550000000", help="Sender phone number.")
@click.option("--type", "message_type", default="text", help="Inbound message type.")
@click.pass_context
def dispatch(ctx: click.Context, text: str, sender: str, message_type: str) -> None:
    """Route TEXT as if it arrived from SENDER and print the replies."""
    settings: Settings = ctx.obj["settings"]
    router = InboundRouter(
        dispatcher=Dispatcher(build_default_registry()),
        gateway=ConsoleGateway(),
        translator=LibreTranslateClient(settings.translate_url),
        tts=GoogleTTS(settings.tts_host),
        settings=settings,
    )
    message = InboundMessage(sender=sender, type=message_type, text=text)
    resolution = asyncio.run(router.handle(message))
    click.echo(f"resolved: {resolution.kind.value}", err=True)
