"""Built-in chat commands: start, ping, help, translate, tts, echo."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.clients.tts import TTSError
from src.commands.parse import split_lang_text
from src.commands.registry import CommandDescriptor, CommandRegistry

if TYPE_CHECKING:
    from src.commands.context import CommandContext
    from src.config import Settings

logger = logging.getLogger(__name__)

TRANSLATE_USAGE = "Usage: /translate <lang_code>|<text>\nExample: /translate id|Hello world"
TTS_USAGE = "Usage: /tts <lang_code>|<text>\nExample: /tts en|Hello world"


def welcome_text(settings: Settings) -> str:
    return (
        f"{settings.bot_name}\ncreated by {settings.creator}\n\n"
        "Welcome! I can help with commands. Type /help for available commands."
    )


def links_text(settings: Settings) -> str:
    return (
        f"Join our WhatsApp Channel:\n{settings.channel_link}\n\n"
        f"Join our WhatsApp Group:\n{settings.group_link}\n\n"
        "Tap the link(s) above to join. You must accept/join on your device."
    )


async def start(ctx: CommandContext) -> None:
    await ctx.reply(welcome_text(ctx.settings))
    await ctx.reply(links_text(ctx.settings))


async def ping(ctx: CommandContext) -> None:
    await ctx.reply("pong")


async def help_(ctx: CommandContext) -> None:
    lines = [f"/{cmd.name} — {cmd.description}" for cmd in ctx.registry.list_unique()]
    await ctx.reply("Commands:\n" + "\n".join(lines))


async def translate(ctx: CommandContext) -> None:
    parsed = split_lang_text(ctx.args)
    if parsed is None:
        await ctx.reply(TRANSLATE_USAGE)
        return
    target, text = parsed
    if not text:
        await ctx.reply("No text to translate provided.")
        return

    try:
        translated = await ctx.translator.translate(text, target)
    except Exception:
        logger.exception("Translation collaborator failed")
        translated = None

    if translated:
        await ctx.reply(f"Translated ({target}): {translated}")
    else:
        await ctx.reply("Translation failed.")


async def tts(ctx: CommandContext) -> None:
    parsed = split_lang_text(ctx.args)
    if parsed is None:
        await ctx.reply(TTS_USAGE)
        return
    lang, text = parsed
    if not text:
        await ctx.reply("No text provided.")
        return

    try:
        url = ctx.tts.get_audio_url(text, lang)
    except TTSError as e:
        logger.error("TTS error: %s", e)
        await ctx.reply("TTS failed.")
        return
    except Exception:
        logger.exception("TTS collaborator failed")
        await ctx.reply("TTS failed.")
        return
    await ctx.reply_audio(url)


async def echo(ctx: CommandContext) -> None:
    await ctx.reply(f"Echo: {ctx.args or ctx.raw or ''}")


BUILTIN_COMMANDS: tuple[CommandDescriptor, ...] = (
    CommandDescriptor(
        name="start",
        description="Welcome message + channel/group join links",
        handler=start,
        aliases=frozenset({"welcome", "begin"}),
    ),
    CommandDescriptor(
        name="ping",
        description="Replies with pong",
        handler=ping,
        aliases=frozenset({"p"}),
    ),
    CommandDescriptor(
        name="help",
        description="List available commands",
        handler=help_,
        aliases=frozenset({"h"}),
    ),
    CommandDescriptor(
        name="translate",
        description="Translate text: /translate <lang_code>|<text>",
        handler=translate,
        aliases=frozenset({"tr"}),
    ),
    CommandDescriptor(
        name="tts",
        description="Generate TTS: /tts <lang_code>|<text> (sends audio link)",
        handler=tts,
        aliases=frozenset({"voice"}),
    ),
    CommandDescriptor(
        name="echo",
        description="Echo back the text",
        handler=echo,
    ),
)


def build_default_registry() -> CommandRegistry:
    """Registry with every built-in command, frozen and ready to serve."""
    return CommandRegistry(BUILTIN_COMMANDS).freeze()
