"""Chat command layer.

This module provides:
- The command registry (names, aliases, lookup)
- Tokenizing of inbound text
- Dispatch with failure containment
- The built-in command set
"""

from src.commands.builtin import BUILTIN_COMMANDS, build_default_registry
from src.commands.context import (
    CommandContext,
    OutboundGateway,
    SpeechSynthesizer,
    Translator,
)
from src.commands.dispatcher import Dispatcher, notify_failure
from src.commands.parse import Tokens, split_lang_text, strip_prefix, tokenize
from src.commands.registry import (
    CommandDescriptor,
    CommandHandler,
    CommandRegistry,
    RegistryFrozenError,
)

__all__ = [
    "BUILTIN_COMMANDS",
    "CommandContext",
    "CommandDescriptor",
    "CommandHandler",
    "CommandRegistry",
    "Dispatcher",
    "OutboundGateway",
    "RegistryFrozenError",
    "SpeechSynthesizer",
    "Tokens",
    "Translator",
    "build_default_registry",
    "notify_failure",
    "split_lang_text",
    "strip_prefix",
    "tokenize",
]
