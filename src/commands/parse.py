"""Tokenizing inbound text into a command word and its arguments."""

from __future__ import annotations

from dataclasses import dataclass

COMMAND_PREFIXES = ("/", "!")


@dataclass(frozen=True)
class Tokens:
    tokens: tuple[str, ...]

    @property
    def first(self) -> str:
        return self.tokens[0] if self.tokens else ""

    @property
    def remainder(self) -> str:
        # Rejoined rather than sliced from the raw text, so runs of
        # whitespace inside the arguments collapse to single spaces.
        return " ".join(self.tokens[1:])

    def __len__(self) -> int:
        return len(self.tokens)


def tokenize(text: str) -> Tokens:
    return Tokens(tuple(text.split()))


def strip_prefix(word: str) -> str | None:
    """Return the lower-cased command name for a `/name` or `!name` word."""
    if word.startswith(COMMAND_PREFIXES):
        return word[1:].lower()
    return None


def split_lang_text(args: str, default_lang: str = "en") -> tuple[str, str] | None:
    """Split `<lang>|<text>` arguments.

    Returns None when there is no pipe. Only the first pipe separates the
    language; later pipes stay part of the text.
    """
    if not args or "|" not in args:
        return None
    lang, _, text = args.partition("|")
    return lang.strip() or default_lang, text.strip()
