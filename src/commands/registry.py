"""Command registry — name and alias lookup for chat commands."""

from __future__ import annotations

from collections.abc import Awaitable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.commands.context import CommandContext


class CommandHandler(Protocol):
    def __call__(self, ctx: CommandContext) -> Awaitable[None]: ...


class RegistryFrozenError(Exception):
    """Raised when registering into a registry that is already serving."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot register '{name}': registry is frozen")


@dataclass(frozen=True)
class CommandDescriptor:
    name: str
    description: str
    handler: CommandHandler
    aliases: frozenset[str] = field(default_factory=frozenset)

    def keys(self) -> list[str]:
        """Canonical name followed by aliases, all lower-cased."""
        return [self.name.lower(), *(a.lower() for a in sorted(self.aliases))]


class CommandRegistry:
    """Maps canonical names and aliases to command descriptors.

    Built once at startup and frozen before the webhook starts serving.
    A later registration with a colliding key overwrites the earlier
    mapping (last write wins).
    """

    def __init__(self, descriptors: Iterable[CommandDescriptor] = ()) -> None:
        self._commands: dict[str, CommandDescriptor] = {}
        self._frozen = False
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: CommandDescriptor) -> None:
        if self._frozen:
            raise RegistryFrozenError(descriptor.name)
        for key in descriptor.keys():
            self._commands[key] = descriptor

    def freeze(self) -> CommandRegistry:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, key: str) -> CommandDescriptor | None:
        if not key:
            return None
        return self._commands.get(key.lower())

    def list_unique(self) -> list[CommandDescriptor]:
        """Descriptors deduplicated by canonical name, in registration order."""
        seen: set[str] = set()
        unique: list[CommandDescriptor] = []
        for descriptor in self._commands.values():
            if descriptor.name not in seen:
                seen.add(descriptor.name)
                unique.append(descriptor)
        return unique

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.lookup(key) is not None

    def __len__(self) -> int:
        return len(self._commands)
