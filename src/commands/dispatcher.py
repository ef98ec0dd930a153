"""Command dispatcher — runs a resolved command and contains its failures."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.models import AuditEvent, AuditEventType, RiskLevel

if TYPE_CHECKING:
    from src.audit.logger import AuditLogger
    from src.commands.context import CommandContext
    from src.commands.registry import CommandRegistry

logger = logging.getLogger(__name__)

COMMAND_ERROR_NOTICE = "Command error: internal error"


async def notify_failure(ctx: CommandContext, text: str = COMMAND_ERROR_NOTICE) -> bool:
    """Best-effort notice to the sender after a command failed.

    Failure to notify is non-fatal: the error is logged once and discarded.
    Returns whether the notice went out.
    """
    try:
        await ctx.reply(text)
    except Exception:
        logger.debug("Failure notice to %s could not be delivered", ctx.sender, exc_info=True)
        return False
    return True


class Dispatcher:
    """Looks up commands by name and invokes their handlers."""

    def __init__(
        self,
        registry: CommandRegistry,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._registry = registry
        self._audit = audit_logger

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    async def dispatch(self, name: str, ctx: CommandContext) -> bool:
        """Run the command registered under `name`.

        Returns False when no such command exists. Handler exceptions never
        escape: they are logged and the sender gets a generic notice.
        """
        descriptor = self._registry.lookup(name)
        if descriptor is None:
            return False

        try:
            await descriptor.handler(ctx)
        except Exception as exc:
            logger.exception("Command execution error: %s", descriptor.name)
            self._log(ctx, descriptor.name, AuditEventType.COMMAND_FAILED, "failure", {
                "error": type(exc).__name__,
            })
            await notify_failure(ctx)
        else:
            self._log(ctx, descriptor.name, AuditEventType.COMMAND_DISPATCHED, "success")
        return True

    def _log(
        self,
        ctx: CommandContext,
        command: str,
        event_type: AuditEventType,
        result: str,
        details: dict[str, object] | None = None,
    ) -> None:
        if not self._audit:
            return
        self._audit.log(AuditEvent(
            event_type=event_type,
            sender=ctx.sender,
            action=f"command:{command}",
            result=result,
            risk_level=RiskLevel.MEDIUM if result == "failure" else RiskLevel.INFO,
            details=details,
        ))
