"""Shared Pydantic data models for the WhatsApp command webhook."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---


class AuditEventType(str, Enum):
    VERIFY_SUCCESS = "verify_success"
    VERIFY_FAILURE = "verify_failure"
    PAYLOAD_REJECTED = "payload_rejected"
    COMMAND_DISPATCHED = "command_dispatched"
    COMMAND_FAILED = "command_failed"


class RiskLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    INFO = "info"


# --- Inbound Models ---


class InboundMessage(BaseModel):
    """One message from a WhatsApp delivery, reduced to what routing needs."""

    model_config = ConfigDict(frozen=True)

    sender: str
    type: str
    text: str | None = None
    message_id: str | None = None

    @property
    def is_text(self) -> bool:
        return self.type == "text"


# --- Outbound Models ---


class SendResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status_code: int
    body: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status_code < 400


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    sender: str | None = None
    action: str
    result: str
    risk_level: RiskLevel
    details: dict[str, Any] | None = None
