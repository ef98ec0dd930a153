"""WhatsApp Cloud API webhook: inbound verification/extraction and outbound sends.

Inbound: Meta verification handshake, optional HMAC signature check,
delivery body validation and message extraction.
Outbound: text and audio-by-link messages through the Graph API.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from src.models import InboundMessage, SendResult

logger = logging.getLogger(__name__)

_GRAPH_API_BASE = "https://graph.facebook.com"
_TIMEOUT_SECONDS = 30.0


class DeliveryError(Exception):
    """The Graph API could not be reached."""


class MalformedPayloadError(Exception):
    """Inbound delivery body is not a JSON object with an `entry` array."""


class WhatsAppGateway:
    """Sends messages to WhatsApp users via the Cloud API."""

    def __init__(
        self,
        access_token: str | None,
        phone_number_id: str | None,
        api_version: str = "v17.0",
    ) -> None:
        self._access_token = access_token or ""
        self._phone_number_id = phone_number_id or ""
        self._api_version = api_version

    @property
    def messages_url(self) -> str:
        return f"{_GRAPH_API_BASE}/{self._api_version}/{self._phone_number_id}/messages"

    async def send(self, payload: dict[str, Any]) -> SendResult:
        """POST a message payload to the Graph API.

        An error status is logged and returned, not raised. Only a transport
        failure raises DeliveryError.
        """
        headers = {
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(verify=True) as client:
                resp = await client.post(
                    self.messages_url, json=payload, headers=headers, timeout=_TIMEOUT_SECONDS,
                )
        except httpx.HTTPError as e:
            raise DeliveryError(f"WhatsApp send failed: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if resp.status_code >= 400:
            logger.warning(
                "WhatsApp API error %s for %s: %s",
                resp.status_code, payload.get("to"), body.get("error", body),
            )
        return SendResult(status_code=resp.status_code, body=body)

    async def send_text(self, to: str, text: str) -> SendResult:
        return await self.send({
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": text},
        })

    async def send_audio_link(self, to: str, link: str) -> SendResult:
        return await self.send({
            "messaging_product": "whatsapp",
            "to": to,
            "type": "audio",
            "audio": {"link": link},
        })


class WhatsAppWebhook:
    """Validates and unpacks inbound WhatsApp webhook requests."""

    def __init__(self, verify_token: str | None, app_secret: str | None = None) -> None:
        self._verify_token = verify_token
        self._app_secret = app_secret

    @property
    def signature_required(self) -> bool:
        return bool(self._app_secret)

    def verify_signature(self, headers: Mapping[str, str], body: bytes) -> bool:
        """Check `X-Hub-Signature-256` against the app secret.

        Always passes when no app secret is configured.
        """
        if not self._app_secret:
            return True
        signature = headers.get("x-hub-signature-256", "")
        if not signature.startswith("sha256="):
            return False

        expected = hmac.new(
            self._app_secret.encode(), body, hashlib.sha256,
        ).hexdigest()
        return hmac.compare_digest(signature[7:], expected)

    def handle_verification(self, params: Mapping[str, str]) -> tuple[int, str]:
        """Answer Meta's GET handshake. Returns (status_code, body).

        Both `hub.`-prefixed and bare parameter names are accepted. An
        unconfigured verify token never matches.
        """
        mode = params.get("hub.mode") or params.get("mode")
        token = params.get("hub.verify_token") or params.get("verify_token") or ""
        challenge = params.get("hub.challenge") or params.get("challenge")

        if mode and self._verify_token and hmac.compare_digest(
            token.encode(), self._verify_token.encode(),
        ):
            return 200, challenge or "OK"
        return 403, "Invalid verify token"

    @staticmethod
    def parse_payload(body: bytes) -> dict[str, Any]:
        try:
            payload = json.loads(body) if body else None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedPayloadError(f"Invalid JSON: {e}") from e
        if not isinstance(payload, dict) or not isinstance(payload.get("entry"), list):
            raise MalformedPayloadError("Body has no entry array")
        return payload

    @staticmethod
    def extract_messages(payload: Mapping[str, Any]) -> list[InboundMessage]:
        """Flatten entry -> changes -> value.messages into InboundMessages.

        Status updates and structurally odd parts are skipped; messages
        without a sender cannot be answered and are dropped.
        """
        messages: list[InboundMessage] = []
        for entry in payload.get("entry") or []:
            if not isinstance(entry, dict):
                continue
            for change in entry.get("changes") or []:
                if not isinstance(change, dict):
                    continue
                value = change.get("value")
                if not isinstance(value, dict):
                    continue
                for msg in value.get("messages") or []:
                    if not isinstance(msg, dict) or not msg.get("from"):
                        logger.warning("Skipping message without sender")
                        continue
                    text = msg.get("text")
                    body = text.get("body") if isinstance(text, dict) else None
                    messages.append(InboundMessage(
                        sender=str(msg["from"]),
                        type=str(msg.get("type", "")),
                        text=body if isinstance(body, str) else None,
                        message_id=str(msg["id"]) if msg.get("id") is not None else None,
                    ))
        return messages
