"""FastAPI application exposing the WhatsApp webhook."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse

from src.audit.logger import AuditLogger
from src.clients.translate import LibreTranslateClient
from src.clients.tts import GoogleTTS
from src.commands.builtin import build_default_registry
from src.commands.context import OutboundGateway, SpeechSynthesizer, Translator
from src.commands.dispatcher import Dispatcher
from src.commands.registry import CommandRegistry
from src.config import Settings
from src.models import AuditEvent, AuditEventType, RiskLevel
from src.webhook.router import InboundRouter
from src.webhook.whatsapp import MalformedPayloadError, WhatsAppGateway, WhatsAppWebhook

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/api/webhook"


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    settings = Settings.from_env()
    audit_logger = (
        AuditLogger.from_env(settings.audit_log_path) if settings.audit_log_path else None
    )
    return create_app(settings, audit_logger=audit_logger)


def create_app(
    settings: Settings,
    registry: CommandRegistry | None = None,
    gateway: OutboundGateway | None = None,
    translator: Translator | None = None,
    tts: SpeechSynthesizer | None = None,
    audit_logger: AuditLogger | None = None,
) -> FastAPI:
    """Create the webhook app. Collaborators default to the real HTTP clients."""
    app = FastAPI(docs_url=None, redoc_url=None)

    registry = registry if registry is not None else build_default_registry()
    if not registry.frozen:
        registry.freeze()
    gateway = gateway or WhatsAppGateway(
        settings.whatsapp_token, settings.phone_number_id, settings.api_version,
    )
    webhook = WhatsAppWebhook(settings.verify_token, settings.app_secret)
    router = InboundRouter(
        dispatcher=Dispatcher(registry, audit_logger=audit_logger),
        gateway=gateway,
        translator=translator or LibreTranslateClient(settings.translate_url),
        tts=tts or GoogleTTS(settings.tts_host),
        settings=settings,
    )

    def audit(event_type: AuditEventType, action: str, result: str, reason: str) -> None:
        if audit_logger:
            audit_logger.log(AuditEvent(
                event_type=event_type,
                action=action,
                result=result,
                risk_level=RiskLevel.INFO if result == "success" else RiskLevel.HIGH,
                details={"reason": reason},
            ))

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.api_route(WEBHOOK_PATH, methods=["GET", "POST", "PUT", "DELETE", "PATCH"])
    async def whatsapp_webhook(request: Request) -> Response:
        try:
            if request.method == "GET":
                status_code, content = webhook.handle_verification(request.query_params)
                if status_code == 200:
                    audit(AuditEventType.VERIFY_SUCCESS, "verify", "success", "token_match")
                else:
                    audit(AuditEventType.VERIFY_FAILURE, "verify", "failure", "token_mismatch")
                return PlainTextResponse(content, status_code=status_code)

            if request.method == "POST":
                body = await request.body()
                if webhook.signature_required and not webhook.verify_signature(
                    request.headers, body,
                ):
                    audit(AuditEventType.PAYLOAD_REJECTED, "deliver", "failure", "signature")
                    return PlainTextResponse("Invalid webhook signature", status_code=401)
                try:
                    payload = webhook.parse_payload(body)
                except MalformedPayloadError as e:
                    logger.warning("Rejected webhook delivery: %s", e)
                    audit(AuditEventType.PAYLOAD_REJECTED, "deliver", "failure", "malformed")
                    return PlainTextResponse("No valid body", status_code=400)

                await router.handle_batch(webhook.extract_messages(payload))
                return PlainTextResponse("EVENT_RECEIVED", status_code=200)

            return PlainTextResponse("Method Not Allowed", status_code=405)
        except Exception:
            logger.exception("Webhook handler error")
            return PlainTextResponse("Server error", status_code=500)

    return app
