"""Runtime settings read from environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_TRANSLATE_URL = "https://libretranslate.de/translate"
DEFAULT_TTS_HOST = "https://translate.google.com"
DEFAULT_API_VERSION = "v17.0"
DEFAULT_BOT_NAME = "BRIAN-XMD"
DEFAULT_CREATOR = "Brian 254768116434"
DEFAULT_CHANNEL_LINK = "https://whatsapp.com/channel/0029VbC173IDDmFVlhcSOZ0Q"
DEFAULT_GROUP_LINK = "https://chat.whatsapp.com/JUhD5e6E18t3ABopwuwEMC"

# Settings field -> environment variable
_REQUIRED = {
    "whatsapp_token": "WHATSAPP_TOKEN",
    "phone_number_id": "WHATSAPP_PHONE_NUMBER_ID",
    "verify_token": "WHATSAPP_VERIFY_TOKEN",
}


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    whatsapp_token: str | None = None
    phone_number_id: str | None = None
    verify_token: str | None = None
    app_secret: str | None = None
    api_version: str = DEFAULT_API_VERSION
    translate_url: str = DEFAULT_TRANSLATE_URL
    tts_host: str = DEFAULT_TTS_HOST
    bot_name: str = DEFAULT_BOT_NAME
    creator: str = DEFAULT_CREATOR
    channel_link: str = DEFAULT_CHANNEL_LINK
    group_link: str = DEFAULT_GROUP_LINK
    audit_log_path: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from the environment, warning about missing secrets.

        Missing required secrets never stop the process: the webhook still
        answers, outbound sends simply fail at the Graph API.
        """
        env = os.environ if environ is None else environ
        settings = cls(
            whatsapp_token=env.get("WHATSAPP_TOKEN") or None,
            phone_number_id=env.get("WHATSAPP_PHONE_NUMBER_ID") or None,
            verify_token=env.get("WHATSAPP_VERIFY_TOKEN") or None,
            app_secret=env.get("WHATSAPP_APP_SECRET") or None,
            api_version=env.get("WHATSAPP_API_VERSION") or DEFAULT_API_VERSION,
            translate_url=env.get("LIBRETRANSLATE_URL") or DEFAULT_TRANSLATE_URL,
            tts_host=env.get("TTS_HOST") or DEFAULT_TTS_HOST,
            bot_name=env.get("BOT_NAME") or DEFAULT_BOT_NAME,
            creator=env.get("CREATOR") or DEFAULT_CREATOR,
            channel_link=env.get("CHANNEL_LINK") or DEFAULT_CHANNEL_LINK,
            group_link=env.get("GROUP_LINK") or DEFAULT_GROUP_LINK,
            audit_log_path=env.get("AUDIT_LOG_PATH") or None,
        )
        missing = settings.missing_required()
        if missing:
            logger.warning(
                "Missing one or more required environment variables: %s",
                ", ".join(missing),
            )
        return settings

    def missing_required(self) -> list[str]:
        """Return the environment variable names of unset required secrets."""
        return [env for field, env in _REQUIRED.items() if not getattr(self, field)]
