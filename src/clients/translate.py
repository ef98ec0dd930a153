"""LibreTranslate client used by the translate command."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

_TIMEOUT_SECONDS = 30.0


class LibreTranslateClient:
    """Calls a LibreTranslate-compatible `/translate` endpoint."""

    def __init__(self, url: str) -> None:
        self._url = url

    async def translate(self, text: str, target: str) -> str | None:
        """Translate `text` into `target`, auto-detecting the source language.

        Returns None on any failure, including a response that lacks
        `translatedText`; callers turn that into a user-facing notice.
        """
        payload = {
            "q": text,
            "source": "auto",
            "target": target,
            "format": "text",
        }
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(self._url, json=payload, timeout=_TIMEOUT_SECONDS)
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("translate error: %s", e)
            return None

        if not isinstance(data, dict):
            return None
        translated = data.get("translatedText")
        if not translated:
            logger.warning(
                "Translation response without translatedText (status %s)", resp.status_code,
            )
            return None
        return str(translated)
