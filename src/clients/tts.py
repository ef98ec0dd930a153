"""Google Translate text-to-speech URL builder.

No network call happens here: the URL is handed to WhatsApp as an audio
link and WhatsApp fetches the audio itself.
"""

from __future__ import annotations

from urllib.parse import urlencode

MAX_TEXT_LENGTH = 200


class TTSError(Exception):
    """Raised when a TTS URL cannot be built for the given input."""


class GoogleTTS:
    def __init__(self, host: str = "https://translate.google.com", slow: bool = False) -> None:
        self._host = host.rstrip("/")
        self._slow = slow

    def get_audio_url(self, text: str, lang: str) -> str:
        if not text:
            raise TTSError("text should be a non-empty string")
        if not lang or not lang.strip():
            raise TTSError("lang should be a non-empty string")
        if len(text) > MAX_TEXT_LENGTH:
            raise TTSError(
                f"text length ({len(text)}) should be less than {MAX_TEXT_LENGTH} characters",
            )

        query = urlencode({
            "ie": "UTF-8",
            "q": text,
            "tl": lang.strip(),
            "total": 1,
            "idx": 0,
            "textlen": len(text),
            "client": "tw-ob",
            "prev": "input",
            "ttsspeed": 0.24 if self._slow else 1,
        })
        return f"{self._host}/translate_tts?{query}"
