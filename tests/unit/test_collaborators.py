"""Tests for the translation client and the TTS URL builder."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from src.clients.translate import LibreTranslateClient
from src.clients.tts import MAX_TEXT_LENGTH, GoogleTTS, TTSError


def _patch_client(response: MagicMock | None = None, error: Exception | None = None):
    patcher = patch("src.clients.translate.httpx.AsyncClient")
    mock_client_cls = patcher.start()
    mock_client = AsyncMock()
    if error is not None:
        mock_client.post.side_effect = error
    else:
        mock_client.post.return_value = response
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client_cls.return_value = mock_client
    return patcher, mock_client


class TestLibreTranslateClient:
    @pytest.mark.asyncio
    async def test_posts_payload_and_returns_translation(self) -> None:
        response = MagicMock(status_code=200)
        response.json.return_value = {"translatedText": "Halo dunia"}
        patcher, mock_client = _patch_client(response)
        try:
            client = LibreTranslateClient("https://lt.example/translate")
            result = await client.translate("Hello world", "id")
        finally:
            patcher.stop()

        assert result == "Halo dunia"
        args, kwargs = mock_client.post.call_args
        assert args[0] == "https://lt.example/translate"
        assert kwargs["json"] == {
            "q": "Hello world",
            "source": "auto",
            "target": "id",
            "format": "text",
        }

    @pytest.mark.asyncio
    async def test_missing_field_is_none(self) -> None:
        response = MagicMock(status_code=400)
        response.json.return_value = {"error": "unsupported language"}
        patcher, _ = _patch_client(response)
        try:
            result = await LibreTranslateClient("https://lt.example").translate("x", "zz")
        finally:
            patcher.stop()
        assert result is None

    @pytest.mark.asyncio
    async def test_invalid_json_is_none(self) -> None:
        response = MagicMock(status_code=200)
        response.json.side_effect = json.JSONDecodeError("x", "", 0)
        patcher, _ = _patch_client(response)
        try:
            result = await LibreTranslateClient("https://lt.example").translate("x", "id")
        finally:
            patcher.stop()
        assert result is None

    @pytest.mark.asyncio
    async def test_undecodable_body_is_none(self) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, content=b"\xff\xfe\xfa bad gateway"),
        )
        real_client_cls = httpx.AsyncClient
        with patch("src.clients.translate.httpx.AsyncClient") as mock_client_cls:
            mock_client_cls.side_effect = lambda **kwargs: real_client_cls(
                transport=transport, **kwargs,
            )
            result = await LibreTranslateClient("https://lt.example").translate("x", "id")
        assert result is None

    @pytest.mark.asyncio
    async def test_network_error_is_none(self) -> None:
        patcher, _ = _patch_client(error=httpx.ConnectTimeout("slow"))
        try:
            result = await LibreTranslateClient("https://lt.example").translate("x", "id")
        finally:
            patcher.stop()
        assert result is None


class TestGoogleTTS:
    def test_builds_translate_tts_url(self) -> None:
        url = GoogleTTS().get_audio_url("Hello world", "en")
        parts = urlsplit(url)
        assert f"{parts.scheme}://{parts.netloc}{parts.path}" == (
            "https://translate.google.com/translate_tts"
        )
        query = parse_qs(parts.query)
        assert query["q"] == ["Hello world"]
        assert query["tl"] == ["en"]
        assert query["textlen"] == ["11"]
        assert query["client"] == ["tw-ob"]
        assert query["ttsspeed"] == ["1"]

    def test_custom_host_and_slow_speed(self) -> None:
        url = GoogleTTS(host="https://tts.example/", slow=True).get_audio_url("hi", "id")
        assert url.startswith("https://tts.example/translate_tts?")
        assert parse_qs(urlsplit(url).query)["ttsspeed"] == ["0.24"]

    def test_text_too_long_raises(self) -> None:
        with pytest.raises(TTSError, match="less than"):
            GoogleTTS().get_audio_url("a" * (MAX_TEXT_LENGTH + 1), "en")

    def test_empty_text_or_lang_raises(self) -> None:
        with pytest.raises(TTSError):
            GoogleTTS().get_audio_url("", "en")
        with pytest.raises(TTSError):
            GoogleTTS().get_audio_url("hi", " ")
