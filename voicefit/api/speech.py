"""Spitch speech API client (text-to-speech and transcription)."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from voicefit.api.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    SPITCH_API_BASE,
    SPITCH_SPEECH_PATH,
    SPITCH_TRANSCRIBE_PATH,
)
from voicefit.speech.phrases import resolve_language, voice_for

logger = logging.getLogger(__name__)


class SpeechAPIError(RuntimeError):
    """Raised when the speech service fails or returns an unusable payload."""


class SpeechClient:
    """Thin async wrapper around the Spitch REST API."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = SPITCH_API_BASE,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._has_key = bool(api_key)
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {api_key or ''}"},
            timeout=timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def synthesize(self, text: str, language: str) -> bytes:
        lang = resolve_language(language)
        payload = {"text": text, "language": lang.value, "voice": voice_for(lang)}
        response = await self._post(SPITCH_SPEECH_PATH, json=payload)
        audio = response.content
        if not audio:
            raise SpeechAPIError("Empty audio received")
        logger.debug("Synthesized %d bytes of %s audio", len(audio), lang.value)
        return audio

    async def transcribe(
        self,
        audio: bytes,
        language: str = "en",
        filename: str = "recording.mp3",
    ) -> str:
        if not audio:
            raise SpeechAPIError("No audio to transcribe")
        response = await self._post(
            SPITCH_TRANSCRIBE_PATH,
            data={"language": resolve_language(language).value},
            files={"content": (filename, audio)},
        )
        try:
            body = response.json()
        except ValueError as exc:
            raise SpeechAPIError(f"Invalid transcription response: {exc}") from exc
        if not isinstance(body, dict):
            raise SpeechAPIError("Transcription response must be an object")
        return str(body.get("text") or "").strip()

    async def _post(self, path: str, **kwargs: Any) -> httpx.Response:
        if not self._has_key:
            raise SpeechAPIError("SPITCH_API_KEY is not configured")
        try:
            response = await self._client.post(path, **kwargs)
        except httpx.HTTPError as exc:
            raise SpeechAPIError(f"Speech request failed for POST {path}: {exc}") from exc
        if not response.is_success:
            raise SpeechAPIError(
                f"Speech API error {response.status_code} for POST {path}"
            )
        return response
