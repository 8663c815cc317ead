"""Gemini text-to-speech client.

The model answers with base64 PCM (16-bit, 24 kHz, mono) inside the first
candidate part. Any other declared mime type is passed on as encoded audio.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from briefcast.application.interfaces import FormatHint, SpeechSynthesizer, SynthesizedAudio
from briefcast.errors import ConfigError, ProviderError

from .http import post_json

logger = logging.getLogger(__name__)


class _InlineData(BaseModel):
    data: str
    mime_type: Optional[str] = Field(default=None, alias="mimeType")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class _Part(BaseModel):
    inline_data: Optional[_InlineData] = Field(default=None, alias="inlineData")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class _Content(BaseModel):
    parts: List[_Part] = Field(default_factory=list)


class _Candidate(BaseModel):
    content: _Content


class GeminiTtsResponse(BaseModel):
    candidates: List[_Candidate] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    def first_inline_data(self) -> _InlineData | None:
        for candidate in self.candidates[:1]:
            for part in candidate.content.parts:
                if part.inline_data is not None:
                    return part.inline_data
        return None


def _format_for_mime(mime_type: str | None) -> tuple[FormatHint, str]:
    if not mime_type:
        return FormatHint.RAW_PCM, "audio/L16"
    lowered = mime_type.lower()
    if lowered.startswith("audio/l16") or "pcm" in lowered:
        return FormatHint.RAW_PCM, mime_type
    return FormatHint.ENCODED, mime_type


class GeminiSpeechSynthesizer(SpeechSynthesizer):
    """Synthesize speech with a Gemini TTS model."""

    def __init__(
        self,
        *,
        api_key: str | None,
        model: str = "gemini-2.5-flash-preview-tts",
        voice: str = "zephyr",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        request_timeout: float = 120.0,
        resource_timeout: float = 180.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._voice = voice
        self._url = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self._request_timeout = request_timeout
        self._resource_timeout = resource_timeout
        self._transport = transport

    def _build_body(self, text: str) -> dict:
        return {
            "contents": [{"role": "user", "parts": [{"text": text}]}],
            "generationConfig": {
                "response_modalities": ["AUDIO"],
                "speech_config": {
                    "voice_config": {
                        "prebuilt_voice_config": {"voice_name": self._voice},
                    },
                },
                "temperature": 0.0,
            },
        }

    async def synthesize(self, text: str) -> SynthesizedAudio:
        if not self._api_key:
            raise ConfigError("GEMINI_API_KEY not set")

        data = await post_json(
            self._url,
            payload=self._build_body(text),
            headers={"x-goog-api-key": self._api_key},
            provider="Gemini TTS",
            request_timeout=self._request_timeout,
            resource_timeout=self._resource_timeout,
            transport=self._transport,
        )
        try:
            inline = GeminiTtsResponse.model_validate(data).first_inline_data()
        except ValidationError as exc:
            raise ProviderError(f"Gemini TTS response did not match the schema: {exc}") from exc
        if inline is None:
            raise ProviderError("No valid audio data")

        try:
            audio = base64.b64decode(inline.data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ProviderError("No valid audio data") from exc
        if not audio:
            raise ProviderError("No valid audio data")

        format_hint, media_type = _format_for_mime(inline.mime_type)
        logger.info(
            "Synthesized %s bytes voice=%s format=%s", len(audio), self._voice, format_hint.value
        )
        return SynthesizedAudio(data=audio, format_hint=format_hint, media_type=media_type)


__all__ = ["GeminiSpeechSynthesizer", "GeminiTtsResponse"]
