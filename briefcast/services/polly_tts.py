"""Amazon Polly speech synthesis returning an MP3 stream."""

from __future__ import annotations

import asyncio
import logging
from html import escape as html_escape
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from briefcast.application.interfaces import FormatHint, SpeechSynthesizer, SynthesizedAudio
from briefcast.errors import AuthError, NetworkError, ProviderError, ProviderTimeoutError

logger = logging.getLogger(__name__)

_AUTH_ERROR_CODES = {
    "AccessDenied",
    "AccessDeniedException",
    "UnrecognizedClientException",
    "InvalidSignatureException",
    "ExpiredTokenException",
}


class PollySpeechSynthesizer(SpeechSynthesizer):
    """Synthesize speech with Amazon Polly."""

    def __init__(
        self,
        client: Any,
        *,
        voice_id: str = "Joanna",
        engine: str = "neural",
        sample_rate: int = 24000,
        resource_timeout: float = 180.0,
    ) -> None:
        self._client = client
        self._voice_id = voice_id
        self._engine = engine
        self._sample_rate = sample_rate
        self._resource_timeout = resource_timeout

    @staticmethod
    def _build_ssml(text: str) -> str:
        return f"<speak>{html_escape(text)}</speak>"

    async def synthesize(self, text: str) -> SynthesizedAudio:
        ssml = self._build_ssml(text)
        try:
            response: dict[str, Any] = await asyncio.wait_for(
                run_in_threadpool(
                    self._client.synthesize_speech,
                    TextType="ssml",
                    Text=ssml,
                    VoiceId=self._voice_id,
                    Engine=self._engine,
                    OutputFormat="mp3",
                    SampleRate=str(self._sample_rate),
                ),
                timeout=self._resource_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ProviderTimeoutError(
                f"Polly did not answer within {self._resource_timeout:g}s"
            ) from exc
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            logger.exception("Polly synth failed for voice '%s'", self._voice_id)
            if code in _AUTH_ERROR_CODES:
                raise AuthError(f"Polly rejected the credentials: {code}") from exc
            raise ProviderError(f"Failed to synthesize speech: {exc}") from exc
        except BotoCoreError as exc:
            logger.exception("Polly synth failed for voice '%s'", self._voice_id)
            raise NetworkError(f"Failed to reach Polly: {exc}") from exc

        audio_stream = response.get("AudioStream")
        if audio_stream is None:
            raise ProviderError("Polly returned no audio stream.")
        audio_bytes = audio_stream.read()
        if not audio_bytes:
            raise ProviderError("Polly returned an empty audio stream.")

        return SynthesizedAudio(
            data=audio_bytes,
            format_hint=FormatHint.ENCODED,
            media_type="audio/mpeg",
        )


__all__ = ["PollySpeechSynthesizer"]
