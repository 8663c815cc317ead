"""OpenAI chat-completions client producing briefing scripts."""

from __future__ import annotations

import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from briefcast.application.interfaces import ScriptGenerator
from briefcast.errors import ConfigError, ProviderError

from .http import post_json
from .prompt_builder import build_script_messages

logger = logging.getLogger(__name__)


class _ChatMessage(BaseModel):
    content: Optional[str] = None


class _ChatChoice(BaseModel):
    message: _ChatMessage


class ChatCompletionResponse(BaseModel):
    choices: List[_ChatChoice]

    model_config = {"extra": "ignore"}

    def first_text(self) -> str:
        if not self.choices:
            return ""
        return (self.choices[0].message.content or "").strip()


class OpenAIScriptGenerator(ScriptGenerator):
    """Generate scripts with an OpenAI chat model."""

    def __init__(
        self,
        *,
        api_key: str | None,
        model: str = "gpt-4o",
        base_url: str = "https://api.openai.com/v1",
        request_timeout: float = 120.0,
        resource_timeout: float = 180.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._request_timeout = request_timeout
        self._resource_timeout = resource_timeout
        self._transport = transport

    async def generate(self, topic: str, length_seconds: int, tone: str) -> str:
        if not self._api_key:
            raise ConfigError("OPENAI_API_KEY not set")

        data = await post_json(
            self._url,
            payload={
                "model": self._model,
                "messages": build_script_messages(topic, length_seconds, tone),
            },
            headers={"Authorization": f"Bearer {self._api_key}"},
            provider="OpenAI",
            request_timeout=self._request_timeout,
            resource_timeout=self._resource_timeout,
            transport=self._transport,
        )
        try:
            script = ChatCompletionResponse.model_validate(data).first_text()
        except ValidationError as exc:
            raise ProviderError(f"OpenAI response did not match the chat schema: {exc}") from exc
        if not script:
            raise ProviderError("OpenAI returned an empty script")

        logger.info("Generated script topic=%r chars=%s", topic, len(script))
        return script


__all__ = ["ChatCompletionResponse", "OpenAIScriptGenerator"]
