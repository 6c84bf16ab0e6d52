from __future__ import annotations

import logging
from typing import Any

from gptranslate.translate.base import (
    MAX_COMPLETION_TOKENS,
    MAX_TOKENS,
    TEMPERATURE,
    ChatTranslationProvider,
    is_reasoning_model,
    message_content,
    open_client,
    post_json,
)

LOGGER = logging.getLogger(__name__)


def build_chat_payload(
    system_prompt: str,
    user_prompt: str,
    *,
    model: str,
    reasoning_effort: str | None = None,
) -> dict[str, Any]:
    """Chat-completions body; reasoning models get a different parameter set."""
    reasoning = is_reasoning_model(model)
    payload: dict[str, Any] = {
        "messages": [
            {"role": "developer" if reasoning else "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
    }
    if reasoning:
        payload["max_completion_tokens"] = MAX_COMPLETION_TOKENS
        if reasoning_effort:
            payload["reasoning_effort"] = reasoning_effort
    else:
        payload["temperature"] = TEMPERATURE
        payload["max_tokens"] = MAX_TOKENS
    return payload


class OpenAITranslationProvider(ChatTranslationProvider):
    """Hosted chat-completions backend authenticated with a bearer token."""

    name = "openai"

    def _url(self) -> str:
        return f"{self.settings.openai_base_url.rstrip('/')}/chat/completions"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.openai_api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        model = self._require(self.settings.model, "Model not configured for OpenAI provider")
        payload = build_chat_payload(
            system_prompt,
            user_prompt,
            model=model,
            reasoning_effort=self.settings.reasoning_effort,
        )
        payload["model"] = model
        return payload

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        payload = self._payload(system_prompt, user_prompt)
        url = self._url()
        LOGGER.info("Using %s model: %s", self.name, self._model_name())
        async with open_client(self._client, self.settings.request_timeout) as client:
            data = await post_json(client, url, provider=self.name, payload=payload, headers=self._headers())
        return message_content(data, self.name)
