from __future__ import annotations

import logging

from gptranslate.errors import ResponseShapeError
from gptranslate.translate.base import ChatTranslationProvider, open_client, post_json

LOGGER = logging.getLogger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434"


def resolve_ollama_url(configured: str | None) -> str:
    url = (configured or "").strip() or DEFAULT_OLLAMA_URL
    if "://" not in url:
        url = f"http://{url}"
    return url.rstrip("/")


class OllamaTranslationProvider(ChatTranslationProvider):
    """Local generative API. Takes a single prompt and has no reasoning-effort knob."""

    name = "ollama"

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        model = self._require(self.settings.model, "Model not configured for Ollama provider")
        url = f"{resolve_ollama_url(self.settings.ollama_url)}/api/generate"
        payload = {
            "model": model,
            "prompt": f"{system_prompt}\n\n{user_prompt}",
            "stream": False,
        }
        LOGGER.info("Using Ollama model: %s", model)
        async with open_client(self._client, self.settings.request_timeout) as client:
            data = await post_json(client, url, provider=self.name, payload=payload)
        content = data.get("response") if isinstance(data, dict) else None
        if not isinstance(content, str):
            raise ResponseShapeError("No response field in Ollama reply")
        if not content.strip():
            raise ResponseShapeError("Empty response from Ollama")
        return content
