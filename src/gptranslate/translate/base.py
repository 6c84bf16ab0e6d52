from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping

import httpx

from gptranslate.config import Settings
from gptranslate.errors import ConfigurationError, ResponseShapeError, TransportError, UnsupportedCapability
from gptranslate.models import TranslationResult
from gptranslate.text import normalize_text
from gptranslate.translate.extract import extract_translation, parse_alternatives
from gptranslate.translate.policy import effective_target_language

LOGGER = logging.getLogger(__name__)

REASONING_MODEL_PREFIXES = ("o1", "o3", "o4", "gpt-5")
MAX_TOKENS = 800
MAX_COMPLETION_TOKENS = 4096
TEMPERATURE = 0.3

FORMATTING_RULES = (
    "IMPORTANT FORMATTING RULES:\n"
    "- Always respond with valid JSON containing 'detected_language' and 'translated_text' fields\n"
    "- Preserve line breaks and paragraph structure in the translation\n"
    "- Use actual newline characters in the JSON string value, not escaped \\\\n\n"
    "\n"
    "Example response format:\n"
    '{\n  "detected_language": "English",\n  "translated_text": "Line 1\\nLine 2\\n\\nNew paragraph"\n}'
)
REASONING_FORMATTING_RULES = (
    'Respond only with JSON: {"detected_language": "<language name>", "translated_text": "<translation>"}. '
    "Keep the original line breaks."
)


def is_reasoning_model(model: str) -> bool:
    return model.strip().lower().startswith(REASONING_MODEL_PREFIXES)


def build_smart_prompt(settings: Settings) -> str:
    """Combine the configured template with the primary/alternative target rules."""
    primary = settings.target_language
    alternative = settings.alternative_target_language
    return (
        f"{settings.custom_prompt}\n\n"
        "# Translation Rules\n"
        f"- Primary target language: {primary}\n"
        f"- Alternative target language: {alternative}\n\n"
        "**IMPORTANT**:\n"
        f"- If the detected source language is the same as the primary target language ({primary}), "
        f"translate to the alternative target language ({alternative}) instead.\n"
        f"- If the detected source language is different from the primary target language ({primary}), "
        f"translate to the primary target language ({primary})."
    )


def build_translation_prompts(settings: Settings, text: str, *, simplified: bool = False) -> tuple[str, str]:
    rules = REASONING_FORMATTING_RULES if simplified else FORMATTING_RULES
    system_prompt = f"{build_smart_prompt(settings)}\n\n{rules}"
    user_prompt = f'Text to translate: "{text}"'
    return system_prompt, user_prompt


def build_alternatives_prompts(text: str, target_language: str) -> tuple[str, str]:
    system_prompt = (
        f"Generate 3-5 alternative ways to express the user's text in {target_language}.\n\n"
        "# Instructions\n"
        "- Provide different phrasings that convey the same meaning\n"
        "- Focus on different word choices, sentence structures, or stylistic variations\n"
        "- Maintain the same tone and formality level\n"
        "- Each alternative should be distinct but equivalent in meaning\n\n"
        "# Output Format\n"
        'Return valid JSON in this exact format: {"alternatives": ["alternative 1", "alternative 2", "alternative 3"]}'
    )
    return system_prompt, f'"{text}"'


@asynccontextmanager
async def open_client(client: httpx.AsyncClient | None, timeout: float) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one owned by this call."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout) as owned:
        yield owned


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    provider: str,
    payload: Any,
    headers: Mapping[str, str] | None = None,
    params: Mapping[str, str] | None = None,
) -> Any:
    """POST a JSON payload and decode the JSON reply, mapping failures onto our errors."""
    LOGGER.info("Making %s request to %s", provider, url)
    LOGGER.debug("Request body: %s", json.dumps(payload, ensure_ascii=False))
    try:
        response = await client.post(url, json=payload, headers=dict(headers or {}), params=params)
    except httpx.HTTPError as exc:
        LOGGER.error("%s request failed: %s", provider, exc)
        raise TransportError(provider, None, str(exc)) from exc
    if response.is_error:
        LOGGER.error("%s request failed: status=%s body=%s", provider, response.status_code, response.text)
        raise TransportError(provider, response.status_code, response.text)
    try:
        return response.json()
    except ValueError as exc:
        raise ResponseShapeError(f"{provider} returned a non-JSON body: {response.text[:200]}") from exc


def message_content(data: Any, provider: str) -> str:
    """Read ``choices[0].message.content`` from a chat-completions reply."""
    choices = data.get("choices") if isinstance(data, dict) else None
    if not isinstance(choices, list) or not choices:
        raise ResponseShapeError(f"No choices in {provider} response")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise ResponseShapeError(f"No content in {provider} response")
    return content


class TranslationProvider(ABC):
    """One backend capable of translating a piece of text."""

    name: str = "provider"
    supports_alternatives: bool = True

    def __init__(self, settings: Settings, *, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._client = client

    @abstractmethod
    async def translate(self, text: str) -> TranslationResult:
        ...

    async def alternatives(self, text: str, target_language: str) -> list[str]:
        raise UnsupportedCapability(f"{self.name} cannot generate alternative translations")

    def _require(self, value: str | None, message: str) -> str:
        if value is None or not value.strip():
            raise ConfigurationError(message)
        return value.strip()


class ChatTranslationProvider(TranslationProvider):
    """Shared flow for prompt-driven backends: prompt, complete, extract, switch."""

    @abstractmethod
    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        ...

    def _model_name(self) -> str:
        return self.settings.model

    async def translate(self, text: str) -> TranslationResult:
        cleaned = normalize_text(text)
        LOGGER.debug("Cleaned text for %s: %s", self.name, cleaned)
        system_prompt, user_prompt = build_translation_prompts(
            self.settings,
            cleaned,
            simplified=is_reasoning_model(self._model_name()),
        )
        content = await self._complete(system_prompt, user_prompt)
        LOGGER.debug("%s response content: %s", self.name, content)
        extracted = extract_translation(content)
        target_language = effective_target_language(
            extracted.detected_language,
            self.settings.target_language,
            self.settings.alternative_target_language,
        )
        LOGGER.info(
            "%s detected '%s', effective target '%s'",
            self.name,
            extracted.detected_language,
            target_language,
        )
        return TranslationResult(
            detected_language=extracted.detected_language,
            translated_text=extracted.translated_text,
            target_language=target_language,
        )

    async def alternatives(self, text: str, target_language: str) -> list[str]:
        cleaned = normalize_text(text)
        system_prompt, user_prompt = build_alternatives_prompts(cleaned, target_language)
        content = await self._complete(system_prompt, user_prompt)
        alternatives = parse_alternatives(content)
        if not alternatives:
            raise ResponseShapeError(f"No alternatives found in {self.name} response")
        LOGGER.info("%s returned %s alternatives", self.name, len(alternatives))
        return alternatives
