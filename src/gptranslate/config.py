from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from gptranslate.errors import ConfigurationError
from gptranslate.models import ModelConfig

PROVIDERS = ("openai", "azure_openai", "azure_translator", "ollama")
REASONING_EFFORTS = ("minimal", "low", "medium", "high")

DEFAULT_PROMPT = (
    "Translate the given text from {detected_language} to {target_language} accurately while preserving "
    "the meaning, tone, and nuance of the original content.\n\n"
    "# Additional Details\n"
    "- Ensure the translation retains the context, cultural meaning, tone, formal/informal style, and any "
    "idiomatic expressions.\n"
    "- Do **not** alter names, technical terms, or specific formatting unless required for grammatical "
    "correctness in the target language.\n\n"
    "# Output Format\n"
    "The translation output should be provided as valid JSON containing 'detected_language' and "
    "'translated_text' fields.\n\n"
    "# Notes\n"
    "- Ensure punctuation and capitalization match the norms of the target language.\n"
    "- When encountering idiomatic expressions, adapt them to equivalent phrases in the target language "
    "rather than direct word-for-word translation.\n"
    "- For ambiguous content, aim for the most contextually appropriate meaning."
)
DEFAULT_TRANSLATOR_ENDPOINT = "https://api.cognitive.microsofttranslator.com"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_AZURE_API_VERSION = "2024-10-21"
DEFAULT_HISTORY_PATH = Path("~/.gptranslate/history.json")


@dataclass(frozen=True)
class Settings:
    """Immutable configuration snapshot consumed by a translation call."""

    api_provider: str = "openai"
    model: str = ""
    target_language: str = "English"
    alternative_target_language: str = "Spanish"
    user_source_language: str | None = None
    custom_prompt: str = DEFAULT_PROMPT
    reasoning_effort: str | None = "medium"
    alternatives_fallback_provider: str | None = None
    available_models: Mapping[str, list[ModelConfig]] = field(default_factory=dict)
    openai_api_key: str = ""
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL
    azure_endpoint: str = ""
    azure_api_key: str = ""
    azure_api_version: str = DEFAULT_AZURE_API_VERSION
    azure_deployment_name: str = ""
    azure_translator_endpoint: str = DEFAULT_TRANSLATOR_ENDPOINT
    azure_translator_api_key: str = ""
    azure_translator_region: str = ""
    ollama_url: str | None = None
    history_path: Path = DEFAULT_HISTORY_PATH
    request_timeout: float = 30.0


def parse_model_list(text: str | None) -> dict[str, list[ModelConfig]]:
    """Parse ``provider:model`` pairs separated by commas into a per-provider table."""
    models: dict[str, list[ModelConfig]] = {}
    if not text:
        return models
    for chunk in text.split(","):
        item = chunk.strip()
        if not item:
            continue
        provider, sep, name = item.partition(":")
        provider = provider.strip().lower()
        name = name.strip()
        if not sep or not provider or not name:
            raise ConfigurationError(f"Invalid model entry '{item}'. Use 'provider:model'.")
        models.setdefault(provider, []).append(
            ModelConfig(name=name, display_name=name, provider=provider, is_enabled=True)
        )
    return models


def build_settings(*, environ: Mapping[str, str] | None = None, **overrides: Any) -> Settings:
    """Read settings from the environment and apply explicit overrides."""
    env = os.environ if environ is None else environ

    def read(key: str, default: str = "") -> str:
        return env.get(key, default).strip()

    values: dict[str, Any] = {
        "api_provider": read("GPTRANSLATE_PROVIDER", "openai").lower(),
        "model": read("GPTRANSLATE_MODEL"),
        "target_language": read("GPTRANSLATE_TARGET_LANGUAGE", "English"),
        "alternative_target_language": read("GPTRANSLATE_ALTERNATIVE_LANGUAGE", "Spanish"),
        "user_source_language": read("GPTRANSLATE_SOURCE_LANGUAGE") or None,
        "custom_prompt": env.get("GPTRANSLATE_PROMPT") or DEFAULT_PROMPT,
        "reasoning_effort": read("GPTRANSLATE_REASONING_EFFORT", "medium").lower() or None,
        "alternatives_fallback_provider": read("GPTRANSLATE_ALTERNATIVES_FALLBACK") or None,
        "available_models": parse_model_list(env.get("GPTRANSLATE_AVAILABLE_MODELS")),
        "openai_api_key": read("OPENAI_API_KEY"),
        "openai_base_url": read("OPENAI_BASE_URL") or DEFAULT_OPENAI_BASE_URL,
        "azure_endpoint": read("AZURE_OPENAI_ENDPOINT"),
        "azure_api_key": read("AZURE_OPENAI_API_KEY"),
        "azure_api_version": read("AZURE_OPENAI_API_VERSION") or DEFAULT_AZURE_API_VERSION,
        "azure_deployment_name": read("AZURE_OPENAI_DEPLOYMENT"),
        "azure_translator_endpoint": read("AZURE_TRANSLATOR_ENDPOINT") or DEFAULT_TRANSLATOR_ENDPOINT,
        "azure_translator_api_key": read("AZURE_TRANSLATOR_KEY"),
        "azure_translator_region": read("AZURE_TRANSLATOR_REGION"),
        "ollama_url": read("OLLAMA_URL") or None,
        "history_path": Path(read("GPTRANSLATE_HISTORY_PATH") or DEFAULT_HISTORY_PATH),
        "request_timeout": _parse_timeout(read("GPTRANSLATE_TIMEOUT")),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})

    if values["reasoning_effort"] and values["reasoning_effort"] not in REASONING_EFFORTS:
        allowed = ", ".join(REASONING_EFFORTS)
        raise ConfigurationError(f"Invalid reasoning effort '{values['reasoning_effort']}'. Use one of: {allowed}.")
    if not str(values["target_language"]).strip():
        raise ConfigurationError("Target language must not be blank")
    values["history_path"] = Path(values["history_path"]).expanduser()
    return Settings(**values)


def is_provider_configured(settings: Settings, provider: str) -> bool:
    """Whether ``provider`` has the credentials and endpoints it needs."""
    if provider == "openai":
        return bool(settings.openai_api_key)
    if provider == "azure_openai":
        return bool(settings.azure_api_key and settings.azure_endpoint)
    if provider == "azure_translator":
        return bool(settings.azure_translator_api_key and settings.azure_translator_endpoint)
    if provider == "ollama":
        return bool(settings.ollama_url)
    return False


def configured_providers(settings: Settings) -> list[str]:
    return [provider for provider in PROVIDERS if is_provider_configured(settings, provider)]


def _parse_timeout(text: str) -> float:
    if not text:
        return 30.0
    try:
        value = float(text)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid timeout '{text}'. Use a number of seconds.") from exc
    if value <= 0:
        raise ConfigurationError("Timeout seconds must be positive")
    return value
