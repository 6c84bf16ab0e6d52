"""Provider selection and alternatives-fallback resolution."""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable

import httpx

from gptranslate.config import Settings
from gptranslate.errors import ConfigurationError
from gptranslate.translate.azure_openai import AzureOpenAITranslationProvider
from gptranslate.translate.azure_translator import AzureTranslatorProvider
from gptranslate.translate.base import TranslationProvider
from gptranslate.translate.ollama import OllamaTranslationProvider
from gptranslate.translate.openai import OpenAITranslationProvider

LOGGER = logging.getLogger(__name__)

DEFAULT_PROVIDER = "openai"
FALLBACK_PROVIDERS = ("openai", "azure_openai", "ollama")

ProviderBuilder = Callable[..., TranslationProvider]

_BUILDERS: dict[str, ProviderBuilder] = {
    "openai": OpenAITranslationProvider,
    "azure_openai": AzureOpenAITranslationProvider,
    "azure_translator": AzureTranslatorProvider,
    "ollama": OllamaTranslationProvider,
}


def register_provider(name: str, builder: ProviderBuilder) -> None:
    """Register a builder called as ``builder(settings, client=...)``."""
    _BUILDERS[name] = builder


def available_providers() -> list[str]:
    return list(_BUILDERS)


def ensure_azure_deployment_consistency(settings: Settings) -> Settings:
    """For Azure OpenAI the deployment name follows the selected model."""
    if (
        settings.api_provider == "azure_openai"
        and settings.model.strip()
        and settings.azure_deployment_name != settings.model
    ):
        LOGGER.info(
            "Updating Azure deployment name from '%s' to '%s' to match model",
            settings.azure_deployment_name,
            settings.model,
        )
        return dataclasses.replace(settings, azure_deployment_name=settings.model)
    return settings


def create_provider(settings: Settings, *, client: httpx.AsyncClient | None = None) -> TranslationProvider:
    """Build the adapter for ``settings.api_provider``; unknown ids fall back to OpenAI."""
    settings = ensure_azure_deployment_consistency(settings)
    builder = _BUILDERS.get(settings.api_provider)
    if builder is None:
        LOGGER.warning("Unknown API provider '%s', defaulting to %s", settings.api_provider, DEFAULT_PROVIDER)
        settings = dataclasses.replace(settings, api_provider=DEFAULT_PROVIDER)
        builder = _BUILDERS[DEFAULT_PROVIDER]
    LOGGER.info("Creating %s provider with model '%s'", settings.api_provider, settings.model)
    return builder(settings, client=client)


def resolve_fallback(settings: Settings) -> tuple[str, str]:
    """Resolve the ``provider[:model]`` alternatives fallback into a concrete pair."""
    raw = (settings.alternatives_fallback_provider or "").strip()
    if not raw:
        raise ConfigurationError(
            f"{settings.api_provider} cannot generate alternatives. Please configure a fallback provider in settings."
        )
    provider, _, model = raw.partition(":")
    provider = provider.strip().lower()
    model = model.strip()
    if provider not in FALLBACK_PROVIDERS:
        raise ConfigurationError(f"Unknown alternatives fallback provider '{provider}'")

    if not model:
        models = list(settings.available_models.get(provider, []))
        enabled = next((entry for entry in models if entry.is_enabled), None)
        if enabled is not None:
            model = enabled.name
        elif models:
            model = models[0].name
    if not model and provider == "azure_openai":
        model = settings.azure_deployment_name.strip()
    if not model and settings.api_provider == provider:
        model = settings.model.strip()
    if not model:
        raise ConfigurationError(
            f"Could not resolve a model for alternatives fallback provider '{provider}'. "
            "Add one to the available models or use 'provider:model'."
        )
    return provider, model


def create_alternatives_provider(
    settings: Settings,
    *,
    client: httpx.AsyncClient | None = None,
) -> TranslationProvider:
    """Return an adapter that can generate alternatives, substituting the fallback if needed."""
    primary = create_provider(settings, client=client)
    if primary.supports_alternatives:
        return primary
    provider, model = resolve_fallback(settings)
    LOGGER.info("Using fallback provider '%s' with model '%s' for alternatives", provider, model)
    fallback_settings = dataclasses.replace(settings, api_provider=provider, model=model)
    return create_provider(fallback_settings, client=client)
