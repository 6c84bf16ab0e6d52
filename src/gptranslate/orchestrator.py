from __future__ import annotations

import asyncio
import logging

import httpx

from gptranslate.config import Settings
from gptranslate.dedup import DedupGate
from gptranslate.errors import HistoryWriteError, ProviderError
from gptranslate.models import TranslationResponse
from gptranslate.storage.history_store import HistoryStore
from gptranslate.translate.base import TranslationProvider
from gptranslate.translate.extract import TRANSLATION_FAILED
from gptranslate.translate.factory import create_alternatives_provider, create_provider

LOGGER = logging.getLogger(__name__)


class TranslationService:
    """Coordinates duplicate suppression, the selected provider, and history."""

    def __init__(
        self,
        settings: Settings,
        *,
        gate: DedupGate,
        history: HistoryStore | None = None,
        provider: TranslationProvider | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._gate = gate
        self._history = history
        self._client = client
        self._provider = provider or create_provider(settings, client=client)

    @property
    def provider(self) -> TranslationProvider:
        return self._provider

    async def translate(self, text: str) -> TranslationResponse:
        """Translate ``text``; raises DuplicateRequest, ProviderError or HistoryWriteError."""
        LOGGER.info(
            "Translating with provider=%s model=%s target=%s alternative=%s",
            self._settings.api_provider,
            self._settings.model,
            self._settings.target_language,
            self._settings.alternative_target_language,
        )
        with self._gate.hold(text):
            try:
                result = await self._provider.translate(text)
            except ProviderError as exc:
                LOGGER.error("Translation failed: %s", exc)
                raise
        LOGGER.info(
            "Translation completed: detected=%s target=%s (%s characters)",
            result.detected_language,
            result.target_language,
            len(result.translated_text),
        )
        response = TranslationResponse(
            original_text=text,
            translated_text=result.translated_text,
            detected_language=result.detected_language,
            target_language=result.target_language,
        )
        if self._history is not None and response.translated_text != TRANSLATION_FAILED:
            await self._record(self._history, response)
        return response

    async def _record(self, history: HistoryStore, response: TranslationResponse) -> None:
        try:
            await asyncio.to_thread(
                history.add,
                response.original_text,
                response.translated_text,
                response.detected_language,
                response.target_language,
            )
        except (OSError, ValueError) as exc:
            LOGGER.error("Failed to record translation history: %s", exc)
            raise HistoryWriteError(response, exc) from exc

    async def get_alternatives(self, text: str, target_language: str) -> list[str]:
        """Alternative phrasings of ``text`` in ``target_language``."""
        if self._provider.supports_alternatives:
            provider = self._provider
        else:
            provider = create_alternatives_provider(self._settings, client=self._client)
        LOGGER.info("Requesting alternatives from %s in %s", provider.name, target_language)
        try:
            return await provider.alternatives(text, target_language)
        except ProviderError as exc:
            LOGGER.error("Failed to get alternative translations: %s", exc)
            raise
