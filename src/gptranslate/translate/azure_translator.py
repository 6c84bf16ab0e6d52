from __future__ import annotations

import logging
from typing import Any

from gptranslate.errors import ResponseShapeError
from gptranslate.models import TranslationResult
from gptranslate.text import normalize_text
from gptranslate.translate.base import TranslationProvider, open_client, post_json
from gptranslate.translate.extract import UNKNOWN_LANGUAGE
from gptranslate.translate.languages import language_code, language_name
from gptranslate.translate.policy import effective_target_language

LOGGER = logging.getLogger(__name__)

API_VERSION = "3.0"


class AzureTranslatorProvider(TranslationProvider):
    """Dedicated machine-translation API. No prompting and no alternatives."""

    name = "azure_translator"
    supports_alternatives = False

    def _target_language(self) -> str:
        source = self.settings.user_source_language
        if source and source.strip():
            # The source is known up front, so the switch can be decided before calling.
            return effective_target_language(
                source,
                self.settings.target_language,
                self.settings.alternative_target_language,
            )
        return self.settings.target_language

    async def translate(self, text: str) -> TranslationResult:
        cleaned = normalize_text(text)
        endpoint = self._require(
            self.settings.azure_translator_endpoint,
            "Azure Translator endpoint is not configured",
        ).rstrip("/")
        target_code = language_code(self._target_language())
        params = {"api-version": API_VERSION, "to": target_code}
        source = self.settings.user_source_language
        if source and source.strip():
            params["from"] = language_code(source)
            LOGGER.info("Source language code (user specified): %s", params["from"])
        else:
            LOGGER.info("Source language: auto-detect")
        headers = {
            "Ocp-Apim-Subscription-Key": self.settings.azure_translator_api_key,
            "Content-Type": "application/json; charset=UTF-8",
        }
        if self.settings.azure_translator_region.strip():
            headers["Ocp-Apim-Subscription-Region"] = self.settings.azure_translator_region.strip()

        async with open_client(self._client, self.settings.request_timeout) as client:
            data = await post_json(
                client,
                f"{endpoint}/translate",
                provider=self.name,
                payload=[{"Text": cleaned}],
                headers=headers,
                params=params,
            )
        return self._parse(data)

    def _parse(self, data: Any) -> TranslationResult:
        if not isinstance(data, list):
            raise ResponseShapeError("Invalid Azure Translator response: expected array")
        if not data:
            raise ResponseShapeError("Empty response from Azure Translator")
        result = data[0]
        if not isinstance(result, dict):
            raise ResponseShapeError("Invalid Azure Translator response: expected object")

        detected_code = UNKNOWN_LANGUAGE
        detected = result.get("detectedLanguage")
        if isinstance(detected, dict) and isinstance(detected.get("language"), str):
            detected_code = detected["language"]
        elif self.settings.user_source_language:
            detected_code = self.settings.user_source_language

        translations = result.get("translations")
        if not isinstance(translations, list):
            raise ResponseShapeError("No translations found in Azure Translator response")
        if not translations:
            raise ResponseShapeError("Empty translations array in Azure Translator response")
        translation = translations[0]
        text = translation.get("text") if isinstance(translation, dict) else None
        if not isinstance(text, str):
            raise ResponseShapeError("No translation text found in Azure Translator response")

        detected_language = language_name(detected_code)
        target_language = effective_target_language(
            detected_language,
            self.settings.target_language,
            self.settings.alternative_target_language,
        )
        LOGGER.info("Azure Translator detected '%s', effective target '%s'", detected_language, target_language)
        return TranslationResult(
            detected_language=detected_language,
            translated_text=text,
            target_language=target_language,
        )
