from __future__ import annotations

from gptranslate.translate.base import ChatTranslationProvider, TranslationProvider
from gptranslate.translate.extract import ExtractedTranslation, extract_translation, parse_alternatives
from gptranslate.translate.factory import (
    create_alternatives_provider,
    create_provider,
    register_provider,
    resolve_fallback,
)
from gptranslate.translate.policy import effective_target_language

__all__ = [
    "ChatTranslationProvider",
    "ExtractedTranslation",
    "TranslationProvider",
    "create_alternatives_provider",
    "create_provider",
    "effective_target_language",
    "extract_translation",
    "parse_alternatives",
    "register_provider",
    "resolve_fallback",
]
