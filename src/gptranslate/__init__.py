from __future__ import annotations

from gptranslate.config import Settings, build_settings
from gptranslate.dedup import DedupGate
from gptranslate.errors import (
    ConfigurationError,
    DuplicateRequest,
    HistoryWriteError,
    ProviderError,
    ResponseShapeError,
    TransportError,
    UnsupportedCapability,
)
from gptranslate.models import HistoryEntry, TranslationResponse, TranslationResult
from gptranslate.orchestrator import TranslationService
from gptranslate.storage.history_store import HistoryStore

__all__ = [
    "ConfigurationError",
    "DedupGate",
    "DuplicateRequest",
    "HistoryEntry",
    "HistoryStore",
    "HistoryWriteError",
    "ProviderError",
    "ResponseShapeError",
    "Settings",
    "TransportError",
    "TranslationResponse",
    "TranslationResult",
    "TranslationService",
    "UnsupportedCapability",
    "build_settings",
]
