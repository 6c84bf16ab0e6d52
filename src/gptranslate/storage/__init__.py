from __future__ import annotations

from gptranslate.storage.history_store import HistoryStore, LanguageSignals, text_similarity

__all__ = ["HistoryStore", "LanguageSignals", "text_similarity"]
