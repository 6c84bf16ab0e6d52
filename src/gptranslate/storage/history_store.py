from __future__ import annotations

import json
import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Sequence

from rapidfuzz.distance import Levenshtein

from gptranslate.models import HistoryEntry, TranslationHistory

LOGGER = logging.getLogger(__name__)

MAX_ENTRIES = 100
MIN_TEXT_LENGTH = 10
SIMILARITY_THRESHOLD = 0.8


@dataclass(frozen=True)
class LanguageSignals:
    """Lexical hints that a text is written in ``language``."""

    language: str
    characters: tuple[str, ...] = ()
    words: tuple[str, ...] = ()
    suffixes: tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        padded = f" {text} "
        if any(char in text for char in self.characters):
            return True
        if any(f" {word} " in padded for word in self.words):
            return True
        return any(token.lower().endswith(self.suffixes) for token in text.split())


NORWEGIAN_SIGNALS = LanguageSignals(
    language="Norwegian",
    characters=("å", "æ", "ø", "Å", "Æ", "Ø"),
    words=("og", "av", "på", "med", "til", "for", "ikke", "kan", "det", "er"),
    suffixes=("ene", "ing", "het", "else"),
)
DEFAULT_LANGUAGE_SIGNALS: tuple[LanguageSignals, ...] = (NORWEGIAN_SIGNALS,)


def text_similarity(first: str, second: str) -> float:
    """1 minus the Levenshtein distance divided by the longer character count."""
    if not first and not second:
        return 1.0
    if not first or not second:
        return 0.0
    distance = Levenshtein.distance(first, second)
    return 1.0 - distance / max(len(first), len(second))


def is_near_duplicate(entry: HistoryEntry, other: HistoryEntry) -> bool:
    return (
        entry.detected_language == other.detected_language
        and entry.target_language == other.target_language
        and text_similarity(entry.original_text, other.original_text) > SIMILARITY_THRESHOLD
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HistoryStore:
    """Bounded, newest-first translation log persisted as a single JSON document.

    Every change re-reads and rewrites the whole file. There is no locking, so
    two writers racing on load/modify/save lose one update (last writer wins).
    """

    def __init__(self, path: Path, *, clock: Callable[[], datetime] = _utcnow):
        self._path = path
        self._clock = clock

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> TranslationHistory:
        if not self._path.exists():
            return TranslationHistory()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return TranslationHistory.model_validate(data)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Failed to read %s: %s", self._path, exc)
            raise

    def save(self, history: TranslationHistory) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = history.model_dump(mode="json")
        payload_str = json.dumps(payload, ensure_ascii=False, indent=2)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(payload_str, encoding="utf-8")
        os.replace(tmp_path, self._path)

    def entries(self) -> list[HistoryEntry]:
        return self.load().entries

    def add(
        self,
        original_text: str,
        translated_text: str,
        detected_language: str,
        target_language: str,
    ) -> HistoryEntry | None:
        """Record a translation, folding it into the latest entry when nearly identical.

        Returns the stored entry, or None when nothing was written.
        """
        if len(original_text.strip()) < MIN_TEXT_LENGTH:
            LOGGER.debug("Skipping history for short text (likely incomplete typing)")
            return None

        history = self.load()
        candidate = HistoryEntry(
            id=str(uuid.uuid4()),
            original_text=original_text,
            translated_text=translated_text,
            detected_language=detected_language,
            target_language=target_language,
            timestamp=self._clock(),
        )
        if history.entries and is_near_duplicate(candidate, history.entries[0]):
            latest = history.entries[0]
            if len(original_text) <= len(latest.original_text):
                LOGGER.debug("Dropping near-duplicate history entry that is not longer than %s", latest.id)
                return None
            merged = candidate.model_copy(update={"id": latest.id})
            history.entries[0] = merged
            self.save(history)
            LOGGER.info("Updated history entry %s in place", merged.id)
            return merged

        history.entries.insert(0, candidate)
        del history.entries[MAX_ENTRIES:]
        self.save(history)
        return candidate

    def deduplicate(self) -> int:
        """Collapse near-duplicates across the whole history. Returns entries removed."""
        history = self.load()
        kept: list[HistoryEntry] = []
        for entry in history.entries:
            if not any(is_near_duplicate(entry, existing) for existing in kept):
                kept.append(entry)
        kept.sort(key=lambda entry: entry.timestamp, reverse=True)
        removed = len(history.entries) - len(kept)
        history.entries = kept
        self.save(history)
        LOGGER.info("History deduplicated: %s removed, %s kept", removed, len(kept))
        return removed

    def delete(self, entry_id: str) -> bool:
        history = self.load()
        remaining = [entry for entry in history.entries if entry.id != entry_id]
        deleted = len(remaining) != len(history.entries)
        history.entries = remaining
        self.save(history)
        return deleted

    def clear(self) -> None:
        self.save(TranslationHistory())

    def fix_target_languages(self, signals: Sequence[LanguageSignals] = DEFAULT_LANGUAGE_SIGNALS) -> int:
        """Repair entries recorded as translated into their own source language.

        Such an entry was really translated into the alternative language; when
        its text carries one of the known lexical signatures the recorded target
        is rewritten. Returns the number of rewritten entries.
        """
        history = self.load()
        fixed = 0
        for index, entry in enumerate(history.entries):
            if entry.target_language.casefold() != entry.detected_language.casefold():
                continue
            for candidate in signals:
                if candidate.language.casefold() == entry.target_language.casefold():
                    continue
                if candidate.matches(entry.translated_text):
                    history.entries[index] = entry.model_copy(update={"target_language": candidate.language})
                    fixed += 1
                    break
        self.save(history)
        if fixed:
            LOGGER.info("Corrected target language on %s history entries", fixed)
        return fixed
