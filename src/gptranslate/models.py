from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class ModelConfig:
    name: str
    display_name: str = ""
    provider: str = ""
    is_enabled: bool = True
    description: str | None = None


@dataclass(frozen=True)
class TranslationResult:
    """Outcome of a single adapter call."""

    detected_language: str
    translated_text: str
    target_language: str


@dataclass(frozen=True)
class TranslationResponse:
    """What the orchestrator hands back to the UI layer."""

    original_text: str
    translated_text: str
    detected_language: str
    target_language: str


class HistoryEntry(BaseModel):
    id: str
    original_text: str
    translated_text: str
    detected_language: str
    target_language: str
    timestamp: datetime

    model_config = ConfigDict(extra="ignore")


class TranslationHistory(BaseModel):
    entries: list[HistoryEntry] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")
