"""Tolerant decoding of completion text returned by translation backends.

Backends are asked for ``{"detected_language": ..., "translated_text": ...}``
but routinely wrap the object in prose, emit stray control characters, escape
newlines twice, or ignore the instruction entirely. Nothing in here raises:
callers always get a best-effort value and can check for ``TRANSLATION_FAILED``
or ``recovered`` themselves.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

LOGGER = logging.getLogger(__name__)

UNKNOWN_LANGUAGE = "unknown"
TRANSLATION_FAILED = "translation failed"
MAX_ALTERNATIVES = 5

# Unicode "Cc" category minus tab, newline and carriage return.
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_ESCAPED_SEQUENCES = (
    ("\\r\\n", "\n"),
    ("\\n", "\n"),
    ("\\r", "\n"),
    ("\\t", "\t"),
)
_ENUMERATION_CHARS = "12345.)-*"
_MISSING = object()


@dataclass(frozen=True)
class ExtractedTranslation:
    detected_language: str
    translated_text: str
    recovered: bool = False

    @property
    def failed(self) -> bool:
        return self.translated_text == TRANSLATION_FAILED


def strip_control_characters(content: str) -> str:
    return _CONTROL_CHARS_RE.sub("", content)


def extract_translation(content: Any) -> ExtractedTranslation:
    """Turn an arbitrary completion into a detected language and a translation."""
    cleaned = _clean(content)
    parsed, recovered = _load_json(cleaned)
    if parsed is _MISSING:
        LOGGER.warning("No usable JSON in response; treating it as plain text")
        return ExtractedTranslation(
            detected_language=UNKNOWN_LANGUAGE,
            translated_text=cleaned,
            recovered=True,
        )
    if recovered:
        LOGGER.warning("Recovered JSON object embedded in surrounding text")

    detected_language = UNKNOWN_LANGUAGE
    translated_text = TRANSLATION_FAILED
    if isinstance(parsed, dict):
        language = parsed.get("detected_language")
        if isinstance(language, str) and language.strip():
            detected_language = language.strip()
        text = parsed.get("translated_text")
        if isinstance(text, str):
            translated_text = unescape_sequences(text)
    elif isinstance(parsed, str):
        translated_text = unescape_sequences(parsed)

    if translated_text == TRANSLATION_FAILED:
        LOGGER.warning("Response JSON did not contain a translated_text string")
    return ExtractedTranslation(
        detected_language=detected_language,
        translated_text=translated_text,
        recovered=recovered,
    )


def parse_alternatives(content: Any) -> list[str]:
    """Read a list of alternative phrasings from a completion.

    Prefers ``{"alternatives": [...]}`` (or a bare JSON array). Falls back to
    one alternative per line, with list markers and quotes removed.
    """
    cleaned = _clean(content).strip()
    parsed, _ = _load_json(cleaned)
    if isinstance(parsed, dict) and isinstance(parsed.get("alternatives"), list):
        return _string_items(parsed["alternatives"])
    if isinstance(parsed, list):
        items = _string_items(parsed)
        if items:
            return items

    alternatives: list[str] = []
    for raw_line in cleaned.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or line.startswith("-"):
            continue
        line = line.lstrip(_ENUMERATION_CHARS).strip().strip('"')
        if line:
            alternatives.append(line)
        if len(alternatives) == MAX_ALTERNATIVES:
            break
    if alternatives:
        LOGGER.info("Extracted %s alternatives from plain text lines", len(alternatives))
    return alternatives


def unescape_sequences(text: str) -> str:
    for escaped, replacement in _ESCAPED_SEQUENCES:
        text = text.replace(escaped, replacement)
    return text


def find_balanced_object(text: str) -> str | None:
    """Return the first ``{...}`` span whose braces balance, if any."""
    start = text.find("{")
    if start == -1:
        return None
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def _clean(content: Any) -> str:
    if isinstance(content, (bytes, bytearray)):
        text = bytes(content).decode("utf-8", errors="replace")
    elif isinstance(content, str):
        text = content
    elif content is None:
        text = ""
    else:
        text = str(content)
    cleaned = strip_control_characters(text)
    if cleaned != text:
        LOGGER.warning("Removed control characters from response")
    return cleaned


def _load_json(text: str) -> tuple[Any, bool]:
    """Parse ``text`` directly, then via brace scanning. Returns (value, recovered)."""
    try:
        return json.loads(text, strict=False), False
    except ValueError as exc:
        LOGGER.debug("Direct JSON parse failed: %s", exc)
    except RecursionError:
        LOGGER.debug("Direct JSON parse exceeded recursion limit")

    span = find_balanced_object(text)
    if span is None:
        return _MISSING, True
    try:
        return json.loads(span, strict=False), True
    except (ValueError, RecursionError) as exc:
        LOGGER.debug("Embedded JSON parse failed: %s", exc)
        return _MISSING, True


def _string_items(values: list[Any]) -> list[str]:
    return [value.strip() for value in values if isinstance(value, str) and value.strip()]
