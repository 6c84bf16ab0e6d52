from __future__ import annotations


def effective_target_language(detected_language: str, primary: str, alternative: str) -> str:
    """Pick the language a text should be translated into.

    Text already written in the primary target goes to the alternative target;
    everything else goes to the primary target. Comparison ignores case and
    surrounding whitespace.
    """
    if detected_language.strip().casefold() == primary.strip().casefold():
        return alternative
    return primary
