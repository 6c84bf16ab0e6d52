from __future__ import annotations

from gptranslate.translate.policy import effective_target_language


def test_switches_to_alternative_when_source_is_primary() -> None:
    assert effective_target_language("French", "French", "Spanish") == "Spanish"


def test_keeps_primary_for_other_sources() -> None:
    assert effective_target_language("German", "French", "Spanish") == "French"


def test_comparison_ignores_case_and_whitespace() -> None:
    assert effective_target_language(" english ", "English", "Norwegian") == "Norwegian"
    assert effective_target_language("unknown", "English", "Norwegian") == "English"
