from pathlib import Path

import pytest

from gptranslate.config import (
    DEFAULT_PROMPT,
    Settings,
    build_settings,
    configured_providers,
    is_provider_configured,
    parse_model_list,
)
from gptranslate.errors import ConfigurationError


def test_build_settings_defaults() -> None:
    settings = build_settings(environ={})
    assert settings.api_provider == "openai"
    assert settings.target_language == "English"
    assert settings.alternative_target_language == "Spanish"
    assert settings.user_source_language is None
    assert settings.custom_prompt == DEFAULT_PROMPT
    assert settings.reasoning_effort == "medium"
    assert settings.request_timeout == 30.0
    assert settings.history_path == Path("~/.gptranslate/history.json").expanduser()


def test_build_settings_reads_environment(tmp_path: Path) -> None:
    environ = {
        "GPTRANSLATE_PROVIDER": " Ollama ",
        "GPTRANSLATE_MODEL": "llama3",
        "GPTRANSLATE_TARGET_LANGUAGE": "Norwegian",
        "GPTRANSLATE_ALTERNATIVE_LANGUAGE": "English",
        "GPTRANSLATE_SOURCE_LANGUAGE": "German",
        "GPTRANSLATE_REASONING_EFFORT": "HIGH",
        "GPTRANSLATE_ALTERNATIVES_FALLBACK": "openai:gpt-4o-mini",
        "GPTRANSLATE_AVAILABLE_MODELS": "ollama:llama3, openai:gpt-4o-mini",
        "OLLAMA_URL": "localhost:11434",
        "GPTRANSLATE_HISTORY_PATH": str(tmp_path / "history.json"),
        "GPTRANSLATE_TIMEOUT": "12.5",
    }

    settings = build_settings(environ=environ)

    assert settings.api_provider == "ollama"
    assert settings.model == "llama3"
    assert settings.target_language == "Norwegian"
    assert settings.user_source_language == "German"
    assert settings.reasoning_effort == "high"
    assert settings.alternatives_fallback_provider == "openai:gpt-4o-mini"
    assert [model.name for model in settings.available_models["openai"]] == ["gpt-4o-mini"]
    assert settings.ollama_url == "localhost:11434"
    assert settings.history_path == tmp_path / "history.json"
    assert settings.request_timeout == 12.5


def test_overrides_win_over_environment() -> None:
    settings = build_settings(environ={"GPTRANSLATE_MODEL": "gpt-4o"}, model="gpt-4o-mini", target_language=None)
    assert settings.model == "gpt-4o-mini"
    assert settings.target_language == "English"


def test_invalid_reasoning_effort() -> None:
    with pytest.raises(ConfigurationError):
        build_settings(environ={"GPTRANSLATE_REASONING_EFFORT": "extreme"})


def test_blank_target_language() -> None:
    with pytest.raises(ConfigurationError):
        build_settings(environ={}, target_language="  ")


@pytest.mark.parametrize("value", ["soon", "0", "-3"])
def test_invalid_timeout(value: str) -> None:
    with pytest.raises(ConfigurationError):
        build_settings(environ={"GPTRANSLATE_TIMEOUT": value})


def test_parse_model_list() -> None:
    models = parse_model_list("openai:gpt-4o, OpenAI:o3-mini,,azure_openai: gpt4o-prod ")
    assert [model.name for model in models["openai"]] == ["gpt-4o", "o3-mini"]
    assert models["azure_openai"][0].name == "gpt4o-prod"
    assert models["azure_openai"][0].provider == "azure_openai"
    assert parse_model_list(None) == {}


@pytest.mark.parametrize("text", ["gpt-4o", "openai:", ":gpt-4o"])
def test_parse_model_list_rejects_bad_entries(text: str) -> None:
    with pytest.raises(ConfigurationError):
        parse_model_list(text)


def test_provider_configuration_checks() -> None:
    settings = Settings(
        openai_api_key="sk-test",
        azure_endpoint="https://my-resource.openai.azure.com",
        azure_translator_api_key="translator-key",
    )
    assert is_provider_configured(settings, "openai")
    assert not is_provider_configured(settings, "azure_openai")
    assert is_provider_configured(settings, "azure_translator")
    assert not is_provider_configured(settings, "ollama")
    assert not is_provider_configured(settings, "deepl")
    assert configured_providers(settings) == ["openai", "azure_translator"]
