from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from gptranslate.config import Settings
from gptranslate.errors import ResponseShapeError, TransportError, UnsupportedCapability
from gptranslate.models import TranslationResult
from gptranslate.translate.azure_translator import AzureTranslatorProvider
from gptranslate.translate.languages import language_code, language_name


def _settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "api_provider": "azure_translator",
        "azure_translator_api_key": "translator-key",
        "azure_translator_region": "westeurope",
        "target_language": "English",
        "alternative_target_language": "Spanish",
    }
    values.update(overrides)
    return Settings(**values)


def _run(settings: Settings, payload: Any, *, status: int = 200) -> tuple[TranslationResult, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)

    async def scenario() -> TranslationResult:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await AzureTranslatorProvider(settings, client=client).translate("  Bonjour  ")

    return asyncio.run(scenario()), requests


def test_translates_with_detected_language() -> None:
    payload = [{"detectedLanguage": {"language": "fr", "score": 1.0}, "translations": [{"text": "Hello", "to": "en"}]}]

    result, requests = _run(_settings(), payload)

    request = requests[0]
    assert request.url.path == "/translate"
    assert request.url.params["api-version"] == "3.0"
    assert request.url.params["to"] == "en"
    assert "from" not in request.url.params
    assert request.headers["Ocp-Apim-Subscription-Key"] == "translator-key"
    assert request.headers["Ocp-Apim-Subscription-Region"] == "westeurope"
    assert json.loads(request.content) == [{"Text": "Bonjour"}]
    assert result == TranslationResult(detected_language="French", translated_text="Hello", target_language="English")


def test_detected_primary_language_reports_alternative_target() -> None:
    payload = [{"detectedLanguage": {"language": "en"}, "translations": [{"text": "Hello", "to": "en"}]}]

    result, _ = _run(_settings(), payload)

    assert result.detected_language == "English"
    assert result.target_language == "Spanish"


def test_source_override_switches_before_calling() -> None:
    payload = [{"translations": [{"text": "Hola", "to": "es"}]}]

    result, requests = _run(_settings(user_source_language="English"), payload)

    params = requests[0].url.params
    assert params["from"] == "en"
    assert params["to"] == "es"
    assert result.detected_language == "English"
    assert result.target_language == "Spanish"


def test_region_header_is_optional() -> None:
    payload = [{"translations": [{"text": "Hello"}]}]

    result, requests = _run(_settings(azure_translator_region=""), payload)

    assert "Ocp-Apim-Subscription-Region" not in requests[0].headers
    assert result.detected_language == "unknown"


@pytest.mark.parametrize(
    "payload",
    [
        {"translations": []},
        [],
        ["not an object"],
        [{"detectedLanguage": {"language": "fr"}}],
        [{"translations": []}],
        [{"translations": [{"to": "en"}]}],
    ],
)
def test_unexpected_shapes_fail_clearly(payload: Any) -> None:
    with pytest.raises(ResponseShapeError):
        _run(_settings(), payload)


def test_http_errors_keep_status_and_body() -> None:
    with pytest.raises(TransportError) as excinfo:
        _run(_settings(), '{"error": {"code": 401000}}', status=401)
    assert excinfo.value.status_code == 401
    assert "401000" in excinfo.value.body


def test_alternatives_are_not_supported() -> None:
    provider = AzureTranslatorProvider(_settings())
    assert provider.supports_alternatives is False
    with pytest.raises(UnsupportedCapability):
        asyncio.run(provider.alternatives("Hello", "French"))


def test_language_tables() -> None:
    assert language_code("Chinese (Traditional)") == "zh-Hant"
    assert language_code(" norwegian ") == "nb"
    assert language_code("Klingon") == "Klingon"
    assert language_name("ZH-Hans") == "Chinese"
    assert language_name("xx") == "xx"
