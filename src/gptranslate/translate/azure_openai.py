from __future__ import annotations

import logging
from typing import Any

from gptranslate.errors import ConfigurationError
from gptranslate.translate.base import message_content, open_client, post_json
from gptranslate.translate.openai import OpenAITranslationProvider, build_chat_payload

LOGGER = logging.getLogger(__name__)

MODELS_API_HOST = "services.ai.azure.com"


def is_models_endpoint(endpoint: str) -> bool:
    """AI Foundry endpoints take the deployment in the body instead of the path."""
    return MODELS_API_HOST in endpoint


class AzureOpenAITranslationProvider(OpenAITranslationProvider):
    """Azure-hosted chat completions, authenticated with an ``api-key`` header."""

    name = "azure_openai"

    def _model_name(self) -> str:
        return self.settings.azure_deployment_name.strip() or self.settings.model.strip()

    def _deployment(self) -> str:
        deployment = self._model_name()
        if not deployment:
            raise ConfigurationError(
                "Azure OpenAI needs a model or deployment name. Configure AZURE_OPENAI_DEPLOYMENT or a model."
            )
        return deployment

    def _endpoint(self) -> str:
        return self._require(self.settings.azure_endpoint, "Azure OpenAI endpoint is not configured").rstrip("/")

    def _url(self) -> str:
        endpoint = self._endpoint()
        if is_models_endpoint(endpoint):
            return f"{endpoint}/models/chat/completions"
        return f"{endpoint}/openai/deployments/{self._deployment()}/chat/completions"

    def _headers(self) -> dict[str, str]:
        return {"api-key": self.settings.azure_api_key, "Content-Type": "application/json"}

    def _payload(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        deployment = self._deployment()
        payload = build_chat_payload(
            system_prompt,
            user_prompt,
            model=deployment,
            reasoning_effort=self.settings.reasoning_effort,
        )
        if is_models_endpoint(self._endpoint()):
            payload["model"] = deployment
        return payload

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        payload = self._payload(system_prompt, user_prompt)
        url = self._url()
        LOGGER.info(
            "Endpoint type: %s, deployment: %s",
            "Models API" if is_models_endpoint(url) else "Cognitive Services",
            self._model_name(),
        )
        async with open_client(self._client, self.settings.request_timeout) as client:
            data = await post_json(
                client,
                url,
                provider=self.name,
                payload=payload,
                headers=self._headers(),
                params={"api-version": self.settings.azure_api_version},
            )
        return message_content(data, self.name)
