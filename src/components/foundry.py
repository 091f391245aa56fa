"""Chat completions against models deployed from the Azure AI Foundry catalog."""

from __future__ import annotations

import logging

from azure.ai.inference.aio import ChatCompletionsClient
from azure.ai.inference.models import SystemMessage, UserMessage
from azure.core.credentials import AzureKeyCredential
from azure.core.exceptions import AzureError

from src.config.settings import FoundrySettings, get_foundry_settings
from src.utils.credentials import get_default_credential
from src.utils.exceptions import FoundryConfigurationError, FoundryServiceError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful AI assistant."


class FoundryService:
    """Send prompts to a Foundry model through the Azure AI Inference SDK."""

    def __init__(
        self,
        *,
        settings: FoundrySettings | None = None,
        client: ChatCompletionsClient | None = None,
    ) -> None:
        self._settings = settings or get_foundry_settings()
        self._client = client or self._build_client(self._settings)

    async def get_chat_completion(self, prompt: str) -> str:
        try:
            response = await self._client.complete(
                messages=[SystemMessage(content=SYSTEM_PROMPT), UserMessage(content=prompt)],
                model=self._settings.model_name,
                temperature=self._settings.temperature,
                max_tokens=self._settings.max_tokens,
            )
        except AzureError as exc:
            logger.error("Error calling Foundry endpoint: %s", exc)
            raise FoundryServiceError(f"Foundry Error: {exc.message}") from exc

        if not response.choices:
            raise FoundryServiceError("Foundry Error: response contained no choices")
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        await self._client.close()

    @staticmethod
    def _build_client(settings: FoundrySettings) -> ChatCompletionsClient:
        if not settings.endpoint:
            raise FoundryConfigurationError(
                "Foundry service is not configured. Set FOUNDRY_ENDPOINT in the environment or .env file."
            )

        if settings.api_key:
            return ChatCompletionsClient(endpoint=settings.endpoint, credential=AzureKeyCredential(settings.api_key))

        logger.info("Using Managed Identity for Foundry")
        return ChatCompletionsClient(endpoint=settings.endpoint, credential=get_default_credential())
