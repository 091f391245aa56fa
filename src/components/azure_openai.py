"""Azure OpenAI chat completion and embedding service."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, List

from azure.identity.aio import get_bearer_token_provider
from openai import AsyncAzureOpenAI, OpenAIError

from src.config.settings import (
    COGNITIVE_SERVICES_SCOPE,
    AzureOpenAISettings,
    get_openai_settings,
)
from src.models import ChatRequest, ChatResponse
from src.utils.credentials import get_default_credential
from src.utils.exceptions import (
    OpenAIConfigurationError,
    OpenAIServiceError,
    ServiceValidationError,
)

logger = logging.getLogger(__name__)


class AzureOpenAIService:
    """Thin async wrapper around the Azure OpenAI chat and embedding endpoints."""

    def __init__(
        self,
        *,
        settings: AzureOpenAISettings | None = None,
        client: AsyncAzureOpenAI | None = None,
    ) -> None:
        self._settings = settings or get_openai_settings()

        if not self._settings.deployment_name:
            raise OpenAIConfigurationError(
                "AZURE_OPENAI_DEPLOYMENT_NAME is missing. Set it in the environment or .env file."
            )

        self._client = client or self._build_client(self._settings)

    @property
    def deployment_name(self) -> str:
        return self._settings.deployment_name

    @property
    def embedding_deployment(self) -> str:
        return self._settings.embedding_deployment

    async def get_chat_completion(self, request: ChatRequest) -> ChatResponse:
        """Send a single-turn chat request and return the first choice."""

        logger.info("Sending chat request to Azure OpenAI")
        try:
            response = await self._client.chat.completions.create(
                model=self._settings.deployment_name,
                messages=self._build_messages(request.message),
                max_tokens=request.max_tokens,
                temperature=request.temperature,
            )
        except OpenAIError as exc:
            logger.error("Azure OpenAI request failed: %s", exc)
            raise OpenAIServiceError(f"Azure OpenAI Error: {exc}") from exc

        if not response.choices:
            raise OpenAIServiceError("Azure OpenAI Error: response contained no choices")

        usage = getattr(response, "usage", None)
        return ChatResponse(
            response=response.choices[0].message.content or "",
            tokens_used=getattr(usage, "total_tokens", 0) or 0,
            model=response.model or "",
        )

    async def stream_chat_completion(self, request: ChatRequest) -> AsyncIterator[str]:
        """Yield content deltas as the model produces them."""

        try:
            stream = await self._client.chat.completions.create(
                model=self._settings.deployment_name,
                messages=self._build_messages(request.message),
                max_tokens=request.max_tokens,
                temperature=request.temperature,
                stream=True,
            )
            async for chunk in stream:
                # Azure emits a content-filter chunk with no choices first.
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except OpenAIError as exc:
            logger.error("Azure OpenAI streaming request failed: %s", exc)
            raise OpenAIServiceError(f"Azure OpenAI Error: {exc}") from exc

    async def get_embeddings(self, text: str) -> List[float]:
        """Generate an embedding vector for a single text snippet."""

        if text is None or not text.strip():
            raise ServiceValidationError("Text must not be empty or only whitespace.")

        try:
            response = await self._client.embeddings.create(
                model=self._settings.embedding_deployment,
                input=[text],
            )
        except OpenAIError as exc:
            logger.error("Failed to generate embeddings: %s", exc)
            raise OpenAIServiceError(f"Embeddings Error: {exc}") from exc

        if not response.data:
            raise OpenAIServiceError("Embeddings Error: response contained no vectors")

        return [float(value) for value in response.data[0].embedding]

    async def close(self) -> None:
        await self._client.close()

    def _build_messages(self, message: str) -> list[dict[str, Any]]:
        return [
            {"role": "system", "content": self._settings.system_prompt},
            {"role": "user", "content": message},
        ]

    @staticmethod
    def _build_client(settings: AzureOpenAISettings) -> AsyncAzureOpenAI:
        if not settings.endpoint:
            raise OpenAIConfigurationError("AZURE_OPENAI_ENDPOINT is missing.")

        if settings.use_managed_identity:
            logger.info("Using Managed Identity for Azure OpenAI")
            token_provider = get_bearer_token_provider(get_default_credential(), COGNITIVE_SERVICES_SCOPE)
            return AsyncAzureOpenAI(
                azure_endpoint=settings.endpoint,
                api_version=settings.api_version,
                azure_ad_token_provider=token_provider,
            )

        if not settings.api_key:
            raise OpenAIConfigurationError("AZURE_OPENAI_API_KEY is missing or empty.")

        logger.info("Using API Key for Azure OpenAI")
        return AsyncAzureOpenAI(
            azure_endpoint=settings.endpoint,
            api_version=settings.api_version,
            api_key=settings.api_key,
        )
