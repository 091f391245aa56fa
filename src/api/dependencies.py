"""Dependency wiring for the FastAPI application."""

from __future__ import annotations

import logging
from functools import lru_cache

from src.components.app_insights import AppInsightsTelemetry
from src.components.azure_openai import AzureOpenAIService
from src.components.blob_storage import BlobStorageService
from src.components.cognitive_search import CognitiveSearchService
from src.components.foundry import FoundryService
from src.components.rag import RagService
from src.components.vector_search import VectorSearchService
from src.utils.credentials import get_default_credential

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_openai_service() -> AzureOpenAIService:
    """Provide a singleton AzureOpenAIService instance for the API layer."""

    return AzureOpenAIService()


@lru_cache(maxsize=1)
def get_search_service() -> CognitiveSearchService:
    """Provide a singleton CognitiveSearchService instance for the API layer."""

    return CognitiveSearchService()


@lru_cache(maxsize=1)
def get_blob_service() -> BlobStorageService:
    """Provide a singleton BlobStorageService instance for the API layer."""

    return BlobStorageService()


@lru_cache(maxsize=1)
def get_telemetry() -> AppInsightsTelemetry:
    return AppInsightsTelemetry()


@lru_cache(maxsize=1)
def get_foundry_service() -> FoundryService:
    return FoundryService()


@lru_cache(maxsize=1)
def get_rag_service() -> RagService:
    """Compose the RAG pipeline from the shared OpenAI and search singletons."""

    return RagService(openai_service=get_openai_service(), search_service=get_search_service())


@lru_cache(maxsize=1)
def get_vector_search_service() -> VectorSearchService:
    return VectorSearchService(openai_service=get_openai_service())


_CLOSEABLE_PROVIDERS = (
    get_openai_service,
    get_search_service,
    get_blob_service,
    get_foundry_service,
    get_vector_search_service,
)


async def close_services() -> None:
    """Close the SDK clients of every service that was created, then forget them."""

    for provider in _CLOSEABLE_PROVIDERS:
        if provider.cache_info().currsize == 0:
            continue
        service = provider()
        logger.debug("Closing %s", type(service).__name__)
        try:
            await service.close()
        except Exception:
            logger.exception("Failed to close %s", type(service).__name__)
        provider.cache_clear()

    get_rag_service.cache_clear()
    get_telemetry.cache_clear()

    if get_default_credential.cache_info().currsize:
        try:
            await get_default_credential().close()
        except Exception:
            logger.exception("Failed to close the shared Azure credential")
        get_default_credential.cache_clear()
