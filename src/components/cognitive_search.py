"""Cognitive Search component providing a typed interface around the async search client."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from azure.core.credentials import AzureKeyCredential
from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.search.documents.aio import SearchClient

from src.config.settings import CognitiveSearchSettings, get_search_settings
from src.models import FacetResult, SearchDocument, SearchQuery, SearchResults
from src.utils.credentials import get_default_credential
from src.utils.exceptions import SearchConfigurationError, SearchServiceError

logger = logging.getLogger(__name__)

KEY_FIELD = "id"


class CognitiveSearchService:
    """Keyword search, indexing and lookup against a single search index."""

    def __init__(
        self,
        *,
        settings: CognitiveSearchSettings | None = None,
        client: SearchClient | None = None,
    ) -> None:
        self._settings = settings or get_search_settings()
        self._client = client or self._build_client(self._settings)

    async def search(self, query: SearchQuery) -> SearchResults:
        """Run a full-text query and collect documents, total count and facets."""

        search_text = (query.search_text or "").strip() or "*"
        options: Dict[str, Any] = {"include_total_count": True, "top": query.top}
        if query.filter:
            options["filter"] = query.filter
        if query.facets:
            options["facets"] = list(query.facets)

        logger.info("Executing search: %s", search_text)
        try:
            response = await self._client.search(search_text=search_text, **options)
            documents = [SearchDocument.model_validate(item) async for item in response]
            total_count = await response.get_count()
            raw_facets = await response.get_facets()
        except AzureError as exc:
            logger.error("Search operation failed: %s", exc)
            raise SearchServiceError(f"Search Error: {exc.message}") from exc

        return SearchResults(
            total_count=total_count or 0,
            results=documents,
            facets=self._build_facets(raw_facets),
        )

    async def index_document(self, document: SearchDocument) -> bool:
        """Upload (upsert) a single document and report whether it succeeded."""

        logger.info("Indexing document: %s", document.id)
        try:
            results = await self._client.upload_documents(documents=[self._to_payload(document)])
        except AzureError as exc:
            logger.error("Failed to index document: %s", exc)
            raise SearchServiceError(f"Index Error: {exc.message}") from exc

        return bool(results) and results[0].succeeded

    async def index_documents(self, documents: Sequence[SearchDocument]) -> bool:
        """Upload a batch of documents; True only when every document succeeded."""

        if not documents:
            return True

        logger.info("Indexing %s documents", len(documents))
        try:
            results = await self._client.upload_documents(
                documents=[self._to_payload(document) for document in documents]
            )
        except AzureError as exc:
            logger.error("Failed to index documents: %s", exc)
            raise SearchServiceError(f"Batch Index Error: {exc.message}") from exc

        return all(result.succeeded for result in results)

    async def delete_document(self, document_id: str) -> bool:
        """Delete a document by key."""

        logger.info("Deleting document: %s", document_id)
        try:
            results = await self._client.delete_documents(documents=[{KEY_FIELD: document_id}])
        except AzureError as exc:
            logger.error("Failed to delete document: %s", exc)
            raise SearchServiceError(f"Delete Error: {exc.message}") from exc

        return bool(results) and results[0].succeeded

    async def get_document(self, document_id: str) -> Optional[SearchDocument]:
        """Look up a document by key, returning None when it does not exist."""

        try:
            item = await self._client.get_document(key=document_id)
        except ResourceNotFoundError:
            return None
        except AzureError as exc:
            logger.error("Failed to get document: %s", exc)
            raise SearchServiceError(f"Get Document Error: {exc.message}") from exc

        return SearchDocument.model_validate(item)

    async def close(self) -> None:
        await self._client.close()

    @staticmethod
    def _to_payload(document: SearchDocument) -> Dict[str, Any]:
        return document.model_dump(by_alias=True, mode="json", exclude_none=True)

    @staticmethod
    def _build_facets(raw: Optional[Dict[str, List[Dict[str, Any]]]]) -> Optional[Dict[str, List[FacetResult]]]:
        if not raw:
            return None

        return {
            field: [FacetResult(value=bucket.get("value"), count=bucket.get("count") or 0) for bucket in buckets]
            for field, buckets in raw.items()
        }

    @staticmethod
    def _build_client(settings: CognitiveSearchSettings) -> SearchClient:
        if not settings.endpoint:
            raise SearchConfigurationError("AZURE_SEARCH_ENDPOINT is missing.")
        if not settings.index_name:
            raise SearchConfigurationError("AZURE_SEARCH_INDEX_NAME is missing.")

        if settings.use_managed_identity:
            logger.info("Using Managed Identity for Cognitive Search")
            credential = get_default_credential()
        else:
            if not settings.api_key:
                raise SearchConfigurationError("AZURE_SEARCH_API_KEY is missing or empty.")
            logger.info("Using API Key for Cognitive Search")
            credential = AzureKeyCredential(settings.api_key)

        return SearchClient(endpoint=settings.endpoint, index_name=settings.index_name, credential=credential)
