"""Vector and hybrid search over an index holding content embeddings."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from azure.core.credentials import AzureKeyCredential
from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.search.documents.aio import SearchClient
from azure.search.documents.indexes.aio import SearchIndexClient
from azure.search.documents.indexes.models import (
    HnswAlgorithmConfiguration,
    HnswParameters,
    SearchableField,
    SearchField,
    SearchFieldDataType,
    SearchIndex,
    SimpleField,
    VectorSearch,
    VectorSearchAlgorithmMetric,
    VectorSearchProfile,
)
from azure.search.documents.models import QueryType, VectorizedQuery

from src.components.azure_openai import AzureOpenAIService
from src.config.settings import CognitiveSearchSettings, get_search_settings
from src.models import (
    SearchMode,
    VectorDocumentRequest,
    VectorSearchDocument,
    VectorSearchRequest,
    VectorSearchResponse,
    VectorSearchResult,
)
from src.utils.credentials import get_default_credential
from src.utils.exceptions import SearchConfigurationError, SearchServiceError

logger = logging.getLogger(__name__)

VECTOR_FIELD = "contentVector"
HNSW_CONFIG_NAME = "hnsw-config"
VECTOR_PROFILE_NAME = "my-vector-profile"
SELECT_FIELDS = ["id", "title", "content", "category", "createdDate", "tags", "sourceUrl"]
SCORE_KEY = "@search.score"


class VectorSearchService:
    """Embed queries with Azure OpenAI and run them against the vector index."""

    def __init__(
        self,
        *,
        openai_service: AzureOpenAIService,
        settings: CognitiveSearchSettings | None = None,
        client: SearchClient | None = None,
        index_client: SearchIndexClient | None = None,
    ) -> None:
        self._settings = settings or get_search_settings()
        self._openai = openai_service
        self._index_name = self._settings.vector_index_name

        if client is None or index_client is None:
            built_client, built_index_client = self._build_clients(self._settings)
            client = client or built_client
            index_client = index_client or built_index_client

        self._client = client
        self._index_client = index_client

    @property
    def index_name(self) -> str:
        return self._index_name

    @property
    def embedding_dimensions(self) -> int:
        return self._settings.vector_dimensions

    @property
    def embedding_model(self) -> str:
        return self._openai.embedding_deployment

    async def create_or_update_index(self) -> None:
        """Create the vector index schema, or update it in place."""

        logger.info("Creating/Updating vector search index: %s", self._index_name)
        vector_search = VectorSearch(
            algorithms=[
                HnswAlgorithmConfiguration(
                    name=HNSW_CONFIG_NAME,
                    parameters=HnswParameters(
                        m=4,
                        ef_construction=400,
                        ef_search=500,
                        metric=VectorSearchAlgorithmMetric.COSINE,
                    ),
                )
            ],
            profiles=[
                VectorSearchProfile(name=VECTOR_PROFILE_NAME, algorithm_configuration_name=HNSW_CONFIG_NAME)
            ],
        )
        index = SearchIndex(
            name=self._index_name,
            fields=[
                SimpleField(name="id", type=SearchFieldDataType.String, key=True, filterable=True),
                SearchableField(name="title", filterable=True, sortable=True),
                SearchableField(name="content"),
                SearchableField(name="category", filterable=True, facetable=True),
                SimpleField(
                    name="createdDate", type=SearchFieldDataType.DateTimeOffset, filterable=True, sortable=True
                ),
                SearchableField(name="tags", collection=True, filterable=True, facetable=True),
                SimpleField(name="sourceUrl", type=SearchFieldDataType.String),
                SimpleField(name="tokenCount", type=SearchFieldDataType.Int32),
                SearchField(
                    name=VECTOR_FIELD,
                    type=SearchFieldDataType.Collection(SearchFieldDataType.Single),
                    searchable=True,
                    vector_search_dimensions=self._settings.vector_dimensions,
                    vector_search_profile_name=VECTOR_PROFILE_NAME,
                ),
            ],
            vector_search=vector_search,
        )

        try:
            await self._index_client.create_or_update_index(index)
        except AzureError as exc:
            logger.error("Failed to create/update vector search index: %s", exc)
            raise SearchServiceError(f"Create Index Error: {exc.message}") from exc

        logger.info("Vector search index created/updated successfully")

    async def vector_search(self, request: VectorSearchRequest) -> VectorSearchResponse:
        """Pure similarity search: the query embedding is the only criterion."""

        embedding = await self._openai.get_embeddings(request.query)
        vector_query = VectorizedQuery(vector=embedding, k_nearest_neighbors=request.top, fields=VECTOR_FIELD)

        logger.info("Executing vector search: %s", request.query)
        results = await self._run_search(None, request, vector_query)
        for result in results:
            result.vector_score = result.score

        return VectorSearchResponse(results=results, total_count=len(results), search_mode=SearchMode.VECTOR)

    async def hybrid_search(self, request: VectorSearchRequest) -> VectorSearchResponse:
        """Keyword and vector search in one request, fused by the service."""

        embedding = await self._openai.get_embeddings(request.query)
        # Twice as many vector candidates as requested results feed the rank fusion.
        vector_query = VectorizedQuery(
            vector=embedding, k_nearest_neighbors=request.top * 2, fields=VECTOR_FIELD
        )

        logger.info("Executing hybrid search: %s", request.query)
        results = await self._run_search(
            request.query,
            request,
            vector_query,
            search_mode="all",
            query_type=QueryType.SIMPLE,
        )

        return VectorSearchResponse(results=results, total_count=len(results), search_mode=SearchMode.HYBRID)

    async def add_document(self, document: VectorDocumentRequest) -> str:
        """Embed and upload one document, returning its generated id."""

        vector_document = await self._to_vector_document(document)
        await self._upload([vector_document])
        logger.info("Document indexed with embeddings: %s", vector_document.id)
        return vector_document.id

    async def add_documents_batch(self, documents: Sequence[VectorDocumentRequest]) -> List[str]:
        """Embed every document, then upload them in a single batch."""

        vector_documents = [await self._to_vector_document(document) for document in documents]
        if vector_documents:
            await self._upload(vector_documents)
        logger.info("Batch indexed %s documents with embeddings", len(vector_documents))
        return [document.id for document in vector_documents]

    async def get_document(self, document_id: str) -> Optional[VectorSearchDocument]:
        try:
            item = await self._client.get_document(key=document_id)
        except ResourceNotFoundError:
            return None
        except AzureError as exc:
            logger.error("Failed to get document: %s", exc)
            raise SearchServiceError(f"Get Document Error: {exc.message}") from exc

        return VectorSearchDocument.model_validate(item)

    async def delete_document(self, document_id: str) -> None:
        try:
            await self._client.delete_documents(documents=[{"id": document_id}])
        except AzureError as exc:
            logger.error("Failed to delete document: %s", exc)
            raise SearchServiceError(f"Delete Error: {exc.message}") from exc

        logger.info("Document deleted: %s", document_id)

    async def close(self) -> None:
        await self._client.close()
        await self._index_client.close()

    async def _run_search(
        self,
        search_text: Optional[str],
        request: VectorSearchRequest,
        vector_query: VectorizedQuery,
        **options: Any,
    ) -> List[VectorSearchResult]:
        if request.filter:
            options["filter"] = request.filter

        try:
            response = await self._client.search(
                search_text=search_text,
                vector_queries=[vector_query],
                top=request.top,
                select=SELECT_FIELDS,
                **options,
            )
            results = [self._build_result(item) async for item in response]
        except AzureError as exc:
            logger.error("Vector search failed: %s", exc)
            raise SearchServiceError(f"Vector Search Error: {exc.message}") from exc

        return results

    async def _to_vector_document(self, document: VectorDocumentRequest) -> VectorSearchDocument:
        embedding = await self._openai.get_embeddings(document.content)
        return VectorSearchDocument(
            id=str(uuid.uuid4()),
            title=document.title,
            content=document.content,
            category=document.category,
            created_date=datetime.now(timezone.utc),
            tags=document.tags,
            source_url=document.source_url,
            content_vector=embedding,
            token_count=len(document.content.split()),
        )

    async def _upload(self, documents: Sequence[VectorSearchDocument]) -> None:
        payload = [document.model_dump(by_alias=True, mode="json", exclude_none=True) for document in documents]
        try:
            await self._client.upload_documents(documents=payload)
        except AzureError as exc:
            logger.error("Failed to add documents: %s", exc)
            raise SearchServiceError(f"Index Error: {exc.message}") from exc

    @staticmethod
    def _build_result(item: Dict[str, Any]) -> VectorSearchResult:
        score = item.get(SCORE_KEY)
        document = VectorSearchDocument.model_validate(
            {key: value for key, value in item.items() if not key.startswith("@search.")}
        )
        return VectorSearchResult(document=document, score=score or 0.0)

    @staticmethod
    def _build_clients(settings: CognitiveSearchSettings) -> tuple[SearchClient, SearchIndexClient]:
        endpoint = settings.resolved_vector_endpoint()
        if not endpoint:
            raise SearchConfigurationError("Search endpoint not configured.")

        if settings.use_managed_identity:
            logger.info("Using Managed Identity for Vector Search")
            credential: Any = get_default_credential()
        else:
            if not settings.api_key:
                raise SearchConfigurationError("AZURE_SEARCH_API_KEY is missing or empty.")
            logger.info("Using API Key for Vector Search")
            credential = AzureKeyCredential(settings.api_key)

        return (
            SearchClient(endpoint=endpoint, index_name=settings.vector_index_name, credential=credential),
            SearchIndexClient(endpoint=endpoint, credential=credential),
        )
