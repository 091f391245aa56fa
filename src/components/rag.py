"""Retrieval augmented generation over the keyword search index."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Sequence

from src.components.azure_openai import AzureOpenAIService
from src.components.cognitive_search import CognitiveSearchService
from src.models import (
    ChatRequest,
    RagDocumentRequest,
    RagQueryRequest,
    RagQueryResponse,
    SearchDocument,
    SearchQuery,
    SourceReference,
)
from src.utils.exceptions import AzureServiceError, RagPipelineError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

NO_RESULTS_ANSWER = (
    "I couldn't find any relevant information in the knowledge base to answer your question."
)
CONTEXT_HEADER = "Based on the following information from the knowledge base:\n"
ANSWER_INSTRUCTIONS = """Instructions:
- Answer the question based ONLY on the information provided above
- If the answer is not in the provided context, say "I don't have enough information to answer that question"
- Be specific and cite which source(s) you used
- Keep your answer concise and relevant"""

QUERY_SNIPPET_LENGTH = 200
SIMILAR_SNIPPET_LENGTH = 300


class RagService:
    """Search, build a grounded prompt, then ask the chat model."""

    def __init__(
        self,
        *,
        openai_service: AzureOpenAIService,
        search_service: CognitiveSearchService,
        clock: Clock | None = None,
    ) -> None:
        self._openai = openai_service
        self._search = search_service
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def query(self, request: RagQueryRequest) -> RagQueryResponse:
        """Answer a question from the documents retrieved for it."""

        logger.info("Processing RAG query: %s", request.query)
        try:
            results = await self._search.search(
                SearchQuery(search_text=request.query, top=request.max_search_results)
            )

            if not results.results:
                logger.warning("No documents found for query: %s", request.query)
                return RagQueryResponse(
                    answer=NO_RESULTS_ANSWER,
                    search_query=request.query,
                    documents_retrieved=0,
                )

            prompt = build_augmented_prompt(request.query, build_context(results.results))
            chat = await self._openai.get_chat_completion(
                ChatRequest(
                    message=prompt,
                    max_tokens=request.max_tokens,
                    temperature=request.temperature,
                )
            )
        except AzureServiceError as exc:
            logger.error("RAG query failed: %s", exc)
            raise RagPipelineError(f"RAG Query Error: {exc}") from exc

        sources = build_sources(results.results, QUERY_SNIPPET_LENGTH)
        logger.info(
            "RAG query completed. Retrieved %s documents, used %s tokens",
            len(results.results),
            chat.tokens_used,
        )

        return RagQueryResponse(
            answer=chat.response,
            sources=sources if request.include_source_references else [],
            tokens_used=chat.tokens_used,
            search_query=request.query,
            documents_retrieved=len(results.results),
        )

    async def ingest_document(self, document: RagDocumentRequest) -> bool:
        """Embed and index a single knowledge base document."""

        logger.info("Ingesting document: %s", document.id)
        try:
            # The keyword index has no vector field; embedding validates the content round-trips.
            embedding = await self._openai.get_embeddings(document.content)
            logger.debug("Embedding for %s has %s dimensions", document.id, len(embedding))
            indexed = await self._search.index_document(self._to_search_document(document))
        except AzureServiceError as exc:
            logger.error("Failed to ingest document %s: %s", document.id, exc)
            raise RagPipelineError(f"Document Ingestion Error: {exc}") from exc

        logger.info("Document %s ingested successfully", document.id)
        return indexed

    async def ingest_documents_batch(self, documents: Sequence[RagDocumentRequest]) -> int:
        """Index a batch of documents without generating embeddings."""

        logger.info("Batch ingesting %s documents", len(documents))
        try:
            await self._search.index_documents([self._to_search_document(doc) for doc in documents])
        except AzureServiceError as exc:
            logger.error("Batch ingestion failed: %s", exc)
            raise RagPipelineError(f"Batch Ingestion Error: {exc}") from exc

        logger.info("Batch ingestion completed: %s documents", len(documents))
        return len(documents)

    async def search_similar(self, query: str, top_k: int = 5) -> List[SourceReference]:
        logger.info("Searching similar documents for: %s", query)
        try:
            results = await self._search.search(SearchQuery(search_text=query, top=top_k))
        except AzureServiceError as exc:
            logger.error("Similar document search failed: %s", exc)
            raise RagPipelineError(f"Search Error: {exc}") from exc

        return build_sources(results.results, SIMILAR_SNIPPET_LENGTH)

    def _to_search_document(self, document: RagDocumentRequest) -> SearchDocument:
        return SearchDocument(
            id=document.id,
            title=document.title,
            content=document.content,
            category=document.category,
            created_date=self._clock(),
            tags=list(document.metadata.values()) if document.metadata else None,
        )


def build_context(documents: Iterable[SearchDocument]) -> str:
    """Concatenate retrieved documents into numbered source blocks."""

    lines = [CONTEXT_HEADER]
    for index, document in enumerate(documents, start=1):
        lines.append(f"[Source {index}] {document.title or ''}")
        lines.append(document.content or "")
        lines.append("")
    return "\n".join(lines) + "\n"


def build_augmented_prompt(query: str, context: str) -> str:
    return f"{context}\n{ANSWER_INSTRUCTIONS}\n\nQuestion: {query}\n\nAnswer:"


def build_sources(documents: Sequence[SearchDocument], max_length: int) -> List[SourceReference]:
    """Map retrieved documents to citations scored by retrieval rank."""

    return [
        SourceReference(
            document_id=document.id or f"doc-{index}",
            title=document.title or "Untitled",
            content=truncate(document.content or "", max_length),
            relevance_score=round(1.0 - index * 0.1, 10),
        )
        for index, document in enumerate(documents)
    ]


def truncate(content: str, max_length: int) -> str:
    if len(content) <= max_length:
        return content
    return content[:max_length] + "..."
