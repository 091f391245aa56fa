"""Retrieval augmented generation routes."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends

from src.api.dependencies import get_rag_service
from src.components.rag import RagService
from src.components.sample_data import rag_knowledge_base
from src.models import RagDocumentRequest, RagQueryRequest, SearchSimilarRequest
from src.utils.exceptions import ServiceValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/Rag", tags=["Rag"])


@router.post("/query")
async def query(
    payload: RagQueryRequest,
    service: RagService = Depends(get_rag_service),
) -> dict:
    """Answer a question from the knowledge base, with citations."""

    if not payload.query:
        raise ServiceValidationError("Query is required")

    response = await service.query(payload)
    return {
        "success": True,
        "data": response,
        "metadata": {
            "query": payload.query,
            "documentsRetrieved": response.documents_retrieved,
            "tokensUsed": response.tokens_used,
            "sourcesReturned": len(response.sources),
        },
    }


@router.post("/ingest")
async def ingest(
    document: RagDocumentRequest,
    service: RagService = Depends(get_rag_service),
) -> dict:
    if not document.id or not document.content:
        raise ServiceValidationError("Document ID and Content are required")

    success = await service.ingest_document(document)
    return {
        "success": success,
        "message": f"Document '{document.id}' ingested successfully",
        "documentId": document.id,
    }


@router.post("/ingest-batch")
async def ingest_batch(
    documents: List[RagDocumentRequest],
    service: RagService = Depends(get_rag_service),
) -> dict:
    if not documents:
        raise ServiceValidationError("At least one document is required")

    count = await service.ingest_documents_batch(documents)
    return {"success": True, "message": f"{count} documents ingested successfully", "count": count}


@router.post("/seed-knowledge-base")
async def seed_knowledge_base(service: RagService = Depends(get_rag_service)) -> dict:
    documents = rag_knowledge_base()
    count = await service.ingest_documents_batch(documents)
    return {
        "success": True,
        "message": f"Knowledge base seeded with {count} documents",
        "count": count,
        "documents": [
            {"id": document.id, "title": document.title, "category": document.category}
            for document in documents
        ],
        "tip": "Try asking: 'What is RAG?' or 'How does Managed Identity work?' or 'Why use Azure OpenAI?'",
    }


@router.post("/search-similar")
async def search_similar(
    payload: SearchSimilarRequest,
    service: RagService = Depends(get_rag_service),
) -> dict:
    """Run only the retrieval step, to inspect what a query would ground on."""

    if not payload.query:
        raise ServiceValidationError("Query is required")

    results = await service.search_similar(payload.query, payload.top_k)
    return {"success": True, "query": payload.query, "resultsCount": len(results), "results": results}


@router.get("/demo")
async def demo() -> dict:
    return {
        "title": "RAG API Demo",
        "description": "Retrieval Augmented Generation - Intelligent Q&A System",
        "features": [
            "Document retrieval with Azure Cognitive Search",
            "Answer generation with Azure OpenAI",
            "Source citations for transparency",
            "Semantic search with embeddings",
            "Batch document ingestion",
        ],
        "quickStart": {
            "step1": "POST /api/Rag/seed-knowledge-base - Create sample documents",
            "step2": "POST /api/Rag/query - Ask questions about the content",
            "step3": "Review answers with source references",
        },
        "sampleQueries": [
            "What is RAG and how does it work?",
            "What are the benefits of Azure OpenAI?",
            "How does Managed Identity improve security?",
            "Why use FastAPI for RAG systems?",
            "How do I use Azure Cognitive Search with RAG?",
        ],
    }
