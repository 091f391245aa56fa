"""Vector and hybrid search routes."""

from __future__ import annotations

import asyncio
import logging
from http import HTTPStatus
from typing import List

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from src.api.dependencies import get_vector_search_service
from src.components.rag import truncate
from src.components.sample_data import vector_sample_documents
from src.components.vector_search import VectorSearchService
from src.models import SearchMode, VectorDocumentRequest, VectorSearchRequest, VectorSearchResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/VectorSearch", tags=["VectorSearch"])

RESULT_SNIPPET_LENGTH = 200
COMPARE_PREVIEW_COUNT = 3


@router.post("/create-index")
async def create_index(service: VectorSearchService = Depends(get_vector_search_service)) -> dict:
    """Create or update the vector index schema; run before adding documents."""

    await service.create_or_update_index()
    return {"message": "Vector search index created/updated successfully"}


@router.post("/vector-search")
async def vector_search(
    payload: VectorSearchRequest,
    service: VectorSearchService = Depends(get_vector_search_service),
) -> dict:
    payload.mode = SearchMode.VECTOR
    response = await service.vector_search(payload)
    return {
        "mode": "vector",
        "query": payload.query,
        "totalResults": response.total_count,
        "results": _summarize(response),
    }


@router.post("/hybrid-search")
async def hybrid_search(
    payload: VectorSearchRequest,
    service: VectorSearchService = Depends(get_vector_search_service),
) -> dict:
    payload.mode = SearchMode.HYBRID
    response = await service.hybrid_search(payload)
    return {
        "mode": "hybrid",
        "query": payload.query,
        "totalResults": response.total_count,
        "explanation": "Combines BM25 keyword matching + vector semantic similarity using RRF",
        "results": _summarize(response),
    }


@router.get("/compare")
async def compare_search_modes(
    query: str = "machine learning",
    top: int = Query(default=5, gt=0, le=100),
    service: VectorSearchService = Depends(get_vector_search_service),
) -> dict:
    """Run vector and hybrid search side by side for the same query."""

    vector_response, hybrid_response = await asyncio.gather(
        service.vector_search(VectorSearchRequest(query=query, top=top, mode=SearchMode.VECTOR)),
        service.hybrid_search(VectorSearchRequest(query=query, top=top, mode=SearchMode.HYBRID)),
    )
    return {
        "query": query,
        "comparison": {
            "vectorSearch": {
                "description": "Semantic similarity only (uses embeddings)",
                "count": vector_response.total_count,
                "results": _preview(vector_response),
            },
            "hybridSearch": {
                "description": "Keyword (BM25) + Semantic (RRF fusion)",
                "count": hybrid_response.total_count,
                "results": _preview(hybrid_response),
            },
        },
        "recommendation": "Hybrid search typically gives best results!",
    }


@router.post("/add-document")
async def add_document(
    document: VectorDocumentRequest,
    service: VectorSearchService = Depends(get_vector_search_service),
) -> dict:
    document_id = await service.add_document(document)
    return {
        "message": "Document added with embeddings",
        "documentId": document_id,
        "embeddingDimensions": service.embedding_dimensions,
        "model": service.embedding_model,
    }


@router.post("/add-documents-batch")
async def add_documents_batch(
    documents: List[VectorDocumentRequest],
    service: VectorSearchService = Depends(get_vector_search_service),
) -> dict:
    document_ids = await service.add_documents_batch(documents)
    return {
        "message": f"Batch added {len(documents)} documents with embeddings",
        "documentIds": document_ids,
        "count": len(documents),
    }


@router.post("/seed-data")
async def seed_data(service: VectorSearchService = Depends(get_vector_search_service)) -> dict:
    documents = vector_sample_documents()
    document_ids = await service.add_documents_batch(documents)
    return {
        "message": "Sample data seeded successfully",
        "documentsCreated": len(documents),
        "documentIds": document_ids,
        "categories": list(dict.fromkeys(document.category for document in documents)),
        "testQuery": "Try searching: 'What is semantic search?' or 'How does RAG work?'",
    }


@router.get("/demo")
async def demo() -> dict:
    return {
        "title": "Vector Search API Demo",
        "description": "Semantic search using Azure Cognitive Search + OpenAI embeddings",
        "setup": {
            "step1": "POST /api/VectorSearch/create-index (create index schema)",
            "step2": "POST /api/VectorSearch/seed-data (add sample documents)",
            "step3": "POST /api/VectorSearch/hybrid-search (search!)",
        },
        "searchModes": {
            "vector": {
                "description": "Pure semantic search using embeddings",
                "pros": "Finds semantically similar content, handles synonyms",
                "cons": "May miss exact keyword matches",
                "endpoint": "POST /api/VectorSearch/vector-search",
            },
            "hybrid": {
                "description": "Combines BM25 keyword + vector semantic search",
                "pros": "Keyword precision plus semantic recall",
                "cons": "Slightly higher latency",
                "endpoint": "POST /api/VectorSearch/hybrid-search",
                "recommended": True,
            },
        },
        "examples": [
            {
                "scenario": "Semantic understanding",
                "query": "What is semantic search?",
                "finds": "Documents about vector search, embeddings (synonyms)",
            },
            {
                "scenario": "Concept matching",
                "query": "How to prevent LLM hallucination?",
                "finds": "Documents about RAG, grounding (related concepts)",
            },
            {
                "scenario": "Technical terms",
                "query": "HNSW algorithm",
                "finds": "Exact technical term + related vector search content",
            },
        ],
    }


# Must stay below the fixed GET paths above.
@router.get("/{document_id}", response_model=None)
async def get_document(
    document_id: str,
    service: VectorSearchService = Depends(get_vector_search_service),
) -> dict | JSONResponse:
    document = await service.get_document(document_id)
    if document is None:
        return JSONResponse(status_code=HTTPStatus.NOT_FOUND.value, content={"error": "Document not found"})

    return {
        "id": document.id,
        "title": document.title,
        "content": document.content,
        "category": document.category,
        "tags": document.tags,
        "createdDate": document.created_date,
        "sourceUrl": document.source_url,
        "vectorDimensions": len(document.content_vector or []),
        "hasEmbedding": document.content_vector is not None,
    }


@router.delete("/{document_id}")
async def delete_document(
    document_id: str,
    service: VectorSearchService = Depends(get_vector_search_service),
) -> dict:
    await service.delete_document(document_id)
    return {"message": "Document deleted", "documentId": document_id}


def _summarize(response: VectorSearchResponse) -> list[dict]:
    return [
        {
            "score": round(result.score, 4),
            "title": result.document.title,
            "content": truncate(result.document.content or "", RESULT_SNIPPET_LENGTH),
            "category": result.document.category,
            "tags": result.document.tags,
        }
        for result in response.results
    ]


def _preview(response: VectorSearchResponse) -> list[dict]:
    return [
        {"score": round(result.score, 4), "title": result.document.title}
        for result in response.results[:COMPARE_PREVIEW_COUNT]
    ]
