"""Keyword search routes over the Cognitive Search index."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends

from src.api.dependencies import get_search_service
from src.components.cognitive_search import CognitiveSearchService
from src.components.sample_data import search_sample_documents
from src.models import SearchDocument, SearchQuery
from src.utils.exceptions import ResourceMissingError, ServiceValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/CognitiveSearch", tags=["CognitiveSearch"])


@router.post("/search")
async def search(
    query: SearchQuery,
    service: CognitiveSearchService = Depends(get_search_service),
) -> dict:
    results = await service.search(query)
    return {"totalCount": results.total_count, "results": results.results, "facets": results.facets}


@router.post("/index")
async def index_document(
    document: SearchDocument,
    service: CognitiveSearchService = Depends(get_search_service),
) -> dict:
    if not document.id:
        raise ServiceValidationError("Document ID is required")

    success = await service.index_document(document)
    return {"success": success, "message": "Document indexed successfully", "documentId": document.id}


@router.post("/index-batch")
async def index_documents(
    documents: List[SearchDocument],
    service: CognitiveSearchService = Depends(get_search_service),
) -> dict:
    if not documents:
        raise ServiceValidationError("At least one document is required")

    success = await service.index_documents(documents)
    return {"success": success, "count": len(documents), "message": "Documents indexed successfully"}


@router.get("/seed-sample-data")
async def seed_sample_data(service: CognitiveSearchService = Depends(get_search_service)) -> dict:
    """Index a handful of demo documents to search against."""

    documents = search_sample_documents()
    success = await service.index_documents(documents)
    return {
        "success": success,
        "count": len(documents),
        "message": "Sample data indexed successfully",
        "tip": "Try searching for 'FastAPI', 'Azure', or filtering by category",
    }


@router.get("/document/{document_id}", response_model=SearchDocument)
async def get_document(
    document_id: str,
    service: CognitiveSearchService = Depends(get_search_service),
) -> SearchDocument:
    document = await service.get_document(document_id)
    if document is None:
        raise ResourceMissingError(f"Document with ID '{document_id}' not found")
    return document


@router.delete("/document/{document_id}")
async def delete_document(
    document_id: str,
    service: CognitiveSearchService = Depends(get_search_service),
) -> dict:
    if not await service.delete_document(document_id):
        raise ResourceMissingError(f"Document with ID '{document_id}' not found")

    logger.info("Deleted search document %s", document_id)
    return {"success": True, "message": f"Document '{document_id}' deleted successfully"}
