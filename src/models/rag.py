"""Pydantic models describing the RAG API contracts."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from .base import ApiModel


class RagQueryRequest(ApiModel):
    """Question answered from the knowledge base."""

    query: str = ""
    max_search_results: int = Field(default=3, gt=0, le=50)
    max_tokens: int = Field(default=1000, gt=0, le=32768)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    include_source_references: bool = True

    model_config = {
        "json_schema_extra": {
            "example": {
                "query": "What is RAG and how does it work?",
                "maxSearchResults": 3,
                "maxTokens": 1000,
                "temperature": 0.7,
                "includeSourceReferences": True,
            }
        }
    }


class SourceReference(ApiModel):
    """Citation for a document used to ground an answer."""

    document_id: str
    title: str
    content: str
    relevance_score: float


class RagQueryResponse(ApiModel):
    """Generated answer with the documents it was grounded on."""

    answer: str = ""
    sources: list[SourceReference] = Field(default_factory=list)
    tokens_used: int = 0
    search_query: str = ""
    documents_retrieved: int = 0


class RagDocumentRequest(ApiModel):
    """Document ingested into the knowledge base."""

    id: str = ""
    title: str = ""
    content: str = ""
    category: str = ""
    metadata: Optional[dict[str, str]] = None


class SearchSimilarRequest(ApiModel):
    query: str = ""
    top_k: int = Field(default=5, gt=0, le=50)
