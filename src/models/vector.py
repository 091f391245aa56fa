"""Pydantic models for vector and hybrid search."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from .base import ApiModel


class SearchMode(str, Enum):
    """How a query is matched against the vector index."""

    VECTOR = "vector"
    TEXT = "text"
    HYBRID = "hybrid"


class VectorSearchDocument(ApiModel):
    """A document stored in the vector index together with its embedding."""

    id: str = ""
    title: str = ""
    content: str = ""
    category: str = ""
    created_date: Optional[datetime] = None
    tags: Optional[list[str]] = None
    content_vector: Optional[list[float]] = None
    source_url: Optional[str] = None
    token_count: Optional[int] = None

    @field_validator("title", "content", "category", mode="before")
    @classmethod
    def _null_to_empty(cls, value):
        # The index returns null for fields that were never set.
        return "" if value is None else value


class VectorSearchRequest(ApiModel):
    query: str = ""
    top: int = Field(default=5, gt=0, le=100)
    filter: Optional[str] = None
    mode: SearchMode = SearchMode.HYBRID


class VectorSearchResult(ApiModel):
    document: VectorSearchDocument
    score: float = 0.0
    vector_score: Optional[float] = None
    text_score: Optional[float] = None


class VectorSearchResponse(ApiModel):
    results: list[VectorSearchResult] = Field(default_factory=list)
    total_count: int = 0
    search_mode: SearchMode = SearchMode.HYBRID


class VectorDocumentRequest(ApiModel):
    """Document to embed and add to the vector index."""

    title: str = ""
    content: str = ""
    category: str = ""
    tags: Optional[list[str]] = None
    source_url: Optional[str] = None
