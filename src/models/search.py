"""Pydantic models for the keyword search index."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from .base import ApiModel


class SearchDocument(ApiModel):
    """A searchable document in the keyword index."""

    id: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    created_date: Optional[datetime] = None
    tags: Optional[list[str]] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "1",
                "title": "Introduction to FastAPI",
                "content": "Learn about dependency injection and async routes...",
                "category": "Technology",
                "createdDate": "2024-01-15T00:00:00Z",
                "tags": ["python", "fastapi", "programming"],
            }
        }
    }


class SearchQuery(ApiModel):
    """Keyword search request; ``*`` matches every document."""

    search_text: str = "*"
    top: int = Field(default=10, gt=0, le=1000)
    filter: Optional[str] = None
    facets: Optional[list[str]] = None


class FacetResult(ApiModel):
    value: Any = None
    count: int = 0


class SearchResults(ApiModel):
    """Documents and facet buckets returned by a search."""

    total_count: int = 0
    results: list[SearchDocument] = Field(default_factory=list)
    facets: Optional[dict[str, list[FacetResult]]] = None
