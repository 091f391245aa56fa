"""Domain-level data models."""

from .blob import BlobInfo, CopyBlobRequest, SasUrlResponse, TextUploadRequest
from .chat import (
    ChatRequest,
    ChatResponse,
    EmbeddingRequest,
    EmbeddingResponse,
    FoundryChatRequest,
)
from .rag import (
    RagDocumentRequest,
    RagQueryRequest,
    RagQueryResponse,
    SearchSimilarRequest,
    SourceReference,
)
from .search import FacetResult, SearchDocument, SearchQuery, SearchResults
from .telemetry import CustomEventRequest, CustomMetricRequest
from .vector import (
    SearchMode,
    VectorDocumentRequest,
    VectorSearchDocument,
    VectorSearchRequest,
    VectorSearchResponse,
    VectorSearchResult,
)

__all__ = [
    "BlobInfo",
    "ChatRequest",
    "ChatResponse",
    "CopyBlobRequest",
    "CustomEventRequest",
    "CustomMetricRequest",
    "EmbeddingRequest",
    "EmbeddingResponse",
    "FacetResult",
    "FoundryChatRequest",
    "RagDocumentRequest",
    "RagQueryRequest",
    "RagQueryResponse",
    "SasUrlResponse",
    "SearchDocument",
    "SearchMode",
    "SearchQuery",
    "SearchResults",
    "SearchSimilarRequest",
    "SourceReference",
    "TextUploadRequest",
    "VectorDocumentRequest",
    "VectorSearchDocument",
    "VectorSearchRequest",
    "VectorSearchResponse",
    "VectorSearchResult",
]
