"""Seed documents for the search, RAG and vector search demos."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List

from src.models import RagDocumentRequest, SearchDocument, VectorDocumentRequest


def search_sample_documents(now: datetime | None = None) -> List[SearchDocument]:
    """Four keyword-index documents dated over the last ten days."""

    now = now or datetime.now(timezone.utc)
    return [
        SearchDocument(
            id="1",
            title="Getting Started with FastAPI",
            content="FastAPI is a modern Python web framework built on Starlette and pydantic, featuring async routes and automatic OpenAPI docs.",
            category="Technology",
            created_date=now - timedelta(days=10),
            tags=["python", "fastapi", "programming"],
        ),
        SearchDocument(
            id="2",
            title="Azure OpenAI Best Practices",
            content="Learn how to effectively use Azure OpenAI service for building intelligent applications.",
            category="AI",
            created_date=now - timedelta(days=5),
            tags=["azure", "openai", "ai"],
        ),
        SearchDocument(
            id="3",
            title="Cognitive Search for Developers",
            content="Azure Cognitive Search provides AI-powered search capabilities including semantic search and vector search.",
            category="Azure",
            created_date=now - timedelta(days=3),
            tags=["azure", "search", "cognitive-services"],
        ),
        SearchDocument(
            id="4",
            title="Managed Identity in Azure",
            content="Use Managed Identity to eliminate the need for credentials in your code when accessing Azure services.",
            category="Security",
            created_date=now - timedelta(days=1),
            tags=["azure", "security", "identity"],
        ),
    ]


def rag_knowledge_base() -> List[RagDocumentRequest]:
    return [
        RagDocumentRequest(
            id="rag-doc-1",
            title="Azure OpenAI Service Overview",
            content="""Azure OpenAI Service provides REST API access to OpenAI's powerful language models including GPT-4, GPT-3.5-Turbo, and Embeddings models. The service combines the robust capabilities of OpenAI models with the security, compliance, and regional availability of Azure. Key features include:

1. Enterprise-grade security with managed identity support
2. Private networking with Azure Virtual Networks
3. Content filtering and responsible AI features
4. Global availability across multiple Azure regions
5. Pay-as-you-go pricing based on token usage

Azure OpenAI is ideal for building intelligent applications including chatbots, content generation, code completion, semantic search, and data analysis. The service includes comprehensive monitoring and logging through Azure Monitor and Application Insights.""",
            category="Azure AI",
            metadata={"Source": "Azure Documentation", "LastUpdated": "2024-01-15"},
        ),
        RagDocumentRequest(
            id="rag-doc-2",
            title="What is RAG (Retrieval Augmented Generation)?",
            content="""Retrieval Augmented Generation (RAG) is a technique that enhances Large Language Models (LLMs) by combining them with information retrieval systems. Instead of relying solely on the model's training data, RAG retrieves relevant documents from a knowledge base and uses them as context for generation.

The RAG process works in three steps:
1. Retrieval: Search a document store for relevant information
2. Augmentation: Inject retrieved documents into the LLM prompt
3. Generation: LLM generates an answer grounded in the provided context

Benefits of RAG:
- Reduces hallucination by grounding answers in facts
- Enables domain expertise without fine-tuning
- Always up-to-date (just update document store)
- Transparent with source citations
- More cost-effective than model training

RAG is particularly useful for enterprise Q&A systems, customer support, documentation search, and knowledge management applications.""",
            category="AI Concepts",
            metadata={"Source": "AI Research", "LastUpdated": "2024-02-01"},
        ),
        RagDocumentRequest(
            id="rag-doc-3",
            title="Azure Cognitive Search for RAG",
            content="""Azure Cognitive Search is an ideal retrieval system for RAG applications. It provides:

1. Full-text search with BM25 ranking algorithm for keyword matching
2. Vector search for semantic similarity using embeddings
3. Hybrid search combining both approaches
4. Faceting and filtering for refined searches
5. Scalable indexing for millions of documents

For RAG implementations, Cognitive Search enables:
- Fast document retrieval (sub-second queries)
- Semantic search using OpenAI embeddings
- Re-ranking capabilities for improved relevance
- Distributed indexing across partitions
- Integration with Azure OpenAI for end-to-end RAG

Best practices include chunking large documents into 500-1000 token segments, generating embeddings for semantic search, using metadata for filtering, and implementing caching for frequent queries.""",
            category="Azure Search",
            metadata={"Source": "Azure Documentation", "LastUpdated": "2024-01-20"},
        ),
        RagDocumentRequest(
            id="rag-doc-4",
            title="Managed Identity for Secure RAG",
            content="""Managed Identity is crucial for building secure RAG systems in Azure. It eliminates the need for storing credentials in your code or configuration.

For RAG applications, Managed Identity provides:
- Secure authentication to Azure OpenAI (no API keys)
- Secure access to Cognitive Search (no admin keys)
- Secure blob storage access for document ingestion
- Automated credential rotation
- Azure RBAC for fine-grained permissions

Implementation steps:
1. Enable System-Assigned Managed Identity on your App Service
2. Assign 'Cognitive Services OpenAI User' role for Azure OpenAI access
3. Assign 'Search Index Data Contributor' role for Cognitive Search
4. Assign 'Storage Blob Data Contributor' for blob storage
5. Use DefaultAzureCredential in your code

This approach follows zero-trust security principles and is recommended for all production RAG deployments.""",
            category="Security",
            metadata={"Source": "Security Best Practices", "LastUpdated": "2024-02-05"},
        ),
        RagDocumentRequest(
            id="rag-doc-5",
            title="Python and FastAPI for Building RAG APIs",
            content="""FastAPI is an excellent choice for building RAG (Retrieval Augmented Generation) APIs in Python. It offers:

Performance benefits:
- Async request handling on top of Starlette and uvicorn
- Fast request validation with pydantic
- Streaming responses for token-by-token output

Features for RAG systems:
- Async Azure SDK clients for OpenAI, Cognitive Search and Blob Storage
- Dependency injection through Depends
- Standard library logging integration
- Application Insights through OpenTelemetry
- Automatic OpenAPI documentation

For RAG APIs, use:
- One long-lived Azure SDK client per process
- Module-level loggers for structured logging
- pydantic-settings for configuration
- async/await throughout for non-blocking operations
- Exception handlers that map errors to HTTP responses

The Azure SDK for Python provides first-class async support for OpenAI, Cognitive Search, and Blob Storage, making it ideal for RAG implementations.""",
            category="Python Development",
            metadata={"Source": "Python Docs", "LastUpdated": "2024-01-10"},
        ),
    ]


def vector_sample_documents() -> List[VectorDocumentRequest]:
    return [
        VectorDocumentRequest(
            title="Introduction to Vector Search",
            content="Vector search, also known as semantic search, uses machine learning embeddings to find similar content. Unlike traditional keyword search, vector search understands context and meaning. It's particularly useful for finding documents that are conceptually similar even if they use different terminology.",
            category="Search",
            tags=["vector-search", "embeddings", "AI"],
        ),
        VectorDocumentRequest(
            title="Azure Cognitive Search Overview",
            content="Azure Cognitive Search is a cloud search service that provides infrastructure, APIs, and tools for building rich search experiences. It supports full-text search, vector search, and hybrid search patterns. The service integrates with Azure OpenAI for semantic ranking capabilities.",
            category="Azure",
            tags=["azure", "search", "cognitive-search"],
        ),
        VectorDocumentRequest(
            title="Understanding Embeddings",
            content="Embeddings are numerical representations of text in high-dimensional space. Words or phrases with similar meanings have similar embeddings. Models like text-embedding-ada-002 from OpenAI convert text into 1536-dimensional vectors that capture semantic relationships.",
            category="AI",
            tags=["embeddings", "NLP", "machine-learning"],
        ),
        VectorDocumentRequest(
            title="RAG Architecture Patterns",
            content="Retrieval Augmented Generation (RAG) combines search with language models. The pattern involves three steps: retrieve relevant documents using vector search, augment the prompt with retrieved context, and generate responses grounded in facts. This prevents hallucination.",
            category="Architecture",
            tags=["RAG", "LLM", "architecture"],
        ),
        VectorDocumentRequest(
            title="Hybrid Search Explained",
            content="Hybrid search combines traditional BM25 keyword search with vector semantic search. BM25 catches exact terms and proper nouns while vectors handle synonyms and paraphrases. Azure Cognitive Search uses Reciprocal Rank Fusion (RRF) to merge results intelligently.",
            category="Search",
            tags=["hybrid-search", "BM25", "RRF"],
        ),
        VectorDocumentRequest(
            title="Async Python Performance",
            content="Python's asyncio lets a single process serve many concurrent requests while waiting on network I/O. ASGI servers such as uvicorn run FastAPI applications on an event loop, and async SDK clients keep connections pooled between calls.",
            category="Python",
            tags=["python", "asyncio", "performance"],
        ),
        VectorDocumentRequest(
            title="HNSW Algorithm",
            content="Hierarchical Navigable Small World (HNSW) is an approximate nearest neighbor algorithm used for fast vector search. It builds a multi-layer graph structure that enables logarithmic search complexity. Parameters like M and efSearch control the accuracy-speed tradeoff.",
            category="Algorithms",
            tags=["HNSW", "ANN", "algorithms"],
        ),
        VectorDocumentRequest(
            title="Cosine Similarity",
            content="Cosine similarity measures the angle between two vectors in multi-dimensional space. It ranges from -1 to 1, where 1 means identical direction (very similar), 0 means orthogonal (unrelated), and -1 means opposite. It's ideal for normalized embeddings like those from OpenAI.",
            category="Mathematics",
            tags=["similarity", "vectors", "mathematics"],
        ),
    ]
