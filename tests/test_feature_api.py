"""API layer tests for the telemetry, RAG and vector search routes."""

from __future__ import annotations

import logging
from http import HTTPStatus
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from src.api import dependencies
from src.api.app import app
from src.models import (
    RagQueryResponse,
    SearchMode,
    SourceReference,
    VectorSearchDocument,
    VectorSearchResponse,
    VectorSearchResult,
)
from src.utils.exceptions import RagPipelineError


class StubRagService:
    def __init__(self) -> None:
        self.queries = []
        self.ingested = []
        self.raise_error: Exception | None = None

    async def query(self, request):
        self.queries.append(request)
        if self.raise_error:
            raise self.raise_error
        return RagQueryResponse(
            answer="RAG grounds answers in retrieved documents [Source 1].",
            sources=[
                SourceReference(document_id="rag-001", title="What is RAG?", content="RAG is...", relevance_score=1.0)
            ],
            tokens_used=321,
            search_query=request.query,
            documents_retrieved=1,
        )

    async def ingest_document(self, document):
        self.ingested.append(document)
        return True

    async def ingest_documents_batch(self, documents):
        self.ingested.extend(documents)
        return len(documents)

    async def search_similar(self, query, top_k):
        return [
            SourceReference(document_id=str(i), title=f"Doc {i}", content="...", relevance_score=1.0 - i * 0.1)
            for i in range(top_k)
        ]


class StubVectorSearchService:
    embedding_dimensions = 3072
    embedding_model = "text-embedding-3-large"

    def __init__(self) -> None:
        self.requests = []
        self.deleted = []
        self.documents = {
            "v-1": VectorSearchDocument(id="v-1", title="HNSW", content="graph index", content_vector=[0.1, 0.2])
        }

    async def vector_search(self, request):
        self.requests.append(request)
        return self._response(SearchMode.VECTOR, ["Embeddings", "Cosine", "HNSW", "RAG"])

    async def hybrid_search(self, request):
        self.requests.append(request)
        return self._response(SearchMode.HYBRID, ["HNSW", "BM25"])

    async def get_document(self, document_id):
        return self.documents.get(document_id)

    async def delete_document(self, document_id):
        self.deleted.append(document_id)
        self.documents.pop(document_id, None)

    async def add_document(self, document):
        return "generated-id"

    async def add_documents_batch(self, documents):
        return [f"id-{i}" for i, _ in enumerate(documents)]

    @staticmethod
    def _response(mode, titles):
        results = [
            VectorSearchResult(document=VectorSearchDocument(id=title, title=title, content="x" * 250), score=0.123456)
            for title in titles
        ]
        return VectorSearchResponse(results=results, total_count=len(results), search_mode=mode)


@pytest.fixture(autouse=True)
def stubs():
    rag = StubRagService()
    vector = StubVectorSearchService()
    telemetry = MagicMock()
    app.dependency_overrides[dependencies.get_rag_service] = lambda: rag
    app.dependency_overrides[dependencies.get_vector_search_service] = lambda: vector
    app.dependency_overrides[dependencies.get_telemetry] = lambda: telemetry
    yield rag, vector, telemetry
    app.dependency_overrides.clear()


def _client() -> TestClient:
    return TestClient(app)


def test_custom_event_is_tracked(stubs):
    *_, telemetry = stubs

    response = _client().post(
        "/api/Telemetry/custom-event",
        json={"eventName": "UserLogin", "properties": {"userId": "123"}},
    )

    assert response.status_code == HTTPStatus.OK
    assert response.json()["message"] == "Event 'UserLogin' tracked successfully"
    telemetry.track_event.assert_called_once_with("UserLogin", properties={"userId": "123"})


def test_custom_event_requires_name():
    response = _client().post("/api/Telemetry/custom-event", json={"eventName": ""})

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.json()["detail"] == "EventName is required"


def test_custom_metric_records_value(stubs):
    *_, telemetry = stubs

    response = _client().post("/api/Telemetry/custom-metric", json={"metricName": "QueueDepth", "value": 7})

    assert response.status_code == HTTPStatus.OK
    telemetry.track_metric.assert_called_once_with("QueueDepth", 7.0, properties=None)


def test_performance_test_wraps_work_in_operation(stubs):
    *_, telemetry = stubs

    response = _client().get("/api/Telemetry/performance-test", params={"delayMs": 0})

    body = response.json()
    assert response.status_code == HTTPStatus.OK
    assert body["simulatedDelay"] == "0ms"
    assert body["duration"].endswith("ms")
    telemetry.start_operation.assert_called_once_with("PerformanceTest", properties={"DelayMs": "0"})
    assert telemetry.track_dependency.call_args.args[:3] == ("Database", "SQL Azure", "SELECT * FROM Users")


def test_performance_test_rejects_negative_delay():
    response = _client().get("/api/Telemetry/performance-test", params={"delayMs": -1})

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_demo_emits_each_telemetry_kind(stubs):
    *_, telemetry = stubs

    response = _client().get("/api/Telemetry/demo")

    assert response.status_code == HTTPStatus.OK
    assert len(response.json()["telemetryTypes"]) == 5
    telemetry.track_event.assert_called_once()
    telemetry.track_metric.assert_called_once_with(
        "DemoMetric", 42.5, properties={"MetricType": "Demo", "Unit": "Count"}
    )
    assert telemetry.track_trace.call_args.args[1] == logging.INFO
    assert telemetry.track_dependency.call_args.args[-1] is True


def test_handled_error_is_tracked_and_returns_200(stubs):
    *_, telemetry = stubs

    response = _client().get("/api/Telemetry/error-test")

    assert response.status_code == HTTPStatus.OK
    tracked = telemetry.track_exception.call_args.args[0]
    assert isinstance(tracked, ZeroDivisionError)


def test_unhandled_error_is_tracked_and_returns_500(stubs):
    *_, telemetry = stubs

    response = _client().get("/api/Telemetry/error-test", params={"errorType": "unhandled"})

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.json() == {"error": "This is a simulated unhandled exception"}
    telemetry.track_exception.assert_called_once()


def test_rag_query_returns_answer_with_metadata(stubs):
    rag, *_ = stubs

    response = _client().post("/api/Rag/query", json={"query": "What is RAG?", "maxSearchResults": 2})

    body = response.json()
    assert response.status_code == HTTPStatus.OK
    assert body["success"] is True
    assert body["data"]["answer"].startswith("RAG grounds answers")
    assert body["data"]["sources"][0]["documentId"] == "rag-001"
    assert body["metadata"] == {
        "query": "What is RAG?",
        "documentsRetrieved": 1,
        "tokensUsed": 321,
        "sourcesReturned": 1,
    }
    assert rag.queries[0].max_search_results == 2


def test_rag_query_requires_query():
    response = _client().post("/api/Rag/query", json={"query": ""})

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.json()["detail"] == "Query is required"


def test_rag_pipeline_failure_maps_to_500(stubs):
    rag, *_ = stubs
    rag.raise_error = RagPipelineError("RAG Query Error: search unavailable")

    response = _client().post("/api/Rag/query", json={"query": "What is RAG?"})

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.json() == {"error": "RAG Query Error: search unavailable"}


def test_rag_ingest_requires_id_and_content():
    response = _client().post("/api/Rag/ingest", json={"id": "doc-1"})

    assert response.status_code == HTTPStatus.BAD_REQUEST


def test_seed_knowledge_base_lists_documents(stubs):
    rag, *_ = stubs

    response = _client().post("/api/Rag/seed-knowledge-base")

    body = response.json()
    assert response.status_code == HTTPStatus.OK
    assert body["count"] == 5
    assert len(body["documents"]) == 5
    assert len(rag.ingested) == 5


def test_search_similar_honours_top_k():
    response = _client().post("/api/Rag/search-similar", json={"query": "managed identity", "topK": 2})

    body = response.json()
    assert response.status_code == HTTPStatus.OK
    assert body["resultsCount"] == 2


def test_vector_search_summarizes_results(stubs):
    _, vector, _ = stubs

    response = _client().post("/api/VectorSearch/vector-search", json={"query": "semantic search", "top": 4})

    body = response.json()
    assert response.status_code == HTTPStatus.OK
    assert body["mode"] == "vector"
    assert body["totalResults"] == 4
    assert body["results"][0]["score"] == 0.1235
    assert body["results"][0]["content"] == "x" * 200 + "..."
    assert vector.requests[0].mode == SearchMode.VECTOR


def test_compare_previews_top_three_of_each_mode():
    response = _client().get("/api/VectorSearch/compare", params={"query": "HNSW", "top": 4})

    comparison = response.json()["comparison"]
    assert response.status_code == HTTPStatus.OK
    assert comparison["vectorSearch"]["count"] == 4
    assert [r["title"] for r in comparison["vectorSearch"]["results"]] == ["Embeddings", "Cosine", "HNSW"]
    assert comparison["hybridSearch"]["count"] == 2
    assert len(comparison["hybridSearch"]["results"]) == 2


def test_vector_document_lookup(stubs):
    client = _client()

    found = client.get("/api/VectorSearch/v-1")
    missing = client.get("/api/VectorSearch/nope")

    assert found.status_code == HTTPStatus.OK
    assert found.json()["vectorDimensions"] == 2
    assert found.json()["hasEmbedding"] is True
    assert missing.status_code == HTTPStatus.NOT_FOUND
    assert missing.json() == {"error": "Document not found"}


def test_vector_demo_is_not_shadowed_by_document_route():
    response = _client().get("/api/VectorSearch/demo")

    assert response.status_code == HTTPStatus.OK
    assert response.json()["title"] == "Vector Search API Demo"


def test_vector_seed_data_reports_categories():
    response = _client().post("/api/VectorSearch/seed-data")

    body = response.json()
    assert response.status_code == HTTPStatus.OK
    assert body["documentsCreated"] == 8
    assert len(body["documentIds"]) == 8
    assert len(body["categories"]) == len(set(body["categories"]))


def test_hybrid_search_rounds_scores_and_truncates_content(stubs):
    _, vector, _ = stubs

    response = _client().post("/api/VectorSearch/hybrid-search", json={"query": "HNSW algorithm", "top": 2})

    body = response.json()
    assert response.status_code == HTTPStatus.OK
    assert body["mode"] == "hybrid"
    assert body["totalResults"] == 2
    assert "RRF" in body["explanation"]
    assert [r["score"] for r in body["results"]] == [0.1235, 0.1235]
    assert body["results"][0]["content"] == "x" * 200 + "..."
    assert vector.requests[0].mode == SearchMode.HYBRID


def test_vector_document_with_null_fields_is_returned(stubs):
    _, vector, _ = stubs
    vector.documents["v-2"] = VectorSearchDocument.model_validate(
        {"id": "v-2", "title": None, "content": None, "category": None}
    )

    response = _client().get("/api/VectorSearch/v-2")

    body = response.json()
    assert response.status_code == HTTPStatus.OK
    assert body["title"] == ""
    assert body["category"] == ""
    assert body["hasEmbedding"] is False


def test_add_document_reports_configured_embedding():
    response = _client().post(
        "/api/VectorSearch/add-document",
        json={"title": "Embeddings", "content": "Embeddings map text into vectors", "category": "AI"},
    )

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {
        "message": "Document added with embeddings",
        "documentId": "generated-id",
        "embeddingDimensions": 3072,
        "model": "text-embedding-3-large",
    }


def test_add_documents_batch_returns_ids():
    response = _client().post(
        "/api/VectorSearch/add-documents-batch",
        json=[{"title": "One", "content": "first"}, {"title": "Two", "content": "second"}],
    )

    body = response.json()
    assert response.status_code == HTTPStatus.OK
    assert body["count"] == 2
    assert body["documentIds"] == ["id-0", "id-1"]


def test_delete_vector_document(stubs):
    _, vector, _ = stubs

    response = _client().delete("/api/VectorSearch/v-1")

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {"message": "Document deleted", "documentId": "v-1"}
    assert vector.deleted == ["v-1"]
    assert "v-1" not in vector.documents
