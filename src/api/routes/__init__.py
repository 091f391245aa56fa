"""HTTP routers, one per Azure service."""

from . import azure_openai, blob_storage, cognitive_search, foundry, rag, telemetry, vector_search

routers = [
    azure_openai.router,
    cognitive_search.router,
    blob_storage.router,
    telemetry.router,
    rag.router,
    vector_search.router,
    foundry.router,
]

__all__ = ["routers"]
