"""Azure OpenAI chat, streaming chat and embedding routes."""

from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from src.api.dependencies import get_openai_service
from src.components.azure_openai import AzureOpenAIService
from src.models import ChatRequest, ChatResponse, EmbeddingRequest, EmbeddingResponse
from src.utils.exceptions import AzureServiceError, ServiceValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/AzureOpenAI", tags=["AzureOpenAI"])

TEST_PROMPT = "Say 'Hello, I am Azure OpenAI!' in a friendly way."
EMBEDDING_PREVIEW_LENGTH = 10


@router.get("/test")
async def test_connection(service: AzureOpenAIService = Depends(get_openai_service)) -> dict:
    """Send a fixed prompt to verify the deployment answers."""

    response = await service.get_chat_completion(ChatRequest(message=TEST_PROMPT, max_tokens=100))
    return {
        "success": True,
        "message": response.response,
        "tokensUsed": response.tokens_used,
        "model": response.model,
    }


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    service: AzureOpenAIService = Depends(get_openai_service),
) -> ChatResponse:
    if not payload.message:
        raise ServiceValidationError("Message is required")

    logger.info("Processing chat request")
    return await service.get_chat_completion(payload)


@router.post("/chat-stream")
async def chat_stream(
    payload: ChatRequest,
    service: AzureOpenAIService = Depends(get_openai_service),
) -> StreamingResponse:
    """Stream the completion as server-sent events, one token per event."""

    return StreamingResponse(
        _sse_events(service.stream_chat_completion(payload)),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@router.post("/embeddings", response_model=EmbeddingResponse)
async def embeddings(
    payload: EmbeddingRequest,
    service: AzureOpenAIService = Depends(get_openai_service),
) -> EmbeddingResponse:
    if not payload.text:
        raise ServiceValidationError("Text is required")

    vector = await service.get_embeddings(payload.text)
    return EmbeddingResponse(
        text=payload.text,
        dimensions=len(vector),
        embeddings=vector[:EMBEDDING_PREVIEW_LENGTH],
        message=f"Full embedding has {len(vector)} dimensions",
    )


async def _sse_events(tokens: AsyncIterator[str]) -> AsyncIterator[str]:
    # Headers are already sent once streaming starts, so failures become an event.
    try:
        async for token in tokens:
            yield format_sse(token)
        yield format_sse("[DONE]")
    except (AzureServiceError, ServiceValidationError) as exc:
        logger.error("Streaming chat failed: %s", exc)
        yield format_sse(f"Error: {exc}")


def format_sse(data: str) -> str:
    """Frame ``data`` as one SSE event; embedded newlines become extra data lines."""

    return "".join(f"data: {line}\n" for line in data.split("\n")) + "\n"
