"""Pydantic models describing chat and embedding API contracts."""

from __future__ import annotations

from pydantic import Field

from .base import ApiModel


class ChatRequest(ApiModel):
    """Inbound payload for a chat completion."""

    message: str = ""
    max_tokens: int = Field(default=800, gt=0, le=32768)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    model_config = {
        "json_schema_extra": {
            "example": {
                "message": "Explain dependency injection in FastAPI",
                "maxTokens": 500,
                "temperature": 0.7,
            }
        }
    }


class ChatResponse(ApiModel):
    """Outbound payload for chat completions."""

    response: str = ""
    tokens_used: int = 0
    model: str = ""


class EmbeddingRequest(ApiModel):
    """Text to convert into an embedding vector."""

    text: str = ""


class EmbeddingResponse(ApiModel):
    """Embedding preview returned to the caller."""

    text: str
    dimensions: int
    embeddings: list[float]
    message: str


class FoundryChatRequest(ApiModel):
    """Prompt sent to a Foundry catalog model."""

    prompt: str = ""
