"""Chat route for Azure AI Foundry catalog models."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from src.api.dependencies import get_foundry_service
from src.components.foundry import FoundryService
from src.models import FoundryChatRequest
from src.utils.exceptions import ServiceValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/Foundry", tags=["Foundry"])


@router.post("/chat")
async def chat(
    payload: FoundryChatRequest,
    service: FoundryService = Depends(get_foundry_service),
) -> dict:
    if not payload.prompt or not payload.prompt.strip():
        raise ServiceValidationError("Prompt is required.")

    logger.debug("Forwarding prompt to Foundry model")
    return {"response": await service.get_chat_completion(payload.prompt)}
