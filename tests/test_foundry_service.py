"""Unit tests for the FoundryService wrapper."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from azure.ai.inference.models import SystemMessage, UserMessage
from azure.core.exceptions import AzureError

from src.components.foundry import FoundryService
from src.utils.exceptions import FoundryConfigurationError, FoundryServiceError


def _settings(**overrides):
    base = dict(
        endpoint="https://demo.services.ai.azure.com/models",
        api_key="secret",
        model_name="Phi-3-mini-4k-instruct",
        temperature=0.7,
        max_tokens=1000,
    )
    base.update(overrides)
    return SimpleNamespace(**base)


def _response(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@pytest.mark.asyncio
async def test_chat_completion_sends_system_and_user_messages():
    client = SimpleNamespace(complete=AsyncMock(return_value=_response("Phi says hi")))
    service = FoundryService(settings=_settings(), client=client)

    answer = await service.get_chat_completion("Say hi")

    assert answer == "Phi says hi"
    kwargs = client.complete.await_args.kwargs
    assert kwargs["model"] == "Phi-3-mini-4k-instruct"
    assert kwargs["temperature"] == 0.7
    assert kwargs["max_tokens"] == 1000
    system, user = kwargs["messages"]
    assert isinstance(system, SystemMessage)
    assert isinstance(user, UserMessage)
    assert user.content == "Say hi"


@pytest.mark.asyncio
async def test_chat_completion_wraps_sdk_errors():
    client = SimpleNamespace(complete=AsyncMock(side_effect=AzureError("model overloaded")))
    service = FoundryService(settings=_settings(), client=client)

    with pytest.raises(FoundryServiceError, match="Foundry Error: model overloaded"):
        await service.get_chat_completion("Say hi")


def test_missing_endpoint_is_a_configuration_error():
    with pytest.raises(FoundryConfigurationError):
        FoundryService(settings=_settings(endpoint=""))
