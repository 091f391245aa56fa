"""Tests for service shutdown in the dependency module."""

from __future__ import annotations

from functools import lru_cache
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from src.api import dependencies


def _cached(service):
    provider = lru_cache(maxsize=1)(lambda: service)
    provider()
    return provider


@pytest.mark.asyncio
async def test_close_services_continues_after_a_failing_close(monkeypatch):
    failing = SimpleNamespace(close=AsyncMock(side_effect=RuntimeError("socket already closed")))
    healthy = SimpleNamespace(close=AsyncMock())
    credential = SimpleNamespace(close=AsyncMock())
    failing_provider = _cached(failing)
    healthy_provider = _cached(healthy)
    credential_provider = _cached(credential)
    monkeypatch.setattr(dependencies, "_CLOSEABLE_PROVIDERS", (failing_provider, healthy_provider))
    monkeypatch.setattr(dependencies, "get_default_credential", credential_provider)

    await dependencies.close_services()

    failing.close.assert_awaited_once()
    healthy.close.assert_awaited_once()
    credential.close.assert_awaited_once()
    assert failing_provider.cache_info().currsize == 0
    assert healthy_provider.cache_info().currsize == 0
    assert credential_provider.cache_info().currsize == 0


@pytest.mark.asyncio
async def test_close_services_skips_providers_never_built(monkeypatch):
    untouched = lru_cache(maxsize=1)(lambda: SimpleNamespace(close=AsyncMock()))
    monkeypatch.setattr(dependencies, "_CLOSEABLE_PROVIDERS", (untouched,))
    monkeypatch.setattr(dependencies, "get_default_credential", lru_cache(maxsize=1)(lambda: None))

    await dependencies.close_services()

    assert untouched.cache_info().currsize == 0
