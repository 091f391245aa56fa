"""Credential selection shared by the Azure components."""

from __future__ import annotations

from functools import lru_cache

from azure.identity.aio import DefaultAzureCredential


@lru_cache(maxsize=1)
def get_default_credential() -> DefaultAzureCredential:
    """Return the process-wide managed identity credential chain."""

    return DefaultAzureCredential()
