"""Shared fakes standing in for Azure SDK clients."""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, Optional

import pytest
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError

ACCOUNT_URL = "https://devaccount.blob.core.windows.net"


class FakeDownloader:
    def __init__(self, data: bytes) -> None:
        self._data = data

    async def readall(self) -> bytes:
        return self._data


class FakeBlobClient:
    def __init__(self, container: "FakeContainerClient", name: str) -> None:
        self._container = container
        self.blob_name = name
        self.url = f"{ACCOUNT_URL}/{container.container_name}/{name}"

    async def upload_blob(self, data, overwrite=False, content_settings=None, metadata=None):
        if not overwrite and self.blob_name in self._container.blobs:
            raise ResourceExistsError("BlobAlreadyExists")
        self._container.blobs[self.blob_name] = {
            "data": bytes(data),
            "content_type": getattr(content_settings, "content_type", None),
            "metadata": dict(metadata or {}),
            "last_modified": datetime.now(timezone.utc),
            "copy_status": None,
        }
        return {"etag": "0x1"}

    async def get_blob_properties(self):
        blob = self._require()
        return self._container.properties_for(self.blob_name, blob)

    async def download_blob(self):
        return FakeDownloader(self._require()["data"])

    async def delete_blob(self):
        self._require()
        del self._container.blobs[self.blob_name]

    async def exists(self) -> bool:
        return self.blob_name in self._container.blobs

    async def start_copy_from_url(self, source_url: str):
        source_name = source_url.rsplit(f"/{self._container.container_name}/", 1)[-1]
        source = self._container.blobs.get(source_name)
        if source is None:
            raise ResourceNotFoundError("CannotVerifyCopySource")

        status = self._container.copy_status
        self._container.blobs[self.blob_name] = {**source, "copy_status": "success"}
        return {"copy_status": status, "copy_id": "copy-1"}

    def _require(self) -> Dict[str, Any]:
        blob = self._container.blobs.get(self.blob_name)
        if blob is None:
            raise ResourceNotFoundError("BlobNotFound")
        return blob


class FakeContainerClient:
    """In-memory container that behaves like ``azure.storage.blob.aio.ContainerClient``."""

    def __init__(self, *, exists: bool = False, copy_status: str = "success") -> None:
        self.account_name = "devaccount"
        self.container_name = "demo"
        self.credential = SimpleNamespace(account_name="devaccount", account_key="ZGV2LWFjY291bnQta2V5")
        self.blobs: Dict[str, Dict[str, Any]] = {}
        self.created = exists
        self.create_calls = 0
        self.copy_status = copy_status
        self.closed = False

    async def create_container(self):
        self.create_calls += 1
        if self.created:
            raise ResourceExistsError("ContainerAlreadyExists")
        self.created = True

    def get_blob_client(self, name: str) -> FakeBlobClient:
        return FakeBlobClient(self, name)

    def list_blobs(self, name_starts_with: Optional[str] = None, include=None):
        return self._iterate(name_starts_with)

    async def _iterate(self, prefix: Optional[str]):
        for name in sorted(self.blobs):
            if prefix and not name.startswith(prefix):
                continue
            blob = self.blobs[name]
            yield SimpleNamespace(name=name, **vars(self.properties_for(name, blob)))

    async def close(self) -> None:
        self.closed = True

    @staticmethod
    def properties_for(name: str, blob: Dict[str, Any]) -> SimpleNamespace:
        return SimpleNamespace(
            size=len(blob["data"]),
            content_settings=SimpleNamespace(content_type=blob["content_type"]),
            last_modified=blob["last_modified"],
            metadata=blob["metadata"],
            copy=SimpleNamespace(status=blob["copy_status"]),
        )


@pytest.fixture
def fake_container() -> FakeContainerClient:
    return FakeContainerClient()


@pytest.fixture
def container_factory():
    return FakeContainerClient
