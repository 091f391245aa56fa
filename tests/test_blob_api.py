"""API layer tests for the Blob Storage routes, backed by the in-memory container."""

from __future__ import annotations

from http import HTTPStatus
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from src.api.app import app
from src.api.dependencies import get_blob_service
from src.components.blob_storage import BlobStorageService


def _install(container, *, use_managed_identity: bool = False) -> BlobStorageService:
    service = BlobStorageService(
        settings=SimpleNamespace(container_name="demo", use_managed_identity=use_managed_identity),
        container_client=container,
        copy_poll_interval=0,
    )
    app.dependency_overrides[get_blob_service] = lambda: service
    return service


@pytest.fixture(autouse=True)
def blob_service(fake_container):
    yield _install(fake_container)
    app.dependency_overrides.clear()


def _client() -> TestClient:
    return TestClient(app)


def test_upload_file_then_download_is_byte_identical(fake_container):
    client = _client()
    payload = b"\x00\x01binary\xffcontent"

    upload = client.post(
        "/api/BlobStorage/upload",
        params={"blobName": "docs/report.bin"},
        files={"file": ("report.bin", payload, "application/octet-stream")},
    )
    download = client.get("/api/BlobStorage/download/docs/report.bin")

    assert upload.status_code == HTTPStatus.OK
    blob = upload.json()["blob"]
    assert blob["name"] == "docs/report.bin"
    assert blob["contentType"] == "application/octet-stream"
    assert blob["metadata"]["OriginalFileName"] == "report.bin"
    assert blob["metadata"]["FileSize"] == str(len(payload))

    assert download.status_code == HTTPStatus.OK
    assert download.content == payload
    assert download.headers["content-type"] == "application/octet-stream"
    assert "attachment" in download.headers["content-disposition"]
    assert "report.bin" in download.headers["content-disposition"]


def test_upload_uses_file_name_when_blob_name_missing(fake_container):
    response = _client().post("/api/BlobStorage/upload", files={"file": ("notes.txt", b"hello", "text/plain")})

    assert response.status_code == HTTPStatus.OK
    assert "notes.txt" in fake_container.blobs


def test_upload_rejects_empty_file():
    response = _client().post("/api/BlobStorage/upload", files={"file": ("empty.txt", b"", "text/plain")})

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.json()["detail"] == "No file provided"


def test_upload_text_defaults_to_plain_text(fake_container):
    response = _client().post(
        "/api/BlobStorage/upload-text",
        json={"blobName": "hello.txt", "content": "Hello from Azure Blob Storage!"},
    )

    assert response.status_code == HTTPStatus.OK
    stored = fake_container.blobs["hello.txt"]
    assert stored["content_type"] == "text/plain"
    assert stored["data"] == b"Hello from Azure Blob Storage!"
    assert stored["metadata"]["ContentLength"] == "30"
    assert "UploadedAt" in stored["metadata"]


def test_upload_text_requires_name_and_content():
    response = _client().post("/api/BlobStorage/upload-text", json={"blobName": "x.txt"})

    assert response.status_code == HTTPStatus.BAD_REQUEST


def test_download_missing_blob_returns_404():
    response = _client().get("/api/BlobStorage/download/missing.txt")

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.json() == {"message": "Blob 'missing.txt' not found"}


def test_list_reports_prefix_or_none():
    client = _client()
    client.post("/api/BlobStorage/upload-text", json={"blobName": "a/1.txt", "content": "1"})
    client.post("/api/BlobStorage/upload-text", json={"blobName": "b/2.txt", "content": "2"})

    filtered = client.get("/api/BlobStorage/list", params={"prefix": "a/"}).json()
    everything = client.get("/api/BlobStorage/list").json()

    assert filtered["count"] == 1
    assert filtered["prefix"] == "a/"
    assert filtered["blobs"][0]["name"] == "a/1.txt"
    assert everything["count"] == 2
    assert everything["prefix"] == "none"


def test_properties_for_missing_blob_returns_404():
    response = _client().get("/api/BlobStorage/properties/nothing/here.txt")

    assert response.status_code == HTTPStatus.NOT_FOUND


def test_sas_url_response_shape():
    client = _client()
    client.post("/api/BlobStorage/upload-text", json={"blobName": "share.txt", "content": "shared"})

    response = client.post("/api/BlobStorage/sas/share.txt", params={"validityMinutes": 15})

    body = response.json()
    assert response.status_code == HTTPStatus.OK
    assert body["blobName"] == "share.txt"
    assert body["validFor"] == "15 minutes"
    assert body["sasUrl"].startswith("https://devaccount.blob.core.windows.net/demo/share.txt?")
    assert "expiresAt" in body


def test_sas_for_missing_blob_returns_404():
    response = _client().post("/api/BlobStorage/sas/missing.txt")

    assert response.status_code == HTTPStatus.NOT_FOUND


def test_sas_with_managed_identity_returns_400(container_factory):
    container = container_factory()
    _install(container, use_managed_identity=True)
    client = _client()
    client.post("/api/BlobStorage/upload-text", json={"blobName": "share.txt", "content": "shared"})

    response = client.post("/api/BlobStorage/sas/share.txt")

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "Managed Identity" in response.json()["message"]


def test_copy_then_delete(fake_container):
    client = _client()
    client.post("/api/BlobStorage/upload-text", json={"blobName": "src.txt", "content": "copy me"})

    copied = client.post(
        "/api/BlobStorage/copy",
        json={"sourceBlobName": "src.txt", "destinationBlobName": "dst.txt"},
    )
    deleted = client.delete("/api/BlobStorage/dst.txt")
    deleted_again = client.delete("/api/BlobStorage/dst.txt")

    assert copied.json()["success"] is True
    assert deleted.status_code == HTTPStatus.OK
    assert deleted_again.status_code == HTTPStatus.NOT_FOUND
    assert "src.txt" in fake_container.blobs


def test_copy_requires_both_names():
    response = _client().post("/api/BlobStorage/copy", json={"sourceBlobName": "src.txt"})

    assert response.status_code == HTTPStatus.BAD_REQUEST
