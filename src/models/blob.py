"""Pydantic models for blob metadata and upload requests."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .base import ApiModel


class BlobInfo(ApiModel):
    """Metadata describing a stored blob."""

    name: str
    uri: str
    size: int = 0
    content_type: str = ""
    last_modified: Optional[datetime] = None
    metadata: Optional[dict[str, str]] = None


class TextUploadRequest(ApiModel):
    blob_name: str = ""
    content: str = ""
    content_type: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "blobName": "sample.txt",
                "content": "Hello from Azure Blob Storage!",
                "contentType": "text/plain",
            }
        }
    }


class CopyBlobRequest(ApiModel):
    source_blob_name: str = ""
    destination_blob_name: str = ""


class SasUrlResponse(ApiModel):
    """Time-limited read URL for a blob."""

    blob_name: str
    sas_url: str
    valid_for: str
    expires_at: datetime
