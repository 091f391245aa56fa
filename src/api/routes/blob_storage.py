"""Blob Storage upload, download, listing and sharing routes."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import Response

from src.api.dependencies import get_blob_service
from src.components.blob_storage import BlobStorageService
from src.models import BlobInfo, CopyBlobRequest, SasUrlResponse, TextUploadRequest
from src.utils.exceptions import ResourceMissingError, ServiceValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/BlobStorage", tags=["BlobStorage"])

DEFAULT_TEXT_CONTENT_TYPE = "text/plain"


@router.post("/upload")
async def upload_file(
    file: UploadFile = File(...),
    blob_name: Optional[str] = Query(default=None, alias="blobName"),
    service: BlobStorageService = Depends(get_blob_service),
) -> dict:
    """Upload a multipart file, named after the file unless ``blobName`` is given."""

    data = await file.read()
    if not data:
        raise ServiceValidationError("No file provided")

    file_name = file.filename or "upload"
    metadata = {
        "OriginalFileName": file_name,
        "UploadedAt": _utc_now_iso(),
        "FileSize": str(len(data)),
    }
    info = await service.upload_blob(
        blob_name or file_name,
        data,
        file.content_type or "application/octet-stream",
        metadata,
    )
    return {"success": True, "message": "File uploaded successfully", "blob": info}


@router.post("/upload-text")
async def upload_text(
    payload: TextUploadRequest,
    service: BlobStorageService = Depends(get_blob_service),
) -> dict:
    if not payload.blob_name or not payload.content:
        raise ServiceValidationError("BlobName and Content are required")

    data = payload.content.encode("utf-8")
    metadata = {"ContentLength": str(len(data)), "UploadedAt": _utc_now_iso()}
    info = await service.upload_blob(
        payload.blob_name,
        data,
        payload.content_type or DEFAULT_TEXT_CONTENT_TYPE,
        metadata,
    )
    return {"success": True, "message": "Text content uploaded successfully", "blob": info}


@router.get("/download/{blob_name:path}")
async def download_blob(
    blob_name: str,
    service: BlobStorageService = Depends(get_blob_service),
) -> Response:
    properties = await service.get_blob_properties(blob_name)
    if properties is None:
        raise ResourceMissingError(f"Blob '{blob_name}' not found")

    content = await service.download_blob(blob_name)
    file_name = blob_name.rsplit("/", 1)[-1]
    return Response(
        content=content,
        media_type=properties.content_type or "application/octet-stream",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(file_name)}"},
    )


@router.get("/list")
async def list_blobs(
    prefix: Optional[str] = None,
    service: BlobStorageService = Depends(get_blob_service),
) -> dict:
    blobs = await service.list_blobs(prefix)
    return {"count": len(blobs), "prefix": prefix or "none", "blobs": blobs}


@router.get("/properties/{blob_name:path}", response_model=BlobInfo)
async def get_blob_properties(
    blob_name: str,
    service: BlobStorageService = Depends(get_blob_service),
) -> BlobInfo:
    properties = await service.get_blob_properties(blob_name)
    if properties is None:
        raise ResourceMissingError(f"Blob '{blob_name}' not found")
    return properties


@router.post("/sas/{blob_name:path}", response_model=SasUrlResponse)
async def generate_sas_url(
    blob_name: str,
    validity_minutes: int = Query(default=60, alias="validityMinutes", gt=0),
    service: BlobStorageService = Depends(get_blob_service),
) -> SasUrlResponse:
    """Issue a read-only URL for a blob, valid for ``validityMinutes``."""

    validity = timedelta(minutes=validity_minutes)
    sas_url = await service.generate_sas_url(blob_name, validity)
    return SasUrlResponse(
        blob_name=blob_name,
        sas_url=sas_url,
        valid_for=f"{validity_minutes} minutes",
        expires_at=datetime.now(timezone.utc) + validity,
    )


@router.post("/copy")
async def copy_blob(
    payload: CopyBlobRequest,
    service: BlobStorageService = Depends(get_blob_service),
) -> dict:
    if not payload.source_blob_name or not payload.destination_blob_name:
        raise ServiceValidationError("SourceBlobName and DestinationBlobName are required")

    success = await service.copy_blob(payload.source_blob_name, payload.destination_blob_name)
    return {
        "success": success,
        "message": f"Blob copied from '{payload.source_blob_name}' to '{payload.destination_blob_name}'",
    }


@router.delete("/{blob_name:path}")
async def delete_blob(
    blob_name: str,
    service: BlobStorageService = Depends(get_blob_service),
) -> dict:
    if not await service.delete_blob(blob_name):
        raise ResourceMissingError(f"Blob '{blob_name}' not found")
    return {"success": True, "message": f"Blob '{blob_name}' deleted successfully"}


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
