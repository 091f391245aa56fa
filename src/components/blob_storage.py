"""Blob Storage component wrapping a single container."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobSasPermissions, ContentSettings, generate_blob_sas
from azure.storage.blob.aio import BlobServiceClient, ContainerClient

from src.config.settings import BlobStorageSettings, get_blob_settings
from src.models import BlobInfo
from src.utils.credentials import get_default_credential
from src.utils.exceptions import (
    BlobStorageConfigurationError,
    BlobStorageError,
    OperationNotSupportedError,
    ResourceMissingError,
)

logger = logging.getLogger(__name__)

SAS_CLOCK_SKEW = timedelta(minutes=5)


class BlobStorageService:
    """Upload, download, list and share blobs in the configured container."""

    def __init__(
        self,
        *,
        settings: BlobStorageSettings | None = None,
        container_client: ContainerClient | None = None,
        copy_poll_interval: float = 1.0,
    ) -> None:
        self._settings = settings or get_blob_settings()

        if not self._settings.container_name:
            raise BlobStorageConfigurationError("AZURE_STORAGE_CONTAINER_NAME is missing.")

        self._use_managed_identity = self._settings.use_managed_identity
        self._container = container_client or self._build_container_client(self._settings)
        self._copy_poll_interval = copy_poll_interval
        self._container_ready = False

    async def upload_blob(
        self,
        blob_name: str,
        data: bytes,
        content_type: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> BlobInfo:
        """Upload (overwrite) a blob and return its stored properties."""

        await self._ensure_container()
        blob_client = self._container.get_blob_client(blob_name)

        logger.info("Uploading blob: %s, Size: %s bytes", blob_name, len(data))
        try:
            await blob_client.upload_blob(
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
                metadata=metadata,
            )
            properties = await blob_client.get_blob_properties()
        except AzureError as exc:
            logger.error("Failed to upload blob: %s", exc)
            raise BlobStorageError(f"Upload Error: {exc.message}") from exc

        return self._build_info(blob_name, blob_client.url, properties)

    async def download_blob(self, blob_name: str) -> bytes:
        """Return the full content of a blob."""

        await self._ensure_container()
        blob_client = self._container.get_blob_client(blob_name)

        logger.info("Downloading blob: %s", blob_name)
        try:
            downloader = await blob_client.download_blob()
            return await downloader.readall()
        except ResourceNotFoundError as exc:
            raise ResourceMissingError(f"Blob '{blob_name}' not found") from exc
        except AzureError as exc:
            logger.error("Failed to download blob: %s", exc)
            raise BlobStorageError(f"Download Error: {exc.message}") from exc

    async def list_blobs(self, prefix: Optional[str] = None) -> List[BlobInfo]:
        """List blobs, optionally restricted to names starting with ``prefix``."""

        await self._ensure_container()

        logger.info("Listing blobs with prefix: %s", prefix or "none")
        blobs: List[BlobInfo] = []
        try:
            async for item in self._container.list_blobs(name_starts_with=prefix, include=["metadata"]):
                content_settings = getattr(item, "content_settings", None)
                blobs.append(
                    BlobInfo(
                        name=item.name,
                        uri=self._container.get_blob_client(item.name).url,
                        size=item.size or 0,
                        content_type=getattr(content_settings, "content_type", None) or "unknown",
                        last_modified=item.last_modified,
                        metadata=dict(item.metadata or {}),
                    )
                )
        except AzureError as exc:
            logger.error("Failed to list blobs: %s", exc)
            raise BlobStorageError(f"List Error: {exc.message}") from exc

        return blobs

    async def delete_blob(self, blob_name: str) -> bool:
        """Delete a blob; False when it did not exist."""

        await self._ensure_container()
        blob_client = self._container.get_blob_client(blob_name)

        logger.info("Deleting blob: %s", blob_name)
        try:
            await blob_client.delete_blob()
        except ResourceNotFoundError:
            return False
        except AzureError as exc:
            logger.error("Failed to delete blob: %s", exc)
            raise BlobStorageError(f"Delete Error: {exc.message}") from exc

        return True

    async def get_blob_properties(self, blob_name: str) -> Optional[BlobInfo]:
        """Fetch blob properties without downloading content."""

        await self._ensure_container()
        blob_client = self._container.get_blob_client(blob_name)

        try:
            properties = await blob_client.get_blob_properties()
        except ResourceNotFoundError:
            return None
        except AzureError as exc:
            logger.error("Failed to get blob properties: %s", exc)
            raise BlobStorageError(f"Get Properties Error: {exc.message}") from exc

        return self._build_info(blob_name, blob_client.url, properties)

    async def generate_sas_url(self, blob_name: str, validity: timedelta) -> str:
        """Build a read-only SAS URL valid for ``validity``."""

        await self._ensure_container()
        blob_client = self._container.get_blob_client(blob_name)

        try:
            exists = await blob_client.exists()
        except AzureError as exc:
            logger.error("Failed to generate SAS URL: %s", exc)
            raise BlobStorageError(f"SAS Generation Error: {exc.message}") from exc

        if not exists:
            raise ResourceMissingError(f"Blob '{blob_name}' not found")

        if self._use_managed_identity:
            logger.warning("SAS generation with Managed Identity requires a User Delegation Key")
            raise OperationNotSupportedError(
                "SAS generation with Managed Identity requires additional implementation"
            )

        account_key = getattr(self._container.credential, "account_key", None)
        if not account_key:
            raise OperationNotSupportedError("SAS generation requires a connection string with an account key")

        now = datetime.now(timezone.utc)
        token = generate_blob_sas(
            account_name=self._container.account_name,
            container_name=self._container.container_name,
            blob_name=blob_name,
            account_key=account_key,
            permission=BlobSasPermissions(read=True),
            start=now - SAS_CLOCK_SKEW,
            expiry=now + validity,
        )

        logger.info("Generated SAS URL for blob: %s, Valid for: %s", blob_name, validity)
        return f"{blob_client.url}?{token}"

    async def copy_blob(self, source_blob_name: str, destination_blob_name: str) -> bool:
        """Copy a blob within the container and wait for the service-side copy to finish."""

        await self._ensure_container()
        source = self._container.get_blob_client(source_blob_name)
        destination = self._container.get_blob_client(destination_blob_name)

        logger.info("Copying blob from %s to %s", source_blob_name, destination_blob_name)
        try:
            copy = await destination.start_copy_from_url(source.url)
            status = copy.get("copy_status")
            while status == "pending":
                await asyncio.sleep(self._copy_poll_interval)
                properties = await destination.get_blob_properties()
                status = properties.copy.status
        except AzureError as exc:
            logger.error("Failed to copy blob: %s", exc)
            raise BlobStorageError(f"Copy Error: {exc.message}") from exc

        return status == "success"

    async def close(self) -> None:
        await self._container.close()

    async def _ensure_container(self) -> None:
        if self._container_ready:
            return

        try:
            await self._container.create_container()
            logger.info("Created blob container: %s", self._settings.container_name)
        except ResourceExistsError:
            logger.debug("Blob container already exists: %s", self._settings.container_name)
        except AzureError as exc:
            raise BlobStorageError(f"Container Error: {exc.message}") from exc

        self._container_ready = True

    @staticmethod
    def _build_info(blob_name: str, uri: str, properties: Any) -> BlobInfo:
        content_settings = getattr(properties, "content_settings", None)
        return BlobInfo(
            name=blob_name,
            uri=uri,
            size=properties.size or 0,
            content_type=getattr(content_settings, "content_type", None) or "",
            last_modified=properties.last_modified,
            metadata=dict(properties.metadata or {}),
        )

    @staticmethod
    def _build_container_client(settings: BlobStorageSettings) -> ContainerClient:
        if settings.use_managed_identity:
            if not settings.account_name:
                raise BlobStorageConfigurationError("AZURE_STORAGE_ACCOUNT_NAME is missing.")
            logger.info("Using Managed Identity for Blob Storage")
            service = BlobServiceClient(account_url=settings.account_url(), credential=get_default_credential())
            return service.get_container_client(settings.container_name)

        if not settings.connection_string:
            raise BlobStorageConfigurationError("AZURE_STORAGE_CONNECTION_STRING is missing.")

        logger.info("Using Connection String for Blob Storage")
        return ContainerClient.from_connection_string(
            settings.connection_string, container_name=settings.container_name
        )
