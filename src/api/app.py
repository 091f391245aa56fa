"""FastAPI application exposing the Azure service demos."""

from __future__ import annotations

import logging
import platform
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from http import HTTPStatus
from typing import AsyncIterator

import fastapi
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.api.dependencies import close_services
from src.api.routes import routers
from src.config.settings import (
    get_app_insights_settings,
    get_app_settings,
    get_blob_settings,
    get_openai_settings,
    get_search_settings,
)
from src.utils.exceptions import (
    AzureServiceError,
    OperationNotSupportedError,
    ResourceMissingError,
    ServiceValidationError,
)
from src.utils.logging import configure_azure_monitor_export, configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    configure_azure_monitor_export()
    logger.info("Azure Services Demo API starting in %s", get_app_settings().environment)
    yield
    await close_services()


app = FastAPI(
    title="Azure Services Demo API",
    version="0.1.0",
    description=(
        "Demo API showcasing Azure OpenAI, Cognitive Search, Blob Storage, App Insights, "
        "and Managed Identity. Use the Swagger UI at /docs to explore request/response contracts."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)
for router in routers:
    app.include_router(router)


@app.exception_handler(ServiceValidationError)
async def handle_validation_error(request: Request, exc: ServiceValidationError):
    logger.info("Validation error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=HTTPStatus.BAD_REQUEST.value,
        content={"detail": str(exc)},
    )


@app.exception_handler(ResourceMissingError)
async def handle_resource_missing(request: Request, exc: ResourceMissingError):
    logger.info("Resource not found on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=HTTPStatus.NOT_FOUND.value,
        content={"message": str(exc)},
    )


@app.exception_handler(OperationNotSupportedError)
async def handle_operation_not_supported(request: Request, exc: OperationNotSupportedError):
    logger.info("Unsupported operation on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=HTTPStatus.BAD_REQUEST.value,
        content={"message": str(exc)},
    )


@app.exception_handler(AzureServiceError)
async def handle_azure_service_error(request: Request, exc: AzureServiceError):
    logger.exception("Azure service failure on %s", request.url.path)
    return JSONResponse(
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR.value,
        content={"error": str(exc)},
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unexpected failure on %s", request.url.path)
    return JSONResponse(
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR.value,
        content={"error": str(exc)},
    )


@app.get("/health", tags=["Host"])
async def health() -> dict:
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": get_app_settings().environment,
    }


@app.get("/api/info", tags=["Host"])
async def info() -> dict:
    """Report runtime versions and which Azure services are configured."""

    openai_settings = get_openai_settings()
    search_settings = get_search_settings()
    blob_settings = get_blob_settings()
    return {
        "pythonVersion": platform.python_version(),
        "framework": f"FastAPI {fastapi.__version__}",
        "azureServices": {
            "openAI": {
                "configured": openai_settings.configured(),
                "useManagedIdentity": openai_settings.use_managed_identity,
            },
            "cognitiveSearch": {
                "configured": search_settings.configured(),
                "useManagedIdentity": search_settings.use_managed_identity,
            },
            "blobStorage": {
                "configured": blob_settings.configured(),
                "useManagedIdentity": blob_settings.use_managed_identity,
            },
            "applicationInsights": {"configured": get_app_insights_settings().configured()},
        },
    }
