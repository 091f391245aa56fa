"""Routes that emit Application Insights telemetry of every kind."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_telemetry
from src.components.app_insights import AppInsightsTelemetry
from src.models import CustomEventRequest, CustomMetricRequest
from src.utils.exceptions import ServiceValidationError, TelemetryError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/Telemetry", tags=["Telemetry"])

SIMULATED_DEPENDENCY_SECONDS = 0.05


@router.get("/demo")
async def demo(telemetry: AppInsightsTelemetry = Depends(get_telemetry)) -> dict:
    """Emit one event, metric, trace and dependency."""

    telemetry.track_event(
        "TelemetryDemo_Accessed",
        properties={"User": "DemoUser", "Feature": "TelemetryDemo", "Environment": "Development"},
        measurements={"ResponseTime": 123.45},
    )
    telemetry.track_metric("DemoMetric", 42.5, properties={"MetricType": "Demo", "Unit": "Count"})
    telemetry.track_trace(
        "Telemetry demo executed successfully",
        logging.INFO,
        properties={"Component": "TelemetryRouter", "Action": "Demo"},
    )

    started = time.time()
    await asyncio.sleep(SIMULATED_DEPENDENCY_SECONDS)
    telemetry.track_dependency("HTTP", "api.example.com", "GET /demo", started, time.time() - started, True)

    logger.info("Telemetry demo executed at %s", datetime.now(timezone.utc).isoformat())
    return {
        "message": "Telemetry demo executed successfully",
        "telemetryTypes": [
            "Event: TelemetryDemo_Accessed",
            "Metric: DemoMetric = 42.5",
            "Trace: Information log",
            "Dependency: External API call",
            "Log: logging integration",
        ],
        "tip": "Check Application Insights portal to see these telemetry items",
    }


@router.post("/custom-event")
async def custom_event(
    payload: CustomEventRequest,
    telemetry: AppInsightsTelemetry = Depends(get_telemetry),
) -> dict:
    if not payload.event_name:
        raise ServiceValidationError("EventName is required")

    telemetry.track_event(payload.event_name, properties=payload.properties)
    return {
        "message": f"Event '{payload.event_name}' tracked successfully",
        "properties": payload.properties,
    }


@router.post("/custom-metric")
async def custom_metric(
    payload: CustomMetricRequest,
    telemetry: AppInsightsTelemetry = Depends(get_telemetry),
) -> dict:
    if not payload.metric_name:
        raise ServiceValidationError("MetricName is required")

    telemetry.track_metric(payload.metric_name, payload.value, properties=payload.properties)
    return {"message": f"Metric '{payload.metric_name}' = {payload.value} tracked successfully"}


@router.get("/performance-test")
async def performance_test(
    delay_ms: int = Query(default=100, alias="delayMs", ge=0, le=60_000),
    telemetry: AppInsightsTelemetry = Depends(get_telemetry),
) -> dict:
    """Wrap a simulated workload and a nested dependency in one operation."""

    started_at = time.perf_counter()
    with telemetry.start_operation("PerformanceTest", properties={"DelayMs": str(delay_ms)}):
        await asyncio.sleep(delay_ms / 1000)

        dependency_start = time.time()
        await asyncio.sleep(SIMULATED_DEPENDENCY_SECONDS)
        telemetry.track_dependency(
            "Database",
            "SQL Azure",
            "SELECT * FROM Users",
            dependency_start,
            time.time() - dependency_start,
            True,
        )

    elapsed_ms = int((time.perf_counter() - started_at) * 1000)
    return {
        "message": "Performance test completed",
        "duration": f"{elapsed_ms}ms",
        "simulatedDelay": f"{delay_ms}ms",
        "tip": "Check Application Insights Performance blade for detailed timing",
    }


@router.get("/error-test")
async def error_test(
    error_type: str = Query(default="handled", alias="errorType"),
    telemetry: AppInsightsTelemetry = Depends(get_telemetry),
) -> dict:
    """Track a handled exception, or raise one when ``errorType=unhandled``."""

    if error_type == "unhandled":
        error = TelemetryError("This is a simulated unhandled exception")
        telemetry.track_exception(error)
        raise error

    try:
        10 / int("0")
    except ZeroDivisionError as exc:
        telemetry.track_exception(exc, properties={"ErrorType": "Handled", "TestScenario": "DivisionByZero"})
        logger.warning("Handled exception in error test", exc_info=exc)

    return {
        "message": "Handled exception tracked",
        "tip": "Check Application Insights Failures blade to see exception details",
    }
