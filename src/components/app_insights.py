"""Application Insights telemetry through the OpenTelemetry API.

Custom events and traces go through a dedicated logger; the Azure Monitor
exporter turns records carrying ``microsoft.custom_event.name`` into
customEvents and the rest into traces. Metrics use an OpenTelemetry meter and
dependencies/operations become spans. Without ``configure_azure_monitor`` the
OpenTelemetry API is a no-op, so everything here is safe to call locally.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional

from opentelemetry import metrics, trace
from opentelemetry.trace import Span, SpanKind, Status, StatusCode

logger = logging.getLogger(__name__)

CUSTOM_EVENT_ATTRIBUTE = "microsoft.custom_event.name"
TELEMETRY_LOGGER_NAME = "azure_demo.telemetry"

_RESERVED_RECORD_KEYS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}


class AppInsightsTelemetry:
    """Record custom events, metrics, traces, dependencies and exceptions."""

    def __init__(
        self,
        *,
        tracer: Optional[trace.Tracer] = None,
        meter: Optional[metrics.Meter] = None,
        event_logger: Optional[logging.Logger] = None,
    ) -> None:
        self._tracer = tracer or trace.get_tracer(__name__)
        self._meter = meter or metrics.get_meter(__name__)
        self._event_logger = event_logger or logging.getLogger(TELEMETRY_LOGGER_NAME)
        self._histograms: Dict[str, Any] = {}

    def track_event(
        self,
        name: str,
        properties: Optional[Mapping[str, str]] = None,
        measurements: Optional[Mapping[str, float]] = None,
    ) -> None:
        """Emit a customEvents record."""

        attributes: Dict[str, Any] = {CUSTOM_EVENT_ATTRIBUTE: name}
        attributes.update(_safe_attributes(properties))
        attributes.update(_safe_attributes(measurements))
        self._event_logger.info(name, extra=attributes)

    def track_metric(self, name: str, value: float, properties: Optional[Mapping[str, str]] = None) -> None:
        """Record a single measurement on a histogram named after the metric."""

        histogram = self._histograms.get(name)
        if histogram is None:
            histogram = self._meter.create_histogram(name)
            self._histograms[name] = histogram
        histogram.record(value, attributes=dict(properties or {}))

    def track_trace(
        self,
        message: str,
        severity: int = logging.INFO,
        properties: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._event_logger.log(severity, message, extra=_safe_attributes(properties))

    def track_dependency(
        self,
        dependency_type: str,
        target: str,
        name: str,
        start_time: float,
        duration: float,
        success: bool,
    ) -> None:
        """Record an outbound call that already finished.

        ``start_time`` is a ``time.time()`` timestamp and ``duration`` is in seconds.
        """

        start_ns = int(start_time * 1_000_000_000)
        span = self._tracer.start_span(
            name,
            kind=SpanKind.CLIENT,
            start_time=start_ns,
            attributes={"dependency.type": dependency_type, "peer.service": target},
        )
        span.set_status(Status(StatusCode.OK if success else StatusCode.ERROR))
        span.end(end_time=start_ns + int(duration * 1_000_000_000))

    def track_exception(self, exc: BaseException, properties: Optional[Mapping[str, str]] = None) -> None:
        """Report an exception with its traceback."""

        current = trace.get_current_span()
        if current.is_recording():
            current.record_exception(exc, attributes=dict(properties or {}))
        self._event_logger.error(
            str(exc) or type(exc).__name__,
            exc_info=(type(exc), exc, exc.__traceback__),
            extra=_safe_attributes(properties),
        )

    @contextmanager
    def start_operation(self, name: str, properties: Optional[Mapping[str, str]] = None) -> Iterator[Span]:
        """Wrap a block of work in a server span; failures mark the span as errored."""

        with self._tracer.start_as_current_span(
            name, kind=SpanKind.SERVER, attributes=dict(properties or {})
        ) as span:
            yield span


def _safe_attributes(values: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if not values:
        return {}

    safe: Dict[str, Any] = {}
    for key, value in values.items():
        safe_key = f"prop_{key}" if key in _RESERVED_RECORD_KEYS else key
        safe[safe_key] = value
    return safe
