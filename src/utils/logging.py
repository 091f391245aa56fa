"""Process-wide logging setup, optionally exporting to Application Insights."""

from __future__ import annotations

import logging
import sys

from src.config.settings import get_app_insights_settings, get_app_settings

LOG_FORMAT = "[%(levelname)s] [%(asctime)s] [%(name)s] [%(funcName)s:%(lineno)d] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_azure_monitor_enabled = False


def configure_logging() -> logging.Logger:
    """Attach a stdout handler to the root logger once and return it."""

    level = logging.getLevelName(get_app_settings().log_level)
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    if not any(getattr(handler, "_azure_demo_handler", False) for handler in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler._azure_demo_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    return root


def configure_azure_monitor_export() -> bool:
    """Route logs, traces and metrics to Application Insights when a connection string is set."""

    global _azure_monitor_enabled

    if _azure_monitor_enabled:
        return True

    settings = get_app_insights_settings()
    if not settings.configured():
        logging.getLogger(__name__).info("Application Insights not configured; telemetry stays local.")
        return False

    from azure.monitor.opentelemetry import configure_azure_monitor

    configure_azure_monitor(connection_string=settings.connection_string)
    _azure_monitor_enabled = True
    logging.getLogger(__name__).info("Application Insights export enabled.")
    return True
