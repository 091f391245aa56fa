"""Pydantic models for custom telemetry requests."""

from __future__ import annotations

from typing import Optional

from .base import ApiModel


class CustomEventRequest(ApiModel):
    event_name: str = ""
    properties: Optional[dict[str, str]] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "eventName": "UserLogin",
                "properties": {"userId": "123", "loginMethod": "OAuth"},
            }
        }
    }


class CustomMetricRequest(ApiModel):
    metric_name: str = ""
    value: float = 0.0
    properties: Optional[dict[str, str]] = None
