"""Health API adapter."""

from __future__ import annotations

from .client import HealthApiError, HttpHealthSource
from .schema import ErrorResponse, InstanceHealthResponse, InstanceState
from .translator import translate_instance_health, translate_instance_state

__all__ = [
    "ErrorResponse",
    "HealthApiError",
    "HttpHealthSource",
    "InstanceHealthResponse",
    "InstanceState",
    "translate_instance_health",
    "translate_instance_state",
]
