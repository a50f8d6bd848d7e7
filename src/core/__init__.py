"""Monitored endpoints, check results, and per-alert runtime state."""

from src.core.schemas import (
    AlertState,
    DuplicateAlertError,
    Endpoint,
    Result,
    endpoint_key,
)

__all__ = ["AlertState", "DuplicateAlertError", "Endpoint", "Result", "endpoint_key"]
