"""Observability layer - logging and metrics."""

from src.observability.logging import setup_logging
from src.observability.metrics import AlertingMetrics, get_metrics

__all__ = ["setup_logging", "AlertingMetrics", "get_metrics"]
