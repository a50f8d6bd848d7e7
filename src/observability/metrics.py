"""
Prometheus metrics for alert evaluation.

Counts endpoint evaluations by outcome and notification dispatches by
alert type, kind (initial, reminder, resolved) and status (sent,
failed, provider_unavailable).

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging
from typing import TYPE_CHECKING

from prometheus_client import REGISTRY, CollectorRegistry, Counter, start_http_server

from src.config.settings import get_settings

if TYPE_CHECKING:
    from src.watchdog.alerting import AlertDispatch

logger = logging.getLogger(__name__)


class AlertingMetrics:
    """
    Prometheus metrics collector for alert evaluation.

    Usage:
        metrics = get_metrics()
        metrics.start_server()
        metrics.record_evaluation(success=False)
        metrics.record_dispatch(dispatch)

    Args:
        registry: Registry to register metrics in (defaults to the
            process-wide registry; tests pass their own)
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self._registry = registry or REGISTRY

        self.evaluations = Counter(
            "uptime_sentinel_endpoint_evaluations_total",
            "Total number of endpoint check results evaluated for alerting",
            ["outcome"],
            registry=self._registry,
        )

        self.dispatches = Counter(
            "uptime_sentinel_alert_dispatches_total",
            "Total number of alert notifications attempted",
            ["alert_type", "kind", "status"],
            registry=self._registry,
        )

        logger.info("Prometheus metrics initialized")

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        port = port or get_settings().metrics_port
        start_http_server(port, registry=self._registry)
        logger.info("Prometheus metrics server started on port %d", port)

    def record_evaluation(self, success: bool) -> None:
        self.evaluations.labels(outcome="success" if success else "failure").inc()

    def record_dispatch(self, dispatch: "AlertDispatch") -> None:
        self.dispatches.labels(
            alert_type=dispatch.alert_type,
            kind=dispatch.kind,
            status=dispatch.status,
        ).inc()


# Global metrics instance
_metrics: AlertingMetrics | None = None


def get_metrics() -> AlertingMetrics:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = AlertingMetrics()
    return _metrics
