"""Alerting service wiring the evaluator to settings, metrics, and locking.

The evaluator mutates per-endpoint state (streaks, alert states,
reminder timestamp), so evaluations of one endpoint are serialized with
an ``asyncio.Lock`` keyed by ``Endpoint.key``. Different endpoints share
no state and are evaluated concurrently.
"""

import asyncio
import logging

from src.alerting.alert import Alert
from src.alerting.config import AlertingConfig
from src.config.settings import Settings, get_settings
from src.core.schemas import Endpoint, Result
from src.observability.logging import bound_context
from src.observability.metrics import AlertingMetrics, get_metrics
from src.watchdog.alerting import AlertDispatch, Clock, handle_alerting

logger = logging.getLogger(__name__)


class AlertingService:
    """Entry point used by the check scheduler.

    Args:
        alerting_config: Provider registry. None disables alerting.
        settings: Application settings (defaults to cached settings).
        metrics: Metrics collector (defaults to the global collector).
        clock: Optional clock passed through to the evaluator.
    """

    def __init__(
        self,
        alerting_config: AlertingConfig | None,
        settings: Settings | None = None,
        metrics: AlertingMetrics | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._alerting_config = alerting_config
        self._settings = settings or get_settings()
        self._metrics = metrics or get_metrics()
        self._clock = clock
        self._locks: dict[str, asyncio.Lock] = {}

    def register_endpoint(self, endpoint: Endpoint) -> None:
        """Prepare an endpoint's alerts before its first evaluation.

        Applies provider default alerts, then validates the endpoint and
        sets alert defaults. Configuration errors propagate to the caller.

        Args:
            endpoint: Endpoint loaded from configuration.
        """
        if self._alerting_config is not None:
            self._alerting_config.apply_default_alerts(endpoint.alerts)
        endpoint.validate_and_set_defaults()
        logger.debug(
            "Registered endpoint=%s with %d alert(s)",
            endpoint.key, len(endpoint.alerts),
        )

    async def reload_endpoint(self, endpoint: Endpoint, alerts: list[Alert]) -> None:
        """Replace an endpoint's alerts after a configuration reload.

        Provider default alerts are merged into the new alerts before
        they are compared with the current ones, so an alert whose
        configuration did not change keeps its identity and its incident
        state. Waits for any in-flight evaluation of the endpoint.

        Args:
            endpoint: Registered endpoint.
            alerts: New alert configuration for the endpoint.

        Raises:
            InvalidAlertDescriptionError: If an alert description is invalid.
            DuplicateAlertError: If two alerts share type and description.
        """
        if self._alerting_config is not None:
            self._alerting_config.apply_default_alerts(alerts)
        async with self._lock_for(endpoint):
            endpoint.reload_alerts(alerts)
        logger.debug(
            "Reloaded endpoint=%s with %d alert(s)",
            endpoint.key, len(endpoint.alerts),
        )

    def unregister_endpoint(self, endpoint: Endpoint) -> None:
        """Forget an endpoint that was removed from the configuration."""
        self._locks.pop(endpoint.key, None)
        logger.debug("Unregistered endpoint=%s", endpoint.key)

    def _lock_for(self, endpoint: Endpoint) -> asyncio.Lock:
        lock = self._locks.get(endpoint.key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[endpoint.key] = lock
        return lock

    async def process_result(
        self,
        endpoint: Endpoint,
        result: Result,
    ) -> list[AlertDispatch]:
        """Evaluate one check result for an endpoint.

        Args:
            endpoint: Endpoint that was checked.
            result: Outcome of the check.

        Returns:
            Dispatches attempted during the evaluation.
        """
        if not self._settings.alerting_enabled:
            return []

        async with self._lock_for(endpoint):
            with bound_context(endpoint=endpoint.key):
                dispatches = await handle_alerting(
                    endpoint,
                    result,
                    self._alerting_config,
                    debug=self._settings.alerting_debug,
                    clock=self._clock,
                )

        self._metrics.record_evaluation(result.success)
        for dispatch in dispatches:
            self._metrics.record_dispatch(dispatch)
        return dispatches

    async def process_results(
        self,
        outcomes: list[tuple[Endpoint, Result]],
    ) -> list[list[AlertDispatch]]:
        """Evaluate a batch of results concurrently.

        Results for the same endpoint are still applied in list order.

        Args:
            outcomes: (endpoint, result) pairs.

        Returns:
            Dispatches per outcome, in input order.
        """
        return list(await asyncio.gather(
            *(self.process_result(endpoint, result) for endpoint, result in outcomes)
        ))
