"""Alerting configuration: the registry of providers by alert type."""

import logging

from src.alerting.alert import VALID_ALERT_TYPES, Alert
from src.alerting.provider import AlertProvider

logger = logging.getLogger(__name__)


class AlertingConfig:
    """Providers configured for this process, keyed by alert type.

    Providers that report themselves invalid are not registered, so
    alerts of their type behave as if no provider was configured.

    Args:
        providers: Optional initial mapping of alert type to provider.
    """

    def __init__(self, providers: dict[str, AlertProvider] | None = None) -> None:
        self._providers: dict[str, AlertProvider] = {}
        for alert_type, provider in (providers or {}).items():
            self.register(alert_type, provider)

    @property
    def provider_types(self) -> list[str]:
        """Alert types that have a registered provider."""
        return sorted(self._providers)

    def register(self, alert_type: str, provider: AlertProvider) -> None:
        """Register a provider for an alert type.

        Args:
            alert_type: One of ``VALID_ALERT_TYPES``.
            provider: Provider handling that type.

        Raises:
            ValueError: If the alert type is unknown.
        """
        if alert_type not in VALID_ALERT_TYPES:
            raise ValueError(
                f"Invalid alert type {alert_type!r}. "
                f"Must be one of: {sorted(VALID_ALERT_TYPES)}"
            )
        if not provider.is_valid():
            logger.warning(
                "Ignoring provider for alert type=%s: invalid configuration",
                alert_type,
            )
            self._providers.pop(alert_type, None)
            return
        self._providers[alert_type] = provider

    def get_provider_by_alert_type(self, alert_type: str) -> AlertProvider | None:
        return self._providers.get(alert_type)

    def apply_default_alerts(self, alerts: list[Alert]) -> None:
        """Merge each provider's default alert into alerts of its type."""
        for alert in alerts:
            provider = self._providers.get(alert.type)
            if provider is not None:
                alert.merge_default_alert(provider.default_alert)
