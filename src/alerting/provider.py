"""Alert provider contract.

A provider delivers notifications for one alert type (Slack, PagerDuty,
e-mail, ...). Concrete transports live outside this package; the
evaluator only needs ``send`` and the optional provider-level default
alert.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from src.alerting.alert import Alert

if TYPE_CHECKING:
    from src.core.schemas import Endpoint, Result


class DeliveryError(Exception):
    """Raised by a provider when a notification could not be delivered."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class AlertProvider(ABC):
    """Abstract base for notification providers.

    Args:
        default_alert: Optional alert whose values fill in the fields that
            endpoint alerts of this provider's type leave unset.
    """

    def __init__(self, default_alert: Alert | None = None) -> None:
        self._default_alert = default_alert

    @property
    def default_alert(self) -> Alert | None:
        return self._default_alert

    def is_valid(self) -> bool:
        """Whether the provider is configured well enough to send."""
        return True

    @abstractmethod
    async def send(
        self,
        endpoint: "Endpoint",
        alert: Alert,
        result: "Result",
        resolved: bool,
    ) -> None:
        """Deliver a notification.

        Args:
            endpoint: Endpoint the alert belongs to.
            alert: Alert configuration being notified.
            result: Check result that caused the notification.
            resolved: True for a resolution notification, False for a
                trigger or reminder.

        Raises:
            DeliveryError: If delivery failed. Any other exception is
                treated the same way by the evaluator.
        """
