"""Endpoint, check result, and per-alert runtime state.

``Endpoint`` owns the mutable streak counters and reminder timestamp
that the alert evaluator updates on every check cycle. Runtime state of
each alert is kept in ``Endpoint.alert_states``, keyed by ``Alert.key``,
separate from the alert configuration itself.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from src.alerting.alert import Alert

_KEY_REPLACED_CHARS = ("/", "_", ",", ".", "#", " ")


class DuplicateAlertError(ValueError):
    """Raised when two alerts of one endpoint share the same identity."""


def _sanitize(value: str) -> str:
    sanitized = value.strip().lower()
    for char in _KEY_REPLACED_CHARS:
        sanitized = sanitized.replace(char, "-")
    return sanitized


def endpoint_key(group: str, name: str) -> str:
    """Build the unique key of an endpoint from its group and name."""
    return f"{_sanitize(group)}_{_sanitize(name)}"


@dataclass
class AlertState:
    """Runtime state of one alert.

    Attributes:
        triggered: True once the initial notification was delivered and
            the incident has not been resolved since.
        resolve_key: Correlation key some providers store on trigger and
            reuse on resolution (e.g. a PagerDuty dedup key).
    """

    triggered: bool = False
    resolve_key: str = ""


@dataclass
class Result:
    """Outcome of one health check of an endpoint."""

    success: bool
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    duration: timedelta | None = None
    hostname: str = ""
    errors: list[str] = field(default_factory=list)


@dataclass
class Endpoint:
    """A monitored endpoint and its alerting state.

    Attributes:
        name: Endpoint name (required).
        group: Optional group the endpoint belongs to.
        alerts: Alerts configured for the endpoint, in evaluation order.
        number_of_successes_in_a_row: Current success streak.
        number_of_failures_in_a_row: Current failure streak.
        last_reminder_sent: When the last trigger or reminder was
            delivered for any alert of this endpoint. None if never.
        alert_states: Runtime state per alert, keyed by ``Alert.key``.
    """

    name: str
    group: str = ""
    alerts: list[Alert] = field(default_factory=list)
    number_of_successes_in_a_row: int = 0
    number_of_failures_in_a_row: int = 0
    last_reminder_sent: datetime | None = None
    alert_states: dict[tuple[str, str], AlertState] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return endpoint_key(self.group, self.name)

    def state_for(self, alert: Alert) -> AlertState:
        """Get the runtime state of an alert, creating it on first use."""
        state = self.alert_states.get(alert.key)
        if state is None:
            state = AlertState()
            self.alert_states[alert.key] = state
        return state

    def validate_and_set_defaults(self) -> None:
        """Validate the endpoint and apply defaults to each of its alerts.

        Raises:
            ValueError: If the endpoint has no name.
            InvalidAlertDescriptionError: If an alert description is invalid.
            DuplicateAlertError: If two alerts share type and description.
        """
        if not self.name:
            raise ValueError("Endpoint name is required")
        self._validate_alerts(self.alerts)

    def _validate_alerts(self, alerts: list[Alert]) -> None:
        seen: set[tuple[str, str]] = set()
        for alert in alerts:
            alert.validate_and_set_defaults()
            if alert.key in seen:
                raise DuplicateAlertError(
                    f"Endpoint {self.key} has more than one {alert.type} alert "
                    f"with description {alert.get_description()!r}"
                )
            seen.add(alert.key)

    def reload_alerts(self, alerts: list[Alert]) -> None:
        """Replace the alert configuration, keeping surviving incident state.

        The new alerts are validated and defaulted first, so their
        identity is final before it is compared; provider default alerts
        must already be merged in (see ``AlertingService.reload_endpoint``).
        State of alerts whose identity is still present is kept as-is;
        state of removed alerts is dropped. On a validation error the
        endpoint is left unchanged.

        Args:
            alerts: New alert configuration.

        Raises:
            InvalidAlertDescriptionError: If an alert description is invalid.
            DuplicateAlertError: If two alerts share type and description.
        """
        self._validate_alerts(alerts)
        keys = {alert.key for alert in alerts}
        self.alerts = list(alerts)
        self.alert_states = {
            key: state for key, state in self.alert_states.items() if key in keys
        }
