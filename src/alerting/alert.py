"""Alert rule configuration.

An ``Alert`` binds an endpoint to a notification provider. It is pure
configuration: runtime incident state (whether the alert is currently
triggered, the provider's resolve key) lives in
``src.core.schemas.AlertState`` so that reloading configuration never
resets an ongoing incident.

Tri-state fields (``enabled``, ``send_on_resolved``, ``description``)
are ``None`` when not configured. This lets a provider's default alert
fill in only what the endpoint left unset (see ``merge_default_alert``).
"""

import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Literal

DEFAULT_FAILURE_THRESHOLD = 3
DEFAULT_SUCCESS_THRESHOLD = 2

AlertType = Literal[
    "custom",
    "discord",
    "email",
    "github",
    "gitlab",
    "googlechat",
    "gotify",
    "jetbrainsspace",
    "matrix",
    "mattermost",
    "messagebird",
    "ntfy",
    "opsgenie",
    "pagerduty",
    "pushover",
    "slack",
    "teams",
    "telegram",
    "twilio",
]

VALID_ALERT_TYPES: frozenset[str] = frozenset({
    "custom",
    "discord",
    "email",
    "github",
    "gitlab",
    "googlechat",
    "gotify",
    "jetbrainsspace",
    "matrix",
    "mattermost",
    "messagebird",
    "ntfy",
    "opsgenie",
    "pagerduty",
    "pushover",
    "slack",
    "teams",
    "telegram",
    "twilio",
})

# Characters that break templated provider payloads
_INVALID_DESCRIPTION_CHARS = frozenset('"\\')

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


class InvalidAlertDescriptionError(ValueError):
    """Raised when an alert description contains ``"`` or ``\\``."""

    def __init__(self, description: str) -> None:
        super().__init__(
            f"alert description must not have \" or \\ (got {description!r})"
        )
        self.description = description


def parse_duration(value: Any) -> timedelta:
    """Parse a repeat interval into a timedelta.

    Accepts a ``timedelta``, a number of seconds, or a duration string
    made of ``<number><unit>`` parts (units ``h``, ``m``, ``s``, ``ms``),
    e.g. ``"90s"``, ``"10m"``, ``"1h30m"``.

    Args:
        value: Raw configured value. ``None`` means no interval.

    Returns:
        Non-negative timedelta.

    Raises:
        ValueError: If the value cannot be parsed or is negative.
    """
    if value is None:
        return timedelta(0)
    if isinstance(value, timedelta):
        if value < timedelta(0):
            raise ValueError(f"Negative duration: {value!r}")
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValueError(f"Negative duration: {value!r}")
        return timedelta(seconds=value)

    text = str(value).strip().lower()
    if not text or text == "0":
        return timedelta(0)

    position = 0
    total_seconds = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total_seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()
    if position != len(text):
        raise ValueError(f"Invalid duration: {value!r}")
    return timedelta(seconds=total_seconds)


def _format_duration(interval: timedelta) -> str:
    seconds = int(interval.total_seconds())
    if seconds and seconds % 3600 == 0:
        return f"{seconds // 3600}h"
    if seconds and seconds % 60 == 0:
        return f"{seconds // 60}m"
    return f"{seconds}s"


def _first_present(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass
class Alert:
    """Configuration of one alert attached to an endpoint.

    Attributes:
        type: Provider that handles this alert (required).
        enabled: Whether the alert is active. Unset means enabled.
        failure_threshold: Failures in a row before the alert triggers.
        success_threshold: Successes in a row before a triggered alert
            is resolved.
        description: Free text included in outgoing notifications.
        send_on_resolved: Whether a resolution notification is sent.
            Unset means no.
        minimum_repeat_interval: Minimum time between reminders for an
            ongoing incident. Zero disables reminders.
    """

    type: str
    enabled: bool | None = None
    failure_threshold: int = 0
    success_threshold: int = 0
    description: str | None = None
    send_on_resolved: bool | None = None
    minimum_repeat_interval: timedelta = field(default_factory=timedelta)

    def __post_init__(self) -> None:
        if not self.type:
            raise ValueError("Alert type is required")
        if self.type not in VALID_ALERT_TYPES:
            raise ValueError(
                f"Invalid alert type {self.type!r}. "
                f"Must be one of: {sorted(VALID_ALERT_TYPES)}"
            )
        self.minimum_repeat_interval = parse_duration(self.minimum_repeat_interval)

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the alert within its endpoint."""
        return (self.type, self.get_description())

    def validate_and_set_defaults(self) -> None:
        """Apply threshold defaults, then validate the description.

        Only non-positive thresholds are overwritten, so calling this
        again on an already-defaulted alert changes nothing.

        Raises:
            InvalidAlertDescriptionError: If the description contains
                ``"`` or ``\\``.
        """
        if self.failure_threshold <= 0:
            self.failure_threshold = DEFAULT_FAILURE_THRESHOLD
        if self.success_threshold <= 0:
            self.success_threshold = DEFAULT_SUCCESS_THRESHOLD
        description = self.get_description()
        if _INVALID_DESCRIPTION_CHARS.intersection(description):
            raise InvalidAlertDescriptionError(description)

    def get_description(self) -> str:
        return self.description if self.description is not None else ""

    def is_enabled(self) -> bool:
        return True if self.enabled is None else self.enabled

    def is_sending_on_resolved(self) -> bool:
        return False if self.send_on_resolved is None else self.send_on_resolved

    def merge_default_alert(self, default: "Alert | None") -> None:
        """Fill unset fields from a provider's default alert.

        Values explicitly configured on this alert, including an explicit
        ``False`` or empty description, are kept.

        Args:
            default: The provider's default alert, or None.
        """
        if default is None:
            return
        if self.enabled is None:
            self.enabled = default.enabled
        if self.send_on_resolved is None:
            self.send_on_resolved = default.send_on_resolved
        if self.description is None:
            self.description = default.description
        if self.failure_threshold == 0:
            self.failure_threshold = default.failure_threshold
        if self.success_threshold == 0:
            self.success_threshold = default.success_threshold
        if not self.minimum_repeat_interval:
            self.minimum_repeat_interval = default.minimum_repeat_interval

    def to_dict(self) -> dict[str, Any]:
        """Convert to a mapping using configuration key names."""
        return {
            "type": self.type,
            "enabled": self.enabled,
            "failure-threshold": self.failure_threshold,
            "success-threshold": self.success_threshold,
            "description": self.description,
            "send-on-resolved": self.send_on_resolved,
            "minimum-repeat-interval": _format_duration(self.minimum_repeat_interval),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Alert":
        """Create an Alert from an already-decoded configuration mapping.

        Both dashed (``failure-threshold``) and underscored
        (``failure_threshold``) key spellings are accepted.

        Args:
            data: Mapping with alert fields.

        Returns:
            Alert instance. Defaults are not applied yet; call
            ``validate_and_set_defaults`` before use.
        """
        failure_threshold = _first_present(data, "failure-threshold", "failure_threshold")
        success_threshold = _first_present(data, "success-threshold", "success_threshold")
        return cls(
            type=data.get("type") or "",
            enabled=data.get("enabled"),
            failure_threshold=int(failure_threshold or 0),
            success_threshold=int(success_threshold or 0),
            description=data.get("description"),
            send_on_resolved=_first_present(data, "send-on-resolved", "send_on_resolved"),
            minimum_repeat_interval=parse_duration(
                _first_present(data, "minimum-repeat-interval", "minimum_repeat_interval")
            ),
        )
