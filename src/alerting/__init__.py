"""Alert configuration and provider contracts.

Components:
- Alert: Configuration of one alert rule attached to an endpoint
- AlertType / VALID_ALERT_TYPES: Supported provider types
- InvalidAlertDescriptionError: Load-time validation failure
- AlertProvider / DeliveryError: Notification provider contract
- AlertingConfig: Registry of providers keyed by alert type
"""

from src.alerting.alert import (
    DEFAULT_FAILURE_THRESHOLD,
    DEFAULT_SUCCESS_THRESHOLD,
    VALID_ALERT_TYPES,
    Alert,
    AlertType,
    InvalidAlertDescriptionError,
    parse_duration,
)
from src.alerting.config import AlertingConfig
from src.alerting.provider import AlertProvider, DeliveryError

__all__ = [
    "Alert",
    "AlertProvider",
    "AlertType",
    "AlertingConfig",
    "DEFAULT_FAILURE_THRESHOLD",
    "DEFAULT_SUCCESS_THRESHOLD",
    "DeliveryError",
    "InvalidAlertDescriptionError",
    "VALID_ALERT_TYPES",
    "parse_duration",
]
