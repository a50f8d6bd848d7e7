"""Alert lifecycle evaluation for monitored endpoints.

Components:
- handle_alerting: Evaluate one check result against an endpoint's alerts
- AlertDispatch: Record of a notification attempt
- AlertingService: Per-endpoint serialization, registration, and metrics
"""

from src.watchdog.alerting import AlertDispatch, handle_alerting
from src.watchdog.service import AlertingService

__all__ = ["AlertDispatch", "AlertingService", "handle_alerting"]
