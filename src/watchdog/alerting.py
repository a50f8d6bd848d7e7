"""Alert lifecycle evaluation.

Turns the outcome of one health check into trigger, reminder, and
resolution notifications for each alert of the endpoint.

Delivery failures are handled asymmetrically:

- Trigger side: state is only advanced after a successful send. A
  failed initial notification leaves the alert untriggered, so the same
  send is attempted again on the next failing check (lazy retry).
- Resolve side: the alert is marked resolved *before* the resolution
  notification is sent, and a failed resolution is never retried.

Provider errors are logged and reported in the returned dispatches;
they never propagate to the caller.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Literal

from src.alerting.alert import Alert
from src.alerting.config import AlertingConfig
from src.core.schemas import Endpoint, Result

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

DispatchKind = Literal["initial", "reminder", "resolved"]
DispatchStatus = Literal["sent", "failed", "provider_unavailable"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AlertDispatch:
    """Record of one notification attempt made during an evaluation.

    Attributes:
        endpoint_key: Key of the endpoint the alert belongs to.
        alert_type: Provider type of the alert.
        description: Alert description (empty if unset).
        kind: initial, reminder, or resolved.
        status: sent, failed, or provider_unavailable.
        error: Error message when the send failed.
    """

    endpoint_key: str
    alert_type: str
    description: str
    kind: DispatchKind
    status: DispatchStatus
    error: str | None = None


def _dispatch(
    endpoint: Endpoint,
    alert: Alert,
    kind: DispatchKind,
    status: DispatchStatus,
    error: str | None = None,
) -> AlertDispatch:
    return AlertDispatch(
        endpoint_key=endpoint.key,
        alert_type=alert.type,
        description=alert.get_description(),
        kind=kind,
        status=status,
        error=error,
    )


async def handle_alerting(
    endpoint: Endpoint,
    result: Result,
    alerting_config: AlertingConfig | None,
    debug: bool = False,
    clock: Clock | None = None,
) -> list[AlertDispatch]:
    """Evaluate the alerts of an endpoint against a check result.

    Calls for the same endpoint must not overlap; see
    ``AlertingService.process_result``.

    Args:
        endpoint: Endpoint whose streaks and alert states are updated.
        result: Outcome of the latest check.
        alerting_config: Provider registry. None disables alerting and
            makes this a no-op.
        debug: Log alerts that are skipped because nothing is due.
        clock: Returns the current time (defaults to UTC now).

    Returns:
        Dispatches attempted during this evaluation, in alert order.
    """
    if alerting_config is None:
        return []
    clock = clock or _utcnow
    if result.success:
        return await _handle_alerts_to_resolve(endpoint, result, alerting_config, debug)
    return await _handle_alerts_to_trigger(endpoint, result, alerting_config, debug, clock)


def _is_reminder_due(endpoint: Endpoint, alert: Alert, now: datetime) -> bool:
    if alert.minimum_repeat_interval <= timedelta(0):
        return False
    if endpoint.last_reminder_sent is None:
        return True
    return now - endpoint.last_reminder_sent >= alert.minimum_repeat_interval


async def _handle_alerts_to_trigger(
    endpoint: Endpoint,
    result: Result,
    alerting_config: AlertingConfig,
    debug: bool,
    clock: Clock,
) -> list[AlertDispatch]:
    endpoint.number_of_successes_in_a_row = 0
    endpoint.number_of_failures_in_a_row += 1
    dispatches: list[AlertDispatch] = []

    for alert in endpoint.alerts:
        if not alert.is_enabled() or alert.failure_threshold > endpoint.number_of_failures_in_a_row:
            continue
        state = endpoint.state_for(alert)
        send_initial = not state.triggered
        send_reminder = state.triggered and _is_reminder_due(endpoint, alert, clock())
        if not send_initial and not send_reminder:
            if debug:
                logger.info(
                    "Alert for endpoint=%s with description='%s' is not due for triggering or reminding, skipping",
                    endpoint.key, alert.get_description(),
                )
            continue

        kind: DispatchKind = "initial" if send_initial else "reminder"
        provider = alerting_config.get_provider_by_alert_type(alert.type)
        if provider is None:
            logger.warning(
                "Not sending alert of type=%s despite being TRIGGERED, because the provider wasn't configured properly",
                alert.type,
            )
            dispatches.append(_dispatch(endpoint, alert, kind, "provider_unavailable"))
            continue

        logger.info(
            "Sending %s %s alert because alert for endpoint=%s with description='%s' has been TRIGGERED",
            kind, alert.type, endpoint.key, alert.get_description(),
        )
        try:
            await provider.send(endpoint, alert, result, False)
        except Exception as e:
            # State is left as-is so the next failing check retries
            logger.warning(
                "Failed to send %s alert for endpoint=%s with description='%s': %s",
                kind, endpoint.key, alert.get_description(), e,
            )
            dispatches.append(_dispatch(endpoint, alert, kind, "failed", str(e)))
            continue

        if send_initial:
            state.triggered = True
        endpoint.last_reminder_sent = clock()
        dispatches.append(_dispatch(endpoint, alert, kind, "sent"))

    return dispatches


async def _handle_alerts_to_resolve(
    endpoint: Endpoint,
    result: Result,
    alerting_config: AlertingConfig,
    debug: bool,
) -> list[AlertDispatch]:
    endpoint.number_of_successes_in_a_row += 1
    dispatches: list[AlertDispatch] = []

    for alert in endpoint.alerts:
        state = endpoint.state_for(alert)
        if (
            not alert.is_enabled()
            or not state.triggered
            or alert.success_threshold > endpoint.number_of_successes_in_a_row
        ):
            continue
        # Resolved regardless of whether the notification below goes through
        state.triggered = False
        if not alert.is_sending_on_resolved():
            if debug:
                logger.info(
                    "Alert for endpoint=%s with description='%s' has been RESOLVED without notification",
                    endpoint.key, alert.get_description(),
                )
            continue

        provider = alerting_config.get_provider_by_alert_type(alert.type)
        if provider is None:
            logger.warning(
                "Not sending alert of type=%s despite being RESOLVED, because the provider wasn't configured properly",
                alert.type,
            )
            dispatches.append(_dispatch(endpoint, alert, "resolved", "provider_unavailable"))
            continue

        logger.info(
            "Sending %s alert because alert for endpoint=%s with description='%s' has been RESOLVED",
            alert.type, endpoint.key, alert.get_description(),
        )
        try:
            await provider.send(endpoint, alert, result, True)
        except Exception as e:
            logger.warning(
                "Failed to send resolved alert for endpoint=%s with description='%s': %s",
                endpoint.key, alert.get_description(), e,
            )
            dispatches.append(_dispatch(endpoint, alert, "resolved", "failed", str(e)))
            continue
        dispatches.append(_dispatch(endpoint, alert, "resolved", "sent"))

    endpoint.number_of_failures_in_a_row = 0
    return dispatches
