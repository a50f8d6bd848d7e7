"""Pytest fixtures for uptime-sentinel tests."""

from datetime import datetime, timedelta, timezone

import pytest

from src.alerting.alert import Alert
from src.alerting.config import AlertingConfig
from src.alerting.provider import AlertProvider, DeliveryError
from src.config.settings import Settings
from src.core.schemas import Endpoint, Result


class RecordingProvider(AlertProvider):
    """Provider that records every send and can be told to fail."""

    def __init__(self, default_alert: Alert | None = None, valid: bool = True) -> None:
        super().__init__(default_alert=default_alert)
        self.calls: list[tuple[Endpoint, Alert, Result, bool]] = []
        self.fail = False
        self._valid = valid

    def is_valid(self) -> bool:
        return self._valid

    async def send(self, endpoint, alert, result, resolved):
        self.calls.append((endpoint, alert, result, resolved))
        if self.fail:
            raise DeliveryError("provider returned 500", provider="recording")

    @property
    def trigger_calls(self) -> int:
        return sum(1 for *_, resolved in self.calls if not resolved)

    @property
    def resolve_calls(self) -> int:
        return sum(1 for *_, resolved in self.calls if resolved)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        alerting_enabled=True,
        alerting_debug=True,
    )


@pytest.fixture
def provider() -> RecordingProvider:
    return RecordingProvider()


@pytest.fixture
def make_provider():
    """Factory for additional providers (e.g. with a default alert)."""
    return RecordingProvider


@pytest.fixture
def alerting_config(provider) -> AlertingConfig:
    return AlertingConfig(providers={"slack": provider})


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 2, 7, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def make_endpoint():
    """Build a validated endpoint with the given alerts."""

    def _make(*alerts: Alert, name: str = "api", group: str = "core") -> Endpoint:
        endpoint = Endpoint(name=name, group=group, alerts=list(alerts))
        endpoint.validate_and_set_defaults()
        return endpoint

    return _make


@pytest.fixture
def failure() -> Result:
    return Result(success=False, errors=["connection refused"])


@pytest.fixture
def success() -> Result:
    return Result(success=True)
