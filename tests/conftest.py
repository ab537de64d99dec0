"""
Shared fixtures for the job board tests.

No test touches the network: every source client is built on an
`httpx.MockTransport` routed through `FakeUpstream`.
"""

import pytest

from jobboard.config import Settings

from payloads import FakeUpstream


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Keep real credentials out of the tests."""
    for var in ("JOBBOARD_USAJOBS_API_KEY", "JOBBOARD_ADZUNA_APP_ID", "JOBBOARD_ADZUNA_APP_KEY"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def settings():
    """Settings with USAJOBS configured, Adzuna not, and no retry delay."""
    return Settings(
        _env_file=None,
        usajobs_api_key="test-key",
        usajobs_user_agent="jobs@example.com",
        retry_backoff_s=0,
        source_timeout_s=2.0,
    )


@pytest.fixture
def adzuna_settings():
    return Settings(
        _env_file=None,
        usajobs_api_key="test-key",
        adzuna_app_id="app-id",
        adzuna_app_key="app-key",
        retry_backoff_s=0,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream():
    return FakeUpstream()
