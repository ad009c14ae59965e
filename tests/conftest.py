import os

import pytest
from unittest.mock import MagicMock, patch

from servicelog import tracking


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate tests from SERVICELOG_* variables in the host environment."""
    for key in list(os.environ):
        if key.startswith("SERVICELOG_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SERVICELOG_ENV", "localhost")
    yield


@pytest.fixture(autouse=True)
def reset_error_tracking():
    """The Sentry binding is process-wide; start every test without one."""
    tracking.reset()
    yield
    tracking.reset()


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setenv("SERVICELOG_ENV", "production")
    return "production"


@pytest.fixture
def cloudwatch_client():
    """Patch boto3 so CloudWatchSink never builds a real client."""
    client = MagicMock(name="logs-client")
    with patch("servicelog.sinks.boto3.client", return_value=client) as factory:
        client.factory = factory
        yield client


@pytest.fixture
def sentry():
    with patch("servicelog.tracking.sentry_sdk") as sdk:
        yield sdk
