"""
Module: conftest.py
Description: Shared pytest fixtures for lease queue tests.

Provides queue configurations for both backends, an in-memory
transport driven by a controllable clock, and moto-backed SQS
clients for fast, isolated tests without AWS access.
"""

import pytest
from moto import mock_aws

from lease_queue.config.settings import QueueConfig
from lease_queue.sqs_queue.client import QueueClient
from lease_queue.sqs_queue.factory import reset_memory_transports
from lease_queue.sqs_queue.memory import InMemoryTransport


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """
    Isolate tests from the developer's environment.

    Removes LEASE_QUEUE_* variables and points boto3 at fake
    credentials so nothing can reach a real AWS account.
    """
    import os

    for key in list(os.environ):
        if key.startswith("LEASE_QUEUE_"):
            monkeypatch.delenv(key, raising=False)

    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture(autouse=True)
def fresh_memory_queues():
    """Start every test with no shared in-memory queues."""
    reset_memory_transports()
    yield
    reset_memory_transports()


@pytest.fixture
def clock():
    """Provide a controllable clock for lease expiry."""
    return FakeClock()


@pytest.fixture
def memory_config():
    """
    Provide configuration for the in-memory backend.

    Long polling is disabled so empty claims return immediately.
    """
    return QueueConfig(
        _env_file=None,
        backend="memory",
        visibility_timeout=30,
        wait_time_seconds=0,
    )


@pytest.fixture
def sqs_config():
    """Provide configuration for the SQS backend with fake credentials."""
    return QueueConfig(
        _env_file=None,
        backend="sqs",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        aws_region="us-east-1",
        visibility_timeout=30,
        wait_time_seconds=0,
    )


@pytest.fixture
def transport(clock):
    """Provide an in-memory transport driven by the fake clock."""
    return InMemoryTransport(clock=clock)


@pytest.fixture
def memory_client(memory_config, transport):
    """Provide a QueueClient for the 'jobs' queue on the in-memory transport."""
    return QueueClient("jobs", memory_config, transport=transport)


@pytest.fixture
def aws_mock():
    """Run the test inside moto's AWS mock."""
    with mock_aws():
        yield


@pytest.fixture
def sqs_client(aws_mock, sqs_config):
    """Provide a QueueClient for the 'jobs' queue on mocked SQS."""
    return QueueClient("jobs", sqs_config)


@pytest.fixture
def sample_payload():
    """Provide a typical composite payload."""
    return {"id": 42, "tags": ["a", "b"]}
