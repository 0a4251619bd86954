"""
Test configuration and fixtures for the visit counter.
This centralizes all test setup, making individual tests clean.

Every external system is replaced by its in-memory backend, except the
IP info service: the real HttpEnrichmentClient runs against a fake
requests session so URL building and header forwarding are exercised.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from visit_counter_app.bootstrap import AppContext, load_response_text
from visit_counter_app.cache.strategies import InMemoryCounterStore
from visit_counter_app.config import Settings
from visit_counter_app.enrichment.client import HttpEnrichmentClient
from visit_counter_app.main import create_app
from visit_counter_app.queue.strategies import InMemoryQueuePublisher
from visit_counter_app.stream.strategies import InMemoryStreamPublisher


class FakeClock:
    """Monotonic clock that only moves when told to"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeResponse:
    def __init__(self, payload=None, error: Exception = None):
        self.payload = payload
        self.error = error
        self.closed = False

    def json(self):
        if self.error:
            raise self.error
        return self.payload

    def close(self):
        self.closed = True


class FakeSession:
    """
    Stands in for requests.Session.

    Answers {"ip": <ip>, "name": "info for <ip>"} unless a payload,
    a body error or a transport error is set.
    """

    def __init__(self):
        self.calls = []
        self.payload = None
        self.body_error = None
        self.error = None
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        if self.error:
            raise self.error
        if self.body_error:
            return FakeResponse(error=self.body_error)
        if self.payload is not None:
            return FakeResponse(self.payload)
        ip = url.rsplit("/", 1)[-1]
        return FakeResponse({"ip": ip, "name": f"info for {ip}"})

    def close(self):
        self.closed = True


@pytest.fixture
def response_file(tmp_path):
    path = tmp_path / "response.txt"
    path.write_bytes(b"hello ")
    return path


@pytest.fixture
def settings(response_file):
    """Settings wired to the in-memory backends"""
    return Settings(
        _env_file=None,
        port=8080,
        response_file=str(response_file),
        cache_backend="memory",
        queue_backend="memory",
        stream_backend="memory",
        sqs_queue_name="visits",
        kafka_topic="visits",
        ip_info_address="http://ipinfo.test",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def enrichment_session():
    return FakeSession()


@pytest.fixture
def context(settings, clock, enrichment_session):
    """A fully wired AppContext; tests may swap any member"""
    queue = InMemoryQueuePublisher()
    destination = asyncio.run(queue.resolve(settings.sqs_queue_name))
    return AppContext(
        settings=settings,
        counter_store=InMemoryCounterStore(clock=clock),
        queue=queue,
        queue_destination=destination,
        stream=InMemoryStreamPublisher(),
        enrichment=HttpEnrichmentClient(settings.ip_info_address, session=enrichment_session),
        response_text=load_response_text(settings.response_file),
    )


@pytest.fixture
def client(context):
    """
    Create a test client around the prebuilt context.
    This is the main fixture that tests will use.
    """
    with TestClient(create_app(context=context)) as test_client:
        yield test_client
