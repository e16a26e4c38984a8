import asyncio

import pytest

from user_service.user_events.builder import assemble_user_info_event
from user_service.user_events.config import Settings
from user_service.user_events.models import GitHubUser
from user_service.user_events.pulsar_client import (
    CircuitBreakerState, EventPublisher
)


EVENT = assemble_user_info_event(GitHubUser(login="ada", id=1815), [], [])


class FakeProducer:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []
        self.closed = False

    def send(self, data, partition_key=None):
        if self.fail:
            raise RuntimeError("broker down")
        self.sent.append((data, partition_key))

    def close(self):
        self.closed = True


class FakePulsarClient:
    def __init__(self, producer):
        self.producer = producer
        self.topics = []
        self.closed = False

    def create_producer(self, topic, **kwargs):
        self.topics.append(topic)
        return self.producer

    def close(self):
        self.closed = True


def _publisher(producer, **overrides):
    settings = Settings(publish_enabled=True, **overrides)
    return EventPublisher(settings, client=FakePulsarClient(producer))


def test_publish_sends_event_json_keyed_by_username():
    producer = FakeProducer()
    publisher = _publisher(producer)
    asyncio.run(publisher.connect())

    assert asyncio.run(publisher.publish(EVENT)) is True

    data, key = producer.sent[0]
    assert key == "ada"
    assert EVENT.meta.event_id.encode() in data
    assert publisher.client.topics == ["evt.user.userInfoChanged.v1"]


def test_publish_without_connection_is_skipped():
    producer = FakeProducer()
    publisher = _publisher(producer)

    assert asyncio.run(publisher.publish(EVENT)) is False
    assert producer.sent == []


def test_circuit_breaker_opens_after_failures():
    producer = FakeProducer(fail=True)
    publisher = _publisher(producer, circuit_breaker_failure_threshold=2)
    asyncio.run(publisher.connect())

    for _ in range(3):
        assert asyncio.run(publisher.publish(EVENT)) is False

    health = publisher.get_health_status()
    assert health["circuit_breaker_state"] == CircuitBreakerState.OPEN.value
    assert health["failure_count"] == 2


def test_disconnect_closes_producer_and_client():
    producer = FakeProducer()
    publisher = _publisher(producer)
    asyncio.run(publisher.connect())

    asyncio.run(publisher.disconnect())

    assert producer.closed
    assert publisher.client.closed
    assert publisher.get_health_status()["connected"] is False


class RefusingPulsarClient(FakePulsarClient):
    def create_producer(self, topic, **kwargs):
        raise RuntimeError("topic not available")


def test_failed_producer_creation_closes_client():
    client = RefusingPulsarClient(FakeProducer())
    publisher = EventPublisher(Settings(publish_enabled=True), client=client)

    with pytest.raises(RuntimeError):
        asyncio.run(publisher.connect())

    assert client.closed
    assert publisher.get_health_status()["connected"] is False
