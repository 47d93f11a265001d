"""Pytest configuration and fixtures."""

import pytest
import threading
from typing import List, Optional, Tuple

from kafka_topic_broker.models.service_broker import ServiceInstance, ServiceBinding
from kafka_topic_broker.services.base import TopicAdmin
from kafka_topic_broker.services.kafka_broker import KafkaBroker


class FakeTopicAdmin(TopicAdmin):
    """Call-recording TopicAdmin double."""

    def __init__(self, bootstrap_servers: str = "broker1:9092"):
        self.bootstrap_servers = bootstrap_servers
        self.calls: List[Tuple[str, Optional[str]]] = []
        self.create_error: Optional[Exception] = None
        self.delete_error: Optional[Exception] = None
        self.endpoint_error: Optional[Exception] = None
        self.closed = False

    def create_topic(self, name: str) -> None:
        self.calls.append(('create_topic', name))
        if self.create_error:
            raise self.create_error

    def delete_topic(self, name: str) -> None:
        self.calls.append(('delete_topic', name))
        if self.delete_error:
            raise self.delete_error

    def get_bootstrap_servers(self) -> str:
        self.calls.append(('get_bootstrap_servers', None))
        if self.endpoint_error:
            raise self.endpoint_error
        return self.bootstrap_servers

    def close(self) -> None:
        self.closed = True

    def mutating_calls(self) -> List[Tuple[str, Optional[str]]]:
        return [call for call in self.calls if call[0] != 'get_bootstrap_servers']


class BlockingTopicAdmin(FakeTopicAdmin):
    """Admin double whose calls park until the test releases them."""

    def __init__(self):
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def create_topic(self, name: str) -> None:
        super().create_topic(name)
        self.entered.set()
        self.release.wait(timeout=5)

    def delete_topic(self, name: str) -> None:
        super().delete_topic(name)
        self.entered.set()
        self.release.wait(timeout=5)


@pytest.fixture
def fake_admin():
    """Topic admin double recording every call."""
    return FakeTopicAdmin()


@pytest.fixture
def broker(fake_admin):
    """Kafka broker over the admin double."""
    return KafkaBroker(fake_admin)


@pytest.fixture
def instance():
    """Service instance without a topic name."""
    return ServiceInstance(id="abc-123", service_id="kafka-topic", plan_id="standard")


@pytest.fixture
def named_instance():
    """Service instance with an explicit topic name."""
    return ServiceInstance(id="inst-1", parameters={"topicName": "orders"})


@pytest.fixture
def binding():
    """Service binding for a sample application."""
    return ServiceBinding(id="binding-1", app_guid="app-42")


@pytest.fixture
def blocking_admin():
    """Topic admin double that parks create/delete calls until released."""
    return BlockingTopicAdmin()
