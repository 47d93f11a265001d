"""Kafka admin client backing the topic broker."""

import logging
import threading
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field

from kafka import KafkaAdminClient
from kafka.admin import NewTopic
from kafka.errors import TopicAlreadyExistsError, UnknownTopicOrPartitionError

from kafka_topic_broker.config import KafkaConfig, config
from kafka_topic_broker.exceptions import ConfigurationError, TopicNotFoundError, wrap_kafka_error
from kafka_topic_broker.services.base import TopicAdmin

logger = logging.getLogger(__name__)


@dataclass
class ClientConfig:
    """Kafka admin client configuration."""
    bootstrap_servers: List[str] = field(default_factory=list)
    client_id: str = 'kafka-topic-broker'
    security_protocol: str = 'PLAINTEXT'
    request_timeout_ms: int = 30000
    default_partitions: int = 3
    default_replication_factor: int = 1

    @classmethod
    def from_kafka_config(cls, kafka_config: KafkaConfig) -> 'ClientConfig':
        return cls(
            bootstrap_servers=list(kafka_config.bootstrap_servers),
            client_id=kafka_config.client_id,
            security_protocol=kafka_config.security_protocol,
            request_timeout_ms=kafka_config.request_timeout_ms,
            default_partitions=kafka_config.default_partitions,
            default_replication_factor=kafka_config.default_replication_factor
        )


class KafkaTopicAdmin(TopicAdmin):
    """TopicAdmin over kafka-python's KafkaAdminClient.

    The underlying client is created on first use so the broker can start
    before the cluster is reachable.
    """

    def __init__(self, client_config: Optional[ClientConfig] = None):
        self.client_config = client_config or ClientConfig.from_kafka_config(config.kafka)
        self.lock = threading.Lock()
        self._admin_client: Optional[KafkaAdminClient] = None

    def get_admin_client(self) -> KafkaAdminClient:
        """Get or create the Kafka admin client."""
        with self.lock:
            if self._admin_client is None:
                self._admin_client = KafkaAdminClient(**self._build_client_config())
                logger.debug(f"Created admin client for {self.get_bootstrap_servers()}")
            return self._admin_client

    def _build_client_config(self) -> Dict[str, Any]:
        if not self.client_config.bootstrap_servers:
            raise ConfigurationError("No Kafka bootstrap servers configured", config_key='bootstrap_servers')

        return {
            'bootstrap_servers': self.client_config.bootstrap_servers,
            'client_id': self.client_config.client_id,
            'security_protocol': self.client_config.security_protocol,
            'request_timeout_ms': self.client_config.request_timeout_ms
        }

    @wrap_kafka_error
    def create_topic(self, name: str) -> None:
        """Create a topic with the configured partition and replication defaults.

        A topic that already exists counts as created.
        """
        topic_spec = NewTopic(
            name=name,
            num_partitions=self.client_config.default_partitions,
            replication_factor=self.client_config.default_replication_factor
        )

        try:
            self.get_admin_client().create_topics(
                [topic_spec], timeout_ms=self.client_config.request_timeout_ms
            )
            logger.info(f"Successfully created topic {name}")
        except TopicAlreadyExistsError:
            logger.warning(f"Topic {name} already exists")

    @wrap_kafka_error
    def delete_topic(self, name: str) -> None:
        """Delete a topic.

        Raises:
            TopicNotFoundError: the topic does not exist.
        """
        try:
            self.get_admin_client().delete_topics(
                [name], timeout_ms=self.client_config.request_timeout_ms
            )
            logger.info(f"Successfully deleted topic {name}")
        except UnknownTopicOrPartitionError as e:
            raise TopicNotFoundError(name) from e

    def get_bootstrap_servers(self) -> str:
        """Comma-separated bootstrap servers handed to bound applications."""
        if not self.client_config.bootstrap_servers:
            raise ConfigurationError("No Kafka bootstrap servers configured", config_key='bootstrap_servers')
        return ','.join(self.client_config.bootstrap_servers)

    def close(self):
        """Close the underlying admin client."""
        with self.lock:
            if self._admin_client is not None:
                try:
                    self._admin_client.close()
                except Exception as e:
                    logger.warning(f"Error closing Kafka admin client: {e}")
                self._admin_client = None
