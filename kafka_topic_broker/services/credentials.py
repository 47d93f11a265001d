"""Binding credential composition."""

import logging

from kafka_topic_broker.exceptions import CredentialsError
from kafka_topic_broker.models.service_broker import (
    ServiceInstance, ServiceBinding, CredentialSet, TOPIC_NAME_KEY
)
from kafka_topic_broker.services.base import TopicAdmin

logger = logging.getLogger(__name__)

URI_SCHEME = "kafka"


def compose_uri(hostname: str, topic_name: str) -> str:
    """Build the topic URI. Values are joined as-is, without escaping."""
    return f"{URI_SCHEME}://{hostname}/{topic_name}"


class CredentialComposer:
    """Derives the connection descriptor handed to bound applications."""

    def __init__(self, admin: TopicAdmin):
        self.admin = admin

    def get_credentials(self, instance: ServiceInstance, binding: ServiceBinding) -> CredentialSet:
        """Compose credentials from the admin endpoint and the instance's topic.

        Raises:
            CredentialsError: the topic name is missing or the endpoint
                lookup failed.
        """
        topic_name = instance.parameters.get(TOPIC_NAME_KEY)
        if not topic_name:
            raise CredentialsError(
                f"Service instance '{instance.id}' has no {TOPIC_NAME_KEY} parameter",
                instance_id=instance.id
            )

        try:
            hostname = self.admin.get_bootstrap_servers()
        except Exception as e:
            logger.error(f"Bootstrap server lookup failed for instance {instance.id}: {e}", exc_info=True)
            raise CredentialsError(
                f"Unable to determine Kafka endpoint: {e}",
                instance_id=instance.id,
                cause=e
            ) from e

        logger.debug(f"Returning credentials for binding {binding.id} on topic {topic_name}")
        return CredentialSet(
            hostname=hostname,
            topicName=topic_name,
            uri=compose_uri(hostname, topic_name)
        )
