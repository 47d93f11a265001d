"""Kafka topic service broker."""

import logging
from typing import Callable, Dict, Any, Optional

from kafka_topic_broker.exceptions import TopicNameMissingError, error_message
from kafka_topic_broker.logging_config import audit_logger
from kafka_topic_broker.models.service_broker import (
    ServiceInstance, ServiceBinding, OperationKind, OperationResult, TOPIC_NAME_KEY
)
from kafka_topic_broker.services.base import ServiceBroker, TopicAdmin
from kafka_topic_broker.services.credentials import CredentialComposer

logger = logging.getLogger(__name__)


class KafkaBroker(ServiceBroker):
    """Service broker where each service instance is one Kafka topic.

    Creating an instance creates its topic, deleting it deletes the topic.
    Binding needs nothing from Kafka beyond handing out credentials.
    Every lifecycle call completes before it returns and reports its outcome
    as an OperationResult; admin failures never escape as exceptions.
    """

    def __init__(self, admin: TopicAdmin, credential_composer: Optional[CredentialComposer] = None):
        """Initialize the broker around a topic admin capability."""
        self.admin = admin
        self.credential_composer = credential_composer or CredentialComposer(admin)

    def create_instance(self, instance: ServiceInstance) -> OperationResult:
        """Create the topic backing a new instance.

        The topic name comes from the ``topicName`` parameter. When absent it
        defaults to the instance id and is written back into the instance's
        parameters, so later calls see the same name.
        """
        topic_name = self.resolve_topic_name(instance)

        def create():
            logger.info(f"Creating topic {topic_name} for instance {instance.id}")
            self.admin.create_topic(topic_name)

        return self._run(OperationKind.CREATE, instance, create, "created.")

    def delete_instance(self, instance: ServiceInstance) -> OperationResult:
        """Delete the topic backing an instance."""

        def delete():
            topic_name = instance.parameters.get(TOPIC_NAME_KEY)
            if not topic_name:
                raise TopicNameMissingError(instance.id)

            logger.info(f"Deprovisioning instance {instance.id}: deleting topic {topic_name}")
            self.admin.delete_topic(topic_name)

        return self._run(OperationKind.DELETE, instance, delete, "deleted.")

    def update_instance(self, instance: ServiceInstance) -> OperationResult:
        """Topics have nothing to update; reports success."""
        logger.info(f"Updating instance {instance.id}")
        result = super().update_instance(instance)
        self._audit(instance, result)
        return result

    def create_binding(self, instance: ServiceInstance, binding: ServiceBinding) -> OperationResult:
        """Bind an application. No Kafka call is needed, credentials carry the topic."""
        logger.info(f"Binding app {binding.app_guid} to topic {instance.topic_name}")
        result = super().create_binding(instance, binding)
        self._audit(instance, result, binding)
        return result

    def delete_binding(self, instance: ServiceInstance, binding: ServiceBinding) -> OperationResult:
        logger.info(f"Unbinding app {binding.app_guid} from topic {instance.topic_name}")
        result = super().delete_binding(instance, binding)
        self._audit(instance, result, binding)
        return result

    def get_credentials(self, instance: ServiceInstance, binding: ServiceBinding) -> Dict[str, Any]:
        """Credentials for a binding: hostname, topicName and a kafka:// uri.

        Raises:
            CredentialsError: credentials could not be composed.
        """
        logger.info(f"Returning credentials for binding {binding.id}")
        return self.credential_composer.get_credentials(instance, binding).model_dump()

    def is_async(self) -> bool:
        return False

    @staticmethod
    def resolve_topic_name(instance: ServiceInstance) -> str:
        """Topic name of an instance, deriving and storing it on first use."""
        topic_name = instance.parameters.get(TOPIC_NAME_KEY)
        if not topic_name:
            topic_name = instance.id
            instance.parameters[TOPIC_NAME_KEY] = topic_name
        return topic_name

    def _run(
        self,
        operation: OperationKind,
        instance: ServiceInstance,
        action: Callable[[], None],
        success_message: str
    ) -> OperationResult:
        """Run an admin action, mapping any exception to a FAILED result."""
        try:
            action()
            result = OperationResult.success(operation, success_message)
        except Exception as e:
            logger.error(f"{operation.value} failed for instance {instance.id}: {e}", exc_info=True)
            result = OperationResult.failure(operation, error_message(e))

        self._audit(instance, result)
        return result

    @staticmethod
    def _audit(instance: ServiceInstance, result: OperationResult,
               binding: Optional[ServiceBinding] = None):
        details = {'topic_name': instance.topic_name}
        if not result.is_success:
            details['error'] = result.message
        audit_logger.log_operation(
            instance.id,
            result.operation.value,
            result.status.value,
            binding_id=binding.id if binding else None,
            details=details
        )
