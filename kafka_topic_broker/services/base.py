"""Abstract base classes for services."""

from abc import ABC, abstractmethod
from typing import Dict, Any

from kafka_topic_broker.models.service_broker import (
    ServiceInstance, ServiceBinding, OperationKind, OperationResult
)


class TopicAdmin(ABC):
    """Admin capability the broker drives to manage topics.

    Implementations own their transport, timeouts and retries. Every method
    may raise; the broker turns those failures into results or errors.
    """

    @abstractmethod
    def create_topic(self, name: str) -> None:
        """Create the named topic."""
        pass

    @abstractmethod
    def delete_topic(self, name: str) -> None:
        """Delete the named topic."""
        pass

    @abstractmethod
    def get_bootstrap_servers(self) -> str:
        """Return the bootstrap address list clients should connect to."""
        pass

    def close(self) -> None:
        """Release client resources; a no-op unless the implementation holds any."""
        pass


class ServiceBroker(ABC):
    """Service broker with no-op lifecycle defaults.

    Concrete brokers override only the operations their backing service
    needs; everything else reports success without side effects.
    """

    def create_instance(self, instance: ServiceInstance) -> OperationResult:
        """Called during create-service."""
        return OperationResult.success(OperationKind.CREATE, "created.")

    def delete_instance(self, instance: ServiceInstance) -> OperationResult:
        """Called during delete-service."""
        return OperationResult.success(OperationKind.DELETE, "deleted.")

    def update_instance(self, instance: ServiceInstance) -> OperationResult:
        """Called during update-service."""
        return OperationResult.success(OperationKind.UPDATE, "updated.")

    def create_binding(self, instance: ServiceInstance, binding: ServiceBinding) -> OperationResult:
        """Called during bind-service, before credentials are requested."""
        return OperationResult.success(OperationKind.BIND, "bound.")

    def delete_binding(self, instance: ServiceInstance, binding: ServiceBinding) -> OperationResult:
        """Called during unbind-service."""
        return OperationResult.success(OperationKind.UNBIND, "unbound.")

    def get_credentials(self, instance: ServiceInstance, binding: ServiceBinding) -> Dict[str, Any]:
        """Credentials handed back from create-binding."""
        return {}

    def is_async(self) -> bool:
        """Whether lifecycle operations complete after the call returns."""
        return False
