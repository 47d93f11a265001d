"""In-memory instance and binding registry used by the HTTP front end."""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from kafka_topic_broker.exceptions import (
    InstanceAlreadyExistsError, InstanceNotFoundError,
    BindingAlreadyExistsError, BindingNotFoundError
)
from kafka_topic_broker.models.service_broker import ServiceInstance, ServiceBinding

logger = logging.getLogger(__name__)


class InstanceRegistry:
    """Thread-safe store of service instances and their bindings.

    ``lock`` guards the dictionaries. ``instance_lock`` serializes whole
    lifecycle requests for one instance id, so a check-then-act sequence in
    the front end never overlaps another request for the same instance.
    Records are lost on restart.
    """

    def __init__(self):
        self._instances: Dict[str, ServiceInstance] = {}
        self._bindings: Dict[str, Dict[str, ServiceBinding]] = {}
        self._instance_locks: Dict[str, threading.Lock] = {}
        self.lock = threading.Lock()

    @contextmanager
    def instance_lock(self, instance_id: str) -> Iterator[None]:
        """Hold the per-instance lock for the duration of the block."""
        with self.lock:
            instance_lock = self._instance_locks.setdefault(instance_id, threading.Lock())
        with instance_lock:
            yield

    def instance_exists(self, instance_id: str) -> bool:
        with self.lock:
            return instance_id in self._instances

    def add_instance(self, instance: ServiceInstance) -> None:
        """Store a newly provisioned instance.

        Raises:
            InstanceAlreadyExistsError: an instance with the same id is stored.
        """
        with self.lock:
            if instance.id in self._instances:
                raise InstanceAlreadyExistsError(instance.id)
            self._instances[instance.id] = instance
            self._bindings[instance.id] = {}
        logger.debug(f"Stored instance {instance.id}")

    def get_instance(self, instance_id: str) -> ServiceInstance:
        """Raises InstanceNotFoundError for unknown ids."""
        with self.lock:
            instance = self._instances.get(instance_id)
        if instance is None:
            raise InstanceNotFoundError(instance_id)
        return instance

    def remove_instance(self, instance_id: str) -> ServiceInstance:
        """Remove an instance together with its bindings."""
        with self.lock:
            instance = self._instances.pop(instance_id, None)
            self._bindings.pop(instance_id, None)
        if instance is None:
            raise InstanceNotFoundError(instance_id)
        logger.debug(f"Removed instance {instance_id}")
        return instance

    def add_binding(self, instance_id: str, binding: ServiceBinding) -> None:
        with self.lock:
            if instance_id not in self._instances:
                raise InstanceNotFoundError(instance_id)
            bindings = self._bindings[instance_id]
            if binding.id in bindings:
                raise BindingAlreadyExistsError(instance_id, binding.id)
            bindings[binding.id] = binding

    def get_binding(self, instance_id: str, binding_id: str) -> Optional[ServiceBinding]:
        with self.lock:
            return self._bindings.get(instance_id, {}).get(binding_id)

    def remove_binding(self, instance_id: str, binding_id: str) -> ServiceBinding:
        with self.lock:
            binding = self._bindings.get(instance_id, {}).pop(binding_id, None)
        if binding is None:
            raise BindingNotFoundError(instance_id, binding_id)
        return binding
