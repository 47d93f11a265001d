"""Open Service Broker API front end for the Kafka topic broker."""

import logging
from typing import Optional, Tuple

from flask import Flask, request, jsonify, Response
from pydantic import ValidationError as PydanticValidationError

from kafka_topic_broker import __version__
from kafka_topic_broker.config import config
from kafka_topic_broker.exceptions import (
    BrokerError, InstanceNotFoundError, InstanceAlreadyExistsError, BindingAlreadyExistsError
)
from kafka_topic_broker.models.service_broker import (
    ServiceInstance, ServiceBinding, ProvisionRequest, UpdateRequest, BindRequest,
    BindResponse, ErrorResponse, OperationResult, TOPIC_NAME_KEY
)
from kafka_topic_broker.services.base import ServiceBroker
from kafka_topic_broker.storage.memory_store import InstanceRegistry

logger = logging.getLogger(__name__)


def error_response(error: str, description: str, status: int) -> Tuple[Response, int]:
    return jsonify(ErrorResponse(error=error, description=description).model_dump()), status


def failed_operation_response(result: OperationResult) -> Tuple[Response, int]:
    return error_response("InternalError", result.message, 500)


def parse_body(model):
    """Parse the JSON body into ``model``; returns (parsed, error_response)."""
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return None, error_response("BadRequest", "Request body is required", 400)

    try:
        return model(**data), None
    except PydanticValidationError as e:
        return None, error_response("BadRequest", f"Invalid request format: {e}", 400)


def create_app(broker: ServiceBroker, registry: Optional[InstanceRegistry] = None) -> Flask:
    """Create Flask application with OSB API routes.

    Every instance and binding route runs under the registry's per-instance
    lock, so at most one lifecycle call per instance id is in flight.
    """
    app = Flask(__name__)
    registry = registry or InstanceRegistry()

    app.extensions['service_broker'] = broker
    app.extensions['instance_registry'] = registry

    @app.route('/v2/service_instances/<instance_id>', methods=['PUT'])
    def provision_service_instance(instance_id: str):
        """Provision a service instance."""
        provision_request, error = parse_body(ProvisionRequest)
        if error:
            return error

        with registry.instance_lock(instance_id):
            if registry.instance_exists(instance_id):
                return error_response("Conflict", "Service instance already exists", 409)

            instance = ServiceInstance(
                id=instance_id,
                service_id=provision_request.service_id,
                plan_id=provision_request.plan_id,
                organization_guid=provision_request.organization_guid,
                space_guid=provision_request.space_guid,
                parameters=provision_request.parameters
            )

            result = broker.create_instance(instance)
            if not result.is_success:
                return failed_operation_response(result)

            try:
                registry.add_instance(instance)
            except InstanceAlreadyExistsError:
                return error_response("Conflict", "Service instance already exists", 409)

        return jsonify({}), 201

    @app.route('/v2/service_instances/<instance_id>', methods=['PATCH'])
    def update_service_instance(instance_id: str):
        """Update a service instance."""
        update_request, error = parse_body(UpdateRequest)

        with registry.instance_lock(instance_id):
            try:
                instance = registry.get_instance(instance_id)
            except InstanceNotFoundError as e:
                return error_response("NotFound", e.message, 404)

            if error:
                return error

            new_topic_name = update_request.parameters.get(TOPIC_NAME_KEY)
            if new_topic_name is not None and new_topic_name != instance.topic_name:
                return error_response("BadRequest", f"{TOPIC_NAME_KEY} cannot be changed", 400)

            instance.parameters.update(update_request.parameters)
            if update_request.plan_id:
                instance.plan_id = update_request.plan_id

            result = broker.update_instance(instance)
            if not result.is_success:
                return failed_operation_response(result)

        return jsonify({}), 200

    @app.route('/v2/service_instances/<instance_id>', methods=['DELETE'])
    def deprovision_service_instance(instance_id: str):
        """Deprovision a service instance."""
        with registry.instance_lock(instance_id):
            try:
                instance = registry.get_instance(instance_id)
            except InstanceNotFoundError:
                return error_response("Gone", "Service instance does not exist", 410)

            result = broker.delete_instance(instance)
            if not result.is_success:
                return failed_operation_response(result)

            registry.remove_instance(instance_id)

        return jsonify({}), 200

    @app.route('/v2/service_instances/<instance_id>/service_bindings/<binding_id>', methods=['PUT'])
    def create_service_binding(instance_id: str, binding_id: str):
        """Create a service binding and return its credentials."""
        bind_request, error = parse_body(BindRequest)

        with registry.instance_lock(instance_id):
            try:
                instance = registry.get_instance(instance_id)
            except InstanceNotFoundError as e:
                return error_response("NotFound", e.message, 404)

            if error:
                return error

            if registry.get_binding(instance_id, binding_id) is not None:
                return error_response("Conflict", "Service binding already exists", 409)

            binding = ServiceBinding(
                id=binding_id,
                app_guid=bind_request.resolved_app_guid,
                parameters=bind_request.parameters
            )

            result = broker.create_binding(instance, binding)
            if not result.is_success:
                return failed_operation_response(result)

            try:
                credentials = broker.get_credentials(instance, binding)
            except BrokerError as e:
                logger.error(f"Failed to compose credentials for binding {binding_id}: {e}")
                return error_response("InternalError", e.message, 500)

            try:
                registry.add_binding(instance_id, binding)
            except BindingAlreadyExistsError:
                return error_response("Conflict", "Service binding already exists", 409)

        return jsonify(BindResponse(credentials=credentials).model_dump()), 201

    @app.route('/v2/service_instances/<instance_id>/service_bindings/<binding_id>', methods=['DELETE'])
    def delete_service_binding(instance_id: str, binding_id: str):
        """Delete a service binding."""
        with registry.instance_lock(instance_id):
            binding = registry.get_binding(instance_id, binding_id)
            if binding is None:
                return error_response("Gone", "Service binding does not exist", 410)

            instance = registry.get_instance(instance_id)
            result = broker.delete_binding(instance, binding)
            if not result.is_success:
                return failed_operation_response(result)

            registry.remove_binding(instance_id, binding_id)

        return jsonify({}), 200

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            "status": "healthy",
            "service": "kafka-topic-broker",
            "version": __version__,
            "async": broker.is_async()
        }), 200

    @app.errorhandler(404)
    def not_found(error):
        return error_response("NotFound", "Endpoint not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response("MethodNotAllowed", "Method not allowed for this endpoint", 405)

    @app.errorhandler(500)
    def internal_error(error):
        return error_response("InternalError", "Internal server error", 500)

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None):
    """Run the Flask server over the configured cluster."""
    from kafka_topic_broker.clients.kafka_client import KafkaTopicAdmin
    from kafka_topic_broker.services.kafka_broker import KafkaBroker

    admin = KafkaTopicAdmin()
    try:
        app = create_app(KafkaBroker(admin))
        app.run(
            host=host or config.api.host,
            port=port or config.api.port,
            debug=config.api.debug
        )
    finally:
        admin.close()
