"""Custom exception classes for the Kafka topic broker."""

from functools import wraps
from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for different types of failures."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Kafka client errors
    KAFKA_CONNECTION_ERROR = "KAFKA_CONNECTION_ERROR"
    KAFKA_TIMEOUT_ERROR = "KAFKA_TIMEOUT_ERROR"
    KAFKA_AUTHENTICATION_ERROR = "KAFKA_AUTHENTICATION_ERROR"
    KAFKA_AUTHORIZATION_ERROR = "KAFKA_AUTHORIZATION_ERROR"

    # Topic errors
    TOPIC_NOT_FOUND = "TOPIC_NOT_FOUND"
    TOPIC_NAME_MISSING = "TOPIC_NAME_MISSING"

    # Service Broker errors
    CREDENTIALS_UNAVAILABLE = "CREDENTIALS_UNAVAILABLE"
    INSTANCE_NOT_FOUND = "INSTANCE_NOT_FOUND"
    INSTANCE_ALREADY_EXISTS = "INSTANCE_ALREADY_EXISTS"
    BINDING_NOT_FOUND = "BINDING_NOT_FOUND"
    BINDING_ALREADY_EXISTS = "BINDING_ALREADY_EXISTS"


class BrokerError(Exception):
    """Base exception class for the Kafka topic broker."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Specific error code for the failure
            details: Additional context about the error
            cause: The underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        result = {
            'error': self.error_code.value,
            'message': self.message,
            'details': self.details
        }

        if self.cause:
            result['cause'] = str(self.cause)

        return result

    def __str__(self) -> str:
        base_str = f"{self.error_code.value}: {self.message}"

        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            base_str += f" ({details_str})"

        if self.cause:
            base_str += f" [caused by: {self.cause}]"

        return base_str


class ConfigurationError(BrokerError):
    """Exception for configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        details = {}
        if config_key:
            details['config_key'] = config_key

        super().__init__(
            message=message,
            error_code=ErrorCode.CONFIGURATION_ERROR,
            details=details
        )


class KafkaConnectionError(BrokerError):
    """Exception for Kafka connection failures."""

    def __init__(self, message: str, bootstrap_servers: Optional[str] = None,
                 cause: Optional[Exception] = None):
        details = {}
        if bootstrap_servers:
            details['bootstrap_servers'] = bootstrap_servers

        super().__init__(
            message=message,
            error_code=ErrorCode.KAFKA_CONNECTION_ERROR,
            details=details,
            cause=cause
        )


class KafkaTimeoutError(BrokerError):
    """Exception for Kafka operation timeouts."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 cause: Optional[Exception] = None):
        details = {}
        if operation:
            details['operation'] = operation

        super().__init__(
            message=message,
            error_code=ErrorCode.KAFKA_TIMEOUT_ERROR,
            details=details,
            cause=cause
        )


class TopicError(BrokerError):
    """Base exception for topic-related errors."""

    def __init__(self, message: str, error_code: ErrorCode, topic_name: Optional[str] = None):
        details = {}
        if topic_name:
            details['topic_name'] = topic_name

        super().__init__(
            message=message,
            error_code=error_code,
            details=details
        )


class TopicNotFoundError(TopicError):
    """Exception for when a topic is not found."""

    def __init__(self, topic_name: str):
        super().__init__(
            message=f"Topic '{topic_name}' not found",
            error_code=ErrorCode.TOPIC_NOT_FOUND,
            topic_name=topic_name
        )


class ServiceBrokerError(BrokerError):
    """Base exception for service broker lifecycle errors."""

    def __init__(self, message: str, error_code: ErrorCode, instance_id: Optional[str] = None,
                 cause: Optional[Exception] = None):
        details = {}
        if instance_id:
            details['instance_id'] = instance_id

        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            cause=cause
        )


class TopicNameMissingError(ServiceBrokerError):
    """Raised when an instance carries no topic name to act on."""

    def __init__(self, instance_id: str):
        super().__init__(
            message=f"Service instance '{instance_id}' has no topicName parameter",
            error_code=ErrorCode.TOPIC_NAME_MISSING,
            instance_id=instance_id
        )


class CredentialsError(ServiceBrokerError):
    """Raised when binding credentials cannot be composed."""

    def __init__(self, message: str, instance_id: Optional[str] = None,
                 cause: Optional[Exception] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.CREDENTIALS_UNAVAILABLE,
            instance_id=instance_id,
            cause=cause
        )


class InstanceNotFoundError(ServiceBrokerError):
    """Exception for when a service instance is not found."""

    def __init__(self, instance_id: str):
        super().__init__(
            message=f"Service instance '{instance_id}' not found",
            error_code=ErrorCode.INSTANCE_NOT_FOUND,
            instance_id=instance_id
        )


class InstanceAlreadyExistsError(ServiceBrokerError):
    """Exception for when a service instance already exists."""

    def __init__(self, instance_id: str):
        super().__init__(
            message=f"Service instance '{instance_id}' already exists",
            error_code=ErrorCode.INSTANCE_ALREADY_EXISTS,
            instance_id=instance_id
        )


class BindingNotFoundError(ServiceBrokerError):
    """Exception for when a service binding is not found."""

    def __init__(self, instance_id: str, binding_id: str):
        super().__init__(
            message=f"Service binding '{binding_id}' not found",
            error_code=ErrorCode.BINDING_NOT_FOUND,
            instance_id=instance_id
        )
        self.details['binding_id'] = binding_id


class BindingAlreadyExistsError(ServiceBrokerError):
    """Exception for when a service binding already exists."""

    def __init__(self, instance_id: str, binding_id: str):
        super().__init__(
            message=f"Service binding '{binding_id}' already exists",
            error_code=ErrorCode.BINDING_ALREADY_EXISTS,
            instance_id=instance_id
        )
        self.details['binding_id'] = binding_id


# Utility functions for error handling

def error_message(error: Exception) -> str:
    """Human-readable message of an error, without code or detail decoration."""
    if isinstance(error, BrokerError):
        return error.message
    return str(error) or type(error).__name__


def wrap_kafka_error(func):
    """Decorator to wrap Kafka client errors into our custom exceptions."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except BrokerError:
            raise
        except Exception as e:
            # kafka-python error names carry most of the signal
            error_text = f"{type(e).__name__} {e}".lower()

            if 'timeout' in error_text or 'timedout' in error_text:
                raise KafkaTimeoutError(
                    f"Kafka operation timed out: {e}", operation=func.__name__, cause=e
                ) from e
            elif ('connection' in error_text or 'network' in error_text
                  or 'nobrokersavailable' in error_text):
                raise KafkaConnectionError(f"Kafka connection failed: {e}", cause=e) from e
            elif 'authentication' in error_text or 'sasl' in error_text:
                raise BrokerError(
                    f"Kafka authentication failed: {e}",
                    ErrorCode.KAFKA_AUTHENTICATION_ERROR,
                    cause=e
                ) from e
            elif 'authorization' in error_text or 'acl' in error_text:
                raise BrokerError(
                    f"Kafka authorization failed: {e}",
                    ErrorCode.KAFKA_AUTHORIZATION_ERROR,
                    cause=e
                ) from e
            else:
                raise BrokerError(
                    f"Kafka operation failed: {e}",
                    ErrorCode.INTERNAL_ERROR,
                    cause=e
                ) from e

    return wrapper
