"""Tests for error handling functionality."""

import pytest

from kafka_topic_broker.exceptions import (
    BrokerError, ErrorCode, CredentialsError, KafkaConnectionError,
    KafkaTimeoutError, TopicNameMissingError, InstanceNotFoundError, BindingNotFoundError,
    error_message, wrap_kafka_error
)


class TestCustomExceptions:
    """Test custom exception classes."""

    def test_broker_error_basic(self):
        error = BrokerError(
            message="Test error",
            error_code=ErrorCode.INTERNAL_ERROR,
            details={"key": "value"}
        )

        assert error.message == "Test error"
        assert error.error_code == ErrorCode.INTERNAL_ERROR
        assert error.details == {"key": "value"}
        assert error.cause is None
        assert str(error) == "INTERNAL_ERROR: Test error (key=value)"

    def test_broker_error_with_cause(self):
        cause = ValueError("Original error")
        error = BrokerError(message="Wrapper error", cause=cause)

        assert error.cause == cause
        assert "caused by: Original error" in str(error)
        assert error.to_dict()['cause'] == "Original error"

    def test_to_dict(self):
        error = TopicNameMissingError("abc-123")

        error_dict = error.to_dict()

        assert error_dict['error'] == ErrorCode.TOPIC_NAME_MISSING.value
        assert error_dict['details'] == {"instance_id": "abc-123"}
        assert 'cause' not in error_dict

    def test_credentials_error_is_broker_error(self):
        error = CredentialsError("no endpoint", instance_id="abc-123")

        assert isinstance(error, BrokerError)
        assert error.error_code == ErrorCode.CREDENTIALS_UNAVAILABLE

    def test_not_found_errors(self):
        assert InstanceNotFoundError("i-1").error_code == ErrorCode.INSTANCE_NOT_FOUND
        binding_error = BindingNotFoundError("i-1", "b-1")
        assert binding_error.details == {"instance_id": "i-1", "binding_id": "b-1"}


class TestErrorMessage:
    """Test error_message helper."""

    def test_plain_exception(self):
        assert error_message(RuntimeError("not found")) == "not found"

    def test_broker_error_uses_message(self):
        assert error_message(TopicNameMissingError("abc")) == "Service instance 'abc' has no topicName parameter"

    def test_empty_message_falls_back_to_type(self):
        assert error_message(RuntimeError()) == "RuntimeError"


class TestWrapKafkaError:
    """Test wrap_kafka_error decorator."""

    @staticmethod
    def raising(error):
        @wrap_kafka_error
        def operation():
            raise error
        return operation

    def test_success_passes_through(self):
        @wrap_kafka_error
        def operation():
            return 42

        assert operation() == 42

    def test_timeout(self):
        with pytest.raises(KafkaTimeoutError):
            self.raising(RuntimeError("Request timeout after 30s"))()

    def test_connection(self):
        with pytest.raises(KafkaConnectionError) as exc_info:
            self.raising(OSError("connection refused"))()

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_authentication(self):
        with pytest.raises(BrokerError) as exc_info:
            self.raising(RuntimeError("SASL handshake failed"))()

        assert exc_info.value.error_code == ErrorCode.KAFKA_AUTHENTICATION_ERROR

    def test_authorization(self):
        with pytest.raises(BrokerError) as exc_info:
            self.raising(RuntimeError("Topic authorization failed"))()

        assert exc_info.value.error_code == ErrorCode.KAFKA_AUTHORIZATION_ERROR

    def test_generic(self):
        with pytest.raises(BrokerError) as exc_info:
            self.raising(RuntimeError("something odd"))()

        assert exc_info.value.error_code == ErrorCode.INTERNAL_ERROR
        assert exc_info.value.message == "Kafka operation failed: something odd"

    def test_broker_errors_are_not_rewrapped(self):
        original = TopicNameMissingError("abc")

        with pytest.raises(TopicNameMissingError) as exc_info:
            self.raising(original)()

        assert exc_info.value is original
