"""Tests for CLI interface."""

import pytest
import json
from unittest.mock import patch
from click.testing import CliRunner

from kafka_topic_broker.cli.main import cli


class TestCLICommands:
    """Test CLI commands."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture
    def admin_class(self, fake_admin):
        """Patch the Kafka admin with the call-recording double."""
        with patch('kafka_topic_broker.cli.main.KafkaTopicAdmin', return_value=fake_admin) as admin_class:
            yield admin_class

    def test_create_instance(self, runner, admin_class, fake_admin):
        result = runner.invoke(cli, ['-b', 'broker1:9092', 'create-instance', 'abc-123'])

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "operation": "create",
            "status": "succeeded",
            "message": "created."
        }
        assert fake_admin.calls == [('create_topic', 'abc-123')]

        client_config = admin_class.call_args[0][0]
        assert client_config.bootstrap_servers == ['broker1:9092']

    def test_create_instance_with_topic_name(self, runner, admin_class, fake_admin):
        result = runner.invoke(cli, ['create-instance', 'abc-123', '--topic-name', 'orders'])

        assert result.exit_code == 0
        assert fake_admin.calls == [('create_topic', 'orders')]

    def test_create_instance_failure(self, runner, admin_class, fake_admin):
        fake_admin.create_error = RuntimeError("cluster unavailable")

        result = runner.invoke(cli, ['create-instance', 'abc-123'])

        assert result.exit_code == 1
        assert "cluster unavailable" in result.output

    def test_delete_instance_defaults_topic_to_id(self, runner, admin_class, fake_admin):
        result = runner.invoke(cli, ['delete-instance', 'abc-123'])

        assert result.exit_code == 0
        assert fake_admin.calls == [('delete_topic', 'abc-123')]

    def test_delete_instance_failure(self, runner, admin_class, fake_admin):
        fake_admin.delete_error = Exception("not found")

        result = runner.invoke(cli, ['delete-instance', 'abc-123', '-t', 'orders'])

        assert result.exit_code == 1
        assert '"failed"' in result.output

    def test_credentials(self, runner, admin_class):
        result = runner.invoke(cli, ['credentials', 'inst-1', '--topic-name', 'orders'])

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "hostname": "broker1:9092",
            "topicName": "orders",
            "uri": "kafka://broker1:9092/orders"
        }

    def test_credentials_failure(self, runner, admin_class, fake_admin):
        fake_admin.endpoint_error = RuntimeError("no brokers")

        result = runner.invoke(cli, ['credentials', 'inst-1'])

        assert result.exit_code == 1
        assert "no brokers" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ['version'])

        assert result.exit_code == 0
        assert "Version: 0.1.0" in result.output

    def test_admin_closed_after_command(self, runner, admin_class, fake_admin):
        result = runner.invoke(cli, ['create-instance', 'abc-123'])

        assert result.exit_code == 0
        assert fake_admin.closed is True

    def test_admin_closed_after_failed_command(self, runner, admin_class, fake_admin):
        fake_admin.endpoint_error = RuntimeError("no brokers")

        result = runner.invoke(cli, ['credentials', 'inst-1'])

        assert result.exit_code == 1
        assert fake_admin.closed is True
