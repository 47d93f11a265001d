"""Main CLI entry point for the Kafka topic broker."""

import click
import sys
import json
from typing import Optional

from kafka_topic_broker import __version__
from kafka_topic_broker.clients.kafka_client import ClientConfig, KafkaTopicAdmin
from kafka_topic_broker.config import config, parse_servers
from kafka_topic_broker.exceptions import BrokerError
from kafka_topic_broker.logging_config import setup_logging
from kafka_topic_broker.models.service_broker import (
    ServiceInstance, ServiceBinding, OperationResult, TOPIC_NAME_KEY
)
from kafka_topic_broker.services.kafka_broker import KafkaBroker


def build_broker(ctx) -> KafkaBroker:
    """Broker over the cluster selected on the command line.

    The admin client is closed when the command's context is torn down.
    """
    admin = KafkaTopicAdmin(ctx.obj['client_config'])
    ctx.call_on_close(admin.close)
    return KafkaBroker(admin)


def build_instance(instance_id: str, topic_name: Optional[str]) -> ServiceInstance:
    parameters = {TOPIC_NAME_KEY: topic_name} if topic_name else {}
    return ServiceInstance(id=instance_id, parameters=parameters)


def echo_result(result: OperationResult):
    """Print a lifecycle result and exit non-zero on failure."""
    click.echo(json.dumps(result.model_dump(), indent=2, default=str))
    if not result.is_success:
        sys.exit(1)


@click.group()
@click.option('--bootstrap-servers', '-b', help='Kafka bootstrap servers (comma-separated)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, bootstrap_servers, verbose):
    """Kafka Topic Broker CLI - provision topics as service instances."""

    if verbose:
        setup_logging('DEBUG')

    ctx.ensure_object(dict)

    client_config = ClientConfig.from_kafka_config(config.kafka)
    if bootstrap_servers:
        client_config.bootstrap_servers = parse_servers(bootstrap_servers)

    ctx.obj['client_config'] = client_config


@cli.command('create-instance')
@click.argument('instance_id')
@click.option('--topic-name', '-t', help='Topic name (defaults to the instance ID)')
@click.pass_context
def create_instance(ctx, instance_id, topic_name):
    """Provision a service instance by creating its topic."""
    broker = build_broker(ctx)
    echo_result(broker.create_instance(build_instance(instance_id, topic_name)))


@cli.command('delete-instance')
@click.argument('instance_id')
@click.option('--topic-name', '-t', help='Topic name (defaults to the instance ID)')
@click.pass_context
def delete_instance(ctx, instance_id, topic_name):
    """Deprovision a service instance by deleting its topic."""
    broker = build_broker(ctx)
    echo_result(broker.delete_instance(build_instance(instance_id, topic_name or instance_id)))


@cli.command()
@click.argument('instance_id')
@click.option('--topic-name', '-t', help='Topic name (defaults to the instance ID)')
@click.option('--binding-id', default='cli-binding', help='Binding ID')
@click.pass_context
def credentials(ctx, instance_id, topic_name, binding_id):
    """Show the credentials a binding to INSTANCE_ID would receive."""
    broker = build_broker(ctx)
    instance = build_instance(instance_id, topic_name or instance_id)

    try:
        creds = broker.get_credentials(instance, ServiceBinding(id=binding_id))
    except BrokerError as e:
        click.echo(f"❌ {e.message}", err=True)
        sys.exit(1)

    click.echo(json.dumps(creds, indent=2))


@cli.command()
@click.option('--host', help='Bind address')
@click.option('--port', type=int, help='Listen port')
def serve(host, port):
    """Run the service broker HTTP API."""
    from kafka_topic_broker.api.service_broker import run_server

    setup_logging()
    run_server(host=host, port=port)


@cli.command()
def version():
    """Show version information."""

    click.echo("Kafka Topic Broker CLI")
    click.echo(f"Version: {__version__}")


def main():
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user")
        sys.exit(1)


if __name__ == '__main__':
    main()
