"""Configuration management for the Kafka topic broker."""

import os
from typing import List, Optional
from dataclasses import dataclass, field


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class APIConfig:
    """API configuration."""
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False


@dataclass
class KafkaConfig:
    """Kafka admin client configuration."""
    bootstrap_servers: List[str] = field(default_factory=lambda: ["localhost:9092"])
    client_id: str = "kafka-topic-broker"
    default_partitions: int = 3
    default_replication_factor: int = 1
    request_timeout_ms: int = 30000
    security_protocol: str = "PLAINTEXT"


@dataclass
class Config:
    """Main configuration class."""
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    api: APIConfig = field(default_factory=APIConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables."""
        config = cls()

        # Kafka config
        bootstrap_servers = os.getenv('KAFKA_BOOTSTRAP_SERVERS')
        if bootstrap_servers:
            config.kafka.bootstrap_servers = parse_servers(bootstrap_servers)
        config.kafka.client_id = os.getenv('KAFKA_CLIENT_ID', config.kafka.client_id)
        config.kafka.default_partitions = int(
            os.getenv('KAFKA_DEFAULT_PARTITIONS', str(config.kafka.default_partitions))
        )
        config.kafka.default_replication_factor = int(
            os.getenv('KAFKA_DEFAULT_REPLICATION_FACTOR', str(config.kafka.default_replication_factor))
        )
        config.kafka.request_timeout_ms = int(
            os.getenv('KAFKA_REQUEST_TIMEOUT_MS', str(config.kafka.request_timeout_ms))
        )
        config.kafka.security_protocol = os.getenv('KAFKA_SECURITY_PROTOCOL', config.kafka.security_protocol)

        # API config
        config.api.host = os.getenv('API_HOST', config.api.host)
        config.api.port = int(os.getenv('API_PORT', str(config.api.port)))
        config.api.debug = os.getenv('API_DEBUG', 'false').lower() == 'true'

        # Logging config
        config.logging.level = os.getenv('LOG_LEVEL', config.logging.level)
        config.logging.file_path = os.getenv('LOG_FILE_PATH')

        return config


def parse_servers(value: str) -> List[str]:
    """Split a comma-separated bootstrap server string."""
    return [server.strip() for server in value.split(',') if server.strip()]


# Global configuration instance
config = Config.from_env()
