"""Logging configuration and setup."""

import logging
import logging.handlers
import json
from typing import Dict, Any, Optional
from datetime import datetime, timezone

from kafka_topic_broker.config import config

AUDIT_EXTRA_FIELDS = ('instance_id', 'binding_id', 'operation', 'status')


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        for field_name in AUDIT_EXTRA_FIELDS:
            if hasattr(record, field_name):
                log_entry[field_name] = getattr(record, field_name)

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class AuditLogger:
    """Specialized logger for the broker's lifecycle audit trail."""

    def __init__(self):
        self.logger = logging.getLogger('kafka_topic_broker.audit')

    def log_operation(self, instance_id: str, operation: str, status: str,
                      binding_id: Optional[str] = None,
                      details: Optional[Dict[str, Any]] = None):
        """Log the outcome of a lifecycle operation."""
        extra = {
            'instance_id': instance_id,
            'operation': operation,
            'status': status
        }
        if binding_id:
            extra['binding_id'] = binding_id

        message = f"Lifecycle operation: {operation} {status} for instance {instance_id}"
        if binding_id:
            message += f" (binding {binding_id})"
        if details:
            message += f" - Details: {json.dumps(details, default=str)}"

        if status == 'failed':
            self.logger.warning(message, extra=extra)
        else:
            self.logger.info(message, extra=extra)


def setup_logging(level: Optional[str] = None):
    """Set up logging configuration."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, (level or config.logging.level).upper()))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(console_handler)

    if config.logging.file_path:
        file_handler = logging.handlers.RotatingFileHandler(
            config.logging.file_path,
            maxBytes=config.logging.max_file_size,
            backupCount=config.logging.backup_count
        )
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    # kafka-python is chatty at INFO
    logging.getLogger('kafka').setLevel(logging.WARNING)
    logging.getLogger('werkzeug').setLevel(logging.WARNING)


# Initialize audit logger
audit_logger = AuditLogger()
