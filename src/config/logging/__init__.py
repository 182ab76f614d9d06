"""Logging JSON do gateway (python-json-logger).

Todo record sai com asctime, level, logger, message, correlation_id e
service. Contatos só aparecem como prefixo de hash (hash_contact_id).

    configure_logging(level="INFO", service_name="whatsapp_gateway")
    logger = get_logger(__name__)
    logger.info("session_ready", extra={"session_id": "whatsapp-auto-bot"})
"""

from config.logging.config import configure_logging, get_logger, log_fallback
from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)
from config.logging.redaction import hash_contact_id

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "hash_contact_id",
    "log_fallback",
]
