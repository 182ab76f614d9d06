"""Setup do logging JSON do processo e helpers de log de eventos."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "whatsapp_gateway"

# Clientes HTTP logam uma linha por request em DEBUG
_QUIET_LOGGERS = {"httpx": logging.WARNING, "httpcore": logging.WARNING}


def _build_handler(
    level: str,
    service_name: str,
    correlation_id_getter: Callable[[], str] | None,
) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))
    return handler


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Instala um único handler JSON no logger raiz.

    Chamado uma vez pelo bootstrap; chamadas seguintes substituem o handler.

    Args:
        level: DEBUG, INFO, WARNING, ERROR ou CRITICAL (case-insensitive)
        service_name: Valor do campo `service` em todo log
        correlation_id_getter: Fonte do correlation_id corrente

    Raises:
        ValueError: Nível desconhecido
    """
    normalized = level.upper()
    if normalized not in VALID_LOG_LEVELS:
        valid = ", ".join(sorted(VALID_LOG_LEVELS))
        raise ValueError(f"Nível de log inválido: {level}. Válidos: {valid}")

    root = logging.getLogger()
    root.setLevel(normalized)
    root.handlers = [_build_handler(normalized, service_name, correlation_id_getter)]

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    elapsed_ms: float | None = None,
    language: str | None = None,
) -> None:
    """Registra `fallback_applied` quando uma resposta fixa substitui a gerada."""
    extra: dict[str, object] = {"fallback_used": True, "component": component}
    optional = {
        "reason": reason,
        "elapsed_ms": round(elapsed_ms, 2) if elapsed_ms is not None else None,
        "language": language,
    }
    extra.update({key: value for key, value in optional.items() if value not in (None, "")})
    logger.info("fallback_applied", extra=extra)
