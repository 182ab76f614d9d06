"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, validate_runtime_settings
    from app.bootstrap.dependencies import build_runtime

    initialize_app()
    validate_runtime_settings()
    runtime = build_runtime(adapter_factory)
"""

from __future__ import annotations

import logging

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_conversation_settings,
    get_gemini_settings,
    get_rate_limit_settings,
    get_session_settings,
    get_whatsapp_settings,
)

# Nome do serviço para logs e métricas
SERVICE_NAME = "whatsapp_gateway"

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com todas as configurações necessárias.

    Deve ser chamada uma vez no início do serviço.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level or DEFAULT_LOG_LEVEL,
        service_name=base.service_name or SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development`/`test` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    environment = base.environment.value
    errors: list[str] = []

    sections = {
        "base": base,
        "session": get_session_settings(),
        "whatsapp": get_whatsapp_settings(),
        "gemini": get_gemini_settings(),
        "rate_limit": get_rate_limit_settings(),
        "conversation": get_conversation_settings(),
    }
    for name, settings in sections.items():
        errors.extend(f"{name}: {error}" for error in settings.validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if base.strict_validation:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")
