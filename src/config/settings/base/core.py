"""Settings comuns do processo: ambiente, nome do serviço e nível de log."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from functools import lru_cache

_ENVIRONMENT_ALIASES = {
    "prod": "production",
    "stage": "staging",
    "dev": "development",
    "local": "development",
}

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Environment(StrEnum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, raw: str) -> Environment:
        """Aceita aliases (prod, stage, dev); desconhecido vira development."""
        value = raw.strip().lower()
        value = _ENVIRONMENT_ALIASES.get(value, value)
        try:
            return cls(value)
        except ValueError:
            return cls.DEVELOPMENT


# Ambientes em que configuração inválida impede o boot
STRICT_ENVIRONMENTS = frozenset({Environment.STAGING, Environment.PRODUCTION})


@dataclass(frozen=True)
class BaseSettings:
    """Configurações do processo.

    Attributes:
        environment: Ambiente de execução
        service_name: Nome do serviço nos logs
        debug: Modo debug
        log_level: Nível do logger raiz
    """

    environment: Environment = Environment.DEVELOPMENT
    service_name: str = "whatsapp_gateway"
    debug: bool = False
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment is Environment.PRODUCTION

    @property
    def strict_validation(self) -> bool:
        return self.environment in STRICT_ENVIRONMENTS

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")
        if self.log_level not in _LOG_LEVELS:
            errors.append(f"LOG_LEVEL inválido: {self.log_level}")
        return errors


def _load_base_from_env() -> BaseSettings:
    return BaseSettings(
        environment=Environment.parse(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "whatsapp_gateway"),
        debug=os.getenv("DEBUG", "").lower() in {"1", "true", "yes", "on"},
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    return _load_base_from_env()
