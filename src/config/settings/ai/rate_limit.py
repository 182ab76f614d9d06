"""Settings de rate limit de respostas.

Configurações para proteção contra abuso por contato.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class RateLimitSettings:
    """Configurações do rate limit por contato (janela fixa).

    Attributes:
        max_replies: Respostas permitidas por janela
        window_seconds: Duração da janela de contagem
        stale_grace_seconds: Folga após o fim da janela antes da limpeza
    """

    max_replies: int = 2
    window_seconds: float = 60.0
    stale_grace_seconds: float = 300.0

    def validate(self) -> list[str]:
        """Valida configurações de rate limit.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.max_replies < 1:
            errors.append("MESSAGE_RATE_LIMIT deve ser >= 1")

        if self.window_seconds <= 0:
            errors.append("RATE_LIMIT_WINDOW_SECONDS deve ser > 0")

        if self.stale_grace_seconds < 0:
            errors.append("RATE_LIMIT_STALE_GRACE_SECONDS deve ser >= 0")

        return errors


def _load_rate_limit_from_env() -> RateLimitSettings:
    """Carrega RateLimitSettings de variáveis de ambiente."""
    return RateLimitSettings(
        max_replies=int(os.getenv("MESSAGE_RATE_LIMIT", "2")),
        window_seconds=float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60")),
        stale_grace_seconds=float(os.getenv("RATE_LIMIT_STALE_GRACE_SECONDS", "300")),
    )


@lru_cache(maxsize=1)
def get_rate_limit_settings() -> RateLimitSettings:
    """Retorna instância cacheada de RateLimitSettings."""
    return _load_rate_limit_from_env()
