"""Settings de sessão (ciclo de vida da conexão).

Configurações do registry de sessões e da política de reinício.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class SessionSettings:
    """Configurações de sessão.

    Attributes:
        max_sessions: Máximo de sessões simultâneas no registry
        max_credential_retries: Desafios de credencial antes de reiniciar
        restart_delay_seconds: Espera após desconexão antes do reinício
        restart_settle_seconds: Espera entre destruir e recriar o adapter
        status_interval_seconds: Intervalo da emissão periódica de status
        status_query_timeout_seconds: Limite por consulta de status ao adapter
        sessions_dir: Diretório de artefatos persistidos por sessão
        default_session_id: Sessão usada pela superfície de reporte
    """

    max_sessions: int = 10
    max_credential_retries: int = 3
    restart_delay_seconds: float = 5.0
    restart_settle_seconds: float = 3.0
    status_interval_seconds: float = 30.0
    status_query_timeout_seconds: float = 2.0
    sessions_dir: str = "./sessions"
    default_session_id: str = "whatsapp-auto-bot"

    def validate(self) -> list[str]:
        """Valida configurações de sessão.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.max_sessions < 1:
            errors.append("MAX_SESSIONS deve ser >= 1")

        if self.max_credential_retries < 0:
            errors.append("MAX_CREDENTIAL_RETRIES deve ser >= 0")

        if self.restart_delay_seconds < 0 or self.restart_settle_seconds < 0:
            errors.append("RESTART_DELAY_SECONDS/RESTART_SETTLE_SECONDS devem ser >= 0")

        if self.status_interval_seconds <= 0:
            errors.append("STATUS_INTERVAL_SECONDS deve ser > 0")

        if self.status_query_timeout_seconds <= 0:
            errors.append("STATUS_QUERY_TIMEOUT_SECONDS deve ser > 0")

        if not self.default_session_id:
            errors.append("DEFAULT_SESSION_ID não pode ser vazio")

        return errors


def _load_session_from_env() -> SessionSettings:
    """Carrega SessionSettings de variáveis de ambiente."""
    return SessionSettings(
        max_sessions=int(os.getenv("MAX_SESSIONS", "10")),
        max_credential_retries=int(os.getenv("MAX_CREDENTIAL_RETRIES", "3")),
        restart_delay_seconds=float(os.getenv("RESTART_DELAY_SECONDS", "5")),
        restart_settle_seconds=float(os.getenv("RESTART_SETTLE_SECONDS", "3")),
        status_interval_seconds=float(os.getenv("STATUS_INTERVAL_SECONDS", "30")),
        status_query_timeout_seconds=float(os.getenv("STATUS_QUERY_TIMEOUT_SECONDS", "2")),
        sessions_dir=os.getenv("SESSIONS_DIR", "./sessions"),
        default_session_id=os.getenv("DEFAULT_SESSION_ID", "whatsapp-auto-bot"),
    )


@lru_cache(maxsize=1)
def get_session_settings() -> SessionSettings:
    """Retorna instância cacheada de SessionSettings."""
    return _load_session_from_env()
