"""Settings específicas de WhatsApp.

Configurações do canal WhatsApp Web: filtros de entrada, ritmo de digitação
e normalização de contatos.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Sufixo de contato individual no WhatsApp Web
CONTACT_ID_SUFFIX: str = "@c.us"

DEFAULT_APOLOGY_MESSAGE: str = "Sorry, kuch technical problem hai. Thoda baad try karo 😅"


@dataclass(frozen=True)
class WhatsAppSettings:
    """Configurações do canal WhatsApp.

    Attributes:
        staleness_window_seconds: Mensagens mais antigas que isso são ignoradas
        typing_delay_min_ms: Piso do atraso base de digitação
        typing_delay_max_ms: Teto do atraso total de digitação
        typing_per_char_ms: Acréscimo por caractere da resposta
        active_chats_soft_cap: Limite que zera o conjunto de chats ativos
        default_country_code: DDI aplicado a números de 10 dígitos
        apology_message: Texto enviado quando a resposta falha
    """

    staleness_window_seconds: float = 300.0

    # Digitação simulada
    typing_delay_min_ms: int = 1000
    typing_delay_max_ms: int = 3000
    typing_per_char_ms: int = 30

    active_chats_soft_cap: int = 50
    default_country_code: str = "91"
    apology_message: str = DEFAULT_APOLOGY_MESSAGE

    def validate(self) -> list[str]:
        """Valida configurações mínimas de WhatsApp.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if self.staleness_window_seconds <= 0:
            errors.append("STALENESS_WINDOW_SECONDS deve ser > 0")

        if self.typing_delay_min_ms < 0:
            errors.append("TYPING_DELAY_MIN deve ser >= 0")

        if self.typing_delay_max_ms < self.typing_delay_min_ms:
            errors.append("TYPING_DELAY_MAX deve ser >= TYPING_DELAY_MIN")

        if self.typing_per_char_ms < 0:
            errors.append("TYPING_PER_CHAR_MS deve ser >= 0")

        if self.active_chats_soft_cap < 1:
            errors.append("ACTIVE_CHATS_SOFT_CAP deve ser >= 1")

        if not self.default_country_code.isdigit():
            errors.append("DEFAULT_COUNTRY_CODE deve conter apenas dígitos")

        return errors


def _load_from_env() -> WhatsAppSettings:
    """Carrega WhatsAppSettings a partir de variáveis de ambiente."""
    return WhatsAppSettings(
        staleness_window_seconds=float(os.getenv("STALENESS_WINDOW_SECONDS", "300")),
        typing_delay_min_ms=int(os.getenv("TYPING_DELAY_MIN", "1000")),
        typing_delay_max_ms=int(os.getenv("TYPING_DELAY_MAX", "3000")),
        typing_per_char_ms=int(os.getenv("TYPING_PER_CHAR_MS", "30")),
        active_chats_soft_cap=int(os.getenv("ACTIVE_CHATS_SOFT_CAP", "50")),
        default_country_code=os.getenv("DEFAULT_COUNTRY_CODE", "91"),
        apology_message=os.getenv("APOLOGY_MESSAGE", DEFAULT_APOLOGY_MESSAGE),
    )


@lru_cache(maxsize=1)
def get_whatsapp_settings() -> WhatsAppSettings:
    """Retorna instância cacheada de WhatsAppSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
