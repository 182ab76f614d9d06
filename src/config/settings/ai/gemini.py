"""Settings do Gemini.

Configurações para integração com a API generateContent do Google Gemini.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

GEMINI_API_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"


@dataclass(frozen=True)
class GeminiSettings:
    """Configurações do Gemini.

    Attributes:
        api_key: Chave da API Gemini
        model: Modelo usado em generateContent
        api_base_url: URL base da API
        timeout_seconds: Timeout total da chamada
        bot_name: Nome da persona usado nos prompts
        enabled: Se integração Gemini está habilitada
    """

    api_key: str = ""
    model: str = "gemini-2.0-flash"
    api_base_url: str = GEMINI_API_BASE_URL
    timeout_seconds: float = 15.0
    bot_name: str = "WhatsApp Assistant"
    enabled: bool = True

    @property
    def generate_content_url(self) -> str:
        """URL completa do endpoint generateContent do modelo."""
        return f"{self.api_base_url}/models/{self.model}:generateContent"

    def validate(self) -> list[str]:
        """Valida configurações do Gemini.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.enabled and not self.api_key:
            errors.append("GEMINI_API_KEY não configurado mas GEMINI_ENABLED=true")

        if not self.model:
            errors.append("GEMINI_MODEL não pode ser vazio")

        if self.timeout_seconds <= 0:
            errors.append("GEMINI_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_gemini_from_env() -> GeminiSettings:
    """Carrega GeminiSettings de variáveis de ambiente."""
    return GeminiSettings(
        api_key=os.getenv("GEMINI_API_KEY", ""),
        model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
        api_base_url=os.getenv("GEMINI_API_BASE_URL", GEMINI_API_BASE_URL),
        timeout_seconds=float(os.getenv("GEMINI_TIMEOUT_SECONDS", "15")),
        bot_name=os.getenv("BOT_NAME", "WhatsApp Assistant"),
        enabled=os.getenv("GEMINI_ENABLED", "true").lower() in ("true", "1", "yes"),
    )


@lru_cache(maxsize=1)
def get_gemini_settings() -> GeminiSettings:
    """Retorna instância cacheada de GeminiSettings."""
    return _load_gemini_from_env()
