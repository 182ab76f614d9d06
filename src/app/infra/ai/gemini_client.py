"""Cliente Gemini real para produção.

Implementa CompletionClientProtocol com chamadas à API generateContent.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

import httpx

from app.infra.ai._gemini_http import call_gemini_api
from app.observability import get_correlation_id, record_latency

if TYPE_CHECKING:
    from ai.config.settings import AISettings
    from config.settings.ai.gemini import GeminiSettings

logger = logging.getLogger(__name__)


class GeminiClient:
    """Cliente Gemini para produção.

    Usa httpx para requests async. O timeout total da chamada é imposto
    também por asyncio.wait_for, cobrindo conexão lenta e resposta parcial.
    """

    __slots__ = ("_ai_settings", "_gemini", "_http_client", "_owns_http_client")

    def __init__(
        self,
        gemini: GeminiSettings | None = None,
        ai_settings: AISettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        from ai.config.settings import get_ai_settings
        from config.settings.ai.gemini import get_gemini_settings

        self._gemini = gemini or get_gemini_settings()
        self._ai_settings = ai_settings or get_ai_settings()
        self._http_client = http_client
        self._owns_http_client = http_client is None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Obtém ou cria cliente HTTP."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._gemini.timeout_seconds)
        return self._http_client

    async def complete(self, prompt: str) -> str | None:
        """Gera texto para o prompt (None em qualquer falha)."""
        client = await self._get_http_client()
        started = time.perf_counter()
        try:
            return await asyncio.wait_for(
                call_gemini_api(
                    http_client=client,
                    gemini=self._gemini,
                    settings=self._ai_settings,
                    prompt=prompt,
                ),
                timeout=self._gemini.timeout_seconds,
            )
        except TimeoutError:
            logger.warning(
                "gemini_timeout",
                extra={"model": self._gemini.model, "timeout": self._gemini.timeout_seconds},
            )
            return None
        finally:
            record_latency(
                "gemini_client",
                "generate_content",
                (time.perf_counter() - started) * 1000,
                get_correlation_id(),
            )

    async def aclose(self) -> None:
        """Fecha o cliente HTTP se foi criado aqui."""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None
