"""Simulação de digitação antes de cada resposta.

Atraso = min(base + len(resposta) * ms_por_char, máximo), com base
sorteada uniformemente em [mínimo, máximo].
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING

from config.logging import hash_contact_id

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.protocols.adapter import WhatsAppAdapterProtocol
    from config.settings.whatsapp import WhatsAppSettings

logger = logging.getLogger(__name__)


def compute_typing_delay_ms(
    reply: str,
    settings: WhatsAppSettings,
    rng: random.Random | None = None,
) -> float:
    """Calcula o atraso de digitação em milissegundos.

    Args:
        reply: Texto que será enviado
        settings: Limites de digitação
        rng: Gerador aleatório (injetável para determinismo)

    Returns:
        Atraso em ms, nunca acima de typing_delay_max_ms.
    """
    source = rng or random
    base = source.uniform(settings.typing_delay_min_ms, settings.typing_delay_max_ms)
    per_char = len(reply) * settings.typing_per_char_ms
    return min(base + per_char, settings.typing_delay_max_ms)


class TypingSimulator:
    """Mostra "digitando...", espera o atraso e limpa o indicador."""

    __slots__ = ("_rng", "_settings", "_sleep")

    def __init__(
        self,
        settings: WhatsAppSettings,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._rng = rng
        self._sleep = sleep

    def delay_ms(self, reply: str) -> float:
        return compute_typing_delay_ms(reply, self._settings, self._rng)

    async def simulate(
        self,
        adapter: WhatsAppAdapterProtocol,
        contact_id: str,
        reply: str,
    ) -> float:
        """Executa a simulação. Retorna o atraso aplicado (ms).

        Falhas ao ligar/desligar o indicador não interrompem a entrega.
        Cancelamento durante a espera é propagado após limpar o indicador.
        """
        delay = self.delay_ms(reply)
        try:
            await adapter.set_composing(contact_id)
        except Exception as exc:
            logger.warning(
                "typing_indicator_failed",
                extra={"contact": hash_contact_id(contact_id), "error_type": type(exc).__name__},
            )
        try:
            await self._sleep(delay / 1000)
        finally:
            await self._clear(adapter, contact_id)
        return delay

    async def _clear(self, adapter: WhatsAppAdapterProtocol, contact_id: str) -> None:
        try:
            await adapter.clear_composing(contact_id)
        except Exception as exc:
            logger.warning(
                "typing_clear_failed",
                extra={"contact": hash_contact_id(contact_id), "error_type": type(exc).__name__},
            )
