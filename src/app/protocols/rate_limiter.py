"""Protocolo de domínio para rate limit de respostas por contato."""

from __future__ import annotations

from abc import ABC, abstractmethod


class RateLimiterProtocol(ABC):
    """Contrato mínimo para rate limit de janela fixa.

    Método canônico:
    - try_acquire(key) -> bool
      Consome uma unidade da cota do contato. False se a cota da janela
      atual já foi usada (nada é consumido nesse caso).
    """

    @abstractmethod
    def try_acquire(self, key: str) -> bool:
        """Verifica e consome cota de forma atômica.

        Args:
            key: Identificador do contato

        Returns:
            True se permitido; False se limitado.
        """

    @abstractmethod
    def purge_stale(self) -> int:
        """Remove entradas cuja janela terminou há mais que a folga configurada."""

    @abstractmethod
    def tracked_count(self) -> int:
        """Contatos com estado de rate limit."""
