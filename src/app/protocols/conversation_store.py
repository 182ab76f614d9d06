"""Protocolo de domínio para o histórico de conversa.

Histórico por contato, compartilhado por todas as sessões do processo.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from ai.models.conversation import ConversationTurn


class ConversationStoreProtocol(ABC):
    """Contrato para armazenamento de turnos por contato.

    Invariantes:
        - No máximo `history_limit` turnos por contato (FIFO)
        - Ordem de inserção preservada
        - Read-modify-write por contato é atômico
        - Sem PII em logs
    """

    @abstractmethod
    def get_history(self, contact_id: str) -> list[ConversationTurn]:
        """Retorna cópia dos turnos do contato (mais antigo primeiro)."""

    @abstractmethod
    def append_turn(self, contact_id: str, turn: ConversationTurn) -> None:
        """Adiciona turno, descartando o mais antigo acima do limite."""

    @abstractmethod
    def clear(self, contact_id: str) -> bool:
        """Remove o histórico do contato. True se existia."""

    @abstractmethod
    def purge_older_than(self, cutoff: datetime) -> int:
        """Remove históricos vazios ou cujo último turno é anterior a cutoff.

        Returns:
            Quantidade de contatos removidos.
        """

    @abstractmethod
    def conversation_count(self) -> int:
        """Contatos com histórico."""

    @abstractmethod
    def total_turns(self) -> int:
        """Soma de turnos de todos os contatos."""

    @abstractmethod
    def language_counts(self) -> dict[str, int]:
        """Turnos por idioma detectado."""
