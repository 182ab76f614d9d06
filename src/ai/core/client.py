"""Protocolo para clientes de completion.

Define o contrato CompletionClientProtocol para implementações concretas.
ai/ não faz IO direto: o cliente HTTP do Gemini vive em app/infra/ai/.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol


class CompletionClientProtocol(Protocol):
    """Protocolo para clientes de completion de texto.

    Permite injeção de dependência e testabilidade (Gemini, mock, etc.).
    """

    @abstractmethod
    async def complete(self, prompt: str) -> str | None:
        """Gera texto a partir do prompt.

        Args:
            prompt: Prompt completo (persona + contexto + mensagem)

        Returns:
            Texto gerado, ou None em timeout, erro HTTP, erro de rede ou
            payload inválido. Nunca levanta exceção de transporte.
        """
        ...
