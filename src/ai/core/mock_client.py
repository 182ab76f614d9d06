"""Cliente mock de completion para testes e desenvolvimento.

Retorna respostas determinísticas sem chamar LLM real.
"""

from __future__ import annotations


class MockCompletionClient:
    """Cliente mock que implementa CompletionClientProtocol.

    Args:
        reply: Texto retornado em toda chamada. None simula indisponibilidade.
    """

    def __init__(self, reply: str | None = "Haan bilkul! Batao, kya madad chahiye? 🙂") -> None:
        self._reply = reply
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str | None:
        """Registra o prompt e devolve a resposta configurada."""
        self.prompts.append(prompt)
        return self._reply

    @property
    def call_count(self) -> int:
        return len(self.prompts)
