"""Configurações para o módulo de IA.

Parâmetros de geração e limites de segurança enviados ao Gemini, além dos
limites aplicados à resposta antes da entrega.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class HarmCategory(StrEnum):
    """Categorias de segurança do Gemini filtradas em toda chamada."""

    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"


class BlockThreshold(StrEnum):
    """Limiar de bloqueio do Gemini."""

    BLOCK_NONE = "BLOCK_NONE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"


@dataclass(frozen=True, slots=True)
class GenerationSettings:
    """Parâmetros de generationConfig.

    Atributos:
        temperature: Temperatura para geração
        top_k: Amostragem top-k
        top_p: Amostragem nucleus
        max_output_tokens: Limite de tokens na resposta
        candidate_count: Candidatos pedidos (só o primeiro é usado)
    """

    temperature: float = 0.8
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 200
    candidate_count: int = 1

    def to_payload(self) -> dict[str, float | int]:
        """Serializa no formato camelCase da API."""
        return {
            "temperature": self.temperature,
            "topK": self.top_k,
            "topP": self.top_p,
            "maxOutputTokens": self.max_output_tokens,
            "candidateCount": self.candidate_count,
        }


@dataclass(frozen=True, slots=True)
class SafetySettings:
    """Filtros de segurança: mesmo limiar para todas as categorias."""

    categories: tuple[HarmCategory, ...] = tuple(HarmCategory)
    threshold: BlockThreshold = BlockThreshold.BLOCK_MEDIUM_AND_ABOVE

    def to_payload(self) -> list[dict[str, str]]:
        return [
            {"category": category.value, "threshold": self.threshold.value}
            for category in self.categories
        ]


@dataclass(frozen=True, slots=True)
class ReplySettings:
    """Limites aplicados à resposta e ao prompt.

    Atributos:
        max_length: Tamanho máximo da resposta entregue
        context_turns: Turnos do histórico incluídos no prompt
    """

    max_length: int = 500
    context_turns: int = 3


@dataclass(frozen=True, slots=True)
class AISettings:
    """Agregador de todas as configurações de IA.

    Exemplo de uso:
        settings = AISettings(generation=GenerationSettings(temperature=0.5))
    """

    generation: GenerationSettings = field(default_factory=GenerationSettings)
    safety: SafetySettings = field(default_factory=SafetySettings)
    reply: ReplySettings = field(default_factory=ReplySettings)


# Settings padrão (singleton imutável)
DEFAULT_AI_SETTINGS = AISettings()


def get_ai_settings() -> AISettings:
    """Retorna configurações de IA padrão."""
    return DEFAULT_AI_SETTINGS
