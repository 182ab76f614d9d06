"""Core do módulo AI.

Exporta protocols e clients para uso externo.
A implementação GeminiClient está em app/infra/ai/ (IO).
"""

from ai.core.client import CompletionClientProtocol
from ai.core.mock_client import MockCompletionClient

__all__ = [
    "CompletionClientProtocol",
    "MockCompletionClient",
]
