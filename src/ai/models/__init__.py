"""DTOs do módulo AI."""

from ai.models.conversation import ConversationTurn

__all__ = ["ConversationTurn"]
