"""Stores de infraestrutura (em memória)."""

from app.infra.stores.memory_stores import (
    ActiveChatSet,
    MemoryConversationStore,
    MemoryRateLimiter,
)

__all__ = [
    "ActiveChatSet",
    "MemoryConversationStore",
    "MemoryRateLimiter",
]
