"""Protocolos e contratos do core da aplicação."""

from .adapter import (
    LIFECYCLE_EVENT_KINDS,
    AdapterEvent,
    AdapterEventKind,
    AdapterEventSink,
    AdapterFactory,
    InboundMessage,
    WhatsAppAdapterProtocol,
)
from .conversation_store import ConversationStoreProtocol
from .notifier import NotifierProtocol
from .rate_limiter import RateLimiterProtocol
from .session_handle import ReplySessionProtocol

__all__ = [
    "LIFECYCLE_EVENT_KINDS",
    "AdapterEvent",
    "AdapterEventKind",
    "AdapterEventSink",
    "AdapterFactory",
    "ConversationStoreProtocol",
    "InboundMessage",
    "NotifierProtocol",
    "RateLimiterProtocol",
    "ReplySessionProtocol",
    "WhatsAppAdapterProtocol",
]
