"""Módulo de sessões WhatsApp.

Exporta a sessão gerenciada, o registry e os modelos de leitura.
"""

from app.sessions.lifetime import DeliveryLease, LifetimeToken
from app.sessions.models import SessionSnapshot
from app.sessions.registry import SessionRegistry
from app.sessions.session import ManagedSession

__all__ = [
    "DeliveryLease",
    "LifetimeToken",
    "ManagedSession",
    "SessionRegistry",
    "SessionSnapshot",
]
