"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AdapterInitError,
    CapacityExceededError,
    GatewayError,
    NotReadyError,
    SessionNotFoundError,
)

__all__ = [
    "AdapterInitError",
    "CapacityExceededError",
    "GatewayError",
    "NotReadyError",
    "SessionNotFoundError",
]
