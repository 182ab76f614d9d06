"""Token de tempo de vida de uma encarnação do adapter.

Cada vez que a sessão cria um adapter novo, um LifetimeToken novo é emitido.
stop(), restart e falha cancelam o token corrente; quem segura uma
DeliveryLease confere o token antes de qualquer envio.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.protocols.adapter import WhatsAppAdapterProtocol


class LifetimeToken:
    """Flag de cancelamento de uma encarnação (epoch) do adapter."""

    __slots__ = ("_cancelled", "_reason", "epoch")

    def __init__(self, epoch: int) -> None:
        self.epoch = epoch
        self._cancelled = False
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str) -> None:
        """Cancela o token (idempotente; mantém o primeiro motivo)."""
        if not self._cancelled:
            self._cancelled = True
            self._reason = reason

    def __repr__(self) -> str:
        return f"LifetimeToken(epoch={self.epoch}, cancelled={self._cancelled})"


@dataclass(frozen=True, slots=True)
class DeliveryLease:
    """Adapter da encarnação corrente junto com seu token."""

    session_id: str
    adapter: WhatsAppAdapterProtocol
    token: LifetimeToken

    @property
    def active(self) -> bool:
        return not self.token.cancelled
