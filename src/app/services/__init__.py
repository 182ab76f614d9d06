"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.gateway_service import GatewayService, format_contact_id
from app.services.typing_simulator import TypingSimulator, compute_typing_delay_ms

__all__ = [
    "GatewayService",
    "TypingSimulator",
    "compute_typing_delay_ms",
    "format_contact_id",
]
