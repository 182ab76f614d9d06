"""Casos de uso do canal WhatsApp."""

from app.use_cases.whatsapp.process_inbound_message import (
    InboundProcessingResult,
    ProcessInboundMessageUseCase,
    SkipReason,
)

__all__ = [
    "InboundProcessingResult",
    "ProcessInboundMessageUseCase",
    "SkipReason",
]
