"""Registros de transição e resultado de tentativa."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.states.session import SessionState


@dataclass(frozen=True, slots=True)
class StateTransition:
    """Uma mudança de estado aplicada.

    Attributes:
        from_state: Estado anterior
        to_state: Estado novo
        trigger: Evento ou comando que causou a mudança (ex: 'disconnected')
        metadata: Contexto de auditoria, sem PII
        timestamp: Momento da mudança (UTC)
    """

    from_state: SessionState
    to_state: SessionState
    trigger: str
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")

    @property
    def is_self_loop(self) -> bool:
        return self.from_state == self.to_state

    def to_log_dict(self) -> dict[str, Any]:
        return {
            "from_state": self.from_state.name,
            "to_state": self.to_state.name,
            "trigger": self.trigger,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """Sucesso traz `transition`; falha traz `error_reason`."""

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.transition is None:
            raise ValueError("resultado de sucesso exige transition")
        if not self.success and self.error_reason is None:
            raise ValueError("resultado de falha exige error_reason")
