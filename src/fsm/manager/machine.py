"""Máquina de estados de uma sessão.

Eventos do adapter e comandos (stop/restart) passam pelo mesmo caminho:
grafo primeiro, guards depois, histórico limitado no fim.
"""

from __future__ import annotations

from collections import deque
from typing import Any

from fsm.rules.guards import evaluate_guards
from fsm.states.session import DEFAULT_INITIAL_STATE, SessionState, is_terminal
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult

# Reinícios não têm limite; só as transições mais recentes ficam guardadas
DEFAULT_HISTORY_LIMIT = 200

INITIAL_STATES = frozenset({DEFAULT_INITIAL_STATE})


class FSMStateMachine:
    """Estado atual mais histórico recente de transições aplicadas."""

    __slots__ = ("_history", "_session_id", "_state")

    def __init__(
        self,
        initial_state: SessionState | None = None,
        session_id: str = "",
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self._state = initial_state or DEFAULT_INITIAL_STATE
        self._session_id = session_id
        self._history: deque[StateTransition] = deque(maxlen=history_limit)

    @property
    def current_state(self) -> SessionState:
        return self._state

    @property
    def history(self) -> list[StateTransition]:
        return list(self._history)

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self._state)

    def get_valid_targets(self) -> frozenset[SessionState]:
        return get_valid_targets(self._state)

    def can_transition_to(self, target: SessionState) -> bool:
        return self._check(target) is None

    def transition(
        self,
        target: SessionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """Aplica a transição se grafo e guards permitirem.

        Falhas não alteram o estado nem o histórico.

        Args:
            target: Estado de destino
            trigger: Origem da mudança (ex: 'ready', 'explicit_stop')
            metadata: Contexto de auditoria, sem PII
        """
        denial = self._check(target)
        if denial is not None:
            return TransitionResult(success=False, error_reason=denial)

        applied = StateTransition(
            from_state=self._state,
            to_state=target,
            trigger=trigger,
            metadata=dict(metadata or {}),
        )
        self._state = target
        self._history.append(applied)
        return TransitionResult(success=True, transition=applied)

    def get_state_summary(self) -> dict[str, Any]:
        return {
            "session_id": self._session_id,
            "current_state": self._state.name,
            "is_terminal": self.is_terminal,
            "transition_count": len(self._history),
            "valid_targets": sorted(target.name for target in self.get_valid_targets()),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        return [entry.to_log_dict() for entry in self._history]

    def _check(self, target: SessionState) -> str | None:
        if not is_transition_valid(self._state, target):
            return f"Transição inválida: {self._state.name} → {target.name}"
        verdict = evaluate_guards(self._state, target)
        return None if verdict.allowed else verdict.reason


def create_fsm(session_id: str, initial_state: SessionState | None = None) -> FSMStateMachine:
    return FSMStateMachine(initial_state=initial_state, session_id=session_id)
