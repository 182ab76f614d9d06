"""Guards avaliados depois do grafo.

Uma aresta presente em VALID_TRANSITIONS ainda pode ser negada aqui.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from fsm.states.session import TERMINAL_STATES, SessionState

# Só um novo desafio de credencial repete o estado
SELF_LOOP_STATES: frozenset[SessionState] = frozenset({SessionState.PENDING_CREDENTIAL})


@dataclass(frozen=True, slots=True)
class GuardResult:
    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> GuardResult:
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> GuardResult:
        return cls(False, reason)


Guard = Callable[[SessionState, SessionState], GuardResult]


def guard_valid_state(from_state: SessionState, to_state: SessionState) -> GuardResult:
    for label, state in (("origem", from_state), ("destino", to_state)):
        if not isinstance(state, SessionState):
            return GuardResult.deny(f"Estado de {label} inválido: {state!r}")
    return GuardResult.allow()


def guard_terminal_state(from_state: SessionState, to_state: SessionState) -> GuardResult:
    if from_state in TERMINAL_STATES:
        return GuardResult.deny(f"{from_state.name} é terminal; sessão precisa ser recriada")
    return GuardResult.allow()


def guard_same_state(from_state: SessionState, to_state: SessionState) -> GuardResult:
    if from_state == to_state and from_state not in SELF_LOOP_STATES:
        return GuardResult.deny(f"Transição reflexiva não permitida em {from_state.name}")
    return GuardResult.allow()


DEFAULT_GUARDS: tuple[Guard, ...] = (
    guard_valid_state,
    guard_terminal_state,
    guard_same_state,
)


def evaluate_guards(
    from_state: SessionState,
    to_state: SessionState,
    guards: list[Guard] | tuple[Guard, ...] | None = None,
) -> GuardResult:
    """Primeira negação vence; sem negação, a transição é permitida."""
    for guard in DEFAULT_GUARDS if guards is None else guards:
        result = guard(from_state, to_state)
        if not result.allowed:
            return result
    return GuardResult.allow()
