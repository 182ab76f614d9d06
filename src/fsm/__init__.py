"""Ciclo de vida das sessões como máquina de estados determinística.

Subpacotes: states (enum e terminais), transitions (grafo), rules (guards),
types (registros de transição) e manager (FSMStateMachine).
"""

from fsm.manager import INITIAL_STATES, FSMStateMachine, create_fsm
from fsm.rules import GuardResult, evaluate_guards
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    SessionState,
    is_terminal,
    is_valid_state,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import StateTransition, TransitionResult

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "INITIAL_STATES",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "FSMStateMachine",
    "GuardResult",
    "SessionState",
    "StateTransition",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]
