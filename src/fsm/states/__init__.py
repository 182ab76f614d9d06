"""Estados da sessão."""

from fsm.states.session import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    SessionState,
    is_terminal,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "SessionState",
    "is_terminal",
    "is_valid_state",
]
