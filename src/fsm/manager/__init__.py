"""Máquina de estados por sessão."""

from fsm.manager.machine import DEFAULT_HISTORY_LIMIT, INITIAL_STATES, FSMStateMachine, create_fsm

__all__ = ["DEFAULT_HISTORY_LIMIT", "INITIAL_STATES", "FSMStateMachine", "create_fsm"]
