"""Estados do ciclo de vida de uma sessão WhatsApp Web."""

from enum import StrEnum


class SessionState(StrEnum):
    """Estado da conexão de uma sessão com a rede.

    PENDING_CREDENTIAL é o estado inicial e o único que aceita repetir
    (cada novo QR). FAILED é absorvente: a sessão precisa ser recriada.
    """

    PENDING_CREDENTIAL = "PENDING_CREDENTIAL"
    AUTHENTICATED = "AUTHENTICATED"
    READY = "READY"
    DISCONNECTED = "DISCONNECTED"
    FAILED = "FAILED"

    def __str__(self) -> str:
        return self.value


TERMINAL_STATES: frozenset[SessionState] = frozenset({SessionState.FAILED})

DEFAULT_INITIAL_STATE = SessionState.PENDING_CREDENTIAL


def is_terminal(state: SessionState) -> bool:
    return state in TERMINAL_STATES


def is_valid_state(state: object) -> bool:
    return isinstance(state, SessionState)
