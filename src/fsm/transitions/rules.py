"""Grafo de transições do ciclo de vida.

credencial → autenticado → pronto → desconectado → credencial (reinício).
Qualquer estado não terminal pode cair em FAILED.
"""

from fsm.states.session import TERMINAL_STATES, SessionState

TransitionMap = dict[SessionState, frozenset[SessionState]]

_S = SessionState

VALID_TRANSITIONS: TransitionMap = {
    _S.PENDING_CREDENTIAL: frozenset(
        {_S.PENDING_CREDENTIAL, _S.AUTHENTICATED, _S.DISCONNECTED, _S.FAILED}
    ),
    _S.AUTHENTICATED: frozenset({_S.READY, _S.DISCONNECTED, _S.FAILED}),
    _S.READY: frozenset({_S.DISCONNECTED, _S.FAILED}),
    _S.DISCONNECTED: frozenset({_S.PENDING_CREDENTIAL, _S.FAILED}),
    _S.FAILED: frozenset(),
}


def get_valid_targets(state: SessionState) -> frozenset[SessionState]:
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: SessionState, to_state: SessionState) -> bool:
    """True se a aresta existe no grafo (estados terminais não têm saída)."""
    return from_state not in TERMINAL_STATES and to_state in get_valid_targets(from_state)


def validate_transition_map(transitions: TransitionMap | None = None) -> list[str]:
    """Confere o grafo: todo estado presente, terminais sem saída, destinos válidos.

    Returns:
        Lista de problemas (vazia se consistente).
    """
    graph = VALID_TRANSITIONS if transitions is None else transitions
    problems = [f"Estado {s.name} ausente no grafo" for s in SessionState if s not in graph]
    problems.extend(
        f"Estado terminal {s.name} com saídas: {sorted(t.name for t in graph[s])}"
        for s in TERMINAL_STATES
        if graph.get(s)
    )
    problems.extend(
        f"Destino inválido em {source.name}: {target!r}"
        for source, targets in graph.items()
        for target in targets
        if not isinstance(target, SessionState)
    )
    return problems
