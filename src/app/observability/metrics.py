"""Métricas emitidas como logs estruturados.

Não há backend de métricas: o agregador de logs conta e soma pelos campos
`metric_type` e demais chaves do extra. Eventos:
- metric_latency (component, operation, latency_ms)
- metric_reply_outcome (generated|fallback|rate_limited|command|apology)
- metric_session_transition (from_state, to_state, trigger)
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


def _emit(metric_type: str, **fields: Any) -> None:
    extra = {"metric_type": metric_type}
    extra.update({key: value for key, value in fields.items() if value is not None})
    logger.info(f"metric_{metric_type}", extra=extra)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Latência de uma operação, em ms com duas casas.

    Args:
        component: Quem mediu (ex: "gemini_client", "pipeline")
        operation: O que foi medido (ex: "generate_content")
    """
    _emit(
        "latency",
        component=component,
        operation=operation,
        latency_ms=round(latency_ms, 2),
        correlation_id=correlation_id,
    )


def record_reply_outcome(
    outcome: str,
    language: str | None = None,
    correlation_id: str | None = None,
) -> None:
    _emit(
        "reply_outcome",
        component="reply_engine",
        outcome=str(outcome),
        language=language or None,
        correlation_id=correlation_id,
    )


def record_session_transition(
    session_id: str,
    from_state: str,
    to_state: str,
    trigger: str,
) -> None:
    _emit(
        "session_transition",
        component="session",
        session_id=session_id,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )
