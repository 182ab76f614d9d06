"""Correlação de eventos e métricas emitidas como logs estruturados."""

from app.observability.correlation import (
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    record_latency,
    record_reply_outcome,
    record_session_transition,
)

__all__ = [
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "record_latency",
    "record_reply_outcome",
    "record_session_transition",
    "reset_correlation_id",
    "set_correlation_id",
]
