"""Serviços do módulo AI."""

from ai.services.reply_engine import ReplyEngine, ReplyOutcome, ReplySource, SweepResult

__all__ = [
    "ReplyEngine",
    "ReplyOutcome",
    "ReplySource",
    "SweepResult",
]
