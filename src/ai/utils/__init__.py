"""Utilitários puros do módulo AI."""

from ai.utils.sanitizer import sanitize_reply, strip_markdown, truncate_reply

__all__ = [
    "sanitize_reply",
    "strip_markdown",
    "truncate_reply",
]
