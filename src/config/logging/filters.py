"""Filter que completa cada record com contexto do gateway."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.redaction import hash_contact_id

if TYPE_CHECKING:
    from collections.abc import Callable

# Atributos de extra que carregam contato em claro
_RAW_CONTACT_FIELDS = ("contact_id", "sender_id")


def _no_correlation() -> str:
    return ""


class CorrelationIdFilter(logging.Filter):
    """Adiciona correlation_id e service; troca contato em claro por hash.

    Um correlation_id passado explicitamente em `extra` tem precedência
    sobre o do getter. Campos `contact_id`/`sender_id` em `extra` são
    substituídos pelo prefixo de hash antes de chegar ao formatter.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._correlation_id = correlation_id_getter or _no_correlation

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = self._correlation_id()
        record.service = self._service_name
        for field in _RAW_CONTACT_FIELDS:
            raw = getattr(record, field, None)
            if isinstance(raw, str) and raw:
                setattr(record, field, hash_contact_id(raw))
        return True
