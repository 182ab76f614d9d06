"""Redação de identificadores antes de irem para os logs.

Contatos do WhatsApp são números de telefone (PII). Os logs carregam
apenas um prefixo de hash estável, suficiente para correlacionar eventos
do mesmo contato.
"""

from __future__ import annotations

import hashlib

_HASH_PREFIX_LEN = 12


def hash_contact_id(contact_id: str | None) -> str:
    """Retorna prefixo SHA-256 do contato (string vazia se ausente)."""
    if not contact_id:
        return ""
    return hashlib.sha256(contact_id.encode("utf-8")).hexdigest()[:_HASH_PREFIX_LEN]
