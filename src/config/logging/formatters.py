"""Saída JSON dos logs (python-json-logger).

Cada linha carrega os campos base abaixo mais o que vier em `extra=`
(session_id, trigger, contact já em hash...).
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = ("asctime", "levelname", "name", "message", "correlation_id", "service")

FIELD_RENAME_MAP = {"levelname": "level", "name": "logger"}

ISO_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def create_json_formatter(datefmt: str = ISO_DATE_FORMAT) -> JsonFormatter:
    """Formatter com nomes curtos (level, logger) e unicode preservado.

    Mensagens de contatos chegam em hindi, hinglish e afins; json_ensure_ascii
    desligado mantém o texto legível no agregador.
    """
    return JsonFormatter(
        " ".join(f"%({name})s" for name in REQUIRED_LOG_FIELDS),
        datefmt=datefmt,
        rename_fields=FIELD_RENAME_MAP,
        json_ensure_ascii=False,
    )
