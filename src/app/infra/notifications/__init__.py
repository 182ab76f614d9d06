"""Implementações de notifier (destino dos eventos para a UI)."""

from app.infra.notifications.logging_notifier import LoggingNotifier

__all__ = ["LoggingNotifier"]
