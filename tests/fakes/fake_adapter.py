"""Fakes do adapter WhatsApp Web e do notifier para testes."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Any

from app.protocols.adapter import AdapterEvent, AdapterEventKind, AdapterEventSink, InboundMessage


class FakeAdapter:
    """Adapter em memória que registra chamadas e publica eventos no sink."""

    def __init__(
        self,
        session_id: str,
        sink: AdapterEventSink,
        *,
        init_error: Exception | None = None,
        init_gate: asyncio.Event | None = None,
        send_error: Exception | None = None,
        connection_state: str | None = "CONNECTED",
    ) -> None:
        self.session_id = session_id
        self.sink = sink
        self.init_error = init_error
        self.init_gate = init_gate
        self.send_error = send_error
        self.connection_state = connection_state
        self.display_names: dict[str, str] = {}
        self.initialized = False
        self.destroy_calls = 0
        self.sent: list[tuple[str, str]] = []
        self.calls: list[tuple[str, str]] = []

    # ── protocolo ──

    async def initialize(self) -> None:
        if self.init_gate is not None:
            await self.init_gate.wait()
        if self.init_error is not None:
            raise self.init_error
        self.initialized = True

    async def send_text(self, contact_id: str, text: str) -> None:
        self.calls.append(("send_text", contact_id))
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((contact_id, text))

    async def set_composing(self, contact_id: str) -> None:
        self.calls.append(("set_composing", contact_id))

    async def clear_composing(self, contact_id: str) -> None:
        self.calls.append(("clear_composing", contact_id))

    async def get_contact_display_name(self, contact_id: str) -> str | None:
        return self.display_names.get(contact_id)

    async def get_connection_state(self) -> str | None:
        return self.connection_state

    async def destroy(self) -> None:
        self.destroy_calls += 1

    # ── helpers de teste ──

    def emit(self, kind: AdapterEventKind | str, **payload: Any) -> None:
        self.sink(AdapterEvent(kind=AdapterEventKind(kind), payload=payload))

    def emit_message(
        self,
        body: str,
        sender_id: str = "919876543210@c.us",
        *,
        message_id: str = "wamid.1",
        timestamp: datetime | None = None,
        from_self: bool = False,
        is_group: bool = False,
        sender_display_name: str | None = None,
    ) -> InboundMessage:
        message = InboundMessage(
            message_id=message_id,
            sender_id=sender_id,
            body=body,
            timestamp=timestamp or datetime.now(UTC),
            from_self=from_self,
            is_group=is_group,
            sender_display_name=sender_display_name,
        )
        self.sink(AdapterEvent(kind=AdapterEventKind.MESSAGE, message=message))
        return message


class FakeAdapterFactory:
    """Factory que registra cada adapter criado (uma entrada por encarnação)."""

    def __init__(self, **adapter_kwargs: Any) -> None:
        self.adapter_kwargs = adapter_kwargs
        self.created: list[FakeAdapter] = []
        self.factory_error: Exception | None = None
        # Próximas N encarnações falham em initialize()
        self.init_failures = 0
        # initialize() da sessão aguarda o Event antes de concluir
        self.init_gates: dict[str, asyncio.Event] = {}

    def __call__(self, session_id: str, sink: AdapterEventSink) -> FakeAdapter:
        if self.factory_error is not None:
            raise self.factory_error
        kwargs = dict(self.adapter_kwargs)
        if self.init_failures > 0:
            self.init_failures -= 1
            kwargs["init_error"] = RuntimeError("browser launch failed")
        if session_id in self.init_gates:
            kwargs["init_gate"] = self.init_gates[session_id]
        adapter = FakeAdapter(session_id, sink, **kwargs)
        self.created.append(adapter)
        return adapter

    @property
    def last(self) -> FakeAdapter:
        return self.created[-1]


class RecordingNotifier:
    """Notifier que guarda (evento, payload) em ordem."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        self.events.append((event, dict(payload)))

    def named(self, event: str) -> list[dict[str, Any]]:
        return [payload for name, payload in self.events if name == event]
