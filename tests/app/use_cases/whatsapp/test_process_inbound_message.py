"""Testes do ProcessInboundMessageUseCase."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from ai.core.mock_client import MockCompletionClient
from ai.services.reply_engine import ReplyEngine
from app.infra.stores.memory_stores import ActiveChatSet, MemoryConversationStore, MemoryRateLimiter
from app.protocols.adapter import InboundMessage
from app.services.typing_simulator import TypingSimulator
from app.sessions.lifetime import DeliveryLease, LifetimeToken
from app.use_cases.whatsapp.process_inbound_message import (
    ProcessInboundMessageUseCase,
    SkipReason,
)
from config.settings.whatsapp import DEFAULT_APOLOGY_MESSAGE, WhatsAppSettings
from tests.fakes.fake_adapter import FakeAdapter, RecordingNotifier

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)
CONTACT = "919876543210@c.us"


class _Session:
    """Sessão mínima para o pipeline."""

    def __init__(self, adapter: FakeAdapter, *, ready: bool = True) -> None:
        self.session_id = "s1"
        self.adapter = adapter
        self.token = LifetimeToken(1)
        self.ready = ready
        self.sent = 0

    def delivery_lease(self) -> DeliveryLease | None:
        if not self.ready:
            return None
        return DeliveryLease(session_id=self.session_id, adapter=self.adapter, token=self.token)

    def record_message_sent(self) -> None:
        self.sent += 1


def _message(body: str = "hello", **overrides: object) -> InboundMessage:
    fields: dict[str, object] = {
        "message_id": "wamid.1",
        "sender_id": CONTACT,
        "body": body,
        "timestamp": NOW - timedelta(seconds=5),
    }
    fields.update(overrides)
    return InboundMessage(**fields)  # type: ignore[arg-type]


def _build(
    client: object | None = None,
    *,
    typing: TypingSimulator | None = None,
) -> tuple[ProcessInboundMessageUseCase, MemoryConversationStore, ActiveChatSet, RecordingNotifier]:
    store = MemoryConversationStore()
    engine = ReplyEngine(
        client or MockCompletionClient("Hi there!"),  # type: ignore[arg-type]
        store,
        MemoryRateLimiter(),
        now=lambda: NOW,
    )
    active = ActiveChatSet()
    notifier = RecordingNotifier()
    use_case = ProcessInboundMessageUseCase(
        reply_engine=engine,
        typing_simulator=typing or TypingSimulator(WhatsAppSettings(), sleep=AsyncMock()),
        active_chats=active,
        notifier=notifier,
        settings=WhatsAppSettings(),
        now=lambda: NOW,
    )
    return use_case, store, active, notifier


def _adapter() -> FakeAdapter:
    return FakeAdapter("s1", MagicMock())


class TestFilters:
    """Filtros aplicados em ordem; o primeiro que casa descarta."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("overrides", "reason"),
        [
            ({"from_self": True}, SkipReason.FROM_SELF),
            ({"is_group": True}, SkipReason.GROUP_MESSAGE),
            ({"timestamp": NOW - timedelta(minutes=5, seconds=1)}, SkipReason.STALE_MESSAGE),
            ({"body": "   "}, SkipReason.EMPTY_BODY),
            ({"from_self": True, "is_group": True}, SkipReason.FROM_SELF),
        ],
    )
    async def test_dropped_without_side_effects(
        self, overrides: dict[str, object], reason: SkipReason
    ) -> None:
        use_case, store, active, notifier = _build()
        adapter = _adapter()
        session = _Session(adapter)

        result = await use_case.execute(session, _message(**overrides))

        assert result.skipped_reason is reason
        assert adapter.sent == []
        assert store.get_history(CONTACT) == []
        assert len(active) == 0
        assert notifier.events == []

    @pytest.mark.asyncio
    async def test_not_ready_session(self) -> None:
        use_case, _, _, _ = _build()
        result = await use_case.execute(_Session(_adapter(), ready=False), _message())
        assert result.skipped_reason is SkipReason.NOT_READY

    @pytest.mark.asyncio
    async def test_message_at_staleness_boundary_is_processed(self) -> None:
        use_case, _, _, _ = _build()
        adapter = _adapter()
        result = await use_case.execute(
            _Session(adapter), _message(timestamp=NOW - timedelta(minutes=5))
        )
        assert result.replied is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("age", "replied"),
        [(timedelta(seconds=5), True), (timedelta(minutes=10), False)],
    )
    async def test_naive_timestamp_treated_as_utc(self, age: timedelta, replied: bool) -> None:
        use_case, _, _, _ = _build()
        naive = (NOW - age).replace(tzinfo=None)

        message = _message(timestamp=naive)
        result = await use_case.execute(_Session(_adapter()), message)

        assert message.timestamp.tzinfo is UTC
        assert result.replied is replied
        if not replied:
            assert result.skipped_reason is SkipReason.STALE_MESSAGE


class TestReply:
    """Mensagens aceitas."""

    @pytest.mark.asyncio
    async def test_reply_delivered_and_notified(self) -> None:
        use_case, store, active, notifier = _build()
        adapter = _adapter()
        session = _Session(adapter)

        result = await use_case.execute(session, _message("  hello  ", sender_display_name="Ravi"))

        assert result.replied is True
        assert adapter.sent == [(CONTACT, "Hi there!")]
        assert ("set_composing", CONTACT) in adapter.calls
        assert ("clear_composing", CONTACT) in adapter.calls
        assert session.sent == 1
        assert CONTACT in active
        assert store.get_history(CONTACT)[0].user_message == "hello"
        [payload] = notifier.named("message_reply")
        assert payload == {
            "session_id": "s1",
            "contact": "Ravi",
            "original_message": "hello",
            "reply": "Hi there!",
            "timestamp": NOW.isoformat(),
        }

    @pytest.mark.asyncio
    async def test_display_name_from_adapter_then_contact_id(self) -> None:
        client = MockCompletionClient("ok")
        use_case, _, _, notifier = _build(client)
        adapter = _adapter()
        adapter.display_names[CONTACT] = "Priya"

        await use_case.execute(_Session(adapter), _message())
        assert "User's name: Priya" in client.prompts[0]

        adapter.display_names.clear()
        await use_case.execute(_Session(adapter), _message(message_id="wamid.2"))
        assert notifier.named("message_reply")[1]["contact"] == CONTACT

    @pytest.mark.asyncio
    async def test_rate_limited_sends_nothing(self) -> None:
        use_case, _, _, _ = _build()
        adapter = _adapter()
        session = _Session(adapter)

        for i in range(3):
            result = await use_case.execute(session, _message(message_id=f"m{i}"))

        assert result.skipped_reason is SkipReason.NO_REPLY
        assert len(adapter.sent) == 2
        assert session.sent == 2

    @pytest.mark.asyncio
    async def test_token_cancelled_during_generation_blocks_delivery(self) -> None:
        session = _Session(_adapter())

        class _CancellingClient:
            async def complete(self, prompt: str) -> str:
                session.token.cancel("explicit_stop")
                return "too late"

        use_case, store, _, _ = _build(_CancellingClient())
        result = await use_case.execute(session, _message())

        assert result.skipped_reason is SkipReason.SESSION_STOPPED
        assert session.adapter.sent == []
        assert session.sent == 0
        assert len(store.get_history(CONTACT)) == 1


class TestFailureHandling:
    """Falhas viram um único pedido de desculpas."""

    @pytest.mark.asyncio
    async def test_send_failure_triggers_single_apology(self) -> None:
        use_case, _, _, notifier = _build()
        adapter = _adapter()
        attempts: list[str] = []

        async def send_text(contact_id: str, text: str) -> None:
            attempts.append(text)
            if len(attempts) == 1:
                raise RuntimeError("page crashed")
            adapter.sent.append((contact_id, text))

        adapter.send_text = send_text  # type: ignore[method-assign]
        session = _Session(adapter)

        result = await use_case.execute(session, _message())

        assert result.apology_sent is True
        assert result.replied is False
        assert adapter.sent == [(CONTACT, DEFAULT_APOLOGY_MESSAGE)]
        assert session.sent == 0
        assert notifier.named("message_reply") == []

    @pytest.mark.asyncio
    async def test_apology_failure_is_dropped(self) -> None:
        use_case, _, _, _ = _build()
        adapter = _adapter()
        adapter.send_error = RuntimeError("offline")

        result = await use_case.execute(_Session(adapter), _message())

        assert result.apology_sent is False
        assert [c for c in adapter.calls if c[0] == "send_text"] == [
            ("send_text", CONTACT),
            ("send_text", CONTACT),
        ]

    @pytest.mark.asyncio
    async def test_display_name_failure_is_not_fatal(self) -> None:
        use_case, _, _, _ = _build()
        adapter = _adapter()
        adapter.get_contact_display_name = AsyncMock(side_effect=RuntimeError("x"))  # type: ignore[method-assign]

        result = await use_case.execute(_Session(adapter), _message())

        assert result.replied is True

    @pytest.mark.asyncio
    async def test_cancellation_is_not_swallowed(self) -> None:
        typing = MagicMock()
        typing.simulate = AsyncMock(side_effect=asyncio.CancelledError())
        use_case, _, _, _ = _build(typing=typing)
        adapter = _adapter()

        with pytest.raises(asyncio.CancelledError):
            await use_case.execute(_Session(adapter), _message())
        assert adapter.sent == []
