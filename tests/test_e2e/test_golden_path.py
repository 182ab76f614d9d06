"""Fluxo ponta a ponta: runtime montado, adapter fake e Gemini via MockTransport."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from ai.config.settings import AISettings
from app.bootstrap.dependencies import GatewayRuntime, build_runtime
from app.infra.ai import GeminiClient
from app.protocols.adapter import AdapterEventKind
from app.services.typing_simulator import TypingSimulator
from config.settings.ai.gemini import GeminiSettings
from config.settings.base.session import SessionSettings
from config.settings.whatsapp import WhatsAppSettings
from tests.fakes.async_helpers import drain, wait_until
from tests.fakes.fake_adapter import FakeAdapter, FakeAdapterFactory, RecordingNotifier

CONTACT = "919876543210@c.us"


def _gemini_body(text: str) -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class _World:
    def __init__(self, handler: Any, tmp_path: Any) -> None:
        self.factory = FakeAdapterFactory()
        self.notifier = RecordingNotifier()
        self.gemini_requests = 0

        async def counting(request: httpx.Request) -> httpx.Response:
            self.gemini_requests += 1
            return await handler(request)

        client = GeminiClient(
            gemini=GeminiSettings(api_key="k", timeout_seconds=0.1),
            ai_settings=AISettings(),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(counting)),
        )
        self.runtime: GatewayRuntime = build_runtime(
            self.factory,
            completion_client=client,
            notifier=self.notifier,
            session_settings=SessionSettings(
                restart_delay_seconds=0.02,
                restart_settle_seconds=0.01,
                status_interval_seconds=5,
                sessions_dir=str(tmp_path),
            ),
            whatsapp_settings=WhatsAppSettings(),
            typing_simulator=TypingSimulator(WhatsAppSettings(), sleep=AsyncMock()),
        )

    async def ready(self) -> FakeAdapter:
        session = await self.runtime.service.start()
        adapter = self.factory.last
        adapter.emit(AdapterEventKind.AUTHENTICATED)
        adapter.emit(AdapterEventKind.READY)
        await wait_until(lambda: session.is_ready)
        return adapter


async def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=_gemini_body("**Hello!** How can I help you today?"))


async def _slow(request: httpx.Request) -> httpx.Response:
    await asyncio.sleep(1)
    return httpx.Response(200, json=_gemini_body("too late"))


@pytest.fixture
async def world(tmp_path: Any) -> Any:
    w = _World(_ok, tmp_path)
    yield w
    await w.runtime.aclose()


class TestGoldenPath:
    """Mensagem recebida até a resposta entregue."""

    @pytest.mark.asyncio
    async def test_hello_gets_sanitized_reply(self, world: _World) -> None:
        adapter = await world.ready()

        adapter.emit_message("hello", CONTACT)
        await wait_until(lambda: len(adapter.sent) == 1)

        contact, reply = adapter.sent[0]
        assert contact == CONTACT
        assert reply == "Hello! How can I help you today?"
        assert ("set_composing", CONTACT) in adapter.calls
        assert ("clear_composing", CONTACT) in adapter.calls

        status = world.runtime.service.get_status()
        assert status["messages_sent"] == 1
        assert status["active_chats"] == 1
        assert world.runtime.service.get_ai_stats()["total_messages"] == 1

        notifications = world.notifier.named("message_reply")
        assert len(notifications) == 1
        assert notifications[0]["original_message"] == "hello"
        assert notifications[0]["reply"] == reply

    @pytest.mark.asyncio
    async def test_group_message_is_dropped(self, world: _World) -> None:
        adapter = await world.ready()

        adapter.emit_message("hello group", "12036304@g.us", is_group=True)
        await drain()
        await asyncio.sleep(0.02)

        assert adapter.sent == []
        assert world.gemini_requests == 0
        assert world.runtime.service.get_ai_stats()["total_messages"] == 0

    @pytest.mark.asyncio
    async def test_direct_send_through_service(self, world: _World) -> None:
        adapter = await world.ready()

        await world.runtime.service.send_message("9876543210", "manual")

        assert adapter.sent == [(CONTACT, "manual")]
        assert world.runtime.service.get_status()["messages_sent"] == 1


class TestCompletionTimeout:
    """Gemini lento: fallback entregue e registrado como turno."""

    @pytest.mark.asyncio
    async def test_timeout_delivers_fallback(self, tmp_path: Any) -> None:
        world = _World(_slow, tmp_path)
        try:
            adapter = await world.ready()

            adapter.emit_message("hello", CONTACT)
            await wait_until(lambda: len(adapter.sent) == 1)

            reply = adapter.sent[0][1]
            assert reply
            assert reply != "too late"
            assert world.runtime.service.get_ai_stats()["total_messages"] == 1
            assert world.runtime.service.get_status()["messages_sent"] == 1
        finally:
            await world.runtime.aclose()
