"""Testes do GeminiClient (httpx.MockTransport, sem rede)."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from ai.config.settings import AISettings
from app.infra.ai import GeminiClient
from app.infra.ai._gemini_http import (
    build_generate_content_payload,
    parse_generate_content_response,
)
from config.settings.ai.gemini import GeminiSettings

_SETTINGS = GeminiSettings(api_key="test-key", timeout_seconds=0.5)


def _ok_body(text: str) -> dict[str, Any]:
    return {
        "candidates": [
            {"content": {"parts": [{"text": text}], "role": "model"}, "finishReason": "STOP"}
        ],
        "usageMetadata": {"totalTokenCount": 12},
    }


def _client(handler: Any, settings: GeminiSettings = _SETTINGS) -> GeminiClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiClient(gemini=settings, ai_settings=AISettings(), http_client=http_client)


class TestPayload:
    """Corpo da requisição e parsing da resposta."""

    def test_payload_shape(self) -> None:
        payload = build_generate_content_payload("oi", AISettings())
        assert payload["contents"] == [{"parts": [{"text": "oi"}]}]
        assert payload["generationConfig"]["maxOutputTokens"] == 200  # type: ignore[index]
        assert len(payload["safetySettings"]) == 4  # type: ignore[arg-type]

    def test_parse_valid(self) -> None:
        assert parse_generate_content_response(_ok_body("  Namaste!  ")) == "Namaste!"

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"candidates": []},
            {"candidates": [{"content": {"parts": []}}]},
            {"candidates": [{"content": {"parts": [{"text": "   "}]}}]},
            ["not", "a", "dict"],
        ],
    )
    def test_parse_malformed_returns_none(self, data: object) -> None:
        assert parse_generate_content_response(data) is None


class TestGeminiClient:
    """Testes do GeminiClient.complete."""

    @pytest.mark.asyncio
    async def test_success_sends_key_header_and_config(self) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("X-Goog-Api-Key")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_ok_body("Haan bhai!"))

        client = _client(handler)
        result = await client.complete("hello")
        await client.aclose()

        assert result == "Haan bhai!"
        assert seen["url"].endswith("/models/gemini-2.0-flash:generateContent")
        assert seen["key"] == "test-key"
        assert seen["body"]["generationConfig"]["temperature"] == 0.8
        assert seen["body"]["contents"][0]["parts"][0]["text"] == "hello"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 429, 500, 503])
    async def test_non_2xx_returns_none(self, status: int) -> None:
        client = _client(lambda request: httpx.Response(status, json={"error": "x"}))
        assert await client.complete("hello") is None

    @pytest.mark.asyncio
    async def test_network_error_returns_none(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("boom", request=request)

        assert await _client(handler).complete("hello") is None

    @pytest.mark.asyncio
    async def test_transport_timeout_returns_none(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        assert await _client(handler).complete("hello") is None

    @pytest.mark.asyncio
    async def test_invalid_json_returns_none(self) -> None:
        client = _client(lambda request: httpx.Response(200, content=b"<html>"))
        assert await client.complete("hello") is None

    @pytest.mark.asyncio
    async def test_total_timeout_enforced(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200, json=_ok_body("late"))

        settings = GeminiSettings(api_key="k", timeout_seconds=0.05)
        assert await _client(handler, settings).complete("hello") is None

    @pytest.mark.asyncio
    async def test_missing_key_skips_request(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=_ok_body("x"))

        client = _client(handler, GeminiSettings(api_key=""))
        assert await client.complete("hello") is None
        assert calls == []
