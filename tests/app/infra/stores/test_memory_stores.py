"""Testes dos stores em memória."""

from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta

import pytest

from ai.models.conversation import ConversationTurn
from app.infra.stores.memory_stores import (
    ActiveChatSet,
    MemoryConversationStore,
    MemoryRateLimiter,
)

_BASE = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)


def _turn(text: str, language: str = "english", at: datetime = _BASE) -> ConversationTurn:
    return ConversationTurn(user_message=text, reply=f"re: {text}", language=language, timestamp=at)


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestMemoryConversationStore:
    """Testes do MemoryConversationStore."""

    def test_append_and_get_in_order(self) -> None:
        store = MemoryConversationStore()
        store.append_turn("a@c.us", _turn("1"))
        store.append_turn("a@c.us", _turn("2"))

        assert [t.user_message for t in store.get_history("a@c.us")] == ["1", "2"]
        assert store.get_history("other@c.us") == []

    def test_eleventh_turn_evicts_first(self) -> None:
        store = MemoryConversationStore(history_limit=10)
        for i in range(11):
            store.append_turn("a@c.us", _turn(str(i)))

        history = store.get_history("a@c.us")
        assert len(history) == 10
        assert [t.user_message for t in history] == [str(i) for i in range(1, 11)]

    def test_get_history_returns_copy(self) -> None:
        store = MemoryConversationStore()
        store.append_turn("a@c.us", _turn("1"))
        store.get_history("a@c.us").clear()
        assert len(store.get_history("a@c.us")) == 1

    def test_clear(self) -> None:
        store = MemoryConversationStore()
        store.append_turn("a@c.us", _turn("1"))

        assert store.clear("a@c.us") is True
        assert store.clear("a@c.us") is False
        assert store.conversation_count() == 0

    def test_purge_older_than_uses_last_turn(self) -> None:
        store = MemoryConversationStore()
        store.append_turn("old@c.us", _turn("x", at=_BASE - timedelta(hours=25)))
        store.append_turn("mixed@c.us", _turn("x", at=_BASE - timedelta(hours=30)))
        store.append_turn("mixed@c.us", _turn("y", at=_BASE - timedelta(hours=1)))

        removed = store.purge_older_than(_BASE - timedelta(hours=24))

        assert removed == 1
        assert store.get_history("old@c.us") == []
        assert len(store.get_history("mixed@c.us")) == 2

    def test_stats(self) -> None:
        store = MemoryConversationStore()
        store.append_turn("a@c.us", _turn("1", "english"))
        store.append_turn("a@c.us", _turn("2", "hinglish"))
        store.append_turn("b@c.us", _turn("3", "hinglish"))

        assert store.conversation_count() == 2
        assert store.total_turns() == 3
        assert store.language_counts() == {"english": 1, "hinglish": 2}

    def test_invalid_limit(self) -> None:
        with pytest.raises(ValueError):
            MemoryConversationStore(history_limit=0)

    def test_concurrent_appends_respect_cap(self) -> None:
        store = MemoryConversationStore(history_limit=10)

        def worker(prefix: str) -> None:
            for i in range(50):
                store.append_turn("shared@c.us", _turn(f"{prefix}{i}"))

        threads = [threading.Thread(target=worker, args=(p,)) for p in "abcd"]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(store.get_history("shared@c.us")) == 10


class TestMemoryRateLimiter:
    """Testes do MemoryRateLimiter (janela fixa)."""

    def test_third_attempt_in_window_denied(self) -> None:
        limiter = MemoryRateLimiter(max_per_window=2, window_seconds=60, clock=_Clock())

        assert limiter.try_acquire("a") is True
        assert limiter.try_acquire("a") is True
        assert limiter.try_acquire("a") is False
        assert limiter.try_acquire("b") is True

    def test_new_window_after_elapsed(self) -> None:
        clock = _Clock()
        limiter = MemoryRateLimiter(max_per_window=2, window_seconds=60, clock=clock)
        limiter.try_acquire("a")
        limiter.try_acquire("a")

        clock.now = 1059.9
        assert limiter.try_acquire("a") is False
        clock.now = 1060.0
        assert limiter.try_acquire("a") is True
        assert limiter.remaining("a") == 1

    def test_denial_does_not_consume(self) -> None:
        clock = _Clock()
        limiter = MemoryRateLimiter(max_per_window=1, window_seconds=10, clock=clock)
        limiter.try_acquire("a")
        for _ in range(5):
            assert limiter.try_acquire("a") is False
        assert limiter.remaining("a") == 0

    def test_purge_stale_after_grace(self) -> None:
        clock = _Clock()
        limiter = MemoryRateLimiter(window_seconds=60, stale_grace_seconds=300, clock=clock)
        limiter.try_acquire("a")

        clock.now = 1360.0
        assert limiter.purge_stale() == 0
        clock.now = 1360.5
        assert limiter.purge_stale() == 1
        assert limiter.tracked_count() == 0

    def test_concurrent_acquires_never_exceed_quota(self) -> None:
        limiter = MemoryRateLimiter(max_per_window=2, window_seconds=3600)
        granted: list[bool] = []
        lock = threading.Lock()

        def worker() -> None:
            result = limiter.try_acquire("shared")
            with lock:
                granted.append(result)

        threads = [threading.Thread(target=worker) for _ in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert granted.count(True) == 2


class TestActiveChatSet:
    """Testes do ActiveChatSet."""

    def test_add_and_contains(self) -> None:
        chats = ActiveChatSet()
        chats.add("a@c.us")
        chats.add("a@c.us")
        assert "a@c.us" in chats
        assert len(chats) == 1

    def test_soft_cap_clears_only_when_exceeded(self) -> None:
        chats = ActiveChatSet(soft_cap=3)
        for i in range(3):
            chats.add(f"{i}@c.us")
        assert chats.enforce_soft_cap() is False
        assert len(chats) == 3

        chats.add("4@c.us")
        assert chats.enforce_soft_cap() is True
        assert len(chats) == 0
