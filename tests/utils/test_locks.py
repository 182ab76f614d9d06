"""Testes para utils/locks.py."""

from __future__ import annotations

import threading
import time

from utils.locks import KeyedLock


class TestKeyedLock:
    def test_same_key_is_mutually_exclusive(self) -> None:
        locks = KeyedLock()
        counter = {"value": 0}

        def worker() -> None:
            for _ in range(1000):
                with locks.hold("k"):
                    current = counter["value"]
                    counter["value"] = current + 1

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert counter["value"] == 4000

    def test_distinct_keys_do_not_block(self) -> None:
        locks = KeyedLock()
        with locks.hold("a"):
            acquired = threading.Event()

            def other() -> None:
                with locks.hold("b"):
                    acquired.set()

            thread = threading.Thread(target=other)
            thread.start()
            thread.join(timeout=1)

        assert acquired.is_set()

    def test_discard_skips_lock_in_use(self) -> None:
        locks = KeyedLock()
        with locks.hold("a"):
            locks.discard("a")
            assert len(locks) == 1
        locks.discard("a")
        assert len(locks) == 0

    def test_discard_keeps_lock_with_pending_waiter(self) -> None:
        locks = KeyedLock()
        order: list[str] = []

        def waiter() -> None:
            with locks.hold("a"):
                order.append("waiter")

        with locks.hold("a"):
            thread = threading.Thread(target=waiter)
            thread.start()
            deadline = time.monotonic() + 1
            while locks.users("a") < 2 and time.monotonic() < deadline:
                time.sleep(0.001)
            assert locks.users("a") == 2

            locks.discard("a")
            assert len(locks) == 1
            order.append("owner")

        thread.join(timeout=1)
        assert order == ["owner", "waiter"]
        assert locks.users("a") == 0
        locks.discard("a")
        assert len(locks) == 0
