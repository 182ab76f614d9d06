"""Helpers de espera para testes assíncronos."""

from __future__ import annotations

import asyncio
from collections.abc import Callable


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Cede o loop até predicate() ser verdadeiro ou estourar o timeout."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condição não atingida dentro do timeout")
        await asyncio.sleep(0.001)


async def drain(rounds: int = 20) -> None:
    """Deixa callbacks e workers pendentes rodarem."""
    for _ in range(rounds):
        await asyncio.sleep(0)
