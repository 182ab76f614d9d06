"""Entrypoint do gateway WhatsApp.

Inicializa o bootstrap, monta o runtime, cria a sessão padrão e mantém o
serviço rodando até SIGINT/SIGTERM.

Uso:
    WHATSAPP_ADAPTER_FACTORY=meu_pacote.adapter:create_adapter \\
        python -m app.app
"""

from __future__ import annotations

import asyncio
import contextlib
import signal
from typing import TYPE_CHECKING

from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.dependencies import build_runtime, load_adapter_factory
from config.logging import get_logger

if TYPE_CHECKING:
    from app.protocols.adapter import AdapterFactory

logger = get_logger(__name__)


async def serve(adapter_factory: AdapterFactory, stop_event: asyncio.Event | None = None) -> None:
    """Roda o gateway até stop_event ser sinalizado.

    Startup:
    - Valida configurações
    - Monta runtime e cria a sessão padrão

    Shutdown:
    - Encerra todas as sessões e fecha o cliente HTTP
    """
    stop_event = stop_event or asyncio.Event()
    logger.info("app_starting", extra={"component": "app"})
    validate_runtime_settings()

    runtime = build_runtime(adapter_factory)
    runtime.start_background()
    try:
        await runtime.service.start()
        logger.info("app_started", extra={"session_id": runtime.service.default_session_id})
        await stop_event.wait()
    finally:
        logger.info("app_stopping", extra={"component": "app"})
        await runtime.aclose()


def _install_signal_handlers(stop_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop_event.set)


async def _main() -> None:
    stop_event = asyncio.Event()
    _install_signal_handlers(stop_event)
    await serve(load_adapter_factory(), stop_event)


def main() -> None:
    initialize_app()
    asyncio.run(_main())


if __name__ == "__main__":
    main()
