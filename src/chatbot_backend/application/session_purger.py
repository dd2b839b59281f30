"""Varredura periódica de sessões expiradas.

Roda como task em background durante o lifespan da aplicação. O TTL é
do store; o purger apenas decide a cadência.
"""

from __future__ import annotations

import asyncio
import logging
import time

from chatbot_backend.domain.protocols.session_store import SessionStoreProtocol
from chatbot_backend.observability.logging import get_logger
from chatbot_backend.observability.timing import elapsed_ms_since

logger: logging.Logger = get_logger(__name__)


class SessionPurger:
    """Chama `purge_expired` a cada `interval_seconds` até `stop()`."""

    def __init__(self, store: SessionStoreProtocol, interval_seconds: float) -> None:
        self._store = store
        self._interval = interval_seconds
        self._stop = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        start = time.perf_counter()
        removed = await self._store.purge_expired()
        if removed:
            logger.info(
                "sessions_purged",
                extra={"removed": removed, "elapsed_ms": elapsed_ms_since(start)},
            )
        return removed

    async def _run(self) -> None:
        while not self._stop.is_set():
            await self._wait()
            if self._stop.is_set():
                break
            try:
                await self.run_once()
            except Exception:
                # Uma falha isolada não derruba a varredura seguinte
                logger.exception("session_purge_failed")

    async def _wait(self) -> None:
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=self._interval)
        except TimeoutError:
            return

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._task = asyncio.create_task(self._run(), name="session-purger")
        logger.info("session_purger_started", extra={"interval_seconds": self._interval})

    async def stop(self) -> None:
        """Sinaliza parada e aguarda a task terminar."""
        self._stop.set()
        if self._task is not None:
            await self._task
            self._task = None
        logger.info("session_purger_stopped")
