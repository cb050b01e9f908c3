import asyncio
import contextlib
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from services.handshake_store import HandshakeStateStore

logger = logging.getLogger("food-orders")


class HandshakeSweepWorker:
    def __init__(self, store: HandshakeStateStore, interval_seconds: int = 60) -> None:
        self.store = store
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._last_run_at: Optional[datetime] = None
        self._last_removed: int = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if not self._task:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    def run_once(self) -> int:
        self._last_run_at = datetime.utcnow()
        self._last_removed = self.store.sweep()
        if self._last_removed:
            logger.info("Removed %s expired handshake tokens", self._last_removed)
        return self._last_removed

    async def _run(self) -> None:
        while True:
            try:
                self.run_once()
            except Exception as exc:  # pragma: no cover - background guard
                logger.exception("Handshake sweep failed: %s", exc)
            await asyncio.sleep(self.interval_seconds)

    def get_status(self) -> Dict[str, Any]:
        return {
            "running": self.is_running,
            "interval_seconds": self.interval_seconds,
            "last_run_at": self._last_run_at,
            "last_removed": self._last_removed,
            "pending_tokens": len(self.store),
        }
