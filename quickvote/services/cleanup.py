"""Periodic removal of expired sessions."""
import asyncio
from contextlib import AbstractContextManager
from typing import Callable, Optional

from quickvote.core.logging_config import get_logger

logger = get_logger(__name__)


class ExpirySweeper:
    """
    Background task that deletes expired sessions.

    Runs one sweep as soon as it starts and then one per interval. A store is
    opened per sweep through ``store_factory`` (a context manager yielding a
    SessionStore) so no database session outlives a cycle.
    """

    def __init__(
        self,
        store_factory: Callable[[], AbstractContextManager],
        interval_seconds: float,
    ) -> None:
        self._store_factory = store_factory
        self._interval = interval_seconds
        self._running = False
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        if self._running:
            logger.warning("expiry_sweeper_already_running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info("expiry_sweeper_started", interval_seconds=self._interval)

    async def stop(self) -> None:
        self._running = False

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("expiry_sweeper_stopped")

    @property
    def is_running(self) -> bool:
        return self._running

    def run_once(self) -> int:
        """Sweep expired sessions once and return how many were deleted."""
        with self._store_factory() as store:
            removed = store.sweep_expired()

        if removed > 0:
            logger.info("expired_sessions_swept", removed=removed)
        return removed

    async def _run_loop(self) -> None:
        while self._running:
            try:
                self.run_once()
            except Exception:
                logger.exception("expiry_sweep_failed")

            try:
                await asyncio.sleep(self._interval)
            except asyncio.CancelledError:
                break
