"""Periodic sweep that removes expired sessions."""

import asyncio
import logging

from expense_split.services.sessions import SessionService

logger = logging.getLogger(__name__)


class CleanupScheduler:
    """Runs ``SessionService.cleanup_expired`` on a fixed interval."""

    def __init__(self, session_service: SessionService, interval_hours: float):
        self.session_service = session_service
        self.interval_seconds = interval_hours * 3600
        self.running = False
        self._stopped = asyncio.Event()

    async def start(self) -> None:
        """Run sweeps until ``stop`` is called."""
        self.running = True
        logger.info(
            "Session cleanup scheduler started (interval: %s seconds)",
            self.interval_seconds,
        )
        try:
            while not self._stopped.is_set():
                await self.run_once()
                try:
                    await asyncio.wait_for(
                        self._stopped.wait(), timeout=self.interval_seconds
                    )
                except TimeoutError:
                    continue
        finally:
            self.running = False

    async def run_once(self) -> int:
        """Run a single sweep off the event loop; failures are logged."""
        try:
            return await asyncio.to_thread(self.session_service.cleanup_expired)
        except Exception:
            logger.exception("Expired session cleanup failed")
            return 0

    def stop(self) -> None:
        """Stop the scheduler loop."""
        self.running = False
        self._stopped.set()
        logger.info("Session cleanup scheduler stopped")
