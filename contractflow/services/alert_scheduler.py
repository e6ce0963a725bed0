"""
Recurring alert scan owned by the application lifespan.

``AlertScheduler`` runs ``alert_service.scan_due_items`` once as soon as it
is started and then every ``interval_seconds`` until ``stop()`` is awaited.
Each run executes the synchronous scan in a worker thread with its own
short-lived session, so request handling is never blocked.  A failed run is
logged and the loop carries on; the next tick starts from scratch.

Usage example::

    scheduler = AlertScheduler(SessionLocal, interval_seconds=86400)
    scheduler.start()
    ...
    await scheduler.stop()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from sqlalchemy.orm import Session

from contractflow.services import alert_service

logger = logging.getLogger(__name__)


class AlertScheduler:
    """Single asyncio task polling for due deliverables and contract terms.

    Args:
        session_factory: Callable returning a new ``Session`` per run.
        interval_seconds: Delay between the end of one run and the next.
        lookahead_days: "Due soon" window passed to the scan.
        deduplicate: Whether the scan skips findings already alerted.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        interval_seconds: float = 24 * 60 * 60,
        lookahead_days: int = alert_service.DEFAULT_LOOKAHEAD_DAYS,
        deduplicate: bool = False,
    ) -> None:
        self._session_factory = session_factory
        self._interval = interval_seconds
        self._lookahead_days = lookahead_days
        self._deduplicate = deduplicate
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task | None = None
        self.runs = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    def start(self) -> None:
        """Schedule the polling loop on the running event loop."""
        if self.running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="alert-scan")
        logger.info(
            "AlertScheduler started (interval=%ss, lookahead=%dd, deduplicate=%s)",
            self._interval, self._lookahead_days, self._deduplicate,
        )

    async def stop(self) -> None:
        """Signal the loop to stop and wait for the current run to finish."""
        if self._task is None:
            return
        self._stop_event.set()
        await self._task
        self._task = None
        logger.info("AlertScheduler stopped after %d runs", self.runs)

    # -----------------------------------------------------------------------
    # Loop
    # -----------------------------------------------------------------------

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                continue

    async def run_once(self) -> int:
        """Execute one scan in a worker thread.

        Returns:
            Number of alerts generated, ``0`` when the run failed.
        """
        self.runs += 1
        try:
            return await asyncio.to_thread(self._scan)
        except Exception:
            logger.exception("AlertScheduler: run %d failed, retrying on next tick", self.runs)
            return 0

    def _scan(self) -> int:
        db = self._session_factory()
        try:
            alerts = alert_service.scan_due_items(
                db,
                lookahead_days=self._lookahead_days,
                deduplicate=self._deduplicate,
            )
            return len(alerts)
        finally:
            db.close()
