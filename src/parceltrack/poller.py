"""Periodic re-evaluation of the active tracking number."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from parceltrack.exceptions import ParcelTrackError
from parceltrack.models.view import TrackingSnapshot
from parceltrack.tracker import ParcelTracker

_logger = logging.getLogger(__name__)

SnapshotConsumer = Callable[[TrackingSnapshot], None]


@dataclass(slots=True)
class PollingSession:
    """The active tracking number and its timer task.

    A driver holds at most one session; replacing it cancels the previous
    session's task before a new one is armed.
    """

    tracking_number: str
    interval: float
    task: asyncio.Task[None] | None = None
    started_at: float = field(default_factory=time.monotonic)
    ticks: int = 0
    last_snapshot: TrackingSnapshot | None = None

    @property
    def is_active(self) -> bool:
        return self.task is not None and not self.task.done()


class PollingDriver:
    """Idle/Tracking state machine around a :class:`ParcelTracker`.

    Usage::

        async with PollingDriver(tracker, consumers=[render]) as driver:
            driver.start_tracking("TM123456789")
            await asyncio.sleep(60)

    ``start_tracking`` and ``stop_tracking`` must be called from the event
    loop thread.
    """

    def __init__(
        self,
        tracker: ParcelTracker,
        *,
        interval: float | None = None,
        consumers: Iterable[SnapshotConsumer] = (),
    ) -> None:
        self._tracker = tracker
        self._interval = interval if interval is not None else tracker.config.poll_interval
        if self._interval <= 0:
            raise ValueError(f"interval must be positive, got {self._interval}")
        self._consumers: list[SnapshotConsumer] = list(consumers)
        self._session: PollingSession | None = None

    async def __aenter__(self) -> PollingDriver:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    @property
    def session(self) -> PollingSession | None:
        return self._session

    @property
    def is_tracking(self) -> bool:
        return self._session is not None

    @property
    def tracking_number(self) -> str | None:
        return self._session.tracking_number if self._session is not None else None

    def add_consumer(self, consumer: SnapshotConsumer) -> None:
        self._consumers.append(consumer)

    def start_tracking(self, tracking_number: str) -> PollingSession:
        """Replace the active session with one for *tracking_number*.

        Unknown tracking numbers raise :class:`TrackingNotFoundError` and
        leave the current session running.  Otherwise the previous timer is
        cancelled, the new number is evaluated and published immediately and
        a repeating timer is armed.
        """
        self._tracker.catalog.require_route(tracking_number)
        loop = asyncio.get_running_loop()

        self.stop_tracking()
        session = PollingSession(tracking_number=tracking_number, interval=self._interval)
        self._evaluate(session)
        self._session = session
        session.task = loop.create_task(self._run(session), name=f"parceltrack-poll-{tracking_number}")
        _logger.info("Tracking %s every %.1fs", tracking_number, self._interval)
        return session

    def stop_tracking(self) -> PollingSession | None:
        """Cancel the active timer and return to idle."""
        session = self._session
        self._session = None
        if session is None:
            return None
        if session.task is not None and not session.task.done():
            session.task.cancel()
        _logger.info("Stopped tracking %s", session.tracking_number)
        return session

    async def aclose(self) -> None:
        session = self.stop_tracking()
        if session is not None and session.task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await session.task

    async def _run(self, session: PollingSession) -> None:
        while True:
            await asyncio.sleep(session.interval)
            if self._session is not session:
                return
            try:
                self._evaluate(session)
            except ParcelTrackError:
                _logger.warning("Evaluation of %s failed", session.tracking_number, exc_info=True)
            except Exception:
                _logger.exception("Unexpected error evaluating %s", session.tracking_number)

    def _evaluate(self, session: PollingSession) -> None:
        snapshot = self._tracker.track(session.tracking_number)
        session.ticks += 1
        session.last_snapshot = snapshot
        for consumer in self._consumers:
            try:
                consumer(snapshot)
            except Exception:
                _logger.debug("Snapshot consumer failed", exc_info=True)
