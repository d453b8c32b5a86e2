"""Cancellable periodic re-render loop.

Each cycle captures its own instant, runs the synchronous render() in a
worker thread, and hands the Frame to a sink on the event loop. The
optional location lookup runs alongside the first render and is awaited
once; afterwards every frame carries the observer panel (or none, if the
lookup failed).
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from daynightmap.compute import render
from daynightmap.config import RenderConfig
from daynightmap.models import Frame, GeoPoint

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 60.0

Sink = Callable[[Frame], None]
Locator = Callable[[], Awaitable[GeoPoint | None]]


class LiveMap:
    """Re-render on a fixed cadence until stop() is called.

    Args:
        config: Render configuration shared by every cycle.
        sink: Receives each finished Frame (e.g. writes a PNG).
        interval: Seconds between cycles.
        observer: Known observer; skips the location lookup when set.
        locator: Coroutine factory for the location lookup, or None to skip it.
    """

    def __init__(
        self,
        config: RenderConfig,
        sink: Sink,
        interval: float = DEFAULT_INTERVAL,
        observer: GeoPoint | None = None,
        locator: Locator | None = None,
    ) -> None:
        self.config = config
        self.sink = sink
        self.interval = interval
        self.observer = observer
        self.locator = locator
        self.frames = 0
        self._stop = asyncio.Event()

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    async def _cycle(self) -> Frame:
        # Rendering is CPU-bound; off the loop, a pending lookup keeps making progress
        frame = await asyncio.to_thread(render, None, self.observer, self.config)
        self.sink(frame)
        self.frames += 1
        logger.info("frame %d at %s", self.frames, frame.instant.isoformat())
        return frame

    async def _acquire_location(self, task: "asyncio.Task[GeoPoint | None]") -> None:
        try:
            self.observer = await task
        except Exception:
            # Location is optional; any failure leaves the map location-independent
            logger.exception("location lookup crashed")
            self.observer = None
        if self.observer is None:
            logger.warning("observer location unavailable; panels show placeholders")

    async def run(self, max_frames: int | None = None) -> None:
        """Drive the loop. Returns after stop(), max_frames, or one frame when the instant is fixed."""
        location_task = None
        if self.observer is None and self.locator is not None:
            location_task = asyncio.ensure_future(self.locator())

        try:
            await self._cycle()
            if location_task is not None:
                await self._acquire_location(location_task)
                if self.observer is not None and not self.stopped:
                    await self._cycle()

            if self.config.fixed_instant is not None:
                # A pinned instant never changes; nothing to refresh
                return

            while not self.stopped and (max_frames is None or self.frames < max_frames):
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=self.interval)
                except asyncio.TimeoutError:
                    await self._cycle()
        finally:
            if location_task is not None and not location_task.done():
                location_task.cancel()
