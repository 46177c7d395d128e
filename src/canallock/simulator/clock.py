"""Virtual time keeping and the frame ticker that drives the simulation."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

MIN_TIME_SCALE: float = 1.0
MAX_TIME_SCALE: float = 100.0

# Callback run once per frame with the scaled virtual time step
FrameCallback = Callable[[float], Awaitable[None]]


def clamp_time_scale(multiplier: float) -> float:
    """Clamp a time-acceleration multiplier to [1, 100]."""
    return max(MIN_TIME_SCALE, min(MAX_TIME_SCALE, float(multiplier)))


class SimulationClock:
    """Wall-clock driven virtual time with an acceleration multiplier.

    Virtual time only advances between ``resume()`` and ``pause()``. The
    wall-clock reference is refreshed on every resume so a pause never
    shows up as one large step.

    Example:
        clock = SimulationClock(time_scale=10)
        clock.resume()
        ...
        dt = clock.tick()  # wall seconds since last tick * 10
    """

    def __init__(
        self,
        time_scale: float = 10.0,
        time_source: Callable[[], float] = time.monotonic,
    ) -> None:
        self._time_source = time_source
        self._time_scale = clamp_time_scale(time_scale)
        self._elapsed = 0.0
        self._running = False
        self._last_wall = time_source()

    @property
    def elapsed(self) -> float:
        """Elapsed virtual seconds."""
        return self._elapsed

    @property
    def time_scale(self) -> float:
        """Current acceleration multiplier."""
        return self._time_scale

    @time_scale.setter
    def time_scale(self, multiplier: float) -> None:
        self._time_scale = clamp_time_scale(multiplier)

    @property
    def is_running(self) -> bool:
        """Whether virtual time is advancing."""
        return self._running

    def resume(self) -> None:
        """Start advancing virtual time from now."""
        self._last_wall = self._time_source()
        self._running = True

    def pause(self) -> None:
        """Freeze virtual time."""
        self._running = False

    def tick(self) -> float:
        """Consume wall time since the previous tick.

        Returns:
            Virtual seconds to integrate, 0.0 while paused.
        """
        if not self._running:
            return 0.0
        now = self._time_source()
        wall_delta = max(0.0, now - self._last_wall)
        self._last_wall = now
        dt = wall_delta * self._time_scale
        self._elapsed += dt
        return dt

    def reset(self, time_scale: float) -> None:
        """Zero elapsed time, pause and restore the multiplier."""
        self._running = False
        self._elapsed = 0.0
        self._time_scale = clamp_time_scale(time_scale)
        self._last_wall = self._time_source()


class SimulationTicker:
    """Owns the single background task that advances the simulation.

    Each frame asks the clock for the scaled time step and hands it to the
    frame callback, then sleeps until the next frame. Stopping the ticker
    cancels the task; nothing reschedules itself.
    """

    def __init__(
        self,
        clock: SimulationClock,
        on_frame: FrameCallback,
        frame_interval: float = 1 / 60,
    ) -> None:
        """Initialize the ticker.

        Args:
            clock: Clock supplying virtual time steps.
            on_frame: Async callback receiving each virtual time step.
            frame_interval: Wall seconds between frames.
        """
        self._clock = clock
        self._on_frame = on_frame
        self._frame_interval = frame_interval
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def is_active(self) -> bool:
        """Whether the frame task is scheduled."""
        return self._task is not None and not self._task.done()

    async def run(self) -> None:
        """Run frames until cancelled or stopped from a frame callback."""
        logger.info("Simulation ticker started")
        try:
            while self._task is asyncio.current_task():
                await asyncio.sleep(self._frame_interval)
                dt = self._clock.tick()
                await self._on_frame(dt)
        except asyncio.CancelledError:
            logger.info("Simulation ticker stopped")
            raise
        logger.info("Simulation ticker stopped")

    def start(self) -> None:
        """Start the frame task and resynchronize the clock."""
        if self.is_active:
            return
        self._clock.resume()
        self._task = asyncio.create_task(self.run(), name="simulation-ticker")

    async def stop(self) -> None:
        """Pause the clock and cancel the frame task."""
        self._clock.pause()
        if self._task is None:
            return
        if self._task is asyncio.current_task():
            # Stopped from inside a frame callback; run() returns once the
            # callback does, so the rest of the callback is not cancelled.
            self._task = None
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
