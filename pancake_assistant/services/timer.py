"""Cooking timer used by the cooking session."""

import asyncio
import logging
import math
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)

TICK_INTERVAL = 0.1

TickCallback = Callable[[int], None]


class CookingTimer:
    """Stopwatch measuring one pancake side.

    Elapsed time is tracked in milliseconds against an injectable monotonic
    clock. When started inside a running event loop the timer also schedules
    a background task that calls ``tick`` every ``interval`` seconds.
    """

    def __init__(self, now: Callable[[], float] = time.monotonic, interval: float = TICK_INTERVAL):
        self._now = now
        self.interval = interval
        self._start: float | None = None
        self._elapsed_ms = 0
        self._task: asyncio.Task | None = None
        self.on_tick: TickCallback | None = None

    @property
    def is_running(self) -> bool:
        return self._start is not None

    @property
    def elapsed_ms(self) -> int:
        if self._start is not None:
            self._elapsed_ms = int((self._now() - self._start) * 1000)
        return self._elapsed_ms

    def start(self, on_tick: TickCallback | None = None) -> None:
        """Start or resume counting from the current elapsed time."""
        if self.is_running:
            return

        self.on_tick = on_tick
        self._start = self._now() - self._elapsed_ms / 1000

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: the caller drives tick() itself
            return
        self._task = loop.create_task(self._run())

    def pause(self) -> None:
        if not self.is_running:
            return
        self._elapsed_ms = self.elapsed_ms
        self._start = None
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def reset(self) -> None:
        """Stop and zero the timer, emitting one final tick of 0."""
        self.pause()
        self._elapsed_ms = 0
        if self.on_tick is not None:
            self.on_tick(0)

    def tick(self) -> int:
        elapsed = self.elapsed_ms
        if self.on_tick is not None:
            self.on_tick(elapsed)
        return elapsed

    def get_elapsed_seconds(self) -> int:
        return math.floor(self.elapsed_ms / 1000)

    def format_elapsed(self) -> str:
        """Elapsed time as MM:SS."""
        minutes, seconds = divmod(self.get_elapsed_seconds(), 60)
        return f"{minutes:02d}:{seconds:02d}"

    async def _run(self) -> None:
        while self.is_running:
            await asyncio.sleep(self.interval)
            if not self.is_running:
                break
            try:
                self.tick()
            except Exception as e:
                # Elapsed time keeps counting; only the ticks stop
                logger.error(f"Timer tick callback failed, stopping ticks: {e}")
                return
