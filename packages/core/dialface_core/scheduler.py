"""Redraw cadence: a single re-armable timer slot driven by the display state."""

from __future__ import annotations

import sched
import time
from dataclasses import dataclass
from typing import Any, Callable

from .logging_setup import get_logger

INTERACTIVE_UPDATE_RATE_MS = 1000


def wall_clock_millis() -> int:
    return time.time_ns() // 1_000_000


class TimerHost:
    """Delayed-callback facility owned by the host."""

    def post_delayed(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        raise NotImplementedError

    def cancel(self, handle: Any) -> None:
        raise NotImplementedError


class LoopTimerHost(TimerHost):
    """Single-threaded timer loop on top of ``sched``."""

    def __init__(self, timefunc: Callable[[], float] = time.monotonic, delayfunc: Callable[[float], None] = time.sleep) -> None:
        self._scheduler = sched.scheduler(timefunc, delayfunc)
        self._timefunc = timefunc
        self._delayfunc = delayfunc

    def now(self) -> float:
        return self._timefunc()

    def post_delayed(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        return self._scheduler.enter(max(0, delay_ms) / 1000.0, 0, callback)

    def cancel(self, handle: Any) -> None:
        try:
            self._scheduler.cancel(handle)
        except ValueError:
            pass  # already fired

    @property
    def pending(self) -> int:
        return len(self._scheduler.queue)

    def run_until(self, deadline: float) -> None:
        while True:
            queue = self._scheduler.queue
            if not queue or queue[0].time > deadline:
                break
            wait = queue[0].time - self._timefunc()
            if wait > 0:
                self._delayfunc(wait)
            self._scheduler.run(blocking=False)
        remaining = deadline - self._timefunc()
        if remaining > 0:
            self._delayfunc(remaining)


@dataclass
class SchedulerStats:
    fires: int = 0
    arms: int = 0
    stale_fires: int = 0
    cancels: int = 0


class RedrawScheduler:
    """Fires ``on_redraw`` once per interval while the face is visible and interactive.

    The next fire is aligned to the next interval boundary of the wall clock.
    Superseded timers are cancelled, and a late fire from one is dropped by
    generation number in case the host could not cancel it in time.
    """

    def __init__(
        self,
        timer: TimerHost,
        on_redraw: Callable[[], None],
        clock_millis: Callable[[], int] = wall_clock_millis,
        interval_ms: int = INTERACTIVE_UPDATE_RATE_MS,
    ) -> None:
        self._timer = timer
        self._on_redraw: Callable[[], None] | None = on_redraw
        self._clock_millis = clock_millis
        self.interval_ms = max(1, int(interval_ms))
        self._visible = False
        self._ambient = False
        self._handle: Any = None
        self._generation = 0
        self.stats = SchedulerStats()
        self._logger = get_logger()

    @property
    def destroyed(self) -> bool:
        return self._on_redraw is None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def should_run(self) -> bool:
        return self._visible and not self._ambient and not self.destroyed

    def next_delay_ms(self, now_ms: int) -> int:
        return self.interval_ms - (now_ms % self.interval_ms)

    def update(self, visible: bool | None = None, ambient: bool | None = None) -> None:
        if visible is not None:
            self._visible = bool(visible)
        if ambient is not None:
            self._ambient = bool(ambient)
        self._cancel_pending()
        if self.should_run():
            self._arm(0)

    def destroy(self) -> None:
        self._cancel_pending()
        self._on_redraw = None
        self._logger.debug("redraw scheduler destroyed", extra={"event": "scheduler_destroyed"})

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._timer.cancel(self._handle)
            self._handle = None
            self.stats.cancels += 1
        self._generation += 1

    def _arm(self, delay_ms: int) -> None:
        generation = self._generation
        self._handle = self._timer.post_delayed(delay_ms, lambda: self._fire(generation))
        self.stats.arms += 1

    def _fire(self, generation: int) -> None:
        if generation != self._generation or self._on_redraw is None:
            self.stats.stale_fires += 1
            return
        self._handle = None
        self.stats.fires += 1
        self._on_redraw()
        # on_redraw may have changed visibility or mode; re-check before re-arming.
        if self.should_run() and self._handle is None and generation == self._generation:
            self._arm(self.next_delay_ms(self._clock_millis()))
