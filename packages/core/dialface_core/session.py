"""Per-face rendering session: turns host callbacks into state changes and redraws."""

from __future__ import annotations

import time
from datetime import datetime
from enum import Enum
from typing import Callable

from PIL import Image

from dialface_renderer import (
    BackgroundImageCache,
    DisplayState,
    DrawSequence,
    FacePreset,
    MinutePolicy,
    Rect,
    RotationCalculator,
    SceneRenderer,
    TimeSample,
    rasterize,
)
from dialface_renderer.background import ImageSource

from .logging_setup import get_logger
from .performance import RenderBudgetMonitor
from .scheduler import INTERACTIVE_UPDATE_RATE_MS, RedrawScheduler, TimerHost, wall_clock_millis


class TapType(str, Enum):
    TOUCH = "touch"
    TOUCH_CANCEL = "touch_cancel"
    TAP = "tap"


def local_time_sample() -> TimeSample:
    return TimeSample.from_datetime(datetime.now())


def _no_background(_index: int) -> Image.Image | None:
    return None


class WatchFaceSession:
    """One visible watch face.

    The host must call every ``on_*`` method from the same thread; nothing
    here locks.
    """

    def __init__(
        self,
        preset: FacePreset,
        timer: TimerHost,
        request_redraw: Callable[[], None],
        background_source: ImageSource | None = None,
        time_source: Callable[[], TimeSample] = local_time_sample,
        clock_millis: Callable[[], int] = wall_clock_millis,
        minute_policy: MinutePolicy | None = None,
        interactive_update_ms: int = INTERACTIVE_UPDATE_RATE_MS,
        budget: RenderBudgetMonitor | None = None,
        theme_index: int = 0,
    ) -> None:
        self.preset = preset
        self.state = DisplayState()
        self.themes = preset.theme_set(theme_index)
        self.backgrounds = BackgroundImageCache(background_source or _no_background)
        self.backgrounds.set_theme(self.themes.index)
        self.renderer = SceneRenderer(RotationCalculator(minute_policy or preset.minute_policy))
        self.scheduler = RedrawScheduler(timer, self.invalidate, clock_millis, interactive_update_ms)
        self.budget = budget
        self._request_redraw = request_redraw
        self._time_source = time_source
        self._destroyed = False
        self._logger = get_logger()

        self.width = 0
        self.height = 0
        self.visible = False
        self.peek_card: Rect | None = None
        self.redraw_requests = 0

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def invalidate(self) -> None:
        if self._destroyed:
            return
        self.redraw_requests += 1
        self._request_redraw()

    def on_properties_changed(self, low_bit_ambient: bool = False, burn_in_protection: bool = False) -> None:
        self.state.low_bit_ambient = bool(low_bit_ambient)
        self.state.burn_in_protection = bool(burn_in_protection)
        self.backgrounds.set_capabilities(self.state.low_bit_ambient, self.state.burn_in_protection)

    def on_surface_changed(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.backgrounds.rescale(self.width)

    def on_visibility_changed(self, visible: bool) -> None:
        self.visible = bool(visible)
        if self.visible:
            self.invalidate()
        self.scheduler.update(visible=self.visible)

    def on_ambient_mode_changed(self, ambient: bool) -> None:
        ambient = bool(ambient)
        changed = ambient != self.state.ambient
        self.state.ambient = ambient
        if changed:
            self.invalidate()
        self.scheduler.update(ambient=ambient)

    def on_interruption_filter_changed(self, muted: bool) -> None:
        muted = bool(muted)
        if muted != self.state.muted:
            self.state.muted = muted
            self.invalidate()

    def on_time_tick(self) -> None:
        self.invalidate()

    def on_peek_card_position(self, rect: Rect | None) -> None:
        self.peek_card = rect

    def on_tap(self, tap_type: TapType, x: int = 0, y: int = 0) -> None:
        if TapType(tap_type) is TapType.TAP:
            self.advance_theme()
        else:
            self.invalidate()

    def advance_theme(self) -> int:
        index = self.themes.advance()
        self.backgrounds.set_theme(index)
        self._logger.info(
            f"theme -> {self.themes.current.name}",
            extra={"event": "theme_changed", "theme_index": index},
        )
        self.invalidate()
        return index

    def select_theme(self, index: int) -> int:
        index = self.themes.select(index)
        self.backgrounds.set_theme(index)
        self.invalidate()
        return index

    def draw(self, sample: TimeSample | None = None) -> DrawSequence:
        sample = sample or self._time_source()
        start = time.perf_counter()
        sequence = self.renderer.render(
            sample,
            self.state.snapshot(),
            self.themes.current,
            self.width,
            self.height,
            self.backgrounds.get(),
            self.peek_card,
        )
        if self.budget is not None:
            self.budget.record(time.perf_counter() - start)
        return sequence

    def render_image(self, sample: TimeSample | None = None) -> Image.Image:
        return rasterize(self.draw(sample))

    def destroy(self) -> None:
        self.scheduler.destroy()
        self._destroyed = True
        self._logger.info("session destroyed", extra={"event": "session_destroyed"})
