"""Scene composition: background, ticks and rotated hands."""

from __future__ import annotations

from .background import ScaledBackground
from .canvas import Canvas, DrawSequence, RecordingCanvas
from .elements import ClockElement
from .models import BLACK, DisplayState, HandAngles, Rect, TimeSample
from .paints import PaintCache
from .rotation import RotationCalculator
from .themes import ThemeEntry


class SceneRenderer:
    """Emits the draw sequence for one frame.

    Output depends only on the time sample, the display state, the theme and
    the cached background, so equal inputs give equal sequences.
    """

    def __init__(self, rotation: RotationCalculator | None = None, paints: PaintCache | None = None) -> None:
        self.rotation = rotation or RotationCalculator()
        self.paints = paints or PaintCache()

    def render(
        self,
        sample: TimeSample,
        state: DisplayState,
        theme: ThemeEntry,
        width: int,
        height: int,
        background: ScaledBackground | None = None,
        peek_card: Rect | None = None,
    ) -> DrawSequence:
        canvas = RecordingCanvas(width, height)
        self.draw(canvas, sample, state, theme, width, height, background, peek_card)
        return canvas.finish()

    def draw(
        self,
        canvas: Canvas,
        sample: TimeSample,
        state: DisplayState,
        theme: ThemeEntry,
        width: int,
        height: int,
        background: ScaledBackground | None = None,
        peek_card: Rect | None = None,
    ) -> HandAngles:
        cx = width / 2.0
        cy = height / 2.0

        self._draw_background(canvas, state, theme, background)
        self._draw_element(canvas, theme.ticks, cx, cy, state, outline=False)

        angles = self.rotation.angles(sample)
        with canvas.saved():
            canvas.rotate(angles.hour, cx, cy)
            self._draw_element(canvas, theme.hour, cx, cy, state)

            canvas.rotate(angles.minute - angles.hour, cx, cy)
            self._draw_element(canvas, theme.minute, cx, cy, state)

            # Ambient refresh is too coarse for a moving second hand.
            if not state.ambient:
                canvas.rotate(angles.second - angles.minute, cx, cy)
                self._draw_element(canvas, theme.second, cx, cy, state)

        if state.ambient and peek_card is not None and not peek_card.empty:
            canvas.draw_rect(peek_card, BLACK)
        return angles

    def _draw_element(
        self, canvas: Canvas, element: ClockElement, cx: float, cy: float, state: DisplayState, outline: bool = True
    ) -> None:
        paint = self.paints.selected(element.style, state)
        element.draw(canvas, cx, cy, paint, self.paints.outline(element.style) if outline else None)

    @staticmethod
    def _draw_background(
        canvas: Canvas, state: DisplayState, theme: ThemeEntry, background: ScaledBackground | None
    ) -> None:
        if state.ambient and state.protects_ambient:
            canvas.draw_color(BLACK)
            return
        if state.ambient:
            if background is None or background.desaturated is None:
                canvas.draw_color(BLACK)
            else:
                canvas.draw_bitmap(background.ambient_key, background.desaturated, 0, 0)
            return
        if background is None:
            canvas.draw_color(theme.fallback_color)
        else:
            canvas.draw_bitmap(background.key, background.image, 0, 0)
