"""Paint variants derived from a hand style, memoized per (style, mode)."""

from __future__ import annotations

from enum import Enum

from .models import BLACK, WHITE, DisplayState, HandStyle, Paint

MUTED_ALPHA = 100
OUTLINE_EXTRA_WIDTH = 0.5


class PaintMode(str, Enum):
    OUTLINE = "outline"
    ACTIVE = "active"
    ACTIVE_MUTED = "active_muted"
    AMBIENT = "ambient"


def derive_paint(style: HandStyle, mode: PaintMode) -> Paint:
    if mode is PaintMode.OUTLINE:
        return Paint(
            color=BLACK,
            stroke_width=style.stroke_width + OUTLINE_EXTRA_WIDTH,
            anti_alias=False,
            cap=style.cap,
        )
    if mode is PaintMode.AMBIENT:
        return Paint(color=WHITE, stroke_width=style.stroke_width, anti_alias=False, cap=style.cap)
    return Paint(
        color=style.base_color,
        stroke_width=style.stroke_width,
        alpha=MUTED_ALPHA if mode is PaintMode.ACTIVE_MUTED else style.alpha,
        anti_alias=True,
        shadow=style.shadow,
        cap=style.cap,
    )


def select_mode(state: DisplayState) -> PaintMode:
    if state.ambient:
        return PaintMode.AMBIENT
    return PaintMode.ACTIVE_MUTED if state.muted else PaintMode.ACTIVE


class PaintCache:
    def __init__(self) -> None:
        self._paints: dict[tuple[HandStyle, PaintMode], Paint] = {}

    def __len__(self) -> int:
        return len(self._paints)

    def get(self, style: HandStyle, mode: PaintMode) -> Paint:
        key = (style, mode)
        paint = self._paints.get(key)
        if paint is None:
            paint = derive_paint(style, mode)
            self._paints[key] = paint
        return paint

    def outline(self, style: HandStyle) -> Paint:
        return self.get(style, PaintMode.OUTLINE)

    def selected(self, style: HandStyle, state: DisplayState) -> Paint:
        return self.get(style, select_mode(state))

    def clear(self) -> None:
        self._paints.clear()
