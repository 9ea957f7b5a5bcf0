"""Hands and tick rings as one tagged element type."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .canvas import Canvas
from .models import HandGeometry, HandStyle, Paint

TICK_COUNT = 12


class ElementKind(str, Enum):
    HAND = "hand"
    TICKS = "ticks"


@dataclass(frozen=True)
class ClockElement:
    kind: ElementKind
    style: HandStyle
    geometry: HandGeometry
    name: str = ""

    def draw(self, canvas: Canvas, cx: float, cy: float, paint: Paint, outline: Paint | None = None) -> None:
        """Draws in the 12 o'clock frame; hands expect the canvas to be rotated beforehand."""
        if self.kind is ElementKind.TICKS:
            self._draw_ticks(canvas, cx, cy, paint)
        else:
            self._draw_hand(canvas, cx, cy, paint, outline)

    def _draw_hand(self, canvas: Canvas, cx: float, cy: float, paint: Paint, outline: Paint | None) -> None:
        y0 = cy - cx * self.geometry.start_scale
        y1 = cy - cx * self.geometry.end_scale
        if outline is not None:
            canvas.draw_line(cx, y0, cx, y1, outline, tag=f"{self.name}:outline")
        canvas.draw_line(cx, y0, cx, y1, paint, tag=self.name)

    def _draw_ticks(self, canvas: Canvas, cx: float, cy: float, paint: Paint) -> None:
        inner = cx * self.geometry.start_scale
        outer = cx * self.geometry.end_scale
        for index in range(TICK_COUNT):
            rot = index * math.pi * 2.0 / TICK_COUNT
            dx, dy = math.sin(rot), -math.cos(rot)
            canvas.draw_line(
                cx + dx * inner,
                cy + dy * inner,
                cx + dx * outer,
                cy + dy * outer,
                paint,
                tag=self.name or "ticks",
            )


def hand(name: str, style: HandStyle, start_scale: float, end_scale: float) -> ClockElement:
    return ClockElement(ElementKind.HAND, style, HandGeometry(start_scale, end_scale), name)


def ticks(style: HandStyle, start_scale: float, end_scale: float) -> ClockElement:
    return ClockElement(ElementKind.TICKS, style, HandGeometry(start_scale, end_scale), "ticks")
