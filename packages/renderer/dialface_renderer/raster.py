"""Pillow backend that replays a draw sequence into an image."""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from PIL import Image, ImageDraw, ImageFilter

from .canvas import Canvas, DrawBitmap, DrawLine, DrawSequence, FillColor, FillRect, Restore, Rotate, Save
from .models import BLACK, Paint, Rect, StrokeCap, hex_to_rgb


def _rotation(degrees: float, px: float, py: float) -> np.ndarray:
    # Positive degrees turn clockwise on a y-down surface.
    rad = math.radians(degrees)
    cos, sin = math.cos(rad), math.sin(rad)
    return np.array(
        [
            [cos, -sin, px - cos * px + sin * py],
            [sin, cos, py - sin * px - cos * py],
            [0.0, 0.0, 1.0],
        ]
    )


def _shadow_sigma(radius: float) -> float:
    return radius * 0.57735 + 0.5


class RasterCanvas(Canvas):
    """Draws onto an RGBA Pillow image.

    Anti-aliasing is done by supersampling the whole frame and downscaling
    in ``finish``; with ``supersample=1`` lines come out aliased.
    """

    def __init__(self, width: int, height: int, supersample: int = 1, background: str = BLACK) -> None:
        self.width = width
        self.height = height
        self.scale = max(1, int(supersample))
        self._size = (width * self.scale, height * self.scale)
        self._image = Image.new("RGBA", self._size, hex_to_rgb(background) + (255,))
        self._matrix = np.identity(3)
        self._stack: list[np.ndarray] = []

    def _map(self, x: float, y: float) -> tuple[float, float]:
        px, py, _ = self._matrix @ np.array([x, y, 1.0])
        return float(px) * self.scale, float(py) * self.scale

    def _composite(self, layer: Image.Image) -> None:
        self._image = Image.alpha_composite(self._image, layer)

    def save(self) -> None:
        self._stack.append(self._matrix.copy())

    def restore(self) -> None:
        if not self._stack:
            raise RuntimeError("restore() without matching save()")
        self._matrix = self._stack.pop()

    def rotate(self, degrees: float, px: float, py: float) -> None:
        self._matrix = self._matrix @ _rotation(degrees, px, py)

    def draw_color(self, color: str) -> None:
        self._image = Image.new("RGBA", self._size, hex_to_rgb(color) + (255,))

    def draw_bitmap(self, key: str, image: Any, left: float, top: float) -> None:
        x, y = self._map(left, top)
        bitmap = image.convert("RGBA")
        if self.scale > 1:
            bitmap = bitmap.resize((bitmap.width * self.scale, bitmap.height * self.scale), Image.Resampling.BILINEAR)
        self._image.paste(bitmap, (int(round(x)), int(round(y))), bitmap)

    def draw_rect(self, rect: Rect, color: str) -> None:
        corners = [
            self._map(rect.left, rect.top),
            self._map(rect.right, rect.top),
            self._map(rect.right, rect.bottom),
            self._map(rect.left, rect.bottom),
        ]
        ImageDraw.Draw(self._image).polygon(corners, fill=hex_to_rgb(color) + (255,))

    def draw_line(self, x0: float, y0: float, x1: float, y1: float, paint: Paint, tag: str = "") -> None:
        start = self._map(x0, y0)
        end = self._map(x1, y1)
        width = max(1, int(round(paint.stroke_width * self.scale)))

        shadow = paint.shadow
        if shadow is not None and shadow.radius > 0:
            offset = (shadow.dx * self.scale, shadow.dy * self.scale)
            layer = Image.new("RGBA", self._size, (0, 0, 0, 0))
            self._stroke(
                layer,
                (start[0] + offset[0], start[1] + offset[1]),
                (end[0] + offset[0], end[1] + offset[1]),
                hex_to_rgb(shadow.color) + (paint.alpha,),
                width,
                paint.cap,
            )
            self._composite(layer.filter(ImageFilter.GaussianBlur(_shadow_sigma(shadow.radius) * self.scale)))

        layer = Image.new("RGBA", self._size, (0, 0, 0, 0))
        self._stroke(layer, start, end, hex_to_rgb(paint.color) + (paint.alpha,), width, paint.cap)
        self._composite(layer)

    @staticmethod
    def _stroke(layer: Image.Image, start, end, fill, width: int, cap: StrokeCap) -> None:
        draw = ImageDraw.Draw(layer)
        draw.line([start, end], fill=fill, width=width)
        if cap is StrokeCap.ROUND:
            r = width / 2.0
            for x, y in (start, end):
                draw.ellipse((x - r, y - r, x + r, y + r), fill=fill)

    def finish(self) -> Image.Image:
        image = self._image
        if self.scale > 1:
            image = image.resize((self.width, self.height), Image.Resampling.LANCZOS)
        return image.convert("RGB")


def replay(sequence: DrawSequence, canvas: Canvas) -> None:
    for op in sequence:
        if isinstance(op, FillColor):
            canvas.draw_color(op.color)
        elif isinstance(op, DrawBitmap):
            if op.image is not None:
                canvas.draw_bitmap(op.key, op.image, op.left, op.top)
        elif isinstance(op, FillRect):
            canvas.draw_rect(op.rect, op.color)
        elif isinstance(op, Save):
            canvas.save()
        elif isinstance(op, Restore):
            canvas.restore()
        elif isinstance(op, Rotate):
            canvas.rotate(op.degrees, op.px, op.py)
        elif isinstance(op, DrawLine):
            canvas.draw_line(op.x0, op.y0, op.x1, op.y1, op.paint, op.tag)


def rasterize(sequence: DrawSequence, supersample: int | None = None) -> Image.Image:
    if supersample is None:
        supersample = 2 if any(line.paint.anti_alias for line in sequence.lines()) else 1
    canvas = RasterCanvas(sequence.width, sequence.height, supersample=supersample)
    replay(sequence, canvas)
    return canvas.finish()
