"""Draw operations, the canvas interface and a recording canvas."""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Union

from .models import Paint, Rect


@dataclass(frozen=True)
class FillColor:
    color: str

    def describe(self) -> dict[str, Any]:
        return {"op": "fill_color", "color": self.color}


@dataclass(frozen=True)
class DrawBitmap:
    key: str
    left: float
    top: float
    width: int
    height: int
    # Compared by key; the pixels are only needed by raster backends.
    image: Any = field(default=None, compare=False, repr=False)

    def describe(self) -> dict[str, Any]:
        return {
            "op": "draw_bitmap",
            "key": self.key,
            "left": self.left,
            "top": self.top,
            "size": [self.width, self.height],
        }


@dataclass(frozen=True)
class FillRect:
    rect: Rect
    color: str

    def describe(self) -> dict[str, Any]:
        r = self.rect
        return {"op": "fill_rect", "rect": [r.left, r.top, r.right, r.bottom], "color": self.color}


@dataclass(frozen=True)
class Save:
    def describe(self) -> dict[str, Any]:
        return {"op": "save"}


@dataclass(frozen=True)
class Restore:
    def describe(self) -> dict[str, Any]:
        return {"op": "restore"}


@dataclass(frozen=True)
class Rotate:
    degrees: float
    px: float
    py: float

    def describe(self) -> dict[str, Any]:
        return {"op": "rotate", "degrees": self.degrees, "pivot": [self.px, self.py]}


@dataclass(frozen=True)
class DrawLine:
    x0: float
    y0: float
    x1: float
    y1: float
    paint: Paint
    tag: str = ""

    def describe(self) -> dict[str, Any]:
        return {
            "op": "draw_line",
            "tag": self.tag,
            "from": [self.x0, self.y0],
            "to": [self.x1, self.y1],
            "paint": self.paint.describe(),
        }


DrawOp = Union[FillColor, DrawBitmap, FillRect, Save, Restore, Rotate, DrawLine]


@dataclass(frozen=True)
class DrawSequence:
    width: int
    height: int
    ops: tuple[DrawOp, ...]

    def __iter__(self) -> Iterator[DrawOp]:
        return iter(self.ops)

    def __len__(self) -> int:
        return len(self.ops)

    def lines(self, tag: str | None = None) -> list[DrawLine]:
        return [op for op in self.ops if isinstance(op, DrawLine) and (tag is None or op.tag == tag)]

    def describe(self) -> list[dict[str, Any]]:
        return [op.describe() for op in self.ops]

    def to_json(self) -> bytes:
        payload = {"size": [self.width, self.height], "ops": self.describe()}
        return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")


class Canvas:
    """Minimal 2D canvas with a save/restore transform stack."""

    def save(self) -> None:
        raise NotImplementedError

    def restore(self) -> None:
        raise NotImplementedError

    def rotate(self, degrees: float, px: float, py: float) -> None:
        raise NotImplementedError

    def draw_color(self, color: str) -> None:
        raise NotImplementedError

    def draw_bitmap(self, key: str, image: Any, left: float, top: float) -> None:
        raise NotImplementedError

    def draw_rect(self, rect: Rect, color: str) -> None:
        raise NotImplementedError

    def draw_line(self, x0: float, y0: float, x1: float, y1: float, paint: Paint, tag: str = "") -> None:
        raise NotImplementedError

    @contextmanager
    def saved(self) -> Iterator["Canvas"]:
        self.save()
        try:
            yield self
        finally:
            self.restore()


class RecordingCanvas(Canvas):
    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._ops: list[DrawOp] = []
        self._depth = 0

    @property
    def depth(self) -> int:
        return self._depth

    def save(self) -> None:
        self._depth += 1
        self._ops.append(Save())

    def restore(self) -> None:
        if self._depth == 0:
            raise RuntimeError("restore() without matching save()")
        self._depth -= 1
        self._ops.append(Restore())

    def rotate(self, degrees: float, px: float, py: float) -> None:
        self._ops.append(Rotate(degrees, px, py))

    def draw_color(self, color: str) -> None:
        self._ops.append(FillColor(color))

    def draw_bitmap(self, key: str, image: Any, left: float, top: float) -> None:
        self._ops.append(DrawBitmap(key, left, top, image.width, image.height, image))

    def draw_rect(self, rect: Rect, color: str) -> None:
        self._ops.append(FillRect(rect, color))

    def draw_line(self, x0: float, y0: float, x1: float, y1: float, paint: Paint, tag: str = "") -> None:
        self._ops.append(DrawLine(x0, y0, x1, y1, paint, tag))

    def finish(self) -> DrawSequence:
        return DrawSequence(self.width, self.height, tuple(self._ops))
