"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from enum import Enum

BLACK = "#000000"
WHITE = "#FFFFFF"


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    return tuple(int(value[i : i + 2], 16) for i in (1, 3, 5))  # type: ignore[return-value]


@dataclass(frozen=True)
class TimeSample:
    hour: int
    minute: int
    second: int
    millisecond: int = 0

    @classmethod
    def from_datetime(cls, value: datetime) -> "TimeSample":
        return cls(
            hour=value.hour,
            minute=value.minute,
            second=value.second,
            millisecond=value.microsecond // 1000,
        )

    @classmethod
    def from_epoch_millis(cls, millis: int, tz: tzinfo | None = None) -> "TimeSample":
        moment = datetime.fromtimestamp(millis / 1000, tz or timezone.utc)
        # Float conversion can drift by a microsecond; take millis from the integer.
        return cls(hour=moment.hour, minute=moment.minute, second=moment.second, millisecond=int(millis) % 1000)


@dataclass
class DisplayState:
    """Mode flags of one rendering session.

    ``low_bit_ambient`` and ``burn_in_protection`` come from capability
    negotiation and are not expected to change afterwards.
    """

    ambient: bool = False
    muted: bool = False
    low_bit_ambient: bool = False
    burn_in_protection: bool = False

    @property
    def protects_ambient(self) -> bool:
        return self.low_bit_ambient or self.burn_in_protection

    def snapshot(self) -> "DisplayState":
        return DisplayState(
            ambient=self.ambient,
            muted=self.muted,
            low_bit_ambient=self.low_bit_ambient,
            burn_in_protection=self.burn_in_protection,
        )


class StrokeCap(str, Enum):
    BUTT = "butt"
    ROUND = "round"


@dataclass(frozen=True)
class ShadowLayer:
    radius: float
    dx: float = 0.0
    dy: float = 0.0
    color: str = BLACK


@dataclass(frozen=True)
class HandStyle:
    base_color: str
    stroke_width: float
    shadow: ShadowLayer
    alpha: int = 255
    cap: StrokeCap = StrokeCap.BUTT

    def with_color(self, color: str) -> "HandStyle":
        return HandStyle(color, self.stroke_width, self.shadow, self.alpha, self.cap)


@dataclass(frozen=True)
class HandGeometry:
    start_scale: float
    end_scale: float


@dataclass(frozen=True)
class Paint:
    color: str
    stroke_width: float
    alpha: int = 255
    anti_alias: bool = True
    shadow: ShadowLayer | None = None
    cap: StrokeCap = StrokeCap.BUTT

    def describe(self) -> dict:
        return {
            "color": self.color,
            "stroke_width": self.stroke_width,
            "alpha": self.alpha,
            "anti_alias": self.anti_alias,
            "shadow": None
            if self.shadow is None
            else [self.shadow.radius, self.shadow.dx, self.shadow.dy, self.shadow.color],
            "cap": self.cap.value,
        }


@dataclass(frozen=True)
class HandAngles:
    hour: float
    minute: float
    second: float


@dataclass(frozen=True)
class Rect:
    left: int
    top: int
    right: int
    bottom: int

    @property
    def empty(self) -> bool:
        return self.right <= self.left or self.bottom <= self.top
