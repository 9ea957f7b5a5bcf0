"""Built-in hand/background themes and the tap-cycled theme set."""

from __future__ import annotations

from dataclasses import dataclass

from .elements import ClockElement, hand, ticks
from .models import BLACK, HandGeometry, HandStyle, ShadowLayer, StrokeCap
from .rotation import MinutePolicy


@dataclass(frozen=True)
class ThemeEntry:
    name: str
    hour: ClockElement
    minute: ClockElement
    second: ClockElement
    tick_ring: HandGeometry
    background_ref: str | None = None
    fallback_color: str = BLACK

    @property
    def ticks(self) -> ClockElement:
        # Ticks share the minute hand's paint so they follow its mode.
        return ticks(self.minute.style, self.tick_ring.start_scale, self.tick_ring.end_scale)


class ThemeSet:
    def __init__(self, entries: list[ThemeEntry] | tuple[ThemeEntry, ...], index: int = 0) -> None:
        if not entries:
            raise ValueError("ThemeSet needs at least one theme")
        self._entries = tuple(entries)
        self._index = index % len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> ThemeEntry:
        return self._entries[self._index]

    def names(self) -> list[str]:
        return [entry.name for entry in self._entries]

    def advance(self) -> int:
        self._index = (self._index + 1) % len(self._entries)
        return self._index

    def select(self, index: int) -> int:
        self._index = index % len(self._entries)
        return self._index


@dataclass(frozen=True)
class FacePreset:
    name: str
    themes: tuple[ThemeEntry, ...]
    minute_policy: MinutePolicy

    def theme_set(self, index: int = 0) -> ThemeSet:
        return ThemeSet(self.themes, index)


HOUR_STROKE_WIDTH = 13.0
MINUTE_STROKE_WIDTH = 9.0
SECOND_STROKE_WIDTH = 24.0
MINIMAL_SHADOW = ShadowLayer(radius=7.0)
MINIMAL_TICK_RING = HandGeometry(0.82, 0.92)


def _minimal_theme(name: str, hour_color: str, minute_color: str, second_color: str, background: str) -> ThemeEntry:
    def style(color: str, width: float) -> HandStyle:
        return HandStyle(color, width, MINIMAL_SHADOW, cap=StrokeCap.ROUND)

    return ThemeEntry(
        name=name,
        hour=hand("hour", style(hour_color, HOUR_STROKE_WIDTH), 0.2, 0.5),
        minute=hand("minute", style(minute_color, MINUTE_STROKE_WIDTH), 0.35, 0.90),
        second=hand("second", style(second_color, SECOND_STROKE_WIDTH), 0.95, 1.0),
        tick_ring=MINIMAL_TICK_RING,
        background_ref=background,
    )


MINIMAL_THEMES: tuple[ThemeEntry, ...] = (
    _minimal_theme("Lemon Dusk", "#EEEEEE", "#E42E40", "#222222", "lemon_dusk"),
    _minimal_theme("Harbor Blue", "#42688D", "#FFFBBC", "#572B46", "harbor_blue"),
    _minimal_theme("Blue Snow", "#393846", "#3D4CB3", "#F9F9F7", "blue_snow"),
    _minimal_theme("Amber Wood", "#3D2221", "#934E2D", "#EAE4DA", "amber_wood"),
    _minimal_theme("Dream Teal", "#283D50", "#A55C65", "#8DC6CD", "dream_teal"),
)

ELEGANT_SHADOW = ShadowLayer(radius=6.0)

ELEGANT_THEMES: tuple[ThemeEntry, ...] = (
    ThemeEntry(
        name="Elegant",
        hour=hand("hour", HandStyle("#FFFFFF", 4.0, ELEGANT_SHADOW), 0.0, 0.33),
        minute=hand("minute", HandStyle("#FFFFFF", 2.5, ELEGANT_SHADOW), 0.33, 0.9),
        second=hand("second", HandStyle("#FF0000", 1.0, ELEGANT_SHADOW), 0.1, 0.95),
        tick_ring=HandGeometry(0.82, 1.0),
        background_ref="black",
    ),
)

DEFAULT_PRESET_NAME = "minimal"

PRESETS: dict[str, FacePreset] = {
    "minimal": FacePreset("minimal", MINIMAL_THEMES, MinutePolicy.SWEEP),
    "elegant": FacePreset("elegant", ELEGANT_THEMES, MinutePolicy.STEP),
}


def list_presets() -> list[str]:
    return sorted(PRESETS.keys())


def get_preset(name: str | None) -> FacePreset:
    if not name:
        return PRESETS[DEFAULT_PRESET_NAME]
    return PRESETS.get(name, PRESETS[DEFAULT_PRESET_NAME])
