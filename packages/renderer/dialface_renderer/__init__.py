"""Renderer package for analog watch-face composition."""

from .background import BackgroundImageCache, ScaledBackground, desaturate
from .canvas import Canvas, DrawSequence, RecordingCanvas
from .elements import ClockElement, ElementKind
from .models import DisplayState, HandAngles, HandGeometry, HandStyle, Paint, Rect, ShadowLayer, StrokeCap, TimeSample
from .paints import PaintCache, PaintMode
from .raster import RasterCanvas, rasterize
from .rotation import MinutePolicy, RotationCalculator
from .scene import SceneRenderer
from .themes import DEFAULT_PRESET_NAME, FacePreset, ThemeEntry, ThemeSet, get_preset, list_presets

__all__ = [
    "BackgroundImageCache",
    "Canvas",
    "ClockElement",
    "DEFAULT_PRESET_NAME",
    "DisplayState",
    "DrawSequence",
    "ElementKind",
    "FacePreset",
    "HandAngles",
    "HandGeometry",
    "HandStyle",
    "MinutePolicy",
    "Paint",
    "PaintCache",
    "PaintMode",
    "RasterCanvas",
    "RecordingCanvas",
    "Rect",
    "RotationCalculator",
    "ScaledBackground",
    "SceneRenderer",
    "ShadowLayer",
    "StrokeCap",
    "ThemeEntry",
    "ThemeSet",
    "TimeSample",
    "desaturate",
    "get_preset",
    "list_presets",
    "rasterize",
]
