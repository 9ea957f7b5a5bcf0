"""Background image provider for the desktop host."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from dialface_core.logging_setup import get_logger
from dialface_renderer import FacePreset, ThemeEntry
from dialface_renderer.models import hex_to_rgb

PLACEHOLDER_SIZE = 400


def gradient_background(top: str, bottom: str, size: int = PLACEHOLDER_SIZE) -> Image.Image:
    start = np.array(hex_to_rgb(top), dtype=np.float32)
    end = np.array(hex_to_rgb(bottom), dtype=np.float32)
    t = np.linspace(0.0, 1.0, size, dtype=np.float32)[:, None]
    rows = start * (1 - t) + end * t
    pixels = np.repeat(rows[:, None, :], size, axis=1)
    return Image.fromarray(np.rint(pixels).astype(np.uint8), "RGB")


def placeholder_for(theme: ThemeEntry) -> Image.Image:
    if theme.background_ref == "black":
        return Image.new("RGB", (PLACEHOLDER_SIZE, PLACEHOLDER_SIZE), (0, 0, 0))
    return gradient_background(theme.second.style.base_color, theme.minute.style.base_color)


class BackgroundLibrary:
    """Decodes each theme's background once and hands it to the session by index.

    Paths come from the ``backgrounds`` settings, keyed by theme name or
    background reference. Unconfigured themes get a generated gradient when
    ``placeholders`` is on; unreadable files count as missing.
    """

    def __init__(self, preset: FacePreset, paths: dict[str, str] | None = None, placeholders: bool = True) -> None:
        self.preset = preset
        self.paths = dict(paths or {})
        self.placeholders = placeholders
        self._images: dict[int, Image.Image | None] = {}
        self._logger = get_logger()

    def _path_for(self, theme: ThemeEntry) -> Path | None:
        raw = self.paths.get(theme.name) or (self.paths.get(theme.background_ref) if theme.background_ref else None)
        return Path(raw).expanduser() if raw else None

    def _load(self, index: int) -> Image.Image | None:
        theme = self.preset.themes[index % len(self.preset.themes)]
        path = self._path_for(theme)
        if path is None:
            return placeholder_for(theme) if self.placeholders else None
        try:
            with Image.open(path) as image:
                image.load()
                return image.convert("RGB")
        except (OSError, UnidentifiedImageError) as exc:
            self._logger.warning(
                f"background for {theme.name} unavailable: {exc}",
                extra={"event": "background_unavailable"},
            )
            return None

    def __call__(self, index: int) -> Image.Image | None:
        if index not in self._images:
            self._images[index] = self._load(index)
        return self._images[index]
