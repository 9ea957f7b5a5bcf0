"""Per-theme background bitmap scaled to the surface, with a desaturated ambient variant."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np
from PIL import Image

logger = logging.getLogger("dialface.background")

# Luminance weights of a zero-saturation color matrix.
LUMA_WEIGHTS = np.array([0.213, 0.715, 0.072], dtype=np.float32)

ImageSource = Callable[[int], "Image.Image | None"]


def desaturate(image: Image.Image) -> Image.Image:
    rgb = np.asarray(image.convert("RGB"), dtype=np.float32)
    luma = np.clip(np.rint(rgb @ LUMA_WEIGHTS), 0, 255).astype(np.uint8)
    return Image.fromarray(np.repeat(luma[:, :, None], 3, axis=2), "RGB")


def scale_to_width(image: Image.Image, width: int) -> Image.Image:
    scale = width / float(image.width)
    height = max(1, int(image.height * scale))
    return image.convert("RGB").resize((width, height), Image.Resampling.BILINEAR)


@dataclass(frozen=True)
class ScaledBackground:
    theme_index: int
    surface_width: int
    image: Image.Image
    desaturated: Image.Image | None = None

    @property
    def key(self) -> str:
        return f"background:{self.theme_index}:{self.image.width}x{self.image.height}"

    @property
    def ambient_key(self) -> str:
        return f"{self.key}:gray"


class BackgroundImageCache:
    """Holds the current theme's background at surface width.

    Rescaling happens when the surface, the theme or the capability flags
    change, never per frame. The desaturated copy is only built when ambient
    mode may actually show the bitmap.
    """

    def __init__(self, source: ImageSource) -> None:
        self._source = source
        self._theme_index = 0
        self._surface_width = 0
        self._low_bit_ambient = False
        self._burn_in_protection = False
        self._scaled: ScaledBackground | None = None
        self._valid = False
        self.rescale_count = 0

    @property
    def valid(self) -> bool:
        return self._valid

    @property
    def theme_index(self) -> int:
        return self._theme_index

    @property
    def wants_desaturated(self) -> bool:
        return not self._burn_in_protection and not self._low_bit_ambient

    def invalidate(self) -> None:
        self._scaled = None
        self._valid = False

    def set_theme(self, index: int) -> None:
        if index != self._theme_index:
            self._theme_index = index
            self.invalidate()

    def set_capabilities(self, low_bit_ambient: bool, burn_in_protection: bool) -> None:
        if (low_bit_ambient, burn_in_protection) != (self._low_bit_ambient, self._burn_in_protection):
            self._low_bit_ambient = low_bit_ambient
            self._burn_in_protection = burn_in_protection
            self.invalidate()

    def rescale(self, surface_width: int) -> ScaledBackground | None:
        self._surface_width = int(surface_width)
        self._valid = True
        self._scaled = None
        if self._surface_width <= 0:
            return None

        source = self._source(self._theme_index)
        if source is None or source.width <= 0 or source.height <= 0:
            logger.debug("no background for theme %s", self._theme_index)
            return None

        self.rescale_count += 1
        image = scale_to_width(source, self._surface_width)
        gray = desaturate(image) if self.wants_desaturated else None
        self._scaled = ScaledBackground(self._theme_index, self._surface_width, image, gray)
        logger.debug(
            "background rescaled",
            extra={"event": "background_rescaled", "theme_index": self._theme_index, "size": image.size},
        )
        return self._scaled

    def get(self) -> ScaledBackground | None:
        if not self._valid and self._surface_width > 0:
            self.rescale(self._surface_width)
        return self._scaled
