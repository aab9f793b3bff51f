"""color_filter.py.

Provides the ColorFilter stage: per-pixel colour remaps with no spatial
dependency. Every output channel is computed from the pixel's own R, G and B,
clamped to [0, 255] and truncated. Alpha is passed through unchanged.

Channels are read alpha-weighted (c * A / 255, truncated) before the filter
arithmetic, which is how the service has always sampled them. For opaque
pixels this is the straight value; translucent pixels come out darker than a
straight-alpha formula would give.
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
from numpy.typing import NDArray

from rasterpipe.utils.log import get_logger

from .image_processing_interfaces import ImageProcessor, PixelArray, Raster
from .request import FilterKind, TransformRequest

LOGGER = get_logger(__name__)

FloatArray = NDArray[np.float64]
ChannelFn = Callable[[FloatArray, FloatArray, FloatArray], tuple[FloatArray, FloatArray, FloatArray]]

# Coefficient rows for (R', G', B') in terms of (R, G, B)
SEPIA_MATRIX = (
    (0.393, 0.769, 0.189),
    (0.349, 0.686, 0.168),
    (0.272, 0.534, 0.131),
)
COOL_GAINS = (0.9, 0.9, 1.1)
WARM_GAINS = (1.1, 1.0, 0.9)

FILTER_CATALOG: list[dict[str, str]] = [
    {"id": FilterKind.NONE.value, "name": "No filter", "icon": "🔄"},
    {"id": FilterKind.GRAYSCALE.value, "name": "Black & white", "icon": "⚫"},
    {"id": FilterKind.SEPIA.value, "name": "Sepia", "icon": "🟤"},
    {"id": FilterKind.INVERT.value, "name": "Invert", "icon": "🔄"},
    {"id": FilterKind.COOL.value, "name": "Cool", "icon": "❄️"},
    {"id": FilterKind.WARM.value, "name": "Warm", "icon": "🔥"},
]


def _grayscale(r: FloatArray, g: FloatArray, b: FloatArray) -> tuple[FloatArray, FloatArray, FloatArray]:
    y = 0.299 * r + 0.587 * g + 0.114 * b
    return y, y, y


def _matrix(rows: tuple[tuple[float, float, float], ...]) -> ChannelFn:
    def apply(r: FloatArray, g: FloatArray, b: FloatArray) -> tuple[FloatArray, FloatArray, FloatArray]:
        out = [r * kr + g * kg + b * kb for kr, kg, kb in rows]
        return out[0], out[1], out[2]

    return apply


def _gains(gains: tuple[float, float, float]) -> ChannelFn:
    kr, kg, kb = gains

    def apply(r: FloatArray, g: FloatArray, b: FloatArray) -> tuple[FloatArray, FloatArray, FloatArray]:
        return r * kr, g * kg, b * kb

    return apply


def _invert(r: FloatArray, g: FloatArray, b: FloatArray) -> tuple[FloatArray, FloatArray, FloatArray]:
    return 255.0 - r, 255.0 - g, 255.0 - b


_FILTERS: dict[FilterKind, ChannelFn | None] = {
    FilterKind.NONE: None,
    FilterKind.GRAYSCALE: _grayscale,
    FilterKind.SEPIA: _matrix(SEPIA_MATRIX),
    FilterKind.INVERT: _invert,
    FilterKind.COOL: _gains(COOL_GAINS),
    FilterKind.WARM: _gains(WARM_GAINS),
}


def sample_channels(pixels: PixelArray) -> tuple[FloatArray, FloatArray, FloatArray]:
    """Read R, G, B as alpha-weighted 8-bit values, as float64 arrays."""
    rgb = pixels[..., :3].astype(np.uint32)
    alpha = pixels[..., 3:4].astype(np.uint32)
    # Widen to 16 bits, weight by alpha, shift back down
    weighted = ((rgb * 0x101 * (alpha * 0x101)) // 0xFFFF) >> 8
    weighted = weighted.astype(np.float64)
    return weighted[..., 0], weighted[..., 1], weighted[..., 2]


class ColorFilter(ImageProcessor):
    """Applies one of the fixed colour filters to every pixel."""

    stage_name = "filter"

    def is_noop(self, request: TransformRequest) -> bool:
        return request.filter is FilterKind.NONE

    def process(self, raster: Raster, request: TransformRequest) -> Raster:
        return self.apply(raster, request.filter)

    def apply(self, raster: Raster, kind: FilterKind) -> Raster:
        """Return a filtered copy of the raster.

        Raises:
            MalformedRasterError: If the raster's buffer is not H x W x 4 uint8.
        """
        raster.validate()
        fn = _FILTERS[kind]
        if fn is None:
            return raster.derive(raster.pixels.copy(), {"operation": self.stage_name, "filter": kind.value})

        r, g, b = sample_channels(raster.pixels)
        channels = fn(r, g, b)

        out = np.empty_like(raster.pixels)
        for i, channel in enumerate(channels):
            # astype truncates toward zero, matching integer conversion of the clamped value
            out[..., i] = np.clip(channel, 0.0, 255.0).astype(np.uint8)
        out[..., 3] = raster.pixels[..., 3]

        LOGGER.debug("Applied %s filter to %sx%s raster", kind.value, raster.width, raster.height)
        return raster.derive(out, {"operation": self.stage_name, "filter": kind.value})
