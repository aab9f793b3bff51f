"""image_resizer.py.

Provides the ImageResizer stage. Resizing is nearest-neighbour, matching the
rotate stage's sampling: destination (x, y) takes the source pixel at
(floor(x * Wsrc / Wdst), floor(y * Hsrc / Hdst)), clamped to the source.
"""

from __future__ import annotations

import math

import numpy as np

from rasterpipe.utils import config
from rasterpipe.utils.log import get_logger

from .exceptions import InvalidDimensionError
from .image_processing_interfaces import ImageProcessor, Raster
from .request import TransformRequest

LOGGER = get_logger(__name__)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def resolve_dimensions(
    src_w: int, src_h: int, width: int, height: int, max_pixels: int | None = None
) -> tuple[int, int] | None:
    """Work out the output size for a resize request.

    A non-positive target dimension is derived from the other one using the
    source aspect ratio, rounding halves up.

    Args:
        src_w: Source width.
        src_h: Source height.
        width: Requested width, <= 0 for unspecified.
        height: Requested height, <= 0 for unspecified.
        max_pixels: Largest width * height allowed, None for no limit.

    Returns:
        The (width, height) to resize to, or None if both are unspecified.

    Raises:
        InvalidDimensionError: If the source is empty, a resolved dimension is
            not positive, or the result exceeds max_pixels.
    """
    if width <= 0 and height <= 0:
        return None
    if src_w <= 0 or src_h <= 0:
        raise InvalidDimensionError(
            f"Cannot resize an empty {src_w}x{src_h} raster", width=src_w, height=src_h, stage="resize"
        )

    if width <= 0:
        width = _round_half_up(src_w * height / src_h)
    elif height <= 0:
        height = _round_half_up(src_h * width / src_w)

    if width <= 0 or height <= 0:
        raise InvalidDimensionError(
            f"Resize of {src_w}x{src_h} resolves to an empty {width}x{height} canvas",
            width=width,
            height=height,
            stage="resize",
        )
    if max_pixels is not None and width * height > max_pixels:
        raise InvalidDimensionError(
            f"Resize to {width}x{height} exceeds {max_pixels} pixels",
            width=width,
            height=height,
            stage="resize",
        )
    return width, height


class ImageResizer(ImageProcessor):
    """Scales rasters to a target size with nearest-neighbour sampling."""

    stage_name = "resize"

    def __init__(self, max_pixels: int | None = None) -> None:
        """Initialize the resizer.

        Args:
            max_pixels: Largest output width * height (None reads it from config)
        """
        self.max_pixels = max_pixels if max_pixels is not None else config.get_max_pixels()

    def is_noop(self, request: TransformRequest) -> bool:
        return not request.wants_resize

    def process(self, raster: Raster, request: TransformRequest) -> Raster:
        return self.resize(raster, request.width, request.height)

    def resize(self, raster: Raster, width: int, height: int) -> Raster:
        """Resize the raster.

        Args:
            raster (Raster): Source raster.
            width (int): Target width, <= 0 to derive it from height.
            height (int): Target height, <= 0 to derive it from width.

        Returns:
            Raster: The resized raster, or `raster` itself when both targets are unspecified.

        Raises:
            InvalidDimensionError: If the target is empty or larger than max_pixels.
        """
        src_w, src_h = raster.width, raster.height
        resolved = resolve_dimensions(src_w, src_h, width, height, self.max_pixels)
        if resolved is None:
            return raster
        dst_w, dst_h = resolved

        x_ratio = src_w / dst_w
        y_ratio = src_h / dst_h
        xs = np.minimum(np.floor(np.arange(dst_w) * x_ratio).astype(np.intp), src_w - 1)
        ys = np.minimum(np.floor(np.arange(dst_h) * y_ratio).astype(np.intp), src_h - 1)

        # Fancy indexing always allocates a fresh buffer
        out = raster.pixels[ys[:, np.newaxis], xs[np.newaxis, :]]

        LOGGER.debug("Resized %sx%s -> %sx%s", src_w, src_h, dst_w, dst_h)
        return raster.derive(out, {"operation": self.stage_name, "size": (dst_w, dst_h)})
