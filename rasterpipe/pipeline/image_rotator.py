"""image_rotator.py.

Provides the ImageRotator stage, which rotates a raster by an arbitrary angle
onto a canvas large enough to hold the whole rotated image.

Each integer destination coordinate is mapped back through the inverse
rotation (about the centre of both canvases) into the source, and the mapped
coordinate is truncated to pick the source pixel. Sampling is
nearest-neighbour; destinations whose source falls outside the original stay
transparent black. Rotated edges are therefore aliased.
"""

from __future__ import annotations

import math

import numpy as np

from rasterpipe.utils.log import get_logger

from .exceptions import InvalidDimensionError
from .image_processing_interfaces import CHANNELS, ImageProcessor, Raster
from .request import TransformRequest

LOGGER = get_logger(__name__)

# Trig noise (cos(pi/2) ~ 6e-17) must not push the bounding box up a pixel.
_EXTENT_DECIMALS = 9


def rotated_canvas_size(width: int, height: int, angle: float) -> tuple[int, int]:
    """Return the (width, height) bounding box of a rotated width x height image."""
    rad = math.radians(angle)
    sin, cos = math.sin(rad), math.cos(rad)
    new_w = math.ceil(round(abs(width * cos) + abs(height * sin), _EXTENT_DECIMALS))
    new_h = math.ceil(round(abs(width * sin) + abs(height * cos), _EXTENT_DECIMALS))
    return new_w, new_h


class ImageRotator(ImageProcessor):
    """Rotates rasters clockwise (as displayed, y pointing down) by an angle in degrees."""

    stage_name = "rotate"

    def is_noop(self, request: TransformRequest) -> bool:
        return request.rotate == 0

    def process(self, raster: Raster, request: TransformRequest) -> Raster:
        return self.rotate(raster, request.rotate)

    def rotate(self, raster: Raster, angle: float) -> Raster:
        """Rotate the raster by `angle` degrees.

        Args:
            raster (Raster): Source raster.
            angle (float): Rotation in degrees; 0 returns `raster` itself.

        Returns:
            Raster: A new raster sized to the rotated bounding box.

        Raises:
            InvalidDimensionError: If the computed canvas is empty.
        """
        if angle == 0:
            return raster

        w, h = raster.width, raster.height
        new_w, new_h = rotated_canvas_size(w, h, angle)
        if new_w <= 0 or new_h <= 0:
            raise InvalidDimensionError(
                f"Rotation by {angle} degrees yields a {new_w}x{new_h} canvas",
                width=new_w,
                height=new_h,
                stage=self.stage_name,
            )

        rad = math.radians(angle)
        sin, cos = math.sin(rad), math.cos(rad)
        cx, cy = w / 2, h / 2
        new_cx, new_cy = new_w / 2, new_h / 2

        # Offsets of destination coordinates from the destination centre
        dx = np.arange(new_w, dtype=np.float64) - new_cx
        dy = np.arange(new_h, dtype=np.float64) - new_cy
        gx, gy = np.meshgrid(dx, dy)

        src_x = gx * cos + gy * sin + cx
        src_y = -gx * sin + gy * cos + cy

        inside = (src_x >= 0) & (src_x < w) & (src_y >= 0) & (src_y < h)

        out = np.zeros((new_h, new_w, CHANNELS), dtype=np.uint8)
        sx = src_x[inside].astype(np.intp)
        sy = src_y[inside].astype(np.intp)
        out[inside] = raster.pixels[sy, sx]

        LOGGER.debug("Rotated %sx%s by %s deg -> %sx%s", w, h, angle, new_w, new_h)
        return raster.derive(out, {"operation": self.stage_name, "angle": angle})
