"""image_flipper.py.

Provides the ImageFlipper stage, which mirrors a raster horizontally,
vertically, or both. Pixels map one to one, so there is no sampling.
"""

from __future__ import annotations

import numpy as np

from .image_processing_interfaces import ImageProcessor, Raster
from .request import FlipMode, TransformRequest

# Array axes to reverse for each mode; rows are y (axis 0), columns are x (axis 1)
_FLIP_AXES: dict[FlipMode, tuple[int, ...]] = {
    FlipMode.NONE: (),
    FlipMode.HORIZONTAL: (1,),
    FlipMode.VERTICAL: (0,),
    FlipMode.BOTH: (0, 1),
}


class ImageFlipper(ImageProcessor):
    """Mirrors rasters about their vertical and/or horizontal centre line."""

    stage_name = "flip"

    def is_noop(self, request: TransformRequest) -> bool:
        return request.flip is FlipMode.NONE

    def process(self, raster: Raster, request: TransformRequest) -> Raster:
        return self.flip(raster, request.flip)

    def flip(self, raster: Raster, mode: FlipMode) -> Raster:
        """Return a mirrored copy of the raster.

        Args:
            raster (Raster): Source raster.
            mode (FlipMode): HORIZONTAL maps (x, y) from (W-1-x, y), VERTICAL
                from (x, H-1-y), BOTH from (W-1-x, H-1-y); NONE copies.

        Returns:
            Raster: A new raster with identical dimensions.
        """
        axes = _FLIP_AXES[mode]
        flipped = np.flip(raster.pixels, axis=axes) if axes else raster.pixels
        # np.flip returns a view; the next stage must own its buffer
        return raster.derive(flipped.copy(), {"operation": self.stage_name, "mode": mode.value})
