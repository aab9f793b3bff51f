"""image_saver.py.

Provides the ImageEncoder class, which serializes a Raster into JPEG or PNG
bytes using Pillow.
"""

from __future__ import annotations

import io

from PIL import Image

from rasterpipe.utils import config
from rasterpipe.utils.log import get_logger

from .exceptions import EncodeError
from .image_processing_interfaces import Raster
from .request import OutputFormat

LOGGER = get_logger(__name__)


def flatten_onto_black(img: Image.Image) -> Image.Image:
    """Drop alpha by compositing an RGBA image over opaque black."""
    background = Image.new("RGBA", img.size, (0, 0, 0, 255))
    return Image.alpha_composite(background, img).convert("RGB")


class ImageEncoder:
    """Encodes rasters to JPEG (lossy, quality controlled) or PNG (lossless)."""

    def __init__(self, png_compress_level: int | None = None, jpeg_optimize: bool | None = None) -> None:
        self.png_compress_level = (
            png_compress_level if png_compress_level is not None else config.get_png_compress_level()
        )
        self.jpeg_optimize = jpeg_optimize if jpeg_optimize is not None else config.get_jpeg_optimize()

    def encode(self, raster: Raster, fmt: OutputFormat, quality: int = 85) -> bytes:
        """Encode the raster in the given container format.

        Args:
            raster (Raster): The pixels to encode.
            fmt (OutputFormat): JPEG or PNG.
            quality (int): JPEG quality; clamped to 1-100, ignored for PNG.

        Returns:
            bytes: The encoded image.

        Raises:
            EncodeError: If the raster is empty or Pillow fails to write it.
        """
        if raster.width <= 0 or raster.height <= 0:
            raise EncodeError(f"Cannot encode an empty {raster.width}x{raster.height} raster")

        buffer = io.BytesIO()
        try:
            img = Image.fromarray(raster.pixels)
            if fmt is OutputFormat.PNG:
                img.save(buffer, format=fmt.pil_format, compress_level=self.png_compress_level)
            else:
                quality = min(100, max(1, quality))
                # JPEG has no alpha channel
                flatten_onto_black(img).save(
                    buffer, format=fmt.pil_format, quality=quality, optimize=self.jpeg_optimize
                )
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise EncodeError(f"Could not encode {fmt.value} image: {e}") from e

        data = buffer.getvalue()
        LOGGER.info(
            "Encoded %sx%s raster as %s (%s bytes)",
            raster.width,
            raster.height,
            fmt.value,
            len(data),
        )
        return data
