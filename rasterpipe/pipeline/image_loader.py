"""image_loader.py

Provides the ImageDecoder class, which turns an uploaded byte buffer into a
Raster using Pillow. Only JPEG and PNG containers are accepted; the container
is detected from its magic bytes rather than trusted from a file name.
"""

from __future__ import annotations

import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from rasterpipe.utils import config
from rasterpipe.utils.log import get_logger

from .exceptions import DecodeError
from .image_processing_interfaces import Raster

LOGGER = get_logger(__name__)

JPEG_MAGIC = b"\xff\xd8\xff"
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def sniff_format(data: bytes) -> str | None:
    """Return the Pillow format name for the buffer's header, if recognized."""
    if data.startswith(JPEG_MAGIC):
        return "JPEG"
    if data.startswith(PNG_MAGIC):
        return "PNG"
    return None


class ImageDecoder:
    """Decodes JPEG/PNG bytes into straight 8-bit RGBA rasters."""

    def __init__(self, max_pixels: int | None = None) -> None:
        """Initialize the decoder.

        Args:
            max_pixels: Largest width * height accepted (None reads it from config)
        """
        self.max_pixels = max_pixels if max_pixels is not None else config.get_max_pixels()

    def decode(self, data: bytes) -> Raster:
        """Decode an encoded image into a Raster.

        Args:
            data (bytes): The complete encoded image.

        Returns:
            Raster: Pixels in straight RGBA with source format metadata.

        Raises:
            DecodeError: If the bytes are empty, not JPEG/PNG, truncated,
                corrupt, or larger than the configured pixel limit.
        """
        if not data:
            raise DecodeError("Empty image buffer")

        fmt = sniff_format(data)
        if fmt is None:
            raise DecodeError("Unrecognized image format (expected JPEG or PNG)")

        try:
            with Image.open(io.BytesIO(data), formats=[fmt]) as img:
                width, height = img.size
                if width * height > self.max_pixels:
                    raise DecodeError(f"Image too large: {width}x{height} exceeds {self.max_pixels} pixels")

                source_mode = img.mode
                # Pillow decodes lazily; force it so truncation surfaces here
                img.load()
                rgba = img.convert("RGBA")
                pixels = np.array(rgba, dtype=np.uint8)
        except DecodeError:
            raise
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeError(f"Could not decode {fmt} image: {e}") from e

        LOGGER.info("Decoded %s image %sx%s (%s)", fmt, width, height, source_mode)

        return Raster(
            pixels=pixels,
            metadata={
                "format": fmt,
                "mode": source_mode,
                "width": width,
                "height": height,
            },
        )
