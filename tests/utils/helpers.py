"""
Test utility helper functions for the rasterpipe test suite.
"""

import io
import pathlib

import numpy as np
from PIL import Image

from rasterpipe.pipeline.image_processing_interfaces import Raster


def make_gradient(width: int, height: int, alpha: int = 255) -> Raster:
    """
    Creates a raster whose pixels differ enough to track where each one moved.

    Args:
        width: Raster width.
        height: Raster height.
        alpha: Alpha value for every pixel. Defaults to opaque.
    """
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    ys, xs = np.mgrid[0:height, 0:width]
    pixels[..., 0] = (xs * 7) % 256
    pixels[..., 1] = (ys * 11) % 256
    pixels[..., 2] = (xs + ys * 3) % 256
    pixels[..., 3] = alpha
    return Raster(pixels=pixels)


def encode_raster(raster: Raster, fmt: str = "PNG") -> bytes:
    """
    Encodes a raster with Pillow directly, independent of the code under test.

    Args:
        raster: The raster to encode.
        fmt: Pillow format name, "PNG" or "JPEG".
    """
    img = Image.fromarray(raster.pixels)
    if fmt == "JPEG":
        img = img.convert("RGB")
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def decode_bytes(data: bytes) -> Image.Image:
    """Opens encoded bytes with Pillow and fully loads them."""
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


def create_dummy_png(
    path: pathlib.Path,
    size: tuple[int, int] = (10, 10),
    color: tuple[int, int, int] = (0, 0, 0),
) -> pathlib.Path:
    """
    Creates a dummy PNG image file at the specified path.

    Args:
        path: The path where the PNG file should be saved.
        size: A tuple representing the (width, height) of the image. Defaults to (10, 10).
        color: A tuple representing the RGB color (0-255). Defaults to black (0, 0, 0).
    """
    img_array = np.zeros((size[1], size[0], 3), dtype=np.uint8)
    img_array[:, :] = color
    img = Image.fromarray(img_array)
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path, format="PNG")
    return path
