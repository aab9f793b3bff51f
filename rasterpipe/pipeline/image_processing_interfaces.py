"""image_processing_interfaces.py.

Defines the raster container and the abstract stage interface for the
rasterpipe transform pipeline. Every stage consumes a Raster and hands back a
Raster that owns its own pixel buffer, so no two stages ever share mutable
pixel state.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from .exceptions import MalformedRasterError
from .request import TransformRequest

CHANNELS = 4

PixelArray = NDArray[np.uint8]


@dataclass
class Raster:
    """A width x height grid of straight (non-premultiplied) RGBA8 pixels.

    Attributes:
        pixels (PixelArray): Array of shape (height, width, 4), dtype uint8.
        metadata (Dict[str, Any]): Source format, applied steps and similar
            bookkeeping carried alongside the pixels.
    """

    pixels: PixelArray
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check that the buffer really is H x W x 4 bytes.

        Raises:
            MalformedRasterError: If dimensions, channel count or dtype are wrong.
        """
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray):
            raise MalformedRasterError(f"Raster pixels must be a numpy array, got {type(pixels).__name__}")
        if pixels.dtype != np.uint8:
            raise MalformedRasterError(f"Raster pixels must be uint8, got {pixels.dtype}")
        if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
            raise MalformedRasterError(f"Raster pixels must have shape (H, W, {CHANNELS}), got {pixels.shape}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """(width, height), in the order Pillow uses."""
        return self.width, self.height

    def contains(self, x: int, y: int) -> bool:
        """Return True if (x, y) addresses a pixel inside the raster."""
        return 0 <= x < self.width and 0 <= y < self.height

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the RGBA value at (x, y).

        Raises:
            IndexError: If the coordinate is outside the raster.
        """
        if not self.contains(x, y):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} raster")
        r, g, b, a = (int(v) for v in self.pixels[y, x])
        return r, g, b, a

    def derive(self, pixels: PixelArray, step: dict[str, Any]) -> "Raster":
        """Create the next stage's raster from a freshly built buffer.

        The metadata is copied and the step appended to its history, so the
        input raster is left untouched.
        """
        new_metadata: dict[str, Any] = self.metadata.copy()
        new_metadata["processing_steps"] = [*self.metadata.get("processing_steps", []), step]
        new_metadata["width"] = int(pixels.shape[1])
        new_metadata["height"] = int(pixels.shape[0])
        return Raster(pixels=pixels, metadata=new_metadata)

    @classmethod
    def blank(cls, width: int, height: int) -> "Raster":
        """A fully transparent black raster."""
        return cls(pixels=np.zeros((height, width, CHANNELS), dtype=np.uint8))

    @classmethod
    def filled(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> "Raster":
        """A raster where every pixel has the given RGBA value."""
        pixels = np.empty((height, width, CHANNELS), dtype=np.uint8)
        pixels[:, :] = rgba
        return cls(pixels=pixels)


class ImageProcessor(abc.ABC):
    """Abstract base class for the raster -> raster pipeline stages.

    Concrete stages implement `process`, which must never modify the input
    raster's pixel buffer, and `is_noop`, which lets the orchestrator skip a
    stage whose parameters request nothing.
    """

    stage_name: str = "stage"

    @abc.abstractmethod
    def is_noop(self, request: TransformRequest) -> bool:
        """Return True if the request asks this stage to do nothing."""

    @abc.abstractmethod
    def process(self, raster: Raster, request: TransformRequest) -> Raster:
        """Apply this stage's transform according to the request.

        Args:
            raster: The Raster produced by the previous stage.
            request: The parameters of the current invocation.

        Returns:
            A Raster with its own pixel buffer and updated metadata.
        """
