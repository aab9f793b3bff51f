"""Tests for the Raster container."""

import numpy as np
import pytest

from rasterpipe.pipeline.exceptions import MalformedRasterError
from rasterpipe.pipeline.image_processing_interfaces import Raster


class TestRaster:
    def test_dimensions(self, gradient: Raster) -> None:  # noqa: PLR6301
        assert gradient.width == 6
        assert gradient.height == 4
        assert gradient.size == (6, 4)
        assert gradient.pixels.size == 6 * 4 * 4

    @pytest.mark.parametrize(
        "pixels",
        [
            np.zeros((4, 6, 3), dtype=np.uint8),
            np.zeros((4, 6), dtype=np.uint8),
            np.zeros((4, 6, 4), dtype=np.float32),
            np.zeros((4, 6, 4), dtype=np.uint16),
            [[0, 0, 0, 0]],
        ],
    )
    def test_malformed_buffers_rejected(self, pixels) -> None:  # noqa: PLR6301
        with pytest.raises(MalformedRasterError):
            Raster(pixels=pixels)

    def test_pixel_access_is_bounds_checked(self, gradient: Raster) -> None:  # noqa: PLR6301
        assert gradient.pixel(2, 1) == (14, 11, 5, 255)
        assert gradient.contains(5, 3)
        assert not gradient.contains(6, 0)
        assert not gradient.contains(0, -1)
        with pytest.raises(IndexError):
            gradient.pixel(6, 0)

    def test_blank_is_transparent_black(self) -> None:  # noqa: PLR6301
        raster = Raster.blank(3, 2)
        assert raster.size == (3, 2)
        assert not raster.pixels.any()

    def test_filled(self) -> None:  # noqa: PLR6301
        raster = Raster.filled(2, 2, (1, 2, 3, 4))
        assert raster.pixel(1, 1) == (1, 2, 3, 4)

    def test_derive_copies_metadata(self, gradient: Raster) -> None:  # noqa: PLR6301
        gradient.metadata["format"] = "PNG"
        derived = gradient.derive(np.zeros((2, 3, 4), dtype=np.uint8), {"operation": "test"})

        assert derived.size == (3, 2)
        assert derived.metadata["format"] == "PNG"
        assert derived.metadata["processing_steps"] == [{"operation": "test"}]
        assert derived.metadata["width"] == 3
        assert "processing_steps" not in gradient.metadata
