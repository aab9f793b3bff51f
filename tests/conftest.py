"""
Configuration file for pytest.

This file defines shared fixtures for the test suite. Fixtures defined here
are automatically available to all tests.
"""

import os
import pathlib
import tempfile

import pytest

# Keep a developer's ~/.config/rasterpipe/config.toml out of the test run.
os.environ["RASTERPIPE_CONFIG_FILE"] = str(pathlib.Path(tempfile.mkdtemp(prefix="rasterpipe_cfg_")) / "config.toml")

from rasterpipe.pipeline.image_processing_interfaces import Raster  # noqa: E402
from rasterpipe.utils import config  # noqa: E402
from tests.utils.helpers import encode_raster, make_gradient  # noqa: E402


@pytest.fixture(scope="function")
def temp_dir():
    """
    Pytest fixture to create a temporary directory for a test function.

    Yields:
        pathlib.Path: The path to the created temporary directory.

    The directory and its contents are automatically removed after the test finishes.
    """
    with tempfile.TemporaryDirectory(prefix="rasterpipe_test_") as tmpdir:
        yield pathlib.Path(tmpdir)


@pytest.fixture()
def config_file(temp_dir, monkeypatch):
    """Point the config loader at a fresh TOML file and clear its cache.

    Yields:
        Callable[[str], pathlib.Path]: Writes the given TOML text and returns its path.
    """
    path = temp_dir / "config.toml"
    monkeypatch.setenv("RASTERPIPE_CONFIG_FILE", str(path))
    config.reload_config()

    def write(text: str) -> pathlib.Path:
        path.write_text(text, encoding="utf-8")
        config.reload_config()
        return path

    yield write
    config.reload_config()


@pytest.fixture()
def gradient() -> Raster:
    """A 6x4 opaque gradient raster."""
    return make_gradient(6, 4)


@pytest.fixture()
def png_bytes() -> bytes:
    """A 100x50 opaque gradient encoded as PNG."""
    return encode_raster(make_gradient(100, 50), "PNG")


@pytest.fixture()
def jpeg_bytes() -> bytes:
    """A 40x30 opaque gradient encoded as JPEG."""
    return encode_raster(make_gradient(40, 30), "JPEG")
