# This file makes the 'utils' directory within 'tests' a Python package.

from .helpers import decode_bytes, encode_raster, make_gradient

__all__ = [
    "decode_bytes",
    "encode_raster",
    "make_gradient",
]
