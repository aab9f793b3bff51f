"""rasterpipe: decode an uploaded image, apply rotate/flip/filter/resize edits, re-encode."""

__version__ = "0.1.0"
