"""request.py

Defines the parameter set for one pipeline invocation and the closed
enumerations it is built from. Raw form values are normalized here so the
stages downstream only ever see valid, typed parameters.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from rasterpipe.utils import config

DEFAULT_QUALITY = 85


class OutputFormat(Enum):
    """Container formats the encoder can produce."""

    JPEG = "jpeg"
    PNG = "png"

    @classmethod
    def parse(cls, value: str | None) -> "OutputFormat":
        """Resolve a format string; anything unrecognized falls back to JPEG."""
        normalized = (value or "").strip().lower()
        if normalized == "jpg":
            return cls.JPEG
        for member in cls:
            if member.value == normalized:
                return member
        return cls.JPEG

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]

    @property
    def pil_format(self) -> str:
        return self.name

    @property
    def extension(self) -> str:
        return "jpg" if self is OutputFormat.JPEG else "png"


_CONTENT_TYPES = {
    OutputFormat.JPEG: "image/jpeg",
    OutputFormat.PNG: "image/png",
}


class FilterKind(Enum):
    """Per-pixel color filters."""

    NONE = "none"
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    INVERT = "invert"
    COOL = "cool"
    WARM = "warm"

    @classmethod
    def parse(cls, value: str | None) -> "FilterKind":
        """Resolve a filter selector; unknown selectors mean no filter."""
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.NONE


class FlipMode(Enum):
    """Mirror axes for the flip stage."""

    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"

    @classmethod
    def parse(cls, value: str | None) -> "FlipMode":
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.NONE


def _parse_int(value: object, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def _parse_float(value: object, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(str(value).strip())
    except ValueError:
        return default
    # nan/inf would poison the bounding-box math
    if not math.isfinite(result):
        return default
    return result


def normalize_quality(quality: int | None) -> int:
    """Return quality if it is within 1-100, otherwise the configured default."""
    if quality is None or not 1 <= quality <= 100:
        return config.get_default_quality()
    return quality


@dataclass(frozen=True)
class TransformRequest:
    """The full set of edits requested for one image.

    Attributes:
        width: Target width in pixels; <= 0 means unspecified.
        height: Target height in pixels; <= 0 means unspecified.
        quality: JPEG quality, 1-100.
        format: Output container format.
        filter: Color filter to apply.
        rotate: Rotation angle in degrees; 0 is a no-op.
        flip: Mirror mode.
    """

    width: int = 0
    height: int = 0
    quality: int = DEFAULT_QUALITY
    format: OutputFormat = OutputFormat.JPEG
    filter: FilterKind = FilterKind.NONE
    rotate: float = 0.0
    flip: FlipMode = FlipMode.NONE

    def __post_init__(self) -> None:
        if not 1 <= self.quality <= 100:
            object.__setattr__(self, "quality", normalize_quality(self.quality))

    @property
    def content_type(self) -> str:
        return self.format.content_type

    @property
    def wants_resize(self) -> bool:
        return self.width > 0 or self.height > 0

    @classmethod
    def from_form(cls, form: Mapping[str, object]) -> "TransformRequest":
        """Build a request from raw form values.

        Every field is optional. Unparsable numbers count as unspecified,
        quality outside 1-100 takes the configured default, and unknown
        enumeration values fall back to their defaults.

        Args:
            form: Mapping of field name to raw (usually string) value.

        Returns:
            TransformRequest: The normalized request.
        """
        raw_format = form.get("format")
        fmt_text = str(raw_format) if raw_format not in (None, "") else config.get_default_format()
        quality = _parse_int(form.get("quality"))

        return cls(
            width=_parse_int(form.get("width")),
            height=_parse_int(form.get("height")),
            quality=normalize_quality(quality),
            format=OutputFormat.parse(fmt_text),
            filter=FilterKind.parse(_as_text(form.get("filter"))),
            rotate=_parse_float(form.get("rotate")),
            flip=FlipMode.parse(_as_text(form.get("flip"))),
        )


def _as_text(value: object) -> str | None:
    return None if value is None else str(value)
