"""Tests for TransformRequest and its enumerations."""

import dataclasses

import pytest

from rasterpipe.pipeline.request import FilterKind, FlipMode, OutputFormat, TransformRequest


class TestOutputFormat:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("jpeg", OutputFormat.JPEG),
            ("jpg", OutputFormat.JPEG),
            ("JPG", OutputFormat.JPEG),
            ("png", OutputFormat.PNG),
            (" PNG ", OutputFormat.PNG),
            ("webp", OutputFormat.JPEG),
            ("gif", OutputFormat.JPEG),
            ("", OutputFormat.JPEG),
            (None, OutputFormat.JPEG),
        ],
    )
    def test_parse(self, text, expected) -> None:  # noqa: PLR6301
        assert OutputFormat.parse(text) is expected

    def test_content_types(self) -> None:  # noqa: PLR6301
        assert OutputFormat.JPEG.content_type == "image/jpeg"
        assert OutputFormat.PNG.content_type == "image/png"
        assert OutputFormat.JPEG.extension == "jpg"
        assert OutputFormat.PNG.pil_format == "PNG"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("grayscale", FilterKind.GRAYSCALE),
        ("Sepia", FilterKind.SEPIA),
        ("invert", FilterKind.INVERT),
        ("cool", FilterKind.COOL),
        ("warm", FilterKind.WARM),
        ("none", FilterKind.NONE),
        ("blur", FilterKind.NONE),
        (None, FilterKind.NONE),
    ],
)
def test_filter_kind_parse(text, expected):
    assert FilterKind.parse(text) is expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("horizontal", FlipMode.HORIZONTAL),
        ("vertical", FlipMode.VERTICAL),
        ("both", FlipMode.BOTH),
        ("none", FlipMode.NONE),
        ("diagonal", FlipMode.NONE),
        ("", FlipMode.NONE),
    ],
)
def test_flip_mode_parse(text, expected):
    assert FlipMode.parse(text) is expected


class TestTransformRequest:
    def test_defaults(self) -> None:  # noqa: PLR6301
        request = TransformRequest()
        assert request.width == 0
        assert request.height == 0
        assert request.quality == 85
        assert request.format is OutputFormat.JPEG
        assert request.filter is FilterKind.NONE
        assert request.rotate == 0
        assert request.flip is FlipMode.NONE
        assert request.content_type == "image/jpeg"
        assert not request.wants_resize

    def test_is_frozen(self) -> None:  # noqa: PLR6301
        request = TransformRequest()
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.width = 10  # type: ignore[misc]

    @pytest.mark.parametrize("quality", [0, -5, 101, 1000])
    def test_out_of_range_quality_defaults(self, quality) -> None:  # noqa: PLR6301
        assert TransformRequest(quality=quality).quality == 85

    def test_from_form_full(self) -> None:  # noqa: PLR6301
        request = TransformRequest.from_form(
            {
                "width": "800",
                "height": "600",
                "quality": "70",
                "format": "png",
                "filter": "sepia",
                "rotate": "-90",
                "flip": "horizontal",
            }
        )
        assert request == TransformRequest(
            width=800,
            height=600,
            quality=70,
            format=OutputFormat.PNG,
            filter=FilterKind.SEPIA,
            rotate=-90.0,
            flip=FlipMode.HORIZONTAL,
        )
        assert request.wants_resize

    def test_from_form_empty(self) -> None:  # noqa: PLR6301
        assert TransformRequest.from_form({}) == TransformRequest()

    @pytest.mark.parametrize(
        ("form", "field", "expected"),
        [
            ({"width": "abc"}, "width", 0),
            ({"height": "12.5"}, "height", 0),
            ({"quality": "abc"}, "quality", 85),
            ({"quality": "0"}, "quality", 85),
            ({"quality": "150"}, "quality", 85),
            ({"rotate": "nope"}, "rotate", 0.0),
            ({"rotate": "nan"}, "rotate", 0.0),
            ({"rotate": "inf"}, "rotate", 0.0),
            ({"rotate": "12.5"}, "rotate", 12.5),
            ({"format": "bmp"}, "format", OutputFormat.JPEG),
            ({"filter": "brightness"}, "filter", FilterKind.NONE),
            ({"flip": "sideways"}, "flip", FlipMode.NONE),
        ],
    )
    def test_from_form_normalizes(self, form, field, expected) -> None:  # noqa: PLR6301
        assert getattr(TransformRequest.from_form(form), field) == expected

    def test_from_form_uses_configured_defaults(self, config_file) -> None:  # noqa: PLR6301
        config_file('[pipeline]\ndefault_quality = 60\ndefault_format = "png"\n')
        request = TransformRequest.from_form({})
        assert request.quality == 60
        assert request.format is OutputFormat.PNG
