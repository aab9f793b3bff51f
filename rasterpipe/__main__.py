"""Command-line entry point: run the transform pipeline on an image file."""

from __future__ import annotations

import argparse
import pathlib
import sys

from rasterpipe.pipeline import FilterKind, FlipMode, PipelineError, TransformPipeline, TransformRequest
from rasterpipe.utils import log

LOGGER = log.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rasterpipe",
        description="Rotate, flip, filter and resize a JPEG/PNG image, then re-encode it.",
    )
    parser.add_argument("input", type=pathlib.Path, help="Image file to process.")
    parser.add_argument("-o", "--output", type=pathlib.Path, required=True, help="Where to write the result.")
    parser.add_argument("--width", default="0", help="Target width; 0 keeps or derives it.")
    parser.add_argument("--height", default="0", help="Target height; 0 keeps or derives it.")
    parser.add_argument("--quality", default=None, help="JPEG quality 1-100 (default from config, 85).")
    parser.add_argument(
        "--format",
        default=None,
        help="Output format: jpeg or png. Defaults to the output file's extension.",
    )
    parser.add_argument("--filter", choices=[k.value for k in FilterKind], default="none")
    parser.add_argument("--rotate", default="0", help="Rotation angle in degrees.")
    parser.add_argument("--flip", choices=[m.value for m in FlipMode], default="none")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    log.set_level(args.debug)

    fmt = args.format or args.output.suffix.lstrip(".") or None
    request = TransformRequest.from_form(
        {
            "width": args.width,
            "height": args.height,
            "quality": args.quality,
            "format": fmt,
            "filter": args.filter,
            "rotate": args.rotate,
            "flip": args.flip,
        }
    )

    try:
        data = args.input.read_bytes()
    except OSError as e:
        LOGGER.error("Cannot read %s: %s", args.input, e)
        return 1

    try:
        result = TransformPipeline().run(data, request)
    except PipelineError as e:
        LOGGER.error("%s", e)
        return 1

    args.output.write_bytes(result.data)
    LOGGER.info("Wrote %s (%sx%s, %s)", args.output, result.width, result.height, result.content_type)
    return 0


if __name__ == "__main__":
    sys.exit(main())
