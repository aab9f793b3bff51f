"""run_pipeline.py

The transform pipeline orchestrator. One invocation takes an encoded image
and a TransformRequest through a fixed sequence of stages:

    decode -> rotate -> flip -> filter -> resize -> encode

Decode and encode always run. The stages in between are skipped when the
request asks them to do nothing. The first failure aborts the whole run; no
partial output is ever returned.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from pathlib import PurePath

from rasterpipe.utils.log import get_logger

from .color_filter import ColorFilter
from .exceptions import PipelineError, ProcessingError
from .image_flipper import ImageFlipper
from .image_loader import ImageDecoder
from .image_processing_interfaces import ImageProcessor, Raster
from .image_resizer import ImageResizer
from .image_rotator import ImageRotator
from .image_saver import ImageEncoder
from .request import OutputFormat, TransformRequest

LOGGER = get_logger(__name__)

_UNSAFE_FILENAME = re.compile(r'\.\.|[/\\:*?"<>|]')


def sanitize_filename(filename: str) -> str:
    """Replace path separators and other unsafe characters with underscores."""
    return _UNSAFE_FILENAME.sub("_", filename)


@dataclass
class PipelineResult:
    """The encoded output of one successful pipeline run."""

    data: bytes
    format: OutputFormat
    width: int
    height: int
    steps: list[str] = field(default_factory=list)

    @property
    def content_type(self) -> str:
        return self.format.content_type

    def filename_for(self, original_name: str | None) -> str:
        """Download name for the result: processed_<stem>.<format extension>."""
        stem = PurePath(original_name or "image").stem or "image"
        return f"processed_{sanitize_filename(stem)}.{self.format.extension}"


class TransformPipeline:
    """Runs the decode -> transforms -> encode sequence for a single request.

    The stage objects hold no per-request state, so one pipeline can serve
    many concurrent requests.
    """

    def __init__(
        self,
        decoder: ImageDecoder | None = None,
        encoder: ImageEncoder | None = None,
        stages: list[ImageProcessor] | None = None,
    ) -> None:
        self.decoder = decoder or ImageDecoder()
        self.encoder = encoder or ImageEncoder()
        self.stages: list[ImageProcessor] = (
            stages if stages is not None else [ImageRotator(), ImageFlipper(), ColorFilter(), ImageResizer()]
        )

    def transform(self, raster: Raster, request: TransformRequest) -> tuple[Raster, list[str]]:
        """Run the optional stages over an already decoded raster.

        Returns:
            The final raster and the names of the stages that actually ran.
        """
        executed: list[str] = []
        for i, stage in enumerate(self.stages):
            if stage.is_noop(request):
                LOGGER.debug("Skipping stage %d/%d: %s", i + 1, len(self.stages), stage.stage_name)
                continue

            LOGGER.debug("Executing stage %d/%d: %s", i + 1, len(self.stages), stage.stage_name)
            try:
                raster = stage.process(raster, request)
            except PipelineError as e:
                LOGGER.error("Pipeline failed at stage %s: %s", stage.stage_name, e)
                raise
            except Exception as e:
                LOGGER.exception("Unhandled exception in pipeline stage %s", stage.stage_name)
                raise ProcessingError(str(e), stage=stage.stage_name) from e
            executed.append(stage.stage_name)
        return raster, executed

    def run(self, data: bytes, request: TransformRequest) -> PipelineResult:
        """Decode, transform and re-encode one image.

        Args:
            data: The complete encoded input image.
            request: The edits to apply.

        Returns:
            PipelineResult: Encoded bytes plus the resolved format and size.

        Raises:
            DecodeError: If the input is not a well-formed JPEG/PNG.
            InvalidDimensionError: If rotate or resize would produce an empty canvas.
            EncodeError: If the output cannot be encoded.
            ProcessingError: If a stage fails unexpectedly.
        """
        start = time.perf_counter()

        try:
            raster = self.decoder.decode(data)
        except PipelineError as e:
            LOGGER.error("Pipeline failed at stage decode: %s", e)
            raise

        raster, executed = self.transform(raster, request)

        try:
            encoded = self.encoder.encode(raster, request.format, request.quality)
        except PipelineError as e:
            LOGGER.error("Pipeline failed at stage encode: %s", e)
            raise

        LOGGER.info(
            "Processed image -> %s %sx%s [%s] in %.3fs",
            request.format.value,
            raster.width,
            raster.height,
            ", ".join(executed) or "no edits",
            time.perf_counter() - start,
        )
        return PipelineResult(
            data=encoded,
            format=request.format,
            width=raster.width,
            height=raster.height,
            steps=["decode", *executed, "encode"],
        )


def process_image(data: bytes, request: TransformRequest | None = None) -> PipelineResult:
    """Run the default pipeline over `data` (no edits if `request` is None)."""
    return TransformPipeline().run(data, request or TransformRequest())
