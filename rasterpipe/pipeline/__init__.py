"""Image transform pipeline.

This package contains the decoder, the geometric and colour stages, the
encoder, and the orchestrator that runs them in order.
"""

from .color_filter import FILTER_CATALOG, ColorFilter
from .exceptions import (
    DecodeError,
    EncodeError,
    InvalidDimensionError,
    MalformedRasterError,
    PipelineError,
    ProcessingError,
)
from .image_flipper import ImageFlipper
from .image_loader import ImageDecoder
from .image_processing_interfaces import ImageProcessor, Raster
from .image_resizer import ImageResizer
from .image_rotator import ImageRotator
from .image_saver import ImageEncoder
from .request import FilterKind, FlipMode, OutputFormat, TransformRequest
from .run_pipeline import PipelineResult, TransformPipeline, process_image

__all__ = [
    "FILTER_CATALOG",
    "ColorFilter",
    "DecodeError",
    "EncodeError",
    "FilterKind",
    "FlipMode",
    "ImageDecoder",
    "ImageEncoder",
    "ImageFlipper",
    "ImageProcessor",
    "ImageResizer",
    "ImageRotator",
    "InvalidDimensionError",
    "MalformedRasterError",
    "OutputFormat",
    "PipelineError",
    "PipelineResult",
    "ProcessingError",
    "Raster",
    "TransformPipeline",
    "TransformRequest",
    "process_image",
]
