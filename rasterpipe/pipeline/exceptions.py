"""Custom exceptions for pipeline processing.

This module defines specific exception types for the failure modes of the
image transform pipeline. Every one of them is terminal for the request.
"""

from rasterpipe.exceptions import RasterPipeError


class PipelineError(RasterPipeError):
    """Base exception for all pipeline-related errors."""

    def __init__(self, message: str, stage: str | None = None) -> None:
        """Initialize a pipeline error with the stage it came from.

        Args:
            message: Error message
            stage: Name of the pipeline stage that failed, if known
        """
        self.message = message
        self.stage = stage
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.stage:
            return f"Pipeline stage '{self.stage}' failed: {self.message}"
        return self.message


class DecodeError(PipelineError):
    """Raised when the input bytes are not a recognized or well-formed image."""

    def __init__(self, message: str) -> None:
        super().__init__(message, stage="decode")


class EncodeError(PipelineError):
    """Raised when the encoder fails to produce output bytes."""

    def __init__(self, message: str) -> None:
        super().__init__(message, stage="encode")


class InvalidDimensionError(PipelineError):
    """Raised when a stage would require a non-positive target canvas."""

    def __init__(self, message: str, width: int, height: int, stage: str | None = None) -> None:
        """Initialize dimension error with the offending canvas size.

        Args:
            message: Error message
            width: Requested or computed canvas width
            height: Requested or computed canvas height
            stage: Stage that computed the canvas
        """
        self.width = width
        self.height = height
        super().__init__(message, stage=stage)


class MalformedRasterError(PipelineError):
    """Raised when a raster's pixel buffer does not match its dimensions."""


class ProcessingError(PipelineError):
    """Raised when a stage fails for a reason other than the errors above."""
