"""HTTP front end for the transform pipeline.

A thin FastAPI layer: it parses the multipart upload into bytes and a
TransformRequest, runs the pipeline, and translates pipeline errors into JSON
error responses. All image work happens in rasterpipe.pipeline.

Run with: uvicorn rasterpipe.server:app
"""

from __future__ import annotations

from fastapi import FastAPI, File, Form, UploadFile
from fastapi.responses import JSONResponse, Response

from rasterpipe.pipeline import (
    FILTER_CATALOG,
    DecodeError,
    InvalidDimensionError,
    PipelineError,
    TransformPipeline,
    TransformRequest,
)
from rasterpipe.utils import config
from rasterpipe.utils.log import get_logger

LOGGER = get_logger(__name__)

app = FastAPI(title="rasterpipe")
pipeline = TransformPipeline()


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.get("/api/filters")
def list_filters() -> dict:
    """Filters the client can offer, in display order."""
    return {"success": True, "filters": FILTER_CATALOG}


@app.post("/api/process")
def process_upload(
    image: UploadFile | None = File(None),
    width: str | None = Form(None),
    height: str | None = Form(None),
    quality: str | None = Form(None),
    format: str | None = Form(None),  # noqa: A002 - form field name
    filter: str | None = Form(None),  # noqa: A002 - form field name
    rotate: str | None = Form(None),
    flip: str | None = Form(None),
) -> Response:
    if image is None:
        return error_response("Image file not found", 400)

    limit = config.get_max_upload_bytes()
    data = image.file.read(limit + 1)
    if len(data) > limit:
        return error_response(f"File too large (max {limit // (1024 * 1024)}MB)", 413)

    request = TransformRequest.from_form(
        {
            "width": width,
            "height": height,
            "quality": quality,
            "format": format,
            "filter": filter,
            "rotate": rotate,
            "flip": flip,
        }
    )

    try:
        result = pipeline.run(data, request)
    except DecodeError as e:
        return error_response(f"Invalid image format: {e.message}", 400)
    except InvalidDimensionError as e:
        return error_response(str(e), 400)
    except PipelineError as e:
        return error_response(f"Processing error: {e}", 500)

    LOGGER.info("[PROCESS] %s -> %s (%s)", image.filename, request.format.value, request.filter.value)
    return Response(
        content=result.data,
        media_type=result.content_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename_for(image.filename)}"'},
    )
