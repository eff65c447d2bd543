"""HugFusion — FastAPI Application.

This module is the single entry point for the web application. It defines
the FastAPI ``app`` instance, the REST API routes, mounts the Gradio UI at
``/``, and provides the ``main()`` CLI function that launches the uvicorn
server.

Architecture
------------
- **Configuration** comes from :data:`~hugfusion.core.config.config`
  (``HUGFUSION_*`` environment variables / ``.env``).
- **The browser UI** is the Gradio app from :func:`hugfusion.ui.app.create_ui`,
  with one :class:`~hugfusion.core.session.SessionController` per visitor.
- **The JSON API** runs the same upload → validate → encode → generate
  pipeline statelessly, one request per generation.
- Nothing is persisted.

Endpoints
---------
========  ==================  ==========================================
Method    Path                Purpose
========  ==================  ==========================================
GET       ``/health``         Liveness probe
GET       ``/api/config``     Styles and upload policy
POST      ``/api/generate``   Generate a hug image from two uploads
GET       ``/``               Gradio UI
========  ==================  ==========================================

Usage
-----
CLI (installed entry point)::

    hugfusion

Direct invocation::

    python -m hugfusion.api.main
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import gradio as gr
from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile

from hugfusion import __version__
from hugfusion.api.models import ConfigResponse, GenerateResponse, StyleInfo
from hugfusion.core.config import config
from hugfusion.core.errors import (
    GENERIC_GENERATION_MESSAGE,
    ErrorKind,
    GenerationError,
    MissingCredentialError,
)
from hugfusion.core.generation_client import GenerationClient
from hugfusion.core.images import (
    ALLOWED_MEDIA_TYPES,
    EncodedImage,
    UploadedFile,
    rejection_message,
    validate_file,
)
from hugfusion.core.session import SLOT_LABELS, Slot
from hugfusion.core.styles import STYLE_LABELS, StyleSelection
from hugfusion.core.upload_slot import UploadSlot
from hugfusion.ui.app import create_ui

logger = logging.getLogger(__name__)

# HTTP status for each upload rejection kind
REJECTION_STATUS = {
    ErrorKind.UNSUPPORTED_MEDIA_TYPE: 415,
    ErrorKind.SIZE_EXCEEDS_LIMIT: 413,
    ErrorKind.READ_ERROR: 400,
}


# ---------------------------------------------------------------------------
# Application lifecycle.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared generation client on startup.

    The client holds no connection; it reads the API key on every request,
    so a missing key is reported per generation instead of at startup.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    app.state.generation_client = GenerationClient(config)
    if not config.has_api_key():
        logger.warning("No API key configured; generations will fail until one is set.")
    logger.info(f"HugFusion {__version__} ready (model: {config.model_id}).")

    yield


app = FastAPI(
    title="HugFusion",
    description="Merge two smiles into one hug with Gemini image generation.",
    version=__version__,
    lifespan=lifespan,
)


def get_generation_client(request: Request) -> GenerationClient:
    """Return the application's generation client, creating it if needed."""
    client = getattr(request.app.state, "generation_client", None)
    if client is None:
        client = GenerationClient(config)
        request.app.state.generation_client = client
    return client


async def _encode_upload(upload: UploadFile, label: str) -> EncodedImage:
    """Validate and encode one uploaded file through an upload slot.

    The declared type and spooled size are checked before the body is read;
    the slot then checks the bytes actually read.

    Raises:
        HTTPException: 415/413/400 when the file is rejected.
    """
    media_type = upload.content_type or ""
    size = upload.size
    if size is None:
        upload.file.seek(0, os.SEEK_END)
        size = upload.file.tell()
        upload.file.seek(0)
    reason = validate_file(media_type, size, config.max_file_size)
    if reason is not None:
        logger.warning(f"{label}: rejected {upload.filename!r} before reading: {reason.value}")
        raise HTTPException(
            status_code=REJECTION_STATUS[reason],
            detail=f"{label}: {rejection_message(reason, config.max_file_size)}",
        )

    content = await upload.read()
    candidate = UploadedFile.from_bytes(
        name=upload.filename or label,
        media_type=media_type,
        content=content,
    )
    slot = UploadSlot(label, max_file_size=config.max_file_size)
    image = await slot.submit(candidate)
    if image is None:
        raise HTTPException(
            status_code=REJECTION_STATUS[slot.last_error],
            detail=f"{label}: {slot.error_message}",
        )
    return image


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/health")
async def health() -> dict:
    """Liveness probe."""
    return {"status": "ok"}


@app.get("/api/config", response_model=ConfigResponse)
async def get_config() -> ConfigResponse:
    """Return the styles and upload policy for API clients.

    Returns:
        :class:`ConfigResponse` with version, model, styles (default first),
        allowed media types, and the maximum upload size.
    """
    return ConfigResponse(
        version=__version__,
        model=config.model_id,
        styles=[StyleInfo(id=style.value, label=STYLE_LABELS[style]) for style in StyleSelection],
        default_style=StyleSelection.default().value,
        allowed_media_types=sorted(ALLOWED_MEDIA_TYPES),
        max_file_size=config.max_file_size,
    )


@app.post("/api/generate", response_model=GenerateResponse)
async def generate(
    person1: UploadFile = File(..., description="Photo of the first person."),
    person2: UploadFile = File(..., description="Photo of the second person."),
    style: str = Form(StyleSelection.default().value),
    client: GenerationClient = Depends(get_generation_client),
) -> GenerateResponse:
    """Generate a hug image from two uploaded photos.

    This endpoint:

    1. Resolves the style.
    2. Validates and encodes both uploads.
    3. Sends exactly one generation request.

    Args:
        person1: First photo (JPEG or PNG).
        person2: Second photo (JPEG or PNG).
        style: Style id or label; defaults to the first style.
        client: Generation client (injected).

    Returns:
        :class:`GenerateResponse` with the image as a data URI.

    Raises:
        HTTPException: 400 for an unknown style or unreadable upload, 413/415
            for rejected uploads, 500 when no API key is configured, 502 when
            generation fails.
    """
    try:
        selected = StyleSelection.parse(style)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    image_a = await _encode_upload(person1, SLOT_LABELS[Slot.A])
    image_b = await _encode_upload(person2, SLOT_LABELS[Slot.B])

    try:
        result = await client.generate(image_a, image_b, selected)
    except MissingCredentialError as e:
        logger.error(f"Generation failed [{e.kind.value}]: {e.message}")
        raise HTTPException(status_code=500, detail=GENERIC_GENERATION_MESSAGE) from e
    except GenerationError as e:
        logger.error(f"Generation failed [{e.kind.value}]: {e.message}")
        raise HTTPException(status_code=502, detail=GENERIC_GENERATION_MESSAGE) from e

    return GenerateResponse(
        image=result.to_data_uri(),
        media_type=result.media_type,
        style=selected.value,
    )


# Mount the Gradio UI last so the API routes above take precedence.
app = gr.mount_gradio_app(app, create_ui(), path="/")


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :data:`~hugfusion.core.config.config`
    (``HUGFUSION_SERVER_HOST``, ``HUGFUSION_SERVER_PORT``,
    ``HUGFUSION_LOG_LEVEL``). Defaults to ``0.0.0.0:7860``.

    This function is registered as the ``hugfusion`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting HugFusion...")
    logger.info(f"Configuration: {config.model_dump(exclude={'api_key'})}")

    uvicorn.run(
        "hugfusion.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
