"""Pydantic response models for the HugFusion API.

These models define the JSON schema of the API responses. FastAPI uses them
for serialisation and OpenAPI documentation generation.

Models
------
StyleInfo
    One entry of the style list in ``GET /api/config``.
ConfigResponse
    Payload of ``GET /api/config``: styles and upload policy.
GenerateResponse
    Payload of ``POST /api/generate``: the generated image as a data URI.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class StyleInfo(BaseModel):
    """A selectable hug style.

    Attributes:
        id: Style identifier sent back in ``POST /api/generate``.
        label: Display label.
    """

    id: str = Field(..., description="Style identifier (e.g. 'realistic').")
    label: str = Field(..., description="Display label (e.g. 'Realistic Hug').")


class ConfigResponse(BaseModel):
    """Response body for ``GET /api/config``."""

    version: str = Field(..., description="API version string.")
    model: str = Field(..., description="Gemini model used for generation.")
    styles: list[StyleInfo] = Field(..., description="Available styles, default first.")
    default_style: str = Field(..., description="Style used when none is given.")
    allowed_media_types: list[str] = Field(..., description="Accepted upload media types.")
    max_file_size: int = Field(..., description="Largest accepted upload in bytes.")


class GenerateResponse(BaseModel):
    """Response body for ``POST /api/generate``.

    Attributes:
        image: Generated image as a ``data:`` URI.
        media_type: Media type of the generated image.
        style: Style the image was generated with.
    """

    image: str = Field(..., description="Generated image as a base64 data URI.")
    media_type: str = Field(..., description="Media type of the generated image.")
    style: str = Field(..., description="Style used for generation.")
