"""Shared pytest fixtures for HugFusion tests."""

import asyncio
import shutil
import tempfile
from collections.abc import Generator
from io import BytesIO
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from google.genai import types
from PIL import Image

from hugfusion.core.config import HugFusionConfig
from hugfusion.core.errors import GenerationError
from hugfusion.core.images import EncodedImage, GenerationResult, UploadedFile, encode_bytes
from hugfusion.core.styles import StyleSelection


class FakeGenerationClient:
    """Stand-in for GenerationClient that records calls.

    Attributes:
        calls: (image_a, image_b, style) for every generate() call
        result: Returned on success
        error: Raised instead of returning, when set
        gate: When set, generate() waits for it before answering
    """

    def __init__(
        self,
        result: GenerationResult | None = None,
        error: GenerationError | None = None,
    ):
        self.calls: list[tuple[EncodedImage, EncodedImage, StyleSelection]] = []
        self.result = result or GenerationResult(payload=encode_bytes(b"hug", "image/png").payload)
        self.error = error
        self.gate: asyncio.Event | None = None

    async def generate(self, image_a, image_b, style) -> GenerationResult:
        self.calls.append((image_a, image_b, style))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


def make_image_bytes(fmt: str = "PNG", size: tuple[int, int] = (4, 4)) -> bytes:
    """Create a tiny real image in the given format."""
    buffer = BytesIO()
    Image.new("RGB", size, color=(200, 120, 80)).save(buffer, format=fmt)
    return buffer.getvalue()


def _build_response(*parts: types.Part) -> types.GenerateContentResponse:
    """Build a Gemini response with one candidate holding ``parts``."""
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


def _build_sdk_factory(response=None, error: Exception | None = None) -> tuple[Mock, MagicMock]:
    """Create a client factory returning a mocked SDK client.

    ``sdk_client.aio`` works as an async context manager yielding itself.

    Returns:
        Tuple of (factory, sdk_client)
    """
    sdk_client = MagicMock()
    sdk_client.aio.__aenter__.return_value = sdk_client.aio
    sdk_client.aio.__aexit__.return_value = False
    sdk_client.aio.models.generate_content = AsyncMock(return_value=response, side_effect=error)
    factory = Mock(return_value=sdk_client)
    return factory, sdk_client


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config() -> HugFusionConfig:
    """Configuration with a test API key and no .env file."""
    return HugFusionConfig(api_key="test-key", _env_file=None)


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG")


@pytest.fixture
def png_image(png_bytes) -> EncodedImage:
    return encode_bytes(png_bytes, "image/png")


@pytest.fixture
def jpeg_image(jpeg_bytes) -> EncodedImage:
    return encode_bytes(jpeg_bytes, "image/jpeg")


@pytest.fixture
def png_upload(png_bytes) -> UploadedFile:
    return UploadedFile.from_bytes("bob.png", "image/png", png_bytes)


@pytest.fixture
def jpeg_upload(jpeg_bytes) -> UploadedFile:
    return UploadedFile.from_bytes("alice.jpg", "image/jpeg", jpeg_bytes)


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def make_response():
    """Builder for Gemini responses: ``make_response(*parts)``."""
    return _build_response


@pytest.fixture
def make_sdk_factory():
    """Builder for mocked SDK client factories.

    ``make_sdk_factory(response=None, error=None)`` returns ``(factory, sdk_client)``.
    """
    return _build_sdk_factory


@pytest.fixture
def test_client(fake_client) -> Generator:
    """FastAPI TestClient whose generation client is ``fake_client``.

    Yields:
        fastapi.testclient.TestClient

    Cleanup:
        Dependency overrides are removed after the test
    """
    from fastapi.testclient import TestClient

    from hugfusion.api.main import app, get_generation_client

    app.dependency_overrides[get_generation_client] = lambda: fake_client
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
