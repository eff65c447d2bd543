"""Client for the Gemini image-generation service.

One call to :meth:`GenerationClient.generate` sends exactly one request:
the style's instruction text followed by both subject images as inline
attachments, asking for an image-only response. The first inline image in
the reply becomes the :class:`~hugfusion.core.images.GenerationResult`.

Failure kinds
-------------
- ``MissingCredentialError``: no API key configured. Raised before any
  request is built.
- ``NoImageReturnedError``: the service answered without inline image data.
- ``GenerationFailedError``: everything else (SDK/transport errors, error
  statuses, malformed responses). Safety-policy refusals are not told apart
  from internal errors.

There is no retry, caching or streaming.
"""

import base64
import logging
from collections.abc import Callable
from typing import Any

from google import genai
from google.genai import types

from .config import HugFusionConfig, config
from .errors import GenerationFailedError, MissingCredentialError, NoImageReturnedError
from .images import EncodedImage, GenerationResult, decode_payload
from .styles import StyleSelection, instruction_for

logger = logging.getLogger(__name__)

DEFAULT_RESULT_MEDIA_TYPE = "image/png"


class GenerationClient:
    """Sends hug-generation requests to Gemini.

    Args:
        settings: Configuration to read the API key and model from
            (default: the global ``config``)
        client_factory: Callable building an SDK client from ``api_key``
            (default: ``genai.Client``)
    """

    def __init__(
        self,
        settings: HugFusionConfig | None = None,
        client_factory: Callable[..., Any] | None = None,
    ):
        self.settings = settings if settings is not None else config
        self.client_factory = client_factory or genai.Client

    def build_request(
        self,
        image_a: EncodedImage,
        image_b: EncodedImage,
        style: StyleSelection,
    ) -> dict[str, Any]:
        """Build the keyword arguments for ``generate_content``.

        Raises:
            ValueError: If an image payload is not valid base64
        """
        image_parts = [
            types.Part.from_bytes(data=decode_payload(image.payload), mime_type=image.media_type)
            for image in (image_a, image_b)
        ]
        return {
            "model": self.settings.model_id,
            "contents": [instruction_for(style), *image_parts],
            "config": types.GenerateContentConfig(response_modalities=[types.Modality.IMAGE]),
        }

    async def generate(
        self,
        image_a: EncodedImage,
        image_b: EncodedImage,
        style: StyleSelection,
    ) -> GenerationResult:
        """Generate one hug image from two subject images.

        Raises:
            MissingCredentialError: If no API key is configured
            NoImageReturnedError: If the response holds no inline image
            GenerationFailedError: For any other failure
        """
        api_key = self.settings.api_key
        if not self.settings.has_api_key():
            logger.error("Generation aborted: no API key configured (HUGFUSION_API_KEY)")
            raise MissingCredentialError(
                "API key is not configured. Set HUGFUSION_API_KEY or GEMINI_API_KEY."
            )

        try:
            request = self.build_request(image_a, image_b, style)
        except ValueError as e:
            raise GenerationFailedError(f"Could not build request: {e}") from e

        logger.info(f"Requesting {style.value} hug image from {request['model']}")
        try:
            async with self.client_factory(api_key=api_key).aio as aclient:
                response = await aclient.models.generate_content(**request)
        except Exception as e:
            logger.error(f"Error calling Gemini API: {e}", exc_info=True)
            raise GenerationFailedError(
                "The AI model failed to generate an image. This might be due to a safety "
                f"policy violation or an internal error. ({e})"
            ) from e

        return extract_image(response)


def extract_image(response: Any) -> GenerationResult:
    """Return the first inline image of the first candidate.

    Raises:
        NoImageReturnedError: If no part carries inline image data
        GenerationFailedError: If the response cannot be inspected
    """
    try:
        candidates = getattr(response, "candidates", None) or []
        parts = []
        if candidates:
            content = getattr(candidates[0], "content", None)
            parts = getattr(content, "parts", None) or []

        for part in parts:
            inline = getattr(part, "inline_data", None)
            if inline is None or not inline.data:
                continue
            data = inline.data
            payload = data if isinstance(data, str) else base64.b64encode(data).decode("ascii")
            media_type = inline.mime_type or DEFAULT_RESULT_MEDIA_TYPE
            logger.info(f"Received generated image ({media_type})")
            return GenerationResult(payload=payload, media_type=media_type)
    except (AttributeError, TypeError) as e:
        raise GenerationFailedError(f"Malformed response from Gemini: {e}") from e

    feedback = getattr(response, "prompt_feedback", None)
    logger.warning(f"No image in Gemini response (prompt_feedback={feedback})")
    raise NoImageReturnedError("No image was generated in the API response.")
