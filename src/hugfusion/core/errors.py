"""Error taxonomy for HugFusion.

Every failure the application knows about has an :class:`ErrorKind`. Upload
problems stay local to the slot that produced them; generation problems move
the session into its failed phase. The kinds are kept for logging and
diagnostics, while users see one generic generation message.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-readable failure kinds."""

    UNSUPPORTED_MEDIA_TYPE = "unsupported-media-type"
    SIZE_EXCEEDS_LIMIT = "size-exceeds-limit"
    READ_ERROR = "read-error"
    MISSING_CREDENTIAL = "missing-credential"
    NO_IMAGE_RETURNED = "no-image-returned"
    GENERATION_FAILED = "generation-failed"
    BOTH_IMAGES_REQUIRED = "both-images-required"


GENERIC_GENERATION_MESSAGE = "Failed to generate the image. Please try again."
BOTH_IMAGES_REQUIRED_MESSAGE = "Please upload both images before generating."


class HugFusionError(Exception):
    """Base class for all HugFusion errors.

    Attributes:
        kind: The failure kind
        message: Human-readable cause (for logs, not necessarily for users)
    """

    kind: ErrorKind = ErrorKind.GENERATION_FAILED

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class ImageReadError(HugFusionError):
    """Raised when an uploaded file cannot be read."""

    kind = ErrorKind.READ_ERROR


class GenerationError(HugFusionError):
    """Base class for failures of a generation request."""

    kind = ErrorKind.GENERATION_FAILED


class MissingCredentialError(GenerationError):
    """Raised when no API key is configured for the generation service."""

    kind = ErrorKind.MISSING_CREDENTIAL


class NoImageReturnedError(GenerationError):
    """Raised when the service answered but sent back no inline image."""

    kind = ErrorKind.NO_IMAGE_RETURNED


class GenerationFailedError(GenerationError):
    """Raised for transport failures, error statuses and malformed responses."""

    kind = ErrorKind.GENERATION_FAILED
