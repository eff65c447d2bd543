"""Upload validation and base64 image encoding.

This module holds the leaf pieces of the upload pipeline:

- **validate_file**: checks a declared media type and byte size against the
  upload policy. Pure, no I/O.
- **UploadedFile**: a candidate file as handed over by the UI or the HTTP
  layer, carrying its *declared* media type.
- **encode_image / encode_bytes**: turn file bytes into an
  :class:`EncodedImage`, the self-describing base64 form used everywhere
  else in the application.
- **GenerationResult**: the single image produced by a generation request.

Media types are compared exactly as declared by the client. File contents
are never sniffed.
"""

import asyncio
import base64
import binascii
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from .errors import ErrorKind, ImageReadError

logger = logging.getLogger(__name__)

ALLOWED_MEDIA_TYPES = frozenset({"image/jpeg", "image/png", "image/jpg"})
ALLOWED_EXTENSIONS = (".png", ".jpg", ".jpeg")
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MiB

DATA_URI_PREFIX = "data:"
DATA_URI_SEPARATOR = ";base64,"


def format_size(size: int) -> str:
    """Format a byte count as MB, KB or bytes, e.g. "10MB", "1.5MB", "512KB"."""
    if size >= 1024 * 1024:
        return f"{round(size / (1024 * 1024), 1):g}MB"
    if size >= 1024:
        return f"{round(size / 1024, 1):g}KB"
    return f"{size} bytes"


def rejection_message(reason: ErrorKind, max_size: int = MAX_FILE_SIZE) -> str:
    """Return the user-facing message for an upload rejection."""
    if reason == ErrorKind.UNSUPPORTED_MEDIA_TYPE:
        return "Invalid file type. Please use JPG, JPEG, or PNG."
    if reason == ErrorKind.SIZE_EXCEEDS_LIMIT:
        return f"File is too large. Max size is {format_size(max_size)}."
    if reason == ErrorKind.READ_ERROR:
        return "Could not read the file. Please try another image."
    raise ValueError(f"Not an upload rejection: {reason}")


def validate_file(
    media_type: str,
    size: int,
    max_size: int = MAX_FILE_SIZE,
    allowed_types: frozenset[str] = ALLOWED_MEDIA_TYPES,
) -> ErrorKind | None:
    """Check an upload against the media-type allow-list and size limit.

    The media type is checked first, so a file breaking both rules is
    reported as unsupported. Empty files are not rejected.

    Args:
        media_type: Declared media type, compared case-sensitively
        size: File size in bytes
        max_size: Largest accepted size in bytes (inclusive)
        allowed_types: Accepted media types

    Returns:
        None if the file is accepted, otherwise the rejection kind
    """
    if media_type not in allowed_types:
        return ErrorKind.UNSUPPORTED_MEDIA_TYPE
    if size > max_size:
        return ErrorKind.SIZE_EXCEEDS_LIMIT
    return None


@dataclass(frozen=True)
class EncodedImage:
    """An image as base64 payload plus its media type."""

    payload: str
    media_type: str

    def to_bytes(self) -> bytes:
        """Decode the payload back into the original bytes."""
        return base64.b64decode(self.payload)

    def to_data_uri(self) -> str:
        return f"{DATA_URI_PREFIX}{self.media_type}{DATA_URI_SEPARATOR}{self.payload}"

    @classmethod
    def from_data_uri(cls, data_uri: str) -> "EncodedImage":
        """Split a ``data:<type>;base64,<payload>`` URI.

        Raises:
            ValueError: If the string is not a base64 data URI
        """
        if not data_uri.startswith(DATA_URI_PREFIX) or DATA_URI_SEPARATOR not in data_uri:
            raise ValueError("Not a base64 data URI")
        header, payload = data_uri[len(DATA_URI_PREFIX) :].split(DATA_URI_SEPARATOR, 1)
        if not header:
            raise ValueError("Data URI has no media type")
        return cls(payload=payload, media_type=header)

    def __repr__(self) -> str:
        return f"EncodedImage(media_type={self.media_type!r}, payload_len={len(self.payload)})"


@dataclass(frozen=True)
class GenerationResult:
    """The one image returned by a successful generation."""

    payload: str
    media_type: str = "image/png"

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.payload)

    def to_data_uri(self) -> str:
        return f"{DATA_URI_PREFIX}{self.media_type}{DATA_URI_SEPARATOR}{self.payload}"

    def __repr__(self) -> str:
        return f"GenerationResult(media_type={self.media_type!r}, payload_len={len(self.payload)})"


@dataclass(frozen=True)
class UploadedFile:
    """A candidate upload.

    Exactly one of ``path`` or ``content`` holds the bytes. ``media_type`` is
    what the client declared (HTTP content type, or the file extension for
    uploads that arrive as paths).
    """

    name: str
    media_type: str
    size: int
    path: Path | None = None
    content: bytes | None = None

    @classmethod
    def from_path(cls, path: str | Path) -> "UploadedFile":
        """Describe a file on disk, declaring its type from the extension.

        A file that cannot be stat'ed gets size 0; reading it later raises
        :class:`ImageReadError`.
        """
        path = Path(path)
        try:
            size = path.stat().st_size
        except OSError as e:
            logger.warning(f"Cannot stat {path.name}: {e}")
            size = 0
        media_type, _ = mimetypes.guess_type(path.name)
        return cls(name=path.name, media_type=media_type or "", size=size, path=path)

    @classmethod
    def from_bytes(cls, name: str, media_type: str, content: bytes) -> "UploadedFile":
        return cls(name=name, media_type=media_type, size=len(content), content=content)

    async def read(self) -> bytes:
        """Read the file's bytes.

        Raises:
            ImageReadError: If the bytes cannot be read
        """
        if self.content is not None:
            return self.content
        if self.path is None:
            raise ImageReadError(f"No content available for {self.name}")
        try:
            return await asyncio.to_thread(self.path.read_bytes)
        except OSError as e:
            raise ImageReadError(f"Failed to read {self.name}: {e}") from e


def encode_bytes(raw: bytes, media_type: str) -> EncodedImage:
    """Base64-encode raw image bytes."""
    return EncodedImage(payload=base64.b64encode(raw).decode("ascii"), media_type=media_type)


def decode_payload(payload: str) -> bytes:
    """Decode a base64 payload, validating its alphabet.

    Raises:
        ValueError: If the payload is not valid base64
    """
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


async def encode_image(file: UploadedFile) -> EncodedImage:
    """Read an uploaded file and encode it.

    Single attempt; read failures propagate as :class:`ImageReadError`.
    """
    raw = await file.read()
    logger.debug(f"Encoded {file.name} ({len(raw)} bytes, {file.media_type})")
    return encode_bytes(raw, file.media_type)
