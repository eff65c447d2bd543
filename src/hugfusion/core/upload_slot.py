"""One upload position (Person 1 or Person 2)."""

import logging
from collections.abc import Callable, Sequence

from .errors import ErrorKind, ImageReadError
from .images import (
    MAX_FILE_SIZE,
    EncodedImage,
    UploadedFile,
    encode_image,
    rejection_message,
    validate_file,
)

logger = logging.getLogger(__name__)

ImageListener = Callable[[EncodedImage | None], None]


class UploadSlot:
    """Holds the validated, encoded image for one subject.

    Every change is reported to ``on_change``: the new :class:`EncodedImage`
    on success, ``None`` whenever the slot ends up empty. Only the first file
    of any multi-file selection or drop is used.

    Attributes:
        label: Display label ("Person 1", "Person 2")
        current_image: Encoded image currently held, if any
        drag_active: Whether a drag is hovering over the slot
        last_error: Kind of the last rejection, if any

    A submit whose read finishes after a later submit or clear is dropped:
    only the most recent request may change the slot.
    """

    def __init__(
        self,
        label: str,
        on_change: ImageListener | None = None,
        max_file_size: int = MAX_FILE_SIZE,
    ):
        self.label = label
        self.on_change = on_change
        self.max_file_size = max_file_size
        self.current_image: EncodedImage | None = None
        self.drag_active = False
        self.last_error: ErrorKind | None = None
        self._request = 0

    @property
    def error_message(self) -> str | None:
        if self.last_error is None:
            return None
        return rejection_message(self.last_error, self.max_file_size)

    async def submit(self, file: UploadedFile) -> EncodedImage | None:
        """Validate and encode a file into this slot.

        Returns:
            The encoded image, or None if the file was rejected or superseded
        """
        self._request += 1
        request = self._request

        reason = validate_file(file.media_type, file.size, self.max_file_size)
        if reason is not None:
            logger.warning(
                f"{self.label}: rejected {file.name!r} ({file.media_type or 'unknown type'}, "
                f"{file.size} bytes): {reason.value}"
            )
            self._reject(reason)
            return None

        try:
            image = await encode_image(file)
        except ImageReadError as e:
            if request != self._request:
                return None
            logger.warning(f"{self.label}: {e}")
            self._reject(ErrorKind.READ_ERROR)
            return None

        if request != self._request:
            logger.debug(f"{self.label}: dropped superseded upload {file.name!r}")
            return None

        self.current_image = image
        self.last_error = None
        logger.info(f"{self.label}: accepted {file.name!r}")
        self._notify(image)
        return image

    def clear(self) -> None:
        self._request += 1
        self.current_image = None
        self.last_error = None
        self._notify(None)

    def drag_enter(self) -> None:
        self.drag_active = True

    def drag_leave(self) -> None:
        self.drag_active = False

    async def drop(self, files: Sequence[UploadedFile]) -> EncodedImage | None:
        """Handle a drop; only the first dropped file is submitted."""
        self.drag_active = False
        if not files:
            return None
        return await self.submit(files[0])

    async def browse(self, files: Sequence[UploadedFile]) -> EncodedImage | None:
        """Handle a click-to-browse selection; first file wins."""
        if not files:
            return None
        return await self.submit(files[0])

    def _reject(self, reason: ErrorKind) -> None:
        self.last_error = reason
        self.current_image = None
        self._notify(None)

    def _notify(self, image: EncodedImage | None) -> None:
        if self.on_change is not None:
            self.on_change(image)

    def __repr__(self) -> str:
        return (
            f"UploadSlot(label={self.label!r}, has_image={self.current_image is not None}, "
            f"last_error={self.last_error})"
        )
