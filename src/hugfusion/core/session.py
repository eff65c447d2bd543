"""Session state machine for HugFusion.

The session is an immutable :class:`SessionState` value. Every change goes
through :func:`reduce`, a pure function of ``(state, action)``, which makes
transitions easy to test and replay. :class:`SessionController` wraps the
reducer with the asynchronous parts: the two upload slots and the call to
the generation service.

Phases
------
The phase is derived from the state, never stored::

    IDLE ──both slots──> READY ──Generate──> GENERATING ──> RESULT
                                                   └──────> FAILED

    RESULT / FAILED ──Generate──> GENERATING   (regenerate / retry)
    any phase ──StartOver──> IDLE

At most one generation runs at a time. Every accepted Generate and every
StartOver bumps ``epoch``; a completion carrying an older epoch is dropped,
so a response that lands after StartOver cannot touch the new session.
"""

import logging
import mimetypes
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import partial
from typing import Any, Union

from .errors import (
    BOTH_IMAGES_REQUIRED_MESSAGE,
    GENERIC_GENERATION_MESSAGE,
    ErrorKind,
    GenerationError,
    HugFusionError,
)
from .generation_client import GenerationClient
from .images import MAX_FILE_SIZE, EncodedImage, GenerationResult, UploadedFile
from .styles import StyleSelection
from .upload_slot import UploadSlot

logger = logging.getLogger(__name__)

SHARE_TITLE = "HugFusion Image"
SHARE_TEXT = "Check out this hug I created with HugFusion!"


class Slot(str, Enum):
    """The two upload positions."""

    A = "a"
    B = "b"


SLOT_LABELS = {Slot.A: "Person 1", Slot.B: "Person 2"}


class Phase(str, Enum):
    IDLE = "idle"
    READY = "ready"
    GENERATING = "generating"
    RESULT = "result"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionError:
    """An error shown by the session.

    Attributes:
        kind: Failure kind, kept for diagnostics
        message: User-facing text
        detail: Internal cause, for logs only
    """

    kind: ErrorKind
    message: str
    detail: str = ""

    @classmethod
    def from_exception(cls, exc: HugFusionError) -> "SessionError":
        return cls(kind=exc.kind, message=GENERIC_GENERATION_MESSAGE, detail=exc.message)


@dataclass(frozen=True)
class SessionState:
    """Complete state of one user session."""

    slot_a: EncodedImage | None = None
    slot_b: EncodedImage | None = None
    style: StyleSelection = field(default_factory=StyleSelection.default)
    result: GenerationResult | None = None
    in_flight: bool = False
    error: SessionError | None = None
    notice: SessionError | None = None
    epoch: int = 0

    def image(self, slot: Slot) -> EncodedImage | None:
        return self.slot_a if slot == Slot.A else self.slot_b

    @property
    def has_both_images(self) -> bool:
        return self.slot_a is not None and self.slot_b is not None

    @property
    def phase(self) -> Phase:
        if self.in_flight:
            return Phase.GENERATING
        if self.result is not None:
            return Phase.RESULT
        if self.error is not None:
            return Phase.FAILED
        if self.has_both_images:
            return Phase.READY
        return Phase.IDLE

    @property
    def can_generate(self) -> bool:
        return self.has_both_images and not self.in_flight

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible values."""

        def image_dict(image):
            if image is None:
                return None
            return {"payload": image.payload, "media_type": image.media_type}

        def error_dict(error):
            if error is None:
                return None
            return {"kind": error.kind.value, "message": error.message, "detail": error.detail}

        return {
            "phase": self.phase.value,
            "slot_a": image_dict(self.slot_a),
            "slot_b": image_dict(self.slot_b),
            "style": self.style.value,
            "result": image_dict(self.result),
            "in_flight": self.in_flight,
            "error": error_dict(self.error),
            "notice": error_dict(self.notice),
            "epoch": self.epoch,
        }


# --- Actions -------------------------------------------------------------


@dataclass(frozen=True)
class SlotChanged:
    slot: Slot
    image: EncodedImage | None


@dataclass(frozen=True)
class StyleSelected:
    style: StyleSelection


@dataclass(frozen=True)
class GenerateRequested:
    pass


@dataclass(frozen=True)
class GenerationSucceeded:
    epoch: int
    result: GenerationResult


@dataclass(frozen=True)
class GenerationFailed:
    epoch: int
    error: SessionError


@dataclass(frozen=True)
class StartOver:
    pass


Action = Union[
    SlotChanged,
    StyleSelected,
    GenerateRequested,
    GenerationSucceeded,
    GenerationFailed,
    StartOver,
]


def reduce(state: SessionState, action: Action) -> SessionState:
    """Apply one action to a session state and return the new state.

    Raises:
        TypeError: If the action type is unknown
    """
    if isinstance(action, SlotChanged):
        if action.slot == Slot.A:
            return replace(state, slot_a=action.image, notice=None)
        return replace(state, slot_b=action.image, notice=None)

    if isinstance(action, StyleSelected):
        return replace(state, style=action.style)

    if isinstance(action, GenerateRequested):
        if state.in_flight:
            return state
        if not state.has_both_images:
            return replace(
                state,
                notice=SessionError(
                    kind=ErrorKind.BOTH_IMAGES_REQUIRED,
                    message=BOTH_IMAGES_REQUIRED_MESSAGE,
                ),
            )
        return replace(
            state,
            in_flight=True,
            result=None,
            error=None,
            notice=None,
            epoch=state.epoch + 1,
        )

    if isinstance(action, GenerationSucceeded):
        if not state.in_flight or action.epoch != state.epoch:
            return state
        return replace(state, in_flight=False, result=action.result, error=None)

    if isinstance(action, GenerationFailed):
        if not state.in_flight or action.epoch != state.epoch:
            return state
        return replace(state, in_flight=False, result=None, error=action.error)

    if isinstance(action, StartOver):
        return SessionState(epoch=state.epoch + 1)

    raise TypeError(f"Unknown session action: {action!r}")


# --- Controller ----------------------------------------------------------


@dataclass(frozen=True)
class DownloadPayload:
    filename: str
    media_type: str
    data: bytes


@dataclass(frozen=True)
class SharePayload:
    title: str
    text: str
    filename: str
    media_type: str
    data_uri: str


def _extension_for(media_type: str) -> str:
    if media_type == "image/png":
        return ".png"
    return mimetypes.guess_extension(media_type) or ".png"


class SessionController:
    """Drives one session: upload slots, style, generation and reset.

    Args:
        client: Generation client (default: a new :class:`GenerationClient`)
        max_file_size: Upload size limit handed to both slots
    """

    def __init__(
        self,
        client: GenerationClient | None = None,
        max_file_size: int = MAX_FILE_SIZE,
    ):
        self.client = client if client is not None else GenerationClient()
        self.state = SessionState()
        self.slots = {
            slot: UploadSlot(
                SLOT_LABELS[slot],
                on_change=partial(self._on_slot_change, slot),
                max_file_size=max_file_size,
            )
            for slot in Slot
        }

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def dispatch(self, action: Action) -> SessionState:
        previous = self.state.phase
        self.state = reduce(self.state, action)
        if self.state.phase != previous:
            logger.info(f"Session {previous.value} -> {self.state.phase.value}")
        return self.state

    def _on_slot_change(self, slot: Slot, image: EncodedImage | None) -> None:
        self.dispatch(SlotChanged(slot, image))

    async def submit_file(self, slot: Slot, file: UploadedFile) -> SessionState:
        await self.slots[slot].submit(file)
        return self.state

    def clear_slot(self, slot: Slot) -> SessionState:
        self.slots[slot].clear()
        return self.state

    def set_style(self, value: str | StyleSelection) -> SessionState:
        return self.dispatch(StyleSelected(StyleSelection.parse(value)))

    async def trigger_generate(self) -> SessionState:
        """Start a generation if both images are present and none is running.

        Otherwise nothing is sent: while generating the call is ignored, and
        with a missing image the state only gains an advisory notice.
        """
        was_in_flight = self.state.in_flight
        self.dispatch(GenerateRequested())
        if was_in_flight or not self.state.in_flight:
            if self.state.notice is not None:
                logger.warning(f"Generate blocked: {self.state.notice.kind.value}")
            return self.state

        epoch = self.state.epoch
        image_a, image_b, style = self.state.slot_a, self.state.slot_b, self.state.style
        try:
            result = await self.client.generate(image_a, image_b, style)
        except GenerationError as e:
            logger.error(f"Generation failed [{e.kind.value}]: {e.message}")
            self.dispatch(GenerationFailed(epoch, SessionError.from_exception(e)))
        else:
            self.dispatch(GenerationSucceeded(epoch, result))

        if self.state.epoch != epoch:
            logger.info(f"Discarded response of generation {epoch} after start over")
        return self.state

    def start_over(self) -> SessionState:
        for upload_slot in self.slots.values():
            upload_slot.clear()
            upload_slot.drag_active = False
        return self.dispatch(StartOver())

    def download(self) -> DownloadPayload | None:
        """Return the current result as a downloadable file, if any."""
        result = self.state.result
        if result is None:
            return None
        timestamp_ms = int(time.time() * 1000)
        return DownloadPayload(
            filename=f"hugfusion_{timestamp_ms}{_extension_for(result.media_type)}",
            media_type=result.media_type,
            data=result.to_bytes(),
        )

    def share(self) -> SharePayload | None:
        """Return what the browser needs to share the current result, if any."""
        result = self.state.result
        if result is None:
            return None
        return SharePayload(
            title=SHARE_TITLE,
            text=SHARE_TEXT,
            filename=f"hugfusion{_extension_for(result.media_type)}",
            media_type=result.media_type,
            data_uri=result.to_data_uri(),
        )

    def __repr__(self) -> str:
        return f"SessionController(phase={self.phase.value}, epoch={self.state.epoch})"
