"""Data models and constants for the HugFusion Gradio UI."""

import logging
from dataclasses import dataclass
from pathlib import Path

from hugfusion.core.session import SessionController, Slot
from hugfusion.core.styles import STYLE_LABELS, StyleSelection

logger = logging.getLogger(__name__)


@dataclass
class UIState:
    """Session state for the Gradio UI.

    Each browser session gets its own UIState, so every user drives their own
    :class:`SessionController`. The controller is created lazily on the first
    event (see :func:`hugfusion.ui.state.initialize_ui_state`).

    Attributes
    ----------
    session : SessionController | None
        The session controller for this user
    download_path : Path | None
        Temporary file holding the current result for the download button
    download_dir : Path | None
        Private directory for this session's download files
    """

    session: SessionController | None = None
    download_path: Path | None = None
    download_dir: Path | None = None

    def is_initialized(self) -> bool:
        return self.session is not None

    def __repr__(self) -> str:
        phase = self.session.phase.value if self.session is not None else "uninitialized"
        return f"UIState(phase={phase}, download={self.download_path})"


# Slot keys as passed from the UI
SLOT_KEYS = {"a": Slot.A, "b": Slot.B}

# Style radio choices, in display order
STYLE_CHOICES = [STYLE_LABELS[style] for style in StyleSelection]

UPLOAD_FILE_TYPES = [".png", ".jpg", ".jpeg"]

UPLOAD_HINT = "Drag & drop or click to upload\n\nPNG, JPG, JPEG up to {max_size}"
LOADING_MESSAGE = "*Fusing your images into a hug...*"
RESULT_HEADING = "## Here's your hug!"

INFO_TEXT = (
    "### How does HugFusion work?\n"
    "HugFusion uses Google's powerful Nano Banana (`{model_id}`) model. When you upload "
    "two images, the AI analyzes them and generates a brand new image based on a "
    "descriptive prompt, creating a beautiful moment of the two individuals hugging."
)
