"""Upload slot handlers."""

import logging
from typing import Any

from hugfusion.core.images import UploadedFile

from ..models import SLOT_KEYS, UIState
from ..state import initialize_ui_state
from .render import render_session

logger = logging.getLogger(__name__)


def _file_path(value: Any) -> str | None:
    """Extract a path from a Gradio file value (path string or file object)."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        # Only the first file of a multi-file selection is used
        return _file_path(value[0]) if value else None
    return str(getattr(value, "name", value))


async def upload_file(slot_key: str, file: Any, state: UIState) -> tuple:
    """Validate and store an uploaded file in one slot.

    Args:
        slot_key: "a" or "b"
        file: Gradio file value (path, file object, or list of them)
        state: UI state

    Returns:
        Render updates followed by the updated state
    """
    state = initialize_ui_state(state)
    slot = SLOT_KEYS[slot_key]

    path = _file_path(file)
    if path is None:
        state.session.clear_slot(slot)
    else:
        await state.session.submit_file(slot, UploadedFile.from_path(path))

    return (*render_session(state), state)


def clear_file(slot_key: str, state: UIState) -> tuple:
    """Empty one slot.

    Returns:
        Render updates followed by the updated state
    """
    state = initialize_ui_state(state)
    state.session.clear_slot(SLOT_KEYS[slot_key])
    return (*render_session(state), state)
