"""Rendering of the session state into Gradio component updates."""

import logging
from io import BytesIO

import gradio as gr
from PIL import Image, UnidentifiedImageError

from hugfusion.core.images import EncodedImage, GenerationResult
from hugfusion.core.session import Phase, Slot
from hugfusion.core.styles import STYLE_LABELS

from ..models import UIState

logger = logging.getLogger(__name__)

# Order of the components returned by render_session()
RENDER_FIELDS = (
    "error_banner",
    "preview_a",
    "error_a",
    "preview_b",
    "error_b",
    "style",
    "generate_button",
    "input_group",
    "loading",
    "result_group",
    "result_image",
    "download_button",
)


def to_pil(image: EncodedImage | GenerationResult | None) -> Image.Image | None:
    """Decode an encoded image for display.

    Returns None for missing or undecodable images (e.g. an empty upload).
    """
    if image is None:
        return None
    try:
        pil_image = Image.open(BytesIO(image.to_bytes()))
        pil_image.load()
        return pil_image
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.warning(f"Cannot display {image!r}: {e}")
        return None


def _message(text: str | None) -> dict:
    if not text:
        return gr.update(value="", visible=False)
    return gr.update(value=f"❌ {text}", visible=True)


def render_session(state: UIState) -> tuple:
    """Build the component updates for the current session.

    Args:
        state: Initialized UI state

    Returns:
        Tuple of updates in RENDER_FIELDS order
    """
    session = state.session
    current = session.state
    phase = current.phase

    banner = current.notice or current.error
    slot_a = session.slots[Slot.A]
    slot_b = session.slots[Slot.B]
    download_path = str(state.download_path) if state.download_path is not None else None

    return (
        _message(banner.message if banner is not None else None),
        gr.update(value=to_pil(current.slot_a)),
        _message(slot_a.error_message),
        gr.update(value=to_pil(current.slot_b)),
        _message(slot_b.error_message),
        gr.update(value=STYLE_LABELS[current.style]),
        gr.update(interactive=current.can_generate),
        gr.update(visible=phase not in (Phase.GENERATING, Phase.RESULT)),
        gr.update(visible=phase == Phase.GENERATING),
        gr.update(visible=phase == Phase.RESULT),
        gr.update(value=to_pil(current.result)),
        gr.update(value=download_path, interactive=download_path is not None),
    )
