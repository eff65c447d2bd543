"""Style selection, generation, start-over and share handlers."""

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from dataclasses import asdict

import gradio as gr

from ..models import UIState
from ..state import discard_download, initialize_ui_state, store_download
from .render import render_session

logger = logging.getLogger(__name__)


def select_style(style_label: str, state: UIState) -> UIState:
    """Apply the style chosen in the radio group.

    Args:
        style_label: Radio label ("Realistic Hug" / "Cartoon Hug")
        state: UI state

    Returns:
        Updated state
    """
    state = initialize_ui_state(state)
    try:
        state.session.set_style(style_label)
    except ValueError as e:
        logger.warning(f"Ignoring style selection: {e}")
    return state


async def generate_hug(state: UIState) -> AsyncIterator[tuple]:
    """Run one generation, showing the loading view while it is in flight.

    Yields render updates twice: once right after the request is started and
    once when it completes. A blocked request yields only once.

    Args:
        state: UI state

    Yields:
        Render updates followed by the updated state
    """
    state = initialize_ui_state(state)
    session = state.session

    if not session.state.can_generate:
        await session.trigger_generate()
        yield (*render_session(state), state)
        return

    discard_download(state)
    task = asyncio.ensure_future(session.trigger_generate())
    # Let the task dispatch its Generate before showing the loading view
    await asyncio.sleep(0)
    yield (*render_session(state), state)

    await task
    store_download(state)
    yield (*render_session(state), state)


def start_over(state: UIState) -> tuple:
    """Reset everything, including the file pickers.

    Returns:
        Render updates, two file-picker resets, then the updated state
    """
    state = initialize_ui_state(state)
    discard_download(state)
    state.session.start_over()
    return (*render_session(state), gr.update(value=None), gr.update(value=None), state)


def share_result(state: UIState) -> tuple[str, UIState]:
    """Serialize the current result for the browser share dialog.

    Returns:
        Tuple of (JSON share payload or "", state)
    """
    state = initialize_ui_state(state)
    payload = state.session.share()
    if payload is None:
        return "", state
    return json.dumps(asdict(payload)), state


# Client-side share: runs in the browser with the payload from share_result()
SHARE_JS = """
async (payload) => {
    if (!payload) { return; }
    const data = JSON.parse(payload);
    try {
        const response = await fetch(data.data_uri);
        const blob = await response.blob();
        const file = new File([blob], data.filename, { type: data.media_type });
        if (navigator.share && navigator.canShare && navigator.canShare({ files: [file] })) {
            await navigator.share({ title: data.title, text: data.text, files: [file] });
        } else {
            alert('Sharing is not supported on your browser, or you have not enabled it.');
        }
    } catch (error) {
        console.error('Error sharing:', error);
        alert('Could not share the image.');
    }
}
"""
