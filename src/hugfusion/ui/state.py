"""State management utilities for the HugFusion UI.

This module handles the lazy creation of the per-user session controller and
the cleanup of the temporary files the UI hands to the browser.
"""

import logging
import shutil
import tempfile
from pathlib import Path

from hugfusion.core.config import config
from hugfusion.core.generation_client import GenerationClient
from hugfusion.core.session import SessionController

from .models import UIState

logger = logging.getLogger(__name__)

# Each session writes its downloads to its own directory under here
DOWNLOAD_DIR = Path(tempfile.gettempdir()) / "hugfusion"


def initialize_ui_state(state: UIState | None = None) -> UIState:
    """Initialize or ensure UI state is ready.

    Args:
        state: Existing UIState or None

    Returns:
        Initialized UIState instance
    """
    if state is None:
        logger.info("Creating new UIState")
        state = UIState()

    if state.is_initialized():
        return state

    logger.info("Initializing session controller")
    state.session = SessionController(
        GenerationClient(config),
        max_file_size=config.max_file_size,
    )
    return state


def store_download(state: UIState) -> UIState:
    """Write the current result to a temporary file for the download button.

    Clears ``download_path`` when there is no result.
    """
    discard_download(state)
    payload = state.session.download() if state.session is not None else None
    if payload is None:
        return state

    if state.download_dir is None:
        DOWNLOAD_DIR.mkdir(parents=True, exist_ok=True)
        state.download_dir = Path(tempfile.mkdtemp(prefix="session_", dir=DOWNLOAD_DIR))
    path = state.download_dir / payload.filename
    path.write_bytes(payload.data)
    state.download_path = path
    logger.debug(f"Result written to {path}")
    return state


def discard_download(state: UIState) -> None:
    """Remove the temporary download file, if any."""
    if state.download_path is None:
        return
    try:
        state.download_path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not remove {state.download_path}: {e}")
    state.download_path = None


def cleanup_ui_state(state: UIState) -> None:
    """Remove the session's download directory when Gradio drops the session."""
    discard_download(state)
    if state.download_dir is None:
        return
    shutil.rmtree(state.download_dir, ignore_errors=True)
    logger.info(f"Removed session downloads in {state.download_dir}")
    state.download_dir = None
