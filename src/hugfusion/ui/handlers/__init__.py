"""UI event handlers organized by feature area.

This package provides handlers for all Gradio UI events:
- upload: file selection and clearing for the two person slots
- generation: style selection, generation, start over and share
- render: turning the session state into component updates
"""

from .generation import SHARE_JS, generate_hug, select_style, share_result, start_over
from .render import RENDER_FIELDS, render_session
from .upload import clear_file, upload_file

__all__ = [
    # Upload handlers
    "clear_file",
    "upload_file",
    # Generation handlers
    "SHARE_JS",
    "generate_hug",
    "select_style",
    "share_result",
    "start_over",
    # Rendering
    "RENDER_FIELDS",
    "render_session",
]
