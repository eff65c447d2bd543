"""Reusable UI components for the HugFusion Gradio interface."""

import gradio as gr

from ..core.images import format_size
from .handlers import clear_file, upload_file
from .models import UPLOAD_FILE_TYPES, UPLOAD_HINT


class UploadSlotUI:
    """UI for one person slot: file picker, preview and error line.

    Gradio's file picker supports both drag & drop and click-to-browse; only
    the first file of a selection is used.
    """

    def __init__(self, slot_key: str, label: str, max_file_size: int):
        """Initialize an upload slot component.

        Args:
            slot_key: "a" or "b"
            label: Display label ("Person 1", "Person 2")
            max_file_size: Upload size limit in bytes, for the hint text
        """
        self.slot_key = slot_key
        self.label = label

        with gr.Group():
            gr.Markdown(f"**{label}**")
            self.preview = gr.Image(
                label=label,
                type="pil",
                interactive=False,
                height=300,
            )
            self.file = gr.File(
                label=UPLOAD_HINT.format(max_size=format_size(max_file_size)),
                file_count="single",
                file_types=UPLOAD_FILE_TYPES,
                type="filepath",
            )
            self.error = gr.Markdown(value="", visible=False)

    def wire(self, ui_state: gr.State, render_outputs: list) -> None:
        """Connect upload and clear events of the file picker.

        Args:
            ui_state: Session state component
            render_outputs: Components updated by render_session(), in order
        """
        slot_key = self.slot_key

        async def on_upload(file, state):
            return await upload_file(slot_key, file, state)

        def on_clear(state):
            return clear_file(slot_key, state)

        self.file.upload(
            fn=on_upload,
            inputs=[self.file, ui_state],
            outputs=[*render_outputs, ui_state],
            api_name=f"upload_{slot_key}",
        )
        self.file.clear(
            fn=on_clear,
            inputs=[ui_state],
            outputs=[*render_outputs, ui_state],
            api_name=f"clear_{slot_key}",
        )
