"""Gradio UI for HugFusion."""

import logging

import gradio as gr

from hugfusion.core.config import config
from hugfusion.core.session import SLOT_LABELS, Slot

from .components import UploadSlotUI
from .handlers import SHARE_JS, generate_hug, select_style, share_result, start_over
from .models import INFO_TEXT, LOADING_MESSAGE, RESULT_HEADING, STYLE_CHOICES, UIState
from .state import cleanup_ui_state

logger = logging.getLogger(__name__)


def create_ui() -> gr.Blocks:
    """Create the Gradio UI.

    Layout mirrors the session phases: the upload view (idle, ready, failed),
    the loading view (generating) and the result view. Which one is visible
    is decided by render_session() after every event.

    Returns:
        Gradio Blocks app
    """
    app = gr.Blocks(title="HugFusion")

    with app:
        # Session state - one instance per user
        ui_state = gr.State(UIState(), delete_callback=cleanup_ui_state)

        gr.Markdown(
            """
            # 🤗 HugFusion
            ### Merge Two Smiles into One Hug
            """
        )

        error_banner = gr.Markdown(value="", visible=False)

        # Upload view
        with gr.Column(visible=True) as input_group:
            with gr.Row():
                with gr.Column():
                    slot_a = UploadSlotUI("a", SLOT_LABELS[Slot.A], config.max_file_size)
                with gr.Column():
                    slot_b = UploadSlotUI("b", SLOT_LABELS[Slot.B], config.max_file_size)

            style_radio = gr.Radio(
                choices=STYLE_CHOICES,
                value=STYLE_CHOICES[0],
                label="Hug Style",
            )
            with gr.Row():
                generate_btn = gr.Button("Generate Hug Image", variant="primary", interactive=False)
                reset_btn = gr.Button("Start Over", variant="secondary")

        # Loading view
        with gr.Column(visible=False) as loading_group:
            gr.Markdown(LOADING_MESSAGE)
            cancel_btn = gr.Button("Start Over", variant="secondary", size="sm")

        # Result view
        with gr.Column(visible=False) as result_group:
            gr.Markdown(RESULT_HEADING)
            result_image = gr.Image(label="AI generated hug", type="pil", interactive=False)
            with gr.Row():
                download_btn = gr.DownloadButton("Download", interactive=False)
                share_btn = gr.Button("Share")
                regenerate_btn = gr.Button("Regenerate")
                start_over_btn = gr.Button("Start Over")

        # Carries the share payload to the browser-side share call
        share_payload = gr.Textbox(visible=False)

        gr.Markdown(INFO_TEXT.format(model_id=config.model_id))

        render_outputs = [
            error_banner,
            slot_a.preview,
            slot_a.error,
            slot_b.preview,
            slot_b.error,
            style_radio,
            generate_btn,
            input_group,
            loading_group,
            result_group,
            result_image,
            download_btn,
        ]

        slot_a.wire(ui_state, render_outputs)
        slot_b.wire(ui_state, render_outputs)

        style_radio.input(
            fn=select_style,
            inputs=[style_radio, ui_state],
            outputs=[ui_state],
        )

        # Generation runs per user; don't serialize sessions behind each other
        for button in (generate_btn, regenerate_btn):
            button.click(
                fn=generate_hug,
                inputs=[ui_state],
                outputs=[*render_outputs, ui_state],
                concurrency_limit=None,
            )

        for button in (reset_btn, cancel_btn, start_over_btn):
            button.click(
                fn=start_over,
                inputs=[ui_state],
                outputs=[*render_outputs, slot_a.file, slot_b.file, ui_state],
            )

        share_btn.click(
            fn=share_result,
            inputs=[ui_state],
            outputs=[share_payload, ui_state],
        ).then(
            fn=None,
            inputs=[share_payload],
            js=SHARE_JS,
        )

    return app
