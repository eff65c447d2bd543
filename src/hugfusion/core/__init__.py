"""Core functionality for HugFusion.

This package holds everything that does not depend on a UI framework:

- **config**: Pydantic Settings configuration (``HUGFUSION_`` prefix)
- **images**: upload validation, ``EncodedImage`` and base64 encoding
- **upload_slot**: one upload position with drag/drop state
- **styles**: hug style presets and their instruction texts
- **generation_client**: the Gemini request/response contract
- **session**: the reducer-based session state machine and its controller
- **errors**: the error taxonomy

Usage Example
-------------
    from hugfusion.core import SessionController, Slot, UploadedFile

    session = SessionController()
    await session.submit_file(Slot.A, UploadedFile.from_path("alice.jpg"))
    await session.submit_file(Slot.B, UploadedFile.from_path("bob.png"))
    session.set_style("cartoon")
    state = await session.trigger_generate()
    print(state.phase)
"""

from hugfusion.core.config import HugFusionConfig, config
from hugfusion.core.errors import ErrorKind, GenerationError, HugFusionError
from hugfusion.core.generation_client import GenerationClient
from hugfusion.core.images import EncodedImage, GenerationResult, UploadedFile, validate_file
from hugfusion.core.session import Phase, SessionController, SessionState, Slot, reduce
from hugfusion.core.styles import StyleSelection
from hugfusion.core.upload_slot import UploadSlot

__all__ = [
    "EncodedImage",
    "ErrorKind",
    "GenerationClient",
    "GenerationError",
    "GenerationResult",
    "HugFusionConfig",
    "HugFusionError",
    "Phase",
    "SessionController",
    "SessionState",
    "Slot",
    "StyleSelection",
    "UploadSlot",
    "UploadedFile",
    "config",
    "reduce",
    "validate_file",
]
