"""HugFusion - Merge two smiles into one hug with Gemini image generation."""

__version__ = "0.1.0"

from hugfusion.core.config import HugFusionConfig, config
from hugfusion.core.session import SessionController
from hugfusion.core.styles import StyleSelection

__all__ = [
    "HugFusionConfig",
    "SessionController",
    "StyleSelection",
    "config",
]
