"""Hug style presets and their fixed instruction texts."""

from enum import Enum
from types import MappingProxyType


class StyleSelection(str, Enum):
    """Available hug styles. The first member is the default."""

    REALISTIC = "realistic"
    CARTOON = "cartoon"

    @classmethod
    def default(cls) -> "StyleSelection":
        return next(iter(cls))

    @classmethod
    def parse(cls, value: "str | StyleSelection") -> "StyleSelection":
        """Resolve a style from its id or label.

        Raises:
            ValueError: If the value names no known style
        """
        if isinstance(value, cls):
            return value
        for style in cls:
            if value == style.value or value == STYLE_LABELS[style]:
                return style
        raise ValueError(f"Unknown style: {value!r}")


STYLE_PROMPTS = MappingProxyType(
    {
        StyleSelection.REALISTIC: (
            "Combine the two uploaded people into one image where they are hugging each "
            "other affectionately, keeping their facial details and body structure "
            "realistic. Adjust background and colors for a natural, photorealistic look."
        ),
        StyleSelection.CARTOON: (
            "Redraw the two uploaded people in a cute, stylized cartoon/anime style. Show "
            "them hugging each other affectionately. The final image should be vibrant and "
            "expressive, like a scene from an animated movie."
        ),
    }
)

STYLE_LABELS = MappingProxyType(
    {
        StyleSelection.REALISTIC: "Realistic Hug",
        StyleSelection.CARTOON: "Cartoon Hug",
    }
)


def instruction_for(style: StyleSelection) -> str:
    """Return the instruction text sent to the model for ``style``."""
    return STYLE_PROMPTS[style]
