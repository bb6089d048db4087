"""Task colour palettes.

A task carries a four-part palette. Subtasks inherit a slightly darker
variant of their parent's palette when they are attached, so nested tasks
read as a visual group.
"""

import math
import re

from pydantic import BaseModel, ConfigDict

HEX_COLOR = re.compile(r"^#?[0-9a-fA-F]{6}$")

# Brightness factors applied to a parent's palette for its subtasks
PRIMARY_INHERIT_FACTOR = 0.95
SECONDARY_INHERIT_FACTOR = 0.9


class TaskColor(BaseModel):
    """Four-part palette used to render a task."""

    model_config = ConfigDict(frozen=True)

    primary: str
    secondary: str
    accent: str
    text: str


DEFAULT_TASK_COLOR = TaskColor(
    primary="#FFFFFF",
    secondary="#F3F4F6",
    accent="#6B7280",
    text="#1F2937",
)


def _palette(primary: str, secondary: str, accent: str, text: str) -> TaskColor:
    return TaskColor(primary=primary, secondary=secondary, accent=accent, text=text)


# Named presets offered by the front-ends
PASTEL_COLORS: dict[str, TaskColor] = {
    # Gradient pastels
    "Lavender Dream": _palette("#E6E6FA", "#DDA0DD", "#9370DB", "#4B0082"),
    "Mint Fresh": _palette("#F0FFF0", "#98FB98", "#00FA9A", "#006400"),
    "Peach Sunset": _palette("#FFEFD5", "#FFDAB9", "#FF7F50", "#8B4513"),
    "Sky Blue": _palette("#F0F8FF", "#87CEEB", "#4169E1", "#191970"),
    "Rose Garden": _palette("#FFF0F5", "#FFB6C1", "#FF69B4", "#8B008B"),
    "Sunny Yellow": _palette("#FFFACD", "#F0E68C", "#FFD700", "#B8860B"),
    "Ocean Breeze": _palette("#F0FFFF", "#AFEEEE", "#20B2AA", "#008B8B"),
    "Coral Reef": _palette("#FFF8DC", "#F5DEB3", "#FF7F50", "#A0522D"),
    "Purple Haze": _palette("#F8F8FF", "#D8BFD8", "#9932CC", "#4B0082"),
    "Forest Green": _palette("#F5FFFA", "#90EE90", "#32CD32", "#228B22"),
    # Flat pastels
    "Soft Pink": _palette("#FFE4E6", "#FFE4E6", "#FF69B4", "#8B0040"),
    "Powder Blue": _palette("#E6F3FF", "#E6F3FF", "#4A90E2", "#1E3A8A"),
    "Mint Green": _palette("#E8F5E8", "#E8F5E8", "#10B981", "#065F46"),
    "Lavender": _palette("#F3E8FF", "#F3E8FF", "#8B5CF6", "#581C87"),
    "Peach": _palette("#FFF2E6", "#FFF2E6", "#F97316", "#9A3412"),
    "Lemon": _palette("#FFFBEB", "#FFFBEB", "#F59E0B", "#92400E"),
    "Sage": _palette("#F0F4F0", "#F0F4F0", "#6B7280", "#374151"),
    "Blush": _palette("#FDF2F8", "#FDF2F8", "#EC4899", "#BE185D"),
    "Periwinkle": _palette("#EEF2FF", "#EEF2FF", "#6366F1", "#3730A3"),
    "Seafoam": _palette("#ECFDF5", "#ECFDF5", "#059669", "#064E3B"),
}


def is_valid_hex(value: str) -> bool:
    """Check that ``value`` is a six-digit hex colour, with or without '#'."""
    return bool(HEX_COLOR.match(value))


def get_palette(name: str) -> TaskColor | None:
    """Look up a preset palette by name, ignoring case.

    Args:
        name: Palette name such as "Mint Fresh".

    Returns:
        The palette, or None if no preset has that name.
    """
    wanted = name.strip().lower()
    for palette_name, palette in PASTEL_COLORS.items():
        if palette_name.lower() == wanted:
            return palette
    return None


def adjust_color_brightness(hex_color: str, factor: float) -> str:
    """Scale each RGB channel of a hex colour by ``factor``.

    Channels are rounded and clamped to 0-255. The result is a lowercase
    ``#rrggbb`` string.

    Args:
        hex_color: Colour such as "#FFEFD5" (the '#' is optional).
        factor: Multiplier; values below 1 darken, above 1 brighten.

    Returns:
        The adjusted colour.
    """
    digits = hex_color.lstrip("#")
    channels = [int(digits[i : i + 2], 16) for i in (0, 2, 4)]
    scaled = [max(0, min(255, math.floor(channel * factor + 0.5))) for channel in channels]
    return "#" + "".join(f"{channel:02x}" for channel in scaled)


def inherit_color(parent: TaskColor) -> TaskColor:
    """Derive a subtask palette from its parent's.

    Primary is darkened by 5% and secondary by 10%; accent and text are
    copied unchanged.
    """
    return parent.model_copy(
        update={
            "primary": adjust_color_brightness(parent.primary, PRIMARY_INHERIT_FACTOR),
            "secondary": adjust_color_brightness(parent.secondary, SECONDARY_INHERIT_FACTOR),
        }
    )
