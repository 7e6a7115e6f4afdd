"""
Animation modifiers.

Each modifier class is registered with the ModifierRegistry when imported.
"""

from vecgen.modifiers.base import (
    AnimationFrame,
    Modifier,
    ModifierDefinition,
    ModifierRegistry,
)
from vecgen.modifiers.animation import (
    Morph,
    Opacity,
    Pulse,
    Rotate,
    bounding_box,
    modifier_for,
)

__all__ = [
    "AnimationFrame",
    "Modifier",
    "ModifierDefinition",
    "ModifierRegistry",
    "Morph",
    "Opacity",
    "Pulse",
    "Rotate",
    "bounding_box",
    "modifier_for",
]
