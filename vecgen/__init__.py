"""Procedural SVG pattern generator"""

from vecgen.config.options import GenerationOptions, DEFAULT_OPTIONS, Parameter
from vecgen.config.settings import Settings
from vecgen.patterns.base import Pattern, PatternDefinition, PatternRegistry
from vecgen.modifiers.base import Modifier, ModifierRegistry
from vecgen.core.compositor import GenerationResult, LayerCompositor

__version__ = "1.0.0"

__all__ = [
    "GenerationOptions",
    "DEFAULT_OPTIONS",
    "Parameter",
    "Settings",
    "Pattern",
    "PatternDefinition",
    "PatternRegistry",
    "Modifier",
    "ModifierRegistry",
    "GenerationResult",
    "LayerCompositor",
]
