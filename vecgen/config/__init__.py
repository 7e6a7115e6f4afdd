from vecgen.config.options import (
    GenerationOptions,
    DEFAULT_OPTIONS,
    Parameter,
    PatternType,
    FillType,
    CurveSmoothing,
    AnimationType,
    SpiralType,
)
from vecgen.config.settings import Settings

__all__ = [
    "GenerationOptions",
    "DEFAULT_OPTIONS",
    "Parameter",
    "PatternType",
    "FillType",
    "CurveSmoothing",
    "AnimationType",
    "SpiralType",
    "Settings",
]
