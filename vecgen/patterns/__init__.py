"""
Pattern strategies for the generation engine.

Each pattern module contains one pattern class that is automatically
registered with the PatternRegistry when imported.
"""

# Import base pattern and registry
from vecgen.patterns.base import (
    Pattern,
    PatternContext,
    PatternDefinition,
    PatternRegistry,
)

# Import all patterns
from vecgen.patterns.bezier import Bezier
from vecgen.patterns.fibonacci import Fibonacci
from vecgen.patterns.grid import Grid
from vecgen.patterns.lines import Lines
from vecgen.patterns.lissajous import Lissajous
from vecgen.patterns.mandelbrot import Mandelbrot
from vecgen.patterns.padovan import Padovan, padovan_sequence
from vecgen.patterns.prime import Prime
from vecgen.patterns.quadtree import Quadtree
from vecgen.patterns.random_scatter import RandomScatter
from vecgen.patterns.recaman import Recaman, recaman_sequence
from vecgen.patterns.recursive import Recursive
from vecgen.patterns.rose import Rose
from vecgen.patterns.trig import TrigWaves

__all__ = [
    "Pattern",
    "PatternContext",
    "PatternDefinition",
    "PatternRegistry",
    "Bezier",
    "Fibonacci",
    "Grid",
    "Lines",
    "Lissajous",
    "Mandelbrot",
    "Padovan",
    "Prime",
    "Quadtree",
    "RandomScatter",
    "Recaman",
    "Recursive",
    "Rose",
    "TrigWaves",
    "padovan_sequence",
    "recaman_sequence",
]
