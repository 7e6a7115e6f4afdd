import logging
import random
from typing import List, Optional, Sequence

from vecgen.config.options import FillType
from vecgen.core.definitions import (
    DefinitionRegistry,
    GradientStop,
    LinearGradientDef,
    PatternDef,
    RadialGradientDef,
)
from vecgen.core.primitives import Circle, Line, Polygon, Primitive, Rect, Style
from vecgen.core.seeding import pick, randint_between

logger = logging.getLogger(__name__)

NEUTRAL_COLORS = ["#555555", "#888888", "#BBBBBB"]

GRADIENT_CHANCE = 0.4
PATTERN_CHANCE = 0.8
LINEAR_CHANCE = 0.7


class FillResolver:
    """Chooses a fill for one shape and registers gradient/pattern definitions.

    All randomness comes from the injected ``rng`` so that a pass with a
    fixed seed yields identical fills and identical definition ids.
    """

    def __init__(self, rng: random.Random, registry: Optional[DefinitionRegistry]):
        self.rng = rng
        self.registry = registry

    def _uniform(self, low: float, high: float) -> float:
        return low + self.rng.random() * (high - low)

    def _salt(self) -> int:
        return randint_between(self.rng, 1000, 9999)

    def resolve(self, palette: Sequence[str], fill_type: str = FillType.SOLID.value) -> str:
        """Return a fill value: "none", a hex color or a ``url(#id)`` handle"""
        if fill_type == FillType.NONE.value:
            return "none"

        colors = list(palette) if palette else []
        if not colors:
            logger.debug("Empty palette for fill, using neutral colors")
            colors = list(NEUTRAL_COLORS)

        chance = self.rng.random()

        if self.registry is None:
            if fill_type in (FillType.GRADIENT.value, FillType.PATTERN.value):
                logger.debug("No definition registry, falling back to solid fill")
            return pick(self.rng, colors)

        if fill_type == FillType.GRADIENT.value and chance < GRADIENT_CHANCE:
            return self.gradient(colors)
        if (
            fill_type == FillType.PATTERN.value
            and GRADIENT_CHANCE <= chance < PATTERN_CHANCE
        ):
            return self.pattern(colors)

        return pick(self.rng, colors)

    def gradient(self, palette: Sequence[str]) -> str:
        """Register a linear (70%) or radial gradient and return its handle"""
        if len(palette) < 2:
            return palette[0] if palette else NEUTRAL_COLORS[0]

        def_id = self.registry.next_id("gradient", self._salt())

        if self.rng.random() < LINEAR_CHANCE:
            definition = LinearGradientDef(
                id=def_id,
                x1=randint_between(self.rng, 0, 100),
                y1=randint_between(self.rng, 0, 100),
                x2=randint_between(self.rng, 0, 100),
                y2=randint_between(self.rng, 0, 100),
            )
        else:
            definition = RadialGradientDef(
                id=def_id,
                cx=randint_between(self.rng, 25, 75),
                cy=randint_between(self.rng, 25, 75),
                r=randint_between(self.rng, 50, 150),
                fx=randint_between(self.rng, 25, 75),
                fy=randint_between(self.rng, 25, 75),
            )

        definition.stops = self._gradient_stops(palette)
        return self.registry.register(definition)

    def _gradient_stops(self, palette: Sequence[str]) -> List[GradientStop]:
        num_stops = randint_between(self.rng, 2, min(4, len(palette)))
        used = set()
        stops = []
        for i in range(num_stops):
            color = pick(self.rng, palette)
            # Prefer colors not used yet when there are enough to go around
            if len(palette) > num_stops:
                attempts = 0
                while color in used and attempts < 10:
                    color = pick(self.rng, palette)
                    attempts += 1
            used.add(color)

            offset = int(i / (num_stops - 1) * 100)
            stops.append(GradientStop(offset, color, self._uniform(0.7, 1.0)))
        return stops

    def pattern(self, palette: Sequence[str]) -> str:
        """Register a small tiled motif and return its handle"""
        def_id = self.registry.next_id("pattern", self._salt())
        size = randint_between(self.rng, 8, 25)
        children: List[Primitive] = []

        if self.rng.random() < 0.5:
            children.append(
                Rect(
                    0,
                    0,
                    size,
                    size,
                    Style(fill=pick(self.rng, palette), opacity=self._uniform(0.1, 0.3)),
                )
            )

        stroke = pick(self.rng, palette)
        fill = pick(self.rng, palette)
        if len(palette) > 1:
            attempts = 0
            while fill == stroke and attempts < 10:
                fill = pick(self.rng, palette)
                attempts += 1
        stroke_width = self._uniform(0.5, 1.5)

        motif = randint_between(self.rng, 0, 5)
        children.extend(self._motif(motif, size, stroke, fill, stroke_width))

        return self.registry.register(PatternDef(id=def_id, size=size, children=children))

    def _motif(
        self, motif: int, size: float, stroke: str, fill: str, stroke_width: float
    ) -> List[Primitive]:
        half = size / 2
        lined = Style(stroke=stroke, stroke_width=stroke_width)

        if motif == 0:  # dots
            r = max(1.0, size * 0.15)
            return [Circle(half, half, r, Style(fill=fill))]

        if motif == 1:  # horizontal lines, sometimes a cross
            shapes: List[Primitive] = [Line(0, half, size, half, lined)]
            if self.rng.random() < 0.4:
                shapes.append(Line(half, 0, half, size, lined))
            return shapes

        if motif == 2:  # diagonals
            shapes = [Line(0, 0, size, size, lined)]
            if self.rng.random() < 0.4:
                shapes.append(Line(size, 0, 0, size, lined))
            return shapes

        if motif == 3:  # checkerboard
            return [
                Rect(0, 0, half, half, Style(fill=fill)),
                Rect(half, half, half, half, Style(fill=fill)),
            ]

        if motif == 4:  # triangles
            shapes = [Polygon([(0, size), (half, 0), (size, size)], Style(fill=fill))]
            if self.rng.random() < 0.5:
                shapes.append(
                    Polygon(
                        [(0, 0), (half, size), (size, 0)],
                        Style(fill="none", stroke=stroke, stroke_width=stroke_width),
                    )
                )
            return shapes

        # centered shape
        if self.rng.random() < 0.5:
            return [Circle(half, half, size * 0.3, Style(fill=fill))]
        inset = size * 0.25
        return [Rect(inset, inset, half, half, Style(fill=fill))]
