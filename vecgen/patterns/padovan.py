import logging
import math
from typing import Any, Dict, List, Sequence

from vecgen.config.options import GenerationOptions
from vecgen.core.primitives import Group, Line, Style
from vecgen.patterns.base import (
    COMMON_PARAMETERS,
    Pattern,
    PatternDefinition,
    PatternRegistry,
)

logger = logging.getLogger(__name__)

TURN = 2 * math.pi / 3


def padovan_sequence(num_terms: int, limit: float = 1e6) -> List[int]:
    """P(0..2) = 1 and P(n) = P(n-2) + P(n-3); stops after the first term above ``limit``"""
    sequence = [1, 1, 1][: max(0, num_terms)]
    for n in range(3, num_terms):
        sequence.append(sequence[n - 2] + sequence[n - 3])
        if sequence[n] > limit:
            logger.warning("Padovan sequence exceeded limit, stopping early")
            break
    return sequence


@PatternRegistry.register
class Padovan(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="padovan",
            description="Spiral of line segments with Padovan-sequence lengths turning 120 degrees",
            parameters=COMMON_PARAMETERS,
            category="mathematical",
            tags=["padovan", "sequence", "spiral"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        num_terms = max(10, math.floor(params["complexity"] * 3 + params["density"] / 5) + 5)
        sequence = padovan_sequence(num_terms, self.limit("sequence_limit"))
        if len(sequence) <= 3:
            logger.warning("Padovan sequence too short to draw")
            return {"element_count": 0, "terms": len(sequence)}

        size_scale = params["scale"] * 5
        x, y = self.width / 2, self.height / 2
        angle = 0.0

        group = parent.group(
            stroke=params["stroke_color"],
            stroke_width=params["stroke_weight"],
            opacity=params["opacity"],
        )

        element_count = 0
        for term in sequence[3:]:
            length = max(1, term * size_scale)
            next_x = x + length * math.cos(angle)
            next_y = y + length * math.sin(angle)
            group.add(
                Line(x, y, next_x, next_y, Style(stroke=self.choice(palette, params["stroke_color"])))
            )
            element_count += 1
            x, y = next_x, next_y
            angle += TURN

        return {"element_count": element_count, "sequence_name": "Padovan", "terms": len(sequence)}
