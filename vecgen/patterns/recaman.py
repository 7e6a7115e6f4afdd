import logging
import math
from typing import Any, Dict, List, Sequence

from vecgen.config.options import GenerationOptions
from vecgen.core.path_serializer import arc_command, fmt
from vecgen.core.primitives import Group, Path, Style
from vecgen.patterns.base import (
    COMMON_PARAMETERS,
    Pattern,
    PatternDefinition,
    PatternRegistry,
)

logger = logging.getLogger(__name__)


def recaman_sequence(num_terms: int, limit: float = 1e6) -> List[int]:
    """a(0) = 0; step back by n when the result is positive and unused, else forward"""
    if num_terms <= 0:
        return []
    sequence = [0]
    used = {0}
    for n in range(1, num_terms):
        previous = sequence[-1]
        backward = previous - n
        term = backward if backward > 0 and backward not in used else previous + n
        sequence.append(term)
        used.add(term)
        if term > limit:
            logger.warning("Recaman sequence exceeded limit, stopping early")
            break
    return sequence


@PatternRegistry.register
class Recaman(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="recaman",
            description="Recaman's sequence drawn as alternating semicircular arcs",
            parameters=COMMON_PARAMETERS,
            category="mathematical",
            tags=["recaman", "sequence", "arcs"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        num_terms = max(10, math.floor(params["complexity"] * 5 + params["density"] / 2))
        sequence = recaman_sequence(num_terms, self.limit("sequence_limit"))
        if len(sequence) <= 1:
            logger.warning("Recaman sequence too short to draw")
            return {"element_count": 0, "terms": len(sequence)}

        baseline = self.height / 2
        min_val = min(0, min(sequence))
        value_range = max(1, max(0, max(sequence)) - min_val)

        # Fit the sequence's span into 80% of the width
        effective_scale = params["scale"] * (self.width * 0.8 / value_range)
        drawing_width = value_range * effective_scale
        offset_x = (self.width - drawing_width) / 2 - min_val * effective_scale

        group = parent.group(
            transform=f"translate({fmt(offset_x)}, 0)",
            stroke=params["stroke_color"],
            stroke_width=params["stroke_weight"],
            opacity=params["opacity"],
            fill="none",
        )

        element_count = 0
        for n in range(1, len(sequence)):
            x1 = sequence[n - 1] * effective_scale
            x2 = sequence[n] * effective_scale
            radius = abs(x2 - x1) / 2
            if radius < 0.1:
                continue

            d = f"M {fmt(x1)} {fmt(baseline)} " + arc_command(
                radius, (x2, baseline), large_arc=False, sweep=bool(n % 2)
            )
            group.add(Path(d, Style(stroke=self.choice(palette, params["stroke_color"]))))
            element_count += 1

        return {"element_count": element_count, "sequence_name": "Recaman", "terms": len(sequence)}
