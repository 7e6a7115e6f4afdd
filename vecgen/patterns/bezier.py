import math
from typing import Any, Dict, Sequence

from vecgen.config.options import GenerationOptions
from vecgen.core.path_serializer import fmt_point
from vecgen.core.primitives import Group, Path, Style
from vecgen.patterns.base import (
    COMMON_PARAMETERS,
    Pattern,
    PatternDefinition,
    PatternRegistry,
    option_parameters,
)


@PatternRegistry.register
class Bezier(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="bezier",
            description="Random cubic Bezier curves, optionally anchored at captured points",
            parameters=COMMON_PARAMETERS
            + option_parameters("captured_x", "captured_y", "captured_vector"),
            category="curves",
            tags=["bezier", "curves"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        w, h = self.width, self.height
        vector = params["captured_vector"] or (None, None)

        num_curves = max(
            1,
            math.floor(
                params["complexity"] * (params["density"] / 100) * 5 * params["repetition"]
            ),
        )

        for _ in range(num_curves):
            x1 = self.uniform(0, w)
            y1 = self.uniform(0, h)
            x2 = self.uniform(0, w)
            y2 = self.uniform(0, h)
            c1 = (self.uniform(0, w), self.uniform(0, h))
            c2 = (self.uniform(0, w), self.uniform(0, h))

            start = (
                params["captured_x"] if params["captured_x"] is not None else x1,
                params["captured_y"] if params["captured_y"] is not None else y1,
            )
            end = (
                vector[0] if vector[0] is not None else x2,
                vector[1] if vector[1] is not None else y2,
            )

            d = f"M {fmt_point(start)} C {fmt_point(c1)}, {fmt_point(c2)}, {fmt_point(end)}"
            parent.add(
                Path(
                    d,
                    Style(
                        fill="none",
                        stroke=self.choice(palette, params["stroke_color"]),
                        stroke_width=max(0.5, params["stroke_weight"] * self.uniform(0.5, 2)),
                        opacity=params["opacity"] * self.uniform(0.5, 1),
                    ),
                )
            )

        return {"element_count": num_curves, "curves": num_curves, "type": "Cubic Bezier"}
