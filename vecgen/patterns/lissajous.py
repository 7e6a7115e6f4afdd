import math
from typing import Any, Dict, Sequence

import numpy as np

from vecgen.config.options import GenerationOptions
from vecgen.core.path_serializer import points_to_path_string
from vecgen.core.primitives import Group, Path, Style
from vecgen.patterns.base import (
    COMMON_PARAMETERS,
    Pattern,
    PatternDefinition,
    PatternRegistry,
    option_parameters,
)

DELTA_DIVISORS = [1, 2, 3, 4, 6, 8]


def lissajous_points(cx, cy, rx, ry, a, b, delta, steps, turns=1.0):
    """x = cx + rx*sin(a*t + delta), y = cy + ry*sin(b*t) for t in [0, 2*pi*turns]"""
    t = np.arange(steps + 1) / steps * math.pi * 2 * turns
    xs = cx + rx * np.sin(a * t + delta)
    ys = cy + ry * np.sin(b * t)
    return list(zip(xs.tolist(), ys.tolist()))


@PatternRegistry.register
class Lissajous(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="lissajous",
            description="Lissajous figures with random or fixed frequency ratios",
            parameters=COMMON_PARAMETERS
            + option_parameters(
                "lissajous_a",
                "lissajous_b",
                "lissajous_delta",
                "curve_steps",
                "curve_smoothing",
                "spline_tension",
            ),
            category="curves",
            tags=["lissajous", "harmonic"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        complexity = params["complexity"]
        repetition = params["repetition"]

        num_curves = max(1, math.floor(complexity * 0.5 * repetition))
        steps = max(50, math.floor(100 * (params["density"] / 100)) + 50)
        if params["curve_steps"] > 0:
            steps = params["curve_steps"]

        cx, cy = self.width / 2, self.height / 2
        rx = self.width * 0.4 * params["scale"]
        ry = self.height * 0.4 * params["scale"]
        max_freq = math.floor(complexity / 2) + 1
        element_count = 0

        for _ in range(num_curves):
            a = params["lissajous_a"]
            if a is None:
                a = self.randint(1, max_freq)
            b = params["lissajous_b"]
            if b is None:
                b = self.randint(1, max_freq)
            if params["lissajous_delta"] is not None:
                delta = math.pi * params["lissajous_delta"]
            else:
                delta = math.pi / self.choice(DELTA_DIVISORS)

            points = lissajous_points(cx, cy, rx, ry, a, b, delta, steps, max(1, repetition / 2))
            d = points_to_path_string(points, params["curve_smoothing"], params["spline_tension"])
            if not d:
                continue

            parent.add(
                Path(
                    d,
                    Style(
                        fill="none",
                        stroke=self.choice(palette, params["stroke_color"]),
                        stroke_width=max(0.5, params["stroke_weight"] * self.uniform(0.8, 1.2)),
                        opacity=params["opacity"] * self.uniform(0.7, 1),
                    ),
                )
            )
            element_count += 1

        return {"element_count": element_count, "curves": num_curves, "steps_per_curve": steps}
