import math
from typing import Any, Dict, List, Sequence

import numpy as np

from vecgen.config.options import GenerationOptions
from vecgen.core.path_serializer import points_to_path_string
from vecgen.core.primitives import Group, Line, Path, Style
from vecgen.patterns.base import (
    Pattern,
    PatternDefinition,
    PatternRegistry,
    option_parameters,
)

DEFAULT_CURVE_STEPS = 60


def line_offsets(draw_width: float, spacing: float, ratio: float = 1.0, invert: bool = False) -> List[float]:
    """Offsets of successive lines from the left edge of the draw area.

    Gaps grow geometrically by ``ratio`` (never below 1px); ``invert`` runs the
    progression from the far edge instead.
    """
    gaps = []
    gap = max(1.0, spacing)
    total = 0.0
    while total + gap < draw_width:
        gaps.append(gap)
        total += gap
        gap = max(1.0, gap * ratio)

    if invert:
        gaps.reverse()

    offsets = [0.0]
    for g in gaps:
        offsets.append(offsets[-1] + g)
    return offsets


def curved_line_points(x, y_start, y_end, amplitude, frequency, arc_amount, steps):
    """Vertical line from y_start to y_end displaced by a sine wave and a bow"""
    t = np.linspace(0.0, 1.0, steps + 1)
    xs = x + amplitude * np.sin(2 * math.pi * frequency * t) + arc_amount * np.sin(math.pi * t)
    ys = y_start + (y_end - y_start) * t
    return list(zip(xs.tolist(), ys.tolist()))


@PatternRegistry.register
class Lines(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="lines",
            description="Field of parallel lines with optional spacing progression, waves and bow",
            parameters=option_parameters(
                "stroke_weight",
                "opacity",
                "stroke_color",
                "global_angle",
                "line_spacing",
                "line_spacing_ratio",
                "line_spacing_invert",
                "line_wave_amplitude",
                "line_wave_frequency",
                "line_arc_amount",
                "curve_steps",
                "curve_smoothing",
                "spline_tension",
            ),
            category="geometric",
            tags=["lines", "op art"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        w, h = self.width, self.height
        spacing = max(1, params["line_spacing"])

        diagonal = math.sqrt(w * w + h * h)
        draw_width = diagonal * 1.2
        start_x = w / 2 - draw_width / 2
        start_y = h / 2 - draw_width / 2
        end_y = h / 2 + draw_width / 2

        amplitude = params["line_wave_amplitude"]
        arc_amount = params["line_arc_amount"]
        curved = amplitude > 0 or arc_amount != 0
        steps = params["curve_steps"] or DEFAULT_CURVE_STEPS

        group = parent.group(
            transform=f"rotate({params['global_angle']} {w / 2:.2f} {h / 2:.2f})",
            fill="none" if curved else None,
            stroke=params["stroke_color"],
            stroke_width=params["stroke_weight"],
            opacity=params["opacity"],
        )

        offsets = line_offsets(
            draw_width, spacing, params["line_spacing_ratio"], params["line_spacing_invert"]
        )
        for offset in offsets:
            x = start_x + offset
            stroke = self.choice(palette, params["stroke_color"])
            if curved:
                points = curved_line_points(
                    x, start_y, end_y, amplitude, params["line_wave_frequency"], arc_amount, steps
                )
                d = points_to_path_string(points, params["curve_smoothing"], params["spline_tension"])
                group.add(Path(d, Style(stroke=stroke)))
            else:
                group.add(Line(x, start_y, x, end_y, Style(stroke=stroke)))

        return {
            "element_count": len(offsets),
            "spacing": spacing,
            "spacing_ratio": params["line_spacing_ratio"],
            "curved": curved,
        }
