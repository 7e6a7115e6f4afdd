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

WAVE_FUNCTIONS = ["sin", "cos", "tan"]
TAN_CLAMP = 5.0


def sample_wave(
    func: str,
    num_points: int,
    width: float,
    height: float,
    amplitude: float,
    frequency: float,
    phase: float,
    y_offset: float,
):
    """Sample num_points + 1 points of one wave across the width, clamped to the canvas"""
    t = np.arange(num_points + 1) / num_points
    xs = t * width

    if func == "tan":
        values = np.clip(np.tan(t * math.pi * frequency + phase), -TAN_CLAMP, TAN_CLAMP)
        ys = y_offset + values * amplitude * 0.2
    elif func == "cos":
        ys = y_offset + np.cos(t * math.pi * 2 * frequency + phase) * amplitude
    else:
        ys = y_offset + np.sin(t * math.pi * 2 * frequency + phase) * amplitude

    ys = np.clip(ys, 0, height)
    return list(zip(xs.tolist(), ys.tolist()))


@PatternRegistry.register
class TrigWaves(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="trig",
            description="Horizontal sin, cos and clamped tan waves",
            parameters=COMMON_PARAMETERS
            + option_parameters("curve_steps", "curve_smoothing", "spline_tension"),
            category="curves",
            tags=["waves", "trigonometry"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        complexity = params["complexity"]
        height = self.height

        num_waves = max(1, math.floor(complexity * params["repetition"]))
        points_per_wave = max(20, math.floor(100 * (params["density"] / 100)) + 10)
        if params["curve_steps"] > 0:
            points_per_wave = params["curve_steps"]

        element_count = 0
        for _ in range(num_waves):
            amplitude = self.uniform(height * 0.05, height * 0.4) * params["scale"]
            frequency = self.uniform(0.5, complexity / 2 + 0.5)
            phase = self.uniform(0, math.pi * 2)
            y_offset = self.uniform(amplitude, height - amplitude)
            func = self.choice(WAVE_FUNCTIONS)

            points = sample_wave(
                func, points_per_wave, self.width, height, amplitude, frequency, phase, y_offset
            )
            d = points_to_path_string(points, params["curve_smoothing"], params["spline_tension"])
            if not d:
                continue

            parent.add(
                Path(
                    d,
                    Style(
                        fill="none",
                        stroke=self.choice(palette, params["stroke_color"]),
                        stroke_width=max(0.5, params["stroke_weight"] * self.uniform(0.5, 1.5)),
                        opacity=params["opacity"] * self.uniform(0.7, 1),
                    ),
                )
            )
            element_count += 1

        return {
            "element_count": element_count,
            "waves": num_waves,
            "points_per_wave": points_per_wave,
            "smoothing": params["curve_smoothing"],
        }
