import logging
import math
from typing import Any, Dict, Sequence

import numpy as np

from vecgen.config.options import GenerationOptions
from vecgen.core.fills import NEUTRAL_COLORS
from vecgen.core.primitives import Circle, Ellipse, Group, Polygon, Rect, Style
from vecgen.patterns.base import (
    COMMON_PARAMETERS,
    Pattern,
    PatternDefinition,
    PatternRegistry,
)

logger = logging.getLogger(__name__)

X_MIN, X_MAX = -2.1, 0.6
Y_MIN, Y_MAX = -1.2, 1.2


def escape_counts(resolution: int, max_iter: int) -> np.ndarray:
    """Escape-time iteration counts for a resolution x resolution sample grid.

    Cell (row, col) samples c = x0 + i*y0 with x0 = X_MIN + (X_MAX - X_MIN) * col / res.
    Points that never escape get ``max_iter``.
    """
    steps = np.arange(resolution) / resolution
    c_re = np.broadcast_to(X_MIN + (X_MAX - X_MIN) * steps, (resolution, resolution))
    c_im = np.broadcast_to((Y_MIN + (Y_MAX - Y_MIN) * steps)[:, None], (resolution, resolution))

    zr = np.zeros((resolution, resolution))
    zi = np.zeros_like(zr)
    zr2 = np.zeros_like(zr)
    zi2 = np.zeros_like(zr)
    counts = np.zeros((resolution, resolution), dtype=int)
    active = np.ones((resolution, resolution), dtype=bool)

    for _ in range(max_iter):
        if not active.any():
            break
        zi[active] = 2 * zr[active] * zi[active] + c_im[active]
        zr[active] = zr2[active] - zi2[active] + c_re[active]
        zr2[active] = zr[active] * zr[active]
        zi2[active] = zi[active] * zi[active]
        counts[active] += 1
        active &= (zr2 + zi2) <= 4

    return counts


@PatternRegistry.register
class Mandelbrot(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="mandelbrot",
            description="Escape-time view of the Mandelbrot set drawn as a grid of shapes",
            parameters=COMMON_PARAMETERS,
            category="fractal",
            tags=["mandelbrot", "escape time"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        complexity = params["complexity"]
        stroke = params["stroke_color"]
        sw = max(0.1, params["stroke_weight"] * 0.5)
        op = params["opacity"]
        scale = params["scale"]

        resolution = max(10, min(150, math.floor(complexity * 10)))
        max_iter = math.floor(complexity * 15) + 20
        cell_w = self.width / resolution
        cell_h = self.height / resolution
        skip_threshold = 1 - params["density"] / 100

        logger.debug(f"Mandelbrot grid {resolution}x{resolution}, max iterations {max_iter}")
        counts = escape_counts(resolution, max_iter)
        element_count = 0

        for row in range(resolution):
            for col in range(resolution):
                if self.rng.random() < skip_threshold:
                    continue

                iterations = int(counts[row, col])
                if not 0 < iterations < max_iter:
                    continue

                norm = iterations / max_iter
                color = (
                    palette[math.floor(norm * (len(palette) - 1))] if palette else NEUTRAL_COLORS[0]
                )
                size = max(1, min(cell_w, cell_h) * 0.9 * (1 - norm) * scale)
                px = col * cell_w + cell_w / 2
                py = row * cell_h + cell_h / 2
                style = Style(fill=color, stroke=stroke, stroke_width=sw, opacity=op)

                shape_type = iterations % 4
                if shape_type == 0:
                    parent.add(Circle(px, py, max(1, size / 2), style))
                elif shape_type == 1:
                    parent.add(Rect(px - size / 2, py - size / 2, size, size, style))
                elif shape_type == 2:
                    style.transform = f"rotate({iterations * 5} {px:.2f} {py:.2f})"
                    parent.add(Ellipse(px, py, max(1, size / 2), max(1, size / 4), style))
                else:
                    half = size / 2
                    parent.add(
                        Polygon(
                            [(px, py - half), (px + half, py), (px, py + half), (px - half, py)],
                            style,
                        )
                    )
                element_count += 1

        return {
            "element_count": element_count,
            "resolution": resolution,
            "max_iterations": max_iter,
        }
