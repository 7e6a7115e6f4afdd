import math
from typing import Any, Dict, Sequence

from vecgen.config.options import GenerationOptions
from vecgen.core.primitives import Circle, Group, Polygon, Rect, Style
from vecgen.patterns.base import (
    COMMON_PARAMETERS,
    Pattern,
    PatternDefinition,
    PatternRegistry,
)


@PatternRegistry.register
class RandomScatter(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="random",
            description="Randomly placed circles, rotated rectangles and irregular polygons",
            parameters=COMMON_PARAMETERS,
            category="geometric",
            tags=["random", "shapes"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        complexity = params["complexity"]
        scale = params["scale"]

        num_shapes = max(
            3, math.floor(complexity * (params["density"] / 100) * 20 * params["repetition"])
        )
        element_count = 0

        for _ in range(num_shapes):
            shape_type = self.rng.random()
            style = Style(
                fill=self.fill(palette, params["fill_type"]),
                stroke=params["stroke_color"],
                stroke_width=params["stroke_weight"],
                opacity=params["opacity"],
            )

            if shape_type < 0.3:
                radius = self.uniform(5, 30 * complexity * scale)
                cx = self.uniform(0, self.width)
                cy = self.uniform(0, self.height)
                parent.add(Circle(cx, cy, max(1, radius), style))

            elif shape_type < 0.6:
                rect_w = self.uniform(10, 50 * complexity * scale)
                rect_h = self.uniform(10, 50 * complexity * scale)
                # Keep the rectangle inside the viewport
                x = self.uniform(0, max(0, self.width - rect_w))
                y = self.uniform(0, max(0, self.height - rect_h))
                angle = self.uniform(-30, 30)
                style.transform = f"rotate({angle:.2f} {x + rect_w / 2:.2f} {y + rect_h / 2:.2f})"
                parent.add(Rect(x, y, max(1, rect_w), max(1, rect_h), style))

            else:
                num_points = self.randint(3, 7)
                cx = self.uniform(0, self.width)
                cy = self.uniform(0, self.height)
                base_radius = self.uniform(10, 40 * complexity * scale)
                points = []
                for j in range(num_points):
                    angle = (j / num_points) * math.pi * 2 + self.uniform(-0.1, 0.1)
                    r = base_radius * self.uniform(0.8, 1.2)
                    points.append((cx + math.cos(angle) * r, cy + math.sin(angle) * r))
                parent.add(Polygon(points, style))

            element_count += 1

        return {
            "element_count": element_count,
            "complexity": complexity,
            "density": params["density"],
            "repetition": params["repetition"],
        }
