import math
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from vecgen.config.options import GenerationOptions, SpiralType
from vecgen.core.path_serializer import points_to_path_string
from vecgen.core.primitives import Circle, Ellipse, Group, Line, Path, Polygon, Rect, Style
from vecgen.patterns.base import (
    COMMON_PARAMETERS,
    Pattern,
    PatternDefinition,
    PatternRegistry,
    option_parameters,
)

PHI = (1 + math.sqrt(5)) / 2
GOLDEN_ANGLE = 2 * math.pi * (1 - 1 / PHI)


def spiral_points(
    spiral_type: str, a: float, b: float, max_radius: float, count: int
) -> List[Tuple[float, float]]:
    """Sample an archimedean (r = a + b*theta) or logarithmic (r = a*e^(b*theta)) spiral
    from theta = 0 until the radius reaches ``max_radius``"""
    count = max(2, count)
    if spiral_type == SpiralType.LOGARITHMIC.value and a > 0 and b > 0 and max_radius > a:
        theta_max = math.log(max_radius / a) / b
    elif spiral_type == SpiralType.ARCHIMEDEAN.value and b > 0 and max_radius > a:
        theta_max = (max_radius - a) / b
    else:
        theta_max = 8 * math.pi
    theta_max = min(max(theta_max, 2 * math.pi), 40 * math.pi)

    theta = np.linspace(0.0, theta_max, count)
    if spiral_type == SpiralType.LOGARITHMIC.value:
        radius = a * np.exp(b * theta)
    else:
        radius = a + b * theta
    radius = np.minimum(radius, max_radius)

    xs = radius * np.cos(theta)
    ys = radius * np.sin(theta)
    return list(zip(xs.tolist(), ys.tolist()))


@PatternRegistry.register
class Fibonacci(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="fibonacci",
            description="Phyllotaxis spiral of shapes placed at successive golden angles",
            parameters=COMMON_PARAMETERS
            + option_parameters(
                "spiral_type", "spiral_a", "spiral_b", "curve_smoothing", "spline_tension"
            ),
            category="mathematical",
            tags=["fibonacci", "golden ratio", "spiral"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        complexity = params["complexity"]
        density = params["density"]
        repetition = params["repetition"]
        stroke = params["stroke_color"]
        sw = params["stroke_weight"]
        op = params["opacity"]

        max_radius = min(self.width, self.height) * 0.45 * params["scale"]
        num_elements = max(10, math.floor(50 * complexity * (density / 100) * repetition))
        element_count = 0

        group = parent.group(transform=f"translate({self.width / 2:.2f}, {self.height / 2:.2f})")

        for i in range(num_elements):
            theta = i * GOLDEN_ANGLE
            distance = max_radius * math.sqrt(i / num_elements)
            x = distance * math.cos(theta)
            y = distance * math.sin(theta)
            size = max(1, max_radius * 0.1 * (1 - i / num_elements) * (complexity / 5))
            theta_deg = math.degrees(theta)

            style = Style(
                fill=self.fill(palette, params["fill_type"]),
                stroke=stroke,
                stroke_width=sw,
                opacity=op,
            )

            shape_type = i % self.randint(3, 6)
            if shape_type == 0:
                group.add(Circle(x, y, max(1, size), style))
            elif shape_type == 1:
                style.transform = f"rotate({theta_deg + self.uniform(-10, 10):.2f}, {x:.2f}, {y:.2f})"
                group.add(Rect(x - size / 2, y - size / 2, max(1, size), max(1, size), style))
            elif shape_type == 2:
                points = [
                    (
                        x + size * math.cos(theta + j * 2 * math.pi / 3),
                        y + size * math.sin(theta + j * 2 * math.pi / 3),
                    )
                    for j in range(3)
                ]
                group.add(Polygon(points, style))
            elif shape_type == 3:
                rx = max(1, size * self.uniform(0.8, 1.2))
                ry = max(1, size * self.uniform(0.5, 1))
                style.transform = f"rotate({theta_deg + self.uniform(-10, 10):.2f}, {x:.2f}, {y:.2f})"
                group.add(Ellipse(x, y, rx, ry, style))
            else:
                half = size
                group.add(
                    Line(
                        x - math.cos(theta) * half,
                        y - math.sin(theta) * half,
                        x + math.cos(theta) * half,
                        y + math.sin(theta) * half,
                        Style(
                            stroke=self.choice(palette, stroke),
                            stroke_width=sw * self.uniform(0.5, 1.5),
                            opacity=op,
                        ),
                    )
                )
            element_count += 1

        if complexity > 5 and density > 50 and repetition > 1:
            d = self._guide_path(params, num_elements, max_radius)
            if d:
                group.add(Path(d, Style(fill="none", stroke=stroke, stroke_width=sw * 0.5, opacity=0.4)))
                element_count += 1

        return {
            "element_count": element_count,
            "golden_ratio": f"{PHI:.8f}",
            "golden_angle_rad": f"{GOLDEN_ANGLE:.8f}",
            "num_elements_generated": num_elements,
            "spiral_type": params["spiral_type"],
        }

    def _guide_path(self, params: Dict[str, Any], num_elements: int, max_radius: float) -> str:
        step = max(1, math.floor(num_elements / (50 * params["repetition"])))
        golden = [
            (
                max_radius * math.sqrt(i / num_elements) * math.cos(i * GOLDEN_ANGLE),
                max_radius * math.sqrt(i / num_elements) * math.sin(i * GOLDEN_ANGLE),
            )
            for i in range(0, num_elements, step)
        ]

        if params["spiral_type"] == SpiralType.GOLDEN.value:
            points = golden
        else:
            points = spiral_points(
                params["spiral_type"],
                params["spiral_a"],
                params["spiral_b"],
                max_radius,
                max(len(golden), 50),
            )

        return points_to_path_string(
            points, params["curve_smoothing"], params["spline_tension"]
        )
