import math
from typing import Any, Dict, Sequence

from vecgen.config.options import GenerationOptions
from vecgen.core.primitives import Circle, Ellipse, Group, Line, Polygon, Rect, Style
from vecgen.patterns.base import (
    COMMON_PARAMETERS,
    Pattern,
    PatternDefinition,
    PatternRegistry,
)


@PatternRegistry.register
class Grid(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="grid",
            description="Square grid of cells, each holding one of six shape variants",
            parameters=COMMON_PARAMETERS,
            category="geometric",
            tags=["grid", "tiles"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        complexity = params["complexity"]
        density = params["density"]
        stroke = params["stroke_color"]
        sw = params["stroke_weight"]
        op = params["opacity"]

        cells = max(2, math.floor(complexity * 1.5 + params["repetition"]))
        cell_w = self.width / cells
        cell_h = self.height / cells
        skip_threshold = 1 - density / 100
        element_count = 0

        for row in range(cells):
            for col in range(cells):
                if self.rng.random() < skip_threshold:
                    continue

                cx = col * cell_w + cell_w / 2
                cy = row * cell_h + cell_h / 2
                content = self.randint(0, 5)
                fill = self.fill(palette, params["fill_type"])
                es = min(cell_w, cell_h) * 0.4 * params["scale"] * self.uniform(0.7, 1.1)

                element_count += self._draw_cell(
                    parent, content, cx, cy, es, fill, stroke, sw, op, palette
                )

        if complexity > 4 and density > 30:
            line_style = dict(
                stroke=stroke, stroke_width=max(0.1, sw * 0.5), opacity=op * 0.2
            )
            for row in range(cells + 1):
                y = row * cell_h
                parent.add(Line(0, y, self.width, y, Style(**line_style)))
                element_count += 1
            for col in range(cells + 1):
                x = col * cell_w
                parent.add(Line(x, 0, x, self.height, Style(**line_style)))
                element_count += 1

        return {
            "element_count": element_count,
            "grid_size": f"{cells}x{cells}",
            "cell_count": cells * cells,
        }

    def _draw_cell(self, parent, content, cx, cy, es, fill, stroke, sw, op, palette) -> int:
        """Draw one cell variant and return how many elements it added"""
        style = Style(fill=fill, stroke=stroke, stroke_width=sw, opacity=op)

        if content == 0:
            parent.add(Circle(cx, cy, max(1, es), style))

        elif content == 1:
            w = es * 2 * self.uniform(0.8, 1.2)
            h = es * 2 * self.uniform(0.8, 1.2)
            style.transform = f"rotate({self.uniform(-20, 20):.2f} {cx:.2f} {cy:.2f})"
            parent.add(Rect(cx - w / 2, cy - h / 2, max(1, w), max(1, h), style))

        elif content == 2:
            angle = self.uniform(0, math.pi * 2)
            half = es
            parent.add(
                Line(
                    cx - math.cos(angle) * half,
                    cy - math.sin(angle) * half,
                    cx + math.cos(angle) * half,
                    cy + math.sin(angle) * half,
                    Style(
                        stroke=self.choice(palette, stroke),
                        stroke_width=sw * self.uniform(1, 3),
                        opacity=op,
                    ),
                )
            )

        elif content == 3:
            vertices = self.randint(3, 7)
            points = [
                (
                    cx + math.cos(i / vertices * math.pi * 2) * es,
                    cy + math.sin(i / vertices * math.pi * 2) * es,
                )
                for i in range(vertices)
            ]
            parent.add(Polygon(points, style))

        elif content == 4:
            rx = max(1, es * self.uniform(0.7, 1.3))
            ry = max(1, es * self.uniform(0.7, 1.3))
            parent.add(Ellipse(cx, cy, rx, ry, style))

        else:
            # Outlined circle with a filled square inside
            outer_r = es * 1.2
            parent.add(
                Circle(
                    cx,
                    cy,
                    max(1, outer_r),
                    Style(fill="none", stroke=stroke, stroke_width=sw * 0.5, opacity=op * 0.5),
                )
            )
            inner = outer_r * 0.6
            if inner > 1:
                parent.add(
                    Rect(
                        cx - inner / 2,
                        cy - inner / 2,
                        inner,
                        inner,
                        Style(fill=fill, stroke="none", opacity=op),
                    )
                )
                return 2

        return 1
