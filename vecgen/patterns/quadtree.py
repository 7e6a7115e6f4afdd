import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from vecgen.config.options import GenerationOptions
from vecgen.core.path_serializer import arc_command, fmt_point
from vecgen.core.primitives import Circle, Ellipse, Group, Line, Path, Polygon, Rect, Style
from vecgen.patterns.base import (
    COMMON_PARAMETERS,
    Pattern,
    PatternDefinition,
    PatternRegistry,
    option_parameters,
)

logger = logging.getLogger(__name__)


@dataclass
class _Quad:
    x: float
    y: float
    width: float
    height: float
    depth: int


@dataclass
class _Split:
    """A subdivided quad whose four children are still being visited"""

    quad: _Quad
    mid_x: float
    mid_y: float
    children: List[_Quad]
    next_child: int = 0


@PatternRegistry.register
class Quadtree(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="quadtree",
            description="Randomized quadtree subdivision with a shape in every leaf",
            parameters=COMMON_PARAMETERS + option_parameters("max_recursion"),
            category="fractal",
            tags=["quadtree", "subdivision"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        self._params = params
        self._palette = palette
        self._max_nodes = self.limit("max_nodes")
        self._count = 0
        self._deepest = -1
        self._cap_hit = False

        stack: List[_Split] = []
        split = self._visit(parent, _Quad(0, 0, self.width, self.height, 0))
        if split:
            stack.append(split)

        while stack:
            split = stack[-1]
            if split.next_child < len(split.children):
                child = split.children[split.next_child]
                split.next_child += 1
                child_split = self._visit(parent, child)
                if child_split:
                    stack.append(child_split)
                continue

            stack.pop()
            self._draw_dividers(parent, split)

        return {
            "element_count": self._count,
            "max_depth_reached": self._deepest + 1 if self._count else 0,
            "complexity": params["complexity"],
            "density": params["density"],
        }

    def _visit(self, parent: Group, quad: _Quad) -> Optional[_Split]:
        """Process one quad: either return its split or draw a leaf shape"""
        max_depth = self._params["max_recursion"]
        if quad.depth >= max_depth or quad.width < 2 or quad.height < 2:
            return None
        if self._count >= self._max_nodes:
            if not self._cap_hit:
                logger.warning(f"Node cap of {self._max_nodes} reached, stopping subdivision")
                self._cap_hit = True
            return None

        self._count += 1
        self._deepest = max(self._deepest, quad.depth)

        p = self._params
        subdivide_prob = (
            0.4
            + (p["complexity"] / 10) * 0.3
            + (p["density"] / 100) * 0.3
            - (quad.depth / max_depth) * 0.3
        )
        if self.rng.random() >= subdivide_prob:
            self._draw_leaf(parent, quad)
            return None

        x, y, w, h = quad.x, quad.y, quad.width, quad.height
        half_w, half_h = w / 2, h / 2
        mid_x = x + half_w + self.uniform(-half_w * 0.1, half_w * 0.1)
        mid_y = y + half_h + self.uniform(-half_h * 0.1, half_h * 0.1)
        mid_x = max(x + half_w * 0.5, min(x + half_w * 1.5, mid_x))
        mid_y = max(y + half_h * 0.5, min(y + half_h * 1.5, mid_y))

        d = quad.depth + 1
        children = [
            _Quad(x, y, mid_x - x, mid_y - y, d),
            _Quad(mid_x, y, x + w - mid_x, mid_y - y, d),
            _Quad(x, mid_y, mid_x - x, y + h - mid_y, d),
            _Quad(mid_x, mid_y, x + w - mid_x, y + h - mid_y, d),
        ]
        return _Split(quad, mid_x, mid_y, children)

    def _draw_dividers(self, parent: Group, split: _Split):
        p = self._params
        if not (p["complexity"] > 5 and p["density"] > 40):
            return
        if self._count + 2 > self._max_nodes:
            return

        q = split.quad
        style = dict(
            stroke=p["stroke_color"],
            stroke_width=max(0.1, p["stroke_weight"] * (0.8 - q.depth * 0.1)),
            opacity=max(0.05, 0.3 - q.depth * 0.05),
        )
        parent.add(Line(split.mid_x, q.y, split.mid_x, q.y + q.height, Style(**style)))
        parent.add(Line(q.x, split.mid_y, q.x + q.width, split.mid_y, Style(**style)))
        self._count += 2

    def _draw_leaf(self, parent: Group, quad: _Quad):
        p = self._params
        max_depth = p["max_recursion"]
        style = Style(
            fill=self.fill(self._palette, p["fill_type"]),
            stroke=p["stroke_color"],
            stroke_width=max(0.1, p["stroke_weight"] * (1 - quad.depth / max_depth)),
            opacity=max(0.1, p["opacity"] * (1 - quad.depth / (max_depth * 1.5))),
        )
        x, y, w, h = quad.x, quad.y, quad.width, quad.height
        cx, cy = x + w / 2, y + h / 2
        r = min(w, h) / 2 * 0.8 * p["scale"]

        leaf_type = self.randint(0, 4)
        if leaf_type == 0:
            parent.add(Rect(x + w * 0.1, y + h * 0.1, max(1, w * 0.8), max(1, h * 0.8), style))
        elif leaf_type == 1:
            parent.add(Circle(cx, cy, max(1, r), style))
        elif leaf_type == 2:
            ry = max(1, r * self.uniform(0.5, 1))
            style.transform = f"rotate({self.uniform(0, 90):.2f} {cx:.2f} {cy:.2f})"
            parent.add(Ellipse(cx, cy, max(1, r), ry, style))
        elif leaf_type == 3:
            sides = self.randint(3, 6)
            points = [
                (
                    cx + math.cos(i / sides * math.pi * 2) * r,
                    cy + math.sin(i / sides * math.pi * 2) * r,
                )
                for i in range(sides)
            ]
            parent.add(Polygon(points, style))
        else:
            start = self.uniform(0, math.pi * 2)
            end = start + self.uniform(math.pi / 2, math.pi * 1.5)
            start_pt = (cx + math.cos(start) * r, cy + math.sin(start) * r)
            end_pt = (cx + math.cos(end) * r, cy + math.sin(end) * r)
            d = f"M {fmt_point(start_pt)} " + arc_command(
                r, end_pt, large_arc=(end - start) >= math.pi, sweep=True
            )
            parent.add(
                Path(
                    d,
                    Style(
                        fill="none",
                        stroke=self.choice(self._palette, p["stroke_color"]),
                        stroke_width=style.stroke_width * 1.5,
                        opacity=style.opacity,
                    ),
                )
            )
