import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from vecgen.config.options import GenerationOptions
from vecgen.core.primitives import Circle, Group, Rect, Style
from vecgen.patterns.base import (
    COMMON_PARAMETERS,
    Pattern,
    PatternDefinition,
    PatternRegistry,
    option_parameters,
)

logger = logging.getLogger(__name__)


@dataclass
class _Node:
    shape: str  # "circle" or "rect"
    x: float
    y: float
    size: float
    depth: int


@dataclass
class _Frame:
    """A drawn node whose children are still being spawned"""

    node: _Node
    num_children: int
    child_size: float
    next_child: int = 0


@PatternRegistry.register
class Recursive(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="recursive",
            description="A shape that spawns smaller copies of itself around its edge",
            parameters=COMMON_PARAMETERS + option_parameters("max_recursion"),
            category="fractal",
            tags=["recursive", "branching"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        max_depth = params["max_recursion"]
        max_nodes = self.limit("max_nodes")

        initial_size = min(self.width, self.height) * 0.4 * params["scale"]
        start_x = self.width / 2 + self.uniform(-self.width * 0.1, self.width * 0.1)
        start_y = self.height / 2 + self.uniform(-self.height * 0.1, self.height * 0.1)
        shape = "circle" if self.rng.random() < 0.5 else "rect"

        self._count = 0
        self._deepest = -1
        self._cap_hit = False

        stack: List[_Frame] = []
        frame = self._visit(parent, _Node(shape, start_x, start_y, initial_size, 0), params, palette, max_nodes)
        if frame:
            stack.append(frame)

        # Same visiting order as call recursion: one child is fully
        # explored before the next sibling's position is drawn
        while stack:
            frame = stack[-1]
            if frame.next_child >= frame.num_children:
                stack.pop()
                continue

            node = frame.node
            i = frame.next_child
            frame.next_child += 1

            angle = (i / frame.num_children) * math.pi * 2 + self.uniform(-0.3, 0.3)
            distance = node.size * 0.6 * self.uniform(0.7, 1.3)
            if self.rng.random() < 0.6:
                child_shape = node.shape
            else:
                child_shape = "rect" if node.shape == "circle" else "circle"

            child = _Node(
                child_shape,
                node.x + math.cos(angle) * distance,
                node.y + math.sin(angle) * distance,
                frame.child_size,
                node.depth + 1,
            )
            child_frame = self._visit(parent, child, params, palette, max_nodes)
            if child_frame:
                stack.append(child_frame)

        return {
            "element_count": self._count,
            "recursion_depth_reached": self._deepest + 1 if self._count else 0,
            "complexity": params["complexity"],
        }

    def _visit(self, parent, node: _Node, params, palette, max_nodes):
        """Draw one node and return its frame, or None when it is a leaf"""
        max_depth = params["max_recursion"]
        if node.depth >= max_depth:
            return None
        if self._count >= max_nodes:
            if not self._cap_hit:
                logger.warning(f"Node cap of {max_nodes} reached, stopping recursion")
                self._cap_hit = True
            return None

        self._count += 1
        self._deepest = max(self._deepest, node.depth)

        stroke_width = max(0.1, params["stroke_weight"] * (1 - node.depth / (max_depth * 1.5)))
        opacity = max(0.1, params["opacity"] * (1 - node.depth / (max_depth * 2)))
        style = Style(
            fill=self.fill(palette, params["fill_type"]),
            stroke=params["stroke_color"],
            stroke_width=stroke_width,
            opacity=opacity,
        )

        if node.shape == "circle":
            parent.add(Circle(node.x, node.y, max(1, node.size / 2), style))
        else:
            side = max(1, node.size)
            style.transform = f"rotate({self.uniform(-10, 10):.2f} {node.x:.2f} {node.y:.2f})"
            parent.add(Rect(node.x - node.size / 2, node.y - node.size / 2, side, side, style))

        num_children = self.randint(2, max(2, math.floor(params["complexity"] / 1.5)))
        scale_factor = max(0.1, (0.6 - node.depth * 0.05) * (params["density"] / 150 + 0.4))
        child_size = node.size * scale_factor
        if child_size < 1:
            return None

        return _Frame(node, num_children, child_size)
