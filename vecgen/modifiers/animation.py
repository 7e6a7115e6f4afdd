import math
import re
from dataclasses import replace
from typing import Any, Dict, List, Tuple

from vecgen.config.options import Parameter
from vecgen.core.primitives import (
    Circle,
    Ellipse,
    Line,
    Path,
    Polygon,
    Primitive,
    Rect,
    Text,
)
from vecgen.modifiers.base import (
    AnimationFrame,
    Modifier,
    ModifierDefinition,
    ModifierRegistry,
)

BBox = Tuple[float, float, float, float]

_PATH_TOKEN = re.compile(r"[MLCAZmlcaz]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_ROTATE = re.compile(r"rotate\([^)]*\)")

# Numbers consumed per command repetition, and which of them are x,y pairs
_PATH_ARITY = {"M": (2, [(0, 1)]), "L": (2, [(0, 1)]), "C": (6, [(0, 1), (2, 3), (4, 5)]), "A": (7, [(5, 6)])}


def path_points(d: str) -> List[Tuple[float, float]]:
    """Absolute anchor and control points of an M/L/C/A/Z path"""
    points = []
    command = None
    numbers: List[float] = []
    for token in _PATH_TOKEN.findall(d or ""):
        if token.isalpha():
            command = token.upper()
            numbers = []
            continue
        if command not in _PATH_ARITY:
            continue
        numbers.append(float(token))
        arity, pairs = _PATH_ARITY[command]
        if len(numbers) == arity:
            points.extend((numbers[i], numbers[j]) for i, j in pairs)
            numbers = []
    return points


def _bbox_of(points) -> BBox:
    if not points:
        return (0.0, 0.0, 0.0, 0.0)
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


def bounding_box(primitive: Primitive) -> BBox:
    """(x, y, width, height) in the primitive's own coordinates, ignoring its transform"""
    if isinstance(primitive, Circle):
        return (primitive.cx - primitive.r, primitive.cy - primitive.r, 2 * primitive.r, 2 * primitive.r)
    if isinstance(primitive, Rect):
        return (primitive.x, primitive.y, primitive.width, primitive.height)
    if isinstance(primitive, Ellipse):
        return (primitive.cx - primitive.rx, primitive.cy - primitive.ry, 2 * primitive.rx, 2 * primitive.ry)
    if isinstance(primitive, Line):
        return _bbox_of([(primitive.x1, primitive.y1), (primitive.x2, primitive.y2)])
    if isinstance(primitive, Polygon):
        return _bbox_of(primitive.points)
    if isinstance(primitive, Path):
        return _bbox_of(path_points(primitive.d))
    if isinstance(primitive, Text):
        return (primitive.x, primitive.y, 0.0, 0.0)
    return (0.0, 0.0, 0.0, 0.0)


def bbox_center(primitive: Primitive) -> Tuple[float, float]:
    x, y, w, h = bounding_box(primitive)
    return (x + w / 2, y + h / 2)


def _wave(frame: AnimationFrame) -> Tuple[float, float]:
    angle = frame.element_phase * math.pi * 2
    return math.sin(angle), math.cos(angle)


@ModifierRegistry.register
class Pulse(Modifier):
    """Breathing size change around each element's center"""

    @classmethod
    def definition(cls) -> ModifierDefinition:
        return ModifierDefinition(
            name="pulse",
            description="Grow and shrink elements",
            parameters=[
                Parameter(
                    name="amount",
                    type=float,
                    default=0.1,
                    min_value=0.0,
                    max_value=1.0,
                    description="Relative size change at full complexity",
                )
            ],
            tags=["size", "pulse"],
        )

    def apply(self, primitive, frame, params):
        params = self.validate_params(params)
        sin_phase, _ = _wave(frame)
        factor = 1 + sin_phase * params["amount"] * frame.complexity_factor

        if isinstance(primitive, Circle):
            return replace(primitive, r=max(1, primitive.r * factor))
        if isinstance(primitive, (Rect, Ellipse)):
            cx, cy = bbox_center(primitive)
            transform = (
                f"translate({cx:.2f} {cy:.2f}) scale({factor:.4f}) "
                f"translate({-cx:.2f} {-cy:.2f})"
            )
            return primitive.with_style(transform=transform)
        return primitive


@ModifierRegistry.register
class Rotate(Modifier):
    @classmethod
    def definition(cls) -> ModifierDefinition:
        return ModifierDefinition(
            name="rotate",
            description="Spin elements about their centers at one of three speeds",
            parameters=[],
            tags=["rotation"],
        )

    def apply(self, primitive, frame, params):
        base = _ROTATE.sub("", primitive.style.transform or "").strip()
        cx, cy = bbox_center(primitive)
        angle = frame.phase * 360 * (frame.index % 3 + 1)
        rotation = f"rotate({angle:.2f}, {cx:.2f}, {cy:.2f})"
        return primitive.with_style(transform=f"{base} {rotation}".strip())


@ModifierRegistry.register
class Opacity(Modifier):
    @classmethod
    def definition(cls) -> ModifierDefinition:
        return ModifierDefinition(
            name="opacity",
            description="Fade elements in and out",
            parameters=[
                Parameter(
                    name="floor",
                    type=float,
                    default=0.1,
                    min_value=0.0,
                    max_value=1.0,
                    description="Lowest opacity reached",
                )
            ],
            tags=["fade"],
        )

    def apply(self, primitive, frame, params):
        params = self.validate_params(params)
        _, cos_phase = _wave(frame)
        target = frame.base_opacity * (0.5 + (cos_phase + 1) * 0.25)
        return primitive.with_style(opacity=max(params["floor"], min(1.0, target)))


@ModifierRegistry.register
class Morph(Modifier):
    @classmethod
    def definition(cls) -> ModifierDefinition:
        return ModifierDefinition(
            name="morph",
            description="Swell and thin element outlines",
            parameters=[
                Parameter(
                    name="amount",
                    type=float,
                    default=0.3,
                    min_value=0.0,
                    max_value=1.0,
                    description="Relative stroke width change at full complexity",
                )
            ],
            tags=["stroke"],
        )

    def apply(self, primitive, frame, params):
        params = self.validate_params(params)
        stroke_width = primitive.style.stroke_width
        if stroke_width is None or stroke_width <= 0:
            return primitive
        sin_phase, _ = _wave(frame)
        factor = 1 + sin_phase * params["amount"] * frame.complexity_factor
        return primitive.with_style(stroke_width=max(0.1, stroke_width * factor))


def modifier_for(animation_type: str) -> Modifier:
    modifier_class = ModifierRegistry.get_modifier(animation_type)
    if modifier_class is None:
        raise ValueError(f"Unknown animation type: {animation_type!r}")
    return modifier_class()


def modifier_params(animation_type: str) -> Dict[str, Any]:
    """Default parameters for a registered modifier"""
    definition = ModifierRegistry.get_modifier(animation_type).definition()
    return {p.name: p.default for p in definition.parameters}
