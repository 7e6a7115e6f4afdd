import logging
from typing import Any, Dict, Iterable, Optional

import svgwrite

from vecgen.core.definitions import (
    DefinitionRegistry,
    LinearGradientDef,
    PatternDef,
    RadialGradientDef,
)
from vecgen.core.primitives import (
    Circle,
    Ellipse,
    Group,
    Line,
    Path,
    Polygon,
    Primitive,
    Rect,
    Style,
    Text,
)

logger = logging.getLogger(__name__)


def _num(value: float) -> float:
    """Two decimals, with -0.0 folded to 0.0"""
    value = round(float(value), 2)
    return 0.0 if value == 0 else value


def _pct(value: float) -> str:
    return f"{value:g}%"


def style_attributes(style: Style) -> Dict[str, Any]:
    """svgwrite keyword arguments for the set fields of a style"""
    attrs: Dict[str, Any] = {}
    if style.fill is not None:
        attrs["fill"] = style.fill
    if style.stroke is not None:
        attrs["stroke"] = style.stroke
    if style.stroke_width is not None:
        attrs["stroke_width"] = _num(style.stroke_width)
    if style.opacity is not None:
        attrs["opacity"] = _num(style.opacity)
    if style.transform:
        attrs["transform"] = style.transform
    return attrs


def build_element(dwg: svgwrite.Drawing, primitive: Primitive):
    """Convert one primitive (recursively for groups) into an svgwrite element"""
    attrs = style_attributes(primitive.style)

    if isinstance(primitive, Group):
        if primitive.id:
            attrs["id"] = primitive.id
        group = dwg.g(**attrs)
        for child in primitive.children:
            group.add(build_element(dwg, child))
        return group
    if isinstance(primitive, Circle):
        return dwg.circle(center=(_num(primitive.cx), _num(primitive.cy)), r=_num(primitive.r), **attrs)
    if isinstance(primitive, Rect):
        return dwg.rect(
            insert=(_num(primitive.x), _num(primitive.y)),
            size=(_num(primitive.width), _num(primitive.height)),
            **attrs,
        )
    if isinstance(primitive, Ellipse):
        return dwg.ellipse(
            center=(_num(primitive.cx), _num(primitive.cy)),
            r=(_num(primitive.rx), _num(primitive.ry)),
            **attrs,
        )
    if isinstance(primitive, Line):
        return dwg.line(
            start=(_num(primitive.x1), _num(primitive.y1)),
            end=(_num(primitive.x2), _num(primitive.y2)),
            **attrs,
        )
    if isinstance(primitive, Polygon):
        return dwg.polygon(points=[(_num(x), _num(y)) for x, y in primitive.points], **attrs)
    if isinstance(primitive, Path):
        return dwg.path(d=primitive.d, **attrs)
    if isinstance(primitive, Text):
        return dwg.text(
            primitive.text,
            insert=(_num(primitive.x), _num(primitive.y)),
            font_size=f"{primitive.font_size:g}px",
            font_family="sans-serif",
            **attrs,
        )
    raise TypeError(f"Unsupported primitive: {primitive!r}")


def build_definitions(dwg: svgwrite.Drawing, definitions: Iterable):
    for definition in definitions:
        if isinstance(definition, LinearGradientDef):
            element = dwg.linearGradient(
                start=(_pct(definition.x1), _pct(definition.y1)),
                end=(_pct(definition.x2), _pct(definition.y2)),
                id=definition.id,
            )
        elif isinstance(definition, RadialGradientDef):
            element = dwg.radialGradient(
                center=(_pct(definition.cx), _pct(definition.cy)),
                r=_pct(definition.r),
                focal=(_pct(definition.fx), _pct(definition.fy)),
                id=definition.id,
            )
        elif isinstance(definition, PatternDef):
            element = dwg.pattern(
                size=(definition.size, definition.size),
                id=definition.id,
                patternUnits="userSpaceOnUse",
            )
            for child in definition.children:
                element.add(build_element(dwg, child))
            dwg.defs.add(element)
            continue
        else:
            logger.warning(f"Skipping unknown definition {definition!r}")
            continue

        for stop in definition.stops:
            element.add_stop_color(
                offset=_pct(stop.offset), color=stop.color, opacity=_num(stop.opacity)
            )
        dwg.defs.add(element)


def to_drawing(
    root: Group,
    width: float,
    height: float,
    definitions: Optional[DefinitionRegistry] = None,
) -> svgwrite.Drawing:
    dwg = svgwrite.Drawing(size=(width, height), debug=False)
    dwg.viewbox(0, 0, width, height)
    if definitions:
        build_definitions(dwg, definitions)
    for child in root.children:
        dwg.add(build_element(dwg, child))
    return dwg


def to_svg(result, root: Optional[Group] = None) -> str:
    """Serialize a GenerationResult (or an animation frame's ``root``) to SVG text"""
    tree = root if root is not None else result.root
    dwg = to_drawing(tree, result.width, result.height, result.definitions)
    return dwg.tostring()
