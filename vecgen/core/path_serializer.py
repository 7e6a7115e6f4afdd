"""
Point sequence to SVG path data.

Coordinates are always written with two decimals so identical inputs give
byte-identical output.
"""

import logging
from typing import Iterable, List, Sequence, Tuple

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

STRAIGHT = "straight"
CUBIC = "cubic"
QUADRATIC = "quadratic"

_MODE_ALIASES = {
    "cubic_bezier": CUBIC,
    "quadratic_bezier": QUADRATIC,
}


def fmt(value: float) -> str:
    text = f"{value:.2f}"
    return "0.00" if text == "-0.00" else text


def fmt_point(point: Point) -> str:
    return f"{fmt(point[0])} {fmt(point[1])}"


def normalize_mode(mode: str) -> str:
    mode = (mode or STRAIGHT).lower()
    return _MODE_ALIASES.get(mode, mode)


def points_to_path_string(
    points: Sequence[Point],
    smoothing: str = STRAIGHT,
    tension: float = 0.5,
    close_path: bool = False,
) -> str:
    """Convert points into a path 'd' string.

    Args:
        points: Ordered (x, y) pairs
        smoothing: 'straight', 'cubic' (Catmull-Rom) or 'quadratic'
        tension: Catmull-Rom tension used by 'cubic'
        close_path: Append 'Z'

    Returns:
        Path data, or "" when there are fewer than two points
    """
    if not points or len(points) < 2:
        return ""

    mode = normalize_mode(smoothing)
    d = f"M {fmt_point(points[0])}"

    if mode == CUBIC:
        d += "".join(catmull_rom_segments(points, tension))
    else:
        if mode == QUADRATIC:
            logger.warning("Quadratic smoothing not supported, using straight lines")
        elif mode != STRAIGHT:
            logger.warning(f"Unknown smoothing mode {smoothing!r}, using straight lines")
        d += "".join(f" L {fmt_point(p)}" for p in points[1:])

    if close_path:
        d += " Z"

    return d


def catmull_rom_segments(points: Sequence[Point], tension: float = 0.5) -> List[str]:
    """One cubic Bezier 'C' segment per span, endpoints duplicated for tangents"""
    if len(points) < 2:
        return []
    if tension is None:
        tension = 0.5

    pts = [points[0], *points, points[-1]]
    segments = []
    for i in range(1, len(pts) - 2):
        p0, p1, p2, p3 = pts[i - 1], pts[i], pts[i + 1], pts[i + 2]

        # Tangents at both span endpoints
        tx1 = (p2[0] - p0[0]) * tension
        ty1 = (p2[1] - p0[1]) * tension
        tx2 = (p3[0] - p1[0]) * tension
        ty2 = (p3[1] - p1[1]) * tension

        cp1 = (p1[0] + tx1 / 3, p1[1] + ty1 / 3)
        cp2 = (p2[0] - tx2 / 3, p2[1] - ty2 / 3)
        segments.append(f" C {fmt_point(cp1)}, {fmt_point(cp2)}, {fmt_point(p2)}")
    return segments


def arc_command(
    radius: float, end: Point, large_arc: bool = False, sweep: bool = True
) -> str:
    """Elliptical arc with equal radii and explicit large-arc/sweep flags"""
    return (
        f"A {fmt(radius)} {fmt(radius)} 0 {1 if large_arc else 0} "
        f"{1 if sweep else 0} {fmt_point(end)}"
    )


def polygon_points(points: Iterable[Point]) -> str:
    """'x,y x,y ...' list for polygon primitives"""
    return " ".join(f"{fmt(x)},{fmt(y)}" for x, y in points)
