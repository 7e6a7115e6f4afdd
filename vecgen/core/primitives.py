from dataclasses import dataclass, field, replace
from typing import ClassVar, Iterator, List, Optional, Tuple

Point = Tuple[float, float]


@dataclass
class Style:
    """Presentation attributes shared by all primitives"""

    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[float] = None
    opacity: Optional[float] = None
    transform: Optional[str] = None


@dataclass
class Primitive:
    """Base class for all drawing primitives"""

    kind: ClassVar[str] = "primitive"

    def with_style(self, **changes) -> "Primitive":
        return replace(self, style=replace(self.style, **changes))


@dataclass
class Circle(Primitive):
    kind: ClassVar[str] = "circle"

    cx: float
    cy: float
    r: float
    style: Style = field(default_factory=Style)


@dataclass
class Rect(Primitive):
    kind: ClassVar[str] = "rect"

    x: float
    y: float
    width: float
    height: float
    style: Style = field(default_factory=Style)


@dataclass
class Ellipse(Primitive):
    kind: ClassVar[str] = "ellipse"

    cx: float
    cy: float
    rx: float
    ry: float
    style: Style = field(default_factory=Style)


@dataclass
class Line(Primitive):
    kind: ClassVar[str] = "line"

    x1: float
    y1: float
    x2: float
    y2: float
    style: Style = field(default_factory=Style)


@dataclass
class Polygon(Primitive):
    kind: ClassVar[str] = "polygon"

    points: List[Point]
    style: Style = field(default_factory=Style)


@dataclass
class Path(Primitive):
    kind: ClassVar[str] = "path"

    d: str
    style: Style = field(default_factory=Style)


@dataclass
class Text(Primitive):
    """Plain text, used for the diagnostic element of a failed pass"""

    kind: ClassVar[str] = "text"

    x: float
    y: float
    text: str
    font_size: float = 16
    style: Style = field(default_factory=Style)


@dataclass
class Group(Primitive):
    kind: ClassVar[str] = "group"

    children: List[Primitive] = field(default_factory=list)
    id: Optional[str] = None
    style: Style = field(default_factory=Style)

    def add(self, child: Primitive) -> Primitive:
        """Append a child and return it"""
        self.children.append(child)
        return child

    def group(self, id: Optional[str] = None, **style) -> "Group":
        """Create, append and return a nested group"""
        return self.add(Group(id=id, style=Style(**style)))

    def walk(self) -> Iterator[Primitive]:
        """Depth-first iteration over every descendant (groups included)"""
        for child in self.children:
            yield child
            if isinstance(child, Group):
                yield from child.walk()

    def leaves(self) -> Iterator[Primitive]:
        """Depth-first iteration over non-group descendants"""
        for child in self.walk():
            if not isinstance(child, Group):
                yield child

    def count_leaves(self) -> int:
        return sum(1 for _ in self.leaves())
