from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union

from vecgen.core.primitives import Primitive


@dataclass
class GradientStop:
    offset: float  # percent
    color: str
    opacity: float = 1.0


@dataclass
class LinearGradientDef:
    id: str
    x1: float  # all in percent
    y1: float
    x2: float
    y2: float
    stops: List[GradientStop] = field(default_factory=list)


@dataclass
class RadialGradientDef:
    id: str
    cx: float  # all in percent
    cy: float
    r: float
    fx: float
    fy: float
    stops: List[GradientStop] = field(default_factory=list)


@dataclass
class PatternDef:
    """Square tile in user space filled with a few primitives"""

    id: str
    size: float
    children: List[Primitive] = field(default_factory=list)


Definition = Union[LinearGradientDef, RadialGradientDef, PatternDef]


class DefinitionRegistry:
    """Per-pass map of generated id -> gradient or pattern definition"""

    def __init__(self):
        self._definitions: Dict[str, Definition] = {}
        self._counter = 0

    def next_id(self, prefix: str, salt: int = 0) -> str:
        self._counter += 1
        return f"{prefix}-{self._counter}-{salt}"

    def register(self, definition: Definition) -> str:
        """Store a definition and return its handle"""
        self._definitions[definition.id] = definition
        return self.handle(definition.id)

    @staticmethod
    def handle(definition_id: str) -> str:
        return f"url(#{definition_id})"

    def get(self, definition_id: str) -> Optional[Definition]:
        return self._definitions.get(definition_id)

    def clear(self):
        self._definitions.clear()
        self._counter = 0

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[Definition]:
        return iter(self._definitions.values())

    def __contains__(self, definition_id: str) -> bool:
        return definition_id in self._definitions
