import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type

from vecgen.config.options import (
    GenerationOptions,
    Parameter,
    PARAMETERS_BY_NAME,
    PatternType,
    coerce_value,
)
from vecgen.config.settings import Settings
from vecgen.core.fills import FillResolver
from vecgen.core.primitives import Group
from vecgen.core.seeding import pick, randint_between

logger = logging.getLogger(__name__)


@dataclass
class PatternDefinition:
    """Definition of a pattern and its parameters"""

    name: str
    description: str
    parameters: List[Parameter]
    category: str = "misc"
    tags: List[str] = field(default_factory=list)


@dataclass
class PatternContext:
    """Per-pass canvas, randomness source, fill resolver and engine limits"""

    width: float
    height: float
    rng: random.Random
    fills: FillResolver
    limits: Dict[str, Any] = field(default_factory=lambda: dict(Settings.DEFAULT_CONFIG))


def option_parameters(*names: str) -> List[Parameter]:
    """Look up shared option parameters by field name"""
    return [PARAMETERS_BY_NAME[name] for name in names]


# Knobs nearly every strategy reads
COMMON_PARAMETERS = option_parameters(
    "complexity",
    "density",
    "repetition",
    "stroke_weight",
    "scale",
    "opacity",
    "fill_type",
    "stroke_color",
)


class Pattern(ABC):
    """Base class for all pattern strategies"""

    def __init__(self, context: PatternContext):
        self.context = context
        self.width = context.width
        self.height = context.height
        self.rng = context.rng
        self.fills = context.fills

    @classmethod
    @abstractmethod
    def definition(cls) -> PatternDefinition:
        """Return the pattern definition"""
        pass

    @abstractmethod
    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        """Draw the pattern into ``parent``

        Returns:
            Statistics dict, always with an ``element_count`` key
        """
        pass

    def validate_params(self, options: Any) -> Dict[str, Any]:
        """Read every declared parameter from options, filling in defaults"""
        definition = self.definition()
        validated = {}

        for param in definition.parameters:
            if isinstance(options, Mapping):
                value = options.get(param.name, param.default)
            else:
                value = getattr(options, param.name, param.default)
            validated[param.name] = coerce_value(param, value)

        return validated

    def limit(self, name: str) -> int:
        return int(self.context.limits.get(name, Settings.DEFAULT_CONFIG[name]))

    # Randomness helpers, all drawing from the pass RNG

    def uniform(self, low: float, high: float) -> float:
        return low + self.rng.random() * (high - low)

    def randint(self, low: float, high: float) -> int:
        return randint_between(self.rng, low, high)

    def choice(self, items: Sequence[Any], default: Any = None) -> Any:
        return pick(self.rng, items, default)

    def fill(self, palette: Sequence[str], fill_type: str) -> str:
        return self.fills.resolve(palette, fill_type)


# Pattern registry
class PatternRegistry:
    _patterns: Dict[str, Type[Pattern]] = {}

    @classmethod
    def register(cls, pattern_class: Type[Pattern]):
        """Register a pattern class under its PatternType value"""
        definition = pattern_class.definition()
        pattern_type = PatternType(definition.name)
        cls._patterns[pattern_type.value] = pattern_class
        return pattern_class

    @classmethod
    def get_pattern(cls, name: str) -> Optional[Type[Pattern]]:
        """Get a pattern class by name"""
        return cls._patterns.get(str(name).lower())

    @classmethod
    def list_patterns(cls) -> List[PatternDefinition]:
        """List all registered patterns"""
        return [pattern_class.definition() for pattern_class in cls._patterns.values()]

    @classmethod
    def get_pattern_definition(cls, name: str) -> Optional[PatternDefinition]:
        """Get a pattern definition by name"""
        pattern_class = cls.get_pattern(name)
        if pattern_class:
            return pattern_class.definition()
        return None
