from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from vecgen.config.options import Parameter, coerce_value
from vecgen.core.primitives import Primitive


@dataclass
class ModifierDefinition:
    """Definition of an animation modifier"""

    name: str
    description: str
    parameters: List[Parameter]
    category: str = "animation"
    tags: List[str] = field(default_factory=list)


@dataclass
class AnimationFrame:
    """Timing and base values for animating one element in one frame"""

    phase: float  # cycle phase shared by all elements, in [0, 1)
    element_phase: float  # phase shifted by the element's position in the list
    index: int
    count: int
    complexity_factor: float = 0.5
    base_opacity: float = 0.8
    base_stroke_weight: float = 1.0


class Modifier(ABC):
    """Base class for animation modifiers.

    A modifier is a pure function of (base primitive, frame): it returns a new
    primitive and never mutates its input.
    """

    @classmethod
    @abstractmethod
    def definition(cls) -> ModifierDefinition:
        """Return the modifier definition"""
        pass

    @abstractmethod
    def apply(
        self, primitive: Primitive, frame: AnimationFrame, params: Dict[str, Any]
    ) -> Primitive:
        """Apply the modifier to one primitive

        Args:
            primitive: The element as generated
            frame: Phase and base values for this element
            params: Modifier parameters

        Returns:
            The animated copy (or the input itself when nothing changes)
        """
        pass

    def validate_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Validate and fill in default parameters"""
        definition = self.definition()
        return {
            param.name: coerce_value(param, params.get(param.name, param.default))
            for param in definition.parameters
        }


class ModifierRegistry:
    """Registry for animation modifiers"""

    _modifiers: Dict[str, Type[Modifier]] = {}

    @classmethod
    def register(cls, modifier_class: Type[Modifier]):
        """Register a modifier class"""
        definition = modifier_class.definition()
        cls._modifiers[definition.name] = modifier_class
        return modifier_class

    @classmethod
    def get_modifier(cls, name: str) -> Optional[Type[Modifier]]:
        """Get a modifier class by name"""
        return cls._modifiers.get(name)

    @classmethod
    def list_modifiers(cls) -> List[ModifierDefinition]:
        """List all registered modifiers"""
        return [
            modifier_class.definition() for modifier_class in cls._modifiers.values()
        ]
