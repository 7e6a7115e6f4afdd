import math
import re
from dataclasses import dataclass, asdict, fields, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple


class PatternType(Enum):
    LINES = "lines"
    RANDOM = "random"
    RECURSIVE = "recursive"
    GRID = "grid"
    QUADTREE = "quadtree"
    FIBONACCI = "fibonacci"
    MANDELBROT = "mandelbrot"
    PRIME = "prime"
    TRIG = "trig"
    BEZIER = "bezier"
    LISSAJOUS = "lissajous"
    PADOVAN = "padovan"
    RECAMAN = "recaman"
    ROSE = "rose"


class FillType(Enum):
    SOLID = "solid"
    GRADIENT = "gradient"
    PATTERN = "pattern"
    NONE = "none"


class CurveSmoothing(Enum):
    STRAIGHT = "straight"
    CUBIC = "cubic"
    QUADRATIC = "quadratic"


class AnimationType(Enum):
    PULSE = "pulse"
    ROTATE = "rotate"
    OPACITY = "opacity"
    MORPH = "morph"


class SpiralType(Enum):
    GOLDEN = "golden"
    ARCHIMEDEAN = "archimedean"
    LOGARITHMIC = "logarithmic"


@dataclass
class Parameter:
    """Definition of a generation parameter"""

    name: str
    type: Callable[[Any], Any]
    default: Any
    min_value: Optional[Any] = None
    max_value: Optional[Any] = None
    description: str = ""
    choices: Optional[List[Any]] = None


def parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1", "on")
    return bool(value)


def optional_float(value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


_HEX_COLOR = re.compile(r"^#?([0-9A-Fa-f]{6})$")


def parse_color(value: Any) -> str:
    """Normalize '#rrggbb' / 'rrggbb' to '#RRGGBB'"""
    match = _HEX_COLOR.match(str(value).strip())
    if not match:
        raise ValueError(f"Invalid hex color: {value!r}")
    return "#" + match.group(1).upper()


def parse_vector(value: Any) -> Optional[Tuple[Optional[float], Optional[float]]]:
    if value is None:
        return None
    if isinstance(value, Mapping):
        x, y = value.get("x"), value.get("y")
    else:
        x, y = value
    x, y = optional_float(x), optional_float(y)
    if x is None and y is None:
        return None
    return (x, y)


def coerce_value(param: Parameter, value: Any) -> Any:
    """Convert a raw value for one parameter, falling back to its default"""
    if value is None:
        return param.default

    # Type conversion
    try:
        value = param.type(value)
    except (ValueError, TypeError):
        value = param.default

    # NaN slips past the range checks below
    if isinstance(value, float) and not math.isfinite(value):
        value = param.default

    if value is None:
        return value

    if param.choices is not None and value not in param.choices:
        value = param.default

    # Range validation
    if param.min_value is not None and value < param.min_value:
        value = param.min_value
    if param.max_value is not None and value > param.max_value:
        value = param.max_value

    return value


def _enum_values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


OPTION_PARAMETERS: List[Parameter] = [
    Parameter("pattern_type", str, "random", description="Pattern generator tag"),
    Parameter("complexity", float, 5.0, 1.0, 10.0, "Overall pattern complexity"),
    Parameter("density", float, 50.0, 1.0, 100.0, "Fill density in percent"),
    Parameter("repetition", float, 1.0, 1.0, 10.0, "Repetition multiplier"),
    Parameter("max_recursion", int, 5, 1, 12, "Maximum recursion depth"),
    Parameter("stroke_weight", float, 1.0, 0.1, 20.0, "Base stroke width"),
    Parameter("scale", float, 1.0, 0.05, 5.0, "Element scale"),
    Parameter("opacity", float, 0.8, 0.0, 1.0, "Base element opacity"),
    Parameter("layer_count", int, 1, 1, 10, "Number of composited layers"),
    Parameter("rose_n", float, 4.0, 0.1, 20.0, "Rose curve n (fractional allowed)"),
    Parameter("curve_steps", int, 0, 0, 5000, "Sample count override for curves"),
    Parameter("offset_x", float, 0.0, -2000.0, 2000.0, "Per-layer X offset"),
    Parameter("offset_y", float, 0.0, -2000.0, 2000.0, "Per-layer Y offset"),
    Parameter("global_angle", float, 0.0, -360.0, 360.0, "Layer rotation in degrees"),
    Parameter("line_spacing", float, 20.0, 1.0, 500.0, "Base spacing between lines"),
    Parameter("line_spacing_ratio", float, 1.0, 0.5, 2.0, "Spacing growth ratio"),
    Parameter("line_spacing_invert", parse_bool, False, description="Reverse spacing growth"),
    Parameter("line_wave_amplitude", float, 0.0, 0.0, 200.0, "Wave amplitude of lines"),
    Parameter("line_wave_frequency", float, 1.0, 0.0, 20.0, "Waves along each line"),
    Parameter("line_arc_amount", float, 0.0, -300.0, 300.0, "Bow of each line in px"),
    Parameter("lissajous_a", optional_float, None, 0.5, 20.0, "Fixed Lissajous a"),
    Parameter("lissajous_b", optional_float, None, 0.5, 20.0, "Fixed Lissajous b"),
    Parameter("lissajous_delta", optional_float, None, 0.0, 2.0, "Phase as multiple of pi"),
    Parameter(
        "spiral_type",
        str,
        SpiralType.GOLDEN.value,
        description="Guide spiral for the phyllotaxis pattern",
        choices=_enum_values(SpiralType),
    ),
    Parameter("spiral_a", float, 5.0, 0.0, 500.0, "Spiral start radius"),
    Parameter("spiral_b", float, 0.2, 0.0, 50.0, "Spiral growth rate"),
    Parameter("spline_tension", float, 0.5, 0.0, 1.0, "Catmull-Rom tension"),
    Parameter(
        "curve_smoothing",
        str,
        CurveSmoothing.STRAIGHT.value,
        description="Curve smoothing mode",
        choices=_enum_values(CurveSmoothing) + ["cubic_bezier", "quadratic_bezier"],
    ),
    Parameter("viewport_width", int, 800, 10, 10000, "Canvas width"),
    Parameter("viewport_height", int, 600, 10, 10000, "Canvas height"),
    Parameter("captured_x", optional_float, None, description="Captured X coordinate"),
    Parameter("captured_y", optional_float, None, description="Captured Y coordinate"),
    Parameter("captured_vector", parse_vector, None, description="Captured (x, y) vector"),
    Parameter("pointer_x", optional_float, None, description="Current pointer X"),
    Parameter("pointer_y", optional_float, None, description="Current pointer Y"),
    Parameter("use_time", parse_bool, True, description="Mix time of day into the seed"),
    Parameter("use_cursor", parse_bool, False, description="Mix coordinates into the seed"),
    Parameter("color_category", str, "", description="Palette category"),
    Parameter("color_palette", str, "", description="Palette selector"),
    Parameter(
        "fill_type",
        str,
        FillType.SOLID.value,
        description="Fill mode",
        choices=_enum_values(FillType),
    ),
    Parameter("stroke_color", parse_color, "#000000", description="Stroke color"),
    Parameter("bg_color", parse_color, "#FFFFFF", description="Background color"),
    Parameter("animation", parse_bool, False, description="Animate after generating"),
    Parameter(
        "animation_type",
        str,
        AnimationType.PULSE.value,
        description="Animation applied to every element",
        choices=_enum_values(AnimationType),
    ),
    Parameter("seed_override", str, "", description="Explicit seed (number or text)"),
]

PARAMETERS_BY_NAME: Dict[str, Parameter] = {p.name: p for p in OPTION_PARAMETERS}

# Keys whose camelCase spelling does not map onto the field name
KEY_ALIASES = {
    "roseNParam": "rose_n",
    "capturedV": "captured_vector",
    "curvesmoothing": "curve_smoothing",
    "splinetension": "spline_tension",
    "lissajousa": "lissajous_a",
    "lissajousb": "lissajous_b",
    "lissajousdelta": "lissajous_delta",
    "spiraltype": "spiral_type",
    "spirala": "spiral_a",
    "spiralb": "spiral_b",
    "mouseX": "pointer_x",
    "mouseY": "pointer_y",
    "width": "viewport_width",
    "height": "viewport_height",
    "seed": "seed_override",
    "pattern": "pattern_type",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def normalize_key(key: str) -> str:
    if key in KEY_ALIASES:
        return KEY_ALIASES[key]
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


@dataclass(frozen=True)
class GenerationOptions:
    """Immutable set of knobs for one generation pass"""

    pattern_type: str = "random"
    complexity: float = 5.0
    density: float = 50.0
    repetition: float = 1.0
    max_recursion: int = 5
    stroke_weight: float = 1.0
    scale: float = 1.0
    opacity: float = 0.8
    layer_count: int = 1
    rose_n: float = 4.0
    curve_steps: int = 0
    offset_x: float = 0.0
    offset_y: float = 0.0
    global_angle: float = 0.0
    line_spacing: float = 20.0
    line_spacing_ratio: float = 1.0
    line_spacing_invert: bool = False
    line_wave_amplitude: float = 0.0
    line_wave_frequency: float = 1.0
    line_arc_amount: float = 0.0
    lissajous_a: Optional[float] = None
    lissajous_b: Optional[float] = None
    lissajous_delta: Optional[float] = None
    spiral_type: str = SpiralType.GOLDEN.value
    spiral_a: float = 5.0
    spiral_b: float = 0.2
    spline_tension: float = 0.5
    curve_smoothing: str = CurveSmoothing.STRAIGHT.value
    viewport_width: int = 800
    viewport_height: int = 600
    captured_x: Optional[float] = None
    captured_y: Optional[float] = None
    captured_vector: Optional[Tuple[Optional[float], Optional[float]]] = None
    pointer_x: Optional[float] = None
    pointer_y: Optional[float] = None
    use_time: bool = True
    use_cursor: bool = False
    color_category: str = ""
    color_palette: str = ""
    fill_type: str = FillType.SOLID.value
    stroke_color: str = "#000000"
    bg_color: str = "#FFFFFF"
    animation: bool = False
    animation_type: str = AnimationType.PULSE.value
    seed_override: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]] = None) -> "GenerationOptions":
        """Build validated options from loose (camelCase or snake_case) values"""
        raw: Dict[str, Any] = {}
        for key, value in (data or {}).items():
            name = normalize_key(str(key))
            if name in PARAMETERS_BY_NAME:
                raw[name] = value

        validated = {
            param.name: coerce_value(param, raw.get(param.name))
            for param in OPTION_PARAMETERS
        }
        validated["pattern_type"] = str(validated["pattern_type"]).strip().lower()
        validated["seed_override"] = str(validated["seed_override"]).strip()
        return cls(**validated)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def with_changes(self, **changes) -> "GenerationOptions":
        return replace(self, **changes)

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


DEFAULT_OPTIONS = GenerationOptions()
