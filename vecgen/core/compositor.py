"""
Layer compositor: the entry point of one generation pass.

A pass derives the seed, resolves the palette, then runs the selected pattern
strategy once per layer with decaying parameters. Any exception raised inside
the pass is caught here and turned into a diagnostic text element.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from vecgen.config.options import GenerationOptions, PatternType
from vecgen.config.settings import Settings
from vecgen.core.definitions import DefinitionRegistry
from vecgen.core.fills import FillResolver
from vecgen.core.palettes import load_palettes, resolve_palette
from vecgen.core.primitives import Group, Rect, Style, Text
from vecgen.core.seeding import create_rng, derive_seed
from vecgen.patterns import PatternContext, PatternRegistry

logger = logging.getLogger(__name__)

WHITE = "#FFFFFF"
MIN_LAYER_SCALE = 0.05


@dataclass
class LayerResult:
    index: int
    element_count: int
    metrics: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GenerationResult:
    """Everything one pass produced: the primitive tree, its definitions and stats"""

    root: Group
    definitions: DefinitionRegistry
    options: GenerationOptions
    palette: List[str]
    seed: float
    seed_used: str
    layers: List[LayerResult] = field(default_factory=list)
    background: Optional[Rect] = None
    error: Optional[str] = None
    generation_count: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def width(self) -> int:
        return self.options.viewport_width

    @property
    def height(self) -> int:
        return self.options.viewport_height

    @property
    def total_elements(self) -> int:
        return sum(layer.element_count for layer in self.layers)

    @property
    def ok(self) -> bool:
        return self.error is None

    def summary(self) -> Dict[str, Any]:
        """Pass-level statistics record"""
        if self.error is not None:
            return {
                "generator": self.options.pattern_type,
                "layers": 0,
                "viewport": f"{self.width}x{self.height}",
                "total_elements": 0,
                "details": {},
                "seed_used": self.seed_used,
                "error": self.error,
            }
        return {
            "generator": self.options.pattern_type,
            "layers": self.options.layer_count,
            "viewport": f"{self.width}x{self.height}",
            "total_elements": self.total_elements,
            "details": {f"Layer_{layer.index}": layer.metrics for layer in self.layers},
            "seed_used": self.seed_used,
        }


def layer_options(options: GenerationOptions, index: int) -> GenerationOptions:
    """Options for layer ``index``; layers after the first are sparser and fainter"""
    if index == 0:
        return options
    return options.with_changes(
        complexity=max(1.0, options.complexity - index * 1.5),
        density=max(1.0, options.density - index * 15),
        stroke_weight=max(0.1, options.stroke_weight * (1 - index * 0.25)),
        opacity=max(0.1, options.opacity * (1 - index * 0.2)),
        scale=max(MIN_LAYER_SCALE, options.scale * (1 - index * 0.15)),
    )


def layer_transform(options: GenerationOptions, index: int) -> str:
    w, h = options.viewport_width, options.viewport_height
    return (
        f"rotate({options.global_angle:g}, {w / 2:g}, {h / 2:g}) "
        f"translate({index * options.offset_x:g}, {index * options.offset_y:g})"
    )


class LayerCompositor:
    """Runs generation passes and keeps the pass counter"""

    def __init__(
        self,
        settings: Optional[Dict[str, Any]] = None,
        palettes: Optional[Dict[str, Any]] = None,
        animation_driver=None,
    ):
        self.settings = dict(Settings.DEFAULT_CONFIG)
        self.settings.update(settings or {})
        if palettes is None:
            palettes = load_palettes(self.settings.get("palette_file") or None)
        self.palettes = palettes
        self.animation_driver = animation_driver
        self.generation_count = 0

    def generate(
        self,
        options: GenerationOptions,
        now_ms: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> GenerationResult:
        """Run one pass. Never raises for engine errors."""
        if self.animation_driver is not None:
            self.animation_driver.stop()

        registry = DefinitionRegistry()
        root = Group(id="vecgen-root")
        seed, seed_description = derive_seed(options, now_ms=now_ms, now=now)
        rng = create_rng(seed)

        result = GenerationResult(
            root=root,
            definitions=registry,
            options=options,
            palette=[],
            seed=seed,
            seed_used=seed_description,
        )

        if options.bg_color and options.bg_color.upper() != WHITE:
            result.background = root.add(
                Rect(0, 0, options.viewport_width, options.viewport_height, Style(fill=options.bg_color))
            )

        try:
            result.palette = resolve_palette(
                self.palettes, options.color_category, options.color_palette, rng
            )
            self._run_layers(result, rng)
        except Exception as e:
            logger.exception(f"Error during generation of {options.pattern_type!r}")
            self._fail(result, e)
            return result

        self.generation_count += 1
        result.generation_count = self.generation_count
        logger.info(
            f"Generated {options.pattern_type} with {result.total_elements} elements "
            f"across {options.layer_count} layer(s)"
        )

        if options.animation and self.animation_driver is not None:
            self.animation_driver.start(result, now_ms=now_ms)

        return result

    def _run_layers(self, result: GenerationResult, rng):
        options = result.options
        pattern_class = PatternRegistry.get_pattern(options.pattern_type)
        if pattern_class is None:
            logger.warning(
                f"Unknown pattern type {options.pattern_type!r}, falling back to random"
            )
            pattern_class = PatternRegistry.get_pattern(PatternType.RANDOM.value)

        context = PatternContext(
            width=options.viewport_width,
            height=options.viewport_height,
            rng=rng,
            fills=FillResolver(rng, result.definitions),
            limits=self.settings,
        )
        pattern = pattern_class(context)

        for index in range(options.layer_count):
            layer_group = result.root.group(
                id=f"layer-{index}", transform=layer_transform(options, index)
            )
            metrics = pattern.generate(layer_group, layer_options(options, index), result.palette)
            if not isinstance(metrics, dict):
                metrics = {"error": "Pattern returned an invalid result"}
            count = metrics.get("element_count", 0) or 0
            result.layers.append(LayerResult(index, int(count), metrics))

    def _fail(self, result: GenerationResult, error: Exception):
        """Replace the partial tree with a diagnostic and zero the statistics"""
        result.error = str(error) or error.__class__.__name__
        result.layers = []
        result.definitions.clear()
        result.root.children = [result.background] if result.background else []
        result.root.add(
            Text(
                10,
                50,
                f"Error: {result.error}",
                font_size=16,
                style=Style(fill="red"),
            )
        )
