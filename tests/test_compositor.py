"""
Tests for vecgen/core/compositor.py
Full generation passes: seeding, layers, failure handling
"""

import random
from datetime import datetime

import pytest

from vecgen.config.options import GenerationOptions
from vecgen.core.animation import AnimationDriver, FrameLoop
from vecgen.core.compositor import LayerCompositor, layer_options, layer_transform
from vecgen.core.primitives import Group, Rect, Text
from vecgen.core.svg_writer import to_svg
from vecgen.patterns.grid import Grid

FIXED_NOW_MS = 1_700_000_000_000
FIXED_NOW = datetime(2024, 1, 1, 12, 0, 0)


class TestDeterminism:
    """Same seed, same document."""

    def test_same_seed_same_svg(self, compositor, make_options):
        options = make_options(patternType="grid", complexity=6, density=80, fillType="gradient")
        first = to_svg(compositor.generate(options))
        second = to_svg(LayerCompositor().generate(options))
        assert first == second

    @pytest.mark.parametrize("pattern", ["random", "recursive", "quadtree", "fibonacci", "lines"])
    def test_same_seed_multi_layer(self, compositor, make_options, pattern):
        options = make_options(patternType=pattern, layerCount=3, fillType="pattern")
        assert to_svg(compositor.generate(options)) == to_svg(compositor.generate(options))

    @pytest.mark.parametrize(
        "pattern", ["grid", "random", "recursive", "fibonacci", "mandelbrot", "prime", "trig"]
    )
    def test_nan_knob_uses_default(self, compositor, make_options, pattern):
        result = compositor.generate(make_options(patternType=pattern, complexity="nan"))
        assert result.error is None
        assert to_svg(result) == to_svg(compositor.generate(make_options(patternType=pattern)))

    def test_string_seed(self, compositor, make_options):
        options = make_options(patternType="rose", seed="hello world")
        assert to_svg(compositor.generate(options)) == to_svg(compositor.generate(options))

    def test_different_seeds_differ(self, compositor, make_options):
        a = compositor.generate(make_options(patternType="random", seed="1"))
        b = compositor.generate(make_options(patternType="random", seed="2"))
        assert to_svg(a) != to_svg(b)

    def test_clock_seed_is_fixed_by_now(self, compositor):
        options = GenerationOptions.from_dict({"patternType": "grid"})
        a = compositor.generate(options, now_ms=FIXED_NOW_MS, now=FIXED_NOW)
        b = compositor.generate(options, now_ms=FIXED_NOW_MS, now=FIXED_NOW)
        assert to_svg(a) == to_svg(b)
        assert a.seed_used.startswith("Time/Cursor based")


class TestGridScenario:
    """Single-layer grid on 800x600 with seed 42."""

    @pytest.fixture
    def result(self, compositor, make_options):
        options = make_options(
            patternType="grid",
            complexity=5,
            density=70,
            layerCount=1,
            viewportWidth=800,
            viewportHeight=600,
        )
        return compositor.generate(options)

    def test_ok(self, result):
        assert result.ok
        assert result.seed == 42.0
        assert result.seed_used == "42"

    def test_grid_metrics(self, result):
        details = result.summary()["details"]["Layer_0"]
        assert details["grid_size"] == "8x8"
        assert details["cell_count"] == 64

    def test_element_count_matches_tree(self, result):
        assert result.total_elements == result.root.count_leaves()

    def test_element_count_bounds(self, result):
        # 18 grid lines plus at most two shapes per cell
        assert 18 < result.total_elements <= 18 + 64 * 2

    def test_reproducible(self, result, compositor, make_options):
        again = compositor.generate(result.options)
        assert again.total_elements == result.total_elements
        assert to_svg(again) == to_svg(result)

    def test_summary(self, result):
        summary = result.summary()
        assert summary["generator"] == "grid"
        assert summary["layers"] == 1
        assert summary["viewport"] == "800x600"
        assert summary["total_elements"] == result.total_elements
        assert summary["seed_used"] == "42"
        assert "error" not in summary


class TestRandomHygiene:
    """A pass never disturbs the process-wide random state."""

    @pytest.mark.parametrize("pattern", ["random", "grid", "quadtree", "recursive", "bezier"])
    def test_success(self, compositor, make_options, pattern):
        random.seed(99)
        before = random.getstate()
        compositor.generate(make_options(patternType=pattern, colorPalette="random_palette"))
        assert random.getstate() == before

    def test_failure(self, compositor, make_options, monkeypatch):
        def explode(self, parent, options, palette):
            raise RuntimeError("boom")

        monkeypatch.setattr(Grid, "generate", explode)
        random.seed(99)
        before = random.getstate()
        result = compositor.generate(make_options(patternType="grid"))
        assert random.getstate() == before
        assert result.error == "boom"


class TestFailure:
    """Errors inside a pass become a diagnostic element."""

    @pytest.fixture
    def failing(self, monkeypatch):
        def explode(self, parent, options, palette):
            parent.add(Rect(0, 0, 10, 10))
            self.fills.gradient(palette)
            raise ValueError("bad layer")

        monkeypatch.setattr(Grid, "generate", explode)

    def test_diagnostic_text(self, compositor, make_options, failing):
        result = compositor.generate(make_options(patternType="grid"))
        leaves = list(result.root.leaves())
        assert len(leaves) == 1
        assert isinstance(leaves[0], Text)
        assert leaves[0].text == "Error: bad layer"
        assert leaves[0].style.fill == "red"

    def test_definitions_cleared(self, compositor, make_options, failing):
        result = compositor.generate(make_options(patternType="grid"))
        assert len(result.definitions) == 0

    def test_background_kept(self, compositor, make_options, failing):
        result = compositor.generate(make_options(patternType="grid", bgColor="#000000"))
        assert result.root.children[0] is result.background
        assert isinstance(result.root.children[1], Text)

    def test_summary_zeroed(self, compositor, make_options, failing):
        summary = compositor.generate(make_options(patternType="grid")).summary()
        assert summary["total_elements"] == 0
        assert summary["layers"] == 0
        assert summary["details"] == {}
        assert summary["error"] == "bad layer"

    def test_counter_not_incremented(self, compositor, make_options, failing):
        result = compositor.generate(make_options(patternType="grid"))
        assert result.generation_count == 0
        assert compositor.generation_count == 0

    def test_svg_contains_message(self, compositor, make_options, failing):
        svg = to_svg(compositor.generate(make_options(patternType="grid")))
        assert "Error: bad layer" in svg


class TestLayers:
    def test_layer_groups(self, compositor, make_options):
        result = compositor.generate(make_options(patternType="random", layerCount=3))
        groups = [c for c in result.root.children if isinstance(c, Group)]
        assert [g.id for g in groups] == ["layer-0", "layer-1", "layer-2"]
        assert set(result.summary()["details"]) == {"Layer_0", "Layer_1", "Layer_2"}

    def test_total_is_sum_of_layers(self, compositor, make_options):
        result = compositor.generate(make_options(patternType="fibonacci", layerCount=2))
        assert result.total_elements == sum(l.element_count for l in result.layers)

    def test_layer_zero_unchanged(self, make_options):
        options = make_options(complexity=7)
        assert layer_options(options, 0) is options

    def test_layer_decay(self, make_options):
        options = make_options(complexity=7, density=60, strokeWeight=2, opacity=1, scale=1)
        second = layer_options(options, 2)
        assert second.complexity == pytest.approx(4.0)
        assert second.density == pytest.approx(30.0)
        assert second.stroke_weight == pytest.approx(1.0)
        assert second.opacity == pytest.approx(0.6)
        assert second.scale == pytest.approx(0.7)

    def test_decay_floors(self, make_options):
        options = make_options(complexity=1, density=1, strokeWeight=0.1, opacity=0.1, scale=0.05)
        deep = layer_options(options, 9)
        assert deep.complexity == 1.0
        assert deep.density == 1.0
        assert deep.stroke_weight == pytest.approx(0.1)
        assert deep.opacity == pytest.approx(0.1)
        assert deep.scale == pytest.approx(0.05)

    def test_layer_transform(self, make_options):
        options = make_options(globalAngle=45, offsetX=10, offsetY=-5)
        assert layer_transform(options, 2) == "rotate(45, 400, 300) translate(20, -10)"


class TestBackground:
    def test_white_has_no_rect(self, compositor, make_options):
        result = compositor.generate(make_options(patternType="rose"))
        assert result.background is None

    def test_colored_background(self, compositor, make_options):
        result = compositor.generate(make_options(patternType="rose", bgColor="#102030"))
        first = result.root.children[0]
        assert isinstance(first, Rect)
        assert first.style.fill == "#102030"
        assert (first.width, first.height) == (800, 600)


class TestCompositor:
    def test_unknown_pattern_falls_back(self, compositor, make_options):
        result = compositor.generate(make_options(patternType="spirograph"))
        assert result.ok
        assert "repetition" in result.layers[0].metrics

    def test_generation_counter(self, compositor, make_options):
        compositor.generate(make_options())
        result = compositor.generate(make_options())
        assert result.generation_count == 2

    def test_palette_recorded(self, compositor, make_options, palettes):
        result = compositor.generate(make_options(colorCategory="ocean"))
        assert result.palette == [e["hex"].upper() for e in palettes["ocean"]]

    def test_no_palette_data(self, make_options):
        result = LayerCompositor(palettes={}).generate(make_options(patternType="grid"))
        assert result.ok
        assert result.palette == ["#FF0000", "#00FF00", "#0000FF"]

    def test_settings_limit_nodes(self, make_options):
        compositor = LayerCompositor(settings={"max_nodes": 40})
        result = compositor.generate(
            make_options(patternType="recursive", complexity=10, density=100, maxRecursion=12)
        )
        assert result.total_elements <= 40


class TestAnimationHooks:
    """The compositor stops any running animation and starts a new one on request."""

    def test_starts_when_requested(self, make_options):
        driver = AnimationDriver(scheduler=FrameLoop())
        compositor = LayerCompositor(animation_driver=driver)
        compositor.generate(make_options(patternType="grid", animation=True), now_ms=0)
        assert driver.is_running

    def test_not_started_by_default(self, make_options):
        driver = AnimationDriver(scheduler=FrameLoop())
        compositor = LayerCompositor(animation_driver=driver)
        compositor.generate(make_options(patternType="grid"))
        assert not driver.is_running

    def test_next_pass_stops_previous(self, make_options):
        loop = FrameLoop()
        driver = AnimationDriver(scheduler=loop)
        compositor = LayerCompositor(animation_driver=driver)
        compositor.generate(make_options(patternType="grid", animation=True), now_ms=0)
        compositor.generate(make_options(patternType="grid"))
        assert not driver.is_running
        assert loop.pending == 0

    def test_failed_pass_does_not_animate(self, make_options, monkeypatch):
        def explode(self, parent, options, palette):
            raise RuntimeError("boom")

        monkeypatch.setattr(Grid, "generate", explode)
        driver = AnimationDriver(scheduler=FrameLoop())
        compositor = LayerCompositor(animation_driver=driver)
        compositor.generate(make_options(patternType="grid", animation=True))
        assert not driver.is_running
