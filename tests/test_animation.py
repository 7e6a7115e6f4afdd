"""
Tests for vecgen/modifiers and vecgen/core/animation.py
"""

import pytest

from vecgen.core.animation import AnimationDriver, Frame, FrameLoop
from vecgen.core.primitives import Circle, Group, Line, Path, Polygon, Rect, Style, Text
from vecgen.modifiers import (
    AnimationFrame,
    ModifierRegistry,
    Morph,
    Opacity,
    Pulse,
    Rotate,
    bounding_box,
    modifier_for,
)
from vecgen.modifiers.animation import path_points


def frame_at(element_phase=0.25, phase=0.25, index=0, count=1, complexity_factor=1.0, **kw):
    return AnimationFrame(
        phase=phase,
        element_phase=element_phase,
        index=index,
        count=count,
        complexity_factor=complexity_factor,
        **kw,
    )


class TestGeometry:
    def test_path_points(self):
        d = "M 0.00 0.00 L 10.00 5.00 C 1.00 2.00, 3.00 4.00, 5.00 6.00 Z"
        assert path_points(d) == [(0, 0), (10, 5), (1, 2), (3, 4), (5, 6)]

    def test_path_arc_endpoint(self):
        d = "M 0.00 0.00 A 5.00 5.00 0 0 1 10.00 0.00"
        assert path_points(d) == [(0, 0), (10, 0)]

    def test_bbox_circle(self):
        assert bounding_box(Circle(10, 10, 5)) == (5, 5, 10, 10)

    def test_bbox_polygon(self):
        assert bounding_box(Polygon([(0, 0), (4, 2), (2, 6)])) == (0, 0, 4, 6)

    def test_bbox_path(self):
        assert bounding_box(Path("M 0 0 L 10 20")) == (0, 0, 10, 20)


class TestModifiers:
    """Each modifier returns a new primitive and leaves its input alone."""

    def test_registered(self):
        names = {d.name for d in ModifierRegistry.list_modifiers()}
        assert names == {"pulse", "rotate", "opacity", "morph"}

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            modifier_for("wobble")

    def test_pulse_circle_radius(self):
        circle = Circle(10, 10, 10)
        pulsed = Pulse().apply(circle, frame_at(), {})
        assert pulsed.r == pytest.approx(11)
        assert circle.r == 10

    def test_pulse_radius_floor(self):
        pulsed = Pulse().apply(Circle(0, 0, 1), frame_at(element_phase=0.75), {"amount": 1.0})
        assert pulsed.r == 1

    def test_pulse_rect_transform(self):
        pulsed = Pulse().apply(Rect(0, 0, 10, 10), frame_at(), {})
        assert pulsed.style.transform.startswith("translate(5.00 5.00) scale(1.1000)")

    def test_pulse_ignores_lines(self):
        line = Line(0, 0, 1, 1)
        assert Pulse().apply(line, frame_at(), {}) is line

    def test_rotate_speed_by_index(self):
        rect = Rect(0, 0, 10, 10)
        first = Rotate().apply(rect, frame_at(phase=0.25, index=0), {})
        third = Rotate().apply(rect, frame_at(phase=0.25, index=2), {})
        assert first.style.transform == "rotate(90.00, 5.00, 5.00)"
        assert third.style.transform == "rotate(270.00, 5.00, 5.00)"

    def test_rotate_replaces_previous_rotation(self):
        rect = Rect(0, 0, 10, 10, Style(transform="translate(1 1) rotate(10 0 0)"))
        rotated = Rotate().apply(rect, frame_at(phase=0.5), {})
        assert rotated.style.transform == "translate(1 1) rotate(180.00, 5.00, 5.00)"

    def test_opacity_range(self):
        circle = Circle(0, 0, 1)
        for phase in (0.0, 0.25, 0.5, 0.75):
            faded = Opacity().apply(circle, frame_at(element_phase=phase, base_opacity=0.8), {})
            assert 0.1 <= faded.style.opacity <= 1.0

    def test_opacity_peak(self):
        faded = Opacity().apply(Circle(0, 0, 1), frame_at(element_phase=0.0, base_opacity=0.8), {})
        assert faded.style.opacity == pytest.approx(0.8)

    def test_morph_stroke(self):
        line = Line(0, 0, 1, 1, Style(stroke_width=2))
        morphed = Morph().apply(line, frame_at(), {})
        assert morphed.style.stroke_width == pytest.approx(2.6)
        assert line.style.stroke_width == 2

    def test_morph_without_stroke(self):
        circle = Circle(0, 0, 1)
        assert Morph().apply(circle, frame_at(), {}) is circle


def make_result(compositor, make_options, **values):
    values.setdefault("patternType", "grid")
    return compositor.generate(make_options(**values), now_ms=0)


class TestFrameLoop:
    def test_step_runs_pending(self):
        loop = FrameLoop(frame_interval_ms=10)
        seen = []
        loop.request_frame(seen.append)
        assert loop.step()
        assert seen == [10]
        assert not loop.step()

    def test_cancel(self):
        loop = FrameLoop()
        handle = loop.request_frame(lambda t: None)
        loop.cancel_frame(handle)
        assert loop.pending == 0

    def test_run_limit(self):
        loop = FrameLoop()

        def again(now):
            loop.request_frame(again)

        loop.request_frame(again)
        assert loop.run(5) == 5


class TestAnimationDriver:
    """Frames are fresh trees built from the untouched base tree."""

    def test_animated_elements_skip_background(self, compositor, make_options):
        result = make_result(compositor, make_options, bgColor="#000000")
        elements = AnimationDriver.animated_elements(result)
        assert result.background not in elements
        assert len(elements) == result.root.count_leaves() - 1

    def test_start_and_stop_idempotent(self, compositor, make_options):
        driver = AnimationDriver(scheduler=FrameLoop())
        result = make_result(compositor, make_options)
        assert driver.start(result, now_ms=0)
        assert not driver.start(result, now_ms=0)
        assert driver.stop()
        assert not driver.stop()

    def test_nothing_to_animate(self, compositor, make_options):
        driver = AnimationDriver(scheduler=FrameLoop())
        result = make_result(compositor, make_options)
        result.root.children = [Text(0, 0, "x")]
        assert not driver.start(result, now_ms=0)

    def test_render_requires_start(self):
        with pytest.raises(RuntimeError):
            AnimationDriver().render(0)

    def test_phase(self):
        driver = AnimationDriver(period_ms=1000)
        assert driver.phase_at(250) == pytest.approx(0.25)
        assert driver.phase_at(1250) == pytest.approx(0.25)

    def test_base_tree_untouched(self, compositor, make_options):
        result = make_result(compositor, make_options, animationType="rotate")
        before = [leaf.style.transform for leaf in result.root.leaves()]
        driver = AnimationDriver(period_ms=1000)
        driver.start(result, now_ms=0)
        frame_root = driver.render(250)
        after = [leaf.style.transform for leaf in result.root.leaves()]
        assert after == before
        assert frame_root is not result.root
        assert frame_root.count_leaves() == result.root.count_leaves()

    def test_frame_is_rotated(self, compositor, make_options):
        result = make_result(compositor, make_options, animationType="rotate")
        driver = AnimationDriver(period_ms=1000)
        driver.start(result, now_ms=0)
        leaves = list(driver.render(250).leaves())
        assert all("rotate(" in (leaf.style.transform or "") for leaf in leaves)

    @pytest.mark.parametrize("animation_type", ["pulse", "rotate", "opacity", "morph"])
    def test_observers_receive_frames(self, compositor, make_options, animation_type):
        loop = FrameLoop(frame_interval_ms=100)
        driver = AnimationDriver(scheduler=loop, period_ms=1000)
        frames = []
        driver.add_frame_observer(frames.append)
        result = make_result(compositor, make_options, animationType=animation_type)
        driver.start(result, now_ms=0)
        assert loop.run(3) == 3
        assert [f.sequence for f in frames] == [1, 2, 3]
        assert all(isinstance(f, Frame) for f in frames)
        assert frames[0].phase == pytest.approx(0.1)

    @pytest.mark.parametrize("animation_type", ["pulse", "rotate", "opacity", "morph"])
    def test_malformed_element_does_not_abort_frames(
        self, compositor, make_options, animation_type
    ):
        result = make_result(compositor, make_options, animationType=animation_type)
        layer = next(c for c in result.root.children if isinstance(c, Group))
        broken = Circle(10, 10, 5, style=None)
        layer.add(broken)

        loop = FrameLoop(frame_interval_ms=100)
        driver = AnimationDriver(scheduler=loop, period_ms=1000)
        frames = []
        driver.add_frame_observer(frames.append)
        assert driver.start(result, now_ms=0)
        assert loop.run(3) == 3
        assert [f.sequence for f in frames] == [1, 2, 3]
        assert frames[-1].root.count_leaves() == result.root.count_leaves()
        assert driver.is_running
        assert driver.stop()

    def test_stop_cancels_frames(self, compositor, make_options):
        loop = FrameLoop()
        driver = AnimationDriver(scheduler=loop)
        driver.start(make_result(compositor, make_options), now_ms=0)
        driver.stop()
        assert loop.run(10) == 0

    def test_remove_observer(self, compositor, make_options):
        loop = FrameLoop()
        driver = AnimationDriver(scheduler=loop)
        frames = []
        driver.add_frame_observer(frames.append)
        driver.remove_frame_observer(frames.append)
        driver.start(make_result(compositor, make_options), now_ms=0)
        loop.run(2)
        assert frames == []
