"""
Post-generation animation.

The driver never edits the generated tree. Every frame is a fresh tree built
from the base primitives and the current phase.
"""

import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Protocol

from vecgen.core.primitives import Group, Primitive, Text
from vecgen.modifiers import AnimationFrame, modifier_for
from vecgen.modifiers.animation import modifier_params

logger = logging.getLogger(__name__)

DEFAULT_PERIOD_MS = 5000


@dataclass
class Frame:
    """One rendered animation frame"""

    sequence: int
    timestamp: float  # ms
    phase: float
    root: Group


class FrameScheduler(Protocol):
    """Host-provided source of frame callbacks"""

    def request_frame(self, callback: Callable[[float], None]) -> Any:
        ...

    def cancel_frame(self, handle: Any) -> None:
        ...


class FrameLoop:
    """Cooperative single-threaded scheduler with a virtual clock.

    Callbacks requested during a frame run on the next call to ``step``.
    """

    def __init__(self, frame_interval_ms: float = 1000 / 30, start_ms: float = 0.0):
        self.frame_interval_ms = frame_interval_ms
        self.time_ms = start_ms
        self._pending: Dict[int, Callable[[float], None]] = {}
        self._next_handle = 0

    def request_frame(self, callback: Callable[[float], None]) -> int:
        self._next_handle += 1
        self._pending[self._next_handle] = callback
        return self._next_handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def step(self) -> bool:
        """Advance the clock one interval and run due callbacks"""
        if not self._pending:
            return False
        self.time_ms += self.frame_interval_ms
        due, self._pending = self._pending, {}
        for callback in due.values():
            callback(self.time_ms)
        return True

    def run(self, max_frames: int) -> int:
        frames = 0
        while frames < max_frames and self.step():
            frames += 1
        return frames


class AnimationDriver:
    """Animates the drawable leaves of a generated tree"""

    def __init__(
        self,
        scheduler: Optional[FrameScheduler] = None,
        period_ms: float = DEFAULT_PERIOD_MS,
    ):
        self.scheduler = scheduler
        self.period_ms = period_ms
        self.is_running = False
        self.frame_count = 0
        self.frame_observers: List[Callable[[Frame], None]] = []

        self._handle = None
        self._root: Optional[Group] = None
        self._animated: Dict[int, int] = {}  # id(primitive) -> element index
        self._start_ms = 0.0
        self._modifier = None
        self._params: Dict[str, Any] = {}
        self._complexity_factor = 0.5
        self._base_opacity = 0.8
        self._base_stroke_weight = 1.0

    def add_frame_observer(self, observer_func: Callable[[Frame], None]) -> None:
        if observer_func not in self.frame_observers:
            self.frame_observers.append(observer_func)

    def remove_frame_observer(self, observer_func: Callable[[Frame], None]) -> None:
        if observer_func in self.frame_observers:
            self.frame_observers.remove(observer_func)

    @staticmethod
    def animated_elements(result) -> List[Primitive]:
        """Drawable leaves in document order, without the background or text"""
        return [
            leaf
            for leaf in result.root.leaves()
            if leaf is not result.background and not isinstance(leaf, Text)
        ]

    def start(self, result, now_ms: Optional[float] = None) -> bool:
        """Begin animating ``result``; a no-op when already running"""
        if self.is_running:
            return False

        elements = self.animated_elements(result)
        if not elements:
            logger.debug("Nothing to animate")
            return False

        options = result.options
        self._modifier = modifier_for(options.animation_type)
        self._params = modifier_params(options.animation_type)
        self._root = result.root
        self._animated = {id(element): index for index, element in enumerate(elements)}
        self._start_ms = now_ms if now_ms is not None else time.time() * 1000
        self._complexity_factor = options.complexity / 10
        self._base_opacity = options.opacity
        self._base_stroke_weight = options.stroke_weight
        self.frame_count = 0
        self.is_running = True

        logger.info(f"Starting {options.animation_type} animation of {len(elements)} elements")
        if self.scheduler is not None:
            self._handle = self.scheduler.request_frame(self._on_frame)
        return True

    def stop(self) -> bool:
        """Stop animating; a no-op when not running"""
        if self._handle is not None and self.scheduler is not None:
            self.scheduler.cancel_frame(self._handle)
        self._handle = None
        if not self.is_running:
            return False
        logger.info("Stopping animation")
        self.is_running = False
        return True

    def phase_at(self, now_ms: float) -> float:
        elapsed = now_ms - self._start_ms
        return (elapsed % self.period_ms) / self.period_ms

    def render(self, now_ms: float) -> Group:
        """Build the animated tree for time ``now_ms``"""
        if self._root is None:
            raise RuntimeError("Animation has not been started")
        phase = self.phase_at(now_ms)
        return self._rebuild(self._root, phase, len(self._animated))

    def _rebuild(self, group: Group, phase: float, count: int) -> Group:
        children = []
        for child in group.children:
            if isinstance(child, Group):
                children.append(self._rebuild(child, phase, count))
            elif id(child) in self._animated:
                children.append(self._animate(child, self._animated[id(child)], phase, count))
            else:
                children.append(child)
        return replace(group, children=children)

    def _animate(self, primitive: Primitive, index: int, phase: float, count: int) -> Primitive:
        frame = AnimationFrame(
            phase=phase,
            element_phase=(phase + (index / count) * 0.5) % 1,
            index=index,
            count=count,
            complexity_factor=self._complexity_factor,
            base_opacity=self._base_opacity,
            base_stroke_weight=self._base_stroke_weight,
        )
        try:
            return self._modifier.apply(primitive, frame, self._params)
        except Exception as e:
            logger.debug(f"Animation skipped element {index}: {e}")
            return primitive

    def _on_frame(self, now_ms: float):
        self._handle = None
        if not self.is_running:
            return

        root = self.render(now_ms)
        self.frame_count += 1
        frame = Frame(self.frame_count, now_ms, self.phase_at(now_ms), root)
        for observer in list(self.frame_observers):
            observer(frame)

        if self.is_running and self.scheduler is not None:
            self._handle = self.scheduler.request_frame(self._on_frame)
