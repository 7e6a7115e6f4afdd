"""
Seed derivation and the seeded randomness source for one generation pass.

A pass never touches the process-wide ``random`` module: the compositor builds
one ``LcgRandom`` from the derived seed and hands it to every strategy.
"""

import logging
import math
import random
import re
import time
from datetime import datetime
from typing import Any, Optional, Sequence, Tuple

from vecgen.config.options import GenerationOptions

logger = logging.getLogger(__name__)

MODULUS = 2147483647
MULTIPLIER = 16807

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class LcgRandom(random.Random):
    """Park-Miller linear congruential generator behind the ``random.Random`` API.

    Only ``random()`` is overridden, so ``uniform``, ``randint``, ``choice`` and
    ``shuffle`` all draw from the LCG sequence.
    """

    def __init__(self, seed: float = 1):
        self._state = 1
        self.initial_state = 1
        super().__init__(seed)

    def seed(self, a: Any = None, version: int = 2) -> None:
        if a is None:
            a = time.time() * 1000
        self._state = initial_state(a)
        self.initial_state = self._state
        self.gauss_next = None

    def random(self) -> float:
        self._state = (self._state * MULTIPLIER) % MODULUS
        return (self._state - 1) / (MODULUS - 1)

    def getstate(self) -> int:
        return self._state

    def setstate(self, state: int) -> None:
        self._state = int(state)


def initial_state(seed: Any) -> int:
    """state0 = max(1, floor(|seed|) mod 2147483647)"""
    try:
        value = float(seed)
    except (TypeError, ValueError):
        value = float(hash_seed(str(seed)))
    if not math.isfinite(value):
        value = 1.0
    state = int(math.floor(abs(value))) % MODULUS
    return max(1, state)


def parse_numeric_seed(text: str) -> Optional[float]:
    """Parse a leading float literal the way a lenient number parser would"""
    match = _LEADING_NUMBER.match(text or "")
    if not match:
        return None
    value = float(match.group(0))
    if not math.isfinite(value):
        return None
    return value


def hash_seed(text: str) -> int:
    """Order-sensitive 31x polynomial hash over UTF-16 code units, wrapped to 32 bits"""
    h = 0
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def time_of_day_fraction(now: Optional[datetime] = None) -> float:
    """Fraction of the current day that has elapsed, in [0, 1)"""
    now = now or datetime.now()
    seconds = (
        now.hour * 3600 + now.minute * 60 + now.second + now.microsecond / 1_000_000
    )
    return seconds / 86400


def derive_seed(
    options: GenerationOptions,
    now_ms: Optional[float] = None,
    now: Optional[datetime] = None,
) -> Tuple[float, str]:
    """Return the numeric seed for a pass and a human-readable description"""
    override = (options.seed_override or "").strip()
    if override:
        numeric = parse_numeric_seed(override)
        if numeric is not None:
            logger.info(f"Using numeric seed override: {numeric}")
            return numeric, override
        hashed = hash_seed(override)
        logger.info(f"Using hashed string seed override ({override!r} -> {hashed})")
        return float(hashed), override

    seed = float(now_ms if now_ms is not None else time.time() * 1000)
    if options.use_time:
        seed += time_of_day_fraction(now) * 1e9
    if options.use_cursor:
        if options.pointer_x is not None and options.pointer_y is not None:
            seed += math.sin(options.pointer_x * 0.01) * 1e5
            seed += math.cos(options.pointer_y * 0.01) * 1e5
        if options.captured_x is not None:
            seed += math.sin(options.captured_x * 0.1) * 1e4
        if options.captured_y is not None:
            seed += math.cos(options.captured_y * 0.1) * 1e4
        if options.captured_vector is not None:
            vx, vy = options.captured_vector
            if vx is not None:
                seed += math.sin(vx * 0.1) * 1e3
            if vy is not None:
                seed += math.cos(vy * 0.1) * 1e3

    logger.info(f"Using time/cursor seed (approx): {seed:.0f}")
    return seed, f"Time/Cursor based (~{seed:.0f})"


def create_rng(seed: float) -> LcgRandom:
    rng = LcgRandom(seed)
    logger.debug(f"Using PRNG with initial state {rng.initial_state}")
    return rng


def pick(rng: random.Random, items: Sequence[Any], default: Any = None) -> Any:
    """rng.choice that returns ``default`` for an empty sequence"""
    if not items:
        return default
    return items[int(rng.random() * len(items)) % len(items)]


def randint_between(rng: random.Random, low: float, high: float) -> int:
    """Inclusive random integer for possibly fractional bounds, one draw"""
    low_i = int(math.floor(low))
    high_i = max(low_i, int(math.floor(high)))
    return min(high_i, low_i + int(rng.random() * (high_i - low_i + 1)))
