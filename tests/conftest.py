"""Pytest configuration - shared fixtures for generation tests."""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from vecgen.config.options import GenerationOptions  # noqa: E402
from vecgen.config.settings import Settings  # noqa: E402
from vecgen.core.compositor import LayerCompositor  # noqa: E402
from vecgen.core.definitions import DefinitionRegistry  # noqa: E402
from vecgen.core.fills import FillResolver  # noqa: E402
from vecgen.core.palettes import load_palettes  # noqa: E402
from vecgen.core.primitives import Group  # noqa: E402
from vecgen.core.seeding import LcgRandom  # noqa: E402
from vecgen.patterns import PatternContext  # noqa: E402


@pytest.fixture
def settings():
    return dict(Settings.DEFAULT_CONFIG)


@pytest.fixture
def palettes():
    """Bundled palette library"""
    return load_palettes()


@pytest.fixture
def compositor(settings, palettes):
    return LayerCompositor(settings=settings, palettes=palettes)


@pytest.fixture
def make_options():
    """Build options from loose keyword values, seeded by default"""

    def _make(**values):
        if not {"seed", "seedOverride", "seed_override"} & set(values):
            values["seed_override"] = "42"
        return GenerationOptions.from_dict(values)

    return _make


@pytest.fixture
def rng():
    return LcgRandom(42)


@pytest.fixture
def registry():
    return DefinitionRegistry()


@pytest.fixture
def make_context(settings):
    """Pattern context on an 800x600 canvas with a seeded RNG"""

    def _make(seed=42, width=800, height=600, limits=None):
        rng = LcgRandom(seed)
        merged = dict(settings)
        merged.update(limits or {})
        return PatternContext(
            width=width,
            height=height,
            rng=rng,
            fills=FillResolver(rng, DefinitionRegistry()),
            limits=merged,
        )

    return _make


@pytest.fixture
def root():
    return Group(id="test-root")
