"""
Tests for vecgen/core/seeding.py
Seed derivation and the seeded randomness source
"""

import random
from datetime import datetime

import pytest

from vecgen.config.options import GenerationOptions
from vecgen.core.seeding import (
    MODULUS,
    LcgRandom,
    create_rng,
    derive_seed,
    hash_seed,
    initial_state,
    parse_numeric_seed,
    pick,
    randint_between,
    time_of_day_fraction,
)


class TestLcgRandom:
    """Park-Miller sequence behind the random.Random API."""

    def test_first_state_from_seed_one(self):
        rng = LcgRandom(1)
        rng.random()
        assert rng.getstate() == 16807

    def test_second_state_from_seed_one(self):
        rng = LcgRandom(1)
        rng.random()
        rng.random()
        assert rng.getstate() == 282475249

    def test_first_value_from_seed_one(self):
        rng = LcgRandom(1)
        assert rng.random() == pytest.approx(16806 / (MODULUS - 1))

    def test_values_in_unit_interval(self):
        rng = LcgRandom(123456)
        for _ in range(1000):
            value = rng.random()
            assert 0.0 <= value < 1.0

    def test_same_seed_same_sequence(self):
        a = LcgRandom(42)
        b = LcgRandom(42)
        assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]

    def test_derived_helpers_use_lcg(self):
        """uniform/randint/choice are reproducible from the seed."""
        a = LcgRandom(7)
        b = LcgRandom(7)
        assert a.uniform(0, 10) == b.uniform(0, 10)
        assert a.randint(0, 100) == b.randint(0, 100)
        assert a.choice("abcdef") == b.choice("abcdef")

    def test_setstate_round_trip(self):
        rng = LcgRandom(99)
        rng.random()
        state = rng.getstate()
        expected = rng.random()
        rng.setstate(state)
        assert rng.random() == expected

    def test_global_random_untouched(self):
        random.seed(1234)
        before = random.getstate()
        rng = LcgRandom(5)
        for _ in range(100):
            rng.random()
            rng.uniform(1, 2)
            rng.randint(0, 9)
        assert random.getstate() == before


class TestInitialState:
    """state0 = max(1, floor(|seed|) mod 2147483647)."""

    def test_zero_maps_to_one(self):
        assert initial_state(0) == 1

    def test_negative_fraction(self):
        assert initial_state(-5.7) == 5

    def test_modulus_wraps_to_one(self):
        assert initial_state(MODULUS) == 1

    def test_just_above_modulus(self):
        assert initial_state(MODULUS + 1) == 1

    def test_large_value(self):
        assert initial_state(MODULUS + 10) == 10

    def test_non_finite(self):
        assert initial_state(float("inf")) == 1
        assert initial_state(float("nan")) == 1


class TestSeedParsing:
    """Numeric parsing and string hashing of seed overrides."""

    def test_plain_integer(self):
        assert parse_numeric_seed("42") == 42.0

    def test_leading_number(self):
        assert parse_numeric_seed("42abc") == 42.0

    def test_float(self):
        assert parse_numeric_seed("3.5") == 3.5

    def test_exponent(self):
        assert parse_numeric_seed("1e3") == 1000.0

    def test_not_a_number(self):
        assert parse_numeric_seed("hello") is None
        assert parse_numeric_seed("") is None

    def test_hash_single_char(self):
        assert hash_seed("a") == 97

    def test_hash_two_chars(self):
        assert hash_seed("ab") == 97 * 31 + 98

    def test_hash_known_word(self):
        assert hash_seed("hello") == 99162322

    def test_hash_is_order_sensitive(self):
        assert hash_seed("ab") != hash_seed("ba")

    def test_hash_never_negative(self):
        for text in ["", "a", "zzzzzzzzzzzzzzzz", "some longer seed text", "éè"]:
            assert hash_seed(text) >= 0


class TestDeriveSeed:
    """Seed selection from overrides, time and coordinates."""

    def test_numeric_override(self):
        seed, desc = derive_seed(GenerationOptions(seed_override="42"))
        assert seed == 42.0
        assert desc == "42"

    def test_string_override(self):
        seed, desc = derive_seed(GenerationOptions(seed_override="hello"))
        assert seed == float(hash_seed("hello"))
        assert desc == "hello"

    def test_override_ignores_clock(self):
        options = GenerationOptions(seed_override="7", use_cursor=True, pointer_x=3, pointer_y=4)
        assert derive_seed(options, now_ms=1)[0] == derive_seed(options, now_ms=999999)[0]

    def test_clock_only(self):
        options = GenerationOptions(use_time=False)
        seed, desc = derive_seed(options, now_ms=1000)
        assert seed == 1000.0
        assert desc == "Time/Cursor based (~1000)"

    def test_time_of_day_at_midnight_adds_nothing(self):
        options = GenerationOptions(use_time=True)
        seed, _ = derive_seed(options, now_ms=1000, now=datetime(2024, 1, 1, 0, 0, 0))
        assert seed == 1000.0

    def test_time_of_day_at_noon(self):
        options = GenerationOptions(use_time=True)
        seed, _ = derive_seed(options, now_ms=1000, now=datetime(2024, 1, 1, 12, 0, 0))
        assert seed == pytest.approx(1000 + 0.5e9)

    def test_pointer_mixing(self):
        options = GenerationOptions(use_time=False, use_cursor=True, pointer_x=0, pointer_y=0)
        seed, _ = derive_seed(options, now_ms=0)
        assert seed == pytest.approx(1e5)

    def test_cursor_disabled_ignores_coordinates(self):
        options = GenerationOptions(use_time=False, use_cursor=False, captured_x=10)
        assert derive_seed(options, now_ms=500)[0] == 500.0

    def test_time_of_day_fraction_range(self):
        assert time_of_day_fraction(datetime(2024, 1, 1, 0, 0, 0)) == 0.0
        assert 0.0 <= time_of_day_fraction(datetime(2024, 1, 1, 23, 59, 59)) < 1.0


class TestHelpers:
    """pick and randint_between."""

    def test_pick_empty_returns_default(self, rng):
        assert pick(rng, [], "fallback") == "fallback"

    def test_pick_single(self, rng):
        assert pick(rng, ["only"]) == "only"

    def test_randint_between_inclusive(self, rng):
        values = {randint_between(rng, 2, 4) for _ in range(500)}
        assert values == {2, 3, 4}

    def test_randint_between_fractional_bounds(self, rng):
        for _ in range(200):
            assert 2 <= randint_between(rng, 2.5, 4.9) <= 4

    def test_randint_between_inverted_bounds(self, rng):
        assert randint_between(rng, 5, 3) == 5

    def test_create_rng_records_initial_state(self):
        assert create_rng(42).initial_state == 42
