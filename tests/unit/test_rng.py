"""Tests for the deterministic sampler helpers.

Tests cover:
- Seed formatting and validation
- Determinism (same seed -> same stream)
- Weighted choice behaviour and validation
- Property-based tests
"""

import random

import pytest
from hypothesis import given
from hypothesis import strategies as st

from guildhall.utils.rng import generate_seed, sampler_for, weighted_choice


class TestGenerateSeed:
    """Tests for generate_seed function."""

    def test_basic_seed_generation(self):
        seed = generate_seed(1, 42, "spring_thaw", "quest:3")
        assert seed == "1:42:spring_thaw:quest:3"

    def test_different_parameters_produce_different_seeds(self):
        seeds = {
            generate_seed(1, 1, "spring_thaw", "board"),
            generate_seed(2, 1, "spring_thaw", "board"),
            generate_seed(1, 2, "spring_thaw", "board"),
            generate_seed(1, 1, "winters_end", "board"),
            generate_seed(1, 1, "spring_thaw", "quest:1"),
        }
        assert len(seeds) == 5

    def test_negative_campaign_seed_raises_error(self):
        with pytest.raises(ValueError, match="campaign_seed must be non-negative"):
            generate_seed(-1, 1, "spring_thaw", "board")

    def test_negative_week_raises_error(self):
        with pytest.raises(ValueError, match="week must be non-negative"):
            generate_seed(1, -1, "spring_thaw", "board")

    @given(
        campaign_seed=st.integers(min_value=0, max_value=10000),
        week=st.integers(min_value=0, max_value=10000),
        context=st.text(min_size=1),
    )
    def test_seed_generation_properties(self, campaign_seed, week, context):
        seed = generate_seed(campaign_seed, week, "autumn_harvest", context)
        assert seed == f"{campaign_seed}:{week}:autumn_harvest:{context}"


class TestSamplerFor:
    def test_same_seed_same_stream(self):
        first = sampler_for("7:0:spring_thaw:board")
        second = sampler_for("7:0:spring_thaw:board")
        assert [first.random() for _ in range(5)] == [second.random() for _ in range(5)]

    def test_different_seeds_diverge(self):
        first = sampler_for("7:0:spring_thaw:board")
        second = sampler_for("7:1:spring_thaw:board")
        assert [first.random() for _ in range(5)] != [second.random() for _ in range(5)]

    def test_returns_random_instance(self):
        assert isinstance(sampler_for("x"), random.Random)


class TestWeightedChoice:
    def test_zero_weight_is_never_chosen(self):
        rng = random.Random(3)
        picks = {weighted_choice(rng, ["a", "b", "c"], [1, 0, 1]) for _ in range(500)}
        assert picks == {"a", "c"}

    def test_single_positive_weight(self):
        rng = random.Random(3)
        assert all(weighted_choice(rng, ["a", "b"], [0, 5]) == "b" for _ in range(50))

    def test_empty_options_raise(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            weighted_choice(random.Random(1), [], [])

    def test_mismatched_lengths_raise(self):
        with pytest.raises(ValueError, match="same length"):
            weighted_choice(random.Random(1), ["a", "b"], [1])

    def test_all_zero_weights_raise(self):
        with pytest.raises(ValueError, match="positive"):
            weighted_choice(random.Random(1), ["a", "b"], [0, 0])

    @given(seed=st.integers(min_value=0, max_value=2**32))
    def test_choice_is_deterministic(self, seed):
        options = ["low", "medium", "high", "critical"]
        weights = [50, 40, 10, 0]
        first = weighted_choice(random.Random(seed), options, weights)
        second = weighted_choice(random.Random(seed), options, weights)
        assert first == second
        assert first != "critical"
