"""Unit tests for invest_or_defend.engine.probability and randomness.

Tests cover:
- normalised_probabilities: 1/n defaults, normalisation, degenerate tables
- filter_by_progress: include_from thresholds
- select_weighted: cumulative selection, zero weights, progress filtering
- draw_int / sample_without_replacement: inclusive bounds, distinct picks
"""

import random

import pytest
from support import ScriptedRandom

from invest_or_defend.engine.probability import (
    filter_by_progress,
    normalised_probabilities,
    select_weighted,
)
from invest_or_defend.engine.randomness import draw_int, draw_uniform, sample_without_replacement
from invest_or_defend.errors import ConfigurationError
from invest_or_defend.models import Asset, ThreatActor


def actors(*specs):
    return [ThreatActor(slug=f"actor-{i}", **spec) for i, spec in enumerate(specs)]


class TestNormalisedProbabilities:
    """Tests for normalised_probabilities."""

    def test_missing_probabilities_default_to_one_over_n(self):
        items = actors({}, {}, {}, {})
        assert normalised_probabilities(items) == pytest.approx([0.25] * 4)

    def test_result_sums_to_one(self):
        items = actors({"probability": 0.2}, {"probability": 0.2}, {"probability": 0.1})
        probabilities = normalised_probabilities(items)
        assert sum(probabilities) == pytest.approx(1.0)
        assert probabilities == pytest.approx([0.4, 0.4, 0.2])

    def test_mixed_explicit_and_default(self):
        """Defaults are 1/n of the filtered set, then everything is normalised."""
        items = actors({"probability": 0.5}, {})
        assert normalised_probabilities(items) == pytest.approx([0.5, 0.5])

    def test_table_summing_to_one_is_unchanged(self):
        items = actors({"probability": 0.7}, {"probability": 0.3})
        assert normalised_probabilities(items) == pytest.approx([0.7, 0.3])

    def test_empty_table_raises(self):
        with pytest.raises(ConfigurationError):
            normalised_probabilities([])

    def test_all_zero_raises(self):
        with pytest.raises(ConfigurationError, match="sum to zero"):
            normalised_probabilities(actors({"probability": 0.0}, {"probability": 0.0}))


class TestFilterByProgress:
    """Tests for filter_by_progress."""

    def test_excludes_actors_not_yet_included(self):
        items = actors({}, {"include_from": 0.5})
        assert [a.slug for a in filter_by_progress(items, 0.25)] == ["actor-0"]

    def test_threshold_is_inclusive(self):
        items = actors({}, {"include_from": 0.5})
        assert len(filter_by_progress(items, 0.5)) == 2

    def test_items_without_include_from_are_kept(self):
        assets = [Asset(slug="laptop"), Asset(slug="server")]
        assert filter_by_progress(assets, 0.0) == assets

    def test_none_progress_disables_filtering(self):
        items = actors({"include_from": 0.9})
        assert filter_by_progress(items, None) == items


class TestSelectWeighted:
    """Tests for select_weighted."""

    def test_cumulative_selection(self):
        items = actors({"probability": 0.5}, {"probability": 0.3}, {"probability": 0.2})
        picks = [select_weighted(items, ScriptedRandom([r])).slug for r in (0.0, 0.5, 0.6, 0.79, 0.81, 0.999)]
        assert picks == ["actor-0", "actor-0", "actor-1", "actor-1", "actor-2", "actor-2"]

    def test_excluded_actor_never_selected(self):
        items = actors({"include_from": 0.5}, {})
        rng = random.Random(42)
        for _ in range(200):
            assert select_weighted(items, rng, progress=0.25).slug == "actor-1"

    def test_zero_probability_never_selected(self):
        items = actors({"probability": 0.0}, {"probability": 1.0}, {"probability": 0.0})
        for r in (0.0, 0.5, 0.999):
            assert select_weighted(items, ScriptedRandom([r])).slug == "actor-1"

    def test_rounding_falls_back_to_last_positive_item(self):
        items = actors({"probability": 0.1}, {"probability": 0.2}, {"probability": 0.0})
        # Normalised to 1/3, 2/3; a draw at the very top still returns a real item
        assert select_weighted(items, ScriptedRandom([1.0])).slug == "actor-1"

    def test_no_candidates_at_progress_raises(self):
        items = actors({"include_from": 0.75})
        with pytest.raises(ConfigurationError, match="No candidates"):
            select_weighted(items, ScriptedRandom([0.0]), progress=0.5)

    def test_consumes_exactly_one_draw(self):
        rng = ScriptedRandom([0.3, 0.9])
        select_weighted(actors({}, {}), rng)
        assert rng.calls == 1


class TestDraws:
    """Tests for the random draw helpers."""

    def test_draw_int_is_inclusive(self):
        assert draw_int(ScriptedRandom([0.0]), 1, 3) == 1
        assert draw_int(ScriptedRandom([0.5]), 1, 3) == 2
        assert draw_int(ScriptedRandom([0.9999]), 1, 3) == 3

    def test_draw_int_single_value_range(self):
        assert draw_int(ScriptedRandom([0.7]), 2, 2) == 2

    def test_draw_int_empty_range_raises(self):
        with pytest.raises(ValueError):
            draw_int(ScriptedRandom([0.0]), 3, 1)

    def test_draw_uniform(self):
        assert draw_uniform(ScriptedRandom([0.25]), 100.0, 500.0) == pytest.approx(200.0)

    def test_sample_without_replacement_is_distinct(self):
        # Always picking index 0 of what remains still yields distinct items
        assert sample_without_replacement(ScriptedRandom([0.0, 0.0, 0.0]), "abc", 3) == ["a", "b", "c"]

    def test_sample_is_capped_at_population(self):
        rng = ScriptedRandom([0.9, 0.9])
        assert sorted(sample_without_replacement(rng, [1, 2], 3)) == [1, 2]
        assert rng.remaining == 0
