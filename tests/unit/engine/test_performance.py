"""Tests for the overall rating and average performance aggregation.

Pure functions over attribute snapshots and history lists; both plain
dicts (snake_case or camelCase) and pydantic models are accepted.
"""

import pytest

from academy.engine.performance import (
    DEFAULT_PERFORMANCE_CONFIG,
    PerformanceConfig,
    average_performance,
    blend_with_latest,
    overall_rating,
    summarise,
    usable_rating,
)
from academy.schemas.player import PerformanceHistoryEntry, PlayerAttributes

SIX_AT_TEN = {
    "shooting": 10,
    "pace": 10,
    "positioning": 10,
    "passing": 10,
    "ball_control": 10,
    "crossing": 10,
}


# ======================================================================
# PerformanceConfig
# ======================================================================


class TestPerformanceConfig:
    def test_default_weights(self):
        weights = DEFAULT_PERFORMANCE_CONFIG.weights
        assert weights["session_rating"] == pytest.approx(0.10)
        assert all(weights[k] == pytest.approx(0.15) for k in SIX_AT_TEN)
        assert sum(weights.values()) == pytest.approx(1.0)

    def test_default_config_is_not_shared_between_instances(self):
        cfg = PerformanceConfig()
        cfg.weights["shooting"] = 1.0
        assert PerformanceConfig().weights["shooting"] == pytest.approx(0.15)


# ======================================================================
# overall_rating
# ======================================================================


class TestOverallRating:
    def test_six_fields_at_ten_no_history(self):
        assert overall_rating(SIX_AT_TEN, []) == 10.0

    def test_empty_attributes(self):
        assert overall_rating({}, []) == 0.0

    def test_missing_fields_do_not_drag_score_down(self):
        assert overall_rating({"shooting": 80}, []) == 80.0

    def test_weighted_mean(self):
        # (0.15 * 80 + 0.10 * 5) / 0.25 = 50.0
        assert overall_rating({"shooting": 80, "session_rating": 5}, []) == 50.0

    def test_camel_case_keys(self):
        assert overall_rating({"ballControl": 70, "sessionRating": 7}, []) == overall_rating(
            {"ball_control": 70, "session_rating": 7}, [])

    def test_unweighted_fields_are_ignored(self):
        assert overall_rating({"shooting": 60, "overall": 99, "training_points": 500}, []) == 60.0

    def test_blend_with_latest_history_entry(self):
        history = [{"attributes": {"shooting": 90}}, {"attributes": {"shooting": 60}}]
        # Only the latest entry is blended: (80 + 60) / 2
        assert overall_rating({"shooting": 80}, history) == 70.0

    def test_zero_in_history_is_not_blended(self):
        history = [{"attributes": {"shooting": 0}}]
        assert overall_rating({"shooting": 80}, history) == 80.0

    def test_history_without_attributes(self):
        assert overall_rating({"shooting": 80}, [{"rating": 7}]) == 80.0

    def test_pydantic_models(self):
        attributes = PlayerAttributes(**SIX_AT_TEN)
        history = [PerformanceHistoryEntry(date="2024-01-01T10:00:00", attributes=PlayerAttributes(shooting=10))]
        assert overall_rating(attributes, history) == 10.0

    @pytest.mark.parametrize("attributes", [None, "bad", 3, ["shooting"]])
    def test_malformed_attributes_are_total(self, attributes):
        assert overall_rating(attributes, None) == 0.0

    def test_non_numeric_values_are_skipped(self):
        assert overall_rating({"shooting": "fast", "pace": 50, "passing": True}, []) == 50.0

    def test_custom_config(self):
        cfg = PerformanceConfig(weights={"shooting": 1.0}, decimals=2)
        assert overall_rating({"shooting": 66.666, "pace": 0}, [], cfg) == 66.67

    def test_does_not_mutate_inputs(self):
        attributes = {"shooting": 80}
        history = [{"attributes": {"shooting": 60}}]
        overall_rating(attributes, history)
        assert attributes == {"shooting": 80}
        assert history == [{"attributes": {"shooting": 60}}]


class TestBlendWithLatest:
    def test_no_history_returns_current(self):
        assert blend_with_latest({"pace": 50}, []) == {"pace": 50}

    def test_only_shared_fields_are_blended(self):
        blended = blend_with_latest({"pace": 50, "shooting": 40}, [{"attributes": {"pace": 70}}])
        assert blended == {"pace": 60, "shooting": 40}


# ======================================================================
# average_performance
# ======================================================================


class TestAveragePerformance:
    def test_empty_history(self):
        assert average_performance([]) == 0.0
        assert average_performance(None) == 0.0

    def test_rating_and_session_rating(self):
        assert average_performance([{"rating": 6}, {"sessionRating": 8}]) == 7.0

    def test_nested_session_rating_wins(self):
        entry = {"rating": 4, "attributes": {"sessionRating": 9, "rating": 5}}
        assert usable_rating(entry) == 9.0

    def test_nested_rating_before_top_level(self):
        assert usable_rating({"rating": 4, "attributes": {"rating": 5}}) == 5.0

    @pytest.mark.parametrize(
        "entry",
        [
            {},
            {"rating": 0},
            {"rating": None},
            {"rating": "7"},
            {"attributes": {"session_rating": 0}},
            "not-an-entry",
        ],
    )
    def test_unusable_entries(self, entry):
        assert usable_rating(entry) is None

    def test_zero_falls_through_to_next_source(self):
        assert usable_rating({"rating": 0, "session_rating": 6}) == 6.0

    def test_unusable_entries_are_excluded_from_mean(self):
        history = [{"rating": 6}, {"rating": 0}, {}, {"attributes": {"session_rating": 9}}]
        assert average_performance(history) == 7.5

    def test_rounds_to_one_decimal(self):
        assert average_performance([{"rating": 7}, {"rating": 8}, {"rating": 8}]) == 7.7

    def test_rounding_is_half_up(self):
        cfg = PerformanceConfig(decimals=0)
        # round() would give 2 and 6 (half to even)
        assert average_performance([{"rating": 2}, {"rating": 3}], cfg) == 3.0
        assert average_performance([{"rating": 6}, {"rating": 7}], cfg) == 7.0

    def test_history_entry_models(self):
        history = [
            PerformanceHistoryEntry(date="2024-01-01T10:00:00", rating=6),
            PerformanceHistoryEntry(date="2024-01-02T10:00:00", attributes=PlayerAttributes(session_rating=8)),
        ]
        assert average_performance(history) == 7.0

    def test_malformed_history_is_total(self):
        assert average_performance({"rating": 6}) == 0.0
        assert average_performance("history") == 0.0


class TestSummarise:
    def test_both_values(self):
        summary = summarise(SIX_AT_TEN, [{"rating": 6}, {"rating": 8}])
        assert summary.average_performance == 7.0
        assert summary.overall_rating == 10.0
