"""
Tests for fork_engine/validation/aggregator.py.

What we test
------------
round_half_up():
  - .5 rounds away from zero for positive values (62.5 -> 63).

summarize_trials() / aggregate():
  - Empty input yields zeros, never a division error.
  - success_rate counts ratings >= 3.
  - would_make_again_rate only counts trials that answered.
  - time_accuracy_rate only counts trials with a timing tag.
  - Rating distribution and recent trials (newest first, capped).

compute_badges():
  - verified is always present: progress below 5 successes, earned at 5.
  - Other badges appear only when earned.

compare_to_parent():
  - "better" / "worse" / "similar" from rating and success-rate deltas.
  - "better" is checked before "worse".
  - Fewer than 3 trials on either side: insufficient_data with zero diffs.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from fork_engine.validation.aggregator import (
    aggregate,
    compare_to_parent,
    comparison_verdict,
    compute_badges,
    round_half_up,
    summarize_trials,
)

NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)


def _badge_types(badges) -> list[str]:
    return [b.type for b in badges]


# ── Rounding ──────────────────────────────────────────────────────────────────

class TestRoundHalfUp:
    @pytest.mark.parametrize("value, ndigits, expected", [
        (62.5, 0, 63),
        (2.5, 0, 3),
        (66.666, 0, 67),
        (3.25, 1, 3.3),
        (1.005, 2, 1.0),  # binary float: 1.005 is slightly below 1.005
        (0.0, 0, 0),
    ])
    def test_values(self, value, ndigits, expected):
        assert round_half_up(value, ndigits) == pytest.approx(expected)


# ── Stats ─────────────────────────────────────────────────────────────────────

class TestAggregateStats:
    def test_empty(self):
        stats = aggregate([], now=NOW)
        assert stats.total_cooks == 0
        assert stats.success_rate == 0
        assert stats.average_rating == 0.0
        assert stats.would_make_again_rate == 0
        assert stats.time_accuracy_rate == 0
        assert stats.has_photo_verification is False
        assert stats.recent_trials == []
        assert stats.compared_to_parent is None

    def test_success_rate_rounds_half_up(self, make_trials):
        # 5 of 8 successful = 62.5 %
        stats = aggregate(make_trials("r", [4, 4, 3, 3, 3, 2, 1, 1]), now=NOW)
        assert stats.successful_cooks == 5
        assert stats.success_rate == 63

    def test_average_rating(self, make_trials):
        stats = aggregate(make_trials("r", [4, 3, 3]), now=NOW)
        assert stats.average_rating == pytest.approx(3.3)

    def test_rating_distribution(self, make_trials):
        stats = aggregate(make_trials("r", [4, 4, 3, 1]), now=NOW)
        dist = stats.rating_distribution
        assert (dist.rating1, dist.rating2, dist.rating3, dist.rating4) == (1, 0, 1, 2)

    def test_would_make_again_ignores_unanswered(self, make_trial):
        trials = [
            make_trial("t1", "r", would_make_again=True),
            make_trial("t2", "r", would_make_again=True),
            make_trial("t3", "r", would_make_again=False),
            make_trial("t4", "r", would_make_again=None),
        ]
        stats = aggregate(trials, now=NOW)
        assert stats.would_make_again_count == 2
        assert stats.would_make_again_rate == 67

    def test_time_accuracy_among_timing_reports(self, make_trial):
        trials = [
            make_trial("t1", "r", tags=["quick_easy"]),
            make_trial("t2", "r", tags=["quick_easy"]),
            make_trial("t3", "r", tags=["quick_easy", "weeknight"]),
            make_trial("t4", "r", tags=["time_consuming"]),
            make_trial("t5", "r", tags=["weeknight"]),
        ]
        stats = aggregate(trials, now=NOW)
        assert stats.time_accuracy_reports == 4
        assert stats.time_accurate_count == 3
        assert stats.time_accuracy_rate == 75

    def test_recent_trials_newest_first_and_capped(self, make_trials):
        stats = aggregate(make_trials("r", [1, 2, 3, 4, 4, 4, 4]), now=NOW, recent_limit=3)
        assert [t.id for t in stats.recent_trials] == ["r-t6", "r-t5", "r-t4"]
        assert stats.recent_trials[0].rating_emoji == "😍"

    def test_identity_from_recipe(self, make_recipe):
        fork = make_recipe("f", parent_id="p")
        stats = aggregate([], recipe=fork, now=NOW)
        assert stats.recipe_id == "f"
        assert stats.is_fork is True
        assert stats.parent_id == "p"


# ── Badges ────────────────────────────────────────────────────────────────────

class TestBadges:
    def test_empty_has_only_verified_progress(self):
        badges = compute_badges(summarize_trials([]), now=NOW)
        assert _badge_types(badges) == ["verified"]
        assert badges[0].progress == 0
        assert badges[0].threshold == 5
        assert badges[0].earned_at is None

    def test_verified_flips_at_five_successes(self, make_trials):
        four = compute_badges(summarize_trials(make_trials("r", [3, 3, 3, 3, 1])), now=NOW)
        verified = four[0]
        assert verified.type == "verified"
        assert verified.is_earned is False
        assert verified.progress == 80

        five = compute_badges(summarize_trials(make_trials("r", [3, 3, 3, 3, 3])), now=NOW)
        assert five[0].is_earned is True
        assert five[0].earned_at == NOW
        assert five[0].progress is None

    def test_highly_rated(self, make_trials):
        badges = compute_badges(summarize_trials(make_trials("r", [4, 3, 4, 3])), now=NOW)
        assert "highly_rated" in _badge_types(badges)

    def test_highly_rated_needs_three_cooks(self, make_trials):
        badges = compute_badges(summarize_trials(make_trials("r", [4, 4])), now=NOW)
        assert "highly_rated" not in _badge_types(badges)

    def test_photo_verified(self, make_trials):
        trials = make_trials("r", [2, 2, 2], photo_url="https://img/x.jpg")
        badges = compute_badges(summarize_trials(trials), now=NOW)
        assert "photo_verified" in _badge_types(badges)

    def test_time_accurate(self, make_trials):
        trials = make_trials("r", [2, 2, 2], tags=["quick_easy"])
        badges = compute_badges(summarize_trials(trials), now=NOW)
        assert "time_accurate" in _badge_types(badges)

    def test_all_earned_for_strong_record(self, make_trials):
        trials = make_trials(
            "r", [4, 4, 4, 4, 4],
            would_make_again=True, tags=["quick_easy"], photo_url="https://img/x.jpg",
        )
        badges = compute_badges(summarize_trials(trials), now=NOW)
        assert _badge_types(badges) == [
            "verified", "highly_rated", "time_accurate",
            "crowd_favorite", "photo_verified", "quick_win",
        ]
        assert all(b.is_earned for b in badges)

    def test_quick_win_needs_high_success(self, make_trials):
        # 80 % success is below the 85 % bar.
        badges = compute_badges(summarize_trials(make_trials("r", [4, 4, 4, 4, 2])), now=NOW)
        assert "quick_win" not in _badge_types(badges)


# ── Parent comparison ─────────────────────────────────────────────────────────

class TestParentComparison:
    def test_better(self, make_trials):
        parent = summarize_trials(make_trials("p", [3] * 9 + [2]))   # avg 2.9, 90 %
        fork = summarize_trials(make_trials("f", [4] * 5))           # avg 4.0, 100 %
        cmp = compare_to_parent(fork, parent)
        assert cmp.verdict == "better"
        assert cmp.rating_diff == pytest.approx(1.1)
        assert cmp.success_rate_diff == pytest.approx(10.0)
        assert cmp.cook_count_diff == -5

    def test_worse(self, make_trials):
        parent = summarize_trials(make_trials("p", [4, 4, 4]))
        fork = summarize_trials(make_trials("f", [2, 2, 3]))
        assert compare_to_parent(fork, parent).verdict == "worse"

    def test_similar(self, make_trials):
        parent = summarize_trials(make_trials("p", [3, 3, 3]))
        fork = summarize_trials(make_trials("f", [3, 3, 3, 3]))
        cmp = compare_to_parent(fork, parent)
        assert cmp.verdict == "similar"
        assert cmp.rating_diff == 0.0
        assert cmp.success_rate_diff == 0.0

    def test_better_checked_before_worse(self, make_trials):
        parent = summarize_trials(make_trials("p", [3, 3, 3, 3, 3]))  # 3.0, 100 %
        fork = summarize_trials(make_trials("f", [4, 4, 4, 4, 1]))    # 3.4, 80 %
        assert compare_to_parent(fork, parent).verdict == "better"

    def test_insufficient_data(self, make_trials):
        parent = summarize_trials(make_trials("p", [4] * 10))
        fork = summarize_trials(make_trials("f", [1, 1]))
        cmp = compare_to_parent(fork, parent)
        assert cmp.verdict == "insufficient_data"
        assert cmp.rating_diff == 0.0
        assert cmp.success_rate_diff == 0.0
        assert cmp.cook_count_diff == -8

    @pytest.mark.parametrize("rating_diff, success_diff, expected", [
        (0.3, 10.0, "similar"),     # thresholds are strict
        (0.31, 0.0, "better"),
        (0.0, 10.5, "better"),
        (-0.31, 0.0, "worse"),
        (0.0, -10.5, "worse"),
        (0.5, 10.0, "better"),     # parent 4.0 @ 90%, fork 4.5 @ 100%
    ])
    def test_verdict_thresholds(self, rating_diff, success_diff, expected):
        assert comparison_verdict(rating_diff, success_diff) == expected

    def test_aggregate_includes_comparison_when_parent_given(self, make_trials):
        stats = aggregate(
            make_trials("f", [4, 4, 4]),
            parent_trials=make_trials("p", [2, 2, 2]),
            now=NOW,
        )
        assert stats.compared_to_parent is not None
        assert stats.compared_to_parent.verdict == "better"

    def test_aggregate_with_empty_parent_trials(self, make_trials):
        stats = aggregate(make_trials("f", [4, 4, 4]), parent_trials=[], now=NOW)
        assert stats.compared_to_parent.verdict == "insufficient_data"
        assert stats.compared_to_parent.cook_count_diff == 3
