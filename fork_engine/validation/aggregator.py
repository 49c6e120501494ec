"""
Cook-trial aggregation, validation badges and fork-vs-parent comparison.

Stats
-----
  success_rate          round(100 * count(rating >= 3) / total), 0 when empty
  average_rating        mean rating, rounded to one decimal on output
  would_make_again_rate percent True among trials that answered at all
  time_accuracy_rate    quick_easy / (quick_easy or time_consuming); a rate of
                        "felt quick" among cooks who commented on timing
  has_photo_verification photos_count >= 3

Badges are evaluated by ``compute_badges``; see
``fork_engine.taxonomy.badges`` for the rule table. Rounding is half-up to
match the percentages users already see elsewhere (62.5 % shows as 63 %).

Parent comparison needs at least ``COMPARISON_MIN_TRIALS`` trials on both
sides. The verdict checks "better" before "worse", so a fork that rates much
higher but succeeds less often still reads as "better".
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from fork_engine.models.recipe import Recipe
from fork_engine.models.trial import TAG_QUICK_EASY, TAG_TIME_CONSUMING, CookTrial
from fork_engine.models.validation import (
    ComparisonVerdict,
    ParentComparison,
    RatingDistribution,
    TrialDigest,
    ValidationBadge,
    ValidationStats,
)
from fork_engine.taxonomy.badges import (
    COMPARISON_MIN_TRIALS,
    COMPARISON_RATING_DELTA,
    COMPARISON_SUCCESS_DELTA,
    CROWD_FAVORITE_MIN_COOKS,
    CROWD_FAVORITE_MIN_RATE,
    HIGHLY_RATED_MIN_COOKS,
    HIGHLY_RATED_MIN_RATING,
    PHOTO_VERIFICATION_MIN,
    QUICK_WIN_MIN_COOKS,
    QUICK_WIN_MIN_RATING,
    QUICK_WIN_MIN_SUCCESS_RATE,
    RATING_EMOJIS,
    SUCCESS_RATING_MIN,
    TIME_ACCURATE_MIN_RATE,
    TIME_ACCURATE_MIN_REPORTS,
    VALIDATION_BADGES,
    VERIFIED_SUCCESSFUL_COOKS,
    BadgeType,
)
from fork_engine.utils.time_utils import utcnow


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round like a spreadsheet: .5 always goes up."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def _percent(part: int, whole: int) -> float:
    return 100.0 * part / whole if whole else 0.0


@dataclass
class TrialSummary:
    """Unrounded aggregate of a set of trials.

    Rates are percentages in [0, 100]; ``average_rating`` is 0.0 when empty.
    """

    total_cooks: int
    successful_cooks: int
    success_rate: float
    average_rating: float
    rating_counts: dict[int, int]
    would_make_again_answers: int
    would_make_again_count: int
    would_make_again_rate: float
    time_accuracy_reports: int
    time_accurate_count: int
    time_accuracy_rate: float
    photos_count: int

    @property
    def success_rate_pct(self) -> int:
        return int(round_half_up(self.success_rate))

    @property
    def would_make_again_pct(self) -> int:
        return int(round_half_up(self.would_make_again_rate))

    @property
    def time_accuracy_pct(self) -> int:
        return int(round_half_up(self.time_accuracy_rate))

    @property
    def has_photo_verification(self) -> bool:
        return self.photos_count >= PHOTO_VERIFICATION_MIN


def summarize_trials(trials: Iterable[CookTrial]) -> TrialSummary:
    """Reduce trials to raw counts and rates."""
    trials = list(trials)
    total = len(trials)
    successful = sum(1 for t in trials if t.rating >= SUCCESS_RATING_MIN)

    rating_counts = {r: 0 for r in range(1, 5)}
    for t in trials:
        rating_counts[t.rating] += 1

    answered = [t for t in trials if t.would_make_again is not None]
    again = sum(1 for t in answered if t.would_make_again)

    timing = [t for t in trials if TAG_QUICK_EASY in t.tags or TAG_TIME_CONSUMING in t.tags]
    quick = sum(1 for t in trials if TAG_QUICK_EASY in t.tags)

    return TrialSummary(
        total_cooks=total,
        successful_cooks=successful,
        success_rate=_percent(successful, total),
        average_rating=sum(t.rating for t in trials) / total if total else 0.0,
        rating_counts=rating_counts,
        would_make_again_answers=len(answered),
        would_make_again_count=again,
        would_make_again_rate=_percent(again, len(answered)),
        time_accuracy_reports=len(timing),
        time_accurate_count=quick,
        time_accuracy_rate=_percent(quick, len(timing)),
        photos_count=sum(1 for t in trials if t.has_photo),
    )


# ── Badges ────────────────────────────────────────────────────────────────────


def _badge(badge_type: BadgeType, **state) -> ValidationBadge:
    return ValidationBadge(type=badge_type.value, **VALIDATION_BADGES[badge_type], **state)


def compute_badges(summary: TrialSummary, now: Optional[datetime] = None) -> list[ValidationBadge]:
    """Evaluate every badge rule independently.

    ``verified`` is always present, either earned or with progress toward
    ``VERIFIED_SUCCESSFUL_COOKS``; every other badge appears only once earned.
    """
    earned_at = now or utcnow()
    success_rate = summary.success_rate_pct
    badges: list[ValidationBadge] = []

    if summary.successful_cooks >= VERIFIED_SUCCESSFUL_COOKS:
        badges.append(_badge(BadgeType.VERIFIED, earned_at=earned_at))
    else:
        badges.append(_badge(
            BadgeType.VERIFIED,
            progress=int(round_half_up(
                _percent(summary.successful_cooks, VERIFIED_SUCCESSFUL_COOKS)
            )),
            threshold=VERIFIED_SUCCESSFUL_COOKS,
        ))

    if (
        summary.average_rating >= HIGHLY_RATED_MIN_RATING
        and summary.total_cooks >= HIGHLY_RATED_MIN_COOKS
    ):
        badges.append(_badge(BadgeType.HIGHLY_RATED, earned_at=earned_at))

    if (
        summary.time_accuracy_pct >= TIME_ACCURATE_MIN_RATE
        and summary.time_accuracy_reports >= TIME_ACCURATE_MIN_REPORTS
    ):
        badges.append(_badge(BadgeType.TIME_ACCURATE, earned_at=earned_at))

    if (
        summary.would_make_again_pct >= CROWD_FAVORITE_MIN_RATE
        and summary.total_cooks >= CROWD_FAVORITE_MIN_COOKS
    ):
        badges.append(_badge(BadgeType.CROWD_FAVORITE, earned_at=earned_at))

    if summary.photos_count >= PHOTO_VERIFICATION_MIN:
        badges.append(_badge(BadgeType.PHOTO_VERIFIED, earned_at=earned_at))

    if (
        success_rate >= QUICK_WIN_MIN_SUCCESS_RATE
        and summary.total_cooks >= QUICK_WIN_MIN_COOKS
        and summary.average_rating >= QUICK_WIN_MIN_RATING
    ):
        badges.append(_badge(BadgeType.QUICK_WIN, earned_at=earned_at))

    return badges


# ── Parent comparison ─────────────────────────────────────────────────────────


def comparison_verdict(rating_diff: float, success_rate_diff: float) -> ComparisonVerdict:
    """Classify fork-minus-parent diffs; "better" wins over "worse"."""
    if rating_diff > COMPARISON_RATING_DELTA or success_rate_diff > COMPARISON_SUCCESS_DELTA:
        return "better"
    if rating_diff < -COMPARISON_RATING_DELTA or success_rate_diff < -COMPARISON_SUCCESS_DELTA:
        return "worse"
    return "similar"


def has_comparable_data(fork: TrialSummary, parent: TrialSummary) -> bool:
    return (
        fork.total_cooks >= COMPARISON_MIN_TRIALS
        and parent.total_cooks >= COMPARISON_MIN_TRIALS
    )


def compare_to_parent(fork: TrialSummary, parent: TrialSummary) -> ParentComparison:
    """Fork-vs-parent comparison; diffs are fork minus parent."""
    cook_count_diff = fork.total_cooks - parent.total_cooks
    if not has_comparable_data(fork, parent):
        return ParentComparison(
            rating_diff=0.0,
            success_rate_diff=0.0,
            cook_count_diff=cook_count_diff,
            verdict="insufficient_data",
        )

    rating_diff = fork.average_rating - parent.average_rating
    success_rate_diff = fork.success_rate - parent.success_rate
    return ParentComparison(
        rating_diff=round_half_up(rating_diff, 2),
        success_rate_diff=round_half_up(success_rate_diff, 2),
        cook_count_diff=cook_count_diff,
        verdict=comparison_verdict(rating_diff, success_rate_diff),
    )


# ── Report ────────────────────────────────────────────────────────────────────


def _digest(trial: CookTrial) -> TrialDigest:
    return TrialDigest(
        id=trial.id,
        user_id=trial.user_id,
        rating=trial.rating,
        rating_emoji=RATING_EMOJIS[trial.rating],
        would_make_again=trial.would_make_again,
        tags=list(trial.tags),
        notes=trial.notes,
        photo_url=trial.photo_url,
        cooked_at=trial.cooked_at,
    )


def aggregate(
    trials: Iterable[CookTrial],
    *,
    recipe: Optional[Recipe] = None,
    parent_trials: Optional[Iterable[CookTrial]] = None,
    now: Optional[datetime] = None,
    recent_limit: int = 5,
) -> ValidationStats:
    """Build the full validation report for one recipe.

    Args:
        trials: The recipe's cook trials, any order.
        recipe: Recipe the trials belong to; fills the identity fields.
        parent_trials: The parent's trials. When given (even empty) the report
            carries ``compared_to_parent``.
        now: Timestamp stamped on earned badges.
        recent_limit: Number of most-recent trials to include.

    Returns:
        ``ValidationStats`` with rounded percentages.
    """
    trials = list(trials)
    summary = summarize_trials(trials)

    comparison: Optional[ParentComparison] = None
    if parent_trials is not None:
        comparison = compare_to_parent(summary, summarize_trials(parent_trials))

    recent = sorted(trials, key=lambda t: t.cooked_at, reverse=True)[:recent_limit]

    return ValidationStats(
        recipe_id=recipe.id if recipe else None,
        is_fork=recipe.is_fork if recipe else False,
        parent_id=recipe.parent_id if recipe else None,
        total_cooks=summary.total_cooks,
        successful_cooks=summary.successful_cooks,
        success_rate=summary.success_rate_pct,
        average_rating=round_half_up(summary.average_rating, 1),
        rating_distribution=RatingDistribution(
            rating1=summary.rating_counts[1],
            rating2=summary.rating_counts[2],
            rating3=summary.rating_counts[3],
            rating4=summary.rating_counts[4],
        ),
        would_make_again_count=summary.would_make_again_count,
        would_make_again_rate=summary.would_make_again_pct,
        time_accuracy_reports=summary.time_accuracy_reports,
        time_accurate_count=summary.time_accurate_count,
        time_accuracy_rate=summary.time_accuracy_pct,
        photos_count=summary.photos_count,
        has_photo_verification=summary.has_photo_verification,
        badges=compute_badges(summary, now),
        recent_trials=[_digest(t) for t in recent],
        compared_to_parent=comparison,
    )
