"""
Rule-based outcome prediction for adopting a fork.

Every rule is evaluated independently and all that fire are collected:

  | Rule                  | Fires when                                   | Kind     |
  |-----------------------|----------------------------------------------|----------|
  | no_cook_trials        | total_cooks == 0                             | risk     |
  | few_cook_trials       | 1 <= total_cooks <= 2                        | risk     |
  | well_tested           | total_cooks >= 5                             | positive |
  | low_success_rate      | cooks >= 3 and success_rate < 50             | risk     |
  | moderate_success_rate | cooks >= 3 and 50 <= success_rate < 70       | risk     |
  | high_success_rate     | cooks >= 3 and success_rate >= 85            | positive |
  | low_rating            | cooks >= 3 and average_rating < 2.5          | risk     |
  | highly_rated          | cooks >= 3 and average_rating >= 3.5         | positive |
  | major_substitutions   | changelog ingredient changes >= 5            | risk     |
  | minimal_changes       | changelog ingredient changes <= 2            | positive |
  | complex_modifications | changelog step changes >= 5                  | risk     |
  | worse_than_parent     | rating diff < -0.3 or success diff < -10     | risk     |
  | better_than_parent    | otherwise, rating > +0.3 or success > +10    | positive |
  | crowd_favorite        | >= 3 answers and would-make-again >= 80 %    | positive |
  | photo_verified        | photos_count >= 3                            | positive |

Changelog rules are skipped entirely when no changelog is supplied: a root
recipe, or a fork whose parent is gone and that has no stored changelog.
A missing changelog does not count as zero changes, so ``minimal_changes``
cannot fire for it. Rates are compared unrounded.

Scoring:

    net_score = Σ risk severity − Σ |positive severity|
    high   if net_score >= 10
    medium if net_score >= 5
    low    otherwise

Recommendation: ``not_recommended`` on high risk; ``proceed_with_caution`` on
medium risk or fewer than 3 cooks; ``proceed`` otherwise.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from fork_engine.models.changelog import ForkChangelog
from fork_engine.models.prediction import (
    OutcomePrediction,
    PredictionParentDiff,
    PredictionStats,
    Recommendation,
    RiskFactor,
    RiskLevel,
)
from fork_engine.models.recipe import Recipe
from fork_engine.models.trial import CookTrial
from fork_engine.taxonomy.badges import COMPARISON_RATING_DELTA, COMPARISON_SUCCESS_DELTA
from fork_engine.taxonomy.risk_factors import (
    CAUTION_MIN_COOKS,
    COMPLEX_STEP_CHANGES,
    CONFIDENCE_STEPS,
    CROWD_FAVORITE_MIN_ANSWERS,
    CROWD_FAVORITE_RATE,
    FEW_TRIALS_MAX,
    HIGH_RATING,
    HIGH_RISK_THRESHOLD,
    HIGH_SUCCESS_RATE,
    LOW_RATING,
    LOW_SUCCESS_RATE,
    MAJOR_INGREDIENT_CHANGES,
    MEDIUM_RISK_THRESHOLD,
    MINIMAL_INGREDIENT_CHANGES,
    MODERATE_SUCCESS_RATE,
    PHOTO_VERIFIED_MIN,
    POSITIVE_FACTORS,
    RATES_MIN_COOKS,
    RECOMMENDATION_MESSAGES,
    RISK_FACTORS,
    WELL_TESTED_MIN,
)
from fork_engine.validation.aggregator import (
    has_comparable_data,
    round_half_up,
    summarize_trials,
)

logger = logging.getLogger(__name__)


def _risk(factor_id: str) -> RiskFactor:
    return RiskFactor(id=factor_id, **RISK_FACTORS[factor_id])


def _positive(factor_id: str) -> RiskFactor:
    return RiskFactor(id=factor_id, **POSITIVE_FACTORS[factor_id])


def risk_level(net_score: int) -> RiskLevel:
    if net_score >= HIGH_RISK_THRESHOLD:
        return "high"
    if net_score >= MEDIUM_RISK_THRESHOLD:
        return "medium"
    return "low"


def confidence_score(total_cooks: int) -> int:
    """Step function of trial count: 10 / 30 / 50 / 70 / 90."""
    for min_cooks, score in CONFIDENCE_STEPS:
        if total_cooks >= min_cooks:
            return score
    return CONFIDENCE_STEPS[-1][1]


def parent_factor(rating_diff: float, success_rate_diff: float) -> Optional[str]:
    """``worse_than_parent`` / ``better_than_parent`` / ``None``; "worse" is checked first.

    Same thresholds as ``validation.aggregator.comparison_verdict``, opposite
    precedence: a fork that is rated higher but fails more often is a risk.
    """
    if rating_diff < -COMPARISON_RATING_DELTA or success_rate_diff < -COMPARISON_SUCCESS_DELTA:
        return "worse_than_parent"
    if rating_diff > COMPARISON_RATING_DELTA or success_rate_diff > COMPARISON_SUCCESS_DELTA:
        return "better_than_parent"
    return None


def recommend(level: RiskLevel, total_cooks: int) -> Recommendation:
    if level == "high":
        return Recommendation(
            action="not_recommended", message=RECOMMENDATION_MESSAGES["not_recommended"]
        )
    if level == "medium" or total_cooks < CAUTION_MIN_COOKS:
        key = "caution_untested" if total_cooks < CAUTION_MIN_COOKS else "caution_mixed"
        return Recommendation(
            action="proceed_with_caution", message=RECOMMENDATION_MESSAGES[key]
        )
    return Recommendation(action="proceed", message=RECOMMENDATION_MESSAGES["proceed"])


def predict(
    trials: Iterable[CookTrial],
    changelog: Optional[ForkChangelog] = None,
    parent_trials: Optional[Iterable[CookTrial]] = None,
    recipe: Optional[Recipe] = None,
) -> OutcomePrediction:
    """Score the risk of cooking a recipe from its trials and changelog.

    Args:
        trials: The recipe's cook trials.
        changelog: Diff against the parent; ``None`` skips the changelog rules.
        parent_trials: The parent's trials, for the parent comparison rule.
        recipe: Optional, fills ``recipe_id``/``is_fork`` on the result.

    Returns:
        ``OutcomePrediction`` with all fired factors in rule order.
    """
    summary = summarize_trials(trials)
    total = summary.total_cooks
    risks: list[RiskFactor] = []
    positives: list[RiskFactor] = []

    # Data sufficiency
    if total == 0:
        risks.append(_risk("no_cook_trials"))
    elif total <= FEW_TRIALS_MAX:
        risks.append(_risk("few_cook_trials"))
    elif total >= WELL_TESTED_MIN:
        positives.append(_positive("well_tested"))

    # Outcome rates
    if total >= RATES_MIN_COOKS:
        if summary.success_rate < LOW_SUCCESS_RATE:
            risks.append(_risk("low_success_rate"))
        elif summary.success_rate < MODERATE_SUCCESS_RATE:
            risks.append(_risk("moderate_success_rate"))
        elif summary.success_rate >= HIGH_SUCCESS_RATE:
            positives.append(_positive("high_success_rate"))

        if summary.average_rating < LOW_RATING:
            risks.append(_risk("low_rating"))
        elif summary.average_rating >= HIGH_RATING:
            positives.append(_positive("highly_rated"))

    # Modification magnitude
    ingredient_changes = changelog.ingredient_change_count if changelog else 0
    step_changes = changelog.step_change_count if changelog else 0
    if changelog is not None:
        if ingredient_changes >= MAJOR_INGREDIENT_CHANGES:
            risks.append(_risk("major_substitutions"))
        elif ingredient_changes <= MINIMAL_INGREDIENT_CHANGES:
            positives.append(_positive("minimal_changes"))
        if step_changes >= COMPLEX_STEP_CHANGES:
            risks.append(_risk("complex_modifications"))

    # Parent comparison
    parent_diff: Optional[PredictionParentDiff] = None
    if parent_trials is not None:
        parent = summarize_trials(parent_trials)
        if has_comparable_data(summary, parent):
            rating_diff = summary.average_rating - parent.average_rating
            success_rate_diff = summary.success_rate - parent.success_rate
            parent_diff = PredictionParentDiff(
                rating_diff=round_half_up(rating_diff, 2),
                success_rate_diff=round_half_up(success_rate_diff, 2),
            )
            factor = parent_factor(rating_diff, success_rate_diff)
            if factor == "worse_than_parent":
                risks.append(_risk(factor))
            elif factor == "better_than_parent":
                positives.append(_positive(factor))

    # Community signals
    if (
        summary.would_make_again_answers >= CROWD_FAVORITE_MIN_ANSWERS
        and summary.would_make_again_rate >= CROWD_FAVORITE_RATE
    ):
        positives.append(_positive("crowd_favorite"))
    if summary.photos_count >= PHOTO_VERIFIED_MIN:
        positives.append(_positive("photo_verified"))

    net_score = sum(f.severity for f in risks) - sum(abs(f.severity) for f in positives)
    level = risk_level(net_score)
    logger.debug(
        "Prediction%s: net=%d level=%s risks=%s positives=%s",
        f" for {recipe.id}" if recipe else "",
        net_score, level, [f.id for f in risks], [f.id for f in positives],
    )

    return OutcomePrediction(
        recipe_id=recipe.id if recipe else None,
        is_fork=recipe.is_fork if recipe else False,
        overall_risk_level=level,
        net_score=net_score,
        confidence_score=confidence_score(total),
        risk_factors=risks,
        positive_factors=positives,
        recommendation=recommend(level, total),
        stats=PredictionStats(
            total_cooks=total,
            success_rate=summary.success_rate_pct,
            average_rating=round_half_up(summary.average_rating, 1),
            ingredient_changes=ingredient_changes,
            step_changes=step_changes,
            compared_to_parent=parent_diff,
        ),
    )
