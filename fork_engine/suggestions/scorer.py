"""
Smart-suggestion scoring: rates one fork against a cook's flavor profile.

Score formula (additive, clamped to 0–100)
------------------------------------------
    score = 50                                   # base
          + 20  if "spicier"    and heat_preference      > 0.6
          + 20  if "milder"     and heat_preference      < 0.4
          + 15  if "simplified" and preferred_complexity < 0.4
          + 15  if "elevated"   and preferred_complexity > 0.6
          + 15  if vote_count >= 5     (else)
          +  5  if vote_count >= 2

Tag preference bonuses need a flavor profile; without one only the
popularity tier can move the score.

Reason-only signals (no score effect)
-------------------------------------
    any of HEALTH_TAGS  → "Healthier alternative"
    "vegan"             → "Vegan version"
    "gluten-free"       → "Gluten-free option"

A fork that triggers nothing gets the reason "Alternative version".
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fork_engine.models.recipe import Recipe
from fork_engine.models.trial import FlavorProfile
from fork_engine.taxonomy.fork_tags import HEALTH_TAGS, ForkTag

BASE_SCORE = 50
MAX_SCORE = 100

HEAT_HIGH = 0.6
HEAT_LOW = 0.4
COMPLEXITY_HIGH = 0.6
COMPLEXITY_LOW = 0.4

HEAT_BONUS = 20
COMPLEXITY_BONUS = 15
FAVORITE_VOTES = 5
FAVORITE_BONUS = 15
WELL_RECEIVED_VOTES = 2
WELL_RECEIVED_BONUS = 5

FALLBACK_REASON = "Alternative version"


@dataclass
class MatchScore:
    """Score and explanation for one fork.

    Attributes:
        score:   Clamped total, 0–100.
        raw:     Unclamped total.
        reasons: Display strings, in rule order; never empty.
    """

    score:   int
    raw:     int
    reasons: list[str] = field(default_factory=list)


def _clamp(value: int, lo: int = 0, hi: int = MAX_SCORE) -> int:
    return max(lo, min(hi, value))


def score_fork(fork: Recipe, profile: FlavorProfile | None) -> MatchScore:
    """Score ``fork`` for a cook with ``profile`` (``None`` = no profile)."""
    tags = set(fork.fork_tags)
    score = BASE_SCORE
    reasons: list[str] = []

    # ── Flavor profile ────────────────────────────────────────────────────────
    if profile is not None:
        if ForkTag.SPICIER in tags and profile.heat_preference > HEAT_HIGH:
            score += HEAT_BONUS
            reasons.append("More heat - matches your spicy preference")
        if ForkTag.MILDER in tags and profile.heat_preference < HEAT_LOW:
            score += HEAT_BONUS
            reasons.append("Milder version - better for your taste")
        if ForkTag.SIMPLIFIED in tags and profile.preferred_complexity < COMPLEXITY_LOW:
            score += COMPLEXITY_BONUS
            reasons.append("Simplified - matches your cooking style")
        if ForkTag.ELEVATED in tags and profile.preferred_complexity > COMPLEXITY_HIGH:
            score += COMPLEXITY_BONUS
            reasons.append("More complex - suits your skill level")

    # ── Popularity ────────────────────────────────────────────────────────────
    votes = fork.vote_count
    if votes >= FAVORITE_VOTES:
        score += FAVORITE_BONUS
        reasons.append(f"Community favorite ({votes} votes)")
    elif votes >= WELL_RECEIVED_VOTES:
        score += WELL_RECEIVED_BONUS
        reasons.append(f"Well received ({votes} votes)")

    # ── Dietary signals (reasons only) ────────────────────────────────────────
    if tags & HEALTH_TAGS:
        reasons.append("Healthier alternative")
    if ForkTag.VEGAN in tags:
        reasons.append("Vegan version")
    if ForkTag.GLUTEN_FREE in tags:
        reasons.append("Gluten-free option")

    if not reasons:
        reasons.append(FALLBACK_REASON)

    return MatchScore(score=_clamp(score), raw=score, reasons=reasons)
