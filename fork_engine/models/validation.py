"""
Validation output models: aggregated cook-trial statistics and badges.

A ``ValidationBadge`` is in exactly one of two states:
  - earned      → ``earned_at`` set, ``progress``/``threshold`` unset
  - in progress → ``progress``/``threshold`` set, ``earned_at`` unset
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator

ComparisonVerdict = Literal["better", "similar", "worse", "insufficient_data"]


class ValidationBadge(BaseModel):
    """An achievement label derived from aggregate trial stats."""

    model_config = ConfigDict(frozen=True)

    type: str
    label: str
    description: str
    icon: str
    earned_at: Optional[datetime] = None
    progress: Optional[int] = None
    threshold: Optional[int] = None

    @model_validator(mode="after")
    def validate_state(self) -> "ValidationBadge":
        if self.earned_at is not None and self.progress is not None:
            raise ValueError("A badge cannot be both earned and in progress.")
        if self.earned_at is None and self.progress is None:
            raise ValueError("A badge must be either earned or in progress.")
        return self

    @property
    def is_earned(self) -> bool:
        return self.earned_at is not None


class RatingDistribution(BaseModel):
    """Count of trials per rating value."""

    model_config = ConfigDict(frozen=True)

    rating1: int = 0
    rating2: int = 0
    rating3: int = 0
    rating4: int = 0


class ParentComparison(BaseModel):
    """Fork-vs-parent comparison of trial outcomes.

    Diffs are fork minus parent; positive means the fork does better.
    With fewer than 3 trials on either side, diffs are zero and the verdict
    is ``insufficient_data`` (``cook_count_diff`` is still reported).
    """

    model_config = ConfigDict(frozen=True)

    rating_diff: float
    success_rate_diff: float
    cook_count_diff: int
    verdict: ComparisonVerdict


class TrialDigest(BaseModel):
    """A recent trial as shown on a validation report."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    rating: int
    rating_emoji: str
    would_make_again: Optional[bool] = None
    tags: list[str] = []
    notes: Optional[str] = None
    photo_url: Optional[str] = None
    cooked_at: datetime


class ValidationStats(BaseModel):
    """Everything derived from one recipe's cook trials.

    Percentages are integers in [0, 100]; ``average_rating`` is rounded to
    one decimal.
    """

    model_config = ConfigDict(frozen=True)

    recipe_id: Optional[str] = None
    is_fork: bool = False
    parent_id: Optional[str] = None

    total_cooks: int
    successful_cooks: int
    success_rate: int

    average_rating: float
    rating_distribution: RatingDistribution

    would_make_again_count: int
    would_make_again_rate: int

    time_accuracy_reports: int
    time_accurate_count: int
    time_accuracy_rate: int

    photos_count: int
    has_photo_verification: bool

    badges: list[ValidationBadge]
    recent_trials: list[TrialDigest] = []
    compared_to_parent: Optional[ParentComparison] = None

    @property
    def earned_badges(self) -> list[ValidationBadge]:
        return [b for b in self.badges if b.is_earned]


class TopValidatedFork(BaseModel):
    """A direct fork ranked by its trial record."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    fork_note: Optional[str] = None
    success_rate: int
    total_cooks: int
    average_rating: float
    badges: list[ValidationBadge]
