"""
Fork browsing and analytics output models.

  ForkPage              one page of a recipe's direct forks (inspired / gallery)
  TrendingFork          a voted fork with its parent's title
  ForkAnalytics         a user's fork activity and influence score
  ForkComparisonMatrix  a recipe and its top forks side by side

All are computed per request from the Recipe Store and never persisted.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator

from fork_engine.models.lineage import RecipeSummary


class ForkPage(BaseModel):
    """A page of direct forks.

    ``has_more`` is ``offset + limit < total``.
    """

    model_config = ConfigDict(frozen=True)

    items: list[RecipeSummary]
    total: int
    offset: int
    limit: int
    has_more: bool

    @model_validator(mode="after")
    def validate_bounds(self) -> "ForkPage":
        if self.offset < 0 or self.limit < 1:
            raise ValueError(
                f"Invalid page bounds: offset={self.offset}, limit={self.limit}."
            )
        if len(self.items) > self.limit:
            raise ValueError(f"{len(self.items)} items exceed page limit {self.limit}.")
        return self


class TrendingFork(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    user_id: Optional[str] = None
    fork_note: Optional[str] = None
    fork_tags: list[str] = []
    vote_count: int
    parent_id: str
    parent_title: Optional[str] = None
    created_at: Optional[datetime] = None


class TopForkedRecipe(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    fork_count: int


class MonthlyForkActivity(BaseModel):
    """Forks per calendar month (``"YYYY-MM"``).

    Attributes:
        forks_created: Forks the user authored that month.
        forks_received: Direct forks of the user's original recipes created
            that month, whoever authored them.
    """

    model_config = ConfigDict(frozen=True)

    month: str
    forks_created: int = 0
    forks_received: int = 0


class TagCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    tag: str
    count: int


class ForkAnalytics(BaseModel):
    """A user's fork footprint.

    ``fork_influence_score = forks_received × 10 + votes_received × 5 + forks_created × 2``
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    total_forks_created: int
    total_forks_received: int
    total_votes_received: int
    fork_influence_score: int
    top_forked_recipes: list[TopForkedRecipe] = []
    fork_activity_by_month: list[MonthlyForkActivity] = []
    top_fork_tags: list[TagCount] = []


ComparisonValue = Union[int, str, None]


class ComparisonItem(BaseModel):
    """One column of the comparison matrix."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    fork_note: Optional[str] = None
    user_id: Optional[str] = None
    vote_count: int = 0
    total_time_minutes: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[str] = None
    ingredient_count: int = 0
    step_count: int = 0
    calories: Optional[int] = None


class ComparisonField(BaseModel):
    """One row of the matrix: ``values[0]`` is the original, then each fork."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    values: list[ComparisonValue]


class ForkComparisonMatrix(BaseModel):
    model_config = ConfigDict(frozen=True)

    original: ComparisonItem
    forks: list[ComparisonItem]
    fields: list[ComparisonField]
