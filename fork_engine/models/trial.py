"""
Cook-trial and flavor-profile models: read-only inputs from external stores.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from fork_engine.utils.time_utils import ensure_utc

# Sentinel tags cooks use to comment on timing.
TAG_QUICK_EASY = "quick_easy"
TAG_TIME_CONSUMING = "time_consuming"


class CookTrial(BaseModel):
    """A single user-reported attempt at cooking a recipe.

    Attributes:
        id: Trial identifier.
        recipe_id: Recipe that was cooked.
        user_id: Cook who reported the trial.
        rating: 1 (disappointing) to 4 (loved it).
        would_make_again: Explicit answer, or ``None`` when not given.
        tags: Free-form tags; ``quick_easy`` / ``time_consuming`` are timing reports.
        notes: Optional free-text notes.
        photo_url: URL of a result photo, if one was shared.
        cooked_at: UTC timestamp of the attempt.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    recipe_id: str
    user_id: str
    rating: int
    would_make_again: Optional[bool] = None
    tags: list[str] = []
    notes: Optional[str] = None
    photo_url: Optional[str] = None
    cooked_at: datetime

    @field_validator("rating")
    @classmethod
    def validate_rating(cls, v: int) -> int:
        if not 1 <= v <= 4:
            raise ValueError(f"rating must be in [1, 4], got {v}.")
        return v

    @field_validator("cooked_at")
    @classmethod
    def validate_cooked_at(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def is_successful(self) -> bool:
        return self.rating >= 3

    @property
    def has_photo(self) -> bool:
        return bool(self.photo_url)


class FlavorProfile(BaseModel):
    """A user's learned flavor preferences, each scalar in [0, 1].

    Attributes:
        user_id: Owner of the profile.
        heat_preference: 0 = avoids spice, 1 = loves heat.
        preferred_complexity: 0 = simple weeknight cooking, 1 = project cooking.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    heat_preference: float = 0.5
    preferred_complexity: float = 0.5

    @field_validator("heat_preference", "preferred_complexity")
    @classmethod
    def validate_unit_interval(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Preference scalars must be in [0.0, 1.0], got {v}.")
        return v
