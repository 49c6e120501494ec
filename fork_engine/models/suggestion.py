"""
Smart suggestion output model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ForkSuggestion(BaseModel):
    """A sibling fork scored against a requester's preferences.

    Attributes:
        match_score: Clamped to [0, 100].
        match_reasons: Never empty; falls back to ``"Alternative version"``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: Optional[str] = None
    fork_note: Optional[str] = None
    fork_tags: list[str] = []
    user_id: Optional[str] = None
    match_score: int
    match_reasons: list[str]
    vote_count: int = 0
    created_at: Optional[datetime] = None

    @field_validator("match_score")
    @classmethod
    def validate_score_range(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError(f"match_score must be in [0, 100], got {v}.")
        return v

    @field_validator("match_reasons")
    @classmethod
    def validate_reasons_not_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("match_reasons must not be empty.")
        return v
