"""
Recipe models: the read-mostly entity owned by the external Recipe Store.

A recipe is a node in the fork forest:

  - ``parent_id`` points at the recipe it was forked from (``None`` for roots).
  - ``root_id`` is a denormalised pointer to the origin of the whole fork tree;
    ``None`` means either "this is a root" or "not cached", so the walker
    falls back to following ``parent_id``.

``components`` holds ordered sections, each with ordered ingredients and
steps. Section boundaries carry no meaning for diffing; they matter only
to the auto-fork applier, which edits the first step of each section.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from fork_engine.models.changelog import ForkChangelog
from fork_engine.utils.time_utils import ensure_utc

Quantity = Union[float, str]


class Ingredient(BaseModel):
    """One ingredient line inside a recipe component.

    Attributes:
        name: Free-text ingredient name, e.g. ``"2 large eggs"`` or ``"flour"``.
        quantity: Numeric amount or free text (``"a pinch"``); ``None`` if absent.
        unit: Unit string, e.g. ``"cup"``.
        notes: Free-text notes appended by cooks or the auto-fork applier.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    quantity: Optional[Quantity] = None
    unit: Optional[str] = None
    notes: Optional[str] = None

    def display(self) -> str:
        """Render as ``"<qty> <unit> <name>"`` with empty parts dropped."""
        return " ".join(
            part for part in (format_quantity(self.quantity), self.unit or "", self.name)
            if part
        ).strip()


class Step(BaseModel):
    """One instruction step inside a recipe component."""

    model_config = ConfigDict(frozen=True)

    order: int = 0
    instruction: str
    duration_minutes: Optional[int] = None


class RecipeComponent(BaseModel):
    """An ordered section of a recipe (e.g. "Sauce", "Dough")."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    ingredients: list[Ingredient] = []
    steps: list[Step] = []


class Recipe(BaseModel):
    """A recipe node as supplied by the Recipe Store.

    ``fork_count`` and ``vote_count`` are caches maintained by the owning
    write path; this engine only reads them.

    Attributes:
        id: Stable recipe identifier.
        title: Display title.
        user_id: Author id; recipient of vote/fork notifications.
        parent_id: Recipe this one was forked from, or ``None``.
        root_id: Cached origin of the fork tree, or ``None``.
        fork_count: Cached count of direct children.
        vote_count: Cached count of community votes on this fork.
        fork_tags: Tags from the fork-tag vocabulary.
        fork_note: Free-text note describing the fork.
        fork_changelog: Last stored changelog against the parent, if any.
        components: Ordered recipe sections.
        prep_time_minutes / cook_time_minutes / total_time_minutes: Timings.
        servings: Number of servings.
        difficulty: Free-text difficulty label, e.g. ``"easy"``.
        calories_per_serving: Nutrition figure shown in fork comparisons.
        created_at / updated_at: UTC timestamps.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    user_id: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[str] = None
    root_id: Optional[str] = None
    fork_count: int = 0
    vote_count: int = 0
    fork_tags: list[str] = []
    fork_note: Optional[str] = None
    fork_changelog: Optional[ForkChangelog] = None
    components: list[RecipeComponent] = []
    prep_time_minutes: Optional[int] = None
    cook_time_minutes: Optional[int] = None
    total_time_minutes: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[str] = None
    calories_per_serving: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("fork_count", "vote_count")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Counts must be non-negative, got {v}.")
        return v

    @field_validator("created_at", "updated_at")
    @classmethod
    def validate_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @property
    def is_fork(self) -> bool:
        return self.parent_id is not None

    def ingredients(self) -> list[Ingredient]:
        """All ingredients across components, in section order."""
        return [ing for comp in self.components for ing in comp.ingredients]

    def steps(self) -> list[Step]:
        """All steps across components, in section order."""
        return [step for comp in self.components for step in comp.steps]


def format_quantity(quantity: Optional[Quantity]) -> str:
    """Render a quantity without a trailing ``.0`` for whole numbers."""
    if quantity is None or quantity == "":
        return ""
    if isinstance(quantity, float):
        return str(int(quantity)) if quantity.is_integer() else f"{quantity:g}"
    return str(quantity)
