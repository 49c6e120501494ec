"""
Auto-fork template and result models.

Templates are static catalog entries (``fork_engine.taxonomy.autofork_catalog``)
validated into ``AutoForkTemplate`` by ``fork_engine.autofork.templates``.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict

from fork_engine.models.recipe import RecipeComponent

ModificationType = Literal[
    "substitute_ingredient",
    "remove_ingredient",
    "reduce_quantity",
    "increase_quantity",
    "change_cooking_method",
    "reduce_time",
    "simplify_steps",
    "add_instruction",
]
TemplateCategory = Literal["dietary", "cooking_method", "time", "health", "skill"]
EstimatedDifficulty = Literal["easy", "medium", "hard"]


class ForkModification(BaseModel):
    """One declarative transformation inside a template.

    Attributes:
        type: Operation to apply.
        target: Ingredient/technique keyword(s); tokenised on whitespace and
            underscores for ingredient matching.
        replacement: Replacement text for substitutions / method changes.
        reason: Human-readable rationale; for ``add_instruction`` this is the
            instruction text that gets prepended.
    """

    model_config = ConfigDict(frozen=True)

    type: ModificationType
    target: Optional[str] = None
    replacement: Optional[str] = None
    reason: str


class AutoForkTemplate(BaseModel):
    """A named bundle of modifications, e.g. "Make Vegan"."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    category: TemplateCategory
    modifications: list[ForkModification]
    fork_note: str
    fork_tags: list[str]


class IngredientChange(BaseModel):
    """A proposed ingredient edit shown by a preview."""

    model_config = ConfigDict(frozen=True)

    action: Literal["substitute", "remove", "reduce"]
    original: Optional[str] = None
    replacement: Optional[str] = None
    reason: str


class StepChange(BaseModel):
    """A proposed step edit shown by a preview."""

    model_config = ConfigDict(frozen=True)

    action: Literal["modify", "add", "remove"]
    step_index: Optional[int] = None
    description: str


class MetadataAdjustment(BaseModel):
    """A proposed metadata change (timing, servings)."""

    model_config = ConfigDict(frozen=True)

    field: str
    old_value: Any
    new_value: Any


class AutoForkPreview(BaseModel):
    """What applying a template would change, without changing anything."""

    model_config = ConfigDict(frozen=True)

    template: AutoForkTemplate
    ingredient_changes: list[IngredientChange]
    step_changes: list[StepChange]
    metadata_changes: list[MetadataAdjustment]
    estimated_difficulty: EstimatedDifficulty
    warnings: list[str]


class AutoForkChanges(BaseModel):
    """Counts of touched ingredients and steps."""

    model_config = ConfigDict(frozen=True)

    ingredients_modified: int = 0
    steps_modified: int = 0


class ForkDraft(BaseModel):
    """Payload for a new derived recipe; persisting it is the caller's job."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: Optional[str] = None
    user_id: Optional[str] = None
    parent_id: str
    root_id: str
    fork_note: str
    fork_tags: list[str]
    components: list[RecipeComponent]
    prep_time_minutes: Optional[int] = None
    cook_time_minutes: Optional[int] = None
    total_time_minutes: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[str] = None


class AutoForkResult(BaseModel):
    """Outcome of applying a template; failures are reported, not raised."""

    model_config = ConfigDict(frozen=True)

    success: bool
    template_id: str
    draft: Optional[ForkDraft] = None
    changes: AutoForkChanges = AutoForkChanges()
    error: Optional[str] = None
