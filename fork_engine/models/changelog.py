"""
Changelog output models: the structural diff between a fork and its parent.

Produced by ``fork_engine.changelog.differ`` and optionally written back to
the Recipe Store as the fork's stored changelog.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class IngredientModification(BaseModel):
    """An ingredient present on both sides whose quantity or unit changed.

    Both sides are rendered as ``"<qty> <unit> <name>"``.
    """

    model_config = ConfigDict(frozen=True)

    original: str
    modified: str


class MetadataChange(BaseModel):
    """A metadata field whose value differs between parent and fork."""

    model_config = ConfigDict(frozen=True)

    field: str
    original: Optional[Any] = None
    modified: Optional[Any] = None


class ForkChangelog(BaseModel):
    """Additions, removals and modifications of a fork relative to its parent.

    Step counts are positional (see ``diff_components``): a step inserted in
    the middle is reported as a cascade of modified steps plus one added step.
    """

    model_config = ConfigDict(frozen=True)

    ingredients_added: list[str] = []
    ingredients_removed: list[str] = []
    ingredients_modified: list[IngredientModification] = []
    steps_added: int = 0
    steps_removed: int = 0
    steps_modified: int = 0
    metadata_changes: list[MetadataChange] = []
    summary: str = "Minor adjustments"

    @property
    def ingredient_change_count(self) -> int:
        return (
            len(self.ingredients_added)
            + len(self.ingredients_removed)
            + len(self.ingredients_modified)
        )

    @property
    def step_change_count(self) -> int:
        return self.steps_added + self.steps_removed + self.steps_modified
