"""
Structural diff between a fork and its parent.

Rules
-----
Ingredients are flattened across components and matched by name
(case-insensitive, trimmed; no fuzzy matching, so "scallion" and
"green onion" are different ingredients):

  added     fork ingredients with no parent ingredient of the same name
  removed   parent ingredients with no fork ingredient of the same name
  modified  parent ingredients whose first same-named fork ingredient has a
            different ``quantity`` or ``unit`` (other fields are ignored)

Steps are flattened and compared by position, not content:

  steps_added    = max(0, len(fork) - len(parent))
  steps_removed  = max(0, len(parent) - len(fork))
  steps_modified = positions i < min(len) whose instruction text differs

A step inserted mid-sequence therefore reads as a run of modified steps plus
one added step. Consumers rely on these counts, so alignment is not attempted.

Metadata fields compared verbatim: prep time, cook time, servings, difficulty.

The summary lists non-zero categories in a fixed order:

    "Added 2 ingredients, Removed 1 ingredient, Added 1 step"

and reads "Minor adjustments" when none apply. Metadata changes never appear
in the summary.

Everything here is pure; results may be cached by
``(fork.id, parent.id, fork.updated_at)``.
"""

from __future__ import annotations

from typing import Optional

from fork_engine.models.changelog import (
    ForkChangelog,
    IngredientModification,
    MetadataChange,
)
from fork_engine.models.recipe import Ingredient, Recipe, RecipeComponent, Step

NO_CHANGES_SUMMARY = "Minor adjustments"

# (Recipe attribute, display label)
METADATA_FIELDS: tuple[tuple[str, str], ...] = (
    ("prep_time_minutes", "Prep Time"),
    ("cook_time_minutes", "Cook Time"),
    ("servings", "Servings"),
    ("difficulty", "Difficulty"),
)


def _key(ingredient: Ingredient) -> str:
    return ingredient.name.strip().lower()


def _flatten(components: list[RecipeComponent]) -> tuple[list[Ingredient], list[Step]]:
    ingredients = [ing for comp in components for ing in comp.ingredients]
    steps = [step for comp in components for step in comp.steps]
    return ingredients, steps


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def summarize(changelog: ForkChangelog) -> str:
    """Build the one-line summary for a changelog's counts."""
    parts: list[str] = []
    if changelog.ingredients_added:
        parts.append(f"Added {_plural(len(changelog.ingredients_added), 'ingredient')}")
    if changelog.ingredients_removed:
        parts.append(f"Removed {_plural(len(changelog.ingredients_removed), 'ingredient')}")
    if changelog.ingredients_modified:
        parts.append(f"Modified {_plural(len(changelog.ingredients_modified), 'ingredient')}")
    if changelog.steps_added:
        parts.append(f"Added {_plural(changelog.steps_added, 'step')}")
    if changelog.steps_removed:
        parts.append(f"Removed {_plural(changelog.steps_removed, 'step')}")
    return ", ".join(parts) if parts else NO_CHANGES_SUMMARY


def diff_components(
    fork_components: list[RecipeComponent],
    parent_components: list[RecipeComponent],
    metadata_changes: Optional[list[MetadataChange]] = None,
) -> ForkChangelog:
    """Diff two component trees.

    Args:
        fork_components: Sections of the derived recipe.
        parent_components: Sections of the recipe it was forked from.
        metadata_changes: Precomputed metadata diff to attach, if any.

    Returns:
        ``ForkChangelog`` with a generated summary.
    """
    fork_ings, fork_steps = _flatten(fork_components)
    parent_ings, parent_steps = _flatten(parent_components)

    parent_keys = {_key(i) for i in parent_ings}
    fork_keys = {_key(i) for i in fork_ings}

    added = [i.name for i in fork_ings if _key(i) not in parent_keys]
    removed = [i.name for i in parent_ings if _key(i) not in fork_keys]

    first_in_fork: dict[str, Ingredient] = {}
    for ing in fork_ings:
        first_in_fork.setdefault(_key(ing), ing)

    modified: list[IngredientModification] = []
    for orig in parent_ings:
        match = first_in_fork.get(_key(orig))
        if match is None:
            continue
        if orig.quantity != match.quantity or orig.unit != match.unit:
            modified.append(
                IngredientModification(original=orig.display(), modified=match.display())
            )

    shared = min(len(fork_steps), len(parent_steps))
    steps_modified = sum(
        1 for i in range(shared)
        if fork_steps[i].instruction != parent_steps[i].instruction
    )

    changelog = ForkChangelog(
        ingredients_added=added,
        ingredients_removed=removed,
        ingredients_modified=modified,
        steps_added=max(0, len(fork_steps) - len(parent_steps)),
        steps_removed=max(0, len(parent_steps) - len(fork_steps)),
        steps_modified=steps_modified,
        metadata_changes=metadata_changes or [],
    )
    return changelog.model_copy(update={"summary": summarize(changelog)})


def diff_metadata(fork: Recipe, parent: Recipe) -> list[MetadataChange]:
    """Fields from ``METADATA_FIELDS`` whose values differ, parent value first."""
    changes: list[MetadataChange] = []
    for attr, label in METADATA_FIELDS:
        original = getattr(parent, attr)
        modified = getattr(fork, attr)
        if original != modified:
            changes.append(MetadataChange(field=label, original=original, modified=modified))
    return changes


def diff_recipes(fork: Recipe, parent: Recipe) -> ForkChangelog:
    """Full changelog of ``fork`` relative to ``parent``, metadata included."""
    return diff_components(
        fork.components,
        parent.components,
        metadata_changes=diff_metadata(fork, parent),
    )
