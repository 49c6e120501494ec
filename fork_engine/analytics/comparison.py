"""
Side-by-side comparison of a recipe and its most-voted forks.

Rows, in display order; ``values[0]`` is always the original:

  | key                | label        | value                          |
  |--------------------|--------------|--------------------------------|
  | total_time_minutes | Total Time   | "N min", or None when unset/0  |
  | servings           | Servings     | int or None                    |
  | difficulty         | Difficulty   | str or None                    |
  | ingredient_count   | Ingredients  | summed over components         |
  | step_count         | Steps        | summed over components         |
  | calories           | Calories     | "N cal", or None when unset/0  |
  | vote_count         | Votes        | int                            |
"""

from __future__ import annotations

from typing import Callable

from fork_engine.models.analytics import (
    ComparisonField,
    ComparisonItem,
    ComparisonValue,
    ForkComparisonMatrix,
)
from fork_engine.models.recipe import Recipe


def comparison_item(recipe: Recipe) -> ComparisonItem:
    return ComparisonItem(
        id=recipe.id,
        title=recipe.title,
        fork_note=recipe.fork_note,
        user_id=recipe.user_id,
        vote_count=recipe.vote_count,
        total_time_minutes=recipe.total_time_minutes,
        servings=recipe.servings,
        difficulty=recipe.difficulty,
        ingredient_count=len(recipe.ingredients()),
        step_count=len(recipe.steps()),
        calories=recipe.calories_per_serving,
    )


def _with_unit(unit: str) -> Callable[[ComparisonValue], ComparisonValue]:
    return lambda value: f"{value} {unit}" if value else None


def _raw(value: ComparisonValue) -> ComparisonValue:
    return value


FIELDS: list[tuple[str, str, Callable[[ComparisonValue], ComparisonValue]]] = [
    ("total_time_minutes", "Total Time", _with_unit("min")),
    ("servings", "Servings", _raw),
    ("difficulty", "Difficulty", _raw),
    ("ingredient_count", "Ingredients", _raw),
    ("step_count", "Steps", _raw),
    ("calories", "Calories", _with_unit("cal")),
    ("vote_count", "Votes", _raw),
]


def comparison_matrix(original: Recipe, forks: list[Recipe]) -> ForkComparisonMatrix:
    """Build the matrix; ``forks`` are used in the order given."""
    original_item = comparison_item(original)
    fork_items = [comparison_item(f) for f in forks]
    columns = [original_item, *fork_items]
    return ForkComparisonMatrix(
        original=original_item,
        forks=fork_items,
        fields=[
            ComparisonField(
                key=key,
                label=label,
                values=[render(getattr(item, key)) for item in columns],
            )
            for key, label, render in FIELDS
        ],
    )
