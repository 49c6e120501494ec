"""
Shared pytest fixtures for the recipe fork engine test suite.

Provides:
  - ``make_recipe`` / ``make_trial`` / ``make_trials``: factories for domain
    objects with sensible defaults, overridable per field.
  - ``forest_store``: an ``InMemoryStore`` holding a small fork forest.
  - ``sink``: a ``CollectingNotificationSink``.

The forest used by ``forest_store``::

    root                      fork_count=3  votes=0
    ├── a   (spicier)         fork_count=2  votes=1   created day 1
    │   ├── a1                fork_count=0  votes=0   created day 3
    │   └── a2                fork_count=1  votes=0   created day 4
    │       └── a2x           fork_count=0  votes=0   created day 5
    ├── b   (vegan)           fork_count=0  votes=7   created day 2
    └── c   (milder)          fork_count=0  votes=3   created day 6

Every non-root recipe caches ``root_id="root"``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import pytest

from fork_engine.models.recipe import Ingredient, Recipe, RecipeComponent, Step
from fork_engine.models.trial import CookTrial
from fork_engine.stores.memory import CollectingNotificationSink, InMemoryStore

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# ── Factories ─────────────────────────────────────────────────────────────────

def _component(
    ingredients: Optional[list[tuple]] = None,
    steps: Optional[list[str]] = None,
    name: str = "Main",
) -> RecipeComponent:
    """Build a component from ``(name, quantity, unit)`` tuples and step texts."""
    return RecipeComponent(
        name=name,
        ingredients=[
            Ingredient(name=ing[0], quantity=ing[1], unit=ing[2])
            for ing in (ingredients or [])
        ],
        steps=[
            Step(order=i + 1, instruction=text)
            for i, text in enumerate(steps or [])
        ],
    )


def _recipe(
    recipe_id: str,
    parent_id: Optional[str] = None,
    root_id: Optional[str] = None,
    ingredients: Optional[list[tuple]] = None,
    steps: Optional[list[str]] = None,
    day: int = 0,
    **overrides,
) -> Recipe:
    fields = {
        "id": recipe_id,
        "title": f"Recipe {recipe_id}",
        "user_id": f"u-{recipe_id}",
        "parent_id": parent_id,
        "root_id": root_id,
        "created_at": T0 + timedelta(days=day),
    }
    if ingredients is not None or steps is not None:
        fields["components"] = [_component(ingredients, steps)]
    fields.update(overrides)
    return Recipe(**fields)


def _trial(
    trial_id: str,
    recipe_id: str,
    rating: int = 4,
    day: int = 0,
    **overrides,
) -> CookTrial:
    fields = {
        "id": trial_id,
        "recipe_id": recipe_id,
        "user_id": f"cook-{trial_id}",
        "rating": rating,
        "cooked_at": T0 + timedelta(days=day),
    }
    fields.update(overrides)
    return CookTrial(**fields)


def _trials(recipe_id: str, ratings: list[int], **overrides) -> list[CookTrial]:
    """One trial per rating, cooked on consecutive days."""
    return [
        _trial(f"{recipe_id}-t{i}", recipe_id, rating=r, day=i, **overrides)
        for i, r in enumerate(ratings)
    ]


@pytest.fixture
def make_component() -> Callable[..., RecipeComponent]:
    return _component


@pytest.fixture
def make_recipe() -> Callable[..., Recipe]:
    return _recipe


@pytest.fixture
def make_trial() -> Callable[..., CookTrial]:
    return _trial


@pytest.fixture
def make_trials() -> Callable[..., list[CookTrial]]:
    return _trials


# ── Stores ────────────────────────────────────────────────────────────────────

@pytest.fixture
def forest_store() -> InMemoryStore:
    """The fork forest drawn in the module docstring, with no trials."""
    return InMemoryStore(recipes=[
        _recipe(
            "root", fork_count=3, title="Chili",
            ingredients=[("beef", 1, "lb"), ("beans", 2, "can"), ("salt", 1, "tsp")],
            steps=["Brown the beef.", "Add beans.", "Simmer."],
            servings=4, total_time_minutes=60,
        ),
        _recipe(
            "a", parent_id="root", root_id="root", day=1,
            fork_count=2, vote_count=1, fork_tags=["spicier"],
            ingredients=[("beef", 1, "lb"), ("beans", 2, "can"), ("salt", 1, "tsp"),
                         ("jalapeno", 2, None)],
            steps=["Brown the beef.", "Add beans.", "Simmer."],
            servings=4, total_time_minutes=60,
        ),
        _recipe("a1", parent_id="a", root_id="root", day=3),
        _recipe("a2", parent_id="a", root_id="root", day=4, fork_count=1),
        _recipe("a2x", parent_id="a2", root_id="root", day=5),
        _recipe(
            "b", parent_id="root", root_id="root", day=2,
            vote_count=7, fork_tags=["vegan"],
        ),
        _recipe(
            "c", parent_id="root", root_id="root", day=6,
            vote_count=3, fork_tags=["milder"],
        ),
    ])


@pytest.fixture
def sink() -> CollectingNotificationSink:
    return CollectingNotificationSink()
