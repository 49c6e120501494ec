"""
In-memory store implementations and the JSON snapshot loader.

Used by the CLI and by the test suite. A snapshot is one JSON object::

    {
      "recipes":         [ {Recipe fields...}, ... ],
      "trials":          [ {CookTrial fields...}, ... ],
      "flavor_profiles": [ {FlavorProfile fields...}, ... ]
    }

Validation rules
----------------
- Duplicate recipe ids are rejected.
- Every trial must reference a recipe present in the snapshot.
- Field-level validation (rating range, preference scalars) is delegated to
  the pydantic models and surfaces as ``pydantic.ValidationError``.

Usage
-----
    from fork_engine.stores.memory import load_snapshot

    store = load_snapshot(Path("data/snapshot.json"))
    engine = ForkEngine(store, store, store, config=config)
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from fork_engine.models.changelog import ForkChangelog
from fork_engine.models.notification import NotificationEvent
from fork_engine.models.recipe import Recipe
from fork_engine.models.trial import CookTrial, FlavorProfile
from fork_engine.stores.base import (
    ChildOrder,
    CookTrialStore,
    FlavorProfileStore,
    NotificationSink,
    RecipeStore,
)

log = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _created(recipe: Recipe) -> datetime:
    return recipe.created_at or _EPOCH


def _ordered(recipes: list[Recipe], order_by: ChildOrder) -> list[Recipe]:
    if order_by == ChildOrder.NEWEST:
        return sorted(recipes, key=_created, reverse=True)
    if order_by == ChildOrder.VOTES:
        return sorted(recipes, key=lambda r: (-r.vote_count, _created(r)))
    return sorted(recipes, key=lambda r: (-r.fork_count, _created(r)))


def _window(recipes: list[Recipe], limit: Optional[int], offset: int = 0) -> list[Recipe]:
    return recipes[offset:] if limit is None else recipes[offset:offset + limit]


class InMemoryStore(RecipeStore, CookTrialStore, FlavorProfileStore):
    """Dict-backed implementation of every read store.

    Writes replace the stored ``Recipe`` with an updated copy under a lock;
    reads are plain dict lookups and safe from worker threads.
    """

    def __init__(
        self,
        recipes: Iterable[Recipe] = (),
        trials: Iterable[CookTrial] = (),
        flavor_profiles: Iterable[FlavorProfile] = (),
    ) -> None:
        self._recipes: dict[str, Recipe] = {}
        self._trials: dict[str, list[CookTrial]] = {}
        self._profiles: dict[str, FlavorProfile] = {}
        self._lock = threading.Lock()
        for recipe in recipes:
            self.add_recipe(recipe)
        for trial in trials:
            self.add_trial(trial)
        for profile in flavor_profiles:
            self._profiles[profile.user_id] = profile

    # ── Seeding ───────────────────────────────────────────────────────────────

    def add_recipe(self, recipe: Recipe) -> None:
        if recipe.id in self._recipes:
            raise ValueError(f"Duplicate recipe id '{recipe.id}'.")
        self._recipes[recipe.id] = recipe

    def add_trial(self, trial: CookTrial) -> None:
        if trial.recipe_id not in self._recipes:
            raise ValueError(
                f"Trial '{trial.id}' references unknown recipe '{trial.recipe_id}'."
            )
        self._trials.setdefault(trial.recipe_id, []).append(trial)

    # ── RecipeStore ───────────────────────────────────────────────────────────

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        return self._recipes.get(recipe_id)

    def list_children(
        self,
        parent_id: str,
        order_by: ChildOrder = ChildOrder.POPULARITY,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Recipe]:
        children = [r for r in self._recipes.values() if r.parent_id == parent_id]
        return _window(_ordered(children, order_by), limit, offset)

    def count_children(self, parent_id: str) -> int:
        return sum(1 for r in self._recipes.values() if r.parent_id == parent_id)

    def count_by_root(self, root_id: str) -> int:
        return sum(1 for r in self._recipes.values() if r.root_id == root_id)

    def list_by_user(self, user_id: str) -> list[Recipe]:
        return sorted(
            (r for r in self._recipes.values() if r.user_id == user_id), key=_created
        )

    def list_forks(
        self,
        order_by: ChildOrder = ChildOrder.VOTES,
        limit: Optional[int] = None,
    ) -> list[Recipe]:
        forks = [r for r in self._recipes.values() if r.parent_id is not None]
        return _window(_ordered(forks, order_by), limit)

    def update_fork_tags(self, recipe_id: str, tags: list[str]) -> Recipe:
        return self._update(recipe_id, fork_tags=list(tags))

    def update_fork_changelog(self, recipe_id: str, changelog: ForkChangelog) -> Recipe:
        return self._update(recipe_id, fork_changelog=changelog)

    def _update(self, recipe_id: str, **fields: Any) -> Recipe:
        with self._lock:
            current = self._recipes.get(recipe_id)
            if current is None:
                raise KeyError(recipe_id)
            updated = current.model_copy(update=fields)
            self._recipes[recipe_id] = updated
        log.debug("Updated recipe %s: %s", recipe_id, sorted(fields))
        return updated

    # ── CookTrialStore / FlavorProfileStore ───────────────────────────────────

    def list_trials(self, recipe_id: str) -> list[CookTrial]:
        return list(self._trials.get(recipe_id, []))

    def get_flavor_profile(self, user_id: str) -> Optional[FlavorProfile]:
        return self._profiles.get(user_id)

    def __len__(self) -> int:
        return len(self._recipes)


class CollectingNotificationSink(NotificationSink):
    """Keeps emitted events in a list; the CLI prints them, tests assert on them."""

    def __init__(self) -> None:
        self.events: list[NotificationEvent] = []

    def emit(self, event: NotificationEvent) -> None:
        self.events.append(event)


def load_snapshot(path: Path) -> InMemoryStore:
    """Load a JSON snapshot file into an ``InMemoryStore``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On duplicate recipe ids or orphan trials.
        pydantic.ValidationError: On malformed records.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw: dict[str, Any] = json.load(f)

    store = InMemoryStore(
        recipes=[Recipe.model_validate(r) for r in raw.get("recipes", [])],
        trials=[CookTrial.model_validate(t) for t in raw.get("trials", [])],
        flavor_profiles=[
            FlavorProfile.model_validate(p) for p in raw.get("flavor_profiles", [])
        ],
    )
    log.info(
        "Loaded snapshot %s: %d recipes, %d trials, %d flavor profiles",
        path.name,
        len(store),
        len(raw.get("trials", [])),
        len(raw.get("flavor_profiles", [])),
    )
    return store
