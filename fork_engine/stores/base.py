"""
Collaborator interfaces consumed by the fork engine.

The engine owns no persistence. Recipes, cook trials and flavor profiles are
read from stores supplied by the embedding application; notifications are
handed to a sink and forgotten.

Contracts:
  - ``get_recipe`` returns ``None`` for unknown ids; the engine decides
    whether that is a ``RecipeNotFoundError`` or just the end of a walk.
  - ``list_children`` and ``list_forks`` must apply ``order_by`` BEFORE
    ``offset``/``limit`` so that the tree walker's fan-out cap keeps the most
    relevant children and pages never overlap.
  - Store methods are synchronous. The walker runs them on worker threads
    when it expands a tree level concurrently, so implementations must be
    safe to call from several threads at once for reads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Optional

from fork_engine.models.changelog import ForkChangelog
from fork_engine.models.notification import NotificationEvent
from fork_engine.models.recipe import Recipe
from fork_engine.models.trial import CookTrial, FlavorProfile


class ChildOrder(StrEnum):
    """Orderings ``list_children`` must support.

    POPULARITY  - fork_count desc, created_at asc (genealogy tree)
    VOTES       - vote_count desc, created_at asc (lineage view, suggestions)
    NEWEST      - created_at desc
    """

    POPULARITY = "popularity"
    VOTES = "votes"
    NEWEST = "newest"


class RecipeStore(ABC):
    """Read access to the fork forest plus the two fields the engine writes."""

    @abstractmethod
    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        ...

    @abstractmethod
    def list_children(
        self,
        parent_id: str,
        order_by: ChildOrder = ChildOrder.POPULARITY,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Recipe]:
        """Direct forks of ``parent_id``, ordered, then ``offset``/``limit`` applied."""

    @abstractmethod
    def count_children(self, parent_id: str) -> int:
        """Number of direct forks of ``parent_id``."""

    @abstractmethod
    def count_by_root(self, root_id: str) -> int:
        """Number of recipes whose cached ``root_id`` equals ``root_id``."""

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Recipe]:
        """Every recipe authored by ``user_id``, roots and forks alike."""

    @abstractmethod
    def list_forks(
        self,
        order_by: ChildOrder = ChildOrder.VOTES,
        limit: Optional[int] = None,
    ) -> list[Recipe]:
        """Every recipe that has a parent, across all trees."""

    @abstractmethod
    def update_fork_tags(self, recipe_id: str, tags: list[str]) -> Recipe:
        ...

    @abstractmethod
    def update_fork_changelog(self, recipe_id: str, changelog: ForkChangelog) -> Recipe:
        ...


class CookTrialStore(ABC):
    @abstractmethod
    def list_trials(self, recipe_id: str) -> list[CookTrial]:
        """All trials for a recipe, in any order."""


class FlavorProfileStore(ABC):
    @abstractmethod
    def get_flavor_profile(self, user_id: str) -> Optional[FlavorProfile]:
        ...


class NotificationSink(ABC):
    @abstractmethod
    def emit(self, event: NotificationEvent) -> None:
        """Deliver an event. Callers log and swallow any exception raised here."""
