"""
``ForkEngine``: the request-scoped facade over the fork engine components.

Each public method performs the store lookups an operation needs, raises
``RecipeNotFoundError`` for a missing target, and hands the fetched snapshot
to a pure component:

  | Method               | Component                                   |
  |----------------------|---------------------------------------------|
  | lineage              | lineage.walker.TreeWalker.lineage           |
  | genealogy_tree       | lineage.walker.TreeWalker.genealogy_tree    |
  | generate_changelog   | changelog.differ.diff_recipes               |
  | refresh_changelog    | diff_recipes + RecipeStore write            |
  | validation_stats     | validation.aggregator.aggregate             |
  | top_validated_forks  | aggregate per fork + suggestions.ranker     |
  | predict_outcome      | prediction.predictor.predict                |
  | smart_suggestions    | suggestions.ranker.rank_suggestions         |
  | preview_auto_fork    | autofork.applier.preview                    |
  | apply_auto_fork      | autofork.applier.apply + RECIPE_FORKED      |
  | vote_fork            | FORK_VOTED notification                     |
  | inspired_recipes     | analytics.listings.build_page (newest)      |
  | fork_gallery         | analytics.listings.build_page (sort_by)     |
  | trending_forks       | analytics.listings.rank_trending            |
  | fork_analytics       | analytics.influence.fork_analytics          |
  | comparison_matrix    | analytics.comparison.comparison_matrix      |

The engine keeps no state between calls. Notification delivery is
fire-and-forget: sink failures are logged at WARNING and never surface.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from fork_engine.analytics import comparison, influence
from fork_engine.analytics.listings import build_page, rank_trending
from fork_engine.autofork import applier
from fork_engine.autofork.templates import get_template, list_templates, templates_by_category
from fork_engine.changelog.differ import diff_recipes
from fork_engine.config import AppConfig
from fork_engine.errors import NotAForkError
from fork_engine.lineage.walker import TreeWalker
from fork_engine.models.analytics import (
    ForkAnalytics,
    ForkComparisonMatrix,
    ForkPage,
    TrendingFork,
)
from fork_engine.models.autofork import AutoForkPreview, AutoForkResult, AutoForkTemplate
from fork_engine.models.changelog import ForkChangelog
from fork_engine.models.lineage import ForkLineage, GenealogyTree
from fork_engine.models.notification import NotificationEvent, NotificationType
from fork_engine.models.prediction import OutcomePrediction
from fork_engine.models.recipe import Recipe
from fork_engine.models.suggestion import ForkSuggestion
from fork_engine.models.trial import CookTrial
from fork_engine.models.validation import TopValidatedFork, ValidationStats
from fork_engine.prediction.predictor import predict
from fork_engine.stores.base import (
    ChildOrder,
    CookTrialStore,
    FlavorProfileStore,
    NotificationSink,
    RecipeStore,
)
from fork_engine.suggestions.ranker import rank_suggestions, rank_top_validated
from fork_engine.taxonomy.fork_tags import filter_valid_tags, fork_tag_options
from fork_engine.utils.time_utils import utcnow
from fork_engine.validation.aggregator import aggregate

logger = logging.getLogger(__name__)


class ForkEngine:
    """Fork lineage, changelog, validation, prediction and auto-fork operations.

    Args:
        recipes: Recipe Store.
        trials: Cook-Trial Store.
        profiles: Flavor-profile lookup for smart suggestions.
        notifications: Optional sink; ``None`` disables notifications.
        config: Application config; defaults to built-in defaults.
    """

    def __init__(
        self,
        recipes: RecipeStore,
        trials: CookTrialStore,
        profiles: FlavorProfileStore,
        notifications: Optional[NotificationSink] = None,
        config: Optional[AppConfig] = None,
    ) -> None:
        self.recipes = recipes
        self.trials = trials
        self.profiles = profiles
        self.notifications = notifications
        self.config = config or AppConfig()
        self.walker = TreeWalker(recipes, self.config.lineage)

    def _require(self, recipe_id: str) -> Recipe:
        return self.walker.require_recipe(recipe_id)

    def _parent_trials(self, recipe: Recipe) -> Optional[list[CookTrial]]:
        return self.trials.list_trials(recipe.parent_id) if recipe.parent_id else None

    # ── Lineage ───────────────────────────────────────────────────────────────

    def lineage(self, recipe_id: str) -> ForkLineage:
        return self.walker.lineage(recipe_id)

    def genealogy_tree(
        self,
        recipe_id: str,
        max_depth: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ) -> GenealogyTree:
        return self.walker.genealogy_tree(recipe_id, max_depth, timeout_seconds)

    # ── Changelog ─────────────────────────────────────────────────────────────

    def generate_changelog(self, fork_id: str, parent_id: Optional[str] = None) -> ForkChangelog:
        """Diff a fork against ``parent_id`` (default: its own parent).

        Raises:
            RecipeNotFoundError: If either recipe is missing.
            NotAForkError: If no parent is given and the recipe has none.
        """
        fork = self._require(fork_id)
        parent_id = parent_id or fork.parent_id
        if not parent_id:
            raise NotAForkError(fork_id, "changelogs")
        parent = self._require(parent_id)
        return diff_recipes(fork, parent)

    def refresh_changelog(self, fork_id: str) -> ForkChangelog:
        """Recompute a fork's changelog and store it on the fork."""
        changelog = self.generate_changelog(fork_id)
        self.recipes.update_fork_changelog(fork_id, changelog)
        logger.info("Stored changelog for %s: %s", fork_id, changelog.summary)
        return changelog

    # ── Validation ────────────────────────────────────────────────────────────

    def validation_stats(self, recipe_id: str, now: Optional[datetime] = None) -> ValidationStats:
        recipe = self._require(recipe_id)
        return aggregate(
            self.trials.list_trials(recipe_id),
            recipe=recipe,
            parent_trials=self._parent_trials(recipe),
            now=now,
            recent_limit=self.config.validation.recent_trials_limit,
        )

    def top_validated_forks(
        self,
        recipe_id: str,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> list[TopValidatedFork]:
        """Direct forks of ``recipe_id`` ranked by their own trial record."""
        self._require(recipe_id)
        forks = self.recipes.list_children(recipe_id, ChildOrder.NEWEST)
        with_stats = [
            (fork, aggregate(self.trials.list_trials(fork.id), recipe=fork, now=now))
            for fork in forks
        ]
        return rank_top_validated(
            with_stats, limit or self.config.validation.top_validated_limit
        )

    # ── Prediction ────────────────────────────────────────────────────────────

    def predict_outcome(self, recipe_id: str) -> OutcomePrediction:
        """Risk assessment for cooking ``recipe_id``.

        For a fork whose parent can no longer be loaded, the changelog stored
        on the fork is used instead of a fresh diff. With neither (or for a
        root) ``changelog`` stays ``None`` and the predictor skips its
        modification rules instead of scoring zero changes.
        """
        recipe = self._require(recipe_id)
        changelog: Optional[ForkChangelog] = None
        if recipe.parent_id:
            parent = self.recipes.get_recipe(recipe.parent_id)
            if parent is not None:
                changelog = diff_recipes(recipe, parent)
            else:
                logger.info(
                    "Parent %s of %s missing; using stored changelog",
                    recipe.parent_id, recipe_id,
                )
                changelog = recipe.fork_changelog
        return predict(
            self.trials.list_trials(recipe_id),
            changelog=changelog,
            parent_trials=self._parent_trials(recipe),
            recipe=recipe,
        )

    # ── Suggestions & tags ────────────────────────────────────────────────────

    def smart_suggestions(self, recipe_id: str, user_id: str) -> list[ForkSuggestion]:
        """Forks of ``recipe_id`` ranked for ``user_id``'s flavor profile."""
        self._require(recipe_id)
        forks = self.recipes.list_children(recipe_id, ChildOrder.VOTES)
        profile = self.profiles.get_flavor_profile(user_id)
        if profile is None:
            logger.debug("No flavor profile for %s; ranking on popularity only", user_id)
        return rank_suggestions(forks, profile, self.config.suggestions.limit)

    def update_fork_tags(self, recipe_id: str, tags: list[str]) -> list[str]:
        """Replace a fork's tags; tags outside the vocabulary are dropped.

        Raises:
            RecipeNotFoundError: If the recipe is missing.
            NotAForkError: If the recipe is not a fork.
        """
        recipe = self._require(recipe_id)
        if not recipe.is_fork:
            raise NotAForkError(recipe_id, "fork tags")
        valid = filter_valid_tags(tags)
        if len(valid) != len(tags):
            logger.debug("Dropped tags for %s: %s", recipe_id, sorted(set(tags) - set(valid)))
        return list(self.recipes.update_fork_tags(recipe_id, valid).fork_tags)

    @staticmethod
    def fork_tag_options() -> list[dict[str, str]]:
        return fork_tag_options()

    # ── Browsing & analytics ──────────────────────────────────────────────────

    def inspired_recipes(
        self,
        recipe_id: str,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> ForkPage:
        """Direct forks of ``recipe_id``, newest first, one page at a time."""
        return self.fork_gallery(
            recipe_id,
            sort_by=ChildOrder.NEWEST,
            limit=limit or self.config.analytics.inspired_page_size,
            offset=offset,
        )

    def fork_gallery(
        self,
        recipe_id: str,
        sort_by: ChildOrder = ChildOrder.VOTES,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> ForkPage:
        """A page of ``recipe_id``'s direct forks in ``sort_by`` order.

        Raises:
            RecipeNotFoundError: If the recipe is missing.
        """
        self._require(recipe_id)
        limit = limit or self.config.analytics.gallery_page_size
        forks = self.recipes.list_children(recipe_id, sort_by, limit, offset)
        return build_page(forks, self.recipes.count_children(recipe_id), offset, limit)

    def trending_forks(self, limit: Optional[int] = None) -> list[TrendingFork]:
        """Most-voted forks across every tree."""
        limit = limit or self.config.analytics.trending_limit
        forks = self.recipes.list_forks(ChildOrder.VOTES, limit)
        titles: dict[str, Optional[str]] = {}
        for fork in forks:
            if fork.parent_id not in titles:
                parent = self.recipes.get_recipe(fork.parent_id)
                titles[fork.parent_id] = parent.title if parent else None
        return rank_trending(forks, titles, limit)

    def fork_analytics(self, user_id: str, now: Optional[datetime] = None) -> ForkAnalytics:
        """Fork activity and influence for ``user_id``; unknown users score zero."""
        settings = self.config.analytics
        recipes = self.recipes.list_by_user(user_id)
        received = [
            fork
            for recipe in recipes
            if not recipe.is_fork
            for fork in self.recipes.list_children(recipe.id, ChildOrder.NEWEST)
        ]
        return influence.fork_analytics(
            user_id,
            recipes,
            received,
            now=now or utcnow(),
            months=settings.activity_months,
            top_limit=settings.top_list_limit,
        )

    def comparison_matrix(self, recipe_id: str) -> ForkComparisonMatrix:
        """``recipe_id`` next to its most-voted direct forks.

        Raises:
            RecipeNotFoundError: If the recipe is missing.
        """
        original = self._require(recipe_id)
        forks = self.recipes.list_children(
            recipe_id, ChildOrder.VOTES, self.config.analytics.comparison_fork_limit
        )
        return comparison.comparison_matrix(original, forks)

    # ── Auto-fork ─────────────────────────────────────────────────────────────

    @staticmethod
    def templates() -> list[AutoForkTemplate]:
        return list_templates()

    @staticmethod
    def templates_by_category() -> dict[str, list[AutoForkTemplate]]:
        return templates_by_category()

    def preview_auto_fork(self, recipe_id: str, template_id: str) -> AutoForkPreview:
        template = get_template(template_id)
        return applier.preview(self._require(recipe_id), template)

    def apply_auto_fork(self, recipe_id: str, template_id: str, user_id: str) -> AutoForkResult:
        """Build a fork draft from a template and notify the original author.

        Raises:
            InvalidTemplateError: If ``template_id`` is unknown.
            RecipeNotFoundError: If the recipe is missing.
        """
        template = get_template(template_id)
        recipe = self._require(recipe_id)
        result = applier.apply(recipe, template, user_id=user_id)
        if result.success and recipe.user_id and recipe.user_id != user_id:
            self._notify(
                recipe.user_id,
                "RECIPE_FORKED",
                title="Your recipe was forked!",
                message=f'Someone forked your recipe "{recipe.title}"',
                data={
                    "recipe_id": recipe.id,
                    "recipe_title": recipe.title,
                    "fork_title": result.draft.title,
                    "forker_id": user_id,
                    "template_id": template.id,
                },
            )
        return result

    # ── Votes ─────────────────────────────────────────────────────────────────

    def vote_fork(self, recipe_id: str, voter_id: str) -> Optional[NotificationEvent]:
        """Notify a fork's author of a vote; returns the event, or ``None``.

        Vote storage belongs to the embedding application; this only emits
        ``FORK_VOTED``. Self-votes and authorless recipes emit nothing.
        """
        recipe = self._require(recipe_id)
        if not recipe.user_id or recipe.user_id == voter_id:
            return None
        return self._notify(
            recipe.user_id,
            "FORK_VOTED",
            title="New vote on your fork!",
            message=f'Someone voted for your fork "{recipe.title}"',
            data={"recipe_id": recipe.id, "recipe_title": recipe.title},
        )

    def _notify(
        self,
        user_id: str,
        event_type: NotificationType,
        title: str,
        message: str,
        data: dict[str, Any],
    ) -> Optional[NotificationEvent]:
        event = NotificationEvent(
            user_id=user_id,
            type=event_type,
            title=title,
            message=message,
            data=data,
            created_at=utcnow(),
        )
        if self.notifications is None:
            return event
        try:
            self.notifications.emit(event)
        except Exception as exc:
            logger.warning("Notification %s to %s failed: %s", event_type, user_id, exc)
        return event
