"""
Per-user fork analytics.

Inputs are the user's own recipes (roots and forks) and the direct forks of
the user's root recipes. Counting rules:

  | Figure               | Computed as                                         |
  |----------------------|-----------------------------------------------------|
  | forks created        | user's recipes that have a parent                   |
  | forks received       | Σ cached fork_count over the user's root recipes    |
  | votes received       | Σ cached vote_count over all the user's recipes     |
  | influence score      | received × 10 + votes × 5 + created × 2             |
  | top forked recipes   | user's roots with fork_count > 0, most forked first |
  | monthly activity     | forks created / received per "YYYY-MM" since cutoff |
  | top fork tags        | tag frequency over all the user's recipes           |

Monthly activity only lists months with at least one fork, oldest first.
Top lists keep first-seen order on ties.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Iterable

from fork_engine.models.analytics import (
    ForkAnalytics,
    MonthlyForkActivity,
    TagCount,
    TopForkedRecipe,
)
from fork_engine.models.recipe import Recipe
from fork_engine.utils.time_utils import add_months, month_key

RECEIVED_WEIGHT = 10
VOTE_WEIGHT = 5
CREATED_WEIGHT = 2


def influence_score(forks_received: int, votes_received: int, forks_created: int) -> int:
    return (
        forks_received * RECEIVED_WEIGHT
        + votes_received * VOTE_WEIGHT
        + forks_created * CREATED_WEIGHT
    )


def top_forked_recipes(recipes: Iterable[Recipe], limit: int = 5) -> list[TopForkedRecipe]:
    roots = [r for r in recipes if not r.is_fork and r.fork_count > 0]
    roots.sort(key=lambda r: r.fork_count, reverse=True)
    return [
        TopForkedRecipe(id=r.id, title=r.title, fork_count=r.fork_count)
        for r in roots[:limit]
    ]


def top_fork_tags(recipes: Iterable[Recipe], limit: int = 5) -> list[TagCount]:
    counts = Counter(tag for r in recipes for tag in r.fork_tags)
    return [TagCount(tag=tag, count=n) for tag, n in counts.most_common(limit)]


def monthly_activity(
    created: Iterable[Recipe],
    received: Iterable[Recipe],
    since: datetime,
) -> list[MonthlyForkActivity]:
    """Bucket forks by creation month; recipes without ``created_at`` are skipped."""
    buckets: dict[str, dict[str, int]] = {}

    def tally(recipes: Iterable[Recipe], field: str) -> None:
        for recipe in recipes:
            if recipe.created_at is None or recipe.created_at < since:
                continue
            bucket = buckets.setdefault(
                month_key(recipe.created_at), {"forks_created": 0, "forks_received": 0}
            )
            bucket[field] += 1

    tally(created, "forks_created")
    tally(received, "forks_received")
    return [
        MonthlyForkActivity(month=month, **counts)
        for month, counts in sorted(buckets.items())
    ]


def fork_analytics(
    user_id: str,
    recipes: list[Recipe],
    received_forks: list[Recipe],
    now: datetime,
    months: int = 6,
    top_limit: int = 5,
) -> ForkAnalytics:
    """Analytics for ``user_id``.

    Args:
        user_id: The user being reported on.
        recipes: Every recipe the user authored.
        received_forks: Direct forks of the user's root recipes.
        now: Reference time for the activity window.
        months: Length of the activity window in calendar months.
        top_limit: Size of the top-recipes and top-tags lists.
    """
    created = [r for r in recipes if r.is_fork]
    forks_received = sum(r.fork_count for r in recipes if not r.is_fork)
    votes_received = sum(r.vote_count for r in recipes)

    return ForkAnalytics(
        user_id=user_id,
        total_forks_created=len(created),
        total_forks_received=forks_received,
        total_votes_received=votes_received,
        fork_influence_score=influence_score(forks_received, votes_received, len(created)),
        top_forked_recipes=top_forked_recipes(recipes, top_limit),
        fork_activity_by_month=monthly_activity(
            created, received_forks, since=add_months(now, -months)
        ),
        top_fork_tags=top_fork_tags(recipes, top_limit),
    )
