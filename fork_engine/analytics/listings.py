"""
Paged fork lists and trending forks.

  build_page(recipes, total, offset, limit)  -> ForkPage
  rank_trending(forks, parent_titles, limit) -> list[TrendingFork]

Trending ranks forks by cached ``vote_count`` (forks without votes are
dropped). Vote timestamps are not part of the Recipe Store contract, so there
is no recency window: the ranking is all-time votes, ties keeping the order
the forks were passed in.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from fork_engine.models.analytics import ForkPage, TrendingFork
from fork_engine.models.lineage import RecipeSummary
from fork_engine.models.recipe import Recipe


def build_page(recipes: Iterable[Recipe], total: int, offset: int, limit: int) -> ForkPage:
    items = [RecipeSummary.from_recipe(r) for r in recipes]
    return ForkPage(
        items=items,
        total=total,
        offset=offset,
        limit=limit,
        has_more=offset + limit < total,
    )


def rank_trending(
    forks: Iterable[Recipe],
    parent_titles: Mapping[str, Optional[str]],
    limit: int = 10,
) -> list[TrendingFork]:
    voted = [f for f in forks if f.vote_count > 0 and f.parent_id is not None]
    voted.sort(key=lambda f: f.vote_count, reverse=True)
    return [
        TrendingFork(
            id=fork.id,
            title=fork.title,
            user_id=fork.user_id,
            fork_note=fork.fork_note,
            fork_tags=list(fork.fork_tags),
            vote_count=fork.vote_count,
            parent_id=fork.parent_id,
            parent_title=parent_titles.get(fork.parent_id),
            created_at=fork.created_at,
        )
        for fork in voted[:limit]
    ]
