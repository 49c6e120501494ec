"""
Fork rankers: smart suggestions and top validated forks.

Usage flow
----------
1. rank_suggestions(forks, profile, limit=5)
   -> list[ForkSuggestion]  (descending match score, ties keep input order)

2. rank_top_validated(forks_with_stats, limit=5)
   -> list[TopValidatedFork]  (forks with >= 1 trial, best success rate first)

Both rely on Python's stable sort: equal keys never swap, so callers control
tie order through the order in which they pass forks in.
"""

from __future__ import annotations

import logging
from typing import Iterable

from fork_engine.models.recipe import Recipe
from fork_engine.models.suggestion import ForkSuggestion
from fork_engine.models.trial import FlavorProfile
from fork_engine.models.validation import TopValidatedFork, ValidationStats
from fork_engine.suggestions.scorer import MatchScore, score_fork

logger = logging.getLogger(__name__)


def _to_suggestion(fork: Recipe, match: MatchScore) -> ForkSuggestion:
    return ForkSuggestion(
        id=fork.id,
        title=fork.title,
        description=fork.description,
        fork_note=fork.fork_note,
        fork_tags=list(fork.fork_tags),
        user_id=fork.user_id,
        match_score=match.score,
        match_reasons=match.reasons,
        vote_count=fork.vote_count,
        created_at=fork.created_at,
    )


def rank_suggestions(
    forks: Iterable[Recipe],
    profile: FlavorProfile | None,
    limit: int = 5,
) -> list[ForkSuggestion]:
    """Score every fork and keep the ``limit`` best.

    Args:
        forks:   Candidate forks, in the order ties should resolve.
        profile: Requesting cook's flavor profile, or ``None``.
        limit:   Maximum suggestions returned.

    Returns:
        Suggestions sorted by descending ``match_score``.
    """
    scored = [(fork, score_fork(fork, profile)) for fork in forks]
    scored.sort(key=lambda pair: pair[1].score, reverse=True)
    logger.debug("Scored %d forks for suggestions", len(scored))
    return [_to_suggestion(fork, match) for fork, match in scored[:limit]]


def rank_top_validated(
    forks_with_stats: Iterable[tuple[Recipe, ValidationStats]],
    limit: int = 5,
) -> list[TopValidatedFork]:
    """Rank forks by trial record.

    Forks with no trials are dropped. Order: success rate desc, then total
    cooks desc. Only earned badges are carried over.
    """
    entries = [
        TopValidatedFork(
            id=fork.id,
            title=fork.title,
            fork_note=fork.fork_note,
            success_rate=stats.success_rate,
            total_cooks=stats.total_cooks,
            average_rating=stats.average_rating,
            badges=stats.earned_badges,
        )
        for fork, stats in forks_with_stats
        if stats.total_cooks >= 1
    ]
    entries.sort(key=lambda e: (e.success_rate, e.total_cooks), reverse=True)
    return entries[:limit]
