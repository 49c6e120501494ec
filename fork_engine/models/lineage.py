"""
Lineage output models: built fresh per request, never persisted.

``GenealogyNode`` is the only model in the package that is NOT frozen: the
tree walker creates nodes level by level and appends children to their
parents as the next level's lookups complete.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from fork_engine.models.recipe import Recipe


class RecipeSummary(BaseModel):
    """Compact recipe card used in ancestor/descendant listings."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    user_id: Optional[str] = None
    fork_note: Optional[str] = None
    fork_tags: list[str] = []
    fork_count: int = 0
    vote_count: int = 0
    created_at: Optional[datetime] = None

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "RecipeSummary":
        return cls(
            id=recipe.id,
            title=recipe.title,
            user_id=recipe.user_id,
            fork_note=recipe.fork_note,
            fork_tags=list(recipe.fork_tags),
            fork_count=recipe.fork_count,
            vote_count=recipe.vote_count,
            created_at=recipe.created_at,
        )


class ForkLineage(BaseModel):
    """Ancestors, the recipe itself, and its most-voted direct forks.

    Attributes:
        ancestors: Oldest first, ending with the direct parent.
        current: The requested recipe.
        descendants: Direct forks ordered by votes, capped.
        total_fork_count: Number of recipes sharing this recipe's root.
        chain_truncated: True when the ancestor walk stopped on the chain cap
            or a revisited id rather than reaching a root.
    """

    model_config = ConfigDict(frozen=True)

    ancestors: list[RecipeSummary]
    current: RecipeSummary
    descendants: list[RecipeSummary]
    total_fork_count: int
    chain_truncated: bool = False


class GenealogyNode(BaseModel):
    """One node of an expanded descendant tree.

    Mutable by design: ``children`` is filled in after the node is created.

    Attributes:
        depth: Distance from the tree root (root = 0).
        has_more_children: True when the fan-out cap hid further children.
    """

    model_config = ConfigDict(frozen=False)

    id: str
    title: str
    fork_note: Optional[str] = None
    fork_tags: list[str] = []
    fork_count: int = 0
    vote_count: int = 0
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    depth: int
    children: list["GenealogyNode"] = []
    has_more_children: bool = False

    @classmethod
    def from_recipe(cls, recipe: Recipe, depth: int) -> "GenealogyNode":
        return cls(
            id=recipe.id,
            title=recipe.title,
            fork_note=recipe.fork_note,
            fork_tags=list(recipe.fork_tags),
            fork_count=recipe.fork_count,
            vote_count=recipe.vote_count,
            user_id=recipe.user_id,
            created_at=recipe.created_at,
            depth=depth,
        )

    def iter_nodes(self):
        """Yield this node and all descendants in depth-first pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class DescendantTree(BaseModel):
    """Result of expanding a tree below one node.

    Attributes:
        root: Expanded root node, or ``None`` if the root id did not resolve.
        total_nodes: Number of nodes present in the tree.
        max_depth_reached: True iff at least one child was cut off because
            its depth would exceed ``max_depth``.
        deadline_exceeded: True when expansion stopped early on a deadline.
    """

    model_config = ConfigDict(frozen=True)

    root: Optional[GenealogyNode]
    total_nodes: int
    max_depth_reached: bool
    deadline_exceeded: bool = False


class GenealogyTree(BaseModel):
    """Full genealogy response: the tree from the root plus the path to a recipe."""

    model_config = ConfigDict(frozen=True)

    root: Optional[GenealogyNode]
    current_path: list[str]
    total_nodes: int
    max_depth_reached: bool
    deadline_exceeded: bool = False
