"""
Bounded traversal of the recipe fork forest.

Operations
----------
  ancestors(id)            parent chain, oldest first, ending at the direct parent
  resolve_root(id)         cached ``root_id`` if present, else walk parents
  path_to_node(root, id)   ids from ``root`` down to ``id``
  descendant_tree(id, d)   children expanded level by level down to depth ``d``
  lineage(id)              ancestors + direct forks + tree size
  genealogy_tree(id, d)    root resolution + path + descendant tree

Bounds (``LineageConfig``) are policy, not errors:

  | Bound                  | Effect when hit                                      |
  |------------------------|------------------------------------------------------|
  | max_chain_length       | parent walks stop; ``truncated`` flag set            |
  | revisited id (cycle)   | parent walks stop; ``truncated`` flag set            |
  | max_children_per_node  | extra children dropped; ``has_more_children`` set    |
  | max_depth              | deeper children dropped; ``max_depth_reached`` set   |
  | deadline               | expansion stops at a level; ``deadline_exceeded`` set |

Tree expansion works on an arena (``id → GenealogyNode``) one level at a
time. All child lookups of a level run concurrently on worker threads
(bounded by ``fetch_concurrency``); ``asyncio.gather`` returns results in
request order, so concurrency never reorders children. A recipe id already in
the arena is not attached a second time, so a malformed store cannot make the
tree grow without bound.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from fork_engine.config import LineageConfig
from fork_engine.errors import RecipeNotFoundError
from fork_engine.models.lineage import (
    DescendantTree,
    ForkLineage,
    GenealogyNode,
    GenealogyTree,
    RecipeSummary,
)
from fork_engine.models.recipe import Recipe
from fork_engine.stores.base import ChildOrder, RecipeStore

logger = logging.getLogger(__name__)


@dataclass
class AncestorChain:
    """Result of a parent-pointer walk.

    Attributes:
        ancestors: Oldest first; the last entry is the direct parent.
        truncated: True when the walk stopped on the chain cap or a revisited id.
    """

    ancestors: list[Recipe] = field(default_factory=list)
    truncated: bool = False

    @property
    def ids(self) -> list[str]:
        return [r.id for r in self.ancestors]


class TreeWalker:
    """Traversals over a ``RecipeStore``; holds no state between calls."""

    def __init__(self, store: RecipeStore, config: Optional[LineageConfig] = None) -> None:
        self.store = store
        self.config = config or LineageConfig()

    def require_recipe(self, recipe_id: str) -> Recipe:
        recipe = self.store.get_recipe(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)
        return recipe

    # ── Parent-chain walks (sequential) ───────────────────────────────────────

    def ancestors(self, recipe_id: str) -> AncestorChain:
        """Walk ``parent_id`` pointers up from ``recipe_id``.

        A missing ancestor ends the walk quietly; only a missing starting
        recipe raises.

        Raises:
            RecipeNotFoundError: If ``recipe_id`` does not exist.
        """
        recipe = self.require_recipe(recipe_id)
        cap = self.config.max_chain_length
        visited = {recipe.id}
        chain: list[Recipe] = []
        truncated = False

        current_id = recipe.parent_id
        while current_id:
            if len(chain) >= cap:
                logger.info("Ancestor walk from %s stopped at chain cap %d", recipe_id, cap)
                truncated = True
                break
            if current_id in visited:
                logger.warning("Ancestor walk from %s revisited %s", recipe_id, current_id)
                truncated = True
                break
            ancestor = self.store.get_recipe(current_id)
            if ancestor is None:
                logger.debug("Ancestor %s of %s is missing; ending walk", current_id, recipe_id)
                break
            visited.add(ancestor.id)
            chain.append(ancestor)
            current_id = ancestor.parent_id

        chain.reverse()
        return AncestorChain(ancestors=chain, truncated=truncated)

    def resolve_root(self, recipe_id: str) -> str:
        """Return the id of the recipe at the top of ``recipe_id``'s chain.

        Uses the cached ``root_id`` when present. Otherwise follows parents,
        bounded by the chain cap, and returns the last recipe that resolved.

        Raises:
            RecipeNotFoundError: If ``recipe_id`` does not exist.
        """
        recipe = self.require_recipe(recipe_id)
        if recipe.root_id:
            return recipe.root_id

        visited = {recipe.id}
        current = recipe
        for _ in range(self.config.max_chain_length):
            parent_id = current.parent_id
            if not parent_id or parent_id in visited:
                break
            parent = self.store.get_recipe(parent_id)
            if parent is None:
                break
            visited.add(parent.id)
            current = parent
        return current.id

    def path_to_node(self, root_id: str, target_id: str) -> list[str]:
        """Ids from ``root_id`` down to ``target_id``, both inclusive.

        Walks upward from the target and reverses. If the walk ends before
        reaching ``root_id`` (missing parent, cycle, chain cap) the partial
        path is returned as is, starting at the highest id reached.
        """
        if root_id == target_id:
            return [root_id]

        path = [target_id]
        visited = {target_id}
        current_id = target_id
        for _ in range(self.config.max_chain_length):
            if current_id == root_id:
                break
            recipe = self.store.get_recipe(current_id)
            if recipe is None or not recipe.parent_id or recipe.parent_id in visited:
                break
            visited.add(recipe.parent_id)
            path.append(recipe.parent_id)
            current_id = recipe.parent_id

        path.reverse()
        return path

    # ── Descendant tree (level-wise, concurrent) ──────────────────────────────

    def clamp_depth(self, max_depth: Optional[int]) -> int:
        if max_depth is None:
            return self.config.default_max_depth
        return max(0, min(max_depth, self.config.max_depth_limit))

    def descendant_tree(
        self,
        root_id: str,
        max_depth: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ) -> DescendantTree:
        """Blocking entry point for ``expand_descendants``.

        Starts its own event loop, so it cannot be called from code already
        running on one (an async request handler, say); such callers should
        ``await expand_descendants(...)`` instead.

        Raises:
            RuntimeError: If called while an event loop is running.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.expand_descendants(root_id, max_depth, timeout_seconds))
        raise RuntimeError(
            "descendant_tree() cannot run inside an event loop; "
            "await expand_descendants() instead."
        )

    async def expand_descendants(
        self,
        root_id: str,
        max_depth: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ) -> DescendantTree:
        """Expand the fork tree under ``root_id``.

        Args:
            root_id: Node to expand from; becomes depth 0.
            max_depth: Deepest depth a returned node may have. ``None`` means
                ``default_max_depth``; values are clamped to ``max_depth_limit``.
            timeout_seconds: Optional budget, checked before each level.

        Returns:
            ``DescendantTree`` with ``root=None`` when ``root_id`` is unknown.
        """
        depth_limit = self.clamp_depth(max_depth)
        cap = self.config.max_children_per_node
        deadline = time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        semaphore = asyncio.Semaphore(self.config.fetch_concurrency)

        root = await asyncio.to_thread(self.store.get_recipe, root_id)
        if root is None:
            return DescendantTree(root=None, total_nodes=0, max_depth_reached=False)

        root_node = GenealogyNode.from_recipe(root, depth=0)
        arena: dict[str, GenealogyNode] = {root.id: root_node}
        level = [root_node]
        depth_reached = False
        deadline_exceeded = False

        while level:
            if deadline is not None and time.monotonic() >= deadline:
                logger.info(
                    "Tree expansion under %s hit its deadline at depth %d",
                    root_id, level[0].depth,
                )
                deadline_exceeded = True
                break

            # Boundary nodes only need to know whether any child exists.
            fetched = await asyncio.gather(*(
                self._fetch_children(
                    semaphore, node.id, 1 if node.depth >= depth_limit else cap + 1
                )
                for node in level
            ))

            next_level: list[GenealogyNode] = []
            for node, children in zip(level, fetched):
                if node.depth >= depth_limit:
                    if children:
                        depth_reached = True
                    continue
                if len(children) > cap:
                    node.has_more_children = True
                    children = children[:cap]
                for child in children:
                    if child.id in arena:
                        logger.warning(
                            "Recipe %s reached twice while expanding %s; skipped",
                            child.id, root_id,
                        )
                        continue
                    child_node = GenealogyNode.from_recipe(child, depth=node.depth + 1)
                    arena[child.id] = child_node
                    node.children.append(child_node)
                    next_level.append(child_node)
            level = next_level

        if depth_reached:
            logger.debug("Tree under %s cut off at depth %d", root_id, depth_limit)
        return DescendantTree(
            root=root_node,
            total_nodes=len(arena),
            max_depth_reached=depth_reached,
            deadline_exceeded=deadline_exceeded,
        )

    async def _fetch_children(
        self,
        semaphore: asyncio.Semaphore,
        parent_id: str,
        limit: int,
    ) -> list[Recipe]:
        async with semaphore:
            return await asyncio.to_thread(
                self.store.list_children, parent_id, ChildOrder.POPULARITY, limit
            )

    # ── Composite views ───────────────────────────────────────────────────────

    def lineage(self, recipe_id: str) -> ForkLineage:
        """Ancestors, the recipe, its most-voted direct forks and tree size.

        Raises:
            RecipeNotFoundError: If ``recipe_id`` does not exist.
        """
        recipe = self.require_recipe(recipe_id)
        chain = self.ancestors(recipe_id)
        descendants = self.store.list_children(
            recipe.id, ChildOrder.VOTES, self.config.descendant_preview_limit
        )
        return ForkLineage(
            ancestors=[RecipeSummary.from_recipe(r) for r in chain.ancestors],
            current=RecipeSummary.from_recipe(recipe),
            descendants=[RecipeSummary.from_recipe(r) for r in descendants],
            total_fork_count=self.store.count_by_root(recipe.root_id or recipe.id),
            chain_truncated=chain.truncated,
        )

    def genealogy_tree(
        self,
        recipe_id: str,
        max_depth: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ) -> GenealogyTree:
        """Whole fork tree containing ``recipe_id``, expanded from its root.

        Raises:
            RecipeNotFoundError: If ``recipe_id`` does not exist.
        """
        root_id = self.resolve_root(recipe_id)
        current_path = self.path_to_node(root_id, recipe_id)
        tree = self.descendant_tree(root_id, max_depth, timeout_seconds)
        return GenealogyTree(
            root=tree.root,
            current_path=current_path,
            total_nodes=tree.total_nodes,
            max_depth_reached=tree.max_depth_reached,
            deadline_exceeded=tree.deadline_exceeded,
        )
