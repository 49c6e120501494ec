"""
Tests for fork_engine/lineage/walker.py.

What we test
------------
ancestors():
  - A root has no ancestors.
  - A chain shorter than the cap is returned whole, oldest first.
  - A chain longer than the cap is cut to the nearest ``cap`` ancestors.
  - A parent cycle stops the walk with ``truncated`` set.
  - A missing ancestor ends the walk without raising.
  - A missing starting recipe raises RecipeNotFoundError.

resolve_root() / path_to_node():
  - Cached root_id is used as is; otherwise parents are followed.
  - Path runs root -> target inclusive.

descendant_tree():
  - Children ordered by fork_count desc, created_at asc.
  - A tree exactly max_depth deep does NOT set max_depth_reached.
  - A deeper tree is cut and sets max_depth_reached.
  - Fan-out cap sets has_more_children only when children were dropped.
  - A zero timeout returns just the root with deadline_exceeded set.
  - A descendant cycle does not grow the tree.
  - Unknown root id returns an empty result.
  - Async callers await expand_descendants(); the blocking wrapper refuses
    to run inside an event loop.

lineage() / genealogy_tree():
  - Descendants ordered by votes; total_fork_count counts the whole tree.
  - Genealogy resolves the root and carries the path to the recipe.
"""

from __future__ import annotations

import asyncio

import pytest

from fork_engine.config import LineageConfig
from fork_engine.errors import RecipeNotFoundError
from fork_engine.lineage.walker import TreeWalker
from fork_engine.models.recipe import Recipe
from fork_engine.stores.memory import InMemoryStore


# ── Helpers ────────────────────────────────────────────────────────────────────

def _chain_store(length: int) -> InMemoryStore:
    """r0 <- r1 <- ... <- r{length}, with no cached root ids."""
    recipes = [Recipe(id="r0", title="r0")]
    for i in range(1, length + 1):
        recipes.append(Recipe(id=f"r{i}", title=f"r{i}", parent_id=f"r{i - 1}"))
    return InMemoryStore(recipes=recipes)


def _cycle_store() -> InMemoryStore:
    return InMemoryStore(recipes=[
        Recipe(id="x", title="x", parent_id="y"),
        Recipe(id="y", title="y", parent_id="x"),
    ])


def _ids(node) -> list[str]:
    return [n.id for n in node.children]


# ── ancestors ─────────────────────────────────────────────────────────────────

class TestAncestors:
    def test_root_has_no_ancestors(self, forest_store):
        chain = TreeWalker(forest_store).ancestors("root")
        assert chain.ancestors == []
        assert chain.truncated is False

    def test_chain_is_oldest_first(self, forest_store):
        chain = TreeWalker(forest_store).ancestors("a2x")
        assert chain.ids == ["root", "a", "a2"]
        assert chain.truncated is False

    def test_chain_within_cap_is_exact(self):
        walker = TreeWalker(_chain_store(10), LineageConfig(max_chain_length=10))
        chain = walker.ancestors("r10")
        assert chain.ids == [f"r{i}" for i in range(10)]
        assert chain.truncated is False

    def test_chain_over_cap_is_truncated(self):
        walker = TreeWalker(_chain_store(10), LineageConfig(max_chain_length=3))
        chain = walker.ancestors("r10")
        assert chain.ids == ["r7", "r8", "r9"]
        assert chain.truncated is True

    def test_cycle_stops_walk(self):
        chain = TreeWalker(_cycle_store()).ancestors("x")
        assert chain.ids == ["y"]
        assert chain.truncated is True

    def test_missing_ancestor_ends_walk(self):
        store = InMemoryStore(recipes=[
            Recipe(id="orphan", title="orphan", parent_id="deleted"),
        ])
        chain = TreeWalker(store).ancestors("orphan")
        assert chain.ancestors == []
        assert chain.truncated is False

    def test_missing_recipe_raises(self, forest_store):
        with pytest.raises(RecipeNotFoundError) as exc_info:
            TreeWalker(forest_store).ancestors("nope")
        assert exc_info.value.recipe_id == "nope"


# ── resolve_root / path_to_node ───────────────────────────────────────────────

class TestRootAndPath:
    def test_cached_root_id_used(self, forest_store):
        assert TreeWalker(forest_store).resolve_root("a2x") == "root"

    def test_root_resolves_to_itself(self, forest_store):
        assert TreeWalker(forest_store).resolve_root("root") == "root"

    def test_uncached_root_follows_parents(self):
        assert TreeWalker(_chain_store(6)).resolve_root("r6") == "r0"

    def test_resolve_root_stops_on_cycle(self):
        assert TreeWalker(_cycle_store()).resolve_root("x") in {"x", "y"}

    def test_path_to_node(self, forest_store):
        walker = TreeWalker(forest_store)
        assert walker.path_to_node("root", "a2x") == ["root", "a", "a2", "a2x"]

    def test_path_to_root_itself(self, forest_store):
        assert TreeWalker(forest_store).path_to_node("root", "root") == ["root"]


# ── descendant_tree ───────────────────────────────────────────────────────────

class TestDescendantTree:
    def test_full_tree(self, forest_store):
        tree = TreeWalker(forest_store).descendant_tree("root")
        assert tree.total_nodes == 7
        assert tree.max_depth_reached is False
        assert tree.deadline_exceeded is False
        assert _ids(tree.root) == ["a", "b", "c"]
        a = tree.root.children[0]
        assert _ids(a) == ["a2", "a1"]
        assert a.children[0].children[0].id == "a2x"
        assert a.children[0].children[0].depth == 3

    def test_nodes_carry_depth(self, forest_store):
        tree = TreeWalker(forest_store).descendant_tree("root")
        depths = {n.id: n.depth for n in tree.root.iter_nodes()}
        assert depths == {"root": 0, "a": 1, "a1": 2, "a2": 2, "a2x": 3, "b": 1, "c": 1}

    def test_tree_exactly_max_depth_deep(self, forest_store):
        tree = TreeWalker(forest_store).descendant_tree("root", max_depth=3)
        assert tree.total_nodes == 7
        assert tree.max_depth_reached is False

    def test_tree_deeper_than_max_depth(self, forest_store):
        tree = TreeWalker(forest_store).descendant_tree("root", max_depth=1)
        assert tree.total_nodes == 4
        assert tree.max_depth_reached is True
        assert all(n.children == [] for n in tree.root.children)

    def test_max_depth_zero_keeps_only_root(self, forest_store):
        tree = TreeWalker(forest_store).descendant_tree("root", max_depth=0)
        assert tree.total_nodes == 1
        assert tree.root.children == []
        assert tree.max_depth_reached is True

    def test_fan_out_cap(self, forest_store):
        walker = TreeWalker(forest_store, LineageConfig(max_children_per_node=2))
        tree = walker.descendant_tree("root")
        assert _ids(tree.root) == ["a", "b"]
        assert tree.root.has_more_children is True
        # "a" has exactly two children: nothing hidden.
        assert tree.root.children[0].has_more_children is False
        assert tree.total_nodes == 6

    def test_zero_timeout_returns_root_only(self, forest_store):
        tree = TreeWalker(forest_store).descendant_tree("root", timeout_seconds=0)
        assert tree.deadline_exceeded is True
        assert tree.total_nodes == 1
        assert tree.root.id == "root"

    def test_descendant_cycle_is_bounded(self):
        tree = TreeWalker(_cycle_store()).descendant_tree("x")
        assert tree.total_nodes == 2
        assert _ids(tree.root) == ["y"]
        assert tree.root.children[0].children == []

    def test_awaitable_inside_event_loop(self, forest_store):
        walker = TreeWalker(forest_store)

        async def handler():
            return await walker.expand_descendants("root", max_depth=1)

        tree = asyncio.run(handler())
        assert tree.total_nodes == 4

    def test_blocking_call_inside_event_loop_raises(self, forest_store):
        walker = TreeWalker(forest_store)

        async def handler():
            return walker.descendant_tree("root")

        with pytest.raises(RuntimeError, match="expand_descendants"):
            asyncio.run(handler())

    def test_unknown_root(self, forest_store):
        tree = TreeWalker(forest_store).descendant_tree("nope")
        assert tree.root is None
        assert tree.total_nodes == 0
        assert tree.max_depth_reached is False

    @pytest.mark.parametrize("requested, expected", [
        (None, 5),
        (3, 3),
        (100, 10),
        (-2, 0),
    ])
    def test_clamp_depth(self, forest_store, requested, expected):
        assert TreeWalker(forest_store).clamp_depth(requested) == expected


# ── Composite views ───────────────────────────────────────────────────────────

class TestLineage:
    def test_lineage_of_fork(self, forest_store):
        lineage = TreeWalker(forest_store).lineage("a")
        assert [r.id for r in lineage.ancestors] == ["root"]
        assert lineage.current.id == "a"
        # Equal votes fall back to oldest first.
        assert [r.id for r in lineage.descendants] == ["a1", "a2"]
        assert lineage.total_fork_count == 6
        assert lineage.chain_truncated is False

    def test_lineage_of_root_orders_forks_by_votes(self, forest_store):
        lineage = TreeWalker(forest_store).lineage("root")
        assert lineage.ancestors == []
        assert [r.id for r in lineage.descendants] == ["b", "c", "a"]
        assert lineage.total_fork_count == 6

    def test_descendant_preview_limit(self, forest_store):
        walker = TreeWalker(forest_store, LineageConfig(descendant_preview_limit=1))
        assert [r.id for r in walker.lineage("root").descendants] == ["b"]

    def test_lineage_missing_recipe(self, forest_store):
        with pytest.raises(RecipeNotFoundError):
            TreeWalker(forest_store).lineage("nope")

    def test_genealogy_tree_from_leaf(self, forest_store):
        genealogy = TreeWalker(forest_store).genealogy_tree("a2")
        assert genealogy.root.id == "root"
        assert genealogy.current_path == ["root", "a", "a2"]
        assert genealogy.total_nodes == 7

    def test_genealogy_tree_missing_recipe(self, forest_store):
        with pytest.raises(RecipeNotFoundError):
            TreeWalker(forest_store).genealogy_tree("nope")
