"""
Tests for fork_engine/stores/memory.py.

What we test
------------
InMemoryStore:
  - Duplicate recipe ids and orphan trials are rejected.
  - list_children() orders BEFORE applying the limit, for every ChildOrder.
  - count_by_root() counts cached root ids.
  - offset skips ordered children; count_children() ignores paging.
  - list_by_user() returns a user's recipes oldest first.
  - list_forks() spans every tree and skips roots.
  - Writes replace the stored recipe; previously returned objects are
    untouched; unknown ids raise KeyError.

load_snapshot():
  - Round-trips a snapshot file into a populated store.
  - Missing file -> FileNotFoundError.
  - Malformed records -> pydantic.ValidationError.
  - The bundled data/snapshot.json loads.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from fork_engine.models.changelog import ForkChangelog
from fork_engine.stores.base import ChildOrder
from fork_engine.stores.memory import InMemoryStore, load_snapshot

BUNDLED_SNAPSHOT = Path(__file__).parents[2] / "data" / "snapshot.json"


def _write(path: Path, payload: dict) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestInMemoryStore:
    def test_duplicate_recipe_rejected(self, make_recipe):
        with pytest.raises(ValueError, match="Duplicate"):
            InMemoryStore(recipes=[make_recipe("x"), make_recipe("x")])

    def test_orphan_trial_rejected(self, make_recipe, make_trial):
        with pytest.raises(ValueError, match="unknown recipe"):
            InMemoryStore(recipes=[make_recipe("x")], trials=[make_trial("t", "y")])

    @pytest.mark.parametrize("order, expected", [
        (ChildOrder.POPULARITY, ["a", "b", "c"]),
        (ChildOrder.VOTES, ["b", "c", "a"]),
        (ChildOrder.NEWEST, ["c", "b", "a"]),
    ])
    def test_list_children_order(self, forest_store, order, expected):
        assert [r.id for r in forest_store.list_children("root", order)] == expected

    def test_limit_applied_after_order(self, forest_store):
        top = forest_store.list_children("root", ChildOrder.VOTES, limit=1)
        assert [r.id for r in top] == ["b"]

    def test_leaf_has_no_children(self, forest_store):
        assert forest_store.list_children("a2x") == []

    def test_count_by_root(self, forest_store):
        assert forest_store.count_by_root("root") == 6
        assert forest_store.count_by_root("a") == 0

    def test_offset_after_order(self, forest_store):
        page = forest_store.list_children("root", ChildOrder.VOTES, limit=1, offset=1)
        assert [r.id for r in page] == ["c"]
        assert forest_store.list_children("root", ChildOrder.VOTES, offset=5) == []

    def test_count_children(self, forest_store):
        assert forest_store.count_children("root") == 3
        assert forest_store.count_children("a") == 2
        assert forest_store.count_children("a2x") == 0

    def test_list_by_user(self, make_recipe):
        store = InMemoryStore(recipes=[
            make_recipe("late", user_id="me", day=2),
            make_recipe("other"),
            make_recipe("early", user_id="me", day=1),
        ])
        assert [r.id for r in store.list_by_user("me")] == ["early", "late"]
        assert store.list_by_user("nobody") == []

    def test_list_forks(self, forest_store):
        forks = forest_store.list_forks(ChildOrder.VOTES)
        assert [r.id for r in forks] == ["b", "c", "a", "a1", "a2", "a2x"]
        assert [r.id for r in forest_store.list_forks(limit=2)] == ["b", "c"]

    def test_update_fork_tags(self, forest_store):
        before = forest_store.get_recipe("a")
        updated = forest_store.update_fork_tags("a", ["milder"])
        assert updated.fork_tags == ["milder"]
        assert forest_store.get_recipe("a").fork_tags == ["milder"]
        assert before.fork_tags == ["spicier"]

    def test_update_fork_changelog(self, forest_store):
        changelog = ForkChangelog(steps_added=1, summary="Added 1 step")
        forest_store.update_fork_changelog("a", changelog)
        assert forest_store.get_recipe("a").fork_changelog == changelog

    def test_update_unknown_raises(self, forest_store):
        with pytest.raises(KeyError):
            forest_store.update_fork_tags("nope", [])

    def test_trials_and_profiles(self, make_recipe, make_trial):
        store = InMemoryStore(
            recipes=[make_recipe("x")],
            trials=[make_trial("t1", "x"), make_trial("t2", "x")],
        )
        assert [t.id for t in store.list_trials("x")] == ["t1", "t2"]
        assert store.list_trials("other") == []
        assert store.get_flavor_profile("anyone") is None


class TestLoadSnapshot:
    def test_loads(self, tmp_path):
        path = _write(tmp_path / "snap.json", {
            "recipes": [
                {"id": "r", "title": "Root"},
                {"id": "f", "title": "Fork", "parent_id": "r", "root_id": "r"},
            ],
            "trials": [
                {"id": "t", "recipe_id": "f", "user_id": "u", "rating": 3,
                 "cooked_at": "2026-02-01T10:00:00Z"},
            ],
            "flavor_profiles": [{"user_id": "u", "heat_preference": 0.9}],
        })
        store = load_snapshot(path)
        assert len(store) == 2
        assert store.get_recipe("f").parent_id == "r"
        assert store.list_trials("f")[0].rating == 3
        assert store.get_flavor_profile("u").heat_preference == pytest.approx(0.9)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_snapshot(tmp_path / "absent.json")

    def test_invalid_rating(self, tmp_path):
        path = _write(tmp_path / "snap.json", {
            "recipes": [{"id": "r", "title": "Root"}],
            "trials": [{"id": "t", "recipe_id": "r", "user_id": "u", "rating": 9,
                        "cooked_at": "2026-02-01T10:00:00Z"}],
        })
        with pytest.raises(ValidationError):
            load_snapshot(path)

    def test_bundled_snapshot(self):
        store = load_snapshot(BUNDLED_SNAPSHOT)
        assert store.get_recipe("r-root") is not None
        assert [r.id for r in store.list_children("r-root", ChildOrder.VOTES)] == [
            "r-spicy", "r-veg",
        ]
