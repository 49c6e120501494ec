"""
Tests for fork_engine/cli.py.

What we test
------------
  - Vocabulary commands (tags, templates) print JSON without a snapshot.
  - Data commands read --snapshot and print the engine result as JSON.
  - autofork-apply prints the draft plus the notifications it produced.
  - Unknown recipes / templates and missing snapshots exit with code 1.
  - validate-config reports success on the committed default config.

Logging is raised to WARNING through the environment so that stdout holds
only the JSON document.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from fork_engine.cli import app

runner = CliRunner()

SNAPSHOT = {
    "recipes": [
        {
            "id": "r", "title": "Pancakes", "user_id": "u-owner", "fork_count": 1,
            "servings": 2,
            "components": [{
                "name": "Batter",
                "ingredients": [
                    {"name": "flour", "quantity": 1, "unit": "cup"},
                    {"name": "milk", "quantity": 1, "unit": "cup"},
                    {"name": "egg", "quantity": 1},
                ],
                "steps": [
                    {"order": 1, "instruction": "Whisk everything."},
                    {"order": 2, "instruction": "Fry in a hot pan."},
                ],
            }],
        },
        {
            "id": "f", "title": "Fluffy Pancakes", "user_id": "u-forker",
            "parent_id": "r", "root_id": "r", "vote_count": 2, "fork_tags": ["elevated"],
            "servings": 2,
            "components": [{
                "name": "Batter",
                "ingredients": [
                    {"name": "flour", "quantity": 1, "unit": "cup"},
                    {"name": "buttermilk", "quantity": 1, "unit": "cup"},
                    {"name": "egg", "quantity": 2},
                ],
                "steps": [
                    {"order": 1, "instruction": "Whisk everything."},
                    {"order": 2, "instruction": "Fry in a hot pan."},
                ],
            }],
        },
    ],
    "trials": [
        {"id": "t1", "recipe_id": "f", "user_id": "c1", "rating": 4,
         "cooked_at": "2026-03-01T08:00:00Z"},
        {"id": "t2", "recipe_id": "f", "user_id": "c2", "rating": 3,
         "cooked_at": "2026-03-02T08:00:00Z"},
    ],
    "flavor_profiles": [
        {"user_id": "u-chef", "heat_preference": 0.5, "preferred_complexity": 0.9},
    ],
}


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setenv("FORK_ENGINE_LOG_LEVEL", "WARNING")
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def snapshot(tmp_path) -> str:
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT), encoding="utf-8")
    return str(path)


def _json(result):
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


# ── Vocabularies & config ─────────────────────────────────────────────────────

def test_tags():
    tags = _json(runner.invoke(app, ["tags"]))
    assert {"value": "gluten-free", "label": "Gluten Free"} in tags


def test_templates_by_category():
    grouped = _json(runner.invoke(app, ["templates", "--by-category"]))
    assert list(grouped)[0] == "dietary"
    assert grouped["skill"][0]["id"] == "beginner"


def test_validate_config():
    result = runner.invoke(app, ["validate-config"])
    assert result.exit_code == 0
    assert "[OK] Config valid." in result.stdout


# ── Data commands ─────────────────────────────────────────────────────────────

def test_lineage(snapshot):
    lineage = _json(runner.invoke(app, ["lineage", "f", "--snapshot", snapshot]))
    assert [a["id"] for a in lineage["ancestors"]] == ["r"]
    assert lineage["total_fork_count"] == 1


def test_tree(snapshot):
    tree = _json(runner.invoke(app, ["tree", "f", "--max-depth", "3", "--snapshot", snapshot]))
    assert tree["root"]["id"] == "r"
    assert tree["current_path"] == ["r", "f"]
    assert tree["root"]["children"][0]["depth"] == 1


def test_changelog(snapshot):
    changelog = _json(runner.invoke(app, ["changelog", "f", "--snapshot", snapshot]))
    assert changelog["ingredients_added"] == ["buttermilk"]
    assert changelog["ingredients_removed"] == ["milk"]
    assert changelog["ingredients_modified"] == [{"original": "1 egg", "modified": "2 egg"}]


def test_changelog_on_root_fails(snapshot):
    result = runner.invoke(app, ["changelog", "r", "--snapshot", snapshot])
    assert result.exit_code == 1


def test_validation_and_predict(snapshot):
    stats = _json(runner.invoke(app, ["validation", "f", "--snapshot", snapshot]))
    assert stats["total_cooks"] == 2
    assert stats["compared_to_parent"]["verdict"] == "insufficient_data"

    prediction = _json(runner.invoke(app, ["predict", "f", "--snapshot", snapshot]))
    assert [f["id"] for f in prediction["risk_factors"]] == ["few_cook_trials"]


def test_top_validated(snapshot):
    top = _json(runner.invoke(app, ["top-validated", "r", "--snapshot", snapshot]))
    assert [f["id"] for f in top] == ["f"]


def test_suggest(snapshot):
    suggestions = _json(runner.invoke(
        app, ["suggest", "r", "--user", "u-chef", "--snapshot", snapshot],
    ))
    assert suggestions[0]["id"] == "f"
    assert suggestions[0]["match_score"] == 70


def test_autofork_preview(snapshot):
    preview = _json(runner.invoke(
        app, ["autofork-preview", "r", "dairy-free", "--snapshot", snapshot],
    ))
    assert [c["original"] for c in preview["ingredient_changes"]] == ["1 cup milk"]


def test_autofork_apply(snapshot):
    payload = _json(runner.invoke(
        app, ["autofork-apply", "r", "vegan", "--user", "u-vegan", "--snapshot", snapshot],
    ))
    assert payload["result"]["success"] is True
    assert payload["result"]["draft"]["title"] == "Pancakes (Make Vegan)"
    assert [n["type"] for n in payload["notifications"]] == ["RECIPE_FORKED"]
    assert payload["notifications"][0]["user_id"] == "u-owner"


# ── Browsing & analytics ──────────────────────────────────────────────────────

def test_inspired(snapshot):
    page = _json(runner.invoke(app, ["inspired", "r", "--snapshot", snapshot]))
    assert [i["id"] for i in page["items"]] == ["f"]
    assert page["total"] == 1
    assert page["limit"] == 10
    assert page["has_more"] is False


def test_gallery_paging(snapshot):
    page = _json(runner.invoke(
        app, ["gallery", "r", "--sort", "newest", "--offset", "1", "--snapshot", snapshot],
    ))
    assert page["items"] == []
    assert page["total"] == 1
    assert page["offset"] == 1


def test_gallery_rejects_unknown_sort(snapshot):
    result = runner.invoke(app, ["gallery", "r", "--sort", "oldest", "--snapshot", snapshot])
    assert result.exit_code == 1


def test_trending(snapshot):
    trending = _json(runner.invoke(app, ["trending", "--snapshot", snapshot]))
    assert [(t["id"], t["parent_title"]) for t in trending] == [("f", "Pancakes")]


def test_analytics(snapshot):
    report = _json(runner.invoke(app, ["analytics", "--user", "u-owner", "--snapshot", snapshot]))
    assert report["total_forks_received"] == 1
    assert report["fork_influence_score"] == 10
    assert report["top_forked_recipes"] == [{"id": "r", "title": "Pancakes", "fork_count": 1}]


def test_compare(snapshot):
    matrix = _json(runner.invoke(app, ["compare", "r", "--snapshot", snapshot]))
    assert matrix["original"]["id"] == "r"
    assert [f["id"] for f in matrix["forks"]] == ["f"]
    votes = next(row for row in matrix["fields"] if row["key"] == "vote_count")
    assert votes["values"] == [0, 2]


# ── Failures ──────────────────────────────────────────────────────────────────

def test_unknown_recipe(snapshot):
    result = runner.invoke(app, ["lineage", "nope", "--snapshot", snapshot])
    assert result.exit_code == 1


def test_unknown_template(snapshot):
    result = runner.invoke(
        app, ["autofork-apply", "r", "nope", "--user", "u", "--snapshot", snapshot],
    )
    assert result.exit_code == 1


def test_missing_snapshot(tmp_path):
    result = runner.invoke(
        app, ["lineage", "r", "--snapshot", str(Path(tmp_path) / "absent.json")],
    )
    assert result.exit_code == 1


def test_invalid_snapshot(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    result = runner.invoke(app, ["lineage", "r", "--snapshot", str(path)])
    assert result.exit_code == 1
