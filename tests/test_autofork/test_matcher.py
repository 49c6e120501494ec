"""
Tests for fork_engine/autofork/matcher.py.

What we test
------------
  - Targets split on whitespace and underscores, lowercased.
  - Any token as a substring of the ingredient name is a match, so "egg"
    matches both "2 large eggs" and "eggplant, sliced".
  - Matching is case-insensitive.
  - An empty or missing target matches nothing.
"""

from __future__ import annotations

import pytest

from fork_engine.autofork.matcher import ingredient_matches, name_matches, target_tokens
from fork_engine.models.recipe import Ingredient


@pytest.mark.parametrize("target, tokens", [
    ("egg", ["egg"]),
    ("soy_sauce", ["soy", "sauce"]),
    ("Hot_Peppers  chili", ["hot", "peppers", "chili"]),
    ("_oil_", ["oil"]),
    ("", []),
    (None, []),
])
def test_target_tokens(target, tokens):
    assert target_tokens(target) == tokens


@pytest.mark.parametrize("name, target, expected", [
    ("2 large eggs", "egg", True),
    ("eggplant, sliced", "egg", True),
    ("Eggs", "egg", True),
    ("fish sauce", "soy_sauce", True),
    ("bell peppers", "hot_peppers", True),
    ("olive oil", "butter", False),
    ("flour", "", False),
    ("flour", None, False),
])
def test_name_matches(name, target, expected):
    assert name_matches(name, target) is expected


def test_ingredient_matches_uses_name_only():
    ing = Ingredient(name="milk", quantity=1, unit="cup", notes="whole eggs optional")
    assert ingredient_matches(ing, "milk") is True
    assert ingredient_matches(ing, "eggs") is False
