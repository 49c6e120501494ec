"""
Ingredient matching shared by auto-fork preview and apply.

A modification target is lowercased and split on whitespace and underscores.
An ingredient matches when ANY token is a substring of its lowercased name:

  | target        | ingredient           | match |
  |---------------|----------------------|-------|
  | "egg"         | "2 large eggs"       | yes   |
  | "egg"         | "eggplant, sliced"   | yes   |
  | "soy_sauce"   | "fish sauce"         | yes   |
  | "hot_peppers" | "bell peppers"       | yes   |

The over-matching is long-standing behaviour that existing consumers see in
previews; tightening it would change which ingredients a template touches.
"""

from __future__ import annotations

import re
from typing import Optional

from fork_engine.models.recipe import Ingredient

_TOKEN_SPLIT = re.compile(r"[_\s]+")


def target_tokens(target: Optional[str]) -> list[str]:
    """Split a modification target into lowercase match tokens."""
    if not target:
        return []
    return [tok for tok in _TOKEN_SPLIT.split(target.lower()) if tok]


def name_matches(name: str, target: Optional[str]) -> bool:
    """True when any token of ``target`` is a substring of ``name``."""
    lowered = name.lower()
    return any(tok in lowered for tok in target_tokens(target))


def ingredient_matches(ingredient: Ingredient, target: Optional[str]) -> bool:
    return name_matches(ingredient.name, target)
