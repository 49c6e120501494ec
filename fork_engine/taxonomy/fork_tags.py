"""
Fork tag vocabulary.

Fork tags describe *how* a fork differs from its parent ("spicier",
"gluten-free"). The vocabulary is closed: tags outside ``ForkTag`` are
dropped on write.

Tag groups used by the suggestion scorer:
  - ``HEALTH_TAGS``  - tags that earn the "Healthier alternative" reason.
  - heat tags        - ``spicier`` / ``milder`` vs. ``heat_preference``.
  - complexity tags  - ``simplified`` / ``elevated`` vs. ``preferred_complexity``.

This module has NO imports from any other ``fork_engine`` package.
"""

from enum import StrEnum


class ForkTag(StrEnum):
    """How a fork departs from its parent."""

    HEALTHIER = "healthier"
    VEGAN = "vegan"
    VEGETARIAN = "vegetarian"
    GLUTEN_FREE = "gluten-free"
    DAIRY_FREE = "dairy-free"
    KETO = "keto"
    LOW_CARB = "low-carb"
    QUICK = "quick"
    BUDGET_FRIENDLY = "budget-friendly"
    KID_FRIENDLY = "kid-friendly"
    SPICIER = "spicier"
    MILDER = "milder"
    SIMPLIFIED = "simplified"
    ELEVATED = "elevated"


FORK_TAG_OPTIONS: tuple[str, ...] = tuple(t.value for t in ForkTag)

HEALTH_TAGS: frozenset[str] = frozenset({
    ForkTag.HEALTHIER, ForkTag.LOW_CARB, ForkTag.KETO,
})


def format_tag_label(tag: str) -> str:
    """``"gluten-free"`` → ``"Gluten Free"``."""
    return " ".join(word[:1].upper() + word[1:] for word in tag.split("-"))


def fork_tag_options() -> list[dict[str, str]]:
    """Vocabulary as ``{"value", "label"}`` pairs for pickers."""
    return [{"value": tag, "label": format_tag_label(tag)} for tag in FORK_TAG_OPTIONS]


def filter_valid_tags(tags: list[str]) -> list[str]:
    """Keep only vocabulary tags, preserving order and dropping duplicates."""
    seen: set[str] = set()
    valid: list[str] = []
    for tag in tags:
        if tag in FORK_TAG_OPTIONS and tag not in seen:
            seen.add(tag)
            valid.append(tag)
    return valid
