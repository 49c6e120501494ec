"""
Auto-fork template registry.

Validates ``AUTO_FORK_CATALOG`` into ``AutoForkTemplate`` models once at
import time, so a malformed catalog entry fails loudly on startup instead of
in the middle of a request.
"""

from __future__ import annotations

from fork_engine.errors import InvalidTemplateError
from fork_engine.models.autofork import AutoForkTemplate
from fork_engine.taxonomy.autofork_catalog import AUTO_FORK_CATALOG

_TEMPLATES: dict[str, AutoForkTemplate] = {
    entry["id"]: AutoForkTemplate.model_validate(entry) for entry in AUTO_FORK_CATALOG
}

CATEGORY_ORDER: tuple[str, ...] = ("dietary", "cooking_method", "time", "health", "skill")


def get_template(template_id: str) -> AutoForkTemplate:
    """Look up a template by id.

    Raises:
        InvalidTemplateError: If ``template_id`` is not in the catalog.
    """
    try:
        return _TEMPLATES[template_id]
    except KeyError:
        raise InvalidTemplateError(template_id) from None


def list_templates() -> list[AutoForkTemplate]:
    """All templates in catalog order."""
    return list(_TEMPLATES.values())


def templates_by_category() -> dict[str, list[AutoForkTemplate]]:
    """Templates grouped by category, categories in display order."""
    grouped: dict[str, list[AutoForkTemplate]] = {cat: [] for cat in CATEGORY_ORDER}
    for template in _TEMPLATES.values():
        grouped.setdefault(template.category, []).append(template)
    return grouped
