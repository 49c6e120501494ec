"""
Auto-fork preview and apply.

``preview`` reports what a template would change; ``apply`` performs the
change on a deep copy of the recipe's components and returns a fork draft.
Both walk the template's modifications in order and use the same matcher
(``fork_engine.autofork.matcher``), so a preview never promises a change that
apply would not make.

Modification semantics
----------------------
  substitute_ingredient  name → "<replacement> (originally <name>)";
                         notes gain "Substituted: <replacement>"
  remove_ingredient      matching ingredients are dropped
  reduce_quantity        numeric quantity × 0.5, note "Reduced by half";
                         non-numeric quantities are counted but left as is
  increase_quantity      target "servings": servings × 2; any other target
                         leaves ingredients untouched and is not counted
  add_instruction        "<reason>\\n\\n" prepended to the first step of the
                         first section
  simplify_steps,        "[<template name>] " prepended to the first step of
  change_cooking_method  every section
  reduce_time            total time × 0.6, rounded

Notes are joined with " - ". Mutation errors are logged and returned as
``AutoForkResult(success=False)``; an unknown template id raises
``InvalidTemplateError`` before anything is touched.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from pydantic import ValidationError

from fork_engine.autofork.matcher import ingredient_matches, name_matches
from fork_engine.autofork.templates import get_template
from fork_engine.models.autofork import (
    AutoForkChanges,
    AutoForkPreview,
    AutoForkResult,
    AutoForkTemplate,
    EstimatedDifficulty,
    ForkDraft,
    ForkModification,
    IngredientChange,
    MetadataAdjustment,
    StepChange,
)
from fork_engine.models.recipe import Recipe, RecipeComponent

logger = logging.getLogger(__name__)

REDUCE_FACTOR = 0.5
SERVINGS_FACTOR = 2
TIME_FACTOR = 0.6
SERVINGS_TARGET = "servings"

DIFFICULTY_CHANGE_THRESHOLD = 3

# Keyword heuristics behind the "may already be ..." warnings.
_GLUTEN_KEYWORDS = ("flour", "pasta", "bread")
_ANIMAL_KEYWORDS = ("meat", "chicken", "beef", "egg", "milk", "butter", "cheese")

TemplateRef = Union[str, AutoForkTemplate]


def _resolve(template: TemplateRef) -> AutoForkTemplate:
    return get_template(template) if isinstance(template, str) else template


def _append_note(notes: Optional[str], note: str) -> str:
    return f"{notes} - {note}" if notes else note


def _is_number(quantity: Any) -> bool:
    return isinstance(quantity, (int, float)) and not isinstance(quantity, bool) and bool(quantity)


def _is_servings(mod: ForkModification) -> bool:
    return (mod.target or "").lower() == SERVINGS_TARGET


def metadata_adjustments(recipe: Recipe, template: AutoForkTemplate) -> list[MetadataAdjustment]:
    """Timing/servings changes the template implies for ``recipe``."""
    adjustments: list[MetadataAdjustment] = []
    for mod in template.modifications:
        if mod.type == "reduce_time" and recipe.total_time_minutes:
            adjustments.append(MetadataAdjustment(
                field="total_time_minutes",
                old_value=recipe.total_time_minutes,
                new_value=round(recipe.total_time_minutes * TIME_FACTOR),
            ))
        elif mod.type == "increase_quantity" and _is_servings(mod) and recipe.servings:
            adjustments.append(MetadataAdjustment(
                field="servings",
                old_value=recipe.servings,
                new_value=recipe.servings * SERVINGS_FACTOR,
            ))
    return adjustments


# ── Preview ───────────────────────────────────────────────────────────────────


def _warnings(recipe: Recipe, template: AutoForkTemplate) -> list[str]:
    names = [ing.name.lower() for ing in recipe.ingredients()]

    def mentions_any(keywords: tuple[str, ...]) -> bool:
        return any(kw in name for name in names for kw in keywords)

    warnings: list[str] = []
    if template.id == "gluten-free" and not mentions_any(_GLUTEN_KEYWORDS):
        warnings.append("This recipe may already be gluten-free")
    if template.id == "vegan" and not mentions_any(_ANIMAL_KEYWORDS):
        warnings.append("This recipe may already be vegan")
    return warnings


def _estimate_difficulty(
    ingredient_changes: list[IngredientChange],
    step_changes: list[StepChange],
) -> EstimatedDifficulty:
    if (
        len(ingredient_changes) > DIFFICULTY_CHANGE_THRESHOLD
        or len(step_changes) > DIFFICULTY_CHANGE_THRESHOLD
        or any(c.action == "substitute" for c in ingredient_changes)
    ):
        return "medium"
    return "easy"


def preview(recipe: Recipe, template: TemplateRef) -> AutoForkPreview:
    """Describe the changes ``template`` would make to ``recipe``.

    Raises:
        InvalidTemplateError: If ``template`` is an unknown id.
    """
    template = _resolve(template)
    ingredients = recipe.ingredients()
    ingredient_changes: list[IngredientChange] = []
    step_changes: list[StepChange] = []

    for mod in template.modifications:
        if mod.type in ("substitute_ingredient", "remove_ingredient", "reduce_quantity"):
            matches = [ing for ing in ingredients if ingredient_matches(ing, mod.target)]
            if not matches:
                logger.debug("Template %s: no ingredient matches %r", template.id, mod.target)
            for ing in matches:
                if mod.type == "substitute_ingredient":
                    change = IngredientChange(
                        action="substitute", original=ing.display(),
                        replacement=mod.replacement, reason=mod.reason,
                    )
                elif mod.type == "remove_ingredient":
                    change = IngredientChange(
                        action="remove", original=ing.display(), reason=mod.reason,
                    )
                else:
                    change = IngredientChange(
                        action="reduce", original=ing.display(),
                        replacement=f"Reduced {ing.name}", reason=mod.reason,
                    )
                ingredient_changes.append(change)
        elif mod.type == "change_cooking_method":
            step_changes.append(StepChange(
                action="modify",
                description=f"Change {mod.target} to {mod.replacement}: {mod.reason}",
            ))
        elif mod.type == "simplify_steps":
            step_changes.append(StepChange(action="modify", description=mod.reason))
        elif mod.type == "add_instruction":
            step_changes.append(StepChange(action="add", step_index=0, description=mod.reason))

    return AutoForkPreview(
        template=template,
        ingredient_changes=ingredient_changes,
        step_changes=step_changes,
        metadata_changes=metadata_adjustments(recipe, template),
        estimated_difficulty=_estimate_difficulty(ingredient_changes, step_changes),
        warnings=_warnings(recipe, template),
    )


# ── Apply ─────────────────────────────────────────────────────────────────────


def _apply_modification(
    components: list[dict[str, Any]],
    mod: ForkModification,
    template: AutoForkTemplate,
) -> tuple[int, int]:
    """Mutate plain-dict ``components`` in place; return (ingredients, steps) touched."""
    ingredients_touched = 0
    steps_touched = 0

    if mod.type == "substitute_ingredient":
        for comp in components:
            for ing in comp["ingredients"]:
                if name_matches(ing["name"], mod.target):
                    ing["notes"] = _append_note(ing.get("notes"), f"Substituted: {mod.replacement}")
                    ing["name"] = f"{mod.replacement} (originally {ing['name']})"
                    ingredients_touched += 1

    elif mod.type == "remove_ingredient":
        for comp in components:
            kept = [ing for ing in comp["ingredients"] if not name_matches(ing["name"], mod.target)]
            ingredients_touched += len(comp["ingredients"]) - len(kept)
            comp["ingredients"] = kept

    elif mod.type == "reduce_quantity":
        for comp in components:
            for ing in comp["ingredients"]:
                if name_matches(ing["name"], mod.target):
                    if _is_number(ing.get("quantity")):
                        ing["quantity"] = ing["quantity"] * REDUCE_FACTOR
                        ing["notes"] = _append_note(ing.get("notes"), "Reduced by half")
                    ingredients_touched += 1

    elif mod.type == "add_instruction":
        if components and components[0]["steps"]:
            first = components[0]["steps"][0]
            first["instruction"] = f"{mod.reason}\n\n{first['instruction']}"
            steps_touched += 1

    elif mod.type in ("simplify_steps", "change_cooking_method"):
        for comp in components:
            if comp["steps"]:
                comp["steps"][0]["instruction"] = (
                    f"[{template.name}] {comp['steps'][0]['instruction']}"
                )
                steps_touched += 1

    return ingredients_touched, steps_touched


def apply(
    recipe: Recipe,
    template: TemplateRef,
    user_id: Optional[str] = None,
) -> AutoForkResult:
    """Apply ``template`` to a copy of ``recipe`` and return a fork draft.

    ``recipe`` is never modified. Calling twice on the same input gives two
    equal, independent drafts.

    Args:
        recipe: Recipe to fork.
        template: Template or template id.
        user_id: Author of the new fork.

    Raises:
        InvalidTemplateError: If ``template`` is an unknown id.
    """
    template = _resolve(template)
    try:
        components = [comp.model_dump() for comp in recipe.components]
        ingredients_modified = 0
        steps_modified = 0
        for mod in template.modifications:
            ing_count, step_count = _apply_modification(components, mod, template)
            ingredients_modified += ing_count
            steps_modified += step_count

        metadata = {
            "prep_time_minutes": recipe.prep_time_minutes,
            "cook_time_minutes": recipe.cook_time_minutes,
            "total_time_minutes": recipe.total_time_minutes,
            "servings": recipe.servings,
            "difficulty": recipe.difficulty,
        }
        for adjustment in metadata_adjustments(recipe, template):
            metadata[adjustment.field] = adjustment.new_value

        draft = ForkDraft(
            title=f"{recipe.title} ({template.name})",
            description=recipe.description,
            user_id=user_id,
            parent_id=recipe.id,
            root_id=recipe.root_id or recipe.id,
            fork_note=template.fork_note,
            fork_tags=list(template.fork_tags),
            components=[RecipeComponent.model_validate(c) for c in components],
            **metadata,
        )
    except (ValidationError, TypeError, ValueError, KeyError) as exc:
        logger.error("Auto-fork %s on recipe %s failed: %s", template.id, recipe.id, exc)
        return AutoForkResult(
            success=False, template_id=template.id, error="Failed to create fork"
        )

    logger.info(
        "Auto-fork %s on recipe %s: %d ingredients, %d steps modified",
        template.id, recipe.id, ingredients_modified, steps_modified,
    )
    return AutoForkResult(
        success=True,
        template_id=template.id,
        draft=draft,
        changes=AutoForkChanges(
            ingredients_modified=ingredients_modified,
            steps_modified=steps_modified,
        ),
    )
