"""
Exceptions surfaced to callers of the fork engine.

Traversal bounds (chain length, fan-out, depth, deadline) are deliberately
absent here: they are reported as flags on results, never raised.
"""

from __future__ import annotations


class RecipeNotFoundError(LookupError):
    """Raised when a requested recipe does not exist in the store.

    Attributes:
        recipe_id: The id that failed to resolve.
    """

    def __init__(self, recipe_id: str) -> None:
        self.recipe_id = recipe_id
        super().__init__(f"Recipe '{recipe_id}' not found.")


class InvalidTemplateError(LookupError):
    """Raised for an auto-fork template id missing from the catalog.

    Attributes:
        template_id: The unknown template id.
    """

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"Auto-fork template '{template_id}' not found.")


class NotAForkError(ValueError):
    """Raised when a fork-only operation targets a recipe with no parent.

    Attributes:
        recipe_id: The root recipe.
        operation: What was attempted, e.g. ``"fork tags"``.
    """

    def __init__(self, recipe_id: str, operation: str) -> None:
        self.recipe_id = recipe_id
        self.operation = operation
        super().__init__(
            f"Recipe '{recipe_id}' has no parent; {operation} apply only to forked recipes."
        )
