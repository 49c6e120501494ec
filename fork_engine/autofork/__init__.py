"""
Template-driven fork generation.

Modules:
  templates - validated registry over the static template catalog.
  matcher   - loose ingredient matching shared by preview and apply.
  applier   - preview and apply of a template to a recipe.
"""
