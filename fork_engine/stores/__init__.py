"""
Collaborator interfaces and the in-memory implementation.

Modules:
  base   - RecipeStore, CookTrialStore, FlavorProfileStore, NotificationSink.
  memory - dict-backed stores, JSON snapshot loader, collecting sink.
"""
