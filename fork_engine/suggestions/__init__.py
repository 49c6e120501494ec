"""
Fork ranking for discovery.

Modules:
  scorer - per-fork match score and reasons against a flavor profile.
  ranker - smart suggestions and top validated forks.
"""
