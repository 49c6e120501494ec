"""
Fork browsing and analytics over the Recipe Store.

Modules:
  listings   - paged fork lists (inspired / gallery) and trending forks.
  influence  - per-user fork analytics and influence score.
  comparison - side-by-side comparison matrix of a recipe and its forks.
"""
