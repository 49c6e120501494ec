"""
Fork-graph traversal.

Modules:
  walker - ancestor chains, root resolution, root-to-node paths and
           level-wise concurrent descendant-tree expansion.
"""
