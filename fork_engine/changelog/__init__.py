"""
Fork-vs-parent structural diffing.

Modules:
  differ - ingredient, step and metadata diff plus the one-line summary.
"""
