"""
Cook-trial aggregation.

Modules:
  aggregator - trial stats, validation badges, parent comparison.
"""
