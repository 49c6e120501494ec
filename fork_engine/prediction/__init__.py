"""
Outcome prediction for adopting a fork.

Modules:
  predictor - rule-based risk/positive factors, risk level, confidence
              and recommendation.
"""
