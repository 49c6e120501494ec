"""
Outcome prediction models.

``RiskFactor.severity`` is a signed magnitude used only for score
aggregation: positive for risks, negative for positive factors.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

RiskLevel = Literal["low", "medium", "high"]
RecommendationAction = Literal["proceed", "proceed_with_caution", "not_recommended"]
FactorType = Literal["warning", "caution", "info"]


class RiskFactor(BaseModel):
    """A named contributor to the prediction score (risk or positive)."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: FactorType
    icon: str
    title: str
    description: str
    severity: int


class Recommendation(BaseModel):
    """Verdict plus the fixed message shown with it."""

    model_config = ConfigDict(frozen=True)

    action: RecommendationAction
    message: str


class PredictionParentDiff(BaseModel):
    """Fork-minus-parent diffs used by the prediction rules."""

    model_config = ConfigDict(frozen=True)

    rating_diff: float
    success_rate_diff: float


class PredictionStats(BaseModel):
    """Inputs the rules were evaluated against, echoed for display."""

    model_config = ConfigDict(frozen=True)

    total_cooks: int
    success_rate: int
    average_rating: float
    ingredient_changes: int
    step_changes: int
    compared_to_parent: Optional[PredictionParentDiff] = None


class OutcomePrediction(BaseModel):
    """Risk assessment for adopting a fork.

    Attributes:
        net_score: Σ risk severities − Σ |positive severities|.
        overall_risk_level: ``high`` if net ≥ 10, ``medium`` if net ≥ 5, else ``low``.
        confidence_score: Step function of ``total_cooks`` (10/30/50/70/90).
    """

    model_config = ConfigDict(frozen=True)

    recipe_id: Optional[str] = None
    is_fork: bool = False
    overall_risk_level: RiskLevel
    net_score: int
    confidence_score: int
    risk_factors: list[RiskFactor]
    positive_factors: list[RiskFactor]
    recommendation: Recommendation
    stats: PredictionStats
