from __future__ import annotations

from typing import Dict, Optional

from pydantic import Field

from .base import CamelModel
from .score_config_schema import BandNarrative, ScoreBand


class QuestionScore(CamelModel):
    """Weighted contribution of a single question."""

    score: float = 0.0
    max_score: float = 0.0
    category: Optional[str] = None


class CategoryScore(CamelModel):
    score: float = 0.0
    max_score: float = 0.0
    label: str = ""


class ScoreResult(CamelModel):
    """Output of the Scoring Engine.

    ``percentage`` is always within [0, 100]; it is exactly 0 when
    ``max_score`` is 0.
    """

    total_score: float = Field(..., description="Sum of weighted raw scores")
    max_score: float = Field(..., ge=0.0, description="Sum of weighted max scores")
    percentage: float = Field(..., ge=0.0, le=100.0)
    category_scores: Dict[str, CategoryScore] = Field(default_factory=dict)


class CategoryBandResult(CamelModel):
    """Band (and matching narrative) assigned to one category."""

    percentage: float
    band: Optional[ScoreBand] = None
    narrative: Optional[BandNarrative] = None
