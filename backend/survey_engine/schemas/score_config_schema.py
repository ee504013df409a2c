"""Scoring configuration schemas.

Score configurations may be authored by hand or suggested by an AI model, so
every model here FORBIDS unknown fields: a payload smuggling in e.g. a
``scoringEngineId`` override is rejected at the boundary.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .base import StrictCamelModel


class ScoreCategory(StrictCamelModel):
    id: str = Field(..., min_length=1)
    name: str


class ScoreBand(StrictCamelModel):
    """Labeled, inclusive score range."""

    id: str = ""
    min: float
    max: float
    label: str = ""

    # Presentation fields carried through to the results screen
    color: Optional[str] = None
    tone: Optional[Literal["risk", "neutral", "strength"]] = None
    headline: Optional[str] = None
    summary: Optional[str] = None
    manager_tips: Optional[List[str]] = None
    org_actions: Optional[List[str]] = None
    short_description: Optional[str] = None
    long_description: Optional[str] = None
    category: Optional[str] = None
    interpretation: Optional[str] = None


class BandNarrative(StrictCamelModel):
    band_id: str
    headline: Optional[str] = None
    summary: Optional[str] = None


class CategoryResultConfig(StrictCamelModel):
    category_id: str
    show: bool = True
    emphasize: Optional[bool] = None
    # "inherit" is the legacy spelling of "default"
    bands_mode: Literal["default", "inherit", "custom"] = "default"
    bands: Optional[List[ScoreBand]] = None
    band_narratives: List[BandNarrative] = Field(default_factory=list)


class ResultsScreenConfig(StrictCamelModel):
    enabled: bool = False
    layout: Literal["simple", "bands", "dashboard"] = "simple"
    show_total_score: bool = True
    show_percentage: bool = True
    show_overall_band: bool = True
    show_category_breakdown: bool = True
    show_category_bands: bool = True
    show_strengths_and_risks: bool = False
    show_call_to_action: bool = False
    title: Optional[str] = None
    subtitle: Optional[str] = None
    footer_note: Optional[str] = None
    cta_label: Optional[str] = None
    cta_url: Optional[str] = None
    theme_variant: Optional[Literal["neutral", "success", "warning", "danger", "teal"]] = None
    score_ranges: Optional[List[ScoreBand]] = None
    categories: List[CategoryResultConfig] = Field(default_factory=list)


class SurveyScoreConfig(StrictCamelModel):
    enabled: bool = False
    categories: List[ScoreCategory] = Field(default_factory=list)
    score_ranges: List[ScoreBand] = Field(default_factory=list)
    results_screen: Optional[ResultsScreenConfig] = None
    version: Optional[str] = Field(
        default=None,
        description="Author-visible revision tag, echoed in scoring audit events",
    )

    def category_name(self, category_id: str) -> Optional[str]:
        for category in self.categories:
            if category.id == category_id:
                return category.name
        return None


class BandValidationResult(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)

