"""Band Assigner.

Maps a score onto the band whose inclusive ``[min, max]`` range contains it.

Band table fallback order
-------------------------
- overall:  ``resultsScreen.scoreRanges`` when non-empty, else
            ``scoreConfig.scoreRanges``
- category: the category's own ``bands`` when ``bandsMode == "custom"`` and
            they are non-empty, else the overall table

A ``None`` band means "no banding configured", never an error.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence

from ..schemas.score_config_schema import (
    BandNarrative,
    CategoryResultConfig,
    ScoreBand,
    SurveyScoreConfig,
)
from ..schemas.score_schema import CategoryBandResult, ScoreResult

logger = logging.getLogger(__name__)


def assign_band(
    score: float,
    max_score: float,
    band_table: Optional[Sequence[ScoreBand]],
) -> Optional[ScoreBand]:
    """Return the first band in declaration order whose range contains *score*.

    *score* and the band table must already be on the same scale; callers
    banding by percentage pass the percentage with ``max_score=100``.
    *max_score* does not affect matching; it is only reported in the debug
    log for non-finite scores.
    Overlapping tables resolve to the earliest matching band.
    """
    if not band_table:
        return None
    if score is None or not math.isfinite(score):
        logger.debug("[BANDS] Non-finite score %r (max %r), no band", score, max_score)
        return None
    for band in band_table:
        if band.min <= score <= band.max:
            return band
    return None


def resolve_overall_bands(score_config: Optional[SurveyScoreConfig]) -> List[ScoreBand]:
    if score_config is None:
        return []
    results_screen = score_config.results_screen
    if results_screen is not None and results_screen.score_ranges:
        return list(results_screen.score_ranges)
    return list(score_config.score_ranges)


def effective_category_bands(
    category: Optional[CategoryResultConfig],
    overall: Sequence[ScoreBand],
) -> List[ScoreBand]:
    if category is not None and category.bands_mode == "custom" and category.bands:
        return list(category.bands)
    return list(overall)


def find_category_config(
    score_config: Optional[SurveyScoreConfig],
    category_id: str,
) -> Optional[CategoryResultConfig]:
    if score_config is None or score_config.results_screen is None:
        return None
    for category in score_config.results_screen.categories:
        if category.category_id == category_id:
            return category
    return None


def resolve_category_bands(
    score_config: Optional[SurveyScoreConfig],
    category_id: str,
) -> List[ScoreBand]:
    return effective_category_bands(
        find_category_config(score_config, category_id),
        resolve_overall_bands(score_config),
    )


def _narrative_for(
    category: Optional[CategoryResultConfig],
    band: Optional[ScoreBand],
) -> Optional[BandNarrative]:
    if category is None or band is None:
        return None
    for narrative in category.band_narratives:
        if narrative.band_id == band.id:
            return narrative
    return None


def assign_category_bands(
    result: ScoreResult,
    score_config: Optional[SurveyScoreConfig],
) -> Dict[str, CategoryBandResult]:
    """Band every category of *result* by its own percentage."""
    assigned: Dict[str, CategoryBandResult] = {}
    if score_config is None:
        return assigned

    overall = resolve_overall_bands(score_config)
    for category_id, category_score in result.category_scores.items():
        percentage = 0.0
        if category_score.max_score > 0:
            ratio = category_score.score / category_score.max_score * 100
            if math.isfinite(ratio):
                percentage = max(0.0, min(100.0, ratio))
        category = find_category_config(score_config, category_id)
        band = assign_band(percentage, 100.0, effective_category_bands(category, overall))
        assigned[category_id] = CategoryBandResult(
            percentage=percentage,
            band=band,
            narrative=_narrative_for(category, band),
        )
    return assigned
