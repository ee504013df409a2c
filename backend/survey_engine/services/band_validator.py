"""Band Validator.

Checks that a scoring configuration's band tables are internally consistent
before the configuration is accepted.  Every problem is collected (no
fail-fast) so an author can fix them all at once.  Inputs are never mutated.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..schemas.question_schema import QuestionBase
from ..schemas.score_config_schema import (
    BandValidationResult,
    CategoryResultConfig,
    ScoreBand,
    SurveyScoreConfig,
)
from .band_assigner import effective_category_bands, resolve_overall_bands


def _validate_bands(bands: Sequence[ScoreBand], context: str, errors: List[str]) -> None:
    if not bands:
        return
    ordered = sorted(bands, key=lambda b: b.min)
    seen_ids: set[str] = set()
    for idx, band in enumerate(ordered):
        if not band.id or band.id in seen_ids:
            errors.append(f"Duplicate or missing band id in {context}")
        seen_ids.add(band.id)
        if band.min > band.max:
            errors.append(f"Band {band.id} in {context} has min > max")
        if idx > 0:
            prev = ordered[idx - 1]
            if band.min < prev.max:
                errors.append(f"Band {band.id} in {context} overlaps with {prev.id}")


def _validate_band_narratives(
    category: CategoryResultConfig,
    bands: Sequence[ScoreBand],
    errors: List[str],
) -> None:
    valid_ids = {b.id for b in bands}
    for narrative in category.band_narratives:
        if narrative.band_id not in valid_ids:
            errors.append(
                f"Narrative bandId {narrative.band_id} for category "
                f"{category.category_id} does not match available bands"
            )


def validate_results_config(score_config: Optional[SurveyScoreConfig]) -> BandValidationResult:
    """Validate the overall and per-category band tables of *score_config*.

    Without a results screen there is nothing to check and validation
    trivially succeeds.
    """
    errors: List[str] = []
    if score_config is None or score_config.results_screen is None:
        return BandValidationResult(valid=True, errors=errors)

    overall = resolve_overall_bands(score_config)
    _validate_bands(overall, "overall", errors)

    declared = {c.id for c in score_config.categories}
    for category in score_config.results_screen.categories:
        if category.category_id not in declared:
            errors.append(
                f"Category {category.category_id} is not defined in scoreConfig.categories"
            )
        bands = effective_category_bands(category, overall)
        _validate_bands(bands, f"category:{category.category_id}", errors)
        _validate_band_narratives(category, bands, errors)

    return BandValidationResult(valid=not errors, errors=errors)


def validate_question_categories(
    questions: Sequence[QuestionBase],
    score_config: Optional[SurveyScoreConfig],
) -> List[str]:
    """Check that scorable questions only reference declared categories.

    Without a scoring configuration the survey is not scored and category
    tags are not checked.
    """
    if score_config is None:
        return []

    errors: List[str] = []
    declared: set[str] = set()
    for category in score_config.categories:
        if category.id in declared:
            errors.append(f"Duplicate category id {category.id} in scoreConfig.categories")
        declared.add(category.id)

    for question in questions:
        if question.scorable and question.scoring_category and question.scoring_category not in declared:
            errors.append(
                f"Question {question.id} references undeclared scoring category "
                f"{question.scoring_category}"
            )
    return errors
