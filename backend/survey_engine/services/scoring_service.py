"""Response-submission scoring.

Composes the Scoring Engine and the Band Assigner for one submitted
response and shapes the result for the submission endpoint.  The route
stays thin; everything scoring-related for a submission lives here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence

from ..constants import DEFAULT_SCORING_ENGINE_ID
from ..schemas.question_schema import QuestionBase
from ..schemas.score_config_schema import ScoreBand, SurveyScoreConfig
from ..schemas.score_schema import CategoryBandResult, ScoreResult
from ..timing import StepTimer
from .audit_log import log_scoring_complete
from .band_assigner import assign_band, assign_category_bands, resolve_overall_bands
from .scoring_engine import score_survey


@dataclass
class SubmissionScoring:
    """Scored result of one submission."""

    engine_id: str
    scoring: ScoreResult
    band: Optional[ScoreBand] = None
    category_bands: Dict[str, CategoryBandResult] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        """JSON fields merged into the submission response body."""
        return {
            "scoring": self.scoring.model_dump(by_alias=True),
            "band": self.band.model_dump(by_alias=True, exclude_none=True) if self.band else None,
            "categoryBands": {
                cid: result.model_dump(by_alias=True, exclude_none=True)
                for cid, result in self.category_bands.items()
            },
        }


def score_submission(
    questions: Sequence[QuestionBase],
    answers: Mapping[str, Any],
    score_config: Optional[SurveyScoreConfig],
    scoring_engine_id: Optional[str] = None,
) -> Optional[SubmissionScoring]:
    """Score a submission, or return ``None`` when scoring is not enabled.

    The overall band is assigned on the percentage scale, so the overall band
    table is read as percentage ranges.
    """
    if score_config is None or not score_config.enabled:
        return None

    engine_id = scoring_engine_id or DEFAULT_SCORING_ENGINE_ID
    timer = StepTimer("score_submission")

    with timer.step("score"):
        scoring = score_survey(questions, answers, score_config, engine_id)

    with timer.step("band"):
        band = assign_band(scoring.percentage, 100.0, resolve_overall_bands(score_config))
        category_bands = assign_category_bands(scoring, score_config)

    timer.summary()
    return SubmissionScoring(
        engine_id=engine_id,
        scoring=scoring,
        band=band,
        category_bands=category_bands,
    )


def record_scoring_audit(
    submission: SubmissionScoring,
    *,
    survey_id: str,
    response_id: Optional[str],
    score_config: Optional[SurveyScoreConfig],
) -> None:
    scoring = submission.scoring
    log_scoring_complete(
        survey_id=survey_id,
        response_id=response_id,
        scoring_engine_id=submission.engine_id,
        score_config_version=score_config.version if score_config else None,
        total_score=scoring.total_score,
        max_score=scoring.max_score,
        percentage=scoring.percentage,
        band_id=submission.band.id if submission.band else None,
        band_label=submission.band.label if submission.band else None,
        category_count=len(scoring.category_scores),
    )
