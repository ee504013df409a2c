"""Survey and response persistence helpers.

Thin glue between the ORM rows and the engine's pydantic models.  The
engine functions themselves never touch the database.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from ..constants import DEFAULT_SCORING_ENGINE_ID
from ..models.survey import Survey, SurveyResponse
from ..schemas.question_schema import QuestionBase, parse_questions
from ..schemas.score_config_schema import SurveyScoreConfig
from ..schemas.survey_schema import ResponseRecord, SurveyCreate, SurveyOut
from .band_validator import validate_question_categories, validate_results_config
from .logic_engine import validate_logic_rules
from .results_mode import get_results_mode_labels, resolve_results_mode
from .scoring_service import SubmissionScoring


def load_questions(survey: Survey) -> List[QuestionBase]:
    return parse_questions(json.loads(survey.questions_json))


def load_score_config(survey: Survey) -> Optional[SurveyScoreConfig]:
    if not survey.score_config_json:
        return None
    return SurveyScoreConfig.model_validate_json(survey.score_config_json)


def _dump_questions(questions: List[QuestionBase]) -> str:
    return json.dumps([q.model_dump(by_alias=True, exclude_none=True) for q in questions])


def _dump_score_config(score_config: Optional[SurveyScoreConfig]) -> Optional[str]:
    if score_config is None:
        return None
    return score_config.model_dump_json(by_alias=True, exclude_none=True)


def collect_config_errors(
    questions: List[QuestionBase],
    score_config: Optional[SurveyScoreConfig],
) -> List[str]:
    """Every configuration error that must block activation."""
    errors = validate_question_categories(questions, score_config)
    errors.extend(validate_results_config(score_config).errors)
    return errors


def get_survey(db: Session, survey_id: UUID) -> Optional[Survey]:
    return db.query(Survey).filter(Survey.id == survey_id).first()


def create_survey(db: Session, payload: SurveyCreate) -> Survey:
    """Persist a validated survey definition and return the ORM instance."""
    survey = Survey(
        title=payload.title,
        description=payload.description,
        status=payload.status,
        tags_json=json.dumps(payload.tags),
        questions_json=_dump_questions(payload.questions),
        score_config_json=_dump_score_config(payload.score_config),
        scoring_engine_id=payload.scoring_engine_id,
    )
    db.add(survey)
    db.commit()
    db.refresh(survey)
    return survey


def update_score_config(db: Session, survey: Survey, score_config: SurveyScoreConfig) -> Survey:
    survey.score_config_json = _dump_score_config(score_config)
    db.commit()
    db.refresh(survey)
    return survey


def survey_to_out(survey: Survey) -> SurveyOut:
    questions = load_questions(survey)
    score_config = load_score_config(survey)
    results_mode = resolve_results_mode(score_config, survey.scoring_engine_id, survey.tags)
    return SurveyOut(
        id=str(survey.id),
        title=survey.title,
        description=survey.description,
        status=survey.status,
        tags=survey.tags,
        questions=questions,
        score_config=score_config,
        scoring_engine_id=survey.scoring_engine_id,
        results_mode=results_mode,
        results_labels=get_results_mode_labels(results_mode),
        logic_issues=validate_logic_rules(questions),
        created_at=survey.created_at,
    )


def create_response(
    db: Session,
    survey: Survey,
    answers: Dict[str, Any],
    submission: Optional[SubmissionScoring],
) -> SurveyResponse:
    response = SurveyResponse(
        survey_id=survey.id,
        answers_json=json.dumps(answers),
        scoring_engine_id=(
            submission.engine_id if submission
            else survey.scoring_engine_id or DEFAULT_SCORING_ENGINE_ID
        ),
    )
    if submission is not None:
        response.total_score = submission.scoring.total_score
        response.percentage = submission.scoring.percentage
        response.band_id = submission.band.id if submission.band else None
    db.add(response)
    db.commit()
    db.refresh(response)
    return response


def response_to_record(response: SurveyResponse) -> ResponseRecord:
    return ResponseRecord(
        id=str(response.id),
        survey_id=str(response.survey_id),
        answers=response.answers,
        scoring_engine_id=response.scoring_engine_id,
        total_score=response.total_score,
        percentage=response.percentage,
        band_id=response.band_id,
        created_at=response.created_at,
    )


def list_responses(db: Session, survey: Survey) -> List[SurveyResponse]:
    return (
        db.query(SurveyResponse)
        .filter(SurveyResponse.survey_id == survey.id)
        .order_by(SurveyResponse.created_at)
        .all()
    )
