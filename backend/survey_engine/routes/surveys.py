"""Survey definition routes.

Creation and score-config updates are the activation gate for a scoring
configuration: band, category and narrative errors reject the request with
HTTP 400.  Logic-rule problems are reported back without blocking.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.score_config_schema import SurveyScoreConfig
from ..schemas.survey_schema import SurveyCreate, SurveyOut
from ..services.survey_service import (
    collect_config_errors,
    create_survey,
    get_survey,
    load_questions,
    survey_to_out,
    update_score_config,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/surveys",
    tags=["Surveys"],
)


def _reject_config(errors: list[str]) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"message": "Invalid scoring configuration", "errors": errors},
    )


@router.post(
    "",
    response_model=SurveyOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a Survey",
    response_description="The stored survey with its results mode and logic issues",
)
def submit_survey(payload: SurveyCreate, db: Session = Depends(get_db)) -> SurveyOut:
    errors = collect_config_errors(payload.questions, payload.score_config)
    if errors:
        logger.info("[SURVEYS] Rejected survey %r with %d config errors", payload.title, len(errors))
        raise _reject_config(errors)

    survey = create_survey(db, payload)
    return survey_to_out(survey)


@router.get(
    "/{survey_id}",
    response_model=SurveyOut,
    summary="Get a Survey",
)
def read_survey(survey_id: UUID, db: Session = Depends(get_db)) -> SurveyOut:
    survey = get_survey(db, survey_id)
    if survey is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Survey not found")
    return survey_to_out(survey)


@router.put(
    "/{survey_id}/score-config",
    response_model=SurveyOut,
    summary="Replace a Survey's Scoring Configuration",
    response_description="The survey with its newly activated configuration",
)
def replace_score_config(
    survey_id: UUID,
    payload: SurveyScoreConfig,
    db: Session = Depends(get_db),
) -> SurveyOut:
    """Accept an AI-suggested or hand-authored scoring configuration.

    Unknown fields are rejected by the schema (400) before this handler runs.
    """
    survey = get_survey(db, survey_id)
    if survey is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Survey not found")

    errors = collect_config_errors(load_questions(survey), payload)
    if errors:
        raise _reject_config(errors)

    survey = update_score_config(db, survey, payload)
    logger.info("[SURVEYS] Score config updated for survey %s", survey.id)
    return survey_to_out(survey)
