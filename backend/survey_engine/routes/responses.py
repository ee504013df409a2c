"""Response submission routes.

Scoring fields are only present in the submission body when the survey's
scoring is enabled; their absence signals "not scored".
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..constants import ACTIVE_STATUS
from ..database import get_db
from ..schemas.survey_schema import ResponseList, ResponseSubmit
from ..services.scoring_service import record_scoring_audit, score_submission
from ..services.survey_service import (
    create_response,
    get_survey,
    list_responses,
    load_questions,
    load_score_config,
    response_to_record,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/surveys",
    tags=["Responses"],
)


@router.post(
    "/{survey_id}/responses",
    status_code=status.HTTP_201_CREATED,
    summary="Submit a Survey Response",
    response_description="The stored response, plus scoring and band for scored surveys",
)
def submit_response(
    survey_id: UUID,
    payload: ResponseSubmit,
    db: Session = Depends(get_db),
) -> JSONResponse:
    survey = get_survey(db, survey_id)
    if survey is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Survey not found")

    if survey.status != ACTIVE_STATUS:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Survey is {survey.status}. No new responses are being accepted.",
        )

    score_config = load_score_config(survey)
    submission = score_submission(
        load_questions(survey),
        payload.answers,
        score_config,
        survey.scoring_engine_id,
    )

    response = create_response(db, survey, payload.answers, submission)
    logger.info("[RESPONSES] Response %s created for survey %s", response.id, survey.id)

    body = response_to_record(response).model_dump(mode="json", by_alias=True)
    if submission is not None:
        record_scoring_audit(
            submission,
            survey_id=str(survey.id),
            response_id=str(response.id),
            score_config=score_config,
        )
        body.update(submission.to_payload())

    return JSONResponse(status_code=status.HTTP_201_CREATED, content=body)


@router.get(
    "/{survey_id}/responses",
    response_model=ResponseList,
    summary="List Survey Responses",
)
def read_responses(survey_id: UUID, db: Session = Depends(get_db)) -> ResponseList:
    survey = get_survey(db, survey_id)
    if survey is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Survey not found")

    records = [response_to_record(r) for r in list_responses(db, survey)]
    return ResponseList(responses=records, count=len(records))
