from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.logic_schema import LogicEvaluationRequest, LogicEvaluationResponse
from ..services.logic_engine import evaluate
from ..services.survey_service import get_survey, load_questions

router = APIRouter(
    prefix="/surveys",
    tags=["Logic"],
)


@router.post(
    "/{survey_id}/logic/evaluate",
    response_model=LogicEvaluationResponse,
    summary="Evaluate a Question's Logic Rules",
    response_description="The branching decision, or null to continue",
)
def evaluate_question_logic(
    survey_id: UUID,
    payload: LogicEvaluationRequest,
    db: Session = Depends(get_db),
) -> LogicEvaluationResponse:
    """Apply first-match-wins logic for one question against partial answers."""
    survey = get_survey(db, survey_id)
    if survey is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Survey not found")

    question = next((q for q in load_questions(survey) if q.id == payload.question_id), None)
    if question is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")

    decision = evaluate(
        question,
        None,
        payload.answers,
        survey_id=str(survey.id),
        response_id=payload.response_id,
    )
    return LogicEvaluationResponse(question_id=question.id, decision=decision)
