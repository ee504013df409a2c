"""Survey and response request/response schemas."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from ..constants import SCORING_ENGINE_IDS
from .base import CamelModel
from .logic_schema import LogicIssue
from .question_schema import Question
from .score_config_schema import SurveyScoreConfig


class SurveyCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    status: Literal["Active", "Paused", "Closed", "Draft"] = "Active"
    tags: List[str] = Field(default_factory=list)
    questions: List[Question] = Field(..., min_length=1)
    score_config: Optional[SurveyScoreConfig] = None
    scoring_engine_id: Optional[str] = None

    @field_validator("scoring_engine_id")
    @classmethod
    def engine_is_registered(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in SCORING_ENGINE_IDS:
            raise ValueError(
                f"Unknown scoring engine '{v}'. Valid engines: {list(SCORING_ENGINE_IDS)}"
            )
        return v

    @field_validator("questions")
    @classmethod
    def question_ids_unique(cls, v: list) -> list:
        seen: set[str] = set()
        for q in v:
            if q.id in seen:
                raise ValueError(f"Duplicate question id '{q.id}'")
            seen.add(q.id)
        return v


class SurveyOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    status: str
    tags: List[str] = Field(default_factory=list)
    questions: List[Question]
    score_config: Optional[SurveyScoreConfig] = None
    scoring_engine_id: Optional[str] = None
    results_mode: Literal["index", "self_assessment", "none"]
    results_labels: Dict[str, str] = Field(default_factory=dict)
    logic_issues: List[LogicIssue] = Field(default_factory=list)
    created_at: datetime


class ResponseSubmit(CamelModel):
    answers: Dict[str, Any]

    @field_validator("answers")
    @classmethod
    def answers_are_finite(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        for question_id, answer in v.items():
            values = answer if isinstance(answer, list) else [answer]
            if any(isinstance(x, float) and not math.isfinite(x) for x in values):
                raise ValueError(f"Answer to {question_id} must be a finite number")
        return v


class ResponseRecord(CamelModel):
    id: str
    survey_id: str
    answers: Dict[str, Any]
    scoring_engine_id: str
    total_score: Optional[float] = None
    percentage: Optional[float] = None
    band_id: Optional[str] = None
    created_at: datetime


class ResponseList(CamelModel):
    responses: List[ResponseRecord] = Field(default_factory=list)
    count: int = 0
