from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import Field

from .base import CamelModel


class LogicDecision(CamelModel):
    """Branching action selected by the first matching rule."""

    action: Literal["skip", "show", "end"]
    target_question_id: Optional[str] = None
    rule_id: str


class LogicIssue(CamelModel):
    """Author-facing problem found in a survey's logic rules."""

    code: Literal[
        "SYNTAX_ERROR",
        "MISSING_TARGET",
        "MISSING_TARGET_ID",
        "UNKNOWN_REFERENCE",
        "SELF_TARGET",
    ]
    severity: Literal["error", "warning"]
    question_id: str
    rule_id: str
    message: str


class LogicEvaluationRequest(CamelModel):
    question_id: str
    answers: Dict[str, Any] = Field(default_factory=dict)
    response_id: Optional[str] = None


class LogicEvaluationResponse(CamelModel):
    question_id: str
    decision: Optional[LogicDecision] = None
