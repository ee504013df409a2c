"""Audit event schemas.

Events carry ids, numbers and booleans only.  Answer content is considered
sensitive and never appears in an audit record.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import Field

from .base import CamelModel


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class BaseAuditEvent(CamelModel):
    timestamp: str = Field(default_factory=_utc_timestamp)
    survey_id: str
    response_id: Optional[str] = None


class LogicAuditEvent(BaseAuditEvent):
    type: Literal["logic_evaluation"] = "logic_evaluation"
    rule_id: str
    question_id: str
    action: Literal["skip", "show", "end"]
    target_question_id: Optional[str] = None
    matched: bool
    evaluation_result: Literal["matched", "not_matched"]
    condition_error: bool = False


class ScoringAuditEvent(BaseAuditEvent):
    type: Literal["scoring_complete"] = "scoring_complete"
    scoring_engine_id: str
    score_config_version: Optional[str] = None
    total_score: float
    max_score: float
    percentage: float
    band_id: Optional[str] = None
    band_label: Optional[str] = None
    category_count: int
