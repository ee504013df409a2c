# Schemas package
from .question_schema import LogicRule, Question, QuestionBase, parse_questions
from .score_config_schema import (
    BandValidationResult,
    ScoreBand,
    ScoreCategory,
    SurveyScoreConfig,
)
from .score_schema import CategoryBandResult, ScoreResult
from .logic_schema import LogicDecision, LogicIssue
from .audit_schema import LogicAuditEvent, ScoringAuditEvent
from .survey_schema import SurveyCreate, SurveyOut

__all__ = [
    "LogicRule",
    "Question",
    "QuestionBase",
    "parse_questions",
    "BandValidationResult",
    "ScoreBand",
    "ScoreCategory",
    "SurveyScoreConfig",
    "CategoryBandResult",
    "ScoreResult",
    "LogicDecision",
    "LogicIssue",
    "LogicAuditEvent",
    "ScoringAuditEvent",
    "SurveyCreate",
    "SurveyOut",
]
