"""Deterministic Scoring Engine.

Converts a set of normalized questions plus a response map into weighted
per-category and overall scores.

Rules
-----
- NO I/O, NO DB writes
- NO mutation of inputs
- Unanswered / non-scorable questions contribute zero, silently
- Identical inputs always produce an identical ``ScoreResult``
- Pure deterministic math
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from ..config import CHECKBOX_MAX_POLICY
from ..constants import DEFAULT_SCORING_ENGINE_ID, NPS_SCALE
from ..schemas.question_schema import (
    CheckboxQuestion,
    ConstantSumQuestion,
    FileUploadQuestion,
    LikertQuestion,
    MatrixQuestion,
    NpsQuestion,
    OpenTextQuestion,
    QuestionBase,
    RankingQuestion,
    RatingQuestion,
    SingleChoiceQuestion,
    SliderQuestion,
)
from ..schemas.score_config_schema import SurveyScoreConfig
from ..schemas.score_schema import CategoryScore, QuestionScore, ScoreResult

logger = logging.getLogger(__name__)

_UNSCORED_TYPES = (
    MatrixQuestion,
    ConstantSumQuestion,
    RankingQuestion,
    FileUploadQuestion,
    OpenTextQuestion,
)


def _clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    """Clamp *value* to [lo, hi]."""
    return max(lo, min(hi, value))


def _to_number(answer: Any) -> Optional[float]:
    """Read a numeric answer.  Anything non-numeric counts as unanswered."""
    if answer is None or isinstance(answer, bool):
        return None
    if isinstance(answer, (int, float)):
        value = float(answer)
    elif isinstance(answer, str):
        try:
            value = float(answer.strip())
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None


def _numeric_scale(question: QuestionBase) -> float:
    if isinstance(question, RatingQuestion):
        return float(question.rating_scale)
    if isinstance(question, NpsQuestion):
        return float(NPS_SCALE)
    if isinstance(question, LikertQuestion):
        return float(question.likert_points)
    if isinstance(question, SliderQuestion):
        if question.min is None or question.max is None:
            return 0.0
        return max(question.max, 0.0)
    raise TypeError(f"{type(question).__name__} has no numeric scale")


def _checkbox_max(question: CheckboxQuestion, policy: str) -> float:
    positives = sorted((s for s in question.option_scores.values() if s > 0), reverse=True)
    if policy == "capped" and question.max_selections is not None:
        positives = positives[: question.max_selections]
    return float(sum(positives))


def _weighted(question: QuestionBase, raw: float, max_raw: float, weight: float) -> QuestionScore:
    score, max_score = raw * weight, max_raw * weight
    if not (math.isfinite(score) and math.isfinite(max_score)):
        logger.warning("[SCORING] Question %s overflows when weighted, scoring as zero", question.id)
        return QuestionScore(category=question.scoring_category)
    return QuestionScore(score=score, max_score=max_score, category=question.scoring_category)


def score_question(
    question: QuestionBase,
    answer: Any,
    checkbox_max_policy: str = CHECKBOX_MAX_POLICY,
) -> QuestionScore:
    """Score a single question.

    Parameters
    ----------
    question : QuestionBase
        A normalized question variant from ``schemas.question_schema``.
    answer : Any
        The respondent's answer, or ``None`` when unanswered.
    checkbox_max_policy : str
        ``"positive_sum"`` or ``"capped"``; see ``constants``.

    Returns
    -------
    QuestionScore
        Weighted raw score and weighted max possible score.

    Raises
    ------
    TypeError
        If *question* is not one of the known question variants.
    """
    if not isinstance(question, QuestionBase):
        raise TypeError(
            f"Expected a normalized question, got {type(question).__name__}"
        )

    category = question.scoring_category
    if not question.scorable:
        return QuestionScore(category=category)

    weight = question.weight

    if isinstance(question, SingleChoiceQuestion):
        selected = answer if isinstance(answer, str) else ("" if answer is None else str(answer))
        raw = question.option_scores.get(selected, 0.0)
        best = max(question.option_scores.values(), default=0.0)
        return _weighted(question, raw, max(best, 0.0), weight)

    if isinstance(question, CheckboxQuestion):
        selections = answer if isinstance(answer, (list, tuple)) else []
        # A repeated selection counts once
        unique = dict.fromkeys(str(s) for s in selections)
        raw = sum(question.option_scores.get(opt, 0.0) for opt in unique)
        return _weighted(question, raw, _checkbox_max(question, checkbox_max_policy), weight)

    if isinstance(question, (RatingQuestion, NpsQuestion, LikertQuestion, SliderQuestion)):
        scale = _numeric_scale(question)
        value = _to_number(answer)
        raw = 0.0 if value is None else _clamp(value, 0.0, scale)
        return _weighted(question, raw, scale, weight)

    if isinstance(question, _UNSCORED_TYPES):
        return QuestionScore(category=category)

    raise TypeError(f"Unsupported question variant: {type(question).__name__}")


def _category_label(category_id: str, score_config: Optional[SurveyScoreConfig]) -> str:
    name = score_config.category_name(category_id) if score_config else None
    if name:
        return name
    return category_id[:1].upper() + category_id[1:]


def engagement_scoring_v1(
    questions: Sequence[QuestionBase],
    responses: Optional[Mapping[str, Any]],
    score_config: Optional[SurveyScoreConfig] = None,
    checkbox_max_policy: str = CHECKBOX_MAX_POLICY,
) -> ScoreResult:
    """Weighted-sum scoring across every scorable question.

    Category membership only decides which category entry a question feeds;
    every scorable question always feeds the overall total.
    """
    answers = responses or {}
    total_score = 0.0
    max_score = 0.0
    category_scores: Dict[str, CategoryScore] = {}

    for question in questions:
        result = score_question(question, answers.get(question.id), checkbox_max_policy)
        total_score += result.score
        max_score += result.max_score

        if result.category:
            entry = category_scores.get(result.category)
            if entry is None:
                entry = CategoryScore(label=_category_label(result.category, score_config))
                category_scores[result.category] = entry
            entry.score += result.score
            entry.max_score += result.max_score

    if not (math.isfinite(total_score) and math.isfinite(max_score)):
        logger.warning(
            "[SCORING] Non-finite totals (total=%r, max=%r), scoring as zero",
            total_score,
            max_score,
        )
        total_score = max_score = 0.0
    for category_id, entry in category_scores.items():
        if not (math.isfinite(entry.score) and math.isfinite(entry.max_score)):
            logger.warning("[SCORING] Non-finite score for category %s, scoring as zero", category_id)
            entry.score = entry.max_score = 0.0

    percentage = 0.0
    if max_score > 0:
        ratio = total_score / max_score * 100
        if math.isfinite(ratio):
            percentage = _clamp(ratio)

    return ScoreResult(
        total_score=total_score,
        max_score=max_score,
        percentage=percentage,
        category_scores=category_scores,
    )


ScoringEngine = Callable[..., ScoreResult]

# Scoring engine registry. Do NOT change existing ids or behaviour without
# registering a new versioned engine.
SCORING_ENGINES: Dict[str, ScoringEngine] = {
    "engagement_v1": engagement_scoring_v1,
}


def score_survey(
    questions: Sequence[QuestionBase],
    responses: Optional[Mapping[str, Any]],
    score_config: Optional[SurveyScoreConfig] = None,
    engine_id: str = DEFAULT_SCORING_ENGINE_ID,
    checkbox_max_policy: str = CHECKBOX_MAX_POLICY,
) -> ScoreResult:
    """Score a full survey with the registered engine *engine_id*.

    Unknown engine ids fall back to the default engine.
    """
    engine = SCORING_ENGINES.get(engine_id)
    if engine is None:
        logger.warning(
            "[SCORING] Unknown scoring engine %r, falling back to %s",
            engine_id,
            DEFAULT_SCORING_ENGINE_ID,
        )
        engine = SCORING_ENGINES[DEFAULT_SCORING_ENGINE_ID]
    return engine(questions, responses, score_config, checkbox_max_policy)
