"""Question and logic-rule schemas.

``Question`` is a closed, tagged union keyed by ``type``.  Every variant
shares the scoring and logic fields of ``QuestionBase`` and carries only the
fields meaningful to its own type.  The upstream normalizer is trusted to
deliver canonical shapes; fields the builder UI adds are ignored here.
"""

from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from ..constants import DEFAULT_LIKERT_POINTS, DEFAULT_RATING_SCALE
from .base import CamelModel


class LogicRule(CamelModel):
    """Author-defined branching rule attached to a question."""

    id: str = Field(..., min_length=1)
    condition: str = Field(
        ...,
        description='Boolean expression over prior answers, e.g. answer("q1") == "Web"',
    )
    action: Literal["skip", "show", "end"]
    target_question_id: Optional[str] = None


class QuestionBase(CamelModel):
    id: str = Field(..., min_length=1)
    question: str = ""
    description: Optional[str] = None
    required: bool = False

    # Scoring metadata
    scorable: bool = False
    score_weight: Optional[float] = Field(default=1.0, ge=0.0)
    scoring_category: Optional[str] = None

    # Branching
    logic_rules: List[LogicRule] = Field(default_factory=list)

    @property
    def weight(self) -> float:
        """Effective score weight (unset means 1)."""
        return 1.0 if self.score_weight is None else self.score_weight


# ── Choice-like ─────────────────────────────────────────────────────────

class SingleChoiceQuestion(QuestionBase):
    type: Literal["multiple_choice", "dropdown", "yes_no"]
    options: List[str] = Field(default_factory=list)
    option_scores: Dict[str, float] = Field(default_factory=dict)


class CheckboxQuestion(QuestionBase):
    type: Literal["checkbox"]
    options: List[str] = Field(default_factory=list)
    option_scores: Dict[str, float] = Field(default_factory=dict)
    max_selections: Optional[int] = Field(default=None, ge=1)


# ── Numeric scales ──────────────────────────────────────────────────────

class RatingQuestion(QuestionBase):
    type: Literal["rating", "opinion_scale"]
    rating_scale: int = Field(default=DEFAULT_RATING_SCALE, ge=1)


class NpsQuestion(QuestionBase):
    type: Literal["nps"]


class LikertQuestion(QuestionBase):
    type: Literal["likert"]
    likert_points: int = Field(default=DEFAULT_LIKERT_POINTS, ge=2)


class SliderQuestion(QuestionBase):
    type: Literal["slider"]
    min: Optional[float] = None
    max: Optional[float] = None


# ── Not scored ──────────────────────────────────────────────────────────

class MatrixQuestion(QuestionBase):
    type: Literal["matrix"]
    row_labels: List[str] = Field(default_factory=list)
    col_labels: List[str] = Field(default_factory=list)


class ConstantSumQuestion(QuestionBase):
    type: Literal["constant_sum"]
    options: List[str] = Field(default_factory=list)
    total_points: int = Field(default=100, ge=1)


class RankingQuestion(QuestionBase):
    type: Literal["ranking"]
    options: List[str] = Field(default_factory=list)


class FileUploadQuestion(QuestionBase):
    type: Literal["file_upload"]
    max_files: Optional[int] = Field(default=None, ge=1)


class OpenTextQuestion(QuestionBase):
    type: Literal["text", "textarea", "email", "number", "date", "section"]


Question = Annotated[
    Union[
        SingleChoiceQuestion,
        CheckboxQuestion,
        RatingQuestion,
        NpsQuestion,
        LikertQuestion,
        SliderQuestion,
        MatrixQuestion,
        ConstantSumQuestion,
        RankingQuestion,
        FileUploadQuestion,
        OpenTextQuestion,
    ],
    Field(discriminator="type"),
]

QuestionList = TypeAdapter(List[Question])


def parse_questions(raw: list) -> List[QuestionBase]:
    """Validate a list of question dicts into their tagged variants."""
    return QuestionList.validate_python(raw)
