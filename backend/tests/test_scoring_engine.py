"""Scoring engine tests — per-type scoring, weights, categories, percentage bounds, registry."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import math

import pytest
from pydantic import ValidationError

from survey_engine.schemas.question_schema import parse_questions
from survey_engine.schemas.score_config_schema import SurveyScoreConfig
from survey_engine.services.scoring_engine import (
    SCORING_ENGINES,
    score_question,
    score_survey,
)


def _q(**kwargs):
    """Build one normalized question from camelCase kwargs."""
    data = {"question": "Q", "scorable": True}
    data.update(kwargs)
    return parse_questions([data])[0]


CONFIG = SurveyScoreConfig.model_validate({
    "enabled": True,
    "categories": [{"id": "eng", "name": "Engagement"}],
})


class TestSingleChoice:
    def test_selected_option_score(self):
        q1 = _q(id="q1", type="multiple_choice", options=["A", "B"],
                optionScores={"A": 1, "B": 5}, scoreWeight=1, scoringCategory="eng")
        result = score_survey([q1], {"q1": "B"}, CONFIG)
        assert result.total_score == 5
        assert result.max_score == 5
        assert result.category_scores["eng"].score == 5
        assert result.category_scores["eng"].label == "Engagement"

    def test_unknown_option_scores_zero(self):
        q = _q(id="q1", type="dropdown", optionScores={"A": 1, "B": 5})
        assert score_question(q, "Z").score == 0
        assert score_question(q, "Z").max_score == 5

    def test_max_never_negative(self):
        q = _q(id="q1", type="yes_no", optionScores={"Yes": -2, "No": -5})
        assert score_question(q, "Yes").max_score == 0

    def test_weight_multiplies_raw_and_max(self):
        q = _q(id="q1", type="multiple_choice", optionScores={"A": 2, "B": 4}, scoreWeight=2.5)
        scored = score_question(q, "A")
        assert scored.score == 5
        assert scored.max_score == 10


class TestCheckbox:
    def _question(self, **extra):
        return _q(id="c1", type="checkbox", options=["A", "B", "C", "D"],
                  optionScores={"A": 3, "B": 2, "C": 1, "D": -1}, **extra)

    def test_sums_selected(self):
        assert score_question(self._question(), ["A", "C"]).score == 4

    def test_duplicate_selection_counts_once(self):
        assert score_question(self._question(), ["A", "A"]).score == 3

    def test_positive_sum_max(self):
        q = self._question(maxSelections=2)
        assert score_question(q, [], "positive_sum").max_score == 6

    def test_capped_max_uses_top_selections(self):
        q = self._question(maxSelections=2)
        assert score_question(q, [], "capped").max_score == 5

    def test_capped_without_limit_matches_positive_sum(self):
        assert score_question(self._question(), [], "capped").max_score == 6

    def test_non_list_answer_is_unanswered(self):
        assert score_question(self._question(), "A").score == 0


class TestNumericTypes:
    def test_rating_scenario(self):
        q = _q(id="r1", type="rating", ratingScale=5, scoreWeight=1, scoringCategory="engagement")
        result = score_survey([q], {"r1": 4})
        assert result.total_score == 4
        assert result.max_score == 5
        assert result.category_scores["engagement"].label == "Engagement"

    def test_numeric_string_answer(self):
        q = _q(id="r1", type="rating", ratingScale=5)
        assert score_question(q, "3").score == 3

    def test_values_clamped_to_scale(self):
        q = _q(id="n1", type="nps")
        assert score_question(q, 14).score == 10
        assert score_question(q, -3).score == 0

    def test_likert_points(self):
        q = _q(id="l1", type="likert", likertPoints=7)
        assert score_question(q, 6).max_score == 7

    def test_slider_uses_max_bound(self):
        q = _q(id="s1", type="slider", min=0, max=50)
        scored = score_question(q, 20)
        assert scored.score == 20
        assert scored.max_score == 50

    def test_slider_without_bounds_has_no_max(self):
        q = _q(id="s1", type="slider")
        assert score_question(q, 20).max_score == 0

    @pytest.mark.parametrize("answer", [None, "", "abc", True, float("nan"), {"x": 1}])
    def test_non_numeric_is_unanswered(self, answer):
        q = _q(id="r1", type="rating", ratingScale=5)
        scored = score_question(q, answer)
        assert scored.score == 0
        assert scored.max_score == 5


class TestNonScorable:
    def test_non_scorable_question_contributes_nothing(self):
        q = _q(id="r1", type="rating", scorable=False)
        scored = score_question(q, 5)
        assert scored.score == 0
        assert scored.max_score == 0

    @pytest.mark.parametrize("qtype", ["matrix", "ranking", "constant_sum", "file_upload", "text"])
    def test_unscored_types(self, qtype):
        q = _q(id="x", type=qtype)
        assert score_question(q, "anything").max_score == 0

    def test_non_question_raises_type_error(self):
        with pytest.raises(TypeError):
            score_question({"id": "q1", "type": "rating"}, 3)


class TestScoreSurvey:
    def _questions(self):
        return parse_questions([
            {"id": "q1", "type": "rating", "scorable": True, "scoringCategory": "eng"},
            {"id": "q2", "type": "rating", "scorable": True, "scoringCategory": "wellbeing"},
            {"id": "q3", "type": "rating", "scorable": True},
        ])

    def test_uncategorized_counts_toward_total(self):
        result = score_survey(self._questions(), {"q1": 5, "q2": 1, "q3": 4})
        assert result.total_score == 10
        assert result.max_score == 15
        assert set(result.category_scores) == {"eng", "wellbeing"}

    def test_deterministic(self):
        answers = {"q1": 3, "q2": 2}
        first = score_survey(self._questions(), answers, CONFIG)
        second = score_survey(self._questions(), answers, CONFIG)
        assert first.model_dump() == second.model_dump()

    def test_inputs_not_mutated(self):
        answers = {"q1": 3}
        score_survey(self._questions(), answers)
        assert answers == {"q1": 3}

    def test_zero_max_gives_zero_percentage(self):
        q = _q(id="t", type="text")
        result = score_survey([q], {"t": "hello"})
        assert result.max_score == 0
        assert result.percentage == 0

    def test_percentage_bounded(self):
        q = _q(id="q1", type="multiple_choice", optionScores={"A": 10, "B": -50})
        result = score_survey([q], {"q1": "B"})
        assert result.percentage == 0
        assert math.isfinite(result.percentage)

    def test_weighted_overflow_scores_zero(self):
        questions = parse_questions([
            {"id": "a", "type": "multiple_choice", "scorable": True,
             "optionScores": {"X": 1e308}, "scoreWeight": 10},
            {"id": "b", "type": "multiple_choice", "scorable": True,
             "optionScores": {"Y": -1e308}, "scoreWeight": 10},
        ])
        result = score_survey(questions, {"a": "X", "b": "Y"})
        assert result.total_score == 0
        assert result.max_score == 0
        assert result.percentage == 0

    def test_summed_overflow_stays_finite(self):
        questions = parse_questions([
            {"id": qid, "type": "multiple_choice", "scorable": True,
             "optionScores": {"X": 1e308}, "scoringCategory": "eng"}
            for qid in ("a", "b")
        ])
        result = score_survey(questions, {"a": "X", "b": "X"})
        assert math.isfinite(result.total_score)
        assert math.isfinite(result.max_score)
        assert result.percentage == 0
        assert result.category_scores["eng"].score == 0

    @pytest.mark.parametrize("field, value", [
        ("scoreWeight", float("inf")),
        ("optionScores", {"A": float("nan")}),
    ])
    def test_non_finite_question_numbers_rejected(self, field, value):
        with pytest.raises(ValidationError):
            parse_questions([{"id": "q1", "type": "multiple_choice", field: value}])

    def test_missing_responses(self):
        result = score_survey(self._questions(), None)
        assert result.total_score == 0
        assert result.percentage == 0

    def test_unknown_engine_falls_back(self):
        result = score_survey(self._questions(), {"q1": 5}, engine_id="legacy_v0")
        assert result.total_score == 5

    def test_registry_contains_default(self):
        assert "engagement_v1" in SCORING_ENGINES
