"""Logic tests — condition language, first-match-wins evaluation, fail-closed errors, rule lint."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from survey_engine.schemas.question_schema import LogicRule, parse_questions
from survey_engine.services import audit_log
from survey_engine.services.logic_engine import evaluate, validate_logic_rules
from survey_engine.services.logic_parser import (
    AnswerRef,
    Compare,
    ConditionSyntaxError,
    Const,
    evaluate_condition,
    parse_condition,
    referenced_question_ids,
)


def _question(rules, qid="q1", qtype="multiple_choice"):
    return parse_questions([{"id": qid, "type": qtype, "logicRules": rules}])[0]


def _matches(condition, answers):
    return evaluate_condition(parse_condition(condition), answers)


@pytest.fixture
def captured_events(monkeypatch):
    monkeypatch.setattr(audit_log, "AUDIT_LOG_ENABLED", True)
    events = []
    audit_log.register_audit_sink(events.append)
    yield events
    audit_log.reset_audit_sinks()


# ===================================================================== #
#  Condition language                                                    #
# ===================================================================== #

class TestConditionParser:
    def test_answer_equality_ast(self):
        node = parse_condition('answer("q1") == "Web"')
        assert node == Compare("==", AnswerRef("q1"), Const("Web"))

    def test_single_quotes(self):
        assert _matches("answer('q1') == 'Web'", {"q1": "Web"})

    def test_bare_identifier_is_string(self):
        assert _matches('answer("q1") == Web', {"q1": "Web"})

    def test_parse_is_cached(self):
        text = 'answer("cache") == "x"'
        assert parse_condition(text) is parse_condition(text)

    @pytest.mark.parametrize("text", [
        "",
        "   ",
        'answer("q1") ==',
        'answer(q1) == "x"',
        '(answer("q1") == "x"',
        'answer("q1") == "x" extra',
        'answer("q1") = "x"',
        '__import__("os").system("ls")',
        'answer("q1") == "x" ; drop',
    ])
    def test_malformed_conditions_raise(self, text):
        with pytest.raises(ConditionSyntaxError):
            parse_condition(text)

    def test_length_limit(self):
        with pytest.raises(ConditionSyntaxError):
            parse_condition('answer("q1") == "' + "x" * 50 + '"', 20)

    def test_depth_limit(self):
        text = "(" * 40 + "true" + ")" * 40
        with pytest.raises(ConditionSyntaxError):
            parse_condition(text)

    def test_syntax_error_is_value_error(self):
        assert issubclass(ConditionSyntaxError, ValueError)

    def test_referenced_ids(self):
        node = parse_condition('answer("a") == "1" && (contains("b", "x") || answer("c") > 2)')
        assert referenced_question_ids(node) == {"a", "b", "c"}


class TestConditionSemantics:
    def test_numeric_comparison_of_string_answer(self):
        assert _matches('answer("age") >= 18', {"age": "21"})
        assert not _matches('answer("age") >= 18', {"age": "17"})

    def test_numeric_equality_across_forms(self):
        assert _matches('answer("n") == 5', {"n": 5})
        assert _matches('answer("n") == "5.0"', {"n": "5"})

    def test_whitespace_stripped(self):
        assert _matches('answer("q1") == "Web"', {"q1": "  Web "})

    def test_and_or_precedence(self):
        cond = 'answer("a") == "1" || answer("b") == "1" && answer("c") == "1"'
        assert _matches(cond, {"a": "1"})
        assert not _matches(cond, {"b": "1"})
        assert _matches(cond, {"b": "1", "c": "1"})

    def test_parentheses(self):
        cond = '(answer("a") == "1" || answer("b") == "1") && answer("c") == "1"'
        assert not _matches(cond, {"a": "1"})
        assert _matches(cond, {"a": "1", "c": "1"})

    def test_missing_answer_never_matches(self):
        assert not _matches('answer("q9") == "x"', {})
        assert not _matches('answer("q9") != "x"', {})
        assert not _matches('answer("q9") < 3', {"q9": ""})
        assert not _matches('answer("q9") == "x"', {"q9": []})

    def test_ordering_number_against_text(self):
        assert not _matches('answer("q1") > 3', {"q1": "abc"})
        assert _matches('answer("q1") != 3', {"q1": "abc"})

    def test_list_answer_joined(self):
        assert _matches('answer("c") == "A,B"', {"c": ["A", "B"]})

    def test_contains(self):
        assert _matches('contains("c", "B")', {"c": ["A", "B"]})
        assert _matches('contains("c", "B")', {"c": "A, B"})
        assert not _matches('contains("c", "Z")', {"c": ["A", "B"]})
        assert not _matches('contains("c", "B")', {})

    def test_boolean_literals(self):
        assert _matches("true", {})
        assert not _matches("false", {})
        assert _matches('answer("agree") == true', {"agree": True})

    def test_bare_answer_is_presence(self):
        assert _matches('answer("q1")', {"q1": "x"})
        assert not _matches('answer("q1")', {"q1": " "})


# ===================================================================== #
#  Rule evaluation                                                       #
# ===================================================================== #

SKIP_WEB = {
    "id": "r1",
    "condition": 'answer("q1") == "Web"',
    "action": "skip",
    "targetQuestionId": "q3",
}


class TestEvaluate:
    def test_skip_scenario(self):
        question = _question([SKIP_WEB])
        decision = evaluate(question, None, {"q1": "Web"})
        assert decision.action == "skip"
        assert decision.target_question_id == "q3"
        assert decision.rule_id == "r1"

    def test_no_match_returns_none(self):
        question = _question([SKIP_WEB])
        assert evaluate(question, None, {"q1": "Friend"}) is None

    def test_first_match_wins(self):
        question = _question([
            SKIP_WEB,
            {"id": "r2", "condition": 'answer("q1") != "Friend"', "action": "end"},
        ])
        decision = evaluate(question, None, {"q1": "Web"})
        assert decision.rule_id == "r1"

    def test_explicit_rules_override_question_rules(self):
        question = _question([SKIP_WEB])
        rules = [LogicRule(id="x", condition="true", action="end")]
        decision = evaluate(question, rules, {})
        assert decision.action == "end"
        assert decision.target_question_id is None

    def test_unanswered_reference_does_not_raise(self):
        question = _question([{**SKIP_WEB, "condition": 'answer("nope") == "Web"'}])
        assert evaluate(question, None, None) is None

    def test_malformed_condition_fails_closed(self, captured_events, caplog):
        question = _question([
            {"id": "bad", "condition": 'answer("q1" == "Web"', "action": "end"},
            SKIP_WEB,
        ])
        decision = evaluate(question, None, {"q1": "Web"}, survey_id="s1")
        assert decision.rule_id == "r1"
        assert "bad" in caplog.text
        bad_event = captured_events[0]
        assert bad_event.rule_id == "bad"
        assert bad_event.matched is False
        assert bad_event.condition_error is True

    def test_every_evaluated_rule_is_audited(self, captured_events):
        question = _question([
            {"id": "r0", "condition": 'answer("q1") == "Other"', "action": "end"},
            SKIP_WEB,
            {"id": "r2", "condition": "true", "action": "end"},
        ])
        evaluate(question, None, {"q1": "Web"}, survey_id="s1", response_id="resp-1")
        assert [e.rule_id for e in captured_events] == ["r0", "r1"]
        assert [e.evaluation_result for e in captured_events] == ["not_matched", "matched"]
        assert all(e.survey_id == "s1" and e.response_id == "resp-1" for e in captured_events)

    def test_audit_never_carries_answers(self, captured_events):
        question = _question([SKIP_WEB])
        evaluate(question, None, {"q1": "Web"})
        payload = captured_events[0].model_dump_json(by_alias=True)
        assert "Web" not in payload


# ===================================================================== #
#  Rule lint                                                             #
# ===================================================================== #

class TestValidateLogicRules:
    def _codes(self, raw_questions):
        return [(i.code, i.severity) for i in validate_logic_rules(parse_questions(raw_questions))]

    def test_clean_survey(self):
        questions = [
            {"id": "q1", "type": "multiple_choice", "logicRules": [SKIP_WEB]},
            {"id": "q2", "type": "text"},
            {"id": "q3", "type": "text"},
        ]
        assert self._codes(questions) == []

    def test_syntax_error(self):
        questions = [{"id": "q1", "type": "text", "logicRules": [
            {"id": "r1", "condition": "answer(", "action": "end"},
        ]}]
        assert self._codes(questions) == [("SYNTAX_ERROR", "error")]

    def test_missing_target(self):
        questions = [{"id": "q1", "type": "text", "logicRules": [
            {"id": "r1", "condition": "true", "action": "skip", "targetQuestionId": "q7"},
        ]}]
        assert self._codes(questions) == [("MISSING_TARGET", "error")]

    def test_skip_without_target(self):
        questions = [{"id": "q1", "type": "text", "logicRules": [
            {"id": "r1", "condition": "true", "action": "show"},
        ]}]
        assert self._codes(questions) == [("MISSING_TARGET_ID", "error")]

    def test_end_without_target_is_fine(self):
        questions = [{"id": "q1", "type": "text", "logicRules": [
            {"id": "r1", "condition": "true", "action": "end"},
        ]}]
        assert self._codes(questions) == []

    def test_unknown_reference_and_self_target(self):
        questions = [{"id": "q1", "type": "text", "logicRules": [
            {"id": "r1", "condition": 'answer("ghost") == "x"', "action": "skip",
             "targetQuestionId": "q1"},
        ]}]
        assert self._codes(questions) == [
            ("UNKNOWN_REFERENCE", "warning"),
            ("SELF_TARGET", "warning"),
        ]
