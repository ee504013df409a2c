"""Logic Rule Evaluator.

Walks a question's rules in declaration order and returns the branching
decision of the FIRST rule whose condition matches the answers collected so
far.  No match means "continue", represented by ``None``.

A malformed condition fails closed: it never matches, is logged, and is
reported to the audit sink with ``conditionError`` set, but it never raises
into the survey runtime.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence

from ..schemas.logic_schema import LogicDecision, LogicIssue
from ..schemas.question_schema import LogicRule, QuestionBase
from .audit_log import log_logic_evaluation
from .logic_parser import (
    ConditionSyntaxError,
    evaluate_condition,
    parse_condition,
    referenced_question_ids,
)

logger = logging.getLogger(__name__)


def _rule_matches(rule: LogicRule, question_id: str, answers: Mapping[str, Any]) -> tuple[bool, bool]:
    """Return ``(matched, condition_error)`` for a single rule."""
    try:
        node = parse_condition(rule.condition)
    except ConditionSyntaxError as exc:
        logger.warning(
            "[LOGIC] Rule %s on question %s has an invalid condition: %s",
            rule.id,
            question_id,
            exc,
        )
        return False, True
    return evaluate_condition(node, answers), False


def evaluate(
    question: QuestionBase,
    rules: Optional[Sequence[LogicRule]],
    answers_so_far: Optional[Mapping[str, Any]],
    *,
    survey_id: str = "",
    response_id: Optional[str] = None,
) -> Optional[LogicDecision]:
    """Evaluate *rules* (default: the question's own) first-match-wins.

    Every rule evaluated is reported to the audit sink with its match outcome;
    answer content is never reported.
    """
    active_rules = question.logic_rules if rules is None else rules
    answers = answers_so_far or {}

    for rule in active_rules:
        matched, condition_error = _rule_matches(rule, question.id, answers)
        log_logic_evaluation(
            survey_id=survey_id,
            response_id=response_id,
            rule_id=rule.id,
            question_id=question.id,
            action=rule.action,
            target_question_id=rule.target_question_id,
            matched=matched,
            condition_error=condition_error,
        )
        if matched:
            logger.debug("[LOGIC] Question %s matched rule %s -> %s", question.id, rule.id, rule.action)
            return LogicDecision(
                action=rule.action,
                target_question_id=rule.target_question_id,
                rule_id=rule.id,
            )

    return None


def validate_logic_rules(questions: Sequence[QuestionBase]) -> List[LogicIssue]:
    """Lint every logic rule of a survey for its author.

    Errors: unparsable conditions, targets that do not exist, ``skip``/``show``
    without a target.  Warnings: references to unknown questions, rules that
    target their own question.
    """
    question_ids = {q.id for q in questions}
    issues: List[LogicIssue] = []

    for question in questions:
        for rule in question.logic_rules:
            try:
                node = parse_condition(rule.condition)
            except ConditionSyntaxError as exc:
                issues.append(LogicIssue(
                    code="SYNTAX_ERROR",
                    severity="error",
                    question_id=question.id,
                    rule_id=rule.id,
                    message=f"Condition cannot be parsed: {exc}",
                ))
            else:
                for ref in sorted(referenced_question_ids(node) - question_ids):
                    issues.append(LogicIssue(
                        code="UNKNOWN_REFERENCE",
                        severity="warning",
                        question_id=question.id,
                        rule_id=rule.id,
                        message=f"Condition references unknown question {ref}",
                    ))

            target = rule.target_question_id
            if target is None:
                if rule.action in ("skip", "show"):
                    issues.append(LogicIssue(
                        code="MISSING_TARGET_ID",
                        severity="error",
                        question_id=question.id,
                        rule_id=rule.id,
                        message=f"Action '{rule.action}' requires a target question",
                    ))
            elif target not in question_ids:
                issues.append(LogicIssue(
                    code="MISSING_TARGET",
                    severity="error",
                    question_id=question.id,
                    rule_id=rule.id,
                    message=f"Target question {target} does not exist",
                ))
            elif target == question.id:
                issues.append(LogicIssue(
                    code="SELF_TARGET",
                    severity="warning",
                    question_id=question.id,
                    rule_id=rule.id,
                    message="Rule targets its own question",
                ))

    return issues
