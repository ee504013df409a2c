"""Audit logging for scoring and logic events.

Lightweight structured records for analytics.  Only ids, numbers and
booleans are recorded; answers never are.

Delivery is fire-and-forget: a failing sink is logged and skipped, never
raised into the scoring or logic pass that produced the event.  Controlled
by the ``AUDIT_LOG_ENABLED`` environment variable.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..config import AUDIT_LOG_ENABLED
from ..schemas.audit_schema import BaseAuditEvent, LogicAuditEvent, ScoringAuditEvent

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("survey_engine.audit")

AuditSink = Callable[[BaseAuditEvent], None]


def _structured_log_sink(event: BaseAuditEvent) -> None:
    # Prefix for easy filtering in log aggregators
    audit_logger.info("[AUDIT] %s", event.model_dump_json(by_alias=True))


_sinks: List[AuditSink] = [_structured_log_sink]


def register_audit_sink(sink: AuditSink) -> None:
    """Add a transport that receives every audit event."""
    _sinks.append(sink)


def reset_audit_sinks() -> None:
    """Restore the default structured-log transport only."""
    _sinks[:] = [_structured_log_sink]


def is_audit_log_enabled() -> bool:
    return AUDIT_LOG_ENABLED


def write_audit_log(event: BaseAuditEvent) -> None:
    for sink in list(_sinks):
        try:
            sink(event)
        except Exception as exc:
            logger.warning(
                "[AUDIT] Delivery of %s event failed in %s: %s",
                getattr(event, "type", "unknown"),
                getattr(sink, "__name__", repr(sink)),
                exc,
            )


def log_logic_evaluation(
    *,
    survey_id: str,
    rule_id: str,
    question_id: str,
    action: str,
    target_question_id: Optional[str],
    matched: bool,
    response_id: Optional[str] = None,
    condition_error: bool = False,
) -> None:
    """Record the outcome of evaluating one logic rule."""
    if not is_audit_log_enabled():
        return
    write_audit_log(
        LogicAuditEvent(
            survey_id=survey_id,
            response_id=response_id,
            rule_id=rule_id,
            question_id=question_id,
            action=action,
            target_question_id=target_question_id,
            matched=matched,
            evaluation_result="matched" if matched else "not_matched",
            condition_error=condition_error,
        )
    )


def log_scoring_complete(
    *,
    survey_id: str,
    scoring_engine_id: str,
    total_score: float,
    max_score: float,
    percentage: float,
    category_count: int,
    response_id: Optional[str] = None,
    score_config_version: Optional[str] = None,
    band_id: Optional[str] = None,
    band_label: Optional[str] = None,
) -> None:
    """Record a completed scoring pass for a response."""
    if not is_audit_log_enabled():
        return
    write_audit_log(
        ScoringAuditEvent(
            survey_id=survey_id,
            response_id=response_id,
            scoring_engine_id=scoring_engine_id,
            score_config_version=score_config_version,
            total_score=total_score,
            max_score=max_score,
            percentage=percentage,
            band_id=band_id,
            band_label=band_label,
            category_count=category_count,
        )
    )
