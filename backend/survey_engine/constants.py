"""Centralized constants shared by the scoring engine, logic engine and routes.

This module is the SINGLE SOURCE OF TRUTH for question defaults, scoring
engine ids and results-mode taxonomy. Reused by:
  - Scoring Engine
  - Logic Rule Evaluator
  - Survey / Response routes
"""

from __future__ import annotations

# ── Question defaults ───────────────────────────────────────────────────

DEFAULT_RATING_SCALE: int = 5
DEFAULT_LIKERT_POINTS: int = 5
NPS_SCALE: int = 10

# ── Scoring engines ─────────────────────────────────────────────────────
# Ids are persisted with every response. Do NOT change existing ids.

DEFAULT_SCORING_ENGINE_ID: str = "engagement_v1"
SCORING_ENGINE_IDS: tuple[str, ...] = ("engagement_v1",)

# Checkbox max-possible-score policies.
#   positive_sum: sum of every positive option score
#   capped:       sum of the top `maxSelections` positive option scores
CHECKBOX_MAX_POLICIES: tuple[str, ...] = ("positive_sum", "capped")
DEFAULT_CHECKBOX_MAX_POLICY: str = "positive_sum"

# ── Results mode taxonomy ───────────────────────────────────────────────

INDEX_ENGINE_IDS: frozenset[str] = frozenset(
    {
        "engagement_v1",
        "5d_wellbeing_v1",
        "5d_engagement_v1",
        "evalia_5d_v1",
    }
)

INDEX_TAGS: frozenset[str] = frozenset(
    {"engagement", "5d", "organizational-index", "team-index"}
)

CANONICAL_5D_CATEGORIES: tuple[str, ...] = (
    "leadership-effectiveness",
    "team-wellbeing",
    "burnout-risk",
    "psychological-safety",
    "engagement",
)

# Minimum number of categories before canonical 5D ids imply an index survey
MIN_5D_CATEGORY_COUNT: int = 3

# ── Logic conditions ────────────────────────────────────────────────────

DEFAULT_MAX_CONDITION_LENGTH: int = 1000
MAX_CONDITION_DEPTH: int = 32

# ── Survey lifecycle ────────────────────────────────────────────────────

ACTIVE_STATUS: str = "Active"
