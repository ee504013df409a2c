"""Results mode resolution.

Decides how a survey's results are presented:
  - "index"           organisational indices (engagement, 5D)
  - "self_assessment" scored, personal band/narrative wording
  - "none"            not scored, thank-you screen only
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence

from ..constants import (
    CANONICAL_5D_CATEGORIES,
    INDEX_ENGINE_IDS,
    INDEX_TAGS,
    MIN_5D_CATEGORY_COUNT,
)
from ..schemas.score_config_schema import SurveyScoreConfig

RESULTS_MODE_LABELS: Dict[str, Dict[str, str]] = {
    "index": {
        "title": "Your Results",
        "score_label": "Index Score",
        "band_label": "Performance Band",
        "description": "See how your responses compare to organizational benchmarks",
    },
    "self_assessment": {
        "title": "Your Results",
        "score_label": "Your Score",
        "band_label": "Your Band",
        "description": "Personal insights based on your responses",
    },
    "none": {
        "title": "Thank You",
        "score_label": "",
        "band_label": "",
        "description": "Your responses have been recorded",
    },
}


def resolve_results_mode(
    score_config: Optional[SurveyScoreConfig],
    scoring_engine_id: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
) -> str:
    if score_config is None or not score_config.enabled:
        return "none"

    if scoring_engine_id and scoring_engine_id in INDEX_ENGINE_IDS:
        return "index"

    if any(tag.lower() in INDEX_TAGS for tag in tags or ()):
        return "index"

    category_ids = [c.id for c in score_config.categories]
    has_5d = any(cid in category_ids for cid in CANONICAL_5D_CATEGORIES)
    if has_5d and len(category_ids) >= MIN_5D_CATEGORY_COUNT:
        return "index"

    return "self_assessment"


def get_results_mode_labels(mode: str) -> Dict[str, str]:
    """Display labels for *mode*; unknown modes get the "none" labels."""
    return dict(RESULTS_MODE_LABELS.get(mode, RESULTS_MODE_LABELS["none"]))
