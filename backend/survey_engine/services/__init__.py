from .scoring_engine import score_survey
from .band_assigner import assign_band, assign_category_bands
from .band_validator import validate_results_config
from .logic_engine import evaluate, validate_logic_rules
from .results_mode import resolve_results_mode

__all__ = [
    "score_survey",
    "assign_band",
    "assign_category_bands",
    "validate_results_config",
    "evaluate",
    "validate_logic_rules",
    "resolve_results_mode",
]
