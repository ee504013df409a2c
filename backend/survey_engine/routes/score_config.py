from fastapi import APIRouter, status

from ..schemas.score_config_schema import BandValidationResult, SurveyScoreConfig
from ..services.band_validator import validate_results_config

router = APIRouter(
    prefix="/score-config",
    tags=["Scoring"],
)


@router.post(
    "/validate",
    response_model=BandValidationResult,
    status_code=status.HTTP_200_OK,
    summary="Validate a Scoring Configuration",
    response_description="Every band, category and narrative problem found",
)
def validate_score_config(payload: SurveyScoreConfig) -> BandValidationResult:
    """Dry-run the Band Validator without storing anything."""
    return validate_results_config(payload)
