from .survey import Survey, SurveyResponse

__all__ = ["Survey", "SurveyResponse"]
