"""survey_client — HTTP client and interactive terminal front-end.

    SurveyApiClient        — async httpx wrapper for the survey API
    HttpEvaluationGateway  — EvaluationGateway backed by the API
"""

from survey_client.http import HttpEvaluationGateway, SurveyApiClient

__all__ = ["HttpEvaluationGateway", "SurveyApiClient"]
