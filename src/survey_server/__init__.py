"""survey_server — FastAPI REST API for the survey service.

Exposes the EvaluationService as a stateless HTTP API: the question
catalog, evaluation create/list/detail, credential registration, and
admin catalog maintenance.
"""
