"""Route registration — mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from survey_server.routes.admin import router as admin_router
from survey_server.routes.auth import router as auth_router
from survey_server.routes.evaluations import router as evaluations_router
from survey_server.routes.questions import router as questions_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(questions_router, prefix=API_PREFIX)
    app.include_router(evaluations_router, prefix=API_PREFIX)
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(admin_router, prefix=API_PREFIX)
