"""
Main FastAPI application for the League Season Schedule Engine.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from league_scheduler import __version__
from league_scheduler.api import routes
from league_scheduler.core.config import CORS_ORIGINS, LOG_LEVEL
from league_scheduler.core.errors import (
    InvalidConfig, PersistenceFailure, RegenerationInProgress, ScheduleEngineError
)
from league_scheduler.core.logging_config import setup_logging

setup_logging(LOG_LEVEL)

app = FastAPI(
    title="League Season Schedule API",
    description="API for generating, regenerating and checking division season schedules",
    version=__version__
)

# Enable CORS for the admin frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(routes.router)

ERROR_STATUS = {
    InvalidConfig: 422,
    RegenerationInProgress: 409,
    PersistenceFailure: 503,
}


def _error_body(exc: ScheduleEngineError) -> dict:
    body = {"error": exc.code, "message": exc.message}
    if isinstance(exc, InvalidConfig):
        body["violations"] = [
            {"field": v.field, "code": v.code, "message": v.message} for v in exc.violations
        ]
    elif exc.details:
        body["details"] = exc.details
    return body


@app.exception_handler(ScheduleEngineError)
async def schedule_engine_error_handler(request: Request, exc: ScheduleEngineError):
    status_code = ERROR_STATUS.get(type(exc), 500)
    return JSONResponse(status_code=status_code, content=_error_body(exc))


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "League Season Schedule API",
        "version": __version__,
        "endpoints": {
            "validate": "/api/schedule/validate",
            "preview": "/api/schedule/preview",
            "conflicts": "/api/schedule/conflicts",
            "regenerate": "/api/divisions/{division_id}/schedule/regenerate",
            "health": "/api/health"
        }
    }
