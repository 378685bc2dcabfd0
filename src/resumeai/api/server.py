"""
FastAPI server that exposes the ResumeAI orchestrator and merge engine over HTTP.

The orchestrator, the per-profile locks and the optional profile store live on
app.state so tests (and other deployments) can inject their own.

To run the server:
    python -m uvicorn resumeai.api.server:app --reload --app-dir src
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from resumeai.api.handlers.exceptions import (
    configuration_exception_handler,
    validation_exception_handler,
)
from resumeai.api.middleware.logging import log_requests_middleware
from resumeai.api.routes import workflows
from resumeai.config import settings
from resumeai.main import create_orchestrator
from resumeai.optimization.locks import ProfileLocks
from resumeai.optimization.store import ProfileStore
from resumeai.orchestrator.orchestrator import Orchestrator
from resumeai.utils.exceptions import ConfigurationError
from resumeai.utils.logger import configure_logging

# ------------- FastAPI Setup -------------


def create_app(
    orchestrator: Optional[Orchestrator] = None,
    store: Optional[ProfileStore] = None,
) -> FastAPI:
    """Build the FastAPI app.

    Args:
        orchestrator: Orchestrator to serve. Defaults to one over the built-in
            agents and the OpenAI capability.
        store: Profile persistence. When set, /api/optimize and /api/merge
            load the current profile under its lock and save the merged one;
            otherwise they work on the profile in the request body.
    """
    app = FastAPI(
        title="ResumeAI Backend",
        description="API for multi-agent resume optimization",
        version="1.0",
    )

    app.state.orchestrator = orchestrator or create_orchestrator()
    app.state.profile_locks = ProfileLocks()
    app.state.profile_store = store

    # Define the allowed origins for CORS
    origins = [
        "http://localhost:3000",  # local development
        "http://127.0.0.1:3000",  # local development
    ]

    # Add production frontend URL from environment variable if provided
    if settings.FRONTEND_URL and settings.FRONTEND_URL not in origins:
        origins.append(settings.FRONTEND_URL)

    # For development, allow all origins if no production URL is set
    if not settings.FRONTEND_URL:
        origins.append("*")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add request logging middleware
    app.middleware("http")(log_requests_middleware)

    # Add exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ConfigurationError, configuration_exception_handler)

    # Include routers
    app.include_router(workflows.router)

    return app


configure_logging()
app = create_app()

# For running as standalone server
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
