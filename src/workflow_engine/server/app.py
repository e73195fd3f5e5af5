"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the workflow service.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workflow_engine import __version__
from workflow_engine.engine.workflow.errors import ErrorKind, WorkflowError
from workflow_engine.engine.workflow.service import WorkflowService
from workflow_engine.engine.workflow.store import WorkflowStore, build_store
from workflow_engine.server.config import ServerSettings
from workflow_engine.server.models import ApiError
from workflow_engine.server.router import router as workflow_router

logger = logging.getLogger(__name__)

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONSISTENCY: 500,
}


def _workflow_error_response(request: Request, exc: WorkflowError) -> JSONResponse:
    status = _STATUS_BY_KIND[exc.kind]
    if not exc.is_client_error:
        logger.error(
            "Workflow consistency fault",
            extra={"path": request.url.path, "reason": exc.message},
        )
    body = ApiError(error=exc.message, kind=exc.kind)
    return JSONResponse(status_code=status, content=body.model_dump(mode="json"))


def create_app(
    settings: ServerSettings | None = None, *, store: WorkflowStore | None = None
) -> FastAPI:
    settings = settings or ServerSettings()
    if store is None:
        store = build_store(backend=settings.store_backend, path=settings.state_path)

    app = FastAPI(
        title="Workflow Engine",
        version=__version__,
        description="REST API for defining finite-state workflows and running instances.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Expose settings and the service for request handlers.
    app.state.settings = settings
    app.state.service = WorkflowService(store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(WorkflowError, _workflow_error_response)  # type: ignore[arg-type]
    app.include_router(workflow_router, prefix="/api")

    logger.info(
        "Workflow API configured",
        extra={"store_backend": settings.store_backend, "state_path": str(settings.state_path)},
    )
    return app
