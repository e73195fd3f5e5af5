"""Workflow REST API.

All routes are mounted under `/api`. Handlers stay thin: they translate HTTP
to :class:`WorkflowService` calls and leave error mapping to the app-level
`WorkflowError` handler.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from workflow_engine import __version__
from workflow_engine.engine.workflow.errors import WorkflowError
from workflow_engine.engine.workflow.models import (
    Action,
    CreateWorkflowDefinitionRequest,
    CreateWorkflowInstanceRequest,
    ExecuteActionRequest,
    WorkflowDefinition,
    WorkflowInstance,
)
from workflow_engine.engine.workflow.service import WorkflowService
from workflow_engine.server.models import ApiError, DefinitionGraphResponse, HealthResponse

router = APIRouter()

_CLIENT_ERRORS: dict[int | str, dict[str, object]] = {400: {"model": ApiError}}
_LOOKUP_ERRORS: dict[int | str, dict[str, object]] = {404: {"model": ApiError}}


def _service(request: Request) -> WorkflowService:
    service = getattr(request.app.state, "service", None)
    if not isinstance(service, WorkflowService):
        # This should never happen for the real app, but keeps the API fail-fast.
        raise HTTPException(status_code=500, detail="Workflow service not configured")
    return service


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


@router.post(
    "/workflow-definitions",
    response_model=WorkflowDefinition,
    status_code=201,
    responses=_CLIENT_ERRORS,
)
def create_definition(
    body: CreateWorkflowDefinitionRequest, request: Request, response: Response
) -> WorkflowDefinition:
    definition = _service(request).create_definition(body)
    response.headers["Location"] = f"/api/workflow-definitions/{definition.id}"
    return definition


@router.get("/workflow-definitions", response_model=list[WorkflowDefinition])
def list_definitions(request: Request) -> list[WorkflowDefinition]:
    return _service(request).list_definitions()


@router.get(
    "/workflow-definitions/{definition_id}",
    response_model=WorkflowDefinition,
    responses=_LOOKUP_ERRORS,
)
def get_definition(definition_id: str, request: Request) -> WorkflowDefinition:
    definition = _service(request).get_definition(definition_id)
    if definition is None:
        raise WorkflowError.not_found(f"Workflow definition with ID '{definition_id}' not found")
    return definition


@router.get(
    "/workflow-definitions/{definition_id}/graph",
    response_model=DefinitionGraphResponse,
    responses=_LOOKUP_ERRORS,
)
def get_definition_graph(definition_id: str, request: Request) -> dict[str, object]:
    return _service(request).describe_definition(definition_id).to_json()


@router.post(
    "/workflow-instances",
    response_model=WorkflowInstance,
    status_code=201,
    responses=_CLIENT_ERRORS,
)
def create_instance(
    body: CreateWorkflowInstanceRequest, request: Request, response: Response
) -> WorkflowInstance:
    instance = _service(request).create_instance(body.definition_id)
    response.headers["Location"] = f"/api/workflow-instances/{instance.id}"
    return instance


@router.get("/workflow-instances", response_model=list[WorkflowInstance])
def list_instances(request: Request) -> list[WorkflowInstance]:
    return _service(request).list_instances()


@router.get(
    "/workflow-instances/{instance_id}",
    response_model=WorkflowInstance,
    responses=_LOOKUP_ERRORS,
)
def get_instance(instance_id: str, request: Request) -> WorkflowInstance:
    instance = _service(request).get_instance(instance_id)
    if instance is None:
        raise WorkflowError.not_found(f"Workflow instance with ID '{instance_id}' not found")
    return instance


@router.post(
    "/workflow-instances/{instance_id}/execute",
    response_model=WorkflowInstance,
    responses={**_CLIENT_ERRORS, **_LOOKUP_ERRORS, 500: {"model": ApiError}},
)
def execute_action(
    instance_id: str, body: ExecuteActionRequest, request: Request
) -> WorkflowInstance:
    return _service(request).execute_action(instance_id, body.action_id)


@router.get(
    "/workflow-instances/{instance_id}/available-actions",
    response_model=list[Action],
    responses={**_LOOKUP_ERRORS, 500: {"model": ApiError}},
)
def get_available_actions(instance_id: str, request: Request) -> list[Action]:
    return _service(request).available_actions(instance_id)
