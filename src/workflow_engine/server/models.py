"""Pydantic models for the REST server."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from workflow_engine.engine.workflow.errors import ErrorKind


class ApiError(BaseModel):
    error: str
    kind: ErrorKind


class HealthResponse(BaseModel):
    status: str
    version: str


class DefinitionGraphResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    initial_state_id: str | None
    reachable_state_ids: list[str]
    unreachable_state_ids: list[str]
    final_state_ids: list[str]
    dead_end_state_ids: list[str]
