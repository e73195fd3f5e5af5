"""Workflow domain.

This package holds:
- the definition/instance data model
- the definition validator
- the transition engine (pure functions over already-fetched entities)
- the definition/instance stores and the service facade that ties them together
"""

from .errors import ErrorKind, WorkflowError
from .models import (
    Action,
    CreateWorkflowDefinitionRequest,
    CreateWorkflowInstanceRequest,
    ExecuteActionRequest,
    HistoryEntry,
    State,
    WorkflowDefinition,
    WorkflowInstance,
)
from .service import WorkflowService
from .store import InMemoryWorkflowStore, JsonFileWorkflowStore, WorkflowStore, build_store

__all__ = [
    "Action",
    "CreateWorkflowDefinitionRequest",
    "CreateWorkflowInstanceRequest",
    "ErrorKind",
    "ExecuteActionRequest",
    "HistoryEntry",
    "InMemoryWorkflowStore",
    "JsonFileWorkflowStore",
    "State",
    "WorkflowDefinition",
    "WorkflowError",
    "WorkflowInstance",
    "WorkflowService",
    "WorkflowStore",
    "build_store",
]
