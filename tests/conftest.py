"""Test configuration and fixtures."""

from pathlib import Path

import pytest

from workflow_engine.engine.workflow.models import (
    Action,
    CreateWorkflowDefinitionRequest,
    State,
)
from workflow_engine.engine.workflow.service import WorkflowService
from workflow_engine.engine.workflow.store import InMemoryWorkflowStore


@pytest.fixture
def temp_state_dir(tmp_path: Path) -> Path:
    """Provide a temporary state directory."""
    state_dir = tmp_path / "workflow_state"
    state_dir.mkdir()
    return state_dir


@pytest.fixture
def abc_request() -> CreateWorkflowDefinitionRequest:
    """A -> B -> C, with A initial and C final."""
    return CreateWorkflowDefinitionRequest(
        name="ABC",
        states=[
            State(id="A", name="Start", is_initial=True),
            State(id="B", name="Middle"),
            State(id="C", name="Done", is_final=True),
        ],
        actions=[
            Action(id="go_ab", name="Go to B", from_states=["A"], to_state="B"),
            Action(id="finish", name="Finish", from_states=["B"], to_state="C"),
        ],
    )


@pytest.fixture
def abc_payload() -> dict[str, object]:
    """The same workflow as `abc_request`, in its camelCase wire form."""
    return {
        "name": "ABC",
        "states": [
            {"id": "A", "name": "Start", "isInitial": True},
            {"id": "B", "name": "Middle"},
            {"id": "C", "name": "Done", "isFinal": True},
        ],
        "actions": [
            {"id": "go_ab", "name": "Go to B", "fromStates": ["A"], "toState": "B"},
            {"id": "finish", "name": "Finish", "fromStates": ["B"], "toState": "C"},
        ],
    }


@pytest.fixture
def memory_store() -> InMemoryWorkflowStore:
    """Provide an empty in-memory store."""
    return InMemoryWorkflowStore()


@pytest.fixture
def service(memory_store: InMemoryWorkflowStore) -> WorkflowService:
    """Provide a service over the in-memory store."""
    return WorkflowService(memory_store)
