"""Unit tests for definition validation.

Checks run in a fixed order; these tests pin both the rejection and the message
so error reporting stays reproducible.
"""

from __future__ import annotations

import pytest

from workflow_engine.engine.workflow.errors import ErrorKind, WorkflowError
from workflow_engine.engine.workflow.models import (
    Action,
    CreateWorkflowDefinitionRequest,
    State,
)
from workflow_engine.engine.workflow.validator import validate_definition


def _reject(request: CreateWorkflowDefinitionRequest) -> WorkflowError:
    with pytest.raises(WorkflowError) as excinfo:
        validate_definition(request)
    assert excinfo.value.kind == ErrorKind.VALIDATION
    return excinfo.value


def test_accepts_valid_definition(abc_request: CreateWorkflowDefinitionRequest) -> None:
    definition = validate_definition(abc_request)

    assert definition.id
    assert definition.name == "ABC"
    assert [s.id for s in definition.states] == ["A", "B", "C"]
    assert [a.id for a in definition.actions] == ["go_ab", "finish"]
    assert definition.created_at.tzinfo is not None


def test_generates_unique_ids(abc_request: CreateWorkflowDefinitionRequest) -> None:
    first = validate_definition(abc_request)
    second = validate_definition(abc_request)
    assert first.id != second.id


def test_missing_actions_default_to_empty() -> None:
    request = CreateWorkflowDefinitionRequest(
        name="Single", states=[State(id="only", is_initial=True, is_final=True)]
    )
    assert request.actions is None

    definition = validate_definition(request)

    assert definition.actions == []
    # The request itself is not mutated.
    assert request.actions is None


@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
def test_rejects_blank_name(name: str) -> None:
    err = _reject(
        CreateWorkflowDefinitionRequest(name=name, states=[State(id="A", is_initial=True)])
    )
    assert str(err) == "Workflow name is required"


def test_rejects_zero_states() -> None:
    err = _reject(CreateWorkflowDefinitionRequest(name="Empty", states=[]))
    assert str(err) == "Workflow must have at least one state"


def test_rejects_duplicate_state_ids_even_when_not_adjacent() -> None:
    err = _reject(
        CreateWorkflowDefinitionRequest(
            name="Dup",
            states=[
                State(id="A", is_initial=True),
                State(id="B"),
                State(id="A"),
            ],
        )
    )
    assert str(err) == "Duplicate state IDs found: A"


def test_rejects_duplicate_action_ids() -> None:
    err = _reject(
        CreateWorkflowDefinitionRequest(
            name="Dup",
            states=[State(id="A", is_initial=True), State(id="B")],
            actions=[
                Action(id="x", from_states=["A"], to_state="B"),
                Action(id="x", from_states=["B"], to_state="A"),
            ],
        )
    )
    assert str(err) == "Duplicate action IDs found: x"


def test_rejects_no_initial_state() -> None:
    err = _reject(
        CreateWorkflowDefinitionRequest(name="None", states=[State(id="A"), State(id="B")])
    )
    assert str(err) == "Workflow must have exactly one initial state"


def test_rejects_two_initial_states() -> None:
    err = _reject(
        CreateWorkflowDefinitionRequest(
            name="Two",
            states=[State(id="A", is_initial=True), State(id="B", is_initial=True)],
        )
    )
    assert str(err) == "Workflow must have exactly one initial state"


@pytest.mark.parametrize("state_id", ["", "  "])
def test_rejects_empty_state_id(state_id: str) -> None:
    err = _reject(
        CreateWorkflowDefinitionRequest(
            name="Blank", states=[State(id="A", is_initial=True), State(id=state_id)]
        )
    )
    assert str(err) == "All states must have non-empty IDs"


def test_rejects_empty_action_id() -> None:
    err = _reject(
        CreateWorkflowDefinitionRequest(
            name="Blank",
            states=[State(id="A", is_initial=True), State(id="B")],
            actions=[Action(id="", from_states=["A"], to_state="B")],
        )
    )
    assert str(err) == "All actions must have non-empty IDs"


def test_rejects_unknown_target_state_naming_action_and_state() -> None:
    err = _reject(
        CreateWorkflowDefinitionRequest(
            name="Bad target",
            states=[State(id="A", is_initial=True), State(id="B")],
            actions=[Action(id="jump", from_states=["A"], to_state="Z")],
        )
    )
    assert "jump" in str(err)
    assert "'Z'" in str(err)
    assert str(err) == "Action 'jump' references invalid target state 'Z'"


def test_rejects_unknown_source_state() -> None:
    err = _reject(
        CreateWorkflowDefinitionRequest(
            name="Bad source",
            states=[State(id="A", is_initial=True), State(id="B")],
            actions=[Action(id="go", from_states=["A", "Q"], to_state="B")],
        )
    )
    assert str(err) == "Action 'go' references invalid source state 'Q'"


def test_rejects_empty_from_states() -> None:
    err = _reject(
        CreateWorkflowDefinitionRequest(
            name="No source",
            states=[State(id="A", is_initial=True), State(id="B")],
            actions=[Action(id="go", from_states=[], to_state="B")],
        )
    )
    assert str(err) == "Action 'go' must have at least one source state"


def test_duplicate_check_runs_before_initial_check() -> None:
    # Both duplicates and a missing initial state: duplicates are reported first.
    err = _reject(
        CreateWorkflowDefinitionRequest(name="Order", states=[State(id="A"), State(id="A")])
    )
    assert str(err).startswith("Duplicate state IDs")


def test_target_check_runs_before_source_check_per_action() -> None:
    err = _reject(
        CreateWorkflowDefinitionRequest(
            name="Order",
            states=[State(id="A", is_initial=True)],
            actions=[Action(id="bad", from_states=["Q"], to_state="Z")],
        )
    )
    assert "target state 'Z'" in str(err)


def test_state_and_action_ids_are_not_format_checked() -> None:
    definition = validate_definition(
        CreateWorkflowDefinitionRequest(
            name="Permissive",
            states=[State(id="start/äöü #1", is_initial=True), State(id="end.state")],
            actions=[Action(id="go!", from_states=["start/äöü #1"], to_state="end.state")],
        )
    )
    assert definition.find_action("go!") is not None


def test_accepted_definitions_satisfy_structural_invariants(
    abc_request: CreateWorkflowDefinitionRequest,
) -> None:
    definition = validate_definition(abc_request)

    assert sum(1 for s in definition.states if s.is_initial) == 1
    state_ids = {s.id for s in definition.states}
    assert len(state_ids) == len(definition.states)
    assert len({a.id for a in definition.actions}) == len(definition.actions)
    for action in definition.actions:
        assert action.to_state in state_ids
        assert action.from_states
        assert set(action.from_states) <= state_ids
