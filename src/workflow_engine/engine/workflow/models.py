"""Workflow data model.

Python attributes are snake_case; the JSON wire form is camelCase
(`isInitial`, `fromStates`, `currentStateId`, ...). Both spellings are accepted
on input.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class State(WireModel):
    id: str = ""
    name: str = ""
    is_initial: bool = False
    is_final: bool = False
    enabled: bool = True
    description: str | None = None


class Action(WireModel):
    """A named transition rule: from any of `from_states` to `to_state`."""

    id: str = ""
    name: str = ""
    enabled: bool = True
    from_states: list[str] = Field(default_factory=list)
    to_state: str = ""
    description: str | None = None


class HistoryEntry(WireModel):
    """One executed transition. Never modified once appended."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    action_id: str
    from_state_id: str
    to_state_id: str
    timestamp: datetime = Field(default_factory=utc_now)


class WorkflowDefinition(WireModel):
    id: str
    name: str
    states: list[State] = Field(default_factory=list)
    actions: list[Action] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    description: str | None = None

    def find_state(self, state_id: str) -> State | None:
        for state in self.states:
            if state.id == state_id:
                return state
        return None

    def find_action(self, action_id: str) -> Action | None:
        for action in self.actions:
            if action.id == action_id:
                return action
        return None

    def initial_state(self) -> State | None:
        for state in self.states:
            if state.is_initial:
                return state
        return None


class WorkflowInstance(WireModel):
    id: str
    definition_id: str
    current_state_id: str
    history: list[HistoryEntry] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CreateWorkflowDefinitionRequest(WireModel):
    name: str = ""
    states: list[State] = Field(default_factory=list)
    # None means "not supplied"; the validator defaults it to an empty list.
    actions: list[Action] | None = None
    description: str | None = None


class CreateWorkflowInstanceRequest(WireModel):
    definition_id: str = ""


class ExecuteActionRequest(WireModel):
    action_id: str = ""
