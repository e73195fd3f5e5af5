"""Transition engine: decide whether an action may run and produce the next instance.

Everything here is pure. Functions take already-fetched entities and return new
values; persisting the result is the caller's job.
"""

from __future__ import annotations

import uuid

from .errors import WorkflowError
from .models import (
    Action,
    HistoryEntry,
    State,
    WorkflowDefinition,
    WorkflowInstance,
    utc_now,
)


def new_instance(definition: WorkflowDefinition) -> WorkflowInstance:
    """Create an instance positioned at the definition's initial state."""

    initial = definition.initial_state()
    if initial is None:
        raise WorkflowError.validation("Workflow definition must have exactly one initial state")

    now = utc_now()
    return WorkflowInstance(
        id=str(uuid.uuid4()),
        definition_id=definition.id,
        current_state_id=initial.id,
        history=[],
        created_at=now,
        updated_at=now,
    )


def _current_state(instance: WorkflowInstance, definition: WorkflowDefinition) -> State:
    state = definition.find_state(instance.current_state_id)
    if state is None:
        raise WorkflowError.consistency(
            f"Current state '{instance.current_state_id}' not found in definition"
        )
    return state


def execute_action(
    instance: WorkflowInstance | None,
    definition: WorkflowDefinition | None,
    action_id: str,
    *,
    instance_id: str = "",
) -> WorkflowInstance:
    """Run `action_id` against `instance`.

    The order of the checks below is part of the contract: the first failing
    rule decides the error the caller sees.

    Args:
        instance: The live instance, or None if the lookup found nothing.
        definition: The definition the instance points at, or None if missing.
        action_id: Caller-supplied action identifier.
        instance_id: Only used to word the not-found message.

    Returns:
        A new instance with one more history entry. `instance` is not modified.
    """

    if instance is None:
        raise WorkflowError.not_found(f"Workflow instance with ID '{instance_id}' not found")

    if definition is None:
        raise WorkflowError.consistency(
            f"Workflow definition with ID '{instance.definition_id}' not found"
        )

    current = _current_state(instance, definition)
    if current.is_final:
        raise WorkflowError.validation("Cannot execute actions on instances in final states")

    action = definition.find_action(action_id)
    if action is None:
        raise WorkflowError.validation(
            f"Action with ID '{action_id}' not found in workflow definition"
        )

    if not action.enabled:
        raise WorkflowError.validation(f"Action '{action_id}' is disabled")

    if instance.current_state_id not in action.from_states:
        raise WorkflowError.validation(
            f"Action '{action_id}' cannot be executed from current state "
            f"'{instance.current_state_id}'"
        )

    target = definition.find_state(action.to_state)
    if target is None:
        raise WorkflowError.consistency(
            f"Target state '{action.to_state}' not found in workflow definition"
        )

    if not target.enabled:
        raise WorkflowError.validation(f"Target state '{action.to_state}' is disabled")

    now = utc_now()
    entry = HistoryEntry(
        action_id=action.id,
        from_state_id=instance.current_state_id,
        to_state_id=target.id,
        timestamp=now,
    )
    return instance.model_copy(
        update={
            "current_state_id": target.id,
            "history": [*instance.history, entry],
            "updated_at": now,
        }
    )


def available_actions(instance: WorkflowInstance, definition: WorkflowDefinition) -> list[Action]:
    """Actions that `execute_action` would accept right now, in definition order."""

    current = _current_state(instance, definition)
    if current.is_final:
        return []

    out: list[Action] = []
    for action in definition.actions:
        if not action.enabled or current.id not in action.from_states:
            continue
        target = definition.find_state(action.to_state)
        if target is None or not target.enabled:
            continue
        out.append(action)
    return out
