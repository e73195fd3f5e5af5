"""Structural validation of proposed workflow definitions.

Checks run in a fixed order and the first failure wins, so the same bad payload
always produces the same message.
"""

from __future__ import annotations

import uuid
from collections import Counter
from collections.abc import Iterable

from .errors import WorkflowError
from .models import CreateWorkflowDefinitionRequest, WorkflowDefinition, utc_now


def _duplicates(ids: Iterable[str]) -> list[str]:
    counts = Counter(ids)
    return [value for value, count in counts.items() if count > 1]


def validate_definition(request: CreateWorkflowDefinitionRequest) -> WorkflowDefinition:
    """Validate a definition payload and build the definition to persist.

    Raises:
        WorkflowError: kind VALIDATION, naming the offending state or action.

    Returns:
        A new definition with a generated id and creation timestamp. The request
        itself is left untouched.
    """

    if not request.name.strip():
        raise WorkflowError.validation("Workflow name is required")

    states = list(request.states)
    if not states:
        raise WorkflowError.validation("Workflow must have at least one state")

    actions = list(request.actions or [])

    state_ids = [s.id for s in states]
    duplicate_states = _duplicates(state_ids)
    if duplicate_states:
        raise WorkflowError.validation(
            f"Duplicate state IDs found: {', '.join(duplicate_states)}"
        )

    duplicate_actions = _duplicates(a.id for a in actions)
    if duplicate_actions:
        raise WorkflowError.validation(
            f"Duplicate action IDs found: {', '.join(duplicate_actions)}"
        )

    initial_count = sum(1 for s in states if s.is_initial)
    if initial_count != 1:
        raise WorkflowError.validation("Workflow must have exactly one initial state")

    if any(not s.id.strip() for s in states):
        raise WorkflowError.validation("All states must have non-empty IDs")

    if any(not a.id.strip() for a in actions):
        raise WorkflowError.validation("All actions must have non-empty IDs")

    known_states = set(state_ids)
    for action in actions:
        if action.to_state not in known_states:
            raise WorkflowError.validation(
                f"Action '{action.id}' references invalid target state '{action.to_state}'"
            )
        for source in action.from_states:
            if source not in known_states:
                raise WorkflowError.validation(
                    f"Action '{action.id}' references invalid source state '{source}'"
                )
        if not action.from_states:
            raise WorkflowError.validation(
                f"Action '{action.id}' must have at least one source state"
            )

    return WorkflowDefinition(
        id=str(uuid.uuid4()),
        name=request.name,
        states=[s.model_copy(deep=True) for s in states],
        actions=[a.model_copy(deep=True) for a in actions],
        created_at=utc_now(),
        description=request.description,
    )
