from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from .models import WorkflowDefinition


@dataclass(frozen=True, slots=True)
class DefinitionGraph:
    """Read-only reachability summary of an accepted definition.

    Informational only: an unreachable state does not make a definition invalid.
    """

    initial_state_id: str | None
    reachable_state_ids: list[str]
    unreachable_state_ids: list[str]
    final_state_ids: list[str]
    # Non-final states with no enabled action leaving them.
    dead_end_state_ids: list[str]

    def to_json(self) -> dict[str, object]:
        return {
            "initialStateId": self.initial_state_id,
            "reachableStateIds": self.reachable_state_ids,
            "unreachableStateIds": self.unreachable_state_ids,
            "finalStateIds": self.final_state_ids,
            "deadEndStateIds": self.dead_end_state_ids,
        }


def analyze_definition(definition: WorkflowDefinition) -> DefinitionGraph:
    edges: dict[str, list[str]] = {s.id: [] for s in definition.states}
    for action in definition.actions:
        if not action.enabled:
            continue
        for source in action.from_states:
            edges.setdefault(source, []).append(action.to_state)

    initial = definition.initial_state()
    seen: set[str] = set()
    if initial is not None:
        queue = deque([initial.id])
        seen.add(initial.id)
        while queue:
            state_id = queue.popleft()
            for nxt in edges.get(state_id, []):
                if nxt not in seen:
                    seen.add(nxt)
                    queue.append(nxt)

    ordered = [s.id for s in definition.states]
    return DefinitionGraph(
        initial_state_id=initial.id if initial is not None else None,
        reachable_state_ids=[sid for sid in ordered if sid in seen],
        unreachable_state_ids=[sid for sid in ordered if sid not in seen],
        final_state_ids=[s.id for s in definition.states if s.is_final],
        dead_end_state_ids=[
            s.id for s in definition.states if not s.is_final and not edges.get(s.id)
        ],
    )
